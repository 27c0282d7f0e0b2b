"""Business services built on the secret store and ledger gateway."""

from phonomorph.services.transfer import (
    SettlementReceipt,
    TransferOrchestrator,
    TransferRequest,
    parse_amount,
)
from phonomorph.services.wallet_service import WalletBalances, WalletService

__all__ = [
    "SettlementReceipt",
    "TransferOrchestrator",
    "TransferRequest",
    "WalletBalances",
    "WalletService",
    "parse_amount",
]
