"""Ledger gateway: balance reads and signed token transfers."""

from phonomorph.chain.base import (
    LedgerGateway,
    SimulatedLedgerGateway,
    TransferSubmission,
    from_base_units,
    to_base_units,
)
from phonomorph.chain.evm import EVMLedgerGateway
from phonomorph.chain.factory import create_ledger_gateway

__all__ = [
    "LedgerGateway",
    "SimulatedLedgerGateway",
    "TransferSubmission",
    "EVMLedgerGateway",
    "create_ledger_gateway",
    "from_base_units",
    "to_base_units",
]
