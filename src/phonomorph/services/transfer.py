"""Token transfer between two phone number identities.

Pipeline:
1. Recipient must be a phone number
2. Amount must be a positive decimal the token can represent
3. Sender and recipient must differ
4. Sender wallet lookup
5. Recipient wallet lookup
6. Sender must hold at least the minimum fee-currency balance
7. Sign and broadcast
8. Return the receipt

Steps 1-3 do no I/O. Step 7 is the only external mutation, so a failure
anywhere leaves nothing to roll back. No retries.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Union

from phonomorph.chain.base import LedgerGateway, to_base_units
from phonomorph.errors import (
    InsufficientFeeBalanceError,
    InvalidAmountError,
    InvalidRecipientError,
    RecipientWalletNotFoundError,
    SelfTransferDeniedError,
    SenderWalletNotFoundError,
    TransferFailedError,
    WalletError,
    WalletNotFoundError,
)
from phonomorph.hdwallet import signing_key
from phonomorph.identity import is_valid_identity, mask_identity
from phonomorph.store.secret_store import WalletStore

logger = logging.getLogger(__name__)

AmountInput = Union[str, int, float, Decimal]


@dataclass(frozen=True)
class TransferRequest:
    """A validated transfer, ready for I/O."""

    sender: str
    recipient: str
    amount: Decimal


@dataclass(frozen=True)
class SettlementReceipt:
    """Broadcast acknowledgment. Accepted for processing, not confirmed."""

    transaction_hash: str
    recipient_address: str


def parse_amount(amount: AmountInput, decimals: int = 18) -> Decimal:
    """Parse a user supplied amount into a positive Decimal.

    Raises:
        InvalidAmountError: If the amount is not a finite positive number
    """
    if isinstance(amount, bool):
        raise InvalidAmountError("Amount must be a number")

    try:
        if isinstance(amount, float):
            value = Decimal(str(amount))
        elif isinstance(amount, (int, Decimal)):
            value = Decimal(amount)
        elif isinstance(amount, str):
            value = Decimal(amount.strip())
        else:
            raise InvalidAmountError("Amount must be a number")
    except InvalidOperation as e:
        raise InvalidAmountError("Amount must be a number") from e

    if not value.is_finite() or value <= 0:
        raise InvalidAmountError("Amount must be greater than 0")

    to_base_units(value, decimals)
    return value


class TransferOrchestrator:
    """Validates and executes token transfers between identities."""

    def __init__(
        self,
        store: WalletStore,
        gateway: LedgerGateway,
        token_contract: str,
        min_fee_balance: Decimal,
        token_decimals: int = 18,
        fee_currency_symbol: str = "ETH",
    ):
        self.store = store
        self.gateway = gateway
        self.token_contract = token_contract
        self.min_fee_balance = min_fee_balance
        self.token_decimals = token_decimals
        self.fee_currency_symbol = fee_currency_symbol

    def validate(self, sender: str, recipient: str, amount: AmountInput) -> TransferRequest:
        """Pure validation of a transfer request (steps 1-3)."""
        if not is_valid_identity(recipient):
            raise InvalidRecipientError(
                "Invalid phone number format. Please use format: +1234567890"
            )

        value = parse_amount(amount, self.token_decimals)

        if sender == recipient:
            raise SelfTransferDeniedError("Cannot send tokens to yourself")

        return TransferRequest(sender=sender, recipient=recipient, amount=value)

    async def transfer(
        self, sender: str, recipient: str, amount: AmountInput
    ) -> SettlementReceipt:
        """Transfer tokens from sender's wallet to recipient's wallet.

        Raises:
            ValidationError subclasses: Malformed recipient/amount, self-transfer
            SenderWalletNotFoundError / RecipientWalletNotFoundError
            InsufficientFeeBalanceError: Sender cannot pay for gas
            ExternalServiceError subclasses: Storage or chain failure
        """
        request = self.validate(sender, recipient, amount)

        try:
            return await self._execute(request)
        except WalletError:
            raise
        except Exception as e:
            logger.error(
                f"Transfer from {mask_identity(sender)} failed unexpectedly: {e}",
                exc_info=True,
            )
            raise TransferFailedError("Failed to send transaction") from e

    async def _execute(self, request: TransferRequest) -> SettlementReceipt:
        try:
            sender_wallet = await self.store.lookup(request.sender)
        except WalletNotFoundError as e:
            raise SenderWalletNotFoundError("Sender wallet not found") from e

        try:
            recipient_wallet = await self.store.lookup(request.recipient)
        except WalletNotFoundError as e:
            raise RecipientWalletNotFoundError(
                "Recipient has not created a wallet yet"
            ) from e

        fee_balance = await self.gateway.get_fee_currency_balance(sender_wallet.address)
        if fee_balance < self.min_fee_balance:
            raise InsufficientFeeBalanceError(
                f"Insufficient {self.fee_currency_symbol} for transaction fees. "
                f"You need at least {self.min_fee_balance} {self.fee_currency_symbol}.",
                required=self.min_fee_balance,
                available=fee_balance,
                symbol=self.fee_currency_symbol,
            )

        tx_hash = await self.gateway.submit_transfer(
            signing_key(sender_wallet.secret_type, sender_wallet.secret),
            self.token_contract,
            recipient_wallet.address,
            request.amount,
        )

        logger.info(
            f"Transfer submitted: {mask_identity(request.sender)} -> "
            f"{mask_identity(request.recipient)}, amount {request.amount}, tx {tx_hash}"
        )
        return SettlementReceipt(
            transaction_hash=tx_hash,
            recipient_address=recipient_wallet.address,
        )
