"""Base interface for ledger access.

Transfer flow:
1. Read the sender's native balance to check it can pay for gas
2. Build the token transfer with the caller-supplied key
3. Sign locally
4. Broadcast and return the transaction hash immediately

Confirmation is never awaited here. A returned hash means the node
accepted the transaction, not that it was mined.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, DecimalException, localcontext

from eth_account import Account

from phonomorph.errors import InvalidAmountError

logger = logging.getLogger(__name__)

NATIVE_DECIMALS = 18

# Token amounts are encoded as uint256
MAX_UINT256 = 2**256


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Convert a token amount to integer base units.

    Raises:
        InvalidAmountError: If the amount has more fractional digits than the token
            or its base units do not fit in a uint256
    """
    with localcontext() as ctx:
        ctx.prec = 80
        try:
            scaled = amount.scaleb(decimals)
        except DecimalException as e:
            raise InvalidAmountError("Amount is too large") from e
        if scaled >= MAX_UINT256:
            raise InvalidAmountError("Amount is too large")
        if scaled != scaled.to_integral_value():
            raise InvalidAmountError(
                f"Amount has more than {decimals} decimal places"
            )
        return int(scaled)


def from_base_units(value: int, decimals: int) -> Decimal:
    """Convert integer base units to a token amount."""
    with localcontext() as ctx:
        ctx.prec = 80
        return Decimal(value).scaleb(-decimals)


class LedgerGateway(ABC):
    """Abstract access to the chain node.

    Implementations must bound every call by a timeout and must not keep
    the signer key after submit_transfer returns.
    """

    @abstractmethod
    async def get_fee_currency_balance(self, address: str) -> Decimal:
        """Native balance (fee currency) of address.

        Raises:
            LedgerUnavailableError: If the node cannot be queried
        """
        pass

    @abstractmethod
    async def get_token_balance(self, address: str, token_contract: str) -> Decimal:
        """ERC-20 balance of address.

        Raises:
            LedgerUnavailableError: If the node cannot be queried
        """
        pass

    @abstractmethod
    async def submit_transfer(
        self,
        signer_key: str,
        token_contract: str,
        to_address: str,
        amount: Decimal,
    ) -> str:
        """Sign and broadcast an ERC-20 transfer.

        Args:
            signer_key: 0x-prefixed private key of the sender
            token_contract: Token contract address
            to_address: Recipient address
            amount: Amount in token units (not base units)

        Returns:
            Transaction hash

        Raises:
            SubmissionFailedError: If building, signing or broadcasting fails
        """
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None


@dataclass
class TransferSubmission:
    """A transfer accepted by the simulated ledger."""

    tx_hash: str
    from_address: str
    to_address: str
    token_contract: str
    amount: Decimal


class SimulatedLedgerGateway(LedgerGateway):
    """In-memory ledger for dry-run mode and tests."""

    def __init__(self, token_decimals: int = 18):
        self.token_decimals = token_decimals
        self.fee_balances: dict[str, Decimal] = {}
        self.token_balances: dict[tuple[str, str], Decimal] = {}
        self.submissions: list[TransferSubmission] = []

    def fund(
        self,
        address: str,
        fee: Decimal = Decimal("0"),
        token: Decimal = Decimal("0"),
        token_contract: str = "",
    ) -> None:
        """Set balances for an address."""
        self.fee_balances[address.lower()] = fee
        if token_contract:
            self.token_balances[(address.lower(), token_contract.lower())] = token

    async def get_fee_currency_balance(self, address: str) -> Decimal:
        return self.fee_balances.get(address.lower(), Decimal("0"))

    async def get_token_balance(self, address: str, token_contract: str) -> Decimal:
        return self.token_balances.get(
            (address.lower(), token_contract.lower()), Decimal("0")
        )

    async def submit_transfer(
        self,
        signer_key: str,
        token_contract: str,
        to_address: str,
        amount: Decimal,
    ) -> str:
        """Record the transfer and move simulated balances when they cover it."""
        # Validate precision the same way a real submission would
        to_base_units(amount, self.token_decimals)

        from_address = Account.from_key(signer_key).address
        tx_hash = f"0x{secrets.token_hex(32)}"

        sender_key = (from_address.lower(), token_contract.lower())
        recipient_key = (to_address.lower(), token_contract.lower())
        sender_balance = self.token_balances.get(sender_key, Decimal("0"))
        if sender_balance >= amount:
            self.token_balances[sender_key] = sender_balance - amount
            self.token_balances[recipient_key] = (
                self.token_balances.get(recipient_key, Decimal("0")) + amount
            )

        self.submissions.append(
            TransferSubmission(
                tx_hash=tx_hash,
                from_address=from_address,
                to_address=to_address,
                token_contract=token_contract,
                amount=amount,
            )
        )
        logger.info(f"[SIMULATED] Transfer: {amount} from {from_address} to {to_address}")
        return tx_hash
