"""Wallet provisioning and read operations for authenticated identities."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from phonomorph.chain.base import LedgerGateway
from phonomorph.identity import mask_identity
from phonomorph.records import WalletRecord
from phonomorph.store.secret_store import WalletStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalletBalances:
    """Fee-currency and token balance of a wallet."""

    address: str
    fee_balance: Decimal
    fee_symbol: str
    token_balance: Decimal
    token_symbol: str


class WalletService:
    """Provision, import and inspect the caller's custodial wallet.

    Only addresses leave this service; secrets stay inside the store.
    """

    def __init__(
        self,
        store: WalletStore,
        gateway: LedgerGateway,
        token_contract: str,
        token_symbol: str = "USDT",
        fee_currency_symbol: str = "ETH",
    ):
        self.store = store
        self.gateway = gateway
        self.token_contract = token_contract
        self.token_symbol = token_symbol
        self.fee_currency_symbol = fee_currency_symbol

    async def provision(self, identity: str) -> str:
        """Create a new wallet and return its address.

        Raises:
            WalletAlreadyExistsError: If the identity already has a wallet
        """
        record = await self.store.create(identity)
        logger.info(f"Provisioned wallet for {mask_identity(identity)}")
        return record.address

    async def import_mnemonic(self, identity: str, phrase: str) -> str:
        record = await self.store.import_mnemonic(identity, phrase)
        logger.info(f"Imported mnemonic wallet for {mask_identity(identity)}")
        return record.address

    async def import_private_key(self, identity: str, private_key: str) -> str:
        record = await self.store.import_private_key(identity, private_key)
        logger.info(f"Imported private key wallet for {mask_identity(identity)}")
        return record.address

    async def import_existing(self, identity: str, secret: str) -> str:
        record = await self.store.import_existing(identity, secret)
        logger.info(
            f"Imported {record.secret_type.value} wallet for {mask_identity(identity)}"
        )
        return record.address

    async def get_wallet(self, identity: str) -> str:
        """Return the wallet address.

        Raises:
            WalletNotFoundError: If the identity has no wallet
        """
        record: WalletRecord = await self.store.lookup(identity)
        return record.address

    async def get_balances(self, identity: str) -> WalletBalances:
        address = await self.get_wallet(identity)
        fee_balance = await self.gateway.get_fee_currency_balance(address)
        token_balance = await self.gateway.get_token_balance(address, self.token_contract)

        return WalletBalances(
            address=address,
            fee_balance=fee_balance,
            fee_symbol=self.fee_currency_symbol,
            token_balance=token_balance,
            token_symbol=self.token_symbol,
        )
