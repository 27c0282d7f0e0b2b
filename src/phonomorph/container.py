"""Dependency container wiring the store, gateway and services.

Built once per process at startup and torn down at shutdown. Request
handlers read it from ``app.state.container``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from phonomorph.auth import SessionAuthority
from phonomorph.chain import LedgerGateway, create_ledger_gateway
from phonomorph.config import Settings
from phonomorph.crypto import SecretCodec
from phonomorph.services import TransferOrchestrator, WalletService
from phonomorph.store import (
    WalletStore,
    close_db,
    create_engine,
    create_session_factory,
    init_db,
)

logger = logging.getLogger(__name__)


@dataclass
class ApplicationContainer:
    settings: Settings
    store: WalletStore
    gateway: LedgerGateway
    sessions: SessionAuthority
    wallets: WalletService
    transfers: TransferOrchestrator
    engine: Optional[AsyncEngine] = None

    @classmethod
    def build(
        cls,
        settings: Settings,
        store: WalletStore,
        gateway: LedgerGateway,
        engine: Optional[AsyncEngine] = None,
    ) -> "ApplicationContainer":
        """Wire services around an existing store and gateway."""
        return cls(
            settings=settings,
            store=store,
            gateway=gateway,
            sessions=SessionAuthority.from_settings(settings),
            wallets=WalletService(
                store=store,
                gateway=gateway,
                token_contract=settings.token_contract,
                token_symbol=settings.token_symbol,
                fee_currency_symbol=settings.fee_currency_symbol,
            ),
            transfers=TransferOrchestrator(
                store=store,
                gateway=gateway,
                token_contract=settings.token_contract,
                min_fee_balance=settings.min_fee_balance,
                token_decimals=settings.token_decimals,
                fee_currency_symbol=settings.fee_currency_symbol,
            ),
            engine=engine,
        )

    async def close(self) -> None:
        await self.gateway.close()
        if self.engine is not None:
            await close_db(self.engine)


async def create_container(settings: Settings) -> ApplicationContainer:
    """Open database and chain connections and wire the services."""
    engine = create_engine(settings)
    await init_db(engine)
    logger.info("Database initialized")

    store = WalletStore(
        create_session_factory(engine),
        codec=SecretCodec(settings.master_key),
        timeout=settings.storage_timeout,
        mnemonic_words=settings.mnemonic_words,
    )
    return ApplicationContainer.build(
        settings=settings,
        store=store,
        gateway=create_ledger_gateway(settings),
        engine=engine,
    )
