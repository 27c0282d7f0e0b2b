"""Pytest configuration and fixtures."""

import os
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DEBUG"] = "false"
os.environ["DRY_RUN"] = "true"
os.environ["JWT_SECRET"] = "test-jwt-secret"

from phonomorph.api.app import create_app
from phonomorph.chain import SimulatedLedgerGateway
from phonomorph.config import Settings
from phonomorph.container import ApplicationContainer
from phonomorph.crypto import SecretCodec
from phonomorph.store import Base, WalletStore

# Hardhat default mnemonic, account 0
HARDHAT_MNEMONIC = "test test test test test test test test test test test junk"
HARDHAT_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
HARDHAT_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

# Hardhat account 1
SECOND_PRIVATE_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
SECOND_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

ABANDON_MNEMONIC = " ".join(["abandon"] * 11 + ["about"])
ABANDON_ADDRESS = "0x9858EfFD232B4033E47d90003D41EC34EcaEda94"

SENDER = "+15550000001"
RECIPIENT = "+15550000002"

TOKEN_CONTRACT = "0x9E12AD42c4E4d2acFBADE01a96446e48e6764B98"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway database."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path}/test.db",
        jwt_secret="test-jwt-secret",
        dry_run=True,
        debug=False,
        min_fee_balance=Decimal("0.001"),
        token_contract=TOKEN_CONTRACT,
    )


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """File-backed database so concurrent sessions use separate connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path}/wallets.db",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def wallet_store(session_factory) -> WalletStore:
    """Secret store without at-rest encryption."""
    return WalletStore(session_factory, codec=SecretCodec(None), timeout=5.0)


@pytest.fixture
def gateway() -> SimulatedLedgerGateway:
    return SimulatedLedgerGateway()


@pytest.fixture
def container(settings, wallet_store, gateway) -> ApplicationContainer:
    return ApplicationContainer.build(settings=settings, store=wallet_store, gateway=gateway)


@pytest_asyncio.fixture
async def client(settings, container) -> AsyncGenerator[AsyncClient, None]:
    """Async test client around an app with injected dependencies."""
    app = create_app(settings=settings, container=container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(container):
    """Build bearer headers for an identity."""

    def _headers(identity: str) -> dict:
        token = container.sessions.issue(identity)
        return {"Authorization": f"Bearer {token}"}

    return _headers
