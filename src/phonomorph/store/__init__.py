"""Secret store for custodial wallet records."""

from phonomorph.store.database import (
    close_db,
    create_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from phonomorph.records import SecretType, WalletRecord
from phonomorph.store.models import Base, Wallet
from phonomorph.store.repository import WalletRepository
from phonomorph.store.secret_store import WalletStore

__all__ = [
    # Models
    "Base",
    "Wallet",
    # Records
    "SecretType",
    "WalletRecord",
    # Database
    "close_db",
    "create_engine",
    "create_session_factory",
    "init_db",
    "session_scope",
    "WalletRepository",
    "WalletStore",
]
