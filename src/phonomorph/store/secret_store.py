"""Secret store: the only owner of custodial key material.

Each operation opens its own session, is bounded by a timeout, and returns
plain WalletRecord values. Nothing is cached between calls.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from phonomorph.crypto import SecretCodec
from phonomorph.errors import (
    StorageError,
    WalletAlreadyExistsError,
    WalletError,
    WalletNotFoundError,
)
from phonomorph.hdwallet import (
    derive_address,
    detect_secret_type,
    generate_mnemonic,
    normalize_secret,
)
from phonomorph.identity import mask_identity, validate_identity
from phonomorph.records import SecretType, WalletRecord
from phonomorph.store.database import session_scope
from phonomorph.store.models import Wallet
from phonomorph.store.repository import WalletRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WalletStore:
    """Durable mapping from phone number to wallet secret.

    Usage:
        store = WalletStore(session_factory, codec=SecretCodec(master_key))
        record = await store.create("+15550000001")
        same = await store.lookup("+15550000001")
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        codec: Optional[SecretCodec] = None,
        timeout: float = 10.0,
        mnemonic_words: int = 12,
    ):
        self._session_factory = session_factory
        self._codec = codec or SecretCodec()
        self._timeout = timeout
        self._mnemonic_words = mnemonic_words

    async def create(self, identity: str) -> WalletRecord:
        """Provision a new wallet with a freshly generated mnemonic.

        Raises:
            WalletAlreadyExistsError: If the identity already has a wallet
        """
        validate_identity(identity)
        phrase = generate_mnemonic(self._mnemonic_words)
        address = derive_address(SecretType.MNEMONIC, phrase)
        return await self._insert(identity, SecretType.MNEMONIC, phrase, address)

    async def import_existing(self, identity: str, secret: str) -> WalletRecord:
        """Import a mnemonic or private key, detecting which one it is.

        Raises:
            InvalidSecretError: If the secret fails validation
            WalletAlreadyExistsError: If the identity already has a wallet
        """
        return await self._import(identity, detect_secret_type(secret), secret)

    async def import_mnemonic(self, identity: str, phrase: str) -> WalletRecord:
        return await self._import(identity, SecretType.MNEMONIC, phrase)

    async def import_private_key(self, identity: str, private_key: str) -> WalletRecord:
        return await self._import(identity, SecretType.PRIVATE_KEY, private_key)

    async def lookup(self, identity: str) -> WalletRecord:
        """Read the wallet for an identity.

        Raises:
            WalletNotFoundError: If no wallet exists
        """
        wallet = await self._bounded(self._select(identity))
        if wallet is None:
            raise WalletNotFoundError("Wallet not found")

        return WalletRecord(
            identity=wallet.phone_number,
            address=wallet.address,
            secret_type=SecretType(wallet.secret_type),
            secret=self._codec.decode(wallet.encrypted_secret),
        )

    async def exists(self, identity: str) -> bool:
        return await self._bounded(self._select(identity)) is not None

    async def _import(
        self, identity: str, secret_type: SecretType, secret: str
    ) -> WalletRecord:
        validate_identity(identity)
        normalized = normalize_secret(secret_type, secret)
        address = derive_address(secret_type, normalized)
        return await self._insert(identity, secret_type, normalized, address)

    async def _insert(
        self, identity: str, secret_type: SecretType, secret: str, address: str
    ) -> WalletRecord:
        stored = self._codec.encode(secret)
        await self._bounded(self._write(identity, secret_type, stored, address))

        logger.info(
            f"Wallet stored for {mask_identity(identity)}: {address} ({secret_type.value})"
        )
        return WalletRecord(
            identity=identity,
            address=address,
            secret_type=secret_type,
            secret=secret,
        )

    async def _write(
        self, identity: str, secret_type: SecretType, stored: str, address: str
    ) -> None:
        try:
            async with session_scope(self._session_factory) as session:
                await WalletRepository(session).insert(
                    phone_number=identity,
                    address=address,
                    secret_type=secret_type.value,
                    encrypted_secret=stored,
                )
        except IntegrityError as e:
            # Constraint surfaced at commit rather than flush
            raise WalletAlreadyExistsError(
                "Wallet already exists for this phone number"
            ) from e

    async def _select(self, identity: str) -> Optional[Wallet]:
        async with self._session_factory() as session:
            return await WalletRepository(session).get_by_phone_number(identity)

    async def _bounded(self, operation: Awaitable[T]) -> T:
        """Run a storage coroutine under the configured timeout."""
        try:
            return await asyncio.wait_for(operation, timeout=self._timeout)
        except WalletError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"Storage operation timed out after {self._timeout}s")
            raise StorageError("Storage operation timed out") from e
        except SQLAlchemyError as e:
            logger.error(f"Storage operation failed: {e}")
            raise StorageError("Storage operation failed") from e
