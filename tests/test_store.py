"""Tests for the secret store."""

import asyncio

import pytest
from sqlalchemy import func, select

from phonomorph.crypto import SecretCodec, generate_master_key
from phonomorph.errors import (
    InvalidIdentityError,
    InvalidKeyError,
    InvalidMnemonicError,
    StorageError,
    WalletAlreadyExistsError,
    WalletNotFoundError,
)
from phonomorph.hdwallet import derive_from_mnemonic
from phonomorph.records import SecretType
from phonomorph.store import Wallet, WalletStore
from tests.conftest import (
    ABANDON_ADDRESS,
    ABANDON_MNEMONIC,
    HARDHAT_ADDRESS,
    HARDHAT_MNEMONIC,
    HARDHAT_PRIVATE_KEY,
    SENDER,
)


async def count_wallets(session_factory, phone_number: str) -> int:
    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(Wallet).where(Wallet.phone_number == phone_number)
        )
        return result.scalar_one()


class TestCreate:
    """Tests for wallet provisioning."""

    @pytest.mark.asyncio
    async def test_create_new_wallet(self, wallet_store):
        record = await wallet_store.create(SENDER)

        assert record.identity == SENDER
        assert record.secret_type == SecretType.MNEMONIC
        assert len(record.secret.split()) == 12
        assert record.address == derive_from_mnemonic(record.secret)

    @pytest.mark.asyncio
    async def test_create_then_lookup(self, wallet_store):
        created = await wallet_store.create(SENDER)
        found = await wallet_store.lookup(SENDER)

        assert found == created

    @pytest.mark.asyncio
    async def test_create_twice_fails(self, wallet_store, session_factory):
        first = await wallet_store.create(SENDER)

        with pytest.raises(WalletAlreadyExistsError):
            await wallet_store.create(SENDER)

        assert await count_wallets(session_factory, SENDER) == 1
        assert (await wallet_store.lookup(SENDER)).address == first.address

    @pytest.mark.asyncio
    async def test_concurrent_creates_single_winner(self, wallet_store, session_factory):
        results = await asyncio.gather(
            wallet_store.create(SENDER),
            wallet_store.create(SENDER),
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, Exception)]
        assert len(created) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], WalletAlreadyExistsError)

        assert await count_wallets(session_factory, SENDER) == 1
        assert (await wallet_store.lookup(SENDER)).address == created[0].address

    @pytest.mark.asyncio
    async def test_create_24_word_wallet(self, session_factory):
        store = WalletStore(session_factory, codec=SecretCodec(None), mnemonic_words=24)
        record = await store.create(SENDER)

        assert len(record.secret.split()) == 24

    @pytest.mark.asyncio
    async def test_rejects_invalid_identity(self, wallet_store):
        with pytest.raises(InvalidIdentityError):
            await wallet_store.create("5550000001")


class TestImport:
    """Tests for importing existing key material."""

    @pytest.mark.asyncio
    async def test_import_mnemonic(self, wallet_store):
        record = await wallet_store.import_mnemonic(SENDER, ABANDON_MNEMONIC)

        assert record.address == ABANDON_ADDRESS
        assert record.secret_type == SecretType.MNEMONIC

    @pytest.mark.asyncio
    async def test_import_private_key_normalized(self, wallet_store):
        record = await wallet_store.import_private_key(SENDER, HARDHAT_PRIVATE_KEY[2:].upper())

        assert record.address == HARDHAT_ADDRESS
        assert record.secret_type == SecretType.PRIVATE_KEY
        assert (await wallet_store.lookup(SENDER)).secret == HARDHAT_PRIVATE_KEY

    @pytest.mark.asyncio
    async def test_import_existing_detects_kind(self, wallet_store):
        mnemonic = await wallet_store.import_existing(SENDER, HARDHAT_MNEMONIC)
        key = await wallet_store.import_existing("+15550000009", HARDHAT_PRIVATE_KEY)

        assert mnemonic.secret_type == SecretType.MNEMONIC
        assert key.secret_type == SecretType.PRIVATE_KEY
        assert mnemonic.address == key.address == HARDHAT_ADDRESS

    @pytest.mark.asyncio
    async def test_import_over_existing_wallet_fails(self, wallet_store):
        created = await wallet_store.create(SENDER)

        with pytest.raises(WalletAlreadyExistsError):
            await wallet_store.import_mnemonic(SENDER, HARDHAT_MNEMONIC)

        assert (await wallet_store.lookup(SENDER)).address == created.address

    @pytest.mark.asyncio
    async def test_invalid_mnemonic_not_persisted(self, wallet_store):
        with pytest.raises(InvalidMnemonicError):
            await wallet_store.import_mnemonic(SENDER, " ".join(["abandon"] * 12))

        assert await wallet_store.exists(SENDER) is False

    @pytest.mark.asyncio
    async def test_invalid_key_not_persisted(self, wallet_store):
        with pytest.raises(InvalidKeyError):
            await wallet_store.import_private_key(SENDER, "0x1234")

        assert await wallet_store.exists(SENDER) is False


class TestLookup:
    """Tests for wallet lookup."""

    @pytest.mark.asyncio
    async def test_lookup_missing(self, wallet_store):
        with pytest.raises(WalletNotFoundError):
            await wallet_store.lookup(SENDER)

    @pytest.mark.asyncio
    async def test_exists(self, wallet_store):
        assert await wallet_store.exists(SENDER) is False
        await wallet_store.create(SENDER)
        assert await wallet_store.exists(SENDER) is True

    @pytest.mark.asyncio
    async def test_lookup_timeout(self, session_factory):
        store = WalletStore(session_factory, codec=SecretCodec(None), timeout=0.05)

        async def slow_select(identity):
            await asyncio.sleep(1)

        store._select = slow_select

        with pytest.raises(StorageError, match="timed out"):
            await store.lookup(SENDER)


class TestEncryptionAtRest:
    """Tests for secret encryption with a master key."""

    @pytest.mark.asyncio
    async def test_secret_encrypted_in_database(self, session_factory):
        store = WalletStore(session_factory, codec=SecretCodec(generate_master_key()))
        record = await store.import_mnemonic(SENDER, HARDHAT_MNEMONIC)

        async with session_factory() as session:
            result = await session.execute(
                select(Wallet.encrypted_secret).where(Wallet.phone_number == SENDER)
            )
            stored = result.scalar_one()

        assert stored != HARDHAT_MNEMONIC
        assert stored.startswith("gAAAAA")
        assert (await store.lookup(SENDER)).secret == record.secret

    @pytest.mark.asyncio
    async def test_encrypted_secret_without_key(self, session_factory):
        writer = WalletStore(session_factory, codec=SecretCodec(generate_master_key()))
        await writer.create(SENDER)

        reader = WalletStore(session_factory, codec=SecretCodec(None))
        with pytest.raises(StorageError):
            await reader.lookup(SENDER)

    @pytest.mark.asyncio
    async def test_encrypted_secret_with_wrong_key(self, session_factory):
        writer = WalletStore(session_factory, codec=SecretCodec(generate_master_key()))
        await writer.create(SENDER)

        reader = WalletStore(session_factory, codec=SecretCodec(generate_master_key()))
        with pytest.raises(StorageError, match="decrypt"):
            await reader.lookup(SENDER)
