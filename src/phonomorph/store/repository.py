"""Repository for wallet rows."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from phonomorph.errors import WalletAlreadyExistsError
from phonomorph.store.models import Wallet


class WalletRepository:
    """Database operations on the wallets table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_phone_number(self, phone_number: str) -> Optional[Wallet]:
        """Get wallet by phone number."""
        stmt = select(Wallet).where(Wallet.phone_number == phone_number)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert(
        self,
        phone_number: str,
        address: str,
        secret_type: str,
        encrypted_secret: str,
    ) -> Wallet:
        """Insert a wallet row.

        No existence check is made first; the unique constraint decides.

        Raises:
            WalletAlreadyExistsError: If a wallet for phone_number is already stored
        """
        wallet = Wallet(
            phone_number=phone_number,
            address=address,
            secret_type=secret_type,
            encrypted_secret=encrypted_secret,
        )
        self.session.add(wallet)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise WalletAlreadyExistsError(
                "Wallet already exists for this phone number"
            ) from e
        return wallet
