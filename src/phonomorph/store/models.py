"""SQLAlchemy models for the secret store."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Wallet(Base):
    """Custodial wallet keyed by phone number.

    The unique constraint on phone_number is what makes wallet creation
    race-safe: concurrent inserts for one identity cannot both commit.
    """

    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint(
            "secret_type IN ('mnemonic', 'private_key')", name="ck_wallets_secret_type"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    phone_number: Mapped[str] = mapped_column(
        String(16), unique=True, nullable=False, index=True
    )
    address: Mapped[str] = mapped_column(String(42), nullable=False)
    secret_type: Mapped[str] = mapped_column(String(20), nullable=False)
    encrypted_secret: Mapped[str] = mapped_column(Text, nullable=False)  # Fernet or plain
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
