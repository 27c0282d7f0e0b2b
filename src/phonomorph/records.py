"""Plain records shared by the store, deriver and services."""

from dataclasses import dataclass, field
from enum import Enum


class SecretType(str, Enum):
    """Kind of key material held for a wallet."""

    MNEMONIC = "mnemonic"
    PRIVATE_KEY = "private_key"


@dataclass(frozen=True)
class WalletRecord:
    """A custodial wallet bound to one phone number.

    ``address`` was derived from ``secret`` when the record was written.
    The secret is excluded from repr so it never lands in logs.
    """

    identity: str
    address: str
    secret_type: SecretType
    secret: str = field(repr=False)
