"""Cryptographic utilities for secure secret storage.

Uses Fernet (AES-128-CBC with HMAC) for symmetric encryption of wallet
secrets at rest.
"""

import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from phonomorph.errors import StorageError

logger = logging.getLogger(__name__)

# Fernet tokens are base64 and always start with this prefix
FERNET_PREFIX = "gAAAAA"


def generate_master_key() -> str:
    """Generate a new master encryption key.

    Returns:
        Base64-encoded 32-byte key suitable for Fernet
    """
    return Fernet.generate_key().decode()


class SecretEncryptor:
    """Encrypts and decrypts wallet secrets using Fernet.

    Usage:
        encryptor = SecretEncryptor(master_key)
        encrypted = encryptor.encrypt("word word ...")
        decrypted = encryptor.decrypt(encrypted)
    """

    def __init__(self, master_key: str):
        """Initialize with master encryption key.

        Args:
            master_key: Base64-encoded Fernet key (32 bytes)
        """
        self._fernet = Fernet(master_key.encode())

    def encrypt(self, secret: str) -> str:
        return self._fernet.encrypt(secret.encode()).decode()

    def decrypt(self, encrypted_secret: str) -> str:
        """Decrypt an encrypted secret.

        Raises:
            InvalidToken: If decryption fails (wrong key or corrupted data)
        """
        return self._fernet.decrypt(encrypted_secret.encode()).decode()


class SecretCodec:
    """Applies at-rest encryption when a master key is configured.

    Without a master key secrets are stored as-is. A stored value that looks
    encrypted but cannot be decrypted is an error, never returned raw.
    """

    def __init__(self, master_key: Optional[str] = None):
        self._encryptor = SecretEncryptor(master_key) if master_key else None
        if self._encryptor is None:
            logger.warning(
                "MASTER_KEY not set - wallet secrets will be stored unencrypted"
            )

    def encode(self, secret: str) -> str:
        if self._encryptor is None:
            return secret
        return self._encryptor.encrypt(secret)

    def decode(self, stored: str) -> str:
        if not stored.startswith(FERNET_PREFIX):
            return stored

        if self._encryptor is None:
            raise StorageError("Stored secret is encrypted but MASTER_KEY is not set")

        try:
            return self._encryptor.decrypt(stored)
        except InvalidToken as e:
            raise StorageError("Failed to decrypt stored secret") from e
