"""Account derivation for custodial wallets."""

from phonomorph.hdwallet.deriver import (
    DERIVATION_PATH,
    derive_address,
    derive_from_mnemonic,
    derive_from_private_key,
    detect_secret_type,
    generate_mnemonic,
    normalize_mnemonic,
    normalize_private_key,
    normalize_secret,
    private_key_from_mnemonic,
    signing_key,
)

__all__ = [
    "DERIVATION_PATH",
    "derive_address",
    "derive_from_mnemonic",
    "derive_from_private_key",
    "detect_secret_type",
    "generate_mnemonic",
    "normalize_mnemonic",
    "normalize_private_key",
    "normalize_secret",
    "private_key_from_mnemonic",
    "signing_key",
]
