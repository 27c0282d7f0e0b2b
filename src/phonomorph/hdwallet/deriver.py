"""EVM account derivation from mnemonics and raw private keys.

Derivation path: m/44'/60'/0'/0/0 (first external address, the same default
used by browser wallets), so an imported phrase lands on the address the
user already knows.

All functions here are pure except generate_mnemonic, which draws entropy
from the OS CSPRNG through bip_utils.
"""

import re

from bip_utils import (
    Bip39MnemonicGenerator,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
    Bip39WordsNum,
    Bip44,
    Bip44Changes,
    Bip44Coins,
)
from eth_account import Account

from phonomorph.errors import InvalidKeyError, InvalidMnemonicError
from phonomorph.records import SecretType

DERIVATION_PATH = "m/44'/60'/0'/0/0"

VALID_WORD_COUNTS = (12, 24)

PRIVATE_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")

_WORDS_NUM = {
    12: Bip39WordsNum.WORDS_NUM_12,
    24: Bip39WordsNum.WORDS_NUM_24,
}


def normalize_mnemonic(phrase: str) -> str:
    """Collapse whitespace and validate word count and checksum.

    Raises:
        InvalidMnemonicError: If the phrase is not a valid 12/24 word BIP39 mnemonic
    """
    words = phrase.split() if isinstance(phrase, str) else []
    if len(words) not in VALID_WORD_COUNTS:
        raise InvalidMnemonicError("Mnemonic phrase must be exactly 12 or 24 words")

    normalized = " ".join(words)
    if not Bip39MnemonicValidator().IsValid(normalized):
        raise InvalidMnemonicError(
            "Invalid mnemonic phrase. Please check your words and try again."
        )
    return normalized


def normalize_private_key(private_key: str) -> str:
    """Return a lowercase 0x-prefixed private key.

    Raises:
        InvalidKeyError: If the key is not 64 hex characters or not a valid scalar
    """
    if not isinstance(private_key, str) or not PRIVATE_KEY_RE.fullmatch(private_key.strip()):
        raise InvalidKeyError(
            "Private key must be 64 hexadecimal characters (optionally 0x-prefixed)"
        )

    key = private_key.strip().lower()
    if not key.startswith("0x"):
        key = f"0x{key}"

    value = int(key, 16)
    # secp256k1 group order
    if value == 0 or value >= 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141:
        raise InvalidKeyError("Private key is outside the valid secp256k1 range")
    return key


def generate_mnemonic(words: int = 12) -> str:
    """Generate a fresh BIP39 English mnemonic.

    Args:
        words: 12 or 24
    """
    if words not in _WORDS_NUM:
        raise ValueError(f"Unsupported mnemonic length: {words}")
    return Bip39MnemonicGenerator().FromWordsNumber(_WORDS_NUM[words]).ToStr()


def _bip44_account(phrase: str):
    seed = Bip39SeedGenerator(phrase).Generate()
    return (
        Bip44.FromSeed(seed, Bip44Coins.ETHEREUM)
        .Purpose()
        .Coin()
        .Account(0)
        .Change(Bip44Changes.CHAIN_EXT)
        .AddressIndex(0)
    )


def derive_from_mnemonic(phrase: str) -> str:
    """Derive the checksum address for a mnemonic.

    Raises:
        InvalidMnemonicError: If the phrase fails validation
    """
    normalized = normalize_mnemonic(phrase)
    return _bip44_account(normalized).PublicKey().ToAddress()


def derive_from_private_key(private_key: str) -> str:
    """Derive the checksum address for a raw private key.

    Raises:
        InvalidKeyError: If the key fails validation
    """
    key = normalize_private_key(private_key)
    return Account.from_key(key).address


def private_key_from_mnemonic(phrase: str) -> str:
    """Derive the 0x-prefixed private key behind a mnemonic's first address."""
    normalized = normalize_mnemonic(phrase)
    raw = _bip44_account(normalized).PrivateKey().Raw().ToHex()
    return f"0x{raw}"


def detect_secret_type(secret: str) -> SecretType:
    """Guess the kind of an imported secret: phrases contain whitespace."""
    if isinstance(secret, str) and len(secret.split()) > 1:
        return SecretType.MNEMONIC
    return SecretType.PRIVATE_KEY


def normalize_secret(secret_type: SecretType, secret: str) -> str:
    """Validate and canonicalize a secret of a known kind."""
    if secret_type == SecretType.MNEMONIC:
        return normalize_mnemonic(secret)
    return normalize_private_key(secret)


def derive_address(secret_type: SecretType, secret: str) -> str:
    """Derive the address for a secret of a known kind."""
    if secret_type == SecretType.MNEMONIC:
        return derive_from_mnemonic(secret)
    return derive_from_private_key(secret)


def signing_key(secret_type: SecretType, secret: str) -> str:
    """Resolve any stored secret to the private key used for signing."""
    if secret_type == SecretType.MNEMONIC:
        return private_key_from_mnemonic(secret)
    return normalize_private_key(secret)
