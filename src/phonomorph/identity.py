"""Phone number identities.

A wallet is keyed solely by a phone number in international format:
a leading ``+`` followed by 10 to 15 digits.
"""

import re

from phonomorph.errors import InvalidIdentityError

PHONE_NUMBER_RE = re.compile(r"^\+\d{10,15}$")


def is_valid_identity(value: object) -> bool:
    """Check whether value is a well-formed phone number identity."""
    return isinstance(value, str) and PHONE_NUMBER_RE.fullmatch(value) is not None


def validate_identity(value: object) -> str:
    """Return value unchanged if it is a valid identity.

    Raises:
        InvalidIdentityError: If the value is not a phone number
    """
    if not is_valid_identity(value):
        raise InvalidIdentityError(
            "Invalid phone number format. Please use format: +1234567890"
        )
    return value  # type: ignore[return-value]


def mask_identity(identity: str) -> str:
    """Mask the middle digits of a phone number for logging."""
    if len(identity) <= 8:
        return identity[:2] + "***"
    return f"{identity[:5]}***{identity[-4:]}"
