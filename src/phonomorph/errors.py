"""Error taxonomy for wallet operations.

Every error carries a stable ``kind`` and a human readable message.
HTTP status codes are attached here so the API layer can render any
WalletError without knowing the individual classes.
"""

from decimal import Decimal
from typing import Any, Optional


class WalletError(Exception):
    """Base class for all wallet service errors."""

    kind: str = "WalletError"
    http_status: int = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict:
        """Render as a JSON-serializable error body."""
        body: dict[str, Any] = {"kind": self.kind, "message": self.message}
        for key, value in self.details.items():
            body[key] = str(value) if isinstance(value, Decimal) else value
        return {"error": body}


# Validation errors (no I/O performed)


class ValidationError(WalletError):
    kind = "ValidationError"
    http_status = 400


class InvalidIdentityError(ValidationError):
    kind = "InvalidIdentity"


class InvalidRecipientError(ValidationError):
    kind = "InvalidRecipient"


class InvalidAmountError(ValidationError):
    kind = "InvalidAmount"


class SelfTransferDeniedError(ValidationError):
    kind = "SelfTransferDenied"


class InvalidSecretError(ValidationError):
    """Imported key material failed validation."""

    kind = "InvalidSecret"


class InvalidMnemonicError(InvalidSecretError):
    kind = "InvalidMnemonic"


class InvalidKeyError(InvalidSecretError):
    kind = "InvalidKey"


# Not-found errors


class WalletNotFoundError(WalletError):
    kind = "NotFound"
    http_status = 404


class SenderWalletNotFoundError(WalletNotFoundError):
    kind = "SenderWalletNotFound"


class RecipientWalletNotFoundError(WalletNotFoundError):
    kind = "RecipientWalletNotFound"


# Conflict


class WalletAlreadyExistsError(WalletError):
    kind = "AlreadyExists"
    http_status = 400


# Preconditions


class InsufficientFeeBalanceError(WalletError):
    """Sender cannot pay for gas. Carries the shortfall so the user can top up."""

    kind = "InsufficientFeeBalance"
    http_status = 400

    def __init__(
        self,
        message: str,
        required: Decimal,
        available: Decimal,
        symbol: Optional[str] = None,
    ):
        super().__init__(
            message,
            required=required,
            available=available,
            shortfall=required - available,
            symbol=symbol,
        )
        self.required = required
        self.available = available
        self.shortfall = required - available


# External dependency errors


class ExternalServiceError(WalletError):
    kind = "ExternalServiceError"
    http_status = 500


class StorageError(ExternalServiceError):
    kind = "StorageError"


class LedgerUnavailableError(ExternalServiceError):
    kind = "LedgerUnavailable"


class SubmissionFailedError(ExternalServiceError):
    kind = "SubmissionFailed"


class TransferFailedError(ExternalServiceError):
    """Unexpected failure normalized at the transfer boundary."""

    kind = "TransferFailed"
