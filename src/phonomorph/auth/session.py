"""Session token verification.

Tokens are HS256 JWTs whose ``sub`` is the verified phone number. They are
minted once the phone number has passed one-time-code verification; this
module only checks them and resolves the identity.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from phonomorph.config import Settings
from phonomorph.identity import is_valid_identity

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Exception raised when a session token is missing or invalid."""
    pass


class SessionAuthority:
    """Issues and verifies session tokens bound to a phone number."""

    def __init__(
        self,
        secret: str,
        audience: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=30),
    ):
        if not secret:
            raise ValueError("JWT secret must be configured")
        self._secret = secret
        self.audience = audience
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionAuthority":
        return cls(
            secret=settings.jwt_secret,
            audience=settings.jwt_audience,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(days=settings.session_ttl_days),
        )

    def issue(self, identity: str, expires_delta: Optional[timedelta] = None) -> str:
        """Mint a token for an already verified phone number."""
        if not is_valid_identity(identity):
            raise ValueError("Cannot issue a session for an invalid phone number")

        payload = {
            "aud": self.audience,
            "sub": identity,
            "exp": datetime.now(timezone.utc) + (expires_delta or self.ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Return the phone number a token is bound to.

        Raises:
            SessionError: If the token is malformed, expired, for another
                audience, or carries no valid phone number
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                audience=self.audience,
            )
        except JWTError as e:
            logger.warning(f"Rejected session token: {e}")
            raise SessionError("Invalid or expired session token") from e

        identity = payload.get("sub")
        if not is_valid_identity(identity):
            raise SessionError("Session token does not carry a valid phone number")
        return identity
