"""Session authority adapter."""

from phonomorph.auth.session import SessionAuthority, SessionError

__all__ = ["SessionAuthority", "SessionError"]
