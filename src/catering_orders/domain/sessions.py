"""Domain models for authenticated sessions."""

from dataclasses import dataclass

ADMIN_ROLE = "admin"
USER_ROLE = "user"


@dataclass(frozen=True)
class Session:
    """Bearer token and identity returned by the login call."""

    token: str
    role: str
    email: str
