"""Login sessions and role gating."""

import logging
from dataclasses import dataclass

from catering_orders.adapters.catering_api_client import CateringApiClient
from catering_orders.adapters.payloads import parse_session
from catering_orders.domain.errors import AccessDeniedError, InvalidInputError
from catering_orders.domain.sessions import Session
from catering_orders.services.cache import Cache

_logger = logging.getLogger(__name__)


@dataclass
class SessionService:
    """Logs users in against the API and keeps their sessions by token."""

    client: CateringApiClient
    store: Cache
    ttl_seconds: int = 12 * 3600

    async def login(self, email: str, password: str) -> Session:
        """Authenticate and store the resulting session."""
        if not email.strip() or not password:
            raise InvalidInputError("Email and password are required")
        payload = await self.client.login(email.strip(), password)
        session = parse_session(payload)
        self.store.set(_session_key(session.token), session, self.ttl_seconds)
        _logger.info("Signed in %s as %s", session.email, session.role)
        return session

    def resolve(self, token: str) -> Session | None:
        """Return the session for a bearer token, if still stored."""
        session = self.store.get(_session_key(token))
        if isinstance(session, Session):
            return session
        return None

    def logout(self, token: str) -> None:
        """Forget a session."""
        self.store.delete(_session_key(token))


def require_role(session: Session, role: str | None) -> Session:
    """Return the session when it may act in the given role."""
    if role is not None and session.role != role:
        raise AccessDeniedError(f"This page requires the {role} role")
    return session


def _session_key(token: str) -> str:
    return f"session:{token}"
