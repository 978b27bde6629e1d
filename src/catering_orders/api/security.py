"""Bearer-token session dependencies."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import Cookie, Depends, Header, HTTPException, Request, status

from catering_orders.domain.errors import AccessDeniedError
from catering_orders.domain.sessions import Session
from catering_orders.services.sessions import require_role

if TYPE_CHECKING:
    from catering_orders.containers import AppContainer

SESSION_COOKIE = "catering_session"


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def current_session(
    request: Request,
    authorization: str | None = Header(default=None),
    catering_session: str | None = Cookie(default=None),
) -> Session:
    """Resolve the caller's session from the bearer header or session cookie."""
    container: AppContainer = request.app.state.container
    token = bearer_token(authorization) or catering_session
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    session = container.session_service.resolve(token)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return session


def session_with_role(role: str) -> Callable[..., Awaitable[Session]]:
    """Build a dependency that only admits sessions with the given role."""

    async def dependency(session: Session = Depends(current_session)) -> Session:
        try:
            return require_role(session, role)
        except AccessDeniedError as exc:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)
            ) from exc

    return dependency
