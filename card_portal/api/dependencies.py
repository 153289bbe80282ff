"""Dependency injection for FastAPI endpoints"""

import logging
from typing import Generator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from card_portal.domain.exceptions import AuthenticationError, PermissionDeniedError, SessionNotFoundError
from card_portal.domain.models import PortalSession
from card_portal.infrastructure.clients.auth import AuthClient
from card_portal.infrastructure.clients.cards import CardClient
from card_portal.infrastructure.clients.customers import CustomerClient
from card_portal.infrastructure.clients.transactions import TransactionClient
from card_portal.infrastructure.database.repositories import SessionRepository
from card_portal.infrastructure.database.session import get_db
from card_portal.infrastructure.observability.metrics import record_logout

logger = logging.getLogger(__name__)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_portal_session(
    x_session_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Generator[PortalSession, None, None]:
    """
    Resolve the caller's session for the duration of one request.

    A 401 from the remote API while the request runs means the token is dead:
    the session is torn down before the error reaches the client.
    """
    if not x_session_id:
        raise SessionNotFoundError("Missing X-Session-ID header")

    repo = SessionRepository(db)
    session = repo.get_session(x_session_id)
    if session is None:
        raise SessionNotFoundError("Session expired or unknown")
    db.commit()

    try:
        yield session
    except AuthenticationError:
        if repo.delete_session(session.session_id):
            db.commit()
            record_logout()
        logger.info("Session closed after remote 401", extra={"user_id": session.user.id})
        raise


def require_admin(session: PortalSession = Depends(get_portal_session)) -> PortalSession:
    if not session.user.is_admin:
        raise PermissionDeniedError("Admin role required")
    return session


def get_auth_client() -> AuthClient:
    """Provide an unauthenticated auth client (login, register)"""
    return AuthClient()


def get_session_auth_client(session: PortalSession = Depends(get_portal_session)) -> AuthClient:
    return AuthClient(token=session.token)


def get_transaction_client(session: PortalSession = Depends(get_portal_session)) -> TransactionClient:
    """Provide a transaction client bound to the caller's token"""
    return TransactionClient(token=session.token)


def get_card_client(session: PortalSession = Depends(get_portal_session)) -> CardClient:
    return CardClient(token=session.token)


def get_customer_client(session: PortalSession = Depends(get_portal_session)) -> CustomerClient:
    return CustomerClient(token=session.token)
