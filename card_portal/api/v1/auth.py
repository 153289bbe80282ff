"""POST /v1/auth/* - login, registration and session lifecycle"""

import logging
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from card_portal.api.dependencies import get_auth_client, get_portal_session, get_request_id, get_session_auth_client
from card_portal.api.v1.schemas import LoginRequest, LoginResponse, RegisterRequest, UserSchema
from card_portal.domain.exceptions import AuthenticationError, PortalAPIError
from card_portal.domain.models import PortalSession
from card_portal.infrastructure.clients.auth import AuthClient
from card_portal.infrastructure.database.repositories import SessionRepository
from card_portal.infrastructure.database.session import get_db
from card_portal.infrastructure.observability.metrics import record_login, record_logout

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_client: AuthClient = Depends(get_auth_client),
):
    """
    Log in against the remote API and open a portal session.

    The returned session id goes in the X-Session-ID header of later calls.
    """
    request_id = get_request_id(request)
    try:
        token, user = await auth_client.login(body.username, body.password)
    except AuthenticationError:
        record_login("rejected")
        logger.info("Login rejected", extra={"request_id": request_id, "username": body.username})
        raise
    except PortalAPIError:
        record_login("error")
        raise

    session = SessionRepository(db).create_session(token, user)
    db.commit()
    record_login("success")
    logger.info("Session opened", extra={"request_id": request_id, "user_id": user.id, "role": user.role})

    return LoginResponse(session_id=session.session_id, user=UserSchema.from_domain(user))


def _registration_payload(body: RegisterRequest) -> Dict[str, Any]:
    """Remote body format: trimmed names, lower-case email, phone as digits"""
    digits = re.sub(r"\D", "", body.phone)
    return {
        "username": body.username.strip(),
        "password": body.password,
        "email": body.email.strip().lower(),
        "firstName": body.first_name.strip(),
        "lastName": body.last_name.strip(),
        "phone": int(digits) if digits else None,
        "role": body.role.upper(),
    }


@router.post("/auth/register", response_model=UserSchema, status_code=201)
async def register(body: RegisterRequest, auth_client: AuthClient = Depends(get_auth_client)):
    """Create a portal user; the caller completes the customer profile afterwards"""
    created = await auth_client.register(_registration_payload(body))
    return UserSchema.from_domain(created)


@router.post("/auth/logout", status_code=204)
def logout(x_session_id: Optional[str] = Header(None), db: Session = Depends(get_db)):
    """Close the session; unknown or missing ids are a no-op"""
    if x_session_id and SessionRepository(db).delete_session(x_session_id):
        db.commit()
        record_logout()
    return Response(status_code=204)


@router.get("/auth/me", response_model=UserSchema)
async def me(
    session: PortalSession = Depends(get_portal_session),
    auth_client: AuthClient = Depends(get_session_auth_client),
):
    """Revalidate the session token with the remote API and return the user"""
    user = await auth_client.validate_token()
    return UserSchema.from_domain(user or session.user)
