"""Map domain exceptions to HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from card_portal.domain.exceptions import (
    AuthenticationError,
    DomainException,
    InvalidPaymentError,
    InvalidResponseError,
    PermissionDeniedError,
    PortalAPIError,
    RemoteValidationError,
    ResourceNotFoundError,
    SessionNotFoundError,
)
from card_portal.infrastructure.observability.logging import log_remote_failure

# Checked in order, so subclasses come before their bases
ERROR_STATUS = [
    (AuthenticationError, 401, "authentication_failed"),
    (ResourceNotFoundError, 404, "not_found"),
    (RemoteValidationError, 422, "remote_validation"),
    (InvalidResponseError, 502, "invalid_upstream_response"),
    (PortalAPIError, 503, "portal_api_unavailable"),
    (SessionNotFoundError, 401, "session_not_found"),
    (PermissionDeniedError, 403, "permission_denied"),
    (InvalidPaymentError, 422, "invalid_payment"),
]


def error_response(exc: DomainException) -> JSONResponse:
    for exc_type, status_code, error_type in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return JSONResponse(status_code=status_code, content={"detail": str(exc), "error_type": error_type})
    return JSONResponse(status_code=500, content={"detail": "Internal server error", "error_type": "internal"})


def register_exception_handlers(app: FastAPI) -> None:
    """Register domain exception handlers; called once from create_app"""

    @app.exception_handler(PortalAPIError)
    async def portal_api_error_handler(request: Request, exc: PortalAPIError) -> JSONResponse:
        log_remote_failure(request.url.path, exc, getattr(request.state, "request_id", "unknown"))
        response = error_response(exc)
        if type(exc) is PortalAPIError:
            response.headers["Retry-After"] = "5"
        return response

    @app.exception_handler(DomainException)
    async def domain_error_handler(request: Request, exc: DomainException) -> JSONResponse:
        logging.getLogger(__name__).info(
            f"Request rejected: {exc}",
            extra={"request_id": getattr(request.state, "request_id", "unknown"), "error_type": type(exc).__name__},
        )
        return error_response(exc)
