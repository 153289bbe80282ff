"""Domain-specific exceptions"""

from typing import Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PortalAPIError(DomainException):
    """Remote card-management API returned an error or is unavailable"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(PortalAPIError):
    """Remote API rejected the bearer token or credentials (401)"""

    pass


class ResourceNotFoundError(PortalAPIError):
    """Requested customer, card or transaction does not exist (404)"""

    pass


class RemoteValidationError(PortalAPIError):
    """Remote API rejected the request body (400/422)"""

    pass


class InvalidResponseError(PortalAPIError):
    """Remote API answered with a payload that does not match the expected shape"""

    pass


class SessionNotFoundError(DomainException):
    """No portal session for the given session id"""

    pass


class PermissionDeniedError(DomainException):
    """Session role is not allowed on this route"""

    pass


class InvalidPaymentError(DomainException):
    """Payment amount or card state fails the pre-submit checks"""

    pass
