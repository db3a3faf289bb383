"""Partner Center-specific exceptions for error handling."""
from __future__ import annotations
from typing import Any, Optional


class PartnerCenterError(Exception):
    """Base exception for all Partner Center operations."""
    pass


class PartnerCenterAPIError(PartnerCenterError):
    """HTTP error from the Partner Center REST API.

    Attributes:
        status_code: HTTP status code
        message: Error message (``description`` of the error body when present)
        endpoint: URL that failed
        error_code: Partner Center error code from the body, if any
        body: Raw response text
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        endpoint: str,
        error_code: Optional[Any] = None,
        body: str = "",
    ):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        self.error_code = error_code
        self.body = body
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class BadRequestError(PartnerCenterAPIError):
    """Request payload or parameters rejected (400)."""
    pass


class UnauthorizedError(PartnerCenterAPIError):
    """Bearer token missing, invalid or expired (401)."""
    pass


class ForbiddenError(PartnerCenterAPIError):
    """Caller lacks the delegated permission for this resource (403)."""
    pass


class ResourceNotFoundError(PartnerCenterAPIError):
    """Customer, order, user or subscription does not exist (404)."""
    pass


class ConflictError(PartnerCenterAPIError):
    """Resource already exists or is in a conflicting state (409)."""
    pass


class RateLimitError(PartnerCenterAPIError):
    """Too many requests (429).

    Attributes:
        retry_after: Seconds to wait before retrying, from ``Retry-After``
    """

    def __init__(self, *args, retry_after: Optional[int] = None, **kwargs):
        self.retry_after = retry_after
        super().__init__(*args, **kwargs)


class ServiceUnavailableError(PartnerCenterAPIError):
    """Partner Center temporarily unavailable (503)."""

    def __init__(self, *args, retry_after: Optional[int] = None, **kwargs):
        self.retry_after = retry_after
        super().__init__(*args, **kwargs)


class ServerError(PartnerCenterAPIError):
    """Any other 5xx response."""
    pass


class AuthenticationError(PartnerCenterAPIError):
    """Token endpoint rejected the grant.

    Attributes:
        error: OAuth2 error code (e.g. ``invalid_client``)
        error_description: Human readable explanation from Azure AD
    """

    def __init__(self, *args, error: Optional[str] = None, error_description: Optional[str] = None, **kwargs):
        self.error = error
        self.error_description = error_description
        super().__init__(*args, **kwargs)


class MissingAuthorizationError(PartnerCenterError):
    """Operation requires an authorized connection but none was provided."""
    pass


_STATUS_EXCEPTIONS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: ResourceNotFoundError,
    409: ConflictError,
}


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if value and value.strip().isdigit():
        return int(value.strip())
    return None


def error_for_status(
    status_code: int,
    message: str,
    endpoint: str,
    error_code: Optional[Any] = None,
    body: str = "",
    retry_after: Optional[str] = None,
) -> PartnerCenterAPIError:
    """Build the typed exception matching an HTTP error status."""
    if status_code == 429:
        return RateLimitError(
            status_code, message, endpoint, error_code, body,
            retry_after=_parse_retry_after(retry_after),
        )
    if status_code == 503:
        return ServiceUnavailableError(
            status_code, message, endpoint, error_code, body,
            retry_after=_parse_retry_after(retry_after),
        )
    exc_class = _STATUS_EXCEPTIONS.get(status_code)
    if exc_class is None:
        exc_class = ServerError if status_code >= 500 else PartnerCenterAPIError
    return exc_class(status_code, message, endpoint, error_code, body)
