"""Input validation helpers for Partner Center calls."""
from __future__ import annotations
import re
from typing import Any

_DOMAIN_RE = re.compile(r"^(?=.{1,253}$)([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$")


def require_identifier(value: Any, field: str) -> str:
    """Validate a path identifier (customer id, tenant id, order id, ...).

    Args:
        value: Caller-supplied identifier
        field: Field name for error messages (e.g., "customer_id")

    Returns:
        The identifier with surrounding whitespace removed

    Raises:
        ValueError: If the identifier is not a non-empty string
    """
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a non-empty string")
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must be a non-empty string")
    if "/" in value:
        raise ValueError(f"{field} must not contain '/'")
    return value


def require_value(value: Any, field: str) -> Any:
    """Reject ``None`` (request bodies, credentials)."""
    if value is None:
        raise ValueError(f"{field} cannot be None")
    return value


def require_secret(value: Any, field: str) -> str:
    """Validate a secret or password; returned unchanged (never stripped)."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"{field} must be a non-empty string")
    return value


def validate_page_size(size: Any) -> int:
    """Validate the ``size`` query parameter of list endpoints.

    Raises:
        ValueError: If size is not an integer between 1 and 500
    """
    if isinstance(size, bool) or not isinstance(size, int):
        raise ValueError("Page size must be an integer")
    if size < 1 or size > 500:
        raise ValueError("Page size must be between 1 and 500")
    return size


def validate_domain(domain: str) -> str:
    """Validate a tenant domain such as ``contoso.onmicrosoft.com``.

    Returns:
        Lowercased domain

    Raises:
        ValueError: If domain is invalid
    """
    domain = (domain or "").strip().lower()
    if not domain:
        raise ValueError("Tenant domain is required")
    if not _DOMAIN_RE.match(domain):
        raise ValueError(f"Invalid tenant domain '{domain}'")
    return domain


def validate_user_principal_name(upn: str) -> str:
    """Validate a user principal name (``alice@contoso.onmicrosoft.com``).

    Returns:
        Trimmed UPN

    Raises:
        ValueError: If UPN is invalid
    """
    upn = (upn or "").strip()
    if not upn or "@" not in upn:
        raise ValueError("Invalid user principal name")
    local, domain = upn.rsplit("@", 1)
    if not local or not domain or "." not in domain:
        raise ValueError("Invalid user principal name")
    if len(upn) > 113:
        raise ValueError("User principal name exceeds maximum length")
    return upn
