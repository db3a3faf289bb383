"""Well-known Partner Center and Azure AD endpoints."""
from __future__ import annotations

PARTNER_CENTER_URL = "https://api.partnercenter.microsoft.com"
GRAPH_URL = "https://graph.windows.net"
LOGIN_URL = "https://login.windows.net"

DEFAULT_API_VERSION = "v1"
CUSTOMERS = "customers"


def build_partner_center_oauth2_uri(domain: str) -> str:
    """Azure AD token endpoint for the reseller tenant (e.g. contoso.onmicrosoft.com)."""
    return f"{LOGIN_URL}/{domain}/oauth2/token"


def build_partner_center_token_uri(base_url: str = PARTNER_CENTER_URL) -> str:
    """Partner Center endpoint that trades an AD token for a Partner Center token."""
    return f"{base_url.rstrip('/')}/generatetoken"
