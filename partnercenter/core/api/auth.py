"""Azure AD / Partner Center OAuth2 token exchange.

Partner Center app-only access is a two-hop exchange:

1. client-credentials grant against Azure AD (resource: AD Graph) yields an
   ``AzureADSecurityToken``;
2. that token is sent as a bearer token to Partner Center's ``generatetoken``
   endpoint with ``grant_type=jwt_token`` and exchanged for a Partner Center
   access grant.

App+user access uses the password grant directly against Azure AD with
Partner Center as the resource.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional

import requests

from ..transformer import PayloadTransformer
from ..validators import require_identifier, require_secret
from .client import REQUEST_TIMEOUT, LazySessionMixin
from .exceptions import AuthenticationError
from .models import AccessGrant, AzureADSecurityToken
from .uri import (
    GRAPH_URL,
    PARTNER_CENTER_URL,
    build_partner_center_oauth2_uri,
    build_partner_center_token_uri,
)

logger = logging.getLogger(__name__)

GRANT_CLIENT_CREDENTIALS = "client_credentials"
GRANT_PASSWORD = "password"
GRANT_JWT_TOKEN = "jwt_token"


class AzureADAuthTemplate(LazySessionMixin):
    """OAuth2 template for Azure AD and the Partner Center token endpoint.

    Usage:
        auth = AzureADAuthTemplate(app_id, app_secret, client_id, "contoso.onmicrosoft.com")
        grant = auth.exchange_for_access()
        grant.access_token
    """

    def __init__(
        self,
        application_id: str,
        application_secret: str,
        client_id: str,
        domain: str,
        authorize_url: Optional[str] = None,
        access_token_url: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize auth template.

        Args:
            application_id: Azure AD application (client) ID for app-only access
            application_secret: Secret of that application
            client_id: Native application ID used for the password grant
            domain: Reseller tenant domain or tenant ID
            authorize_url: Azure AD token endpoint (derived from domain by default)
            access_token_url: Partner Center token endpoint
            timeout: Per-request timeout in seconds
            session: Pre-built HTTP session (created lazily otherwise)

        Raises:
            ValueError: If any credential is missing
        """
        self.application_id = require_identifier(application_id, "application_id")
        self.application_secret = require_secret(application_secret, "application_secret")
        self.client_id = require_identifier(client_id, "client_id")
        self.domain = require_identifier(domain, "domain")
        self.authorize_url = authorize_url or build_partner_center_oauth2_uri(self.domain)
        self.access_token_url = access_token_url or build_partner_center_token_uri()
        self.use_parameters_for_client_authentication = True
        self.timeout = timeout
        self._init_session(session)

    # ─────────────────────────────────────────────────────────────────────
    # Grants
    # ─────────────────────────────────────────────────────────────────────
    def fetch_ad_token(self) -> AzureADSecurityToken:
        """Client-credentials grant against Azure AD (AD Graph resource)."""
        params = {
            "grant_type": GRANT_CLIENT_CREDENTIALS,
            "client_id": self.application_id,
            "client_secret": self.application_secret,
            "resource": GRAPH_URL,
        }
        result = self._post_form(self.authorize_url, params)
        token = PayloadTransformer.from_payload(AzureADSecurityToken, result)
        if not token.access_token:
            raise AuthenticationError(200, "Azure AD response did not include an access_token", self.authorize_url)
        logger.debug("[auth] Azure AD token acquired for application '%s'", self.application_id)
        return token

    def exchange_for_access(self) -> AccessGrant:
        """App-only access: Azure AD token exchanged for a Partner Center grant."""
        ad_token = self.fetch_ad_token()
        return self.exchange_bearer_for_access(ad_token.access_token)

    def exchange_bearer_for_access(
        self,
        token: str,
        additional_parameters: Optional[Mapping[str, str]] = None,
    ) -> AccessGrant:
        """Exchange a bearer token for a Partner Center access grant.

        Args:
            token: Azure AD access token sent as ``Authorization: Bearer``
            additional_parameters: Extra form fields

        Returns:
            Partner Center access grant
        """
        token = require_identifier(token, "token")
        params = {"grant_type": GRANT_JWT_TOKEN}
        if additional_parameters:
            params.update(additional_parameters)
        headers = {"Authorization": f"Bearer {token}"}
        grant = self._extract_access_grant(self._post_form(self.access_token_url, params, headers))
        logger.info("[auth] Partner Center access grant acquired (expires %s)", grant.expire_time)
        return grant

    def exchange_credentials_for_access(
        self,
        username: str,
        password: str,
        additional_parameters: Optional[Mapping[str, str]] = None,
    ) -> AccessGrant:
        """Password grant against Azure AD with Partner Center as resource.

        Args:
            username: Admin agent user principal name
            password: Password of that user
            additional_parameters: Extra form fields (override defaults)

        Returns:
            Access grant including the ``id_token`` of the user
        """
        username = require_identifier(username, "username")
        require_secret(password, "password")
        params: Dict[str, str] = {}
        if self.use_parameters_for_client_authentication:
            params["client_id"] = self.client_id
        params.update({
            "username": username,
            "password": password,
            "resource": PARTNER_CENTER_URL,
            "scope": "openid",
            "grant_type": GRANT_PASSWORD,
        })
        if additional_parameters:
            params.update(additional_parameters)
        grant = self._extract_access_grant(self._post_form(self.authorize_url, params))
        logger.info("[auth] Access grant acquired for user '%s'", username)
        return grant

    def refresh_access(self, additional_parameters: Optional[Mapping[str, str]] = None) -> AccessGrant:
        """Obtain a fresh app-only grant by repeating the two-hop exchange."""
        ad_token = self.fetch_ad_token()
        return self.exchange_bearer_for_access(ad_token.access_token, additional_parameters)

    # ─────────────────────────────────────────────────────────────────────
    # Response handling
    # ─────────────────────────────────────────────────────────────────────
    def create_access_grant(
        self,
        access_token: str,
        scope: Optional[str],
        refresh_token: Optional[str],
        expires_in: Optional[int],
        id_token: Optional[str],
        response: Mapping[str, Any],
    ) -> AccessGrant:
        """Build the grant from the token response. Override to capture extra fields."""
        return AccessGrant.from_expires_in(access_token, scope, refresh_token, expires_in, id_token)

    def _post_form(
        self,
        url: str,
        params: Mapping[str, str],
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST form-encoded parameters and decode the JSON response.

        Raises:
            AuthenticationError: If the token endpoint answers with an error status
        """
        headers = dict(headers or {})
        headers.setdefault("Accept", "application/json")
        resp = self._get_session().post(url, data=dict(params), headers=headers, timeout=self.timeout)
        if resp.status_code >= 400:
            raise self._authentication_error(resp, url)
        return resp.json()

    @staticmethod
    def _authentication_error(resp: requests.Response, url: str) -> AuthenticationError:
        error = None
        description = None
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload.get("error")
            description = payload.get("error_description")
        message = description or error or resp.text or "Token request failed"
        # Never log the request: it carries secrets
        logger.warning("[auth] Token request to %s failed with %s (%s)", url, resp.status_code, error)
        return AuthenticationError(
            resp.status_code,
            message,
            url,
            error_code=error,
            body=resp.text or "",
            error=error,
            error_description=description,
        )

    def _extract_access_grant(self, result: Mapping[str, Any]) -> AccessGrant:
        access_token = result.get("access_token")
        if not access_token:
            raise AuthenticationError(200, "Token response did not include an access_token", self.access_token_url)
        return self.create_access_grant(
            access_token,
            result.get("scope"),
            result.get("refresh_token"),
            self._get_integer_value(result, "expires_in"),
            result.get("id_token"),
            result,
        )

    @staticmethod
    def _get_integer_value(mapping: Mapping[str, Any], key: str) -> Optional[int]:
        """Read an integer regardless of its JSON type ("3600" vs 3600).

        Missing or malformed values map to None.
        """
        try:
            return int(str(mapping.get(key)))
        except ValueError:
            return None
