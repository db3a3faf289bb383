"""Connections: authenticated Partner Center sessions and their factory.

A connection owns an ``AccessGrant`` and an ``AzureADAuthTemplate`` able to
renew it. Its API binding (``PartnerCenter``) asks the connection for the
access token on every request, so an expired grant is refreshed before the
request leaves.
"""
from __future__ import annotations
import logging
import threading
from typing import Callable, Iterable, Optional

import jwt
import requests

from .auth import AzureADAuthTemplate
from .client import REQUEST_TIMEOUT, Interceptor, PartnerCenterClient
from .customers import CustomerTemplate
from .exceptions import PartnerCenterAPIError
from .models import AccessGrant, ConnectionData
from .orders import OrderTemplate
from .paging import PROVIDER_ID
from .retry import RetryPolicy
from .subscriptions import SubscriptionTemplate
from .uri import CUSTOMERS, DEFAULT_API_VERSION, PARTNER_CENTER_URL, build_partner_center_token_uri
from .users import UserTemplate

logger = logging.getLogger(__name__)

# Refresh grants that expire within this many seconds
EXPIRY_SKEW_SECONDS = 10

_USER_ID_CLAIMS = ("oid", "upn", "unique_name", "appid")


class PartnerCenter:
    """Partner Center API binding.

    Attributes:
        customers: CustomerTemplate
        orders: OrderTemplate
        users: UserTemplate
        subscriptions: SubscriptionTemplate
    """

    def __init__(
        self,
        token_provider: Optional[Callable[[], str]] = None,
        base_url: str = PARTNER_CENTER_URL,
        api_version: str = DEFAULT_API_VERSION,
        locale: str = "en-US",
        interceptors: Optional[Iterable[Interceptor]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.is_authorized = token_provider is not None
        self.client = PartnerCenterClient(
            base_url=base_url,
            api_version=api_version,
            token_provider=token_provider,
            locale=locale,
            interceptors=interceptors,
            retry_policy=retry_policy,
            timeout=timeout,
            session=session,
        )
        customers = self.client.resource(CUSTOMERS)
        self.customers = CustomerTemplate(customers, self.is_authorized)
        self.orders = OrderTemplate(customers, self.is_authorized)
        self.users = UserTemplate(customers, self.is_authorized)
        self.subscriptions = SubscriptionTemplate(customers, self.is_authorized)


class PartnerCenterConnection:
    """App-only connection renewed through the two-hop token exchange."""

    def __init__(
        self,
        provider_id: str,
        provider_user_id: Optional[str],
        access_grant: AccessGrant,
        auth_template: AzureADAuthTemplate,
        api_builder: Callable[[Callable[[], str]], PartnerCenter],
        display_name: Optional[str] = None,
    ):
        self.provider_id = provider_id
        self.provider_user_id = provider_user_id
        self.access_grant = access_grant
        self.auth_template = auth_template
        self.display_name = display_name
        self._api_builder = api_builder
        self._api: Optional[PartnerCenter] = None
        self._lock = threading.RLock()

    def has_expired(self) -> bool:
        return self.access_grant.is_expired(skew_seconds=EXPIRY_SKEW_SECONDS)

    def get_access_token(self) -> str:
        """Return a valid access token, refreshing the grant if it expired."""
        with self._lock:
            if self.has_expired():
                logger.info("[connection] Access grant expired; refreshing")
                self.refresh()
            return self.access_grant.access_token

    def refresh(self) -> None:
        """Replace the access grant with a freshly exchanged one."""
        with self._lock:
            self.access_grant = self._refresh_grant()

    def _refresh_grant(self) -> AccessGrant:
        return self.auth_template.refresh_access()

    def get_api(self) -> PartnerCenter:
        """Return the API binding (built once per connection)."""
        with self._lock:
            if self._api is None:
                self._api = self._api_builder(self.get_access_token)
            return self._api

    def test(self) -> bool:
        """Return True when Partner Center accepts the connection's token."""
        try:
            self.get_api().customers.get_customer_list(size=1)
            return True
        except PartnerCenterAPIError as e:
            logger.warning("[connection] Connection test failed: %s", e)
            return False

    def create_data(self) -> ConnectionData:
        """Snapshot the connection so it can be restored later."""
        return ConnectionData(
            provider_id=self.provider_id,
            provider_user_id=self.provider_user_id,
            display_name=self.display_name,
            access_token=self.access_grant.access_token,
            refresh_token=self.access_grant.refresh_token,
            expire_time=self.access_grant.expire_time,
        )


class PartnerCenterAdminConnection(PartnerCenterConnection):
    """App+user connection for an admin agent.

    Keeps the agent's credentials so the grant can be renewed by running the
    password grant again.
    """

    def __init__(self, *args, username: str, password: str, **kwargs):
        kwargs.setdefault("display_name", username)
        super().__init__(*args, **kwargs)
        self.username = username
        self._password = password

    def _refresh_grant(self) -> AccessGrant:
        return self.auth_template.exchange_credentials_for_access(self.username, self._password)


class PartnerCenterConnectionFactory:
    """Wires the auth template and API binding into connections.

    Usage:
        factory = PartnerCenterConnectionFactory(app_id, app_secret, client_id, "contoso.onmicrosoft.com")
        connection = factory.create_connection()
        orders = connection.get_api().orders.get_customer_orders(customer_id).body
    """

    def __init__(
        self,
        application_id: str,
        application_secret: str,
        client_id: str,
        tenant: str,
        api_version: str = DEFAULT_API_VERSION,
        interceptors: Optional[Iterable[Interceptor]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        base_url: str = PARTNER_CENTER_URL,
        locale: str = "en-US",
        timeout: float = REQUEST_TIMEOUT,
        auth_template: Optional[AzureADAuthTemplate] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize connection factory.

        Args:
            application_id: Azure AD application ID (app-only access)
            application_secret: Secret of that application
            client_id: Native application ID (app+user access)
            tenant: Reseller tenant domain or ID
            api_version: Partner Center contract version
            interceptors: Callables invoked with each prepared API request
            retry_policy: Optional policy wrapping every API call
            base_url: Partner Center API root
            locale: X-Locale header value
            timeout: Per-request timeout in seconds
            auth_template: Pre-built auth template (built from credentials otherwise)
            session: HTTP session shared by the API bindings
        """
        self.auth_template = auth_template or AzureADAuthTemplate(
            application_id, application_secret, client_id, tenant,
            access_token_url=build_partner_center_token_uri(base_url),
            timeout=timeout,
        )
        self.api_version = api_version
        self.interceptors = list(interceptors or [])
        self.retry_policy = retry_policy
        self.base_url = base_url
        self.locale = locale
        self.timeout = timeout
        self.session = session

    @classmethod
    def from_settings(cls, config, **kwargs) -> "PartnerCenterConnectionFactory":
        """Build a factory from a ``PartnerCenterConfig``.

        Raises:
            ValueError: If credentials are missing from the configuration
        """
        config.require_credentials()
        retry_policy = kwargs.pop("retry_policy", None)
        if retry_policy is None and config.retry_max_attempts > 0:
            retry_policy = RetryPolicy(max_attempts=config.retry_max_attempts, base_delay=config.retry_base_delay)
        return cls(
            config.application_id,
            config.application_secret,
            config.client_id_resolved,
            config.tenant,
            api_version=config.api_version,
            retry_policy=retry_policy,
            base_url=config.base_url,
            locale=config.locale,
            timeout=config.request_timeout,
            **kwargs,
        )

    @property
    def provider_id(self) -> str:
        return PROVIDER_ID

    def get_auth_operations(self) -> AzureADAuthTemplate:
        return self.auth_template

    def build_api(self, token_provider: Optional[Callable[[], str]]) -> PartnerCenter:
        return PartnerCenter(
            token_provider=token_provider,
            base_url=self.base_url,
            api_version=self.api_version,
            locale=self.locale,
            interceptors=self.interceptors,
            retry_policy=self.retry_policy,
            timeout=self.timeout,
            session=self.session,
        )

    def create_connection(self, access_grant: Optional[AccessGrant] = None) -> PartnerCenterConnection:
        """Create an app-only connection.

        Args:
            access_grant: Existing grant; a new one is exchanged when omitted
        """
        if access_grant is None:
            access_grant = self.auth_template.exchange_for_access()
        return self.create_connection_from_grant(access_grant)

    def create_connection_from_grant(self, access_grant: AccessGrant) -> PartnerCenterConnection:
        return PartnerCenterConnection(
            self.provider_id,
            self.extract_provider_user_id(access_grant),
            access_grant,
            self.auth_template,
            self.build_api,
        )

    def create_connection_from_data(self, data: ConnectionData) -> PartnerCenterConnection:
        """Restore a connection from a ``ConnectionData`` snapshot."""
        if not data.access_token:
            raise ValueError("Connection data has no access token")
        grant = AccessGrant(
            access_token=data.access_token,
            refresh_token=data.refresh_token,
            expire_time=data.expire_time,
        )
        return PartnerCenterConnection(
            data.provider_id or self.provider_id,
            data.provider_user_id,
            grant,
            self.auth_template,
            self.build_api,
            display_name=data.display_name,
        )

    def create_admin_connection(self, username: str, password: str) -> PartnerCenterAdminConnection:
        """Create an app+user connection for an admin agent."""
        access_grant = self.auth_template.exchange_credentials_for_access(username, password)
        return PartnerCenterAdminConnection(
            self.provider_id,
            self.extract_provider_user_id(access_grant),
            access_grant,
            self.auth_template,
            self.build_api,
            username=username,
            password=password,
        )

    @staticmethod
    def extract_provider_user_id(access_grant: AccessGrant) -> Optional[str]:
        """Read the user (or application) ID from the grant's JWTs.

        Signatures are not verified.
        """
        for token in (access_grant.id_token, access_grant.access_token):
            if not token:
                continue
            try:
                claims = jwt.decode(token, options={"verify_signature": False})
            except jwt.PyJWTError:
                continue
            for claim in _USER_ID_CLAIMS:
                if claims.get(claim):
                    return str(claims[claim])
        return None
