"""Partner Center request/response objects.

Passive DTOs: constructed from a JSON payload (see
``partnercenter.core.transformer.PayloadTransformer``), read by the caller,
discarded. Attribute names are snake_case; the JSON keys are camelCase.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


# ─────────────────────────────────────────────────────────────────────────────
# Common envelope types
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class Attributes:
    object_type: Optional[str] = None
    etag: Optional[str] = None


@dataclass
class KeyValuePair:
    key: Optional[str] = None
    value: Optional[str] = None


@dataclass
class Link:
    uri: Optional[str] = None
    method: Optional[str] = None
    headers: List[KeyValuePair] = field(default_factory=list)


@dataclass
class ResourceLinks:
    self_link: Optional[Link] = field(default=None, metadata={"json": "self"})
    next: Optional[Link] = None
    previous: Optional[Link] = None


@dataclass
class PartnerCenterResponse(Generic[T]):
    """Collection envelope returned by every list endpoint."""
    total_count: Optional[int] = None
    items: List[T] = field(default_factory=list)
    links: Optional[ResourceLinks] = None
    attributes: Optional[Attributes] = None


@dataclass
class ApiResponse(Generic[T]):
    """Deserialized body plus HTTP status and headers."""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[T] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


# ─────────────────────────────────────────────────────────────────────────────
# Orders
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class OrderLineItem:
    line_item_number: Optional[int] = None
    offer_id: Optional[str] = None
    subscription_id: Optional[str] = None
    parent_subscription_id: Optional[str] = None
    friendly_name: Optional[str] = None
    quantity: Optional[int] = None
    partner_id_on_record: Optional[str] = None
    links: Optional[Dict[str, Any]] = None


@dataclass
class Order:
    id: Optional[str] = None
    reference_customer_id: Optional[str] = None
    billing_cycle: Optional[str] = None
    line_items: List[OrderLineItem] = field(default_factory=list)
    creation_date: Optional[str] = None
    status: Optional[str] = None
    links: Optional[Dict[str, Any]] = None
    attributes: Optional[Attributes] = None


@dataclass
class CreateOrderRequest:
    reference_customer_id: Optional[str] = None
    billing_cycle: Optional[str] = None
    line_items: List[OrderLineItem] = field(default_factory=list)
    attributes: Optional[Attributes] = None


# ─────────────────────────────────────────────────────────────────────────────
# Customer users and directory roles
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class PasswordProfile:
    password: Optional[str] = None
    force_change_password: Optional[bool] = None


@dataclass
class User:
    id: Optional[str] = None
    user_principal_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    usage_location: Optional[str] = None
    password_profile: Optional[PasswordProfile] = None
    last_directory_sync_time: Optional[str] = None
    user_domain_type: Optional[str] = None
    state: Optional[str] = None
    soft_deletion_time: Optional[str] = None
    attributes: Optional[Attributes] = None


@dataclass
class CreateUserRequest:
    user_principal_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    usage_location: Optional[str] = None
    password_profile: Optional[PasswordProfile] = None
    attributes: Optional[Attributes] = None


@dataclass
class UpdateUserPasswordRequest:
    password_profile: Optional[PasswordProfile] = None
    attributes: Attributes = field(default_factory=lambda: Attributes(object_type="CustomerUser"))


@dataclass
class DirectoryRole:
    id: Optional[str] = None
    name: Optional[str] = None
    attributes: Optional[Attributes] = None


@dataclass
class GetRoleListResponse:
    total_count: Optional[int] = None
    items: List[DirectoryRole] = field(default_factory=list)
    attributes: Optional[Attributes] = None


# ─────────────────────────────────────────────────────────────────────────────
# Customers
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class CompanyProfile:
    tenant_id: Optional[str] = None
    domain: Optional[str] = None
    company_name: Optional[str] = None
    attributes: Optional[Attributes] = None


@dataclass
class Address:
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    postal_code: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None


@dataclass
class BillingProfile:
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    culture: Optional[str] = None
    language: Optional[str] = None
    company_name: Optional[str] = None
    default_address: Optional[Address] = None
    attributes: Optional[Attributes] = None


@dataclass
class Customer:
    id: Optional[str] = None
    commerce_id: Optional[str] = None
    company_profile: Optional[CompanyProfile] = None
    billing_profile: Optional[BillingProfile] = None
    relationship_to_partner: Optional[str] = None
    allow_delegated_access: Optional[bool] = None
    links: Optional[Dict[str, Any]] = None
    attributes: Optional[Attributes] = None


@dataclass
class CreateCustomerRequest:
    company_profile: Optional[CompanyProfile] = None
    billing_profile: Optional[BillingProfile] = None


# ─────────────────────────────────────────────────────────────────────────────
# Subscriptions
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class Subscription:
    id: Optional[str] = None
    offer_id: Optional[str] = None
    offer_name: Optional[str] = None
    friendly_name: Optional[str] = None
    quantity: Optional[int] = None
    unit_type: Optional[str] = None
    parent_subscription_id: Optional[str] = None
    creation_date: Optional[str] = None
    effective_start_date: Optional[str] = None
    commitment_end_date: Optional[str] = None
    status: Optional[str] = None
    auto_renew_enabled: Optional[bool] = None
    billing_type: Optional[str] = None
    partner_id: Optional[str] = None
    contract_type: Optional[str] = None
    order_id: Optional[str] = None
    links: Optional[Dict[str, Any]] = None
    attributes: Optional[Attributes] = None


@dataclass
class UpdateSubscriptionRequest:
    friendly_name: Optional[str] = None
    quantity: Optional[int] = None
    status: Optional[str] = None
    auto_renew_enabled: Optional[bool] = None
    attributes: Optional[Attributes] = None


# ─────────────────────────────────────────────────────────────────────────────
# Authentication
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class AzureADSecurityToken:
    """Token returned by the Azure AD client-credentials grant."""
    _payload_case = "snake"

    token_type: Optional[str] = None
    expires_in: Optional[str] = None
    ext_expires_in: Optional[str] = None
    expires_on: Optional[str] = None
    not_before: Optional[str] = None
    resource: Optional[str] = None
    access_token: Optional[str] = None


@dataclass
class AccessGrant:
    """Token bundle returned by a successful OAuth2 exchange."""
    access_token: str
    scope: Optional[str] = None
    refresh_token: Optional[str] = None
    expire_time: Optional[datetime] = None
    id_token: Optional[str] = None

    @classmethod
    def from_expires_in(
        cls,
        access_token: str,
        scope: Optional[str] = None,
        refresh_token: Optional[str] = None,
        expires_in: Optional[int] = None,
        id_token: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "AccessGrant":
        """Build a grant whose expiry is ``now + expires_in`` seconds."""
        expire_time = None
        if expires_in is not None:
            try:
                expire_time = (now or datetime.now(timezone.utc)) + timedelta(seconds=expires_in)
            except (OverflowError, ValueError):
                # Out of datetime range; treated like a missing expiry
                expire_time = None
        return cls(access_token, scope, refresh_token, expire_time, id_token)

    def is_expired(self, now: Optional[datetime] = None, skew_seconds: int = 0) -> bool:
        """Return True when the grant expires within ``skew_seconds``.

        A grant without a known expiry never expires. Naive datetimes are
        taken as UTC.
        """
        if self.expire_time is None:
            return False
        now = _as_utc(now or datetime.now(timezone.utc))
        return now >= _as_utc(self.expire_time) - timedelta(seconds=skew_seconds)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class ConnectionData:
    """Serializable snapshot of a connection."""
    provider_id: str
    provider_user_id: Optional[str] = None
    display_name: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expire_time: Optional[datetime] = None
