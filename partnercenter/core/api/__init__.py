"""Partner Center REST API client library.

This package provides a modular, testable interface to Partner Center
operations.

Architecture:
- client.py: HTTP session, bearer headers, request builder, error mapping
- auth.py: Azure AD / Partner Center OAuth2 token exchange
- connection.py: API binding, connections and connection factory
- paging.py: Authorization guard and continuation paging
- customers.py: Customer accounts and company profiles
- orders.py: Orders and add-on orders
- users.py: Customer users and directory roles
- subscriptions.py: Subscriptions and add-ons
- models.py: Request/response objects
- retry.py: Injectable retry policy
- exceptions.py: Typed exceptions for error handling

Usage:
    from partnercenter.core.api import PartnerCenterConnectionFactory

    factory = PartnerCenterConnectionFactory(app_id, app_secret, client_id, "contoso.onmicrosoft.com")
    connection = factory.create_connection()
    api = connection.get_api()
    order = api.orders.get_by_id(customer_id, order_id).body
"""
from .auth import AzureADAuthTemplate
from .client import (
    PartnerCenterClient,
    RestResource,
    RestRequest,
    REQUEST_TIMEOUT,
)
from .connection import (
    PartnerCenter,
    PartnerCenterConnection,
    PartnerCenterAdminConnection,
    PartnerCenterConnectionFactory,
)
from .customers import CustomerTemplate
from .exceptions import (
    PartnerCenterError,
    PartnerCenterAPIError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    ResourceNotFoundError,
    ConflictError,
    RateLimitError,
    ServiceUnavailableError,
    ServerError,
    AuthenticationError,
    MissingAuthorizationError,
)
from .models import (
    AccessGrant,
    ApiResponse,
    AzureADSecurityToken,
    ConnectionData,
    CreateCustomerRequest,
    CreateOrderRequest,
    CreateUserRequest,
    Customer,
    GetRoleListResponse,
    Order,
    OrderLineItem,
    PartnerCenterResponse,
    PasswordProfile,
    Subscription,
    UpdateSubscriptionRequest,
    UpdateUserPasswordRequest,
    User,
)
from .orders import OrderTemplate
from .paging import PagingResourceTemplate, PROVIDER_ID
from .retry import RetryPolicy
from .subscriptions import SubscriptionTemplate
from .users import UserTemplate

__all__ = [
    # Client
    "PartnerCenterClient",
    "RestResource",
    "RestRequest",
    "REQUEST_TIMEOUT",
    "RetryPolicy",

    # Auth & connections
    "AzureADAuthTemplate",
    "PartnerCenter",
    "PartnerCenterConnection",
    "PartnerCenterAdminConnection",
    "PartnerCenterConnectionFactory",
    "PROVIDER_ID",

    # Templates
    "PagingResourceTemplate",
    "CustomerTemplate",
    "OrderTemplate",
    "UserTemplate",
    "SubscriptionTemplate",

    # Exceptions
    "PartnerCenterError",
    "PartnerCenterAPIError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "ResourceNotFoundError",
    "ConflictError",
    "RateLimitError",
    "ServiceUnavailableError",
    "ServerError",
    "AuthenticationError",
    "MissingAuthorizationError",

    # Models
    "AccessGrant",
    "ApiResponse",
    "AzureADSecurityToken",
    "ConnectionData",
    "CreateCustomerRequest",
    "CreateOrderRequest",
    "CreateUserRequest",
    "Customer",
    "GetRoleListResponse",
    "Order",
    "OrderLineItem",
    "PartnerCenterResponse",
    "PasswordProfile",
    "Subscription",
    "UpdateSubscriptionRequest",
    "UpdateUserPasswordRequest",
    "User",
]
