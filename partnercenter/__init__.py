"""Python client for the Microsoft Partner Center REST API."""
from .core.api import (
    AccessGrant,
    AzureADAuthTemplate,
    PartnerCenter,
    PartnerCenterConnection,
    PartnerCenterAdminConnection,
    PartnerCenterConnectionFactory,
    PartnerCenterError,
    PartnerCenterAPIError,
    RetryPolicy,
)

__version__ = "0.3.0"

__all__ = [
    "AccessGrant",
    "AzureADAuthTemplate",
    "PartnerCenter",
    "PartnerCenterConnection",
    "PartnerCenterAdminConnection",
    "PartnerCenterConnectionFactory",
    "PartnerCenterError",
    "PartnerCenterAPIError",
    "RetryPolicy",
    "__version__",
]
