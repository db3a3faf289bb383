"""Configuration module for the Partner Center client."""
from .settings import PartnerCenterConfig, load_settings

__all__ = ["PartnerCenterConfig", "load_settings"]
