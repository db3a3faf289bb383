"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.api.uri import DEFAULT_API_VERSION, PARTNER_CENTER_URL

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("[settings] Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("[settings] Failed to read /run/secrets/%s: %s", secret_name, e)

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info("[settings] Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


def _get_float(var_name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.environ.get(var_name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {var_name} must be a number, got '{raw}'")
    if value < minimum:
        raise ValueError(f"Environment variable {var_name} must be >= {minimum}")
    return value


def _get_int(var_name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(var_name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {var_name} must be an integer, got '{raw}'")
    if value < minimum:
        raise ValueError(f"Environment variable {var_name} must be >= {minimum}")
    return value


@dataclass
class PartnerCenterConfig:
    """Partner Center client configuration container."""
    # Credentials
    application_id: str = ""
    application_secret: str = ""
    client_id: str = ""
    tenant: str = ""

    # API
    api_version: str = DEFAULT_API_VERSION
    locale: str = "en-US"
    base_url: str = PARTNER_CENTER_URL
    request_timeout: float = 30.0

    # Retry (0 disables the retry policy)
    retry_max_attempts: int = 0
    retry_base_delay: float = 1.0

    # Admin agent (app+user access)
    admin_username: str = ""
    admin_password: str = ""

    @property
    def client_id_resolved(self) -> str:
        """Native client ID, defaulting to the application ID."""
        return self.client_id or self.application_id

    def require_credentials(self) -> None:
        """Ensure app-only credentials are present.

        Raises:
            ValueError: Naming every missing credential
        """
        missing = [
            env_var
            for env_var, value in (
                ("PARTNER_CENTER_APPLICATION_ID", self.application_id),
                ("PARTNER_CENTER_APPLICATION_SECRET", self.application_secret),
                ("PARTNER_CENTER_TENANT", self.tenant),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"Missing Partner Center credentials: {', '.join(missing)}")

    def require_admin_credentials(self) -> None:
        """Ensure admin agent credentials are present.

        Raises:
            ValueError: If username or password is missing
        """
        if not self.admin_username or not self.admin_password:
            raise ValueError(
                "PARTNER_CENTER_ADMIN_USERNAME and PARTNER_CENTER_ADMIN_PASSWORD are required for admin access"
            )


def load_settings() -> PartnerCenterConfig:
    """Load client settings from environment and /run/secrets."""
    application_id = os.environ.get("PARTNER_CENTER_APPLICATION_ID", "").strip()
    application_secret = _load_secret_from_file(
        "partner_center_application_secret",
        "PARTNER_CENTER_APPLICATION_SECRET",
    ) or ""
    admin_password = _load_secret_from_file(
        "partner_center_admin_password",
        "PARTNER_CENTER_ADMIN_PASSWORD",
    ) or ""

    config = PartnerCenterConfig(
        application_id=application_id,
        application_secret=application_secret,
        client_id=os.environ.get("PARTNER_CENTER_CLIENT_ID", "").strip(),
        tenant=os.environ.get("PARTNER_CENTER_TENANT", "").strip(),
        api_version=os.environ.get("PARTNER_CENTER_API_VERSION", DEFAULT_API_VERSION).strip() or DEFAULT_API_VERSION,
        locale=os.environ.get("PARTNER_CENTER_LOCALE", "en-US").strip() or "en-US",
        base_url=(os.environ.get("PARTNER_CENTER_BASE_URL", PARTNER_CENTER_URL).strip() or PARTNER_CENTER_URL).rstrip("/"),
        request_timeout=_get_float("PARTNER_CENTER_REQUEST_TIMEOUT", 30.0, minimum=0.1),
        retry_max_attempts=_get_int("PARTNER_CENTER_RETRY_MAX_ATTEMPTS", 0),
        retry_base_delay=_get_float("PARTNER_CENTER_RETRY_BASE_DELAY", 1.0),
        admin_username=os.environ.get("PARTNER_CENTER_ADMIN_USERNAME", "").strip(),
        admin_password=admin_password,
    )

    logger.info(
        "[settings] tenant=%s; api_version=%s; base_url=%s; retry_max_attempts=%s",
        config.tenant or "<unset>", config.api_version, config.base_url, config.retry_max_attempts,
    )
    return config
