"""
Credential Resolver - Google Ads

Resolves the credential bundle once at startup and hands out short-lived
bearer tokens on demand.

Precedence (earlier source wins, field by field):
    1. explicit config (constructor argument, CLI flags, --config file)
    2. GOOGLE_ADS_* environment variables
    3. first existing well-known JSON file, only when neither a client id
       nor a service-account key has been found yet

Usage:
    config = resolve_config({"developer_token": "...", "login_customer_id": "123-456-7890"})
    provider = CredentialProvider(config)
    token = provider.get_access_token()
"""

import json
import logging
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import credentials as oauth2_credentials
from google.oauth2 import service_account

from gads_mcp.errors import AuthConfigurationError, ValidationError

logger = logging.getLogger(__name__)

# =============================================================================
# CONFIGURATION
# =============================================================================

GOOGLE_ADS_API_VERSION = "v19"
GOOGLE_ADS_SCOPES = ["https://www.googleapis.com/auth/adwords"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

ENV_VARS = {
    "client_id": "GOOGLE_ADS_CLIENT_ID",
    "client_secret": "GOOGLE_ADS_CLIENT_SECRET",
    "refresh_token": "GOOGLE_ADS_REFRESH_TOKEN",
    "developer_token": "GOOGLE_ADS_DEVELOPER_TOKEN",
    "login_customer_id": "GOOGLE_ADS_LOGIN_CUSTOMER_ID",
    "service_account_key_path": "GOOGLE_ADS_SERVICE_ACCOUNT_KEY_PATH",
    "service_account_key": "GOOGLE_ADS_SERVICE_ACCOUNT_KEY",
    "api_version": "GOOGLE_ADS_API_VERSION",
}


def default_config_paths() -> list[Path]:
    """Well-known JSON credential files, in lookup order."""
    return [
        Path.cwd() / "google-ads-config.json",
        Path.cwd() / ".google-ads" / "credentials.json",
        Path.home() / ".google-ads" / "credentials.json",
    ]


def load_env() -> bool:
    """Load environment variables from the first .env file found."""
    env_paths = [
        Path.cwd() / ".env",
        Path.home() / ".google-ads" / ".env",
    ]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            return True
    return False


# =============================================================================
# CONFIG MODEL
# =============================================================================


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _parse_service_account_key(value: Any) -> Optional[dict]:
    if value is None or isinstance(value, dict):
        return value
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring malformed inline service-account key: {e}")
        return None
    if not isinstance(parsed, dict):
        logger.warning("Ignoring inline service-account key: not a JSON object")
        return None
    return parsed


@dataclass
class GoogleAdsConfig:
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    refresh_token: Optional[str] = None
    developer_token: Optional[str] = None
    login_customer_id: Optional[str] = None
    service_account_key_path: Optional[str] = None
    service_account_key: Optional[dict] = None
    api_version: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GoogleAdsConfig":
        """Build a config from camelCase or snake_case keys; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name in known and value not in (None, ""):
                values[name] = value
        if "service_account_key" in values:
            values["service_account_key"] = _parse_service_account_key(values["service_account_key"])
        if "login_customer_id" in values:
            values["login_customer_id"] = str(values["login_customer_id"])
        return cls(**values)

    def merged_with(self, fallback: "GoogleAdsConfig") -> "GoogleAdsConfig":
        """Return a copy where fields missing here are taken from ``fallback``."""
        updates = {}
        for f in fields(self):
            if getattr(self, f.name) is None and getattr(fallback, f.name) is not None:
                updates[f.name] = getattr(fallback, f.name)
        return replace(self, **updates)

    @property
    def has_primary_credential(self) -> bool:
        return bool(self.client_id or self.service_account_key or self.service_account_key_path)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> GoogleAdsConfig:
    environ = os.environ if environ is None else environ
    return GoogleAdsConfig.from_mapping(
        {name: environ.get(var) for name, var in ENV_VARS.items()}
    )


def read_config_file(path: Path) -> GoogleAdsConfig:
    """Read a JSON credential file. Raises OSError or ValueError on bad input."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return GoogleAdsConfig.from_mapping(data)


def config_from_files(paths: Optional[list[Path]] = None) -> GoogleAdsConfig:
    """Best-effort load of the first existing credential file."""
    for path in paths if paths is not None else default_config_paths():
        if not path.exists():
            continue
        try:
            config = read_config_file(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            continue
        logger.info(f"Loaded Google Ads config from {path}")
        return config
    return GoogleAdsConfig()


def resolve_config(
    explicit: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_paths: Optional[list[Path]] = None,
) -> GoogleAdsConfig:
    """Merge explicit config, environment and well-known files."""
    config = GoogleAdsConfig.from_mapping(explicit or {})
    config = config.merged_with(config_from_env(environ))
    if not config.has_primary_credential:
        config = config.merged_with(config_from_files(config_paths))
    if config.api_version is None:
        config = replace(config, api_version=GOOGLE_ADS_API_VERSION)
    return config


# =============================================================================
# CUSTOMER IDS
# =============================================================================


def format_customer_id(customer_id: Any) -> str:
    """Normalize a customer id to the grouped 'XXX-XXX-XXXX' form."""
    digits = re.sub(r"\D", "", str(customer_id if customer_id is not None else ""))
    if len(digits) != 10:
        raise ValidationError(f"Customer ID must be 10 digits. Got: {len(digits)} digits")
    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"


def customer_id_digits(customer_id: Any) -> str:
    """Customer id as the bare 10 digits used in URLs and resource names."""
    return format_customer_id(customer_id).replace("-", "")


# =============================================================================
# CREDENTIAL PROVIDER
# =============================================================================


class CredentialProvider:
    """Owns the OAuth / service-account credential objects for one server.

    The underlying google-auth credentials are created on first use and
    reused; refresh happens only when they report themselves invalid.
    """

    def __init__(self, config: GoogleAdsConfig, request_factory=Request):
        self.config = config
        self._request_factory = request_factory
        self._credentials = None

    @property
    def auth_method(self) -> Optional[str]:
        if self.config.service_account_key or self.config.service_account_key_path:
            return "service_account"
        if self.config.refresh_token:
            return "oauth"
        return None

    def _build_credentials(self):
        method = self.auth_method
        if method == "service_account":
            logger.info("Using service-account authentication")
            try:
                if self.config.service_account_key:
                    return service_account.Credentials.from_service_account_info(
                        self.config.service_account_key, scopes=GOOGLE_ADS_SCOPES
                    )
                return service_account.Credentials.from_service_account_file(
                    self.config.service_account_key_path, scopes=GOOGLE_ADS_SCOPES
                )
            except (OSError, ValueError) as e:
                raise AuthConfigurationError(f"Service account credentials not usable: {e}") from e

        if method == "oauth":
            if not self.config.client_id or not self.config.client_secret:
                raise AuthConfigurationError("OAuth credentials not properly configured")
            logger.info("Using OAuth refresh-token authentication")
            return oauth2_credentials.Credentials(
                token=None,
                refresh_token=self.config.refresh_token,
                token_uri=TOKEN_URI,
                client_id=self.config.client_id,
                client_secret=self.config.client_secret,
                scopes=GOOGLE_ADS_SCOPES,
            )

        raise AuthConfigurationError("No valid authentication method configured")

    def get_access_token(self) -> str:
        if self._credentials is None:
            self._credentials = self._build_credentials()

        creds = self._credentials
        if not creds.valid:
            try:
                creds.refresh(self._request_factory())
            except GoogleAuthError as e:
                raise AuthConfigurationError(f"OAuth authentication failed: {e}") from e

        if not creds.token:
            raise AuthConfigurationError("Failed to obtain access token")
        return creds.token

    def get_developer_token(self) -> str:
        if not self.config.developer_token:
            raise AuthConfigurationError("Developer token not configured")
        return self.config.developer_token

    def get_login_customer_id(self) -> Optional[str]:
        if not self.config.login_customer_id:
            return None
        return customer_id_digits(self.config.login_customer_id)
