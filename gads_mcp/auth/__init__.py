from gads_mcp.auth.credentials import (
    CredentialProvider,
    GoogleAdsConfig,
    customer_id_digits,
    format_customer_id,
    load_env,
    resolve_config,
)

__all__ = [
    "CredentialProvider",
    "GoogleAdsConfig",
    "customer_id_digits",
    "format_customer_id",
    "load_env",
    "resolve_config",
]
