"""
Public facade for the Amwal payment gateway client.

The most useful pieces are re-exported here so integrators can
``from amwal_payments import ...`` without navigating the package.
"""

from .api import check_connection, create_amwal_client
from .core import (
    AmwalApiError,
    AmwalClient,
    AmwalDecodeError,
    AmwalNetworkError,
    AmwalPayError,
    AmwalValidationError,
    CallResult,
    ClientConfig,
    ClientOptions,
    ConfigError,
    ErrorKind,
    PaymentRequest,
    RateLimiter,
    RefundRequest,
    has_country_code_prefix,
    is_valid_e164,
    load_client_config,
    load_env_file,
    normalize_phone,
    phone_code_from_iso,
    validate_phone,
)

__all__ = (
    "AmwalApiError",
    "AmwalClient",
    "AmwalDecodeError",
    "AmwalNetworkError",
    "AmwalPayError",
    "AmwalValidationError",
    "CallResult",
    "ClientConfig",
    "ClientOptions",
    "ConfigError",
    "ErrorKind",
    "PaymentRequest",
    "RateLimiter",
    "RefundRequest",
    "check_connection",
    "create_amwal_client",
    "has_country_code_prefix",
    "is_valid_e164",
    "load_client_config",
    "load_env_file",
    "normalize_phone",
    "phone_code_from_iso",
    "validate_phone",
)
