"""
Core primitives that implement the Amwal request pipeline.
"""

from .client import AmwalClient
from .config import (
    ClientConfig,
    ClientOptions,
    load_client_config,
)
from .environment import ProcessEnvironment, build_environment, is_live_environment, load_env_file
from .errors import (
    AmwalApiError,
    AmwalDecodeError,
    AmwalNetworkError,
    AmwalPayError,
    AmwalValidationError,
    CallResult,
    ConfigError,
    ErrorKind,
)
from .payloads import PaymentRequest, RefundRequest, RequestBuilder
from .phone import (
    has_country_code_prefix,
    is_valid_e164,
    match_country_code,
    normalize_phone,
    phone_code_from_iso,
    validate_phone,
)
from .ratelimit import RateLimiter, default_rate_limiter
from .transport import HttpExecutor, HttpOutcome

__all__ = [
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
    "HttpExecutor",
    "HttpOutcome",
    "PaymentRequest",
    "ProcessEnvironment",
    "RateLimiter",
    "RefundRequest",
    "RequestBuilder",
    "build_environment",
    "default_rate_limiter",
    "has_country_code_prefix",
    "is_live_environment",
    "is_valid_e164",
    "load_client_config",
    "load_env_file",
    "match_country_code",
    "normalize_phone",
    "phone_code_from_iso",
    "validate_phone",
]
