"""
Error taxonomy shared by every stage of the Amwal request pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

__all__ = [
    "AmwalApiError",
    "AmwalDecodeError",
    "AmwalNetworkError",
    "AmwalPayError",
    "AmwalValidationError",
    "CallResult",
    "ConfigError",
    "ErrorKind",
]


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NETWORK = "network"
    API = "api"
    UNKNOWN = "unknown"


class AmwalPayError(Exception):
    """
    Base class for every error raised by the client.

    ``message`` is the bare description, ``code`` the HTTP status when one was
    received (``0`` otherwise) and ``context`` an optional mapping with
    request metadata such as the environment.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        code: int = 0,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context

    def __str__(self) -> str:
        return self.message


class AmwalValidationError(AmwalPayError):
    """Raised when input is rejected before anything is sent."""

    kind = ErrorKind.VALIDATION


class ConfigError(AmwalValidationError):
    """Raised when the supplied configuration is invalid."""


class AmwalNetworkError(AmwalPayError):
    """Raised once transport failures exhausted every retry."""

    kind = ErrorKind.NETWORK


class AmwalApiError(AmwalPayError):
    kind = ErrorKind.API

    def __str__(self) -> str:
        if self.code:
            return f"API Error ({self.code}): {self.message}"
        return self.message


class AmwalDecodeError(AmwalPayError):
    """Raised when the gateway answered with something that is not JSON."""

    kind = ErrorKind.UNKNOWN


@dataclass(frozen=True)
class CallResult:
    """
    Tagged outcome of a client call, for callers that prefer inspecting a
    value over catching exceptions.
    """

    value: Any = None
    error: Optional[AmwalPayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def capture(cls, func: Callable[..., Any], *args: Any, **kwargs: Any) -> "CallResult":
        try:
            return cls(value=func(*args, **kwargs))
        except AmwalPayError as exc:
            return cls(error=exc)
