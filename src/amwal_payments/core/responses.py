"""
Turning raw gateway responses into results or typed errors.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from .errors import AmwalApiError, AmwalDecodeError
from .transport import HttpOutcome

__all__ = ["decode_response", "error_message", "require_field"]


def error_message(body: Any) -> str:
    if isinstance(body, Mapping):
        for key in ("message", "error"):
            value = body.get(key)
            if value is not None:
                return str(value)
    return "Unknown error"


def decode_response(outcome: HttpOutcome, *, environment: str) -> Any:
    """
    Return the decoded JSON body of a successful response.

    Malformed JSON is reported before the status is looked at, so a 500 with
    an HTML body surfaces as :class:`AmwalDecodeError`.
    """
    try:
        body = outcome.json()
    except json.JSONDecodeError as exc:
        raise AmwalDecodeError(
            "Invalid JSON response",
            context={
                "json_error": exc.msg,
                "status": outcome.status_code,
                "environment": environment,
            },
        ) from exc

    if outcome.status_code >= 400:
        raise AmwalApiError(
            error_message(body),
            code=outcome.status_code,
            context={
                "response": body,
                "environment": environment,
            },
        )
    return body


def require_field(body: Any, field: str, *, status: int, environment: str) -> None:
    """Reject a successful response whose ``field`` is missing or null."""
    if not isinstance(body, Mapping) or body.get(field) is None:
        raise AmwalApiError(
            "Invalid response from payment gateway",
            context={
                "response": body,
                "missing_field": field,
                "status": status,
                "environment": environment,
            },
        )
