"""
Input validation performed before any request reaches the network.
"""

from __future__ import annotations

import os
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from .errors import AmwalValidationError, ConfigError
from .phone import validate_phone

__all__ = [
    "is_valid_url",
    "is_writable_path",
    "parse_amount",
    "validate_config",
    "validate_payment_data",
    "validate_refund_data",
    "validate_transaction_id",
]

_TRANSACTION_ID_PATTERN = re.compile(r"[a-zA-Z0-9_-]{10,100}")
_AMOUNT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)
_SCHEME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")
_HOSTNAME_PATTERN = re.compile(r"[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?(\.[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?)*")


def is_valid_url(value: Any) -> bool:
    """
    Accept absolute URLs with a scheme and a syntactically valid host.
    """
    if not isinstance(value, str) or not value or value != value.strip():
        return False
    try:
        parts = urlsplit(value)
        hostname = parts.hostname
        parts.port  # raises ValueError for a malformed port
    except ValueError:
        return False
    if not _SCHEME_PATTERN.fullmatch(parts.scheme):
        return False
    if not parts.netloc or not hostname:
        return False
    if ":" in hostname:
        return True
    return _HOSTNAME_PATTERN.fullmatch(hostname) is not None


def is_writable_path(path: str) -> bool:
    """
    True when the directory holding ``path`` exists (it is created if
    missing) and is writable.
    """
    directory = Path(path).parent
    if not directory.is_dir():
        try:
            directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError:
            return False
    return os.access(directory, os.W_OK)


def validate_config(
    *,
    secret_key: Optional[str],
    public_key: Optional[str],
    api_url: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    for name, value in (("secret_key", secret_key), ("public_key", public_key)):
        if value is None or not str(value).strip():
            raise ConfigError(f"Configuration parameter '{name}' is required")

    if api_url and not is_valid_url(api_url):
        raise ConfigError(f"Invalid API URL: {api_url}")

    if log_file is not None and not is_writable_path(log_file):
        raise ConfigError(f"Log file not writable: {log_file}")


def parse_amount(value: Any) -> Decimal:
    """
    Parse a payment amount given as a number or numeric string.
    """
    if value is None or value == "":
        raise AmwalValidationError("Required field 'amount' is missing")
    if isinstance(value, bool):
        raise AmwalValidationError("Amount must be a positive number")
    text = str(value).strip()
    if not _AMOUNT_PATTERN.fullmatch(text):
        raise AmwalValidationError("Amount must be a positive number")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise AmwalValidationError("Amount must be a positive number") from None
    if not amount.is_finite() or amount <= 0:
        raise AmwalValidationError("Amount must be a positive number")
    return amount


def validate_payment_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate payment link data and return a copy with the phone number
    normalised. ``data`` itself is never modified.
    """
    payload = dict(data)
    parse_amount(payload.get("amount"))

    phone = payload.get("client_phone_number")
    if phone is not None:
        payload["client_phone_number"] = validate_phone(str(phone))

    callback_url = payload.get("callback_url")
    if callback_url is not None and not is_valid_url(callback_url):
        raise AmwalValidationError("Invalid callback URL")

    return payload


def validate_transaction_id(transaction_id: Any) -> None:
    if not isinstance(transaction_id, str) or not _TRANSACTION_ID_PATTERN.fullmatch(transaction_id):
        raise AmwalValidationError("Invalid transaction ID format")


def validate_refund_data(data: Mapping[str, Any]) -> None:
    transaction_id = data.get("transaction_id")
    if not transaction_id or transaction_id == "0":
        raise AmwalValidationError("Transaction ID is required for refund")
