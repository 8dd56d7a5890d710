"""
Phone number normalisation and E.164 validation.
"""

from __future__ import annotations

import re
from typing import Optional

from .country_codes import COUNTRY_PHONE_CODES
from .errors import AmwalValidationError

__all__ = [
    "has_country_code_prefix",
    "is_valid_e164",
    "match_country_code",
    "normalize_phone",
    "phone_code_from_iso",
    "validate_phone",
]

_E164_PATTERN = re.compile(r"\+[1-9]\d{1,14}")
_NON_PHONE_CHARS = re.compile(r"[^0-9+]")

# Arabic-Indic (U+0660..U+0669) and Extended Arabic-Indic (U+06F0..U+06F9).
_ARABIC_DIGITS = str.maketrans(
    "٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹",
    "01234567890123456789",
)

# Longest codes first so "1684" wins over "1".
_CODES_LONGEST_FIRST = sorted(set(COUNTRY_PHONE_CODES.values()), key=len, reverse=True)


def normalize_phone(phone: str) -> str:
    """
    Convert Arabic digits to ASCII, drop everything except digits and a
    single leading ``+`` and strip leading zeros from numbers without one.
    """
    cleaned = _NON_PHONE_CHARS.sub("", phone.translate(_ARABIC_DIGITS))
    digits = cleaned.replace("+", "")
    if cleaned.startswith("+"):
        return "+" + digits
    return digits.lstrip("0")


def is_valid_e164(phone: str) -> bool:
    return _E164_PATTERN.fullmatch(phone) is not None


def validate_phone(phone: str) -> str:
    """Return the normalised form of ``phone`` or raise a validation error."""
    normalized = normalize_phone(phone)
    if not is_valid_e164(normalized):
        raise AmwalValidationError(
            "Invalid phone number format",
            context={"phone": normalized},
        )
    return normalized


def phone_code_from_iso(iso_code: str) -> Optional[str]:
    return COUNTRY_PHONE_CODES.get(iso_code.upper())


def match_country_code(phone: str) -> Optional[str]:
    """Return the longest known calling code ``phone`` starts with, if any."""
    digits = phone.lstrip("+")
    for code in _CODES_LONGEST_FIRST:
        if digits.startswith(code):
            return code
    return None


def has_country_code_prefix(phone: str) -> bool:
    """
    True when ``phone`` (ignoring a leading ``+``) starts with any known
    calling code.

    Single digit codes such as ``1`` and ``7`` make this true for most
    numbers starting with those digits; use :func:`match_country_code` to see
    which code matched.
    """
    return match_country_code(phone) is not None
