"""
Helpers for constructing the URLs, headers and JSON bodies sent to Amwal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from .config import ClientConfig

__all__ = [
    "PaymentRequest",
    "RefundRequest",
    "RequestBuilder",
    "as_payload",
]


@dataclass(frozen=True)
class PaymentRequest:
    """
    Body of a payment link creation call. Only ``amount`` is required;
    ``extra`` is merged into the payload verbatim.
    """

    amount: Union[Decimal, int, float, str]
    language: Optional[str] = None
    description: Optional[str] = None
    client_email: Optional[str] = None
    client_phone_number: Optional[str] = None
    callback_url: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.extra)
        payload["amount"] = self.amount
        for name in ("language", "description", "client_email", "client_phone_number", "callback_url"):
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        return payload


@dataclass(frozen=True)
class RefundRequest:
    transaction_id: str
    refund_amount: Union[Decimal, int, float, str, None] = None

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"transaction_id": self.transaction_id}
        if self.refund_amount is not None:
            payload["refund_amount"] = self.refund_amount
        return payload


def as_payload(data: Union[Mapping[str, Any], PaymentRequest, RefundRequest]) -> Dict[str, Any]:
    if isinstance(data, (PaymentRequest, RefundRequest)):
        return data.as_payload()
    return dict(data)


class RequestBuilder:
    """
    Builds gateway URLs and header sets from a :class:`ClientConfig`.
    """

    def __init__(self, config: ClientConfig) -> None:
        self.config = config

    def default_headers(self, origin: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if origin:
            headers["Origin"] = origin
        return headers

    def auth_headers(self, origin: Optional[str] = None) -> Dict[str, str]:
        headers = self.default_headers(origin)
        headers["X-Amwal-Key"] = self.config.public_key
        # The gateway expects the raw secret, not "Bearer <key>".
        headers["Authorization"] = self.config.secret_key
        return headers

    def merchant_validation_payload(self) -> Dict[str, str]:
        return {
            "api_key": self.config.secret_key,
            "merchant_id": self.config.public_key,
        }

    def _url(self, path: str) -> str:
        return f"{self.config.api_url}{path}"

    def merchant_validation_url(self) -> str:
        return self._url("/api/validate-merchant-api-key/")

    def create_payment_url(self, store_id: str) -> str:
        return self._url(f"/payment_links/{quote(store_id, safe='')}/create")

    def payment_link_details_url(self, payment_link_id: str) -> str:
        return self._url(f"/payment_links/{payment_link_id}/details")

    def transaction_url(self, transaction_id: str) -> str:
        return self._url(f"/transactions/{transaction_id}")

    def refund_url(self, transaction_id: str) -> str:
        return self._url(f"/transactions/refund/{transaction_id}/")
