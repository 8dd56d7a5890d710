"""
The Amwal payment gateway client.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Union

import requests

from .config import ClientConfig, ClientOptions
from .errors import AmwalPayError
from .logs import attach_log_file, log_event
from .payloads import PaymentRequest, RefundRequest, RequestBuilder, as_payload
from .ratelimit import RateLimiter
from .responses import decode_response, require_field
from .transport import HttpExecutor
from .validation import validate_payment_data, validate_refund_data, validate_transaction_id

__all__ = ["AmwalClient"]

logger = logging.getLogger(__name__)

PaymentData = Union[Mapping[str, Any], PaymentRequest]
RefundData = Union[Mapping[str, Any], RefundRequest]


class AmwalClient:
    """
    Facade over the validate, build, throttle, send and decode pipeline.

    ``rate_limiter`` defaults to the process-wide limiter shared by every
    client; pass a fresh :class:`RateLimiter` to isolate an instance.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[RateLimiter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.builder = RequestBuilder(config)
        self.executor = HttpExecutor(
            config,
            session=session,
            rate_limiter=rate_limiter,
            sleep=sleep,
        )
        if config.options.log_file:
            attach_log_file(config.options.log_file)

    @classmethod
    def create(
        cls,
        secret_key: str,
        public_key: str,
        environment: str = "production",
        *,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[RateLimiter] = None,
        **options: Any,
    ) -> "AmwalClient":
        config = ClientConfig.build(
            secret_key=secret_key,
            public_key=public_key,
            environment=environment,
            **options,
        )
        return cls(config, session=session, rate_limiter=rate_limiter)

    @property
    def options(self) -> ClientOptions:
        return self.config.options

    @property
    def environment(self) -> str:
        return self.config.options.environment

    @property
    def api_url(self) -> str:
        return self.config.api_url

    @property
    def session(self) -> requests.Session:
        return self.executor.session

    def _log(self, level: int, message: str, **context: Any) -> None:
        context["environment"] = self.environment
        log_event(logger, level, message, context)

    def _request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        payload: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        outcome = self.executor.execute(method, url, headers, payload)
        return decode_response(outcome, environment=self.environment)

    def validate_merchant(self) -> Any:
        """
        Check the configured key pair against the gateway.
        """
        url = self.builder.merchant_validation_url()
        # The gateway expects the public key as Origin on this endpoint.
        headers = self.builder.default_headers(self.config.public_key)
        payload = self.builder.merchant_validation_payload()

        try:
            response = self._request("POST", url, headers, payload)
        except AmwalPayError as exc:
            self._log(logging.ERROR, "Merchant validation failed", error=str(exc))
            raise

        self._log(logging.INFO, "Merchant validation successful", merchant_id=self.config.public_key)
        return response

    def test_connection(self) -> bool:
        """True when :meth:`validate_merchant` succeeds, False on any client error."""
        try:
            self.validate_merchant()
        except AmwalPayError:
            return False
        return True

    def create_payment(
        self,
        payment_data: PaymentData,
        store_id: str,
        origin: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a payment link in ``store_id`` and return its URL.

        The result has the keys ``environment``, ``payment_url`` and
        ``payment_link_id``.
        """
        payload = validate_payment_data(as_payload(payment_data))
        effective_origin = origin if origin is not None else self.options.default_origin
        url = self.builder.create_payment_url(store_id)
        headers = self.builder.auth_headers(effective_origin)

        self._log(
            logging.INFO,
            "Creating payment",
            merchant_id=self.config.public_key,
            amount=payload.get("amount"),
        )

        outcome = self.executor.execute("POST", url, headers, payload)
        response = decode_response(outcome, environment=self.environment)
        try:
            require_field(response, "url", status=outcome.status_code, environment=self.environment)
        except AmwalPayError:
            self._log(logging.ERROR, "Invalid response from payment creation", response=response)
            raise

        self._log(logging.INFO, "Payment created successfully", payment_link_id=response.get("payment_link_id"))
        return {
            "environment": response.get("environment"),
            "payment_url": response["url"],
            "payment_link_id": response.get("payment_link_id"),
        }

    def get_payment_details(self, transaction_id: str, is_payment_details: bool = True) -> Any:
        """
        Fetch a payment link (default) or, with ``is_payment_details=False``,
        a single transaction.
        """
        validate_transaction_id(transaction_id)
        if is_payment_details:
            url = self.builder.payment_link_details_url(transaction_id)
        else:
            url = self.builder.transaction_url(transaction_id)
        return self._request("GET", url, self.builder.auth_headers())

    def refund_payment(self, refund_data: RefundData) -> Any:
        payload = as_payload(refund_data)
        validate_refund_data(payload)
        transaction_id = payload["transaction_id"]
        validate_transaction_id(transaction_id)
        url = self.builder.refund_url(transaction_id)

        self._log(logging.INFO, "Processing refund", transaction_id=transaction_id)
        return self._request("POST", url, self.builder.auth_headers(), payload)
