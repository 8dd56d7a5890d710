"""End-to-end tests for AmwalClient against a fake transport."""

from __future__ import annotations

import dataclasses
import logging
from decimal import Decimal

import pytest
import requests

from amwal_payments import (
    AmwalApiError,
    AmwalClient,
    AmwalNetworkError,
    AmwalValidationError,
    CallResult,
    ConfigError,
    ErrorKind,
    PaymentRequest,
    RateLimiter,
    RefundRequest,
)
from amwal_payments.core.logs import PACKAGE_LOGGER

from .fakes import API_URL, PUBLIC_KEY, SECRET_KEY, STORE_ID, TRANSACTION_ID, FakeResponse, FakeSession

PAYMENT_RESPONSE = {
    "url": "https://pay.example/x",
    "payment_link_id": "abc",
    "environment": "production",
}


class TestConstruction:
    @pytest.mark.parametrize("secret_key, public_key", [("", PUBLIC_KEY), (SECRET_KEY, ""), (None, PUBLIC_KEY)])
    def test_missing_keys_fail(self, secret_key, public_key):
        with pytest.raises(AmwalValidationError):
            AmwalClient.create(secret_key, public_key)

    def test_create_defaults(self):
        client = AmwalClient.create(SECRET_KEY, PUBLIC_KEY, rate_limiter=RateLimiter())
        assert client.environment == "production"
        assert client.api_url == "https://backend.sa.amwal.tech"
        assert isinstance(client.session, requests.Session)

    def test_create_with_options(self):
        client = AmwalClient.create(SECRET_KEY, PUBLIC_KEY, "sandbox", timeout_seconds=5, default_origin="https://o.example")
        assert client.environment == "sandbox"
        assert client.options.timeout_seconds == 5
        assert client.options.default_origin == "https://o.example"

    def test_invalid_api_url(self):
        with pytest.raises(ConfigError, match="Invalid API URL"):
            AmwalClient.create(SECRET_KEY, PUBLIC_KEY, api_url="gateway")

    def test_credentials_cannot_change(self, make_client):
        client = make_client(FakeSession())
        with pytest.raises(dataclasses.FrozenInstanceError):
            client.config.secret_key = "other"


class TestValidateMerchant:
    def test_posts_credentials(self, make_client):
        session = FakeSession(FakeResponse(200, {"valid": True}))
        client = make_client(session)

        assert client.validate_merchant() == {"valid": True}
        call = session.last_call
        assert call["method"] == "POST"
        assert call["url"] == f"{API_URL}/api/validate-merchant-api-key/"
        assert session.last_json() == {"api_key": SECRET_KEY, "merchant_id": PUBLIC_KEY}
        assert call["headers"]["Origin"] == PUBLIC_KEY
        assert "Authorization" not in call["headers"]

    def test_failure_is_raised_and_logged(self, make_client, caplog):
        client = make_client(FakeSession(FakeResponse(401, {"message": "Invalid key"})))
        with caplog.at_level(logging.INFO, logger=PACKAGE_LOGGER):
            with pytest.raises(AmwalApiError, match="Invalid key"):
                client.validate_merchant()
        assert any("Merchant validation failed" in r.getMessage() for r in caplog.records)

    def test_success_log_never_contains_secret(self, make_client, caplog):
        client = make_client(FakeSession(FakeResponse(200, {})))
        with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER):
            client.validate_merchant()
        assert caplog.records
        assert all(SECRET_KEY not in r.getMessage() for r in caplog.records)

    def test_test_connection(self, make_client):
        assert make_client(FakeSession(FakeResponse(200, {}))).test_connection() is True
        assert make_client(FakeSession(FakeResponse(403, {"error": "no"}))).test_connection() is False
        assert make_client(FakeSession(FakeResponse(200, text="oops"))).test_connection() is False
        assert make_client(FakeSession(requests.ConnectionError("down")), max_retries=0).test_connection() is False


class TestCreatePayment:
    def test_end_to_end(self, make_client):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        client = make_client(session)

        result = client.create_payment({"amount": 100}, STORE_ID)

        assert result == {
            "environment": "production",
            "payment_url": "https://pay.example/x",
            "payment_link_id": "abc",
        }
        call = session.last_call
        assert call["method"] == "POST"
        assert call["url"] == f"{API_URL}/payment_links/{STORE_ID}/create"
        assert call["headers"]["Authorization"] == SECRET_KEY
        assert call["headers"]["X-Amwal-Key"] == PUBLIC_KEY
        assert "Origin" not in call["headers"]
        assert session.last_json() == {"amount": 100}

    @pytest.mark.parametrize("amount", [0, -10, "abc", None, "", "1_000"])
    def test_invalid_amount_never_reaches_network(self, make_client, amount):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        with pytest.raises(AmwalValidationError):
            make_client(session).create_payment({"amount": amount}, STORE_ID)
        assert session.calls == []

    def test_missing_url_in_success_response(self, make_client):
        session = FakeSession(FakeResponse(200, {"payment_link_id": "abc"}))
        with pytest.raises(AmwalApiError, match="Invalid response from payment gateway") as info:
            make_client(session).create_payment({"amount": 100}, STORE_ID)
        assert info.value.kind is ErrorKind.API

    def test_missing_optional_fields_become_none(self, make_client):
        session = FakeSession(FakeResponse(201, {"url": "https://pay.example/y"}))
        assert make_client(session).create_payment({"amount": 1}, STORE_ID) == {
            "environment": None,
            "payment_url": "https://pay.example/y",
            "payment_link_id": None,
        }

    def test_origin_explicit_then_default(self, make_client):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        client = make_client(session, default_origin="https://default.example")

        client.create_payment({"amount": 1}, STORE_ID)
        assert session.last_call["headers"]["Origin"] == "https://default.example"

        client.create_payment({"amount": 1}, STORE_ID, origin="https://explicit.example")
        assert session.last_call["headers"]["Origin"] == "https://explicit.example"

    def test_store_id_is_escaped_in_path(self, make_client):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        make_client(session).create_payment({"amount": 1}, "../../api/validate-merchant-api-key")
        assert session.last_call["url"] == f"{API_URL}/payment_links/..%2F..%2Fapi%2Fvalidate-merchant-api-key/create"

    def test_phone_is_sent_normalized(self, make_client):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        data = {"amount": 50, "client_phone_number": "+٩٦٦ ٥٠ ١٢٣ ٤٥٦٧"}
        make_client(session).create_payment(data, STORE_ID)
        assert session.last_json()["client_phone_number"] == "+966501234567"
        assert data["client_phone_number"] == "+٩٦٦ ٥٠ ١٢٣ ٤٥٦٧"

    def test_payment_request_dataclass(self, make_client):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        request = PaymentRequest(
            amount=Decimal("99.95"),
            language="ar",
            callback_url="https://shop.example/callback",
        )
        make_client(session).create_payment(request, STORE_ID)
        assert session.last_json() == {
            "amount": "99.95",
            "language": "ar",
            "callback_url": "https://shop.example/callback",
        }

    def test_api_error_status(self, make_client):
        session = FakeSession(FakeResponse(422, {"message": "Amount too low"}))
        with pytest.raises(AmwalApiError) as info:
            make_client(session).create_payment({"amount": 1}, STORE_ID)
        assert info.value.code == 422
        assert info.value.message == "Amount too low"
        assert info.value.context["response"] == {"message": "Amount too low"}

    def test_network_failure_after_retries(self, make_client, sleeper):
        session = FakeSession(requests.ConnectionError("unreachable"))
        with pytest.raises(AmwalNetworkError):
            make_client(session, max_retries=3).create_payment({"amount": 1}, STORE_ID)
        assert len(session.calls) == 4
        assert sleeper.delays == pytest.approx([0.1, 0.2, 0.4])

    def test_call_result_capture(self, make_client):
        session = FakeSession(FakeResponse(200, {}))
        result = CallResult.capture(make_client(session).create_payment, {"amount": 1}, STORE_ID)
        assert not result.ok
        assert result.kind is ErrorKind.API


class TestRateLimiting:
    def test_second_call_in_production_is_rejected(self, make_client):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        client = make_client(session, environment="production")
        client.create_payment({"amount": 1}, STORE_ID)
        with pytest.raises(AmwalApiError, match="Rate limit exceeded"):
            client.create_payment({"amount": 1}, STORE_ID)
        assert len(session.calls) == 1

    def test_test_environment_is_not_limited(self, make_client):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        client = make_client(session, environment="test")
        client.create_payment({"amount": 1}, STORE_ID)
        client.create_payment({"amount": 1}, STORE_ID)
        assert len(session.calls) == 2

    def test_limiter_is_shared_between_clients(self, make_client):
        first = make_client(FakeSession(FakeResponse(200, PAYMENT_RESPONSE)), environment="production")
        second = make_client(FakeSession(FakeResponse(200, PAYMENT_RESPONSE)), environment="production")
        first.create_payment({"amount": 1}, STORE_ID)
        with pytest.raises(AmwalApiError, match="Rate limit exceeded"):
            second.create_payment({"amount": 1}, STORE_ID)

    def test_environment_option_is_read_per_call(self, make_client):
        session = FakeSession(FakeResponse(200, PAYMENT_RESPONSE))
        client = make_client(session, environment="production")
        client.create_payment({"amount": 1}, STORE_ID)
        client.options.environment = "local"
        client.create_payment({"amount": 1}, STORE_ID)
        assert session.last_call["verify"] is False


class TestPaymentDetails:
    def test_payment_link_details(self, make_client):
        session = FakeSession(FakeResponse(200, {"status": "paid"}))
        assert make_client(session).get_payment_details(TRANSACTION_ID) == {"status": "paid"}
        call = session.last_call
        assert call["method"] == "GET"
        assert call["url"] == f"{API_URL}/payment_links/{TRANSACTION_ID}/details"
        assert call["data"] is None
        assert call["headers"]["Authorization"] == SECRET_KEY

    def test_transaction_details(self, make_client):
        session = FakeSession(FakeResponse(200, [{"id": 1}]))
        assert make_client(session).get_payment_details(TRANSACTION_ID, False) == [{"id": 1}]
        assert session.last_call["url"] == f"{API_URL}/transactions/{TRANSACTION_ID}"

    @pytest.mark.parametrize("bad_id", ["short", "has@symbol1234"])
    def test_invalid_id(self, make_client, bad_id):
        session = FakeSession()
        with pytest.raises(AmwalValidationError, match="Invalid transaction ID format"):
            make_client(session).get_payment_details(bad_id)
        assert session.calls == []


class TestRefund:
    def test_refund(self, make_client):
        session = FakeSession(FakeResponse(200, {"refunded": True}))
        data = {"transaction_id": TRANSACTION_ID, "refund_amount": 10}
        assert make_client(session).refund_payment(data) == {"refunded": True}
        call = session.last_call
        assert call["method"] == "POST"
        assert call["url"] == f"{API_URL}/transactions/refund/{TRANSACTION_ID}/"
        assert session.last_json() == data

    def test_refund_request_dataclass(self, make_client):
        session = FakeSession(FakeResponse(200, {}))
        make_client(session).refund_payment(RefundRequest(TRANSACTION_ID, Decimal("2.5")))
        assert session.last_json() == {"transaction_id": TRANSACTION_ID, "refund_amount": "2.5"}

    @pytest.mark.parametrize("data", [{}, {"transaction_id": ""}, {"transaction_id": "0"}, {"refund_amount": 10}])
    def test_missing_transaction_id(self, make_client, data):
        session = FakeSession()
        with pytest.raises(AmwalValidationError, match="Transaction ID is required for refund"):
            make_client(session).refund_payment(data)
        assert session.calls == []

    @pytest.mark.parametrize("bad_id", ["short", "has@symbol1234", "../../api/validate-merchant-api-key"])
    def test_malformed_transaction_id_is_never_sent(self, make_client, bad_id):
        session = FakeSession()
        with pytest.raises(AmwalValidationError, match="Invalid transaction ID format"):
            make_client(session).refund_payment({"transaction_id": bad_id, "refund_amount": 1})
        assert session.calls == []


def test_log_file_receives_records(tmp_path, make_client):
    log_file = tmp_path / "logs" / "amwalpay.log"
    client = make_client(FakeSession(FakeResponse(200, {})), log_file=str(log_file))
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    try:
        client.validate_merchant()
        for handler in package_logger.handlers:
            handler.flush()
        content = log_file.read_text(encoding="utf-8")
        assert "Merchant validation successful" in content
        assert '"environment": "test"' in content
    finally:
        for handler in list(package_logger.handlers):
            if getattr(handler, "baseFilename", None) == str(log_file):
                package_logger.removeHandler(handler)
                handler.close()
        package_logger.setLevel(logging.NOTSET)
