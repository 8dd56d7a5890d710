"""Tests for the high-level helpers in amwal_payments.api."""

from __future__ import annotations

import pytest

from amwal_payments import ClientConfig, check_connection, create_amwal_client

from .fakes import FakeResponse, FakeSession


def _config() -> ClientConfig:
    return ClientConfig.build(secret_key="sk", public_key="pk", environment="test")


def test_uses_prebuilt_config():
    config = _config()
    client = create_amwal_client(config=config, session=FakeSession())
    assert client.config is config


def test_config_and_parameters_are_exclusive():
    with pytest.raises(ValueError, match="not both"):
        create_amwal_client(config=_config(), secret_key="other")


def test_builds_config_from_parameters(tmp_path):
    client = create_amwal_client(
        env_file=str(tmp_path / "none.env"),
        base={},
        secret_key="sk",
        public_key="pk",
        environment="local",
        max_retries="1",
    )
    assert client.environment == "local"
    assert client.options.max_retries == 1


def test_check_connection():
    ok = FakeSession(FakeResponse(200, {"valid": True}))
    rejected = FakeSession(FakeResponse(401, {"message": "bad key"}))
    assert check_connection(config=_config(), session=ok) is True
    assert check_connection(config=_config(), session=rejected) is False
