"""
Public, high-level helpers for talking to the Amwal payment gateway.
"""

from __future__ import annotations

from typing import Mapping, Optional

import requests

from .core.client import AmwalClient
from .core.config import ClientConfig, load_client_config
from .core.ratelimit import RateLimiter

__all__ = ["check_connection", "create_amwal_client"]


def create_amwal_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    rate_limiter: Optional[RateLimiter] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    secret_key: Optional[str] = None,
    public_key: Optional[str] = None,
    api_url: Optional[str] = None,
    environment: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
    max_retries: Optional[int | str] = None,
    default_origin: Optional[str] = None,
    log_file: Optional[str] = None,
) -> AmwalClient:
    """
    Construct an :class:`AmwalClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras = (
            overrides,
            base,
            secret_key,
            public_key,
            api_url,
            environment,
            timeout_seconds,
            max_retries,
            default_origin,
            log_file,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            secret_key=secret_key,
            public_key=public_key,
            api_url=api_url,
            environment=environment,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            default_origin=default_origin,
            log_file=log_file,
        )
    return AmwalClient(cfg, session=session, rate_limiter=rate_limiter)


def check_connection(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
) -> bool:
    """
    Build a client and report whether the gateway accepts its credentials.
    """
    client = create_amwal_client(
        config=config,
        session=session,
        env_file=env_file,
        overrides=None if config is not None else overrides,
    )
    return client.test_connection()
