"""
Blocking HTTP transport with retry and exponential backoff.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

import requests

from .config import ClientConfig
from .environment import is_live_environment
from .errors import AmwalNetworkError
from .logs import log_event
from .ratelimit import RateLimiter, default_rate_limiter

__all__ = [
    "BACKOFF_BASE_SECONDS",
    "CONNECT_TIMEOUT_SECONDS",
    "HttpExecutor",
    "HttpOutcome",
    "backoff_delay",
]

logger = logging.getLogger(__name__)

BACKOFF_BASE_SECONDS = 0.1
CONNECT_TIMEOUT_SECONDS = 10


def backoff_delay(retry_count: int) -> float:
    """Delay before retry number ``retry_count + 1``: 0.1s, 0.2s, 0.4s, ..."""
    return BACKOFF_BASE_SECONDS * (2 ** retry_count)


@dataclass(frozen=True)
class HttpOutcome:
    method: str
    url: str
    status_code: int
    body: str
    duration: float
    attempts: int = 1

    def json(self) -> Any:
        return json.loads(self.body)


class HttpExecutor:
    """
    Sends one logical request, retrying transport failures only.

    HTTP error statuses are returned like any other response; deciding what
    they mean is left to :mod:`amwal_payments.core.responses`.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[RateLimiter] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.rate_limiter = rate_limiter if rate_limiter is not None else default_rate_limiter
        self._sleep = sleep
        self._clock = clock

    @property
    def verify_tls(self) -> bool:
        return is_live_environment(self.config.environment)

    def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        payload: Optional[Mapping[str, Any]] = None,
    ) -> HttpOutcome:
        method = method.upper()
        options = self.config.options
        environment = options.environment

        self.rate_limiter.check(url, self.config.secret_key, environment=environment)

        body: Optional[str] = None
        if method != "GET" and payload:
            body = json.dumps(payload, default=str)
            log_event(logger, logging.DEBUG, "Request payload", {
                "payload_size": len(body.encode("utf-8")),
                "environment": environment,
            })

        retry_count = 0
        while True:
            started = self._clock()
            try:
                response = self.session.request(
                    method,
                    url,
                    headers=dict(headers),
                    data=body,
                    timeout=(CONNECT_TIMEOUT_SECONDS, options.timeout_seconds),
                    verify=self.verify_tls,
                )
            except requests.RequestException as exc:
                duration = self._clock() - started
                log_event(logger, logging.DEBUG, "HTTP Request", {
                    "url": url,
                    "method": method,
                    "status": 0,
                    "duration": round(duration, 3),
                    "environment": environment,
                })
                log_event(logger, logging.ERROR, "HTTP request failed", {
                    "error": str(exc),
                    "retry_count": retry_count,
                    "environment": environment,
                })
                if retry_count < options.max_retries:
                    self._sleep(backoff_delay(retry_count))
                    retry_count += 1
                    continue
                raise AmwalNetworkError(
                    f"HTTP request failed: {exc}",
                    context={
                        "url": url,
                        "error": str(exc),
                        "attempts": retry_count + 1,
                        "environment": environment,
                    },
                ) from exc

            duration = self._clock() - started
            log_event(logger, logging.DEBUG, "HTTP Request", {
                "url": url,
                "method": method,
                "status": response.status_code,
                "duration": round(duration, 3),
                "environment": environment,
            })
            return HttpOutcome(
                method=method,
                url=url,
                status_code=response.status_code,
                body=response.text,
                duration=duration,
                attempts=retry_count + 1,
            )
