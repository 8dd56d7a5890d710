"""
Configuration objects and helpers for the Amwal client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .environment import DEFAULT_ENVIRONMENT, build_environment, endpoint_for
from .errors import ConfigError
from .validation import validate_config

__all__ = [
    "ClientConfig",
    "ClientOptions",
    "ConfigError",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT_SECONDS",
    "load_client_config",
]

DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_MAX_RETRIES = 3

_INTEGER_OPTION_MINIMUMS = {"timeout_seconds": 1, "max_retries": 0}

_PARAMETER_TO_ENV_KEY = {
    "secret_key": "AMWAL_SECRET_API_KEY",
    "public_key": "AMWAL_PUBLIC_KEY",
    "api_url": "AMWAL_API_URL",
    "environment": "AMWAL_ENVIRONMENT",
    "timeout_seconds": "AMWAL_TIMEOUT_SECONDS",
    "max_retries": "AMWAL_MAX_RETRIES",
    "default_origin": "AMWAL_DEFAULT_ORIGIN",
    "log_file": "AMWAL_LOG_FILE",
}


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:  # pragma: no cover - only reachable through a typo here
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = str(value)
    return overrides


def _parse_int(raw: Any, name: str, *, minimum: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from exc
    if value < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {value}")
    return value


@dataclass
class ClientOptions:
    """
    Settings that may be changed after the client has been created.

    ``timeout_seconds`` and ``max_retries`` are parsed as integers on every
    assignment; invalid values raise :class:`ConfigError`.
    """

    environment: str = DEFAULT_ENVIRONMENT
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    default_origin: Optional[str] = None
    log_file: Optional[str] = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _INTEGER_OPTION_MINIMUMS:
            value = _parse_int(value, name, minimum=_INTEGER_OPTION_MINIMUMS[name])
        super().__setattr__(name, value)


@dataclass(frozen=True)
class ClientConfig:
    """
    Credentials and gateway URL, fixed for the lifetime of the client.

    Use :meth:`build` rather than the constructor to get validation,
    trimming and the per-environment default URL.
    """

    secret_key: str
    public_key: str
    api_url: str
    options: ClientOptions = field(default_factory=ClientOptions)

    @property
    def environment(self) -> str:
        return self.options.environment

    @classmethod
    def build(
        cls,
        *,
        secret_key: Optional[str],
        public_key: Optional[str],
        api_url: Optional[str] = None,
        environment: Optional[str] = None,
        timeout_seconds: Optional[int | str] = None,
        max_retries: Optional[int | str] = None,
        default_origin: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> "ClientConfig":
        validate_config(
            secret_key=secret_key,
            public_key=public_key,
            api_url=api_url,
            log_file=log_file,
        )
        environment = environment or DEFAULT_ENVIRONMENT
        options = ClientOptions(
            environment=environment,
            timeout_seconds=_parse_int(
                DEFAULT_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds,
                "timeout_seconds",
                minimum=1,
            ),
            max_retries=_parse_int(
                DEFAULT_MAX_RETRIES if max_retries is None else max_retries,
                "max_retries",
                minimum=0,
            ),
            default_origin=default_origin or None,
            log_file=log_file,
        )
        return cls(
            secret_key=str(secret_key).strip(),
            public_key=str(public_key).strip(),
            api_url=(api_url or endpoint_for(environment)).rstrip("/"),
            options=options,
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        return cls.build(
            secret_key=values.get("AMWAL_SECRET_API_KEY"),
            public_key=values.get("AMWAL_PUBLIC_KEY"),
            api_url=values.get("AMWAL_API_URL") or None,
            environment=values.get("AMWAL_ENVIRONMENT") or None,
            timeout_seconds=values.get("AMWAL_TIMEOUT_SECONDS") or None,
            max_retries=values.get("AMWAL_MAX_RETRIES") or None,
            default_origin=values.get("AMWAL_DEFAULT_ORIGIN") or None,
            log_file=values.get("AMWAL_LOG_FILE") or None,
        )

    @classmethod
    def from_env(
        cls,
        *,
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
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            {
                "secret_key": secret_key,
                "public_key": public_key,
                "api_url": api_url,
                "environment": environment,
                "timeout_seconds": timeout_seconds,
                "max_retries": max_retries,
                "default_origin": default_origin,
                "log_file": log_file,
            }
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        process_environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(process_environment.variables)


def load_client_config(
    *,
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
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    Values can come from environment variables, a ``.env`` file, keyword
    arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
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
