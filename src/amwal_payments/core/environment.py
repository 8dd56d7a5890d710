"""
Environment handling for the Amwal client.

Two concerns live here: the deployment environment tag (``production``,
``sandbox``, ``test`` ...) that decides TLS verification and rate limiting,
and the process environment (``os.environ`` plus an optional ``.env`` file)
that :class:`amwal_payments.core.config.ClientConfig` can be built from.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

__all__ = [
    "API_ENDPOINTS",
    "DEFAULT_ENVIRONMENT",
    "LOCAL_ENVIRONMENTS",
    "ProcessEnvironment",
    "build_environment",
    "endpoint_for",
    "is_live_environment",
    "load_env_file",
]

DEFAULT_ENVIRONMENT = "production"

# Environments where TLS verification and rate limiting are switched off.
LOCAL_ENVIRONMENTS = frozenset({"development", "local", "test"})

API_ENDPOINTS: Mapping[str, str] = {
    "production": "https://backend.sa.amwal.tech",
}


def is_live_environment(environment: str) -> bool:
    return environment not in LOCAL_ENVIRONMENTS


def endpoint_for(environment: str) -> str:
    """Return the gateway base URL for ``environment``, defaulting to production."""
    return API_ENDPOINTS.get(environment, API_ENDPOINTS[DEFAULT_ENVIRONMENT])


def _parse_env_file(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for raw_line in data.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key.strip()] = value
    return values


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Load ``AMWAL_*`` style variables from ``path`` into ``environ``.

    Keys already present in ``environ`` are left untouched.
    """
    target: MutableMapping[str, str] = environ if environ is not None else os.environ
    for key, value in _parse_env_file(Path(path)).items():
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class ProcessEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> ProcessEnvironment:
    """
    Merge ``base`` (default :data:`os.environ`), the optional ``env_file`` and
    ``overrides``. Overrides always win; the file never replaces ``base``.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)

    if env_file is not None:
        for key, value in _parse_env_file(Path(env_file)).items():
            merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return ProcessEnvironment(variables=merged)
