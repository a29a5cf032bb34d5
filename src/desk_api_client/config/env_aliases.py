"""Flat environment variable names and deprecated aliases.

Nested `DESK__HOSTNAME` style variables are handled by pydantic-settings;
this module maps the flat names documented for users onto the same paths
and emits DeprecationWarnings for legacy names.
"""
from __future__ import annotations

import os
import warnings
from collections.abc import Mapping
from typing import Any

# env var -> dotted settings path
_CANONICAL: dict[str, str] = {
    "DESK_HOSTNAME": "desk.hostname",
    "DESK_AUTH_TYPE": "desk.auth_type",
    "DESK_API_TOKEN": "desk.api_token",
    "DESK_CONSUMER_KEY": "desk.consumer_key",
    "DESK_CONSUMER_SECRET": "desk.consumer_secret",
    "DESK_ACCESS_TOKEN": "desk.access_token",
    "DESK_ACCESS_TOKEN_SECRET": "desk.access_token_secret",
    "DESK_TIMEOUT_SECONDS": "desk.timeout_seconds",
    "DESK_VERIFY_TLS": "desk.verify_tls",
    "HTTP_TRUST_ENV": "transport.trust_env",
    "HTTP_ALLOW_INSECURE_TLS": "transport.allow_insecure_tls",
    "HTTP_MAX_RETRIES": "transport.max_retries",
    "HTTP_BACKOFF_BASE_SECONDS": "transport.backoff_base_seconds",
    "LOG_LEVEL": "observability.log_level",
    "LOG_FORMAT": "observability.log_format",
    "LOG_JSON": "observability.json_logs",
}

# Mapping of deprecated env vars to their canonical names
_DEPRECATED_ALIASES: dict[str, str] = {
    "DESK_HOST": "DESK_HOSTNAME",
    "DESK_TOKEN": "DESK_API_TOKEN",
}


def canonical_env_names() -> dict[str, str]:
    """Dotted settings path -> flat env var name, e.g. `desk.hostname` -> `DESK_HOSTNAME`."""
    return {path: env_name for env_name, path in _CANONICAL.items()}


def _warn_deprecated_env_var(old_name: str, new_name: str) -> None:
    warnings.warn(
        f"Environment variable '{old_name}' is deprecated. Use '{new_name}' instead. "
        f"Support for '{old_name}' will be removed in a future version.",
        DeprecationWarning,
        stacklevel=4,
    )


def _set_dotted(data: dict[str, Any], dotted: str, value: str) -> None:
    *parents, leaf = dotted.split(".")
    node = data
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value


def flat_env_values(env: Mapping[str, str]) -> dict[str, Any]:
    """Nested settings data from the flat names in `env`; empty values are ignored."""
    data: dict[str, Any] = {}
    for env_name, path in _CANONICAL.items():
        if value := env.get(env_name):
            _set_dotted(data, path, value)

    for old_name, new_name in _DEPRECATED_ALIASES.items():
        old_value = env.get(old_name)
        if not old_value or env.get(new_name):
            continue
        _warn_deprecated_env_var(old_name, new_name)
        _set_dotted(data, _CANONICAL[new_name], old_value)
    return data


def get_flat_env_settings_source() -> dict[str, Any]:
    return flat_env_values(os.environ)
