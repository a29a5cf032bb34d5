from __future__ import annotations

from copy import deepcopy
from typing import Any

from desk_api_client.config.settings import Settings


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def make_settings(
    *,
    hostname: str = "acme.desk.example",
    oauth: bool = False,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    desk: dict[str, Any] = {"hostname": hostname}
    if oauth:
        desk.update(
            {
                "auth_type": "oauth",
                "consumer_key": "consumer-key",
                "consumer_secret": "consumer-secret",
                "access_token": "access-token",
                "access_token_secret": "access-token-secret",
            }
        )
    else:
        desk["api_token"] = "test-token"

    data: dict[str, Any] = {"desk": desk}
    if overrides:
        data = _deep_merge(data, overrides)
    return Settings.from_mapping(data)
