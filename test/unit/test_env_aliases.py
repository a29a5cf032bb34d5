from __future__ import annotations

from pathlib import Path

import pytest

from desk_api_client.config.env_aliases import get_flat_env_settings_source
from desk_api_client.config.load import load_settings


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    keys = [
        "CONFIG_PATH",
        "DESK_HOSTNAME",
        "DESK_API_TOKEN",
        "DESK_AUTH_TYPE",
        # Legacy names
        "DESK_HOST",
        "DESK_TOKEN",
    ]
    for key in keys:
        monkeypatch.delenv(key, raising=False)


def test_deprecated_aliases_are_honored_with_warning(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("DESK_HOST", "legacy.desk.example")
    monkeypatch.setenv("DESK_TOKEN", "legacy-token")

    with pytest.warns(DeprecationWarning, match="DESK_HOST"):
        settings = load_settings()

    assert settings.desk.hostname == "legacy.desk.example"
    assert settings.desk.api_token is not None
    assert settings.desk.api_token.get_secret_value() == "legacy-token"


def test_canonical_name_wins_over_deprecated_alias(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("DESK_HOSTNAME", "new.desk.example")
    monkeypatch.setenv("DESK_HOST", "old.desk.example")

    data = get_flat_env_settings_source()

    assert data["desk"]["hostname"] == "new.desk.example"


def test_flat_names_map_to_nested_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("DESK_AUTH_TYPE", "oauth")
    monkeypatch.setenv("HTTP_TRUST_ENV", "true")
    monkeypatch.setenv("LOG_JSON", "1")

    data = get_flat_env_settings_source()

    assert data["desk"]["auth_type"] == "oauth"
    assert data["transport"]["trust_env"] == "true"
    assert data["observability"]["json_logs"] == "1"


def test_empty_values_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("DESK_API_TOKEN", "")

    assert "desk" not in get_flat_env_settings_source()
