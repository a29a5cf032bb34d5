from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from desk_api_client.config.env_aliases import canonical_env_names
from desk_api_client.config.settings import Settings
from desk_api_client.config.validate import (
    ConfigValidationError,
    ConfigValidationIssue,
    issues_from_pydantic_error,
    validate_settings,
)

DEFAULT_CONFIG_PATH = Path("config/config.yaml")

# Fields a missing `desk` section is reported as, for the default auth type.
_REQUIRED_DESK_FIELDS = ("desk.hostname", "desk.api_token")

_DOTTED_PATH_RE = re.compile(r"\b(?:desk|transport|observability)\.[a-z_]+\b")


def _single_issue(path: str, message: str) -> ConfigValidationError:
    return ConfigValidationError([ConfigValidationIssue(path=path, message=message)])


def _config_file() -> tuple[Path | None, bool]:
    """Return (path, explicit); a missing explicit file is an error, a missing default is not."""
    if (env_path := os.environ.get("CONFIG_PATH")):
        return Path(env_path), True
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH, False
    return None, False


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise _single_issue(str(path), f"Unable to read config file: {exc}") from exc
    except yaml.YAMLError as exc:
        raise _single_issue(str(path), f"Invalid YAML: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise _single_issue(str(path), "YAML root must be a mapping/object")
    return raw


def _file_layer(config_path: str | Path | None) -> dict[str, Any]:
    if config_path is not None:
        path, explicit = Path(config_path), True
    else:
        path, explicit = _config_file()

    if path is None:
        return {}
    if not path.exists():
        if explicit:
            raise _single_issue("CONFIG_PATH", f"Config file not found: {path}")
        return {}
    return _read_yaml_mapping(path)


def load_settings(*, config_path: str | Path | None = None) -> Settings:
    """
    Build validated Settings from the environment, `.env` and an optional YAML file.

    Environment variables override YAML values; `.env` never overrides variables
    already set in the process environment.
    """
    dotenv_path = Path(".env")
    if dotenv_path.is_file():
        load_dotenv(dotenv_path=dotenv_path, override=False)

    file_data = _file_layer(config_path)

    try:
        settings = Settings(**file_data)
    except ValidationError as exc:
        issues = _expand_missing_sections(issues_from_pydantic_error(exc))
        raise ConfigValidationError([_with_hint(issue) for issue in issues]) from exc

    validate_settings(settings)
    return settings


def _expand_missing_sections(
    issues: list[ConfigValidationIssue],
) -> list[ConfigValidationIssue]:
    expanded: list[ConfigValidationIssue] = []
    for issue in issues:
        if issue.path == "desk" and "Field required" in issue.message:
            expanded.extend(
                ConfigValidationIssue(field, "Field required") for field in _REQUIRED_DESK_FIELDS
            )
        else:
            expanded.append(issue)
    return expanded


def _with_hint(issue: ConfigValidationIssue) -> ConfigValidationIssue:
    # Cross-field validators report on the section and name the fields in the message.
    paths = [issue.path, *_DOTTED_PATH_RE.findall(issue.message)]
    env_names = canonical_env_names()
    hints = [
        f"Set `{env_names[path]}` (or YAML `{path}`)."
        for path in dict.fromkeys(paths)
        if path in env_names
    ]
    if not hints:
        return issue
    return ConfigValidationIssue(issue.path, " ".join([issue.message, *hints]))
