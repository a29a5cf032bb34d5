from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any

import structlog
from structlog.stdlib import ProcessorFormatter

from desk_api_client.config.redact import redact_settings_dict
from desk_api_client.config.settings import ObservabilitySettings

_LOG_FORMATS = frozenset({"json", "human"})

# Both log full request URLs, which carry OAuth signatures for signed downloads.
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def _scrub_event_dict(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    return redact_settings_dict(event_dict)


def _coerce_log_format(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    return normalized if normalized in _LOG_FORMATS else None


def _resolve_log_format(configured: str | None, json_logs_default: bool) -> str:
    if (explicit := _coerce_log_format(configured)) is not None:
        return explicit
    if (from_env := _coerce_log_format(os.environ.get("LOG_FORMAT"))) is not None:
        return from_env
    return "json" if json_logs_default else "human"


def _resolve_log_level(log_level_default: str) -> str:
    raw = (os.environ.get("LOG_LEVEL") or "").strip()
    return (raw or log_level_default).upper()


def configure_logging(
    *,
    log_level: str = "INFO",
    json_logs: bool = False,
    log_format: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """
    Route structlog through stdlib logging with secret scrubbing.

    An explicit `log_format` wins over LOG_FORMAT, which wins over `json_logs`.
    Applications embedding the client can skip this and configure structlog
    themselves; the client only ever calls `structlog.get_logger`.
    """
    resolved_level = _resolve_log_level(log_level)
    resolved_format = _resolve_log_format(log_format, json_logs)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _scrub_event_dict,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: Any
    if resolved_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(resolved_level)

    transport_level = logging.DEBUG if resolved_level == "DEBUG" else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    structlog.configure(
        processors=[
            *shared_processors,
            ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_logging_from_settings(
    observability: ObservabilitySettings, *, stream: IO[str] | None = None
) -> None:
    configure_logging(
        log_level=observability.log_level,
        json_logs=observability.json_logs,
        log_format=observability.log_format,
        stream=stream,
    )
