"""Classification and decoding of opportunity activity payloads.

Desk returns a single heterogeneous list for an opportunity's activity feed.
Each entry is tagged twice: `_links.self.class` separates history entries
from activities, and the top-level `type` selects the activity variant.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import structlog
from pydantic import ValidationError

from desk_api_client.domain.activities import (
    ActivityKind,
    ActivityRecord,
    OpportunityAttachment,
    OpportunityCall,
    OpportunityEmail,
    OpportunityEvent,
    OpportunityNote,
    OpportunitySystemEvent,
    OpportunityTask,
)
from desk_api_client.domain.errors import ActivityDecodeError

log = structlog.get_logger(__name__)

LINKS = "_links"
SELF = "self"
CLASS = "class"
HISTORY = "history"
TYPE = "type"
OPPORTUNITY_ATTACHMENT = "opportunity_attachment"

# Compared by member name, unlike attachments which use a literal.
_TYPED_ACTIVITY_KINDS: tuple[ActivityKind, ...] = (
    ActivityKind.CALL,
    ActivityKind.EMAIL,
    ActivityKind.EVENT,
    ActivityKind.NOTE,
    ActivityKind.TASK,
)


@dataclass(frozen=True)
class ActivityCodec:
    """Immutable mapping from variant tag to the schema used to decode it."""

    schemas: Mapping[ActivityKind, type[ActivityRecord]] = field(
        default_factory=lambda: MappingProxyType(
            {
                ActivityKind.CALL: OpportunityCall,
                ActivityKind.EMAIL: OpportunityEmail,
                ActivityKind.EVENT: OpportunityEvent,
                ActivityKind.NOTE: OpportunityNote,
                ActivityKind.TASK: OpportunityTask,
                ActivityKind.ATTACHMENT: OpportunityAttachment,
                ActivityKind.SYSTEM_EVENT: OpportunitySystemEvent,
            }
        )
    )

    def __post_init__(self) -> None:
        missing = set(ActivityKind) - set(self.schemas)
        if missing:
            names = ", ".join(sorted(kind.name for kind in missing))
            raise ValueError(f"ActivityCodec is missing schemas for: {names}")
        if not isinstance(self.schemas, MappingProxyType):
            object.__setattr__(self, "schemas", MappingProxyType(dict(self.schemas)))

    def decode(self, kind: ActivityKind, payload: Mapping[str, Any]) -> ActivityRecord:
        schema = self.schemas[kind]
        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            raise ActivityDecodeError(kind, _summarize(exc)) from exc


DEFAULT_CODEC = ActivityCodec()


def _summarize(exc: ValidationError) -> str:
    parts = []
    for item in exc.errors(include_url=False, include_input=False):
        loc = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)


def _get_object(container: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = container.get(key)
    return value if isinstance(value, Mapping) else None


def _get_string(container: Mapping[str, Any], key: str) -> str | None:
    value = container.get(key)
    return value if isinstance(value, str) else None


def classify_activity(payload: Any) -> ActivityKind | None:
    """Return the variant tag for `payload`, or None when it cannot be determined."""
    if not isinstance(payload, Mapping):
        return None

    links = _get_object(payload, LINKS)
    if links is None:
        return None
    self_link = _get_object(links, SELF)
    if self_link is None:
        return None

    clazz = _get_string(self_link, CLASS)
    if clazz is not None and clazz.lower() == HISTORY:
        return ActivityKind.SYSTEM_EVENT

    activity_type = _get_string(payload, TYPE)
    if activity_type is None:
        return None
    normalized = activity_type.lower()
    for kind in _TYPED_ACTIVITY_KINDS:
        if normalized == kind.name.lower():
            return kind
    if normalized == OPPORTUNITY_ATTACHMENT:
        return ActivityKind.ATTACHMENT
    return None


def decode_activity(payload: Any, codec: ActivityCodec = DEFAULT_CODEC) -> ActivityRecord | None:
    """
    Decode one activity feed entry into its typed variant.

    Returns None for entries whose variant cannot be determined. Raises
    ActivityDecodeError when the variant is known but a field fails coercion.
    """
    kind = classify_activity(payload)
    if kind is None:
        return None
    return codec.decode(kind, payload)


def decode_activities(
    items: Iterable[Any], codec: ActivityCodec = DEFAULT_CODEC
) -> list[ActivityRecord]:
    decoded: list[ActivityRecord] = []
    for index, item in enumerate(items):
        record = decode_activity(item, codec)
        if record is None:
            log.debug(
                "desk.activity.skipped_unknown",
                index=index,
                type=item.get(TYPE) if isinstance(item, Mapping) else None,
            )
            continue
        decoded.append(record)
    return decoded
