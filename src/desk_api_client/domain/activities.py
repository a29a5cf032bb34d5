"""Opportunity timeline records.

Every record on an opportunity's activity feed is one of seven variants:
five logged activities (call, email, event, note, task), a file attachment,
or a system history entry. Instances are produced by
`desk_api_client.domain.activity_decoder` and are frozen after decoding.
"""
from __future__ import annotations

import re
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

_TRAILING_ID_RE = re.compile(r"/(\d+)/?$")


def _parse_iso8601(value: Any) -> Any:
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected an ISO-8601 timestamp string, got {type(value).__name__}")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"not an ISO-8601 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


# Desk only ever emits ISO-8601 text; unix epochs and other formats are rejected.
IsoDatetime = Annotated[datetime, BeforeValidator(_parse_iso8601)]


def _null_as(zero: Any) -> BeforeValidator:
    return BeforeValidator(lambda value: zero if value is None else value)


# JSON null leaves the attribute at its zero value, same as an absent key.
ZeroStr = Annotated[str, _null_as("")]
ZeroInt = Annotated[int, _null_as(0)]


def _link_class(value: Any) -> Any:
    # Scalars are read in their string form; anything else counts as absent.
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int | float):
        return str(value)
    return None


LinkClass = Annotated[str | None, BeforeValidator(_link_class)]


class ActivityKind(Enum):
    CALL = "call"
    EMAIL = "email"
    EVENT = "event"
    NOTE = "note"
    TASK = "task"
    ATTACHMENT = "opportunity_attachment"
    SYSTEM_EVENT = "history"


class _RecordModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class Link(_RecordModel):
    href: str | None = None
    class_: LinkClass = Field(default=None, alias="class")
    id: int | None = None

    @property
    def link_id(self) -> int:
        if self.id is not None:
            return self.id
        if self.href:
            match = _TRAILING_ID_RE.search(self.href)
            if match:
                return int(match.group(1))
        return 0


class ActivityLinks(_RecordModel):
    self_: Link | None = Field(default=None, alias="self")
    uploaded_by: Link | None = None
    activity: Link | None = None
    opportunity: Link | None = None


def _link_id(link: Link | None) -> int:
    return link.link_id if link is not None else 0


class ActivityRecord(_RecordModel):
    KIND: ClassVar[ActivityKind]

    id: ZeroInt = 0
    created_at: IsoDatetime | None = None
    links: ActivityLinks = Field(default_factory=ActivityLinks, alias="_links")

    @property
    def kind(self) -> ActivityKind:
        return self.KIND

    @property
    def uploaded_by_id(self) -> int:
        return _link_id(self.links.uploaded_by)

    @property
    def activity_id(self) -> int:
        return _link_id(self.links.activity)

    @property
    def opportunity_id(self) -> int:
        return _link_id(self.links.opportunity)


class OpportunityActivity(ActivityRecord):
    """Shared shape of the logged activity variants."""

    type: ZeroStr = ""
    description: str | None = None
    updated_at: IsoDatetime | None = None


class OpportunityCall(OpportunityActivity):
    KIND: ClassVar[ActivityKind] = ActivityKind.CALL

    duration: ZeroInt = Field(default=0, ge=0)
    direction: str | None = None


class OpportunityEmail(OpportunityActivity):
    KIND: ClassVar[ActivityKind] = ActivityKind.EMAIL

    subject: str | None = None
    body: str | None = None


class OpportunityEvent(OpportunityActivity):
    KIND: ClassVar[ActivityKind] = ActivityKind.EVENT

    subject: str | None = None
    location: str | None = None
    starts_at: IsoDatetime | None = None
    ends_at: IsoDatetime | None = None


class OpportunityNote(OpportunityActivity):
    KIND: ClassVar[ActivityKind] = ActivityKind.NOTE

    body: str | None = None


class OpportunityTask(OpportunityActivity):
    KIND: ClassVar[ActivityKind] = ActivityKind.TASK

    subject: str | None = None
    due_at: IsoDatetime | None = None
    completed_at: IsoDatetime | None = None


class OpportunityAttachment(OpportunityActivity):
    KIND: ClassVar[ActivityKind] = ActivityKind.ATTACHMENT

    file_name: ZeroStr = ""
    content_type: ZeroStr = ""
    size: ZeroInt = Field(default=0, ge=0)
    url: ZeroStr = ""
    erased_at: IsoDatetime | None = None

    @property
    def is_erased(self) -> bool:
        return self.erased_at is not None

    @property
    def file_extension(self) -> str:
        """Text after the last '.' of the file name, upper-cased ("" if there is none)."""
        _, dot, extension = self.file_name.rpartition(".")
        return extension.upper() if dot else ""


class OpportunitySystemEvent(ActivityRecord):
    """Automated history entry (stage changes, owner changes and the like)."""

    KIND: ClassVar[ActivityKind] = ActivityKind.SYSTEM_EVENT

    event_type: str | None = None
    changes: dict[str, Any] = Field(default_factory=dict)


AnyActivityRecord = (
    OpportunityCall
    | OpportunityEmail
    | OpportunityEvent
    | OpportunityNote
    | OpportunityTask
    | OpportunityAttachment
    | OpportunitySystemEvent
)
