from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from desk_api_client.domain.activities import (
    ActivityKind,
    OpportunityAttachment,
    OpportunityCall,
    OpportunityEmail,
    OpportunityEvent,
    OpportunityNote,
    OpportunitySystemEvent,
    OpportunityTask,
)
from desk_api_client.domain.activity_decoder import (
    DEFAULT_CODEC,
    ActivityCodec,
    classify_activity,
    decode_activities,
    decode_activity,
)
from desk_api_client.domain.errors import ActivityDecodeError


def _entry(clazz: str | None, activity_type: str | None = None, **fields: Any) -> dict[str, Any]:
    self_link: dict[str, Any] = {"href": "/api/v2/opportunities/7/activities/1"}
    if clazz is not None:
        self_link["class"] = clazz
    entry: dict[str, Any] = {"_links": {"self": self_link}, **fields}
    if activity_type is not None:
        entry["type"] = activity_type
    return entry


@pytest.mark.parametrize(
    "payload",
    [
        None,
        "call",
        42,
        ["_links"],
        {},
        {"type": "call"},
        {"_links": None, "type": "call"},
        {"_links": {}, "type": "call"},
        {"_links": {"self": "history"}, "type": "call"},
    ],
)
def test_structurally_incomplete_payloads_decode_to_none(payload: Any) -> None:
    assert classify_activity(payload) is None
    assert decode_activity(payload) is None


@pytest.mark.parametrize("clazz", ["history", "History", "HISTORY"])
@pytest.mark.parametrize("activity_type", [None, "call", "opportunity_attachment", "bogus"])
def test_history_class_always_decodes_to_system_event(
    clazz: str, activity_type: str | None
) -> None:
    record = decode_activity(
        _entry(clazz, activity_type, id=5, event_type="stage_changed", changes={"stage": "won"})
    )

    assert isinstance(record, OpportunitySystemEvent)
    assert record.kind is ActivityKind.SYSTEM_EVENT
    assert record.id == 5
    assert record.event_type == "stage_changed"
    assert record.changes == {"stage": "won"}


@pytest.mark.parametrize(
    ("activity_type", "expected"),
    [
        ("call", OpportunityCall),
        ("CALL", OpportunityCall),
        ("email", OpportunityEmail),
        ("Event", OpportunityEvent),
        ("note", OpportunityNote),
        ("tAsK", OpportunityTask),
        ("opportunity_attachment", OpportunityAttachment),
        ("OPPORTUNITY_ATTACHMENT", OpportunityAttachment),
    ],
)
def test_type_selects_variant_for_non_history_class(
    activity_type: str, expected: type[Any]
) -> None:
    record = decode_activity(_entry("opportunity_activity", activity_type, id=11))
    assert type(record) is expected
    assert record is not None and record.id == 11


def test_missing_class_falls_through_to_type() -> None:
    assert classify_activity(_entry(None, "note")) is ActivityKind.NOTE


@pytest.mark.parametrize("activity_type", [None, "unknown_kind", "attachment", "", 3])
def test_unknown_type_decodes_to_none(activity_type: Any) -> None:
    entry = _entry("opportunity_activity")
    if activity_type is not None:
        entry["type"] = activity_type
    assert decode_activity(entry) is None


def test_call_fields_are_populated() -> None:
    record = decode_activity(
        _entry(
            "opportunity_activity",
            "call",
            id=3,
            description="Discussed renewal",
            duration=300,
            direction="outbound",
            created_at="2024-03-01T10:15:00Z",
            unknown_field="ignored",
        )
    )

    assert isinstance(record, OpportunityCall)
    assert record.type == "call"
    assert record.description == "Discussed renewal"
    assert record.duration == 300
    assert record.direction == "outbound"
    assert record.created_at == datetime(2024, 3, 1, 10, 15, tzinfo=UTC)


def test_attachment_is_decoded_with_extension_and_relations() -> None:
    entry = _entry(
        "attachment",
        "opportunity_attachment",
        id=9,
        file_name="invoice.PDF",
        content_type="application/pdf",
        size=2048,
        url="https://files.example/invoice.PDF",
        created_at="2024-03-01T10:15:00+01:00",
    )
    entry["_links"]["uploaded_by"] = {"href": "/api/v2/users/42", "class": "user", "id": 42}
    entry["_links"]["opportunity"] = {"href": "/api/v2/opportunities/7", "class": "opportunity"}

    record = decode_activity(entry)

    assert isinstance(record, OpportunityAttachment)
    assert record.file_extension == "PDF"
    assert record.content_type == "application/pdf"
    assert record.size == 2048
    assert record.erased_at is None
    assert record.is_erased is False
    assert record.uploaded_by_id == 42
    assert record.opportunity_id == 7
    assert record.activity_id == 0


def test_attachment_missing_fields_take_zero_values() -> None:
    record = decode_activity(_entry("attachment", "opportunity_attachment"))

    assert isinstance(record, OpportunityAttachment)
    assert record.file_name == ""
    assert record.content_type == ""
    assert record.size == 0
    assert record.url == ""
    assert record.file_extension == ""
    assert record.uploaded_by_id == 0


def test_decoding_same_input_twice_gives_equal_records() -> None:
    entry = _entry(
        "attachment",
        "opportunity_attachment",
        file_name="report.xlsx",
        erased_at="2024-05-05T00:00:00Z",
    )
    first = decode_activity(entry)
    second = decode_activity(entry)

    assert first == second
    assert first is not second


def test_non_iso_timestamp_raises_decode_error() -> None:
    entry = _entry("opportunity_activity", "task", due_at="next tuesday")

    with pytest.raises(ActivityDecodeError) as exc:
        decode_activity(entry)

    assert exc.value.kind is ActivityKind.TASK
    assert "due_at" in str(exc.value)


def test_epoch_timestamp_is_not_coerced() -> None:
    entry = _entry("opportunity_activity", "note", created_at=1700000000)

    with pytest.raises(ActivityDecodeError):
        decode_activity(entry)


def test_negative_attachment_size_raises_decode_error() -> None:
    with pytest.raises(ActivityDecodeError):
        decode_activity(_entry("attachment", "opportunity_attachment", size=-1))


def test_decode_activities_skips_unknown_entries() -> None:
    entries = [
        _entry("opportunity_activity", "note", id=1, body="hello"),
        _entry("opportunity_activity", "fax", id=2),
        {"type": "call"},
        _entry("history", id=4),
    ]

    records = decode_activities(entries, DEFAULT_CODEC)

    assert [(r.kind, r.id) for r in records] == [
        (ActivityKind.NOTE, 1),
        (ActivityKind.SYSTEM_EVENT, 4),
    ]


def test_codec_requires_a_schema_for_every_kind() -> None:
    with pytest.raises(ValueError, match="CALL"):
        ActivityCodec(schemas={ActivityKind.NOTE: OpportunityNote})


def test_codec_schemas_are_read_only() -> None:
    codec = ActivityCodec(schemas=dict(DEFAULT_CODEC.schemas))

    with pytest.raises(TypeError):
        codec.schemas[ActivityKind.CALL] = OpportunityNote  # type: ignore[index]


def test_decoded_records_are_frozen() -> None:
    record = decode_activity(_entry("opportunity_activity", "note", body="x"))
    assert record is not None

    with pytest.raises(Exception):
        record.id = 99  # type: ignore[misc]


@pytest.mark.parametrize(
    ("field", "zero"),
    [
        ("id", 0),
        ("type", ""),
        ("file_name", ""),
        ("content_type", ""),
        ("size", 0),
        ("url", ""),
    ],
)
def test_json_null_in_attachment_field_decodes_to_zero_value(field: str, zero: Any) -> None:
    entry = _entry("attachment", "opportunity_attachment", file_name="a.pdf")
    entry[field] = None
    if field == "type":
        # The classifier reads `type` first, so decode against the schema directly.
        record = DEFAULT_CODEC.decode(ActivityKind.ATTACHMENT, entry)
    else:
        record = decode_activity(entry)

    assert isinstance(record, OpportunityAttachment)
    assert getattr(record, field) == zero


def test_null_file_name_has_no_extension() -> None:
    record = decode_activity(_entry("attachment", "opportunity_attachment", file_name=None))

    assert isinstance(record, OpportunityAttachment)
    assert record.file_extension == ""


def test_null_call_duration_decodes_to_zero() -> None:
    record = decode_activity(_entry("opportunity_activity", "call", duration=None))

    assert isinstance(record, OpportunityCall)
    assert record.duration == 0


def test_null_fields_in_feed_do_not_abort_the_page() -> None:
    entries = [
        _entry("attachment", "opportunity_attachment", id=1, url=None, size=None),
        _entry("opportunity_activity", "note", id=None, body=None),
    ]

    records = decode_activities(entries, DEFAULT_CODEC)

    assert [(r.kind, r.id) for r in records] == [
        (ActivityKind.ATTACHMENT, 1),
        (ActivityKind.NOTE, 0),
    ]


@pytest.mark.parametrize(("clazz", "expected"), [(5, "5"), (True, "true"), ([1], None)])
def test_non_string_class_falls_through_to_type_and_decodes(clazz: Any, expected: Any) -> None:
    entry = {"_links": {"self": {"class": clazz}}, "type": "call", "id": 8}

    assert classify_activity(entry) is ActivityKind.CALL
    record = decode_activity(entry)
    assert isinstance(record, OpportunityCall)
    assert record.links.self_ is not None
    assert record.links.self_.class_ == expected
