from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from desk_api_client.domain.activities import ActivityKind


class ActivityDecodeError(ValueError):
    """A classified activity payload has a field that cannot be coerced to its schema."""

    def __init__(self, kind: ActivityKind, detail: str) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"Cannot decode {kind.name.lower()} activity: {detail}")
