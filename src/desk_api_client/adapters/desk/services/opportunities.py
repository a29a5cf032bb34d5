"""Service for Desk opportunities and their activity feed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

from desk_api_client.adapters.desk.models import ApiResponse, Opportunity
from desk_api_client.adapters.desk.services.base import DEFAULT_PER_PAGE, ResourceService
from desk_api_client.domain.activities import (
    ActivityKind,
    ActivityRecord,
    OpportunityAttachment,
)
from desk_api_client.domain.activity_decoder import decode_activities

OPPORTUNITIES_URI = "opportunities"


@dataclass(frozen=True, slots=True)
class ActivityFeed:
    """One decoded page of an opportunity's activity feed."""

    total_entries: int
    page: int
    records: tuple[ActivityRecord, ...]
    # Entries whose variant could not be determined.
    skipped: int
    has_next_page: bool


class OpportunityService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Opportunity]:
        return await self._list(Opportunity, OPPORTUNITIES_URI, per_page=per_page, page=page)

    async def get(self, opportunity_id: int) -> Opportunity:
        return await self._get(Opportunity, f"{OPPORTUNITIES_URI}/{opportunity_id}")

    async def list_activities(
        self, opportunity_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ActivityFeed:
        """
        Fetch one page of the activity feed and decode every entry to its variant.

        Entries of unknown kind are dropped and counted in `skipped`; entries of a
        known kind with malformed fields raise ActivityDecodeError.
        """
        raw = await self._list_raw(
            f"{OPPORTUNITIES_URI}/{opportunity_id}/activities", per_page=per_page, page=page
        )
        records = decode_activities(raw.entries, self._client.activity_codec)
        return ActivityFeed(
            total_entries=raw.total_entries,
            page=raw.page,
            records=tuple(records),
            skipped=len(raw.entries) - len(records),
            has_next_page=raw.has_next_page,
        )

    async def list_attachments(
        self, opportunity_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> list[OpportunityAttachment]:
        raw = await self._list_raw(
            f"{OPPORTUNITIES_URI}/{opportunity_id}/attachments", per_page=per_page, page=page
        )
        codec = self._client.activity_codec
        return [
            cast(OpportunityAttachment, codec.decode(ActivityKind.ATTACHMENT, entry))
            for entry in raw.entries
        ]
