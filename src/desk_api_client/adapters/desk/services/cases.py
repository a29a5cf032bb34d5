"""Service for the Desk cases endpoint (http://dev.desk.com/API/cases/)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from desk_api_client.adapters.desk.models import (
    ApiResponse,
    Case,
    CaseAttachment,
    CaseHistoryEvent,
    Message,
    Note,
)
from desk_api_client.adapters.desk.services.base import (
    DEFAULT_PER_PAGE,
    Body,
    ResourceService,
    fields_param,
)

CASES_URI = "cases"


class CaseService(ResourceService):
    async def list(
        self,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
        fields: Sequence[str] | None = None,
    ) -> ApiResponse[Case]:
        return await self._list(
            Case, CASES_URI, per_page=per_page, page=page, params=fields_param(fields)
        )

    async def search(
        self,
        criteria: Mapping[str, str | int],
        *,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
    ) -> ApiResponse[Case]:
        """Search cases, e.g. `search({"status": "open", "labels": "vip"})`."""
        return await self._list(
            Case, f"{CASES_URI}/search", per_page=per_page, page=page, params=criteria
        )

    async def get(self, case_id: int, *, fields: Sequence[str] | None = None) -> Case:
        return await self._get(Case, f"{CASES_URI}/{case_id}", params=fields_param(fields))

    async def create(self, case: Body) -> Case:
        return await self._fetch(Case, "POST", CASES_URI, body=case)

    async def update(self, case_id: int, changes: Body) -> Case:
        return await self._fetch(Case, "PATCH", f"{CASES_URI}/{case_id}", body=changes)

    async def delete(self, case_id: int) -> None:
        await self._delete(f"{CASES_URI}/{case_id}")

    async def get_message(self, case_id: int) -> Message:
        """The original inbound (or outbound) message that opened the case."""
        return await self._get(Message, f"{CASES_URI}/{case_id}/message")

    async def list_replies(
        self, case_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Message]:
        return await self._list(
            Message, f"{CASES_URI}/{case_id}/replies", per_page=per_page, page=page
        )

    async def create_reply(self, case_id: int, reply: Body) -> Message:
        return await self._fetch(Message, "POST", f"{CASES_URI}/{case_id}/replies", body=reply)

    async def list_notes(
        self, case_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Note]:
        return await self._list(Note, f"{CASES_URI}/{case_id}/notes", per_page=per_page, page=page)

    async def create_note(self, case_id: int, body: str) -> Note:
        return await self._fetch(
            Note, "POST", f"{CASES_URI}/{case_id}/notes", body=Note(body=body)
        )

    async def list_attachments(
        self, case_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[CaseAttachment]:
        return await self._list(
            CaseAttachment, f"{CASES_URI}/{case_id}/attachments", per_page=per_page, page=page
        )

    async def list_history(
        self, case_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[CaseHistoryEvent]:
        return await self._list(
            CaseHistoryEvent, f"{CASES_URI}/{case_id}/history", per_page=per_page, page=page
        )
