"""Site configuration endpoints: sites, labels, custom fields, groups, macros,
mailboxes, permissions and case filters."""

from __future__ import annotations

from desk_api_client.adapters.desk.models import (
    ApiResponse,
    Case,
    CustomField,
    Filter,
    Group,
    Label,
    Macro,
    MacroAction,
    Mailbox,
    Permission,
    Site,
    SiteBilling,
    User,
)
from desk_api_client.adapters.desk.services.base import (
    DEFAULT_PER_PAGE,
    Body,
    ResourceService,
)


class SiteService(ResourceService):
    async def get_current(self) -> Site:
        return await self._get(Site, "sites/current")

    async def get_billing(self) -> SiteBilling:
        return await self._get(SiteBilling, "sites/current/billing")


class LabelService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Label]:
        return await self._list(Label, "labels", per_page=per_page, page=page)

    async def get(self, label_id: int) -> Label:
        return await self._get(Label, f"labels/{label_id}")

    async def create(self, label: Body) -> Label:
        return await self._fetch(Label, "POST", "labels", body=label)

    async def update(self, label_id: int, changes: Body) -> Label:
        return await self._fetch(Label, "PATCH", f"labels/{label_id}", body=changes)

    async def delete(self, label_id: int) -> None:
        await self._delete(f"labels/{label_id}")


class CustomFieldService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[CustomField]:
        return await self._list(CustomField, "custom_fields", per_page=per_page, page=page)

    async def get(self, field_id: int) -> CustomField:
        return await self._get(CustomField, f"custom_fields/{field_id}")


class GroupService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Group]:
        return await self._list(Group, "groups", per_page=per_page, page=page)

    async def get(self, group_id: int) -> Group:
        return await self._get(Group, f"groups/{group_id}")

    async def list_users(
        self, group_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[User]:
        return await self._list(User, f"groups/{group_id}/users", per_page=per_page, page=page)

    async def list_filters(
        self, group_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Filter]:
        return await self._list(
            Filter, f"groups/{group_id}/filters", per_page=per_page, page=page
        )


class MacroService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Macro]:
        return await self._list(Macro, "macros", per_page=per_page, page=page)

    async def get(self, macro_id: int) -> Macro:
        return await self._get(Macro, f"macros/{macro_id}")

    async def list_actions(
        self, macro_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[MacroAction]:
        return await self._list(
            MacroAction, f"macros/{macro_id}/actions", per_page=per_page, page=page
        )


class _MailboxService(ResourceService):
    _uri: str

    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Mailbox]:
        return await self._list(Mailbox, self._uri, per_page=per_page, page=page)

    async def get(self, mailbox_id: int) -> Mailbox:
        return await self._get(Mailbox, f"{self._uri}/{mailbox_id}")


class OutboundMailboxService(_MailboxService):
    _uri = "mailboxes/outbound"


class InboundMailboxService(_MailboxService):
    _uri = "mailboxes/inbound"


class PermissionService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Permission]:
        return await self._list(Permission, "permissions", per_page=per_page, page=page)


class FilterService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Filter]:
        return await self._list(Filter, "filters", per_page=per_page, page=page)

    async def get(self, filter_id: int) -> Filter:
        return await self._get(Filter, f"filters/{filter_id}")

    async def list_cases(
        self, filter_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Case]:
        return await self._list(Case, f"filters/{filter_id}/cases", per_page=per_page, page=page)
