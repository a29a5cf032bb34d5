"""Service for the Desk users endpoint (http://dev.desk.com/API/users/)."""

from __future__ import annotations

from collections.abc import Sequence

from desk_api_client.adapters.desk.models import (
    ApiResponse,
    Filter,
    MobileDevice,
    Setting,
    SettingUpdate,
    User,
)
from desk_api_client.adapters.desk.services.base import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    ResourceService,
    fields_param,
)

USERS_URI = "users"
MOBILE_DEVICES_URI = "mobile_devices"
SETTINGS_URI = "settings"

FILTERS_URI = "filters"
COMPANY_FILTERS_URI = "company_filters"
CUSTOMER_FILTERS_URI = "customer_filters"
OPPORTUNITY_FILTERS_URI = "opportunity_filters"


class UserService(ResourceService):
    async def list(
        self, *, per_page: int = MAX_PER_PAGE, page: int = 1
    ) -> ApiResponse[User]:
        return await self._list(User, USERS_URI, per_page=per_page, page=page)

    async def current(self) -> User:
        """The user the client is authenticated as."""
        return await self._get(User, f"{USERS_URI}/current")

    async def logout_current(self) -> None:
        # Undocumented endpoint; responds with an empty body.
        await self._client._request_json("POST", f"{USERS_URI}/me/logout")

    async def get(self, user_id: int) -> User:
        return await self._get(User, f"{USERS_URI}/{user_id}")

    async def list_mobile_devices(
        self, user_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[MobileDevice]:
        return await self._list(
            MobileDevice,
            f"{USERS_URI}/{user_id}/{MOBILE_DEVICES_URI}",
            per_page=per_page,
            page=page,
        )

    async def create_mobile_device(self, device: MobileDevice) -> MobileDevice:
        """Register a device (with its push token) for the current user."""
        return await self._fetch(
            MobileDevice, "POST", f"{USERS_URI}/current/{MOBILE_DEVICES_URI}", body=device
        )

    async def delete_mobile_device(self, device_id: int) -> None:
        await self._delete(f"{USERS_URI}/current/{MOBILE_DEVICES_URI}/{device_id}")

    async def list_mobile_device_settings(
        self, user_id: int, device_id: int
    ) -> ApiResponse[Setting]:
        return await self._list(
            Setting,
            f"{USERS_URI}/{user_id}/{MOBILE_DEVICES_URI}/{device_id}/{SETTINGS_URI}",
        )

    async def update_mobile_device_setting(
        self, user_id: int, device_id: int, setting_id: int, update: SettingUpdate
    ) -> Setting:
        return await self._fetch(
            Setting,
            "PATCH",
            f"{USERS_URI}/{user_id}/{MOBILE_DEVICES_URI}/{device_id}/{SETTINGS_URI}/{setting_id}",
            body=update,
        )

    async def list_case_filters(
        self,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
        fields: Sequence[str] | None = None,
    ) -> ApiResponse[Filter]:
        return await self._current_user_filters(FILTERS_URI, per_page, page, fields)

    async def list_company_filters(
        self,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
        fields: Sequence[str] | None = None,
    ) -> ApiResponse[Filter]:
        return await self._current_user_filters(COMPANY_FILTERS_URI, per_page, page, fields)

    async def list_customer_filters(
        self,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
        fields: Sequence[str] | None = None,
    ) -> ApiResponse[Filter]:
        return await self._current_user_filters(CUSTOMER_FILTERS_URI, per_page, page, fields)

    async def list_opportunity_filters(
        self,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
        fields: Sequence[str] | None = None,
    ) -> ApiResponse[Filter]:
        return await self._current_user_filters(OPPORTUNITY_FILTERS_URI, per_page, page, fields)

    async def _current_user_filters(
        self, uri: str, per_page: int, page: int, fields: Sequence[str] | None
    ) -> ApiResponse[Filter]:
        return await self._list(
            Filter,
            f"{USERS_URI}/current/{uri}",
            per_page=per_page,
            page=page,
            params=fields_param(fields),
        )
