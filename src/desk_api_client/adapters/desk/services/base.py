from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from desk_api_client.adapters.desk.errors import ClientError
from desk_api_client.adapters.desk.models import ApiResponse

if TYPE_CHECKING:
    from desk_api_client.adapters.desk.client import AsyncDeskClient, HttpMethod

_M = TypeVar("_M", bound=BaseModel)

MAX_PER_PAGE = 100
DEFAULT_PER_PAGE = 50

Body = BaseModel | Mapping[str, Any]


def page_params(per_page: int, page: int) -> dict[str, str | int]:
    if page < 1:
        raise ValueError("page is 1-based")
    return {"per_page": max(1, min(per_page, MAX_PER_PAGE)), "page": page}


def fields_param(fields: Sequence[str] | None) -> dict[str, str]:
    if not fields:
        return {}
    return {"fields": ",".join(fields)}


def dump_body(body: Body) -> dict[str, Any]:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(body)


class ResourceService:
    """Base for the per-endpoint service handles hanging off AsyncDeskClient."""

    def __init__(self, client: AsyncDeskClient) -> None:
        self._client = client

    async def _fetch(
        self,
        model: type[_M],
        method: HttpMethod,
        path: str,
        *,
        params: Mapping[str, str | int] | None = None,
        body: Body | None = None,
    ) -> _M:
        resp = await self._client._request_json(
            method,
            path,
            params=params,
            json=dump_body(body) if body is not None else None,
        )
        return _validate(model, resp, path)

    async def _get(
        self, model: type[_M], path: str, *, params: Mapping[str, str | int] | None = None
    ) -> _M:
        return await self._fetch(model, "GET", path, params=params)

    async def _list(
        self,
        model: type[_M],
        path: str,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
        params: Mapping[str, str | int] | None = None,
    ) -> ApiResponse[_M]:
        query: dict[str, str | int] = dict(params or {})
        query.update(page_params(per_page, page))
        resp = await self._client._request_json("GET", path, params=query)
        return _validate(ApiResponse[model], resp, path)  # type: ignore[valid-type]

    async def _list_raw(
        self, path: str, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[dict[str, Any]]:
        resp = await self._client._request_json("GET", path, params=page_params(per_page, page))
        return _validate(ApiResponse[dict[str, Any]], resp, path)

    async def _delete(self, path: str) -> None:
        await self._client._request_json("DELETE", path)


def _validate(model: Any, data: Any, path: str) -> Any:
    try:
        return TypeAdapter(model).validate_python(data)
    except ValidationError as exc:
        raise ClientError(f"Desk response format unexpected at {path}: {exc!s}") from exc
