from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal, NoReturn

import httpx
import structlog

from desk_api_client._version import __version__
from desk_api_client.adapters.desk.auth import OAuth1Auth, auth_from_settings
from desk_api_client.adapters.desk.errors import (
    AuthError,
    ClientError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from desk_api_client.adapters.desk.services.admin import (
    CustomFieldService,
    FilterService,
    GroupService,
    InboundMailboxService,
    LabelService,
    MacroService,
    OutboundMailboxService,
    PermissionService,
    SiteService,
)
from desk_api_client.adapters.desk.services.cases import CaseService
from desk_api_client.adapters.desk.services.contacts import (
    CompanyService,
    CustomerService,
    TwitterUserService,
)
from desk_api_client.adapters.desk.services.knowledge import ArticleService, TopicService
from desk_api_client.adapters.desk.services.opportunities import OpportunityService
from desk_api_client.adapters.desk.services.users import UserService
from desk_api_client.adapters.http_util import API_BASE_PATH, build_url, timeouts_for
from desk_api_client.config.settings import Settings
from desk_api_client.domain.activity_decoder import DEFAULT_CODEC, ActivityCodec

log = structlog.get_logger(__name__)

HttpMethod = Literal["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]

_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "DELETE"})


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    # "retry up to 3 times" => 1 initial attempt + 3 retries = 4 total attempts.
    max_retries: int = 3
    backoff_base_seconds: float = 0.2

    def backoff_seconds(self, attempt: int) -> float:
        # attempt is 0-based for *retry count* (i.e., after the first failure).
        return self.backoff_base_seconds * (2**attempt)


_NO_RETRY = RetryPolicy(max_retries=0)


class AsyncDeskClient:
    """
    Async client for the Desk REST API.

    One resource service per API area is created with the client and shares its
    HTTP connection pool:

        async with AsyncDeskClient(hostname="acme.desk.com", auth=ApiTokenAuth(token)) as desk:
            me = await desk.users.current()
            feed = await desk.opportunities.list_activities(42)
    """

    def __init__(
        self,
        *,
        hostname: str,
        auth: httpx.Auth,
        timeout_seconds: float = 30.0,
        verify_tls: bool = True,
        trust_env: bool = False,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        http_client: httpx.AsyncClient | None = None,
        event_hooks: Mapping[str, Sequence[Callable[..., Any]]] | None = None,
        activity_codec: ActivityCodec = DEFAULT_CODEC,
    ) -> None:
        if not hostname or not hostname.strip():
            raise ValueError("hostname must be set, e.g. acme.desk.com")

        self._hostname = hostname.strip().rstrip("/")
        self._auth = auth
        self._sleep = sleep
        self._retry = retry_policy or RetryPolicy()
        self.activity_codec = activity_codec

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.get_url(API_BASE_PATH),
            auth=auth,
            headers={
                "Accept": "application/json",
                "User-Agent": f"desk-api-client/{__version__}",
            },
            timeout=timeouts_for(timeout_seconds),
            limits=httpx.Limits(
                max_connections=10,
                max_keepalive_connections=5,
                keepalive_expiry=30.0,
            ),
            verify=verify_tls,
            trust_env=trust_env,
            follow_redirects=False,
            event_hooks={key: list(hooks) for key, hooks in (event_hooks or {}).items()},
        )

        self.users = UserService(self)
        self.sites = SiteService(self)
        self.labels = LabelService(self)
        self.custom_fields = CustomFieldService(self)
        self.groups = GroupService(self)
        self.macros = MacroService(self)
        self.outbound_mailboxes = OutboundMailboxService(self)
        self.inbound_mailboxes = InboundMailboxService(self)
        self.filters = FilterService(self)
        self.cases = CaseService(self)
        self.companies = CompanyService(self)
        self.customers = CustomerService(self)
        self.permissions = PermissionService(self)
        self.twitter_users = TwitterUserService(self)
        self.topics = TopicService(self)
        self.articles = ArticleService(self)
        self.opportunities = OpportunityService(self)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> AsyncDeskClient:
        transport = settings.transport
        return cls(
            hostname=settings.desk.hostname,
            auth=auth_from_settings(settings),
            timeout_seconds=settings.desk.timeout_seconds,
            verify_tls=settings.desk.verify_tls,
            trust_env=transport.trust_env,
            retry_policy=RetryPolicy(
                max_retries=transport.max_retries,
                backoff_base_seconds=transport.backoff_base_seconds,
            ),
            sleep=sleep,
            http_client=http_client,
        )

    @property
    def hostname(self) -> str:
        return self._hostname

    def get_url(self, path: str) -> str:
        return build_url(self._hostname, path)

    def sign_url(self, url: str) -> str:
        """Sign `url` for use outside this client (e.g. attachment downloads in a browser)."""
        if isinstance(self._auth, OAuth1Auth):
            return self._auth.sign_url(url)
        return url

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncDeskClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> None:
        await self.aclose()

    async def _request_json(
        self,
        method: HttpMethod,
        path: str,
        *,
        params: Mapping[str, str | int] | None = None,
        json: Any | None = None,
    ) -> Any:
        response = await self._request(method, path, params=params, json=json)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ClientError(
                "Invalid JSON from Desk "
                f"(status={response.status_code}) at {response.request.url!s}"
            ) from exc

    async def _request(
        self,
        method: HttpMethod,
        path: str,
        *,
        params: Mapping[str, str | int] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        # Non-idempotent requests are sent exactly once.
        retry = self._retry if method in _IDEMPOTENT_METHODS else _NO_RETRY
        max_attempts = retry.max_retries + 1
        retry_count = 0

        while True:
            try:
                response = await self._http.request(method, path, params=params, json=json)
            except httpx.TimeoutException as exc:
                retry_count = await self._retry_after_timeout_or_transport(
                    retry,
                    retry_count=retry_count,
                    max_attempts=max_attempts,
                    exc=exc,
                    path=path,
                )
                continue
            except httpx.TransportError as exc:
                retry_count = await self._retry_after_timeout_or_transport(
                    retry,
                    retry_count=retry_count,
                    max_attempts=max_attempts,
                    exc=exc,
                    path=path,
                )
                continue

            retry_delay = self._retry_delay_for_response(
                retry,
                response,
                retry_count=retry_count,
                max_attempts=max_attempts,
            )
            if retry_delay is not None:
                log.info(
                    "desk.request.retry",
                    method=method,
                    path=path,
                    status=response.status_code,
                    attempt=retry_count + 1,
                    delay_seconds=retry_delay,
                )
                await self._sleep(retry_delay)
                retry_count += 1
                continue

            if 200 <= response.status_code < 300:
                return response

            self._raise_for_status(response)

    async def _retry_after_timeout_or_transport(
        self,
        retry: RetryPolicy,
        *,
        retry_count: int,
        max_attempts: int,
        exc: Exception,
        path: str,
    ) -> int:
        if retry_count >= retry.max_retries:
            log.warning(
                "desk.request.failed",
                path=path,
                attempts=max_attempts,
                error=exc.__class__.__name__,
            )
            if isinstance(exc, httpx.TimeoutException):
                raise ServerError(
                    f"Desk API timeout after {max_attempts} attempts at {path}"
                ) from exc
            raise ServerError(f"Network error after {max_attempts} attempts at {path}") from exc
        delay = retry.backoff_seconds(retry_count)
        log.info(
            "desk.request.retry",
            path=path,
            error=exc.__class__.__name__,
            attempt=retry_count + 1,
            delay_seconds=delay,
        )
        await self._sleep(delay)
        return retry_count + 1

    def _retry_delay_for_response(
        self,
        retry: RetryPolicy,
        response: httpx.Response,
        *,
        retry_count: int,
        max_attempts: int,
    ) -> float | None:
        status = response.status_code
        if status >= 500:
            if retry_count >= retry.max_retries:
                raise ServerError(
                    f"Desk server error (status={status}) after {max_attempts} attempts"
                )
            return retry.backoff_seconds(retry_count)
        if status == 429:
            if retry_count >= retry.max_retries:
                raise RateLimitError(
                    f"Desk rate limit (status=429) after {max_attempts} attempts"
                )
            retry_after = _parse_retry_after_seconds(response.headers.get("Retry-After"))
            return retry_after or retry.backoff_seconds(retry_count)
        return None

    def _raise_for_status(self, response: httpx.Response) -> NoReturn:
        status = response.status_code
        # Signed URLs carry credentials in the query string.
        url = str(response.request.url).split("?", 1)[0]

        if status in (401, 403):
            raise AuthError(f"Desk auth failed (status={status}) at {url}")
        if status == 404:
            raise NotFoundError(f"Desk resource not found (status=404) at {url}")
        if status == 429:
            raise RateLimitError(f"Desk rate limit (status=429) at {url}")
        if status >= 500:
            raise ServerError(f"Desk server error (status={status}) at {url}")
        if status >= 400:
            raise ClientError(f"Desk client error (status={status}) at {url}")

        raise ClientError(f"Unexpected Desk HTTP status={status} at {url}")


def _parse_retry_after_seconds(value: str | None) -> float | None:
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    if seconds < 0:
        return None
    return seconds
