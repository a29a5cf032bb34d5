from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from desk_api_client.domain.activities import IsoDatetime, Link

_T = TypeVar("_T")


class _DeskModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PageLinks(_DeskModel):
    self_: Link | None = Field(default=None, alias="self")
    first: Link | None = None
    last: Link | None = None
    previous: Link | None = None
    next: Link | None = None


class Embedded(_DeskModel, Generic[_T]):
    entries: list[_T] = Field(default_factory=list)


class ApiResponse(_DeskModel, Generic[_T]):
    """One page of a Desk collection endpoint."""

    total_entries: int = 0
    page: int = 1
    links: PageLinks = Field(default_factory=PageLinks, alias="_links")
    embedded: Embedded[_T] = Field(default_factory=Embedded, alias="_embedded")

    @property
    def entries(self) -> list[_T]:
        return self.embedded.entries

    @property
    def has_next_page(self) -> bool:
        return self.links.next is not None


class User(_DeskModel):
    id: int
    name: str | None = None
    public_name: str | None = None
    email: str | None = None
    email_verified: bool = False
    avatar: str | None = None
    level: str | None = None
    created_at: IsoDatetime | None = None
    updated_at: IsoDatetime | None = None
    current_login_at: IsoDatetime | None = None
    last_login_at: IsoDatetime | None = None


class MobileDevice(_DeskModel):
    id: int | None = None
    token: str | None = None
    name: str | None = None
    os_version: str | None = None
    app_version: str | None = None
    created_at: IsoDatetime | None = None


class Setting(_DeskModel):
    id: int
    name: str | None = None
    value: Any = None


class SettingUpdate(_DeskModel):
    value: Any


class Filter(_DeskModel):
    id: int
    name: str | None = None
    position: int | None = None
    active: bool = True
    sort_field: str | None = None
    sort_direction: str | None = None
    routing_enabled: bool = False


class Site(_DeskModel):
    id: int
    name: str | None = None
    subdomain: str | None = None
    created_at: IsoDatetime | None = None


class SiteBilling(_DeskModel):
    plan: str | None = None
    seats: int = 0
    billing_period: str | None = None
    trial_ends_at: IsoDatetime | None = None


class Label(_DeskModel):
    id: int | None = None
    name: str
    description: str | None = None
    types: list[str] = Field(default_factory=list)
    active: bool = True
    position: int | None = None
    color: str | None = None


class CustomField(_DeskModel):
    id: int
    name: str | None = None
    label: str | None = None
    type: str | None = None
    active: bool = True
    data: dict[str, Any] = Field(default_factory=dict)


class Group(_DeskModel):
    id: int
    name: str | None = None


class Macro(_DeskModel):
    id: int
    name: str | None = None
    description: str | None = None
    enabled: bool = True
    position: int | None = None
    folders: list[str] = Field(default_factory=list)


class MacroAction(_DeskModel):
    type: str | None = None
    value: Any = None
    enabled: bool = True


class Mailbox(_DeskModel):
    id: int
    name: str | None = None
    email: str | None = None
    enabled: bool = True
    created_at: IsoDatetime | None = None
    updated_at: IsoDatetime | None = None


class Case(_DeskModel):
    id: int | None = None
    external_id: str | None = None
    subject: str | None = None
    blurb: str | None = None
    description: str | None = None
    priority: int | None = None
    status: str | None = None
    type: str | None = None
    labels: list[str] = Field(default_factory=list)
    language: str | None = None
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    received_at: IsoDatetime | None = None
    created_at: IsoDatetime | None = None
    updated_at: IsoDatetime | None = None
    resolved_at: IsoDatetime | None = None


class Message(_DeskModel):
    id: int | None = None
    direction: str | None = None
    status: str | None = None
    subject: str | None = None
    body: str | None = None
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    cc: str | None = None
    created_at: IsoDatetime | None = None
    updated_at: IsoDatetime | None = None


class Note(_DeskModel):
    id: int | None = None
    body: str
    created_at: IsoDatetime | None = None


class CaseAttachment(_DeskModel):
    id: int
    file_name: str | None = None
    content_type: str | None = None
    size: int = 0
    url: str | None = None
    created_at: IsoDatetime | None = None


class CaseHistoryEvent(_DeskModel):
    id: int
    type: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)
    created_at: IsoDatetime | None = None


class Company(_DeskModel):
    id: int | None = None
    name: str
    domains: list[str] = Field(default_factory=list)
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    created_at: IsoDatetime | None = None
    updated_at: IsoDatetime | None = None


class ContactDetail(_DeskModel):
    type: str | None = None
    value: str


class Customer(_DeskModel):
    id: int | None = None
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    title: str | None = None
    background: str | None = None
    language: str | None = None
    emails: list[ContactDetail] = Field(default_factory=list)
    phone_numbers: list[ContactDetail] = Field(default_factory=list)
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    created_at: IsoDatetime | None = None
    updated_at: IsoDatetime | None = None


class Permission(_DeskModel):
    name: str
    description: str | None = None


class TwitterUser(_DeskModel):
    id: int
    handle: str | None = None
    name: str | None = None
    followers_count: int = 0
    verified: bool = False
    image_url: str | None = None


class Topic(_DeskModel):
    id: int
    name: str | None = None
    description: str | None = None
    position: int | None = None
    allow_questions: bool = False
    in_support_center: bool = False


class Article(_DeskModel):
    id: int
    subject: str | None = None
    body: str | None = None
    keywords: str | None = None
    position: int | None = None
    quickcode: str | None = None
    in_support_center: bool = False
    publish_at: IsoDatetime | None = None
    created_at: IsoDatetime | None = None
    updated_at: IsoDatetime | None = None


class Opportunity(_DeskModel):
    id: int
    name: str | None = None
    amount: float | None = None
    probability: int | None = None
    stage: str | None = None
    expected_close_at: IsoDatetime | None = None
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    created_at: IsoDatetime | None = None
    updated_at: IsoDatetime | None = None
