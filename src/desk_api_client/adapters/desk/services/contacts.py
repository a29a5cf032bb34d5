"""Companies, customers and twitter users."""

from __future__ import annotations

from collections.abc import Mapping

from desk_api_client.adapters.desk.models import (
    ApiResponse,
    Case,
    Company,
    Customer,
    TwitterUser,
)
from desk_api_client.adapters.desk.services.base import (
    DEFAULT_PER_PAGE,
    Body,
    ResourceService,
)


class CompanyService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Company]:
        return await self._list(Company, "companies", per_page=per_page, page=page)

    async def search(
        self, query: str, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Company]:
        return await self._list(
            Company, "companies/search", per_page=per_page, page=page, params={"q": query}
        )

    async def get(self, company_id: int) -> Company:
        return await self._get(Company, f"companies/{company_id}")

    async def create(self, company: Body) -> Company:
        return await self._fetch(Company, "POST", "companies", body=company)

    async def update(self, company_id: int, changes: Body) -> Company:
        return await self._fetch(Company, "PATCH", f"companies/{company_id}", body=changes)

    async def list_cases(
        self, company_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Case]:
        return await self._list(
            Case, f"companies/{company_id}/cases", per_page=per_page, page=page
        )


class CustomerService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Customer]:
        return await self._list(Customer, "customers", per_page=per_page, page=page)

    async def search(
        self,
        criteria: Mapping[str, str | int],
        *,
        per_page: int = DEFAULT_PER_PAGE,
        page: int = 1,
    ) -> ApiResponse[Customer]:
        """Search customers, e.g. `search({"email": "jane@example.com"})`."""
        return await self._list(
            Customer, "customers/search", per_page=per_page, page=page, params=criteria
        )

    async def get(self, customer_id: int) -> Customer:
        return await self._get(Customer, f"customers/{customer_id}")

    async def create(self, customer: Body) -> Customer:
        return await self._fetch(Customer, "POST", "customers", body=customer)

    async def update(self, customer_id: int, changes: Body) -> Customer:
        return await self._fetch(Customer, "PATCH", f"customers/{customer_id}", body=changes)

    async def list_cases(
        self, customer_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Case]:
        return await self._list(
            Case, f"customers/{customer_id}/cases", per_page=per_page, page=page
        )


class TwitterUserService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[TwitterUser]:
        return await self._list(TwitterUser, "twitter_users", per_page=per_page, page=page)

    async def get(self, twitter_user_id: int) -> TwitterUser:
        return await self._get(TwitterUser, f"twitter_users/{twitter_user_id}")
