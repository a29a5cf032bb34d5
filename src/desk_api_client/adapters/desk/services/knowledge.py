from __future__ import annotations

from desk_api_client.adapters.desk.models import ApiResponse, Article, Topic
from desk_api_client.adapters.desk.services.base import DEFAULT_PER_PAGE, ResourceService


class TopicService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Topic]:
        return await self._list(Topic, "topics", per_page=per_page, page=page)

    async def get(self, topic_id: int) -> Topic:
        return await self._get(Topic, f"topics/{topic_id}")

    async def list_articles(
        self, topic_id: int, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Article]:
        return await self._list(
            Article, f"topics/{topic_id}/articles", per_page=per_page, page=page
        )


class ArticleService(ResourceService):
    async def list(
        self, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Article]:
        return await self._list(Article, "articles", per_page=per_page, page=page)

    async def get(self, article_id: int) -> Article:
        return await self._get(Article, f"articles/{article_id}")

    async def search(
        self, text: str, *, per_page: int = DEFAULT_PER_PAGE, page: int = 1
    ) -> ApiResponse[Article]:
        return await self._list(
            Article, "articles/search", per_page=per_page, page=page, params={"text": text}
        )
