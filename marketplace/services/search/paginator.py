import asyncio
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketplace.services.search.planner import PlannedQuery
from marketplace.services.search.query import SearchResult

logger = logging.getLogger(__name__)


class Paginator:
    """계획된 count/page 쿼리를 실행하고 페이지 메타데이터를 계산

    두 쿼리는 서로 독립적이므로 각각 별도 세션에서 동시에 실행한다.
    한쪽이 실패하면 나머지 쿼리는 취소되고 첫 번째 오류가 그대로 전달된다.
    페이지 범위를 벗어난 요청은 보정하지 않고 빈 페이지를 돌려준다.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def count(self, planned: PlannedQuery) -> int:
        async with self.session_factory() as session:
            result = await session.execute(planned.count_statement())
            return int(result.scalar() or 0)

    async def fetch_page(
        self, planned: PlannedQuery, limit: int, offset: int
    ) -> list[dict[str, Any]]:
        async with self.session_factory() as session:
            result = await session.execute(planned.page_statement(limit=limit, offset=offset))
            return [dict(row) for row in result.mappings().all()]

    async def paginate(self, planned: PlannedQuery, page: int, page_size: int) -> SearchResult:
        offset = (page - 1) * page_size
        try:
            async with asyncio.TaskGroup() as group:
                count_task = group.create_task(self.count(planned))
                page_task = group.create_task(
                    self.fetch_page(planned, limit=page_size, offset=offset)
                )
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from eg

        total_count = count_task.result()
        items = page_task.result()
        logger.debug(f"Paginated query: page={page} offset={offset} total={total_count}")
        return SearchResult(
            items=items,
            total_count=total_count,
            current_page=page,
            page_size=page_size,
        )
