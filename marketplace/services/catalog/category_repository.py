from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.models.course import CategoryL1, CategoryL2, Course


class CategoryRepository:
    """카테고리 관련 데이터 접근 객체"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_filter(self) -> list[dict[str, Any]]:
        """검색 필터용 L2 카테고리 목록 (이름순)"""
        result = await self.db.execute(
            select(CategoryL2.id, CategoryL2.category_name.label("name")).order_by(
                CategoryL2.category_name.asc()
            )
        )
        return [dict(row) for row in result.mappings().all()]

    async def list_tree(self) -> list[dict[str, Any]]:
        """L1 -> L2 계층과 L2 별 강좌 수"""
        result = await self.db.execute(
            select(
                CategoryL1.id.label("parent_id"),
                CategoryL1.category_name.label("parent_name"),
                CategoryL2.id,
                CategoryL2.category_name.label("name"),
                func.count(Course.course_id).label("course_count"),
            )
            .join(CategoryL2, CategoryL2.categoryL1_id == CategoryL1.id)
            .outerjoin(Course, Course.category_id == CategoryL2.id)
            .group_by(CategoryL1.id, CategoryL1.category_name, CategoryL2.id)
            .order_by(CategoryL1.id.asc(), CategoryL2.id.asc())
        )

        tree: dict[int, dict[str, Any]] = {}
        for row in result.mappings().all():
            parent = tree.setdefault(
                row["parent_id"],
                {"id": row["parent_id"], "name": row["parent_name"], "topics": []},
            )
            parent["topics"].append(
                {"id": row["id"], "name": row["name"], "course_count": int(row["course_count"])}
            )
        return list(tree.values())
