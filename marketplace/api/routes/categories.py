from fastapi import APIRouter, Depends

from marketplace.api.dependencies import get_category_repository
from marketplace.schemas.course import CategoryGroup, CategoryOption
from marketplace.services.catalog import CategoryRepository

router = APIRouter()


@router.get("", response_model=list[CategoryOption])
async def list_filter_categories(
    repo: CategoryRepository = Depends(get_category_repository),
) -> list[CategoryOption]:
    """검색 필터용 카테고리 목록"""
    return [CategoryOption(**row) for row in await repo.list_for_filter()]


@router.get("/tree", response_model=list[CategoryGroup])
async def category_tree(
    repo: CategoryRepository = Depends(get_category_repository),
) -> list[CategoryGroup]:
    """L1/L2 카테고리 계층"""
    return [CategoryGroup.model_validate(group) for group in await repo.list_tree()]
