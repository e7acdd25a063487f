from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.dependencies import (
    get_category_repository,
    get_course_repository,
    get_feedback_repository,
    get_search_service,
)
from marketplace.core.security import Permission, SecurityManager
from marketplace.services.catalog import CategoryRepository, CourseRepository, FeedbackRepository
from marketplace.services.search import Paginator, QueryPlanner, SearchService


def compile_statement(statement: Any) -> tuple[str, dict[str, Any]]:
    """PostgreSQL 방언으로 컴파일한 SQL 과 바인드 파라미터"""
    compiled = statement.compile(dialect=postgresql.dialect())
    return str(compiled), dict(compiled.params)


class FakeSession:
    """count / page 쿼리에 미리 정한 결과를 돌려주는 세션"""

    def __init__(self, factory: "FakeSessionFactory"):
        self.factory = factory

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False

    async def execute(self, statement: Any) -> MagicMock:
        self.factory.statements.append(statement)
        if self.factory.error is not None:
            raise self.factory.error

        result = MagicMock()
        if len(statement.selected_columns) == 1:
            result.scalar.return_value = self.factory.total_count
        else:
            result.mappings.return_value.all.return_value = self.factory.rows
        return result


class FakeSessionFactory:
    def __init__(
        self,
        total_count: int = 0,
        rows: list[dict[str, Any]] | None = None,
        error: Exception | None = None,
    ):
        self.total_count = total_count
        self.rows = rows or []
        self.error = error
        self.statements: list[Any] = []
        self.opened = 0

    def __call__(self) -> FakeSession:
        self.opened += 1
        return FakeSession(self)


@pytest.fixture
def session_factory() -> Callable[..., FakeSessionFactory]:
    """FakeSessionFactory 생성 fixture"""
    return FakeSessionFactory


@pytest.fixture
def course_row() -> Callable[..., dict[str, Any]]:
    """검색 결과 행 생성 fixture"""

    def _make(course_id: int = 1, **overrides: Any) -> dict[str, Any]:
        row = {
            "course_id": course_id,
            "title": f"Course {course_id}",
            "short_description": "Short description",
            "image_url": None,
            "category_id": 3,
            "category_name": "Web Development",
            "instructor_id": 7,
            "instructor_name": "Jane Doe",
            "price": 49.99,
            "current_price": 19.99,
            "is_onsale": True,
            "rating": 4.5,
            "total_enrollment": 1200,
            "total_reviews": 85,
            "level": "Beginner",
            "latest_update": None,
        }
        row.update(overrides)
        return row

    return _make


@pytest.fixture
def mock_paginator() -> AsyncMock:
    """Mock paginator"""
    return AsyncMock(spec=Paginator)


@pytest.fixture
def search_service(mock_paginator: AsyncMock) -> SearchService:
    return SearchService(QueryPlanner(fts_config="simple"), mock_paginator)


@pytest.fixture
def mock_db() -> AsyncMock:
    """Mock database session"""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_repositories() -> dict[str, Any]:
    """Mock all repositories"""
    category_repo = AsyncMock(spec=CategoryRepository)
    category_repo.list_for_filter.return_value = [
        {"id": 3, "name": "Web Development"},
        {"id": 5, "name": "Data Science"},
    ]
    return {
        "course_repo": AsyncMock(spec=CourseRepository),
        "category_repo": category_repo,
        "feedback_repo": AsyncMock(spec=FeedbackRepository),
    }


@pytest.fixture
def test_client(search_service: SearchService, mock_repositories: dict[str, Any]) -> TestClient:
    """의존성을 mock 으로 교체한 FastAPI 테스트 클라이언트"""
    from marketplace.main import create_app

    app = create_app(use_lifespan=False)
    app.dependency_overrides[get_search_service] = lambda: search_service
    app.dependency_overrides[get_course_repository] = lambda: mock_repositories["course_repo"]
    app.dependency_overrides[get_category_repository] = lambda: mock_repositories["category_repo"]
    app.dependency_overrides[get_feedback_repository] = lambda: mock_repositories["feedback_repo"]

    return TestClient(app)


@pytest.fixture
def security_manager() -> SecurityManager:
    """Security manager fixture"""
    return SecurityManager()


@pytest.fixture
def admin_headers(security_manager: SecurityManager) -> dict[str, str]:
    token = security_manager.create_access_token(
        {"user_id": 1, "permission": int(Permission.ADMIN)}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student_headers(security_manager: SecurityManager) -> dict[str, str]:
    token = security_manager.create_access_token(
        {"user_id": 42, "permission": int(Permission.STUDENT)}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def compile_sql() -> Callable[[Any], tuple[str, dict[str, Any]]]:
    return compile_statement
