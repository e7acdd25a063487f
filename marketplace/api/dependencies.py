import logging
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketplace.core.security import Permission, SecurityManager, get_security_manager
from marketplace.infrastructure.database import get_async_db, get_session_factory
from marketplace.services.catalog import CategoryRepository, CourseRepository, FeedbackRepository
from marketplace.services.search import Paginator, QueryPlanner, SearchService

logger = logging.getLogger(__name__)

# JWT Bearer 인증 스킴
security_scheme = HTTPBearer(auto_error=False)


def get_query_planner() -> QueryPlanner:
    return QueryPlanner()


def get_paginator(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> Paginator:
    return Paginator(session_factory)


def get_search_service(
    planner: QueryPlanner = Depends(get_query_planner),
    paginator: Paginator = Depends(get_paginator),
) -> SearchService:
    """검색 서비스 의존성 주입"""
    return SearchService(planner, paginator)


def get_course_repository(db: AsyncSession = Depends(get_async_db)) -> CourseRepository:
    return CourseRepository(db)


def get_category_repository(db: AsyncSession = Depends(get_async_db)) -> CategoryRepository:
    return CategoryRepository(db)


def get_feedback_repository(db: AsyncSession = Depends(get_async_db)) -> FeedbackRepository:
    return FeedbackRepository(db)


async def get_token_payload(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    security: SecurityManager = Depends(get_security_manager),
) -> dict[str, Any]:
    """Bearer 토큰 검증 후 payload 반환"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = security.verify_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


async def get_current_admin(
    payload: dict[str, Any] = Depends(get_token_payload),
) -> dict[str, Any]:
    """관리자 권한 (permission == 0) 확인"""
    try:
        permission = int(payload.get("permission", -1))
    except (TypeError, ValueError):
        permission = -1

    if permission != Permission.ADMIN:
        logger.warning(f"Admin access denied for user {payload.get('user_id')}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return payload
