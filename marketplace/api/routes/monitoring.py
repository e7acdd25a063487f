import logging

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.infrastructure.database import DATA_STORE_ERRORS, get_async_db

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/metrics")
async def get_metrics() -> Response:
    """Prometheus 메트릭 엔드포인트"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health")
async def health_check() -> dict[str, str]:
    """헬스 체크"""
    return {"status": "healthy", "service": "course-marketplace"}


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_async_db)) -> dict[str, str]:
    """준비 상태 체크 (데이터베이스 연결)"""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "ready", "service": "course-marketplace"}
    except DATA_STORE_ERRORS as e:
        logger.warning(f"Readiness check failed: {e}")
        return {"status": "not_ready", "error": str(e)}
