import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from marketplace.api.middleware import LoggingMiddleware, MetricsMiddleware
from marketplace.api.routes.admin import router as admin_router
from marketplace.api.routes.categories import router as categories_router
from marketplace.api.routes.courses import router as courses_router
from marketplace.api.routes.monitoring import router as monitoring_router
from marketplace.core.config import settings
from marketplace.core.exception import MarketplaceError
from marketplace.infrastructure.database import async_engine

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """애플리케이션 생명주기 관리"""
    logger.info("Starting Course Marketplace...")

    try:
        async with async_engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            logger.info("Database connection established")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise

    logger.info("Course Marketplace started successfully")

    yield

    logger.info("Shutting down Course Marketplace...")

    try:
        await async_engine.dispose()
    except Exception as e:
        logger.warning(f"Engine disposal failed: {e}")

    logger.info("Course Marketplace shut down complete")


async def marketplace_exception_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    """마켓플레이스 전용 예외 핸들러"""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """일반 예외 핸들러"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred",
        },
    )


def create_app(use_lifespan: bool = True) -> FastAPI:
    """FastAPI 앱 생성"""
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Course catalog, search and admin course management",
        version=settings.version,
        lifespan=lifespan if use_lifespan else None,
    )

    # 미들웨어 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(MetricsMiddleware)

    # 예외 핸들러
    app.add_exception_handler(MarketplaceError, marketplace_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # 라우터 등록
    app.include_router(monitoring_router, tags=["monitoring"])
    app.include_router(courses_router, prefix="/courses", tags=["courses"])
    app.include_router(categories_router, prefix="/categories", tags=["categories"])
    app.include_router(admin_router, prefix="/admin", tags=["admin"])

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "marketplace.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
