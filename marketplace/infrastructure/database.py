from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from marketplace.core.config import settings

# 데이터베이스 연결 풀 설정 (중앙 관리)
POOL_PRE_PING = True

# 연결 거부 등 asyncpg 연결 단계 오류는 SQLAlchemyError 로 감싸지지 않고 OSError 로 전달된다
DATA_STORE_ERRORS: tuple[type[Exception], ...] = (SQLAlchemyError, OSError)

async_engine = create_async_engine(
    settings.async_database_url,
    pool_pre_ping=POOL_PRE_PING,
    pool_recycle=settings.db_pool_recycle,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    echo=settings.debug,
)

# 세션 팩토리
AsyncSessionLocal = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """세션 팩토리 의존성 주입 (요청 내 동시 쿼리용)"""
    return AsyncSessionLocal


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션 의존성 주입"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
