from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
)
from sqlalchemy.orm import declarative_base

# ORM 베이스
Base = declarative_base()

MYSQL_ASYNC_PREFIX = "mysql+asyncmy://"
MYSQL_SYNC_PREFIX = "mysql+pymysql://"


def to_sync_url(async_url: str) -> str:
    """
    asyncmy 접두어를 pymysql로 변경하여 동기 커넥터 URL로 변환 (Alembic 용)
    """
    if async_url.startswith(MYSQL_ASYNC_PREFIX):
        return async_url.replace(MYSQL_ASYNC_PREFIX, MYSQL_SYNC_PREFIX, 1)
    return async_url


def build_engine(database_url: str) -> AsyncEngine:
    """
    주어진 URL로 비동기 엔진을 생성
    - MySQL인 경우에만 utf8mb4 연결 옵션과 커넥션 재활용 설정을 적용
    """
    if database_url.startswith(MYSQL_ASYNC_PREFIX):
        return create_async_engine(
            database_url,
            echo=False,
            future=True,
            connect_args={
                "charset": "utf8mb4",
                "init_command": "SET NAMES utf8mb4 COLLATE utf8mb4_unicode_ci",
                "autocommit": True,
            },
            pool_recycle=1800,
            pool_pre_ping=True,
        )
    return create_async_engine(database_url, echo=False, future=True)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    애플리케이션 시작 시 호출하여 메타데이터 기반 테이블을 생성
    """
    # 모델 import로 메타데이터 등록
    from blogapp.models import user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 종속성: 요청마다 새로운 DB 세션을 생성 후 반환
    """
    async with request.app.state.session_factory() as session:
        yield session
