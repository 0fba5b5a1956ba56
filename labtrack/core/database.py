# labtrack/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 생성합니다.
- 비동기 세션 공장(sessionmaker)과 트랜잭션 컨텍스트 관리자를 제공합니다.
- 애플리케이션 시작 시 데이터베이스 테이블을 생성하는 함수를 포함합니다.

엔진은 모듈 전역으로 만들지 않고, 저장소(DatabaseStorage)가 생성 시점에 만들어 소유합니다.
"""

import logging
from typing import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# =============================================================================
# 모든 도메인 모델 임포트
# =============================================================================
# SQLModel.metadata가 모든 테이블을 인식하도록 명시적으로 임포트합니다.
from labtrack.domains import models  # noqa: F401

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    비동기 엔진을 생성합니다.
    SQLite(테스트용 인메모리 DB)는 단일 연결을 공유해야 하므로 StaticPool을 사용합니다.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(
        database_url,
        echo=echo,               # 디버그 모드일 때만 SQL 쿼리 출력
        pool_pre_ping=True,
        pool_recycle=3600,       # 1시간마다 연결 재활용
        pool_size=10,
        max_overflow=20,
    )


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    """비동기 세션을 생성하는 '세션 공장'을 정의합니다."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# =============================================================================
# 데이터베이스 초기화 및 테이블 생성 함수
# =============================================================================
async def create_db_and_tables(engine: AsyncEngine) -> None:
    """
    데이터베이스 테이블을 생성합니다. 기존 테이블은 삭제하지 않습니다.
    """
    logger.info("데이터베이스 테이블 생성을 시도합니다...")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("데이터베이스 테이블 생성 완료 (또는 이미 존재).")


@asynccontextmanager
async def session_scope(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession, None]:
    """
    하나의 트랜잭션 단위를 제공하는 컨텍스트 관리자입니다.
    블록이 정상 종료되면 커밋하고, 예외가 발생하면 전체를 롤백합니다.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
