# labtrack/storage/__init__.py

"""
저장소 패키지입니다.

애플리케이션 시작 시 `create_storage()`로 설정에 맞는 구현을 한 번 만들어
`app.state.storage`에 보관하고, 라우터는 `get_storage` 의존성으로 이를 받습니다.
"""

from fastapi import Request

from labtrack.core.config import Settings
from .base import IStorage
from .memory import MemoryStorage
from .database import DatabaseStorage


def create_storage(settings: Settings) -> IStorage:
    """STORAGE_BACKEND 설정에 따라 저장소 구현을 생성합니다."""
    if settings.STORAGE_BACKEND == "database":
        return DatabaseStorage(settings.DATABASE_URL.get_secret_value(), echo=settings.DEBUG_MODE)
    return MemoryStorage()


def get_storage(request: Request) -> IStorage:
    """FastAPI 의존성: 애플리케이션 수명 동안 공유되는 저장소를 반환합니다."""
    return request.app.state.storage


__all__ = ["IStorage", "MemoryStorage", "DatabaseStorage", "create_storage", "get_storage"]
