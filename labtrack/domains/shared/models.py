# labtrack/domains/shared/models.py

"""
'shared' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- alerts: 실험실 직원에게 노출되는 알림 (튜브/박스에 연결될 수 있음).
- activities: 상태 변경 작업의 추가 전용(append-only) 감사 기록.
"""

from typing import Optional, Dict, Any
from datetime import datetime, UTC
from enum import Enum

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel, Column


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# =============================================================================
# 1. alerts 테이블 모델
# =============================================================================
class Alert(SQLModel, table=True):
    __tablename__ = "alerts"

    id: Optional[int] = Field(default=None, primary_key=True)
    type: str = Field(max_length=50, description="알림 유형")
    message: str = Field(description="알림 내용")
    severity: AlertSeverity = Field(default=AlertSeverity.INFO, description="심각도")
    tube_id: Optional[int] = Field(default=None, foreign_key="tubes.id", description="관련 튜브 ID (FK)")
    box_id: Optional[int] = Field(default=None, foreign_key="boxes.id", description="관련 박스 ID (FK)")
    lab_id: int = Field(foreign_key="labs.id", description="소속 실험실 ID (FK)")
    resolved: bool = Field(default=False, description="해결 여부")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )


# =============================================================================
# 2. activities 테이블 모델
# =============================================================================
class Activity(SQLModel, table=True):
    __tablename__ = "activities"

    id: Optional[int] = Field(default=None, primary_key=True)
    type: str = Field(max_length=50, description="활동 유형 (예: box_created)")
    details: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB(), "postgresql")),
        description="활동 상세 (자유 형식)"
    )
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", description="수행 사용자 ID (FK)")
    lab_id: int = Field(foreign_key="labs.id", description="실험실 ID (FK)")
    tube_id: Optional[int] = Field(default=None, foreign_key="tubes.id", description="관련 튜브 ID (FK)")
    box_id: Optional[int] = Field(default=None, foreign_key="boxes.id", description="관련 박스 ID (FK)")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True),
        description="레코드 생성 일시"
    )
