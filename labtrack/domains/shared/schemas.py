# labtrack/domains/shared/schemas.py

"""
'shared' 도메인 (알림 및 활동 기록)의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from typing import Any, Dict, Optional
from datetime import datetime

from pydantic import Field as PydanticField

from labtrack.core.schemas import CamelModel
from .models import AlertSeverity


# =============================================================================
# 1. 알림 (Alert) 스키마
# =============================================================================
class AlertBase(CamelModel):
    type: str = PydanticField(min_length=1, max_length=50, description="알림 유형")
    message: str = PydanticField(min_length=1, description="알림 내용")
    severity: AlertSeverity = PydanticField(default=AlertSeverity.INFO, description="심각도")
    tube_id: Optional[int] = PydanticField(default=None, description="관련 튜브 ID")
    box_id: Optional[int] = PydanticField(default=None, description="관련 박스 ID")


class AlertCreate(AlertBase):
    lab_id: int = PydanticField(description="소속 실험실 ID")


class AlertResponse(AlertCreate):
    id: int
    resolved: bool
    created_at: Optional[datetime] = None


# =============================================================================
# 2. 활동 기록 (Activity) 스키마
# =============================================================================
class ActivityBase(CamelModel):
    type: str = PydanticField(min_length=1, max_length=50, description="활동 유형")
    details: Dict[str, Any] = PydanticField(default_factory=dict, description="활동 상세")
    tube_id: Optional[int] = None
    box_id: Optional[int] = None


class ActivityCreate(ActivityBase):
    lab_id: int
    user_id: Optional[int] = None


class ActivityResponse(ActivityCreate):
    id: int
    created_at: Optional[datetime] = None
