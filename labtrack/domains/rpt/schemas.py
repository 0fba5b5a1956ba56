# labtrack/domains/rpt/schemas.py

"""
'rpt' 도메인 (실험실 대시보드)의 응답 스키마를 정의하는 모듈입니다.
"""

from typing import List

from pydantic import Field as PydanticField

from labtrack.core.schemas import CamelModel


class DashboardStats(CamelModel):
    pending_samples: int = PydanticField(0, description="대기 중 튜브 수")
    ready_boxes: int = PydanticField(0, description="출고 준비 박스 수")
    in_transit: int = PydanticField(0, description="운송 중 박스 수")
    active_alerts: int = PydanticField(0, description="미해결 알림 수")
    ambient_tubes: int = 0
    ambient_boxes: int = 0
    ambient_in_transit: int = 0
    cold_tubes: int = 0
    cold_boxes: int = 0
    cold_in_transit: int = 0
    frozen_tubes: int = 0
    frozen_boxes: int = 0
    frozen_in_transit: int = 0


class RecentBox(CamelModel):
    id: int
    code: str
    type: str
    status: str
    content: str


class RecentActivity(CamelModel):
    id: int
    type: str
    message: str
    time: str
    user: str
    icon: str
    icon_bg_color: str


class DashboardResponse(CamelModel):
    stats: DashboardStats
    recent_boxes: List[RecentBox]
    recent_activities: List[RecentActivity]
