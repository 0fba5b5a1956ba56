# labtrack/domains/rpt/services.py

"""
대시보드 집계와 최근 활동 표시를 위한 순수 함수 모음입니다.

두 저장소 구현(메모리, 데이터베이스)은 각자 (상태 × 온도) 건수를 센 다음
이 모듈의 함수로 같은 형태의 응답을 만듭니다.
"""

from typing import Dict, Optional, Tuple
from datetime import datetime, UTC

from labtrack.domains.transport.models import Box, BoxStatus, TemperatureType, TubeStatus
from labtrack.domains.shared.models import Activity
from . import schemas as rpt_schemas

# (상태, 온도) -> 건수
StatusTemperatureCounts = Dict[Tuple[str, str], int]

SYSTEM_USER_NAME = "System"

# 활동 유형별 아이콘 (유형 문자열 비교, 미등록 유형은 기본값 사용)
ACTIVITY_ICONS: Dict[str, Tuple[str, str]] = {
    "box_created": ("ri-inbox-line", "bg-blue-100"),
    "box_pickup": ("ri-truck-line", "bg-purple-100"),
    "tube_scanned": ("ri-scanner-line", "bg-green-100"),
    "alert": ("ri-alert-line", "bg-red-100"),
}
DEFAULT_ACTIVITY_ICON = ("ri-information-line", "bg-blue-100")


def _value(member) -> str:
    return member.value if hasattr(member, "value") else str(member)


def count_key(status, temperature) -> Tuple[str, str]:
    """Enum 또는 문자열로 들어온 (상태, 온도) 쌍을 집계 키로 정규화합니다."""
    return _value(status), _value(temperature)


def build_dashboard_stats(
    tube_counts: StatusTemperatureCounts,
    box_counts: StatusTemperatureCounts,
    active_alerts: int,
) -> rpt_schemas.DashboardStats:
    """
    튜브/박스의 (상태 × 온도) 건수로 대시보드 통계를 구성합니다.
    - 튜브: 대기(pending) 상태만 온도별로 집계
    - 박스: 준비(ready), 운송 중(in_transit) 상태를 온도별로 집계
    """
    stats: Dict[str, int] = {"active_alerts": active_alerts}
    pending = TubeStatus.PENDING.value
    ready = BoxStatus.READY.value
    in_transit = BoxStatus.IN_TRANSIT.value

    for temperature in TemperatureType:
        t = temperature.value
        stats[f"{t}_tubes"] = tube_counts.get((pending, t), 0)
        stats[f"{t}_boxes"] = box_counts.get((ready, t), 0)
        stats[f"{t}_in_transit"] = box_counts.get((in_transit, t), 0)

    stats["pending_samples"] = sum(n for (s, _), n in tube_counts.items() if s == pending)
    stats["ready_boxes"] = sum(n for (s, _), n in box_counts.items() if s == ready)
    stats["in_transit"] = sum(n for (s, _), n in box_counts.items() if s == in_transit)
    return rpt_schemas.DashboardStats(**stats)


def to_recent_box(box: Box) -> rpt_schemas.RecentBox:
    return rpt_schemas.RecentBox(
        id=box.id,
        code=box.barcode,
        type=_value(box.temperature_type),
        status=_value(box.status),
        content=f"{box.tube_count} tubes",
    )


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''} ago"


def time_ago(moment: datetime, now: Optional[datetime] = None) -> str:
    """생성 시각을 '3 minutes ago' 형태의 상대 시간 문자열로 변환합니다."""
    now = now or datetime.now(UTC)
    # SQLite 등 일부 드라이버는 naive datetime을 돌려주므로 UTC로 간주합니다.
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    diff_mins = round((now - moment).total_seconds() / 60)
    if diff_mins < 1:
        return "Just now"
    if diff_mins < 60:
        return _plural(diff_mins, "minute")
    if diff_mins < 24 * 60:
        return _plural(diff_mins // 60, "hour")
    return _plural(diff_mins // (24 * 60), "day")


def activity_icon(activity_type: str) -> Tuple[str, str]:
    if activity_type in ACTIVITY_ICONS:
        return ACTIVITY_ICONS[activity_type]
    if activity_type.startswith("alert"):
        return ACTIVITY_ICONS["alert"]
    return DEFAULT_ACTIVITY_ICON


def describe_activity(
    activity: Activity,
    user_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> rpt_schemas.RecentActivity:
    """활동 기록을 대시보드 위젯용 항목(아이콘, 메시지, 상대 시간)으로 변환합니다."""
    icon, icon_bg_color = activity_icon(activity.type)
    details = activity.details or {}
    return rpt_schemas.RecentActivity(
        id=activity.id,
        type=activity.type,
        message=str(details.get("message") or activity.type),
        time=time_ago(activity.created_at, now) if activity.created_at else "Just now",
        user=user_name or SYSTEM_USER_NAME,
        icon=icon,
        icon_bg_color=icon_bg_color,
    )
