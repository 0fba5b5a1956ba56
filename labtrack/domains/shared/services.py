# labtrack/domains/shared/services.py

"""
여러 도메인의 라우터가 공통으로 사용하는 활동 기록(Activity) 헬퍼입니다.
"""

from typing import Any, Optional

from labtrack.storage import IStorage
from labtrack.domains.usr import models as usr_models
from . import models as shared_models
from . import schemas as shared_schemas


class ActivityType:
    TUBE_CREATED = "tube_created"
    TUBE_SCANNED = "tube_scanned"
    TUBE_ADDED_TO_BOX = "tube_added_to_box"
    TUBE_REMOVED_FROM_BOX = "tube_removed_from_box"
    BOX_CREATED = "box_created"
    BOX_READY = "box_ready"
    BOX_PICKUP = "box_pickup"
    BOX_DELIVERY = "box_delivery"
    BOXES_MERGED = "boxes_merged"
    ALERT_CREATED = "alert_created"
    ALERT_RESOLVED = "alert_resolved"


async def record_activity(
    storage: IStorage,
    *,
    type: str,
    lab_id: int,
    message: str,
    user: Optional[usr_models.User] = None,
    tube_id: Optional[int] = None,
    box_id: Optional[int] = None,
    **details: Any,
) -> shared_models.Activity:
    """
    상태 변경 작업 후 활동 기록을 추가합니다.
    `message`는 대시보드의 최근 활동 문구로 사용되며, 나머지 키워드 인자는 details에 함께 저장됩니다.
    """
    activity_in = shared_schemas.ActivityCreate(
        type=type,
        details={"message": message, **details},
        lab_id=lab_id,
        user_id=user.id if user else None,
        tube_id=tube_id,
        box_id=box_id,
    )
    return await storage.create_activity(activity_in)
