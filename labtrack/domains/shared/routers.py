# labtrack/domains/shared/routers.py

"""
'shared' 도메인 (알림 및 활동 기록) 관련 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from labtrack.core import dependencies as deps
from labtrack.domains.usr import models as usr_models

from . import schemas as shared_schemas
from .services import ActivityType, record_activity

router = APIRouter(
    tags=["Alerts & Activities (알림 및 활동 기록)"],
    responses={404: {"description": "Not found"}},
)


async def _ensure_lab_exists(storage: deps.IStorage, lab_id: int) -> None:
    if not await storage.get_lab(lab_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lab not found")


# =============================================================================
# 1. 알림 (Alert) 라우터
# =============================================================================
@router.get("/labs/{lab_id}/alerts", response_model=List[shared_schemas.AlertResponse], summary="실험실 알림 목록")
async def read_alerts(
    lab_id: int,
    resolved: Optional[bool] = None,
    storage: deps.IStorage = Depends(deps.get_storage),
):
    """`resolved` 쿼리 파라미터를 생략하면 해결 여부와 관계없이 모두 반환합니다."""
    await _ensure_lab_exists(storage, lab_id)
    return await storage.get_alerts_by_lab(lab_id, resolved)


@router.post(
    "/labs/{lab_id}/alerts",
    response_model=shared_schemas.AlertResponse,
    status_code=status.HTTP_201_CREATED,
    summary="새 알림 생성",
)
async def create_alert(
    lab_id: int,
    alert_in: shared_schemas.AlertBase,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    await _ensure_lab_exists(storage, lab_id)
    alert = await storage.create_alert(shared_schemas.AlertCreate(**alert_in.model_dump(), lab_id=lab_id))
    await record_activity(
        storage, type=ActivityType.ALERT_CREATED, lab_id=lab_id, user=current_user,
        tube_id=alert.tube_id, box_id=alert.box_id,
        message=alert.message, alert_id=alert.id, severity=alert.severity.value,
    )
    return alert


@router.post("/alerts/{alert_id}/resolve", response_model=shared_schemas.AlertResponse, summary="알림 해결 처리")
async def resolve_alert(
    alert_id: int,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """이미 해결된 알림은 변경 없이 그대로 반환합니다."""
    alert = await storage.get_alert(alert_id)
    if not alert:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found")
    if alert.resolved:
        return alert

    alert = await storage.resolve_alert(alert_id)
    await record_activity(
        storage, type=ActivityType.ALERT_RESOLVED, lab_id=alert.lab_id, user=current_user,
        tube_id=alert.tube_id, box_id=alert.box_id,
        message=f"Alert resolved: {alert.message}", alert_id=alert.id,
    )
    return alert


# =============================================================================
# 2. 활동 기록 (Activity) 라우터
# =============================================================================
@router.get("/labs/{lab_id}/activities", response_model=List[shared_schemas.ActivityResponse], summary="실험실 활동 기록")
async def read_activities(
    lab_id: int,
    limit: int = Query(10, ge=1, le=100),
    storage: deps.IStorage = Depends(deps.get_storage),
):
    """최근 활동부터 `limit`건을 반환합니다."""
    await _ensure_lab_exists(storage, lab_id)
    return await storage.get_activities_by_lab(lab_id, limit)


@router.post(
    "/labs/{lab_id}/activities",
    response_model=shared_schemas.ActivityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="활동 기록 추가",
)
async def create_activity(
    lab_id: int,
    activity_in: shared_schemas.ActivityBase,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    await _ensure_lab_exists(storage, lab_id)
    return await storage.create_activity(
        shared_schemas.ActivityCreate(**activity_in.model_dump(), lab_id=lab_id, user_id=current_user.id)
    )
