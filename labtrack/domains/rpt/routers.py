# labtrack/domains/rpt/routers.py

"""
'rpt' 도메인 (대시보드) 관련 API 엔드포인트를 정의하는 모듈입니다.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from labtrack.core import dependencies as deps

from . import schemas as rpt_schemas

router = APIRouter(
    tags=["Dashboard (대시보드)"],
    responses={404: {"description": "Not found"}},
)


@router.get("/labs/{lab_id}/dashboard", response_model=rpt_schemas.DashboardResponse, summary="실험실 대시보드")
async def read_dashboard(lab_id: int, storage: deps.IStorage = Depends(deps.get_storage)):
    """
    실험실의 통계, 최근 박스 3건, 최근 활동 4건을 한 번에 반환합니다.
    """
    if not await storage.get_lab(lab_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lab not found")

    return rpt_schemas.DashboardResponse(
        stats=await storage.get_dashboard_stats(lab_id),
        recent_boxes=await storage.get_recent_boxes(lab_id),
        recent_activities=await storage.get_recent_activities(lab_id),
    )
