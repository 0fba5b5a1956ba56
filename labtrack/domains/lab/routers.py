# labtrack/domains/lab/routers.py

"""
'lab' 도메인 (실험실) 관련 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from labtrack.core import dependencies as deps
from labtrack.domains.usr import models as usr_models

from . import schemas as lab_schemas

router = APIRouter(
    tags=["Laboratory (실험실)"],
    responses={404: {"description": "Not found"}},
)


@router.get("/labs", response_model=List[lab_schemas.LabResponse], summary="모든 실험실 조회")
async def read_labs(storage: deps.IStorage = Depends(deps.get_storage)):
    return await storage.get_labs()


@router.get("/labs/{lab_id}", response_model=lab_schemas.LabResponse, summary="특정 실험실 조회")
async def read_lab(lab_id: int, storage: deps.IStorage = Depends(deps.get_storage)):
    lab = await storage.get_lab(lab_id)
    if not lab:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lab not found")
    return lab


@router.post("/labs", response_model=lab_schemas.LabResponse, status_code=status.HTTP_201_CREATED, summary="새 실험실 생성")
async def create_lab(
    lab_in: lab_schemas.LabCreate,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """새 실험실을 생성합니다. 관리자 권한이 필요합니다."""
    if await storage.get_lab_by_code(lab_in.code):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Lab with this code already exists")
    return await storage.create_lab(lab_in)
