# labtrack/domains/transport/routers.py

"""
'transport' 도메인 (검체 튜브 및 운송 박스) 관련 API 엔드포인트를 정의하는 모듈입니다.

박스 상태 흐름: open -> ready -> in_transit -> delivered
병합된 원본 박스는 'merged' 상태로 종료됩니다.
각 상태 변경 작업은 성공 후 활동 기록(Activity)을 남깁니다.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from labtrack.core import dependencies as deps
from labtrack.domains.usr import models as usr_models
from labtrack.domains.shared.services import ActivityType, record_activity

from . import models as transport_models
from . import schemas as transport_schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Sample Transport (검체 운송)"],
    responses={404: {"description": "Not found"}},
)

BoxStatus = transport_models.BoxStatus

# 병합에 참여할 수 있는 박스 상태
MERGEABLE_STATUSES = (BoxStatus.OPEN, BoxStatus.READY)


async def _get_box_or_404(storage: deps.IStorage, box_id: int) -> transport_models.Box:
    box = await storage.get_box(box_id)
    if not box:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Box not found")
    return box


async def _get_tube_by_barcode_or_404(storage: deps.IStorage, barcode: str) -> transport_models.Tube:
    tube = await storage.get_tube_by_barcode(barcode)
    if not tube:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tube not found")
    return tube


async def _ensure_lab_exists(storage: deps.IStorage, lab_id: int) -> None:
    if not await storage.get_lab(lab_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Lab {lab_id} not found")


def _require_box_status(box: transport_models.Box, expected: BoxStatus, action: str) -> None:
    if box.status != expected:
        logger.info("박스 %s 상태(%s)에서 %s 거부", box.barcode, box.status.value, action)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Box must be '{expected.value}' to {action} (current status: '{box.status.value}')",
        )


# =============================================================================
# 1. 튜브 (Tube) 라우터
# =============================================================================
@router.get("/tubes/{barcode}", response_model=transport_schemas.TubeResponse, summary="바코드로 튜브 조회")
async def read_tube(barcode: str, storage: deps.IStorage = Depends(deps.get_storage)):
    return await _get_tube_by_barcode_or_404(storage, barcode)


@router.get("/labs/{lab_id}/tubes", response_model=List[transport_schemas.TubeResponse], summary="실험실의 튜브 목록")
async def read_lab_tubes(
    lab_id: int,
    status: Optional[transport_models.TubeStatus] = None,
    storage: deps.IStorage = Depends(deps.get_storage),
):
    await _ensure_lab_exists(storage, lab_id)
    return await storage.get_tubes_by_lab(lab_id, status)


@router.post("/tubes", response_model=transport_schemas.TubeResponse, status_code=status.HTTP_201_CREATED, summary="새 튜브 등록")
async def create_tube(
    tube_in: transport_schemas.TubeCreate,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    await _ensure_lab_exists(storage, tube_in.lab_id)
    if await storage.get_tube_by_barcode(tube_in.barcode):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tube with this barcode already exists")

    tube = await storage.create_tube(tube_in)
    await record_activity(
        storage, type=ActivityType.TUBE_CREATED, lab_id=tube.lab_id, user=current_user, tube_id=tube.id,
        message=f"Tube {tube.barcode} registered",
    )
    return tube


@router.post("/tubes/scan-action", response_model=transport_schemas.TubeResponse, summary="튜브 스캔 (보관 온도 지정)")
async def scan_tube(
    scan_in: transport_schemas.ScanAction,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """
    스캔한 튜브의 요구 보관 온도를 지정합니다.
    이미 박스에 적재된 튜브라면 박스 온도 등급과 같은 값만 허용합니다.
    """
    tube = await _get_tube_by_barcode_or_404(storage, scan_in.barcode)
    temperature = scan_in.temperature_requirement

    if tube.box_id is not None:
        box = await storage.get_box(tube.box_id)
        if box and box.temperature_type != temperature:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    f"Tube {tube.barcode} is in box {box.barcode} ({box.temperature_type.value}); "
                    f"cannot change its temperature to {temperature.value}"
                ),
            )

    tube = await storage.update_tube_temperature(tube.id, temperature)
    await record_activity(
        storage, type=ActivityType.TUBE_SCANNED, lab_id=tube.lab_id, user=current_user, tube_id=tube.id,
        message=f"Tube {tube.barcode} scanned ({temperature.value})",
    )
    return tube


# =============================================================================
# 2. 박스 (Box) 라우터
# =============================================================================
@router.get("/boxes/{barcode}", response_model=transport_schemas.BoxWithTubes, summary="바코드로 박스와 내용물 조회")
async def read_box(barcode: str, storage: deps.IStorage = Depends(deps.get_storage)):
    box = await storage.get_box_by_barcode(barcode)
    if not box:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Box not found")
    tubes = await storage.get_tubes_by_box(box.id)
    return {"box": box, "tubes": tubes}


@router.get("/labs/{lab_id}/boxes", response_model=List[transport_schemas.BoxResponse], summary="실험실의 박스 목록")
async def read_lab_boxes(
    lab_id: int,
    status: Optional[BoxStatus] = None,
    storage: deps.IStorage = Depends(deps.get_storage),
):
    await _ensure_lab_exists(storage, lab_id)
    return await storage.get_boxes_by_lab(lab_id, status)


@router.post("/boxes", response_model=transport_schemas.BoxResponse, status_code=status.HTTP_201_CREATED, summary="새 박스 생성")
async def create_box(
    box_in: transport_schemas.BoxCreate,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    await _ensure_lab_exists(storage, box_in.source_lab_id)
    if box_in.destination_lab_id is not None:
        await _ensure_lab_exists(storage, box_in.destination_lab_id)
    if await storage.get_box_by_barcode(box_in.barcode):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Box with this barcode already exists")

    box = await storage.create_box(box_in)
    await record_activity(
        storage, type=ActivityType.BOX_CREATED, lab_id=box.source_lab_id, user=current_user, box_id=box.id,
        message=f"Box {box.barcode} created ({box.temperature_type.value})",
    )
    return box


@router.post("/boxes/merge", response_model=transport_schemas.BoxResponse, summary="두 박스 병합")
async def merge_boxes(
    merge_in: transport_schemas.MergeRequest,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """원본 박스의 튜브를 모두 대상 박스로 옮기고, 원본 박스를 'merged'로 종료합니다."""
    if merge_in.source_box_id == merge_in.target_box_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot merge a box into itself")

    source = await _get_box_or_404(storage, merge_in.source_box_id)
    target = await _get_box_or_404(storage, merge_in.target_box_id)

    if source.temperature_type != target.temperature_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Temperature mismatch: source box is {source.temperature_type.value}, "
                f"target box is {target.temperature_type.value}"
            ),
        )
    for box in (source, target):
        if box.status not in MERGEABLE_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Box {box.barcode} cannot be merged in status '{box.status.value}'",
            )

    merged = await storage.merge_boxes(source.id, target.id)
    if merged is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Boxes could not be merged")

    await record_activity(
        storage, type=ActivityType.BOXES_MERGED, lab_id=source.source_lab_id, user=current_user, box_id=merged.id,
        message=f"Box {source.barcode} merged into {merged.barcode}",
        source_box_id=source.id, moved_tubes=source.tube_count,
    )
    return merged


@router.post("/boxes/{box_id}/add-tube", response_model=transport_schemas.TubeInBox, summary="박스에 튜브 적재")
async def add_tube_to_box(
    box_id: int,
    request_in: transport_schemas.TubeBarcodeRequest,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    tube = await _get_tube_by_barcode_or_404(storage, request_in.tube_barcode)
    box = await _get_box_or_404(storage, box_id)
    _require_box_status(box, BoxStatus.OPEN, "add tubes")

    if tube.temperature_requirement != box.temperature_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Temperature mismatch: tube requires {tube.temperature_requirement.value}, "
                f"box is {box.temperature_type.value}"
            ),
        )
    if tube.box_id is not None and tube.box_id != box.id:
        current_box = await storage.get_box(tube.box_id)
        if current_box and current_box.status != BoxStatus.OPEN:
            logger.info("튜브 %s 이동 거부: 현재 박스 %s 상태 %s", tube.barcode, current_box.barcode, current_box.status.value)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    f"Tube {tube.barcode} is in box {current_box.barcode} ('{current_box.status.value}'); "
                    "it can only be moved out of an open box"
                ),
            )

    tube = await storage.assign_tube_to_box(tube.id, box.id)
    if tube is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tube could not be added to the box")
    box = await storage.get_box(box.id)

    await record_activity(
        storage, type=ActivityType.TUBE_ADDED_TO_BOX, lab_id=box.source_lab_id, user=current_user,
        tube_id=tube.id, box_id=box.id,
        message=f"Tube {tube.barcode} added to box {box.barcode}",
    )
    return {"tube": tube, "box": box}


@router.post("/boxes/{box_id}/remove-tube", response_model=transport_schemas.TubeInBox, summary="박스에서 튜브 하역")
async def remove_tube_from_box(
    box_id: int,
    request_in: transport_schemas.TubeBarcodeRequest,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    tube = await _get_tube_by_barcode_or_404(storage, request_in.tube_barcode)
    box = await _get_box_or_404(storage, box_id)
    if tube.box_id != box.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tube is not in this box")

    tube = await storage.remove_tube_from_box(tube.id)
    if tube is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tube could not be removed from the box")
    box = await storage.get_box(box.id)

    await record_activity(
        storage, type=ActivityType.TUBE_REMOVED_FROM_BOX, lab_id=box.source_lab_id, user=current_user,
        tube_id=tube.id, box_id=box.id,
        message=f"Tube {tube.barcode} removed from box {box.barcode}",
    )
    return {"tube": tube, "box": box}


@router.post("/boxes/{box_id}/ready", response_model=transport_schemas.BoxResponse, summary="박스 적재 완료 (픽업 대기)")
async def mark_box_ready(
    box_id: int,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    box = await _get_box_or_404(storage, box_id)
    _require_box_status(box, BoxStatus.OPEN, "be marked ready")

    box = await storage.update_box_status(box.id, BoxStatus.READY)
    await record_activity(
        storage, type=ActivityType.BOX_READY, lab_id=box.source_lab_id, user=current_user, box_id=box.id,
        message=f"Box {box.barcode} ready for pickup",
    )
    return box


@router.post("/boxes/{box_id}/pickup", response_model=transport_schemas.BoxResponse, summary="운송자 픽업")
async def pickup_box(
    box_id: int,
    pickup_in: transport_schemas.PickupRequest,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    box = await _get_box_or_404(storage, box_id)
    _require_box_status(box, BoxStatus.READY, "be picked up")

    box = await storage.update_box_pickup(box.id, pickup_in.transporter_id)
    await record_activity(
        storage, type=ActivityType.BOX_PICKUP, lab_id=box.source_lab_id, user=current_user, box_id=box.id,
        message=f"Box {box.barcode} picked up by {pickup_in.transporter_id}",
        transporter_id=pickup_in.transporter_id,
    )
    return box


@router.post("/boxes/{box_id}/delivery", response_model=transport_schemas.BoxResponse, summary="배송 완료")
async def deliver_box(
    box_id: int,
    storage: deps.IStorage = Depends(deps.get_storage),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    box = await _get_box_or_404(storage, box_id)
    _require_box_status(box, BoxStatus.IN_TRANSIT, "be delivered")

    box = await storage.update_box_delivery(box.id)
    await record_activity(
        storage, type=ActivityType.BOX_DELIVERY, lab_id=box.source_lab_id, user=current_user, box_id=box.id,
        message=f"Box {box.barcode} delivered",
    )
    return box
