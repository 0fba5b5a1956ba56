# labtrack/domains/transport/crud.py

"""
'transport' 도메인 (튜브, 박스)의 CRUD 로직을 담당하는 모듈입니다.

여기의 메서드는 flush까지만 수행합니다.
적재/하역/병합처럼 여러 레코드를 바꾸는 작업은 DatabaseStorage가 한 세션(트랜잭션)으로 묶습니다.
"""

from typing import List, Optional
from datetime import datetime, UTC

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from labtrack.core.crud_base import CRUDBase
from labtrack.domains.rpt import services as rpt_services
from . import models as transport_models
from . import schemas as transport_schemas


# =============================================================================
# 1. 튜브 (Tube) CRUD
# =============================================================================
class CRUDTube(CRUDBase[transport_models.Tube, transport_schemas.TubeCreate]):
    def __init__(self):
        super().__init__(model=transport_models.Tube)

    async def get_by_barcode(self, db: AsyncSession, *, barcode: str) -> Optional[transport_models.Tube]:
        statement = select(self.model).where(self.model.barcode == barcode)
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def get_by_lab(
        self, db: AsyncSession, *, lab_id: int, status: Optional[transport_models.TubeStatus] = None
    ) -> List[transport_models.Tube]:
        return await self.get_filtered(db, filters={"lab_id": lab_id, "status": status}, order_by_field="id", order_desc=False)

    async def get_by_box(self, db: AsyncSession, *, box_id: int) -> List[transport_models.Tube]:
        return await self.get_filtered(db, filters={"box_id": box_id}, order_by_field="id", order_desc=False)

    async def create(self, db: AsyncSession, *, obj_in: transport_schemas.TubeCreate) -> transport_models.Tube:
        """새 튜브는 항상 대기(pending) 상태, 박스 미지정으로 생성됩니다."""
        tube_data = obj_in.model_dump()
        tube_data.update(status=transport_models.TubeStatus.PENDING, box_id=None)
        return await super().create(db, obj_in=tube_data)

    async def count_by_status_and_temperature(
        self, db: AsyncSession, *, lab_id: int
    ) -> rpt_services.StatusTemperatureCounts:
        statement = (
            select(self.model.status, self.model.temperature_requirement, func.count(self.model.id))
            .where(self.model.lab_id == lab_id)
            .group_by(self.model.status, self.model.temperature_requirement)
        )
        result = await db.execute(statement)
        return {rpt_services.count_key(s, t): n for s, t, n in result.all()}


# =============================================================================
# 2. 박스 (Box) CRUD
# =============================================================================
class CRUDBox(CRUDBase[transport_models.Box, transport_schemas.BoxCreate]):
    def __init__(self):
        super().__init__(model=transport_models.Box)

    async def get_by_barcode(self, db: AsyncSession, *, barcode: str) -> Optional[transport_models.Box]:
        statement = select(self.model).where(self.model.barcode == barcode)
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def get_by_lab(
        self, db: AsyncSession, *, lab_id: int, status: Optional[transport_models.BoxStatus] = None
    ) -> List[transport_models.Box]:
        return await self.get_filtered(
            db, filters={"source_lab_id": lab_id, "status": status}, order_by_field="id", order_desc=False
        )

    async def get_recent(self, db: AsyncSession, *, lab_id: int, limit: int) -> List[transport_models.Box]:
        """최근 생성된 박스부터 반환합니다."""
        return await self.get_filtered(
            db, filters={"source_lab_id": lab_id}, order_by_field="created_at", order_desc=True, limit=limit
        )

    async def create(self, db: AsyncSession, *, obj_in: transport_schemas.BoxCreate) -> transport_models.Box:
        box_data = obj_in.model_dump()
        box_data.update(status=transport_models.BoxStatus.OPEN, tube_count=0)
        return await super().create(db, obj_in=box_data)

    async def adjust_tube_count(
        self, db: AsyncSession, *, db_obj: transport_models.Box, delta: int
    ) -> transport_models.Box:
        # 튜브 수는 음수가 될 수 없습니다.
        new_count = max(0, db_obj.tube_count + delta)
        return await self.update(
            db, db_obj=db_obj, obj_in={"tube_count": new_count, "last_updated": datetime.now(UTC)}
        )

    async def count_by_status_and_temperature(
        self, db: AsyncSession, *, lab_id: int
    ) -> rpt_services.StatusTemperatureCounts:
        statement = (
            select(self.model.status, self.model.temperature_type, func.count(self.model.id))
            .where(self.model.source_lab_id == lab_id)
            .group_by(self.model.status, self.model.temperature_type)
        )
        result = await db.execute(statement)
        return {rpt_services.count_key(s, t): n for s, t, n in result.all()}


tube = CRUDTube()
box = CRUDBox()
