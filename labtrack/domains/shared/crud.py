# labtrack/domains/shared/crud.py

"""
'shared' 도메인 (알림, 활동 기록)의 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from labtrack.core.crud_base import CRUDBase
from . import models as shared_models
from . import schemas as shared_schemas


class CRUDAlert(CRUDBase[shared_models.Alert, shared_schemas.AlertCreate]):
    def __init__(self):
        super().__init__(model=shared_models.Alert)

    async def get_by_lab(
        self, db: AsyncSession, *, lab_id: int, resolved: Optional[bool] = None
    ) -> List[shared_models.Alert]:
        return await self.get_filtered(
            db, filters={"lab_id": lab_id, "resolved": resolved}, order_by_field="id", order_desc=False
        )

    async def count_active(self, db: AsyncSession, *, lab_id: int) -> int:
        """해결되지 않은 알림 수를 반환합니다."""
        statement = (
            select(func.count(self.model.id))
            .where(self.model.lab_id == lab_id, self.model.resolved == False)  # noqa: E712
        )
        result = await db.execute(statement)
        return result.scalar_one()


class CRUDActivity(CRUDBase[shared_models.Activity, shared_schemas.ActivityCreate]):
    def __init__(self):
        super().__init__(model=shared_models.Activity)

    async def get_recent_by_lab(self, db: AsyncSession, *, lab_id: int, limit: int) -> List[shared_models.Activity]:
        return await self.get_filtered(
            db, filters={"lab_id": lab_id}, order_by_field="created_at", order_desc=True, limit=limit
        )


alert = CRUDAlert()
activity = CRUDActivity()
