# labtrack/domains/lab/crud.py

"""
'lab' 도메인의 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from labtrack.core.crud_base import CRUDBase
from . import models as lab_models
from . import schemas as lab_schemas


class CRUDLab(CRUDBase[lab_models.Lab, lab_schemas.LabCreate]):
    def __init__(self):
        super().__init__(model=lab_models.Lab)

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[lab_models.Lab]:
        """실험실 코드로 조회합니다."""
        statement = select(self.model).where(self.model.code == code)
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def get_all(self, db: AsyncSession) -> List[lab_models.Lab]:
        return await self.get_filtered(db, order_by_field="id", order_desc=False)


lab = CRUDLab()
