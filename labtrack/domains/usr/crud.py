# labtrack/domains/usr/crud.py

"""
'usr' 도메인의 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from labtrack.core.crud_base import CRUDBase
from . import models as usr_models
from . import schemas as usr_schemas


class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserBase]):
    def __init__(self):
        super().__init__(model=usr_models.User)

    async def get_by_username(self, db: AsyncSession, *, username: str) -> Optional[usr_models.User]:
        statement = select(self.model).where(self.model.username == username)
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def get_by_barcode(self, db: AsyncSession, *, barcode: str) -> Optional[usr_models.User]:
        """사원증 바코드로 사용자를 조회합니다."""
        statement = select(self.model).where(self.model.barcode == barcode)
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def create_with_hash(
        self, db: AsyncSession, *, obj_in: usr_schemas.UserBase, password_hash: str
    ) -> usr_models.User:
        """이미 해싱된 비밀번호로 사용자를 생성합니다. 평문 비밀번호 필드는 저장하지 않습니다."""
        user_data = obj_in.model_dump(exclude={"password"})
        user_data["password_hash"] = password_hash
        return await super().create(db, obj_in=user_data)


user = CRUDUser()
