# labtrack/core/crud_base.py

"""
공통 CRUD(Create, Read, Update) 작업을 위한 기본 클래스 모듈입니다.

커밋은 호출자(DatabaseStorage의 session_scope)가 담당합니다.
이 클래스의 메서드는 flush까지만 수행하므로, 여러 CRUD 호출을 하나의 트랜잭션으로 묶을 수 있습니다.
"""

import logging
from typing import Generic, List, Optional, Type, TypeVar, Any, Dict, Union

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 단일 레코드를 조회합니다."""
        return await db.get(self.model, id)

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,  # 다중 속성 필터: {"attribute_name": "value"}
        order_by_field: Optional[str] = None,      # 정렬할 필드 (예: "created_at")
        order_desc: bool = True,                   # 내림차순 정렬 여부
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        다중 속성 필터와 정렬을 지원하는 목록 조회.
        값이 None인 필터는 무시합니다.
        """
        query = select(self.model)
        conditions = []

        if filters:
            for attribute, value in filters.items():
                if value is None:
                    continue
                if hasattr(self.model, attribute):
                    conditions.append(getattr(self.model, attribute) == value)
                else:
                    logger.warning("Model %s has no attribute '%s'", self.model.__name__, attribute)

        if conditions:
            query = query.where(*conditions)

        if order_by_field and hasattr(self.model, order_by_field):
            column = getattr(self.model, order_by_field)
            # 동일 시각 레코드의 순서를 고정하기 위해 id를 보조 정렬 키로 사용합니다.
            if order_desc:
                query = query.order_by(column.desc(), self.model.id.desc())
            else:
                query = query.order_by(column, self.model.id)
        else:
            query = query.order_by(self.model.id)

        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        obj_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model.model_validate(obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: Union[BaseModel, Dict[str, Any]]
    ) -> ModelType:
        """
        기존 레코드를 업데이트합니다.
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj
