# labtrack/domains/lab/schemas.py

"""
'lab' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from pydantic import Field as PydanticField

from labtrack.core.schemas import CamelModel


class LabBase(CamelModel):
    name: str = PydanticField(min_length=1, max_length=255, description="실험실 명칭")
    code: str = PydanticField(min_length=1, max_length=20, description="실험실 코드")


class LabCreate(LabBase):
    pass


class LabResponse(LabBase):
    id: int = PydanticField(description="실험실 고유 ID")
