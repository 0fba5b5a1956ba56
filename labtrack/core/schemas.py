# labtrack/core/schemas.py

"""
모든 API 스키마가 공유하는 Pydantic 기본 모델입니다.

파이썬 코드에서는 snake_case 속성을 사용하고,
JSON 요청/응답에서는 camelCase 키(예: tubeBarcode, sourceLabId)를 사용합니다.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,   # snake_case 이름으로도 생성 가능 (ORM 객체, 테스트 코드)
        from_attributes=True,
    )
