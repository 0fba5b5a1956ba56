# labtrack/domains/lab/models.py

"""
'lab' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
실험실(사이트)은 거의 변경되지 않는 기준 정보입니다.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


# =============================================================================
# 1. labs 테이블 모델
# =============================================================================
class Lab(SQLModel, table=True):
    __tablename__ = "labs"

    id: Optional[int] = Field(default=None, primary_key=True, description="실험실 고유 ID")
    name: str = Field(max_length=255, description="실험실 명칭")
    code: str = Field(max_length=20, unique=True, description="실험실 코드 (예: LAB-A)")
