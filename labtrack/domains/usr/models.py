# labtrack/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import IntEnum

from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel, Column


# =============================================================================
# 사용자 역할(RBAC)
# =============================================================================
class UserRole(IntEnum):
    """
    사용자 역할을 정의하는 정수형 Enum 클래스입니다.
    값이 작을수록 권한이 넓습니다.
    """
    ADMIN = 10          # 시스템 관리자
    LAB_MANAGER = 70    # 실험실 관리자
    TECHNICIAN = 80     # 검체 담당 기사
    TRANSPORTER = 90    # 운송 담당자


# =============================================================================
# 1. users 테이블 모델
# =============================================================================
class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    username: str = Field(max_length=50, unique=True, description="로그인 사용자명")
    password_hash: str = Field(max_length=255, description="해싱된 비밀번호")
    name: str = Field(max_length=100, description="표시 이름")
    role: UserRole = Field(default=UserRole.TECHNICIAN, description="사용자 역할 (권한)")
    barcode: str = Field(max_length=50, unique=True, description="사원증 바코드")
    is_active: bool = Field(default=True, description="계정 활성 여부")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
