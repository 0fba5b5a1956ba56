# labtrack/domains/usr/schemas.py

"""
'usr' 도메인 (사용자 및 인증)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional
from datetime import datetime

from pydantic import BaseModel, Field as PydanticField

from labtrack.core.schemas import CamelModel
from . import models as usr_models


# =============================================================================
# 1. 사용자 (User) 스키마
# =============================================================================
class UserBase(CamelModel):
    """사용자 정보의 기본 필드를 정의하는 스키마"""
    username: str = PydanticField(..., min_length=1, max_length=50)
    name: str = PydanticField(..., min_length=1, max_length=100, description="표시 이름")
    role: usr_models.UserRole = PydanticField(default=usr_models.UserRole.TECHNICIAN, description="사용자 역할")
    barcode: str = PydanticField(..., min_length=1, max_length=50, description="사원증 바코드")
    is_active: bool = True


class UserCreate(UserBase):
    """사용자 생성을 위한 스키마 (평문 비밀번호는 저장 전에 해싱됩니다)"""
    password: str = PydanticField(..., min_length=6, max_length=72)


class UserUpdate(CamelModel):
    """사용자 정보 수정을 위한 스키마 (모든 필드는 선택 사항, 역할 변경은 관리자만 가능)"""
    name: Optional[str] = PydanticField(None, min_length=1, max_length=100)
    role: Optional[usr_models.UserRole] = None
    barcode: Optional[str] = PydanticField(None, min_length=1, max_length=50)


class UserResponse(UserBase):
    id: int
    created_at: Optional[datetime] = PydanticField(None, description="레코드 생성 일시")


# =============================================================================
# 2. 인증 (Token) 스키마
# =============================================================================
class Token(BaseModel):
    # OAuth2 규격 필드명이므로 camelCase 변환을 적용하지 않습니다.
    access_token: str
    token_type: str


class BadgeLogin(CamelModel):
    barcode: str = PydanticField(..., min_length=1, max_length=50)
