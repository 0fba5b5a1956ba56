# labtrack/domains/transport/models.py

"""
'transport' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

검체 튜브(Tube)는 하나의 보관 온도 등급을 요구하며,
운송 박스(Box)는 같은 온도 등급의 튜브만 담을 수 있습니다.
"""

from typing import Optional, List
from datetime import datetime, date, UTC
from enum import Enum

from sqlalchemy import ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, Relationship, SQLModel, Column


class TemperatureType(str, Enum):
    AMBIENT = "ambient"  # 상온
    COLD = "cold"        # 냉장 (+4°C)
    FROZEN = "frozen"    # 냉동 (-20°C)


class TubeStatus(str, Enum):
    PENDING = "pending"
    BOXED = "boxed"
    DELIVERED = "delivered"


class BoxStatus(str, Enum):
    OPEN = "open"
    READY = "ready"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    MERGED = "merged"  # 병합 원본 박스의 종료 상태


# =============================================================================
# 1. boxes 테이블 모델
# =============================================================================
class Box(SQLModel, table=True):
    __tablename__ = "boxes"

    id: Optional[int] = Field(default=None, primary_key=True, description="박스 고유 ID")
    barcode: str = Field(max_length=50, unique=True, description="박스 바코드")
    temperature_type: TemperatureType = Field(description="박스 온도 등급")
    status: BoxStatus = Field(default=BoxStatus.OPEN, description="박스 상태")
    source_lab_id: int = Field(foreign_key="labs.id", description="출발 실험실 ID (FK)")
    destination_lab_id: Optional[int] = Field(default=None, foreign_key="labs.id", description="도착 실험실 ID (FK)")
    tube_count: int = Field(default=0, description="적재된 튜브 수")
    pickup_date: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)), description="픽업 일시")
    delivery_date: Optional[datetime] = Field(default=None, sa_column=Column(TIMESTAMP(timezone=True)), description="배송 완료 일시")
    transporter_id: Optional[str] = Field(default=None, max_length=100, description="운송자 식별자")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    last_updated: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    # --- 관계 정의 ---
    tubes: List["Tube"] = Relationship(back_populates="box")


# =============================================================================
# 2. tubes 테이블 모델
# =============================================================================
class Tube(SQLModel, table=True):
    __tablename__ = "tubes"

    id: Optional[int] = Field(default=None, primary_key=True, description="튜브 고유 ID")
    barcode: str = Field(max_length=50, unique=True, description="튜브 바코드")
    type: str = Field(max_length=100, description="검체 종류 (예: blood, urine)")
    patient_id: str = Field(max_length=100, description="환자 ID")
    collection_date: date = Field(description="채취일")
    temperature_requirement: TemperatureType = Field(description="요구 보관 온도")
    box_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("boxes.id", ondelete="SET NULL"), index=True),
        description="적재된 박스 ID (FK)"
    )
    status: TubeStatus = Field(default=TubeStatus.PENDING, description="튜브 상태")
    lab_id: int = Field(foreign_key="labs.id", description="소속 실험실 ID (FK)")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    last_updated: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    # --- 관계 정의 ---
    box: Optional["Box"] = Relationship(back_populates="tubes")
