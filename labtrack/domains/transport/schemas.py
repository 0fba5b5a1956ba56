# labtrack/domains/transport/schemas.py

"""
'transport' 도메인 (검체 튜브 및 운송 박스)의 Pydantic 스키마를 정의하는 모듈입니다.

이 스키마들은 API 요청(Request) 및 응답(Response) 데이터의 유효성을 검사하고,
데이터를 직렬화(Serialization) 및 역직렬화(Deserialization)하는 데 사용됩니다.
"""

from typing import List, Optional
from datetime import date, datetime

from pydantic import Field as PydanticField

from labtrack.core.schemas import CamelModel
from .models import TemperatureType, TubeStatus, BoxStatus


# =============================================================================
# 1. 튜브 (Tube) 스키마
# =============================================================================
class TubeBase(CamelModel):
    barcode: str = PydanticField(min_length=1, max_length=50, description="튜브 바코드")
    type: str = PydanticField(min_length=1, max_length=100, description="검체 종류")
    patient_id: str = PydanticField(min_length=1, max_length=100, description="환자 ID")
    collection_date: date = PydanticField(description="채취일")
    temperature_requirement: TemperatureType = PydanticField(description="요구 보관 온도")
    lab_id: int = PydanticField(description="소속 실험실 ID")


class TubeCreate(TubeBase):
    pass


class TubeResponse(TubeBase):
    id: int
    box_id: Optional[int] = None
    status: TubeStatus
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class ScanAction(CamelModel):
    barcode: str = PydanticField(min_length=1, max_length=50)
    temperature_requirement: TemperatureType


# =============================================================================
# 2. 박스 (Box) 스키마
# =============================================================================
class BoxBase(CamelModel):
    barcode: str = PydanticField(min_length=1, max_length=50, description="박스 바코드")
    temperature_type: TemperatureType = PydanticField(description="박스 온도 등급")
    source_lab_id: int = PydanticField(description="출발 실험실 ID")
    destination_lab_id: Optional[int] = PydanticField(default=None, description="도착 실험실 ID")


class BoxCreate(BoxBase):
    pass


class BoxResponse(BoxBase):
    id: int
    status: BoxStatus
    tube_count: int
    pickup_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    transporter_id: Optional[str] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class BoxWithTubes(CamelModel):
    box: BoxResponse
    tubes: List[TubeResponse]


class TubeInBox(CamelModel):
    """튜브 적재/하역 결과: 변경된 튜브와 박스를 함께 반환합니다."""
    tube: TubeResponse
    box: BoxResponse


# =============================================================================
# 3. 워크플로우 요청 스키마
# =============================================================================
class TubeBarcodeRequest(CamelModel):
    tube_barcode: str = PydanticField(min_length=1, max_length=50)


class PickupRequest(CamelModel):
    transporter_id: str = PydanticField(min_length=1, max_length=100)


class MergeRequest(CamelModel):
    source_box_id: int
    target_box_id: int
