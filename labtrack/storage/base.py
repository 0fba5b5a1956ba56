# labtrack/storage/base.py

"""
저장소(Repository) 인터페이스를 정의하는 모듈입니다.

라우터는 이 인터페이스에만 의존하며, 실제 구현은 설정(STORAGE_BACKEND)에 따라
MemoryStorage 또는 DatabaseStorage 중 하나가 애플리케이션 시작 시 한 번 생성됩니다.

조회 메서드는 대상이 없으면 None을 반환합니다.
복합 작업(튜브 적재, 하역, 박스 병합, 배송 완료)은 구현체 안에서 원자적으로 수행됩니다.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from labtrack.domains.usr import models as usr_models
from labtrack.domains.usr import schemas as usr_schemas
from labtrack.domains.lab import models as lab_models
from labtrack.domains.lab import schemas as lab_schemas
from labtrack.domains.transport import models as transport_models
from labtrack.domains.transport import schemas as transport_schemas
from labtrack.domains.shared import models as shared_models
from labtrack.domains.shared import schemas as shared_schemas
from labtrack.domains.rpt import schemas as rpt_schemas

Tube = transport_models.Tube
Box = transport_models.Box


class IStorage(ABC):

    # =========================================================================
    # 1. 사용자 (User)
    # =========================================================================
    @abstractmethod
    async def get_user(self, id: int) -> Optional[usr_models.User]: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[usr_models.User]: ...

    @abstractmethod
    async def get_user_by_barcode(self, barcode: str) -> Optional[usr_models.User]: ...

    @abstractmethod
    async def create_user(self, user_in: usr_schemas.UserBase, password_hash: str) -> usr_models.User:
        """사용자를 생성합니다. 비밀번호 해싱은 호출자(security 모듈)의 책임입니다."""

    @abstractmethod
    async def update_user(self, id: int, user_in: usr_schemas.UserUpdate) -> Optional[usr_models.User]:
        """전달된 필드만 수정합니다. 사용자가 없으면 None을 반환합니다."""

    # =========================================================================
    # 2. 실험실 (Lab)
    # =========================================================================
    @abstractmethod
    async def get_lab(self, id: int) -> Optional[lab_models.Lab]: ...

    @abstractmethod
    async def get_lab_by_code(self, code: str) -> Optional[lab_models.Lab]: ...

    @abstractmethod
    async def get_labs(self) -> List[lab_models.Lab]: ...

    @abstractmethod
    async def create_lab(self, lab_in: lab_schemas.LabCreate) -> lab_models.Lab: ...

    # =========================================================================
    # 3. 튜브 (Tube)
    # =========================================================================
    @abstractmethod
    async def get_tube(self, id: int) -> Optional[Tube]: ...

    @abstractmethod
    async def get_tube_by_barcode(self, barcode: str) -> Optional[Tube]: ...

    @abstractmethod
    async def get_tubes_by_lab(
        self, lab_id: int, status: Optional[transport_models.TubeStatus] = None
    ) -> List[Tube]: ...

    @abstractmethod
    async def get_tubes_by_box(self, box_id: int) -> List[Tube]: ...

    @abstractmethod
    async def create_tube(self, tube_in: transport_schemas.TubeCreate) -> Tube:
        """상태 'pending', 박스 미지정으로 튜브를 생성합니다."""

    @abstractmethod
    async def update_tube_status(self, id: int, status: transport_models.TubeStatus) -> Optional[Tube]: ...

    @abstractmethod
    async def update_tube_temperature(
        self, id: int, temperature: transport_models.TemperatureType
    ) -> Optional[Tube]: ...

    @abstractmethod
    async def assign_tube_to_box(self, tube_id: int, box_id: int) -> Optional[Tube]:
        """
        튜브를 박스에 적재합니다.
        튜브/박스가 없거나 튜브의 요구 온도와 박스 온도 등급이 다르면 None을 반환하며 아무것도 바꾸지 않습니다.
        """

    @abstractmethod
    async def remove_tube_from_box(self, tube_id: int) -> Optional[Tube]:
        """박스에 적재된 튜브를 꺼냅니다. 적재되지 않은 튜브면 None을 반환합니다."""

    # =========================================================================
    # 4. 박스 (Box)
    # =========================================================================
    @abstractmethod
    async def get_box(self, id: int) -> Optional[Box]: ...

    @abstractmethod
    async def get_box_by_barcode(self, barcode: str) -> Optional[Box]: ...

    @abstractmethod
    async def get_boxes_by_lab(
        self, lab_id: int, status: Optional[transport_models.BoxStatus] = None
    ) -> List[Box]: ...

    @abstractmethod
    async def create_box(self, box_in: transport_schemas.BoxCreate) -> Box:
        """상태 'open', 튜브 수 0으로 박스를 생성합니다."""

    @abstractmethod
    async def update_box_status(self, id: int, status: transport_models.BoxStatus) -> Optional[Box]: ...

    @abstractmethod
    async def update_box_pickup(self, id: int, transporter_id: str) -> Optional[Box]:
        """운송 중(in_transit)으로 전환합니다. 상태 선행 조건은 라우터가 검사합니다."""

    @abstractmethod
    async def update_box_delivery(self, id: int) -> Optional[Box]:
        """배송 완료(delivered)로 전환하고, 박스의 튜브도 delivered로 표시합니다."""

    @abstractmethod
    async def merge_boxes(self, source_box_id: int, target_box_id: int) -> Optional[Box]:
        """
        원본 박스의 튜브를 모두 대상 박스로 옮기고 원본을 'merged'로 종료합니다.
        박스가 없거나 온도 등급이 다르면 None을 반환합니다. 반환값은 갱신된 대상 박스입니다.
        """

    # =========================================================================
    # 5. 알림 (Alert)
    # =========================================================================
    @abstractmethod
    async def get_alert(self, id: int) -> Optional[shared_models.Alert]: ...

    @abstractmethod
    async def get_alerts_by_lab(self, lab_id: int, resolved: Optional[bool] = None) -> List[shared_models.Alert]: ...

    @abstractmethod
    async def create_alert(self, alert_in: shared_schemas.AlertCreate) -> shared_models.Alert: ...

    @abstractmethod
    async def resolve_alert(self, id: int) -> Optional[shared_models.Alert]:
        """알림을 해결 처리합니다. 이미 해결된 알림도 같은 결과를 반환합니다."""

    # =========================================================================
    # 6. 활동 기록 (Activity)
    # =========================================================================
    @abstractmethod
    async def get_activities_by_lab(self, lab_id: int, limit: int = 10) -> List[shared_models.Activity]: ...

    @abstractmethod
    async def create_activity(self, activity_in: shared_schemas.ActivityCreate) -> shared_models.Activity: ...

    # =========================================================================
    # 7. 대시보드 (Dashboard)
    # =========================================================================
    @abstractmethod
    async def get_dashboard_stats(self, lab_id: int) -> rpt_schemas.DashboardStats: ...

    @abstractmethod
    async def get_recent_boxes(self, lab_id: int, limit: int = 3) -> List[rpt_schemas.RecentBox]: ...

    @abstractmethod
    async def get_recent_activities(self, lab_id: int, limit: int = 4) -> List[rpt_schemas.RecentActivity]: ...

    # =========================================================================
    # 8. 수명 주기
    # =========================================================================
    async def initialize(self) -> None:
        """애플리케이션 시작 시 한 번 호출됩니다 (테이블 생성 등)."""
        return None

    async def ping(self) -> bool:
        """저장소 연결 상태를 확인합니다."""
        return True

    async def close(self) -> None:
        """저장소가 보유한 자원(연결 풀 등)을 해제합니다."""
        return None
