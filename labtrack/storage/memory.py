# labtrack/storage/memory.py

"""
프로세스 메모리(dict)에 데이터를 보관하는 저장소 구현입니다.

- 개발 및 테스트용입니다. 프로세스가 종료되면 데이터가 사라집니다.
- 변경 작업은 하나의 asyncio.Lock 임계 구역에서 수행되어, 복합 작업 도중 다른 요청이 끼어들 수 없습니다.
- 반환되는 객체는 모두 복사본이므로, 호출자가 수정해도 내부 상태는 바뀌지 않습니다.
"""

import asyncio
import itertools
import logging
from typing import Callable, Dict, Iterator, List, Optional, TypeVar
from datetime import datetime, UTC

from sqlmodel import SQLModel

from labtrack.domains.usr import models as usr_models
from labtrack.domains.usr import schemas as usr_schemas
from labtrack.domains.lab import models as lab_models
from labtrack.domains.lab import schemas as lab_schemas
from labtrack.domains.transport import models as transport_models
from labtrack.domains.transport import schemas as transport_schemas
from labtrack.domains.shared import models as shared_models
from labtrack.domains.shared import schemas as shared_schemas
from labtrack.domains.rpt import schemas as rpt_schemas
from labtrack.domains.rpt import services as rpt_services
from .base import IStorage

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)

Tube = transport_models.Tube
Box = transport_models.Box
TubeStatus = transport_models.TubeStatus
BoxStatus = transport_models.BoxStatus


def _now() -> datetime:
    return datetime.now(UTC)


def _clone(obj: Optional[ModelType]) -> Optional[ModelType]:
    if obj is None:
        return None
    return type(obj).model_validate(obj.model_dump())


class MemoryStorage(IStorage):
    def __init__(self) -> None:
        self._users: Dict[int, usr_models.User] = {}
        self._labs: Dict[int, lab_models.Lab] = {}
        self._tubes: Dict[int, Tube] = {}
        self._boxes: Dict[int, Box] = {}
        self._alerts: Dict[int, shared_models.Alert] = {}
        self._activities: Dict[int, shared_models.Activity] = {}

        self._ids: Dict[str, Iterator[int]] = {
            name: itertools.count(1)
            for name in ("user", "lab", "tube", "box", "alert", "activity")
        }
        self._lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # 내부 헬퍼
    # -------------------------------------------------------------------------
    def _insert(self, table: Dict[int, ModelType], key: str, obj: ModelType) -> ModelType:
        obj.id = next(self._ids[key])
        table[obj.id] = obj
        return obj

    @staticmethod
    def _find(table: Dict[int, ModelType], predicate: Callable[[ModelType], bool]) -> Optional[ModelType]:
        return next((obj for obj in table.values() if predicate(obj)), None)

    # =========================================================================
    # 1. 사용자 (User)
    # =========================================================================
    async def get_user(self, id: int) -> Optional[usr_models.User]:
        return _clone(self._users.get(id))

    async def get_user_by_username(self, username: str) -> Optional[usr_models.User]:
        return _clone(self._find(self._users, lambda u: u.username == username))

    async def get_user_by_barcode(self, barcode: str) -> Optional[usr_models.User]:
        return _clone(self._find(self._users, lambda u: u.barcode == barcode))

    async def create_user(self, user_in: usr_schemas.UserBase, password_hash: str) -> usr_models.User:
        data = user_in.model_dump(exclude={"password"})
        async with self._lock:
            user = usr_models.User.model_validate({**data, "password_hash": password_hash})
            self._insert(self._users, "user", user)
        logger.info("사용자 생성: %s (ID: %s)", user.username, user.id)
        return _clone(user)

    async def update_user(self, id: int, user_in: usr_schemas.UserUpdate) -> Optional[usr_models.User]:
        update_data = user_in.model_dump(exclude_unset=True, exclude_none=True)
        async with self._lock:
            user = self._users.get(id)
            if user is None:
                return None
            for key, value in update_data.items():
                setattr(user, key, value)
        logger.info("사용자 수정: %s (ID: %s) %s", user.username, user.id, sorted(update_data))
        return _clone(user)

    # =========================================================================
    # 2. 실험실 (Lab)
    # =========================================================================
    async def get_lab(self, id: int) -> Optional[lab_models.Lab]:
        return _clone(self._labs.get(id))

    async def get_lab_by_code(self, code: str) -> Optional[lab_models.Lab]:
        return _clone(self._find(self._labs, lambda lab: lab.code == code))

    async def get_labs(self) -> List[lab_models.Lab]:
        return [_clone(lab) for lab in self._labs.values()]

    async def create_lab(self, lab_in: lab_schemas.LabCreate) -> lab_models.Lab:
        async with self._lock:
            lab = lab_models.Lab.model_validate(lab_in.model_dump())
            self._insert(self._labs, "lab", lab)
        return _clone(lab)

    # =========================================================================
    # 3. 튜브 (Tube)
    # =========================================================================
    async def get_tube(self, id: int) -> Optional[Tube]:
        return _clone(self._tubes.get(id))

    async def get_tube_by_barcode(self, barcode: str) -> Optional[Tube]:
        return _clone(self._find(self._tubes, lambda t: t.barcode == barcode))

    async def get_tubes_by_lab(self, lab_id: int, status: Optional[TubeStatus] = None) -> List[Tube]:
        return [
            _clone(t) for t in self._tubes.values()
            if t.lab_id == lab_id and (status is None or t.status == status)
        ]

    async def get_tubes_by_box(self, box_id: int) -> List[Tube]:
        return [_clone(t) for t in self._tubes.values() if t.box_id == box_id]

    async def create_tube(self, tube_in: transport_schemas.TubeCreate) -> Tube:
        now = _now()
        async with self._lock:
            tube = Tube.model_validate({
                **tube_in.model_dump(),
                "status": TubeStatus.PENDING,
                "box_id": None,
                "created_at": now,
                "last_updated": now,
            })
            self._insert(self._tubes, "tube", tube)
        logger.info("튜브 생성: %s (ID: %s)", tube.barcode, tube.id)
        return _clone(tube)

    async def update_tube_status(self, id: int, status: TubeStatus) -> Optional[Tube]:
        async with self._lock:
            tube = self._tubes.get(id)
            if tube is None:
                return None
            tube.status = status
            tube.last_updated = _now()
            return _clone(tube)

    async def update_tube_temperature(
        self, id: int, temperature: transport_models.TemperatureType
    ) -> Optional[Tube]:
        async with self._lock:
            tube = self._tubes.get(id)
            if tube is None:
                return None
            tube.temperature_requirement = temperature
            tube.last_updated = _now()
            return _clone(tube)

    async def assign_tube_to_box(self, tube_id: int, box_id: int) -> Optional[Tube]:
        async with self._lock:
            tube = self._tubes.get(tube_id)
            box = self._boxes.get(box_id)
            if tube is None or box is None:
                return None

            if tube.temperature_requirement != box.temperature_type:
                logger.info(
                    "온도 불일치로 적재 거부: 튜브 %s(%s) -> 박스 %s(%s)",
                    tube.barcode, tube.temperature_requirement.value, box.barcode, box.temperature_type.value,
                )
                return None

            if tube.box_id == box_id:
                return _clone(tube)

            now = _now()
            # 다른 박스에서 옮겨오는 경우 이전 박스의 튜브 수를 줄입니다.
            previous = self._boxes.get(tube.box_id) if tube.box_id is not None else None
            if previous is not None:
                previous.tube_count = max(0, previous.tube_count - 1)
                previous.last_updated = now

            tube.box_id = box_id
            tube.status = TubeStatus.BOXED
            tube.last_updated = now
            box.tube_count += 1
            box.last_updated = now
            logger.info("튜브 %s 를 박스 %s 에 적재 (튜브 수: %d)", tube.barcode, box.barcode, box.tube_count)
            return _clone(tube)

    async def remove_tube_from_box(self, tube_id: int) -> Optional[Tube]:
        async with self._lock:
            tube = self._tubes.get(tube_id)
            if tube is None or tube.box_id is None:
                return None
            box = self._boxes.get(tube.box_id)
            if box is None:
                return None

            now = _now()
            tube.box_id = None
            tube.status = TubeStatus.PENDING
            tube.last_updated = now
            box.tube_count = max(0, box.tube_count - 1)
            box.last_updated = now
            logger.info("튜브 %s 를 박스 %s 에서 하역 (튜브 수: %d)", tube.barcode, box.barcode, box.tube_count)
            return _clone(tube)

    # =========================================================================
    # 4. 박스 (Box)
    # =========================================================================
    async def get_box(self, id: int) -> Optional[Box]:
        return _clone(self._boxes.get(id))

    async def get_box_by_barcode(self, barcode: str) -> Optional[Box]:
        return _clone(self._find(self._boxes, lambda b: b.barcode == barcode))

    async def get_boxes_by_lab(self, lab_id: int, status: Optional[BoxStatus] = None) -> List[Box]:
        return [
            _clone(b) for b in self._boxes.values()
            if b.source_lab_id == lab_id and (status is None or b.status == status)
        ]

    async def create_box(self, box_in: transport_schemas.BoxCreate) -> Box:
        now = _now()
        async with self._lock:
            box = Box.model_validate({
                **box_in.model_dump(),
                "status": BoxStatus.OPEN,
                "tube_count": 0,
                "created_at": now,
                "last_updated": now,
            })
            self._insert(self._boxes, "box", box)
        logger.info("박스 생성: %s (ID: %s, %s)", box.barcode, box.id, box.temperature_type.value)
        return _clone(box)

    async def update_box_status(self, id: int, status: BoxStatus) -> Optional[Box]:
        async with self._lock:
            box = self._boxes.get(id)
            if box is None:
                return None
            box.status = status
            box.last_updated = _now()
            return _clone(box)

    async def update_box_pickup(self, id: int, transporter_id: str) -> Optional[Box]:
        async with self._lock:
            box = self._boxes.get(id)
            if box is None:
                return None
            now = _now()
            box.status = BoxStatus.IN_TRANSIT
            box.transporter_id = transporter_id
            box.pickup_date = now
            box.last_updated = now
            return _clone(box)

    async def update_box_delivery(self, id: int) -> Optional[Box]:
        async with self._lock:
            box = self._boxes.get(id)
            if box is None:
                return None
            now = _now()
            box.status = BoxStatus.DELIVERED
            box.delivery_date = now
            box.last_updated = now
            for tube in self._tubes.values():
                if tube.box_id == id:
                    tube.status = TubeStatus.DELIVERED
                    tube.last_updated = now
            return _clone(box)

    async def merge_boxes(self, source_box_id: int, target_box_id: int) -> Optional[Box]:
        async with self._lock:
            source = self._boxes.get(source_box_id)
            target = self._boxes.get(target_box_id)
            if source is None or target is None or source_box_id == target_box_id:
                return None

            if source.temperature_type != target.temperature_type:
                logger.info(
                    "온도 불일치로 병합 거부: %s(%s) -> %s(%s)",
                    source.barcode, source.temperature_type.value, target.barcode, target.temperature_type.value,
                )
                return None

            now = _now()
            for tube in self._tubes.values():
                if tube.box_id == source_box_id:
                    tube.box_id = target_box_id
                    tube.last_updated = now

            target.tube_count += source.tube_count
            target.last_updated = now
            source.tube_count = 0
            source.status = BoxStatus.MERGED
            source.last_updated = now
            logger.info("박스 병합: %s -> %s (튜브 수: %d)", source.barcode, target.barcode, target.tube_count)
            return _clone(target)

    # =========================================================================
    # 5. 알림 (Alert)
    # =========================================================================
    async def get_alert(self, id: int) -> Optional[shared_models.Alert]:
        return _clone(self._alerts.get(id))

    async def get_alerts_by_lab(self, lab_id: int, resolved: Optional[bool] = None) -> List[shared_models.Alert]:
        return [
            _clone(a) for a in self._alerts.values()
            if a.lab_id == lab_id and (resolved is None or a.resolved == resolved)
        ]

    async def create_alert(self, alert_in: shared_schemas.AlertCreate) -> shared_models.Alert:
        async with self._lock:
            alert = shared_models.Alert.model_validate({
                **alert_in.model_dump(), "resolved": False, "created_at": _now(),
            })
            self._insert(self._alerts, "alert", alert)
        return _clone(alert)

    async def resolve_alert(self, id: int) -> Optional[shared_models.Alert]:
        async with self._lock:
            alert = self._alerts.get(id)
            if alert is None:
                return None
            alert.resolved = True
            return _clone(alert)

    # =========================================================================
    # 6. 활동 기록 (Activity)
    # =========================================================================
    async def get_activities_by_lab(self, lab_id: int, limit: int = 10) -> List[shared_models.Activity]:
        activities = sorted(
            (a for a in self._activities.values() if a.lab_id == lab_id),
            key=lambda a: (a.created_at, a.id),
            reverse=True,
        )
        return [_clone(a) for a in activities[:limit]]

    async def create_activity(self, activity_in: shared_schemas.ActivityCreate) -> shared_models.Activity:
        async with self._lock:
            activity = shared_models.Activity.model_validate({**activity_in.model_dump(), "created_at": _now()})
            self._insert(self._activities, "activity", activity)
        return _clone(activity)

    # =========================================================================
    # 7. 대시보드 (Dashboard)
    # =========================================================================
    async def get_dashboard_stats(self, lab_id: int) -> rpt_schemas.DashboardStats:
        tube_counts: rpt_services.StatusTemperatureCounts = {}
        for tube in self._tubes.values():
            if tube.lab_id == lab_id:
                key = rpt_services.count_key(tube.status, tube.temperature_requirement)
                tube_counts[key] = tube_counts.get(key, 0) + 1

        box_counts: rpt_services.StatusTemperatureCounts = {}
        for box in self._boxes.values():
            if box.source_lab_id == lab_id:
                key = rpt_services.count_key(box.status, box.temperature_type)
                box_counts[key] = box_counts.get(key, 0) + 1

        active_alerts = sum(1 for a in self._alerts.values() if a.lab_id == lab_id and not a.resolved)
        return rpt_services.build_dashboard_stats(tube_counts, box_counts, active_alerts)

    async def get_recent_boxes(self, lab_id: int, limit: int = 3) -> List[rpt_schemas.RecentBox]:
        boxes = sorted(
            (b for b in self._boxes.values() if b.source_lab_id == lab_id),
            key=lambda b: (b.created_at, b.id),
            reverse=True,
        )
        return [rpt_services.to_recent_box(b) for b in boxes[:limit]]

    async def get_recent_activities(self, lab_id: int, limit: int = 4) -> List[rpt_schemas.RecentActivity]:
        recent = []
        for activity in await self.get_activities_by_lab(lab_id, limit):
            user = self._users.get(activity.user_id) if activity.user_id is not None else None
            recent.append(rpt_services.describe_activity(activity, user.name if user else None))
        return recent
