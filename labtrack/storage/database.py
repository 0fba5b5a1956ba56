# labtrack/storage/database.py

"""
SQLModel(비동기 SQLAlchemy) 기반 저장소 구현입니다.

- 엔진과 세션 공장은 이 객체가 생성 시점에 만들어 소유합니다.
- 공개 메서드 하나가 하나의 트랜잭션(session_scope)입니다.
  적재/하역/병합/배송 완료 도중 예외가 발생하면 변경 전체가 롤백됩니다.
- 실제 SQL은 각 도메인의 crud 모듈이 담당합니다.
"""

import logging
from typing import List, Optional
from datetime import datetime, UTC

from sqlalchemy import text

from labtrack.core import database
from labtrack.domains.usr import models as usr_models
from labtrack.domains.usr import schemas as usr_schemas
from labtrack.domains.usr import crud as usr_crud
from labtrack.domains.lab import models as lab_models
from labtrack.domains.lab import schemas as lab_schemas
from labtrack.domains.lab import crud as lab_crud
from labtrack.domains.transport import models as transport_models
from labtrack.domains.transport import schemas as transport_schemas
from labtrack.domains.transport import crud as transport_crud
from labtrack.domains.shared import models as shared_models
from labtrack.domains.shared import schemas as shared_schemas
from labtrack.domains.shared import crud as shared_crud
from labtrack.domains.rpt import schemas as rpt_schemas
from labtrack.domains.rpt import services as rpt_services
from .base import IStorage

logger = logging.getLogger(__name__)

Tube = transport_models.Tube
Box = transport_models.Box
TubeStatus = transport_models.TubeStatus
BoxStatus = transport_models.BoxStatus


class DatabaseStorage(IStorage):
    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.engine = database.create_engine(database_url, echo=echo)
        self.session_factory = database.create_session_factory(self.engine)

    def _session(self):
        return database.session_scope(self.session_factory)

    # =========================================================================
    # 1. 사용자 (User)
    # =========================================================================
    async def get_user(self, id: int) -> Optional[usr_models.User]:
        async with self._session() as db:
            return await usr_crud.user.get(db, id=id)

    async def get_user_by_username(self, username: str) -> Optional[usr_models.User]:
        async with self._session() as db:
            return await usr_crud.user.get_by_username(db, username=username)

    async def get_user_by_barcode(self, barcode: str) -> Optional[usr_models.User]:
        async with self._session() as db:
            return await usr_crud.user.get_by_barcode(db, barcode=barcode)

    async def create_user(self, user_in: usr_schemas.UserBase, password_hash: str) -> usr_models.User:
        async with self._session() as db:
            db_user = await usr_crud.user.create_with_hash(db, obj_in=user_in, password_hash=password_hash)
        logger.info("사용자 생성: %s (ID: %s)", db_user.username, db_user.id)
        return db_user

    async def update_user(self, id: int, user_in: usr_schemas.UserUpdate) -> Optional[usr_models.User]:
        update_data = user_in.model_dump(exclude_unset=True, exclude_none=True)
        async with self._session() as db:
            db_user = await usr_crud.user.get(db, id=id)
            if db_user is None:
                return None
            db_user = await usr_crud.user.update(db, db_obj=db_user, obj_in=update_data)
        logger.info("사용자 수정: %s (ID: %s) %s", db_user.username, db_user.id, sorted(update_data))
        return db_user

    # =========================================================================
    # 2. 실험실 (Lab)
    # =========================================================================
    async def get_lab(self, id: int) -> Optional[lab_models.Lab]:
        async with self._session() as db:
            return await lab_crud.lab.get(db, id=id)

    async def get_lab_by_code(self, code: str) -> Optional[lab_models.Lab]:
        async with self._session() as db:
            return await lab_crud.lab.get_by_code(db, code=code)

    async def get_labs(self) -> List[lab_models.Lab]:
        async with self._session() as db:
            return await lab_crud.lab.get_all(db)

    async def create_lab(self, lab_in: lab_schemas.LabCreate) -> lab_models.Lab:
        async with self._session() as db:
            return await lab_crud.lab.create(db, obj_in=lab_in)

    # =========================================================================
    # 3. 튜브 (Tube)
    # =========================================================================
    async def get_tube(self, id: int) -> Optional[Tube]:
        async with self._session() as db:
            return await transport_crud.tube.get(db, id=id)

    async def get_tube_by_barcode(self, barcode: str) -> Optional[Tube]:
        async with self._session() as db:
            return await transport_crud.tube.get_by_barcode(db, barcode=barcode)

    async def get_tubes_by_lab(self, lab_id: int, status: Optional[TubeStatus] = None) -> List[Tube]:
        async with self._session() as db:
            return await transport_crud.tube.get_by_lab(db, lab_id=lab_id, status=status)

    async def get_tubes_by_box(self, box_id: int) -> List[Tube]:
        async with self._session() as db:
            return await transport_crud.tube.get_by_box(db, box_id=box_id)

    async def create_tube(self, tube_in: transport_schemas.TubeCreate) -> Tube:
        async with self._session() as db:
            db_tube = await transport_crud.tube.create(db, obj_in=tube_in)
        logger.info("튜브 생성: %s (ID: %s)", db_tube.barcode, db_tube.id)
        return db_tube

    async def update_tube_status(self, id: int, status: TubeStatus) -> Optional[Tube]:
        async with self._session() as db:
            db_tube = await transport_crud.tube.get(db, id=id)
            if db_tube is None:
                return None
            return await transport_crud.tube.update(
                db, db_obj=db_tube, obj_in={"status": status, "last_updated": datetime.now(UTC)}
            )

    async def update_tube_temperature(
        self, id: int, temperature: transport_models.TemperatureType
    ) -> Optional[Tube]:
        async with self._session() as db:
            db_tube = await transport_crud.tube.get(db, id=id)
            if db_tube is None:
                return None
            return await transport_crud.tube.update(
                db, db_obj=db_tube,
                obj_in={"temperature_requirement": temperature, "last_updated": datetime.now(UTC)},
            )

    async def assign_tube_to_box(self, tube_id: int, box_id: int) -> Optional[Tube]:
        async with self._session() as db:
            db_tube = await transport_crud.tube.get(db, id=tube_id)
            db_box = await transport_crud.box.get(db, id=box_id)
            if db_tube is None or db_box is None:
                return None

            if db_tube.temperature_requirement != db_box.temperature_type:
                logger.info(
                    "온도 불일치로 적재 거부: 튜브 %s(%s) -> 박스 %s(%s)",
                    db_tube.barcode, db_tube.temperature_requirement.value,
                    db_box.barcode, db_box.temperature_type.value,
                )
                return None

            if db_tube.box_id == box_id:
                return db_tube

            # 다른 박스에서 옮겨오는 경우 이전 박스의 튜브 수를 줄입니다.
            if db_tube.box_id is not None:
                previous = await transport_crud.box.get(db, id=db_tube.box_id)
                if previous is not None:
                    await transport_crud.box.adjust_tube_count(db, db_obj=previous, delta=-1)

            db_tube = await transport_crud.tube.update(
                db, db_obj=db_tube,
                obj_in={"box_id": box_id, "status": TubeStatus.BOXED, "last_updated": datetime.now(UTC)},
            )
            db_box = await transport_crud.box.adjust_tube_count(db, db_obj=db_box, delta=1)
            logger.info("튜브 %s 를 박스 %s 에 적재 (튜브 수: %d)", db_tube.barcode, db_box.barcode, db_box.tube_count)
            return db_tube

    async def remove_tube_from_box(self, tube_id: int) -> Optional[Tube]:
        async with self._session() as db:
            db_tube = await transport_crud.tube.get(db, id=tube_id)
            if db_tube is None or db_tube.box_id is None:
                return None
            db_box = await transport_crud.box.get(db, id=db_tube.box_id)
            if db_box is None:
                return None

            db_tube = await transport_crud.tube.update(
                db, db_obj=db_tube,
                obj_in={"box_id": None, "status": TubeStatus.PENDING, "last_updated": datetime.now(UTC)},
            )
            db_box = await transport_crud.box.adjust_tube_count(db, db_obj=db_box, delta=-1)
            logger.info("튜브 %s 를 박스 %s 에서 하역 (튜브 수: %d)", db_tube.barcode, db_box.barcode, db_box.tube_count)
            return db_tube

    # =========================================================================
    # 4. 박스 (Box)
    # =========================================================================
    async def get_box(self, id: int) -> Optional[Box]:
        async with self._session() as db:
            return await transport_crud.box.get(db, id=id)

    async def get_box_by_barcode(self, barcode: str) -> Optional[Box]:
        async with self._session() as db:
            return await transport_crud.box.get_by_barcode(db, barcode=barcode)

    async def get_boxes_by_lab(self, lab_id: int, status: Optional[BoxStatus] = None) -> List[Box]:
        async with self._session() as db:
            return await transport_crud.box.get_by_lab(db, lab_id=lab_id, status=status)

    async def create_box(self, box_in: transport_schemas.BoxCreate) -> Box:
        async with self._session() as db:
            db_box = await transport_crud.box.create(db, obj_in=box_in)
        logger.info("박스 생성: %s (ID: %s, %s)", db_box.barcode, db_box.id, db_box.temperature_type.value)
        return db_box

    async def update_box_status(self, id: int, status: BoxStatus) -> Optional[Box]:
        async with self._session() as db:
            db_box = await transport_crud.box.get(db, id=id)
            if db_box is None:
                return None
            return await transport_crud.box.update(
                db, db_obj=db_box, obj_in={"status": status, "last_updated": datetime.now(UTC)}
            )

    async def update_box_pickup(self, id: int, transporter_id: str) -> Optional[Box]:
        async with self._session() as db:
            db_box = await transport_crud.box.get(db, id=id)
            if db_box is None:
                return None
            now = datetime.now(UTC)
            return await transport_crud.box.update(
                db, db_obj=db_box,
                obj_in={
                    "status": BoxStatus.IN_TRANSIT,
                    "transporter_id": transporter_id,
                    "pickup_date": now,
                    "last_updated": now,
                },
            )

    async def update_box_delivery(self, id: int) -> Optional[Box]:
        async with self._session() as db:
            db_box = await transport_crud.box.get(db, id=id)
            if db_box is None:
                return None
            now = datetime.now(UTC)
            for db_tube in await transport_crud.tube.get_by_box(db, box_id=id):
                await transport_crud.tube.update(
                    db, db_obj=db_tube, obj_in={"status": TubeStatus.DELIVERED, "last_updated": now}
                )
            return await transport_crud.box.update(
                db, db_obj=db_box,
                obj_in={"status": BoxStatus.DELIVERED, "delivery_date": now, "last_updated": now},
            )

    async def merge_boxes(self, source_box_id: int, target_box_id: int) -> Optional[Box]:
        if source_box_id == target_box_id:
            return None
        async with self._session() as db:
            source = await transport_crud.box.get(db, id=source_box_id)
            target = await transport_crud.box.get(db, id=target_box_id)
            if source is None or target is None:
                return None

            if source.temperature_type != target.temperature_type:
                logger.info(
                    "온도 불일치로 병합 거부: %s(%s) -> %s(%s)",
                    source.barcode, source.temperature_type.value, target.barcode, target.temperature_type.value,
                )
                return None

            now = datetime.now(UTC)
            for db_tube in await transport_crud.tube.get_by_box(db, box_id=source_box_id):
                await transport_crud.tube.update(db, db_obj=db_tube, obj_in={"box_id": target_box_id, "last_updated": now})

            moved = source.tube_count
            await transport_crud.box.update(
                db, db_obj=source, obj_in={"status": BoxStatus.MERGED, "tube_count": 0, "last_updated": now}
            )
            target = await transport_crud.box.adjust_tube_count(db, db_obj=target, delta=moved)
            logger.info("박스 병합: %s -> %s (튜브 수: %d)", source.barcode, target.barcode, target.tube_count)
            return target

    # =========================================================================
    # 5. 알림 (Alert)
    # =========================================================================
    async def get_alert(self, id: int) -> Optional[shared_models.Alert]:
        async with self._session() as db:
            return await shared_crud.alert.get(db, id=id)

    async def get_alerts_by_lab(self, lab_id: int, resolved: Optional[bool] = None) -> List[shared_models.Alert]:
        async with self._session() as db:
            return await shared_crud.alert.get_by_lab(db, lab_id=lab_id, resolved=resolved)

    async def create_alert(self, alert_in: shared_schemas.AlertCreate) -> shared_models.Alert:
        async with self._session() as db:
            return await shared_crud.alert.create(db, obj_in={**alert_in.model_dump(), "resolved": False})

    async def resolve_alert(self, id: int) -> Optional[shared_models.Alert]:
        async with self._session() as db:
            db_alert = await shared_crud.alert.get(db, id=id)
            if db_alert is None:
                return None
            return await shared_crud.alert.update(db, db_obj=db_alert, obj_in={"resolved": True})

    # =========================================================================
    # 6. 활동 기록 (Activity)
    # =========================================================================
    async def get_activities_by_lab(self, lab_id: int, limit: int = 10) -> List[shared_models.Activity]:
        async with self._session() as db:
            return await shared_crud.activity.get_recent_by_lab(db, lab_id=lab_id, limit=limit)

    async def create_activity(self, activity_in: shared_schemas.ActivityCreate) -> shared_models.Activity:
        async with self._session() as db:
            return await shared_crud.activity.create(db, obj_in=activity_in)

    # =========================================================================
    # 7. 대시보드 (Dashboard)
    # =========================================================================
    async def get_dashboard_stats(self, lab_id: int) -> rpt_schemas.DashboardStats:
        async with self._session() as db:
            tube_counts = await transport_crud.tube.count_by_status_and_temperature(db, lab_id=lab_id)
            box_counts = await transport_crud.box.count_by_status_and_temperature(db, lab_id=lab_id)
            active_alerts = await shared_crud.alert.count_active(db, lab_id=lab_id)
        return rpt_services.build_dashboard_stats(tube_counts, box_counts, active_alerts)

    async def get_recent_boxes(self, lab_id: int, limit: int = 3) -> List[rpt_schemas.RecentBox]:
        async with self._session() as db:
            boxes = await transport_crud.box.get_recent(db, lab_id=lab_id, limit=limit)
        return [rpt_services.to_recent_box(b) for b in boxes]

    async def get_recent_activities(self, lab_id: int, limit: int = 4) -> List[rpt_schemas.RecentActivity]:
        recent = []
        async with self._session() as db:
            activities = await shared_crud.activity.get_recent_by_lab(db, lab_id=lab_id, limit=limit)
            for db_activity in activities:
                db_user = None
                if db_activity.user_id is not None:
                    db_user = await usr_crud.user.get(db, id=db_activity.user_id)
                recent.append(rpt_services.describe_activity(db_activity, db_user.name if db_user else None))
        return recent

    # =========================================================================
    # 8. 수명 주기
    # =========================================================================
    async def initialize(self) -> None:
        await database.create_db_and_tables(self.engine)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("데이터베이스 연결 확인 실패: %s", e)
            return False

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("데이터베이스 엔진 연결 풀을 해제했습니다.")
