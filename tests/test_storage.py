# tests/test_storage.py

"""
저장소(IStorage) 구현에 대한 계약 테스트 모듈입니다.

`storage` 픽스처가 MemoryStorage와 DatabaseStorage(인메모리 SQLite)로 매개변수화되어 있으므로,
아래 모든 테스트는 두 구현에 대해 각각 실행되어 동일한 동작을 보장합니다.
"""

from datetime import datetime, timedelta, UTC

import pytest

from labtrack.storage import IStorage
from labtrack.storage.seed import seed_default_data
from labtrack.domains.lab import models as lab_models
from labtrack.domains.usr import schemas as usr_schemas
from labtrack.domains.transport.models import TemperatureType, TubeStatus, BoxStatus
from labtrack.domains.shared import schemas as shared_schemas
from labtrack.domains.shared.models import AlertSeverity
from labtrack.domains.rpt import services as rpt_services


async def _assert_tube_count_consistent(storage: IStorage, *box_ids: int):
    """박스의 tube_count가 실제로 해당 박스를 가리키는 튜브 수와 같은지 확인합니다."""
    for box_id in box_ids:
        box = await storage.get_box(box_id)
        tubes = await storage.get_tubes_by_box(box_id)
        assert box.tube_count == len(tubes)


# =============================================================================
# 1. 튜브 생성 및 조회
# =============================================================================
@pytest.mark.asyncio
async def test_create_tube_defaults(storage: IStorage, tube_factory):
    tube = await tube_factory("TUBE-001")

    assert tube.id is not None
    assert tube.status == TubeStatus.PENDING
    assert tube.box_id is None

    fetched = await storage.get_tube_by_barcode("TUBE-001")
    assert fetched.id == tube.id
    assert fetched.temperature_requirement == TemperatureType.COLD


@pytest.mark.asyncio
async def test_lookup_misses_return_none(storage: IStorage):
    assert await storage.get_tube(999) is None
    assert await storage.get_tube_by_barcode("NOPE") is None
    assert await storage.get_box(999) is None
    assert await storage.get_box_by_barcode("NOPE") is None
    assert await storage.get_lab(999) is None
    assert await storage.get_user(999) is None
    assert await storage.get_alert(999) is None


@pytest.mark.asyncio
async def test_get_tubes_by_lab_filters_status(storage: IStorage, tube_factory, box_factory):
    t1 = await tube_factory("TUBE-001")
    await tube_factory("TUBE-002")
    box = await box_factory("BOX-01")
    await storage.assign_tube_to_box(t1.id, box.id)
    lab_id = t1.lab_id

    assert len(await storage.get_tubes_by_lab(lab_id)) == 2
    pending = await storage.get_tubes_by_lab(lab_id, TubeStatus.PENDING)
    assert [t.barcode for t in pending] == ["TUBE-002"]
    boxed = await storage.get_tubes_by_lab(lab_id, TubeStatus.BOXED)
    assert [t.barcode for t in boxed] == ["TUBE-001"]


@pytest.mark.asyncio
async def test_returned_objects_are_copies(storage: IStorage, tube_factory):
    tube = await tube_factory("TUBE-001")
    tube.status = TubeStatus.DELIVERED

    fetched = await storage.get_tube(tube.id)
    assert fetched.status == TubeStatus.PENDING


@pytest.mark.asyncio
async def test_update_tube_temperature(storage: IStorage, tube_factory):
    tube = await tube_factory("TUBE-001", TemperatureType.AMBIENT)

    updated = await storage.update_tube_temperature(tube.id, TemperatureType.FROZEN)
    assert updated.temperature_requirement == TemperatureType.FROZEN
    assert await storage.update_tube_temperature(999, TemperatureType.COLD) is None


# =============================================================================
# 2. 적재 / 하역
# =============================================================================
@pytest.mark.asyncio
async def test_assign_tube_matching_temperature(storage: IStorage, tube_factory, box_factory):
    """TUBE-001(cold)을 BOX-01(cold)에 적재하면 성공합니다."""
    tube = await tube_factory("TUBE-001", TemperatureType.COLD)
    box = await box_factory("BOX-01", TemperatureType.COLD)

    assigned = await storage.assign_tube_to_box(tube.id, box.id)

    assert assigned is not None
    assert assigned.box_id == box.id
    assert assigned.status == TubeStatus.BOXED
    assert (await storage.get_box(box.id)).tube_count == 1
    await _assert_tube_count_consistent(storage, box.id)


@pytest.mark.asyncio
async def test_assign_tube_temperature_mismatch_is_rejected(storage: IStorage, tube_factory, box_factory):
    """cold 튜브를 frozen 박스에 적재하면 None을 반환하고 상태는 바뀌지 않습니다."""
    tube = await tube_factory("TUBE-001", TemperatureType.COLD)
    cold_box = await box_factory("BOX-01", TemperatureType.COLD)
    frozen_box = await box_factory("BOX-02", TemperatureType.FROZEN)
    await storage.assign_tube_to_box(tube.id, cold_box.id)

    assert await storage.assign_tube_to_box(tube.id, frozen_box.id) is None

    tube_after = await storage.get_tube(tube.id)
    assert tube_after.box_id == cold_box.id
    assert tube_after.status == TubeStatus.BOXED
    assert (await storage.get_box(cold_box.id)).tube_count == 1
    assert (await storage.get_box(frozen_box.id)).tube_count == 0


@pytest.mark.asyncio
async def test_assign_missing_tube_or_box(storage: IStorage, tube_factory, box_factory):
    tube = await tube_factory("TUBE-001")
    box = await box_factory("BOX-01")

    assert await storage.assign_tube_to_box(999, box.id) is None
    assert await storage.assign_tube_to_box(tube.id, 999) is None
    assert (await storage.get_box(box.id)).tube_count == 0


@pytest.mark.asyncio
async def test_assign_same_box_twice_does_not_double_count(storage: IStorage, tube_factory, box_factory):
    tube = await tube_factory("TUBE-001")
    box = await box_factory("BOX-01")

    await storage.assign_tube_to_box(tube.id, box.id)
    again = await storage.assign_tube_to_box(tube.id, box.id)

    assert again.box_id == box.id
    assert (await storage.get_box(box.id)).tube_count == 1


@pytest.mark.asyncio
async def test_assign_moves_tube_between_boxes(storage: IStorage, tube_factory, box_factory):
    tube = await tube_factory("TUBE-001")
    first = await box_factory("BOX-01")
    second = await box_factory("BOX-02")

    await storage.assign_tube_to_box(tube.id, first.id)
    moved = await storage.assign_tube_to_box(tube.id, second.id)

    assert moved.box_id == second.id
    assert (await storage.get_box(first.id)).tube_count == 0
    assert (await storage.get_box(second.id)).tube_count == 1
    await _assert_tube_count_consistent(storage, first.id, second.id)


@pytest.mark.asyncio
async def test_remove_tube_from_box(storage: IStorage, tube_factory, box_factory):
    tube = await tube_factory("TUBE-001")
    box = await box_factory("BOX-01")
    await storage.assign_tube_to_box(tube.id, box.id)

    removed = await storage.remove_tube_from_box(tube.id)

    assert removed.box_id is None
    assert removed.status == TubeStatus.PENDING
    assert (await storage.get_box(box.id)).tube_count == 0
    await _assert_tube_count_consistent(storage, box.id)


@pytest.mark.asyncio
async def test_remove_unboxed_tube_is_noop(storage: IStorage, tube_factory):
    tube = await tube_factory("TUBE-001")

    assert await storage.remove_tube_from_box(tube.id) is None
    assert await storage.remove_tube_from_box(999) is None
    assert (await storage.get_tube(tube.id)).status == TubeStatus.PENDING


# =============================================================================
# 3. 박스 상태 전이 / 병합
# =============================================================================
@pytest.mark.asyncio
async def test_create_box_defaults(storage: IStorage, box_factory):
    box = await box_factory("BOX-01", TemperatureType.FROZEN)

    assert box.status == BoxStatus.OPEN
    assert box.tube_count == 0
    assert box.pickup_date is None
    assert (await storage.get_box_by_barcode("BOX-01")).id == box.id


@pytest.mark.asyncio
async def test_pickup_and_delivery(storage: IStorage, tube_factory, box_factory):
    box = await box_factory("BOX-01")
    for barcode in ("TUBE-001", "TUBE-002"):
        tube = await tube_factory(barcode)
        await storage.assign_tube_to_box(tube.id, box.id)
    await storage.update_box_status(box.id, BoxStatus.READY)

    picked = await storage.update_box_pickup(box.id, "DRIVER-7")
    assert picked.status == BoxStatus.IN_TRANSIT
    assert picked.transporter_id == "DRIVER-7"
    assert picked.pickup_date is not None

    delivered = await storage.update_box_delivery(box.id)
    assert delivered.status == BoxStatus.DELIVERED
    assert delivered.delivery_date is not None
    tubes = await storage.get_tubes_by_box(box.id)
    assert {t.status for t in tubes} == {TubeStatus.DELIVERED}

    assert await storage.update_box_pickup(999, "DRIVER-7") is None
    assert await storage.update_box_delivery(999) is None


@pytest.mark.asyncio
async def test_merge_boxes(storage: IStorage, tube_factory, box_factory):
    source = await box_factory("BOX-01")
    target = await box_factory("BOX-02")
    for barcode in ("TUBE-001", "TUBE-002"):
        tube = await tube_factory(barcode)
        await storage.assign_tube_to_box(tube.id, source.id)
    tube = await tube_factory("TUBE-003")
    await storage.assign_tube_to_box(tube.id, target.id)

    merged = await storage.merge_boxes(source.id, target.id)

    assert merged.id == target.id
    assert merged.tube_count == 3
    source_after = await storage.get_box(source.id)
    assert source_after.tube_count == 0
    assert source_after.status == BoxStatus.MERGED
    assert await storage.get_tubes_by_box(source.id) == []
    assert len(await storage.get_tubes_by_box(target.id)) == 3
    await _assert_tube_count_consistent(storage, source.id, target.id)


@pytest.mark.asyncio
async def test_merge_temperature_mismatch_is_rejected(storage: IStorage, tube_factory, box_factory):
    """BOX-01(cold, 튜브 2개)을 BOX-02(ambient)로 병합하면 거부되고 두 박스 모두 그대로입니다."""
    source = await box_factory("BOX-01", TemperatureType.COLD)
    target = await box_factory("BOX-02", TemperatureType.AMBIENT)
    for barcode in ("TUBE-001", "TUBE-002"):
        tube = await tube_factory(barcode, TemperatureType.COLD)
        await storage.assign_tube_to_box(tube.id, source.id)

    assert await storage.merge_boxes(source.id, target.id) is None

    source_after = await storage.get_box(source.id)
    target_after = await storage.get_box(target.id)
    assert source_after.status == BoxStatus.OPEN
    assert source_after.tube_count == 2
    assert target_after.tube_count == 0
    assert len(await storage.get_tubes_by_box(source.id)) == 2


@pytest.mark.asyncio
async def test_merge_same_or_missing_box(storage: IStorage, box_factory):
    box = await box_factory("BOX-01")

    assert await storage.merge_boxes(box.id, box.id) is None
    assert await storage.merge_boxes(box.id, 999) is None
    assert (await storage.get_box(box.id)).status == BoxStatus.OPEN


@pytest.mark.asyncio
async def test_get_boxes_by_lab_filters_status(storage: IStorage, box_factory, test_lab_a: lab_models.Lab):
    await box_factory("BOX-01")
    ready = await box_factory("BOX-02")
    await storage.update_box_status(ready.id, BoxStatus.READY)

    assert len(await storage.get_boxes_by_lab(test_lab_a.id)) == 2
    ready_boxes = await storage.get_boxes_by_lab(test_lab_a.id, BoxStatus.READY)
    assert [b.barcode for b in ready_boxes] == ["BOX-02"]


# =============================================================================
# 4. 알림 / 활동 기록
# =============================================================================
@pytest.mark.asyncio
async def test_resolve_alert_is_idempotent(storage: IStorage, test_lab_a: lab_models.Lab):
    alert = await storage.create_alert(shared_schemas.AlertCreate(
        type="temperature", message="Cold chain breach", severity=AlertSeverity.ERROR, lab_id=test_lab_a.id,
    ))
    assert alert.resolved is False

    first = await storage.resolve_alert(alert.id)
    second = await storage.resolve_alert(alert.id)

    assert first.resolved is True
    assert second.resolved is True
    assert second.id == alert.id
    assert await storage.resolve_alert(999) is None


@pytest.mark.asyncio
async def test_get_alerts_by_lab_filters_resolved(storage: IStorage, test_lab_a: lab_models.Lab):
    for message in ("first", "second"):
        await storage.create_alert(shared_schemas.AlertCreate(type="info", message=message, lab_id=test_lab_a.id))
    alerts = await storage.get_alerts_by_lab(test_lab_a.id)
    await storage.resolve_alert(alerts[0].id)

    assert len(await storage.get_alerts_by_lab(test_lab_a.id)) == 2
    assert [a.message for a in await storage.get_alerts_by_lab(test_lab_a.id, resolved=False)] == ["second"]
    assert [a.message for a in await storage.get_alerts_by_lab(test_lab_a.id, resolved=True)] == ["first"]


@pytest.mark.asyncio
async def test_activities_newest_first_with_limit(storage: IStorage, test_lab_a: lab_models.Lab):
    for i in range(5):
        await storage.create_activity(shared_schemas.ActivityCreate(
            type="tube_scanned", details={"message": f"scan {i}"}, lab_id=test_lab_a.id,
        ))

    activities = await storage.get_activities_by_lab(test_lab_a.id, limit=3)

    assert [a.details["message"] for a in activities] == ["scan 4", "scan 3", "scan 2"]


# =============================================================================
# 5. 대시보드
# =============================================================================
@pytest.mark.asyncio
async def test_dashboard_stats(storage: IStorage, tube_factory, box_factory, test_lab_a: lab_models.Lab):
    await tube_factory("TUBE-001", TemperatureType.COLD)
    await tube_factory("TUBE-002", TemperatureType.COLD)
    await tube_factory("TUBE-003", TemperatureType.AMBIENT)
    boxed = await tube_factory("TUBE-004", TemperatureType.FROZEN)

    ready_box = await box_factory("BOX-01", TemperatureType.COLD)
    await storage.update_box_status(ready_box.id, BoxStatus.READY)
    transit_box = await box_factory("BOX-02", TemperatureType.FROZEN)
    await storage.assign_tube_to_box(boxed.id, transit_box.id)
    await storage.update_box_pickup(transit_box.id, "DRIVER-1")
    await box_factory("BOX-03", TemperatureType.AMBIENT)

    await storage.create_alert(shared_schemas.AlertCreate(type="t", message="open", lab_id=test_lab_a.id))
    closed = await storage.create_alert(shared_schemas.AlertCreate(type="t", message="closed", lab_id=test_lab_a.id))
    await storage.resolve_alert(closed.id)

    stats = await storage.get_dashboard_stats(test_lab_a.id)

    assert stats.pending_samples == 3
    assert stats.cold_tubes == 2
    assert stats.ambient_tubes == 1
    assert stats.frozen_tubes == 0
    assert stats.ready_boxes == 1
    assert stats.cold_boxes == 1
    assert stats.in_transit == 1
    assert stats.frozen_in_transit == 1
    assert stats.active_alerts == 1


@pytest.mark.asyncio
async def test_dashboard_stats_are_scoped_to_lab(storage: IStorage, tube_factory, test_lab_b: lab_models.Lab):
    await tube_factory("TUBE-001")

    stats = await storage.get_dashboard_stats(test_lab_b.id)

    assert stats.pending_samples == 0
    assert stats.active_alerts == 0


@pytest.mark.asyncio
async def test_recent_boxes(storage: IStorage, tube_factory, box_factory, test_lab_a: lab_models.Lab):
    for barcode in ("BOX-01", "BOX-02", "BOX-03", "BOX-04"):
        await box_factory(barcode)
    tube = await tube_factory("TUBE-001")
    last = await storage.get_box_by_barcode("BOX-04")
    await storage.assign_tube_to_box(tube.id, last.id)

    recent = await storage.get_recent_boxes(test_lab_a.id)

    assert [b.code for b in recent] == ["BOX-04", "BOX-03", "BOX-02"]
    assert recent[0].content == "1 tubes"
    assert recent[0].type == "cold"
    assert recent[0].status == "open"


@pytest.mark.asyncio
async def test_recent_activities(storage: IStorage, test_lab_a: lab_models.Lab, test_technician):
    await storage.create_activity(shared_schemas.ActivityCreate(
        type="box_created", details={"message": "Box BOX-01 created"}, lab_id=test_lab_a.id,
        user_id=test_technician.id,
    ))
    await storage.create_activity(shared_schemas.ActivityCreate(type="alert_created", lab_id=test_lab_a.id))

    recent = await storage.get_recent_activities(test_lab_a.id)

    assert len(recent) == 2
    newest, oldest = recent
    assert newest.message == "alert_created"
    assert newest.user == "System"
    assert newest.icon == "ri-alert-line"
    assert oldest.message == "Box BOX-01 created"
    assert oldest.user == "Lab Technician"
    assert oldest.icon == "ri-inbox-line"
    assert oldest.time == "Just now"


# =============================================================================
# 6. 기본 데이터 / 수명 주기
# =============================================================================
@pytest.mark.asyncio
async def test_seed_default_data_is_idempotent(storage: IStorage):
    await seed_default_data(storage, "admin123")
    await seed_default_data(storage, "admin123")

    labs = await storage.get_labs()
    assert sorted(lab.code for lab in labs) == ["LAB-A", "LAB-B", "LAB-C"]
    admin = await storage.get_user_by_barcode("EMP-001")
    assert admin.username == "admin"


@pytest.mark.asyncio
async def test_ping(storage: IStorage):
    assert await storage.ping() is True


@pytest.mark.asyncio
async def test_update_user_changes_only_given_fields(storage: IStorage, test_technician):
    updated = await storage.update_user(test_technician.id, usr_schemas.UserUpdate(name="Night Shift Tech"))

    assert updated.name == "Night Shift Tech"
    assert updated.barcode == test_technician.barcode
    assert updated.role == test_technician.role
    assert (await storage.get_user(test_technician.id)).name == "Night Shift Tech"
    assert await storage.update_user(999, usr_schemas.UserUpdate(name="Ghost")) is None


# =============================================================================
# 7. 표시용 헬퍼 (저장소 독립)
# =============================================================================
@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(seconds=20), "Just now"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=5), "5 minutes ago"),
        (timedelta(hours=1), "1 hour ago"),
        (timedelta(hours=3), "3 hours ago"),
        (timedelta(days=2), "2 days ago"),
    ],
)
def test_time_ago(delta, expected):
    now = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
    assert rpt_services.time_ago(now - delta, now) == expected


def test_time_ago_accepts_naive_datetime():
    now = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
    assert rpt_services.time_ago(datetime(2025, 1, 15, 11, 0), now) == "1 hour ago"


@pytest.mark.parametrize(
    "activity_type, expected",
    [
        ("box_created", ("ri-inbox-line", "bg-blue-100")),
        ("box_pickup", ("ri-truck-line", "bg-purple-100")),
        ("tube_scanned", ("ri-scanner-line", "bg-green-100")),
        ("alert_resolved", ("ri-alert-line", "bg-red-100")),
        ("box_delivery", ("ri-information-line", "bg-blue-100")),
    ],
)
def test_activity_icon(activity_type, expected):
    assert rpt_services.activity_icon(activity_type) == expected
