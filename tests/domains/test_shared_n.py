# tests/domains/test_shared_n.py

"""
'shared' 도메인 (알림 및 활동 기록) 관련 API 엔드포인트에 대한 통합 테스트 모듈입니다.
"""

import pytest
from httpx import AsyncClient

from labtrack.domains.lab import models as lab_models
from labtrack.domains.usr import models as usr_models


# =============================================================================
# 1. 알림 (Alert)
# =============================================================================
@pytest.mark.asyncio
async def test_create_and_list_alerts(authorized_client: AsyncClient, test_lab_a: lab_models.Lab):
    response = await authorized_client.post(
        f"/api/labs/{test_lab_a.id}/alerts",
        json={"type": "temperature", "message": "Freezer 2 above -15C", "severity": "error"},
    )

    assert response.status_code == 201
    alert = response.json()
    assert alert["labId"] == test_lab_a.id
    assert alert["resolved"] is False
    assert alert["severity"] == "error"

    listed = await authorized_client.get(f"/api/labs/{test_lab_a.id}/alerts")
    assert [a["id"] for a in listed.json()] == [alert["id"]]


@pytest.mark.asyncio
async def test_resolve_alert_idempotent(authorized_client: AsyncClient, test_lab_a: lab_models.Lab):
    created = await authorized_client.post(
        f"/api/labs/{test_lab_a.id}/alerts", json={"type": "delay", "message": "Pickup late"}
    )
    alert_id = created.json()["id"]

    first = await authorized_client.post(f"/api/alerts/{alert_id}/resolve")
    second = await authorized_client.post(f"/api/alerts/{alert_id}/resolve")

    assert first.status_code == 200
    assert first.json()["resolved"] is True
    assert second.status_code == 200
    assert second.json()["resolved"] is True

    unresolved = await authorized_client.get(f"/api/labs/{test_lab_a.id}/alerts", params={"resolved": "false"})
    resolved = await authorized_client.get(f"/api/labs/{test_lab_a.id}/alerts", params={"resolved": "true"})
    assert unresolved.json() == []
    assert [a["id"] for a in resolved.json()] == [alert_id]

    # 해결 활동은 최초 1회만 기록됩니다.
    activities = await authorized_client.get(f"/api/labs/{test_lab_a.id}/activities")
    types = [a["type"] for a in activities.json()]
    assert types.count("alert_resolved") == 1


@pytest.mark.asyncio
async def test_resolve_alert_not_found(authorized_client: AsyncClient):
    response = await authorized_client.post("/api/alerts/999/resolve")

    assert response.status_code == 404
    assert response.json() == {"message": "Alert not found"}


@pytest.mark.asyncio
async def test_create_alert_unknown_lab(authorized_client: AsyncClient):
    response = await authorized_client.post("/api/labs/999/alerts", json={"type": "t", "message": "m"})

    assert response.status_code == 404


# =============================================================================
# 2. 활동 기록 (Activity)
# =============================================================================
@pytest.mark.asyncio
async def test_mutations_record_activities(
    authorized_client: AsyncClient, test_lab_a: lab_models.Lab, test_technician: usr_models.User
):
    await authorized_client.post("/api/tubes", json={
        "barcode": "TUBE-001", "type": "blood", "patientId": "P-1",
        "collectionDate": "2025-01-15", "temperatureRequirement": "cold", "labId": test_lab_a.id,
    })
    box = (await authorized_client.post("/api/boxes", json={
        "barcode": "BOX-01", "temperatureType": "cold", "sourceLabId": test_lab_a.id,
    })).json()
    await authorized_client.post(f"/api/boxes/{box['id']}/add-tube", json={"tubeBarcode": "TUBE-001"})

    response = await authorized_client.get(f"/api/labs/{test_lab_a.id}/activities")

    assert response.status_code == 200
    activities = response.json()
    assert [a["type"] for a in activities] == ["tube_added_to_box", "box_created", "tube_created"]
    assert activities[0]["userId"] == test_technician.id
    assert activities[0]["boxId"] == box["id"]
    assert activities[0]["details"]["message"] == "Tube TUBE-001 added to box BOX-01"


@pytest.mark.asyncio
async def test_activities_limit(authorized_client: AsyncClient, test_lab_a: lab_models.Lab):
    for i in range(12):
        await authorized_client.post(
            f"/api/labs/{test_lab_a.id}/activities", json={"type": "note", "details": {"message": f"note {i}"}}
        )

    default = await authorized_client.get(f"/api/labs/{test_lab_a.id}/activities")
    limited = await authorized_client.get(f"/api/labs/{test_lab_a.id}/activities", params={"limit": 3})

    assert len(default.json()) == 10
    assert [a["details"]["message"] for a in limited.json()] == ["note 11", "note 10", "note 9"]


@pytest.mark.asyncio
async def test_create_activity(authorized_client: AsyncClient, test_lab_a: lab_models.Lab, test_technician: usr_models.User):
    response = await authorized_client.post(
        f"/api/labs/{test_lab_a.id}/activities", json={"type": "note", "details": {"message": "Shift handover"}}
    )

    assert response.status_code == 201
    activity = response.json()
    assert activity["labId"] == test_lab_a.id
    assert activity["userId"] == test_technician.id
    assert activity["details"] == {"message": "Shift handover"}


@pytest.mark.asyncio
async def test_create_activity_unauthenticated(client: AsyncClient, test_lab_a: lab_models.Lab):
    response = await client.post(f"/api/labs/{test_lab_a.id}/activities", json={"type": "note"})

    assert response.status_code == 401
