# src/SISFO/tests/test_schedules.py
import pytest

from .conftest import API, OTHER_TENANT, new_id

pytestmark = pytest.mark.anyio


def slot(class_id, teacher_id, day=1, start="08:00", end="09:00", room="", subject_id=None):
    return {
        "class_id": class_id,
        "subject_id": subject_id or new_id(),
        "teacher_id": teacher_id,
        "day_of_week": day,
        "start_time": start,
        "end_time": end,
        "room": room,
    }


async def test_create_normalises_times(client):
    r = await client.post(f"{API}/schedules", json=slot(new_id(), new_id(), start="07:30", end="08:15"))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["data"]["start_time"] == "07:30:00"
    assert body["data"]["end_time"] == "08:15:00"
    assert body["meta"]["request_id"]


async def test_teacher_double_booking_is_rejected(client):
    teacher = new_id()
    first = await client.post(f"{API}/schedules", json=slot(new_id(), teacher, start="08:00", end="09:30"))
    assert first.status_code == 200

    r = await client.post(f"{API}/schedules", json=slot(new_id(), teacher, start="09:00:00", end="10:00"))
    assert r.status_code == 409
    err = r.json()["error"]
    assert err["code"] == "SCHEDULE_CONFLICT"
    conflicts = err["details"]["conflicts"]
    assert conflicts[0]["existing"]["id"] == first.json()["data"]["id"]


async def test_class_overlap_is_rejected(client):
    klass = new_id()
    assert (await client.post(f"{API}/schedules", json=slot(klass, new_id()))).status_code == 200
    r = await client.post(f"{API}/schedules", json=slot(klass, new_id(), start="08:30", end="09:15"))
    assert r.status_code == 409


async def test_adjacent_slots_do_not_conflict(client):
    teacher, klass = new_id(), new_id()
    a = await client.post(f"{API}/schedules", json=slot(klass, teacher, start="08:00", end="09:00"))
    b = await client.post(f"{API}/schedules", json=slot(klass, teacher, start="09:00", end="10:00"))
    assert a.status_code == 200
    assert b.status_code == 200


async def test_other_day_does_not_conflict(client):
    teacher = new_id()
    assert (await client.post(f"{API}/schedules", json=slot(new_id(), teacher, day=1))).status_code == 200
    assert (await client.post(f"{API}/schedules", json=slot(new_id(), teacher, day=2))).status_code == 200


async def test_room_conflicts_only_when_named(client):
    a = await client.post(f"{API}/schedules", json=slot(new_id(), new_id(), room="Lab 1"))
    assert a.status_code == 200
    clash = await client.post(f"{API}/schedules", json=slot(new_id(), new_id(), room="Lab 1", start="08:45"))
    assert clash.status_code == 409

    # empty rooms never collide with each other
    b = await client.post(f"{API}/schedules", json=slot(new_id(), new_id()))
    c = await client.post(f"{API}/schedules", json=slot(new_id(), new_id()))
    assert b.status_code == 200
    assert c.status_code == 200


async def test_update_does_not_conflict_with_itself(client):
    created = await client.post(f"{API}/schedules", json=slot(new_id(), new_id()))
    sid = created.json()["data"]["id"]
    r = await client.put(f"{API}/schedules/{sid}", json={"start_time": "08:30", "end_time": "09:30"})
    assert r.status_code == 200, r.text
    assert r.json()["data"]["start_time"] == "08:30:00"


async def test_update_into_conflict_keeps_original(client):
    teacher = new_id()
    await client.post(f"{API}/schedules", json=slot(new_id(), teacher, start="10:00", end="11:00"))
    moving = await client.post(f"{API}/schedules", json=slot(new_id(), teacher, start="08:00", end="09:00"))
    sid = moving.json()["data"]["id"]

    r = await client.put(f"{API}/schedules/{sid}", json={"start_time": "10:30", "end_time": "11:30"})
    assert r.status_code == 409

    again = await client.get(f"{API}/schedules/{sid}")
    assert again.json()["data"]["start_time"] == "08:00:00"


async def test_invalid_slot_reports_fields(client):
    r = await client.post(f"{API}/schedules", json=slot(new_id(), new_id(), day=8, start="10:00", end="09:00"))
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "4001"
    assert "day_of_week" in err["details"]
    assert "end_time" in err["details"]


async def test_bulk_create_is_all_or_nothing(client):
    klass = new_id()
    batch = [
        slot(klass, new_id(), start="07:00", end="08:00"),
        slot(klass, new_id(), start="08:00", end="09:00"),
        slot(klass, new_id(), start="08:30", end="09:30"),  # overlaps the previous member
    ]
    r = await client.post(f"{API}/schedules/bulk", json={"schedules": batch})
    assert r.status_code == 409
    conflict = r.json()["error"]["details"]["conflicts"][0]
    assert conflict["candidate_index"] == 2
    assert conflict["batch_index"] == 1

    listed = await client.get(f"{API}/schedules/class/{klass}")
    assert listed.json()["data"] == []


async def test_bulk_create_against_persisted(client):
    teacher = new_id()
    await client.post(f"{API}/schedules", json=slot(new_id(), teacher, start="08:00", end="09:00"))
    batch = [slot(new_id(), new_id(), start="13:00", end="14:00"), slot(new_id(), teacher)]
    r = await client.post(f"{API}/schedules/bulk", json={"schedules": batch})
    assert r.status_code == 409

    by_teacher = await client.get(f"{API}/schedules/teacher/{teacher}")
    assert len(by_teacher.json()["data"]) == 1


async def test_bulk_create_success_and_validation_keys(client):
    klass = new_id()
    ok = await client.post(f"{API}/schedules/bulk", json={"schedules": [
        slot(klass, new_id(), start="07:00", end="08:00"),
        slot(klass, new_id(), start="08:00", end="09:00"),
    ]})
    assert ok.status_code == 200
    assert len(ok.json()["data"]) == 2

    bad = await client.post(f"{API}/schedules/bulk", json={"schedules": [
        slot(new_id(), new_id()),
        slot(new_id(), new_id(), start="9am"),
    ]})
    assert bad.status_code == 400
    assert "schedules[1].start_time" in bad.json()["error"]["details"]


async def test_deleted_slot_frees_its_time(client):
    teacher = new_id()
    created = await client.post(f"{API}/schedules", json=slot(new_id(), teacher))
    sid = created.json()["data"]["id"]
    assert (await client.delete(f"{API}/schedules/{sid}")).status_code == 200

    assert (await client.get(f"{API}/schedules/{sid}")).status_code == 404
    assert (await client.post(f"{API}/schedules", json=slot(new_id(), teacher))).status_code == 200


async def test_tenants_are_isolated(client):
    teacher = new_id()
    created = await client.post(f"{API}/schedules", json=slot(new_id(), teacher))
    sid = created.json()["data"]["id"]

    other = {"X-Tenant-ID": OTHER_TENANT}
    assert (await client.get(f"{API}/schedules/{sid}", headers=other)).status_code == 404
    # the same teacher id in another tenant is a different teacher
    r = await client.post(f"{API}/schedules", json=slot(new_id(), teacher), headers=other)
    assert r.status_code == 200


async def test_tenant_is_required(client):
    r = await client.get(f"{API}/schedules", headers={"X-Tenant-ID": ""})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "4001"


async def test_tenant_from_query_param(client):
    r = await client.get(f"{API}/schedules", params={"tenant_id": OTHER_TENANT}, headers={"X-Tenant-ID": ""})
    assert r.status_code == 200


async def test_malformed_id_is_rejected(client):
    r = await client.get(f"{API}/schedules/not-a-uuid")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "4001"
