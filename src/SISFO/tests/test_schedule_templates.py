# src/SISFO/tests/test_schedule_templates.py
import pytest

from .conftest import API, new_id

pytestmark = pytest.mark.anyio


async def make_template(client, items):
    r = await client.post(f"{API}/schedule-templates", json={"name": "Reguler", "items": items})
    assert r.status_code == 200, r.text
    return r.json()["data"]


async def test_template_round_trip(client):
    math = new_id()
    tpl = await make_template(client, [
        {"subject_id": math, "day_of_week": 1, "start_time": "07:00", "end_time": "08:30"},
        {"subject_id": None, "day_of_week": 1, "start_time": "08:30", "end_time": "09:00"},
    ])
    assert len(tpl["items"]) == 2
    assert {i["start_time"] for i in tpl["items"]} == {"07:00:00", "08:30:00"}

    fetched = await client.get(f"{API}/schedule-templates/{tpl['id']}")
    assert fetched.status_code == 200
    assert len(fetched.json()["data"]["items"]) == 2


async def test_materialise_skips_placeholder_items(client):
    math, physics = new_id(), new_id()
    tpl = await make_template(client, [
        {"subject_id": math, "day_of_week": 1, "start_time": "07:00", "end_time": "08:30"},
        {"subject_id": None, "day_of_week": 1, "start_time": "08:30", "end_time": "09:00"},
        {"subject_id": physics, "day_of_week": 2, "start_time": "07:00", "end_time": "08:30"},
    ])
    klass, t1, t2 = new_id(), new_id(), new_id()

    r = await client.post(f"{API}/schedules/from-template", json={
        "template_id": tpl["id"],
        "class_id": klass,
        "assignments": {math: t1, physics: t2},
    })
    assert r.status_code == 200, r.text
    slots = r.json()["data"]
    assert len(slots) == 2
    assert {s["teacher_id"] for s in slots} == {t1, t2}
    assert all(s["class_id"] == klass for s in slots)


async def test_materialise_accepts_assignment_list(client):
    math = new_id()
    tpl = await make_template(client, [
        {"subject_id": math, "day_of_week": 3, "start_time": "10:00", "end_time": "11:00"},
    ])
    teacher = new_id()
    r = await client.post(f"{API}/schedules/from-template", json={
        "template_id": tpl["id"],
        "class_id": new_id(),
        "assignments": [{"subject_id": math, "teacher_id": teacher}],
    })
    assert r.status_code == 200
    assert r.json()["data"][0]["teacher_id"] == teacher


async def test_materialise_requires_teacher_for_every_subject(client):
    math, physics = new_id(), new_id()
    tpl = await make_template(client, [
        {"subject_id": math, "day_of_week": 1, "start_time": "07:00", "end_time": "08:00"},
        {"subject_id": physics, "day_of_week": 1, "start_time": "08:00", "end_time": "09:00"},
    ])
    klass = new_id()
    r = await client.post(f"{API}/schedules/from-template", json={
        "template_id": tpl["id"], "class_id": klass, "assignments": {math: new_id()},
    })
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "MISSING_TEACHER_FOR_SUBJECT"
    assert err["details"]["subject_id"] == physics

    listed = await client.get(f"{API}/schedules/class/{klass}")
    assert listed.json()["data"] == []


async def test_materialise_empty_template(client):
    tpl = await make_template(client, [])
    r = await client.post(f"{API}/schedules/from-template", json={
        "template_id": tpl["id"], "class_id": new_id(), "assignments": {},
    })
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "TEMPLATE_EMPTY"


async def test_materialise_conflicts_with_existing_timetable(client):
    math = new_id()
    tpl = await make_template(client, [
        {"subject_id": math, "day_of_week": 1, "start_time": "07:00", "end_time": "08:00"},
    ])
    teacher = new_id()
    busy = await client.post(f"{API}/schedules", json={
        "class_id": new_id(), "subject_id": new_id(), "teacher_id": teacher,
        "day_of_week": 1, "start_time": "07:30", "end_time": "08:30",
    })
    assert busy.status_code == 200

    r = await client.post(f"{API}/schedules/from-template", json={
        "template_id": tpl["id"], "class_id": new_id(), "assignments": {math: teacher},
    })
    assert r.status_code == 409


async def test_template_items_can_be_added_and_removed(client):
    tpl = await make_template(client, [])
    added = await client.post(f"{API}/schedule-templates/{tpl['id']}/items", json={
        "subject_id": new_id(), "day_of_week": 5, "start_time": "13:00", "end_time": "14:00",
    })
    assert added.status_code == 200
    item_id = added.json()["data"]["id"]

    removed = await client.delete(f"{API}/schedule-templates/items/{item_id}")
    assert removed.status_code == 200
    fetched = await client.get(f"{API}/schedule-templates/{tpl['id']}")
    assert fetched.json()["data"]["items"] == []


async def test_template_not_found(client):
    r = await client.post(f"{API}/schedules/from-template", json={
        "template_id": new_id(), "class_id": new_id(), "assignments": {},
    })
    assert r.status_code == 404
