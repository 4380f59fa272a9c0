# src/SISFO/tests/test_master_data.py
import pytest

from .conftest import API, OTHER_TENANT

pytestmark = pytest.mark.anyio


async def test_subject_crud(client):
    created = await client.post(f"{API}/subjects", json={"code": "MTK", "name": "Matematika", "credit_units": 4})
    assert created.status_code == 201
    subject = created.json()["data"]
    assert subject["tenant_id"] == "tenant-a"

    updated = await client.put(f"{API}/subjects/{subject['id']}", json={"name": "Matematika Wajib"})
    assert updated.status_code == 200
    assert updated.json()["data"]["name"] == "Matematika Wajib"
    assert updated.json()["data"]["code"] == "MTK"

    listed = await client.get(f"{API}/subjects")
    assert listed.json()["meta"]["total"] == 1

    assert (await client.delete(f"{API}/subjects/{subject['id']}")).status_code == 200
    assert (await client.get(f"{API}/subjects/{subject['id']}")).status_code == 404
    assert (await client.get(f"{API}/subjects")).json()["meta"]["total"] == 0


async def test_deleting_twice_is_not_found(client, api):
    teacher = await api.teacher()
    assert (await client.delete(f"{API}/teachers/{teacher['id']}")).status_code == 200
    r = await client.delete(f"{API}/teachers/{teacher['id']}")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "4004"


async def test_listing_is_tenant_scoped(client, api):
    await api.student("A")
    await api.student("B")
    mine = await client.get(f"{API}/students")
    theirs = await client.get(f"{API}/students", headers={"X-Tenant-ID": OTHER_TENANT})
    assert mine.json()["meta"]["total"] == 2
    assert theirs.json()["data"] == []


async def test_pagination(client, api):
    for n in range(5):
        await api.subject(f"S{n}", f"Subject {n}")
    page = await client.get(f"{API}/subjects", params={"limit": 2, "offset": 2})
    body = page.json()
    assert len(body["data"]) == 2
    assert body["meta"]["total"] == 5
    assert body["meta"]["limit"] == 2


async def test_domain_validation_is_field_keyed(client):
    r = await client.post(f"{API}/subjects", json={"code": "", "name": " "})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "4001"
    assert set(err["details"]) == {"code", "name"}


async def test_request_validation_is_400(client):
    r = await client.post(f"{API}/academic-years", json={"name": "2025/2026"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "4001"
    assert "start_date" in err["details"]


async def test_academic_year_dates(client):
    r = await client.post(f"{API}/academic-years", json={
        "name": "2025/2026", "start_date": "2026-06-30", "end_date": "2025-07-01",
    })
    assert r.status_code == 400
    assert "end_date" in r.json()["error"]["details"]


async def test_grade_category_weight_must_be_positive(client):
    r = await client.post(f"{API}/grade-categories", json={"name": "Tugas", "weight": 0})
    assert r.status_code == 400


async def test_unknown_route_uses_envelope(client):
    r = await client.get(f"{API}/nope")
    assert r.status_code == 404
    assert r.json()["success"] is False
