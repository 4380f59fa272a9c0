# src/SISFO/tests/test_semesters.py
import pytest

from .conftest import API, new_id

pytestmark = pytest.mark.anyio


async def active_ids(client, academic_year_id):
    r = await client.get(f"{API}/semesters/academic-year/{academic_year_id}")
    assert r.status_code == 200
    return [s["id"] for s in r.json()["data"] if s["is_active"]]


async def test_only_one_active_semester_per_year(client, api):
    year = await api.academic_year()
    odd = await api.semester(year["id"], "Ganjil", is_active=True)
    even = await api.semester(year["id"], "Genap", semester_type="even",
                              start_date="2026-01-01", end_date="2026-06-30", is_active=True)

    assert await active_ids(client, year["id"]) == [even["id"]]

    r = await client.post(f"{API}/semesters/{odd['id']}/activate")
    assert r.status_code == 200
    assert r.json()["data"]["is_active"] is True
    assert await active_ids(client, year["id"]) == [odd["id"]]


async def test_activation_is_scoped_to_the_academic_year(client, api):
    y1 = await api.academic_year("2024/2025")
    y2 = await api.academic_year("2025/2026")
    s1 = await api.semester(y1["id"], is_active=True)
    s2 = await api.semester(y2["id"], is_active=True)

    assert await active_ids(client, y1["id"]) == [s1["id"]]
    assert await active_ids(client, y2["id"]) == [s2["id"]]


async def test_update_to_active_deactivates_siblings(client, api):
    year = await api.academic_year()
    first = await api.semester(year["id"], "Ganjil", is_active=True)
    second = await api.semester(year["id"], "Genap", start_date="2026-01-01", end_date="2026-06-30")

    r = await client.put(f"{API}/semesters/{second['id']}", json={"is_active": True})
    assert r.status_code == 200
    assert await active_ids(client, year["id"]) == [second["id"]]

    first_now = await client.get(f"{API}/semesters/{first['id']}")
    assert first_now.json()["data"]["is_active"] is False


async def test_semester_requires_existing_academic_year(client):
    r = await client.post(f"{API}/semesters", json={
        "academic_year_id": new_id(), "name": "Ganjil",
        "start_date": "2025-07-01", "end_date": "2025-12-31",
    })
    assert r.status_code == 404


async def test_semester_dates_must_be_ordered(client, api):
    year = await api.academic_year()
    r = await client.post(f"{API}/semesters", json={
        "academic_year_id": year["id"], "name": "Ganjil",
        "start_date": "2025-12-31", "end_date": "2025-07-01",
    })
    assert r.status_code == 400
    assert "end_date" in r.json()["error"]["details"]
