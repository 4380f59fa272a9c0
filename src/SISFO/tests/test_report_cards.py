# src/SISFO/tests/test_report_cards.py
import pytest

from SISFO.api.deps import get_storage

from .conftest import API, TENANT, BrokenStorage

pytestmark = pytest.mark.anyio


@pytest.fixture
async def term(api):
    """One student graded in two subjects of a semester."""
    year = await api.academic_year()
    semester = await api.semester(year["id"], is_active=True)
    klass = await api.school_class()
    math = await api.subject("MTK", "Matematika", credit_units=4)
    art = await api.subject("SBD", "Seni Budaya")  # no credit units: default credit applies
    teacher = await api.teacher()
    student = await api.student("Andi")
    category = await api.category("Ujian", 100)

    grades = {}
    for subject, score in ((math, 92), (art, 75)):
        a = await api.assessment(
            teacher_id=teacher["id"], subject_id=subject["id"], class_id=klass["id"],
            category_id=category["id"], semester_id=semester["id"],
        )
        await api.grade(a["id"], student["id"], score)
        grades[subject["code"]] = a["id"]

    return {
        "semester": semester,
        "class": klass,
        "student": student,
        "assessments": grades,
    }


def generate_body(term, **extra):
    body = {
        "student_id": term["student"]["id"],
        "class_id": term["class"]["id"],
        "semester_id": term["semester"]["id"],
    }
    body.update(extra)
    return body


async def test_generate_computes_letters_and_gpa(client, term, storage):
    r = await client.post(f"{API}/report-cards/generate", json=generate_body(term, comments="Rajin"))
    assert r.status_code == 200, r.text
    card = r.json()["data"]

    assert card["status"] == "generated"
    assert card["comments"] == "Rajin"
    details = {d["subject_name"]: d for d in card["details"]}
    assert details["Matematika"]["grade_letter"] == "A"
    assert details["Matematika"]["credit"] == 4
    assert details["Seni Budaya"]["grade_letter"] == "C"
    assert details["Seni Budaya"]["credit"] == 3
    # (4 * 4 + 2 * 3) / 7
    assert card["gpa"] == pytest.approx(3.14)
    assert card["total_credits"] == 7

    path = f"report_cards/{TENANT}/{card['id']}.pdf"
    assert card["pdf_url"] == f"memory://{path}"
    assert storage.objects[path].startswith(b"%PDF")


async def test_regeneration_updates_in_place(client, api, term):
    first = (await client.post(f"{API}/report-cards/generate", json=generate_body(term))).json()["data"]
    await api.grade(term["assessments"]["SBD"], term["student"]["id"], 95)

    second = await client.post(f"{API}/report-cards/generate", json=generate_body(term))
    assert second.status_code == 200
    card = second.json()["data"]
    assert card["id"] == first["id"]
    assert len(card["details"]) == 2
    assert {d["grade_letter"] for d in card["details"]} == {"A"}
    assert card["gpa"] == pytest.approx(4.0)

    listed = await client.get(f"{API}/report-cards/students/{term['student']['id']}")
    assert [c["id"] for c in listed.json()["data"]] == [first["id"]]
    assert len(listed.json()["data"][0]["details"]) == 2


async def test_published_card_is_frozen(client, api, term):
    card = (await client.post(f"{API}/report-cards/generate", json=generate_body(term))).json()["data"]

    published = await client.post(f"{API}/report-cards/{card['id']}/publish")
    assert published.status_code == 200
    assert published.json()["data"]["status"] == "published"
    assert published.json()["data"]["published_at"]

    again = await client.post(f"{API}/report-cards/generate", json=generate_body(term))
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_PUBLISHED"

    twice = await client.post(f"{API}/report-cards/{card['id']}/publish")
    assert twice.status_code == 409

    regrade = await client.post(f"{API}/grades", json={
        "assessment_id": term["assessments"]["MTK"], "student_id": term["student"]["id"], "score": 10,
    })
    assert regrade.status_code == 409

    fetched = await client.get(f"{API}/report-cards/{card['id']}")
    assert fetched.json()["data"]["gpa"] == card["gpa"]


async def test_pdf_download(client, term):
    card = (await client.post(f"{API}/report-cards/generate", json=generate_body(term))).json()["data"]
    r = await client.get(f"{API}/report-cards/{card['id']}/pdf")
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.content.startswith(b"%PDF")


async def test_upload_failure_leaves_url_empty(app, client, term):
    app.dependency_overrides[get_storage] = lambda: BrokenStorage()
    r = await client.post(f"{API}/report-cards/generate", json=generate_body(term))
    assert r.status_code == 200
    assert r.json()["data"]["pdf_url"] == ""


async def test_curriculum_rules_override_the_default_ladder(client, api):
    curriculum = await client.post(f"{API}/curricula", json={"name": "Merdeka", "year": 2022})
    assert curriculum.status_code == 201
    cid = curriculum.json()["data"]["id"]
    for rule in (
        {"grade": "A", "min_score": 85, "max_score": 100, "points": 4},
        {"grade": "B", "min_score": 0, "max_score": 84.99, "points": 3},
    ):
        r = await client.post(f"{API}/curricula/{cid}/grading-rules", json=rule)
        assert r.status_code == 201, r.text

    year = await api.academic_year()
    semester = await api.semester(year["id"], curriculum_id=cid)
    klass = await api.school_class()
    subject = await api.subject("IPA", "IPA", credit_units=2)
    teacher = await api.teacher()
    student = await api.student()
    category = await api.category("Ujian", 1)
    a = await api.assessment(
        teacher_id=teacher["id"], subject_id=subject["id"], class_id=klass["id"],
        category_id=category["id"], semester_id=semester["id"],
    )
    await api.grade(a["id"], student["id"], 86)

    r = await client.post(f"{API}/report-cards/generate", json={
        "student_id": student["id"], "class_id": klass["id"], "semester_id": semester["id"],
    })
    assert r.status_code == 200
    [detail] = r.json()["data"]["details"]
    assert detail["grade_letter"] == "A"
    assert detail["points"] == 4


async def test_score_between_rules_keeps_curriculum_letters(client, api):
    curriculum = await client.post(f"{API}/curricula", json={"name": "KTSP", "year": 2006})
    cid = curriculum.json()["data"]["id"]
    for rule in (
        {"grade": "A", "min_score": 90, "max_score": 100, "points": 2},
        {"grade": "B", "min_score": 0, "max_score": 89, "points": 1},
    ):
        r = await client.post(f"{API}/curricula/{cid}/grading-rules", json=rule)
        assert r.status_code == 201, r.text

    year = await api.academic_year()
    semester = await api.semester(year["id"], curriculum_id=cid)
    klass = await api.school_class()
    subject = await api.subject("BIO", "Biologi", credit_units=2)
    teacher = await api.teacher()
    student = await api.student()
    category = await api.category("Ujian", 1)
    a = await api.assessment(
        teacher_id=teacher["id"], subject_id=subject["id"], class_id=klass["id"],
        category_id=category["id"], semester_id=semester["id"],
    )
    await api.grade(a["id"], student["id"], 89.5)

    r = await client.post(f"{API}/report-cards/generate", json={
        "student_id": student["id"], "class_id": klass["id"], "semester_id": semester["id"],
    })
    assert r.status_code == 200
    card = r.json()["data"]
    [detail] = card["details"]
    assert detail["grade_letter"] == "B"
    assert detail["points"] == 1
    assert card["gpa"] <= 2


async def test_deleted_student_is_not_found(client, term):
    sid = term["student"]["id"]
    assert (await client.delete(f"{API}/students/{sid}")).status_code == 200
    r = await client.post(f"{API}/report-cards/generate", json=generate_body(term))
    assert r.status_code == 404


async def test_unknown_semester(client, term):
    body = generate_body(term, semester_id="00000000-0000-0000-0000-000000000000")
    r = await client.post(f"{API}/report-cards/generate", json=body)
    assert r.status_code == 404
