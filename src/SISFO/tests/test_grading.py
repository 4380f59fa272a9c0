# src/SISFO/tests/test_grading.py
import pytest

from .conftest import API, new_id

pytestmark = pytest.mark.anyio


@pytest.fixture
async def setting(api):
    """A class, subject, teacher and student with two weighted categories."""
    klass = await api.school_class()
    subject = await api.subject("MTK", "Matematika", credit_units=4)
    teacher = await api.teacher()
    student = await api.student("Andi")
    daily = await api.category("Harian", 40)
    exam = await api.category("Ujian", 60)
    return {
        "class_id": klass["id"],
        "subject_id": subject["id"],
        "teacher_id": teacher["id"],
        "student_id": student["id"],
        "daily": daily["id"],
        "exam": exam["id"],
    }


def assessment_kwargs(s, category):
    return dict(teacher_id=s["teacher_id"], subject_id=s["subject_id"], class_id=s["class_id"], category_id=category)


async def final_score(client, s, semester_id=None):
    params = {"subject_id": s["subject_id"], "class_id": s["class_id"]}
    if semester_id:
        params["semester_id"] = semester_id
    r = await client.get(f"{API}/grades/students/{s['student_id']}/final-score", params=params)
    assert r.status_code == 200, r.text
    return r.json()["data"]


async def test_weighted_final_score(client, api, setting):
    quiz = await api.assessment(**assessment_kwargs(setting, setting["daily"]), max_score=100)
    exam = await api.assessment(**assessment_kwargs(setting, setting["exam"]), max_score=50, name="UTS")
    await api.grade(quiz["id"], setting["student_id"], 80)
    await api.grade(exam["id"], setting["student_id"], 45)

    data = await final_score(client, setting)
    # (80 * 40 + 90 * 60) / 100
    assert data["final_score"] == pytest.approx(86.0)
    assert data["assessments_counted"] == 2


async def test_missing_grades_are_skipped(client, api, setting):
    quiz = await api.assessment(**assessment_kwargs(setting, setting["daily"]))
    await api.assessment(**assessment_kwargs(setting, setting["exam"]), name="UTS")
    await api.grade(quiz["id"], setting["student_id"], 70)

    data = await final_score(client, setting)
    assert data["final_score"] == pytest.approx(70.0)
    assert data["assessments_counted"] == 1


async def test_no_assessments_scores_zero(client, setting):
    data = await final_score(client, setting)
    assert data["final_score"] == 0
    assert data["assessments_counted"] == 0


async def test_grade_input_is_idempotent(client, api, setting):
    quiz = await api.assessment(**assessment_kwargs(setting, setting["daily"]))
    first = await api.grade(quiz["id"], setting["student_id"], 60)
    second = await api.grade(quiz["id"], setting["student_id"], 95, status="final", feedback="bagus")

    assert second["id"] == first["id"]
    assert second["score"] == 95
    assert second["status"] == "final"

    rows = await client.get(f"{API}/grades/assessments/{quiz['id']}")
    assert len(rows.json()["data"]) == 1
    assert (await final_score(client, setting))["final_score"] == pytest.approx(95.0)


async def test_grade_defaults_to_draft(api, setting):
    quiz = await api.assessment(**assessment_kwargs(setting, setting["daily"]))
    g = await api.grade(quiz["id"], setting["student_id"], 50)
    assert g["status"] == "draft"


async def test_grade_validation(client, api, setting):
    quiz = await api.assessment(**assessment_kwargs(setting, setting["daily"]))
    negative = await client.post(f"{API}/grades", json={
        "assessment_id": quiz["id"], "student_id": setting["student_id"], "score": -1,
    })
    assert negative.status_code == 400
    assert "score" in negative.json()["error"]["details"]

    unknown = await client.post(f"{API}/grades", json={
        "assessment_id": new_id(), "student_id": setting["student_id"], "score": 10,
    })
    assert unknown.status_code == 400
    assert "assessment_id" in unknown.json()["error"]["details"]


async def test_assessment_create_answers_200(client, setting):
    r = await client.post(f"{API}/assessments", json={
        "teacher_id": setting["teacher_id"], "subject_id": setting["subject_id"],
        "class_id": setting["class_id"], "grade_category_id": setting["daily"],
        "name": "Kuis", "max_score": 20, "date": "2025-09-01",
    })
    assert r.status_code == 200
    assert r.json()["data"]["max_score"] == 20


async def test_assessment_requires_positive_max_score(client, setting):
    r = await client.post(f"{API}/assessments", json={
        "teacher_id": setting["teacher_id"], "subject_id": setting["subject_id"],
        "class_id": setting["class_id"], "grade_category_id": setting["daily"],
        "name": "Kuis", "max_score": 0, "date": "2025-09-01",
    })
    assert r.status_code == 400
    assert "max_score" in r.json()["error"]["details"]


async def test_assessment_listing(client, api, setting):
    await api.assessment(**assessment_kwargs(setting, setting["daily"]), name="Kuis 1", date="2025-08-01")
    await api.assessment(**assessment_kwargs(setting, setting["daily"]), name="Kuis 2", date="2025-09-01")
    r = await client.get(f"{API}/assessments", params={
        "class_id": setting["class_id"], "subject_id": setting["subject_id"],
    })
    assert r.status_code == 200
    assert [a["name"] for a in r.json()["data"]] == ["Kuis 2", "Kuis 1"]


async def test_student_grades_filtered_by_class(client, api, setting):
    quiz = await api.assessment(**assessment_kwargs(setting, setting["daily"]))
    other_class = await api.school_class("X IPA 2")
    elsewhere = await api.assessment(
        teacher_id=setting["teacher_id"], subject_id=setting["subject_id"],
        class_id=other_class["id"], category_id=setting["daily"],
    )
    await api.grade(quiz["id"], setting["student_id"], 70)
    await api.grade(elsewhere["id"], setting["student_id"], 90)

    every = await client.get(f"{API}/grades/students/{setting['student_id']}")
    assert len(every.json()["data"]) == 2
    scoped = await client.get(f"{API}/grades/students/{setting['student_id']}",
                              params={"class_id": setting["class_id"]})
    assert [g["assessment_id"] for g in scoped.json()["data"]] == [quiz["id"]]


async def test_deleted_category_drops_out_of_the_average(client, api, setting):
    quiz = await api.assessment(**assessment_kwargs(setting, setting["daily"]))
    exam = await api.assessment(**assessment_kwargs(setting, setting["exam"]), name="UTS")
    await api.grade(quiz["id"], setting["student_id"], 100)
    await api.grade(exam["id"], setting["student_id"], 50)

    assert (await client.delete(f"{API}/grade-categories/{setting['exam']}")).status_code == 200
    data = await final_score(client, setting)
    assert data["final_score"] == pytest.approx(100.0)
