# src/SISFO/tests/test_domain.py
import asyncio
import uuid
from types import SimpleNamespace

import pytest

from SISFO.domain.enums import ReportCardStatus
from SISFO.domain.grading import (
    GradeBand,
    compute_gpa,
    default_letter,
    max_points,
    normalize_score,
    resolve_letter,
    weighted_average,
)
from SISFO.domain.validation import normalize_time
from SISFO.errors import DeadlineExceededError, ValidationError
from SISFO.repositories import slots_overlap
from SISFO.services.base import with_deadline


@pytest.mark.parametrize("raw, expected", [
    ("07:30", "07:30:00"),
    ("07:30:15", "07:30:15"),
    (" 23:59 ", "23:59:00"),
    ("00:00:00", "00:00:00"),
])
def test_normalize_time(raw, expected):
    assert normalize_time(raw, "start_time") == expected


@pytest.mark.parametrize("raw", ["", None, "7:30", "24:00", "12:60", "noon", "12:00:00:00"])
def test_normalize_time_rejects(raw):
    with pytest.raises(ValidationError) as exc:
        normalize_time(raw, "start_time")
    assert "start_time" in exc.value.errors


def test_normalised_times_order_lexically():
    assert normalize_time("09:00") < normalize_time("10:00")
    assert normalize_time("09:00") < normalize_time("09:00:01")


def test_normalize_score():
    assert normalize_score(45, 50) == pytest.approx(90.0)
    assert normalize_score(10, 0) == 0.0


def test_weighted_average_normalises_weights():
    assert weighted_average([(80, 40), (90, 60)]) == pytest.approx(86.0)
    # weights are relative
    assert weighted_average([(80, 2), (90, 3)]) == pytest.approx(86.0)
    assert weighted_average([]) == 0.0


def test_default_ladder():
    assert default_letter(90) == ("A", 4.0)
    assert default_letter(89.99) == ("B", 3.0)
    assert default_letter(70) == ("C", 2.0)
    assert default_letter(60) == ("D", 1.0)
    assert default_letter(12) == ("E", 0.0)


def test_resolve_letter_prefers_rules():
    rules = [GradeBand("A", 85, 100, 4), GradeBand("B", 70, 84.99, 3)]
    assert resolve_letter(86, rules) == ("A", 4)
    assert resolve_letter(70, rules) == ("B", 3)
    # below every band: lowest band
    assert resolve_letter(50, rules) == ("B", 3)
    assert resolve_letter(95, []) == ("A", 4.0)


def test_resolve_letter_stays_within_rules_across_gaps():
    rules = [GradeBand("A", 90, 100, 2.0), GradeBand("B", 0, 89, 1.0)]
    assert resolve_letter(89.5, rules) == ("B", 1.0)
    rules = [GradeBand("A", 80, 100, 4.0), GradeBand("B", 0, 79, 3.0)]
    assert resolve_letter(79.5, rules) == ("B", 3.0)
    assert resolve_letter(100, [GradeBand("A", 85, 95, 4.0)]) == ("A", 4.0)


def test_max_points():
    assert max_points() == 4.0
    assert max_points([GradeBand("A", 0, 100, 5)]) == 5


def test_compute_gpa():
    gpa, credits = compute_gpa([(4.0, 4), (2.0, 3)])
    assert gpa == pytest.approx(22 / 7)
    assert credits == 7
    assert compute_gpa([]) == (0.0, 0)


def test_report_card_status_never_leaves_published():
    assert ReportCardStatus.DRAFT.can_transition_to(ReportCardStatus.GENERATED)
    assert ReportCardStatus.GENERATED.can_transition_to(ReportCardStatus.GENERATED)
    assert ReportCardStatus.GENERATED.can_transition_to(ReportCardStatus.PUBLISHED)
    assert not ReportCardStatus.PUBLISHED.can_transition_to(ReportCardStatus.GENERATED)
    assert not ReportCardStatus.GENERATED.can_transition_to(ReportCardStatus.DRAFT)


def _slot(day=1, start="08:00:00", end="09:00:00", class_id=None, teacher_id=None, room=""):
    return SimpleNamespace(
        day_of_week=day, start_time=start, end_time=end, room=room,
        class_id=class_id or uuid.uuid4(), teacher_id=teacher_id or uuid.uuid4(),
    )


def test_slots_overlap_half_open():
    t = uuid.uuid4()
    assert slots_overlap(_slot(teacher_id=t), _slot(teacher_id=t, start="08:59:59", end="10:00:00"))
    assert not slots_overlap(_slot(teacher_id=t), _slot(teacher_id=t, start="09:00:00", end="10:00:00"))
    assert not slots_overlap(_slot(teacher_id=t), _slot(teacher_id=t, day=2))


def test_slots_overlap_needs_a_shared_resource():
    assert not slots_overlap(_slot(), _slot())
    assert not slots_overlap(_slot(room=""), _slot(room=""))
    assert slots_overlap(_slot(room="R1"), _slot(room="R1"))


@pytest.mark.anyio
async def test_deadline_is_enforced():
    with pytest.raises(DeadlineExceededError) as exc:
        await with_deadline(asyncio.sleep(1), "schedule.create", 0.01)
    assert exc.value.status_code == 504
    assert exc.value.error_code == "6002"


def test_models_package_exposes_metadata():
    from SISFO.db.models import Base

    tables = set(Base.metadata.tables)
    assert {"schedules", "grades", "report_cards", "report_card_details"} <= tables


def test_loaded_children_are_per_instance():
    from SISFO.db.models import ReportCard, ReportCardDetail, ScheduleTemplate, ScheduleTemplateItem

    first, second = ReportCard(), ReportCard()
    first.details.append(ReportCardDetail(subject_name="IPA"))
    assert second.details == []
    assert len(first.details) == 1

    a, b = ScheduleTemplate(name="Reguler"), ScheduleTemplate(name="Ramadhan")
    a.items = [ScheduleTemplateItem(day_of_week=1)]
    assert b.items == []
    assert len(a.items) == 1
