import pytest

from classweave.core.exceptions import GenerationPreconditionError, ResourceNotFoundError
from classweave.models.class_group import Batch, ClassGroup
from classweave.models.classroom import Classroom
from classweave.models.subject import Subject
from classweave.models.teacher import Teacher
from classweave.models.timing import TimeSlot, Timing
from classweave.models.year import AcademicYear
from classweave.services.snapshot import load_snapshot


@pytest.fixture()
def seeded(db_session):
    year = AcademicYear(name="Year 1", value=1)
    db_session.add(year)
    db_session.flush()
    class_a = ClassGroup(name="Grade 1", year_id=year.id, section="A")
    class_b = ClassGroup(name="Grade 2", year_id=year.id, section="A")
    db_session.add_all([class_a, class_b])
    db_session.flush()
    db_session.add(Batch(name="B1", class_id=class_a.id, strength=12))
    late = TimeSlot(name="Late", start_time="11:00", end_time="11:50", order=3)
    lunch = TimeSlot(name="Lunch", start_time="10:00", end_time="10:50", order=2, is_break=True)
    early = TimeSlot(name="Early", start_time="09:00", end_time="09:50", order=1)
    unused = TimeSlot(name="Evening", start_time="17:00", end_time="17:50", order=9)
    db_session.add_all([late, lunch, early, unused])
    db_session.flush()
    timing = Timing(
        academic_year="2026-27",
        periods_per_day=2,
        working_days=[0, 2, 4],
        time_slot_ids=[late.id, lunch.id, early.id],
    )
    subject = Subject(
        name="Physics",
        code="PHY",
        year_id=year.id,
        class_ids=[class_a.id],
        is_lab=True,
        periods_per_week=2,
        periods_per_day=1,
        preferred_classroom_ids=[],
    )
    other = Subject(name="Drama", code="DRA", year_id=year.id, class_ids=["elsewhere"], preferred_classroom_ids=[])
    db_session.add_all([timing, subject, other])
    db_session.flush()
    db_session.add(Teacher(
        name="Marie Curie",
        email="marie@example.com",
        department="Science",
        subject_ids=[subject.id],
        max_hours_per_day=4,
        unavailable_days=[{"day": 4, "reason": "Research"}],
        unavailable_slots=[{"day": 0, "time_slot_id": early.id, "reason": None}],
    ))
    db_session.add(Classroom(name="Lab 1", capacity=24, is_lab=True))
    db_session.commit()
    return {"timing": timing.id, "year": year.id, "class_a": class_a.id, "early": early.id, "late": late.id}


def test_snapshot_resolves_reference_data(db_session, seeded):
    snapshot = load_snapshot(db_session, timing_id=seeded["timing"])

    assert [item.name for item in snapshot.classes] == ["Grade 1", "Grade 2"]
    assert [item.code for item in snapshot.subjects] == ["PHY"]
    assert snapshot.subjects[0].is_lab
    assert [item.name for item in snapshot.batches] == ["B1"]
    assert snapshot.timing.working_days == (0, 2, 4)
    assert [slot.name for slot in snapshot.timing.time_slots] == ["Early", "Lunch", "Late"]
    assert [slot.id for slot in snapshot.timing.teaching_slots] == [seeded["early"], seeded["late"]]

    teacher = snapshot.teachers[0]
    assert teacher.max_hours_per_day == 4
    assert teacher.is_unavailable(4, seeded["late"])
    assert teacher.is_unavailable(0, seeded["early"])
    assert not teacher.is_unavailable(0, seeded["late"])


def test_snapshot_unknown_timing(db_session):
    with pytest.raises(ResourceNotFoundError):
        load_snapshot(db_session, timing_id="missing")


def test_snapshot_year_without_classes(db_session, seeded):
    year = AcademicYear(name="Year 2", value=2)
    db_session.add(year)
    db_session.commit()
    with pytest.raises(GenerationPreconditionError) as exc_info:
        load_snapshot(db_session, timing_id=seeded["timing"], year_id=year.id)
    assert exc_info.value.message == "No classes found"


def test_snapshot_requires_teachers(db_session, seeded):
    db_session.query(Teacher).delete()
    db_session.commit()
    with pytest.raises(GenerationPreconditionError) as exc_info:
        load_snapshot(db_session, timing_id=seeded["timing"])
    assert exc_info.value.message == "No teachers found"
