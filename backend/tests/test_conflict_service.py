import pytest

from classweave.services.conflict_service import (
    ConflictService,
    audit_lessons,
    class_busy,
    has_conflict,
    is_classroom_occupied,
    occupies_same_cohort,
)
from classweave.services.scheduling_models import LessonCandidate, PlannedLesson


@pytest.fixture
def monday_lessons():
    return [
        PlannedLesson(day=0, time_slot_id="s1", class_id="c1", subject_id="math", teacher_id="t1", classroom_id="r1", id="l1"),
        PlannedLesson(day=0, time_slot_id="s2", class_id="c2", subject_id="eng", teacher_id="t2", classroom_id="r2", id="l2"),
    ]


def test_no_conflict_in_free_slot(monday_lessons):
    candidate = LessonCandidate(day=0, time_slot_id="s3", teacher_id="t1", class_id="c1", classroom_id="r1")
    check = has_conflict(candidate, monday_lessons)
    assert not check.has_any
    assert check.reasons() == []


def test_teacher_conflict_detected(monday_lessons):
    candidate = LessonCandidate(day=0, time_slot_id="s1", teacher_id="t1", class_id="c9", classroom_id="r9")
    check = has_conflict(candidate, monday_lessons)
    assert check.teacher_conflict
    assert not check.class_conflict
    assert not check.classroom_conflict


def test_class_and_room_conflicts_detected(monday_lessons):
    candidate = LessonCandidate(day=0, time_slot_id="s2", teacher_id="t9", class_id="c2", classroom_id="r2")
    check = has_conflict(candidate, monday_lessons)
    assert check.class_conflict
    assert check.classroom_conflict
    assert not check.teacher_conflict
    assert check.reasons() == [
        "Class already has a lesson at this time",
        "Classroom is already in use at this time",
    ]


def test_other_day_does_not_conflict(monday_lessons):
    candidate = LessonCandidate(day=1, time_slot_id="s1", teacher_id="t1", class_id="c1", classroom_id="r1")
    assert not has_conflict(candidate, monday_lessons).has_any


def test_missing_classroom_never_conflicts_on_room():
    lessons = [PlannedLesson(day=0, time_slot_id="s1", class_id="c1", subject_id="x", teacher_id="t1")]
    candidate = LessonCandidate(day=0, time_slot_id="s1", teacher_id="t2", class_id="c2")
    check = has_conflict(candidate, lessons)
    assert not check.classroom_conflict
    assert not check.has_any


def test_exclude_lesson_id_ignores_lesson_being_replaced(monday_lessons):
    candidate = LessonCandidate(day=0, time_slot_id="s1", teacher_id="t1", class_id="c1", classroom_id="r1")
    assert has_conflict(candidate, monday_lessons).has_any
    assert not has_conflict(candidate, monday_lessons, exclude_lesson_id="l1").has_any


def test_conflict_check_is_repeatable(monday_lessons):
    candidate = LessonCandidate(day=0, time_slot_id="s1", teacher_id="t1", class_id="c3", classroom_id="r3")
    snapshot = list(monday_lessons)
    first = has_conflict(candidate, monday_lessons)
    second = has_conflict(candidate, monday_lessons)
    assert first == second
    assert monday_lessons == snapshot


def test_ids_compare_as_strings():
    lessons = [PlannedLesson(day=2, time_slot_id="7", class_id="1", subject_id="x", teacher_id="5", classroom_id="3")]
    candidate = LessonCandidate(day=2, time_slot_id=7, teacher_id=5, class_id=9, classroom_id=3)
    check = has_conflict(candidate, lessons)
    assert check.teacher_conflict
    assert check.classroom_conflict


def test_batches_of_one_class_may_run_in_parallel():
    assert not occupies_same_cohort("c1", "b1", "c1", "b2")
    assert occupies_same_cohort("c1", "b1", "c1", "b1")
    assert occupies_same_cohort("c1", None, "c1", "b2")
    assert not occupies_same_cohort("c1", None, "c2", None)

    slot = [PlannedLesson(day=0, time_slot_id="s1", class_id="c1", subject_id="lab", teacher_id="t1", batch_id="b1")]
    assert not class_busy("c1", "b2", slot)
    assert class_busy("c1", None, slot)


def test_is_classroom_occupied():
    lessons = [PlannedLesson(day=0, time_slot_id="s1", class_id="c1", subject_id="x", teacher_id="t1", classroom_id="r1")]
    assert is_classroom_occupied(0, "s1", "r1", lessons)
    assert not is_classroom_occupied(0, "s2", "r1", lessons)
    assert not is_classroom_occupied(0, "s1", "r2", lessons)


def test_detect_teacher_double_booking():
    lessons = [
        PlannedLesson(day=0, time_slot_id="s1", class_id="c1", subject_id="x", teacher_id="t1", classroom_id="r1", id="l1"),
        PlannedLesson(day=0, time_slot_id="s1", class_id="c2", subject_id="y", teacher_id="t1", classroom_id="r2", id="l2"),
    ]
    service = ConflictService(lessons, teacher_names={"t1": "Prof A"})
    report = service.detect_conflicts()

    assert len(report.conflicts) == 1
    conflict = report.conflicts[0]
    assert conflict.conflict_type == "teacher_conflict"
    assert "Prof A" in conflict.description
    assert "Monday" in conflict.description
    assert set(conflict.affected_lessons) == {"l1", "l2"}
    actions = {item.action_type for item in report.suggested_resolutions}
    assert actions == {"move_lesson", "change_teacher"}


def test_detect_room_double_booking():
    lessons = [
        PlannedLesson(day=3, time_slot_id="s1", class_id="c1", subject_id="x", teacher_id="t1", classroom_id="r1", id="l1"),
        PlannedLesson(day=3, time_slot_id="s1", class_id="c2", subject_id="y", teacher_id="t2", classroom_id="r1", id="l2"),
    ]
    report = audit_lessons(lessons, classroom_names={"r1": "Room 101"})

    assert [item.conflict_type for item in report.conflicts] == ["classroom_conflict"]
    assert "Room 101" in report.conflicts[0].description
    assert report.suggested_resolutions[0].action_type == "change_classroom"
    assert report.suggested_resolutions[0].target_lesson_id == "l2"


def test_clean_timetable_has_no_conflicts():
    lessons = [
        PlannedLesson(day=0, time_slot_id="s1", class_id="c1", subject_id="x", teacher_id="t1", classroom_id="r1"),
        PlannedLesson(day=0, time_slot_id="s2", class_id="c1", subject_id="x", teacher_id="t1", classroom_id="r1"),
        PlannedLesson(day=0, time_slot_id="s1", class_id="c2", subject_id="y", teacher_id="t2", classroom_id="r2"),
    ]
    report = audit_lessons(lessons)
    assert report.conflicts == []
    assert report.suggested_resolutions == []


def test_unsaved_lessons_are_labelled_by_position():
    lessons = [
        PlannedLesson(day=0, time_slot_id="s1", class_id="c1", subject_id="x", teacher_id="t1"),
        PlannedLesson(day=0, time_slot_id="s1", class_id="c1", subject_id="y", teacher_id="t2"),
    ]
    report = audit_lessons(lessons)
    assert report.conflicts[0].conflict_type == "class_conflict"
    assert report.conflicts[0].affected_lessons == ["#0", "#1"]
