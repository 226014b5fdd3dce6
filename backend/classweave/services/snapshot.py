"""Single batch read of reference data into scheduler snapshot types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from classweave.core.exceptions import GenerationPreconditionError, ResourceNotFoundError
from classweave.models.class_group import Batch, ClassGroup
from classweave.models.classroom import Classroom
from classweave.models.subject import Subject
from classweave.models.teacher import Teacher
from classweave.models.timing import TimeSlot, Timing
from classweave.services.scheduling_models import (
    BatchSpec,
    ClassGroupSpec,
    ClassroomSpec,
    SubjectSpec,
    TeacherSpec,
    TimeSlotSpec,
    TimingSpec,
)


@dataclass(frozen=True)
class ReferenceSnapshot:
    classes: tuple[ClassGroupSpec, ...]
    subjects: tuple[SubjectSpec, ...]
    teachers: tuple[TeacherSpec, ...]
    classrooms: tuple[ClassroomSpec, ...]
    batches: tuple[BatchSpec, ...]
    timing: TimingSpec


def class_spec(row: ClassGroup) -> ClassGroupSpec:
    return ClassGroupSpec(id=str(row.id), name=row.name, section=row.section, student_count=row.student_count or 0)


def batch_spec(row: Batch) -> BatchSpec:
    return BatchSpec(id=str(row.id), name=row.name, class_id=str(row.class_id), strength=row.strength or 0)


def subject_spec(row: Subject) -> SubjectSpec:
    return SubjectSpec(
        id=str(row.id),
        name=row.name,
        code=row.code,
        class_ids=frozenset(str(item) for item in row.class_ids or []),
        is_lab=bool(row.is_lab),
        periods_per_week=row.periods_per_week or 1,
        periods_per_day=row.periods_per_day or 1,
        preferred_classroom_ids=tuple(str(item) for item in row.preferred_classroom_ids or []),
    )


def teacher_spec(row: Teacher) -> TeacherSpec:
    unavailable_days = frozenset(int(item["day"]) for item in row.unavailable_days or [] if "day" in item)
    unavailable_slots = frozenset(
        (int(item["day"]), str(item["time_slot_id"]))
        for item in row.unavailable_slots or []
        if "day" in item and item.get("time_slot_id")
    )
    return TeacherSpec(
        id=str(row.id),
        name=row.name,
        subject_ids=frozenset(str(item) for item in row.subject_ids or []),
        max_hours_per_day=row.max_hours_per_day,
        unavailable_days=unavailable_days,
        unavailable_slots=unavailable_slots,
    )


def classroom_spec(row: Classroom) -> ClassroomSpec:
    return ClassroomSpec(id=str(row.id), name=row.name, capacity=row.capacity, is_lab=bool(row.is_lab))


def time_slot_spec(row: TimeSlot) -> TimeSlotSpec:
    return TimeSlotSpec(
        id=str(row.id),
        name=row.name,
        order=row.order,
        is_break=bool(row.is_break),
        start_time=row.start_time,
        end_time=row.end_time,
    )


def timing_spec(timing: Timing, slots: Sequence[TimeSlot]) -> TimingSpec:
    by_id = {str(slot.id): slot for slot in slots}
    ordered = [by_id[str(slot_id)] for slot_id in timing.time_slot_ids or [] if str(slot_id) in by_id]
    ordered.sort(key=lambda slot: slot.order)
    return TimingSpec(
        working_days=tuple(int(day) for day in timing.working_days or []),
        time_slots=tuple(time_slot_spec(slot) for slot in ordered),
    )


def load_snapshot(db: Session, *, timing_id: str, year_id: str | None = None) -> ReferenceSnapshot:
    timing = db.get(Timing, timing_id)
    if timing is None:
        raise ResourceNotFoundError("Timing configuration", timing_id)
    slots = list(db.execute(select(TimeSlot).where(TimeSlot.id.in_(timing.time_slot_ids or []))).scalars())

    class_query = select(ClassGroup)
    if year_id:
        class_query = class_query.where(ClassGroup.year_id == year_id)
    classes = list(db.execute(class_query.order_by(ClassGroup.name, ClassGroup.section)).scalars())
    if not classes:
        raise GenerationPreconditionError("No classes found", details={"year_id": year_id})

    class_ids = {str(item.id) for item in classes}
    subjects = [
        row
        for row in db.execute(select(Subject).order_by(Subject.code)).scalars()
        if class_ids.intersection(str(item) for item in row.class_ids or [])
    ]
    if not subjects:
        raise GenerationPreconditionError("No subjects found for the selected classes")

    teachers = list(db.execute(select(Teacher).order_by(Teacher.name)).scalars())
    if not teachers:
        raise GenerationPreconditionError("No teachers found")

    classrooms = list(db.execute(select(Classroom).order_by(Classroom.name)).scalars())
    if not classrooms:
        raise GenerationPreconditionError("No classrooms found")

    batches = list(db.execute(select(Batch).where(Batch.class_id.in_(class_ids)).order_by(Batch.name)).scalars())

    return ReferenceSnapshot(
        classes=tuple(class_spec(row) for row in classes),
        subjects=tuple(subject_spec(row) for row in subjects),
        teachers=tuple(teacher_spec(row) for row in teachers),
        classrooms=tuple(classroom_spec(row) for row in classrooms),
        batches=tuple(batch_spec(row) for row in batches),
        timing=timing_spec(timing, slots),
    )
