from __future__ import annotations

from datetime import datetime, timezone
import logging
from time import perf_counter

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from classweave.core.config import Settings
from classweave.core.exceptions import LessonConflictError, ResourceNotFoundError, TimetableLockedError
from classweave.models.class_group import Batch, ClassGroup
from classweave.models.classroom import Classroom
from classweave.models.subject import Subject
from classweave.models.teacher import Teacher
from classweave.models.timetable import Lesson, Timetable
from classweave.models.timing import TimeSlot
from classweave.schemas.conflict import ConflictReport
from classweave.schemas.timetable import GenerateTimetableRequest, LessonCreate, LessonUpdate
from classweave.services.conflict_service import audit_lessons, has_conflict
from classweave.services.placement_engine import PlacementEngine
from classweave.services.scheduling_models import GenerationRequest, GenerationResult, LessonCandidate
from classweave.services.snapshot import load_snapshot

logger = logging.getLogger(__name__)

LESSON_FIELDS = ("day", "time_slot_id", "class_id", "subject_id", "teacher_id", "classroom_id", "batch_id")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def get_timetable(db: Session, timetable_id: str) -> Timetable:
    timetable = db.get(Timetable, timetable_id)
    if timetable is None:
        raise ResourceNotFoundError("Timetable", timetable_id)
    return timetable


def list_timetables(db: Session) -> list[Timetable]:
    return list(db.execute(select(Timetable).order_by(Timetable.generated_at.desc())).scalars())


def get_active_timetable(db: Session) -> Timetable:
    timetable = db.execute(select(Timetable).where(Timetable.is_active.is_(True))).scalars().first()
    if timetable is None:
        raise ResourceNotFoundError("Timetable", "active")
    return timetable


def build_generation_request(db: Session, payload: GenerateTimetableRequest, settings: Settings) -> GenerationRequest:
    snapshot = load_snapshot(db, timing_id=payload.timing_id, year_id=payload.year_id)
    return GenerationRequest(
        classes=snapshot.classes,
        subjects=snapshot.subjects,
        teachers=snapshot.teachers,
        timing=snapshot.timing,
        classrooms=snapshot.classrooms,
        batches=snapshot.batches,
        require_room_strict=(
            payload.require_room_strict
            if payload.require_room_strict is not None
            else settings.scheduler_require_room_strict
        ),
        split_labs_by_batch=(
            payload.split_labs_by_batch
            if payload.split_labs_by_batch is not None
            else settings.scheduler_split_labs_by_batch
        ),
        random_seed=payload.random_seed if payload.random_seed is not None else settings.scheduler_random_seed,
        time_budget_seconds=(
            payload.time_budget_seconds
            if payload.time_budget_seconds is not None
            else settings.scheduler_time_budget_seconds
        ),
    )


def generate_timetable(
    db: Session,
    payload: GenerateTimetableRequest,
    settings: Settings,
) -> tuple[Timetable, GenerationResult]:
    started = perf_counter()
    logger.info(
        "GENERATION START | name=%s | academic_year=%s | timing_id=%s | year_id=%s",
        payload.name,
        payload.academic_year,
        payload.timing_id,
        payload.year_id,
    )
    try:
        request = build_generation_request(db, payload, settings)
        result = PlacementEngine(request).generate()
    except Exception:
        logger.exception(
            "GENERATION FAILED | name=%s | timing_id=%s | wall_ms=%s",
            payload.name,
            payload.timing_id,
            int((perf_counter() - started) * 1000),
        )
        raise

    timetable = Timetable(
        name=payload.name,
        academic_year=payload.academic_year,
        year_id=payload.year_id,
        timing_id=payload.timing_id,
        generated_at=_now(),
        modified_at=_now(),
    )
    timetable.lessons = [
        Lesson(
            day=item.day,
            time_slot_id=item.time_slot_id,
            class_id=item.class_id,
            subject_id=item.subject_id,
            teacher_id=item.teacher_id,
            classroom_id=item.classroom_id,
            batch_id=item.batch_id,
        )
        for item in result.lessons
    ]
    try:
        db.add(timetable)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("GENERATION PERSIST FAILED | name=%s | lessons=%s", payload.name, len(result.lessons))
        raise
    db.refresh(timetable)

    logger.info(
        "GENERATION COMPLETE | timetable_id=%s | lessons=%s | warnings=%s | runtime_ms=%s | wall_ms=%s",
        timetable.id,
        len(result.lessons),
        len(result.warnings),
        result.runtime_ms,
        int((perf_counter() - started) * 1000),
    )
    return timetable, result


def _ensure_unlocked(timetable: Timetable) -> None:
    if timetable.is_locked:
        logger.info("TIMETABLE MUTATION REJECTED | timetable_id=%s | reason=locked", timetable.id)
        raise TimetableLockedError(timetable.id)


def _find_lesson(timetable: Timetable, lesson_id: str) -> Lesson:
    for lesson in timetable.lessons:
        if str(lesson.id) == str(lesson_id):
            return lesson
    raise ResourceNotFoundError("Lesson", lesson_id)


def _validate_references(db: Session, values: dict) -> None:
    if db.get(TimeSlot, values["time_slot_id"]) is None:
        raise ResourceNotFoundError("Time slot", values["time_slot_id"])
    if db.get(ClassGroup, values["class_id"]) is None:
        raise ResourceNotFoundError("Class", values["class_id"])
    if db.get(Subject, values["subject_id"]) is None:
        raise ResourceNotFoundError("Subject", values["subject_id"])
    teacher = db.get(Teacher, values["teacher_id"])
    if teacher is None:
        raise ResourceNotFoundError("Teacher", values["teacher_id"])
    if values.get("classroom_id") and db.get(Classroom, values["classroom_id"]) is None:
        raise ResourceNotFoundError("Classroom", values["classroom_id"])
    if values.get("batch_id"):
        batch = db.get(Batch, values["batch_id"])
        if batch is None or str(batch.class_id) != str(values["class_id"]):
            raise ResourceNotFoundError("Batch", values["batch_id"])

    if str(values["subject_id"]) not in {str(item) for item in teacher.subject_ids or []}:
        raise LessonConflictError(
            "Teacher is not qualified to teach this subject",
            details={"reason": "teacher_not_qualified", "teacher_id": teacher.id, "subject_id": values["subject_id"]},
        )


def _check_conflicts(timetable: Timetable, values: dict, *, exclude_lesson_id: str | None = None) -> None:
    candidate = LessonCandidate(
        day=values["day"],
        time_slot_id=values["time_slot_id"],
        teacher_id=values["teacher_id"],
        class_id=values["class_id"],
        classroom_id=values.get("classroom_id"),
        batch_id=values.get("batch_id"),
    )
    check = has_conflict(candidate, timetable.lessons, exclude_lesson_id=exclude_lesson_id)
    if check.has_any:
        reasons = check.reasons()
        raise LessonConflictError(
            reasons[0],
            details={
                "reason": "double_booking",
                "conflicts": reasons,
                "teacher_conflict": check.teacher_conflict,
                "class_conflict": check.class_conflict,
                "classroom_conflict": check.classroom_conflict,
            },
        )


def add_lesson(db: Session, timetable_id: str, payload: LessonCreate) -> Lesson:
    timetable = get_timetable(db, timetable_id)
    _ensure_unlocked(timetable)
    values = payload.model_dump()
    _validate_references(db, values)
    _check_conflicts(timetable, values)

    lesson = Lesson(**values)
    timetable.lessons.append(lesson)
    timetable.modified_at = _now()
    db.commit()
    db.refresh(lesson)
    logger.info("LESSON ADDED | timetable_id=%s | lesson_id=%s", timetable.id, lesson.id)
    return lesson


def update_lesson(db: Session, timetable_id: str, lesson_id: str, payload: LessonUpdate) -> Lesson:
    timetable = get_timetable(db, timetable_id)
    _ensure_unlocked(timetable)
    lesson = _find_lesson(timetable, lesson_id)

    values = {field: getattr(lesson, field) for field in LESSON_FIELDS}
    changes = payload.model_dump(exclude_unset=True)
    for field in ("day", "time_slot_id", "class_id", "subject_id", "teacher_id"):
        if changes.get(field) is None:
            changes.pop(field, None)
    values.update(changes)

    _validate_references(db, values)
    _check_conflicts(timetable, values, exclude_lesson_id=lesson.id)

    for field, value in values.items():
        setattr(lesson, field, value)
    timetable.modified_at = _now()
    db.commit()
    db.refresh(lesson)
    logger.info("LESSON UPDATED | timetable_id=%s | lesson_id=%s | fields=%s", timetable.id, lesson.id, sorted(changes))
    return lesson


def remove_lesson(db: Session, timetable_id: str, lesson_id: str) -> None:
    timetable = get_timetable(db, timetable_id)
    _ensure_unlocked(timetable)
    lesson = _find_lesson(timetable, lesson_id)
    timetable.lessons.remove(lesson)
    timetable.modified_at = _now()
    db.commit()
    logger.info("LESSON REMOVED | timetable_id=%s | lesson_id=%s", timetable.id, lesson_id)


def set_active(db: Session, timetable_id: str) -> Timetable:
    timetable = get_timetable(db, timetable_id)
    try:
        # Clear-all then set-one inside the same transaction.
        db.execute(update(Timetable).where(Timetable.id != timetable.id).values(is_active=False))
        timetable.is_active = True
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("TIMETABLE ACTIVATE FAILED | timetable_id=%s", timetable_id)
        raise
    db.refresh(timetable)
    logger.info("TIMETABLE ACTIVATED | timetable_id=%s", timetable.id)
    return timetable


def toggle_lock(db: Session, timetable_id: str) -> Timetable:
    timetable = get_timetable(db, timetable_id)
    timetable.is_locked = not timetable.is_locked
    db.commit()
    db.refresh(timetable)
    logger.info("TIMETABLE %s | timetable_id=%s", "LOCKED" if timetable.is_locked else "UNLOCKED", timetable.id)
    return timetable


def delete_timetable(db: Session, timetable_id: str) -> None:
    timetable = get_timetable(db, timetable_id)
    db.delete(timetable)
    db.commit()
    logger.info("TIMETABLE DELETED | timetable_id=%s", timetable_id)


def _slot_order_map(db: Session, lessons: list[Lesson]) -> dict[str, int]:
    slot_ids = {lesson.time_slot_id for lesson in lessons}
    if not slot_ids:
        return {}
    rows = db.execute(select(TimeSlot.id, TimeSlot.order).where(TimeSlot.id.in_(slot_ids))).all()
    return {str(slot_id): order for slot_id, order in rows}


def _ordered(db: Session, lessons: list[Lesson]) -> list[Lesson]:
    orders = _slot_order_map(db, lessons)
    return sorted(lessons, key=lambda lesson: (lesson.day, orders.get(str(lesson.time_slot_id), 0)))


def lessons_for_class(db: Session, timetable_id: str, class_id: str) -> list[Lesson]:
    timetable = get_timetable(db, timetable_id)
    if db.get(ClassGroup, class_id) is None:
        raise ResourceNotFoundError("Class", class_id)
    return _ordered(db, [lesson for lesson in timetable.lessons if str(lesson.class_id) == str(class_id)])


def lessons_for_teacher(db: Session, timetable_id: str, teacher_id: str) -> list[Lesson]:
    timetable = get_timetable(db, timetable_id)
    if db.get(Teacher, teacher_id) is None:
        raise ResourceNotFoundError("Teacher", teacher_id)
    return _ordered(db, [lesson for lesson in timetable.lessons if str(lesson.teacher_id) == str(teacher_id)])


def lessons_for_classroom(db: Session, timetable_id: str, classroom_id: str) -> list[Lesson]:
    timetable = get_timetable(db, timetable_id)
    if db.get(Classroom, classroom_id) is None:
        raise ResourceNotFoundError("Classroom", classroom_id)
    return _ordered(db, [lesson for lesson in timetable.lessons if str(lesson.classroom_id) == str(classroom_id)])


def audit_timetable(db: Session, timetable_id: str) -> ConflictReport:
    timetable = get_timetable(db, timetable_id)
    return audit_lessons(
        timetable.lessons,
        teacher_names={str(row.id): row.name for row in db.execute(select(Teacher)).scalars()},
        class_names={
            str(row.id): f"{row.name} {row.section}".strip() for row in db.execute(select(ClassGroup)).scalars()
        },
        classroom_names={str(row.id): row.name for row in db.execute(select(Classroom)).scalars()},
    )
