from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Protocol

from classweave.schemas.conflict import ConflictDetail, ConflictReport, ResolutionAction
from classweave.services.scheduling_models import LessonCandidate, day_name


class LessonLike(Protocol):
    day: int
    time_slot_id: str
    teacher_id: str
    class_id: str
    classroom_id: str | None
    batch_id: str | None


@dataclass(frozen=True)
class ConflictCheck:
    teacher_conflict: bool = False
    class_conflict: bool = False
    classroom_conflict: bool = False

    @property
    def has_any(self) -> bool:
        return self.teacher_conflict or self.class_conflict or self.classroom_conflict

    def reasons(self) -> list[str]:
        reasons: list[str] = []
        if self.class_conflict:
            reasons.append("Class already has a lesson at this time")
        if self.teacher_conflict:
            reasons.append("Teacher is already teaching at this time")
        if self.classroom_conflict:
            reasons.append("Classroom is already in use at this time")
        return reasons


def same_id(left: object | None, right: object | None) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def occupies_same_cohort(class_a: str, batch_a: str | None, class_b: str, batch_b: str | None) -> bool:
    """Lessons of one class collide unless they belong to two different batches."""
    if not same_id(class_a, class_b):
        return False
    if batch_a is not None and batch_b is not None and not same_id(batch_a, batch_b):
        return False
    return True


def lessons_at(day: int, time_slot_id: str, lessons: Iterable[LessonLike]) -> list[LessonLike]:
    return [lesson for lesson in lessons if lesson.day == day and same_id(lesson.time_slot_id, time_slot_id)]


def has_conflict(
    candidate: LessonCandidate,
    existing_lessons: Iterable[LessonLike],
    *,
    exclude_lesson_id: str | None = None,
) -> ConflictCheck:
    teacher_conflict = False
    class_conflict = False
    classroom_conflict = False
    for lesson in lessons_at(candidate.day, candidate.time_slot_id, existing_lessons):
        if exclude_lesson_id is not None and same_id(getattr(lesson, "id", None), exclude_lesson_id):
            continue
        if same_id(lesson.teacher_id, candidate.teacher_id):
            teacher_conflict = True
        if occupies_same_cohort(candidate.class_id, candidate.batch_id, lesson.class_id, lesson.batch_id):
            class_conflict = True
        if candidate.classroom_id is not None and same_id(lesson.classroom_id, candidate.classroom_id):
            classroom_conflict = True
    return ConflictCheck(
        teacher_conflict=teacher_conflict,
        class_conflict=class_conflict,
        classroom_conflict=classroom_conflict,
    )


def class_busy(class_id: str, batch_id: str | None, slot_lessons: Iterable[LessonLike]) -> bool:
    return any(occupies_same_cohort(class_id, batch_id, lesson.class_id, lesson.batch_id) for lesson in slot_lessons)


def teacher_busy(teacher_id: str, slot_lessons: Iterable[LessonLike]) -> bool:
    return any(same_id(lesson.teacher_id, teacher_id) for lesson in slot_lessons)


def is_classroom_occupied(day: int, time_slot_id: str, classroom_id: str, lessons: Iterable[LessonLike]) -> bool:
    return any(same_id(lesson.classroom_id, classroom_id) for lesson in lessons_at(day, time_slot_id, lessons))


class ConflictService:
    """Audits a stored timetable for double bookings."""

    def __init__(
        self,
        lessons: list[LessonLike],
        *,
        teacher_names: dict[str, str] | None = None,
        class_names: dict[str, str] | None = None,
        classroom_names: dict[str, str] | None = None,
    ):
        self.lessons = lessons
        self.teacher_names = teacher_names or {}
        self.class_names = class_names or {}
        self.classroom_names = classroom_names or {}

    def detect_conflicts(self) -> ConflictReport:
        conflicts: list[ConflictDetail] = []

        # Bucket by (day, slot); pairwise checks only inside a bucket.
        by_slot: dict[tuple[int, str], list[LessonLike]] = defaultdict(list)
        for lesson in self.lessons:
            by_slot[(lesson.day, str(lesson.time_slot_id))].append(lesson)

        labels = {
            id(lesson): str(getattr(lesson, "id", None) or f"#{position}")
            for position, lesson in enumerate(self.lessons)
        }

        for (day, _), slot_lessons in by_slot.items():
            n = len(slot_lessons)
            for i in range(n):
                first = slot_lessons[i]
                for j in range(i + 1, n):
                    second = slot_lessons[j]
                    affected = [labels[id(first)], labels[id(second)]]
                    if same_id(first.teacher_id, second.teacher_id):
                        name = self.teacher_names.get(str(first.teacher_id), str(first.teacher_id))
                        conflicts.append(ConflictDetail(
                            id=f"teacher-{affected[0]}-{affected[1]}",
                            conflict_type="teacher_conflict",
                            description=f"Teacher {name} is double-booked on {day_name(day)}",
                            affected_lessons=affected,
                        ))
                    if occupies_same_cohort(first.class_id, first.batch_id, second.class_id, second.batch_id):
                        name = self.class_names.get(str(first.class_id), str(first.class_id))
                        conflicts.append(ConflictDetail(
                            id=f"class-{affected[0]}-{affected[1]}",
                            conflict_type="class_conflict",
                            description=f"Class {name} has two lessons at once on {day_name(day)}",
                            affected_lessons=affected,
                        ))
                    if same_id(first.classroom_id, second.classroom_id):
                        name = self.classroom_names.get(str(first.classroom_id), str(first.classroom_id))
                        conflicts.append(ConflictDetail(
                            id=f"classroom-{affected[0]}-{affected[1]}",
                            conflict_type="classroom_conflict",
                            description=f"Classroom {name} is double-booked on {day_name(day)}",
                            affected_lessons=affected,
                        ))

        resolutions: list[ResolutionAction] = []
        for conflict in conflicts:
            resolutions.extend(self.generate_resolutions(conflict))
        return ConflictReport(conflicts=conflicts, suggested_resolutions=resolutions)

    def generate_resolutions(self, conflict: ConflictDetail) -> list[ResolutionAction]:
        target = conflict.affected_lessons[-1]
        if conflict.conflict_type == "classroom_conflict":
            return [ResolutionAction(
                action_type="change_classroom",
                description="Assign a free classroom of the same kind",
                target_lesson_id=target,
            )]
        resolutions = [ResolutionAction(
            action_type="move_lesson",
            description="Move to a time slot where class and teacher are both free",
            target_lesson_id=target,
        )]
        if conflict.conflict_type == "teacher_conflict":
            resolutions.append(ResolutionAction(
                action_type="change_teacher",
                description="Hand the lesson to another qualified teacher",
                target_lesson_id=target,
            ))
        return resolutions


def audit_lessons(
    lessons: Iterable[LessonLike],
    *,
    teacher_names: dict[str, str] | None = None,
    class_names: dict[str, str] | None = None,
    classroom_names: dict[str, str] | None = None,
) -> ConflictReport:
    return ConflictService(
        list(lessons),
        teacher_names=teacher_names,
        class_names=class_names,
        classroom_names=classroom_names,
    ).detect_conflicts()
