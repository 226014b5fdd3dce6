from __future__ import annotations

from typing import Iterable, Sequence

from classweave.services.conflict_service import LessonLike, is_classroom_occupied, lessons_at
from classweave.services.scheduling_models import ClassroomSpec, SubjectSpec


def is_compatible(subject: SubjectSpec, classroom: ClassroomSpec) -> bool:
    # Lab subjects need a lab; anything else may use any room, labs included.
    if subject.is_lab:
        return classroom.is_lab
    return True


def rank_classrooms(subject: SubjectSpec, classrooms: Iterable[ClassroomSpec]) -> list[ClassroomSpec]:
    """Preferred rooms in their listed order, then the rest smallest first."""
    by_id = {str(room.id): room for room in classrooms}
    preferred: list[ClassroomSpec] = []
    for room_id in subject.preferred_classroom_ids:
        room = by_id.pop(str(room_id), None)
        if room is not None:
            preferred.append(room)
    remaining = sorted(by_id.values(), key=lambda room: (room.capacity, room.name))
    return preferred + remaining


def find_classroom(
    subject: SubjectSpec,
    day: int,
    time_slot_id: str,
    existing_lessons: Iterable[LessonLike],
    classrooms: Sequence[ClassroomSpec],
) -> ClassroomSpec | None:
    occupied_here = lessons_at(day, time_slot_id, existing_lessons)
    free = [
        room
        for room in classrooms
        if is_compatible(subject, room) and not is_classroom_occupied(day, time_slot_id, room.id, occupied_here)
    ]
    ranked = rank_classrooms(subject, free)
    return ranked[0] if ranked else None
