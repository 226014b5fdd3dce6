from __future__ import annotations

from collections import deque
import random
from typing import Iterable, Sequence, TypeVar

from classweave.services.scheduling_models import SubjectSpec, TeacherSpec, TimeSlotSpec

T = TypeVar("T")


def eligible_teachers(subject: SubjectSpec, teachers: Iterable[TeacherSpec]) -> list[TeacherSpec]:
    return [teacher for teacher in teachers if teacher.can_teach(subject.id)]


class CandidateSelector:
    """Search order for placements.

    Each nesting level is shuffled independently: days once per requirement,
    slots and teachers on every day attempt, so a requeued day is retried with
    a fresh slot order.
    """

    def __init__(self, rng: random.Random | None = None, *, seed: int | None = None) -> None:
        self.random = rng if rng is not None else random.Random(seed)

    def shuffled(self, items: Sequence[T]) -> list[T]:
        copy = list(items)
        self.random.shuffle(copy)
        return copy

    def day_queue(self, working_days: Sequence[int]) -> deque[int]:
        return deque(self.shuffled(working_days))

    def slot_order(self, teaching_slots: Sequence[TimeSlotSpec]) -> list[TimeSlotSpec]:
        return self.shuffled([slot for slot in teaching_slots if not slot.is_break])

    def teacher_order(self, teachers: Sequence[TeacherSpec]) -> list[TeacherSpec]:
        return self.shuffled(teachers)
