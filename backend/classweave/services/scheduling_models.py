from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def day_name(day: int) -> str:
    if 0 <= day < len(DAY_NAMES):
        return DAY_NAMES[day]
    return f"Day {day}"


@dataclass(frozen=True)
class ClassGroupSpec:
    id: str
    name: str
    section: str = ""
    student_count: int = 0


@dataclass(frozen=True)
class BatchSpec:
    id: str
    name: str
    class_id: str
    strength: int = 0


@dataclass(frozen=True)
class SubjectSpec:
    id: str
    name: str
    code: str
    class_ids: frozenset[str] = frozenset()
    is_lab: bool = False
    periods_per_week: int = 1
    periods_per_day: int = 1
    preferred_classroom_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class TeacherSpec:
    id: str
    name: str
    subject_ids: frozenset[str] = frozenset()
    max_hours_per_day: int = 6
    unavailable_days: frozenset[int] = frozenset()
    unavailable_slots: frozenset[tuple[int, str]] = frozenset()

    def can_teach(self, subject_id: str) -> bool:
        return str(subject_id) in self.subject_ids

    def is_unavailable(self, day: int, time_slot_id: str) -> bool:
        return day in self.unavailable_days or (day, str(time_slot_id)) in self.unavailable_slots


@dataclass(frozen=True)
class ClassroomSpec:
    id: str
    name: str
    capacity: int
    is_lab: bool = False


@dataclass(frozen=True)
class TimeSlotSpec:
    id: str
    name: str
    order: int
    is_break: bool = False
    start_time: str = ""
    end_time: str = ""


@dataclass(frozen=True)
class TimingSpec:
    working_days: tuple[int, ...]
    time_slots: tuple[TimeSlotSpec, ...]

    @property
    def teaching_slots(self) -> tuple[TimeSlotSpec, ...]:
        return tuple(sorted((slot for slot in self.time_slots if not slot.is_break), key=lambda slot: slot.order))


@dataclass(frozen=True)
class GenerationRequest:
    classes: tuple[ClassGroupSpec, ...]
    subjects: tuple[SubjectSpec, ...]
    teachers: tuple[TeacherSpec, ...]
    timing: TimingSpec
    classrooms: tuple[ClassroomSpec, ...]
    batches: tuple[BatchSpec, ...] = ()
    require_room_strict: bool = True
    split_labs_by_batch: bool = True
    random_seed: int | None = None
    time_budget_seconds: float | None = None


@dataclass(frozen=True)
class LessonCandidate:
    """A proposed placement checked by the conflict detector."""

    day: int
    time_slot_id: str
    teacher_id: str
    class_id: str
    classroom_id: str | None = None
    batch_id: str | None = None


@dataclass(frozen=True)
class PlannedLesson:
    day: int
    time_slot_id: str
    class_id: str
    subject_id: str
    teacher_id: str
    classroom_id: str | None = None
    batch_id: str | None = None
    id: str | None = None


class RequirementState(str, Enum):
    pending = "pending"
    partially_scheduled = "partially_scheduled"
    satisfied = "satisfied"
    exhausted = "exhausted"


class WarningKind(str, Enum):
    no_eligible_teacher = "no_eligible_teacher"
    shortfall = "shortfall"


@dataclass(frozen=True)
class ShortfallWarning:
    kind: WarningKind
    class_id: str
    subject_id: str
    periods_required: int
    periods_scheduled: int
    message: str
    batch_id: str | None = None


@dataclass(frozen=True)
class RequirementOutcome:
    class_id: str
    subject_id: str
    batch_id: str | None
    periods_required: int
    periods_scheduled: int
    state: RequirementState


@dataclass
class GenerationResult:
    lessons: list[PlannedLesson] = field(default_factory=list)
    warnings: list[ShortfallWarning] = field(default_factory=list)
    outcomes: list[RequirementOutcome] = field(default_factory=list)
    runtime_ms: int = 0

    @property
    def is_complete(self) -> bool:
        return not self.warnings
