from __future__ import annotations

from collections import Counter, defaultdict, deque
from dataclasses import dataclass
import logging
from time import perf_counter

from classweave.core.exceptions import GenerationPreconditionError, GenerationTimeoutError
from classweave.services.candidate_selector import CandidateSelector, eligible_teachers
from classweave.services.classroom_matcher import find_classroom
from classweave.services.conflict_service import class_busy, teacher_busy
from classweave.services.scheduling_models import (
    BatchSpec,
    ClassGroupSpec,
    GenerationRequest,
    GenerationResult,
    PlannedLesson,
    RequirementOutcome,
    RequirementState,
    ShortfallWarning,
    SubjectSpec,
    TeacherSpec,
    WarningKind,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cohort:
    """Who a requirement is scheduled for: a whole class or one of its batches."""

    class_id: str
    label: str
    batch_id: str | None = None


@dataclass
class Requirement:
    index: int
    cohort: Cohort
    subject: SubjectSpec
    teachers: tuple[TeacherSpec, ...]
    periods_required: int
    periods_scheduled: int = 0
    state: RequirementState = RequirementState.pending

    def record_placement(self) -> None:
        self.periods_scheduled += 1
        if self.periods_scheduled >= self.periods_required:
            self.state = RequirementState.satisfied
        else:
            self.state = RequirementState.partially_scheduled

    def outcome(self) -> RequirementOutcome:
        return RequirementOutcome(
            class_id=self.cohort.class_id,
            subject_id=self.subject.id,
            batch_id=self.cohort.batch_id,
            periods_required=self.periods_required,
            periods_scheduled=self.periods_scheduled,
            state=self.state,
        )


def validate_request(request: GenerationRequest) -> None:
    if not request.classes:
        raise GenerationPreconditionError("No classes found")
    class_ids = {str(item.id) for item in request.classes}
    if not any(class_ids & subject.class_ids for subject in request.subjects):
        raise GenerationPreconditionError("No subjects found for the selected classes")
    if not request.teachers:
        raise GenerationPreconditionError("No teachers found")
    if not request.classrooms:
        raise GenerationPreconditionError("No classrooms found")
    if not request.timing.working_days:
        raise GenerationPreconditionError("Timing configuration has no working days")
    if not request.timing.teaching_slots:
        raise GenerationPreconditionError(
            "Timing configuration has no teaching time slots",
            details={"time_slot_count": len(request.timing.time_slots)},
        )


class PlacementEngine:
    def __init__(self, request: GenerationRequest, *, selector: CandidateSelector | None = None) -> None:
        self.request = request
        self.selector = selector or CandidateSelector(seed=request.random_seed)
        self.working_days = tuple(request.timing.working_days)
        self.teaching_slots = request.timing.teaching_slots
        self.batches_by_class: dict[str, list[BatchSpec]] = defaultdict(list)
        for batch in request.batches:
            self.batches_by_class[str(batch.class_id)].append(batch)

        self.lessons: list[PlannedLesson] = []
        self.slot_lessons: dict[tuple[int, str], list[PlannedLesson]] = defaultdict(list)
        self.subject_day_counts: Counter[tuple[str, str | None, str, int]] = Counter()
        self.teacher_day_counts: Counter[tuple[str, int]] = Counter()
        self.warnings: list[ShortfallWarning] = []
        self._deadline: float | None = None

    def generate(self) -> GenerationResult:
        validate_request(self.request)
        started = perf_counter()
        if self.request.time_budget_seconds is not None:
            self._deadline = started + self.request.time_budget_seconds

        requirements = self._build_requirements()
        worklist = deque(req.index for req in requirements if req.state == RequirementState.pending)
        while worklist:
            requirement = requirements[worklist.popleft()]
            self._schedule(requirement)
            logger.debug(
                "REQUIREMENT OUTCOME | class=%s | subject=%s | scheduled=%s/%s | state=%s",
                requirement.cohort.label,
                requirement.subject.code,
                requirement.periods_scheduled,
                requirement.periods_required,
                requirement.state.value,
            )
            if requirement.state != RequirementState.satisfied:
                self._warn_shortfall(requirement)

        runtime_ms = int((perf_counter() - started) * 1000)
        logger.info(
            "PLACEMENT COMPLETE | requirements=%s | lessons=%s | warnings=%s | runtime_ms=%s",
            len(requirements),
            len(self.lessons),
            len(self.warnings),
            runtime_ms,
        )
        return GenerationResult(
            lessons=list(self.lessons),
            warnings=list(self.warnings),
            outcomes=[req.outcome() for req in requirements],
            runtime_ms=runtime_ms,
        )

    def _cohorts_for(self, class_group: ClassGroupSpec, subject: SubjectSpec) -> list[Cohort]:
        batches = self.batches_by_class.get(str(class_group.id), [])
        if subject.is_lab and self.request.split_labs_by_batch and batches:
            return [
                Cohort(class_id=str(class_group.id), batch_id=str(batch.id), label=f"{class_group.name}/{batch.name}")
                for batch in batches
            ]
        return [Cohort(class_id=str(class_group.id), label=class_group.name)]

    def _build_requirements(self) -> list[Requirement]:
        requirements: list[Requirement] = []
        for class_group in self.request.classes:
            class_subjects = [subject for subject in self.request.subjects if str(class_group.id) in subject.class_ids]
            for subject in class_subjects:
                teachers = tuple(eligible_teachers(subject, self.request.teachers))
                periods_required = subject.periods_per_week or 1
                for cohort in self._cohorts_for(class_group, subject):
                    requirement = Requirement(
                        index=len(requirements),
                        cohort=cohort,
                        subject=subject,
                        teachers=teachers,
                        periods_required=periods_required,
                    )
                    requirements.append(requirement)
                    if not teachers:
                        requirement.state = RequirementState.exhausted
                        self._warn_no_teacher(requirement)
        return requirements

    def _schedule(self, requirement: Requirement) -> None:
        subject = requirement.subject
        day_queue = self.selector.day_queue(self.working_days)
        requeues_left = len(self.working_days)

        while requirement.periods_scheduled < requirement.periods_required and day_queue:
            self._check_deadline()
            day = day_queue.popleft()
            if self._subject_count(requirement, day) >= subject.periods_per_day:
                if requeues_left > 0:
                    requeues_left -= 1
                    day_queue.append(day)
                continue

            lesson = self._place_on_day(requirement, day)
            if lesson is None:
                # Nothing fits on this day; it is not retried.
                continue
            requirement.record_placement()
            if self._subject_count(requirement, day) < subject.periods_per_day:
                day_queue.append(day)

        if requirement.periods_scheduled < requirement.periods_required:
            requirement.state = RequirementState.exhausted

    def _place_on_day(self, requirement: Requirement, day: int) -> PlannedLesson | None:
        cohort = requirement.cohort
        subject = requirement.subject
        for slot in self.selector.slot_order(self.teaching_slots):
            occupied = self.slot_lessons[(day, str(slot.id))]
            if class_busy(cohort.class_id, cohort.batch_id, occupied):
                continue
            for teacher in self.selector.teacher_order(requirement.teachers):
                if teacher_busy(teacher.id, occupied):
                    continue
                if teacher.is_unavailable(day, slot.id):
                    continue
                if self.teacher_day_counts[(str(teacher.id), day)] >= teacher.max_hours_per_day:
                    continue
                classroom = find_classroom(subject, day, slot.id, occupied, self.request.classrooms)
                if classroom is None and self.request.require_room_strict:
                    # Room availability does not depend on the teacher; try the next slot.
                    break
                lesson = PlannedLesson(
                    day=day,
                    time_slot_id=str(slot.id),
                    class_id=cohort.class_id,
                    subject_id=str(subject.id),
                    teacher_id=str(teacher.id),
                    classroom_id=str(classroom.id) if classroom is not None else None,
                    batch_id=cohort.batch_id,
                )
                self._record(lesson)
                return lesson
        return None

    def _record(self, lesson: PlannedLesson) -> None:
        self.lessons.append(lesson)
        self.slot_lessons[(lesson.day, lesson.time_slot_id)].append(lesson)
        self.subject_day_counts[(lesson.class_id, lesson.batch_id, lesson.subject_id, lesson.day)] += 1
        self.teacher_day_counts[(lesson.teacher_id, lesson.day)] += 1

    def _subject_count(self, requirement: Requirement, day: int) -> int:
        cohort = requirement.cohort
        return self.subject_day_counts[(cohort.class_id, cohort.batch_id, str(requirement.subject.id), day)]

    def _check_deadline(self) -> None:
        if self._deadline is not None and perf_counter() > self._deadline:
            raise GenerationTimeoutError(
                self.request.time_budget_seconds,
                details={"lessons_placed": len(self.lessons)},
            )

    def _warn_no_teacher(self, requirement: Requirement) -> None:
        subject = requirement.subject
        message = f"No teachers available for subject {subject.name} ({subject.code})"
        logger.warning("GENERATION NO TEACHER | %s | class=%s", message, requirement.cohort.label)
        self.warnings.append(ShortfallWarning(
            kind=WarningKind.no_eligible_teacher,
            class_id=requirement.cohort.class_id,
            batch_id=requirement.cohort.batch_id,
            subject_id=str(subject.id),
            periods_required=requirement.periods_required,
            periods_scheduled=0,
            message=message,
        ))

    def _warn_shortfall(self, requirement: Requirement) -> None:
        subject = requirement.subject
        message = (
            f"Could only schedule {requirement.periods_scheduled}/{requirement.periods_required} periods "
            f"for {subject.name} ({subject.code}) in class {requirement.cohort.label}"
        )
        logger.warning("GENERATION SHORTFALL | %s", message)
        self.warnings.append(ShortfallWarning(
            kind=WarningKind.shortfall,
            class_id=requirement.cohort.class_id,
            batch_id=requirement.cohort.batch_id,
            subject_id=str(subject.id),
            periods_required=requirement.periods_required,
            periods_scheduled=requirement.periods_scheduled,
            message=message,
        ))


def generate(request: GenerationRequest, *, selector: CandidateSelector | None = None) -> GenerationResult:
    return PlacementEngine(request, selector=selector).generate()

