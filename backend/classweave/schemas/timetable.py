from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class LessonBase(BaseModel):
    day: int = Field(ge=0, le=6)
    time_slot_id: str = Field(min_length=1, max_length=36)
    class_id: str = Field(min_length=1, max_length=36)
    subject_id: str = Field(min_length=1, max_length=36)
    teacher_id: str = Field(min_length=1, max_length=36)
    classroom_id: str | None = Field(default=None, min_length=1, max_length=36)
    batch_id: str | None = Field(default=None, min_length=1, max_length=36)


class LessonCreate(LessonBase):
    pass


class LessonUpdate(BaseModel):
    day: int | None = Field(default=None, ge=0, le=6)
    time_slot_id: str | None = Field(default=None, min_length=1, max_length=36)
    class_id: str | None = Field(default=None, min_length=1, max_length=36)
    subject_id: str | None = Field(default=None, min_length=1, max_length=36)
    teacher_id: str | None = Field(default=None, min_length=1, max_length=36)
    classroom_id: str | None = Field(default=None, min_length=1, max_length=36)
    batch_id: str | None = Field(default=None, min_length=1, max_length=36)


class LessonOut(LessonBase):
    id: str
    timetable_id: str

    model_config = {"from_attributes": True}


class TimetableSummaryOut(BaseModel):
    id: str
    name: str
    academic_year: str
    year_id: str | None = None
    timing_id: str
    is_active: bool
    is_locked: bool
    generated_at: datetime | None = None
    modified_at: datetime | None = None

    model_config = {"from_attributes": True}


class TimetableOut(TimetableSummaryOut):
    lessons: list[LessonOut] = Field(default_factory=list)


class GenerateTimetableRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    academic_year: str = Field(min_length=1, max_length=20)
    timing_id: str = Field(min_length=1, max_length=36)
    year_id: str | None = Field(default=None, min_length=1, max_length=36)
    require_room_strict: bool | None = None
    split_labs_by_batch: bool | None = None
    random_seed: int | None = Field(default=None, ge=0, le=2_000_000_000)
    time_budget_seconds: float | None = Field(default=None, gt=0, le=600)


class GenerationWarningOut(BaseModel):
    kind: Literal["no_eligible_teacher", "shortfall"]
    class_id: str
    batch_id: str | None = None
    subject_id: str
    periods_required: int
    periods_scheduled: int
    message: str


class RequirementOutcomeOut(BaseModel):
    class_id: str
    batch_id: str | None = None
    subject_id: str
    periods_required: int
    periods_scheduled: int
    state: Literal["pending", "partially_scheduled", "satisfied", "exhausted"]


class GenerateTimetableResponse(BaseModel):
    timetable: TimetableSummaryOut
    lesson_count: int
    warnings: list[GenerationWarningOut] = Field(default_factory=list)
    outcomes: list[RequirementOutcomeOut] = Field(default_factory=list)
    runtime_ms: int = 0
