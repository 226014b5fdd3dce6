from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

from classweave.schemas.subject import unique_ids

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def normalize_working_days(value: list[int]) -> list[int]:
    ordered: list[int] = []
    for day in value:
        if day < 0 or day > 6:
            raise ValueError("Working days must be between 0 (Monday) and 6 (Sunday)")
        if day not in ordered:
            ordered.append(day)
    return ordered


class TimeSlotBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    start_time: str
    end_time: str
    is_break: bool = False
    order: int = Field(ge=0, le=100)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "TimeSlotBase":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class TimeSlotCreate(TimeSlotBase):
    pass


class TimeSlotOut(TimeSlotBase):
    id: str

    model_config = {"from_attributes": True}


class TimingBase(BaseModel):
    academic_year: str = Field(min_length=1, max_length=20)
    periods_per_day: int = Field(ge=1, le=24)
    working_days: list[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4, 5], min_length=1, max_length=7)
    time_slot_ids: list[str] = Field(default_factory=list, max_length=48)
    is_active: bool = True

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: list[int]) -> list[int]:
        return normalize_working_days(value)

    @field_validator("time_slot_ids")
    @classmethod
    def dedupe_time_slot_ids(cls, value: list[str]) -> list[str]:
        return unique_ids(value)


class TimingCreate(TimingBase):
    pass


class TimingUpdate(BaseModel):
    academic_year: str | None = Field(default=None, min_length=1, max_length=20)
    periods_per_day: int | None = Field(default=None, ge=1, le=24)
    working_days: list[int] | None = Field(default=None, min_length=1, max_length=7)
    time_slot_ids: list[str] | None = Field(default=None, max_length=48)
    is_active: bool | None = None

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: list[int] | None) -> list[int] | None:
        if value is None:
            return None
        return normalize_working_days(value)

    @field_validator("time_slot_ids")
    @classmethod
    def dedupe_time_slot_ids(cls, value: list[str] | None) -> list[str] | None:
        return unique_ids(value) if value is not None else None


class TimingOut(TimingBase):
    id: str

    model_config = {"from_attributes": True}
