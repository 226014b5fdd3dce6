from pydantic import BaseModel, EmailStr, Field, field_validator

from classweave.schemas.subject import unique_ids


class UnavailableDay(BaseModel):
    day: int = Field(ge=0, le=6)
    reason: str | None = Field(default=None, max_length=500)


class UnavailableSlot(BaseModel):
    day: int = Field(ge=0, le=6)
    time_slot_id: str = Field(min_length=1, max_length=36)
    reason: str | None = Field(default=None, max_length=500)


class TeacherBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    department: str = Field(min_length=1, max_length=200)
    subject_ids: list[str] = Field(default_factory=list, max_length=200)
    max_hours_per_day: int = Field(default=6, ge=1, le=24)
    unavailable_days: list[UnavailableDay] = Field(default_factory=list, max_length=7)
    unavailable_slots: list[UnavailableSlot] = Field(default_factory=list, max_length=200)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("subject_ids")
    @classmethod
    def dedupe_subject_ids(cls, value: list[str]) -> list[str]:
        return unique_ids(value)


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)
    department: str | None = Field(default=None, min_length=1, max_length=200)
    subject_ids: list[str] | None = Field(default=None, max_length=200)
    max_hours_per_day: int | None = Field(default=None, ge=1, le=24)
    unavailable_days: list[UnavailableDay] | None = Field(default=None, max_length=7)
    unavailable_slots: list[UnavailableSlot] | None = Field(default=None, max_length=200)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str | None) -> str | None:
        return value.strip().lower() if value is not None else None

    @field_validator("subject_ids")
    @classmethod
    def dedupe_subject_ids(cls, value: list[str] | None) -> list[str] | None:
        return unique_ids(value) if value is not None else None


class TeacherOut(TeacherBase):
    id: str

    model_config = {"from_attributes": True}
