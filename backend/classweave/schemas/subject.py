from pydantic import BaseModel, Field, field_validator


def unique_ids(values: list[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in values:
        value = str(item).strip()
        if not value or value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


class SubjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    year_id: str = Field(min_length=1, max_length=36)
    class_ids: list[str] = Field(default_factory=list, max_length=500)
    is_lab: bool = False
    credit_hours: int = Field(default=1, ge=1, le=20)
    periods_per_week: int = Field(default=1, ge=1, le=60)
    periods_per_day: int = Field(default=1, ge=1, le=24)
    preferred_classroom_ids: list[str] = Field(default_factory=list, max_length=100)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("Subject code cannot be blank")
        return code

    @field_validator("class_ids", "preferred_classroom_ids")
    @classmethod
    def dedupe_ids(cls, value: list[str]) -> list[str]:
        return unique_ids(value)


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    year_id: str | None = Field(default=None, min_length=1, max_length=36)
    class_ids: list[str] | None = Field(default=None, max_length=500)
    is_lab: bool | None = None
    credit_hours: int | None = Field(default=None, ge=1, le=20)
    periods_per_week: int | None = Field(default=None, ge=1, le=60)
    periods_per_day: int | None = Field(default=None, ge=1, le=24)
    preferred_classroom_ids: list[str] | None = Field(default=None, max_length=100)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        return value.strip().upper() if value is not None else None

    @field_validator("class_ids", "preferred_classroom_ids")
    @classmethod
    def dedupe_ids(cls, value: list[str] | None) -> list[str] | None:
        return unique_ids(value) if value is not None else None


class SubjectOut(SubjectBase):
    id: str

    model_config = {"from_attributes": True}
