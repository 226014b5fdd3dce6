from pydantic import BaseModel, Field


class AcademicYearBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    value: int = Field(ge=1, le=5)


class AcademicYearCreate(AcademicYearBase):
    pass


class AcademicYearUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    value: int | None = Field(default=None, ge=1, le=5)


class AcademicYearOut(AcademicYearBase):
    id: str

    model_config = {"from_attributes": True}
