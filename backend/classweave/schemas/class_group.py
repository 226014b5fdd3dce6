from pydantic import BaseModel, Field


class ClassGroupBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    year_id: str = Field(min_length=1, max_length=36)
    section: str = Field(min_length=1, max_length=50)
    student_count: int = Field(default=0, ge=0, le=2000)


class ClassGroupCreate(ClassGroupBase):
    pass


class ClassGroupUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    year_id: str | None = Field(default=None, min_length=1, max_length=36)
    section: str | None = Field(default=None, min_length=1, max_length=50)
    student_count: int | None = Field(default=None, ge=0, le=2000)


class ClassGroupOut(ClassGroupBase):
    id: str

    model_config = {"from_attributes": True}


class BatchCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    strength: int = Field(default=0, ge=0, le=2000)


class BatchOut(BatchCreate):
    id: str
    class_id: str

    model_config = {"from_attributes": True}
