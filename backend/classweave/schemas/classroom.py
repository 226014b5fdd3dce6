from pydantic import BaseModel, Field


class ClassroomBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=1, le=1000)
    is_lab: bool = False
    building: str = Field(default="Main Building", min_length=1, max_length=200)
    floor: int = Field(default=0, ge=-5, le=200)


class ClassroomCreate(ClassroomBase):
    pass


class ClassroomUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=1, le=1000)
    is_lab: bool | None = None
    building: str | None = Field(default=None, min_length=1, max_length=200)
    floor: int | None = Field(default=None, ge=-5, le=200)


class ClassroomOut(ClassroomBase):
    id: str

    model_config = {"from_attributes": True}
