from pydantic import BaseModel, Field
from typing import Literal, List

class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "teacher_conflict",
        "class_conflict",
        "classroom_conflict",
    ]
    description: str
    severity: Literal["hard", "soft"] = "hard"
    affected_lessons: List[str]  # Lesson ids involved

class ResolutionAction(BaseModel):
    action_type: Literal["move_lesson", "change_classroom", "change_teacher"]
    description: str
    target_lesson_id: str

class ConflictReport(BaseModel):
    conflicts: List[ConflictDetail]
    suggested_resolutions: List[ResolutionAction] = Field(default_factory=list)
