from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from classweave.api.deps import get_app_settings, get_db
from classweave.core.config import Settings
from classweave.schemas.conflict import ConflictReport
from classweave.schemas.timetable import (
    GenerateTimetableRequest,
    GenerateTimetableResponse,
    GenerationWarningOut,
    LessonCreate,
    LessonOut,
    LessonUpdate,
    RequirementOutcomeOut,
    TimetableOut,
    TimetableSummaryOut,
)
from classweave.services import timetable_service

router = APIRouter()


@router.get("/", response_model=list[TimetableSummaryOut])
def list_timetables(db: Session = Depends(get_db)) -> list[TimetableSummaryOut]:
    return timetable_service.list_timetables(db)


@router.get("/active", response_model=TimetableOut)
def get_active_timetable(db: Session = Depends(get_db)) -> TimetableOut:
    return timetable_service.get_active_timetable(db)


@router.post("/generate", response_model=GenerateTimetableResponse, status_code=status.HTTP_201_CREATED)
def generate_timetable(
    payload: GenerateTimetableRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> GenerateTimetableResponse:
    timetable, result = timetable_service.generate_timetable(db, payload, settings)
    return GenerateTimetableResponse(
        timetable=TimetableSummaryOut.model_validate(timetable),
        lesson_count=len(result.lessons),
        warnings=[
            GenerationWarningOut(
                kind=item.kind.value,
                class_id=item.class_id,
                batch_id=item.batch_id,
                subject_id=item.subject_id,
                periods_required=item.periods_required,
                periods_scheduled=item.periods_scheduled,
                message=item.message,
            )
            for item in result.warnings
        ],
        outcomes=[
            RequirementOutcomeOut(
                class_id=item.class_id,
                batch_id=item.batch_id,
                subject_id=item.subject_id,
                periods_required=item.periods_required,
                periods_scheduled=item.periods_scheduled,
                state=item.state.value,
            )
            for item in result.outcomes
        ],
        runtime_ms=result.runtime_ms,
    )


@router.get("/{timetable_id}", response_model=TimetableOut)
def get_timetable(timetable_id: str, db: Session = Depends(get_db)) -> TimetableOut:
    return timetable_service.get_timetable(db, timetable_id)


@router.delete("/{timetable_id}")
def delete_timetable(timetable_id: str, db: Session = Depends(get_db)) -> dict:
    timetable_service.delete_timetable(db, timetable_id)
    return {"success": True}


@router.post("/{timetable_id}/activate", response_model=TimetableSummaryOut)
def activate_timetable(timetable_id: str, db: Session = Depends(get_db)) -> TimetableSummaryOut:
    return timetable_service.set_active(db, timetable_id)


@router.post("/{timetable_id}/lock", response_model=TimetableSummaryOut)
def toggle_timetable_lock(timetable_id: str, db: Session = Depends(get_db)) -> TimetableSummaryOut:
    return timetable_service.toggle_lock(db, timetable_id)


@router.get("/{timetable_id}/conflicts", response_model=ConflictReport)
def timetable_conflicts(timetable_id: str, db: Session = Depends(get_db)) -> ConflictReport:
    return timetable_service.audit_timetable(db, timetable_id)


@router.post("/{timetable_id}/lessons", response_model=LessonOut, status_code=status.HTTP_201_CREATED)
def add_lesson(timetable_id: str, payload: LessonCreate, db: Session = Depends(get_db)) -> LessonOut:
    return timetable_service.add_lesson(db, timetable_id, payload)


@router.put("/{timetable_id}/lessons/{lesson_id}", response_model=LessonOut)
def update_lesson(
    timetable_id: str,
    lesson_id: str,
    payload: LessonUpdate,
    db: Session = Depends(get_db),
) -> LessonOut:
    return timetable_service.update_lesson(db, timetable_id, lesson_id, payload)


@router.delete("/{timetable_id}/lessons/{lesson_id}")
def remove_lesson(timetable_id: str, lesson_id: str, db: Session = Depends(get_db)) -> dict:
    timetable_service.remove_lesson(db, timetable_id, lesson_id)
    return {"success": True}


@router.get("/{timetable_id}/classes/{class_id}/lessons", response_model=list[LessonOut])
def class_lessons(timetable_id: str, class_id: str, db: Session = Depends(get_db)) -> list[LessonOut]:
    return timetable_service.lessons_for_class(db, timetable_id, class_id)


@router.get("/{timetable_id}/teachers/{teacher_id}/lessons", response_model=list[LessonOut])
def teacher_lessons(timetable_id: str, teacher_id: str, db: Session = Depends(get_db)) -> list[LessonOut]:
    return timetable_service.lessons_for_teacher(db, timetable_id, teacher_id)


@router.get("/{timetable_id}/classrooms/{classroom_id}/lessons", response_model=list[LessonOut])
def classroom_lessons(timetable_id: str, classroom_id: str, db: Session = Depends(get_db)) -> list[LessonOut]:
    return timetable_service.lessons_for_classroom(db, timetable_id, classroom_id)
