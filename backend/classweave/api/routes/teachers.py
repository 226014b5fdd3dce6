from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classweave.api.deps import get_db
from classweave.models.subject import Subject
from classweave.models.teacher import Teacher
from classweave.schemas.teacher import TeacherCreate, TeacherOut, TeacherUpdate

router = APIRouter()


def _validate_subject_ids(db: Session, subject_ids: list[str]) -> None:
    if not subject_ids:
        return
    found = {str(item) for item in db.execute(select(Subject.id).where(Subject.id.in_(subject_ids))).scalars()}
    unknown = [item for item in subject_ids if item not in found]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown subject ids: {', '.join(unknown)}",
        )


@router.get("/", response_model=list[TeacherOut])
def list_teachers(subject_id: str | None = None, db: Session = Depends(get_db)) -> list[TeacherOut]:
    teachers = list(db.execute(select(Teacher).order_by(Teacher.name)).scalars())
    if subject_id:
        teachers = [item for item in teachers if subject_id in (item.subject_ids or [])]
    return teachers


@router.post("/", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(payload: TeacherCreate, db: Session = Depends(get_db)) -> TeacherOut:
    existing = db.execute(select(Teacher).where(Teacher.email == payload.email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")
    _validate_subject_ids(db, payload.subject_ids)
    teacher = Teacher(**payload.model_dump())
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    return teacher


@router.get("/{teacher_id}", response_model=TeacherOut)
def get_teacher(teacher_id: str, db: Session = Depends(get_db)) -> TeacherOut:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
    return teacher


@router.put("/{teacher_id}", response_model=TeacherOut)
def update_teacher(teacher_id: str, payload: TeacherUpdate, db: Session = Depends(get_db)) -> TeacherOut:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")

    data = payload.model_dump(exclude_unset=True)
    if data.get("email"):
        existing = db.execute(
            select(Teacher).where(Teacher.email == data["email"], Teacher.id != teacher_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")
    if data.get("subject_ids") is not None:
        _validate_subject_ids(db, data["subject_ids"])

    for key, value in data.items():
        if value is None and key != "phone":
            continue
        setattr(teacher, key, value)
    db.commit()
    db.refresh(teacher)
    return teacher


@router.delete("/{teacher_id}")
def delete_teacher(teacher_id: str, db: Session = Depends(get_db)) -> dict:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
    db.delete(teacher)
    db.commit()
    return {"success": True}
