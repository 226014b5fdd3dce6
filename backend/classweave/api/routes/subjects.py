from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classweave.api.deps import get_db
from classweave.models.class_group import ClassGroup
from classweave.models.classroom import Classroom
from classweave.models.subject import Subject
from classweave.models.year import AcademicYear
from classweave.schemas.subject import SubjectCreate, SubjectOut, SubjectUpdate

router = APIRouter()


def _unknown_ids(db: Session, model, ids: list[str]) -> list[str]:
    if not ids:
        return []
    found = {str(item) for item in db.execute(select(model.id).where(model.id.in_(ids))).scalars()}
    return [item for item in ids if item not in found]


def _validate_references(db: Session, data: dict) -> None:
    if data.get("year_id") and db.get(AcademicYear, data["year_id"]) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academic year not found")
    unknown_classes = _unknown_ids(db, ClassGroup, data.get("class_ids") or [])
    if unknown_classes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown class ids: {', '.join(unknown_classes)}",
        )
    unknown_rooms = _unknown_ids(db, Classroom, data.get("preferred_classroom_ids") or [])
    if unknown_rooms:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown classroom ids: {', '.join(unknown_rooms)}",
        )


@router.get("/", response_model=list[SubjectOut])
def list_subjects(
    year_id: str | None = None,
    class_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[SubjectOut]:
    query = select(Subject).order_by(Subject.code)
    if year_id:
        query = query.where(Subject.year_id == year_id)
    subjects = list(db.execute(query).scalars())
    if class_id:
        # class_ids is a JSON list; filter in Python to stay portable across backends.
        subjects = [item for item in subjects if class_id in (item.class_ids or [])]
    return subjects


@router.post("/", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)) -> SubjectOut:
    existing = db.execute(select(Subject).where(Subject.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    data = payload.model_dump()
    _validate_references(db, data)
    subject = Subject(**data)
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.get("/{subject_id}", response_model=SubjectOut)
def get_subject(subject_id: str, db: Session = Depends(get_db)) -> SubjectOut:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    return subject


@router.put("/{subject_id}", response_model=SubjectOut)
def update_subject(subject_id: str, payload: SubjectUpdate, db: Session = Depends(get_db)) -> SubjectOut:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")

    data = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    if "code" in data:
        existing = db.execute(
            select(Subject).where(Subject.code == data["code"], Subject.id != subject_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")
    _validate_references(db, data)

    for key, value in data.items():
        setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}")
def delete_subject(subject_id: str, db: Session = Depends(get_db)) -> dict:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    db.delete(subject)
    db.commit()
    return {"success": True}
