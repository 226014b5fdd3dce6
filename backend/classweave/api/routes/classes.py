from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from classweave.api.deps import get_db
from classweave.models.class_group import Batch, ClassGroup
from classweave.models.year import AcademicYear
from classweave.schemas.class_group import (
    BatchCreate,
    BatchOut,
    ClassGroupCreate,
    ClassGroupOut,
    ClassGroupUpdate,
)

router = APIRouter()


def _get_class_or_404(db: Session, class_id: str) -> ClassGroup:
    class_group = db.get(ClassGroup, class_id)
    if class_group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return class_group


def _ensure_unique(db: Session, name: str, year_id: str, section: str, exclude_id: str | None = None) -> None:
    query = select(ClassGroup).where(
        ClassGroup.name == name,
        ClassGroup.year_id == year_id,
        ClassGroup.section == section,
    )
    if exclude_id is not None:
        query = query.where(ClassGroup.id != exclude_id)
    if db.execute(query).scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Class already exists for this year and section")


@router.get("/", response_model=list[ClassGroupOut])
def list_classes(year_id: str | None = None, db: Session = Depends(get_db)) -> list[ClassGroupOut]:
    query = select(ClassGroup).order_by(ClassGroup.name, ClassGroup.section)
    if year_id:
        query = query.where(ClassGroup.year_id == year_id)
    return list(db.execute(query).scalars())


@router.post("/", response_model=ClassGroupOut, status_code=status.HTTP_201_CREATED)
def create_class(payload: ClassGroupCreate, db: Session = Depends(get_db)) -> ClassGroupOut:
    if db.get(AcademicYear, payload.year_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academic year not found")
    _ensure_unique(db, payload.name, payload.year_id, payload.section)
    class_group = ClassGroup(**payload.model_dump())
    db.add(class_group)
    db.commit()
    db.refresh(class_group)
    return class_group


@router.get("/{class_id}", response_model=ClassGroupOut)
def get_class(class_id: str, db: Session = Depends(get_db)) -> ClassGroupOut:
    return _get_class_or_404(db, class_id)


@router.put("/{class_id}", response_model=ClassGroupOut)
def update_class(class_id: str, payload: ClassGroupUpdate, db: Session = Depends(get_db)) -> ClassGroupOut:
    class_group = _get_class_or_404(db, class_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("year_id") and db.get(AcademicYear, data["year_id"]) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academic year not found")
    _ensure_unique(
        db,
        data.get("name") or class_group.name,
        data.get("year_id") or class_group.year_id,
        data.get("section") or class_group.section,
        exclude_id=class_id,
    )
    for key, value in data.items():
        if value is not None:
            setattr(class_group, key, value)
    db.commit()
    db.refresh(class_group)
    return class_group


@router.delete("/{class_id}")
def delete_class(class_id: str, db: Session = Depends(get_db)) -> dict:
    class_group = _get_class_or_404(db, class_id)
    db.execute(delete(Batch).where(Batch.class_id == class_id))
    db.delete(class_group)
    db.commit()
    return {"success": True}


@router.get("/{class_id}/batches", response_model=list[BatchOut])
def list_batches(class_id: str, db: Session = Depends(get_db)) -> list[BatchOut]:
    _get_class_or_404(db, class_id)
    return list(db.execute(select(Batch).where(Batch.class_id == class_id).order_by(Batch.name)).scalars())


@router.post("/{class_id}/batches", response_model=BatchOut, status_code=status.HTTP_201_CREATED)
def create_batch(class_id: str, payload: BatchCreate, db: Session = Depends(get_db)) -> BatchOut:
    _get_class_or_404(db, class_id)
    existing = db.execute(
        select(Batch).where(Batch.class_id == class_id, Batch.name == payload.name)
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Batch name already exists for this class")
    batch = Batch(class_id=class_id, **payload.model_dump())
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


@router.delete("/{class_id}/batches/{batch_id}")
def delete_batch(class_id: str, batch_id: str, db: Session = Depends(get_db)) -> dict:
    batch = db.get(Batch, batch_id)
    if batch is None or batch.class_id != class_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found")
    db.delete(batch)
    db.commit()
    return {"success": True}
