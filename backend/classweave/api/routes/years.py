from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classweave.api.deps import get_db
from classweave.models.class_group import ClassGroup
from classweave.models.year import AcademicYear
from classweave.schemas.year import AcademicYearCreate, AcademicYearOut, AcademicYearUpdate

router = APIRouter()


@router.get("/", response_model=list[AcademicYearOut])
def list_years(db: Session = Depends(get_db)) -> list[AcademicYearOut]:
    return list(db.execute(select(AcademicYear).order_by(AcademicYear.value, AcademicYear.name)).scalars())


@router.post("/", response_model=AcademicYearOut, status_code=status.HTTP_201_CREATED)
def create_year(payload: AcademicYearCreate, db: Session = Depends(get_db)) -> AcademicYearOut:
    existing = db.execute(select(AcademicYear).where(AcademicYear.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Academic year name already exists")
    year = AcademicYear(**payload.model_dump())
    db.add(year)
    db.commit()
    db.refresh(year)
    return year


@router.get("/{year_id}", response_model=AcademicYearOut)
def get_year(year_id: str, db: Session = Depends(get_db)) -> AcademicYearOut:
    year = db.get(AcademicYear, year_id)
    if year is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academic year not found")
    return year


@router.put("/{year_id}", response_model=AcademicYearOut)
def update_year(year_id: str, payload: AcademicYearUpdate, db: Session = Depends(get_db)) -> AcademicYearOut:
    year = db.get(AcademicYear, year_id)
    if year is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academic year not found")

    data = payload.model_dump(exclude_unset=True)
    if "name" in data:
        existing = db.execute(
            select(AcademicYear).where(AcademicYear.name == data["name"], AcademicYear.id != year_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Academic year name already exists")

    for key, value in data.items():
        setattr(year, key, value)
    db.commit()
    db.refresh(year)
    return year


@router.delete("/{year_id}")
def delete_year(year_id: str, db: Session = Depends(get_db)) -> dict:
    year = db.get(AcademicYear, year_id)
    if year is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Academic year not found")
    in_use = db.execute(select(ClassGroup.id).where(ClassGroup.year_id == year_id).limit(1)).first()
    if in_use:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Academic year still has classes")
    db.delete(year)
    db.commit()
    return {"success": True}
