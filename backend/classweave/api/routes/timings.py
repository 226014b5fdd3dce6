from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from classweave.api.deps import get_db
from classweave.models.timetable import Timetable
from classweave.models.timing import TimeSlot, Timing
from classweave.schemas.timing import TimeSlotCreate, TimeSlotOut, TimingCreate, TimingOut, TimingUpdate

router = APIRouter()


def _validate_time_slot_ids(db: Session, time_slot_ids: list[str]) -> None:
    if not time_slot_ids:
        return
    found = {str(item) for item in db.execute(select(TimeSlot.id).where(TimeSlot.id.in_(time_slot_ids))).scalars()}
    unknown = [item for item in time_slot_ids if item not in found]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown time slot ids: {', '.join(unknown)}",
        )


@router.get("/time-slots", response_model=list[TimeSlotOut])
def list_time_slots(db: Session = Depends(get_db)) -> list[TimeSlotOut]:
    return list(db.execute(select(TimeSlot).order_by(TimeSlot.order, TimeSlot.start_time)).scalars())


@router.post("/time-slots", response_model=TimeSlotOut, status_code=status.HTTP_201_CREATED)
def create_time_slot(payload: TimeSlotCreate, db: Session = Depends(get_db)) -> TimeSlotOut:
    slot = TimeSlot(**payload.model_dump())
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


@router.get("/time-slots/{slot_id}", response_model=TimeSlotOut)
def get_time_slot(slot_id: str, db: Session = Depends(get_db)) -> TimeSlotOut:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    return slot


@router.put("/time-slots/{slot_id}", response_model=TimeSlotOut)
def update_time_slot(slot_id: str, payload: TimeSlotCreate, db: Session = Depends(get_db)) -> TimeSlotOut:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    for key, value in payload.model_dump().items():
        setattr(slot, key, value)
    db.commit()
    db.refresh(slot)
    return slot


@router.delete("/time-slots/{slot_id}")
def delete_time_slot(slot_id: str, db: Session = Depends(get_db)) -> dict:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    for timing in db.execute(select(Timing)).scalars():
        if slot_id in (timing.time_slot_ids or []):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Time slot is used by a timing")
    db.delete(slot)
    db.commit()
    return {"success": True}


@router.get("/timings", response_model=list[TimingOut])
def list_timings(db: Session = Depends(get_db)) -> list[TimingOut]:
    return list(db.execute(select(Timing).order_by(Timing.academic_year)).scalars())


@router.post("/timings", response_model=TimingOut, status_code=status.HTTP_201_CREATED)
def create_timing(payload: TimingCreate, db: Session = Depends(get_db)) -> TimingOut:
    _validate_time_slot_ids(db, payload.time_slot_ids)
    timing = Timing(**payload.model_dump())
    db.add(timing)
    db.commit()
    db.refresh(timing)
    return timing


@router.get("/timings/{timing_id}", response_model=TimingOut)
def get_timing(timing_id: str, db: Session = Depends(get_db)) -> TimingOut:
    timing = db.get(Timing, timing_id)
    if timing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timing not found")
    return timing


@router.put("/timings/{timing_id}", response_model=TimingOut)
def update_timing(timing_id: str, payload: TimingUpdate, db: Session = Depends(get_db)) -> TimingOut:
    timing = db.get(Timing, timing_id)
    if timing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timing not found")
    data = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    if "time_slot_ids" in data:
        _validate_time_slot_ids(db, data["time_slot_ids"])
    for key, value in data.items():
        setattr(timing, key, value)
    db.commit()
    db.refresh(timing)
    return timing


@router.delete("/timings/{timing_id}")
def delete_timing(timing_id: str, db: Session = Depends(get_db)) -> dict:
    timing = db.get(Timing, timing_id)
    if timing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timing not found")
    in_use = db.execute(select(Timetable.id).where(Timetable.timing_id == timing_id).limit(1)).first()
    if in_use:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Timing is used by a timetable")
    db.delete(timing)
    db.commit()
    return {"success": True}
