import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from classweave.db.base import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    department: Mapped[str] = mapped_column(String(200), nullable=False)
    subject_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    max_hours_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=6)
    # [{"day": 0, "reason": "..."}]
    unavailable_days: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    # [{"day": 0, "time_slot_id": "...", "reason": "..."}]
    unavailable_slots: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
