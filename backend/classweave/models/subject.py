import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from classweave.db.base import Base


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    year_id: Mapped[str] = mapped_column(String(36), ForeignKey("academic_years.id"), nullable=False, index=True)
    class_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_lab: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    credit_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    periods_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    periods_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # Ordered: earlier entries are tried first by the classroom matcher.
    preferred_classroom_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
