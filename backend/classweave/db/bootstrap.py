from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from classweave.db.base import Base

logger = logging.getLogger(__name__)

REQUIRED_TABLES: set[str] = {
    "academic_years",
    "class_groups",
    "batches",
    "subjects",
    "teachers",
    "classrooms",
    "time_slots",
    "timings",
    "timetables",
    "timetable_lessons",
}


def missing_tables(engine: Engine) -> list[str]:
    with engine.connect() as connection:
        existing = set(inspect(connection).get_table_names())
    return sorted(REQUIRED_TABLES - existing)


def ensure_schema(engine: Engine, *, create: bool) -> None:
    import classweave.models  # noqa: F401

    try:
        missing = missing_tables(engine)
    except SQLAlchemyError as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("SCHEMA CHECK FAILED")
        raise RuntimeError("Database schema check failed") from exc
    if not missing:
        return
    if not create:
        logger.warning(
            "SCHEMA INCOMPLETE | missing_tables=%s | run `alembic upgrade head` or set AUTO_CREATE_SCHEMA=true",
            ",".join(missing),
        )
        return
    logger.info("SCHEMA CREATE | tables=%s", ",".join(missing))
    Base.metadata.create_all(bind=engine)
