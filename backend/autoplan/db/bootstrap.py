from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from autoplan.db.base import Base
from autoplan.db.session import engine as default_engine
import autoplan.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "rooms": {"id", "name", "type"},
    "room_pools": {"id", "track", "category", "room_names"},
    "subjects": {"id", "name", "track", "term", "sections", "tutorial_groups", "lab_groups", "lab_teachers"},
    "teachers": {"id", "name", "wishes", "supplementary_volumes", "stipends"},
    "carried_over_volumes": {"teacher_name", "hours"},
    "scheduled_sessions": {"id", "term", "day", "slot", "track", "subject", "category", "section", "teachers"},
}


def _assert_required_columns(bind: Engine) -> None:
    with bind.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise RuntimeError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_schema(bind: Engine | None = None) -> None:
    bind = bind or default_engine
    try:
        Base.metadata.create_all(bind=bind)
        _assert_required_columns(bind)
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Schema bootstrap failed")
        raise RuntimeError("Schema bootstrap failed") from exc
