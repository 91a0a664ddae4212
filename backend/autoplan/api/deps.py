from collections.abc import Callable, Generator

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from autoplan.core.config import get_settings
from autoplan.db.session import SessionLocal
from autoplan.models.session import Term
from autoplan.services.engine import SchedulingEngine
from autoplan.services.sql_store import SqlTimetableStore


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_engine_factory(db: Session = Depends(get_db)) -> Callable[[Term], SchedulingEngine]:
    def build(term: Term) -> SchedulingEngine:
        return SchedulingEngine(SqlTimetableStore(db, term), get_settings())

    return build


def get_engine(
    term: Term = Query(default=Term.autumn),
    factory: Callable[[Term], SchedulingEngine] = Depends(get_engine_factory),
) -> SchedulingEngine:
    return factory(term)
