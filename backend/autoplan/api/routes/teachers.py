from fastapi import APIRouter, Depends, Query

from autoplan.api.deps import get_engine
from autoplan.core.exceptions import ResourceNotFoundError
from autoplan.models.session import SessionCategory
from autoplan.schemas.session import SessionPayload
from autoplan.schemas.teacher import TeacherSuggestion
from autoplan.services.engine import SchedulingEngine

router = APIRouter()


@router.get("/suggest", response_model=TeacherSuggestion)
def suggest_teacher(
    subject: str = Query(min_length=1),
    category: SessionCategory = Query(default=SessionCategory.lecture),
    day: str = Query(min_length=1),
    slot: str = Query(min_length=1),
    current: str | None = Query(default=None),
    exclude: list[str] = Query(default=[]),
    exclude_teacher: str | None = Query(default=None),
    engine: SchedulingEngine = Depends(get_engine),
) -> TeacherSuggestion:
    candidate = SessionPayload(day=day, slot=slot, subject=subject, category=category)
    suggestion = engine.suggest_next_teacher(candidate, current, exclude, exclude_teacher)
    if suggestion is None:
        raise ResourceNotFoundError("Teacher suggestion", f"{subject} ({category.value})")
    return suggestion
