from fastapi import APIRouter, Depends

from autoplan.api.deps import get_engine
from autoplan.core.exceptions import ConflictError
from autoplan.schemas.conflict import ConflictCheckRequest, ConflictReport
from autoplan.services.engine import SchedulingEngine

router = APIRouter()


@router.post("/check", response_model=ConflictReport)
def check_conflicts(
    payload: ConflictCheckRequest,
    engine: SchedulingEngine = Depends(get_engine),
) -> ConflictReport:
    conflicts = engine.check_conflicts(payload.session, payload.exclude_ids, allow_no_room=payload.allow_no_room)
    # strict callers want a hard stop instead of a report
    if payload.strict and conflicts:
        raise ConflictError(conflicts)
    return ConflictReport(has_conflicts=bool(conflicts), conflicts=conflicts)
