from fastapi import APIRouter, Depends

from autoplan.api.deps import get_engine
from autoplan.schemas.session import SessionOut
from autoplan.services.engine import SchedulingEngine

router = APIRouter()


@router.delete("/{session_id}", response_model=list[SessionOut])
def delete_session(session_id: str, engine: SchedulingEngine = Depends(get_engine)) -> list[SessionOut]:
    removed = engine.remove_session(session_id)
    return [SessionOut.from_payload(item) for item in removed]
