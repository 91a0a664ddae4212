from fastapi import APIRouter, Depends, Query

from autoplan.api.deps import get_engine
from autoplan.models.session import SessionCategory
from autoplan.schemas.room import FreeRoomsOut
from autoplan.services.engine import SchedulingEngine

router = APIRouter()


@router.get("/free", response_model=FreeRoomsOut)
def free_rooms(
    day: str = Query(min_length=1),
    slot: str = Query(min_length=1),
    category: SessionCategory = Query(default=SessionCategory.lecture),
    engine: SchedulingEngine = Depends(get_engine),
) -> FreeRoomsOut:
    rooms = engine.free_rooms(day, slot, category)
    return FreeRoomsOut(day=day, slot=slot, category=category, rooms=rooms)
