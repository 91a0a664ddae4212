from __future__ import annotations

from autoplan.core.exceptions import SessionValidationError
from autoplan.models.session import SessionCategory
from autoplan.schemas.session import SessionPayload
from autoplan.services.time_grid import TimeGrid

REQUIRED_FIELDS = ("day", "slot", "track", "subject", "category", "section")


def validate_session(session: SessionPayload, grid: TimeGrid, *, allow_no_room: bool = False) -> None:
    """Raise SessionValidationError when the candidate cannot be conflict-checked."""
    missing = [field for field in REQUIRED_FIELDS if not getattr(session, field)]
    if session.category in (SessionCategory.tutorial, SessionCategory.lab) and not session.group:
        missing.append("group")
    if session.category != SessionCategory.lab and not session.room and not allow_no_room:
        missing.append("room")

    errors: list[str] = []
    if session.day and not grid.is_known_day(session.day):
        errors.append(f"Unknown day '{session.day}'")
    if session.slot and not grid.is_known_slot(session.slot):
        errors.append(f"Unknown time slot '{session.slot}'")
    if session.is_lab_first_half and session.slot and grid.is_known_slot(session.slot):
        if grid.coupled_slot(session.slot) is None:
            errors.append(f"Lab cannot start at {session.slot}: no coupled slot follows it")

    if missing or errors:
        raise SessionValidationError(missing, errors)
