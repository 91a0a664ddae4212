from __future__ import annotations

import logging

from autoplan.models.session import SessionCategory
from autoplan.schemas.room import RoomPoolPayload
from autoplan.schemas.session import SessionPayload
from autoplan.services.conflict_service import ConflictService, find_lab_partner

logger = logging.getLogger(__name__)


class RoomAssignor:
    """Chooses a room for a placed session.

    A pool configured for the session's track and category is tried first.
    When every pooled room is taken a Lecture stays without a room, while a
    Tutorial or Lab falls back to any free compatible room.
    """

    def __init__(self, conflicts: ConflictService, pools: list[RoomPoolPayload] | None = None):
        self.conflicts = conflicts
        self.pools: dict[tuple[str, SessionCategory], list[str]] = {}
        for pool in pools or []:
            self.pools.setdefault((pool.track, pool.category), []).extend(pool.room_names)

    def pool_for(self, track: str, category: SessionCategory | None) -> list[str]:
        if category is None:
            return []
        return self.pools.get((track, category), [])

    def assign(self, session: SessionPayload, sessions: list[SessionPayload]) -> str | None:
        exclude = [session.id] if session.id else []
        partner = find_lab_partner(session, sessions, self.conflicts.grid)
        if partner is not None and partner.id:
            exclude.append(partner.id)
        free = self.conflicts.free_rooms(session.day, session.slot, session.category, sessions, exclude)
        if not free:
            logger.debug("No free room for %s", session.describe())
            return None

        pool = self.pool_for(session.track, session.category)
        if not pool:
            return free[0]
        for name in free:
            if name in pool:
                return name
        if session.category == SessionCategory.lecture:
            logger.debug("Room pool for %s exhausted, leaving Lecture without room", session.track)
            return None
        return free[0]
