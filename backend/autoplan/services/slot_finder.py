from __future__ import annotations

import logging

from autoplan.models.session import SessionCategory
from autoplan.schemas.session import SessionPayload
from autoplan.services.conflict_service import ConflictService
from autoplan.services.time_grid import TimeGrid

logger = logging.getLogger(__name__)


class SlotFinder:
    def __init__(self, grid: TimeGrid, conflicts: ConflictService, max_iterations: int = 100):
        self.grid = grid
        self.conflicts = conflicts
        self.max_iterations = max_iterations

    def find_slot(
        self,
        candidate: SessionPayload,
        sessions: list[SessionPayload],
        rotation: int = 0,
        *,
        avoid_conflicts: bool = True,
    ) -> tuple[str, str] | None:
        """First acceptable (day, slot) for ``candidate``, or None.

        Days start at ``rotation`` so that consecutive placements in a track
        spread over the week. Each tried slot counts towards the iteration
        limit.
        """
        is_lab = candidate.is_lab
        tried = 0
        for day in self.grid.rotated_days(rotation, include_capped=not is_lab):
            for slot in self.grid.slots_for_day(day):
                if is_lab and self.grid.coupled_slot(slot) is None:
                    continue
                tried += 1
                if tried > self.max_iterations:
                    logger.warning(
                        "Gave up placing %s after %d slots", candidate.describe(), self.max_iterations
                    )
                    return None
                if not self._structurally_allowed(candidate, day, slot, sessions):
                    continue
                if not avoid_conflicts:
                    return day, slot
                if self._is_free(candidate, day, slot, sessions):
                    return day, slot
        return None

    def _is_free(self, candidate: SessionPayload, day: str, slot: str, sessions: list[SessionPayload]) -> bool:
        trials = [candidate.clone(day=day, slot=slot)]
        if candidate.is_lab:
            trials.append(candidate.clone(id=None, day=day, slot=self.grid.coupled_slot(slot), hour_credit=0))
        return all(not self.conflicts.check_conflicts(trial, sessions) for trial in trials)

    def _structurally_allowed(
        self, candidate: SessionPayload, day: str, slot: str, sessions: list[SessionPayload]
    ) -> bool:
        if candidate.category == SessionCategory.lecture:
            return not any(
                other.category == SessionCategory.lecture
                and other.subject == candidate.subject
                and other.track == candidate.track
                and other.day == day
                and other.slot == slot
                for other in sessions
            )
        if candidate.is_lab:
            wanted = self.conflicts.slot_span(slot, True)
            return not any(
                other.is_lab
                and other.subject == candidate.subject
                and other.track == candidate.track
                and other.day == day
                and other.slot in wanted
                for other in sessions
            )
        return True
