from __future__ import annotations

import logging
from collections import Counter

from autoplan.models.session import SessionCategory
from autoplan.schemas.session import SessionPayload
from autoplan.schemas.teacher import WISH_RANK_SCORES, TeacherPayload, TeacherSuggestion
from autoplan.services.conflict_service import ConflictService, find_lab_partner
from autoplan.services.store import TimetableStore
from autoplan.services.time_grid import TimeGrid
from autoplan.services.workload import WorkloadCalculator

logger = logging.getLogger(__name__)

UNMET_REQUEST_MULTIPLIER = 10
MET_REQUEST_MULTIPLIER = 0.1
ADJACENT_TUTORIAL_BONUS = 140
TUTORIAL_CHAIN_BONUS = 500

SUGGESTION_RANK_SCORES = {1: 1000, 2: 500, 3: 250}
SUGGESTION_STATED_BONUS = 200


class AssignmentCounter(Counter):
    """Sessions handed to each teacher during one run, keyed by (teacher, subject, category)."""

    def record(self, teachers: list[str], subject: str, category: SessionCategory) -> None:
        for name in teachers:
            self[(name, subject, category)] += 1

    def count(self, teacher: str, subject: str, category: SessionCategory) -> int:
        return self[(teacher, subject, category)]


class TeacherSelector:
    def __init__(
        self,
        store: TimetableStore,
        grid: TimeGrid,
        conflicts: ConflictService,
        workload: WorkloadCalculator,
    ):
        self.store = store
        self.grid = grid
        self.conflicts = conflicts
        self.workload = workload

    def score(
        self,
        teacher: TeacherPayload,
        session: SessionPayload,
        sessions: list[SessionPayload],
        ceiling: float,
        counter: AssignmentCounter | None = None,
        current_workload: float | None = None,
    ) -> float:
        """Desirability of giving ``session`` to ``teacher``; 0 means ineligible."""
        category = session.category
        if category is None:
            return 0
        if not self._is_available(teacher.name, session, sessions):
            return 0
        workload = self.workload.compute_workload(teacher.name) if current_workload is None else current_workload
        if workload >= ceiling:
            return 0
        rank = teacher.wish_rank(session.subject)
        if rank == 0 or teacher.refuses(session.subject, category):
            return 0

        score = float(WISH_RANK_SCORES[rank])
        requested = teacher.requested_count(session.subject, category)
        if requested is not None:
            given = (counter or AssignmentCounter()).count(teacher.name, session.subject, category)
            score *= UNMET_REQUEST_MULTIPLIER if given < requested else MET_REQUEST_MULTIPLIER
        score += ceiling - workload

        if category == SessionCategory.tutorial:
            adjacent = self._adjacent_tutorials(teacher.name, session, sessions)
            if adjacent:
                score += ADJACENT_TUTORIAL_BONUS * adjacent + TUTORIAL_CHAIN_BONUS
        return score

    def select(
        self,
        session: SessionPayload,
        sessions: list[SessionPayload],
        ceiling: float,
        counter: AssignmentCounter | None = None,
        *,
        required: int = 1,
        respect_wishes: bool = True,
    ) -> list[str]:
        """Pick up to ``required`` teachers, best score first.

        Equal scores keep registry order.
        """
        if not respect_wishes:
            return []
        credit = session.hour_credit
        per_teacher = credit if session.is_lab else credit / max(required, 1)

        scored = []
        for teacher in self.store.list_teachers():
            workload = self.workload.compute_workload(teacher.name)
            value = self.score(teacher, session, sessions, ceiling, counter, workload)
            if value > 0:
                scored.append((value, workload, teacher.name))
        scored.sort(key=lambda item: item[0], reverse=True)

        chosen: list[str] = []
        for value, workload, name in scored:
            if workload + per_teacher > ceiling:
                logger.debug(
                    "Skipping %s for %s: %.1f h would exceed %.1f h",
                    name,
                    session.describe(),
                    workload + per_teacher,
                    ceiling,
                )
                continue
            chosen.append(name)
            if len(chosen) >= required:
                break
        if 0 < len(chosen) < required:
            logger.warning("Only %d of %d teachers found for %s", len(chosen), required, session.describe())
        return chosen

    def suggest_next_teacher(
        self,
        session: SessionPayload,
        current: str | None = None,
        exclude_ids: list[str] | None = None,
        exclude_teacher: str | None = None,
    ) -> TeacherSuggestion | None:
        """Cycle through the teachers a manual entry could use, best first.

        ``exclude_teacher`` is a co-teacher already chosen for the same
        session and is never proposed.
        """
        category = session.category
        if category is None:
            return None
        sessions = self.store.list_sessions()
        exclude = set(exclude_ids or [])
        if session.id:
            exclude.add(session.id)
        reference = self.workload.compute_reference_workload()

        ranked = []
        for teacher in self.store.list_teachers():
            if exclude_teacher is not None and teacher.name == exclude_teacher:
                continue
            rank = teacher.wish_rank(session.subject)
            if rank == 0 or teacher.refuses(session.subject, category):
                continue
            if not self.conflicts.is_teacher_available(
                teacher.name, session.day, session.slot, sessions, is_lab=session.is_lab, exclude_ids=exclude
            ):
                continue
            value = float(SUGGESTION_RANK_SCORES[rank])
            requested = teacher.requested_count(session.subject, category)
            if requested:
                value += SUGGESTION_STATED_BONUS
            value += max(0, reference - self.workload.compute_workload(teacher.name))
            ranked.append(TeacherSuggestion(name=teacher.name, score=value))
        if not ranked:
            return None
        ranked.sort(key=lambda item: item.score, reverse=True)

        names = [item.name for item in ranked]
        if current in names:
            return ranked[(names.index(current) + 1) % len(ranked)]
        return ranked[0]

    def _is_available(self, name: str, session: SessionPayload, sessions: list[SessionPayload]) -> bool:
        exclude = [session.id] if session.id else []
        partner = find_lab_partner(session, sessions, self.grid)
        if partner is not None and partner.id:
            exclude.append(partner.id)
        return self.conflicts.is_teacher_available(
            name, session.day, session.slot, sessions, is_lab=session.is_lab, exclude_ids=exclude
        )

    def _adjacent_tutorials(self, name: str, session: SessionPayload, sessions: list[SessionPayload]) -> int:
        adjacent = 0
        for slot in self.grid.adjacent_slots(session.slot):
            for other in sessions:
                if (
                    other.id != session.id
                    and other.day == session.day
                    and other.slot == slot
                    and other.category == SessionCategory.tutorial
                    and other.subject == session.subject
                    and name in other.teachers
                ):
                    adjacent += 1
                    break
        return adjacent
