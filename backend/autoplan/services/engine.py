from __future__ import annotations

import logging

from autoplan.core.config import Settings, get_settings
from autoplan.core.exceptions import ResourceNotFoundError, SchedulerError
from autoplan.models.session import SessionCategory, Term
from autoplan.schemas.conflict import ConflictDescriptor
from autoplan.schemas.generator import GenerationOptions, GenerationResult
from autoplan.schemas.session import SessionPayload
from autoplan.schemas.teacher import TeacherSuggestion
from autoplan.schemas.workload import AnnualMetrics, SubjectCoverage, WorkloadBreakdown
from autoplan.services.audit import MessageSink
from autoplan.services.candidate_scorer import TeacherSelector
from autoplan.services.conflict_service import ConflictService, find_lab_partner
from autoplan.services.room_assignor import RoomAssignor
from autoplan.services.scheduling import SchedulingOrchestrator
from autoplan.services.store import TimetableStore
from autoplan.services.time_grid import TimeGrid
from autoplan.services.validation import validate_session
from autoplan.services.workload import WorkloadCalculator

logger = logging.getLogger(__name__)


class SchedulingEngine:
    """Public entry point wiring the planning services around one store."""

    def __init__(
        self,
        store: TimetableStore,
        settings: Settings | None = None,
        *,
        grid: TimeGrid | None = None,
        sink: MessageSink | None = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.grid = grid or TimeGrid.from_settings(self.settings)
        self.sink = sink
        self.conflicts = ConflictService(self.grid, store.list_rooms())
        self.workload = WorkloadCalculator(store, self.settings.workload_tolerance_hours)
        self.selector = TeacherSelector(store, self.grid, self.conflicts, self.workload)
        self.rooms = RoomAssignor(self.conflicts, store.list_room_pools())
        self.orchestrator = SchedulingOrchestrator(
            store,
            self.grid,
            self.conflicts,
            self.workload,
            self.selector,
            self.rooms,
            max_iterations=self.settings.max_planning_iterations,
        )

    def run_generation(self, options: GenerationOptions | None = None) -> GenerationResult:
        return self.orchestrator.run(options, self.sink)

    def check_conflicts(
        self,
        candidate: SessionPayload,
        exclude_ids: list[str] | None = None,
        *,
        allow_no_room: bool = False,
    ) -> list[ConflictDescriptor]:
        validate_session(candidate, self.grid, allow_no_room=allow_no_room)
        return self.conflicts.check_conflicts(candidate, self.store.list_sessions(), exclude_ids or [])

    def compute_workload(self, teacher_name: str) -> float:
        return self.workload.compute_workload(teacher_name)

    def compute_reference_workload(self) -> int:
        return self.workload.compute_reference_workload()

    def workload_ceiling(self, override: float | None = None) -> float:
        return self.workload.workload_ceiling(override)

    def workload_breakdown(self, teacher_name: str) -> WorkloadBreakdown:
        if not any(teacher.name == teacher_name for teacher in self.store.list_teachers()):
            raise ResourceNotFoundError("Teacher", teacher_name)
        return self.workload.breakdown(teacher_name)

    def annual_metrics(self) -> AnnualMetrics:
        return self.workload.annual_metrics()

    def subject_coverage(self) -> list[SubjectCoverage]:
        return self.workload.subject_coverage()

    def carry_over_totals(self) -> dict[str, float]:
        """Snapshot autumn totals into the carried-over volumes used by spring."""
        if self.store.active_term != Term.autumn:
            raise SchedulerError("Carry-over totals are taken from the autumn term")
        totals = self.workload.carry_over_totals()
        self.store.save_carried_over(totals)
        self.store.persist()
        logger.info("Carried over workload totals for %d teacher(s)", len(totals))
        return totals

    def free_rooms(self, day: str, slot: str, category: SessionCategory) -> list[str]:
        if not self.grid.is_known_day(day) or not self.grid.is_known_slot(slot):
            raise SchedulerError(f"Unknown day or time slot: {day} {slot}")
        return self.conflicts.free_rooms(day, slot, category, self.store.list_sessions())

    def suggest_next_teacher(
        self,
        candidate: SessionPayload,
        current: str | None = None,
        exclude_ids: list[str] | None = None,
        exclude_teacher: str | None = None,
    ) -> TeacherSuggestion | None:
        return self.selector.suggest_next_teacher(candidate, current, exclude_ids, exclude_teacher)

    def remove_session(self, session_id: str) -> list[SessionPayload]:
        """Remove a session; removing the first half of a Lab also removes its paired half."""
        sessions = self.store.list_sessions()
        target = next((item for item in sessions if item.id == session_id), None)
        if target is None:
            raise ResourceNotFoundError("Session", session_id)
        removed = [target]
        partner = find_lab_partner(target, sessions, self.grid) if target.is_lab_first_half else None
        if partner is not None:
            removed.append(partner)
        for item in removed:
            self.store.remove_session(item.id)
        self.store.persist()
        return removed
