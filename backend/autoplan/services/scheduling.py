from __future__ import annotations

import logging
import uuid
from collections import defaultdict

from autoplan.core.exceptions import AppError
from autoplan.models.session import SessionCategory
from autoplan.schemas.common import group_name, section_name
from autoplan.schemas.generator import GenerationOptions, GenerationResult, GenerationStats
from autoplan.schemas.session import SessionOut, SessionPayload
from autoplan.schemas.subject import SubjectPayload
from autoplan.services.audit import MessageSink, RunJournal
from autoplan.services.candidate_scorer import AssignmentCounter, TeacherSelector
from autoplan.services.conflict_service import ConflictService, find_lab_partner
from autoplan.services.room_assignor import RoomAssignor
from autoplan.services.slot_finder import SlotFinder
from autoplan.services.store import TimetableStore
from autoplan.services.time_grid import TimeGrid
from autoplan.services.workload import WorkloadCalculator

logger = logging.getLogger(__name__)


class SchedulingOrchestrator:
    """Runs teacher back-fill, room back-fill and generation of missing sessions.

    The run is best effort: an item that cannot be placed or staffed is
    reported and counted, and the run carries on with the next one. Nothing
    already written is rolled back.
    """

    def __init__(
        self,
        store: TimetableStore,
        grid: TimeGrid,
        conflicts: ConflictService,
        workload: WorkloadCalculator,
        selector: TeacherSelector,
        rooms: RoomAssignor,
        max_iterations: int = 100,
    ):
        self.store = store
        self.grid = grid
        self.conflicts = conflicts
        self.workload = workload
        self.selector = selector
        self.rooms = rooms
        self.max_iterations = max_iterations

    def run(self, options: GenerationOptions | None = None, sink: MessageSink | None = None) -> GenerationResult:
        options = options or GenerationOptions()
        journal = RunJournal(sink)
        stats = {"total": 0, "created": 0, "failed": 0, "skipped": 0, "teachers_assigned": 0, "rooms_assigned": 0}
        counter = AssignmentCounter()
        journal.info(f"Planning run started for the {self.store.active_term.value} term")

        if options.assign_teachers:
            assigned = self._backfill_teachers(options, counter, journal)
            stats["teachers_assigned"] += assigned
            if assigned:
                self.store.persist()

        if options.assign_rooms:
            assigned = self._backfill_rooms(journal)
            stats["rooms_assigned"] += assigned
            if assigned:
                self.store.persist()

        if options.generate_missing:
            self._generate_missing(options, counter, journal, stats)
            if stats["created"]:
                self.store.persist()

        result = GenerationStats(**stats)
        journal.success(
            f"Run finished: {result.created} created, {result.skipped} skipped, {result.failed} failed, "
            f"{result.teachers_assigned} teacher assignment(s), {result.rooms_assigned} room assignment(s)"
        )
        return GenerationResult(
            stats=result,
            messages=journal.messages,
            sessions=[SessionOut.from_payload(item) for item in self.store.list_sessions()],
        )

    def _backfill_teachers(self, options: GenerationOptions, counter: AssignmentCounter, journal: RunJournal) -> int:
        pending = [item for item in self.store.list_sessions() if not item.has_teacher]
        # Lectures first, stable otherwise
        pending.sort(key=lambda item: item.category != SessionCategory.lecture)
        assigned = 0
        for session in pending:
            if session.has_teacher:
                continue
            try:
                if self._staff_session(session, options, counter):
                    assigned += 1
                else:
                    journal.warning(f"No teacher available for {session.describe()}")
            except AppError as exc:
                logger.exception("Teacher assignment failed for %s", session.describe())
                journal.error(f"Teacher assignment failed for {session.describe()}: {exc.message}")
        if assigned:
            journal.success(f"{assigned} session(s) received a teacher")
        return assigned

    def _staff_session(self, session: SessionPayload, options: GenerationOptions, counter: AssignmentCounter) -> bool:
        sessions = self.store.list_sessions()
        partner = find_lab_partner(session, sessions, self.grid) if session.is_lab else None
        if partner is not None and partner.has_teacher:
            session.set_teachers(partner.teachers)
            return True

        paying = session
        if partner is not None and session.is_lab_second_half:
            paying = partner
        teachers = self._select_teachers(paying, sessions, options, counter)
        if not teachers:
            return False
        session.set_teachers(teachers)
        if partner is not None:
            partner.set_teachers(teachers)
        return True

    def _select_teachers(
        self,
        session: SessionPayload,
        sessions: list[SessionPayload],
        options: GenerationOptions,
        counter: AssignmentCounter,
    ) -> list[str]:
        required = 1
        if session.is_lab:
            subject = self._subject(session.subject, session.track)
            required = subject.required_teachers(SessionCategory.lab) if subject is not None else 1
        ceiling = self.workload.workload_ceiling(options.workload_ceiling)
        teachers = self.selector.select(
            session,
            sessions,
            ceiling,
            counter,
            required=required,
            respect_wishes=options.respect_wishes,
        )
        if teachers and session.category is not None:
            counter.record(teachers, session.subject, session.category)
        return teachers

    def _backfill_rooms(self, journal: RunJournal) -> int:
        assigned = 0
        for session in self.store.list_sessions():
            if session.has_room or session.is_lab:
                continue
            try:
                room = self.rooms.assign(session, self.store.list_sessions())
            except AppError as exc:
                logger.exception("Room assignment failed for %s", session.describe())
                journal.error(f"Room assignment failed for {session.describe()}: {exc.message}")
                continue
            if room is None:
                journal.warning(f"No room available for {session.describe()}")
                continue
            session.set_room(room)
            assigned += 1
        if assigned:
            journal.success(f"{assigned} session(s) received a room")
        return assigned

    def _generate_missing(
        self,
        options: GenerationOptions,
        counter: AssignmentCounter,
        journal: RunJournal,
        stats: dict[str, int],
    ) -> None:
        rotation: dict[str, int] = defaultdict(int)
        finder = SlotFinder(self.grid, self.conflicts, options.max_iterations or self.max_iterations)
        for subject in self.store.list_subjects():
            if subject.term != self.store.active_term:
                continue
            for candidate in self._planned_sessions(subject):
                stats["total"] += 1
                if self._already_planned(candidate):
                    stats["skipped"] += 1
                    continue
                try:
                    placed = self._place(candidate, subject, finder, rotation, options, counter, journal, stats)
                except AppError as exc:
                    logger.exception("Generation failed for %s", candidate.describe())
                    journal.error(f"Could not generate {candidate.describe()}: {exc.message}")
                    placed = False
                stats["created" if placed else "failed"] += 1

    def _planned_sessions(self, subject: SubjectPayload) -> list[SessionPayload]:
        """Every session the subject needs, all Lectures first, then Tutorials, then Labs."""
        sections = [section_name(index) for index in range(subject.sections)]
        planned = [self._candidate(subject, SessionCategory.lecture, section) for section in sections]
        for category, groups in (
            (SessionCategory.tutorial, subject.tutorial_groups),
            (SessionCategory.lab, subject.lab_groups),
        ):
            for section in sections:
                for number in range(1, groups + 1):
                    planned.append(self._candidate(subject, category, section, group_name(number)))
        return planned

    @staticmethod
    def _candidate(
        subject: SubjectPayload, category: SessionCategory, section: str, group: str | None = None
    ) -> SessionPayload:
        return SessionPayload(
            id=str(uuid.uuid4()),
            track=subject.track,
            subject=subject.name,
            category=category,
            section=section,
            group=group,
            hour_credit=subject.hour_credit(category),
        )

    def _already_planned(self, candidate: SessionPayload) -> bool:
        key = candidate.audience_key
        for existing in self.store.list_sessions():
            if (
                existing.subject == candidate.subject
                and existing.category == candidate.category
                and existing.audience_key == key
            ):
                return True
        return False

    def _place(
        self,
        candidate: SessionPayload,
        subject: SubjectPayload,
        finder: SlotFinder,
        rotation: dict[str, int],
        options: GenerationOptions,
        counter: AssignmentCounter,
        journal: RunJournal,
        stats: dict[str, int],
    ) -> bool:
        sessions = self.store.list_sessions()
        found = finder.find_slot(
            candidate, sessions, rotation[candidate.track], avoid_conflicts=options.avoid_conflicts
        )
        if found is None:
            journal.warning(f"No free slot for {candidate.describe()}")
            return False
        candidate.day, candidate.slot = found

        placed = [candidate]
        if candidate.is_lab:
            second_half = candidate.clone(
                id=str(uuid.uuid4()),
                slot=self.grid.coupled_slot(candidate.slot),
                hour_credit=0,
            )
            placed.append(second_half)

        if options.assign_teachers:
            teachers = self._select_teachers(candidate, sessions, options, counter)
            if teachers:
                for item in placed:
                    item.set_teachers(teachers)
                stats["teachers_assigned"] += 1
            else:
                journal.warning(f"No teacher available for {candidate.describe()}")

        if options.assign_rooms:
            room = self.rooms.assign(candidate, sessions)
            if room is not None:
                for item in placed:
                    item.set_room(room)
                stats["rooms_assigned"] += 1
            else:
                journal.warning(f"No room available for {candidate.describe()}")

        for item in placed:
            self.store.add_session(item)
        rotation[candidate.track] += 1
        journal.info(f"Created {candidate.describe()}")
        return True

    def _subject(self, name: str, track: str) -> SubjectPayload | None:
        for subject in self.store.list_subjects():
            if subject.name == name and subject.track == track:
                return subject
        return None
