from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from autoplan.models.room import Room, RoomPool
from autoplan.models.session import ScheduledSession, Term
from autoplan.models.subject import Subject
from autoplan.models.teacher import CarriedOverVolume, Teacher
from autoplan.schemas.room import RoomPayload, RoomPoolPayload
from autoplan.schemas.session import SessionPayload
from autoplan.schemas.subject import SubjectPayload
from autoplan.schemas.teacher import TeacherPayload

logger = logging.getLogger(__name__)


def _session_from_row(row: ScheduledSession) -> SessionPayload:
    return SessionPayload(
        id=row.id,
        day=row.day,
        slot=row.slot,
        track=row.track,
        subject=row.subject,
        category=row.category,
        section=row.section,
        group=row.group_name,
        teachers=list(row.teachers or []),
        room=row.room,
        hour_credit=row.hour_credit,
    )


def _apply_to_row(row: ScheduledSession, session: SessionPayload) -> None:
    row.day = session.day
    row.slot = session.slot
    row.track = session.track
    row.subject = session.subject
    row.category = session.category
    row.section = session.section
    row.group_name = session.group
    row.teachers = list(session.teachers)
    row.room = session.room
    row.hour_credit = session.hour_credit


class SqlTimetableStore:
    """Loads one term from the database and writes the session graph back on ``persist``."""

    def __init__(self, db: Session, active_term: Term = Term.autumn):
        self.db = db
        self.active_term = active_term
        rows = db.execute(
            select(ScheduledSession)
            .where(ScheduledSession.term == active_term)
            .order_by(ScheduledSession.created_at, ScheduledSession.id)
        ).scalars()
        self._sessions = [_session_from_row(row) for row in rows]
        self._teachers = [
            TeacherPayload.model_validate(row)
            for row in db.execute(select(Teacher).order_by(Teacher.created_at, Teacher.name)).scalars()
        ]
        self._subjects = [
            SubjectPayload.model_validate(row)
            for row in db.execute(select(Subject).order_by(Subject.track, Subject.name)).scalars()
        ]
        self._rooms = [
            RoomPayload.model_validate(row) for row in db.execute(select(Room).order_by(Room.name)).scalars()
        ]
        self._room_pools = [
            RoomPoolPayload(track=row.track, category=row.category, room_names=list(row.room_names or []))
            for row in db.execute(select(RoomPool).order_by(RoomPool.track)).scalars()
        ]
        self._carried_over = {
            row.teacher_name: row.hours for row in db.execute(select(CarriedOverVolume)).scalars()
        }

    def list_sessions(self) -> list[SessionPayload]:
        return list(self._sessions)

    def add_session(self, session: SessionPayload) -> None:
        self._sessions.append(session)

    def remove_session(self, session_id: str) -> SessionPayload | None:
        for index, session in enumerate(self._sessions):
            if session.id == session_id:
                return self._sessions.pop(index)
        return None

    def list_teachers(self) -> list[TeacherPayload]:
        return list(self._teachers)

    def list_subjects(self) -> list[SubjectPayload]:
        return list(self._subjects)

    def list_rooms(self) -> list[RoomPayload]:
        return list(self._rooms)

    def list_room_pools(self) -> list[RoomPoolPayload]:
        return list(self._room_pools)

    def carried_over_volumes(self) -> dict[str, float]:
        return dict(self._carried_over)

    def save_carried_over(self, totals: dict[str, float]) -> None:
        self._carried_over = dict(totals)
        self.db.execute(delete(CarriedOverVolume))
        for name, hours in totals.items():
            self.db.add(CarriedOverVolume(teacher_name=name, hours=hours))

    def persist(self) -> None:
        rows = {
            row.id: row
            for row in self.db.execute(
                select(ScheduledSession).where(ScheduledSession.term == self.active_term)
            ).scalars()
        }
        kept: set[str] = set()
        inserted = 0
        for session in self._sessions:
            row = rows.get(session.id) if session.id else None
            if row is None:
                session.id = session.id or str(uuid.uuid4())
                row = ScheduledSession(id=session.id, term=self.active_term)
                self.db.add(row)
                inserted += 1
            _apply_to_row(row, session)
            kept.add(row.id)
        deleted = 0
        for row_id, row in rows.items():
            if row_id not in kept:
                self.db.delete(row)
                deleted += 1
        self.db.commit()
        logger.info(
            "Persisted %s term: %d session(s), %d inserted, %d deleted",
            self.active_term.value,
            len(self._sessions),
            inserted,
            deleted,
        )
