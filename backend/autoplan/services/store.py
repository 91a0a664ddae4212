from __future__ import annotations

from typing import Protocol

from autoplan.models.session import Term
from autoplan.schemas.room import RoomPayload, RoomPoolPayload
from autoplan.schemas.session import SessionPayload
from autoplan.schemas.subject import SubjectPayload
from autoplan.schemas.teacher import TeacherPayload


class SessionStore(Protocol):
    active_term: Term

    def list_sessions(self) -> list[SessionPayload]: ...

    def add_session(self, session: SessionPayload) -> None: ...

    def remove_session(self, session_id: str) -> SessionPayload | None: ...

    def persist(self) -> None: ...


class RegistryStore(Protocol):
    def list_teachers(self) -> list[TeacherPayload]: ...

    def list_subjects(self) -> list[SubjectPayload]: ...

    def list_rooms(self) -> list[RoomPayload]: ...

    def list_room_pools(self) -> list[RoomPoolPayload]: ...

    def carried_over_volumes(self) -> dict[str, float]: ...

    def save_carried_over(self, totals: dict[str, float]) -> None: ...


class TimetableStore(SessionStore, RegistryStore, Protocol):
    pass


class InMemoryTimetableStore:
    """Keeps one term's sessions and the shared registries in memory.

    Sessions are returned by reference so callers can assign teachers and
    rooms in place; ``persist`` only counts saves.
    """

    def __init__(
        self,
        *,
        active_term: Term = Term.autumn,
        sessions: list[SessionPayload] | None = None,
        teachers: list[TeacherPayload] | None = None,
        subjects: list[SubjectPayload] | None = None,
        rooms: list[RoomPayload] | None = None,
        room_pools: list[RoomPoolPayload] | None = None,
        carried_over: dict[str, float] | None = None,
    ):
        self.active_term = active_term
        self._sessions = list(sessions or [])
        self._teachers = list(teachers or [])
        self._subjects = list(subjects or [])
        self._rooms = list(rooms or [])
        self._room_pools = list(room_pools or [])
        self._carried_over = dict(carried_over or {})
        self.persist_count = 0

    def list_sessions(self) -> list[SessionPayload]:
        return list(self._sessions)

    def add_session(self, session: SessionPayload) -> None:
        self._sessions.append(session)

    def remove_session(self, session_id: str) -> SessionPayload | None:
        for index, session in enumerate(self._sessions):
            if session.id == session_id:
                return self._sessions.pop(index)
        return None

    def persist(self) -> None:
        self.persist_count += 1

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
