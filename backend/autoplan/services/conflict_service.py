from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from autoplan.models.session import SessionCategory
from autoplan.schemas.conflict import ConflictDescriptor
from autoplan.schemas.room import RoomPayload
from autoplan.schemas.session import SessionPayload
from autoplan.services.time_grid import TimeGrid

logger = logging.getLogger(__name__)

CONFLICT_ORDER = ("teacher", "room", "room_type", "audience", "section", "duplicate")


def find_lab_partner(
    session: SessionPayload, sessions: Iterable[SessionPayload], grid: TimeGrid
) -> Optional[SessionPayload]:
    """Return the other half of a Lab pair, if it is scheduled."""
    if not session.is_lab or not session.slot:
        return None
    partner_slot = grid.partner_slot(session.slot)
    if partner_slot is None:
        return None
    key = session.audience_key
    for other in sessions:
        if other.id == session.id or not other.is_lab:
            continue
        if (
            other.day == session.day
            and other.slot == partner_slot
            and other.subject == session.subject
            and other.audience_key == key
        ):
            return other
    return None


class ConflictService:
    def __init__(self, grid: TimeGrid, rooms: Iterable[RoomPayload]):
        self.grid = grid
        self.room_map: Dict[str, RoomPayload] = {room.name: room for room in rooms}

    def span(self, session: SessionPayload) -> Set[str]:
        """Slots a session occupies; a Lab half also holds its coupled slot."""
        return self.slot_span(session.slot, session.is_lab)

    def slot_span(self, slot: str, is_lab: bool) -> Set[str]:
        slots = {slot}
        if is_lab:
            partner = self.grid.partner_slot(slot)
            if partner:
                slots.add(partner)
        return slots

    def check_conflicts(
        self,
        candidate: SessionPayload,
        sessions: Iterable[SessionPayload],
        exclude_ids: Iterable[str] = (),
    ) -> List[ConflictDescriptor]:
        sessions = list(sessions)
        excluded = {item for item in exclude_ids if item}
        if candidate.id:
            excluded.add(candidate.id)
        partner = find_lab_partner(candidate, sessions, self.grid)
        if partner is not None and partner.id:
            excluded.add(partner.id)
        others = [item for item in sessions if item.id not in excluded]

        found: Dict[str, List[ConflictDescriptor]] = defaultdict(list)

        # Bucket by day
        same_day = [item for item in others if item.day == candidate.day]
        candidate_span = self.span(candidate)
        candidate_key = candidate.audience_key
        for existing in same_day:
            overlap = candidate_span & self.span(existing)
            if not overlap:
                continue
            label = f"{candidate.day} {self._first_slot(overlap)}"
            ids = [existing.id] if existing.id else []

            for teacher in candidate.teachers:
                if teacher in existing.teachers:
                    found["teacher"].append(
                        ConflictDescriptor(
                            kind="teacher",
                            message=f"Teacher {teacher} already teaches {existing.describe()}",
                            slot=label,
                            session_ids=ids,
                        )
                    )
            if candidate.room and candidate.room == existing.room:
                found["room"].append(
                    ConflictDescriptor(
                        kind="room",
                        message=f"Room {candidate.room} is occupied by {existing.describe()}",
                        slot=label,
                        session_ids=ids,
                    )
                )
            if existing.audience_key == candidate_key:
                found["audience"].append(
                    ConflictDescriptor(
                        kind="audience",
                        message=f"Audience {candidate_key} already attends {existing.describe()}",
                        slot=label,
                        session_ids=ids,
                    )
                )
            if existing.slot == candidate.slot and self._lecture_against_group(candidate, existing):
                found["section"].append(
                    ConflictDescriptor(
                        kind="section",
                        message=(
                            f"{candidate.track} - {candidate.section} has a Lecture and a group session "
                            f"at the same time ({existing.describe()})"
                        ),
                        slot=label,
                        session_ids=ids,
                    )
                )

        if candidate.room:
            room = self.room_map.get(candidate.room)
            if room is None or not room.is_compatible_with(candidate.category):
                room_type = room.type.value if room is not None else "unknown"
                category = candidate.category.value if candidate.category else "session"
                found["room_type"].append(
                    ConflictDescriptor(
                        kind="room_type",
                        message=f"Room {candidate.room} ({room_type}) is not suitable for a {category}",
                        slot=f"{candidate.day} {candidate.slot}",
                    )
                )

        for existing in others:
            if self._is_duplicate(candidate, existing):
                found["duplicate"].append(
                    ConflictDescriptor(
                        kind="duplicate",
                        message=f"{existing.describe()} already exists",
                        slot=f"{existing.day} {existing.slot}",
                        session_ids=[existing.id] if existing.id else [],
                    )
                )

        conflicts: List[ConflictDescriptor] = []
        seen = set()
        for kind in CONFLICT_ORDER:
            for descriptor in found[kind]:
                identity = descriptor.identity()
                if identity in seen:
                    continue
                seen.add(identity)
                conflicts.append(descriptor)
        if conflicts:
            logger.debug("%d conflict(s) for %s", len(conflicts), candidate.describe())
        return conflicts

    def is_teacher_available(
        self,
        teacher: str,
        day: str,
        slot: str,
        sessions: Iterable[SessionPayload],
        *,
        is_lab: bool = False,
        exclude_ids: Iterable[str] = (),
    ) -> bool:
        excluded = set(exclude_ids)
        wanted = self.slot_span(slot, is_lab)
        for existing in sessions:
            if existing.id in excluded or existing.day != day or teacher not in existing.teachers:
                continue
            if wanted & self.span(existing):
                return False
        return True

    def is_room_occupied(
        self,
        room: str,
        day: str,
        slot: str,
        sessions: Iterable[SessionPayload],
        *,
        is_lab: bool = False,
        exclude_ids: Iterable[str] = (),
    ) -> bool:
        excluded = set(exclude_ids)
        wanted = self.slot_span(slot, is_lab)
        for existing in sessions:
            if existing.id in excluded or existing.day != day or existing.room != room:
                continue
            if wanted & self.span(existing):
                return True
        return False

    def free_rooms(
        self,
        day: str,
        slot: str,
        category: SessionCategory | None,
        sessions: Iterable[SessionPayload],
        exclude_ids: Iterable[str] = (),
    ) -> List[str]:
        sessions = list(sessions)
        is_lab = category == SessionCategory.lab
        free = [
            name
            for name, room in self.room_map.items()
            if room.is_compatible_with(category)
            and not self.is_room_occupied(name, day, slot, sessions, is_lab=is_lab, exclude_ids=exclude_ids)
        ]
        return sorted(free)

    def _first_slot(self, slots: Set[str]) -> str:
        return min(slots, key=lambda item: (self.grid.slot_index(item), item))

    @staticmethod
    def _lecture_against_group(first: SessionPayload, second: SessionPayload) -> bool:
        if first.track != second.track or first.section != second.section:
            return False
        categories = {first.category, second.category}
        return SessionCategory.lecture in categories and len(categories) == 2

    @staticmethod
    def _is_duplicate(candidate: SessionPayload, existing: SessionPayload) -> bool:
        if candidate.category is None or existing.category != candidate.category:
            return False
        if existing.subject != candidate.subject or existing.track != candidate.track:
            return False
        if existing.section != candidate.section:
            return False
        if candidate.category == SessionCategory.lecture:
            return True
        if existing.is_lab_second_half:
            return False
        return existing.audience_key == candidate.audience_key
