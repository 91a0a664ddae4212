from __future__ import annotations

from autoplan.core.config import Settings, get_settings
from autoplan.core.exceptions import ConfigurationError


class TimeGrid:
    """Weekly grid of teaching days and start-time slots.

    Slots are kept in chronological order. The first ``morning_slot_count``
    slots form the morning block, the rest the afternoon block. Coupled slots
    map the first half of a two-slot Lab to its second half.
    """

    def __init__(
        self,
        days: list[str],
        slots: list[str],
        coupled_slots: dict[str, str] | None = None,
        *,
        morning_slot_count: int = 2,
        priority_slot_count: int = 4,
        capped_day: str | None = None,
        capped_day_slot_limit: int = 2,
    ):
        if not days or not slots:
            raise ConfigurationError("The time grid needs at least one day and one time slot")
        self.days = list(days)
        self.slots = list(slots)
        self.coupled_slots = dict(coupled_slots or {})
        self.morning_slot_count = morning_slot_count
        self.priority_slot_count = priority_slot_count
        self.capped_day = capped_day
        self.capped_day_slot_limit = capped_day_slot_limit
        self._first_halves = {second: first for first, second in self.coupled_slots.items()}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TimeGrid":
        settings = settings or get_settings()
        return cls(
            settings.week_days,
            settings.time_slots,
            settings.coupled_slots,
            morning_slot_count=settings.morning_slot_count,
            priority_slot_count=settings.priority_slot_count,
            capped_day=settings.capped_day,
            capped_day_slot_limit=settings.capped_day_slot_limit,
        )

    def sorted_slots(self) -> list[str]:
        return list(self.slots)

    def prioritized_slots(self) -> list[str]:
        head = self.slots[: self.priority_slot_count]
        return head + [slot for slot in self.slots if slot not in head]

    def slot_index(self, slot: str) -> int:
        try:
            return self.slots.index(slot)
        except ValueError:
            return -1

    def is_known_day(self, day: str) -> bool:
        return day in self.days

    def is_known_slot(self, slot: str) -> bool:
        return slot in self.slots

    def coupled_slot(self, slot: str) -> str | None:
        return self.coupled_slots.get(slot)

    def first_half_slot(self, slot: str) -> str | None:
        return self._first_halves.get(slot)

    def partner_slot(self, slot: str) -> str | None:
        """The other half of a Lab starting or ending at ``slot``."""
        return self.coupled_slot(slot) or self.first_half_slot(slot)

    def slots_for_day(self, day: str) -> list[str]:
        slots = self.prioritized_slots()
        if self.capped_day is not None and day == self.capped_day:
            allowed = set(self.slots[: self.capped_day_slot_limit])
            return [slot for slot in slots if slot in allowed]
        return slots

    def rotated_days(self, counter: int, *, include_capped: bool = True) -> list[str]:
        days = self.days
        if not include_capped and self.capped_day is not None:
            days = [day for day in days if day != self.capped_day]
        if not days:
            return []
        offset = counter % len(days)
        return days[offset:] + days[:offset]

    def is_morning(self, slot: str) -> bool:
        index = self.slot_index(slot)
        return 0 <= index < self.morning_slot_count

    def same_block(self, first: str, second: str) -> bool:
        if self.slot_index(first) < 0 or self.slot_index(second) < 0:
            return False
        return self.is_morning(first) == self.is_morning(second)

    def adjacent_slots(self, slot: str) -> list[str]:
        """Directly neighbouring slots inside the same half-day block."""
        index = self.slot_index(slot)
        if index < 0:
            return []
        neighbours = []
        for other in (index - 1, index + 1):
            if 0 <= other < len(self.slots) and self.same_block(slot, self.slots[other]):
                neighbours.append(self.slots[other])
        return neighbours
