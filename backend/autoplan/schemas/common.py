from __future__ import annotations

import re

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def section_name(index: int) -> str:
    """0 -> 'Section A', 1 -> 'Section B', ..."""
    return f"Section {chr(65 + index)}"


def group_name(number: int) -> str:
    return f"G{number}"
