from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autoplan.models.session import SessionCategory


def clean_names(names) -> list[str]:
    """Strips blanks and duplicates, keeping the first occurrence order."""
    cleaned: list[str] = []
    for name in names:
        name = (name or "").strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


class AudienceKey(BaseModel):
    """Identifies the students attending a session.

    Lectures address a whole section, Tutorials and Labs address one group of
    it. The category only decides the granularity: Tutorial group G1 and Lab
    group G1 of the same section are the same students, so the key itself
    carries no category.
    """

    model_config = ConfigDict(frozen=True)

    track: str
    section: str
    group: str | None = None

    @classmethod
    def for_session(
        cls,
        track: str,
        section: str,
        category: SessionCategory | None,
        group: str | None = None,
    ) -> "AudienceKey":
        if category == SessionCategory.lecture:
            group = None
        return cls(track=track, section=section, group=group or None)

    @property
    def key(self) -> str:
        parts = [self.track, self.section]
        if self.group:
            parts.append(self.group)
        return " - ".join(parts)

    def __str__(self) -> str:
        return self.key


class SessionPayload(BaseModel):
    id: str | None = Field(default=None, max_length=36)
    day: str = ""
    slot: str = ""
    track: str = ""
    subject: str = ""
    category: SessionCategory | None = SessionCategory.lecture
    section: str = ""
    group: str | None = None
    teachers: list[str] = Field(default_factory=list)
    room: str | None = None
    hour_credit: float = Field(default=0, ge=0)

    @field_validator("teachers")
    @classmethod
    def clean_teachers(cls, value: list[str]) -> list[str]:
        return clean_names(value)

    @field_validator("room", "group")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def audience_key(self) -> AudienceKey:
        return AudienceKey.for_session(self.track, self.section, self.category, self.group)

    @property
    def display_group(self) -> str:
        if self.category in (SessionCategory.tutorial, SessionCategory.lab) and self.group:
            return f"{self.section} - {self.group}"
        return self.section

    @property
    def is_lab(self) -> bool:
        return self.category == SessionCategory.lab

    @property
    def is_lab_first_half(self) -> bool:
        return self.is_lab and self.hour_credit > 0

    @property
    def is_lab_second_half(self) -> bool:
        return self.is_lab and self.hour_credit == 0

    @property
    def has_teacher(self) -> bool:
        return bool(self.teachers)

    @property
    def has_room(self) -> bool:
        return bool(self.room)

    def set_teachers(self, names: list[str]) -> None:
        self.teachers = clean_names(names)

    def set_room(self, room: str | None) -> None:
        self.room = room or None

    def clone(self, **updates) -> "SessionPayload":
        return self.model_copy(update=updates, deep=True)

    def describe(self) -> str:
        category = self.category.value if self.category else "?"
        return f"{self.subject} ({category}) {self.display_group} [{self.day} {self.slot}]"


class SessionOut(SessionPayload):
    audience: str

    @classmethod
    def from_payload(cls, session: SessionPayload) -> "SessionOut":
        return cls(**session.model_dump(), audience=session.audience_key.key)
