from pydantic import BaseModel, Field, field_validator

from autoplan.models.session import SessionCategory

WISH_RANK_SCORES = {1: 100, 2: 50, 3: 25}


class WishPayload(BaseModel):
    """One ranked subject wish.

    Per-category counts: None means nothing was stated, 0 is an explicit
    refusal of that category, a positive value is the number of sessions
    requested.
    """

    subject: str = ""
    lecture: int | None = Field(default=None, ge=0)
    tutorial: int | None = Field(default=None, ge=0)
    lab: int | None = Field(default=None, ge=0)

    def requested(self, category: SessionCategory) -> int | None:
        if category == SessionCategory.lecture:
            return self.lecture
        if category == SessionCategory.tutorial:
            return self.tutorial
        return self.lab


class VolumeEntry(BaseModel):
    label: str = ""
    hours: float = Field(default=0, ge=0)


class TeacherPayload(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    wishes: list[WishPayload] = Field(default_factory=list, max_length=3)
    supplementary_volumes: list[VolumeEntry] = Field(default_factory=list)
    stipends: list[VolumeEntry] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Teacher name cannot be blank")
        return value

    def wish_rank(self, subject: str) -> int:
        """1, 2 or 3 for a wished subject, 0 otherwise."""
        for index, wish in enumerate(self.wishes[:3], start=1):
            if wish.subject and wish.subject == subject:
                return index
        return 0

    def requested_count(self, subject: str, category: SessionCategory) -> int | None:
        rank = self.wish_rank(subject)
        if rank == 0:
            return None
        return self.wishes[rank - 1].requested(category)

    def refuses(self, subject: str, category: SessionCategory) -> bool:
        return self.requested_count(subject, category) == 0

    def supplementary_hours(self) -> float:
        return sum(item.hours for item in self.supplementary_volumes)

    def stipend_hours(self) -> float:
        return sum(item.hours for item in self.stipends)


class TeacherSuggestion(BaseModel):
    name: str
    score: float
