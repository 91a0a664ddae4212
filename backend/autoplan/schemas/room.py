from pydantic import BaseModel, Field, field_validator

from autoplan.models.room import RoomType
from autoplan.models.session import SessionCategory

COMPATIBLE_ROOM_TYPES: dict[SessionCategory, frozenset[RoomType]] = {
    SessionCategory.lecture: frozenset({RoomType.lecture_hall, RoomType.standard}),
    SessionCategory.tutorial: frozenset({RoomType.standard}),
    SessionCategory.lab: frozenset({RoomType.lab}),
}


class RoomPayload(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: RoomType = RoomType.standard

    model_config = {"from_attributes": True}

    def is_compatible_with(self, category: SessionCategory | None) -> bool:
        if category is None:
            return True
        return self.type in COMPATIBLE_ROOM_TYPES[category]


class RoomPoolPayload(BaseModel):
    track: str = Field(min_length=1, max_length=100)
    category: SessionCategory
    room_names: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @field_validator("room_names")
    @classmethod
    def clean_room_names(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]


class FreeRoomsOut(BaseModel):
    day: str
    slot: str
    category: SessionCategory
    rooms: list[str]
