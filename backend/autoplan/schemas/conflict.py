from typing import List, Literal

from pydantic import BaseModel, Field

from autoplan.schemas.session import SessionPayload

ConflictKind = Literal["teacher", "room", "room_type", "audience", "section", "duplicate"]


class ConflictDescriptor(BaseModel):
    kind: ConflictKind
    message: str
    slot: str = ""
    session_ids: List[str] = Field(default_factory=list)

    def identity(self) -> tuple:
        return (self.kind, self.message, self.slot, tuple(self.session_ids))


class ConflictCheckRequest(BaseModel):
    session: SessionPayload
    exclude_ids: List[str] = Field(default_factory=list)
    allow_no_room: bool = False
    strict: bool = False


class ConflictReport(BaseModel):
    has_conflicts: bool
    conflicts: List[ConflictDescriptor]
