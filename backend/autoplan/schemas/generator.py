from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from autoplan.schemas.session import SessionOut

MessageLevel = Literal["info", "success", "warning", "error"]


class GenerationOptions(BaseModel):
    assign_teachers: bool = True
    assign_rooms: bool = True
    respect_wishes: bool = True
    avoid_conflicts: bool = True
    generate_missing: bool = True
    workload_ceiling: float | None = Field(default=None, ge=0)
    max_iterations: int | None = Field(default=None, ge=1, le=100_000)


class GenerationStats(BaseModel):
    total: int = 0
    created: int = 0
    failed: int = 0
    skipped: int = 0
    teachers_assigned: int = 0
    rooms_assigned: int = 0

    @model_validator(mode="after")
    def validate_totals(self) -> "GenerationStats":
        if self.created + self.skipped + self.failed != self.total:
            raise ValueError("created + skipped + failed must equal total")
        return self


class RunMessage(BaseModel):
    level: MessageLevel
    message: str


class GenerationResult(BaseModel):
    stats: GenerationStats
    messages: list[RunMessage] = Field(default_factory=list)
    sessions: list[SessionOut] = Field(default_factory=list)
