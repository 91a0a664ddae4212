from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from autoplan.schemas.common import TIME_PATTERN, parse_time_to_minutes


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "Autoplan API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    database_url: str = "sqlite+pysqlite:///./autoplan.db"

    week_days: list[str] = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
    time_slots: list[str] = ["08:30", "10:15", "14:00", "15:45", "17:30"]
    coupled_slots: dict[str, str] = {"08:30": "10:15", "14:00": "15:45"}
    morning_slot_count: int = 2
    priority_slot_count: int = 4
    capped_day: str | None = "Saturday"
    capped_day_slot_limit: int = 2

    max_planning_iterations: int = 100
    workload_tolerance_hours: int = 16

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("time_slots")
    @classmethod
    def validate_time_slots(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value if item.strip()]
        invalid = [item for item in cleaned if not TIME_PATTERN.match(item)]
        if invalid:
            raise ValueError(f"Time slots must be in HH:MM 24-hour format: {', '.join(invalid)}")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("Time slots must be unique")
        return sorted(cleaned, key=parse_time_to_minutes)

    @field_validator("max_planning_iterations", "morning_slot_count", "priority_slot_count", "capped_day_slot_limit")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Value must not be negative")
        return value

    @model_validator(mode="after")
    def validate_coupled_slots(self) -> "Settings":
        known = set(self.time_slots)
        for first, second in self.coupled_slots.items():
            if first not in known or second not in known:
                raise ValueError(f"Coupled slots {first}->{second} reference an unknown time slot")
            if parse_time_to_minutes(second) <= parse_time_to_minutes(first):
                raise ValueError(f"Coupled slot {second} must come after {first}")
        if self.capped_day is not None and self.capped_day not in self.week_days:
            raise ValueError("capped_day must be one of week_days")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
