import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from autoplan.db.base import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    # [{"subject": ..., "lecture": n|None, "tutorial": n|None, "lab": n|None}, ...] ordered by rank
    wishes: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    supplementary_volumes: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    stipends: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())


class CarriedOverVolume(Base):
    __tablename__ = "carried_over_volumes"

    teacher_name: Mapped[str] = mapped_column(String(200), primary_key=True)
    hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
