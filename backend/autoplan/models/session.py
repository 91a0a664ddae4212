import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Float, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from autoplan.db.base import Base


class Term(str, Enum):
    autumn = "autumn"
    spring = "spring"


class SessionCategory(str, Enum):
    lecture = "Lecture"
    tutorial = "Tutorial"
    lab = "Lab"


class ScheduledSession(Base):
    __tablename__ = "scheduled_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    term: Mapped[Term] = mapped_column(SAEnum(Term, name="term"), index=True, nullable=False)
    day: Mapped[str] = mapped_column(String(20), nullable=False)
    slot: Mapped[str] = mapped_column(String(5), nullable=False)
    track: Mapped[str] = mapped_column(String(100), nullable=False)
    subject: Mapped[str] = mapped_column(String(200), index=True, nullable=False)
    category: Mapped[SessionCategory] = mapped_column(
        SAEnum(SessionCategory, name="session_category"), nullable=False
    )
    section: Mapped[str] = mapped_column(String(50), nullable=False)
    group_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    teachers: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    room: Mapped[str | None] = mapped_column(String(100), nullable=True)
    hour_credit: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
