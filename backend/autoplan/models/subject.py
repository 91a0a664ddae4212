import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from autoplan.db.base import Base
from autoplan.models.session import Term


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    track: Mapped[str] = mapped_column(String(100), nullable=False)
    term: Mapped[Term] = mapped_column(SAEnum(Term, name="term"), nullable=False, default=Term.autumn)
    sections: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    tutorial_groups: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lab_groups: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lecture_hours: Mapped[float] = mapped_column(Float, nullable=False, default=48)
    tutorial_hours: Mapped[float] = mapped_column(Float, nullable=False, default=32)
    lab_hours: Mapped[float] = mapped_column(Float, nullable=False, default=36)
    lab_teachers: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
