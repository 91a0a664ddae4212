from pydantic import BaseModel, Field

from autoplan.models.session import Term


class WorkloadBreakdown(BaseModel):
    teacher: str
    term: Term
    teaching: float = 0
    supplementary: float = 0
    stipends: float = 0
    carried_over: float = 0
    total: float = 0


class ReferenceWorkloadOut(BaseModel):
    term: Term
    reference: int
    ceiling: float
    teacher_count: int


class AnnualMetrics(BaseModel):
    autumn_volume: float
    spring_volume: float
    supplementary_volume: float
    stipend_volume: float
    teacher_count: int
    annual_reference: int


class CategoryCoverage(BaseModel):
    planned: int = 0
    assigned: int = 0


class SubjectCoverage(BaseModel):
    subject: str
    track: str
    lecture: CategoryCoverage = Field(default_factory=CategoryCoverage)
    tutorial: CategoryCoverage = Field(default_factory=CategoryCoverage)
    lab: CategoryCoverage = Field(default_factory=CategoryCoverage)
    lab_teacher_seats: int = 0
    lab_teacher_seats_filled: int = 0


class CarryOverResult(BaseModel):
    teachers: int
    totals: dict[str, float]
