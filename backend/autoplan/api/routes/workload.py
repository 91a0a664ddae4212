from fastapi import APIRouter, Depends

from autoplan.api.deps import get_engine, get_engine_factory
from autoplan.models.session import Term
from autoplan.schemas.workload import (
    AnnualMetrics,
    CarryOverResult,
    ReferenceWorkloadOut,
    SubjectCoverage,
    WorkloadBreakdown,
)
from autoplan.services.engine import SchedulingEngine

router = APIRouter()


@router.get("/reference", response_model=ReferenceWorkloadOut)
def reference_workload(engine: SchedulingEngine = Depends(get_engine)) -> ReferenceWorkloadOut:
    return ReferenceWorkloadOut(
        term=engine.store.active_term,
        reference=engine.compute_reference_workload(),
        ceiling=engine.workload_ceiling(),
        teacher_count=len(engine.store.list_teachers()),
    )


@router.get("/teachers/{teacher_name}", response_model=WorkloadBreakdown)
def teacher_workload(teacher_name: str, engine: SchedulingEngine = Depends(get_engine)) -> WorkloadBreakdown:
    return engine.workload_breakdown(teacher_name)


@router.get("/annual", response_model=AnnualMetrics)
def annual_metrics(factory=Depends(get_engine_factory)) -> AnnualMetrics:
    return factory(Term.autumn).annual_metrics()


@router.get("/coverage", response_model=list[SubjectCoverage])
def subject_coverage(engine: SchedulingEngine = Depends(get_engine)) -> list[SubjectCoverage]:
    return engine.subject_coverage()


@router.post("/carry-over", response_model=CarryOverResult)
def carry_over(factory=Depends(get_engine_factory)) -> CarryOverResult:
    totals = factory(Term.autumn).carry_over_totals()
    return CarryOverResult(teachers=len(totals), totals=totals)
