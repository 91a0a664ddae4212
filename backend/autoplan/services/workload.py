from __future__ import annotations

import math

from autoplan.models.session import SessionCategory, Term
from autoplan.schemas.session import SessionPayload
from autoplan.schemas.workload import AnnualMetrics, CategoryCoverage, SubjectCoverage, WorkloadBreakdown
from autoplan.services.store import TimetableStore


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def teacher_share(session: SessionPayload) -> float:
    """Hours one assigned teacher earns from a session.

    Lecture and Tutorial credit is split evenly between co-teachers, Lab
    credit is paid in full to each of them. Paired Lab halves carry no credit.
    """
    if session.hour_credit <= 0 or not session.teachers:
        return 0.0
    if session.is_lab:
        return session.hour_credit
    return session.hour_credit / len(session.teachers)


class WorkloadCalculator:
    def __init__(self, store: TimetableStore, tolerance_hours: float = 16):
        self.store = store
        self.tolerance_hours = tolerance_hours

    @property
    def term(self) -> Term:
        return self.store.active_term

    def teaching_hours(self, teacher_name: str) -> float:
        return sum(
            teacher_share(session)
            for session in self.store.list_sessions()
            if teacher_name in session.teachers
        )

    def compute_workload(self, teacher_name: str) -> float:
        return self.breakdown(teacher_name).total

    def breakdown(self, teacher_name: str) -> WorkloadBreakdown:
        result = WorkloadBreakdown(
            teacher=teacher_name,
            term=self.term,
            teaching=self.teaching_hours(teacher_name),
        )
        if self.term == Term.autumn:
            teacher = self._teacher(teacher_name)
            if teacher is not None:
                result.supplementary = teacher.supplementary_hours()
                result.stipends = teacher.stipend_hours()
        else:
            result.carried_over = self.store.carried_over_volumes().get(teacher_name, 0.0)
        result.total = result.teaching + result.supplementary + result.stipends + result.carried_over
        return result

    def subject_volume(self, term: Term) -> float:
        return sum(subject.total_volume() for subject in self.store.list_subjects() if subject.term == term)

    def compute_reference_workload(self) -> int:
        teachers = self.store.list_teachers()
        if not teachers:
            return 0
        total = self.subject_volume(self.term) + self._declared_volume(teachers)
        return round_half_up(total / len(teachers))

    def workload_ceiling(self, override: float | None = None) -> float:
        if override is not None:
            return override
        ceiling = float(self.compute_reference_workload() + self.tolerance_hours)
        highest = max(
            (self.compute_workload(teacher.name) for teacher in self.store.list_teachers()),
            default=0.0,
        )
        return max(ceiling, highest)

    def annual_metrics(self) -> AnnualMetrics:
        teachers = self.store.list_teachers()
        autumn = self.subject_volume(Term.autumn)
        spring = self.subject_volume(Term.spring)
        supplementary = sum(teacher.supplementary_hours() for teacher in teachers)
        stipends = sum(teacher.stipend_hours() for teacher in teachers)
        annual_reference = 0
        if teachers:
            annual_reference = round_half_up((autumn + spring + supplementary + stipends) / len(teachers))
        return AnnualMetrics(
            autumn_volume=autumn,
            spring_volume=spring,
            supplementary_volume=supplementary,
            stipend_volume=stipends,
            teacher_count=len(teachers),
            annual_reference=annual_reference,
        )

    def subject_coverage(self) -> list[SubjectCoverage]:
        sessions = self.store.list_sessions()
        report = []
        for subject in self.store.list_subjects():
            if subject.term != self.term:
                continue
            coverage = SubjectCoverage(
                subject=subject.name,
                track=subject.track,
                lecture=CategoryCoverage(planned=subject.sections),
                tutorial=CategoryCoverage(planned=subject.sections * subject.tutorial_groups),
                lab=CategoryCoverage(planned=subject.sections * subject.lab_groups),
            )
            coverage.lab_teacher_seats = coverage.lab.planned * subject.lab_teachers
            assigned: dict[SessionCategory, set] = {category: set() for category in SessionCategory}
            for session in sessions:
                if session.subject != subject.name or session.track != subject.track:
                    continue
                if session.category is None or session.is_lab_second_half or not session.teachers:
                    continue
                assigned[session.category].add(session.audience_key)
                if session.is_lab:
                    coverage.lab_teacher_seats_filled += min(len(session.teachers), subject.lab_teachers)
            coverage.lecture.assigned = len(assigned[SessionCategory.lecture])
            coverage.tutorial.assigned = len(assigned[SessionCategory.tutorial])
            coverage.lab.assigned = len(assigned[SessionCategory.lab])
            report.append(coverage)
        return report

    def carry_over_totals(self) -> dict[str, float]:
        """Cumulative autumn totals that the spring term imports."""
        return {teacher.name: self.compute_workload(teacher.name) for teacher in self.store.list_teachers()}

    def _teacher(self, name: str):
        for teacher in self.store.list_teachers():
            if teacher.name == name:
                return teacher
        return None

    @staticmethod
    def _declared_volume(teachers) -> float:
        return sum(teacher.supplementary_hours() + teacher.stipend_hours() for teacher in teachers)
