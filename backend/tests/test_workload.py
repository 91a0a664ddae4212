from autoplan.models.session import SessionCategory, Term
from autoplan.schemas.session import SessionPayload
from autoplan.schemas.subject import SubjectPayload
from autoplan.schemas.teacher import TeacherPayload, VolumeEntry
from autoplan.services.store import InMemoryTimetableStore
from autoplan.services.workload import WorkloadCalculator, round_half_up, teacher_share


def session(category, credit, teachers, **extra):
    return SessionPayload(
        day="Monday", slot="08:30", track="S1", subject="Algebra", category=category,
        section="Section A", hour_credit=credit, teachers=teachers, **extra,
    )


def test_lecture_credit_is_split_and_lab_credit_is_not():
    lecture = session(SessionCategory.lecture, 48, ["A", "B"])
    lab = session(SessionCategory.lab, 36, ["A", "B"], group="G1")
    second_half = session(SessionCategory.lab, 0, ["A", "B"], group="G1")
    assert teacher_share(lecture) == 24
    assert teacher_share(lab) == 36
    assert teacher_share(second_half) == 0
    assert teacher_share(session(SessionCategory.lecture, 48, [])) == 0


def test_autumn_workload_adds_declared_volumes():
    teacher = TeacherPayload(
        name="Dupont",
        supplementary_volumes=[VolumeEntry(label="Projects", hours=10)],
        stipends=[VolumeEntry(label="Head of year", hours=6)],
    )
    store = InMemoryTimetableStore(
        sessions=[
            session(SessionCategory.lecture, 48, ["Dupont", "Martin"]),
            session(SessionCategory.tutorial, 32, ["Dupont"], group="G1"),
        ],
        teachers=[teacher, TeacherPayload(name="Martin")],
        carried_over={"Dupont": 500},
    )
    calculator = WorkloadCalculator(store)
    breakdown = calculator.breakdown("Dupont")
    assert breakdown.teaching == 56
    assert breakdown.supplementary == 10
    assert breakdown.stipends == 6
    assert breakdown.carried_over == 0
    assert calculator.compute_workload("Dupont") == 72
    assert calculator.compute_workload("Martin") == 24


def test_spring_workload_uses_carried_over_total():
    teacher = TeacherPayload(name="Dupont", supplementary_volumes=[VolumeEntry(label="Projects", hours=10)])
    store = InMemoryTimetableStore(
        active_term=Term.spring,
        sessions=[session(SessionCategory.tutorial, 32, ["Dupont"], group="G1")],
        teachers=[teacher],
        carried_over={"Dupont": 150},
    )
    breakdown = WorkloadCalculator(store).breakdown("Dupont")
    assert breakdown.supplementary == 0
    assert breakdown.carried_over == 150
    assert breakdown.total == 182


def test_reference_workload_and_ceiling():
    subjects = [
        SubjectPayload(name="Algebra", track="S1", sections=2, tutorial_groups=1, lab_groups=1, lab_teachers=2),
        SubjectPayload(name="Botany", track="S2", term=Term.spring, sections=3),
    ]
    teachers = [
        TeacherPayload(name="A", stipends=[VolumeEntry(label="Dean", hours=5)]),
        TeacherPayload(name="B"),
        TeacherPayload(name="C"),
    ]
    store = InMemoryTimetableStore(subjects=subjects, teachers=teachers)
    calculator = WorkloadCalculator(store, tolerance_hours=16)
    # 2*48 + 2*1*32 + 2*1*36*2 = 304 ; (304 + 5) / 3 = 103
    assert subjects[0].total_volume() == 304
    assert calculator.compute_reference_workload() == 103
    assert calculator.workload_ceiling() == 119
    assert calculator.workload_ceiling(40) == 40


def test_ceiling_never_drops_below_busiest_teacher():
    store = InMemoryTimetableStore(
        sessions=[session(SessionCategory.lecture, 200, ["A"])],
        subjects=[SubjectPayload(name="Algebra", track="S1", lecture_hours=10)],
        teachers=[TeacherPayload(name="A"), TeacherPayload(name="B")],
    )
    calculator = WorkloadCalculator(store)
    assert calculator.compute_reference_workload() == 5
    assert calculator.workload_ceiling() == 200


def test_reference_workload_without_teachers_is_zero():
    store = InMemoryTimetableStore(subjects=[SubjectPayload(name="Algebra", track="S1")])
    assert WorkloadCalculator(store).compute_reference_workload() == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_annual_metrics_and_coverage():
    subjects = [
        SubjectPayload(name="Algebra", track="S1", sections=1, tutorial_groups=2, lab_groups=1, lab_teachers=2),
        SubjectPayload(name="Botany", track="S2", term=Term.spring, sections=1),
    ]
    sessions = [
        session(SessionCategory.lecture, 48, ["A"]),
        session(SessionCategory.tutorial, 32, ["A"], group="G1"),
        session(SessionCategory.tutorial, 32, [], group="G2"),
        session(SessionCategory.lab, 36, ["A"], group="G1"),
        session(SessionCategory.lab, 0, ["A"], group="G1", id="second"),
    ]
    store = InMemoryTimetableStore(
        sessions=sessions, subjects=subjects, teachers=[TeacherPayload(name="A"), TeacherPayload(name="B")]
    )
    calculator = WorkloadCalculator(store)

    metrics = calculator.annual_metrics()
    assert metrics.autumn_volume == 48 + 64 + 72
    assert metrics.spring_volume == 48
    assert metrics.annual_reference == 116

    coverage = calculator.subject_coverage()
    assert len(coverage) == 1
    algebra = coverage[0]
    assert (algebra.lecture.planned, algebra.lecture.assigned) == (1, 1)
    assert (algebra.tutorial.planned, algebra.tutorial.assigned) == (2, 1)
    assert (algebra.lab.planned, algebra.lab.assigned) == (1, 1)
    assert algebra.lab_teacher_seats == 2
    assert algebra.lab_teacher_seats_filled == 1


def test_carry_over_totals_cover_every_teacher():
    store = InMemoryTimetableStore(
        sessions=[session(SessionCategory.lecture, 48, ["A"])],
        teachers=[TeacherPayload(name="A"), TeacherPayload(name="B")],
    )
    assert WorkloadCalculator(store).carry_over_totals() == {"A": 48, "B": 0}
