import pytest

from autoplan.models.session import SessionCategory
from autoplan.schemas.session import SessionPayload
from autoplan.schemas.subject import SubjectPayload
from autoplan.schemas.teacher import TeacherPayload, WishPayload
from autoplan.services.candidate_scorer import AssignmentCounter, TeacherSelector
from autoplan.services.conflict_service import ConflictService
from autoplan.services.store import InMemoryTimetableStore
from autoplan.services.workload import WorkloadCalculator


def make_session(**overrides) -> SessionPayload:
    values = {
        "id": "new",
        "day": "Monday",
        "slot": "08:30",
        "track": "S1",
        "subject": "Algebra",
        "category": SessionCategory.lecture,
        "section": "Section A",
        "hour_credit": 48,
    }
    values.update(overrides)
    return SessionPayload(**values)


def build_selector(grid, teachers, sessions=None):
    store = InMemoryTimetableStore(
        sessions=sessions or [],
        teachers=teachers,
        subjects=[SubjectPayload(name="Algebra", track="S1")],
    )
    conflicts = ConflictService(grid, store.list_rooms())
    workload = WorkloadCalculator(store)
    return TeacherSelector(store, grid, conflicts, workload), store


def test_rank_sets_base_score(grid):
    teachers = [
        TeacherPayload(name="First", wishes=[WishPayload(subject="Algebra")]),
        TeacherPayload(name="Second", wishes=[WishPayload(subject="Botany"), WishPayload(subject="Algebra")]),
        TeacherPayload(
            name="Third",
            wishes=[WishPayload(subject="Botany"), WishPayload(subject="Chemistry"), WishPayload(subject="Algebra")],
        ),
        TeacherPayload(name="None", wishes=[WishPayload(subject="Botany")]),
    ]
    selector, _ = build_selector(grid, teachers)
    candidate = make_session()
    scores = [selector.score(teacher, candidate, [], ceiling=100) for teacher in teachers]
    assert scores == [200, 150, 125, 0]


def test_explicit_refusal_and_ceiling_make_teacher_ineligible(grid):
    refuses = TeacherPayload(name="Refuses", wishes=[WishPayload(subject="Algebra", lecture=0)])
    busy = TeacherPayload(name="Busy", wishes=[WishPayload(subject="Algebra")])
    existing = make_session(id="old", subject="Botany", day="Tuesday", teachers=["Busy"], hour_credit=60)
    selector, _ = build_selector(grid, [refuses, busy], [existing])
    candidate = make_session()
    assert selector.score(refuses, candidate, [existing], ceiling=100) == 0
    assert selector.score(busy, candidate, [existing], ceiling=60) == 0
    assert selector.score(busy, candidate, [existing], ceiling=61) == pytest.approx(101)


def test_unavailable_teacher_scores_zero(grid):
    teacher = TeacherPayload(name="Dupont", wishes=[WishPayload(subject="Algebra")])
    existing = make_session(id="old", subject="Botany", section="Section B", teachers=["Dupont"], hour_credit=0)
    selector, _ = build_selector(grid, [teacher], [existing])
    assert selector.score(teacher, make_session(), [existing], ceiling=100) == 0


def test_fulfillment_multiplier_tracks_run_assignments(grid):
    teacher = TeacherPayload(name="Dupont", wishes=[WishPayload(subject="Algebra", tutorial=1)])
    selector, _ = build_selector(grid, [teacher])
    candidate = make_session(category=SessionCategory.tutorial, group="G1", hour_credit=32)
    counter = AssignmentCounter()
    assert selector.score(teacher, candidate, [], 100, counter) == pytest.approx(100 * 10 + 100)
    counter.record(["Dupont"], "Algebra", SessionCategory.tutorial)
    assert selector.score(teacher, candidate, [], 100, counter) == pytest.approx(100 * 0.1 + 100)


def test_adjacent_tutorial_bonus(grid):
    teacher = TeacherPayload(name="Dupont", wishes=[WishPayload(subject="Algebra")])
    neighbour = make_session(
        id="old", slot="08:30", category=SessionCategory.tutorial, group="G1", teachers=["Dupont"], hour_credit=0
    )
    selector, _ = build_selector(grid, [teacher], [neighbour])
    candidate = make_session(slot="10:15", category=SessionCategory.tutorial, group="G2", hour_credit=32)
    assert selector.score(teacher, candidate, [neighbour], ceiling=100) == pytest.approx(100 + 100 + 140 + 500)

    afternoon = candidate.clone(slot="14:00")
    assert selector.score(teacher, afternoon, [neighbour], ceiling=100) == pytest.approx(200)


def test_select_prefers_best_score_and_skips_projected_overflow(grid):
    teachers = [
        TeacherPayload(name="Low", wishes=[WishPayload(subject="Botany"), WishPayload(subject="Algebra")]),
        TeacherPayload(name="High", wishes=[WishPayload(subject="Algebra")]),
    ]
    selector, _ = build_selector(grid, teachers)
    candidate = make_session(hour_credit=48)
    assert selector.select(candidate, [], ceiling=100) == ["High"]
    assert selector.select(candidate, [], ceiling=40) == []
    assert selector.select(candidate, [], ceiling=100, respect_wishes=False) == []


def test_select_fills_lab_co_teachers_with_full_credit(grid):
    teachers = [
        TeacherPayload(name="A", wishes=[WishPayload(subject="Algebra")]),
        TeacherPayload(name="B", wishes=[WishPayload(subject="Algebra")]),
        TeacherPayload(name="C", wishes=[WishPayload(subject="Botany"), WishPayload(subject="Algebra")]),
    ]
    selector, _ = build_selector(grid, teachers)
    lab = make_session(category=SessionCategory.lab, group="G1", hour_credit=36)
    # equal scores keep registry order
    assert selector.select(lab, [], ceiling=100, required=2) == ["A", "B"]
    assert selector.select(lab, [], ceiling=30, required=2) == []


def test_suggest_next_teacher_cycles(grid):
    teachers = [
        TeacherPayload(name="Second", wishes=[WishPayload(subject="Botany"), WishPayload(subject="Algebra")]),
        TeacherPayload(name="First", wishes=[WishPayload(subject="Algebra", lecture=2)]),
        TeacherPayload(name="Refuses", wishes=[WishPayload(subject="Algebra", lecture=0)]),
    ]
    selector, _ = build_selector(grid, teachers)
    candidate = make_session()
    first = selector.suggest_next_teacher(candidate)
    assert first.name == "First"
    # 1000 + 200 for the stated count + reference (48 / 3 = 16)
    assert first.score == pytest.approx(1216)
    assert selector.suggest_next_teacher(candidate, current="First").name == "Second"
    assert selector.suggest_next_teacher(candidate, current="Second").name == "First"


def test_suggest_next_teacher_without_candidates(grid):
    selector, _ = build_selector(grid, [TeacherPayload(name="Other", wishes=[WishPayload(subject="Botany")])])
    assert selector.suggest_next_teacher(make_session()) is None


def test_suggest_next_teacher_skips_chosen_co_teacher(grid):
    teachers = [
        TeacherPayload(name="Second", wishes=[WishPayload(subject="Botany"), WishPayload(subject="Algebra")]),
        TeacherPayload(name="First", wishes=[WishPayload(subject="Algebra", lecture=2)]),
    ]
    selector, _ = build_selector(grid, teachers)
    candidate = make_session()
    assert selector.suggest_next_teacher(candidate, exclude_teacher="First").name == "Second"
    assert selector.suggest_next_teacher(candidate, current="Second", exclude_teacher="First").name == "Second"
    only_first, _ = build_selector(grid, teachers[1:])
    assert only_first.suggest_next_teacher(candidate, exclude_teacher="First") is None
