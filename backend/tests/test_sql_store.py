from autoplan.models.session import ScheduledSession, SessionCategory, Term
from autoplan.models.teacher import Teacher
from autoplan.schemas.session import SessionPayload
from autoplan.services.sql_store import SqlTimetableStore


def test_store_only_loads_the_active_term(db_session):
    db_session.add_all(
        [
            ScheduledSession(term=Term.autumn, day="Monday", slot="08:30", track="S1", subject="Algebra",
                             category=SessionCategory.lecture, section="Section A", teachers=[], hour_credit=48),
            ScheduledSession(term=Term.spring, day="Monday", slot="08:30", track="S1", subject="Botany",
                             category=SessionCategory.lecture, section="Section A", teachers=[], hour_credit=48),
            Teacher(name="Ada", wishes=[{"subject": "Algebra", "lecture": 0}]),
        ]
    )
    db_session.commit()

    store = SqlTimetableStore(db_session, Term.spring)
    assert [item.subject for item in store.list_sessions()] == ["Botany"]
    teacher = store.list_teachers()[0]
    assert teacher.refuses("Algebra", SessionCategory.lecture)


def test_persist_inserts_updates_and_deletes(db_session):
    kept = ScheduledSession(term=Term.autumn, day="Monday", slot="08:30", track="S1", subject="Algebra",
                            category=SessionCategory.lecture, section="Section A", teachers=[], hour_credit=48)
    dropped = ScheduledSession(term=Term.autumn, day="Tuesday", slot="08:30", track="S1", subject="Botany",
                               category=SessionCategory.lecture, section="Section A", teachers=[], hour_credit=48)
    db_session.add_all([kept, dropped])
    db_session.commit()
    kept_id, dropped_id = kept.id, dropped.id

    store = SqlTimetableStore(db_session, Term.autumn)
    loaded = {item.id: item for item in store.list_sessions()}
    loaded[kept_id].set_teachers(["Ada"])
    store.remove_session(dropped_id)
    new = SessionPayload(day="Friday", slot="14:00", track="S1", subject="Physics", category=SessionCategory.tutorial,
                         section="Section A", group="G1", hour_credit=32, room="B12")
    store.add_session(new)
    store.persist()

    assert new.id is not None
    rows = {row.id: row for row in db_session.query(ScheduledSession).all()}
    assert set(rows) == {kept_id, new.id}
    assert rows[kept_id].teachers == ["Ada"]
    assert rows[new.id].group_name == "G1"
    assert rows[new.id].term == Term.autumn
