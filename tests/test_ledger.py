import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from grasscard import db, ledger
from grasscard.ledger import (
    base_names,
    ensure_users,
    load_card,
    record_skip,
    record_workout,
    rename_user,
)
from grasscard.models import Day, User, UserState


def _state(user_id="user1"):
    db.session.expire_all()
    st = db.session.get(UserState, user_id)
    return (st.skip_points, st.consec_workout)


def _set_state(user_id, skip_points, consec_workout):
    st = db.session.get(UserState, user_id)
    st.skip_points = skip_points
    st.consec_workout = consec_workout
    db.session.commit()


def _days(user_id="user1"):
    db.session.expire_all()
    return {d.date: d.status for d in Day.query.filter_by(user_id=user_id).all()}


# ------------------------------
# ensure_users
# ------------------------------
def test_ensure_users_creates_both_slots(app):
    ensure_users(base_names("Alex", "Sam"))

    assert db.session.get(User, "user1").display_name == "Alex"
    assert db.session.get(User, "user2").display_name == "Sam"
    assert _state("user1") == (2, 0)
    assert _state("user2") == (2, 0)


def test_ensure_users_blank_names_fall_back():
    assert base_names("  ", None) == {"user1": "User1", "user2": "User2"}
    assert base_names(" A ", "B") == {"user1": "A", "user2": "B"}


def test_ensure_users_leaves_existing_rows_alone(users):
    rename_user("user1", "Robin")
    record_workout("user1", "2024-05-01")

    ensure_users(base_names("Alex", "Sam"))

    assert db.session.get(User, "user1").display_name == "Robin"
    assert _state("user1") == (2, 1)
    assert User.query.count() == 2
    assert UserState.query.count() == 2


def test_rename_ignores_blank_names(users):
    assert rename_user("user2", "   ") is False
    assert db.session.get(User, "user2").display_name == "Sam"
    assert rename_user("user2", " Robin ") is True
    assert db.session.get(User, "user2").display_name == "Robin"


# ------------------------------
# record_workout
# ------------------------------
def test_workout_twice_is_same_as_once(users):
    assert record_workout("user1", "2024-05-01") is True
    first_days, first_state = _days(), _state()

    assert record_workout("user1", "2024-05-01") is False

    assert _days() == first_days == {"2024-05-01": "workout"}
    assert _state() == first_state == (2, 1)


def test_streak_grows_and_skip_points_stay_capped(users):
    streaks = []
    for date in ("2024-05-01", "2024-05-02", "2024-05-03", "2024-05-04"):
        record_workout("user1", date)
        skip_points, consec = _state()
        streaks.append(consec)
        assert skip_points == 2

    assert streaks == [1, 2, 3, 4]


def test_even_streak_refills_one_skip_point(users):
    record_workout("user1", "2024-05-01")
    _set_state("user1", 0, 1)

    record_workout("user1", "2024-05-02")

    assert _state() == (1, 2)


def test_odd_streak_does_not_refill(users):
    record_workout("user1", "2024-05-01")
    record_workout("user1", "2024-05-02")
    _set_state("user1", 0, 2)

    record_workout("user1", "2024-05-03")

    assert _state() == (0, 3)


def test_workout_after_gap_restarts_streak(users):
    for date in ("2024-05-01", "2024-05-02", "2024-05-03"):
        record_workout("user1", date)
    assert _state()[1] == 3

    record_workout("user1", "2024-05-05")

    assert _state()[1] == 1


def test_workout_after_skip_restarts_streak(users):
    record_workout("user1", "2024-05-01")
    record_skip("user1", "2024-05-02")
    record_workout("user1", "2024-05-03")
    assert _state() == (1, 1)

    record_workout("user1", "2024-05-04")
    assert _state() == (2, 2)


def test_workout_on_past_date_uses_that_dates_yesterday(users):
    record_workout("user1", "2024-05-10")
    record_workout("user1", "2024-05-09")

    # 2024-05-08 has no record, so the streak restarts
    assert _state()[1] == 1
    assert _days() == {"2024-05-09": "workout", "2024-05-10": "workout"}


def test_workout_without_state_row_keeps_day_only(users):
    db.session.delete(db.session.get(UserState, "user1"))
    db.session.commit()

    assert record_workout("user1", "2024-05-01") is True

    assert _days() == {"2024-05-01": "workout"}
    assert db.session.get(UserState, "user1") is None


def test_workout_rejects_malformed_date(users):
    with pytest.raises(ValueError):
        record_workout("user1", "05/01/2024")
    assert _days() == {}


def test_users_are_independent(users):
    record_workout("user1", "2024-05-01")
    record_skip("user2", "2024-05-01")

    assert _days("user1") == {"2024-05-01": "workout"}
    assert _days("user2") == {"2024-05-01": "skip"}
    assert _state("user1") == (2, 1)
    assert _state("user2") == (1, 0)


# ------------------------------
# record_skip
# ------------------------------
def test_skip_spends_point_and_breaks_streak(users):
    for date in ("2024-05-01", "2024-05-02", "2024-05-03"):
        record_workout("user1", date)
    _set_state("user1", 1, 3)

    assert record_skip("user1", "2024-05-04") is True

    assert _state() == (0, 0)
    assert _days()["2024-05-04"] == "skip"


def test_skip_without_points_changes_nothing(users):
    _set_state("user1", 0, 5)

    assert record_skip("user1", "2024-05-01") is False

    assert _state() == (0, 5)
    assert _days() == {}


def test_skip_on_recorded_day_changes_nothing(users):
    record_workout("user1", "2024-05-01")

    assert record_skip("user1", "2024-05-01") is False

    assert _days() == {"2024-05-01": "workout"}
    assert _state() == (2, 1)


def test_skip_points_never_go_negative(users):
    assert record_skip("user1", "2024-05-01") is True
    assert record_skip("user1", "2024-05-02") is True
    assert record_skip("user1", "2024-05-03") is False

    assert _state() == (0, 0)
    assert sorted(_days()) == ["2024-05-01", "2024-05-02"]


def test_skip_without_state_row_is_noop(users):
    db.session.delete(db.session.get(UserState, "user1"))
    db.session.commit()

    assert record_skip("user1", "2024-05-01") is False
    assert _days() == {}


def test_lost_insert_race_is_a_noop(users, monkeypatch):
    record_workout("user1", "2024-05-01")
    db.session.expunge_all()

    # the existence check misses the row a concurrent request already wrote
    monkeypatch.setattr(ledger, "_get_day", lambda user_id, date: None)

    assert record_skip("user1", "2024-05-01") is False
    assert _days() == {"2024-05-01": "workout"}
    assert _state() == (2, 1)


# ------------------------------
# reads / schema
# ------------------------------
def test_load_card(users):
    record_workout("user2", "2024-05-01")
    record_skip("user2", "2024-05-02")

    card = load_card("user2")

    assert card["user"].display_name == "Sam"
    assert card["state"].skip_points == 1
    assert card["days"] == {"2024-05-01": "workout", "2024-05-02": "skip"}


def test_deleting_user_cascades(users):
    record_workout("user1", "2024-05-01")

    db.session.delete(db.session.get(User, "user1"))
    db.session.commit()

    assert Day.query.filter_by(user_id="user1").count() == 0
    assert db.session.get(UserState, "user1") is None
    assert db.session.get(User, "user2") is not None


def test_day_status_is_checked_by_the_database(users):
    with pytest.raises(IntegrityError):
        db.session.execute(
            text(
                "INSERT INTO days (user_id, date, status, created_at) "
                "VALUES ('user1', '2024-05-01', 'bogus', CURRENT_TIMESTAMP)"
            )
        )
        db.session.commit()
    db.session.rollback()

    assert _days() == {}


def test_rename_rejects_overlong_names(users):
    assert rename_user("user1", "x" * 150) is False
    assert db.session.get(User, "user1").display_name == "Alex"

    assert rename_user("user1", "y" * 100) is True
    assert db.session.get(User, "user1").display_name == "y" * 100


def test_ensure_users_overlong_configured_name_falls_back(app):
    ensure_users({"user1": "z" * 150, "user2": "Sam"})

    assert db.session.get(User, "user1").display_name == "User1"
    assert db.session.get(User, "user2").display_name == "Sam"
