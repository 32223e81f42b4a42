# grasscard/ledger.py
"""
Skip-point / streak bookkeeping for the two fixed user slots.

Rules:
  - one Day row per (user, date), never overwritten
  - a workout extends the streak only if the previous calendar day was a
    workout; any other previous day (skip or no record) restarts it at 1
  - every even streak value refills one skip point, capped at MAX_SKIP_POINTS
  - a skip costs one point and zeroes the stored streak

Each mutation is one transaction. The (user_id, date) primary key is the
final idempotency check: a concurrent insert that loses the race rolls back
and is reported as a no-op.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from . import db
from .models import (
    DISPLAY_NAME_MAX,
    Day,
    MAX_SKIP_POINTS,
    STATUS_SKIP,
    STATUS_WORKOUT,
    User,
    UserState,
)
from .utils.dates import add_days, parse_ymd

USER_SLOTS = ("user1", "user2")


# ------------------------------
# Helpers
# ------------------------------
def _get_day(user_id: str, date: str) -> Optional[Day]:
    return db.session.get(Day, (user_id, date))


def _lock_state(user_id: str) -> Optional[UserState]:
    # FOR UPDATE is a no-op on SQLite, row lock elsewhere
    return (
        UserState.query.filter_by(user_id=user_id)
        .with_for_update()
        .first()
    )


def _insert_day(user_id: str, date: str, status: str) -> bool:
    """
    Insert the day row and flush so the primary key is checked now.
    Must be the first write of the transaction: on conflict the whole
    transaction is rolled back.
    """
    db.session.add(Day(user_id=user_id, date=date, status=status))
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.info(f"[ledger] {status} {user_id} {date}: lost insert race")
        return False
    return True


def next_streak(previous_status: Optional[str], consec_workout: int) -> int:
    if previous_status == STATUS_WORKOUT:
        return int(consec_workout or 0) + 1
    return 1


def regen_skip_points(streak: int, skip_points: int) -> int:
    skip_points = int(skip_points or 0)
    if streak % 2 == 0 and skip_points < MAX_SKIP_POINTS:
        return skip_points + 1
    return skip_points


# ------------------------------
# Users
# ------------------------------
def _clean_display_name(display_name: Optional[str]) -> Optional[str]:
    """Stripped name, or None when blank or longer than the column allows."""
    display_name = (display_name or "").strip()
    if not display_name:
        return None
    if len(display_name) > DISPLAY_NAME_MAX:
        current_app.logger.warning(
            f"[ledger] display name rejected: {len(display_name)} chars > {DISPLAY_NAME_MAX}"
        )
        return None
    return display_name


def base_names(user1: str = "", user2: str = "") -> Dict[str, str]:
    u1 = (user1 or "").strip()
    u2 = (user2 or "").strip()
    return {"user1": u1 or "User1", "user2": u2 or "User2"}


def ensure_users(names: Dict[str, str]) -> None:
    """
    Create the slot users and their starting state if missing.
    Existing rows (names, counters) are left alone.
    """
    created = []
    with db.session.no_autoflush:
        for slot in USER_SLOTS:
            if db.session.get(User, slot) is None:
                display_name = _clean_display_name(names.get(slot)) or slot.capitalize()
                db.session.add(User(id=slot, display_name=display_name))
                created.append(slot)
            if db.session.get(UserState, slot) is None:
                db.session.add(
                    UserState(
                        user_id=slot,
                        skip_points=MAX_SKIP_POINTS,
                        consec_workout=0,
                        updated_at=datetime.utcnow(),
                    )
                )

    if not db.session.new:
        return

    try:
        db.session.commit()
    except IntegrityError:
        # another request created them first
        db.session.rollback()
        return

    if created:
        current_app.logger.info(f"[ledger] created users {created}")


def rename_user(user_id: str, display_name: str) -> bool:
    display_name = _clean_display_name(display_name)
    if display_name is None:
        return False

    user = db.session.get(User, user_id)
    if not user:
        return False

    user.display_name = display_name
    db.session.commit()
    return True


# ------------------------------
# Mutations
# ------------------------------
def record_workout(user_id: str, date: str) -> bool:
    """
    Mark `date` as a workout day. Returns True if a day was recorded,
    False when the date was already taken.
    """
    parse_ymd(date)

    if _get_day(user_id, date) is not None:
        return False

    if not _insert_day(user_id, date, STATUS_WORKOUT):
        return False

    state = _lock_state(user_id)
    if state is None:
        db.session.commit()
        current_app.logger.warning(f"[ledger] no state row for {user_id}, counters untouched")
        return True

    yesterday = _get_day(user_id, add_days(date, -1))
    streak = next_streak(yesterday.status if yesterday else None, state.consec_workout)

    state.skip_points = regen_skip_points(streak, state.skip_points)
    state.consec_workout = streak
    state.updated_at = datetime.utcnow()
    db.session.commit()

    current_app.logger.info(
        f"[ledger] workout {user_id} {date} streak={streak} skip={state.skip_points}"
    )
    return True


def record_skip(user_id: str, date: str) -> bool:
    """
    Spend a skip point on `date`. No-op without a point to spend or when
    the date is already recorded.
    """
    parse_ymd(date)

    state = _lock_state(user_id)
    if state is None or int(state.skip_points or 0) <= 0:
        db.session.rollback()
        current_app.logger.info(f"[ledger] skip {user_id} {date}: no skip points left")
        return False

    if _get_day(user_id, date) is not None:
        db.session.rollback()
        return False

    previous_points = int(state.skip_points)
    if not _insert_day(user_id, date, STATUS_SKIP):
        return False

    state.skip_points = previous_points - 1
    state.consec_workout = 0
    state.updated_at = datetime.utcnow()
    db.session.commit()

    current_app.logger.info(f"[ledger] skip {user_id} {date} skip={state.skip_points}")
    return True


# ------------------------------
# Reads
# ------------------------------
def load_card(user_id: str) -> Dict[str, Any]:
    """
    Everything the grid needs for one slot:
    { "user": User|None, "state": UserState|None, "days": {date: status} }
    """
    user = db.session.get(User, user_id)
    state = db.session.get(UserState, user_id)
    rows = Day.query.filter_by(user_id=user_id).order_by(Day.date.asc()).all()

    return {
        "user": user,
        "state": state,
        "days": {d.date: d.status for d in rows},
    }


def card_to_dict(user_id: str, card: Dict[str, Any]) -> Dict[str, Any]:
    user = card.get("user")
    state = card.get("state")
    return {
        "user": user.to_dict() if user else {"id": user_id, "display_name": None},
        "state": state.to_dict()
        if state
        else {"skip_points": 0, "max_skip_points": MAX_SKIP_POINTS, "consec_workout": 0},
        "days": card.get("days") or {},
    }
