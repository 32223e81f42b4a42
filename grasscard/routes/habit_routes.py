# grasscard/routes/habit_routes.py

from flask import Blueprint, current_app, redirect, render_template, url_for

from ..ledger import USER_SLOTS, load_card, record_skip, record_workout
from ..models import MAX_SKIP_POINTS
from ..utils.dates import grid_dates
from .common import app_today, current_user_id, ensure_base_users

habits_bp = Blueprint("habits", __name__)


# ------------------------------
# GET /
# ------------------------------
@habits_bp.route("/", methods=["GET"])
def index():
    ensure_base_users()
    uid = current_user_id()
    if not uid:
        return redirect(url_for("setup.setup_page"))

    today = app_today()
    days = grid_dates(today, current_app.config.get("GRID_WEEKS", 24))
    cards = [dict(load_card(slot), slot=slot) for slot in USER_SLOTS]
    me = next(c for c in cards if c["slot"] == uid)

    return render_template(
        "index.html",
        today=today,
        days=days,
        cards=cards,
        me=me,
        max_skip_points=MAX_SKIP_POINTS,
    )


# ------------------------------
# POST /workout
# ------------------------------
@habits_bp.route("/workout", methods=["POST"])
def workout():
    ensure_base_users()
    uid = current_user_id()
    if not uid:
        return redirect(url_for("setup.setup_page"))

    record_workout(uid, app_today())
    return redirect(url_for("habits.index"))


# ------------------------------
# POST /skip
# ------------------------------
@habits_bp.route("/skip", methods=["POST"])
def skip():
    ensure_base_users()
    uid = current_user_id()
    if not uid:
        return redirect(url_for("setup.setup_page"))

    record_skip(uid, app_today())
    return redirect(url_for("habits.index"))
