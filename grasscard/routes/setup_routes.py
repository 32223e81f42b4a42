# grasscard/routes/setup_routes.py
from flask import Blueprint, current_app, redirect, render_template, request, url_for
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies

from ..ledger import rename_user
from .common import ensure_base_users

setup_bp = Blueprint("setup", __name__)


@setup_bp.route("/setup", methods=["GET"])
def setup_page():
    names = ensure_base_users()
    return render_template("setup.html", names=names)


@setup_bp.route("/setup", methods=["POST"])
def choose_slot():
    """
    Form fields:
      uid           "user1" | "user2" (anything else -> user1)
      display_name  optional, replaces the slot's name when non-blank
    """
    ensure_base_users()

    uid = request.form.get("uid")
    display = (request.form.get("display_name") or "").strip()

    user_id = "user2" if uid == "user2" else "user1"
    if display:
        rename_user(user_id, display)

    current_app.logger.info(f"[setup] device now acts as {user_id}")

    resp = redirect(url_for("habits.index"))
    set_access_cookies(resp, create_access_token(identity=user_id))
    return resp


@setup_bp.route("/logout", methods=["POST"])
def logout():
    resp = redirect(url_for("setup.setup_page"))
    unset_jwt_cookies(resp)
    return resp
