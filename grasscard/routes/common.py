# grasscard/routes/common.py
from typing import Optional

from flask import current_app
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from ..ledger import USER_SLOTS, base_names, ensure_users
from ..utils.dates import today_ymd


def configured_names():
    return base_names(
        current_app.config.get("USER1_NAME", ""),
        current_app.config.get("USER2_NAME", ""),
    )


def ensure_base_users():
    names = configured_names()
    ensure_users(names)
    return names


def current_user_id() -> Optional[str]:
    """Slot id from the identity cookie, or None if unset / not a known slot."""
    verify_jwt_in_request(optional=True)
    uid = get_jwt_identity()
    return uid if uid in USER_SLOTS else None


def app_today() -> str:
    return today_ymd(current_app.config.get("TIMEZONE", "Asia/Tokyo"))
