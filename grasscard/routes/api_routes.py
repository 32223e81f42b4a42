# grasscard/routes/api_routes.py
from flask import Blueprint, jsonify

from ..ledger import USER_SLOTS, card_to_dict, load_card
from .common import app_today, ensure_base_users

api_bp = Blueprint("api", __name__)


@api_bp.route("/cards", methods=["GET"])
def all_cards():
    """
    Returns:
    {
      "today": "2024-05-01",
      "cards": [
        {
          "user": {"id": "user1", "display_name": "A"},
          "state": {"skip_points": 2, "max_skip_points": 2, "consec_workout": 3, ...},
          "days": {"2024-04-29": "workout", "2024-04-30": "skip"}
        },
        ...
      ]
    }
    """
    ensure_base_users()
    cards = [card_to_dict(slot, load_card(slot)) for slot in USER_SLOTS]
    return jsonify({"today": app_today(), "cards": cards}), 200


@api_bp.route("/cards/<user_id>", methods=["GET"])
def one_card(user_id):
    if user_id not in USER_SLOTS:
        return jsonify({"message": "user not found"}), 404

    ensure_base_users()
    return jsonify({"card": card_to_dict(user_id, load_card(user_id))}), 200
