from .user import User, DISPLAY_NAME_MAX
from .day import Day, STATUS_SKIP, STATUS_WORKOUT
from .user_state import UserState, MAX_SKIP_POINTS

__all__ = [
    "User",
    "Day",
    "UserState",
    "STATUS_WORKOUT",
    "STATUS_SKIP",
    "MAX_SKIP_POINTS",
    "DISPLAY_NAME_MAX",
]
