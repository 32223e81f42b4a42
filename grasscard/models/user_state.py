# grasscard/models/user_state.py
from datetime import datetime
from .. import db

MAX_SKIP_POINTS = 2


class UserState(db.Model):
    __tablename__ = "user_state"
    __table_args__ = (
        db.CheckConstraint(
            f"skip_points >= 0 AND skip_points <= {MAX_SKIP_POINTS}",
            name="ck_user_state_skip_points",
        ),
        db.CheckConstraint("consec_workout >= 0", name="ck_user_state_consec_workout"),
    )

    user_id = db.Column(
        db.String(16),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    skip_points = db.Column(db.Integer, nullable=False, default=MAX_SKIP_POINTS)
    consec_workout = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def to_dict(self):
        return {
            "skip_points": int(self.skip_points or 0),
            "max_skip_points": MAX_SKIP_POINTS,
            "consec_workout": int(self.consec_workout or 0),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
