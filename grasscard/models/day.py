# grasscard/models/day.py
from datetime import datetime
from .. import db

STATUS_WORKOUT = "workout"
STATUS_SKIP = "skip"


class Day(db.Model):
    __tablename__ = "days"

    user_id = db.Column(
        db.String(16),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    date = db.Column(db.String(10), primary_key=True)  # "YYYY-MM-DD" in the app timezone
    status = db.Column(
        db.Enum(STATUS_WORKOUT, STATUS_SKIP, name="day_status", create_constraint=True),
        nullable=False,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "date": self.date,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
