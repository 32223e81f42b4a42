# grasscard/models/user.py
from .. import db

DISPLAY_NAME_MAX = 100


class User(db.Model):
    __tablename__ = "users"

    # fixed slot id: "user1" / "user2"
    id = db.Column(db.String(16), primary_key=True)
    display_name = db.Column(db.String(DISPLAY_NAME_MAX), nullable=False)

    days = db.relationship(
        "Day",
        backref="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Day.date",
    )
    state = db.relationship(
        "UserState",
        backref="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "display_name": self.display_name,
        }
