# edugame/models.py
from flask_login import UserMixin
from sqlalchemy import false

from .db import db

# Columns a client may read back about itself (everything but the hash)
PROFILE_FIELDS = (
    "id", "username", "email", "display_name", "theme", "avatar",
    "points", "coins",
    "networking_completed", "programming_completed", "systemunit_completed",
    "networking_hard_perfect", "programming_game_unlocked",
    "progress", "unlocked_levels",
)


class Player(UserMixin, db.Model):
    __tablename__ = "players"

    id            = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username      = db.Column(db.String(100), unique=True, nullable=False)
    password      = db.Column(db.String(100), nullable=False)   # bcrypt hash

    email         = db.Column(db.String(255))
    display_name  = db.Column(db.String(100))
    theme         = db.Column(db.String(32), nullable=False, default="system", server_default="system")
    avatar        = db.Column(db.Text)

    points        = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    coins         = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    networking_completed      = db.Column(db.Boolean, nullable=False, default=False, server_default=false())
    programming_completed     = db.Column(db.Boolean, nullable=False, default=False, server_default=false())
    systemunit_completed      = db.Column(db.Boolean, nullable=False, default=False, server_default=false())
    networking_hard_perfect   = db.Column(db.Boolean, nullable=False, default=False, server_default=false())
    programming_game_unlocked = db.Column(db.Boolean, nullable=False, default=False, server_default=false())

    progress        = db.Column(db.Text)
    unlocked_levels = db.Column(db.Text)    # JSON text written by /update-progress

    def to_dict(self, include_password=False):
        data = {name: getattr(self, name) for name in PROFILE_FIELDS}
        if include_password:
            data["password"] = self.password
        return data

    def summary(self):
        return {"id": self.id, "username": self.username}

    def __repr__(self):
        return f"<Player id={self.id} username={self.username!r}>"
