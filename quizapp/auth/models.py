from datetime import datetime
from flask_login import UserMixin

from quizapp import db


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # 'admin' authors quizzes, 'player' takes them
    user_type = db.Column(db.String(20), nullable=False, default="player")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User {self.email} ({self.user_type})>"

    def is_admin(self) -> bool:
        return self.user_type == "admin"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "user_type": self.user_type,
        }
