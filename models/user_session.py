"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: models/user_session.py – серверные сессии пользователей.

В cookie клиента хранится только непрозрачный токен, в БД хранится его SHA-256.
"""

from datetime import datetime

from extensions import db


class UserSession(db.Model):
    """Активная сессия: связывает хеш токена с пользователем до истечения срока."""
    __tablename__ = "user_sessions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    token_hash = db.Column(db.String(64), nullable=False, unique=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    user = db.relationship("User", back_populates="sessions")

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at <= (now or datetime.utcnow())
