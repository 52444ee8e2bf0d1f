"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: services/auth.py – аутентификация и серверные сессии.

Назначение модуля:
- Проверка учётных данных (хеш scrypt, сравнение за постоянное время средствами werkzeug).
- Выдача, поиск и отзыв серверных сессий, хранящихся в таблице user_sessions.
- Смена пароля текущего пользователя с отзывом остальных его сессий.
- Создание учётной записи администратора при первичном заполнении БД.
"""

import hashlib
import secrets
from datetime import datetime, timedelta

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from errors import Unauthorized, ValidationError
from models.user import User
from models.user_session import UserSession

PASSWORD_HASH_METHOD = "scrypt"


def hash_session_token(token: str) -> str:
    """SHA-256 от токена: в БД хранится только хеш."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AuthService:
    """Операции над пользователями и их сессиями."""

    def __init__(self, db, session_lifetime: timedelta):
        self.db = db
        self.session_lifetime = session_lifetime

    def authenticate(self, username: str, password: str) -> User:
        """Возвращает пользователя при точном совпадении логина и пароля."""
        user = User.query.filter_by(username=username).first()
        if user is None or not check_password_hash(user.password_hash, password):
            raise Unauthorized("Invalid credentials")
        return user

    def issue_session(self, user: User) -> str:
        """Создаёт серверную сессию и возвращает непрозрачный токен для cookie."""
        token = secrets.token_urlsafe(32)
        now = datetime.utcnow()
        self.db.session.add(
            UserSession(
                user_id=user.id,
                token_hash=hash_session_token(token),
                created_at=now,
                expires_at=now + self.session_lifetime,
            )
        )
        self.db.session.commit()
        return token

    def login(self, username: str, password: str) -> tuple[User, str]:
        """Проверяет учётные данные и открывает новую сессию."""
        user = self.authenticate(username, password)
        token = self.issue_session(user)
        current_app.logger.info("User %s logged in", user.username)
        return user, token

    def resolve_session(self, token: str | None) -> User | None:
        """Пользователь живой сессии либо None, если токена нет или срок истёк."""
        if not token:
            return None

        record = UserSession.query.filter_by(token_hash=hash_session_token(token)).first()
        if record is None:
            return None

        if record.is_expired():
            self.db.session.delete(record)
            self.db.session.commit()
            return None

        return record.user

    def revoke_session(self, token: str | None) -> None:
        """Удаляет сессию по токену."""
        # Повторный выход без сессии допустим
        if not token:
            return
        UserSession.query.filter_by(token_hash=hash_session_token(token)).delete(
            synchronize_session=False
        )
        self.db.session.commit()

    def change_password(
        self,
        user: User,
        current_password: str,
        new_password: str,
        keep_token: str | None = None,
    ) -> None:
        """Меняет пароль и отзывает все сессии пользователя, кроме текущей."""
        if not check_password_hash(user.password_hash, current_password):
            raise ValidationError("Incorrect current password", field="currentPassword")

        user.password_hash = generate_password_hash(new_password, method=PASSWORD_HASH_METHOD)

        other_sessions = UserSession.query.filter(UserSession.user_id == user.id)
        if keep_token:
            other_sessions = other_sessions.filter(
                UserSession.token_hash != hash_session_token(keep_token)
            )
        other_sessions.delete(synchronize_session=False)
        self.db.session.commit()
        current_app.logger.info("Password changed for user %s", user.username)

    def seed_admin(self, username: str, password: str) -> tuple[User, bool]:
        """Создаёт администратора, если его ещё нет. Существующую запись не трогает."""
        existing = User.query.filter_by(username=username).first()
        if existing is not None:
            return existing, False

        user = User(
            username=username,
            password_hash=generate_password_hash(password, method=PASSWORD_HASH_METHOD),
        )
        self.db.session.add(user)
        self.db.session.commit()
        return user, True

    def cleanup_expired_sessions(self) -> int:
        """Удаляет просроченные сессии и возвращает их количество."""
        removed = UserSession.query.filter(
            UserSession.expires_at <= datetime.utcnow()
        ).delete(synchronize_session=False)
        self.db.session.commit()
        return removed
