"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: models/user.py – модель пользователя системы.

Назначение модуля:
- Описание ORM-модели User для таблицы users.
- Хранение логина и хеша пароля администратора галереи.
"""

from flask_login import UserMixin
from extensions import db


class User(UserMixin, db.Model):
    """Учётная запись администратора."""
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    sessions = db.relationship(
        "UserSession",
        back_populates="user",
        lazy=True,
        cascade="all, delete-orphan",
    )
