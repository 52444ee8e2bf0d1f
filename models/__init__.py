"""
Модуль: `models/__init__.py`.
Назначение: Импорт моделей для корректной регистрации в SQLAlchemy metadata.
"""

from .user import User
from .user_session import UserSession
from .upload import Upload

__all__ = ["User", "UserSession", "Upload"]
