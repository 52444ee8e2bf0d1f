"""
Модуль: `services/__init__.py`.
Назначение: Сервисный слой приложения (аутентификация, изображения, объектное хранилище).
"""

from .auth import AuthService
from .object_store import ObjectStore, ObjectStoreError, StoredObject, build_object_store
from .uploads import UploadService

__all__ = [
    "AuthService",
    "ObjectStore",
    "ObjectStoreError",
    "StoredObject",
    "UploadService",
    "build_object_store",
]
