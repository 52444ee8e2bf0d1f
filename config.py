"""
Программа: «Drive Content Hub» – веб-галерея изображений с публичными и приватными подписями.
Модуль: config.py – конфигурация приложения.

Назначение модуля:
- Определение базовых параметров приложения Flask (секретный ключ, строка подключения к БД, cookie сессии).
- Выбор и настройка объектного хранилища (локальный диск или Cloudinary).
- Параметры загрузки изображений (максимальный размер, допустимые форматы).
"""

import os
import warnings


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Преобразует переменную окружения в bool."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_int(name: str, default: int) -> int:
    """Преобразует переменную окружения в int."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str] | None = None) -> list[str]:
    """Преобразует переменную окружения вида 'a,b,c' в список."""
    value = os.environ.get(name)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


def _is_production() -> bool:
    """Определяет production-режим по FLASK_ENV."""
    return os.environ.get("FLASK_ENV", "").strip().lower() == "production"


class Config:
    """Базовая конфигурация приложения."""

    _PRODUCTION = _is_production()

    SECRET_KEY = os.environ.get("SECRET_KEY")
    if not SECRET_KEY:
        if _PRODUCTION:
            raise RuntimeError(
                "SECRET_KEY environment variable is required in production. "
                "Set a strong random value before starting the app."
            )
        SECRET_KEY = "dev-insecure-secret-key"
        warnings.warn(
            "SECRET_KEY is not set. Using insecure development fallback key.",
            RuntimeWarning,
            stacklevel=1,
        )

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:////app/instance/gallery.db" if _PRODUCTION else "sqlite:///gallery.db",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_SECURE = _get_env_bool("SESSION_COOKIE_SECURE", default=_PRODUCTION)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_LIFETIME_HOURS = _get_env_int("SESSION_LIFETIME_HOURS", 24 * 7)

    CORS_ENABLED = _get_env_bool("CORS_ENABLED", default=False)
    CORS_ORIGINS = _get_env_list(
        "CORS_ORIGINS",
        default=[
            "http://127.0.0.1:5000",
            "http://localhost:5000",
        ],
    )

    # Объектное хранилище: "local" или "cloudinary"
    OBJECT_STORE_BACKEND = os.environ.get("OBJECT_STORE_BACKEND", "local").strip().lower() or "local"
    OBJECT_STORE_ROOT = os.environ.get("OBJECT_STORE_ROOT", "drive-content-hub").strip() or "drive-content-hub"
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "static/uploads")
    UPLOAD_URL_PREFIX = os.environ.get("UPLOAD_URL_PREFIX", "/uploads").rstrip("/") or "/uploads"

    CLOUDINARY_CLOUD_NAME = os.environ.get("CLOUDINARY_CLOUD_NAME", "").strip()
    CLOUDINARY_API_KEY = os.environ.get("CLOUDINARY_API_KEY", "").strip()
    CLOUDINARY_API_SECRET = os.environ.get("CLOUDINARY_API_SECRET", "")
    THUMBNAIL_SIZE = _get_env_int("THUMBNAIL_SIZE", 400)

    MAX_CONTENT_LENGTH = 16 * 1024 * 1024
    ALLOWED_IMAGE_FORMATS = {"png", "jpeg", "webp", "gif"}
    MAX_IMAGE_PIXELS = _get_env_int("MAX_IMAGE_PIXELS", 40_000_000)

    # Учётная запись администратора, создаваемая при первичном заполнении БД
    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin").strip() or "admin"
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "0777")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
