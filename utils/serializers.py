"""
Модуль: `utils/serializers.py`.
Назначение: Явное преобразование моделей в JSON для разных аудиторий.

В ответ попадают только перечисленные здесь поля: новые колонки модели
не утекут в API, пока их сюда не добавят.
"""

from datetime import datetime, timezone

from models.upload import Upload
from models.user import User

# Входные поля изменения изображения (JSON API -> атрибут модели)
UPLOAD_INPUT_FIELDS = {
    "publicText": "public_text",
    "privateText": "private_text",
    "folderName": "folder_name",
}


def _isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def serialize_user(user: User) -> dict:
    return {"id": user.id, "username": user.username}


def serialize_upload(upload: Upload) -> dict:
    """Полное представление для администратора."""
    return {
        "id": upload.id,
        "publicText": upload.public_text,
        "privateText": upload.private_text,
        "folderName": upload.folder_name,
        "driveFileId": upload.drive_file_id,
        "webViewLink": upload.web_view_link,
        "thumbnailLink": upload.thumbnail_link,
        "createdAt": _isoformat(upload.created_at),
    }


def serialize_upload_public(upload: Upload) -> dict:
    """Публичное представление: приватный текст всегда null."""
    return {
        "id": upload.id,
        "publicText": upload.public_text,
        "privateText": None,
        "folderName": upload.folder_name,
        "driveFileId": upload.drive_file_id,
        "webViewLink": upload.web_view_link,
        "thumbnailLink": upload.thumbnail_link,
        "createdAt": _isoformat(upload.created_at),
    }
