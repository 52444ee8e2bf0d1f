"""
Модуль: `errors.py`.
Назначение: Иерархия прикладных ошибок и их отображение в HTTP-ответы вида {"message": ...}.
"""

from flask import jsonify


class GalleryError(Exception):
    """Базовая прикладная ошибка с HTTP-статусом."""

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None, field: str | None = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {"message": self.message}
        if self.field:
            payload["field"] = self.field
        return payload


class ValidationError(GalleryError):
    status_code = 400
    default_message = "Invalid input"


class Unauthorized(GalleryError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(GalleryError):
    status_code = 404
    default_message = "Not found"


def api_error(message: str, status: int = 400, **extra):
    return jsonify({"message": message, **extra}), status
