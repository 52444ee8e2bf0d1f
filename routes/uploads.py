"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: routes/uploads.py – API-маршруты изображений галереи.

Назначение модуля:
- Публичная лента изображений без приватных подписей.
- Полный список для администратора с фильтром по папке.
- Загрузка изображения (multipart), изменение подписей и папки, удаление.
- Проверка связи с объектным хранилищем и выдача файлов локального хранилища.
"""

from flask import current_app, jsonify, request, send_from_directory
from flask_login import current_user, login_required

from errors import GalleryError, ValidationError, api_error
from services.object_store import LocalObjectStore
from services.uploads import UploadService
from utils.image_validation import inspect_image
from utils.serializers import UPLOAD_INPUT_FIELDS, serialize_upload, serialize_upload_public


def _upload_service() -> UploadService:
    """Сервис изображений текущего приложения."""
    return current_app.extensions["upload_service"]


def _parse_update_payload() -> dict:
    """Переводит JSON-тело изменения в атрибуты модели, отклоняя лишние поля."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Validation failed")

    changes = {}
    for key, value in data.items():
        if key not in UPLOAD_INPUT_FIELDS:
            raise ValidationError(f"Field '{key}' cannot be modified", field=key)
        changes[UPLOAD_INPUT_FIELDS[key]] = value
    return changes


def register_routes(app):
    """Регистрирует маршруты галереи и хранилища."""

    @app.get("/api/uploads/public")
    def list_public_uploads():
        """Публичная лента без приватных подписей."""
        uploads = _upload_service().list_public()
        return jsonify([serialize_upload_public(upload) for upload in uploads])

    @app.get("/api/uploads/all")
    @login_required
    def list_all_uploads():
        """Все изображения для администратора, с фильтром по папке."""
        folder = request.args.get("folder") or None
        uploads = _upload_service().list_all(folder=folder)
        return jsonify([serialize_upload(upload) for upload in uploads])

    @app.get("/api/uploads/<int:upload_id>")
    def get_upload(upload_id: int):
        """Одно изображение; приватная подпись только для администратора."""
        upload = _upload_service().get(upload_id)
        if current_user.is_authenticated:
            return jsonify(serialize_upload(upload))
        return jsonify(serialize_upload_public(upload))

    @app.post("/api/uploads")
    @login_required
    def create_upload():
        """Загрузка изображения в хранилище и создание записи."""
        file = request.files.get("file")
        if file is None or not file.filename:
            raise ValidationError("No file uploaded", field="file")

        extension = inspect_image(
            file,
            allowed_formats=app.config["ALLOWED_IMAGE_FORMATS"],
            max_pixels=app.config["MAX_IMAGE_PIXELS"],
        )

        try:
            upload = _upload_service().create(
                file.read(),
                public_text=request.form.get("publicText"),
                private_text=request.form.get("privateText"),
                folder_name=request.form.get("folderName"),
                filename=f"image.{extension}",
            )
        except GalleryError:
            raise
        except Exception:
            current_app.logger.exception("Upload failed")
            return api_error("Upload failed", 500)

        return jsonify(serialize_upload(upload)), 201

    @app.put("/api/uploads/<int:upload_id>")
    @login_required
    def update_upload(upload_id: int):
        """Изменение подписей и папки."""
        changes = _parse_update_payload()
        upload = _upload_service().update(upload_id, changes)
        return jsonify(serialize_upload(upload))

    @app.delete("/api/uploads/<int:upload_id>")
    @login_required
    def delete_upload(upload_id: int):
        """Удаление изображения из хранилища и БД."""
        _upload_service().delete(upload_id)
        return "", 204

    @app.get("/api/storage/ping")
    @login_required
    def ping_object_store():
        """Проверка связи с объектным хранилищем."""
        try:
            result = _upload_service().ping()
        except Exception:
            current_app.logger.exception("Object storage connectivity check failed")
            return jsonify({"success": False, "message": "Object storage connection failed"}), 500

        return jsonify(
            {
                "success": True,
                "message": "Object storage connection successful",
                "result": result,
            }
        )

    object_store = app.extensions["object_store"]
    if isinstance(object_store, LocalObjectStore):

        @app.get(f"{object_store.url_prefix}/<path:filename>")
        def uploaded_file(filename):
            """Отдаёт файл из локального хранилища."""
            return send_from_directory(object_store.root_dir, filename)
