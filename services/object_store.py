"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: services/object_store.py – внешнее объектное хранилище изображений.

Назначение модуля:
- Единый интерфейс ObjectStore: загрузка байтов в пространство имён, удаление по идентификатору, проверка связи.
- Реализация LocalObjectStore: файлы на диске в UPLOAD_FOLDER, отдаются самим приложением.
- Реализация CloudinaryObjectStore: загрузка в Cloudinary через официальный SDK.
- Фабрика build_object_store() выбирает реализацию по OBJECT_STORE_BACKEND.
"""

import io
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime

import cloudinary
import cloudinary.api
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from cloudinary.utils import cloudinary_url
from werkzeug.security import safe_join
from werkzeug.utils import secure_filename


class ObjectStoreError(Exception):
    """Сбой внешнего хранилища. Текст ошибки пишется в лог и не возвращается клиенту."""


@dataclass(frozen=True)
class StoredObject:
    id: str
    url: str
    thumbnail_url: str | None = None


class ObjectStore:
    """Интерфейс объектного хранилища."""

    name = "abstract"

    def upload(self, data: bytes, namespace: str, filename: str | None = None) -> StoredObject:
        raise NotImplementedError

    def delete(self, object_id: str) -> None:
        raise NotImplementedError

    def ping(self) -> dict:
        raise NotImplementedError


def _namespace_segments(namespace: str) -> list[str]:
    segments = [secure_filename(part) for part in (namespace or "").split("/")]
    return [segment for segment in segments if segment]


class LocalObjectStore(ObjectStore):
    """Хранение файлов на локальном диске."""

    name = "local"

    def __init__(self, root_dir: str, url_prefix: str = "/uploads", logger=None):
        self.root_dir = os.path.abspath(root_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.logger = logger or logging.getLogger(__name__)
        os.makedirs(self.root_dir, exist_ok=True)

    def upload(self, data: bytes, namespace: str, filename: str | None = None) -> StoredObject:
        extension = ""
        if filename and "." in filename:
            extension = "." + secure_filename(filename.rsplit(".", 1)[1].lower())

        # Уникальное имя файла: время загрузки + случайный суффикс
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        unique_name = f"{timestamp}_{uuid.uuid4().hex[:12]}{extension}"
        segments = _namespace_segments(namespace)
        object_id = "/".join(segments + [unique_name])

        target_dir = os.path.join(self.root_dir, *segments)
        try:
            os.makedirs(target_dir, exist_ok=True)
            with open(os.path.join(target_dir, unique_name), "wb") as f:
                f.write(data)
        except OSError as exc:
            raise ObjectStoreError(f"Failed to write {object_id}: {exc}") from exc

        self.logger.info("Stored %s (%d bytes) in local object store", object_id, len(data))
        return StoredObject(id=object_id, url=f"{self.url_prefix}/{object_id}")

    def delete(self, object_id: str) -> None:
        path = safe_join(self.root_dir, object_id)
        if path is None:
            raise ObjectStoreError(f"Refusing to delete object outside of store: {object_id}")

        if not os.path.exists(path):
            self.logger.warning("Object %s is already missing from local store", object_id)
            return

        try:
            os.remove(path)
        except OSError as exc:
            raise ObjectStoreError(f"Failed to delete {object_id}: {exc}") from exc

    def ping(self) -> dict:
        if not os.path.isdir(self.root_dir) or not os.access(self.root_dir, os.W_OK):
            raise ObjectStoreError(f"Upload folder {self.root_dir} is not writable")
        return {"status": "ok", "backend": self.name}


class CloudinaryObjectStore(ObjectStore):
    """Хранение изображений в Cloudinary."""

    name = "cloudinary"

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, thumbnail_size: int = 400,
                 logger=None):
        if not (cloud_name and api_key and api_secret):
            raise ObjectStoreError("Cloudinary credentials are not configured")

        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.thumbnail_size = thumbnail_size
        self.logger = logger or logging.getLogger(__name__)

    def upload(self, data: bytes, namespace: str, filename: str | None = None) -> StoredObject:
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(data),
                folder=namespace,
                unique_filename=True,
                resource_type="image",
            )
        except CloudinaryError as exc:
            raise ObjectStoreError(f"Cloudinary upload failed: {exc}") from exc

        public_id = result.get("public_id")
        secure_url = result.get("secure_url")
        if not public_id or not secure_url:
            raise ObjectStoreError(f"Cloudinary returned an incomplete upload result: {result!r}")

        thumbnail_url, _ = cloudinary_url(
            public_id,
            version=result.get("version"),
            width=self.thumbnail_size,
            height=self.thumbnail_size,
            crop="fill",
            secure=True,
        )
        return StoredObject(id=public_id, url=secure_url, thumbnail_url=thumbnail_url)

    def delete(self, object_id: str) -> None:
        try:
            result = cloudinary.uploader.destroy(object_id, resource_type="image")
        except CloudinaryError as exc:
            raise ObjectStoreError(f"Cloudinary deletion failed: {exc}") from exc

        status = (result or {}).get("result")
        if status == "not found":
            self.logger.warning("Object %s is already missing from Cloudinary", object_id)
            return
        if status != "ok":
            raise ObjectStoreError(f"Cloudinary refused to delete {object_id}: {result!r}")

    def ping(self) -> dict:
        try:
            result = cloudinary.api.ping()
        except CloudinaryError as exc:
            raise ObjectStoreError(f"Cloudinary ping failed: {exc}") from exc
        return {"status": result.get("status", "ok"), "backend": self.name}


def build_object_store(config, logger=None) -> ObjectStore:
    """Создаёт хранилище по настройке OBJECT_STORE_BACKEND."""
    backend = (config.get("OBJECT_STORE_BACKEND") or "local").lower()
    if backend == "local":
        return LocalObjectStore(
            config["UPLOAD_FOLDER"],
            url_prefix=config.get("UPLOAD_URL_PREFIX", "/uploads"),
            logger=logger,
        )
    if backend == "cloudinary":
        return CloudinaryObjectStore(
            config.get("CLOUDINARY_CLOUD_NAME", ""),
            config.get("CLOUDINARY_API_KEY", ""),
            config.get("CLOUDINARY_API_SECRET", ""),
            thumbnail_size=config.get("THUMBNAIL_SIZE", 400),
            logger=logger,
        )
    raise RuntimeError(f"Unknown OBJECT_STORE_BACKEND: {backend!r}")
