"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: services/uploads.py – жизненный цикл загруженных изображений.

Назначение модуля:
- Выборка изображений для публичной галереи и для панели администратора (с фильтром по папке).
- Создание записи после успешной загрузки файла во внешнее хранилище.
- Изменение только текстовых полей; ссылки на объект в хранилище после создания неизменяемы.
- Удаление объекта из хранилища и затем записи из БД.
"""

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from errors import NotFound, ValidationError
from models.upload import DEFAULT_FOLDER, Upload
from services.object_store import ObjectStore, ObjectStoreError


def _require_text(value, field: str) -> str:
    """Проверяет, что значение является непустой строкой."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty string", field=field)
    return value


class UploadService:
    """CRUD над таблицей uploads, согласованный с объектным хранилищем."""

    def __init__(self, db, object_store: ObjectStore, root_namespace: str = "drive-content-hub"):
        self.db = db
        self.object_store = object_store
        self.root_namespace = root_namespace.strip("/")

    @staticmethod
    def _newest_first(query):
        # Порядок при равном created_at не гарантируется контрактом, id лишь делает его стабильным
        return query.order_by(Upload.created_at.desc(), Upload.id.desc())

    def list_public(self) -> list[Upload]:
        """Все изображения для публичной галереи. Приватный текст скрывает сериализатор."""
        return self._newest_first(Upload.query).all()

    def list_all(self, folder: str | None = None) -> list[Upload]:
        """Все изображения для администратора, при необходимости только из одной папки."""
        query = Upload.query
        if folder:
            query = query.filter(Upload.folder_name == folder)
        return self._newest_first(query).all()

    def get(self, upload_id: int) -> Upload:
        """Возвращает изображение по идентификатору или NotFound."""
        upload = self.db.session.get(Upload, upload_id)
        if upload is None:
            raise NotFound("Upload not found")
        return upload

    def namespace_for(self, folder_name: str) -> str:
        """Пространство имён хранилища для папки."""
        return f"{self.root_namespace}/{folder_name}" if self.root_namespace else folder_name

    def create(
        self,
        data: bytes | None,
        public_text: str | None,
        private_text: str | None = None,
        folder_name: str | None = None,
        filename: str | None = None,
    ) -> Upload:
        """Загружает файл в хранилище и создаёт запись о нём.

        При сбое хранилища запись не создаётся. Если не удалась запись в БД,
        уже загруженный объект удаляется.
        """
        if not data:
            raise ValidationError("No file uploaded", field="file")

        _require_text(public_text, "publicText")
        if private_text is not None and not isinstance(private_text, str):
            raise ValidationError("privateText must be a string", field="privateText")
        # Метка папки хранится как передана, пустая заменяется папкой по умолчанию
        if not isinstance(folder_name, str) or not folder_name.strip():
            folder_name = DEFAULT_FOLDER

        stored = self.object_store.upload(data, self.namespace_for(folder_name.strip()), filename=filename)

        upload = Upload(
            public_text=public_text,
            private_text=private_text,
            folder_name=folder_name,
            drive_file_id=stored.id,
            web_view_link=stored.url,
            thumbnail_link=stored.thumbnail_url or stored.url,
        )
        self.db.session.add(upload)
        try:
            self.db.session.commit()
        except SQLAlchemyError:
            self.db.session.rollback()
            current_app.logger.exception("Failed to save upload row, removing stored object %s", stored.id)
            try:
                self.object_store.delete(stored.id)
            except ObjectStoreError:
                current_app.logger.exception("Stored object %s is orphaned", stored.id)
            raise

        current_app.logger.info("Created upload %s in folder %s", upload.id, folder_name)
        return upload

    def update(self, upload_id: int, changes: dict) -> Upload:
        """Меняет только переданные текстовые поля (имена атрибутов модели)."""
        for key in changes:
            if key not in Upload.EDITABLE_FIELDS:
                raise ValidationError(f"Field '{key}' cannot be modified", field=key)

        if "public_text" in changes:
            _require_text(changes["public_text"], "publicText")
        if "folder_name" in changes:
            _require_text(changes["folder_name"], "folderName")
        if "private_text" in changes and changes["private_text"] is not None:
            if not isinstance(changes["private_text"], str):
                raise ValidationError("privateText must be a string or null", field="privateText")

        upload = self.get(upload_id)
        for key, value in changes.items():
            setattr(upload, key, value)
        self.db.session.commit()
        return upload

    def delete(self, upload_id: int) -> None:
        """Удаляет объект из хранилища, затем запись.

        Операция не атомарна: если хранилище вернуло ошибку, запись остаётся
        и удаление можно повторить.
        """
        upload = self.get(upload_id)
        self.object_store.delete(upload.drive_file_id)

        self.db.session.delete(upload)
        try:
            self.db.session.commit()
        except SQLAlchemyError:
            self.db.session.rollback()
            current_app.logger.exception(
                "Object %s was deleted but upload row %s could not be removed",
                upload.drive_file_id,
                upload_id,
            )
            raise
        current_app.logger.info("Deleted upload %s", upload_id)

    def ping(self) -> dict:
        """Проверяет связь с объектным хранилищем."""
        return self.object_store.ping()
