"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: models/upload.py – модель загруженного изображения.

Назначение модуля:
- Описание ORM-модели Upload для таблицы uploads.
- Хранение публичной и приватной подписи, названия папки и ссылок на объект во внешнем хранилище.
"""

from datetime import datetime
from extensions import db

DEFAULT_FOLDER = "General"


class Upload(db.Model):
    """Изображение галереи вместе с подписями и ссылками на объект в хранилище."""
    __tablename__ = "uploads"

    # Поля, которые можно менять после создания записи
    EDITABLE_FIELDS = ("public_text", "private_text", "folder_name")

    id = db.Column(db.Integer, primary_key=True)
    public_text = db.Column(db.Text, nullable=False)
    private_text = db.Column(db.Text, nullable=True)
    # Папка это просто метка, без внешнего ключа
    folder_name = db.Column(db.String(255), nullable=False, default=DEFAULT_FOLDER, index=True)
    drive_file_id = db.Column(db.String(512), nullable=False)
    web_view_link = db.Column(db.String(1024), nullable=False)
    thumbnail_link = db.Column(db.String(1024), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
