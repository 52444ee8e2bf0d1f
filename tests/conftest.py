"""Shared fixtures: application on in-memory SQLite with a temporary local object store."""

from datetime import datetime

import pytest

from app import create_app
from config import Config
from extensions import db as _db
from models.upload import Upload
from tests.helpers import ADMIN_PASSWORD, ADMIN_USERNAME, login


class UnitTestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SESSION_COOKIE_SECURE = False
    CORS_ENABLED = False
    OBJECT_STORE_BACKEND = "local"
    OBJECT_STORE_ROOT = "drive-content-hub"
    ADMIN_USERNAME = ADMIN_USERNAME
    ADMIN_PASSWORD = ADMIN_PASSWORD
    LOG_LEVEL = "DEBUG"


@pytest.fixture
def app(tmp_path):
    class _Config(UnitTestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    application = create_app(_Config)
    with application.app_context():
        application.extensions["auth_service"].seed_admin(ADMIN_USERNAME, ADMIN_PASSWORD)

    yield application

    with application.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(app):
    """Test client with an established admin session."""
    test_client = app.test_client()
    response = login(test_client)
    assert response.status_code == 200
    return test_client


@pytest.fixture
def object_store(app):
    return app.extensions["object_store"]


@pytest.fixture
def upload_service(app):
    return app.extensions["upload_service"]


@pytest.fixture
def insert_upload(app):
    """Insert an upload row directly, bypassing the object store."""

    def _insert(public_text="Caption", private_text="secret", folder_name="General",
                created_at=None, drive_file_id=None):
        with app.app_context():
            upload = Upload(
                public_text=public_text,
                private_text=private_text,
                folder_name=folder_name,
                drive_file_id=drive_file_id or f"drive-content-hub/{folder_name}/{public_text}.png",
                web_view_link=f"/uploads/{public_text}.png",
                thumbnail_link=f"/uploads/{public_text}.png",
                created_at=created_at or datetime.utcnow(),
            )
            _db.session.add(upload)
            _db.session.commit()
            return upload.id

    return _insert
