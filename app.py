"""
Название: «Drive Content Hub»
Дата и номер версии: 2026-10-19 v1.0
Язык: Python (Flask)
Краткое описание: веб-галерея изображений: администратор загружает изображения с публичной
и приватной подписью по папкам, посетители просматривают публичную галерею
"""

import os
import time
from datetime import timedelta

import click
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from config import Config
from errors import GalleryError, api_error
from extensions import db, login_manager, cors
import models  # noqa: F401 - регистрирует модели для db.create_all()
from routes.auth import register_routes as register_auth_routes
from routes.uploads import register_routes as register_upload_routes
from services.auth import AuthService
from services.object_store import build_object_store
from services.uploads import UploadService
from utils.cleanup import cleanup_expired_sessions
from utils.seed import seed_admin_user


def create_app(config_class=Config) -> Flask:
    """Фабрика приложения, собирающая все модули воедино."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=app.config["SESSION_LIFETIME_HOURS"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Инициализация расширений
    db.init_app(app)
    login_manager.init_app(app)

    if app.config["CORS_ENABLED"]:
        cors.init_app(
            app,
            resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
            supports_credentials=True,
        )

    os.makedirs(app.instance_path, exist_ok=True)

    # Сервисы создаются один раз на приложение и берутся маршрутами из app.extensions
    object_store = build_object_store(app.config, logger=app.logger)
    app.extensions["object_store"] = object_store
    app.extensions["auth_service"] = AuthService(
        db,
        session_lifetime=app.config["PERMANENT_SESSION_LIFETIME"],
    )
    app.extensions["upload_service"] = UploadService(
        db,
        object_store,
        root_namespace=app.config["OBJECT_STORE_ROOT"],
    )

    register_auth_routes(app)
    register_upload_routes(app)

    with app.app_context():
        # Создаем отсутствующие таблицы (без изменения существующих колонок)
        db.create_all()

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        return api_error("Unauthorized", 401)

    @app.errorhandler(GalleryError)
    def handle_gallery_error(error: GalleryError):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        if not request.path.startswith("/api/"):
            return error
        if error.code == 413:
            return api_error("File too large", 413)
        return api_error(error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        # Подробности только в логе, клиенту уходит обезличенное сообщение
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        db.session.rollback()
        return api_error("Internal Server Error", 500)

    @app.before_request
    def start_request_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def log_api_request(response):
        if request.path.startswith("/api"):
            started_at = g.get("request_started_at", time.perf_counter())
            app.logger.info(
                "%s %s %s in %dms",
                request.method,
                request.path,
                response.status_code,
                (time.perf_counter() - started_at) * 1000,
            )
        return response

    @app.after_request
    def apply_security_headers(response):
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", "camera=(), microphone=(), geolocation=()")
        return response

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}, 200

    @app.cli.command("seed-admin")
    def seed_admin_command():
        """Создаёт учётную запись администратора, если её ещё нет."""
        created = seed_admin_user()
        click.echo("Admin user created." if created else "Admin user already exists.")

    @app.cli.command("cleanup-sessions")
    def cleanup_sessions_command():
        """Удаляет просроченные сессии."""
        click.echo(f"Removed {cleanup_expired_sessions()} expired sessions.")

    return app


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        seed_admin_user()
        # Очистка просроченных сессий при запуске приложения
        cleanup_expired_sessions()
    is_production = os.environ.get("FLASK_ENV", "").lower() == "production"
    app.run(debug=not is_production)
