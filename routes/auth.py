"""
Программа: «Drive Content Hub» – веб-галерея изображений.
Модуль: routes/auth.py – маршруты аутентификации и управления сессиями.

Назначение модуля:
- Вход и выход администратора; токен серверной сессии хранится в подписанной cookie Flask.
- Восстановление текущего пользователя по токену для Flask-Login.
- Смена пароля текущего пользователя.
"""

from flask import current_app, jsonify, request, session
from flask_login import current_user, login_required, login_user, logout_user

from errors import Unauthorized, ValidationError
from extensions import login_manager
from services.auth import AuthService
from utils.serializers import serialize_user

SESSION_TOKEN_KEY = "session_token"


def _auth_service() -> AuthService:
    """Сервис аутентификации текущего приложения."""
    return current_app.extensions["auth_service"]


@login_manager.request_loader
def load_user_from_session(_request):
    """Пользователь по токену сессии из подписанной cookie."""
    # Пользователь восстанавливается только по живой серверной сессии
    return _auth_service().resolve_session(session.get(SESSION_TOKEN_KEY))


def _read_json_strings(*fields: str) -> tuple[str, ...] | None:
    """Достаёт строковые поля из JSON-тела; None, если форма тела не подходит."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    values = tuple(data.get(field) for field in fields)
    if not all(isinstance(value, str) for value in values):
        return None
    return values


def register_routes(app):
    """Регистрирует маршруты аутентификации."""

    @app.post("/api/login")
    def login():
        """Вход по логину и паролю."""
        credentials = _read_json_strings("username", "password")
        if credentials is None:
            raise Unauthorized("Invalid credentials")
        username, password = credentials

        auth_service = _auth_service()
        try:
            user, token = auth_service.login(username, password)
        except Unauthorized:
            current_app.logger.warning("Failed login attempt for %r", username)
            raise

        # Предыдущая сессия этого браузера больше не нужна
        auth_service.revoke_session(session.get(SESSION_TOKEN_KEY))
        session.clear()
        session[SESSION_TOKEN_KEY] = token
        session.permanent = True
        login_user(user)
        return jsonify(serialize_user(user))

    @app.post("/api/logout")
    def logout():
        """Выход всегда успешен, даже без активной сессии."""
        _auth_service().revoke_session(session.pop(SESSION_TOKEN_KEY, None))
        logout_user()
        session.clear()
        return jsonify({"message": "Logged out"}), 200

    @app.get("/api/user")
    @login_required
    def me():
        """Текущий пользователь."""
        return jsonify(serialize_user(current_user))

    @app.post("/api/change-password")
    @login_required
    def change_password():
        """Смена пароля текущего пользователя."""
        passwords = _read_json_strings("currentPassword", "newPassword")
        if passwords is None:
            raise ValidationError("Invalid input")
        current_password, new_password = passwords

        _auth_service().change_password(
            current_user._get_current_object(),
            current_password,
            new_password,
            keep_token=session.get(SESSION_TOKEN_KEY),
        )
        return jsonify({"message": "Password updated"})
