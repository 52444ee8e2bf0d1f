"""
Модуль: `utils/seed.py`.
Назначение: Первичное заполнение БД учётной записью администратора.
"""

from flask import current_app


def seed_admin_user() -> bool:
    """Создаёт администратора из ADMIN_USERNAME/ADMIN_PASSWORD, если его ещё нет."""
    username = current_app.config["ADMIN_USERNAME"]
    _, created = current_app.extensions["auth_service"].seed_admin(
        username,
        current_app.config["ADMIN_PASSWORD"],
    )
    if created:
        current_app.logger.info("Admin user %s created", username)
    else:
        current_app.logger.info("Admin user %s already exists", username)
    return created
