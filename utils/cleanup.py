"""
Модуль: `utils/cleanup.py`.
Назначение: Очистка просроченных серверных сессий.
"""

from flask import current_app


def cleanup_expired_sessions() -> int:
    """Удаляет сессии с истёкшим сроком действия и возвращает их число."""
    removed = current_app.extensions["auth_service"].cleanup_expired_sessions()
    if removed:
        current_app.logger.info("Removed %d expired sessions", removed)
    return removed
