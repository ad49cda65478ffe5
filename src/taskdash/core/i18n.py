# src/taskdash/core/i18n.py

"""
Minimal message catalogs.

Only what the core and the console need: sample task texts and a few labels.
Lookup falls back to English, then to the key itself.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

CATALOGS: dict[str, dict[str, str]] = {
    "en": {
        "tasks.mock.updateWebsiteTitle": "Update website design",
        "tasks.mock.updateWebsiteDesc": "Refresh the landing page layout and update the color palette.",
        "tasks.mock.reviewFeedbackTitle": "Review customer feedback",
        "tasks.mock.reviewFeedbackDesc": "Go through the latest survey answers and group common issues.",
        "tasks.mock.updateDocsTitle": "Update documentation",
        "tasks.mock.updateDocsDesc": "Describe the new API endpoints and remove outdated sections.",
        "tasks.mock.fixLoginBugTitle": "Fix login bug",
        "tasks.mock.fixLoginBugDesc": "Users are logged out after refreshing the page on mobile.",
        "tasks.mock.optimizePerfTitle": "Optimize performance",
        "tasks.mock.optimizePerfDesc": "Reduce dashboard load time by caching the statistics queries.",
        "tasks.status.pending": "Pending",
        "tasks.status.inProgress": "In progress",
        "tasks.status.completed": "Completed",
        "tasks.priority.low": "Low",
        "tasks.priority.medium": "Medium",
        "tasks.priority.high": "High",
        "tasks.list.showing": "Showing {count} of {total} tasks",
        "tasks.list.emptyTitle": "No tasks found",
        "dashboard.stats.totalTasks": "Total tasks",
        "dashboard.stats.completedTasks": "Completed",
        "dashboard.stats.pendingTasks": "Pending",
        "analytics.metrics.completionRate": "Completion rate",
        "analytics.metrics.overdue": "Overdue",
    },
    "ru": {
        "tasks.mock.updateWebsiteTitle": "Обновить дизайн сайта",
        "tasks.mock.updateWebsiteDesc": "Освежить макет главной страницы и обновить цветовую палитру.",
        "tasks.mock.reviewFeedbackTitle": "Разобрать отзывы клиентов",
        "tasks.mock.reviewFeedbackDesc": "Просмотреть свежие ответы опроса и сгруппировать частые проблемы.",
        "tasks.mock.updateDocsTitle": "Обновить документацию",
        "tasks.mock.updateDocsDesc": "Описать новые эндпоинты API и удалить устаревшие разделы.",
        "tasks.mock.fixLoginBugTitle": "Исправить ошибку входа",
        "tasks.mock.fixLoginBugDesc": "Пользователей разлогинивает после обновления страницы на мобильных.",
        "tasks.mock.optimizePerfTitle": "Оптимизировать производительность",
        "tasks.mock.optimizePerfDesc": "Ускорить загрузку дашборда за счёт кэширования статистики.",
        "tasks.status.pending": "В ожидании",
        "tasks.status.inProgress": "В работе",
        "tasks.status.completed": "Завершено",
        "tasks.priority.low": "Низкий",
        "tasks.priority.medium": "Средний",
        "tasks.priority.high": "Высокий",
        "tasks.list.showing": "Показано {count} из {total} задач",
        "tasks.list.emptyTitle": "Задачи не найдены",
        "dashboard.stats.totalTasks": "Всего задач",
        "dashboard.stats.completedTasks": "Завершено",
        "dashboard.stats.pendingTasks": "В ожидании",
        "analytics.metrics.completionRate": "Выполнено",
        "analytics.metrics.overdue": "Просрочено",
    },
}

SUPPORTED_LANGUAGES = tuple(CATALOGS)


def supported_language(language: str | None) -> str | None:
    """Catalog code for "ru-RU", "RU", "en_GB", ...; None if there is no catalog."""
    code = (language or "").strip().lower().replace("_", "-").split("-")[0]
    return code if code in CATALOGS else None


def normalize_language(language: str | None) -> str:
    """Like supported_language, but falls back to DEFAULT_LANGUAGE."""
    code = supported_language(language)
    if code is not None:
        return code
    if language and language.strip():
        logger.warning("Unsupported language %r, falling back to %s", language, DEFAULT_LANGUAGE)
    return DEFAULT_LANGUAGE


class Translator:
    """Callable key -> text lookup bound to one language."""

    def __init__(self, language: str | None = DEFAULT_LANGUAGE) -> None:
        self.language = normalize_language(language)
        self._catalog = CATALOGS[self.language]
        self._fallback = CATALOGS[DEFAULT_LANGUAGE]

    def __call__(self, key: str) -> str:
        text = self._catalog.get(key)
        if text is None:
            text = self._fallback.get(key, key)
        return text

    def format(self, key: str, **params: object) -> str:
        return self(key).format(**params)

    def __repr__(self) -> str:
        return f"Translator(language={self.language!r})"
