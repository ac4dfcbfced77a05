from __future__ import annotations
from typing import Any


class AppError(Exception):
    """Базовая ошибка прикладного слоя."""


class NotFoundError(AppError):
    def __init__(self, entity: str, key: Any = None):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key!r}")


class AppValidationError(AppError):
    """Нарушено бизнес-правило. ``code`` — машиночитаемая причина."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(code)


class PersistenceError(AppError):
    """Хранилище отвергло запись при save(); исходная ошибка в __cause__."""
