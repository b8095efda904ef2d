from __future__ import annotations

from typing import Any, Dict, Optional


class AppError(Exception):
    code = "APP_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidInputError(AppError):
    code = "INVALID_INPUT"


class NotFoundError(AppError):
    code = "NOT_FOUND"


class CorruptDataError(AppError):
    code = "CORRUPT_DATA"


class StorageError(AppError):
    code = "STORAGE_ERROR"


class LLMError(AppError):
    code = "LLM_ERROR"


class TransientServiceError(LLMError):
    """Rate limits, timeouts and dropped connections; eligible for retry."""

    code = "LLM_TRANSIENT"


class FatalServiceError(LLMError):
    code = "LLM_FATAL"
