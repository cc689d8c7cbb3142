"""Application errors and their mapping to HTTP responses."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base class of every error the service reports to clients."""

    status: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = self.default_message if message is None else message
        super().__init__(self.message)


class BadRequest(AppError):
    status = 400
    code = "BAD_REQUEST"
    default_message = "bad request"


class TaskNotFound(AppError):
    status = 404
    code = "TASK_NOT_FOUND"
    default_message = "task not found"


class RateLimited(AppError):
    status = 429
    code = "RATE_LIMITED"
    default_message = "rate limited"


class CircuitOpen(AppError):
    status = 503
    code = "CIRCUIT_OPEN"
    default_message = "circuit open"


class RedisError(AppError):
    status = 500
    code = "REDIS_ERROR"
    default_message = "redis error"


class LlmError(AppError):
    status = 502
    code = "LLM_ERROR"
    default_message = "llm error"


class ConfigError(AppError):
    status = 500
    code = "CONFIG_ERROR"
    default_message = "config error"


class IoError(AppError):
    status = 500
    code = "IO_ERROR"
    default_message = "io error"


class SerdeError(AppError):
    status = 422
    code = "SERDE_ERROR"
    default_message = "serialization error"


class InternalError(AppError):
    status = 500
    code = "INTERNAL_ERROR"
    default_message = "internal error"


class GatewayTimeout(AppError):
    status = 504
    code = "TIMEOUT"
    default_message = "timeout"


def error_response(error: BaseException) -> tuple[int, dict[str, Any]]:
    """Return the HTTP status and JSON body that report ``error``."""
    if not isinstance(error, AppError):
        error = InternalError(str(error))
    return error.status, {"error": error.code, "message": str(error)}