"""Request and response objects of the agent HTTP API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import SerdeError

MAX_APP_ID = 64
MAX_USER_ID = 64
MAX_SESSION_ID = 128
MAX_TASK_TYPE = 64
MAX_MODEL = 128
MAX_CONTENT_BYTES = 512 * 1024

_REQUIRED = ("app_id", "user_id", "session_id", "task_type", "content")
_OPTIONAL = ("model", "metadata")


class RequestValidationError(ValueError):
    """A well-formed request whose field values are not acceptable."""


def _check_required(value: str, limit: int) -> None:
    if not value.strip():
        raise RequestValidationError("field required")
    if len(value.encode("utf-8")) > limit:
        raise RequestValidationError("field too long")


@dataclass
class AgentRequest:
    app_id: str
    user_id: str
    session_id: str
    task_type: str
    content: str
    model: str | None = None
    metadata: Any = None

    def validate(self) -> None:
        """Raise RequestValidationError if a field is empty or too long."""
        _check_required(self.app_id, MAX_APP_ID)
        _check_required(self.user_id, MAX_USER_ID)
        _check_required(self.session_id, MAX_SESSION_ID)
        _check_required(self.task_type, MAX_TASK_TYPE)
        _check_required(self.content, MAX_CONTENT_BYTES)
        if self.model is not None and (
            not self.model.strip() or len(self.model.encode("utf-8")) > MAX_MODEL
        ):
            raise RequestValidationError("model invalid")


@dataclass(frozen=True)
class AgentResponseMeta:
    request_id: str
    task_type: str


def parse_agent_request(data: Any) -> AgentRequest:
    """Build an AgentRequest from decoded JSON, rejecting unknown or mistyped fields."""
    if not isinstance(data, Mapping):
        raise SerdeError("expected a JSON object")
    for name in data:
        if name not in _REQUIRED and name not in _OPTIONAL:
            raise SerdeError(f"unknown field `{name}`")
    values: dict[str, Any] = {}
    for name in _REQUIRED:
        if name not in data:
            raise SerdeError(f"missing field `{name}`")
        if not isinstance(data[name], str):
            raise SerdeError(f"field `{name}` must be a string")
        values[name] = data[name]
    model = data.get("model")
    if model is not None and not isinstance(model, str):
        raise SerdeError("field `model` must be a string")
    return AgentRequest(**values, model=model, metadata=data.get("metadata"))