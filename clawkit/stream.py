"""Server-sent event stream for agent responses."""

from __future__ import annotations

import json
import logging
import os
import re
import time
from collections.abc import AsyncIterable, AsyncIterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .auth import ApiKeyStore, Unauthorized
from .dto import AgentRequest, RequestValidationError
from .errors import BadRequest

log = logging.getLogger(__name__)

MARKER_KEY = "__claw_event"
_MARKER_EVENTS = frozenset({"tool_call", "tool_result", "thought"})
_CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"


@dataclass(frozen=True)
class TextDelta:
    text: str


@dataclass(frozen=True)
class ToolCallsDelta:
    calls: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class ErrorDelta:
    message: str


@dataclass(frozen=True)
class DoneDelta:
    pass


Delta = Union[TextDelta, ToolCallsDelta, ErrorDelta, DoneDelta]


@dataclass(frozen=True)
class SseEvent:
    event: str
    data: str

    def encode(self) -> str:
        """Render the event in the text/event-stream wire format."""
        lines = [f"event: {self.event}"]
        lines += [f"data: {line}" for line in re.split(r"\r\n|\r|\n", self.data)]
        return "\n".join(lines) + "\n\n"


def try_unpack_marker(text: str) -> tuple[str, str] | None:
    """Split a marker-wrapped control event into (event name, payload JSON)."""
    if not text.startswith("{") or f'"{MARKER_KEY}"' not in text:
        return None
    try:
        value = json.loads(text)
    except ValueError:
        return None
    if not isinstance(value, dict):
        return None
    name = value.get(MARKER_KEY)
    if not isinstance(name, str) or name not in _MARKER_EVENTS:
        return None
    payload = {k: v for k, v in value.items() if k != MARKER_KEY}
    return name, json.dumps(payload, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def delta_to_event(delta: Delta) -> SseEvent:
    """Map one model delta to the SSE event sent to the client."""
    if isinstance(delta, TextDelta):
        unpacked = try_unpack_marker(delta.text)
        if unpacked is not None:
            return SseEvent(*unpacked)
        return SseEvent("message", delta.text)
    if isinstance(delta, ToolCallsDelta):
        return SseEvent("message", "")
    if isinstance(delta, ErrorDelta):
        return SseEvent("error", delta.message)
    if isinstance(delta, DoneDelta):
        return SseEvent("done", "[DONE]")
    raise TypeError(f"unknown delta: {delta!r}")


async def until_done(deltas: AsyncIterable[Delta]) -> AsyncIterator[Delta]:
    """Yield deltas up to and including the first Done or Error."""
    async for delta in deltas:
        yield delta
        if isinstance(delta, (DoneDelta, ErrorDelta)):
            return


def _new_request_id() -> str:
    value = (int(time.time() * 1000) << 80) | int.from_bytes(os.urandom(10), "big")
    return "".join(_CROCKFORD[(value >> shift) & 31] for shift in range(125, -1, -5))


def agent_stream(
    request: AgentRequest,
    api_keys: ApiKeyStore,
    headers: Mapping[str, str],
    upstream: AsyncIterable[Delta],
    request_id: str | None = None,
) -> AsyncIterator[SseEvent]:
    """Check the request and return the SSE events for ``upstream``.

    Validation and authorization happen eagerly and raise BadRequest.
    """
    try:
        request.validate()
    except RequestValidationError as exc:
        raise BadRequest(str(exc)) from exc
    try:
        tenant = api_keys.authenticate(headers)
    except Unauthorized as exc:
        log.warning("auth failed for app_id=%s", request.app_id)
        raise BadRequest("unauthorized") from exc
    if tenant.allowed_apps and request.app_id not in tenant.allowed_apps:
        raise BadRequest(
            f"app_id `{request.app_id}` not allowed for tenant `{tenant.tenant}`"
        )
    rid = request_id or _new_request_id()

    async def events() -> AsyncIterator[SseEvent]:
        yield SseEvent("meta", json.dumps({"request_id": rid}, separators=(",", ":")))
        async for delta in until_done(upstream):
            yield delta_to_event(delta)

    return events()