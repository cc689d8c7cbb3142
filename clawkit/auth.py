"""API key authentication with per-tenant app restrictions."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import AppError

log = logging.getLogger(__name__)

OPEN_TENANT = "open"


@dataclass(frozen=True)
class TenantInfo:
    """The tenant a request was authenticated as."""

    tenant: str
    allowed_apps: list[str] = field(default_factory=list)


class Unauthorized(AppError):
    status = 401
    code = "UNAUTHORIZED"
    default_message = "unauthorized"


class ApiKeyStore:
    """Maps API keys to tenants; an empty store runs in open mode."""

    def __init__(self, entries: Mapping[str, tuple[str, Sequence[str]]] | None = None) -> None:
        self._entries = {
            key: (tenant, list(apps)) for key, (tenant, apps) in (entries or {}).items()
        }

    def enabled(self) -> bool:
        return bool(self._entries)

    def authenticate(self, headers: Mapping[str, str]) -> TenantInfo:
        """Check the Bearer token in ``headers``; raise Unauthorized on failure."""
        if not self.enabled():
            return TenantInfo(tenant=OPEN_TENANT, allowed_apps=[])
        header = next(
            (value for name, value in headers.items() if name.lower() == "authorization"),
            None,
        )
        if header is None or not header.startswith("Bearer "):
            raise Unauthorized()
        entry = self._entries.get(header[len("Bearer "):])
        if entry is None:
            raise Unauthorized()
        tenant, apps = entry
        return TenantInfo(tenant=tenant, allowed_apps=list(apps))


def _parse_entries(document: Any) -> dict[str, tuple[str, list[str]]]:
    if not isinstance(document, list):
        raise ValueError("expected a list of key entries")
    entries: dict[str, tuple[str, list[str]]] = {}
    for item in document:
        if not isinstance(item, dict):
            raise ValueError("key entry must be a mapping")
        key, tenant = item.get("key"), item.get("tenant")
        if not isinstance(key, str) or not isinstance(tenant, str):
            raise ValueError("key entry needs string `key` and `tenant`")
        raw_apps = item.get("apps") or []
        if not isinstance(raw_apps, list):
            raise ValueError("`apps` must be a list")
        apps = []
        for app in raw_apps:
            if not isinstance(app, dict) or not isinstance(app.get("id"), str):
                raise ValueError("app entry needs a string `id`")
            apps.append(app["id"])
        entries[key] = (tenant, apps)
    return entries


def load_api_keys(config_dir: str | Path) -> ApiKeyStore:
    """Load ``api_keys.yaml`` from ``config_dir``; fall back to open mode on any problem."""
    path = Path(config_dir) / "api_keys.yaml"
    if not path.exists():
        log.info("api_keys.yaml not found, running in open mode")
        return ApiKeyStore()
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        log.warning("failed to read api_keys.yaml: %s, running in open mode", exc)
        return ApiKeyStore()
    try:
        entries = _parse_entries(yaml.safe_load(content))
    except (yaml.YAMLError, ValueError) as exc:
        log.warning("failed to parse api_keys.yaml: %s, running in open mode", exc)
        return ApiKeyStore()
    log.info("api_keys.yaml loaded, auth enabled (%d keys)", len(entries))
    return ApiKeyStore(entries)