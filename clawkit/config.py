"""Loading of the main configuration file and the task definitions."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.9
DEFAULT_MAX_TOKENS = 2048
DEFAULT_MAX_ITERATIONS = 5

_MISSING = object()


class ConfigLoadError(ConfigError):
    """The configuration could not be read, parsed or validated."""


class _SchemaError(ValueError):
    pass


class TaskMode(enum.Enum):
    PLAIN = "plain"
    REACT = "react"


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise _SchemaError(f"{where}: expected a mapping")
    return value


def _get(data: Mapping[str, Any], key: str, default: Any = _MISSING) -> Any:
    if key not in data:
        if default is _MISSING:
            raise _SchemaError(f"missing field `{key}`")
        return default
    return data[key]


def _str(data: Mapping[str, Any], key: str, default: Any = _MISSING) -> str:
    value = _get(data, key, default)
    if not isinstance(value, str):
        raise _SchemaError(f"field `{key}` must be a string")
    return value


def _float(data: Mapping[str, Any], key: str, default: float) -> float:
    value = _get(data, key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _SchemaError(f"field `{key}` must be a number")
    return float(value)


def _uint(data: Mapping[str, Any], key: str, default: int) -> int:
    value = _get(data, key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _SchemaError(f"field `{key}` must be a non-negative integer")
    return value


def _bool(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = _get(data, key, default)
    if not isinstance(value, bool):
        raise _SchemaError(f"field `{key}` must be a boolean")
    return value


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    value = _get(data, key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _SchemaError(f"field `{key}` must be a list of strings")
    return list(value)


@dataclass
class ProviderConfig:
    default_model: str
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Any) -> ProviderConfig:
        data = _mapping(data, "provider")
        options = {k: v for k, v in data.items() if k != "default_model"}
        return cls(default_model=_str(data, "default_model"), options=options)


@dataclass
class LlmConfig:
    default_provider: str
    providers: dict[str, ProviderConfig] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Any) -> LlmConfig:
        data = _mapping(data, "llm")
        providers = _mapping(_get(data, "providers"), "llm.providers")
        return cls(
            default_provider=_str(data, "default_provider"),
            providers={str(k): ProviderConfig.from_mapping(v) for k, v in providers.items()},
        )


@dataclass
class TaskLlm:
    provider: str
    model: str
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    max_tokens: int = DEFAULT_MAX_TOKENS

    @classmethod
    def from_mapping(cls, data: Any) -> TaskLlm:
        data = _mapping(data, "task.llm")
        return cls(
            provider=_str(data, "provider"),
            model=_str(data, "model"),
            temperature=_float(data, "temperature", DEFAULT_TEMPERATURE),
            top_p=_float(data, "top_p", DEFAULT_TOP_P),
            max_tokens=_uint(data, "max_tokens", DEFAULT_MAX_TOKENS),
        )


@dataclass
class Prompt:
    user_template: str
    system: str = ""

    @classmethod
    def from_mapping(cls, data: Any) -> Prompt:
        data = _mapping(data, "task.prompt")
        return cls(user_template=_str(data, "user_template"), system=_str(data, "system", ""))


@dataclass
class TaskConfig:
    name: str
    llm: TaskLlm
    prompt: Prompt
    description: str = ""
    enabled: bool = True
    mode: TaskMode = TaskMode.PLAIN
    tools: list[str] = field(default_factory=list)
    skill: str | None = None
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    @classmethod
    def from_mapping(cls, data: Any) -> TaskConfig:
        data = _mapping(data, "task")
        mode_name = _str(data, "mode", TaskMode.PLAIN.value)
        try:
            mode = TaskMode(mode_name)
        except ValueError:
            raise _SchemaError(f"unknown task mode `{mode_name}`") from None
        skill = data.get("skill")
        if skill is not None and not isinstance(skill, str):
            raise _SchemaError("field `skill` must be a string")
        return cls(
            name=_str(data, "name"),
            llm=TaskLlm.from_mapping(_get(data, "llm")),
            prompt=Prompt.from_mapping(_get(data, "prompt")),
            description=_str(data, "description", ""),
            enabled=_bool(data, "enabled", True),
            mode=mode,
            tools=_str_list(data, "tools"),
            skill=skill,
            max_iterations=_uint(data, "max_iterations", DEFAULT_MAX_ITERATIONS),
        )


@dataclass
class AppConfig:
    llm: LlmConfig
    circuit_breaker: dict[str, Any]
    tasks: dict[str, TaskConfig] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Any) -> AppConfig:
        data = _mapping(data, "config")
        tasks = _mapping(_get(data, "tasks", {}), "tasks")
        return cls(
            llm=LlmConfig.from_mapping(_get(data, "llm")),
            circuit_breaker=dict(_mapping(_get(data, "circuit_breaker"), "circuit_breaker")),
            tasks={str(k): TaskConfig.from_mapping(v) for k, v in tasks.items()},
        )


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"read {path}: {exc}") from exc


def _parse(path: Path, build: Any) -> Any:
    raw = _read(path)
    try:
        return build(yaml.safe_load(raw))
    except (yaml.YAMLError, _SchemaError) as exc:
        raise ConfigLoadError(f"parse {path}: {exc}") from exc


def load_app_config(config_dir: str | Path) -> AppConfig:
    """Load ``config.yaml`` and the enabled ``tasks/*.yaml`` files, then validate."""
    directory = Path(config_dir)
    config: AppConfig = _parse(directory / "config.yaml", AppConfig.from_mapping)

    tasks_dir = directory / "tasks"
    if tasks_dir.is_dir():
        try:
            paths = sorted(p for p in tasks_dir.iterdir() if p.suffix in (".yaml", ".yml"))
        except OSError as exc:
            raise ConfigLoadError(f"read_dir {tasks_dir}: {exc}") from exc
        for path in paths:
            task: TaskConfig = _parse(path, TaskConfig.from_mapping)
            if task.enabled:
                config.tasks[task.name] = task

    validate(config)
    return config


def validate(config: AppConfig) -> None:
    """Check provider references; raise ConfigLoadError on the first problem."""
    providers = config.llm.providers
    if not providers:
        raise ConfigLoadError("llm.providers empty")
    if config.llm.default_provider not in providers:
        raise ConfigLoadError(
            f"llm.default_provider `{config.llm.default_provider}` not in providers"
        )
    for name, task in config.tasks.items():
        if task.llm.provider not in providers:
            raise ConfigLoadError(
                f"task `{name}` references unknown provider `{task.llm.provider}`"
            )