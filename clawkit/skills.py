"""Discovery and description of skills stored under ``<config>/skills``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import AppConfig, ConfigLoadError


@dataclass
class SkillManifest:
    name: str
    version: str = ""
    description: str = ""
    tools: list[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Any) -> SkillManifest:
        if not isinstance(data, Mapping):
            raise ValueError("manifest must be a mapping")
        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError("missing string field `name`")
        version = data.get("version", "")
        description = data.get("description", "")
        if not isinstance(version, str) or not isinstance(description, str):
            raise ValueError("`version` and `description` must be strings")
        tools = data.get("tools", [])
        if not isinstance(tools, list) or not all(isinstance(t, str) for t in tools):
            raise ValueError("`tools` must be a list of strings")
        return cls(name=name, version=version, description=description, tools=list(tools))


@dataclass
class LoadedSkill:
    manifest: SkillManifest
    instruction: str
    directory: Path


class SkillNotFound(LookupError):
    """No skill of the requested name was loaded."""

    def __init__(self, name: str, root: str | Path | None = None) -> None:
        self.name = name
        message = f"skill `{name}` not found"
        if root is not None:
            message += f" in {root}"
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


def load_skills(root: str | Path) -> dict[str, LoadedSkill]:
    """Load every ``<root>/<dir>/manifest.yaml``, keyed and ordered by skill name.

    Directories without a readable manifest are skipped; a manifest that
    cannot be parsed raises ConfigLoadError.
    """
    root = Path(root)
    skills: dict[str, LoadedSkill] = {}
    if not root.is_dir():
        return skills
    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        raise ConfigLoadError(f"read_dir {root}: {exc}") from exc
    for directory in entries:
        if not directory.is_dir():
            continue
        manifest_path = directory / "manifest.yaml"
        try:
            raw = manifest_path.read_text(encoding="utf-8")
        except OSError:
            continue
        try:
            manifest = SkillManifest.from_mapping(yaml.safe_load(raw))
        except (yaml.YAMLError, ValueError) as exc:
            raise ConfigLoadError(f"parse {manifest_path}: {exc}") from exc
        try:
            instruction = (directory / "instruction.md").read_text(encoding="utf-8")
        except OSError:
            instruction = ""
        skills[manifest.name] = LoadedSkill(manifest, instruction, directory)
    return dict(sorted(skills.items()))


def describe_list(skills: Mapping[str, LoadedSkill], root: str | Path) -> list[str]:
    """Summary lines: a header, then one line per skill in name order."""
    lines = [f"{len(skills)} skill(s) under {root}:"]
    for name in sorted(skills):
        manifest = skills[name].manifest
        version = f"@{manifest.version}" if manifest.version else ""
        description = manifest.description or "<no description>"
        lines.append(f"  {manifest.name}{version} - {description} (tools={len(manifest.tools)})")
    return lines


def describe_skill(skill: LoadedSkill) -> list[str]:
    """Detail lines for one skill: manifest fields, then the instruction text."""
    manifest = skill.manifest
    lines = [f"name: {manifest.name}"]
    if manifest.version:
        lines.append(f"version: {manifest.version}")
    if manifest.description:
        lines.append(f"description: {manifest.description}")
    lines.append(f"dir: {skill.directory}")
    lines.append(f"tools: {', '.join(manifest.tools) if manifest.tools else '<none>'}")
    lines.append("instruction:")
    if skill.instruction:
        lines.extend(f"  {line}" for line in skill.instruction.splitlines())
    else:
        lines.append("  <empty>")
    return lines


def missing_tools(skill: LoadedSkill, config: AppConfig | None) -> list[str]:
    """The skill's tools that no task in ``config`` declares."""
    declared = set()
    if config is not None:
        declared = {tool for task in config.tasks.values() for tool in task.tools}
    return [tool for tool in skill.manifest.tools if tool not in declared]