"""Command-line debugging tool for tools, skills and local benchmarks."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from .bench import bench_tool
from .config import load_app_config
from .errors import AppError
from .skills import SkillNotFound, describe_list, describe_skill, load_skills, missing_tools
from .tools import build_default_registry, known_tool_names

_LOG_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Context:
    """Settings shared by every subcommand."""

    config_dir: Path
    llm_mock: bool = False


class _CommandFailed(Exception):
    """A subcommand failed with a message for the user."""


# ---------------------------------------------------------------------------
# tool
# ---------------------------------------------------------------------------


def _tool_list(ctx: Context, args: argparse.Namespace) -> int:
    registry = build_default_registry()
    names = sorted(name for name in known_tool_names() if registry.get(name) is not None)
    print(f"{len(names)} tool(s) registered:")
    for name in names:
        tool = registry.get(name)
        if tool is not None:
            print(f"  {name} - {tool.description}")
    return 0


def _tool_spec(ctx: Context, args: argparse.Namespace) -> int:
    tool = build_default_registry().get(args.name)
    if tool is None:
        raise _CommandFailed(f"tool `{args.name}` not found in registry")
    print(json.dumps(tool.spec(), indent=2, ensure_ascii=False))
    return 0


def _tool_invoke(ctx: Context, args: argparse.Namespace) -> int:
    try:
        parsed = json.loads(args.args)
    except ValueError as exc:
        raise _CommandFailed(f"invalid --args JSON: {exc}") from exc
    registry = build_default_registry()
    try:
        output = asyncio.run(registry.invoke(args.name, parsed))
    except AppError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print("ok:")
    print(output)
    return 0


# ---------------------------------------------------------------------------
# skill
# ---------------------------------------------------------------------------


def _skills_root(ctx: Context) -> Path:
    return ctx.config_dir / "skills"


def _skill_list(ctx: Context, args: argparse.Namespace) -> int:
    root = _skills_root(ctx)
    for line in describe_list(load_skills(root), root):
        print(line)
    return 0


def _skill_show(ctx: Context, args: argparse.Namespace) -> int:
    root = _skills_root(ctx)
    skills = load_skills(root)
    skill = skills.get(args.name)
    if skill is None:
        raise SkillNotFound(args.name, root)
    for line in describe_skill(skill):
        print(line)
    return 0


def _skill_validate(ctx: Context, args: argparse.Namespace) -> int:
    skills = load_skills(_skills_root(ctx))
    skill = skills.get(args.name)
    if skill is None:
        raise SkillNotFound(args.name)
    try:
        config = load_app_config(ctx.config_dir)
    except AppError:
        config = None
    missing = missing_tools(skill, config)
    if not missing:
        print(f"OK all {len(skill.manifest.tools)} tool(s) declared in tasks")
    else:
        print(
            f"WARN {len(missing)} tool(s) not declared in any task: {', '.join(missing)}"
        )
        print(
            "  (note: a skill's tools are a whitelist used by tasks; they must appear "
            "in some task.tools or be loaded in the registry)"
        )
    return 0


# ---------------------------------------------------------------------------
# bench
# ---------------------------------------------------------------------------


def _bench_tool(ctx: Context, args: argparse.Namespace) -> int:
    stats = asyncio.run(bench_tool(args.iters))
    print()
    for line in stats.lines("tool/echo"):
        print(line)
    return 0


# ---------------------------------------------------------------------------
# parser and entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="clawctl",
        description="Debug the tool, skill and benchmark subsystems without the HTTP service.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ.get("CLAW_CONFIG_DIR", "config")),
        help="configuration directory (env CLAW_CONFIG_DIR, default ./config)",
    )
    parser.add_argument(
        "--llm-mock", action="store_true", help="force the mock LLM (no real HTTP)"
    )
    parser.add_argument(
        "--log",
        default=os.environ.get("CLAW_LOG", "info"),
        help="log level: trace / debug / info / warn / error",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    tool = commands.add_parser("tool", help="tool debugging (list / spec / invoke)")
    tool_sub = tool.add_subparsers(dest="sub", required=True)
    tool_sub.add_parser("list", help="list registered tools").set_defaults(handler=_tool_list)
    spec = tool_sub.add_parser("spec", help="print a tool's function-calling schema")
    spec.add_argument("name")
    spec.set_defaults(handler=_tool_spec)
    invoke = tool_sub.add_parser("invoke", help="invoke a tool directly")
    invoke.add_argument("name")
    invoke.add_argument("--args", default="{}", help="arguments as a JSON string")
    invoke.set_defaults(handler=_tool_invoke)

    skill = commands.add_parser("skill", help="skill debugging (list / show / validate)")
    skill_sub = skill.add_subparsers(dest="sub", required=True)
    skill_sub.add_parser("list", help="list loaded skills").set_defaults(handler=_skill_list)
    show = skill_sub.add_parser("show", help="show a skill's manifest and instruction")
    show.add_argument("name")
    show.set_defaults(handler=_skill_show)
    check = skill_sub.add_parser("validate", help="check a skill's tools against tasks")
    check.add_argument("name")
    check.set_defaults(handler=_skill_validate)

    bench = commands.add_parser("bench", help="built-in micro-benchmarks")
    bench_sub = bench.add_subparsers(dest="sub", required=True)
    bench_tool_parser = bench_sub.add_parser("tool", help="tool invocation throughput")
    bench_tool_parser.add_argument("--iters", type=int, default=1000)
    bench_tool_parser.set_defaults(handler=_bench_tool)

    return parser


def _init_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(level.lower(), logging.INFO),
        format="%(levelname)s %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    args = build_parser().parse_args(argv)
    _init_logging(args.log)
    if args.llm_mock:
        print("[mock] LLM mock mode enabled", file=sys.stderr)
    ctx = Context(config_dir=args.config, llm_mock=args.llm_mock)
    try:
        return args.handler(ctx, args)
    except (_CommandFailed, AppError, LookupError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())