import json

import pytest

from clawkit.cli import Context, build_parser, main
from clawkit.tools import Echo


def _write_config(config_dir, task_tools):
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.yaml").write_text(
        "llm:\n"
        "  default_provider: p\n"
        "  providers:\n"
        "    p:\n"
        "      default_model: m\n"
        "circuit_breaker: {}\n",
        encoding="utf-8",
    )
    tasks = config_dir / "tasks"
    tasks.mkdir()
    tools = ", ".join(task_tools)
    (tasks / "chat.yaml").write_text(
        "name: chat\n"
        "llm:\n"
        "  provider: p\n"
        "  model: m\n"
        "prompt:\n"
        "  user_template: '{{content}}'\n"
        f"tools: [{tools}]\n",
        encoding="utf-8",
    )


def _write_skill(config_dir, name, tools, instruction=None):
    skill_dir = config_dir / "skills" / name
    skill_dir.mkdir(parents=True)
    (skill_dir / "manifest.yaml").write_text(
        f"name: {name}\nversion: '1'\ndescription: demo\ntools: [{', '.join(tools)}]\n",
        encoding="utf-8",
    )
    if instruction is not None:
        (skill_dir / "instruction.md").write_text(instruction, encoding="utf-8")


def test_parser_defaults(tmp_path):
    args = build_parser().parse_args(["--config", str(tmp_path), "tool", "invoke", "echo"])
    assert args.args == "{}"
    assert args.llm_mock is False
    assert str(args.config) == str(tmp_path)


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_context_holds_settings(tmp_path):
    ctx = Context(config_dir=tmp_path, llm_mock=True)
    assert ctx.config_dir == tmp_path
    assert ctx.llm_mock is True


def test_tool_list(capsys):
    assert main(["tool", "list"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "1 tool(s) registered:"
    assert out[1] == f"  echo - {Echo.description}"


def test_tool_spec_round_trips(capsys):
    assert main(["tool", "spec", "echo"]) == 0
    assert json.loads(capsys.readouterr().out) == Echo().spec()


def test_tool_spec_unknown(capsys):
    assert main(["tool", "spec", "nope"]) == 1
    assert "tool `nope` not found in registry" in capsys.readouterr().err


def test_tool_invoke_echo(capsys):
    assert main(["tool", "invoke", "echo", "--args", '{"text": "hello"}']) == 0
    assert capsys.readouterr().out == "ok:\nhello\n"


def test_tool_invoke_missing_argument_exits_2(capsys):
    assert main(["tool", "invoke", "echo"]) == 2
    assert "missing required field `text`" in capsys.readouterr().err


def test_tool_invoke_unknown_tool_exits_2(capsys):
    assert main(["tool", "invoke", "nope", "--args", "{}"]) == 2
    assert capsys.readouterr().err.startswith("error:")


def test_tool_invoke_bad_json(capsys):
    assert main(["tool", "invoke", "echo", "--args", "{not json"]) == 1
    assert "invalid --args JSON" in capsys.readouterr().err


def test_llm_mock_notice(capsys):
    assert main(["--llm-mock", "tool", "list"]) == 0
    assert "[mock] LLM mock mode enabled" in capsys.readouterr().err


def test_skill_list(tmp_path, capsys):
    _write_skill(tmp_path, "alpha", ["echo"])
    assert main(["--config", str(tmp_path), "skill", "list"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == f"1 skill(s) under {tmp_path / 'skills'}:"
    assert out[1] == "  alpha@1 - demo (tools=1)"


def test_skill_show(tmp_path, capsys):
    _write_skill(tmp_path, "alpha", ["echo"], instruction="line one\nline two")
    assert main(["--config", str(tmp_path), "skill", "show", "alpha"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "name: alpha"
    assert out[-2:] == ["  line one", "  line two"]


def test_skill_show_unknown(tmp_path, capsys):
    assert main(["--config", str(tmp_path), "skill", "show", "ghost"]) == 1
    assert "skill `ghost` not found" in capsys.readouterr().err


def test_skill_validate_reports_missing(tmp_path, capsys):
    _write_config(tmp_path, ["echo"])
    _write_skill(tmp_path, "alpha", ["echo", "web"])
    assert main(["--config", str(tmp_path), "skill", "validate", "alpha"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "WARN 1 tool(s) not declared in any task: web"


def test_skill_validate_all_declared(tmp_path, capsys):
    _write_config(tmp_path, ["echo"])
    _write_skill(tmp_path, "alpha", ["echo"])
    assert main(["--config", str(tmp_path), "skill", "validate", "alpha"]) == 0
    assert capsys.readouterr().out.splitlines()[0] == "OK all 1 tool(s) declared in tasks"


def test_bench_tool_command(capsys):
    assert main(["bench", "tool", "--iters", "3"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert "── bench tool/echo ──" in out
    assert "  iters    : 3" in out