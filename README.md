# clawkit

Building blocks for an AI agent HTTP service, plus `clawctl`, a command-line
tool for inspecting tools and skills and running a small benchmark without
starting a server.

## Install

```
pip install clawkit
pip install "clawkit[test]"   # with the test dependencies
```

## What is inside

- `clawkit.auth` — `load_api_keys(config_dir)` reads `api_keys.yaml`. If the
  file is missing, unreadable or cannot be parsed, the store runs in open mode
  and every request is accepted as tenant `open`. Otherwise
  `ApiKeyStore.authenticate(headers)` expects `Authorization: Bearer <key>`
  and returns a `TenantInfo` (`tenant`, `allowed_apps`), or raises
  `Unauthorized`.
- `clawkit.dto` — `parse_agent_request(data)` builds an `AgentRequest` from a
  mapping, raising `SerdeError` for unknown, missing or mistyped fields;
  `AgentRequest.validate()` enforces required fields and length limits
  (app and user ids 64 bytes, session id 128, task type 64, model 128,
  content 512 KiB) and raises `RequestValidationError`. `AgentResponseMeta`
  holds a request id and task type.
- `clawkit.errors` — the `AppError` family (`BadRequest`, `TaskNotFound`,
  `RateLimited`, `CircuitOpen`, `RedisError`, `LlmError`, `ConfigError`,
  `IoError`, `SerdeError`, `InternalError`, `GatewayTimeout`) and
  `error_response(error)`, which returns the HTTP status and a
  `{"error": code, "message": text}` body.
- `clawkit.stream` — delta types (`TextDelta`, `ToolCallsDelta`,
  `ErrorDelta`, `DoneDelta`), `SseEvent` with `encode()`,
  `try_unpack_marker(text)`, `delta_to_event(delta)`, `until_done(deltas)`
  and `agent_stream(request, api_keys, headers, upstream, request_id=None)`.
  `agent_stream` validates and authorizes eagerly (raising `BadRequest`) and
  returns an async iterator of events that opens with a `meta` event carrying
  the request id and ends after the first `done` or `error`. Text deltas that
  hold a JSON object tagged with `__claw_event` of `tool_call`, `tool_result`
  or `thought` become events of that name.
- `clawkit.metrics` — `init_metrics()` / `global_metrics()` give a
  process-wide `AppMetrics` with a request counter, a duration histogram and
  an in-flight gauge. `render()` and `metrics_handler()` produce Prometheus
  text; `instrument(method, path, handler)` wraps an async handler and
  records its status and duration.
- `clawkit.tools` — the `Tool` contract, the `Echo` tool, `ToolRegistry`
  (`register`, `get`, `invoke`, `specs_for`), `ToolNotFound`,
  `build_default_registry()` and `known_tool_names()`.
- `clawkit.config` — `load_app_config(config_dir)` reads `config.yaml` plus
  every enabled `tasks/*.yaml` / `tasks/*.yml` (in file-name order) and checks
  the provider references with `validate(config)`; problems raise
  `ConfigLoadError`.
- `clawkit.skills` — `load_skills(root)` scans `<root>/<dir>/manifest.yaml`
  and `instruction.md`; `describe_list`, `describe_skill` and
  `missing_tools` produce the reports the CLI prints.
- `clawkit.bench` — `bench_tool(iters)` times the echo tool and returns
  `BenchStats`; `fmt_duration(seconds)` formats a duration.

## Example

```python
from clawkit.auth import load_api_keys
from clawkit.dto import parse_agent_request

store = load_api_keys("config")
tenant = store.authenticate({"authorization": "Bearer token"})

request = parse_agent_request({
    "app_id": "demo",
    "user_id": "u1",
    "session_id": "s1",
    "task_type": "chat",
    "content": "hello",
})
request.validate()
```

An `api_keys.yaml` is a list of entries:

```yaml
- key: token
  tenant: acme
  apps:
    - id: app-a
    - id: app-b
```

An empty `apps` list allows every app id for that tenant.

## Command line

```
clawctl --help
clawctl tool list
clawctl tool spec echo
clawctl tool invoke echo --args '{"text": "hi"}'
clawctl skill list
clawctl skill show <name>
clawctl skill validate <name>
clawctl bench tool --iters 1000
```

Global options: `--config` sets the configuration directory (default
`./config`, or the `CLAW_CONFIG_DIR` environment variable), `--log` sets the
log level (default `info`, or `CLAW_LOG`), and `--llm-mock` only prints a
notice. `tool invoke` exits with status 2 when the tool reports an error;
other failures exit with status 1.

## What it does not do

clawkit provides the pieces around an agent service, not the service itself.
It has no HTTP server or router, no language-model client and no agent loop:
`agent_stream` consumes a delta stream you supply. Accordingly `clawctl` has
no commands for starting a server, chatting with a model or running an agent
task, and the only built-in tool is `echo`.

## Tests

```
pip install "clawkit[test]"
pytest
```