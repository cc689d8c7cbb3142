[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clawkit"
version = "0.1.0"
description = "Building blocks for an AI agent HTTP service: API key auth, request validation, SSE event mapping, metrics, tools, skills and a debugging CLI"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["agent", "llm", "sse", "api", "tools", "cli", "prometheus"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
clawctl = "clawkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["clawkit"]

[tool.pytest.ini_options]
addopts = "-ra"
