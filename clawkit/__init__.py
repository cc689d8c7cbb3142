"""Building blocks for an AI agent HTTP service: auth, request validation, SSE events, metrics, tools, skills and a debugging CLI."""

__version__ = "0.1.0"