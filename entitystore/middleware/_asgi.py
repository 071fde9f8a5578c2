"""Small helpers shared by the raw ASGI middlewares."""

from typing import Any


def get_header(scope: dict[str, Any], name: str) -> str | None:
    """Return the first value of header name (case-insensitive), decoded."""
    want = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == want:
            return value.decode("utf-8", errors="replace")
    return None


def scope_state(scope: dict[str, Any]) -> dict[str, Any]:
    """Per-request state dict; starlette exposes it as request.state."""
    return scope.setdefault("state", {})
