"""Draft companion client package."""

__all__ = [
    "config",
    "errors",
    "models",
    "normalize",
    "api_client",
    "reconciler",
    "push",
    "sync",
    "queue",
    "champions",
    "serialize",
    "render",
    "cli",
]
