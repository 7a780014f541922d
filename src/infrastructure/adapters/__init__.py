"""Infrastructure adapters."""

from .mundo_api_adapter import MundoApiAdapter

__all__ = [
    "MundoApiAdapter",
]
