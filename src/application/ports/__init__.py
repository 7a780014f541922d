"""Application ports (interfaces)."""

from .draft_service import DraftDataPort
from .view_publisher import ViewPublisherPort

__all__ = [
    "DraftDataPort",
    "ViewPublisherPort",
]
