"""Port (interface) for pushing reconciled views to a client."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class ViewPublisherPort(ABC):
    """Port for delivering view updates to a connected viewer."""

    @abstractmethod
    async def publish(self, message: Dict[str, Any]) -> None:
        """Send one message.

        Args:
            message: JSON-ready payload with a ``type`` key
        """
        ...
