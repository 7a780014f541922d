"""Port (interface) for the remote draft service."""

from abc import ABC, abstractmethod
from typing import Optional

from mundodraft.models import ChampionPage, DraftAction, DraftSession, DraftStatus, GuildQueue


class DraftDataPort(ABC):
    """Port for reading and mutating drafts on the remote service.

    Method names mirror the HTTP client so a port can be handed straight to
    ``mundodraft.sync.DraftSync``.
    """

    @abstractmethod
    def get_draft(self, draft_id: str) -> DraftSession:
        """Resolve a join code or id to its draft session.

        Raises:
            NotFoundError: If no draft has that code
        """
        ...

    @abstractmethod
    def get_draft_status(self, draft_id: str) -> DraftStatus:
        """Fetch a full status snapshot."""
        ...

    @abstractmethod
    def select_champion(self, draft_id: str, champion_id: str, action: DraftAction) -> str:
        """Submit a ban or pick for the current turn."""
        ...

    @abstractmethod
    def get_champions(
        self,
        role: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> ChampionPage:
        """List champions, optionally filtered."""
        ...

    @abstractmethod
    def get_guild_queue(self, guild_id: str, queue_type: Optional[str] = None) -> GuildQueue:
        """Fetch per-role queue membership for a guild."""
        ...
