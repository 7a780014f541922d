"""Adapter wrapping the draft service HTTP client."""

from typing import Optional

from mundodraft.api_client import MundoApiClient
from mundodraft.config import ClientConfig, client_config_from_env
from mundodraft.models import ChampionPage, DraftAction, DraftSession, DraftStatus, GuildQueue

from ...application.ports.draft_service import DraftDataPort


class MundoApiAdapter(DraftDataPort):
    """Adapter for the remote draft API over HTTP."""

    def __init__(self, config: ClientConfig | None = None, client: MundoApiClient | None = None):
        """Initialize with client configuration.

        Args:
            config: Client configuration. If None, read from environment.
            client: Pre-built client, mainly for sharing one session.
        """
        self._client = client or MundoApiClient(config or client_config_from_env())

    def get_draft(self, draft_id: str) -> DraftSession:
        return self._client.get_draft(draft_id)

    def get_draft_status(self, draft_id: str) -> DraftStatus:
        return self._client.get_draft_status(draft_id)

    def select_champion(self, draft_id: str, champion_id: str, action: DraftAction) -> str:
        return self._client.select_champion(draft_id, champion_id, action)

    def get_champions(
        self,
        role: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> ChampionPage:
        return self._client.get_champions(role=role, search=search, limit=limit, offset=offset)

    def get_guild_queue(self, guild_id: str, queue_type: Optional[str] = None) -> GuildQueue:
        return self._client.get_guild_queue(guild_id, queue_type)

    def health_check(self) -> bool:
        return self._client.health_check()

    def close(self) -> None:
        self._client.close()
