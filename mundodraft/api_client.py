"""HTTP client for the draft service REST API.

Every endpoint answers with the envelope
``{"success": bool, "data": ..., "error": str, "details": [...]}``; the client
unwraps ``data`` and turns everything else into :mod:`mundodraft.errors`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .config import ClientConfig
from .errors import ApiError, NotFoundError, SelectionRejectedError, TransportError
from .models import Champion, ChampionPage, DraftAction, DraftSession, DraftStatus, GuildQueue
from .normalize import (
    champion_from_json,
    champion_page_from_json,
    draft_session_from_json,
    draft_status_from_json,
    guild_queue_from_json,
)

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)


@dataclass
class MundoApiClient:
    config: ClientConfig = field(default_factory=ClientConfig)

    def __post_init__(self) -> None:
        self.base_url = self.config.api_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update(
            {
                "content-type": "application/json",
                "accept": "application/json",
            }
        )

    def _auth_headers(self) -> Dict[str, str]:
        if self.config.api_token:
            return {"Authorization": f"Bearer {self.config.api_token}"}
        return {}

    def _error_for(self, resp: requests.Response, body: Dict[str, Any], endpoint: str) -> ApiError:
        message = (
            body.get("message")
            or body.get("error")
            or f"HTTP {resp.status_code}: {resp.reason}"
        )
        details = body.get("details") or []
        if resp.status_code == 404 or "not found" in str(message).lower():
            return NotFoundError(message, resp.status_code, details)
        if endpoint.endswith("/select") and 400 <= resp.status_code < 500:
            return SelectionRejectedError(message, resp.status_code, details)
        return ApiError(message, resp.status_code, details)

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        mutating = method != "GET"
        retries = self.config.retries
        headers = self._auth_headers() if mutating else {}

        last_err: Optional[Exception] = None
        for attempt in range(1, retries + 1):
            try:
                logger.debug(f"{method} {endpoint} (attempt {attempt}/{retries})")
                resp = self.session.request(
                    method,
                    url,
                    params=params,
                    json=payload,
                    headers=headers,
                    timeout=self.config.timeout_s,
                )
            except requests.ConnectionError as exc:
                # Only a failed connect proves a POST never reached the server.
                if mutating and not isinstance(exc, requests.exceptions.ConnectTimeout):
                    raise TransportError(f"Request to {endpoint} failed: {exc}") from exc
                last_err = exc
                logger.warning(f"Connection failed for {endpoint} (attempt {attempt}/{retries}): {exc}")
                time.sleep(self.config.backoff_s * attempt)
                continue
            except requests.Timeout as exc:
                last_err = exc
                logger.warning(f"Request timeout for {endpoint} (attempt {attempt}/{retries})")
                if mutating:
                    break
                time.sleep(self.config.backoff_s * attempt)
                continue
            except requests.RequestException as exc:
                raise TransportError(f"Request to {endpoint} failed: {exc}") from exc

            if resp.status_code in RETRY_STATUSES and not mutating:
                last_err = ApiError(f"HTTP {resp.status_code}: {resp.reason}", resp.status_code)
                time.sleep(self.config.backoff_s * attempt)
                continue

            try:
                body = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {"data": body}

            if not resp.ok:
                raise self._error_for(resp, body, endpoint)
            if body.get("success") is False:
                raise ApiError(body.get("error") or "Request failed", resp.status_code, body.get("details"))
            return body.get("data")

        raise TransportError(f"Failed after {retries} attempts ({endpoint}). Last error: {last_err}")

    # Drafts

    def get_draft(self, draft_id: str) -> DraftSession:
        return draft_session_from_json(self._request("GET", f"/drafts/{draft_id}"))

    def get_draft_status(self, draft_id: str) -> DraftStatus:
        return draft_status_from_json(self._request("GET", f"/drafts/{draft_id}/status"))

    def start_draft(self, draft_id: str) -> str:
        data = self._request("POST", f"/drafts/{draft_id}/start") or {}
        return str(data.get("message", ""))

    def select_champion(self, draft_id: str, champion_id: str, action: DraftAction) -> str:
        data = self._request(
            "POST",
            f"/drafts/{draft_id}/select",
            payload={"championId": champion_id, "actionType": DraftAction(action).value},
        ) or {}
        return str(data.get("message", ""))

    # Champions

    def get_champions(
        self,
        role: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> ChampionPage:
        params = {
            key: value
            for key, value in (("role", role), ("search", search), ("limit", limit), ("offset", offset))
            if value
        }
        return champion_page_from_json(self._request("GET", "/champions", params=params or None))

    def get_champion(self, champion_id: str) -> Champion:
        return champion_from_json(self._request("GET", f"/champions/{champion_id}"))

    def search_champions(self, query: str, limit: int = 10) -> List[Champion]:
        data = self._request(
            "GET",
            f"/champions/search/{quote(query, safe='')}",
            params={"limit": limit or 10},
        ) or {}
        return [champion_from_json(c) for c in data.get("champions") or []]

    # Queues

    def get_guild_queue(self, guild_id: str, queue_type: Optional[str] = None) -> GuildQueue:
        params = {"queueType": queue_type} if queue_type else None
        return guild_queue_from_json(self._request("GET", f"/queues/guild/{guild_id}", params=params))

    def get_user_queue_status(self, user_id: str, guild_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/queues/user/{user_id}/guild/{guild_id}") or {}

    def join_queue(
        self,
        user_id: str,
        guild_id: str,
        channel_id: str,
        role: str,
        queue_type: Optional[str] = None,
    ) -> str:
        payload = {"userId": user_id, "guildId": guild_id, "channelId": channel_id, "role": role}
        if queue_type:
            payload["queueType"] = queue_type
        data = self._request("POST", "/queues/join", payload=payload) or {}
        return str(data.get("message", ""))

    def leave_queue(self, user_id: str, guild_id: str) -> str:
        data = self._request("POST", "/queues/leave", payload={"userId": user_id, "guildId": guild_id}) or {}
        return str(data.get("message", ""))

    # Users

    def get_user(self, user_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/users/{user_id}") or {}

    def get_user_drafts(
        self,
        user_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[DraftSession]:
        params = {
            key: value
            for key, value in (("limit", limit), ("offset", offset), ("status", status))
            if value
        }
        data = self._request("GET", f"/users/{user_id}/drafts", params=params or None) or {}
        return [draft_session_from_json(d) for d in data.get("drafts") or []]

    def get_user_champion_stats(self, user_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit else None
        data = self._request("GET", f"/users/{user_id}/champions", params=params) or {}
        return list(data.get("champions") or [])

    def health_check(self) -> bool:
        root = self.base_url[: -len("/api")] if self.base_url.endswith("/api") else self.base_url
        try:
            resp = self.session.get(f"{root}/health", timeout=self.config.timeout_s)
        except requests.RequestException as exc:
            logger.warning(f"Health check failed: {exc}")
            return False
        return resp.ok

    def close(self) -> None:
        self.session.close()
