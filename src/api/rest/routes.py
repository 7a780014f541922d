"""REST API routes for drafts, champions and queues."""

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from mundodraft.champions import champion_query
from mundodraft.config import CHAMPION_PAGE_SIZE, DEFAULT_QUEUE_TYPE
from mundodraft.errors import MundoError, NotFoundError
from mundodraft.models import RejectionReason
from mundodraft.queue import summarize_queue
from mundodraft.sync import run_blocking

from ..transformers.view_transformer import (
    transform_champions_to_frontend,
    transform_queue_to_frontend,
    transform_session_to_frontend,
    transform_view_to_frontend,
)
from ...application.ports.draft_service import DraftDataPort
from ...application.use_cases.draft_view import (
    GetDraftViewUseCase,
    JoinDraftUseCase,
    SelectChampionUseCase,
)
from ...infrastructure.adapters.mundo_api_adapter import MundoApiAdapter

router = APIRouter(prefix="/api", tags=["drafts"])


@lru_cache(maxsize=1)
def get_draft_service() -> DraftDataPort:
    """Shared adapter; overridden in tests via ``app.dependency_overrides``."""
    return MundoApiAdapter()


class SelectRequest(BaseModel):
    """Request body for a ban/pick."""

    champion_id: str = Field(
        ...,
        alias="championId",
        description="Champion to ban or pick",
        min_length=1,
    )

    class Config:
        populate_by_name = True


def _error(status_code: int, code: str, message: str, details: dict | None = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            }
        },
    )


@router.get("/drafts/{code}")
async def join_draft(code: str, service: DraftDataPort = Depends(get_draft_service)):
    """Resolve a join code to a draft session.

    Args:
        code: Draft code from Discord (case-insensitive)

    Returns:
        Draft session in frontend format
    """
    result = await JoinDraftUseCase(service).execute(code)
    if result.invalid:
        raise _error(400, "INVALID_REQUEST", result.error or "Invalid draft code")
    if result.not_found:
        raise _error(404, "DRAFT_NOT_FOUND", result.error, {"code": code})
    if not result.success:
        raise _error(502, "UPSTREAM_UNAVAILABLE", result.error or "Failed to join draft")
    return transform_session_to_frontend(result.session)


@router.get("/drafts/{code}/view")
async def get_draft_view(code: str, service: DraftDataPort = Depends(get_draft_service)):
    """Get the reconciled view of a draft's current state."""
    result = await GetDraftViewUseCase(service).execute(code)
    if result.invalid:
        raise _error(400, "INVALID_REQUEST", result.error or "Invalid draft code")
    if result.not_found:
        raise _error(404, "DRAFT_NOT_FOUND", result.error, {"code": code})
    if not result.success:
        raise _error(502, "UPSTREAM_UNAVAILABLE", result.error or "Failed to load draft")
    return transform_view_to_frontend(result.view)


@router.post("/drafts/{code}/select")
async def select_champion(
    code: str,
    request: SelectRequest,
    service: DraftDataPort = Depends(get_draft_service),
):
    """Ban or pick a champion for the current turn.

    The action (BAN or PICK) is derived from the draft's current phase. The
    response always carries the view re-fetched after the attempt.
    """
    result = await SelectChampionUseCase(service).execute(code, request.champion_id)
    if result.not_found:
        raise _error(404, "DRAFT_NOT_FOUND", result.message, {"code": code})
    if result.view is None:
        raise _error(502, "UPSTREAM_UNAVAILABLE", result.message or "Failed to join draft")
    if not result.success:
        status_code = 502 if result.reason == RejectionReason.TRANSPORT_FAILURE else 409
        error_code = "UPSTREAM_UNAVAILABLE" if status_code == 502 else "SELECTION_REJECTED"
        raise _error(
            status_code,
            error_code,
            result.message or "Failed to select champion",
            {
                "reason": result.reason.value if result.reason else None,
                "requestSent": result.request_sent,
                "view": transform_view_to_frontend(result.view),
            },
        )
    return {
        "success": True,
        "view": transform_view_to_frontend(result.view),
    }


@router.get("/champions")
async def list_champions(
    role: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: int = Query(CHAMPION_PAGE_SIZE, ge=1, le=200),
    offset: int = Query(0, ge=0),
    draft: Optional[str] = Query(None, description="Draft code to flag taken champions"),
    service: DraftDataPort = Depends(get_draft_service),
):
    """List champions for the picker or the stats page."""
    try:
        params = champion_query(role, search, limit)
        page = await run_blocking(service.get_champions, offset=offset or None, **params)
        status = None
        if draft:
            view_result = await GetDraftViewUseCase(service).execute(draft)
            if view_result.success:
                status = view_result.view.status
    except NotFoundError as e:
        raise _error(404, "NOT_FOUND", e.message)
    except MundoError as e:
        raise _error(502, "UPSTREAM_UNAVAILABLE", f"Failed to load champions: {e}")

    return {
        "champions": transform_champions_to_frontend(page.champions, status),
        "pagination": {
            "total": page.total,
            "limit": page.limit,
            "offset": page.offset,
            "hasMore": page.has_more,
        },
    }


@router.get("/queues/{guild_id}")
async def get_queue_status(
    guild_id: str,
    queue_type: str = Query(DEFAULT_QUEUE_TYPE, alias="queueType"),
    service: DraftDataPort = Depends(get_draft_service),
):
    """Get per-role queue fill for a guild."""
    try:
        queue = await run_blocking(service.get_guild_queue, guild_id, queue_type)
    except MundoError as e:
        raise _error(502, "UPSTREAM_UNAVAILABLE", "Failed to load queue status", {"reason": str(e)})
    return transform_queue_to_frontend(summarize_queue(queue))
