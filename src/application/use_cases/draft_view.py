"""Use cases for joining drafts, reading views and selecting champions."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from mundodraft.errors import MundoError, NotFoundError
from mundodraft.models import DraftSession, RejectionReason
from mundodraft.reconciler import DraftView, reconcile
from mundodraft.sync import DraftSync, join_draft, join_error_message, run_blocking

from ..ports.draft_service import DraftDataPort


@dataclass
class JoinDraftResult:
    """Result of resolving a join code."""

    success: bool
    session: DraftSession | None = None
    error: str | None = None
    not_found: bool = False
    invalid: bool = False


@dataclass
class DraftViewResult:
    """Result of building a draft view."""

    success: bool
    session: DraftSession | None = None
    view: DraftView | None = None
    error: str | None = None
    not_found: bool = False
    invalid: bool = False


@dataclass
class SelectChampionResult:
    """Result of a ban/pick attempt, with the view re-fetched afterwards."""

    success: bool
    reason: RejectionReason | None = None
    message: str | None = None
    request_sent: bool = False
    view: DraftView | None = None
    not_found: bool = False
    metadata: Dict[str, Any] | None = None


class JoinDraftUseCase:
    """Resolve a Discord join code to a draft session."""

    def __init__(self, draft_service: DraftDataPort):
        self._draft_service = draft_service

    async def execute(self, code: str) -> JoinDraftResult:
        try:
            session = await join_draft(self._draft_service, code)
        except ValueError as e:
            return JoinDraftResult(success=False, error=str(e), invalid=True)
        except NotFoundError as e:
            return JoinDraftResult(success=False, error=join_error_message(e), not_found=True)
        except MundoError as e:
            return JoinDraftResult(success=False, error=join_error_message(e))
        return JoinDraftResult(success=True, session=session)


class GetDraftViewUseCase:
    """Fetch the latest snapshot for a code and reconcile it into a view."""

    def __init__(self, draft_service: DraftDataPort):
        self._draft_service = draft_service

    async def execute(self, code: str) -> DraftViewResult:
        joined = await JoinDraftUseCase(self._draft_service).execute(code)
        if not joined.success:
            return DraftViewResult(
                success=False,
                error=joined.error,
                not_found=joined.not_found,
                invalid=joined.invalid,
            )

        try:
            status = await run_blocking(self._draft_service.get_draft_status, joined.session.unique_id)
        except MundoError as e:
            return DraftViewResult(success=False, session=joined.session, error=str(e))

        return DraftViewResult(
            success=True,
            session=joined.session,
            view=reconcile(status, datetime.now(timezone.utc)),
        )


class SelectChampionUseCase:
    """Ban or pick a champion on behalf of a viewer.

    This orchestrates:
    1. Resolving the code and loading the current snapshot
    2. The local legality gate (no request when the draft is not drafting)
    3. Sending the action derived from the phase
    4. Re-fetching full state whatever the outcome
    """

    def __init__(self, draft_service: DraftDataPort):
        self._draft_service = draft_service

    async def execute(self, code: str, champion_id: str) -> SelectChampionResult:
        joined = await JoinDraftUseCase(self._draft_service).execute(code)
        if not joined.success:
            return SelectChampionResult(success=False, message=joined.error, not_found=joined.not_found)

        sync = DraftSync(self._draft_service, joined.session.unique_id)
        try:
            await sync.refresh()
            if sync.status is None:
                # Nothing to check legality against; this is an outage, not a rejection.
                return SelectChampionResult(
                    success=False,
                    reason=RejectionReason.TRANSPORT_FAILURE,
                    message=f"Failed to load draft: {sync.view.fetch_error}",
                    metadata={"draftId": joined.session.unique_id, "championId": champion_id},
                )
            outcome = await sync.attempt_select(champion_id)
            view = sync.view
        finally:
            await sync.close()

        return SelectChampionResult(
            success=outcome.ok,
            reason=outcome.reason,
            message=outcome.message,
            request_sent=outcome.request_sent,
            view=view,
            metadata={"draftId": joined.session.unique_id, "championId": champion_id},
        )
