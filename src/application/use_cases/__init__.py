"""Application use cases."""

from .draft_view import (
    DraftViewResult,
    GetDraftViewUseCase,
    JoinDraftResult,
    JoinDraftUseCase,
    SelectChampionResult,
    SelectChampionUseCase,
)

__all__ = [
    "DraftViewResult",
    "GetDraftViewUseCase",
    "JoinDraftResult",
    "JoinDraftUseCase",
    "SelectChampionResult",
    "SelectChampionUseCase",
]
