"""Suggestion engine: debounce, backend channel, coordinator, and presentation."""

from __future__ import annotations

from .cancellation import CancellationToken, CancellationTokenSource
from .channel import BusyIndicator, NullBusyIndicator, RequestChannel, RequestHandle
from .coordinator import SuggestionCoordinator
from .debounce import DebounceGate, DebounceHandle
from .document import ActiveEditor, BufferDocument, BufferEditor, TextDocument
from .errors import (
    BackendError,
    BackendTimeout,
    EmptySuggestion,
    MalformedResponse,
    RequestCancelled,
    StaleSuggestion,
    SuggestionError,
)
from .models import (
    CompletionContext,
    CycleReport,
    CycleState,
    DropReason,
    GeneratedSuggestion,
    InlineCompletionItem,
    InlineCompletionList,
    Position,
    Range,
    Trigger,
    TriggerKind,
)
from .presentation import apply_suggestion, clean, package

__all__ = [
    "ActiveEditor",
    "BackendError",
    "BackendTimeout",
    "BufferDocument",
    "BufferEditor",
    "BusyIndicator",
    "CancellationToken",
    "CancellationTokenSource",
    "CompletionContext",
    "CycleReport",
    "CycleState",
    "DebounceGate",
    "DebounceHandle",
    "DropReason",
    "EmptySuggestion",
    "GeneratedSuggestion",
    "InlineCompletionItem",
    "InlineCompletionList",
    "MalformedResponse",
    "NullBusyIndicator",
    "Position",
    "Range",
    "RequestCancelled",
    "RequestChannel",
    "RequestHandle",
    "StaleSuggestion",
    "SuggestionCoordinator",
    "SuggestionError",
    "TextDocument",
    "Trigger",
    "TriggerKind",
    "apply_suggestion",
    "clean",
    "package",
]
