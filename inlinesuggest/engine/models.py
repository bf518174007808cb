"""Core dataclasses shared by the suggestion engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class CycleState(str, Enum):
    """Lifecycle of one trigger-to-result suggestion cycle."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"
    DELIVERED = "delivered"
    DROPPED = "dropped"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in {CycleState.DELIVERED, CycleState.DROPPED, CycleState.FAILED}


class DropReason(str, Enum):
    """Why a cycle ended quietly without a suggestion."""

    CANCELLED = "cancelled"
    STALE = "stale"
    EMPTY = "empty"


class TriggerKind(str, Enum):
    """How the host asked for a completion."""

    AUTOMATIC = "automatic"
    INVOKE = "invoke"


@dataclass(frozen=True, slots=True)
class Position:
    """Zero-based line/character location in a document."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def empty_at(cls, position: Position) -> Range:
        return cls(start=position, end=position)


@dataclass(frozen=True, slots=True)
class CompletionContext:
    """Extra information the host passes with a completion request."""

    trigger_kind: TriggerKind = TriggerKind.AUTOMATIC


@dataclass(frozen=True, slots=True)
class Trigger:
    """Document snapshot captured when a suggestion opportunity arises."""

    text: str
    version: int
    position: Position
    uri: str | None = None


@dataclass(frozen=True, slots=True)
class GeneratedSuggestion:
    """Cleaned backend text bound to the version it was computed against."""

    text: str
    position: Position
    document_version: int
    uri: str | None = None


@dataclass(frozen=True, slots=True)
class InlineCompletionItem:
    insert_text: str
    range: Range


@dataclass(frozen=True, slots=True)
class InlineCompletionList:
    """Editor-facing result; no items means no suggestion this cycle."""

    items: Tuple[InlineCompletionItem, ...] = ()


@dataclass(frozen=True, slots=True)
class CycleReport:
    """Published to subscribers whenever a cycle reaches a terminal state."""

    version: int
    state: CycleState
    reason: DropReason | None = None
    suggestion: GeneratedSuggestion | None = None
    message: str | None = None


__all__ = [
    "CompletionContext",
    "CycleReport",
    "CycleState",
    "DropReason",
    "GeneratedSuggestion",
    "InlineCompletionItem",
    "InlineCompletionList",
    "Position",
    "Range",
    "Trigger",
    "TriggerKind",
]
