"""Tests for the editor pane wiring between the text area and the coordinator."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from inlinesuggest.engine import (
    BufferDocument,
    CancellationToken,
    CompletionContext,
    InlineCompletionList,
    Position,
    TriggerKind,
    apply_suggestion,
    package,
)
from inlinesuggest.widgets import EditorPane


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class _StubCoordinator:
    """Records provider calls and answers with an empty list."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, Position, CompletionContext | None, CancellationToken | None]] = []

    async def provide_inline_completion_items(
        self,
        document: BufferDocument,
        position: Position,
        context: CompletionContext | None = None,
        token: CancellationToken | None = None,
    ) -> InlineCompletionList:
        self.calls.append((document.version, position, context, token))
        return InlineCompletionList()


class _StubTextArea:
    """Just enough of ``TextArea`` for the pane: text, cursor, and insert."""

    def __init__(self, text: str = "", cursor: tuple[int, int] = (0, 0)) -> None:
        self.text = text
        self.cursor_location = cursor

    def insert(self, text: str, location: tuple[int, int]) -> None:
        lines = self.text.split("\n")
        row, column = location
        lines[row] = lines[row][:column] + text + lines[row][column:]
        self.text = "\n".join(lines)


def _pane(text: str = "", cursor: tuple[int, int] = (0, 0)) -> tuple[EditorPane, list[Any], _StubCoordinator]:
    coordinator = _StubCoordinator()
    pane = EditorPane(coordinator, BufferDocument(text, uri="main.py"))  # type: ignore[arg-type]
    pane._text_area = _StubTextArea(text, cursor)  # type: ignore[assignment]
    workers: list[Any] = []

    def _run_worker(work: Any, **_kwargs: Any) -> None:
        workers.append(work)

    pane.run_worker = _run_worker  # type: ignore[method-assign]
    return pane, workers, coordinator


def _selection_event(end: tuple[int, int]) -> Any:
    return SimpleNamespace(selection=SimpleNamespace(start=end, end=end))


@pytest.mark.anyio
async def test_text_change_bumps_version_and_triggers_suggestion() -> None:
    pane, workers, coordinator = _pane("a", cursor=(0, 2))
    pane._text_area.text = "ab"  # type: ignore[union-attr]

    pane.on_text_area_changed(SimpleNamespace(text_area=pane._text_area))  # type: ignore[arg-type]
    assert pane.document.get_text() == "ab"
    assert pane.document.version == 2
    assert len(workers) == 1
    await workers[0]

    version, position, context, token = coordinator.calls[0]
    assert version == 2
    assert position == Position(0, 2)
    assert context is not None and context.trigger_kind is TriggerKind.AUTOMATIC
    assert token is not None and not token.is_cancellation_requested


def test_new_request_cancels_previous_token() -> None:
    pane, workers, _coordinator = _pane("a", cursor=(0, 1))

    pane.request_suggestion()
    first = pane._token_source  # type: ignore[attr-defined]
    pane.request_suggestion(TriggerKind.INVOKE)

    assert first is not None and first.token.is_cancellation_requested
    assert pane._token_source is not first  # type: ignore[attr-defined]
    for work in workers:
        work.close()


def test_cursor_moving_away_fires_cancellation() -> None:
    pane, workers, _coordinator = _pane("abc", cursor=(0, 3))
    pane.request_suggestion()
    source = pane._token_source  # type: ignore[attr-defined]
    assert source is not None

    pane.on_text_area_selection_changed(_selection_event((0, 3)))
    assert not source.token.is_cancellation_requested

    pane.on_text_area_selection_changed(_selection_event((0, 1)))
    assert source.token.is_cancellation_requested
    assert pane._token_source is None  # type: ignore[attr-defined]
    workers[0].close()


def test_cancel_suggestion_fires_token() -> None:
    pane, workers, _coordinator = _pane("x", cursor=(0, 1))
    pane.request_suggestion()
    source = pane._token_source  # type: ignore[attr-defined]

    pane.cancel_suggestion()

    assert source is not None and source.token.is_cancellation_requested
    workers[0].close()


def test_apply_inserts_through_pane_and_keeps_document_in_step() -> None:
    pane, _workers, _coordinator = _pane("const a = 1;\n", cursor=(1, 0))
    suggestion = package("log(a);", Position(1, 0), pane.document.version, uri="main.py")

    applied = apply_suggestion(suggestion, pane)

    assert applied is True
    assert pane._text_area.text == "const a = 1;\nlog(a);"  # type: ignore[union-attr]
    assert pane.document.get_text() == "const a = 1;\nlog(a);"
    assert pane.document.version == 2


def test_apply_through_pane_skips_stale_suggestion() -> None:
    pane, _workers, _coordinator = _pane("a", cursor=(0, 1))
    suggestion = package("b", Position(0, 1), pane.document.version, uri="main.py")
    pane.document.set_text("ab")

    assert apply_suggestion(suggestion, pane) is False
    assert pane._text_area.text == "a"  # type: ignore[union-attr]
