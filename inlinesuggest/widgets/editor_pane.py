"""Editor surface that feeds every edit into the suggestion coordinator."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Static, TextArea

from inlinesuggest.engine import (
    BufferDocument,
    CancellationTokenSource,
    CompletionContext,
    InlineCompletionList,
    Position,
    SuggestionCoordinator,
    TriggerKind,
)

_PREVIEW_LIMIT = 80


class EditorPane(Container):
    """Text editor acting as the active editor for inline suggestions."""

    DEFAULT_CSS = """
    EditorPane {
        layout: vertical;
        border: round $primary 40%;
        padding: 0 1;
        height: 1fr;
        background: $surface;
    }

    EditorPane .panel-title {
        text-style: bold;
    }

    EditorPane:focus-within {
        border: round $primary;
    }

    EditorPane TextArea {
        height: 1fr;
    }

    #suggestion-preview {
        height: auto;
        min-height: 1;
        color: $text-muted;
        border-top: solid $surface-darken-2;
    }
    """

    def __init__(self, coordinator: SuggestionCoordinator, document: BufferDocument) -> None:
        super().__init__(id="editor-pane")
        self._coordinator = coordinator
        self._document = document
        self._text_area: TextArea | None = None
        self._preview: Static | None = None
        self._token_source: CancellationTokenSource | None = None
        self._trigger_location: tuple[int, int] | None = None

    @property
    def document(self) -> BufferDocument:
        return self._document

    def compose(self) -> ComposeResult:
        yield Static(self._document.uri, classes="panel-title")
        yield TextArea(
            self._document.get_text(),
            id="editor",
            show_line_numbers=True,
            tab_behavior="indent",
        )
        yield Static("", id="suggestion-preview")

    async def on_mount(self) -> None:
        self._text_area = self.query_one("#editor", TextArea)
        self._preview = self.query_one("#suggestion-preview", Static)
        self._text_area.focus()

    def on_unmount(self) -> None:
        self.cancel_suggestion()

    def insert(self, position: Position, text: str) -> None:
        """Insert ``text`` at ``position`` and keep the document in step."""

        if self._text_area is None:
            return
        self._text_area.insert(text, (position.line, position.character))
        self._document.set_text(self._text_area.text)
        self.clear_preview()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._document.set_text(event.text_area.text)
        self.request_suggestion()

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self._trigger_location is None:
            return
        if event.selection.end != self._trigger_location:
            self.cancel_suggestion()

    def request_suggestion(self, kind: TriggerKind = TriggerKind.AUTOMATIC) -> None:
        """Start a new suggestion cycle at the cursor, superseding the last one."""

        if self._text_area is None:
            return
        if self._token_source is not None:
            self._token_source.cancel()
        source = CancellationTokenSource()
        self._token_source = source
        row, column = self._text_area.cursor_location
        self._trigger_location = (row, column)
        self.clear_preview()
        self.run_worker(
            self._provide(Position(row, column), CompletionContext(trigger_kind=kind), source),
            group="inline-suggest",
            exit_on_error=False,
        )

    def cancel_suggestion(self) -> None:
        """Fire the host cancellation signal for the current opportunity."""

        source = self._token_source
        self._token_source = None
        self._trigger_location = None
        if source is not None:
            source.cancel()
        self.clear_preview()

    def clear_preview(self) -> None:
        if self._preview:
            self._preview.update("")

    async def _provide(
        self,
        position: Position,
        context: CompletionContext,
        source: CancellationTokenSource,
    ) -> None:
        result = await self._coordinator.provide_inline_completion_items(
            self._document,
            position,
            context,
            source.token,
        )
        source.dispose()
        if source is not self._token_source:
            return
        self._token_source = None
        self._trigger_location = None
        self._render_items(result)

    def _render_items(self, result: InlineCompletionList) -> None:
        if not self._preview or not result.items:
            return
        text = result.items[0].insert_text
        first_line = text.splitlines()[0] if text else ""
        if len(first_line) > _PREVIEW_LIMIT:
            first_line = first_line[: _PREVIEW_LIMIT - 1] + "…"
        extra = text.count("\n")
        suffix = f" (+{extra} more line{'s' if extra != 1 else ''})" if extra else ""
        self._preview.update(f"Suggestion: {first_line}{suffix} · ctrl+l to apply")


__all__ = ["EditorPane"]
