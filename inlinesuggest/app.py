"""Textual application entry point for inlinesuggest."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from .config import AppConfig, load_config
from .engine import (
    BufferDocument,
    CycleReport,
    CycleState,
    GeneratedSuggestion,
    SuggestionCoordinator,
    TriggerKind,
    apply_suggestion,
)
from .providers import SuggestionCommandProvider
from .widgets import EditorPane, StatusBar

LOG = logging.getLogger(__name__)


def _load_app_config() -> AppConfig:
    """Load configuration with a small wrapper for future overrides."""

    return load_config()


class InlineSuggestApp(App[None]):
    """Terminal editor that offers backend-generated code at the cursor."""

    TITLE = "inlinesuggest"
    COMMANDS = App.COMMANDS | {SuggestionCommandProvider}
    CSS = """
    Screen {
        layout: vertical;
    }
    #editor-pane {
        margin: 0 1;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        Binding("ctrl+l", "apply_suggestion", "Apply Suggestion", priority=True),
        Binding("ctrl+g", "dismiss_suggestion", "Dismiss", priority=True),
        Binding("ctrl+s", "save", "Save", priority=True),
        ("ctrl+p", "command_palette", "Command Palette"),
    ]

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._config = _load_app_config()
        self._path = path
        self._document = BufferDocument(_read_buffer(path), uri=str(path) if path else "untitled")
        self._status_bar = StatusBar(model=self._config.model)
        self._coordinator = SuggestionCoordinator(
            self._config,
            indicator=self._status_bar,
            report_error=self._report_backend_error,
        )
        self._report_unsubscribe: Callable[[], None] | None = self._coordinator.subscribe(
            self._handle_cycle_report
        )
        self._ready_suggestion: GeneratedSuggestion | None = None
        self._editor_pane: EditorPane | None = None
        self._pending_notifications: list[tuple[str, str]] = []

    def compose(self) -> ComposeResult:
        """Compose the root layout."""

        yield Header()
        editor_pane = EditorPane(self._coordinator, self._document)
        self._editor_pane = editor_pane
        yield editor_pane
        yield self._status_bar
        yield Footer()

    async def on_mount(self) -> None:
        self._flush_pending_notifications()

    @property
    def coordinator(self) -> SuggestionCoordinator:
        """Expose the coordinator for tests."""

        return self._coordinator

    @property
    def document(self) -> BufferDocument:
        return self._document

    @property
    def ready_suggestion(self) -> GeneratedSuggestion | None:
        """Latest delivered suggestion waiting for the apply action."""

        return self._ready_suggestion

    def action_apply_suggestion(self) -> None:
        suggestion = self._ready_suggestion
        if suggestion is None:
            self._safe_notify("No suggestion to apply.", severity="warning")
            return
        self._ready_suggestion = None
        if not apply_suggestion(suggestion, self._editor_pane):
            self._safe_notify("Document changed; suggestion discarded.", severity="warning")

    def action_dismiss_suggestion(self) -> None:
        self._ready_suggestion = None
        if self._editor_pane is not None:
            self._editor_pane.cancel_suggestion()
        self._coordinator.cancel_pending()

    def action_request_suggestion(self) -> None:
        if self._editor_pane is None:
            return
        self._editor_pane.request_suggestion(TriggerKind.INVOKE)

    def action_save(self) -> None:
        if self._path is None:
            self._safe_notify("Buffer has no file to save to.", severity="warning")
            return
        try:
            self._path.write_text(self._document.get_text())
        except OSError as exc:
            LOG.exception("Failed to save buffer", extra={"path": str(self._path)})
            self._safe_notify(f"Save failed: {exc}", severity="error")
            return
        self._safe_notify(f"Saved {self._path}", severity="information")

    async def _shutdown(self) -> None:
        if self._report_unsubscribe:
            self._report_unsubscribe()
            self._report_unsubscribe = None
        await self._coordinator.aclose()
        await super()._shutdown()

    def _handle_cycle_report(self, report: CycleReport) -> None:
        self._status_bar.show_report(report)
        if report.state is CycleState.DELIVERED and report.suggestion is not None:
            self._ready_suggestion = report.suggestion
            self._safe_notify("AI Suggestion Ready! Press ctrl+l to apply.", severity="information")

    def _report_backend_error(self, message: str) -> None:
        self._safe_notify(f"AI Error: {message}", severity="error")

    def _safe_notify(self, message: str, *, severity: str = "information") -> None:
        if self.is_running:
            try:
                self.notify(message, severity=severity)
            except Exception:
                LOG.exception("Failed to display notification", extra={"text": message})
        else:
            self._pending_notifications.append((message, severity))

    def _flush_pending_notifications(self) -> None:
        if not self._pending_notifications:
            return
        pending = list(self._pending_notifications)
        self._pending_notifications.clear()
        for message, severity in pending:
            try:
                self.notify(message, severity=severity)
            except Exception:
                LOG.exception("Failed to display queued notification", extra={"text": message})


def _read_buffer(path: Path | None) -> str:
    if path is None or not path.exists():
        return ""
    return path.read_text()


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="inlinesuggest", description=__doc__)
    parser.add_argument("path", nargs="?", type=Path, help="File to open (created on save).")
    parser.add_argument("--log-file", type=Path, help="Write debug logs to this file.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Invoke the Textual application."""

    args = _parse_args(argv)
    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    InlineSuggestApp(args.path).run()


if __name__ == "__main__":
    main()
