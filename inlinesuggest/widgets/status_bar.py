"""Status bar widget doubling as the busy indicator for backend calls."""

from __future__ import annotations

from textual.widgets import Static

from inlinesuggest.engine import CycleReport, CycleState

_BUSY_LABEL = "⟳ AI Coding"
_BUSY_TOOLTIP = "Generating code suggestions..."


class StatusBar(Static):
    """Compact status strip rendered above Textual's footer."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        padding: 0 1;
        background: $surface-darken-3;
        color: $text;
    }

    StatusBar.busy {
        color: $warning;
    }
    """

    def __init__(self, *, model: str) -> None:
        super().__init__(f"Model: {model} | Idle", id="status-bar")
        self._model = model
        self._busy = False
        self._last_outcome = "Idle"

    def on_mount(self) -> None:
        self._render_status()

    @property
    def busy(self) -> bool:
        return self._busy

    def show(self) -> None:
        self._busy = True
        self._render_status()

    def hide(self) -> None:
        self._busy = False
        self._render_status()

    def show_report(self, report: CycleReport) -> None:
        """Summarize how the last suggestion cycle ended."""

        if report.state is CycleState.DELIVERED:
            outcome = "Suggestion ready"
        elif report.state is CycleState.FAILED:
            outcome = "Backend error"
        elif report.reason is not None:
            outcome = f"No suggestion ({report.reason.value})"
        else:
            outcome = "No suggestion"
        self._last_outcome = f"{outcome} · v{report.version}"
        self._render_status()

    def _render_status(self) -> None:
        parts = [f"Model: {self._model}"]
        if self._busy:
            parts.append(_BUSY_LABEL)
        parts.append(self._last_outcome)
        if not self.is_mounted:
            return
        self.set_class(self._busy, "busy")
        self.tooltip = _BUSY_TOOLTIP if self._busy else None
        self.update(" | ".join(parts))


__all__ = ["StatusBar"]
