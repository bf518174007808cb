"""Widget library for the Textual UI."""

from __future__ import annotations

from .editor_pane import EditorPane
from .status_bar import StatusBar

__all__ = ["EditorPane", "StatusBar"]
