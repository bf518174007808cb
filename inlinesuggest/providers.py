"""Command palette providers for suggestion actions."""

from __future__ import annotations

from textual.command import DiscoveryHit, Hit, Hits, Provider
from textual.types import IgnoreReturnCallbackType

_COMMANDS: tuple[tuple[str, str, str], ...] = (
    ("Apply AI suggestion", "apply_suggestion", "Insert the latest suggestion at its position."),
    ("Dismiss AI suggestion", "dismiss_suggestion", "Cancel the pending request and discard the suggestion."),
    ("Request AI suggestion now", "request_suggestion", "Start a suggestion cycle at the cursor."),
)


class SuggestionCommandProvider(Provider):
    """Expose the suggestion actions to the command palette."""

    async def search(self, query: str) -> Hits:
        matcher = self.matcher(query)
        for label, action, help_text in self._available():
            score = matcher.match(label)
            if score > 0:
                yield Hit(
                    score=score,
                    match_display=matcher.highlight(label),
                    command=self._build_callback(action),
                    help=help_text,
                )

    async def discover(self) -> Hits:
        for label, action, help_text in self._available():
            yield DiscoveryHit(
                display=label,
                command=self._build_callback(action),
                help=help_text,
            )

    def _available(self) -> tuple[tuple[str, str, str], ...]:
        return tuple(entry for entry in _COMMANDS if hasattr(self.app, f"action_{entry[1]}"))

    def _build_callback(self, action: str) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            handler = getattr(self.app, f"action_{action}", None)
            if handler is None:
                return
            handler()

        return _run


__all__ = ["SuggestionCommandProvider"]
