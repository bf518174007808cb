"""Document and editor contracts the provider works against."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import Position


@runtime_checkable
class TextDocument(Protocol):
    """Live view of an open document; ``version`` grows on every edit."""

    @property
    def uri(self) -> str: ...

    @property
    def version(self) -> int: ...

    def get_text(self) -> str: ...


@runtime_checkable
class ActiveEditor(Protocol):
    """Editor that currently owns the focus and can insert text."""

    @property
    def document(self) -> TextDocument: ...

    def insert(self, position: Position, text: str) -> None: ...


class BufferDocument:
    """In-memory document with a monotonically increasing version."""

    def __init__(self, text: str = "", *, uri: str = "untitled", version: int = 1) -> None:
        self._text = text
        self._uri = uri
        self._version = version

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def version(self) -> int:
        return self._version

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> int:
        """Replace the buffer contents and return the new version."""

        if text != self._text:
            self._text = text
            self._version += 1
        return self._version

    def insert(self, position: Position, text: str) -> int:
        offset = self.offset_at(position)
        return self.set_text(self._text[:offset] + text + self._text[offset:])

    def offset_at(self, position: Position) -> int:
        """Translate a line/character position into a string offset, clamped to the buffer."""

        lines = self._text.split("\n")
        line = min(max(position.line, 0), len(lines) - 1)
        offset = sum(len(entry) + 1 for entry in lines[:line])
        return offset + min(max(position.character, 0), len(lines[line]))


class BufferEditor:
    """Minimal :class:`ActiveEditor` over a :class:`BufferDocument`."""

    def __init__(self, document: BufferDocument) -> None:
        self._document = document

    @property
    def document(self) -> BufferDocument:
        return self._document

    def insert(self, position: Position, text: str) -> None:
        self._document.insert(position, text)


__all__ = ["ActiveEditor", "BufferDocument", "BufferEditor", "TextDocument"]
