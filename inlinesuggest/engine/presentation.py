"""Turns raw backend output into insertable suggestions and applies them."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from .document import ActiveEditor
from .errors import MalformedResponse
from .models import GeneratedSuggestion, InlineCompletionItem, InlineCompletionList, Position, Range

LOG = logging.getLogger(__name__)

_FENCE_OPENER = re.compile(r"\A```[^\n]*\n")
_FENCE_CLOSER = re.compile(r"(?:\A|\n)```\s*\Z")


def clean(raw_text: str) -> str:
    """Strip one leading fence opener line and one trailing fence, then trim.

    A reply made only of fences cleans to an empty string.
    """

    text = _FENCE_OPENER.sub("", raw_text, count=1)
    text = _FENCE_CLOSER.sub("", text, count=1)
    return text.strip()


def extract_text(data: Any) -> str:
    """Pull the generated text out of a decoded ``/api/generate`` body."""

    if not isinstance(data, Mapping):
        raise MalformedResponse(f"Expected a JSON object, got {type(data).__name__}")
    text = data.get("response")
    if text is None:
        return ""
    if not isinstance(text, str):
        raise MalformedResponse(f"Expected 'response' to be a string, got {type(text).__name__}")
    return text


def package(
    clean_text: str,
    position: Position,
    document_version: int,
    *,
    uri: str | None = None,
) -> GeneratedSuggestion:
    return GeneratedSuggestion(text=clean_text, position=position, document_version=document_version, uri=uri)


def to_completion_list(suggestion: GeneratedSuggestion) -> InlineCompletionList:
    item = InlineCompletionItem(insert_text=suggestion.text, range=Range.empty_at(suggestion.position))
    return InlineCompletionList(items=(item,))


def apply_suggestion(suggestion: GeneratedSuggestion, editor: ActiveEditor | None) -> bool:
    """Insert the suggestion if the editor still shows the version it was computed for.

    Returns ``False`` (and leaves the document untouched) when there is no
    editor, it shows another document, or the document changed since.
    """

    if editor is None:
        return False
    document = editor.document
    if suggestion.uri is not None and document.uri != suggestion.uri:
        return False
    if document.version != suggestion.document_version:
        LOG.debug(
            "Skipping stale suggestion",
            extra={"suggested_for": suggestion.document_version, "current": document.version},
        )
        return False
    editor.insert(suggestion.position, suggestion.text)
    return True


__all__ = ["apply_suggestion", "clean", "extract_text", "package", "to_completion_list"]
