"""Prompt and request-body construction for the generation backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from inlinesuggest.config import AppConfig

from .models import Trigger

PROMPT_MARKER = "//prompt:"

_TEMPLATE = """[SYSTEM]
You are a code completion expert. Follow these rules STRICTLY:
1. Only respond if you see "{marker}" in the code
2. Generate ONLY the code requested after "{marker}"
3. Match existing indentation and style
4. No explanations or comments
5. Just provide code nothing else

[USER CODE]
{code}
[/SYSTEM]"""


@dataclass(frozen=True, slots=True)
class GenerationPayload:
    """Body of a non-streaming ``/api/generate`` call."""

    model: str
    prompt: str
    temperature: float
    max_tokens: int
    num_gpu: int

    def as_json(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "prompt": self.prompt,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": False,
            "options": {"num_gpu": self.num_gpu},
        }


def build_prompt(text: str) -> str:
    return _TEMPLATE.format(marker=PROMPT_MARKER, code=text)


def build_payload(trigger: Trigger, config: AppConfig) -> GenerationPayload:
    """Build the request body from the text captured at trigger time."""

    return GenerationPayload(
        model=config.model,
        prompt=build_prompt(trigger.text),
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        num_gpu=config.num_gpu,
    )


__all__ = ["GenerationPayload", "PROMPT_MARKER", "build_payload", "build_prompt"]
