"""App configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, Field

CONFIG_FILE = Path.home() / ".config" / "inlinesuggest" / "config.toml"

_STRING_KEYS = ("backend_url", "generate_path", "model")
_INT_KEYS = ("debounce_ms", "timeout_ms", "max_tokens", "num_gpu")
_FLOAT_KEYS = ("temperature",)


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    backend_url: str = "http://localhost:11434"
    generate_path: str = "/api/generate"
    model: str = "deepseek-coder:6.7b"
    debounce_ms: int = Field(default=5000, ge=0)
    timeout_ms: int = Field(default=500_000, gt=0)
    max_tokens: int = Field(default=150, gt=0)
    temperature: float = Field(default=0.7, ge=0.0)
    num_gpu: int = Field(default=0, ge=0)

    @property
    def endpoint(self) -> str:
        """Full URL of the generation endpoint."""

        return self.backend_url.rstrip("/") + "/" + self.generate_path.lstrip("/")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()
    return AppConfig(**data)


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if not isinstance(raw, dict):
        return data
    for key in _STRING_KEYS:
        value = raw.get(key)
        if isinstance(value, str) and value:
            data[key] = value
    for key in _INT_KEYS:
        value = raw.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            data[key] = value
    for key in _FLOAT_KEYS:
        value = raw.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0:
            data[key] = float(value)
    if data.get("timeout_ms") == 0:
        data.pop("timeout_ms")
    if data.get("max_tokens") == 0:
        data.pop("max_tokens")
    return data
