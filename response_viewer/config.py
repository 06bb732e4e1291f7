"""Runtime configuration for the viewer front ends."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from .view import THEMES_PER_ROW

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None or val.strip() == "":
        return default
    lowered = val.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return default


def _env_level(name: str, default: str) -> str:
    val = (os.getenv(name) or "").strip().upper()
    return val if val in LOG_LEVELS else default


@dataclass
class ViewerConfig:
    pretty: bool = field(default_factory=lambda: _env_bool("RESPONSE_VIEWER_PRETTY", True))
    strict_vocabulary: bool = field(
        default_factory=lambda: _env_bool("RESPONSE_VIEWER_STRICT_VOCABULARY", False)
    )
    log_level: str = field(default_factory=lambda: _env_level("RESPONSE_VIEWER_LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_bool("RESPONSE_VIEWER_LOG_JSON", False))
    font_size: int = field(default_factory=lambda: _env_int("RESPONSE_VIEWER_FONT_SIZE", 14) or 14)
    themes_per_row: int = field(
        default_factory=lambda: max(1, _env_int("RESPONSE_VIEWER_THEMES_PER_ROW", THEMES_PER_ROW) or THEMES_PER_ROW)
    )

    def with_overrides(self, **overrides: object) -> "ViewerConfig":
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        unknown = set(values) - set(self.__dataclass_fields__)
        if unknown:
            raise TypeError(f"Unknown config field(s): {', '.join(sorted(unknown))}")
        merged = {**self.__dict__, **values}
        if isinstance(merged.get("log_level"), str):
            merged["log_level"] = str(merged["log_level"]).upper()
        return ViewerConfig(**merged)
