"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

DEFAULTS: dict[str, Any] = {
    "server": {"base_url": "http://localhost:1080", "timeout_seconds": 10.0},
    "layout": {"max_row_height": 200, "thumbnail_spacing": 0},
    "lightbox": {"width_ratio": 0.75, "height_ratio": 0.9, "iterative_fit": False},
    "logging": {"level": "INFO"},
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class JsonSettings:
    """JSON settings reader with dotted-key access layered over `DEFAULTS`."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"settings.json must contain an object: {self._path}")
        self._data = _merge(DEFAULTS, loaded)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_float(self, key: str, default: float) -> float:
        """Return `key` as a float, falling back to `default` on bad values."""
        try:
            return float(self.get(key, default))
        except (ValueError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Override dotted `key` in memory (e.g. from command-line flags)."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = value
