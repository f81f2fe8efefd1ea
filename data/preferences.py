"""Key-value store for user preferences (theme, dark mode, pinned player).

Values are kept in memory and written through to a small JSON file on every
change.  A missing or unreadable file behaves like an empty store; write
errors are logged and the in-memory value is kept for the session.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
DARK_MODE_KEY = "darkMode"
PINNED_PLAYER_KEY = "pinnedPlayer"

DEFAULT_THEME = "light"
THEMES: tuple[str, ...] = ("light", "dark")


class PreferenceStore:
    """JSON-file backed preference store.

    ``path=None`` gives a purely in-memory store (used by tests and when no
    preference file is configured).
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path).expanduser() if path is not None else None
        self._values: dict[str, Any] = self._read()

    def _read(self) -> dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: top level is not an object", self.path)
            return {}
        return data

    def _write(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save preferences to %s: %s", self.path, exc)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if value is None:
            self.delete(key)
            return
        if self._values.get(key) == value:
            return
        self._values[key] = value
        self._write()

    def delete(self, key: str) -> None:
        if key in self._values:
            del self._values[key]
            self._write()

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    # --- typed accessors ----------------------------------------------------

    @property
    def theme(self) -> str:
        value = self.get(THEME_KEY, DEFAULT_THEME)
        return value if value in THEMES else DEFAULT_THEME

    @property
    def dark_mode(self) -> bool:
        return bool(self.get(DARK_MODE_KEY, self.theme == "dark"))

    @property
    def pinned_player(self) -> str | None:
        value = self.get(PINNED_PLAYER_KEY)
        return value if isinstance(value, str) and value else None
