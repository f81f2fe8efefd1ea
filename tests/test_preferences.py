"""Unit tests for data/preferences.py."""

import json
import logging

from data.preferences import (
    DARK_MODE_KEY,
    PINNED_PLAYER_KEY,
    THEME_KEY,
    PreferenceStore,
)


class TestInMemoryStore:
    def test_defaults(self):
        store = PreferenceStore()
        assert store.theme == "light"
        assert store.dark_mode is False
        assert store.pinned_player is None

    def test_set_get_delete(self):
        store = PreferenceStore()
        store.set(THEME_KEY, "dark")
        assert store.get(THEME_KEY) == "dark"
        store.delete(THEME_KEY)
        assert store.get(THEME_KEY, "fallback") == "fallback"

    def test_set_none_deletes(self):
        store = PreferenceStore()
        store.set(PINNED_PLAYER_KEY, "alice")
        store.set(PINNED_PLAYER_KEY, None)
        assert PINNED_PLAYER_KEY not in store.as_dict()

    def test_unknown_theme_falls_back(self):
        store = PreferenceStore()
        store.set(THEME_KEY, "neon")
        assert store.theme == "light"

    def test_dark_mode_follows_theme_when_unset(self):
        store = PreferenceStore()
        store.set(THEME_KEY, "dark")
        assert store.dark_mode is True

    def test_empty_pinned_player_is_absent(self):
        store = PreferenceStore()
        store.set(PINNED_PLAYER_KEY, "")
        assert store.pinned_player is None

    def test_stores_are_independent(self):
        first, second = PreferenceStore(), PreferenceStore()
        first.set(PINNED_PLAYER_KEY, "alice")
        first.set(THEME_KEY, "dark")
        assert second.pinned_player is None
        assert second.theme == "light"


class TestFileStore:
    def test_writes_through(self, tmp_path):
        path = tmp_path / "prefs" / "preferences.json"
        store = PreferenceStore(path)
        store.set(THEME_KEY, "dark")
        store.set(DARK_MODE_KEY, True)
        assert json.loads(path.read_text(encoding="utf-8")) == {"darkMode": True, "theme": "dark"}

    def test_reads_existing(self, tmp_path):
        path = tmp_path / "preferences.json"
        path.write_text(json.dumps({"pinnedPlayer": "bob", "theme": "dark"}), encoding="utf-8")
        store = PreferenceStore(path)
        assert store.pinned_player == "bob"
        assert store.theme == "dark"

    def test_corrupt_file_treated_as_empty(self, tmp_path, caplog):
        path = tmp_path / "preferences.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="data.preferences"):
            store = PreferenceStore(path)
        assert store.as_dict() == {}
        assert "unreadable" in caplog.text

    def test_non_object_file_treated_as_empty(self, tmp_path):
        path = tmp_path / "preferences.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert PreferenceStore(path).as_dict() == {}

    def test_write_error_keeps_value(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory", encoding="utf-8")
        store = PreferenceStore(blocker / "preferences.json")
        with caplog.at_level(logging.WARNING, logger="data.preferences"):
            store.set(THEME_KEY, "dark")
        assert store.theme == "dark"
        assert "Could not save" in caplog.text
