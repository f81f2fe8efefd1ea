"""Application state owner: one controller, named commands, derived views.

Every user action maps to one command passed to ``dispatch``.  The
controller mutates its ViewState / ComparisonSet / preferences, then calls
each subscriber with the command name.  ``derive`` rebuilds every view the
UI needs from scratch; the returned objects are never updated afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd

from data.loader import PlayerRecord, get_record
from data.preferences import (
    DARK_MODE_KEY,
    PINNED_PLAYER_KEY,
    THEME_KEY,
    THEMES,
    PreferenceStore,
)
from stats.aggregates import (
    OutcomeTotals,
    Statistics,
    aggregate,
    outcome_totals,
    rating_histogram,
    scatter_points,
    win_rate_histogram,
)
from stats.comparison import ComparisonSet
from stats.view_state import (
    ViewState,
    apply_sort_preset,
    set_pinned,
    set_search_term,
    set_sort,
    toggle_column_sort,
    visible_rows,
)

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


@dataclass(frozen=True)
class DerivedViews:
    """Everything the UI renders for one state snapshot."""

    visible: pd.DataFrame
    statistics: Statistics
    win_rate_counts: list[int]
    rating_counts: list[int]
    totals: OutcomeTotals
    scatter: pd.DataFrame


class LeaderboardController:
    def __init__(self, dataset: pd.DataFrame, preferences: PreferenceStore | None = None) -> None:
        self.dataset = dataset
        self.preferences = preferences if preferences is not None else PreferenceStore()
        self.view = ViewState(pinned_player=self.preferences.pinned_player)
        self.comparison = ComparisonSet()
        self._listeners: list[Listener] = []
        self._commands: dict[str, Callable[..., None]] = {
            "search": self._search,
            "sort": self._sort,
            "toggle_sort": self._toggle_sort,
            "sort_preset": self._sort_preset,
            "pin": self._pin,
            "compare_add": self._compare_add,
            "compare_remove": self._compare_remove,
            "compare_clear": self._compare_clear,
            "toggle_theme": self._toggle_theme,
            "set_theme": self._set_theme,
        }

    # --- signal -------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def dispatch(self, command: str, *args: Any) -> None:
        """Run *command* and notify subscribers.

        Raises
        ------
        KeyError
            Unknown command, or ``compare_add`` with a name not in the dataset.
        ComparisonError
            ``compare_add`` rejected by the comparison set (state unchanged).
        ValueError
            Invalid sort key, direction, preset or theme.
        """
        try:
            handler = self._commands[command]
        except KeyError:
            raise KeyError(f"unknown command {command!r}") from None
        handler(*args)
        logger.debug("Dispatched %s%r", command, args)
        for listener in list(self._listeners):
            listener(command)

    # --- commands -----------------------------------------------------------

    def _search(self, term: str | None) -> None:
        set_search_term(self.view, term)

    def _sort(self, key: str, direction: str) -> None:
        set_sort(self.view, key, direction)

    def _toggle_sort(self, key: str) -> None:
        toggle_column_sort(self.view, key)

    def _sort_preset(self, preset: str) -> None:
        apply_sort_preset(self.view, preset)

    def _pin(self, name: str | None) -> None:
        set_pinned(self.view, name)
        self.preferences.set(PINNED_PLAYER_KEY, self.view.pinned_player)

    def _compare_add(self, name: str) -> None:
        if get_record(self.dataset, name) is None:
            raise KeyError(f"unknown player {name!r}")
        self.comparison.add(name)

    def _compare_remove(self, name: str) -> None:
        self.comparison.remove(name)

    def _compare_clear(self) -> None:
        self.comparison.clear()

    def _set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"unknown theme {theme!r}; expected one of {list(THEMES)}")
        self.preferences.set(THEME_KEY, theme)
        self.preferences.set(DARK_MODE_KEY, theme == "dark")

    def _toggle_theme(self) -> None:
        self._set_theme("light" if self.preferences.theme == "dark" else "dark")

    # --- queries ------------------------------------------------------------

    @property
    def pinned_record(self) -> PlayerRecord | None:
        return get_record(self.dataset, self.view.pinned_player)

    def comparison_records(self) -> list[PlayerRecord]:
        records = (get_record(self.dataset, name) for name in self.comparison)
        return [r for r in records if r is not None]

    def derive(self) -> DerivedViews:
        visible = visible_rows(self.dataset, self.view)
        return DerivedViews(
            visible=visible,
            statistics=aggregate(visible),
            win_rate_counts=win_rate_histogram(visible),
            rating_counts=rating_histogram(visible),
            totals=outcome_totals(visible),
            scatter=scatter_points(visible),
        )
