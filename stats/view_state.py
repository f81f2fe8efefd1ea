"""Search / sort / pin state and the visible-row derivation.

ViewState holds what the user has asked for; visible_rows() is the single
entry point that turns the full standings DataFrame plus a ViewState into
the rows to display.  Nothing is cached: every call recomputes from the full
dataset, which is cheap at leaderboard sizes.

Ordering rules
--------------
* filter: case-insensitive substring match on ``name`` (literal, not regex)
* sort: stable on ``sort_key``; names compare case-insensitively; ties keep
  dataset order in both directions; missing values go last in both
  directions
* pin: after sorting, the pinned row (if it survived the filter) is moved
  to the front.  Search wins over pinning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import pandas as pd

SortDirection = Literal["asc", "desc"]

NAME_KEY = "name"
NUMERIC_SORT_KEYS: tuple[str, ...] = (
    "rank",
    "rating_mu",
    "rating_sigma",
    "wins",
    "draws",
    "losses",
    "games",
    "win_rate",
)
SORT_KEYS: tuple[str, ...] = NUMERIC_SORT_KEYS + (NAME_KEY,)
SORT_DIRECTIONS: tuple[str, ...] = ("asc", "desc")

PINNED_COL = "pinned"

# Sort dropdown options: label -> (key, direction).
SORT_PRESETS: dict[str, tuple[str, SortDirection]] = {
    "rank":    ("rank", "asc"),
    "rating":  ("rating_mu", "desc"),
    "winRate": ("win_rate", "desc"),
    "wins":    ("wins", "desc"),
    "games":   ("games", "desc"),
}
SORT_PRESET_LABELS: dict[str, str] = {
    "rank":    "Rank",
    "rating":  "Rating",
    "winRate": "Win Rate",
    "wins":    "Wins",
    "games":   "Games Played",
}


@dataclass
class ViewState:
    """Current search term, sort order and pinned player.

    Attributes
    ----------
    search_term : str
        Case-insensitive substring filter on the player name.
    sort_key : str
        One of ``SORT_KEYS``.
    sort_direction : "asc" | "desc"
    pinned_player : str | None
        Name of the pinned player.  Resolved against the dataset each time
        rows are derived; a name that no longer exists is ignored.
    """

    search_term: str = ""
    sort_key: str = "rank"
    sort_direction: SortDirection = "asc"
    pinned_player: str | None = None


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def default_direction(key: str) -> SortDirection:
    """Names sort A-Z first; numbers sort biggest first."""
    return "asc" if key == NAME_KEY else "desc"


def _check_key(key: str) -> None:
    if key not in SORT_KEYS:
        raise ValueError(f"unknown sort key {key!r}; expected one of {list(SORT_KEYS)}")


def set_search_term(state: ViewState, term: str | None) -> None:
    state.search_term = term or ""


def set_sort(state: ViewState, key: str, direction: str) -> None:
    _check_key(key)
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"unknown sort direction {direction!r}; expected 'asc' or 'desc'")
    state.sort_key = key
    state.sort_direction = direction  # type: ignore[assignment]


def toggle_column_sort(state: ViewState, key: str) -> None:
    """Header-click behaviour: flip on the same column, reset on a new one."""
    _check_key(key)
    if key == state.sort_key:
        state.sort_direction = "asc" if state.sort_direction == "desc" else "desc"
    else:
        state.sort_key = key
        state.sort_direction = default_direction(key)


def apply_sort_preset(state: ViewState, preset: str) -> None:
    if preset not in SORT_PRESETS:
        raise ValueError(f"unknown sort preset {preset!r}")
    key, direction = SORT_PRESETS[preset]
    set_sort(state, key, direction)


def set_pinned(state: ViewState, name: str | None) -> None:
    """Pin *name*; pinning the already-pinned name (or None) clears the pin."""
    if name is None or name == state.pinned_player:
        state.pinned_player = None
    else:
        state.pinned_player = name


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------

def filter_by_name(df: pd.DataFrame, term: str) -> pd.DataFrame:
    """Return rows whose name contains *term*, ignoring case."""
    if not term:
        return df
    mask = df["name"].astype(str).str.lower().str.contains(term.lower(), regex=False)
    return df[mask]


def sort_rows(df: pd.DataFrame, key: str, direction: str) -> pd.DataFrame:
    """Stable sort of *df* by *key*.

    The column is replaced by its dense rank (negated for descending) and
    sorted ascending with mergesort, so equal values keep their incoming
    order whichever way the sort runs.
    """
    _check_key(key)
    if df.empty:
        return df
    values = df[key].astype(str).str.lower() if key == NAME_KEY else df[key].astype("float64")
    order = values.rank(method="dense")
    if direction == "desc":
        order = -order
    positions = order.reset_index(drop=True).sort_values(kind="mergesort", na_position="last").index
    return df.iloc[positions]


def surface_pinned(df: pd.DataFrame, pinned: str | None) -> pd.DataFrame:
    """Move the pinned row to the front without reordering the rest."""
    if pinned is None:
        return df
    is_pinned = df["name"] == pinned
    if not is_pinned.any():
        return df
    return pd.concat([df[is_pinned], df[~is_pinned]])


def visible_rows(df: pd.DataFrame, state: ViewState) -> pd.DataFrame:
    """Return the filtered, sorted, pin-adjusted copy of *df*.

    The result carries a boolean ``pinned`` column and a fresh RangeIndex.
    """
    rows = filter_by_name(df, state.search_term)
    rows = sort_rows(rows, state.sort_key, state.sort_direction)
    rows = surface_pinned(rows, state.pinned_player)
    out = rows.reset_index(drop=True).copy()
    out[PINNED_COL] = (
        out["name"] == state.pinned_player
        if state.pinned_player is not None
        else pd.Series(False, index=out.index, dtype=bool)
    )
    return out
