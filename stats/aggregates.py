"""Summary statistics and chart datasets over a set of leaderboard rows.

Usage
-----
    from stats.aggregates import aggregate, win_rate_histogram, outcome_totals

    stats = aggregate(visible)
    counts = win_rate_histogram(visible)
    totals = outcome_totals(visible)

All functions are pure and accept any DataFrame with the standings schema
(normally the visible rows).  Missing values are skipped rather than
propagated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Win rate is binned on the percentage scale (win_rate * 100).
WIN_RATE_BINS: list[float] = [0, 20, 40, 60, 80, 100]
RATING_BINS: list[float] = [0, 10, 15, 20, 25, 30, 35, 40, 50]

SCATTER_COLUMNS = ["name", "rating", "win_rate_pct"]


@dataclass(frozen=True)
class Statistics:
    count: int
    mean_rating: float
    mean_win_rate: float
    total_games: int


@dataclass(frozen=True)
class OutcomeTotals:
    wins: int
    draws: int
    losses: int

    def as_list(self) -> list[int]:
        return [self.wins, self.draws, self.losses]


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def _mean_or_zero(series: pd.Series) -> float:
    value = pd.to_numeric(series, errors="coerce").mean()
    return 0.0 if pd.isna(value) else float(value)


def _sum_int(series: pd.Series) -> int:
    return int(pd.to_numeric(series, errors="coerce").sum())


def aggregate(rows: pd.DataFrame) -> Statistics:
    """Return count, mean rating, mean win rate and total games for *rows*.

    With no rows (or no numeric values) the means are 0.0, never NaN.
    """
    if rows.empty:
        return Statistics(count=0, mean_rating=0.0, mean_win_rate=0.0, total_games=0)
    return Statistics(
        count=len(rows),
        mean_rating=_mean_or_zero(rows["rating_mu"]),
        mean_win_rate=_mean_or_zero(rows["win_rate"]),
        total_games=_sum_int(rows["games"]),
    )


def outcome_totals(rows: pd.DataFrame) -> OutcomeTotals:
    """Sum of wins, draws and losses across *rows*."""
    if rows.empty:
        return OutcomeTotals(0, 0, 0)
    return OutcomeTotals(
        wins=_sum_int(rows["wins"]),
        draws=_sum_int(rows["draws"]),
        losses=_sum_int(rows["losses"]),
    )


# ---------------------------------------------------------------------------
# Histograms
# ---------------------------------------------------------------------------

def bucket(values: Iterable[float], edges: Sequence[float]) -> list[int]:
    """Count *values* into the bins defined by *edges*.

    ``n + 1`` ascending edges define ``n`` bins ``[edges[i], edges[i+1])``;
    the last bin is closed on the right so a value equal to ``edges[-1]`` is
    counted.  Values outside ``[edges[0], edges[-1]]`` and NaN are dropped.

    Raises
    ------
    ValueError
        With fewer than two edges or edges that are not strictly ascending.
    """
    edge_arr = np.asarray(edges, dtype=float)
    if edge_arr.size < 2:
        raise ValueError("bucket() needs at least two edges")
    if np.any(np.diff(edge_arr) <= 0):
        raise ValueError(f"bucket() edges must be strictly ascending, got {list(edges)}")

    arr = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce").to_numpy(dtype=float)
    arr = arr[~np.isnan(arr)]
    arr = arr[(arr >= edge_arr[0]) & (arr <= edge_arr[-1])]

    # side="right" puts a value equal to an inner edge in the bin it opens.
    idx = np.searchsorted(edge_arr, arr, side="right") - 1
    idx[idx == edge_arr.size - 1] = edge_arr.size - 2
    counts = np.bincount(idx, minlength=edge_arr.size - 1)
    return [int(c) for c in counts]


def bin_labels(edges: Sequence[float], suffix: str = "") -> list[str]:
    """Labels like ``"0-20%"`` for each bin of *edges*."""
    return [f"{_fmt_edge(lo)}-{_fmt_edge(hi)}{suffix}" for lo, hi in zip(edges[:-1], edges[1:])]


def _fmt_edge(edge: float) -> str:
    return str(int(edge)) if float(edge).is_integer() else f"{edge:g}"


def win_rate_histogram(rows: pd.DataFrame) -> list[int]:
    """Players per win-rate band (percent scale, ``WIN_RATE_BINS``)."""
    if rows.empty:
        return [0] * (len(WIN_RATE_BINS) - 1)
    return bucket(rows["win_rate"].astype("float64") * 100.0, WIN_RATE_BINS)


def rating_histogram(rows: pd.DataFrame) -> list[int]:
    """Players per rating band (``RATING_BINS``)."""
    if rows.empty:
        return [0] * (len(RATING_BINS) - 1)
    return bucket(rows["rating_mu"].astype("float64"), RATING_BINS)


# ---------------------------------------------------------------------------
# Scatter
# ---------------------------------------------------------------------------

def scatter_points(rows: pd.DataFrame) -> pd.DataFrame:
    """One ``(rating, win_rate_pct)`` point per row, in row order."""
    if rows.empty:
        return pd.DataFrame(columns=SCATTER_COLUMNS)
    return pd.DataFrame(
        {
            "name": rows["name"].to_numpy(),
            "rating": rows["rating_mu"].astype("float64").to_numpy(),
            "win_rate_pct": rows["win_rate"].astype("float64").to_numpy() * 100.0,
        }
    )
