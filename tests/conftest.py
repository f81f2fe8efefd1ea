"""Shared test fixtures: synthetic standings text and DataFrames."""

from __future__ import annotations

from collections.abc import Callable

import pandas as pd
import pytest

from data.loader import parse_standings

HEADER = "Rank,Player,Rating_Mu,Rating_Sigma,Wins,Draws,Losses,Games,Win_Rate"

ALICE_BOB_CSV = "\n".join(
    [
        HEADER,
        "1,alice,30,0,8,1,1,10,0.8",
        "2,bob,25,0,5,0,5,10,0.5",
    ]
)


def standings_line(
    rank: int,
    name: str,
    rating_mu: float,
    rating_sigma: float = 1.0,
    wins: int = 5,
    draws: int = 0,
    losses: int = 5,
    win_rate: float | None = None,
) -> str:
    games = wins + draws + losses
    if win_rate is None:
        win_rate = wins / games if games else 0.0
    return f"{rank},{name},{rating_mu},{rating_sigma},{wins},{draws},{losses},{games},{win_rate}"


@pytest.fixture
def alice_bob_df() -> pd.DataFrame:
    """The two-player dataset used in the end-to-end examples."""
    return parse_standings(ALICE_BOB_CSV)


@pytest.fixture
def standings_df_factory() -> Callable[..., pd.DataFrame]:
    """Return a factory for standings DataFrames.

    Signature:
        _factory(rows: list[tuple] | None = None) -> pd.DataFrame

    Each tuple is passed to ``standings_line``.  The default is a six-player
    table with deliberate ties on rating (Carol/Dave) and wins (Erin/Frank),
    listed in rank order.
    """

    default_rows = [
        (1, "Alice", 34.0, 1.1, 9, 1, 0),
        (2, "bob", 28.5, 1.4, 7, 1, 2),
        (3, "Carol", 25.0, 2.0, 6, 0, 4),
        (4, "dave", 25.0, 1.9, 5, 2, 3),
        (5, "Erin", 18.2, 2.5, 3, 1, 6),
        (6, "Frank", 9.7, 3.0, 3, 0, 7),
    ]

    def _factory(rows: list[tuple] | None = None) -> pd.DataFrame:
        lines = [HEADER] + [standings_line(*row) for row in (rows or default_rows)]
        return parse_standings("\n".join(lines))

    return _factory
