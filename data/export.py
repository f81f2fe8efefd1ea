"""CSV export of the currently visible leaderboard rows."""

from __future__ import annotations

import pandas as pd

EXPORT_FILENAME = "tournament_results.csv"
EXPORT_HEADER: list[str] = [
    "Rank",
    "Player",
    "Rating_Mu",
    "Rating_Sigma",
    "Wins",
    "Draws",
    "Losses",
    "Games",
    "Win_Rate",
]


def _fmt_int(value: object) -> str:
    return "NaN" if pd.isna(value) else str(int(value))


def _fmt_float(value: object, decimals: int) -> str:
    return "NaN" if pd.isna(value) else f"{float(value):.{decimals}f}"


def to_csv(rows: pd.DataFrame) -> str:
    """Serialize *rows* to the export CSV format.

    Ratings use 2 decimals, win rate 3 decimals, integer columns are written
    as-is.  Lines are joined with ``\\n`` and there is no trailing newline.
    The result is a snapshot; later state changes do not affect it.
    """
    lines = [",".join(EXPORT_HEADER)]
    for row in rows.itertuples(index=False):
        lines.append(
            ",".join(
                [
                    _fmt_int(row.rank),
                    str(row.name),
                    _fmt_float(row.rating_mu, 2),
                    _fmt_float(row.rating_sigma, 2),
                    _fmt_int(row.wins),
                    _fmt_int(row.draws),
                    _fmt_int(row.losses),
                    _fmt_int(row.games),
                    _fmt_float(row.win_rate, 3),
                ]
            )
        )
    return "\n".join(lines)
