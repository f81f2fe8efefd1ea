"""Standings loader — parse the tournament results CSV into a typed DataFrame.

The source is a plain comma-separated file with a header line and one row
per player.  Fields are positional (the header text is not interpreted):

    rank, name, rating-mean, rating-deviation, wins, draws, losses, games, win-rate

Parsing is tolerant about values and strict about shape:

* numeric fields that fail to parse become NaN (floats) or <NA> (integers);
  the row is kept.
* rows with an empty name are dropped.
* a row with the wrong number of fields, a missing header, or a repeated
  name raises ``MalformedInputError`` carrying the 1-based line number.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np
import pandas as pd
import streamlit as st

logger = logging.getLogger(__name__)

_TTL_STANDINGS = 600  # 10 min; standings files change only between tournaments

STANDINGS_COLUMNS: list[str] = [
    "rank",
    "name",
    "rating_mu",
    "rating_sigma",
    "wins",
    "draws",
    "losses",
    "games",
    "win_rate",
]
INT_COLUMNS: list[str] = ["rank", "wins", "draws", "losses", "games"]
FLOAT_COLUMNS: list[str] = ["rating_mu", "rating_sigma", "win_rate"]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class LoadFailure(RuntimeError):
    """The standings source could not be read or parsed."""


class MalformedInputError(LoadFailure, ValueError):
    """The standings text has the wrong shape at a specific line."""

    def __init__(self, line_no: int, message: str) -> None:
        self.line_no = line_no
        super().__init__(f"line {line_no}: {message}")


# ---------------------------------------------------------------------------
# Record view
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlayerRecord:
    """Read-only view of one standings row."""

    rank: int | None
    name: str
    rating_mu: float
    rating_sigma: float
    wins: int | None
    draws: int | None
    losses: int | None
    games: int | None
    win_rate: float


def _int_or_none(value: object) -> int | None:
    return None if pd.isna(value) else int(value)


def _float_or_nan(value: object) -> float:
    return float("nan") if pd.isna(value) else float(value)


def _row_to_record(row: pd.Series) -> PlayerRecord:
    return PlayerRecord(
        rank=_int_or_none(row["rank"]),
        name=str(row["name"]),
        rating_mu=_float_or_nan(row["rating_mu"]),
        rating_sigma=_float_or_nan(row["rating_sigma"]),
        wins=_int_or_none(row["wins"]),
        draws=_int_or_none(row["draws"]),
        losses=_int_or_none(row["losses"]),
        games=_int_or_none(row["games"]),
        win_rate=_float_or_nan(row["win_rate"]),
    )


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def empty_dataset() -> pd.DataFrame:
    """Zero-row standings DataFrame with the full typed schema."""
    return _coerce_types(pd.DataFrame(columns=STANDINGS_COLUMNS))


def _coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out["name"] = out["name"].astype(object)
    for col in FLOAT_COLUMNS:
        out[col] = pd.to_numeric(out[col], errors="coerce").astype("float64")
    for col in INT_COLUMNS:
        values = pd.to_numeric(out[col], errors="coerce").astype("float64")
        # Only finite whole numbers within int64 range are counts.
        values = values.where(
            np.isfinite(values) & (values == values.round()) & (values.abs() < 2**63)
        )
        out[col] = values.astype("Int64")
    return out


def parse_standings(text: str) -> pd.DataFrame:
    """Parse standings CSV text into a typed DataFrame.

    Raises
    ------
    MalformedInputError
        When there is no header line, a data row does not have exactly
        ``len(STANDINGS_COLUMNS)`` fields, or a player name repeats.
    """
    lines = [(no, line) for no, line in enumerate(text.splitlines(), start=1) if line.strip()]
    if not lines:
        raise MalformedInputError(1, "missing header line")

    rows: list[list[str]] = []
    seen: dict[str, int] = {}
    for line_no, line in lines[1:]:
        fields = [field.strip() for field in line.split(",")]
        if len(fields) != len(STANDINGS_COLUMNS):
            raise MalformedInputError(
                line_no,
                f"expected {len(STANDINGS_COLUMNS)} fields, found {len(fields)}",
            )
        name = fields[1]
        if not name:
            logger.debug("Dropping row at line %d: empty player name", line_no)
            continue
        if name in seen:
            raise MalformedInputError(
                line_no, f"duplicate player name {name!r} (first seen on line {seen[name]})"
            )
        seen[name] = line_no
        rows.append(fields)

    df = _coerce_types(pd.DataFrame(rows, columns=STANDINGS_COLUMNS))

    mismatched = (df["wins"] + df["draws"] + df["losses"]).ne(df["games"]).fillna(False)
    if mismatched.any():
        logger.warning(
            "W+D+L does not equal games for %d player(s): %s",
            int(mismatched.sum()),
            ", ".join(df.loc[mismatched, "name"].astype(str)),
        )

    logger.info("Parsed %d players from standings", len(df))
    return df


def read_standings(path: str | Path) -> pd.DataFrame:
    """Read and parse a standings file.  IO and decode errors surface as ``LoadFailure``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadFailure(f"could not read standings file {path}: {exc}") from exc
    return parse_standings(text)


@st.cache_data(ttl=_TTL_STANDINGS, show_spinner=False)
def get_standings(path: str) -> pd.DataFrame:
    """Cached standings load used by the Streamlit app."""
    return read_standings(path)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_record(df: pd.DataFrame, name: str | None) -> PlayerRecord | None:
    """Return the record whose name matches exactly, or None."""
    if name is None or df.empty:
        return None
    matches = df[df["name"] == name]
    return _row_to_record(matches.iloc[0]) if not matches.empty else None


def iter_records(df: pd.DataFrame) -> Iterator[PlayerRecord]:
    """Yield a ``PlayerRecord`` for each row of *df*, in order."""
    for _, row in df.iterrows():
        yield _row_to_record(row)
