"""Column definitions and rating explainer for the leaderboard.

All content lives in module-level constants so it can be tested independently
of a Streamlit runtime. The render_glossary() function wires it into the UI.
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

# ---------------------------------------------------------------------------
# Column definitions
# ---------------------------------------------------------------------------

COLUMN_DEFINITIONS: dict[str, dict[str, str]] = {
    "Rank": {
        "full_name": "Final Standing",
        "definition": "Position in the final tournament standings. Rank 1 is the winner.",
        "direction": "Lower is better",
    },
    "Rating (μ)": {
        "full_name": "Rating Mean",
        "definition": (
            "The rating system's best estimate of a player's skill after every game "
            "has been played. Players gain rating by beating stronger opponents and "
            "lose it by dropping games to weaker ones."
        ),
        "direction": "Higher is better",
    },
    "Rating (σ)": {
        "full_name": "Rating Deviation",
        "definition": (
            "How uncertain the rating estimate still is. It shrinks as a player "
            "completes more games; a large σ means the μ could move a lot."
        ),
        "direction": "Lower is more certain",
    },
    "W / D / L": {
        "full_name": "Wins, Draws, Losses",
        "definition": "Game outcomes. Together they add up to games played.",
        "direction": "Context-dependent",
    },
    "Games": {
        "full_name": "Games Played",
        "definition": "Total games completed in the tournament.",
        "direction": "Context-dependent",
    },
    "Win Rate": {
        "full_name": "Win Rate",
        "definition": "Wins divided by games played, shown as a percentage.",
        "direction": "Higher is better",
    },
}

RATING_EXPLAINER = """
**How to read the rating**

Each player carries two numbers: **μ**, the estimated skill, and **σ**, the
uncertainty around it. Two players with the same μ are not equally proven if
one has a much larger σ. The rating chart buckets players by μ; the scatter
plot shows how closely μ tracks the raw win rate.
"""


def _direction_icon(direction: str) -> str:
    lowered = direction.lower()
    if lowered.startswith("higher"):
        return "↑"
    if lowered.startswith("lower"):
        return "↓"
    return "•"


def glossary_df() -> pd.DataFrame:
    """Compact table form of ``COLUMN_DEFINITIONS``."""
    rows = [
        {
            "Column": column,
            "Meaning": f"{info['full_name']}. {info['definition']}",
            "Better": f"{_direction_icon(info['direction'])} {info['direction']}",
        }
        for column, info in COLUMN_DEFINITIONS.items()
    ]
    return pd.DataFrame(rows, columns=["Column", "Meaning", "Better"])


def render_glossary() -> None:
    """Render the column glossary inside a Streamlit expander."""
    with st.expander("Glossary", expanded=False):
        st.markdown(RATING_EXPLAINER)
        st.divider()
        st.dataframe(
            glossary_df(),
            width="stretch",
            hide_index=True,
            column_config={
                "Column": st.column_config.TextColumn("Column", width="small"),
                "Meaning": st.column_config.TextColumn("Meaning", width="large"),
                "Better": st.column_config.TextColumn("Better", width="small"),
            },
        )
