"""Reusable Streamlit UI components for the leaderboard viewer.

All public ``render_*`` functions draw directly into the current Streamlit
context.  Formatting and figure builders (format_rating, build_leaderboard_df,
build_*_figure, *_html) are pure so they can be tested without a Streamlit
runtime.

Player names and agent prompts are untrusted text: every ``*_html`` helper
escapes them with ``html.escape`` before they reach ``unsafe_allow_html``.
"""

from __future__ import annotations

import html

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from data.enrichment import AgentConfig
from data.loader import PlayerRecord
from stats.aggregates import (
    RATING_BINS,
    WIN_RATE_BINS,
    OutcomeTotals,
    Statistics,
    bin_labels,
)
from stats.view_state import PINNED_COL

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

_ACCENT = "#3b82f6"
_ACCENT_HOVER = "#2563eb"
_SUCCESS = "#10b981"
_WARNING = "#f59e0b"
_DANGER = "#ef4444"

_MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}
_PIN_MARK = "📌"


def plotly_template(dark: bool) -> str:
    return "plotly_dark" if dark else "plotly_white"


# ---------------------------------------------------------------------------
# Formatting helpers (pure, no Streamlit calls)
# ---------------------------------------------------------------------------

def _is_missing(value: object) -> bool:
    return value is None or (isinstance(value, float) and np.isnan(value)) or value is pd.NA


def format_rating(value: float | None) -> str:
    """Two-decimal rating, or '—' when missing."""
    if _is_missing(value):
        return "—"
    return f"{value:.2f}"


def format_win_rate(value: float | None) -> str:
    """Win-rate fraction as a one-decimal percentage ('80.0%')."""
    if _is_missing(value):
        return "—"
    return f"{value * 100:.1f}%"


def format_count(value: int | None) -> str:
    if _is_missing(value):
        return "—"
    return str(int(value))


def rank_label(rank: int | None) -> str:
    """Rank with a medal for the podium ('🥇 1')."""
    if _is_missing(rank):
        return "—"
    medal = _MEDALS.get(int(rank))
    return f"{medal} {int(rank)}" if medal else str(int(rank))


def build_leaderboard_df(visible: pd.DataFrame) -> pd.DataFrame:
    """Build the display DataFrame for the leaderboard table.

    Columns: "", Rank, Player, Rating (μ), Rating (σ), W, D, L, Games, Win Rate.
    Win rate is on the percentage scale for the progress column.
    """
    columns = ["", "Rank", "Player", "Rating (μ)", "Rating (σ)", "W", "D", "L", "Games", "Win Rate"]
    if visible.empty:
        return pd.DataFrame(columns=columns)

    pinned = visible[PINNED_COL] if PINNED_COL in visible.columns else pd.Series(False, index=visible.index)
    return pd.DataFrame(
        {
            "": [_PIN_MARK if p else "" for p in pinned],
            "Rank": [rank_label(r) for r in visible["rank"]],
            "Player": visible["name"].astype(str).to_numpy(),
            "Rating (μ)": visible["rating_mu"].astype("float64").to_numpy(),
            "Rating (σ)": visible["rating_sigma"].astype("float64").to_numpy(),
            "W": visible["wins"].reset_index(drop=True),
            "D": visible["draws"].reset_index(drop=True),
            "L": visible["losses"].reset_index(drop=True),
            "Games": visible["games"].reset_index(drop=True),
            "Win Rate": visible["win_rate"].astype("float64").to_numpy() * 100.0,
        },
        columns=columns,
    )


_LEADERBOARD_COLUMN_CONFIG: dict[str, st.column_config.Column] = {
    "":           st.column_config.TextColumn("", width="small"),
    "Rank":       st.column_config.TextColumn("Rank", width="small"),
    "Player":     st.column_config.TextColumn("Player", width="medium"),
    "Rating (μ)": st.column_config.NumberColumn("Rating (μ)", format="%.2f", help="Skill estimate (mean)."),
    "Rating (σ)": st.column_config.NumberColumn("Rating (σ)", format="%.2f", help="Uncertainty of the skill estimate."),
    "W":          st.column_config.NumberColumn("W", format="%d", help="Wins"),
    "D":          st.column_config.NumberColumn("D", format="%d", help="Draws"),
    "L":          st.column_config.NumberColumn("L", format="%d", help="Losses"),
    "Games":      st.column_config.NumberColumn("Games", format="%d"),
    "Win Rate":   st.column_config.ProgressColumn("Win Rate", format="%.1f%%", min_value=0, max_value=100),
}


# ---------------------------------------------------------------------------
# Stat cards
# ---------------------------------------------------------------------------

_CARD_CSS = """
<style>
.lb-card {
    border: 1px solid rgba(128, 128, 128, 0.25);
    border-radius: 10px;
    padding: 14px 10px 12px;
    text-align: center;
}
.lb-card-label {
    font-size: 11px;
    font-weight: 700;
    text-transform: uppercase;
    letter-spacing: 0.04em;
    opacity: 0.6;
    margin-bottom: 6px;
}
.lb-card-value {
    font-size: 26px;
    font-weight: 800;
    line-height: 1.1;
}
</style>
"""

_CARD_HTML = """
<div class="lb-card">
  <div class="lb-card-label">{label}</div>
  <div class="lb-card-value">{value}</div>
</div>
"""


def summary_cards(stats: Statistics) -> list[tuple[str, str]]:
    """(label, value) pairs for the four summary cards."""
    return [
        ("Total Players", str(stats.count)),
        ("Average Rating", f"{stats.mean_rating:.2f}"),
        ("Average Win Rate", f"{stats.mean_win_rate * 100:.1f}%"),
        ("Total Games", str(stats.total_games)),
    ]


def render_summary_cards(stats: Statistics) -> None:
    st.markdown(_CARD_CSS, unsafe_allow_html=True)
    cards = summary_cards(stats)
    for col, (label, value) in zip(st.columns(len(cards)), cards):
        with col:
            st.markdown(_CARD_HTML.format(label=label, value=value), unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------

def _base_layout(fig: go.Figure, title: str, dark: bool) -> go.Figure:
    fig.update_layout(
        template=plotly_template(dark),
        title=dict(text=title, x=0.0, font=dict(size=15)),
        height=320,
        margin=dict(l=20, r=10, t=40, b=40),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_histogram_figure(
    counts: list[int],
    edges: list[float],
    title: str,
    suffix: str = "",
    dark: bool = False,
) -> go.Figure:
    """Bar chart of pre-bucketed counts with one bar per bin."""
    fig = go.Figure(
        go.Bar(
            x=bin_labels(edges, suffix),
            y=counts,
            name="Number of Players",
            marker_color=_ACCENT,
            marker_line_color=_ACCENT_HOVER,
            marker_line_width=1,
            hovertemplate="%{x}: %{y} players<extra></extra>",
        )
    )
    fig.update_yaxes(rangemode="tozero", dtick=1, title="Players")
    fig.update_layout(showlegend=False)
    return _base_layout(fig, title, dark)


def build_win_rate_figure(counts: list[int], dark: bool = False) -> go.Figure:
    return build_histogram_figure(counts, WIN_RATE_BINS, "Win Rate Distribution", suffix="%", dark=dark)


def build_rating_figure(counts: list[int], dark: bool = False) -> go.Figure:
    return build_histogram_figure(counts, RATING_BINS, "Rating Distribution", dark=dark)


def build_outcome_figure(totals: OutcomeTotals, dark: bool = False) -> go.Figure:
    """Donut of total wins / draws / losses."""
    fig = go.Figure(
        go.Pie(
            labels=["Wins", "Draws", "Losses"],
            values=totals.as_list(),
            hole=0.5,
            marker=dict(colors=[_SUCCESS, _WARNING, _DANGER]),
            sort=False,
        )
    )
    fig.update_layout(legend=dict(orientation="h", yanchor="top", y=-0.05))
    return _base_layout(fig, "Game Results", dark)


def build_scatter_figure(scatter: pd.DataFrame, dark: bool = False) -> go.Figure:
    """Rating (x) against win rate in percent (y), one marker per player."""
    fig = go.Figure(
        go.Scatter(
            x=scatter["rating"],
            y=scatter["win_rate_pct"],
            mode="markers",
            marker=dict(size=10, color=_ACCENT, line=dict(color=_ACCENT_HOVER, width=1)),
            text=scatter["name"],
            hovertemplate="%{text}: Rating %{x:.2f}, Win Rate %{y:.1f}%<extra></extra>",
        )
    )
    fig.update_xaxes(title="Rating (μ)")
    fig.update_yaxes(title="Win Rate (%)", range=[0, 100])
    fig.update_layout(showlegend=False)
    return _base_layout(fig, "Rating vs Win Rate", dark)


def _show(fig: go.Figure) -> None:
    st.plotly_chart(fig, width="stretch", config={"displayModeBar": False})


def render_charts(
    win_rate_counts: list[int],
    rating_counts: list[int],
    totals: OutcomeTotals,
    scatter: pd.DataFrame,
    dark: bool = False,
) -> None:
    """Two-by-two grid of the summary charts."""
    top_left, top_right = st.columns(2)
    with top_left:
        _show(build_win_rate_figure(win_rate_counts, dark))
    with top_right:
        _show(build_rating_figure(rating_counts, dark))
    bottom_left, bottom_right = st.columns(2)
    with bottom_left:
        _show(build_outcome_figure(totals, dark))
    with bottom_right:
        _show(build_scatter_figure(scatter, dark))


# ---------------------------------------------------------------------------
# Leaderboard table
# ---------------------------------------------------------------------------

def render_leaderboard(visible: pd.DataFrame) -> None:
    if visible.empty:
        st.info("No players match the current search.")
        return
    st.dataframe(
        build_leaderboard_df(visible),
        width="stretch",
        hide_index=True,
        column_config=_LEADERBOARD_COLUMN_CONFIG,
    )


# ---------------------------------------------------------------------------
# Player detail / comparison cards
# ---------------------------------------------------------------------------

def record_fields(record: PlayerRecord) -> list[tuple[str, str]]:
    """(label, formatted value) rows shared by detail and comparison cards."""
    return [
        ("Rank", "—" if record.rank is None else f"#{record.rank}"),
        ("Rating (μ)", format_rating(record.rating_mu)),
        ("Rating (σ)", format_rating(record.rating_sigma)),
        ("Wins", format_count(record.wins)),
        ("Draws", format_count(record.draws)),
        ("Losses", format_count(record.losses)),
        ("Total Games", format_count(record.games)),
        ("Win Rate", format_win_rate(record.win_rate)),
    ]


def _rows_html(rows: list[tuple[str, str]]) -> str:
    return "".join(
        f'<div class="lb-detail-row"><span>{html.escape(label)}:</span>'
        f"<b>{html.escape(value)}</b></div>"
        for label, value in rows
    )


_DETAIL_CSS = """
<style>
.lb-detail-row { display: flex; justify-content: space-between; padding: 4px 0;
                 border-bottom: 1px solid rgba(128, 128, 128, 0.15); }
.lb-compare-card { border: 1px solid rgba(128, 128, 128, 0.25); border-radius: 10px;
                   padding: 12px 14px; }
.lb-prompt { white-space: pre-wrap; font-family: monospace; font-size: 12px;
             background: rgba(128, 128, 128, 0.1); border-radius: 6px; padding: 8px; }
</style>
"""


def comparison_card_html(record: PlayerRecord) -> str:
    return (
        f'<div class="lb-compare-card"><h4>{html.escape(record.name)}</h4>'
        f"{_rows_html(record_fields(record))}</div>"
    )


def agent_config_rows(agent: AgentConfig) -> list[tuple[str, str]]:
    rows = [
        ("Provider", agent.provider or "—"),
        ("Model", agent.model_name or "—"),
    ]
    for key, value in agent.params.items():
        rows.append((key, "—" if value is None else str(value)))
    return rows


def agent_config_html(agent: AgentConfig) -> str:
    """Agent model details and prompts, all text escaped."""
    parts = [_rows_html(agent_config_rows(agent))]
    for label, prompt in (("System prompt", agent.system_prompt), ("Step-wise prompt", agent.step_wise_prompt)):
        if prompt:
            parts.append(f"<p><b>{label}</b></p><div class=\"lb-prompt\">{html.escape(prompt)}</div>")
    return "".join(parts)


def render_player_detail(record: PlayerRecord, agent: AgentConfig | None) -> None:
    st.markdown(_DETAIL_CSS, unsafe_allow_html=True)
    st.markdown(f"### {html.escape(record.name)}")
    st.markdown(_rows_html(record_fields(record)), unsafe_allow_html=True)
    if agent is not None:
        st.markdown("#### Agent configuration")
        st.markdown(agent_config_html(agent), unsafe_allow_html=True)


def render_comparison_cards(records: list[PlayerRecord]) -> list[str]:
    """Render one card per record; returns names whose Remove button was clicked."""
    st.markdown(_DETAIL_CSS, unsafe_allow_html=True)
    removed: list[str] = []
    for col, record in zip(st.columns(max(len(records), 1)), records):
        with col:
            st.markdown(comparison_card_html(record), unsafe_allow_html=True)
            if st.button("Remove", key=f"compare_remove_{record.name}", use_container_width=True):
                removed.append(record.name)
    return removed
