"""Unit tests for ui/components.py — covers pure helper functions only.

Streamlit rendering functions (render_leaderboard, render_charts, etc.)
require a live runtime and are exercised by running the app.
"""

import math

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import pytest

from data.enrichment import AgentConfig
from data.loader import get_record
from stats.aggregates import OutcomeTotals, Statistics, scatter_points
from stats.view_state import ViewState, visible_rows
from ui.components import (
    _LEADERBOARD_COLUMN_CONFIG,
    agent_config_html,
    agent_config_rows,
    build_leaderboard_df,
    build_outcome_figure,
    build_rating_figure,
    build_scatter_figure,
    build_win_rate_figure,
    comparison_card_html,
    format_count,
    format_rating,
    format_win_rate,
    plotly_template,
    rank_label,
    record_fields,
    summary_cards,
)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

class TestFormatting:
    def test_rating(self):
        assert format_rating(27.456) == "27.46"

    def test_win_rate(self):
        assert format_win_rate(0.8) == "80.0%"

    @pytest.mark.parametrize("missing", [None, float("nan"), np.nan])
    def test_missing_values(self, missing):
        assert format_rating(missing) == "—"
        assert format_win_rate(missing) == "—"

    def test_count(self):
        assert format_count(7) == "7"
        assert format_count(pd.NA) == "—"

    @pytest.mark.parametrize("rank,expected", [(1, "🥇 1"), (2, "🥈 2"), (3, "🥉 3"), (4, "4")])
    def test_rank_label(self, rank, expected):
        assert rank_label(rank) == expected

    def test_rank_label_missing(self):
        assert rank_label(None) == "—"

    def test_plotly_template(self):
        assert plotly_template(True) == "plotly_dark"
        assert plotly_template(False) == "plotly_white"


class TestSummaryCards:
    def test_values(self):
        cards = dict(summary_cards(Statistics(2, 27.5, 0.65, 20)))
        assert cards == {
            "Total Players": "2",
            "Average Rating": "27.50",
            "Average Win Rate": "65.0%",
            "Total Games": "20",
        }

    def test_zero_stats(self):
        cards = dict(summary_cards(Statistics(0, 0.0, 0.0, 0)))
        assert cards["Average Rating"] == "0.00"
        assert cards["Average Win Rate"] == "0.0%"


# ---------------------------------------------------------------------------
# build_leaderboard_df
# ---------------------------------------------------------------------------

class TestBuildLeaderboardDf:
    def test_columns_match_config(self, alice_bob_df):
        df = build_leaderboard_df(visible_rows(alice_bob_df, ViewState()))
        assert list(df.columns) == list(_LEADERBOARD_COLUMN_CONFIG.keys())

    def test_values(self, alice_bob_df):
        df = build_leaderboard_df(visible_rows(alice_bob_df, ViewState()))
        first = df.iloc[0]
        assert first["Rank"] == "🥇 1"
        assert first["Player"] == "alice"
        assert first["Win Rate"] == pytest.approx(80.0)
        assert first["W"] == 8

    def test_pin_marker(self, alice_bob_df):
        df = build_leaderboard_df(visible_rows(alice_bob_df, ViewState(pinned_player="bob")))
        assert df[""].tolist() == ["📌", ""]

    def test_empty(self, alice_bob_df):
        df = build_leaderboard_df(visible_rows(alice_bob_df, ViewState(search_term="zzz")))
        assert df.empty
        assert "Player" in df.columns


# ---------------------------------------------------------------------------
# Figures
# ---------------------------------------------------------------------------

class TestFigures:
    def test_win_rate_figure(self):
        fig = build_win_rate_figure([1, 2, 3, 4, 5])
        assert isinstance(fig, go.Figure)
        assert list(fig.data[0].x) == ["0-20%", "20-40%", "40-60%", "60-80%", "80-100%"]
        assert list(fig.data[0].y) == [1, 2, 3, 4, 5]

    def test_rating_figure(self):
        fig = build_rating_figure([0] * 8, dark=True)
        assert len(fig.data[0].x) == 8
        assert fig.layout.title.text == "Rating Distribution"

    def test_outcome_figure(self):
        fig = build_outcome_figure(OutcomeTotals(13, 1, 6))
        assert list(fig.data[0].labels) == ["Wins", "Draws", "Losses"]
        assert list(fig.data[0].values) == [13, 1, 6]

    def test_scatter_figure(self, alice_bob_df):
        fig = build_scatter_figure(scatter_points(alice_bob_df))
        assert list(fig.data[0].x) == pytest.approx([30.0, 25.0])
        assert list(fig.data[0].y) == pytest.approx([80.0, 50.0])
        assert list(fig.data[0].text) == ["alice", "bob"]

    def test_scatter_figure_empty(self, alice_bob_df):
        fig = build_scatter_figure(scatter_points(alice_bob_df.iloc[0:0]))
        assert len(fig.data[0].x) == 0


# ---------------------------------------------------------------------------
# Cards / detail HTML
# ---------------------------------------------------------------------------

class TestRecordHtml:
    def test_record_fields(self, alice_bob_df):
        fields = dict(record_fields(get_record(alice_bob_df, "alice")))
        assert fields["Rank"] == "#1"
        assert fields["Rating (μ)"] == "30.00"
        assert fields["Win Rate"] == "80.0%"
        assert fields["Total Games"] == "10"

    def test_comparison_card_escapes_name(self):
        from data.loader import parse_standings

        df = parse_standings(
            "h1,h2,h3,h4,h5,h6,h7,h8,h9\n1,<script>x</script>,30,0,8,1,1,10,0.8"
        )
        card = comparison_card_html(get_record(df, "<script>x</script>"))
        assert "<script>" not in card
        assert "&lt;script&gt;" in card


class TestAgentConfigHtml:
    def test_rows(self):
        rows = agent_config_rows(AgentConfig(provider="openai", model_name="gpt-4o", params={"temperature": 0.2}))
        assert rows == [("Provider", "openai"), ("Model", "gpt-4o"), ("temperature", "0.2")]

    def test_missing_fields(self):
        assert agent_config_rows(AgentConfig()) == [("Provider", "—"), ("Model", "—")]

    def test_prompts_escaped(self):
        agent = AgentConfig(
            system_prompt="<img src=x onerror=alert(1)>",
            step_wise_prompt="a & b",
        )
        out = agent_config_html(agent)
        assert "<img" not in out
        assert "&lt;img" in out
        assert "a &amp; b" in out

    def test_no_prompt_sections_when_absent(self):
        assert "System prompt" not in agent_config_html(AgentConfig(provider="x"))
