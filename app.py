import logging

import pandas as pd
import streamlit as st

from data.config import load_config
from data.enrichment import get_agent_config
from data.export import EXPORT_FILENAME, to_csv
from data.loader import LoadFailure, empty_dataset, get_record, get_standings
from data.preferences import PreferenceStore
from stats.comparison import ComparisonError
from stats.controller import LeaderboardController
from stats.view_state import (
    NAME_KEY,
    NUMERIC_SORT_KEYS,
    SORT_PRESET_LABELS,
    SORT_PRESETS,
)
from ui.components import (
    render_charts,
    render_comparison_cards,
    render_leaderboard,
    render_player_detail,
    render_summary_cards,
)
from ui.glossary import render_glossary

config = load_config()
logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("leaderboard")

st.set_page_config(
    page_title=config.page_title,
    page_icon="🏆",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_CONTROLLER_KEY = "_leaderboard_controller"
_NOTICE_KEY = "_leaderboard_notice"
_DETAIL_KEY = "_detail_player"

_COLUMN_SORT_LABELS = {
    "rank":         "Rank",
    NAME_KEY:       "Player",
    "rating_mu":    "μ",
    "rating_sigma": "σ",
    "wins":         "W",
    "draws":        "D",
    "losses":       "L",
    "games":        "Games",
    "win_rate":     "Win %",
}

_DARK_CSS = """
<style>
.stApp { background-color: #0f172a; color: #e2e8f0; }
</style>
"""


# ---------------------------------------------------------------------------
# State helpers
# ---------------------------------------------------------------------------

def _load_dataset(path: str) -> tuple[pd.DataFrame, str | None]:
    try:
        return get_standings(path), None
    except LoadFailure as exc:
        logger.error("Failed to load standings from %s: %s", path, exc)
        return empty_dataset(), str(exc)


def _get_controller(dataset: pd.DataFrame) -> LeaderboardController:
    controller = st.session_state.get(_CONTROLLER_KEY)
    if controller is None:
        controller = LeaderboardController(dataset, PreferenceStore(config.preferences_path))
        controller.subscribe(lambda command: logger.debug("State changed by %s; re-rendering", command))
        st.session_state[_CONTROLLER_KEY] = controller
    controller.dataset = dataset
    return controller


def _dispatch(command: str, *args) -> None:
    """Widget callback: run a controller command, keeping errors as a notice."""
    controller: LeaderboardController = st.session_state[_CONTROLLER_KEY]
    try:
        controller.dispatch(command, *args)
    except ComparisonError as exc:
        st.session_state[_NOTICE_KEY] = str(exc)
    except KeyError as exc:
        logger.warning("Ignored %s%r: %s", command, args, exc)


def _on_search_change() -> None:
    _dispatch("search", st.session_state["search_input"])


def _on_preset_change() -> None:
    _dispatch("sort_preset", st.session_state["sort_preset"])


def _show_detail(name: str | None) -> None:
    st.session_state[_DETAIL_KEY] = name


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------

with st.spinner("Loading tournament standings…"):
    dataset, load_error = _load_dataset(config.standings_path)

controller = _get_controller(dataset)
dark = controller.preferences.dark_mode
views = controller.derive()

if dark:
    st.markdown(_DARK_CSS, unsafe_allow_html=True)

notice = st.session_state.pop(_NOTICE_KEY, None)
if notice:
    st.toast(notice, icon="⚠️")


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

title_col, theme_col = st.columns([6, 1])
with title_col:
    st.title(f"🏆 {config.page_title}")
with theme_col:
    st.button(
        "☀️ Light" if dark else "🌙 Dark",
        key="theme_toggle",
        on_click=_dispatch,
        args=("toggle_theme",),
        use_container_width=True,
    )

if load_error is not None:
    st.error(
        "Error loading tournament data. "
        f"Please ensure {config.standings_path} exists and is well formed. ({load_error})"
    )

render_summary_cards(views.statistics)
st.divider()


# ---------------------------------------------------------------------------
# Controls
# ---------------------------------------------------------------------------

search_col, sort_col, export_col = st.columns([3, 2, 1])
with search_col:
    st.text_input(
        "Search players",
        key="search_input",
        placeholder="Type a player name…",
        on_change=_on_search_change,
    )
with sort_col:
    st.selectbox(
        "Sort by",
        options=list(SORT_PRESETS.keys()),
        format_func=lambda preset: SORT_PRESET_LABELS[preset],
        key="sort_preset",
        on_change=_on_preset_change,
    )
with export_col:
    st.download_button(
        "Export CSV",
        data=to_csv(views.visible),
        file_name=EXPORT_FILENAME,
        mime="text/csv",
        use_container_width=True,
    )

sort_keys = ["rank", NAME_KEY] + [k for k in NUMERIC_SORT_KEYS if k != "rank"]
for col, key in zip(st.columns(len(sort_keys)), sort_keys):
    arrow = ""
    if controller.view.sort_key == key:
        arrow = " ▲" if controller.view.sort_direction == "asc" else " ▼"
    with col:
        st.button(
            f"{_COLUMN_SORT_LABELS[key]}{arrow}",
            key=f"sort_col_{key}",
            on_click=_dispatch,
            args=("toggle_sort", key),
            use_container_width=True,
        )


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

render_leaderboard(views.visible)

visible_names = views.visible["name"].tolist()
action_player = st.selectbox(
    "Player",
    options=visible_names,
    index=None,
    placeholder="Select a player to view, pin or compare…",
    key="action_player",
)
view_col, pin_col, compare_col = st.columns(3)
with view_col:
    st.button(
        "View",
        key="action_view",
        disabled=action_player is None,
        on_click=_show_detail,
        args=(action_player,),
        use_container_width=True,
    )
with pin_col:
    is_pinned = action_player is not None and action_player == controller.view.pinned_player
    st.button(
        "Unpin" if is_pinned else "Pin",
        key="action_pin",
        disabled=action_player is None,
        on_click=_dispatch,
        args=("pin", action_player),
        use_container_width=True,
    )
with compare_col:
    st.button(
        "Compare",
        key="action_compare",
        disabled=action_player is None,
        on_click=_dispatch,
        args=("compare_add", action_player),
        use_container_width=True,
    )

st.divider()


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------

render_charts(
    views.win_rate_counts,
    views.rating_counts,
    views.totals,
    views.scatter,
    dark=dark,
)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

compared = controller.comparison_records()
if compared:
    st.divider()
    header_col, clear_col = st.columns([6, 1])
    with header_col:
        st.subheader("Player Comparison")
    with clear_col:
        st.button(
            "Clear",
            key="compare_clear",
            on_click=_dispatch,
            args=("compare_clear",),
            use_container_width=True,
        )
    removed = render_comparison_cards(compared)
    for name in removed:
        _dispatch("compare_remove", name)
    if removed:
        st.rerun()


# ---------------------------------------------------------------------------
# Player detail (enrichment loads last; failures only reach the log)
# ---------------------------------------------------------------------------

detail_record = get_record(dataset, st.session_state.get(_DETAIL_KEY))
if detail_record is not None:
    st.divider()
    agent = get_agent_config(
        detail_record.name,
        config.agent_config_map,
        config.agent_config_dir,
    )
    render_player_detail(detail_record, agent)
    st.button("Close", key="detail_close", on_click=_show_detail, args=(None,))

st.divider()
render_glossary()
