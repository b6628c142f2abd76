"""
Sidebar component for the transcript search interface.

Displays index statistics, strategy boosts, search thresholds and help text.
"""

import streamlit as st
from typing import Dict

from ...core import get_config, SearchSettings
from ...database import get_statistics
from ..state import PAGE_SIZE_KEY, STEP_DETAILS_KEY, get_state, set_state


BOOST_LABELS = {
    "boost_exact": "Exact phrase",
    "boost_phonetic": "Phonetic phrase",
    "boost_wildcard": "Wildcard",
    "boost_fuzzy": "Fuzzy",
    "boost_prefix": "Prefix / compound",
}


def render_sidebar() -> Dict:
    """
    Render the sidebar with stats and options.

    Returns:
        Dictionary with the search setting overrides and display options.
    """
    defaults = get_config().search

    with st.sidebar:
        st.title("Transcript Search")

        st.subheader("Statistics")
        _render_statistics()

        st.divider()

        st.subheader("Strategy boosts")
        overrides = _render_boosts(defaults)

        st.divider()

        st.subheader("Thresholds")
        overrides.update(_render_thresholds(defaults))

        st.divider()

        st.subheader("Display")
        display = _render_display_options()

        st.divider()

        _render_help()

    return {"overrides": overrides, **display}


def _render_statistics() -> None:
    """Display database statistics."""
    try:
        stats = get_statistics()

        col1, col2 = st.columns(2)

        with col1:
            st.metric("Files", f"{stats['total_files']:,}")
            st.metric("Bookmarks", f"{stats['total_bookmarks']:,}")

        with col2:
            st.metric("Segments", f"{stats['total_segments']:,}")
            st.metric("Dictionary", f"{stats['dictionary_words']:,}")

        if stats['newest_index']:
            st.caption(f"Last update: {stats['newest_index'][:16]}")

    except Exception as e:
        st.warning(f"Cannot load statistics: {e}")


def _render_boosts(defaults: SearchSettings) -> Dict:
    """Render one slider per strategy boost."""
    boosts = {}
    for name, label in BOOST_LABELS.items():
        boosts[name] = st.slider(
            label,
            min_value=0.1,
            max_value=10.0,
            value=float(getattr(defaults, name)),
            step=0.1,
            key=f"{name}_slider"
        )
    return boosts


def _render_thresholds(defaults: SearchSettings) -> Dict:
    """Render integer tunables."""
    return {
        "phrase_slop": st.number_input(
            "Phrase slop", min_value=0, max_value=100,
            value=defaults.phrase_slop, key="slop_input"
        ),
        "min_should_match": st.number_input(
            "Minimum clauses to match", min_value=0, max_value=10,
            value=defaults.min_should_match, key="msm_input"
        ),
        "fuzzy_edits": st.selectbox(
            "Fuzzy edits", options=[0, 1, 2],
            index=defaults.fuzzy_edits, key="fuzzy_select"
        ),
        "min_occur": st.number_input(
            "Minimum occurrences", min_value=0, max_value=100000,
            value=defaults.min_occur, key="min_occur_input",
            help="Fewer hits trigger spelling suggestions"
        ),
        "max_search": st.number_input(
            "Hits per query", min_value=1, max_value=100000,
            value=defaults.max_search, key="max_search_input"
        ),
        "spell_suggestions_per_term": st.number_input(
            "Suggestions per term", min_value=1, max_value=10,
            value=defaults.spell_suggestions_per_term, key="per_term_input"
        ),
        "max_suggestion_combos": st.number_input(
            "Maximum suggestions", min_value=1, max_value=100,
            value=defaults.max_suggestion_combos, key="combos_input"
        ),
    }


def _render_display_options() -> Dict:
    """Render result display controls."""
    results_per_page = st.slider(
        "Bookmarks per page",
        min_value=10,
        max_value=100,
        value=get_state(PAGE_SIZE_KEY, 20),
        step=10,
        key="results_slider"
    )
    set_state(PAGE_SIZE_KEY, results_per_page)

    show_steps = st.checkbox(
        "Show search steps",
        value=get_state(STEP_DETAILS_KEY, True),
        key="steps_checkbox"
    )
    set_state(STEP_DETAILS_KEY, show_steps)

    rebuild = st.checkbox(
        "Rebuild spelling dictionary",
        value=False,
        key="rebuild_checkbox"
    )

    return {
        PAGE_SIZE_KEY: results_per_page,
        STEP_DETAILS_KEY: show_steps,
        "rebuild_dictionary": rebuild
    }


def _render_help() -> None:
    """Display search help text."""
    with st.expander("Search help"):
        st.markdown("""
        **Phrase search:**
        - Type a phrase; exact and sound-alike matches are combined
        - Results are grouped and ranked by bookmark tag

        **Markers:**
        - `word~` - Fuzzy match (spelling mistakes)
        - `prefix*` - Words starting with the prefix
        - `w?rd`, `w*d` - Wildcard patterns

        **Examples:**
        - `hyper space`
        - `lightsab*`
        - `wookie~`

        When a phrase yields too few hits, spelling suggestions
        are searched as well.
        """)
