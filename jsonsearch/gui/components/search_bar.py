"""
Search bar component for the transcript search interface.

Provides the main search input and the report header.
"""

import streamlit as st
from typing import Tuple

from ...search import SearchReport
from ..state import QUERY_KEY, get_state, set_state, clear_search_state


def render_search_bar() -> Tuple[str, bool]:
    """
    Render the search input bar.

    Returns:
        Tuple of (query_text, was_submitted).
    """
    col1, col2 = st.columns([5, 1])

    with col1:
        query = st.text_input(
            "Search",
            value=get_state(QUERY_KEY, ""),
            placeholder="Enter a phrase, e.g. hyper space, lightsab*, wookie~",
            key="search_input",
            label_visibility="collapsed"
        )

    with col2:
        submitted = st.button(
            "Search",
            type="primary",
            use_container_width=True
        )

    previous_query = get_state(QUERY_KEY, "")
    query_changed = query != previous_query and query.strip() != ""

    if query_changed:
        clear_search_state()
        set_state(QUERY_KEY, query)

    return query, submitted or query_changed


def render_search_header(report: SearchReport) -> None:
    """
    Render search report header with totals.

    Args:
        report: SearchReport of the last search.
    """
    if not report:
        return

    col1, col2, col3 = st.columns([2, 2, 1])

    with col1:
        st.markdown(
            f"**{report.total_hits:,}** hits, "
            f"**{len(report.ranked_bookmarks):,}** bookmarks"
        )

    with col2:
        st.caption(f"Phrase: \"{report.phrase}\"")

    with col3:
        st.caption(f"{report.execution_time_ms:.0f} ms")

    if report.suggestions:
        st.caption(f"Suggestions searched: {', '.join(report.suggestions)}")


def render_no_results(report: SearchReport) -> None:
    """Display the below-threshold message."""
    st.info(
        f"No significant results for \"{report.phrase}\": "
        f"{report.total_hits} hits, at least {report.min_occur} needed"
    )

    with st.expander("Tips"):
        st.markdown("""
        - Check the spelling, or add `~` after a word for fuzzy matching
        - Use `*` to match word endings
        - Lower the minimum occurrences threshold in the sidebar
        """)
