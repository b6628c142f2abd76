"""
Session state of the search page.

Streamlit reruns the whole script on every interaction. The last
search report, the warnings of rejected overrides and the page being
viewed survive reruns in st.session_state under the keys below.
"""

import streamlit as st
from typing import Any, Dict, List, Optional

from ..search import SearchReport


QUERY_KEY = "search_query"
REPORT_KEY = "search_report"
WARNINGS_KEY = "search_warnings"
PAGE_KEY = "current_page"
PAGE_SIZE_KEY = "results_per_page"
STEP_DETAILS_KEY = "show_step_details"

DEFAULT_STATE = {
    QUERY_KEY: "",
    REPORT_KEY: None,
    WARNINGS_KEY: [],
    PAGE_KEY: 1,
    PAGE_SIZE_KEY: 20,
    STEP_DETAILS_KEY: True,
}


def init_state(overrides: Dict[str, Any] = None) -> None:
    """
    Fill in missing keys, leaving values from earlier reruns alone.

    Args:
        overrides: Initial values taking precedence over DEFAULT_STATE,
            e.g. the page size from the gui section of config.json.
    """
    for key, value in dict(DEFAULT_STATE, **(overrides or {})).items():
        st.session_state.setdefault(key, value)


def get_state(key: str, default: Any = None) -> Any:
    return st.session_state.get(key, default)


def set_state(key: str, value: Any) -> None:
    st.session_state[key] = value


def store_report(report: Optional[SearchReport], warnings: List[str] = None) -> None:
    """Keep the outcome of a search and show its first page."""
    set_state(REPORT_KEY, report)
    set_state(WARNINGS_KEY, list(warnings or []))
    set_state(PAGE_KEY, 1)


def clear_search_state() -> None:
    """Forget the last report, e.g. when the phrase is edited."""
    store_report(None)


def current_report() -> Optional[SearchReport]:
    return get_state(REPORT_KEY)


def get_pagination_state(total_results: int) -> Dict[str, int]:
    """
    Work out which slice of the ranked bookmarks to show.

    The stored page is clamped to the available pages, since a larger
    page size chosen in the sidebar can leave it past the end.

    Args:
        total_results: Number of ranked bookmarks in the report.

    Returns:
        Dictionary with current_page, total_pages, results_per_page and offset.
    """
    page_size = max(1, int(get_state(PAGE_SIZE_KEY, 20)))
    total_pages = max(1, -(-total_results // page_size))
    page = min(max(1, int(get_state(PAGE_KEY, 1))), total_pages)
    set_state(PAGE_KEY, page)

    return {
        "current_page": page,
        "total_pages": total_pages,
        "results_per_page": page_size,
        "offset": (page - 1) * page_size,
    }


def go_to_page(page: int) -> None:
    set_state(PAGE_KEY, max(1, page))
