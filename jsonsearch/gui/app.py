"""
Main Streamlit application for transcript search.

Entry point that assembles all components into the complete
web interface with search settings, ranked bookmarks and step details.

Note: This file is run directly by Streamlit, so it needs to
set up the Python path before importing other modules.
"""

import sys
from pathlib import Path

# Add project root to path for imports when run directly by Streamlit
_project_root = Path(__file__).parent.parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import streamlit as st  # noqa: E402

from jsonsearch.core import (  # noqa: E402
    get_config,
    get_logger,
    apply_overrides,
    IndexUnavailableError,
)
from jsonsearch.database import init_schema  # noqa: E402
from jsonsearch.search import create_orchestrator  # noqa: E402

from jsonsearch.gui.state import (  # noqa: E402
    PAGE_SIZE_KEY,
    STEP_DETAILS_KEY,
    WARNINGS_KEY,
    current_report,
    get_pagination_state,
    get_state,
    init_state,
    store_report,
)
from jsonsearch.gui.components import (  # noqa: E402
    render_sidebar,
    render_search_bar,
    render_search_header,
    render_no_results,
    render_results,
    render_steps,
    render_pagination,
)

logger = get_logger(__name__)


def main():
    """Main application entry point."""
    config = get_config()

    st.set_page_config(
        page_title=config.gui.page_title,
        layout="wide",
        initial_sidebar_state="expanded"
    )

    init_state({
        PAGE_SIZE_KEY: config.gui.results_per_page,
        STEP_DETAILS_KEY: config.gui.show_step_details,
    })

    init_schema()

    options = render_sidebar()

    st.title(config.gui.page_title)
    st.caption("Phrase search over JSON transcripts, ranked by bookmark")

    query_text, submitted = render_search_bar()

    if submitted and query_text.strip():
        _execute_search(query_text.strip(), options)

    _render_results_section(options)


def _execute_search(query_text: str, options: dict) -> None:
    """
    Execute search and store the report in state.

    Args:
        query_text: The search phrase.
        options: Search options from sidebar.
    """
    settings, warnings = apply_overrides(get_config().search, options["overrides"])

    with st.spinner("Searching..."):
        try:
            orchestrator = create_orchestrator(
                settings,
                rebuild_dictionary=options["rebuild_dictionary"]
            )
            store_report(orchestrator.run_search(query_text), warnings)

        except IndexUnavailableError as e:
            store_report(None, warnings)
            st.error(f"Index unavailable: {e.message}. Run scripts/run_indexer.py first.")
            logger.error(f"Search error: {e}")


def _render_results_section(options: dict) -> None:
    """Render the search results section."""
    for warning in get_state(WARNINGS_KEY, []):
        st.warning(warning)

    report = current_report()

    if not report:
        _render_welcome()
        return

    render_search_header(report)

    if not report.significant:
        render_no_results(report)

    if report.ranked_bookmarks:
        st.divider()

        pagination = get_pagination_state(len(report.ranked_bookmarks))
        render_results(report, pagination["offset"], pagination["results_per_page"])

        st.divider()

        render_pagination(pagination)

    if options["show_step_details"]:
        render_steps(report.steps)


def _render_welcome() -> None:
    """Render welcome message when no search has been performed."""
    st.markdown("""
    ### Transcript search

    Use the search bar above to find phrases in the indexed transcripts.

    **Features:**
    - Exact and sound-alike phrase matching
    - Fuzzy (`~`) and wildcard (`*`, `?`) markers
    - Spelling suggestions when a phrase is rare
    - Results ranked by bookmark tag

    Enter a phrase to get started.
    """)


if __name__ == "__main__":
    main()
