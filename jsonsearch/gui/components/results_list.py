"""
Results list component for displaying ranked bookmarks.

Renders the ranked bookmark tags with the segments that matched them,
the per-step search details, and pagination.
"""

import streamlit as st
from typing import Dict, List

from ...search import ScoredHit, SearchReport, SearchStep
from ..state import go_to_page


def collect_hits(steps: List[SearchStep]) -> Dict[str, List[ScoredHit]]:
    """
    Group the hits of every step by bookmark tag.

    A segment found by several steps is listed once.
    """
    grouped: Dict[str, List[ScoredHit]] = {}
    seen = set()
    for step in steps:
        for hit in step.hits:
            if not hit.bookmark_tag or hit.doc_id in seen:
                continue
            seen.add(hit.doc_id)
            grouped.setdefault(hit.bookmark_tag, []).append(hit)
    return grouped


def render_results(report: SearchReport, offset: int, limit: int) -> None:
    """
    Render one page of ranked bookmarks.

    Args:
        report: SearchReport of the last search.
        offset: Index of the first bookmark shown.
        limit: Number of bookmarks shown.
    """
    hits_by_tag = collect_hits(report.steps)
    page = report.ranked_bookmarks[offset:offset + limit]

    for position, (tag, score) in enumerate(page, offset + 1):
        _render_bookmark_card(position, tag, score, hits_by_tag.get(tag, []))


def _render_bookmark_card(position: int, tag: str, score: float, hits: List[ScoredHit]) -> None:
    """Render a single bookmark with its matching segments."""
    header = f"**{position}. {tag}** - score {score:.4f}"

    with st.expander(header, expanded=False):
        if not hits:
            st.caption("No segment details available.")
            return

        for hit in hits:
            st.caption(f"{_format_offsets(hit)} | score {hit.score:.4f}")
            st.markdown(hit.contents or "_no text_")


def _format_offsets(hit: ScoredHit) -> str:
    if hit.start is None and hit.end is None:
        return f"Segment #{hit.doc_id}"
    return f"Segment #{hit.doc_id} [{hit.start} - {hit.end}]"


def render_steps(steps: List[SearchStep]) -> None:
    """Render a table of every executed search step."""
    rows: List[Dict] = []
    for step in steps:
        rows.append({
            "step": step.state.value.replace("_", " "),
            "phrase": step.phrase,
            "hits": step.total_hits,
            "bookmarks": ", ".join(step.bookmark_scores) or "-",
            "time (ms)": step.execution_time_ms,
            "note": step.error or "",
        })

    with st.expander("Search steps", expanded=False):
        st.dataframe(rows, use_container_width=True, hide_index=True)
        for step in steps:
            if step.query:
                st.code(step.query, language=None)


def render_pagination(pagination: Dict[str, int]) -> None:
    """
    Render First/Prev/Next/Last controls.

    Args:
        pagination: Result of get_pagination_state for the current report.
    """
    current_page = pagination["current_page"]
    total_pages = pagination["total_pages"]
    if total_pages <= 1:
        return

    targets = [
        ("First", 1, current_page <= 1),
        ("Prev", current_page - 1, current_page <= 1),
        (None, None, None),
        ("Next", current_page + 1, current_page >= total_pages),
        ("Last", total_pages, current_page >= total_pages),
    ]

    for column, (label, page, disabled) in zip(st.columns([1, 1, 2, 1, 1]), targets):
        with column:
            if label is None:
                st.markdown(
                    f"<div style='text-align:center'>Page {current_page} of {total_pages}</div>",
                    unsafe_allow_html=True
                )
            elif st.button(label, disabled=disabled):
                go_to_page(page)
                st.rerun()
