"""
Result aggregation by bookmark tag.

Folds scored hits into per-tag cumulative scores, merges score maps from
several query executions and produces a stable descending ranking.
"""

from typing import Iterable, List, Tuple

from .models import BookmarkScoreMap, ScoredHit


def to_bookmark_scores(hits: Iterable[ScoredHit]) -> BookmarkScoreMap:
    """
    Sum hit scores per bookmark tag.

    Hits without a tag cannot be attributed and are dropped.

    Args:
        hits: Scored hits of one query execution.

    Returns:
        Tag -> summed score, in first-seen tag order.
    """
    scores: BookmarkScoreMap = {}
    for hit in hits:
        if not hit.bookmark_tag:
            continue
        scores[hit.bookmark_tag] = scores.get(hit.bookmark_tag, 0.0) + hit.score
    return scores


def merge(target: BookmarkScoreMap, source: BookmarkScoreMap) -> BookmarkScoreMap:
    """
    Add every score of source into target, in place.

    Returns:
        target, for chaining.
    """
    for tag, score in source.items():
        target[tag] = target.get(tag, 0.0) + score
    return target


def rank(scores: BookmarkScoreMap) -> List[Tuple[str, float]]:
    """
    Order tags by score, highest first.

    The sort is stable: equal scores keep their insertion order.
    """
    return sorted(scores.items(), key=lambda item: item[1], reverse=True)
