"""
Text utility functions for transcript content.

Provides cleaning of dialogue text before indexing and
truncation for console and web display.
"""

import re
import unicodedata


def clean_text(text: str) -> str:
    """
    Normalize and clean transcript text.

    Removes control characters and collapses all whitespace runs,
    since transcript lines are displayed on a single line.

    Args:
        text: Raw text from a JSON field.

    Returns:
        Cleaned text string.
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKC", text)

    text = "".join(
        " " if unicodedata.category(char).startswith("C") else char
        for char in text
    )

    return re.sub(r"\s+", " ", text).strip()


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to maximum length with ellipsis.

    Args:
        text: Text to truncate.
        max_length: Maximum length including suffix.
        suffix: String to append when truncated.

    Returns:
        Truncated text or original if within limit.
    """
    if not text or len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)
    if truncate_at <= 0:
        return suffix[:max_length]

    # Prefer a word boundary when it is not too far back
    truncated = text[:truncate_at]
    last_space = truncated.rfind(" ")

    if last_space > truncate_at * 0.7:
        truncated = truncated[:last_space]

    return truncated + suffix


if __name__ == "__main__":
    sample = "  Punch it,\tChewie!\n\n\nWe're   going into hyperspace. "
    print(repr(clean_text(sample)))
    print(truncate_text("Never tell me the odds, just fly the ship through the field.", 30))
