"""
Token analyzer shared by indexing and querying.

Splits text into lowercase word terms and, in phonetic mode, replaces each
term by its metaphone code. The same analyzer fills the FTS5 tables and
builds queries, so both sides always agree on terms.
"""

import re
import unicodedata
from enum import Enum
from typing import Iterable, List

import jellyfish

from ..core import get_config

# Letters and digits only: matches how the unicode61 FTS5 tokenizer splits
TOKEN_PATTERN = re.compile(r"[^\W_]+")


class AnalysisMode(Enum):
    """How terms are produced from text."""
    EXACT = "exact"
    PHONETIC = "phonetic"


class TokenAnalyzer:
    """
    Deterministic text-to-terms analyzer.

    Attributes:
        stopwords: Lowercase terms removed before encoding.
    """

    def __init__(self, stopwords: Iterable[str] = ()):
        self.stopwords = frozenset(word.lower() for word in stopwords)

    @classmethod
    def from_config(cls) -> "TokenAnalyzer":
        """Build an analyzer with the configured stopword list."""
        return cls(stopwords=get_config().analysis.stopwords)

    def tokenize(self, text: str, mode: AnalysisMode = AnalysisMode.EXACT) -> List[str]:
        """
        Turn text into an ordered list of terms.

        Args:
            text: Raw text.
            mode: EXACT keeps lowercase words, PHONETIC encodes them.

        Returns:
            Terms in text order; may be empty.
        """
        if not text:
            return []

        normalized = unicodedata.normalize("NFKC", text).lower()
        words = [w for w in TOKEN_PATTERN.findall(normalized) if w not in self.stopwords]

        if mode is AnalysisMode.PHONETIC:
            codes = (jellyfish.metaphone(word).lower() for word in words)
            return [code for code in codes if code]

        return words

    def analyze(self, text: str, mode: AnalysisMode = AnalysisMode.EXACT) -> str:
        """Space-joined terms, the form stored in the FTS5 tables."""
        return " ".join(self.tokenize(text, mode))
