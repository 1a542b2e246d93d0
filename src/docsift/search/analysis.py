"""Shared text analysis: the same analyzer tokenizes queries and indexed text."""

from __future__ import annotations

from typing import List

from whoosh.analysis import LowercaseFilter, RegexTokenizer

ANALYZER = RegexTokenizer() | LowercaseFilter()


def tokenize(text: str) -> List[str]:
    """Split free text into normalized terms, in input order."""
    if not text:
        return []
    return [token.text for token in ANALYZER(text)]
