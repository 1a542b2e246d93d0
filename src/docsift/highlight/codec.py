"""Reversible encoding of a term list into one URL-safe fragment.

Terms are joined by a single "~"; a literal "~" inside a term is doubled.
Decoding splits only on a "~" that is neither preceded nor followed by
another "~", so "a~~b" stays one term ("a~b") while "a~b" is two.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

DELIMITER = "~"
ESCAPED_DELIMITER = DELIMITER * 2

_LONE_DELIMITER = re.compile(r"(?<!~)~(?!~)")


def encode_terms(terms: Iterable[str]) -> str:
    return DELIMITER.join(t.replace(DELIMITER, ESCAPED_DELIMITER) for t in terms)


def decode_terms(fragment: Optional[str]) -> List[str]:
    """Inverse of `encode_terms`. Never raises; no terms gives []."""
    if not fragment:
        return []
    return [
        segment.replace(ESCAPED_DELIMITER, DELIMITER)
        for segment in _LONE_DELIMITER.split(fragment)
        if segment
    ]
