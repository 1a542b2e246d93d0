"""Compose and read the `highlight` query parameter of page URLs."""

from __future__ import annotations

from typing import List, Optional, Sequence
from urllib.parse import parse_qs, quote, urlsplit

from docsift.highlight.codec import decode_terms, encode_terms

HIGHLIGHT_PARAM = "highlight"


def highlight_url(section_route: str, terms: Sequence[str]) -> str:
    """Route path + `?highlight=<encoded>` + the route's `#fragment`, if any."""
    path, _, fragment = section_route.partition("#")
    # "~" is unreserved and stays literal
    url = f"{path}?{HIGHLIGHT_PARAM}={quote(encode_terms(terms), safe='')}"
    if fragment:
        url += "#" + fragment
    return url


def highlight_param(url: str) -> Optional[str]:
    """Percent-decoded `highlight` value, or None when absent or blank."""
    values = parse_qs(urlsplit(url).query).get(HIGHLIGHT_PARAM)
    if not values:
        return None
    return values[0]


def highlight_terms(url: str) -> List[str]:
    return decode_terms(highlight_param(url))
