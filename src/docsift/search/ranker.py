"""Filter, truncate and join raw index hits into search results."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from docsift.search.base_search import Document, QueryHit, SearchResult

logger = logging.getLogger(__name__)

MAX_RESULTS = 8


def rank(
    hits: Iterable[QueryHit],
    documents: Sequence[Document],
    terms: Sequence[str],
    *,
    limit: int = MAX_RESULTS,
) -> List[SearchResult]:
    """Turn score-ordered hits into at most `limit` results.

    Hits keep their upstream order. Zero-score hits are dropped first (they
    only matched the version filter), then the list is truncated, then each
    ref is joined to its document. A ref missing from the document table is
    logged and skipped.
    """
    table: Dict[str, Document] = {}
    for doc in documents:
        table.setdefault(str(doc.id), doc)

    scored = [hit for hit in hits if hit.score > 0][: max(0, int(limit))]
    term_tuple = tuple(terms)
    out: List[SearchResult] = []
    for hit in scored:
        doc = table.get(hit.ref)
        if doc is None:
            logger.warning(
                "Index ref %r has no matching document; index and document table out of sync",
                hit.ref,
            )
            continue
        out.append(SearchResult(document=doc, score=hit.score, terms=term_tuple))
    return out
