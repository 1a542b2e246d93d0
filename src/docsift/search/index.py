"""In-memory Whoosh index handle rebuilt from the serialized search payload.

The index artifact carries the per-section rows that were indexed at build
time; they are re-analyzed into a RAM-only Whoosh index with the shared
analyzer so query terms and indexed tokens always agree. Nothing is
persisted and the handle is read-only once built.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List

from whoosh import scoring
from whoosh.fields import ID, TEXT, Schema
from whoosh.filedb.filestore import RamStorage
from whoosh.index import Index
from whoosh.query import NullQuery
from whoosh.reading import IndexReader

from docsift.exceptions import IndexLoadError
from docsift.search.analysis import ANALYZER
from docsift.search.base_search import BaseIndex, QueryHit
from docsift.search.query import PrefixExpander, StructuredQuery

INDEXED_FIELDS = ("title", "content", "version")


def make_schema() -> Schema:
    return Schema(
        id=ID(stored=True, unique=True),
        title=TEXT(analyzer=ANALYZER),
        content=TEXT(analyzer=ANALYZER),
        # Exact-match only; filters documents by docs version
        version=ID(),
    )


def _to_index_rows(
    rows: Iterable[Any], *, ref: str, fields: Iterable[str]
) -> Iterable[Dict[str, str]]:
    wanted = [f for f in INDEXED_FIELDS if f in set(fields)]
    for row in rows:
        if not isinstance(row, dict) or row.get(ref) is None:
            raise IndexLoadError(f"Index row without '{ref}' ref: {row!r}")
        out = {"id": str(row[ref])}
        for name in wanted:
            value = row.get(name)
            if value is not None:
                out[name] = str(value)
        yield out


def _prefix_expander(reader: IndexReader) -> PrefixExpander:
    def expand(field: str, prefix: str) -> Iterator[str]:
        if not prefix or field not in reader.schema:
            return
        from_bytes = reader.schema[field].from_bytes
        for btext in reader.expand_prefix(field, prefix):
            yield from_bytes(btext)

    return expand


class WhooshIndex(BaseIndex):
    """Read-only index handle over a RAM Whoosh index."""

    def __init__(self, index: Index) -> None:
        self._index = index

    @classmethod
    def empty(cls) -> WhooshIndex:
        """A valid index with the full schema and no documents."""
        return cls(RamStorage().create_index(make_schema()))

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> WhooshIndex:
        """Build the handle from the artifact's `index` member.

        Expected shape: {"ref": "id", "fields": [...], "rows": [{...}, ...]}.
        """
        if not isinstance(payload, dict):
            raise IndexLoadError("Index payload must be a JSON object")
        rows = payload.get("rows")
        if not isinstance(rows, list):
            raise IndexLoadError("Index payload has no 'rows' list")
        ref = str(payload.get("ref") or "id")
        fields = payload.get("fields") or INDEXED_FIELDS

        idx = RamStorage().create_index(make_schema())
        writer = idx.writer()
        try:
            for row in _to_index_rows(rows, ref=ref, fields=fields):
                writer.add_document(**row)
        except Exception:
            writer.cancel()
            raise
        writer.commit()
        return cls(idx)

    @property
    def doc_count(self) -> int:
        return self._index.doc_count()

    def query(self, structured: StructuredQuery) -> List[QueryHit]:
        with self._index.searcher(weighting=scoring.BM25F()) as searcher:
            q = structured.to_whoosh(_prefix_expander(searcher.reader()))
            if q is NullQuery:
                return []
            results = searcher.search(q, limit=None)
            return [QueryHit(ref=hit["id"], score=float(hit.score or 0.0)) for hit in results]
