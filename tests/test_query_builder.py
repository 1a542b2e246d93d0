from typing import Any, Dict, List

from whoosh.query import NullQuery, Or, Require

from docsift.search.analysis import tokenize
from docsift.search.index import WhooshIndex
from docsift.search.query import Presence, QueryClause, StructuredQuery, Wildcard, build_query
from docsift.search.ranker import rank
from docsift.search.base_search import Document


def _index(rows: List[Dict[str, Any]]) -> WhooshIndex:
    return WhooshIndex.from_payload(
        {"ref": "id", "fields": ["title", "content", "version"], "rows": rows}
    )


def _no_expansion(field: str, prefix: str) -> List[str]:
    return []


def test_tokenize_is_lowercased_and_deterministic() -> None:
    assert tokenize("Install  Guide") == ["install", "guide"]
    assert tokenize("Install  Guide") == tokenize("Install  Guide")
    assert tokenize("") == []


def test_build_query_emits_four_boosted_clauses() -> None:
    q = build_query("Install Guide")
    assert q.terms == ("install", "guide")
    shape = [(c.field, c.boost, c.wildcard, c.presence) for c in q.clauses]
    assert shape == [
        ("title", 5.0, Wildcard.NONE, Presence.OPTIONAL),
        ("title", 5.0, Wildcard.TRAILING, Presence.OPTIONAL),
        ("content", 1.0, Wildcard.NONE, Presence.OPTIONAL),
        ("content", 1.0, Wildcard.TRAILING, Presence.OPTIONAL),
    ]
    assert all(c.terms == ("install", "guide") for c in q.clauses)


def test_build_query_adds_zero_boost_required_version_clause() -> None:
    q = build_query("guide", version_filter="2.0")
    (version,) = q.clauses_for("version")
    assert version.terms == ("2.0",)
    assert version.boost == 0.0
    assert version.presence is Presence.REQUIRED
    assert isinstance(q.to_whoosh(_no_expansion), Require)


def test_build_query_uses_given_tokenizer() -> None:
    q = build_query("ignored", tokenizer=lambda text: ["fixed"])
    assert q.terms == ("fixed",)


def test_empty_input_compiles_to_null_query() -> None:
    assert build_query("   ").to_whoosh(_no_expansion) is NullQuery


def test_title_match_outranks_content_match() -> None:
    idx = _index(
        [
            {"id": "1", "title": "alpha filler", "content": "beta filler"},
            {"id": "2", "title": "gamma filler", "content": "delta filler"},
        ]
    )
    title_hits = idx.query(build_query("alpha"))
    content_hits = idx.query(build_query("beta"))
    assert [h.ref for h in title_hits] == ["1"]
    assert [h.ref for h in content_hits] == ["1"]
    assert title_hits[0].score > content_hits[0].score


def test_exact_match_outranks_prefix_match() -> None:
    idx = _index(
        [
            {"id": "1", "title": "installation", "content": "setup"},
            {"id": "2", "title": "install", "content": "setup"},
        ]
    )
    hits = idx.query(build_query("install"))
    assert [h.ref for h in hits] == ["2", "1"]
    assert all(h.score > 0 for h in hits)


def test_trailing_wildcard_expands_to_boosted_terms() -> None:
    clause = QueryClause("title", ("inst", "zz"), boost=5.0, wildcard=Wildcard.TRAILING)
    words = {"inst": ["install", "instance"], "zz": []}
    inst, missing = clause.term_queries(lambda field, prefix: words[prefix])
    assert isinstance(inst, Or)
    assert [(t.fieldname, t.text, t.boost) for t in inst.subqueries] == [
        ("title", "install", 5.0),
        ("title", "instance", 5.0),
    ]
    assert missing is NullQuery


def test_required_clause_without_expansions_matches_nothing() -> None:
    clause = QueryClause(
        "version", ("9",), boost=0.0, wildcard=Wildcard.TRAILING, presence=Presence.REQUIRED
    )
    base = build_query("guide")
    q = StructuredQuery(terms=base.terms, clauses=base.clauses + (clause,))
    assert q.to_whoosh(_no_expansion) is NullQuery


def test_title_prefix_match_outranks_content_prefix_match() -> None:
    idx = _index(
        [
            {"id": "t", "title": "installation filler"},
            {"id": "c", "content": "installation filler"},
        ]
    )
    hits = idx.query(build_query("install"))
    scores = {h.ref: h.score for h in hits}
    assert [h.ref for h in hits] == ["t", "c"]
    assert scores["t"] > 2 * scores["c"]

    boosted = idx.query(build_query("install", title_boost=10.0))
    assert {h.ref: h.score for h in boosted}["t"] > scores["t"]
    assert {h.ref: h.score for h in boosted}["c"] == scores["c"]


def test_prefix_scores_follow_term_frequency() -> None:
    idx = _index(
        [
            {"id": "1", "content": "installer installer installation other"},
            {"id": "2", "content": "installer other words here"},
        ]
    )
    hits = idx.query(build_query("inst"))
    assert [h.ref for h in hits] == ["1", "2"]
    assert hits[0].score > hits[1].score


def test_version_only_match_is_filtered_out_of_results() -> None:
    rows = [
        {"id": "1", "title": "Guide", "content": "alpha", "version": "1.0"},
        {"id": "2", "title": "Guide", "content": "alpha", "version": "2.0"},
        {"id": "3", "title": "Other", "content": "zzz", "version": "1.0"},
    ]
    idx = _index(rows)
    query = build_query("alpha", version_filter="1.0")
    hits = idx.query(query)
    refs = [h.ref for h in hits]
    assert "2" not in refs
    assert all(h.score == 0 for h in hits if h.ref == "3")

    documents = [
        Document(id=r["id"], page_title=r["title"], section_title="", section_route="/docs/x")
        for r in rows
    ]
    results = rank(hits, documents, query.terms)
    assert [r.document.id for r in results] == ["1"]


def test_empty_index_answers_queries() -> None:
    idx = WhooshIndex.empty()
    assert idx.doc_count == 0
    assert idx.query(build_query("anything")) == []
    assert idx.query(build_query("anything", version_filter="1.0")) == []
