"""Weighted multi-field query construction.

Raw search box input is tokenized and expanded into four boosted clauses:
exact and trailing-wildcard matches on `title` (boost 5) and on `content`
(boost 1). Exact clauses let full-word hits outrank prefix-only hits, and the
title/content asymmetry makes a title hit count five times a body hit. When
docs are versioned, a zero-boost required clause on `version` restricts the
candidates without touching the score.

`StructuredQuery.to_whoosh()` compiles the clauses for the Whoosh backend.
Trailing-wildcard terms are expanded against the index lexicon into plain
boosted `Term` queries; Whoosh's own `Prefix` scores its expansions without
the clause boost.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from whoosh.query import And, NullQuery, Or, Query, Require, Term

from docsift.search.analysis import tokenize

TITLE_BOOST = 5.0
CONTENT_BOOST = 1.0


class Wildcard(Enum):
    """Wildcard mode of a clause."""

    NONE = "none"
    TRAILING = "trailing"  # term also matches as a prefix of longer tokens


class Presence(Enum):
    """How a clause constrains which documents qualify."""

    OPTIONAL = "optional"
    REQUIRED = "required"


# (field, prefix) -> indexed words in `field` starting with `prefix`
PrefixExpander = Callable[[str, str], Iterable[str]]


@dataclass(frozen=True, slots=True)
class QueryClause:
    field: str
    terms: Tuple[str, ...]
    boost: float = 1.0
    wildcard: Wildcard = Wildcard.NONE
    presence: Presence = Presence.OPTIONAL

    def term_queries(self, expand: PrefixExpander) -> List[Query]:
        """One Whoosh query per term, carrying this clause's boost.

        A trailing-wildcard term becomes an `Or` of its expansions, each a
        `Term` with the clause boost, or `NullQuery` when nothing expands.
        """
        if self.wildcard is not Wildcard.TRAILING:
            return [Term(self.field, t, boost=self.boost) for t in self.terms]
        queries: List[Query] = []
        for t in self.terms:
            words = [Term(self.field, w, boost=self.boost) for w in expand(self.field, t)]
            if not words:
                queries.append(NullQuery)
            else:
                queries.append(words[0] if len(words) == 1 else Or(words))
        return queries


@dataclass(frozen=True, slots=True)
class StructuredQuery:
    """Tokenized terms plus the clauses built over them."""

    terms: Tuple[str, ...]
    clauses: Tuple[QueryClause, ...]

    def clauses_for(self, field: str) -> List[QueryClause]:
        return [c for c in self.clauses if c.field == field]

    def to_whoosh(self, expand: PrefixExpander) -> Query:
        """Compile to a Whoosh query tree.

        `expand` resolves trailing-wildcard terms against the index being
        searched. Optional and required clauses all contribute to the score
        (so a document matching only a zero-boost required clause scores 0,
        the same way it would in the browser index). Required clauses
        additionally filter via `Require`.

        The scoring `Or` is not normalized: normalization drops repeated
        subqueries, and an exact hit must count once for the exact clause
        and once more for the wildcard clause.
        """
        scoring: List[Query] = []
        required: List[Query] = []
        for clause in self.clauses:
            queries = clause.term_queries(expand)
            if clause.presence is Presence.REQUIRED:
                if not queries or any(q is NullQuery for q in queries):
                    return NullQuery
                required.append(And(queries) if len(queries) > 1 else queries[0])
            scoring.extend(q for q in queries if q is not NullQuery)

        if not scoring:
            return NullQuery
        q: Query = Or(scoring)
        if required:
            q = Require(q, And(required) if len(required) > 1 else required[0])
        return q


def build_query(
    raw_input: str,
    *,
    tokenizer: Callable[[str], Sequence[str]] = tokenize,
    version_filter: Optional[str] = None,
    title_boost: float = TITLE_BOOST,
    content_boost: float = CONTENT_BOOST,
) -> StructuredQuery:
    """Turn search box input into a boosted multi-clause query."""
    terms = tuple(tokenizer(raw_input or ""))
    clauses = [
        QueryClause("title", terms, boost=title_boost),
        QueryClause("title", terms, boost=title_boost, wildcard=Wildcard.TRAILING),
        QueryClause("content", terms, boost=content_boost),
        QueryClause("content", terms, boost=content_boost, wildcard=Wildcard.TRAILING),
    ]
    if version_filter is not None:
        # Boost 0: decides which documents qualify, never how they rank
        clauses.append(
            QueryClause(
                "version",
                (version_filter,),
                boost=0.0,
                presence=Presence.REQUIRED,
            )
        )
    return StructuredQuery(terms=terms, clauses=tuple(clauses))
