"""Core search data structures and the abstract index contract.

Defines the loaded document table entries, raw query hits, ranked results,
and the minimal surface an index backend has to offer (e.g., Whoosh), so the
ranking and session code can be tested against a common contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from docsift.search.query import StructuredQuery


@dataclass(frozen=True, slots=True)
class Document:
    """A searchable page section from the index artifact.

    Attributes
    ----------
    id: str
        Identifier unique within one index; query refs resolve against it.
    page_title: str
        Title of the page the section belongs to.
    section_title: str
        Title of the section itself (equal to `page_title` for the page intro).
    section_route: str
        Site path of the section, optionally followed by `#fragment`.
    content: str
        Plain text of the section.
    version: str | None
        Docs version the section belongs to, when the site is versioned.
    """

    id: str
    page_title: str
    section_title: str
    section_route: str
    content: str = ""
    version: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Document:
        """Build a Document from an artifact entry (camelCase keys)."""
        version = data.get("version", data.get("docVersion"))
        return cls(
            id=str(data["id"]),
            page_title=str(data.get("pageTitle") or ""),
            section_title=str(data.get("sectionTitle") or ""),
            section_route=str(data["sectionRoute"]),
            content=str(data.get("content") or ""),
            version=str(version) if version is not None else None,
        )


@dataclass(frozen=True, slots=True)
class QueryHit:
    """A raw hit from index execution: document ref and its score."""

    ref: str
    score: float


@dataclass(slots=True)
class SearchResult:
    """A ranked result joined back to its document."""

    document: Document
    score: float
    terms: Tuple[str, ...] = ()


class BaseIndex(ABC):
    """Abstract interface for queryable, read-only index handles."""

    @property
    @abstractmethod
    def doc_count(self) -> int:
        """Number of indexed documents."""

    @abstractmethod
    def query(self, structured: StructuredQuery) -> List[QueryHit]:
        """Execute a structured query; hits are sorted by descending score."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class LoadedIndex:
    """Document table plus the index handle built from the same artifact."""

    documents: Tuple[Document, ...]
    index: BaseIndex
