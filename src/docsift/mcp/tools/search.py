"""Docs search tools for FastMCP.

Query the site's search index, build highlight links for results, and
highlight a rendered page the way the browser would on arrival.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from fastmcp import FastMCP

from docsift.highlight.page import Page
from docsift.highlight.urls import highlight_terms, highlight_url
from docsift.search.base_search import SearchResult
from docsift.session import SearchSession


def _serialize_result(result: SearchResult) -> Dict[str, Any]:
    doc = result.document
    return {
        "id": doc.id,
        "page_title": doc.page_title,
        "section_title": doc.section_title,
        "route": doc.section_route,
        "url": highlight_url(doc.section_route, result.terms),
        "version": doc.version,
        "score": result.score,
        "terms": list(result.terms),
    }


def register_search_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register docs search tools on the given FastMCP instance.

    Uses state.session (a `SearchSession`); the index is loaded on first use.
    """

    def _session(state_obj: Any) -> SearchSession:
        session = getattr(state_obj, "session", None)
        if session is None:
            raise RuntimeError("Search session is not initialized.")
        return session

    @mcp.tool
    async def docs_search(query: str) -> List[Dict[str, Any]]:
        """Search the documentation index and return the top ranked sections.

        Parameters
        ----------
        query: str
            Free-text query, e.g. "install guide".
        """
        if not query or not str(query).strip():
            return []
        session = _session(get_state())
        await session.ensure_loaded()
        return [_serialize_result(r) for r in session.search(query)]

    @mcp.tool
    def docs_highlight_url(route: str, terms: List[str]) -> str:
        """Build a link to `route` that highlights `terms` on arrival."""
        route = (route or "").strip()
        if not route:
            raise ValueError("route is required")
        return highlight_url(route, [t for t in terms if t])

    @mcp.tool
    def docs_highlight(url: str, html: str) -> Dict[str, Any]:
        """Apply the `highlight` parameter of `url` to the page `html`.

        Returns the decoded terms, the number of marks and the marked HTML.
        """
        session = _session(get_state())
        page = Page.from_html(url, html)
        teardown = session.navigate(page)
        return {
            "terms": highlight_terms(url),
            "marks": len(teardown.marks),
            "html": page.html(),
        }
