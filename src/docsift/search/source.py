"""Index source: loads the document table and index handle once per page.

With a prebuilt artifact the JSON document is fetched over HTTP via httpx.
Without one (local development, no site build) an empty index with the same
schema is returned, so query code never needs a "no index" branch.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from docsift.exceptions import IndexLoadError
from docsift.search.base_search import Document, LoadedIndex
from docsift.search.index import WhooshIndex

logger = logging.getLogger(__name__)

DEFAULT_INDEX_PATH = "search-index.json"
UNAVAILABLE_MESSAGE = "The search index is only available when you run the site build!"


def parse_artifact(data: Any) -> LoadedIndex:
    """Decode the artifact JSON `{documents: [...], index: {...}}`."""
    if not isinstance(data, dict):
        raise IndexLoadError("Search index artifact must be a JSON object")
    raw_docs = data.get("documents")
    if not isinstance(raw_docs, list):
        raise IndexLoadError("Search index artifact has no 'documents' list")
    try:
        documents = tuple(Document.from_json(d) for d in raw_docs)
    except (KeyError, TypeError, AttributeError) as exc:
        raise IndexLoadError(f"Malformed document entry in search index: {exc}") from exc
    index = WhooshIndex.from_payload(data.get("index"))
    return LoadedIndex(documents=documents, index=index)


class IndexSource:
    """Loads the searchable corpus.

    Parameters
    ----------
    index_available: bool
        True when a built artifact can be fetched; False yields an empty index.
    index_path: str
        Artifact path relative to the site base location.
    timeout: float
        HTTP timeout in seconds.
    """

    def __init__(
        self,
        *,
        index_available: bool,
        index_path: str = DEFAULT_INDEX_PATH,
        timeout: float = 30.0,
    ) -> None:
        self.index_available = index_available
        self.index_path = index_path
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )

    def index_url(self, base_location: str) -> str:
        return f"{base_location.rstrip('/')}/{self.index_path.lstrip('/')}"

    async def _fetch_json(self, url: str) -> Dict[str, Any]:
        async with self._client() as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.json()

    async def load(self, base_location: str) -> LoadedIndex:
        """Fetch and decode the index; raises `IndexLoadError` on any failure."""
        if not self.index_available:
            logger.info("No search index artifact configured; using an empty index")
            return LoadedIndex(documents=(), index=WhooshIndex.empty())

        url = self.index_url(base_location)
        try:
            data = await self._fetch_json(url)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Failed to fetch search index from %s: %s", url, exc)
            raise IndexLoadError(f"Could not load search index from {url}") from exc

        loaded = parse_artifact(data)
        logger.info("Loaded search index from %s (%d documents)", url, len(loaded.documents))
        return loaded
