"""Search session: one-time index load, querying, selection and highlighting.

The search box fires load intents from several places (focus, mouse over,
the search icon). All of them go through one gate with three states:

    EMPTY --(first intent)--> LOADING --(index + shell ready)--> READY

The gate is checked and set synchronously, before any await, so concurrent
intents share a single load task. READY is terminal. A failed load leaves
the gate in LOADING: the failure is logged and re-raised to every awaiter,
and nothing retries it.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional, Protocol

from docsift.config import Settings
from docsift.exceptions import ConfigError, SearchNotReadyError
from docsift.highlight.marker import Highlighter, Teardown
from docsift.highlight.page import Page
from docsift.highlight.urls import highlight_terms, highlight_url
from docsift.search.base_search import LoadedIndex, SearchResult
from docsift.search.query import build_query
from docsift.search.ranker import rank
from docsift.search.source import UNAVAILABLE_MESSAGE

logger = logging.getLogger(__name__)


class LoadState(Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class Intent(Enum):
    """User actions that signal the search box is about to be used."""

    FOCUS = "focus"
    HOVER = "hover"
    ICON_CLICK = "icon_click"


FOCUS_INTENTS = frozenset({Intent.FOCUS, Intent.ICON_CLICK})


class IndexLoader(Protocol):
    async def load(self, base_location: str) -> LoadedIndex: ...


class SearchShell(Protocol):
    """The search box widget (input + suggestion dropdown)."""

    async def prepare(self) -> None:
        """Load whatever the widget needs before it can show suggestions."""

    def bind(
        self,
        source: Callable[[str], List[SearchResult]],
        on_select: Callable[[SearchResult], str],
    ) -> None:
        """Attach the query source and the selection callback."""

    def focus(self) -> None: ...


class Navigator(Protocol):
    def push(self, url: str) -> None:
        """Push a URL onto the navigation history (no full reload)."""


class SearchSession:
    """Coordinates index loading, queries and on-page highlighting."""

    def __init__(
        self,
        settings: Settings,
        *,
        source: IndexLoader,
        highlighter: Optional[Highlighter] = None,
        navigator: Optional[Navigator] = None,
        shell: Optional[SearchShell] = None,
    ) -> None:
        cfg = settings.search
        if cfg.versioning_enabled and not cfg.version:
            raise ConfigError("search.version is required when versioning is enabled")
        self.settings = settings
        self._source = source
        self._highlighter = highlighter or Highlighter(settings.site)
        self._navigator = navigator
        self._shell = shell

        self._state = LoadState.EMPTY
        self._task: Optional[asyncio.Task[LoadedIndex]] = None
        self._loaded: Optional[LoadedIndex] = None
        self._focus_after_load = False

        self._version = cfg.version
        self._page: Optional[Page] = None
        self._teardown = Teardown.inert()

    # ----- Loading -----

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def loaded(self) -> Optional[LoadedIndex]:
        return self._loaded

    def intent(self, kind: Intent) -> asyncio.Task[LoadedIndex]:
        """Record a user intent and return the (single) index load task.

        Must be called from within the running event loop.
        """
        if kind in FOCUS_INTENTS:
            self._focus_after_load = True
            if self._state is LoadState.READY and self._shell is not None:
                self._shell.focus()
        return self._start()

    async def ensure_loaded(self) -> LoadedIndex:
        return await self._start()

    def _start(self) -> asyncio.Task[LoadedIndex]:
        if self._state is LoadState.EMPTY:
            self._state = LoadState.LOADING
            self._task = asyncio.get_running_loop().create_task(self._load())
            self._task.add_done_callback(self._on_load_done)
        return self._task  # type: ignore[return-value]

    async def _load(self) -> LoadedIndex:
        base_location = self.settings.site.base_location
        if self._shell is not None:
            loaded, _ = await asyncio.gather(
                self._source.load(base_location), self._shell.prepare()
            )
        else:
            loaded = await self._source.load(base_location)

        self._loaded = loaded
        if self._shell is not None:
            self._shell.bind(self.search, self.select)
            if self._focus_after_load:
                self._shell.focus()
        self._state = LoadState.READY
        return loaded

    def _on_load_done(self, task: asyncio.Task[LoadedIndex]) -> None:
        if task.cancelled():
            logger.warning("Search index load was cancelled; search stays unavailable")
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Search index load failed; search stays unavailable: %s", exc)
            return
        logger.info("Search ready (%d documents)", len(task.result().documents))

    # ----- Querying -----

    @property
    def version(self) -> Optional[str]:
        return self._version

    @property
    def placeholder(self) -> str:
        if self.settings.search.versioning_enabled:
            return f"Search [{self._version}]"
        return "Search"

    @property
    def empty_message(self) -> str:
        """Text a shell shows when a query has no matches."""
        if self.settings.search.index_available:
            return ""
        return UNAVAILABLE_MESSAGE

    def search(self, raw_input: str) -> List[SearchResult]:
        """Run a query against the loaded index; synchronous once READY."""
        if self._state is not LoadState.READY or self._loaded is None:
            raise SearchNotReadyError(f"Search index is not ready (state: {self._state.value})")
        cfg = self.settings.search
        query = build_query(
            raw_input,
            version_filter=self._version if cfg.versioning_enabled else None,
            title_boost=cfg.title_boost,
            content_boost=cfg.content_boost,
        )
        hits = self._loaded.index.query(query)
        return rank(hits, self._loaded.documents, query.terms, limit=cfg.max_results)

    def select(self, result: SearchResult) -> str:
        """Navigate to a result, carrying its terms in the `highlight` parameter."""
        url = highlight_url(result.document.section_route, result.terms)
        if self._navigator is not None:
            self._navigator.push(url)
        return url

    # ----- Highlighting -----

    def navigate(self, page: Page) -> Teardown:
        """Handle arrival at a page: drop old marks, apply the URL's highlight."""
        self._page = page
        return self._refresh_highlight()

    def set_version(self, version: Optional[str]) -> None:
        self._version = version
        self._refresh_highlight()

    def _refresh_highlight(self) -> Teardown:
        self._teardown()
        self._teardown = Teardown.inert()
        if self._page is not None:
            terms = highlight_terms(self._page.url)
            self._teardown = self._highlighter.apply(terms, self._page)
        return self._teardown
