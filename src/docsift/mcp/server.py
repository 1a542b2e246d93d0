"""docsift MCP server entrypoint using FastMCP.

Exposes the documentation search and highlight operations as tools.
Run with:
  - docsift-mcp
  - or: python -m docsift.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

import logging
from typing import Optional

from fastmcp import FastMCP

from docsift.config import Settings, load_settings
from docsift.mcp.tools import register_search_tools
from docsift.search.source import IndexSource
from docsift.session import SearchSession


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.session: Optional[SearchSession] = None

    def init_session(self) -> None:
        """Create the search session from configuration."""
        cfg = self.settings.search
        source = IndexSource(
            index_available=cfg.index_available,
            index_path=cfg.index_path,
            timeout=cfg.timeout,
        )
        self.session = SearchSession(self.settings, source=source)


# Global state and server instance
_state: Optional[AppState] = None
mcp = FastMCP("docsift MCP Server")


# ----- Tools -----

@mcp.tool
def health() -> str:
    """Simple health check tool."""
    return "ok"


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    logging.basicConfig(
        level=settings.app.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _state = AppState(settings)
    _state.init_session()
    register_search_tools(mcp, get_state=lambda: _state)
    # Choose transport based on configuration: stdio (default), http, or sse
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
