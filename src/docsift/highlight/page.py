"""Page model and selection of the highlightable content root.

Docs and blog pages keep their text in the first `<article>`; every other
page uses the first `<main>`. The site build extracts indexed text from the
same element, so the two must stay in sync or highlighting finds nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, Tag  # type: ignore[import-untyped]

from docsift.config import SiteConfig


@dataclass(slots=True)
class Page:
    """A rendered page: its URL (path, query, fragment) and parsed HTML."""

    url: str
    soup: BeautifulSoup

    @classmethod
    def from_html(cls, url: str, html: str) -> Page:
        return cls(url=url, soup=BeautifulSoup(html, "html.parser"))

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    def html(self) -> str:
        return str(self.soup)


def is_docs_or_blog(path: str, site: SiteConfig) -> bool:
    return path.startswith(f"{site.base_url}{site.docs_base_path}") or path.startswith(
        f"{site.base_url}{site.blog_base_path}"
    )


def content_root(page: Page, site: SiteConfig) -> Optional[Tag]:
    """The element whose text is highlightable on this page, if present."""
    name = "article" if is_docs_or_blog(page.path, site) else "main"
    return page.soup.find(name)
