"""Mark search terms inside a page's content root with `<mark>` elements.

Text is collected into runs: adjacent text nodes joined through inline
markup (links, code, emphasis, ...) form one run, block elements start a new
one. Terms are matched case-insensitively against each run, so a word split
by inline tags still matches; each text node the match touches gets its own
mark. Soft hyphens and zero-width joiners inside a word are ignored, and
accented letters match their unaccented form (and vice versa).

`Highlighter.apply()` returns a `Teardown` that removes exactly the marks it
added and merges the split text back together.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag  # type: ignore[import-untyped]

from docsift.config import SiteConfig
from docsift.highlight.page import Page, content_root

logger = logging.getLogger(__name__)

MARK_TAG = "mark"
MARK_ATTR = "data-markjs"

JOINERS = "\u00ad\u200b\u200c\u200d"
_JOINER_GAP = f"[{JOINERS}]*"

INLINE_TAGS = frozenset(
    {
        "a", "abbr", "b", "bdi", "bdo", "cite", "code", "data", "dfn", "em", "i",
        "kbd", "mark", "q", "s", "samp", "small", "span", "strong", "sub", "sup",
        "time", "u", "var", "wbr",
    }
)
SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "textarea"})

Run = List[NavigableString]


def _is_plain_text(node: object) -> bool:
    # Comments, CDATA, doctype etc. are NavigableString subclasses
    return type(node) is NavigableString


def _text_runs(root: Tag) -> List[Run]:
    runs: List[Run] = []
    current: Run = []

    def flush() -> None:
        nonlocal current
        if current:
            runs.append(current)
            current = []

    def walk(el: Tag) -> None:
        for child in list(el.children):
            if isinstance(child, Tag):
                if child.name in SKIP_TAGS or child.has_attr(MARK_ATTR):
                    flush()
                elif child.name in INLINE_TAGS:
                    walk(child)
                else:
                    flush()
                    walk(child)
                    flush()
            elif _is_plain_text(child):
                current.append(child)

    walk(root)
    flush()
    return runs


@lru_cache(maxsize=1024)
def _fold_char(ch: str) -> str:
    base = "".join(c for c in unicodedata.normalize("NFD", ch) if not unicodedata.combining(c))
    return base if len(base) == 1 else ch


def _fold(text: str) -> str:
    """Strip diacritics character by character, keeping offsets aligned."""
    return "".join(_fold_char(ch) for ch in text)


def _compile_terms(terms: Sequence[str]) -> Optional[re.Pattern[str]]:
    words = {_fold(w) for term in terms for w in term.split()}
    if not words:
        return None
    # Longest first so the alternation prefers the longer term at one position
    ordered = sorted(words, key=lambda w: (-len(w), w))
    alternatives = [_JOINER_GAP.join(re.escape(ch) for ch in w) for w in ordered]
    return re.compile("|".join(alternatives), re.IGNORECASE)


def _node_ranges(run: Run, pattern: re.Pattern[str]) -> Dict[int, List[Tuple[int, int]]]:
    """Map run position -> local (start, end) slices to wrap in that node."""
    starts: List[int] = []
    offset = 0
    for node in run:
        starts.append(offset)
        offset += len(node)
    text = _fold("".join(str(node) for node in run))

    ranges: Dict[int, List[Tuple[int, int]]] = {}
    for match in pattern.finditer(text):
        begin, end = match.span()
        for i, node in enumerate(run):
            lo, hi = starts[i], starts[i] + len(node)
            if hi <= begin or lo >= end:
                continue
            ranges.setdefault(i, []).append((max(begin, lo) - lo, min(end, hi) - lo))
    return ranges


class Teardown:
    """Removes the marks added by one `Highlighter.apply()` call."""

    def __init__(self, root: Optional[Tag] = None, marks: Sequence[Tag] = ()) -> None:
        self._root = root
        self._marks = list(marks)
        self._done = False

    @classmethod
    def inert(cls) -> Teardown:
        return cls()

    @property
    def marks(self) -> List[Tag]:
        return list(self._marks)

    def __call__(self) -> None:
        if self._done:
            return
        self._done = True
        for mark in self._marks:
            if mark.parent is not None:
                mark.unwrap()
        if self._root is not None and self._marks:
            self._root.smooth()
        self._marks = []


class Highlighter:
    """Marks decoded highlight terms on the current page."""

    def __init__(self, site: SiteConfig) -> None:
        self.site = site

    def apply(self, terms: Sequence[str], page: Page) -> Teardown:
        if not terms:
            return Teardown.inert()
        root = content_root(page, self.site)
        if root is None:
            logger.debug("No highlightable root on %s", page.path)
            return Teardown.inert()
        pattern = _compile_terms(terms)
        if pattern is None:
            return Teardown.inert()

        marks: List[Tag] = []
        for run in _text_runs(root):
            for index, slices in _node_ranges(run, pattern).items():
                marks.extend(self._wrap(page.soup, run[index], slices))
        logger.debug("Marked %d occurrence(s) of %r on %s", len(marks), list(terms), page.path)
        return Teardown(root, marks)

    @staticmethod
    def _wrap(
        soup: BeautifulSoup, node: NavigableString, slices: List[Tuple[int, int]]
    ) -> List[Tag]:
        text = str(node)
        pieces: List[object] = []
        marks: List[Tag] = []
        pos = 0
        for start, end in slices:
            if start > pos:
                pieces.append(NavigableString(text[pos:start]))
            mark = soup.new_tag(MARK_TAG, attrs={MARK_ATTR: "true"})
            mark.string = text[start:end]
            pieces.append(mark)
            marks.append(mark)
            pos = end
        if pos < len(text):
            pieces.append(NavigableString(text[pos:]))
        node.replace_with(*pieces)
        return marks
