"""Readable article extraction for feedpages."""

import logging
import re
from typing import Optional, Protocol

import requests
from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag
from readability import Document

from .models import EntryData

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Text inside these tags keeps its whitespace
PRESERVE_WHITESPACE_TAGS = ["pre", "textarea", "script", "style"]

# Whitespace next to these tags is not rendered
BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "body", "br", "dd", "details",
    "div", "dl", "dt", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "head", "header", "hr", "html", "li", "link", "main", "meta",
    "nav", "ol", "p", "pre", "section", "summary", "table", "tbody", "td", "tfoot",
    "th", "thead", "title", "tr", "ul",
}

WHITESPACE_RE = re.compile(r"\s+")


class ContentFetcher(Protocol):
    """Loads the readable content of an entry.

    ``release`` must be called after every ``fetch``, whatever its outcome.
    """

    def fetch(self, entry: EntryData) -> Optional[str]:
        ...

    def release(self) -> None:
        ...


class ReadabilityFetcher:
    """Fetch an entry page over HTTP and extract the article with readability."""

    def __init__(self, timeout: int = 30):
        self.timeout = timeout
        self._session: Optional[requests.Session] = None

    def _open_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(
                {
                    "User-Agent": USER_AGENT,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                }
            )
        return self._session

    def fetch(self, entry: EntryData) -> Optional[str]:
        """Load the readable article HTML for an entry.

        Args:
            entry: Entry whose link is loaded

        Returns:
            Article HTML, or None if the page has no readable text

        Raises:
            ContentFetchError: If the page cannot be fetched or parsed
        """
        session = self._open_session()
        try:
            response = session.get(entry.link, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ContentFetchError(f"Failed to fetch page: {e}") from e

        try:
            content = Document(response.text).summary(html_partial=True)
        except Exception as e:
            raise ContentFetchError(f"Failed to extract article: {e}") from e

        if not BeautifulSoup(content, "html.parser").get_text(strip=True):
            logger.debug("No readable text in %s", entry.link)
            return None
        return content

    def release(self) -> None:
        """Close the session opened by the last fetch."""
        if self._session is not None:
            self._session.close()
            self._session = None


def minify_html(markup: str) -> str:
    """Minify HTML markup.

    Removes comments, normalizes the doctype to ``<!DOCTYPE html>``,
    collapses whitespace runs in text to one space and drops whitespace
    between block elements. Whitespace between inline elements is kept as
    one space.

    Args:
        markup: HTML to minify

    Returns:
        Minified HTML
    """
    soup = BeautifulSoup(markup, "html.parser")

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for doctype in soup.find_all(string=lambda text: isinstance(text, Doctype)):
        doctype.replace_with(Doctype("html"))

    for text in soup.find_all(string=True):
        # Doctype, CData, Script and friends are NavigableString subclasses
        if type(text) is not NavigableString:
            continue
        if text.find_parent(PRESERVE_WHITESPACE_TAGS):
            continue
        collapsed = WHITESPACE_RE.sub(" ", str(text))
        if collapsed == " " and _at_block_boundary(text):
            text.extract()
        elif collapsed != text:
            text.replace_with(collapsed)

    return str(soup)


def _is_block(node) -> bool:
    return isinstance(node, Tag) and node.name in BLOCK_TAGS


def _at_block_boundary(text: NavigableString) -> bool:
    """Whether whitespace at this position has no effect on rendering.

    True when the text sits next to a block element, or at the start or
    end of a block container (or of the document).
    """
    if _is_block(text.previous_sibling) or _is_block(text.next_sibling):
        return True
    parent = text.parent
    container_is_block = isinstance(parent, BeautifulSoup) or _is_block(parent)
    return container_is_block and (text.previous_sibling is None or text.next_sibling is None)


class ContentFetchError(Exception):
    """Raised when an entry page cannot be fetched or its article extracted."""

    pass
