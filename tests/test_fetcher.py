"""Tests for readable content fetching and HTML minification."""

from unittest.mock import Mock, patch

import pytest
import requests

from feedpages.fetcher import ContentFetchError, ReadabilityFetcher, minify_html
from feedpages.models import EntryData


SAMPLE_ARTICLE_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>An Article</title>
</head>
<body>
  <nav><a href="/">Home</a> <a href="/about">About</a></nav>
  <article>
    <h1>An Article</h1>
    <p>This is the first paragraph of a reasonably long article body, long
    enough for the readability scoring to treat it as the main content of
    the page, with commas, sentences, and more words to raise its score.</p>
    <p>A second paragraph continues the article with further text, again
    written to look like real prose, so that the extracted summary holds
    both paragraphs and none of the navigation links around them.</p>
  </article>
  <footer>Copyright</footer>
</body>
</html>
"""

ENTRY = EntryData(
    title="An Article",
    link="https://example.com/article",
    date=100,
    author="x",
    site_title="Example",
    site_hash="site",
    entry_hash="entry",
    category="tech",
)


def mock_response(text: str) -> Mock:
    response = Mock()
    response.text = text
    response.raise_for_status = Mock()
    return response


class TestMinifyHtml:
    """Tests for minify_html."""

    def test_removes_comments(self):
        assert minify_html("<p>a<!-- hidden --></p>") == "<p>a</p>"

    def test_collapses_whitespace(self):
        assert minify_html("<p>  one \n\t two  </p>") == "<p> one two </p>"

    def test_drops_whitespace_between_tags(self):
        assert minify_html("<div>\n  <p>x</p>\n  <p>y</p>\n</div>") == "<div><p>x</p><p>y</p></div>"

    def test_keeps_space_between_inline_elements(self):
        result = minify_html("<p><a href='/x'>Hello</a> <em>world</em></p>")
        assert result == '<p><a href="/x">Hello</a> <em>world</em></p>'

    def test_collapses_space_between_inline_elements(self):
        assert minify_html("<p><a>x</a>\n   <em>y</em></p>") == "<p><a>x</a> <em>y</em></p>"

    def test_drops_whitespace_at_block_edges(self):
        assert minify_html("<p>\n  <a>x</a>\n</p>") == "<p><a>x</a></p>"

    def test_keeps_space_between_top_level_inline_elements(self):
        assert minify_html("<span>a</span>\n<span>b</span>") == "<span>a</span> <span>b</span>"

    def test_normalizes_doctype(self):
        markup = (
            '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN" '
            '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd">\n<html><body>x</body></html>'
        )
        result = minify_html(markup)
        assert result.startswith("<!DOCTYPE html>")
        assert "W3C" not in result

    def test_preserves_pre_content(self):
        markup = "<pre>line one\n    indented</pre>"
        assert minify_html(markup) == markup

    def test_plain_text_untouched(self):
        assert minify_html("<p>already tight</p>") == "<p>already tight</p>"


class TestReadabilityFetcher:
    """Tests for ReadabilityFetcher."""

    @patch("feedpages.fetcher.requests.Session")
    def test_fetch_extracts_article(self, mock_session_cls):
        session = mock_session_cls.return_value
        session.get.return_value = mock_response(SAMPLE_ARTICLE_PAGE)

        fetcher = ReadabilityFetcher(timeout=5)
        content = fetcher.fetch(ENTRY)

        assert content is not None
        assert "first paragraph" in content
        assert "second paragraph" in content
        session.get.assert_called_once_with("https://example.com/article", timeout=5)

    @patch("feedpages.fetcher.Document")
    @patch("feedpages.fetcher.requests.Session")
    def test_fetch_empty_page_returns_none(self, mock_session_cls, mock_document_cls):
        session = mock_session_cls.return_value
        session.get.return_value = mock_response("<html><body></body></html>")
        mock_document_cls.return_value.summary.return_value = "<div><p> </p></div>"

        assert ReadabilityFetcher().fetch(ENTRY) is None

    @patch("feedpages.fetcher.requests.Session")
    def test_fetch_network_error(self, mock_session_cls):
        session = mock_session_cls.return_value
        session.get.side_effect = requests.RequestException("Connection failed")

        with pytest.raises(ContentFetchError) as exc_info:
            ReadabilityFetcher().fetch(ENTRY)

        assert "Failed to fetch page" in str(exc_info.value)

    @patch("feedpages.fetcher.requests.Session")
    def test_fetch_http_error(self, mock_session_cls):
        response = mock_response("")
        response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        mock_session_cls.return_value.get.return_value = response

        with pytest.raises(ContentFetchError):
            ReadabilityFetcher().fetch(ENTRY)

    @patch("feedpages.fetcher.requests.Session")
    def test_release_closes_session(self, mock_session_cls):
        session = mock_session_cls.return_value
        session.get.return_value = mock_response(SAMPLE_ARTICLE_PAGE)
        fetcher = ReadabilityFetcher()

        fetcher.fetch(ENTRY)
        fetcher.release()

        session.close.assert_called_once()

    @patch("feedpages.fetcher.requests.Session")
    def test_new_session_per_attempt(self, mock_session_cls):
        mock_session_cls.return_value.get.return_value = mock_response(SAMPLE_ARTICLE_PAGE)
        fetcher = ReadabilityFetcher()

        fetcher.fetch(ENTRY)
        fetcher.release()
        fetcher.fetch(ENTRY)
        fetcher.release()

        assert mock_session_cls.call_count == 2

    def test_release_without_fetch(self):
        """Test release is harmless when nothing was opened."""
        fetcher = ReadabilityFetcher()
        fetcher.release()
        fetcher.release()
