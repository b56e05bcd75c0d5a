"""Pattern-based extraction of page signals from raw HTML.

Extraction is deliberately lossy: tags are located with regular
expressions rather than a full DOM, so malformed markup degrades to absent
values instead of errors. BeautifulSoup is only used to turn small matched
fragments (heading bodies, titles) into clean text.
"""

import html as html_lib
import logging
import re
from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup

from seogeo.models import PageSignals

logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)
CANONICAL_PATTERN = re.compile(
    r"""<link[^>]+rel=["']canonical["'][^>]*href=["']([^"']*)["'][^>]*>""", re.IGNORECASE
)
CANONICAL_REVERSED_PATTERN = re.compile(
    r"""<link[^>]+href=["']([^"']*)["'][^>]*rel=["']canonical["'][^>]*>""", re.IGNORECASE
)
LANG_PATTERN = re.compile(r"""<html[^>]*\slang=["']([^"']*)["'][^>]*>""", re.IGNORECASE)
LD_JSON_PATTERN = re.compile(
    r"""<script[^>]+type=["']application/ld\+json["'][^>]*>([\s\S]*?)</script>""", re.IGNORECASE
)
TAG_PATTERN = re.compile(r"<[^>]*>")
WHITESPACE_PATTERN = re.compile(r"\s+")


def _meta_patterns(name: str) -> tuple[re.Pattern, re.Pattern]:
    escaped = re.escape(name)
    return (
        re.compile(
            r"""<meta[^>]+(?:name|property)=["']%s["'][^>]*content=["']([^"']*)["'][^>]*>""" % escaped,
            re.IGNORECASE,
        ),
        re.compile(
            r"""<meta[^>]+content=["']([^"']*)["'][^>]*(?:name|property)=["']%s["'][^>]*>""" % escaped,
            re.IGNORECASE,
        ),
    )


class SignalExtractor:
    """Builds PageSignals records from fetched HTML."""

    def __init__(self):
        self._meta_cache: dict[str, tuple[re.Pattern, re.Pattern]] = {}
        self._heading_patterns = {
            tag: re.compile(r"<%s[^>]*>([\s\S]*?)</%s>" % (tag, tag), re.IGNORECASE)
            for tag in ("h1", "h2")
        }

    def extract(
        self,
        url: str,
        html: str,
        load_time_ms: int = 0,
        status_code: int = 200,
        size_bytes: Optional[int] = None,
        analyzed_at: Optional[datetime] = None,
    ) -> PageSignals:
        """Extract signals from a page body.

        Args:
            url: Final page URL
            html: Raw HTML body
            load_time_ms: Fetch duration in milliseconds
            status_code: HTTP status code
            size_bytes: Body size in bytes (UTF-8 length of html when omitted)
            analyzed_at: Timestamp recorded on the snapshot

        Returns:
            Immutable PageSignals
        """
        html = html or ""
        if size_bytes is None:
            size_bytes = len(html.encode("utf-8"))

        title = self.extract_title(html)
        signals = PageSignals(
            url=url,
            raw_html=html,
            title=title,
            meta_description=self.extract_meta_content(html, "description"),
            canonical_url=self.extract_canonical_url(html),
            language_tag=self.extract_language(html),
            h1_headings=self.extract_headings(html, "h1"),
            h2_headings=self.extract_headings(html, "h2"),
            structured_data_blocks=self.extract_json_ld(html),
            word_count=self.count_words(html),
            load_time_ms=max(int(load_time_ms), 0),
            status_code=status_code,
            page_size_kb=round(size_bytes / 1024),
            analyzed_at=analyzed_at or datetime.now(),
        )
        logger.debug(
            f"Extracted signals for {url}: {signals.word_count} words, "
            f"{len(signals.h1_headings)} H1, {len(signals.h2_headings)} H2, "
            f"{len(signals.structured_data_blocks)} JSON-LD blocks"
        )
        return signals

    def extract_title(self, html: str) -> Optional[str]:
        """Return the <title> text, falling back to og:title."""
        match = TITLE_PATTERN.search(html)
        if match:
            title = self._fragment_text(match.group(1))
            if title:
                return title
        return self.extract_meta_content(html, "og:title")

    def extract_meta_content(self, html: str, name: str) -> Optional[str]:
        """Return the content of a meta tag matched by name or property.

        Both attribute orders (name before content, content before name)
        are recognised.
        """
        patterns = self._meta_cache.get(name)
        if patterns is None:
            patterns = _meta_patterns(name)
            self._meta_cache[name] = patterns
        for pattern in patterns:
            match = pattern.search(html)
            if match:
                return html_lib.unescape(match.group(1)).strip()
        return None

    def extract_canonical_url(self, html: str) -> Optional[str]:
        for pattern in (CANONICAL_PATTERN, CANONICAL_REVERSED_PATTERN):
            match = pattern.search(html)
            if match:
                return match.group(1).strip() or None
        return None

    def extract_language(self, html: str) -> Optional[str]:
        match = LANG_PATTERN.search(html)
        if match and match.group(1).strip():
            return match.group(1).strip()
        return None

    def extract_headings(self, html: str, tag: str) -> tuple[str, ...]:
        """Return the text of every heading of the given level, in document order."""
        pattern = self._heading_patterns.get(tag) or re.compile(
            r"<%s[^>]*>([\s\S]*?)</%s>" % (tag, tag), re.IGNORECASE
        )
        headings = []
        for match in pattern.finditer(html):
            text = self._fragment_text(match.group(1))
            if text:
                headings.append(text)
        return tuple(headings)

    def extract_json_ld(self, html: str) -> tuple[str, ...]:
        """Return the raw body of each JSON-LD script block (not parsed)."""
        blocks = []
        for match in LD_JSON_PATTERN.finditer(html):
            content = match.group(1).strip()
            if content:
                blocks.append(content)
        return tuple(blocks)

    def count_words(self, html: str) -> int:
        return len(TAG_PATTERN.sub(" ", html).split())

    def _fragment_text(self, fragment: str) -> str:
        """Strip nested tags and decode entities in a small HTML fragment."""
        if "<" not in fragment and "&" not in fragment:
            return WHITESPACE_PATTERN.sub(" ", fragment).strip()
        text = BeautifulSoup(fragment, "html.parser").get_text(" ")
        return WHITESPACE_PATTERN.sub(" ", text).strip()
