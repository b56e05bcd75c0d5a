"""HTTP fetcher for single pages."""

import logging
import time
from typing import Optional
from urllib.parse import urlparse

import requests

from seogeo.models import FetchResult

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "SEO-GEO-Analyzer/1.0 (+https://github.com/seogeo/seogeo)"


def validate_url(url: str) -> Optional[str]:
    """Validate that a URL is an absolute http(s) URL.

    Args:
        url: Candidate URL

    Returns:
        The stripped URL, or None if it is not acceptable
    """
    if not url or not isinstance(url, str):
        return None
    candidate = url.strip()
    try:
        parsed = urlparse(candidate)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return candidate


class PageFetcher:
    """Fetches a page once, following redirects."""

    def __init__(self, user_agent: Optional[str] = None, timeout: int = 30):
        """Initialize the fetcher.

        Args:
            user_agent: User agent sent with each request
            timeout: Request timeout in seconds
        """
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        })

    def fetch(self, url: str) -> FetchResult:
        """Fetch a URL. Never raises; failures are reported on the result.

        Args:
            url: The URL to fetch

        Returns:
            FetchResult with body, status, timing and size
        """
        validated = validate_url(url)
        if not validated:
            return FetchResult(url=url, success=False, error="Invalid URL")

        try:
            start_time = time.perf_counter()
            response = self.session.get(validated, timeout=self.timeout, allow_redirects=True)
            load_time_ms = round((time.perf_counter() - start_time) * 1000)
        except requests.exceptions.Timeout:
            logger.warning(f"Timeout fetching {validated} after {self.timeout}s")
            return FetchResult(
                url=validated, success=False, error=f"Request timeout after {self.timeout}s"
            )
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Connection error fetching {validated}: {e}")
            return FetchResult(url=validated, success=False, error=f"Connection error: {e}")
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request failed for {validated}: {e}")
            return FetchResult(url=validated, success=False, error=str(e))

        if not response.ok:
            logger.info(f"{validated} returned HTTP {response.status_code}")
            return FetchResult(
                url=validated,
                final_url=response.url,
                status_code=response.status_code,
                load_time_ms=load_time_ms,
                success=False,
                error=f"HTTP {response.status_code}",
            )

        body = response.text
        return FetchResult(
            url=validated,
            html=body,
            final_url=response.url,
            status_code=response.status_code,
            load_time_ms=load_time_ms,
            size_bytes=len(body.encode("utf-8")),
            success=True,
        )

    def close(self) -> None:
        self.session.close()
