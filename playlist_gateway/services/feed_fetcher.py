"""
Upstream feed fetcher.
Retrieves a remote JSON document with a single GET request.
"""
import httpx
import logging
from typing import Any, Optional

from playlist_gateway.config import get_settings
from playlist_gateway.errors import UpstreamFetchError

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Fetch and decode JSON feeds. One attempt per call, no retries."""

    def __init__(self, timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings()
        self.timeout = timeout if timeout is not None else self.settings.fetch_timeout_seconds
        self.transport = transport

    async def fetch_json(self, url: str) -> Any:
        """
        GET a URL and parse the body as JSON.

        Args:
            url: Absolute URL of the feed

        Returns:
            The decoded JSON value

        Raises:
            UpstreamFetchError: on network failure, non-2xx status or invalid JSON
        """
        logger.info(f"Fetching feed from {url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch {url}: {e}")
            raise UpstreamFetchError(f"Failed to fetch {url}: {e}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise UpstreamFetchError(f"Invalid JSON from {url}: {e}") from e

    def feed_url(self, service: str) -> str:
        """URL of the `.app.json` lineup for a service."""
        return f"{self.settings.feed_base_url.rstrip('/')}/{service}/.app.json"


# Singleton
_feed_fetcher = None


def get_feed_fetcher() -> FeedFetcher:
    """Get or create the feed fetcher singleton."""
    global _feed_fetcher
    if _feed_fetcher is None:
        _feed_fetcher = FeedFetcher()
    return _feed_fetcher
