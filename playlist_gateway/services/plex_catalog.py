"""
Plex channel-metadata catalog.
Maps Plex channel titles to a genre used as the playlist group.
"""
import logging
from typing import Any, Optional

from pydantic import ValidationError

from playlist_gateway.config import get_settings
from playlist_gateway.errors import UpstreamFetchError
from playlist_gateway.models.channel import PlexCatalogEntry

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


class PlexCatalog:
    """Title -> genre lookup. The first entry for a title wins."""

    def __init__(self, entries: list[PlexCatalogEntry]):
        self._genres: dict[str, Optional[str]] = {}
        for entry in entries:
            if entry.title is not None and entry.title not in self._genres:
                self._genres[entry.title] = entry.genre

    @classmethod
    def from_json(cls, data: Any) -> "PlexCatalog":
        """Build a catalog from the decoded catalog JSON (a list of objects)."""
        if not isinstance(data, list):
            raise UpstreamFetchError("Plex catalog is not a list")
        entries = []
        for item in data:
            try:
                entries.append(PlexCatalogEntry.model_validate(item))
            except ValidationError:
                logger.debug(f"Skipping unreadable Plex catalog entry: {item!r}")
        return cls(entries)

    def genre_for(self, title: str) -> str:
        return self._genres.get(title) or UNCATEGORIZED

    def __len__(self) -> int:
        return len(self._genres)


async def load_plex_catalog(fetcher) -> PlexCatalog:
    """Fetch the Plex catalog with the given FeedFetcher."""
    settings = get_settings()
    data = await fetcher.fetch_json(settings.plex_catalog_url)
    catalog = PlexCatalog.from_json(data)
    logger.info(f"Loaded Plex catalog with {len(catalog)} titles")
    return catalog
