"""
Playlist builder.
Ties fetching, normalization and rendering together for one request.
"""
import logging

from playlist_gateway.config import get_settings
from playlist_gateway.errors import PlaylistError, UpstreamFetchError
from playlist_gateway.models.playlist import PlaylistQuery
from playlist_gateway.services.feed_fetcher import FeedFetcher
from playlist_gateway.services.normalizer import (
    build_entries,
    needs_plex_catalog,
    normalize_channels,
    parse_feed,
)
from playlist_gateway.services.plex_catalog import load_plex_catalog
from playlist_gateway.services.renderer import (
    epg_url_for,
    render_pbs,
    render_pbs_kids,
    render_playlist,
)

logger = logging.getLogger(__name__)


class PlaylistBuilder:
    """Build playlist text for a parsed request."""

    def __init__(self, fetcher: FeedFetcher):
        self.fetcher = fetcher
        self.settings = get_settings()

    async def build(self, query: PlaylistQuery) -> str:
        """
        Dispatch on the service name and return the rendered playlist.

        Raises:
            PlaylistError: any client, document or upstream failure
        """
        if query.service_key == "pbskids":
            return await self.build_pbs_kids()

        try:
            data = await self.fetcher.fetch_json(self.fetcher.feed_url(query.service))
        except UpstreamFetchError as e:
            raise UpstreamFetchError("Error: Failed to fetch data") from e

        document = parse_feed(data)

        if query.service_key == "pbs":
            return render_pbs(document, self.settings.pbs_epg_url)

        plex_catalog = None
        if needs_plex_catalog(document, query.service, query.region):
            try:
                plex_catalog = await load_plex_catalog(self.fetcher)
            except UpstreamFetchError as e:
                raise UpstreamFetchError("Error: Failed to fetch Plex channels") from e

        channels = normalize_channels(document, query.service, query.region, plex_catalog)
        entries = build_entries(channels, query.service, query.region)
        logger.info(f"Normalized {len(channels)} channels into {len(entries)} rows for {query.service}/{query.region}")

        return render_playlist(
            entries,
            query.service,
            epg_url_for(query.service, query.region),
            start_chno=query.start_chno,
            include=query.include,
            exclude=query.exclude,
        )

    async def build_pbs_kids(self) -> str:
        """PBS Kids uses its own fixed feed and ignores every other parameter."""
        try:
            data = await self.fetcher.fetch_json(self.settings.pbs_kids_app_url)
            return render_pbs_kids(parse_feed(data), self.settings.pbs_kids_epg_url)
        except PlaylistError as e:
            if self.settings.pbskids_error_as_playlist:
                logger.warning(f"PBS Kids failed, reporting in body: {e.message}")
                return f"Error fetching PBS Kids data: {e.message}"
            if isinstance(e, UpstreamFetchError):
                raise UpstreamFetchError("Error: Failed to fetch PBS Kids data") from e
            raise
