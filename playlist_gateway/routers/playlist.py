"""
Playlist API endpoint.
"""
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from typing import Optional

from playlist_gateway.config import get_settings
from playlist_gateway.models.playlist import PlaylistQuery
from playlist_gateway.rate_limit import limiter
from playlist_gateway.services.feed_fetcher import FeedFetcher, get_feed_fetcher
from playlist_gateway.services.playlist_builder import PlaylistBuilder

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["playlist"])
settings = get_settings()


@router.get("/", response_class=PlainTextResponse)
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def get_playlist(
    request: Request,
    service: Optional[str] = Query(None, description="Feed service name (e.g., plutotv, plex, roku, pbs)"),
    region: Optional[str] = Query(None, description="Region code, or 'all' for every region (default: us)"),
    start_chno: Optional[str] = Query(None, description="First channel number; numbers rows sequentially"),
    include: Optional[str] = Query(None, description="Comma-separated channel ids to keep (service-key)"),
    exclude: Optional[str] = Query(None, description="Comma-separated channel ids to drop (service-key)"),
    fetcher: FeedFetcher = Depends(get_feed_fetcher),
):
    """
    Render an M3U8 playlist for a service.

    - **service**: i.mjh.nz service name; `pbs` and `pbskids` are special-cased
    - **region**: region code, `all` unions every region
    - **start_chno**: overrides per-channel numbers
    - **include** / **exclude**: filter by `service-key` channel id
    """
    query = PlaylistQuery.from_query(service, region, start_chno, include, exclude)
    logger.info(f"Playlist request: service={query.service} region={query.region}")

    builder = PlaylistBuilder(fetcher)
    playlist = await builder.build(query)
    return PlainTextResponse(playlist)
