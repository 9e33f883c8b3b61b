#!/usr/bin/env python3
"""
Render a playlist without running the server.

Usage:
    python -m playlist_gateway.scripts.render_playlist --service plutotv --region all
    python -m playlist_gateway.scripts.render_playlist -s plex -r us --start-chno 500 -o plex_us.m3u8
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path

from playlist_gateway.errors import PlaylistError
from playlist_gateway.models.playlist import PlaylistQuery
from playlist_gateway.services.feed_fetcher import get_feed_fetcher
from playlist_gateway.services.playlist_builder import PlaylistBuilder

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def render(args: argparse.Namespace) -> str:
    query = PlaylistQuery.from_query(
        args.service,
        args.region,
        args.start_chno,
        args.include,
        args.exclude,
    )
    builder = PlaylistBuilder(get_feed_fetcher())
    return await builder.build(query)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an IPTV playlist from a channel-lineup feed")
    parser.add_argument("--service", "-s", required=True, help="Feed service name (e.g., plutotv, plex, pbs)")
    parser.add_argument("--region", "-r", default=None, help="Region code or 'all' (default: us)")
    parser.add_argument("--start-chno", default=None, help="First channel number")
    parser.add_argument("--include", default=None, help="Comma-separated channel ids to keep")
    parser.add_argument("--exclude", default=None, help="Comma-separated channel ids to drop")
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path (default: stdout)"
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        playlist = asyncio.run(render(args))
    except PlaylistError as e:
        logger.error(e.message)
        return 1

    if args.output:
        Path(args.output).write_text(playlist, encoding="utf-8")
        logger.info(f"Wrote playlist to {args.output}")
    else:
        sys.stdout.write(playlist)
    return 0


if __name__ == "__main__":
    sys.exit(main())
