"""
Playlist renderer.
Serializes normalized channels into M3U8 text.
"""
import logging
from typing import Iterable, Optional

from playlist_gateway.config import get_settings
from playlist_gateway.errors import MalformedDocumentError
from playlist_gateway.models.channel import Channel, FeedDocument
from playlist_gateway.services.normalizer import PlaylistEntry

logger = logging.getLogger(__name__)

OKHTTP_USER_AGENT = "okhttp%2F4.9.0"
WIDEVINE_KEY_TEMPLATE = f"|Content-Type=application%2Foctet-stream&user-agent={OKHTTP_USER_AGENT}|R{{SSM}}|"


def epg_url_for(service: str, region: str) -> str:
    """EPG sidecar URL advertised in the playlist header."""
    base = get_settings().epg_base_url.rstrip("/")
    if service.lower() == "roku":
        return f"{base}/roku/all.xml.gz"
    return f"{base}/{service}/{region}.xml.gz"


def _join(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def is_selected(channel: Channel, channel_id: str, include: frozenset, exclude: frozenset) -> bool:
    """Playable, in the include set (when one is given) and not excluded."""
    if not channel.is_playable:
        return False
    if include and channel_id not in include:
        return False
    return channel_id not in exclude


def render_playlist(
    entries: Iterable[PlaylistEntry],
    service: str,
    epg_url: str,
    start_chno: Optional[int] = None,
    include: frozenset = frozenset(),
    exclude: frozenset = frozenset(),
) -> str:
    """
    Render the general-path playlist.

    Args:
        entries: Ordered playlist rows from build_entries
        service: Service name, used verbatim in channel ids
        epg_url: URL for the `url-tvg` header attribute
        start_chno: When given, number emitted rows sequentially from here
        include: Channel ids to keep (empty keeps everything)
        exclude: Channel ids to drop

    Returns:
        Playlist text
    """
    lines = [f'#EXTM3U url-tvg="{epg_url}"']
    next_chno = start_chno
    emitted = 0

    for entry in entries:
        channel = entry.channel
        channel_id = f"{service}-{entry.key}"
        if not is_selected(channel, channel_id, include, exclude):
            continue

        chno = ""
        if next_chno is not None:
            chno = f' tvg-chno="{next_chno}"'
            next_chno += 1
        elif channel.chno:
            chno = f' tvg-chno="{channel.chno}"'

        lines.append(
            f'#EXTINF:-1 channel-id="{channel_id}" tvg-id="{entry.key}" '
            f'tvg-logo="{channel.logo}" group-title="{entry.group}"{chno},{channel.name}'
        )
        lines.append(channel.url)
        emitted += 1

    logger.info(f"Rendered {emitted} channels for {service}")
    return _join(lines)


def _flat_channels(document: FeedDocument) -> dict[str, Channel]:
    if document.channels is None:
        raise MalformedDocumentError("Error: Invalid data format")
    return document.channels


def render_pbs(document: FeedDocument, epg_url: str) -> str:
    """
    Render the PBS playlist: Widevine DASH streams with KODIPROP tags.
    Channels keep document order and are never filtered.
    """
    lines = [f'#EXTM3U x-tvg-url="{epg_url}"']

    for key, channel in _flat_channels(document).items():
        lines.extend([
            f'#EXTINF:-1 channel-id="pbs-{key}" tvg-id="{key}" tvg-logo="{channel.logo}", {channel.name}',
            "#KODIPROP:inputstream.adaptive.manifest_type=mpd",
            "#KODIPROP:inputstream.adaptive.license_type=com.widevine.alpha",
            f"#KODIPROP:inputstream.adaptive.license_key={channel.license or ''}{WIDEVINE_KEY_TEMPLATE}",
            f"{channel.url}|user-agent={OKHTTP_USER_AGENT}",
        ])

    return _join(lines)


def render_pbs_kids(document: FeedDocument, epg_url: str) -> str:
    """Render the PBS Kids playlist, ordered by case-insensitive name."""
    channels = _flat_channels(document)
    lines = [f'#EXTM3U url-tvg="{epg_url}"']

    for key in sorted(channels, key=lambda k: channels[k].name.lower()):
        channel = channels[key]
        lines.append(f'#EXTINF:-1 channel-id="pbskids-{key}" tvg-id="{key}" tvg-logo="{channel.logo}", {channel.name}')
        lines.append(channel.url)

    return _join(lines)
