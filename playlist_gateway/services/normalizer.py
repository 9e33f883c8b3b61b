"""
Channel normalizer.

Turns a feed document into a flat mapping of channel key -> Channel for the
requested region, then resolves each channel's playlist group and orders
the result by channel name.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from playlist_gateway.errors import ClientInputError, MalformedDocumentError
from playlist_gateway.models.channel import Channel, FeedDocument
from playlist_gateway.models.playlist import ALL_REGIONS
from playlist_gateway.services.plex_catalog import PlexCatalog

logger = logging.getLogger(__name__)

REGION_NAMES = {
    "us": "USA",
    "mx": "Mexico",
    "es": "Spain",
    "ca": "Canada",
    "au": "Australia",
    "nz": "New Zealand",
}

# Services whose region=all group is the origin region name, unsuffixed
REGION_GROUP_SERVICES = {"samsungtvplus", "plutotv"}


def region_display_name(code: str) -> str:
    """Display name for a region code; unknown codes are uppercased."""
    return REGION_NAMES.get(code, code.upper())


@dataclass
class PlaylistEntry:
    """One candidate playlist row."""
    key: str
    channel: Channel
    group: str


def parse_feed(data: Any) -> FeedDocument:
    """
    Validate a decoded feed document.

    Raises:
        MalformedDocumentError: if the document has neither `channels` nor
            `regions`, or its channel entries cannot be read
    """
    try:
        document = FeedDocument.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Feed document failed validation: {e.error_count()} errors")
        raise MalformedDocumentError("Error: Invalid data format") from e

    if document.channels is None and document.regions is None:
        raise MalformedDocumentError("Error: Invalid data format")
    return document


def needs_plex_catalog(document: FeedDocument, service: str, region: str) -> bool:
    """Plex flat feeds filtered to one region take their groups from the catalog."""
    return document.is_flat and service.lower() == "plex" and region != ALL_REGIONS


def normalize_channels(
    document: FeedDocument,
    service: str,
    region: str,
    plex_catalog: Optional[PlexCatalog] = None,
) -> dict[str, Channel]:
    """
    Select the channels of a feed document for a region.

    Args:
        document: Parsed feed document
        service: Service name as requested
        region: Lowercased region code or "all"
        plex_catalog: Genre lookup, used for Plex flat feeds with a concrete region

    Returns:
        Mapping of channel key to channel, with `group` or `region` attached

    Raises:
        ClientInputError: if a regioned feed has no such region
        MalformedDocumentError: if the document has no channel data
    """
    if document.is_flat:
        return _normalize_flat(document.channels, service.lower(), region, plex_catalog)

    if document.regions is not None:
        return _normalize_regioned(document, region)

    raise MalformedDocumentError("Error: Invalid data format")


def _normalize_flat(
    channels: dict[str, Channel],
    service: str,
    region: str,
    plex_catalog: Optional[PlexCatalog],
) -> dict[str, Channel]:
    if service != "plex":
        return dict(channels)

    if region != ALL_REGIONS:
        catalog = plex_catalog if plex_catalog is not None else PlexCatalog([])
        return {
            key: channel.model_copy(update={"group": catalog.genre_for(channel.name)})
            for key, channel in channels.items()
            if region in channel.regions
        }

    # A channel listed in several regions keeps the last region's name here;
    # build_entries emits one row per region from `regions` itself.
    result = {}
    for key, channel in channels.items():
        for code in channel.regions:
            result[key] = channel.model_copy(update={"group": region_display_name(code)})
    return result


def _normalize_regioned(document: FeedDocument, region: str) -> dict[str, Channel]:
    regions = document.regions

    if region == ALL_REGIONS:
        result = {}
        for code, block in regions.items():
            origin = block.name or code.upper()
            for key, channel in block.channels.items():
                if key not in result:
                    result[key] = channel.model_copy(update={"region": origin})
        return result

    if region in regions:
        return dict(regions[region].channels)

    raise ClientInputError(f"Error: Invalid region {region}")


def build_entries(channels: dict[str, Channel], service: str, region: str) -> list[PlaylistEntry]:
    """
    Order channels by name and resolve the group of every playlist row.

    Plex with region=all yields one row per region a channel belongs to;
    every other case yields one row per channel.
    """
    service = service.lower()
    all_regions = region == ALL_REGIONS
    entries = []

    for key in sorted(channels, key=lambda k: channels[k].name):
        channel = channels[key]

        if service == "roku":
            entries.append(PlaylistEntry(key, channel, ""))
        elif service == "plex" and all_regions and channel.regions:
            for code in channel.regions:
                entries.append(PlaylistEntry(key, channel, region_display_name(code)))
        elif service in REGION_GROUP_SERVICES and all_regions and channel.region:
            entries.append(PlaylistEntry(key, channel, channel.region))
        elif all_regions and channel.region:
            group = f"{channel.group or ''} ({channel.region.upper()})"
            entries.append(PlaylistEntry(key, channel, group))
        else:
            entries.append(PlaylistEntry(key, channel, channel.group or ""))

    return entries
