"""
Channel and feed document models.
Maps to the i.mjh.nz `.app.json` schema.

Upstream feeds are not strictly typed: scalar fields are coerced to text
and unreadable channel entries are dropped instead of failing the feed.
"""
import logging
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Union

logger = logging.getLogger(__name__)


def _as_text(value):
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _as_text_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if item is not None]


def _readable_channels(value):
    """Keep only mapping-shaped channel entries."""
    if not isinstance(value, dict):
        return value
    kept = {}
    for key, channel in value.items():
        if isinstance(channel, dict):
            kept[str(key)] = channel
        else:
            logger.warning(f"Skipping unreadable channel {key!r}")
    return kept


class Channel(BaseModel):
    """A single channel entry from a feed document."""
    model_config = ConfigDict(extra="allow")

    name: str = ""
    url: str = ""
    logo: str = ""
    chno: Optional[Union[int, str]] = None
    license: Optional[str] = None
    license_url: Optional[str] = None
    region: Optional[str] = None  # Display name of the origin region (region=all unions)
    regions: list[str] = Field(default_factory=list)
    group: Optional[str] = None
    groups: list[str] = Field(default_factory=list)

    @field_validator("name", "url", "logo", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else _as_text(value)

    @field_validator("license", "license_url", "region", "group", mode="before")
    @classmethod
    def _optional_text(cls, value):
        return _as_text(value)

    @field_validator("chno", mode="before")
    @classmethod
    def _chno(cls, value):
        if value is None or isinstance(value, (int, str)) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return str(value)

    @field_validator("regions", "groups", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return _as_text_list(value)

    @property
    def is_playable(self) -> bool:
        """Channels with a license_url are DRM-gated placeholders."""
        return not self.license_url


class FeedRegion(BaseModel):
    """One region block of a regioned feed document."""
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    channels: dict[str, Channel] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _name_text(cls, value):
        return _as_text(value)

    @field_validator("channels", mode="before")
    @classmethod
    def _none_to_dict(cls, value):
        return {} if value is None else _readable_channels(value)


class FeedDocument(BaseModel):
    """
    A channel-lineup feed.

    Either flat (`channels` at the top level) or regioned (`regions`
    mapping region codes to their own channel mappings).
    """
    model_config = ConfigDict(extra="allow")

    channels: Optional[dict[str, Channel]] = None
    regions: Optional[dict[str, FeedRegion]] = None

    @field_validator("channels", mode="before")
    @classmethod
    def _channels(cls, value):
        return _readable_channels(value)

    @property
    def is_flat(self) -> bool:
        return self.channels is not None

    @property
    def is_regioned(self) -> bool:
        return self.channels is None and self.regions is not None


class PlexCatalogEntry(BaseModel):
    """Entry of the Plex channel-metadata catalog (title -> genre)."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: Optional[str] = Field(None, alias="Title")
    genre: Optional[str] = Field(None, alias="Genre")

    @field_validator("title", "genre", mode="before")
    @classmethod
    def _text(cls, value):
        return _as_text(value)
