"""
Playlist request models.
"""
import re
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from playlist_gateway.errors import ClientInputError

SERVICE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

ALL_REGIONS = "all"
DEFAULT_REGION = "us"


def split_ids(value: Optional[str]) -> frozenset[str]:
    """Split a comma-separated channel id list, dropping blanks."""
    if not value:
        return frozenset()
    return frozenset(item.strip() for item in value.split(",") if item.strip())


class PlaylistQuery(BaseModel):
    """Parsed query parameters of a playlist request."""

    service: str
    region: str = DEFAULT_REGION
    start_chno: Optional[int] = Field(None, ge=0)
    include: frozenset[str] = frozenset()
    exclude: frozenset[str] = frozenset()

    @field_validator("service", mode="before")
    @classmethod
    def _check_service(cls, value):
        value = (value or "").strip()
        if not value:
            raise ValueError("No service type provided")
        if not SERVICE_PATTERN.match(value):
            raise ValueError(f"Invalid service {value}")
        return value

    @field_validator("region", mode="before")
    @classmethod
    def _normalize_region(cls, value):
        value = (value or DEFAULT_REGION).strip().lower()
        return value or DEFAULT_REGION

    @field_validator("start_chno", mode="before")
    @classmethod
    def _blank_start_chno(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def service_key(self) -> str:
        """Lowercased service name used to select code paths."""
        return self.service.lower()

    @property
    def all_regions(self) -> bool:
        return self.region == ALL_REGIONS

    @classmethod
    def from_query(
        cls,
        service: Optional[str],
        region: Optional[str] = None,
        start_chno: Optional[str] = None,
        include: Optional[str] = None,
        exclude: Optional[str] = None,
    ) -> "PlaylistQuery":
        """
        Build a query from raw query-string values.

        Raises:
            ClientInputError: if any parameter is missing or invalid
        """
        if not service or not service.strip():
            raise ClientInputError("Error: No service type provided")

        try:
            return cls(
                service=service,
                region=region,
                start_chno=start_chno,
                include=split_ids(include),
                exclude=split_ids(exclude),
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = error["loc"][0] if error["loc"] else "query"
            if field == "start_chno":
                raise ClientInputError(f"Error: Invalid start_chno {start_chno}") from e
            if field == "service":
                raise ClientInputError(f"Error: Invalid service {service}") from e
            raise ClientInputError(f"Error: Invalid {field}") from e
