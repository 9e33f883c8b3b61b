"""
Configuration management for the playlist gateway.
Uses pydantic-settings for environment variable loading.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    app_name: str = "IPTV Playlist Gateway"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS Configuration
    cors_origins: list[str] = ["*"]

    # Rate Limiting
    rate_limit_per_minute: int = 100

    # Upstream feeds
    feed_base_url: str = "https://i.mjh.nz"
    pbs_kids_app_url: str = "https://i.mjh.nz/PBS/.kids_app.json"
    plex_catalog_url: str = "https://raw.githubusercontent.com/dtankdempse/free-iptv-channels/main/plex/channels.json"
    fetch_timeout_seconds: float = 30.0

    # EPG sidecars (referenced in playlist headers, never fetched)
    epg_base_url: str = "https://github.com/matthuisman/i.mjh.nz/raw/master"
    pbs_epg_url: str = "https://github.com/matthuisman/i.mjh.nz/raw/master/PBS/all.xml.gz"
    pbs_kids_epg_url: str = "https://github.com/matthuisman/i.mjh.nz/raw/master/PBS/kids_all.xml.gz"

    # Legacy behaviour: report PBS Kids fetch failures inside a 200 body
    pbskids_error_as_playlist: bool = False

    model_config = SettingsConfigDict(env_prefix="PLAYLIST_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
