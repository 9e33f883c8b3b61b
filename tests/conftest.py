"""
Pytest configuration and fixtures for playlist gateway tests.
"""
import pytest
from fastapi.testclient import TestClient

from playlist_gateway.errors import UpstreamFetchError
from playlist_gateway.main import app
from playlist_gateway.services.feed_fetcher import FeedFetcher, get_feed_fetcher


class MockFetcher(FeedFetcher):
    """Serves canned JSON by URL; unknown URLs fail like a network error."""

    def __init__(self, responses=None):
        super().__init__()
        self.responses = responses or {}
        self.requested = []

    async def fetch_json(self, url):
        self.requested.append(url)
        if url not in self.responses:
            raise UpstreamFetchError(f"Failed to fetch {url}: connection refused")
        return self.responses[url]


@pytest.fixture
def flat_feed():
    """Flat-form feed with one DRM placeholder channel."""
    return {
        "channels": {
            "zeta": {
                "name": "Zeta News",
                "url": "https://example.com/zeta.m3u8",
                "logo": "https://example.com/zeta.png",
                "chno": 12,
                "group": "News",
            },
            "alpha": {
                "name": "Alpha Movies",
                "url": "https://example.com/alpha.m3u8",
                "logo": "https://example.com/alpha.png",
                "chno": 3,
                "group": "Movies",
            },
            "beta": {
                "name": "beta kids",
                "url": "https://example.com/beta.m3u8",
                "logo": "https://example.com/beta.png",
                "group": "Kids",
            },
            "drm": {
                "name": "DRM Channel",
                "url": "https://example.com/drm.mpd",
                "logo": "https://example.com/drm.png",
                "license_url": "https://license.example.com/widevine",
                "group": "Movies",
            },
        }
    }


@pytest.fixture
def regioned_feed():
    """Regioned-form feed; channel `a` appears in both regions."""
    return {
        "regions": {
            "us": {
                "name": "United States",
                "channels": {
                    "a": {"name": "A One", "url": "https://example.com/a-us.m3u8", "logo": "a.png", "group": "News"},
                },
            },
            "nz": {
                "channels": {
                    "a": {"name": "A Two", "url": "https://example.com/a-nz.m3u8", "logo": "a.png", "group": "News"},
                    "b": {"name": "B Two", "url": "https://example.com/b-nz.m3u8", "logo": "b.png", "group": "Sports"},
                },
            },
        }
    }


@pytest.fixture
def plex_feed():
    """Flat Plex feed with per-channel region lists."""
    return {
        "channels": {
            "p1": {"name": "Plex Movies", "url": "https://example.com/p1.m3u8", "logo": "p1.png", "regions": ["us", "ca"]},
            "p2": {"name": "Plex News", "url": "https://example.com/p2.m3u8", "logo": "p2.png", "regions": ["nz"]},
            "p3": {"name": "Plex Nowhere", "url": "https://example.com/p3.m3u8", "logo": "p3.png", "regions": []},
        }
    }


@pytest.fixture
def plex_catalog_data():
    """Plex channel-metadata catalog as served upstream."""
    return [
        {"Title": "Plex Movies", "Genre": "Movies"},
        {"Title": "Plex Movies", "Genre": "Duplicate"},
        {"Title": "Plex News"},
    ]


@pytest.fixture
def pbs_feed():
    """PBS feed: DRM channels, iterated in document order."""
    return {
        "channels": {
            "wnet": {
                "name": "WNET",
                "url": "https://example.com/wnet.mpd",
                "logo": "wnet.png",
                "license": "https://license.example.com/wnet",
                "license_url": "https://license.example.com/wnet",
            },
            "kqed": {
                "name": "KQED",
                "url": "https://example.com/kqed.mpd",
                "logo": "kqed.png",
                "license": "https://license.example.com/kqed",
            },
        }
    }


@pytest.fixture
def pbs_kids_feed():
    """PBS Kids feed with mixed-case names."""
    return {
        "channels": {
            "k2": {"name": "zoom", "url": "https://example.com/zoom.m3u8", "logo": "zoom.png"},
            "k1": {"name": "Arthur", "url": "https://example.com/arthur.m3u8", "logo": "arthur.png"},
            "k3": {"name": "Bluey", "url": "https://example.com/bluey.m3u8", "logo": "bluey.png", "license_url": "x"},
        }
    }


@pytest.fixture
def make_client():
    """Build a TestClient whose upstream feeds come from a MockFetcher."""
    def _make(responses=None):
        fetcher = MockFetcher(responses)
        app.dependency_overrides[get_feed_fetcher] = lambda: fetcher
        return TestClient(app), fetcher

    yield _make
    app.dependency_overrides.clear()
