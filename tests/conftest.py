"""Shared fixtures."""

import json
import random

import pytest

from immo_watch.config import Config, DelayWindow
from immo_watch.models.listing import Listing
from immo_watch.scrapers.base import Jitter


class RecordingJitter(Jitter):
    """Deterministic jitter that records waits instead of sleeping."""

    def __init__(self, seed: int = 0):
        super().__init__(random.Random(seed))
        self.waits: list[float] = []

    async def wait(self, seconds: float) -> None:
        self.waits.append(seconds)


@pytest.fixture
def jitter():
    return RecordingJitter()


@pytest.fixture
def settings():
    """Config with short, distinguishable delay windows."""
    return Config(
        page_delay=DelayWindow(min_seconds=1.0, max_seconds=1.0),
        region_delay=DelayWindow(min_seconds=2.0, max_seconds=2.0),
        cycle_interval=DelayWindow(min_seconds=100.0, max_seconds=110.0),
    )


@pytest.fixture
def make_ad():
    """Build a raw advertSummary entry from {attribute name: value}."""

    def _make_ad(attributes: dict[str, str | list[str]]) -> dict:
        return {
            "id": attributes.get("ADID", ""),
            "attributes": {
                "attribute": [
                    {"name": name, "values": value if isinstance(value, list) else [value]}
                    for name, value in attributes.items()
                ]
            },
        }

    return _make_ad


@pytest.fixture
def make_page():
    """Wrap raw ads into a search page HTML with a __NEXT_DATA__ payload."""

    def _make_page(ads: list[dict]) -> str:
        payload = {
            "props": {
                "pageProps": {
                    "searchResult": {
                        "rowsFound": len(ads),
                        "advertSummaryList": {"advertSummary": ads},
                    }
                }
            }
        }
        return (
            "<!DOCTYPE html><html><head><title>willhaben</title></head><body>"
            "<div id=\"__next\"></div>"
            f"<script id=\"__NEXT_DATA__\" type=\"application/json\">{json.dumps(payload)}</script>"
            "</body></html>"
        )

    return _make_page


@pytest.fixture
def make_listings():
    """Create n listings with IDs '{prefix}0'..'{prefix}{n-1}'."""

    def _make_listings(n: int, prefix: str = "ad") -> list[Listing]:
        return [Listing(id=f"{prefix}{i}", title=f"Wohnung {i}") for i in range(n)]

    return _make_listings
