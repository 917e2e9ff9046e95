"""Scrapers module."""

from .base import BaseScraper, Jitter, PageFetchError, RegionResult, ScraperConfig, ScrapeError
from .willhaben import ListingFilter, WillhabenScraper, parse_listing

__all__ = [
    "BaseScraper",
    "Jitter",
    "PageFetchError",
    "RegionResult",
    "ScraperConfig",
    "ScrapeError",
    "ListingFilter",
    "WillhabenScraper",
    "parse_listing",
]
