"""Data models."""

from .listing import PRICE_ON_REQUEST, AdRecord, Listing

__all__ = [
    "PRICE_ON_REQUEST",
    "AdRecord",
    "Listing",
]
