"""Listing data models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


PRICE_ON_REQUEST = "Preis auf Anfrage"


class Listing(BaseModel):
    """A normalized willhaben listing, ready to be reported."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="ADID, unique on willhaben")
    title: str = Field("", description="Listing heading")
    price: str = Field(PRICE_ON_REQUEST, description="Display price, e.g. '€ 349.000'")
    location: str = Field("", description="Address, postcode and area, or area only")
    url: str = Field("", description="Absolute listing URL")
    property_type: str = Field("", description="e.g. 'Wohnung', 'Haus'")
    size: str = Field("", description="Living, usable or estate area in m²")
    rooms: str = Field("", description="Number of rooms")


class AdRecord:
    """Read-only view over one raw entry of the advertSummary array.

    willhaben ships every field as an attribute with a list of values:

        {"attributes": {"attribute": [{"name": "ADID", "values": ["123"]}, ...]}}

    Only the first value of an attribute is used. Any part of that structure
    may be missing or malformed; lookups then return None instead of raising.
    """

    def __init__(self, raw: Any):
        self.raw = raw
        self._attributes = self._index(raw)

    @staticmethod
    def _index(raw: Any) -> dict[str, list[Any]]:
        if not isinstance(raw, dict):
            return {}
        attributes = raw.get("attributes")
        if not isinstance(attributes, dict):
            return {}
        entries = attributes.get("attribute")
        if not isinstance(entries, list):
            return {}

        index: dict[str, list[Any]] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name")
            values = entry.get("values")
            if not isinstance(name, str) or not isinstance(values, list) or not values:
                continue
            # First non-empty occurrence wins
            index.setdefault(name, values)
        return index

    def attribute(self, name: str) -> str | None:
        """Return the first value of the named attribute, or None if absent."""
        values = self._attributes.get(name)
        if not values:
            return None
        value = values[0]
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def __contains__(self, name: str) -> bool:
        return self.attribute(name) is not None

    def __repr__(self) -> str:
        return f"AdRecord(id={self.attribute('ADID')!r}, attributes={len(self._attributes)})"
