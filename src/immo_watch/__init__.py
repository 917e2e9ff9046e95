"""Watch willhaben.at real-estate search results for new private listings."""

__version__ = "0.1.0"
