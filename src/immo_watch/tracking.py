"""In-memory record of listing IDs seen during this process."""

from typing import Iterable


class KnownListings:
    """Set of listing IDs that only ever grows.

    Nothing is persisted; a fresh process starts empty and re-indexes.
    """

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: set[str] = set(ids)

    def observe(self, listing_id: str) -> bool:
        """Record an ID.

        Returns:
            True the first time an ID is observed, False afterwards.
        """
        if listing_id in self._ids:
            return False
        self._ids.add(listing_id)
        return True

    def __contains__(self, listing_id: object) -> bool:
        return listing_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"KnownListings({len(self._ids)} ids)"
