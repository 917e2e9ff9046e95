"""Notifier interface."""

from abc import ABC, abstractmethod
from typing import Sequence

from ..models.listing import Listing


class Notifier(ABC):
    """Delivers a batch of new listings somewhere a human will see it."""

    @abstractmethod
    async def send(self, listings: Sequence[Listing]) -> None:
        """Deliver the listings. Delivery errors propagate to the caller."""
