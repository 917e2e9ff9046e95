"""Print new listings to the terminal instead of sending them."""

from typing import Sequence

from rich.console import Console
from rich.table import Table

from ..models.listing import Listing
from .base import Notifier


class ConsoleNotifier(Notifier):
    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    async def send(self, listings: Sequence[Listing]) -> None:
        if not listings:
            return

        table = Table(title=f"{len(listings)} new private listing(s)")
        table.add_column("Title", style="cyan", max_width=40)
        table.add_column("Price", justify="right")
        table.add_column("Location", style="magenta")
        table.add_column("Type")
        table.add_column("Size", justify="right")
        table.add_column("Rooms", justify="right")
        table.add_column("URL", style="dim")

        for listing in listings:
            table.add_row(
                listing.title[:40] if listing.title else "N/A",
                listing.price,
                listing.location or "N/A",
                listing.property_type or "-",
                listing.size or "-",
                listing.rooms or "-",
                listing.url,
            )

        self.console.print(table)
