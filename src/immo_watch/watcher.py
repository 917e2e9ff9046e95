"""Polling loop: walk every region, report listings that weren't there before."""

from __future__ import annotations

import logging
from typing import Protocol

from .config import Config, Region, config as app_config
from .models.listing import Listing
from .notify.base import Notifier
from .scrapers.base import Jitter, RegionResult
from .tracking import KnownListings

logger = logging.getLogger(__name__)


class RegionWalker(Protocol):
    async def walk_region(self, region_url: str) -> RegionResult: ...


class ListingWatcher:
    """Runs scrape cycles over all configured regions.

    The first cycle only indexes what is currently online; every later cycle
    returns the listings whose IDs were not seen before.
    """

    def __init__(
        self,
        scraper: RegionWalker,
        settings: Config | None = None,
        regions: list[Region] | None = None,
        known: KnownListings | None = None,
        jitter: Jitter | None = None,
    ):
        self.scraper = scraper
        self.settings = settings if settings is not None else app_config
        self.regions = regions if regions is not None else self.settings.regions
        self.known = known if known is not None else KnownListings()
        self.jitter = jitter or Jitter()
        self.is_first_run = True

    async def run_cycle(self) -> list[Listing]:
        """Walk all regions once.

        Returns:
            Newly seen listings, in region and page order. Always empty on the first run.
        """
        new_listings: list[Listing] = []

        for index, region in enumerate(self.regions):
            if index > 0:
                await self.jitter.sleep(self.settings.region_delay)

            try:
                result = await self.scraper.walk_region(region.url)
                region_new = 0
                for listing in result.listings:
                    if self.known.observe(listing.id) and not self.is_first_run:
                        new_listings.append(listing)
                        region_new += 1

                status = "indexing" if self.is_first_run else f"{region_new} new"
                logger.info(f"{region.name}: {result.success_count} private, {status}")
            except Exception as e:
                logger.error(f"Error scraping {region.url}: {e}", exc_info=True)

        if self.is_first_run:
            logger.info(f"First run complete. Indexed {len(self.known)} private listings.")
            self.is_first_run = False

        return new_listings

    def next_interval_ms(self) -> int:
        """Randomized wait before the next cycle, in milliseconds."""
        return int(self.jitter.seconds(self.settings.cycle_interval) * 1000)

    async def run_forever(self, notifier: Notifier, max_cycles: int | None = None) -> None:
        """Alternate cycles and randomized waits, handing new listings to the notifier.

        Errors from a cycle or from the notifier are logged and the loop goes on.

        Args:
            notifier: Receives every non-empty batch of new listings.
            max_cycles: Stop after this many cycles. None = run until cancelled.
        """
        cycles = 0
        while True:
            try:
                new_listings = await self.run_cycle()
                if new_listings:
                    logger.info(f"Found {len(new_listings)} new private listing(s)! Notifying...")
                    await notifier.send(new_listings)
            except Exception as e:
                logger.error(f"Error: {e}", exc_info=True)

            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                return

            interval_ms = self.next_interval_ms()
            logger.info(f"Next check in {interval_ms // 1000}s")
            await self.jitter.wait(interval_ms / 1000)
