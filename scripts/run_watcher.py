"""Watch willhaben.at for new private real-estate listings and email them.

Requires GMAIL_ADDRESS, GMAIL_APP_PASSWORD and RECIPIENT_EMAIL in environment
or .env file (not needed with --dry-run).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path so the script also runs from a plain checkout
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv
from rich.console import Console

from immo_watch.config import FilterConfig, config
from immo_watch.notify import ConsoleNotifier, EmailNotifier, EmailSettings, Notifier
from immo_watch.scrapers import WillhabenScraper
from immo_watch.watcher import ListingWatcher

console = Console()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )


async def run(notifier: Notifier, once: bool, filters: FilterConfig) -> None:
    async with WillhabenScraper(filters=filters) as scraper:
        watcher = ListingWatcher(scraper)
        # The first cycle only indexes, so --once needs two to report anything
        await watcher.run_forever(notifier, max_cycles=2 if once else None)


def main():
    parser = argparse.ArgumentParser(description="Watch willhaben.at for new private listings")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Index, wait one interval, report new listings and exit",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print new listings to the console instead of sending email",
    )
    parser.add_argument(
        "--include-agencies",
        action="store_true",
        help="Also report listings from agencies, not only private sellers",
    )
    rentals = parser.add_mutually_exclusive_group()
    rentals.add_argument(
        "--exclude-rentals",
        dest="exclude_rentals",
        action="store_const",
        const=True,
        help="Skip rental listings",
    )
    rentals.add_argument(
        "--include-rentals",
        dest="exclude_rentals",
        action="store_const",
        const=False,
        help="Keep rental listings (default)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every fetched page",
    )

    args = parser.parse_args()

    load_dotenv(config.env_file)
    configure_logging(args.verbose)

    filters = config.filters.with_overrides(
        only_private=False if args.include_agencies else None,
        exclude_rentals=args.exclude_rentals,
    )

    if args.dry_run:
        notifier: Notifier = ConsoleNotifier(console)
        target = "console (dry run)"
    else:
        try:
            settings = EmailSettings.from_env()
        except ValueError as e:
            console.print(f"[bold red]ERROR:[/bold red] {e}")
            sys.exit(1)
        notifier = EmailNotifier(settings)
        target = settings.recipient

    console.print("\n[bold blue]Willhaben private listings watcher started[/bold blue]")
    console.print(f"  Monitoring: {', '.join(region.name for region in config.regions)}")
    console.print(f"  Notifications: {target}")
    console.print(
        f"  Filters: private only={filters.only_private}, no rentals={filters.exclude_rentals}, "
        f"no commercial={filters.exclude_commercial}, no land={filters.exclude_land}"
    )
    console.print()

    try:
        asyncio.run(run(notifier, once=args.once, filters=filters))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")


if __name__ == "__main__":
    main()
