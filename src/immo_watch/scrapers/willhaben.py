"""willhaben.at real-estate scraper.

willhaben is a Next.js site; search result pages are server-rendered and carry
the full result set as JSON in a single script tag:

- Search page: /iad/immobilien/immobilien/{region}
- Pagination: ?page=N (page 1 has no parameter)
- Payload: <script id="__NEXT_DATA__"> at
  props.pageProps.searchResult.advertSummaryList.advertSummary
- Each ad is a list of named attributes (ADID, HEADING, PROPERTY_TYPE, ...)

No browser is needed; a plain GET returns everything.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from bs4 import BeautifulSoup

from .base import BaseScraper, Jitter, RegionResult, ScrapeError, ScraperConfig
from ..config import Config, FilterConfig, config as app_config
from ..models.listing import PRICE_ON_REQUEST, AdRecord, Listing

logger = logging.getLogger(__name__)


# =============================================================================
# Payload Location
# =============================================================================

NEXT_DATA_SCRIPT_ID = "__NEXT_DATA__"
ADVERT_SUMMARY_PATH = ("props", "pageProps", "searchResult", "advertSummaryList", "advertSummary")


def extract_next_data(html: str) -> dict[str, Any] | None:
    """Parse the JSON payload out of the __NEXT_DATA__ script tag.

    Returns:
        The decoded document, or None if the tag is missing, empty or not a JSON object.
    """
    soup = BeautifulSoup(html, "html.parser")
    tag = soup.find("script", id=NEXT_DATA_SCRIPT_ID)
    if tag is None:
        return None

    text = tag.string or tag.get_text()
    if not text or not text.strip():
        logger.warning(f"{NEXT_DATA_SCRIPT_ID} script tag is empty")
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Could not decode {NEXT_DATA_SCRIPT_ID}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"{NEXT_DATA_SCRIPT_ID} is not a JSON object: got {type(data).__name__}")
        return None
    return data


def get_advert_summaries(data: dict[str, Any]) -> list[Any] | None:
    """Walk the fixed path to the advertSummary array.

    Returns:
        The raw ad list, or None if any step of the path is missing.
    """
    node: Any = data
    for key in ADVERT_SUMMARY_PATH:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node if isinstance(node, list) else None


# =============================================================================
# Filtering
# =============================================================================

def is_private_listing(ad: AdRecord) -> bool:
    return ad.attribute("ISPRIVATE") == "1"


def is_rental_listing(ad: AdRecord) -> bool:
    return ad.attribute("OWNAGETYPE") == "Miete"


def has_property_type(ad: AdRecord, property_types: list[str]) -> bool:
    """Check the PROPERTY_TYPE attribute against a vocabulary.

    An ad without a property type matches nothing.
    """
    property_type = ad.attribute("PROPERTY_TYPE")
    return property_type is not None and property_type in property_types


class ListingFilter:
    """Decides which raw ads are worth parsing, based on a FilterConfig."""

    def __init__(self, filters: FilterConfig | None = None):
        self.filters = filters if filters is not None else app_config.filters

    def should_include(self, ad: AdRecord) -> bool:
        f = self.filters
        if f.only_private and not is_private_listing(ad):
            return False
        if f.exclude_rentals and is_rental_listing(ad):
            return False
        if f.exclude_commercial and has_property_type(ad, f.commercial_types):
            return False
        if f.exclude_land and has_property_type(ad, f.land_types):
            return False
        return True


# =============================================================================
# Parsing
# =============================================================================

def _parse_invariant_number(text: str) -> float | None:
    """Parse '349000', '349,000' or '349,000.50'; ',' only groups the integer part."""
    cleaned = text.strip()
    if "_" in cleaned:
        return None
    integer_part, dot, fraction = cleaned.partition(".")
    if "," in fraction:
        return None
    try:
        return float(integer_part.replace(",", "") + dot + fraction)
    except ValueError:
        return None


def format_price(text: str | None) -> str | None:
    """Format a numeric price suggestion like '349000' as '€ 349,000.00'.

    Returns:
        None for empty input, the input unchanged if it isn't a number.
    """
    if not text:
        return None
    value = _parse_invariant_number(text)
    if value is None:
        return text
    if not math.isfinite(value):
        return text
    return f"€ {value:,.2f}"


def compose_location(ad: AdRecord) -> str:
    """Build 'Address, Postcode Area', or just the area if there's no address."""
    area = ad.attribute("LOCATION") or ""
    address = ad.attribute("ADDRESS") or ""
    if not address:
        return area
    postcode = ad.attribute("POSTCODE") or ""
    return f"{address}, {postcode} {area}".strip()


def parse_listing(ad: AdRecord, base_url: str = app_config.base_url) -> Listing | None:
    """Convert a raw ad into a Listing.

    Args:
        ad: The raw ad record.
        base_url: Prefix for the relative SEO_URL.

    Returns:
        The Listing, or None if the ad has no ADID.
    """
    listing_id = ad.attribute("ADID")
    if not listing_id:
        return None

    price = ad.attribute("PRICE_FOR_DISPLAY")
    if price is None:
        price = format_price(ad.attribute("ESTATE_PRICE/PRICE_SUGGESTION"))

    size = None
    for name in ("ESTATE_SIZE/LIVING_AREA", "ESTATE_SIZE/USEABLE_AREA", "ESTATE_SIZE"):
        size = ad.attribute(name)
        if size is not None:
            break

    seo_url = ad.attribute("SEO_URL")

    return Listing(
        id=listing_id,
        title=ad.attribute("HEADING") or "",
        price=price if price is not None else PRICE_ON_REQUEST,
        location=compose_location(ad),
        url=f"{base_url}{seo_url}" if seo_url else "",
        property_type=ad.attribute("PROPERTY_TYPE") or "",
        size=size or "",
        rooms=ad.attribute("NUMBER_OF_ROOMS") or "",
    )


# =============================================================================
# Scraper
# =============================================================================

class WillhabenScraper(BaseScraper):
    """Scraper for willhaben.at region search pages.

    Usage:
        async with WillhabenScraper() as scraper:
            result = await scraper.walk_region(region_url)
    """

    PAGINATION_PARAM = "page"

    def __init__(
        self,
        settings: Config | None = None,
        filters: FilterConfig | None = None,
        jitter: Jitter | None = None,
    ):
        self.settings = settings if settings is not None else app_config
        super().__init__(
            ScraperConfig(
                source_id="willhaben",
                base_url=self.settings.base_url,
                headers={
                    "Accept": self.settings.accept,
                    "Accept-Language": self.settings.accept_language,
                },
                user_agents=self.settings.user_agents,
                timeout_ms=int(self.settings.request_timeout_seconds * 1000),
            ),
            jitter=jitter,
        )
        self.listing_filter = ListingFilter(filters if filters is not None else self.settings.filters)

    def page_url(self, region_url: str, page_num: int) -> str:
        if page_num == 1:
            return region_url
        separator = "&" if "?" in region_url else "?"
        return f"{region_url}{separator}{self.PAGINATION_PARAM}={page_num}"

    def listings_from_html(self, html: str, url: str = "") -> list[Listing]:
        """Extract, filter and parse all ads embedded in a search page."""
        data = extract_next_data(html)
        if data is None:
            logger.info(f"No usable {NEXT_DATA_SCRIPT_ID} payload on {url}")
            return []

        ads = get_advert_summaries(data)
        if ads is None:
            logger.warning(f"Unexpected {NEXT_DATA_SCRIPT_ID} layout on {url}, no advertSummary")
            return []

        listings = []
        for raw in ads:
            ad = AdRecord(raw)
            if not self.listing_filter.should_include(ad):
                continue
            listing = parse_listing(ad, base_url=self.config.base_url)
            if listing is not None:
                listings.append(listing)
        return listings

    async def fetch_page(self, url: str) -> list[Listing]:
        """Fetch one search page and return the listings that pass the filter.

        Raises:
            PageFetchError: On a non-2xx response. Transport errors propagate as well.
        """
        html = await self.fetch_html(url)
        return self.listings_from_html(html, url)

    async def walk_region(self, region_url: str) -> RegionResult:
        """Collect listings from up to max_pages search pages of one region.

        Stops early on an empty page, on a page with fewer than full_page_size
        listings, or on the first fetch error.
        """
        result = RegionResult(url=region_url)

        for page_num in range(1, self.settings.max_pages + 1):
            url = self.page_url(region_url, page_num)
            logger.debug(f"Fetching page {page_num}: {url}")

            try:
                listings = await self.fetch_page(url)
            except Exception as e:
                result.errors.append(ScrapeError.from_exception(url, e))
                logger.error(f"Error on page {page_num}: {e}")
                break

            result.pages_fetched += 1
            if not listings:
                break

            result.listings.extend(listings)
            logger.debug(f"Page {page_num}: {len(listings)} listings ({len(result.listings)} total)")

            if len(listings) < self.settings.full_page_size:
                break

            if page_num < self.settings.max_pages:
                await self.jitter.sleep(self.settings.page_delay)

        return result
