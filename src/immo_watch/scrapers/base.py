"""Base scraper class."""

import asyncio
import random
import traceback
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Sequence, TypeVar

from playwright.async_api import APIRequestContext, Playwright, async_playwright
from pydantic import BaseModel, Field

from ..config import DelayWindow
from ..models.listing import Listing

T = TypeVar("T")


class PageFetchError(Exception):
    """Raised when a search page answers with a non-2xx status."""

    def __init__(self, url: str, status: int, status_text: str = ""):
        self.url = url
        self.status = status
        super().__init__(f"HTTP {status} {status_text}".rstrip() + f" for {url}")


@dataclass
class ScrapeError:
    """Record of a scraping error."""

    url: str
    error_type: str
    error_message: str
    traceback: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_exception(cls, url: str, exc: Exception) -> "ScrapeError":
        """Create a ScrapeError from an exception."""
        return cls(
            url=url,
            error_type=type(exc).__name__,
            error_message=str(exc),
            traceback=traceback.format_exc(),
        )


@dataclass
class RegionResult:
    """Listings collected from one region, plus the error that ended the walk early."""

    url: str
    listings: list[Listing] = field(default_factory=list)
    errors: list[ScrapeError] = field(default_factory=list)
    pages_fetched: int = 0

    @property
    def success_count(self) -> int:
        return len(self.listings)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def __repr__(self) -> str:
        return (
            f"RegionResult({self.success_count} listings from {self.pages_fetched} pages, "
            f"{self.error_count} failed)"
        )


class Jitter:
    """Source of bounded random durations and choices."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def seconds(self, window: DelayWindow) -> float:
        """Draw a duration uniformly from the window."""
        return self._rng.uniform(window.min_seconds, window.max_seconds)

    def choice(self, options: Sequence[T]) -> T:
        return self._rng.choice(options)

    async def wait(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def sleep(self, window: DelayWindow) -> float:
        """Sleep for a random duration within the window and return it."""
        delay = self.seconds(window)
        await self.wait(delay)
        return delay


class ScraperConfig(BaseModel):
    """Configuration for a scraper."""

    source_id: str = Field(..., description="Unique identifier for this source")
    base_url: str = Field(..., description="Base URL for the source")
    headers: dict[str, str] = Field(default_factory=dict, description="Headers sent with every request")
    user_agents: list[str] = Field(default_factory=list, description="Pool to rotate User-Agent from")
    timeout_ms: int = Field(default=30000, description="Per-request timeout in ms")


class BaseScraper:
    """Base class for scrapers that fetch plain HTML over HTTP.

    Uses a Playwright APIRequestContext, so no browser has to be launched.
    """

    def __init__(self, scraper_config: ScraperConfig, jitter: Jitter | None = None):
        self.config = scraper_config
        self.jitter = jitter or Jitter()
        self._playwright: Playwright | None = None
        self._request: APIRequestContext | None = None

    async def setup(self) -> None:
        """Open the HTTP request context."""
        self._playwright = await async_playwright().start()
        try:
            self._request = await self._playwright.request.new_context(
                extra_http_headers=self.config.headers,
                timeout=self.config.timeout_ms,
            )
        except Exception:
            await self.teardown()
            raise

    async def teardown(self) -> None:
        """Cleanup HTTP resources."""
        if self._request:
            await self._request.dispose()
            self._request = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @property
    def request(self) -> APIRequestContext:
        """Get the request context, raising if not initialized."""
        if self._request is None:
            raise RuntimeError("Scraper not initialized. Call setup() first.")
        return self._request

    def pick_user_agent(self) -> str | None:
        if not self.config.user_agents:
            return None
        return self.jitter.choice(self.config.user_agents)

    async def fetch_html(self, url: str) -> str:
        """GET a page with a rotated User-Agent and return its body.

        Raises:
            PageFetchError: If the server answers with a non-2xx status.
        """
        headers = {}
        user_agent = self.pick_user_agent()
        if user_agent:
            headers["User-Agent"] = user_agent

        response = await self.request.get(url, headers=headers, timeout=self.config.timeout_ms)
        try:
            if not response.ok:
                raise PageFetchError(url, response.status, response.status_text)
            return await response.text()
        finally:
            await response.dispose()

    async def __aenter__(self):
        await self.setup()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.teardown()
