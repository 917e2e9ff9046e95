"""Configuration management."""

from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class DelayWindow(BaseModel):
    """Range in seconds (min, max) for a randomized delay."""

    min_seconds: float = Field(..., ge=0)
    max_seconds: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "DelayWindow":
        if self.max_seconds < self.min_seconds:
            raise ValueError(
                f"max_seconds ({self.max_seconds}) is below min_seconds ({self.min_seconds})"
            )
        return self


class Region(BaseModel):
    """One monitored search scope on willhaben.at."""

    name: str = Field(..., description="Short label used in logs (e.g., 'wien')")
    url: str = Field(..., description="Search-results URL of page 1")


class FilterConfig(BaseModel):
    """Inclusion rules applied to every raw ad before it is parsed."""

    only_private: bool = Field(default=True, description="Only keep ads from private sellers")
    exclude_rentals: bool = Field(default=False, description="Drop rental ads (OWNAGETYPE == 'Miete')")
    exclude_commercial: bool = Field(default=True, description="Drop office/retail/gastro/storage ads")
    exclude_land: bool = Field(default=True, description="Drop plots and agricultural land")

    # Property types willhaben uses for commercial real estate
    commercial_types: list[str] = Field(
        default=[
            "Geschäfts-/Ladenlokal",
            "Büro/Ordination",
            "Gastronomie",
            "Lagerhalle",
            "Werkstatt",
        ],
    )

    # Property types for land without a building
    land_types: list[str] = Field(
        default=[
            "Grundstück",
            "Baugrundstück",
            "Gewerbegrundstück",
            "Land-/Forstwirtschaft",
        ],
    )

    def with_overrides(
        self,
        only_private: bool | None = None,
        exclude_rentals: bool | None = None,
        exclude_commercial: bool | None = None,
        exclude_land: bool | None = None,
    ) -> "FilterConfig":
        """Create a new FilterConfig with optional overrides.

        Only non-None values override the current settings.
        """
        return self.model_copy(update={
            key: value
            for key, value in {
                "only_private": only_private,
                "exclude_rentals": exclude_rentals,
                "exclude_commercial": exclude_commercial,
                "exclude_land": exclude_land,
            }.items()
            if value is not None
        })


class Config(BaseModel):
    """Application configuration."""

    # config.py is at src/immo_watch/config.py, so 3 parents up
    project_root: Path = Path(__file__).parent.parent.parent
    env_file: Path = project_root / ".env"

    base_url: str = "https://www.willhaben.at/iad/"

    regions: list[Region] = Field(default=[
        Region(name="wien", url="https://www.willhaben.at/iad/immobilien/immobilien/wien"),
        Region(name="niederoesterreich", url="https://www.willhaben.at/iad/immobilien/immobilien/niederoesterreich"),
        Region(name="burgenland", url="https://www.willhaben.at/iad/immobilien/immobilien/burgenland"),
    ])

    # Pagination
    max_pages: int = 5
    full_page_size: int = 25  # fewer listings than this on a page means it was the last one

    # Timing
    page_delay: DelayWindow = DelayWindow(min_seconds=1.5, max_seconds=3.0)
    region_delay: DelayWindow = DelayWindow(min_seconds=2.0, max_seconds=5.0)
    cycle_interval: DelayWindow = DelayWindow(min_seconds=115.0, max_seconds=125.0)
    request_timeout_seconds: float = 30.0

    # Request headers
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    accept_language: str = "de-AT,de;q=0.9,en;q=0.8"
    user_agents: list[str] = Field(default=[
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:133.0) Gecko/20100101 Firefox/133.0",
    ])

    filters: FilterConfig = Field(default_factory=FilterConfig)


# Global config instance
config = Config()
