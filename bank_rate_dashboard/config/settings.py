"""Configuration settings for the dashboard."""

from dataclasses import dataclass, field
import os

from dotenv import load_dotenv


load_dotenv()


# Bank of England Interactive Database (IADB) XML export
BOE_FEED_URL = "https://www.bankofengland.co.uk/boeapps/database/_iadb-fromshowcolumns.asp"

# Hypothetical Bank Rate moves offered to the user (percentage points)
SCENARIO_CHANGES: tuple[float, ...] = (-0.50, -0.25, 0.0, 0.25, 0.50)

# Chart windows, most recent date backwards
RANGE_OPTIONS: dict[str, str] = {
    "1M": "1 month",
    "6M": "6 months",
    "1Y": "1 year",
    "5Y": "5 years",
    "ALL": "All history",
}


@dataclass
class Settings:
    """Application settings."""

    series_code: str = field(
        default_factory=lambda: os.getenv("BOE_SERIES_CODE", "IUDBEDR")
    )
    date_from: str = field(
        default_factory=lambda: os.getenv("BOE_DATE_FROM", "01/Jan/2000")
    )
    date_to: str = field(default_factory=lambda: os.getenv("BOE_DATE_TO", "now"))
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("BOE_REQUEST_TIMEOUT", "30"))
    )
    cache_ttl_hours: float = field(
        default_factory=lambda: float(os.getenv("BOE_CACHE_TTL_HOURS", "6"))
    )

    def validate(self) -> None:
        """Validate required settings."""
        if not self.series_code:
            raise ValueError(
                "BOE_SERIES_CODE is empty. Bank Rate is published as IUDBEDR."
            )
        if self.request_timeout <= 0:
            raise ValueError("BOE_REQUEST_TIMEOUT must be positive")
        if self.cache_ttl_hours <= 0:
            raise ValueError("BOE_CACHE_TTL_HOURS must be positive")

    @property
    def cache_ttl_seconds(self) -> int:
        return int(self.cache_ttl_hours * 60 * 60)

    def feed_params(self) -> dict[str, str]:
        """Query parameters for the IADB XML export of the configured series."""
        return {
            "CodeVer": "new",
            "xml.x": "yes",
            "Datefrom": self.date_from,
            "Dateto": self.date_to,
            "SeriesCodes": self.series_code,
        }
