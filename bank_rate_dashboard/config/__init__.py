"""Configuration."""

from .settings import (
    BOE_FEED_URL,
    RANGE_OPTIONS,
    SCENARIO_CHANGES,
    Settings,
)

__all__ = ["BOE_FEED_URL", "RANGE_OPTIONS", "SCENARIO_CHANGES", "Settings"]
