"""Data models."""

from .rate_data import Observation, RateSeries

__all__ = ["Observation", "RateSeries"]
