"""Rate feed fetching and normalization."""

from .boe_fetcher import (
    BoeFetcher,
    FeedError,
    FeedUnavailableError,
    InvalidFeedError,
    NoObservationsError,
)
from .normalizer import normalize_document

__all__ = [
    "BoeFetcher",
    "FeedError",
    "FeedUnavailableError",
    "InvalidFeedError",
    "NoObservationsError",
    "normalize_document",
]
