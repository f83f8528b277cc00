"""Bank Rate dashboard: rate history normalization and personal-finance calculators."""

__version__ = "0.1.0"
