"""Chart windows and summary figures over a rate history frame."""

import math
from dataclasses import dataclass

import pandas as pd

from bank_rate_dashboard.config import RANGE_OPTIONS


RANGE_OFFSETS: dict[str, pd.DateOffset] = {
    "1M": pd.DateOffset(months=1),
    "6M": pd.DateOffset(months=6),
    "1Y": pd.DateOffset(years=1),
    "5Y": pd.DateOffset(years=5),
}

Y_PADDING = 0.12
FLAT_Y_PADDING = 0.5


@dataclass
class HeaderStats:
    """Summary of the visible chart window."""

    start_value: float
    end_value: float
    start_date: pd.Timestamp
    end_date: pd.Timestamp
    change_pct: float
    badge_text: str


def filter_range(frame: pd.DataFrame, range_key: str) -> pd.DataFrame:
    """Keep rows within range_key of the most recent date."""
    if range_key not in RANGE_OPTIONS:
        raise ValueError(f"Unknown range: {range_key}")
    if range_key == "ALL" or frame.empty:
        return frame

    min_date = frame.index.max() - RANGE_OFFSETS[range_key]
    return frame[frame.index >= min_date]


def pct_change(start: float, end: float) -> float:
    """Percentage change, 0 when the start value is zero or not finite."""
    if not math.isfinite(start) or start == 0:
        return 0.0
    return (end - start) / start * 100


def header_stats(frame: pd.DataFrame) -> HeaderStats | None:
    if frame.empty:
        return None

    start = float(frame["value"].iloc[0])
    end = float(frame["value"].iloc[-1])
    change = pct_change(start, end)
    sign = "+" if change >= 0 else ""

    return HeaderStats(
        start_value=start,
        end_value=end,
        start_date=frame.index[0],
        end_date=frame.index[-1],
        change_pct=change,
        badge_text=f"{sign}{change:.2f}%",
    )


def y_domain(frame: pd.DataFrame) -> tuple[float, float] | None:
    """Axis range around the values, padded so flat lines stay visible."""
    if frame.empty:
        return None
    values = frame["value"].dropna()
    if values.empty:
        return None

    low = float(values.min())
    high = float(values.max())
    pad = (high - low) * Y_PADDING or FLAT_Y_PADDING
    return low - pad, high + pad
