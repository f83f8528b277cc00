"""Data models for rate history."""

from dataclasses import dataclass, field
import math

import pandas as pd


@dataclass(frozen=True)
class Observation:
    """Single observation from a rate series."""

    date: str  # YYYY-MM-DD
    value: float  # percent, NaN when the feed value was unparseable

    def to_dict(self) -> dict:
        # JSON has no NaN; unparseable values go out as null
        value = self.value if math.isfinite(self.value) else None
        return {"date": self.date, "value": value}


@dataclass(frozen=True)
class RateSeries:
    """Normalized rate history for one fetch cycle."""

    series_code: str
    points: tuple[Observation, ...] = field(default_factory=tuple)
    changes_only: tuple[Observation, ...] = field(default_factory=tuple)
    latest: Observation | None = None

    @property
    def is_empty(self) -> bool:
        return not self.points

    def to_dict(self) -> dict:
        """Serialize to the JSON document served to the front end."""
        return {
            "seriesCode": self.series_code,
            "points": [p.to_dict() for p in self.points],
            "changesOnly": [p.to_dict() for p in self.changes_only],
            "latest": self.latest.to_dict() if self.latest else None,
        }

    def to_frame(self, changes_only: bool = True) -> pd.DataFrame:
        """
        Convert to a DataFrame for charting.

        Returns:
            DataFrame with DatetimeIndex and 'value' column
        """
        source = self.changes_only if changes_only else self.points
        if not source:
            return pd.DataFrame(columns=["value"])

        df = pd.DataFrame(
            {"date": [p.date for p in source], "value": [p.value for p in source]}
        )
        df["date"] = pd.to_datetime(df["date"], format="ISO8601", errors="coerce")
        df = df.dropna(subset=["date"])
        df.set_index("date", inplace=True)
        return df
