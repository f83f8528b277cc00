import math

import pandas as pd
import pytest

from bank_rate_dashboard.data.views import filter_range, header_stats, pct_change, y_domain


def frame(dates: list[str], values: list[float]) -> pd.DataFrame:
    return pd.DataFrame({"value": values}, index=pd.DatetimeIndex(pd.to_datetime(dates), name="date"))


@pytest.fixture
def history() -> pd.DataFrame:
    return frame(
        ["2019-01-01", "2022-01-01", "2023-06-01", "2024-01-01", "2024-05-15", "2024-06-01"],
        [0.75, 0.25, 5.0, 5.25, 5.25, 5.0],
    )


@pytest.mark.parametrize(
    "range_key, expected",
    [("1M", 2), ("6M", 3), ("1Y", 4), ("5Y", 5), ("ALL", 6)],
)
def test_filter_range(history, range_key, expected):
    window = filter_range(history, range_key)
    assert len(window) == expected
    assert window.index[-1] == pd.Timestamp("2024-06-01")


def test_filter_range_unknown_key(history):
    with pytest.raises(ValueError):
        filter_range(history, "3Y")


def test_filter_range_empty():
    empty = pd.DataFrame(columns=["value"])
    assert filter_range(empty, "1Y").empty


@pytest.mark.parametrize(
    "start, end, expected",
    [(4.0, 5.0, 25.0), (5.0, 4.0, -20.0), (0, 5.0, 0), (float("nan"), 1.0, 0), (float("inf"), 1.0, 0)],
)
def test_pct_change(start, end, expected):
    assert pct_change(start, end) == pytest.approx(expected)


def test_header_stats_window(history):
    stats = header_stats(filter_range(history, "1Y"))
    assert stats.start_value == 5.0
    assert stats.end_value == 5.0
    assert stats.badge_text == "+0.00%"
    assert stats.start_date == pd.Timestamp("2023-06-01")


def test_header_stats_badge_signs():
    assert header_stats(frame(["2024-01-01", "2024-02-01"], [5.25, 4.75])).badge_text == "-9.52%"
    assert header_stats(frame(["2024-01-01", "2024-02-01"], [4.0, 5.0])).badge_text == "+25.00%"


def test_header_stats_empty():
    assert header_stats(pd.DataFrame(columns=["value"])) is None


def test_y_domain_padding():
    low, high = y_domain(frame(["2024-01-01", "2024-02-01"], [4.0, 5.0]))
    assert low == pytest.approx(3.88)
    assert high == pytest.approx(5.12)


def test_y_domain_flat_series():
    assert y_domain(frame(["2024-01-01", "2024-02-01"], [5.0, 5.0])) == (4.5, 5.5)


def test_y_domain_ignores_nan():
    low, high = y_domain(frame(["2024-01-01", "2024-02-01", "2024-03-01"], [4.0, math.nan, 5.0]))
    assert (low, high) == pytest.approx((3.88, 5.12))


def test_y_domain_empty():
    assert y_domain(pd.DataFrame(columns=["value"])) is None
    assert y_domain(frame(["2024-01-01"], [math.nan])) is None
