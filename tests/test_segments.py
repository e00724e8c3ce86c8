import numpy as np
import pandas as pd
import pytest

from millennium.domains.config import INDICATORS
from millennium.domains.enriched.enrich_global import enrich
from millennium.domains.parse import parse
from millennium.domains.segments import (
    assess_data_quality,
    calculate_period_trends,
    get_available_indicators,
    segment_by_period,
)


def _frame(n, filled):
    """n rows with the first ``filled`` indicators fully populated."""
    data = {"year": np.arange(1300, 1300 + n)}
    for i, key in enumerate(INDICATORS.keys()):
        data[key] = np.ones(n) if i < filled else np.full(n, np.nan)
    return pd.DataFrame(data)


@pytest.mark.parametrize(
    "filled,expected",
    [
        (11, "high"),
        (9, "high"),  # 9/11 = 0.818
        (8, "medium"),  # 0.727
        (5, "medium"),  # 0.4545
        (4, "low"),  # 0.3636
        (0, "low"),
    ],
)
def test_data_quality_tiers(filled, expected):
    assert assess_data_quality(_frame(10, filled)) == expected


def test_data_quality_thresholds_are_strict():
    keys = INDICATORS.keys()[:5]
    # 4 of 5 indicators -> exactly 0.8 -> medium
    assert assess_data_quality(_frame(3, 4), indicators=keys) == "medium"
    # 2 of 5 -> exactly 0.4 -> low
    assert assess_data_quality(_frame(3, 2), indicators=keys) == "low"


def test_available_indicators():
    df = _frame(4, 0)
    df.loc[2, "cpi"] = 5.0
    df.loc[0, "house_price"] = 1.0
    assert get_available_indicators(df) == ["cpi", "house_price"]


def test_gdp_trend_requires_more_than_ten_points():
    df = pd.DataFrame({"year": np.arange(1400, 1410), "gdp_real": np.arange(1.0, 11.0), "population": np.nan})
    assert "gdp" not in calculate_period_trends(df)
    df = pd.DataFrame({"year": np.arange(1400, 1411), "gdp_real": np.arange(1.0, 12.0), "population": np.nan})
    assert "gdp" in calculate_period_trends(df)


def test_population_trend_requires_more_than_five_points():
    df = pd.DataFrame({"year": np.arange(1400, 1405), "gdp_real": np.nan, "population": np.ones(5)})
    assert calculate_period_trends(df) == {}
    df = pd.DataFrame({"year": np.arange(1400, 1406), "gdp_real": np.nan, "population": np.ones(6)})
    assert "population" in calculate_period_trends(df)


def test_trend_values_use_first_and_last_non_null():
    years = np.arange(1500, 1520)
    gdp = np.full(20, np.nan)
    gdp[2:17] = 200.0
    gdp[2] = 100.0  # year 1502
    gdp[16] = 400.0  # year 1516
    df = pd.DataFrame({"year": years, "gdp_real": gdp, "population": np.nan})
    trend = calculate_period_trends(df)["gdp"]
    assert trend.start_year == 1502
    assert trend.end_year == 1516
    assert trend.start_value == 100.0
    assert trend.end_value == 400.0
    assert trend.multiplier == pytest.approx(4.0)
    assert trend.total_growth == pytest.approx(300.0)
    assert trend.annual_growth == pytest.approx((4.0 ** (1 / 14) - 1) * 100)


def test_segment_boundary_year_in_both_periods(make_raw_frame):
    df, _ = enrich(parse(make_raw_frame([{"year": y, "gdp_real": 1} for y in (1499, 1500, 1501)])))
    seg = segment_by_period(df)
    assert seg["medieval"].data["year"].tolist() == [1499, 1500]
    assert seg["awakening"].data["year"].tolist() == [1500, 1501]
    # the record keeps its single classification
    assert seg["awakening"].data.loc[0, "period"] == "medieval"


def test_segment_all_periods_and_empty_stats(make_raw_frame):
    df, _ = enrich(parse(make_raw_frame([{"year": 1300, "gdp_real": 1}])))
    seg = segment_by_period(df)
    assert list(seg) == ["medieval", "awakening", "industrial", "crisis", "modern"]
    assert seg["medieval"].stats.years == 1
    assert seg["modern"].stats is None
    assert seg["modern"].data.empty


def test_segment_change_points_only_for_present_years(make_raw_frame):
    df, _ = enrich(parse(make_raw_frame([{"year": y} for y in range(1900, 1951)])))
    seg = segment_by_period(df)
    assert [cp.year for cp in seg["crisis"].change_points] == [1914, 1929]
    # 1971 is curated but the year is absent from the data
    assert seg["modern"].data["year"].tolist() == [1950]
    assert seg["modern"].change_points == []


def test_segment_long_series_stats(long_raw):
    df, _ = enrich(parse(long_raw))
    seg = segment_by_period(df)
    medieval = seg["medieval"]
    assert medieval.data["year"].min() == 1209
    assert medieval.data["year"].max() == 1500
    assert medieval.stats.available_indicators == ["gdp_real", "population"]
    assert medieval.stats.data_quality == "low"
    gdp = medieval.stats.key_trends["gdp"]
    assert gdp.start_year == 1209
    assert gdp.annual_growth == pytest.approx(0.5, rel=1e-3)
    pop = medieval.stats.key_trends["population"]
    assert pop.start_year == 1300
    assert pop.end_value == 3000 + 200 * 10
