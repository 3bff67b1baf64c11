"""Tests for batch aggregation and monthly/daily series."""
import numpy as np
import pytest

from conftest import make_entry, make_hourly
from energysim.core.aggregator import (
    HOURS_PER_YEAR,
    MONTH_DAYS,
    aggregate_batch,
    breakdown_table,
    combine_hourly,
    daily_peaks,
    month_hour_ranges,
    monthly_by_building_type,
    monthly_totals,
    single_run_monthly,
)


class TestAggregateBatch:
    """Test count-weighted annual totals."""

    def test_weighted_eui_for_mixed_batch(self):
        entries = [
            make_entry("single-family-house", "1986-1995", count=2, total=10000, floor_area=125),
            make_entry("mid-rise-apartment", "1996-2005", count=1, total=40000, floor_area=3135),
        ]
        totals = aggregate_batch(entries)
        assert totals.total == 60000
        assert totals.floor_area == 3385
        assert totals.weighted_eui == pytest.approx(60000 / 3385)
        assert round(totals.weighted_eui, 1) == 17.7
        assert totals.building_count == 3

    def test_zero_area_gives_zero_eui(self):
        totals = aggregate_batch([make_entry(count=3, total=500, floor_area=0)])
        assert totals.weighted_eui == 0.0

    def test_every_category_scaled_by_count(self):
        totals = aggregate_batch([make_entry(count=4, heating=100, cooling=10, peak_heating_kw=2.5)])
        assert totals.heating == 400
        assert totals.cooling == 40
        assert totals.peak_heating_kw == 10.0

    def test_fans_reported_but_not_added_to_total(self):
        totals = aggregate_batch([make_entry(count=2, total=1000, fans=50)])
        assert totals.fans == 100
        assert totals.total == 2000

    def test_empty_batch(self):
        totals = aggregate_batch([])
        assert totals.building_count == 0
        assert totals.weighted_eui == 0.0


class TestCombineHourly:
    """Test combined 8760-hour series."""

    def test_count_weighted_elementwise_sum(self):
        entries = [
            make_entry(count=2, hourly=make_hourly(heating=1.0, cooling=0.25)),
            make_entry("mid-rise-apartment", "1996-2005", count=3, hourly=make_hourly(heating=2.0, cooling=0.5)),
        ]
        combined = combine_hourly(entries)
        assert len(combined["heating"]) == HOURS_PER_YEAR
        assert len(combined["cooling"]) == HOURS_PER_YEAR
        assert np.allclose(combined["heating"], 2 * 1.0 + 3 * 2.0)
        assert np.allclose(combined["cooling"], 2 * 0.25 + 3 * 0.5)
        assert np.allclose(combined["total"], combined["heating"] + combined["cooling"])

    def test_missing_hourly_contributes_zero(self):
        entries = [
            make_entry(count=1, hourly=make_hourly(heating=1.5, cooling=0.0)),
            make_entry("mid-rise-apartment", "1996-2005", count=5, hourly=None),
        ]
        combined = combine_hourly(entries)
        assert np.allclose(combined["heating"], 1.5)
        assert combined["cooling"].sum() == 0

    def test_no_entries_gives_zero_series(self):
        combined = combine_hourly([])
        assert combined["total"].shape == (HOURS_PER_YEAR,)
        assert combined["total"].sum() == 0


class TestMonthlySeries:
    """Test monthly partitioning of hourly data."""

    def test_month_ranges_partition_the_year(self):
        ranges = month_hour_ranges()
        assert len(ranges) == 12
        assert ranges[0][0] == 0
        assert ranges[-1][1] == HOURS_PER_YEAR
        for (start, stop), days in zip(ranges, MONTH_DAYS):
            assert stop - start == days * 24
        for previous, current in zip(ranges, ranges[1:]):
            assert previous[1] == current[0]

    def test_monthly_totals_of_constant_power(self):
        totals = monthly_totals(np.ones(HOURS_PER_YEAR))
        assert list(totals) == [d * 24 for d in MONTH_DAYS]
        assert totals.sum() == HOURS_PER_YEAR

    def test_single_run_monthly_rounds(self):
        monthly = single_run_monthly(make_hourly(heating=0.5, cooling=0.01))
        assert monthly[0] == {"month": "Jan", "heating": 372, "cooling": 7}
        assert monthly[1]["month"] == "Feb"
        assert monthly[1]["heating"] == 336

    def test_single_run_monthly_without_hourly(self):
        assert single_run_monthly(None) == []

    def test_monthly_by_building_type(self):
        entries = [
            make_entry("mid-rise-apartment", "1996-2005", count=1, hourly=make_hourly(heating=2.0, cooling=0.0)),
            make_entry("single-family-house", "1986-1995", count=2, hourly=make_hourly(heating=1.0, cooling=0.0)),
            make_entry("single-family-house", "before-1961", count=1, hourly=make_hourly(heating=1.0, cooling=0.0)),
        ]
        df = monthly_by_building_type(entries)
        assert len(df) == 24
        # display order puts single-family houses first
        assert df.iloc[0]["building_type"] == "single-family-house"
        jan_sfh = df[(df["building_type"] == "single-family-house") & (df["month"] == "Jan")]
        assert jan_sfh["heating"].iloc[0] == pytest.approx(3 * 31 * 24)

    def test_monthly_by_building_type_empty(self):
        df = monthly_by_building_type([make_entry(hourly=None)])
        assert df.empty


class TestDailyPeaksAndBreakdown:
    """Test chart downsampling and the per-archetype table."""

    def test_daily_peaks(self):
        series = np.zeros(HOURS_PER_YEAR)
        series[24 * 10 + 5] = 7.5
        peaks = daily_peaks(series)
        assert len(peaks) == 365
        assert peaks[10] == 7.5
        assert peaks[11] == 0

    def test_breakdown_table(self):
        table = breakdown_table([make_entry(count=3, heating=100, eui=40.0, floor_area=125)])
        row = table.iloc[0]
        assert row["heating"] == 300
        assert row["floor_area"] == 375
        assert row["eui"] == 40.0
