"""Tests for the CSV exports."""
import uuid
from datetime import datetime, timezone

from conftest import make_annual, make_entry, make_hourly
from energysim.core.export import (
    BATCH_HEADER,
    batch_csv,
    batch_filename,
    format_number,
    history_csv,
    history_filename,
    iso_timestamp,
    single_run_csv,
    single_run_filename,
    to_fixed,
)
from energysim.models.simulation import SimulationRecord

GENERATED = datetime(2025, 1, 31, 8, 15, 0, 123456, tzinfo=timezone.utc)


class TestNumberFormatting:
    """Test the rounding helpers shared by every export."""

    def test_to_fixed_rounds_ties_up(self):
        assert to_fixed(0.125, 2) == "0.13"
        assert to_fixed(2.5, 0) == "3"
        assert to_fixed(1.5, 2) == "1.50"

    def test_to_fixed_uses_the_stored_binary_value(self):
        # 1.005 is stored as 1.00499999...
        assert to_fixed(1.005, 2) == "1.00"

    def test_to_fixed_of_missing_value(self):
        assert to_fixed(None, 1) == "0.0"

    def test_format_number(self):
        assert format_number(125.0) == "125"
        assert format_number(45.25) == "45.25"
        assert format_number(3) == "3"
        assert format_number(None) == ""

    def test_iso_timestamp(self):
        assert iso_timestamp(GENERATED) == "2025-01-31T08:15:00.123Z"


class TestSingleRunCsv:
    """Test the single-run export layout."""

    def _csv(self, **kwargs):
        options = {
            "simulation_type": "pre-configured",
            "building_type": "single-family-house",
            "weather_station": "lund",
            "construction_period": "1986-1995",
            "generated_at": GENERATED,
        }
        options.update(kwargs)
        return single_run_csv(make_annual(), make_hourly(), **options)

    def test_header_and_configuration(self):
        lines = self._csv().split("\n")
        assert lines[0] == "Building Energy Simulation Results"
        assert lines[1] == "Generated,2025-01-31T08:15:00.123Z"
        assert lines[2] == ""
        assert lines[3] == "CONFIGURATION"
        assert lines[4] == "Building Type,single family house"
        assert lines[5] == "Weather Location,Lund"
        assert lines[6] == "Construction Period,1986-1995"
        assert lines[7] == "Conditioned Floor Area,125 m²"

    def test_custom_run_names_the_simulation_type(self):
        csv = self._csv(simulation_type="real-time", construction_period=None)
        assert "Simulation Type,Custom Real-Time\n" in csv
        assert "Construction Period" not in csv

    def test_annual_summary_and_breakdown(self):
        csv = self._csv()
        assert "ANNUAL SUMMARY\nTotal Energy,9001,kWh/year\n" in csv
        assert "EUI,45.2,kWh/m²/year\n" in csv
        assert "Peak Heating Power,4.26,kW\n" in csv
        assert "Peak Cooling Power,1.50,kW\n" in csv
        assert "Heating,5000,kWh/year\n" in csv
        assert "Cooling,1201,kWh/year\n" in csv
        assert "DHW,1500,kWh/year\n" in csv
        assert "Equipment,700,kWh/year\n\n" in csv

    def test_monthly_and_hourly_sections(self):
        csv = self._csv()
        assert "MONTHLY HEATING & COOLING (kWh)\nMonth,Heating,Cooling\nJan,744,372\n" in csv
        assert "Dec,744,372\n\n" in csv
        assert "HOURLY DATA (8760 hours)\nHour,Heating Power (kW),Cooling Power (kW)\n0,1.000,0.500\n" in csv
        assert csv.endswith("8759,1.000,0.500\n")
        assert "\n8760," not in csv

    def test_hourly_section_omitted_without_hourly_data(self):
        csv = single_run_csv(
            make_annual(), None,
            simulation_type="pre-configured",
            building_type="single-family-house",
            weather_station="lund",
            construction_period="1986-1995",
            generated_at=GENERATED,
        )
        assert "Month,Heating,Cooling\n\n" in csv
        assert "HOURLY DATA" not in csv


class TestBatchCsv:
    """Test the batch export."""

    def _entries(self):
        return [
            make_entry("single-family-house", "1986-1995", count=2, total=10000),
            make_entry("mid-rise-apartment", "1996-2005", count=1, total=40000, floor_area=3135),
        ]

    def test_per_building_rows(self):
        lines = batch_csv(self._entries(), "lund", generated_at=GENERATED).split("\n")
        assert lines[0] == "Batch Simulation Results"
        assert lines[2] == "Weather Location,Lund"
        assert lines[4] == "PER-BUILDING RESULTS"
        assert lines[5] == BATCH_HEADER
        assert lines[6] == "single-family-house,1986-1995,2,10001,2401,3000,1200,1400,20000,45.2,250,8.51,3.00"
        assert lines[7].startswith("mid-rise-apartment,1996-2005,1,")

    def test_total_row(self):
        csv = batch_csv(self._entries(), "lund", generated_at=GENERATED)
        assert csv.endswith("\n\nTOTAL,,3,15001,3602,4500,1800,2100,60000,17.7,3385,12.77,4.50\n")


class TestHistoryCsv:
    """Test the saved-record report."""

    def _record(self, **overrides):
        values = {
            "id": uuid.UUID("9f1c2b3a-0000-4000-8000-000000000000"),
            "user_id": "u1",
            "created_at": datetime(2025, 3, 4, 10, 20, 30),
            "simulation_type": "pre-configured",
            "building_type": "single-family-house",
            "weather_station": "lund",
            "construction_period": "1986-1995",
            "building_count": 1,
            "total_heating": 5000.5,
            "total_cooling": 1200.0,
            "total_energy": 9000.0,
            "eui": 72.0,
            "floor_area": 125.0,
            "hourly_data": make_hourly(heating=1.23456, cooling=0.0).model_dump(),
        }
        values.update(overrides)
        return SimulationRecord(**values)

    def test_report_lines(self):
        lines = history_csv(self._record()).split("\n")
        assert lines[:6] == [
            "Simulation Report",
            "Date,2025-03-04 10:20:30",
            "Type,pre-configured",
            "Location,lund",
            "Building Type,single-family-house",
            "Construction Period,1986-1995",
        ]
        assert "Total Heating (kWh),5000.5" in lines
        assert "Total Energy (kWh),9000" in lines
        assert "Floor Area (m²),125" in lines
        assert "Hourly Data (8760 hours)" in lines
        assert "1,1.2346,0.0000" in lines
        assert lines[-1] == "8760,1.2346,0.0000"

    def test_batch_record_lists_building_count(self):
        record = self._record(
            simulation_type="batch", building_type=None, construction_period=None,
            building_count=5, hourly_data=None,
        )
        lines = history_csv(record).split("\n")
        assert "Building Count,5" in lines
        assert not any(line.startswith("Building Type") for line in lines)
        assert "Hourly Data (8760 hours)" not in lines

    def test_filename(self):
        assert history_filename(self._record()) == "simulation-9f1c2b3a-2025-03-04.csv"


class TestFilenames:
    def test_single_run_filenames(self):
        assert single_run_filename("lund", "pre-configured", "1986-1995") == "energy_results_lund_1986-1995.csv"
        assert single_run_filename("kiruna", "real-time", None) == "energy_results_kiruna_custom.csv"

    def test_batch_filename(self):
        assert batch_filename("lund") == "batch_results_lund.csv"
