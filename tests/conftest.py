"""Pytest configuration and shared fixtures."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from energysim.models.base import Base
from energysim.models import feedback, simulation  # noqa: F401  (register tables)
from energysim.services.auth import AuthUser
from energysim.services.simulation import (
    HOURS_PER_YEAR,
    AnnualResult,
    BatchResultEntry,
    HourlyPowerData,
    SimulationResponse,
)


def make_annual(**overrides) -> AnnualResult:
    values = {
        "heating": 5000.4,
        "cooling": 1200.6,
        "dhw": 1500.0,
        "lighting": 600.0,
        "equipment": 700.0,
        "fans": 150.0,
        "total": 9000.9,
        "floor_area": 125,
        "eui": 45.2,
        "peak_heating_kw": 4.256,
        "peak_cooling_kw": 1.5,
        "peak_power_kw": 5.0,
        "avg_power_kw": 1.03,
    }
    values.update(overrides)
    return AnnualResult(**values)


def make_hourly(heating: float = 1.0, cooling: float = 0.5) -> HourlyPowerData:
    return HourlyPowerData(
        heating_power_kw=[heating] * HOURS_PER_YEAR,
        cooling_power_kw=[cooling] * HOURS_PER_YEAR,
        total_power_kw=[heating + cooling] * HOURS_PER_YEAR,
    )


def make_entry(building_type="single-family-house", period_id="1986-1995", count=1,
               hourly=None, **annual) -> BatchResultEntry:
    return BatchResultEntry(
        building_type=building_type,
        period_id=period_id,
        count=count,
        annual=make_annual(**annual),
        hourly=hourly,
    )


class FakeSimulationClient:
    """Stands in for SimulationClient; records calls and returns canned results."""

    def __init__(self, response: SimulationResponse | None = None, error: Exception | None = None):
        self.response = response or SimulationResponse(annual=make_annual(), hourly=make_hourly(), cached=False)
        self.error = error
        self.calls = []

    def run_simulation(self, weather_station, construction_period, building_type="single-family-house"):
        self.calls.append(("simulate", weather_station, construction_period, building_type))
        if self.error:
            raise self.error
        return self.response

    def run_custom_simulation(self, weather_station, params, building_type="single-family-house"):
        self.calls.append(("custom", weather_station, params, building_type))
        if self.error:
            raise self.error
        return self.response

    def run_batch(self, weather_station, jobs):
        self.calls.append(("batch", weather_station, jobs))
        if self.error:
            raise self.error
        return [
            BatchResultEntry(
                building_type=job.building_type,
                period_id=job.period_id,
                count=job.count,
                annual=self.response.annual,
                hourly=self.response.hourly,
            )
            for job in jobs
        ]

    def check_health(self):
        return self.error is None

    def get_cache_stats(self):
        return {"total_cached": 3, "entries": []}


@pytest.fixture
def annual_result():
    return make_annual()


@pytest.fixture
def hourly_data():
    return make_hourly()


@pytest.fixture
def fake_client():
    return FakeSimulationClient()


@pytest.fixture
def user():
    return AuthUser(id="11111111-aaaa-bbbb-cccc-000000000001", email="anna@example.se")


@pytest.fixture
def other_user():
    return AuthUser(id="22222222-aaaa-bbbb-cccc-000000000002", email="erik@example.se")


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
