"""Tests for running the wizard's simulation and saving it to history."""
from conftest import FakeSimulationClient, make_annual, make_hourly
from energysim.core.wizard import WizardState
from energysim.services.history import list_simulations
from energysim.services.runner import run_wizard
from energysim.services.simulation import SimulationResponse, SimulationServiceError


def _at_results(**inputs) -> WizardState:
    state = WizardState()
    state.update(**inputs)
    state.current_step = 4
    return state


class InputChangingClient(FakeSimulationClient):
    """Changes a wizard input while the request is in flight."""

    def __init__(self, state, **changes):
        super().__init__()
        self.state = state
        self.changes = changes

    def run_simulation(self, *args, **kwargs):
        self.state.update(**self.changes)
        return super().run_simulation(*args, **kwargs)


class TestPreconfiguredRun:
    """Test pre-configured runs."""

    def test_result_is_stored_and_saved(self, fake_client, db_session, user):
        state = _at_results(weather_station="kiruna")

        assert run_wizard(state, fake_client, db_session, user) is True

        assert fake_client.calls == [("simulate", "kiruna", "1986-1995", "single-family-house")]
        assert state.preconfig_result is fake_client.response
        records = list_simulations(db_session, user).data
        assert len(records) == 1
        assert records[0].simulation_type == "pre-configured"
        assert records[0].construction_period == "1986-1995"
        assert records[0].total_energy == 9000.9
        assert len(records[0].hourly_data["heating_power_kw"]) == 8760

    def test_empty_result_is_shown_but_not_saved(self, db_session, user):
        client = FakeSimulationClient(SimulationResponse(annual=make_annual(total=0.0)))
        state = _at_results()

        assert run_wizard(state, client, db_session, user) is True

        assert state.preconfig_result is not None
        assert list_simulations(db_session, user).data == []

    def test_missing_floor_area_defaults(self, db_session, user):
        client = FakeSimulationClient(SimulationResponse(annual=make_annual(floor_area=0)))
        run_wizard(_at_results(), client, db_session, user)
        assert list_simulations(db_session, user).data[0].floor_area == 125

    def test_failure_sets_error(self, db_session, user):
        client = FakeSimulationClient(error=SimulationServiceError("Weather file not found"))
        state = _at_results()

        assert run_wizard(state, client, db_session, user) is False

        assert state.error == "Weather file not found"
        assert state.preconfig_result is None
        assert list_simulations(db_session, user).data == []

    def test_stale_result_is_discarded(self, db_session, user):
        """A result computed for inputs that changed mid-run is dropped."""
        state = _at_results()
        client = InputChangingClient(state, construction_period="before-1961")

        assert run_wizard(state, client, db_session, user) is False

        assert state.preconfig_result is None
        assert state.error is None
        assert list_simulations(db_session, user).data == []

    def test_save_failure_keeps_result(self, fake_client, db_session):
        state = _at_results()

        assert run_wizard(state, fake_client, db_session, None) is True

        assert state.preconfig_result is not None
        assert state.history_error == "Not authenticated"


class TestRealTimeRun:
    def test_custom_parameters_are_sent(self, fake_client, db_session, user):
        state = _at_results(simulation_type="real-time", wall_u=0.45, heated_floor_area=180)

        run_wizard(state, fake_client, db_session, user)

        kind, station, params, building_type = fake_client.calls[0]
        assert kind == "custom"
        assert params.wall_u == 0.45
        assert params.heated_floor_area == 180
        assert state.custom_result is not None
        record = list_simulations(db_session, user).data[0]
        assert record.simulation_type == "real-time"
        assert record.construction_period is None


class TestBatchRun:
    def test_batch_is_aggregated_and_saved(self, db_session, user):
        client = FakeSimulationClient(SimulationResponse(annual=make_annual(total=1000, floor_area=100), hourly=make_hourly()))
        periods = {"single-family-house": {"1986-1995": 2}, "mid-rise-apartment": {"1996-2005": 1}}
        state = _at_results(
            simulation_type="batch",
            batch_counts={"single-family-house": 2, "mid-rise-apartment": 1},
            batch_periods=periods,
        )

        assert run_wizard(state, client, db_session, user) is True

        kind, station, jobs = client.calls[0]
        assert [(j.building_type, j.period_id, j.count) for j in jobs] == [
            ("single-family-house", "1986-1995", 2),
            ("mid-rise-apartment", "1996-2005", 1),
        ]
        assert len(state.batch_results) == 2
        record = list_simulations(db_session, user).data[0]
        assert record.simulation_type == "batch"
        assert record.building_count == 3
        assert record.total_energy == 3000
        assert record.eui == 10.0
        assert record.batch_config == periods
        assert record.hourly_data is None
        assert "hourly" not in record.results_json[0]

    def test_batch_failure_stores_nothing(self, db_session, user):
        client = FakeSimulationClient(error=SimulationServiceError("Simulation failed for mid-rise-apartment 1996-2005"))
        state = _at_results(
            simulation_type="batch",
            batch_counts={"single-family-house": 2},
            batch_periods={"single-family-house": {"1986-1995": 2}},
        )

        assert run_wizard(state, client, db_session, user) is False

        assert state.batch_results is None
        assert state.error.startswith("Simulation failed for")
