import logging

from sqlalchemy.orm import Session as DbSession

from energysim.core.aggregator import aggregate_batch
from energysim.core.jobs import build_batch_jobs
from energysim.core.wizard import WizardState
from energysim.services.auth import AuthUser
from energysim.services.history import SimulationCreate, save_simulation
from energysim.services.simulation import SimulationClient, SimulationServiceError

logger = logging.getLogger(__name__)

DEFAULT_FLOOR_AREA = 125


def run_wizard(state: WizardState, client: SimulationClient, db: DbSession, user: AuthUser | None) -> bool:
    """Run the simulation for a wizard that has reached the results step.

    Stores the result on the state and saves it to the user's history. On
    failure a single message is left in `state.error`. Returns True when
    results were stored.
    """
    started_at = state.revision
    state.error = None
    state.history_error = None
    mode = state.simulation_type

    try:
        if mode == "pre-configured":
            outcome = client.run_simulation(state.weather_station, state.construction_period, state.building_type)
        elif mode == "real-time":
            outcome = client.run_custom_simulation(
                state.weather_station, state.custom_parameters(), state.building_type
            )
        else:
            outcome = client.run_batch(state.weather_station, build_batch_jobs(state.batch_periods))
    except SimulationServiceError as e:
        logger.error("%s simulation failed: %s", mode, e)
        if state.revision == started_at:
            state.error = str(e)
        return False

    if state.revision != started_at:
        logger.info("Discarding %s result: wizard inputs changed during the run", mode)
        return False

    if mode == "pre-configured":
        state.preconfig_result = outcome
        record = _single_run_record(state, outcome, default_area=DEFAULT_FLOOR_AREA)
        # empty results are shown but not saved
        if outcome.annual.total <= 0:
            record = None
    elif mode == "real-time":
        state.custom_result = outcome
        record = _single_run_record(state, outcome, default_area=state.heated_floor_area)
    else:
        state.batch_results = outcome
        record = _batch_record(state, outcome)

    if record is not None:
        saved = save_simulation(db, user, record)
        if not saved.success:
            logger.warning("Simulation result not saved to history: %s", saved.error)
            state.history_error = saved.error
    return True


def _single_run_record(state: WizardState, outcome, default_area) -> SimulationCreate:
    annual = outcome.annual
    return SimulationCreate(
        simulation_type=state.simulation_type,
        building_type=state.building_type,
        weather_station=state.weather_station,
        construction_period=state.construction_period if state.simulation_type == "pre-configured" else None,
        total_heating=annual.heating,
        total_cooling=annual.cooling,
        total_energy=annual.total,
        eui=annual.eui,
        floor_area=annual.floor_area or default_area,
        results_json=annual.model_dump(),
        hourly_data=outcome.hourly.model_dump() if outcome.hourly else None,
    )


def _batch_record(state: WizardState, entries) -> SimulationCreate:
    totals = aggregate_batch(entries)
    return SimulationCreate(
        simulation_type="batch",
        weather_station=state.weather_station,
        batch_config=state.batch_periods,
        building_count=totals.building_count,
        total_heating=totals.heating,
        total_cooling=totals.cooling,
        total_energy=totals.total,
        eui=totals.weighted_eui,
        floor_area=totals.floor_area,
        # hourly series are left out of the batch snapshot
        results_json=[entry.model_dump(exclude={"hourly"}) for entry in entries],
    )
