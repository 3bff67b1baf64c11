import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

import requests
from pydantic import BaseModel, ValidationError, field_validator

from energysim.core.config import (
    BATCH_MAX_WORKERS,
    SIMULATION_API_STATUS_TIMEOUT,
    SIMULATION_API_TIMEOUT,
    SIMULATION_API_URL,
)
from energysim.core.jobs import SimulationJob

logger = logging.getLogger(__name__)

HOURS_PER_YEAR = 8760


class SimulationServiceError(Exception):
    """The simulation service rejected a request or could not be reached.

    The message is shown to the user as-is.
    """


class AnnualResult(BaseModel):
    heating: float = 0.0
    cooling: float = 0.0
    dhw: float = 0.0
    lighting: float = 0.0
    equipment: float = 0.0
    fans: float = 0.0
    total: float = 0.0
    floor_area: float = 0.0
    eui: float = 0.0
    peak_heating_kw: float = 0.0
    peak_cooling_kw: float = 0.0
    peak_power_kw: float = 0.0
    avg_power_kw: float = 0.0


class HourlyPowerData(BaseModel):
    heating_power_kw: list[float] | None = None
    cooling_power_kw: list[float] | None = None
    total_power_kw: list[float] | None = None

    @field_validator("heating_power_kw", "cooling_power_kw", "total_power_kw")
    @classmethod
    def _full_year(cls, values):
        if values is not None and len(values) != HOURS_PER_YEAR:
            raise ValueError(f"expected {HOURS_PER_YEAR} hourly values, got {len(values)}")
        return values

    @property
    def has_heating_and_cooling(self) -> bool:
        return self.heating_power_kw is not None and self.cooling_power_kw is not None


class SimulationResponse(BaseModel):
    annual: AnnualResult
    hourly: HourlyPowerData | None = None
    cached: bool = False


class CustomParameters(BaseModel):
    """Envelope and geometry inputs of a real-time (custom) run."""

    wall_u: float = 0.3
    attic_u: float = 0.2
    ground_u: float = 0.2
    ach: float = 0.5
    window_type: str = "double"
    wwr: int = 15
    ventilation_type: str = "mechanical-exhaust-hr"
    heated_floor_area: float = 125
    number_of_floors: int = 2

    def to_payload(self) -> dict:
        return {
            "wallU": self.wall_u,
            "atticU": self.attic_u,
            "groundU": self.ground_u,
            "ach": self.ach,
            "windowType": self.window_type,
            "wwr": self.wwr,
            "ventilationType": self.ventilation_type,
            "heatedFloorArea": self.heated_floor_area,
            "numberOfFloors": self.number_of_floors,
        }


class BatchResultEntry(BaseModel):
    """A batch job joined with the result of its archetype simulation."""

    building_type: str
    period_id: str
    count: int
    annual: AnnualResult
    hourly: HourlyPowerData | None = None


def parse_response(data: dict) -> SimulationResponse:
    """Parse a /simulate body; older service versions return the annual result unwrapped."""
    if not isinstance(data, dict):
        raise SimulationServiceError("Simulation service returned an unexpected response")
    try:
        return SimulationResponse(
            annual=data.get("annual") or data,
            hourly=data.get("hourly"),
            cached=bool(data.get("cached", False)),
        )
    except ValidationError as e:
        raise SimulationServiceError(f"Simulation service returned invalid results: {e.errors()[0]['msg']}") from e


class SimulationClient:
    """HTTP client for the EnergyPlus simulation service."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None,
                 max_workers: int | None = None, status_timeout: float | None = None):
        self.base_url = (base_url or SIMULATION_API_URL).rstrip("/")
        self.timeout = timeout or SIMULATION_API_TIMEOUT
        self.max_workers = max_workers or BATCH_MAX_WORKERS
        # health and cache probes must not wait as long as a simulation run
        self.status_timeout = status_timeout or SIMULATION_API_STATUS_TIMEOUT

    def _post(self, path: str, body: dict) -> requests.Response:
        logger.info("POST %s%s", self.base_url, path)
        return requests.post(f"{self.base_url}{path}", json=body, timeout=self.timeout)

    def run_simulation(self, weather_station: str, construction_period: str,
                       building_type: str = "single-family-house") -> SimulationResponse:
        """Simulate a pre-configured archetype for one weather station."""
        body = {
            "weatherStation": weather_station,
            "constructionPeriod": construction_period,
            "buildingType": building_type,
        }
        try:
            r = self._post("/simulate", body)
        except requests.RequestException as e:
            logger.error("Simulation request failed: %s", e)
            raise SimulationServiceError(f"Simulation failed: {e}") from e
        if not r.ok:
            detail = _error_detail(r)
            logger.error("Simulation rejected (%s): %s", r.status_code, detail)
            raise SimulationServiceError(detail or "Simulation failed")
        return parse_response(_json_body(r))

    def run_custom_simulation(self, weather_station: str, params: CustomParameters,
                              building_type: str = "single-family-house") -> SimulationResponse:
        body = {"weatherStation": weather_station, **params.to_payload(), "buildingType": building_type}
        try:
            r = self._post("/simulate/custom", body)
        except requests.RequestException as e:
            logger.error("Custom simulation request failed: %s", e)
            raise SimulationServiceError(f"Simulation failed: {e}") from e
        if not r.ok:
            logger.error("Custom simulation rejected (%s): %s", r.status_code, r.reason)
            raise SimulationServiceError(f"Simulation failed: {r.reason}")
        return parse_response(_json_body(r))

    def _run_job(self, weather_station: str, job: SimulationJob) -> BatchResultEntry:
        try:
            result = self.run_simulation(weather_station, job.period_id, job.building_type)
        except SimulationServiceError as e:
            raise SimulationServiceError(
                f"Simulation failed for {job.building_type} {job.period_id}"
            ) from e
        return BatchResultEntry(
            building_type=job.building_type,
            period_id=job.period_id,
            count=job.count,
            annual=result.annual,
            hourly=result.hourly,
        )

    def run_batch(self, weather_station: str, jobs: list[SimulationJob]) -> list[BatchResultEntry]:
        """Run every job concurrently and return the entries in job order.

        All or nothing: the first failed job raises and no entries are returned.
        Requests already in flight are not cancelled.
        """
        if not jobs:
            return []
        logger.info("Starting batch of %d simulations for %s", len(jobs), weather_station)
        entries: list[BatchResultEntry | None] = [None] * len(jobs)
        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(jobs)))
        try:
            futures = {executor.submit(self._run_job, weather_station, job): i for i, job in enumerate(jobs)}
            for future in as_completed(futures):
                entries[futures[future]] = future.result()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        logger.info("Batch of %d simulations finished", len(jobs))
        return entries

    def check_health(self) -> bool:
        """True when the service is up and reports a working EnergyPlus install."""
        try:
            r = requests.get(f"{self.base_url}/", timeout=self.status_timeout)
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Simulation service health check failed: %s", e)
            return False
        return isinstance(data, dict) and data.get("status") == "running" and data.get("energyplus") is True

    def get_cache_stats(self) -> dict:
        """Return {total_cached, entries: [{station, period, type}]} from the service."""
        try:
            r = requests.get(f"{self.base_url}/cache/stats", timeout=self.status_timeout)
        except requests.RequestException as e:
            raise SimulationServiceError(f"Cache stats unavailable: {e}") from e
        if not r.ok:
            raise SimulationServiceError(_error_detail(r) or "Cache stats unavailable")
        data = _json_body(r)
        if not isinstance(data, dict):
            raise SimulationServiceError("Simulation service returned an unexpected response")
        return {
            "total_cached": int(data.get("total_cached", 0)),
            "entries": list(data.get("entries", [])),
        }


def _error_detail(response: requests.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return None


def _json_body(response: requests.Response):
    try:
        return response.json()
    except ValueError as e:
        logger.error("Simulation service returned a non-JSON body (%s)", response.status_code)
        raise SimulationServiceError("Simulation service returned an unexpected response") from e
