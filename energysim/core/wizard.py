"""
Four-step simulation wizard.

1. simulation type and building type(s)
2. weather station and construction period (or per-type period allocation)
3. design parameters (locked, editable or summary depending on the mode)
4. results

Derived results depend on the inputs they were computed from. INVALIDATES
lists, for every input field, which derived fields become stale when it
changes; `WizardState.update` is the only place inputs are written.
"""
from dataclasses import dataclass, field, fields

from energysim.core import catalogue
from energysim.services.simulation import BatchResultEntry, CustomParameters, SimulationResponse

FIRST_STEP = 1
LAST_STEP = 4
MIN_BATCH_BUILDINGS = 2

STEP_LABELS = {1: "Building Typology", 2: "Building Info", 3: "Design Parameters", 4: "Results"}

RESULT_FIELDS = ("custom_result", "preconfig_result", "batch_results")
CUSTOM_PARAMETER_FIELDS = (
    "wall_u", "attic_u", "ground_u", "ach", "window_type", "wwr",
    "ventilation_type", "heated_floor_area", "number_of_floors",
)

INVALIDATES = {
    "simulation_type": RESULT_FIELDS,
    "building_type": ("custom_result", "preconfig_result"),
    "weather_station": RESULT_FIELDS,
    "construction_period": ("preconfig_result",),
    "batch_counts": ("batch_results",),
    "batch_periods": ("batch_results",),
    **{name: ("custom_result",) for name in CUSTOM_PARAMETER_FIELDS},
}
INPUT_FIELDS = tuple(INVALIDATES)


class WizardError(Exception):
    """Invalid wizard input, or an attempt to move past an incomplete step."""


def _check_range(name, value, low, high):
    if not isinstance(value, (int, float)) or not low <= value <= high:
        raise WizardError(f"{name} must be between {low} and {high}")


def _check_counts(name, counts):
    if not isinstance(counts, dict):
        raise WizardError(f"{name} must be a mapping")
    for key, count in counts.items():
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise WizardError(f"{name}[{key}] must be a non-negative integer")


def validate_input(name: str, value) -> None:
    """Raise WizardError if `value` is not acceptable for input field `name`."""
    if name not in INVALIDATES:
        raise WizardError(f"Unknown wizard field: {name}")
    if name == "simulation_type" and value not in catalogue.SIMULATION_TYPES:
        raise WizardError(f"Unknown simulation type: {value}")
    if name == "building_type" and value not in catalogue.AVAILABLE_BUILDING_TYPES:
        raise WizardError(f"Building type not available: {value}")
    if name == "weather_station" and not catalogue.is_known_station(value):
        raise WizardError(f"Unknown weather station: {value}")
    if name == "construction_period" and value not in catalogue.PERIOD_IDS:
        raise WizardError(f"Unknown construction period: {value}")
    if name in catalogue.CUSTOM_PARAMETER_BOUNDS:
        _check_range(name, value, *catalogue.CUSTOM_PARAMETER_BOUNDS[name])
    if name == "window_type" and value not in catalogue.WINDOW_U_VALUES:
        raise WizardError(f"Unknown window type: {value}")
    if name == "ventilation_type" and value not in catalogue.VENTILATION_TYPES:
        raise WizardError(f"Unknown ventilation type: {value}")
    if name == "wwr" and value not in catalogue.WWR_OPTIONS:
        raise WizardError(f"wwr must be one of {', '.join(map(str, catalogue.WWR_OPTIONS))}")
    if name == "heated_floor_area" and (not isinstance(value, (int, float)) or value <= 0):
        raise WizardError("heated_floor_area must be positive")
    if name == "number_of_floors" and (not isinstance(value, int) or value < 1):
        raise WizardError("number_of_floors must be at least 1")
    if name == "batch_counts":
        _check_counts(name, value)
        for building_type in value:
            if building_type not in catalogue.AVAILABLE_BUILDING_TYPES:
                raise WizardError(f"Building type not available: {building_type}")
    if name == "batch_periods":
        if not isinstance(value, dict):
            raise WizardError("batch_periods must be a mapping")
        for building_type, periods in value.items():
            if building_type not in catalogue.AVAILABLE_BUILDING_TYPES:
                raise WizardError(f"Building type not available: {building_type}")
            _check_counts(f"batch_periods[{building_type}]", periods)
            for period_id in periods:
                if period_id not in catalogue.PERIOD_IDS:
                    raise WizardError(f"Unknown construction period: {period_id}")


@dataclass
class WizardState:
    current_step: int = FIRST_STEP
    simulation_type: str = "pre-configured"
    building_type: str = "single-family-house"
    weather_station: str = "lund"
    construction_period: str = "1986-1995"

    # real-time envelope parameters
    wall_u: float = 0.3
    attic_u: float = 0.2
    ground_u: float = 0.2
    ach: float = 0.5
    window_type: str = "double"
    wwr: int = 15
    ventilation_type: str = "mechanical-exhaust-hr"
    heated_floor_area: float = 125
    number_of_floors: int = 2

    # batch: {building_type: count} and {building_type: {period_id: count}}
    batch_counts: dict = field(default_factory=dict)
    batch_periods: dict = field(default_factory=dict)

    custom_result: SimulationResponse | None = None
    preconfig_result: SimulationResponse | None = None
    batch_results: list[BatchResultEntry] | None = None
    error: str | None = None
    history_error: str | None = None

    # bumped on every input change; a run started at an older revision is stale
    revision: int = 0

    @property
    def is_batch(self) -> bool:
        return self.simulation_type == "batch"

    def update(self, **changes) -> list[str]:
        """Apply input changes and clear the derived state they invalidate.

        All values are validated before any is applied. Returns the names of
        the derived fields that were cleared.
        """
        for name, value in changes.items():
            validate_input(name, value)

        cleared = set()
        for name, value in changes.items():
            if getattr(self, name) == value:
                continue
            setattr(self, name, value)
            self._apply_linked_inputs(name, value)
            for derived in INVALIDATES[name]:
                if getattr(self, derived) is not None:
                    cleared.add(derived)
                setattr(self, derived, None)
            self.error = None
            self.revision += 1
        return sorted(cleared)

    def _apply_linked_inputs(self, name, value):
        if name == "simulation_type" and value != "batch":
            self.batch_counts = {}
            self.batch_periods = {}
        elif name == "building_type":
            for key, default in catalogue.default_custom_parameters(value).items():
                setattr(self, key, default)
        elif name == "batch_counts":
            # keep allocations only for types that still have buildings
            self.batch_periods = {
                building_type: periods
                for building_type, periods in self.batch_periods.items()
                if value.get(building_type, 0) > 0
            }

    def batch_total(self) -> int:
        return sum(self.batch_counts.values())

    def batch_periods_valid(self) -> bool:
        """Every building type's period allocation sums to its batch count.

        Types allocated in `batch_periods` without a count must allocate nothing.
        """
        for building_type in set(self.batch_counts) | set(self.batch_periods):
            allocated = sum(self.batch_periods.get(building_type, {}).values())
            if allocated != self.batch_counts.get(building_type, 0):
                return False
        return True

    def blocking_reason(self) -> str | None:
        """Why the current step cannot be left, or None if it can."""
        if self.current_step == 1:
            if self.is_batch:
                if self.batch_total() < MIN_BATCH_BUILDINGS:
                    return f"Select at least {MIN_BATCH_BUILDINGS} buildings for a batch simulation"
            elif not (self.simulation_type and self.building_type):
                return "Select a simulation type and a building type"
        elif self.current_step == 2:
            if not self.weather_station:
                return "Select a weather station"
            if self.is_batch and not self.batch_periods_valid():
                return "Allocate every building to a construction period"
            if self.simulation_type == "pre-configured" and not self.construction_period:
                return "Select a construction period"
        elif self.current_step >= LAST_STEP:
            return "Already at the last step"
        return None

    def can_advance(self) -> bool:
        return self.blocking_reason() is None

    def advance(self) -> bool:
        """Move to the next step. Returns True when the results step was reached
        and a simulation run is due."""
        reason = self.blocking_reason()
        if reason:
            raise WizardError(reason)
        self.current_step += 1
        return self.current_step == LAST_STEP

    def retreat(self) -> None:
        if self.current_step > FIRST_STEP:
            self.current_step -= 1

    def custom_parameters(self) -> CustomParameters:
        return CustomParameters(**{name: getattr(self, name) for name in CUSTOM_PARAMETER_FIELDS})

    def has_results(self) -> bool:
        if self.simulation_type == "pre-configured":
            return self.preconfig_result is not None
        if self.simulation_type == "real-time":
            return self.custom_result is not None
        return bool(self.batch_results)

    def to_dict(self) -> dict:
        inputs = {f.name: getattr(self, f.name) for f in fields(self) if f.name in INPUT_FIELDS}
        return {
            "current_step": self.current_step,
            "step_label": STEP_LABELS[self.current_step],
            **inputs,
            "batch_total": self.batch_total(),
            "can_advance": self.can_advance(),
            "blocking_reason": self.blocking_reason(),
            "has_results": self.has_results(),
            "error": self.error,
            "history_error": self.history_error,
            "revision": self.revision,
        }
