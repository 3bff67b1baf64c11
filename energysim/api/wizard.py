import threading

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session as DbSession

from energysim.api.auth import require_user
from energysim.api.routes import get_simulation_client
from energysim.core.aggregator import (
    aggregate_batch,
    combine_hourly,
    daily_peaks,
    monthly_by_building_type,
    monthly_totals,
    single_run_monthly,
)
from energysim.core.database import get_db
from energysim.core.export import batch_csv, batch_filename, single_run_csv, single_run_filename
from energysim.core.jobs import building_type_counts
from energysim.core.wizard import WizardError, WizardState
from energysim.services.auth import AuthUser
from energysim.services.runner import run_wizard
from energysim.services.simulation import SimulationClient

router = APIRouter(prefix="/wizard", tags=["wizard"])

# One wizard per signed-in user, held in memory
WIZARDS: dict[str, WizardState] = {}
_lock = threading.Lock()


def get_wizard(user_id: str) -> WizardState:
    with _lock:
        return WIZARDS.setdefault(user_id, WizardState())


def discard_wizard(user_id: str) -> None:
    with _lock:
        WIZARDS.pop(user_id, None)


class WizardUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    simulation_type: str | None = None
    building_type: str | None = None
    weather_station: str | None = None
    construction_period: str | None = None
    wall_u: float | None = None
    attic_u: float | None = None
    ground_u: float | None = None
    ach: float | None = None
    window_type: str | None = None
    wwr: int | None = None
    ventilation_type: str | None = None
    heated_floor_area: float | None = None
    number_of_floors: int | None = None
    batch_counts: dict[str, int] | None = None
    batch_periods: dict[str, dict[str, int]] | None = None


def _single_results(result) -> dict:
    payload = {
        "annual": result.annual.model_dump(),
        "hourly": result.hourly.model_dump() if result.hourly else None,
        "cached": result.cached,
        "monthly": single_run_monthly(result.hourly),
    }
    if result.hourly is not None and result.hourly.has_heating_and_cooling:
        payload["daily_peaks"] = {
            "heating": daily_peaks(result.hourly.heating_power_kw).tolist(),
            "cooling": daily_peaks(result.hourly.cooling_power_kw).tolist(),
        }
    return payload


def _batch_results(entries) -> dict:
    hourly = combine_hourly(entries)
    return {
        "entries": [entry.model_dump(exclude={"hourly"}) for entry in entries],
        "building_type_counts": building_type_counts(_periods_of(entries)),
        "totals": aggregate_batch(entries).to_dict(),
        "hourly": {name: series.tolist() for name, series in hourly.items()},
        "monthly": {
            "heating": monthly_totals(hourly["heating"]).tolist(),
            "cooling": monthly_totals(hourly["cooling"]).tolist(),
        },
        "monthly_by_building_type": monthly_by_building_type(entries).to_dict(orient="records"),
        "daily_peaks": {name: daily_peaks(series).tolist() for name, series in hourly.items()},
    }


def _periods_of(entries) -> dict:
    periods: dict[str, dict[str, int]] = {}
    for entry in entries:
        periods.setdefault(entry.building_type, {})[entry.period_id] = entry.count
    return periods


def results_payload(state: WizardState) -> dict:
    if state.simulation_type == "pre-configured":
        return _single_results(state.preconfig_result)
    if state.simulation_type == "real-time":
        return _single_results(state.custom_result)
    return _batch_results(state.batch_results)


@router.get("")
def read_wizard(user: AuthUser = Depends(require_user)):
    return get_wizard(user.id).to_dict()


@router.patch("")
def update_wizard(req: WizardUpdate, user: AuthUser = Depends(require_user)):
    state = get_wizard(user.id)
    try:
        cleared = state.update(**req.model_dump(exclude_unset=True))
    except WizardError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {**state.to_dict(), "cleared": cleared}


@router.post("/next")
def next_step(
    user: AuthUser = Depends(require_user),
    client: SimulationClient = Depends(get_simulation_client),
    db: DbSession = Depends(get_db),
):
    """Advance one step; reaching the results step runs the simulation."""
    state = get_wizard(user.id)
    try:
        run_due = state.advance()
    except WizardError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if run_due and not run_wizard(state, client, db, user) and state.error:
        raise HTTPException(status_code=502, detail=state.error)
    return state.to_dict()


@router.post("/back")
def previous_step(user: AuthUser = Depends(require_user)):
    state = get_wizard(user.id)
    state.retreat()
    return state.to_dict()


@router.post("/reset")
def reset_wizard(user: AuthUser = Depends(require_user)):
    with _lock:
        WIZARDS[user.id] = WizardState()
        return WIZARDS[user.id].to_dict()


@router.get("/results")
def read_results(user: AuthUser = Depends(require_user)):
    state = get_wizard(user.id)
    if not state.has_results():
        raise HTTPException(status_code=404, detail="No results available yet. Run the simulation first.")
    return results_payload(state)


@router.get("/export")
def export_results(user: AuthUser = Depends(require_user)):
    """Download the current results as CSV."""
    state = get_wizard(user.id)
    if not state.has_results():
        raise HTTPException(status_code=404, detail="No results available yet. Run the simulation first.")

    if state.is_batch:
        content = batch_csv(state.batch_results, state.weather_station)
        filename = batch_filename(state.weather_station)
    else:
        result = state.preconfig_result if state.simulation_type == "pre-configured" else state.custom_result
        content = single_run_csv(
            result.annual,
            result.hourly,
            simulation_type=state.simulation_type,
            building_type=state.building_type,
            weather_station=state.weather_station,
            construction_period=state.construction_period,
        )
        filename = single_run_filename(state.weather_station, state.simulation_type, state.construction_period)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
