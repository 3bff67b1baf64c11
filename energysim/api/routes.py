from fastapi import APIRouter, Depends, HTTPException

from energysim.core import catalogue
from energysim.services.simulation import SimulationClient
from energysim.tasks import monitor

router = APIRouter()


def get_simulation_client() -> SimulationClient:
    return SimulationClient()


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/catalogue/stations", tags=["catalogue"])
def stations():
    return {"counties": catalogue.SWEDEN_COUNTIES}


@router.get("/catalogue/construction-periods", tags=["catalogue"])
def construction_periods():
    return {"periods": catalogue.CONSTRUCTION_PERIODS}


@router.get("/catalogue/building-types", tags=["catalogue"])
def building_types():
    return {"building_types": catalogue.BUILDING_TYPES}


@router.get("/catalogue/archetypes/{building_type}/{period_id}", tags=["catalogue"])
def archetype(building_type: str, period_id: str):
    """Locked design parameters of a pre-configured archetype."""
    try:
        params = catalogue.archetype_parameters(building_type, period_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"No archetype for {building_type} {period_id}")
    return {"building_type": building_type, "period_id": period_id, "parameters": params}


@router.get("/service/status")
def service_status(client: SimulationClient = Depends(get_simulation_client)):
    """Simulation service health; the monitor's last probe while the monitor is running."""
    if monitor.scheduler.running and monitor.last_status is not None:
        return {**monitor.last_status, "source": "monitor"}
    return {**monitor.probe_simulation_service(client), "source": "probe"}
