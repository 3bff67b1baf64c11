import logging
import uuid
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from energysim.core.catalogue import SIMULATION_TYPES
from energysim.models.simulation import SimulationRecord
from energysim.services.auth import AuthUser

logger = logging.getLogger(__name__)


@dataclass
class StoreResult:
    """Result-or-error of a persistence call. `error` is user-facing."""

    data: Any = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class SimulationCreate(BaseModel):
    simulation_type: str
    building_type: str | None = None
    weather_station: str
    construction_period: str | None = None
    batch_config: dict[str, dict[str, int]] | None = None
    building_count: int | None = None
    total_heating: float
    total_cooling: float
    total_energy: float
    eui: float
    floor_area: float
    results_json: Any = None
    hourly_data: dict | None = None


def _parse_id(simulation_id) -> uuid.UUID | None:
    try:
        return simulation_id if isinstance(simulation_id, uuid.UUID) else uuid.UUID(str(simulation_id))
    except ValueError:
        return None


def save_simulation(db: DbSession, user: AuthUser | None, data: SimulationCreate) -> StoreResult:
    if user is None:
        return StoreResult(error="Not authenticated")
    if data.simulation_type not in SIMULATION_TYPES:
        return StoreResult(error=f"Unknown simulation type: {data.simulation_type}")

    record = SimulationRecord(
        user_id=user.id,
        simulation_type=data.simulation_type,
        building_type=data.building_type or None,
        weather_station=data.weather_station,
        construction_period=data.construction_period or None,
        batch_config=data.batch_config or None,
        building_count=data.building_count or 1,
        total_heating=data.total_heating,
        total_cooling=data.total_cooling,
        total_energy=data.total_energy,
        eui=data.eui,
        floor_area=data.floor_area,
        results_json=data.results_json,
        hourly_data=data.hourly_data or None,
    )
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error saving simulation for user %s", user.id)
        return StoreResult(error="Failed to save simulation")
    logger.info("Saved %s simulation %s for user %s", record.simulation_type, record.id, user.id)
    return StoreResult(data=record)


def list_simulations(db: DbSession, user: AuthUser | None, simulation_type: str | None = None) -> StoreResult:
    """The user's simulations, newest first, optionally filtered by type."""
    if user is None:
        return StoreResult(error="Not authenticated")
    try:
        query = db.query(SimulationRecord).filter(SimulationRecord.user_id == user.id)
        if simulation_type and simulation_type != "all":
            query = query.filter(SimulationRecord.simulation_type == simulation_type)
        records = query.order_by(SimulationRecord.created_at.desc()).all()
    except SQLAlchemyError:
        logger.exception("Error fetching simulations for user %s", user.id)
        return StoreResult(error="Failed to fetch simulations")
    return StoreResult(data=records)


def get_simulation(db: DbSession, user: AuthUser | None, simulation_id) -> StoreResult:
    if user is None:
        return StoreResult(error="Not authenticated")
    record_id = _parse_id(simulation_id)
    if record_id is None:
        return StoreResult(error="Simulation not found")
    try:
        record = (
            db.query(SimulationRecord)
            .filter(SimulationRecord.id == record_id, SimulationRecord.user_id == user.id)
            .one_or_none()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching simulation %s", simulation_id)
        return StoreResult(error="Failed to fetch simulation")
    if record is None:
        return StoreResult(error="Simulation not found")
    return StoreResult(data=record)


def delete_simulation(db: DbSession, user: AuthUser | None, simulation_id) -> StoreResult:
    """Delete one of the user's simulations; other users' rows are never touched."""
    if user is None:
        return StoreResult(error="Not authenticated")
    record_id = _parse_id(simulation_id)
    if record_id is None:
        return StoreResult(error="Simulation not found")
    try:
        deleted = (
            db.query(SimulationRecord)
            .filter(SimulationRecord.id == record_id, SimulationRecord.user_id == user.id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting simulation %s", simulation_id)
        return StoreResult(error="Failed to delete simulation")
    if not deleted:
        return StoreResult(error="Simulation not found")
    logger.info("Deleted simulation %s for user %s", simulation_id, user.id)
    return StoreResult(data=True)


SHORT_TYPE_LABELS = {"single-family-house": "SFH", "mid-rise-apartment": "MFD"}


def record_summary(record: SimulationRecord) -> str:
    """One-line label for the history list, e.g. '3 buildings (2 SFH, 1 MFD)'."""
    if record.simulation_type == "batch":
        parts = []
        for building_type, periods in (record.batch_config or {}).items():
            count = sum(periods.values())
            if count > 0:
                parts.append(f"{count} {SHORT_TYPE_LABELS.get(building_type, building_type)}")
        return f"{record.building_count} buildings ({', '.join(parts)})"
    label = (record.building_type or "").replace("-", " ").title()
    if record.construction_period:
        return f"{label}, {record.construction_period}"
    return f"{label}, custom parameters"
