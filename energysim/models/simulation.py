import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Index, Integer, String, Uuid

from energysim.models.base import Base


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SimulationRecord(Base):
    """Snapshot of one completed run; immutable apart from deletion."""

    __tablename__ = "simulations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=_utcnow)

    simulation_type = Column(String, nullable=False)  # pre-configured | real-time | batch
    building_type = Column(String, nullable=True)
    weather_station = Column(String, nullable=False)
    construction_period = Column(String, nullable=True)
    batch_config = Column(JSON, nullable=True)
    building_count = Column(Integer, nullable=False, default=1)

    total_heating = Column(Float, nullable=False)
    total_cooling = Column(Float, nullable=False)
    total_energy = Column(Float, nullable=False)
    eui = Column(Float, nullable=False)
    floor_area = Column(Float, nullable=False)

    results_json = Column(JSON, nullable=True)
    hourly_data = Column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_simulations_user_created", "user_id", "created_at"),
    )

    def to_dict(self, include_hourly: bool = True) -> dict:
        data = {
            "id": str(self.id),
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "simulation_type": self.simulation_type,
            "building_type": self.building_type,
            "weather_station": self.weather_station,
            "construction_period": self.construction_period,
            "batch_config": self.batch_config,
            "building_count": self.building_count,
            "total_heating": self.total_heating,
            "total_cooling": self.total_cooling,
            "total_energy": self.total_energy,
            "eui": self.eui,
            "floor_area": self.floor_area,
            "results_json": self.results_json,
        }
        if include_hourly:
            data["hourly_data"] = self.hourly_data
        return data
