import logging
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from energysim.core.config import MONITOR_INTERVAL_MINUTES
from energysim.services.simulation import SimulationClient, SimulationServiceError

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()

# Last observed state of the simulation service; None until the first probe
last_status: dict | None = None


def probe_simulation_service(client: SimulationClient | None = None) -> dict:
    """Check the simulation service and record its health and cache size."""
    global last_status
    client = client or SimulationClient()
    running = client.check_health()
    total_cached = None
    if running:
        try:
            total_cached = client.get_cache_stats()["total_cached"]
        except SimulationServiceError as e:
            logger.warning("Cache stats unavailable: %s", e)
    status = {
        "checked_at": datetime.now(timezone.utc).isoformat(),
        "running": running,
        "total_cached": total_cached,
    }
    if running:
        logger.info("Simulation service running, %s cached results", total_cached)
    else:
        logger.warning("Simulation service is not available")
    last_status = status
    return status


def schedule_jobs(interval_minutes: int = MONITOR_INTERVAL_MINUTES):
    scheduler.add_job(
        probe_simulation_service,
        IntervalTrigger(minutes=interval_minutes),
        id="simulation_service_probe",
        replace_existing=True,
        next_run_time=datetime.now(timezone.utc),
    )


def start(interval_minutes: int = MONITOR_INTERVAL_MINUTES) -> bool:
    """Start the monitor; a non-positive interval leaves it disabled."""
    if interval_minutes <= 0:
        return False
    schedule_jobs(interval_minutes)
    scheduler.start()
    return True


def stop():
    if scheduler.running:
        scheduler.shutdown(wait=False)
