from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationJob:
    """One archetype to simulate; `count` buildings share its result."""

    building_type: str
    period_id: str
    count: int


def build_batch_jobs(batch_periods: dict[str, dict[str, int]]) -> list[SimulationJob]:
    """Expand a batch allocation {building_type: {period_id: count}} into jobs.

    One job per (building type, period) pair with a positive count, in the
    iteration order of the mapping. Zero counts produce no job.
    """
    jobs = []
    for building_type, periods in batch_periods.items():
        for period_id, count in periods.items():
            if count > 0:
                jobs.append(SimulationJob(building_type, period_id, int(count)))
    return jobs


def building_type_counts(batch_periods: dict[str, dict[str, int]]) -> dict[str, int]:
    """Number of buildings allocated per building type, omitting empty types."""
    counts = {}
    for building_type, periods in batch_periods.items():
        total = sum(c for c in periods.values() if c > 0)
        if total > 0:
            counts[building_type] = total
    return counts


def total_buildings(jobs: list[SimulationJob]) -> int:
    return sum(job.count for job in jobs)
