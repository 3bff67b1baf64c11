"""
Batch result aggregation.

Each batch entry is one simulated archetype standing in for `count` identical
buildings, so every annual figure and hourly value is scaled by its count
before it is summed across the batch.
"""
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

from energysim.core.catalogue import BUILDING_TYPE_ORDER
from energysim.services.simulation import HOURS_PER_YEAR, BatchResultEntry, HourlyPowerData

MONTH_DAYS = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Annual fields summed as count × value
WEIGHTED_FIELDS = [
    "heating", "cooling", "dhw", "lighting", "equipment", "fans", "total",
    "floor_area", "peak_heating_kw", "peak_cooling_kw", "peak_power_kw",
]


@dataclass
class BatchTotals:
    building_count: int = 0
    heating: float = 0.0
    cooling: float = 0.0
    dhw: float = 0.0
    lighting: float = 0.0
    equipment: float = 0.0
    fans: float = 0.0
    total: float = 0.0
    floor_area: float = 0.0
    peak_heating_kw: float = 0.0
    peak_cooling_kw: float = 0.0
    peak_power_kw: float = 0.0
    weighted_eui: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


def month_hour_ranges() -> list[tuple[int, int]]:
    """Contiguous (start, stop) hour ranges of each month of a non-leap year."""
    ranges = []
    offset = 0
    for days in MONTH_DAYS:
        ranges.append((offset, offset + days * 24))
        offset += days * 24
    return ranges


def aggregate_batch(entries: list[BatchResultEntry]) -> BatchTotals:
    """Count-weighted annual totals and the floor-area weighted EUI.

    `fans` is summed and reported separately; it is not added into `total`,
    which is taken from the service as-is.
    """
    totals = BatchTotals()
    for entry in entries:
        totals.building_count += entry.count
        for field in WEIGHTED_FIELDS:
            setattr(totals, field, getattr(totals, field) + getattr(entry.annual, field) * entry.count)
    totals.weighted_eui = totals.total / totals.floor_area if totals.floor_area > 0 else 0.0
    return totals


def _series(values: list[float] | None) -> np.ndarray:
    arr = np.zeros(HOURS_PER_YEAR)
    if values is not None:
        n = min(HOURS_PER_YEAR, len(values))
        arr[:n] = np.asarray(values[:n], dtype=float)
    return arr


def combine_hourly(entries: list[BatchResultEntry]) -> dict[str, np.ndarray]:
    """Combined 8760-hour heating, cooling and total power of the whole batch.

    Entries without hourly data contribute zero. The combined total is the
    elementwise sum of combined heating and cooling.
    """
    heating = np.zeros(HOURS_PER_YEAR)
    cooling = np.zeros(HOURS_PER_YEAR)
    for entry in entries:
        if entry.hourly is None:
            continue
        heating += _series(entry.hourly.heating_power_kw) * entry.count
        cooling += _series(entry.hourly.cooling_power_kw) * entry.count
    return {"heating": heating, "cooling": cooling, "total": heating + cooling}


def monthly_totals(series) -> np.ndarray:
    """Sum an hourly power series (kW) into 12 monthly energies (kWh)."""
    arr = _series(list(series))
    return np.array([arr[start:stop].sum() for start, stop in month_hour_ranges()])


def daily_peaks(series) -> np.ndarray:
    """Daily maximum of an hourly series, 365 values, floored at zero."""
    arr = _series(list(series)).reshape(365, 24)
    return np.maximum(arr.max(axis=1), 0.0)


def single_run_monthly(hourly: HourlyPowerData | None) -> list[dict]:
    """Rounded monthly heating/cooling of one run; empty without hourly data."""
    if hourly is None or not hourly.has_heating_and_cooling:
        return []
    heating = monthly_totals(hourly.heating_power_kw)
    cooling = monthly_totals(hourly.cooling_power_kw)
    return [
        {"month": MONTH_NAMES[m], "heating": round_half_up(heating[m]), "cooling": round_half_up(cooling[m])}
        for m in range(12)
    ]


def monthly_by_building_type(entries: list[BatchResultEntry]) -> pd.DataFrame:
    """Count-weighted monthly heating and cooling per building type.

    Returns a DataFrame with columns month, building_type, heating, cooling,
    one row per (building type, month). Entries lacking heating or cooling
    hourly data are skipped.
    """
    rows = []
    for entry in entries:
        if entry.hourly is None or not entry.hourly.has_heating_and_cooling:
            continue
        heating = monthly_totals(entry.hourly.heating_power_kw) * entry.count
        cooling = monthly_totals(entry.hourly.cooling_power_kw) * entry.count
        for m in range(12):
            rows.append({
                "month": m,
                "building_type": entry.building_type,
                "heating": heating[m],
                "cooling": cooling[m],
            })
    if not rows:
        return pd.DataFrame(columns=["month", "building_type", "heating", "cooling"])

    df = pd.DataFrame(rows)
    df = df.groupby(["building_type", "month"], as_index=False)[["heating", "cooling"]].sum()
    df["order"] = df["building_type"].map(BUILDING_TYPE_ORDER).fillna(99)
    df = df.sort_values(["order", "month"]).drop(columns="order").reset_index(drop=True)
    df["month"] = df["month"].map(lambda m: MONTH_NAMES[m])
    return df


def breakdown_table(entries: list[BatchResultEntry]) -> pd.DataFrame:
    """One row per archetype with count-weighted energies and its own EUI."""
    columns = [
        "building_type", "period_id", "count", "heating", "cooling", "dhw", "lighting",
        "equipment", "total", "eui", "floor_area", "peak_heating_kw", "peak_cooling_kw",
    ]
    rows = []
    for entry in entries:
        a = entry.annual
        rows.append({
            "building_type": entry.building_type,
            "period_id": entry.period_id,
            "count": entry.count,
            "heating": a.heating * entry.count,
            "cooling": a.cooling * entry.count,
            "dhw": a.dhw * entry.count,
            "lighting": a.lighting * entry.count,
            "equipment": a.equipment * entry.count,
            "total": a.total * entry.count,
            "eui": a.eui,
            "floor_area": a.floor_area * entry.count,
            "peak_heating_kw": a.peak_heating_kw * entry.count,
            "peak_cooling_kw": a.peak_cooling_kw * entry.count,
        })
    return pd.DataFrame(rows, columns=columns)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up."""
    return int(np.floor(value + 0.5))
