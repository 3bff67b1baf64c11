"""
CSV exports of simulation results.

The layouts are fixed: users open these files in spreadsheets and compare
runs side by side, so section titles, column order and number formatting
must not drift between releases.
"""
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from energysim.core.aggregator import HOURS_PER_YEAR, breakdown_table, round_half_up, single_run_monthly
from energysim.core.catalogue import station_name
from energysim.services.simulation import AnnualResult, BatchResultEntry, HourlyPowerData


def to_fixed(value: float | None, digits: int) -> str:
    """Fixed-point text with ties rounded away from zero on the exact binary value."""
    quantum = Decimal(1).scaleb(-digits)
    return format(Decimal(value or 0.0).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def format_number(value) -> str:
    """Plain number text; integral floats are written without a decimal point."""
    if value is None:
        return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC timestamp such as 2025-01-31T08:15:00.000Z."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def single_run_csv(annual: AnnualResult, hourly: HourlyPowerData | None, *, simulation_type: str,
                   building_type: str, weather_station: str, construction_period: str | None = None,
                   generated_at: datetime | None = None) -> str:
    csv = "Building Energy Simulation Results\n"
    csv += f"Generated,{iso_timestamp(generated_at)}\n\n"

    csv += "CONFIGURATION\n"
    csv += f"Building Type,{building_type.replace('-', ' ')}\n"
    csv += f"Weather Location,{station_name(weather_station)}\n"
    if simulation_type == "pre-configured":
        csv += f"Construction Period,{construction_period}\n"
    else:
        csv += "Simulation Type,Custom Real-Time\n"
    csv += f"Conditioned Floor Area,{format_number(annual.floor_area)} m²\n\n"

    csv += "ANNUAL SUMMARY\n"
    csv += f"Total Energy,{round_half_up(annual.total)},kWh/year\n"
    csv += f"EUI,{to_fixed(annual.eui, 1)},kWh/m²/year\n"
    csv += f"Peak Heating Power,{to_fixed(annual.peak_heating_kw, 2)},kW\n"
    csv += f"Peak Cooling Power,{to_fixed(annual.peak_cooling_kw, 2)},kW\n\n"

    csv += "ENERGY BREAKDOWN\n"
    csv += f"Heating,{round_half_up(annual.heating)},kWh/year\n"
    csv += f"Cooling,{round_half_up(annual.cooling)},kWh/year\n"
    csv += f"DHW,{round_half_up(annual.dhw)},kWh/year\n"
    csv += f"Lighting,{round_half_up(annual.lighting)},kWh/year\n"
    csv += f"Equipment,{round_half_up(annual.equipment)},kWh/year\n\n"

    csv += "MONTHLY HEATING & COOLING (kWh)\n"
    csv += "Month,Heating,Cooling\n"
    for m in single_run_monthly(hourly):
        csv += f"{m['month']},{m['heating']},{m['cooling']}\n"
    csv += "\n"

    if hourly is not None and hourly.has_heating_and_cooling:
        csv += f"HOURLY DATA ({HOURS_PER_YEAR} hours)\n"
        csv += "Hour,Heating Power (kW),Cooling Power (kW)\n"
        heating, cooling = hourly.heating_power_kw, hourly.cooling_power_kw
        for h in range(min(HOURS_PER_YEAR, len(heating))):
            csv += f"{h},{to_fixed(heating[h], 3)},{to_fixed(cooling[h], 3)}\n"
    return csv


BATCH_HEADER = (
    "Building Type,Construction Period,Count,Heating (kWh),Cooling (kWh),DHW (kWh),Lighting (kWh),"
    "Equipment (kWh),Total (kWh),EUI (kWh/m²),Floor Area (m²),Peak Heating (kW),Peak Cooling (kW)"
)


def batch_csv(entries: list[BatchResultEntry], weather_station: str,
              generated_at: datetime | None = None) -> str:
    """Per-archetype breakdown plus a totals row; batch exports carry no hourly data."""
    csv = "Batch Simulation Results\n"
    csv += f"Generated,{iso_timestamp(generated_at)}\n"
    csv += f"Weather Location,{station_name(weather_station)}\n\n"

    csv += "PER-BUILDING RESULTS\n"
    csv += BATCH_HEADER + "\n"

    table = breakdown_table(entries)
    for row in table.itertuples(index=False):
        csv += (
            f"{row.building_type},{row.period_id},{row.count},{round_half_up(row.heating)},"
            f"{round_half_up(row.cooling)},{round_half_up(row.dhw)},{round_half_up(row.lighting)},"
            f"{round_half_up(row.equipment)},{round_half_up(row.total)},{to_fixed(row.eui, 1)},"
            f"{round_half_up(row.floor_area)},{to_fixed(row.peak_heating_kw, 2)},{to_fixed(row.peak_cooling_kw, 2)}\n"
        )

    sums = table.drop(columns=["building_type", "period_id", "eui"]).sum()
    total_area = float(sums["floor_area"])
    eui = to_fixed(float(sums["total"]) / total_area, 1) if total_area > 0 else "0"
    csv += (
        f"\nTOTAL,,{int(sums['count'])},{round_half_up(sums['heating'])},{round_half_up(sums['cooling'])},"
        f"{round_half_up(sums['dhw'])},{round_half_up(sums['lighting'])},{round_half_up(sums['equipment'])},"
        f"{round_half_up(sums['total'])},{eui},{round_half_up(total_area)},"
        f"{to_fixed(float(sums['peak_heating_kw']), 2)},{to_fixed(float(sums['peak_cooling_kw']), 2)}\n"
    )
    return csv


def history_csv(record) -> str:
    """Report for a saved simulation record, as downloaded from the history page."""
    lines = [
        "Simulation Report",
        f"Date,{record.created_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Type,{record.simulation_type}",
        f"Location,{record.weather_station}",
    ]
    if record.building_type:
        lines.append(f"Building Type,{record.building_type}")
    if record.construction_period:
        lines.append(f"Construction Period,{record.construction_period}")
    if (record.building_count or 1) > 1:
        lines.append(f"Building Count,{record.building_count}")

    lines.append("")
    lines.append("Annual Results")
    lines.append(f"Total Heating (kWh),{format_number(record.total_heating)}")
    lines.append(f"Total Cooling (kWh),{format_number(record.total_cooling)}")
    lines.append(f"Total Energy (kWh),{format_number(record.total_energy)}")
    lines.append(f"EUI (kWh/m²/year),{format_number(record.eui)}")
    lines.append(f"Floor Area (m²),{format_number(record.floor_area)}")

    hourly = record.hourly_data or {}
    heating = hourly.get("heating_power_kw")
    cooling = hourly.get("cooling_power_kw")
    if heating and cooling:
        lines.append("")
        lines.append(f"Hourly Data ({HOURS_PER_YEAR} hours)")
        lines.append("Hour,Heating (kW),Cooling (kW)")
        for i in range(min(len(heating), HOURS_PER_YEAR)):
            h = heating[i]
            c = cooling[i] if i < len(cooling) else None
            lines.append(f"{i + 1},{to_fixed(h, 4) if h is not None else 0},{to_fixed(c, 4) if c is not None else 0}")
    return "\n".join(lines)


def single_run_filename(weather_station: str, simulation_type: str, construction_period: str | None) -> str:
    suffix = construction_period if simulation_type == "pre-configured" else "custom"
    return f"energy_results_{weather_station}_{suffix}.csv"


def batch_filename(weather_station: str) -> str:
    return f"batch_results_{weather_station}.csv"


def history_filename(record) -> str:
    return f"simulation-{str(record.id)[:8]}-{record.created_at.date().isoformat()}.csv"
