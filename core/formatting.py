from __future__ import annotations

"""Formatting helpers for the presentation boundary.

Unit conversion happens here, driven by an explicit UnitPreference; the analytics
in core/ never format anything.
"""

import math

from core.constants import FEET_PER_METER
from core.units import UnitPreference
from core.utils import seconds_to_mmss


def _is_missing(value: float | None) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def format_duration_clock(seconds: float | None) -> str:
    """Format a split / workout time (e.g. 1:02:03 / 5:02 / '-')."""

    if _is_missing(seconds):
        return "-"
    total_seconds = int(round(seconds))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_pace(pace_min_per_unit: float | None, units: UnitPreference) -> str:
    """Format a pace given in minutes per unit (e.g. 5:30 /km)."""

    if _is_missing(pace_min_per_unit) or pace_min_per_unit <= 0 or math.isinf(pace_min_per_unit):
        return "-"
    return f"{seconds_to_mmss(pace_min_per_unit * 60.0)} {units.pace_label}"


def format_distance(meters: float | None, units: UnitPreference) -> str:
    """Metric: '850 m' under 1 km, '12.34 km' above. Imperial: '3.10 mi'."""

    if _is_missing(meters):
        return "-"
    if units.metric and meters < units.unit_distance_m:
        return f"{meters:.0f} m"
    return f"{units.to_units(meters):.2f} {units.distance_label}"


def format_elevation(meters: float | None, units: UnitPreference) -> str:
    if _is_missing(meters):
        return "-"
    value = meters if units.metric else meters * FEET_PER_METER
    return f"{value:.0f} {units.elevation_label}"
