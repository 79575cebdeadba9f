"""Descripteurs agreges d'une trace (points forts du parcours)."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from core.geo import segment_distances
from core.track import Track
from core.units import UnitPreference


@dataclass(frozen=True)
class RouteAnalysis:
    total_points: int
    fastest_pace: float | None  # min / unite
    slowest_pace: float | None
    steepest_climb_pct: float
    steepest_descent_pct: float  # <= 0
    elevation_gain_m: float
    elevation_loss_m: float
    max_speed_m_s: float
    avg_cadence: float | None


def analyze_route(track: Track | None, units: UnitPreference) -> RouteAnalysis | None:
    """Analyse complete (recalculee integralement si la trace change).

    Les allures viennent de la vitesse instantanee du point d'arrivee de chaque segment.
    La pente ignore le premier segment (altitude initiale souvent peu fiable) et les
    segments de longueur nulle.
    """
    if track is None:
        return None
    points = track.points
    n = len(points)
    if n < 2:
        return RouteAnalysis(
            total_points=n,
            fastest_pace=None,
            slowest_pace=None,
            steepest_climb_pct=0.0,
            steepest_descent_pct=0.0,
            elevation_gain_m=0.0,
            elevation_loss_m=0.0,
            max_speed_m_s=max(0.0, points[0].speed),
            avg_cadence=points[0].cadence,
        )

    dist = segment_distances(points)
    speed = np.array([p.speed for p in points[1:]], dtype=float)
    altitude = np.array([p.altitude for p in points], dtype=float)

    moving = speed > 0
    paces = units.unit_distance_m / speed[moving] / 60.0
    fastest = float(paces.min()) if paces.size else None
    slowest = float(paces.max()) if paces.size else None

    d_alt = np.diff(altitude)
    gain = float(d_alt[d_alt > 0].sum())
    loss = float(-d_alt[d_alt < 0].sum())

    grade = np.full(n - 1, np.nan)
    np.divide(d_alt, dist, out=grade, where=dist > 0)
    grade = grade[1:] * 100.0
    grade = grade[np.isfinite(grade)]
    climb = max(0.0, float(grade.max())) if grade.size else 0.0
    descent = min(0.0, float(grade.min())) if grade.size else 0.0

    cadences = [p.cadence for p in points if p.cadence is not None and p.cadence > 0]
    avg_cadence = float(np.mean(cadences)) if cadences else None

    max_speed = float(np.max([p.speed for p in points]))
    return RouteAnalysis(
        total_points=n,
        fastest_pace=fastest,
        slowest_pace=slowest,
        steepest_climb_pct=climb,
        steepest_descent_pct=descent,
        elevation_gain_m=gain,
        elevation_loss_m=loss,
        max_speed_m_s=max(0.0, max_speed) if math.isfinite(max_speed) else 0.0,
        avg_cadence=avg_cadence,
    )
