"""Courbe d'allure par distance (lissee par paquets d'index) pour les graphiques."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from core.constants import (
    PACE_CURVE_MAX_PACE_MIN,
    PACE_CURVE_MIN_CHUNK,
    PACE_CURVE_MIN_PACE_MIN,
    PACE_CURVE_MIN_POINTS,
    PACE_CURVE_TARGET_BINS,
)
from core.geo import segment_distances
from core.track import Track, TreadmillSeries
from core.units import UnitPreference


@dataclass(frozen=True)
class PacePoint:
    distance: float  # unites utilisateur (km / mi), cumulee
    pace: float  # minutes par unite, bornee pour l'affichage


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def pace_curve_from_arrays(
    seg_distance_m: np.ndarray,
    elapsed_s: np.ndarray,
    unit_m: float,
    *,
    target_bins: int = PACE_CURVE_TARGET_BINS,
    min_chunk: int = PACE_CURVE_MIN_CHUNK,
    min_points: int = PACE_CURVE_MIN_POINTS,
    min_pace: float = PACE_CURVE_MIN_PACE_MIN,
    max_pace: float = PACE_CURVE_MAX_PACE_MIN,
) -> list[PacePoint]:
    """Coeur du calcul sur tableaux.

    seg_distance_m : distances des n-1 segments ; elapsed_s : temps ecoule des n points.
    Les points apres le dernier paquet complet ne sont pas bines.
    """
    n = len(elapsed_s)
    if n < 2:
        return []

    cum = np.concatenate([[0.0], np.cumsum(seg_distance_m)])
    chunk = max(min_chunk, n // max(1, target_bins))

    points: list[PacePoint] = []
    covered_m = 0.0
    start = 0
    for end in range(chunk, n, chunk):
        chunk_distance = float(cum[end] - cum[start])
        chunk_duration = float(elapsed_s[end] - elapsed_s[start])
        if chunk_duration > 0 and chunk_distance > 0:
            covered_m += chunk_distance
            pace = (chunk_duration / chunk_distance) * unit_m / 60.0
            points.append(PacePoint(distance=covered_m / unit_m, pace=_clamp(pace, min_pace, max_pace)))
        start = end

    if len(points) >= min_points:
        return points

    total_distance = float(cum[-1])
    total_duration = float(elapsed_s[-1] - elapsed_s[0])
    if total_distance <= 0 or total_duration <= 0:
        return points

    # Trop peu de paquets : courbe plate a l'allure moyenne.
    avg_pace = _clamp((total_duration / total_distance) * unit_m / 60.0, min_pace, max_pace)
    return [
        PacePoint(distance=total_distance * i / min_points / unit_m, pace=avg_pace)
        for i in range(min_points)
    ]


def build_pace_curve(
    track: Track | None,
    units: UnitPreference,
    *,
    target_bins: int = PACE_CURVE_TARGET_BINS,
    min_pace: float = PACE_CURVE_MIN_PACE_MIN,
    max_pace: float = PACE_CURVE_MAX_PACE_MIN,
) -> list[PacePoint]:
    if track is None or len(track) < 2:
        return []
    return pace_curve_from_arrays(
        segment_distances(track.points),
        track.elapsed_seconds(),
        units.unit_distance_m,
        target_bins=target_bins,
        min_pace=min_pace,
        max_pace=max_pace,
    )


def build_treadmill_pace_curve(
    series: TreadmillSeries | None,
    units: UnitPreference,
    *,
    target_bins: int = PACE_CURVE_TARGET_BINS,
    min_pace: float = PACE_CURVE_MIN_PACE_MIN,
    max_pace: float = PACE_CURVE_MAX_PACE_MIN,
) -> list[PacePoint]:
    """Meme courbe depuis la distance cumulee d'un tapis (remises a zero ignorees)."""
    if series is None or len(series) < 2:
        return []
    samples = series.samples
    start = samples[0].timestamp
    elapsed = np.array([(s.timestamp - start).total_seconds() for s in samples], dtype=float)
    seg = np.clip(np.diff([s.distance_m for s in samples]), 0.0, None)
    return pace_curve_from_arrays(
        seg,
        elapsed,
        units.unit_distance_m,
        target_bins=target_bins,
        min_pace=min_pace,
        max_pace=max_pace,
    )
