"""Splits par unite de distance (km ou mile).

Deux chemins :
- horodatages fiables : accumulation segment par segment, les sauts GPS et les
  segments immobiles ne creditent ni distance ni temps ;
- horodatages degeneres (etendue < 10 s pour plus de 10 points) : allure estimee
  depuis les metadonnees, uniforme sur toutes les unites entieres.
Si aucun split n'est produit, on synthetise depuis les totaux rapportes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from core.constants import (
    DEFAULT_PACE_S_PER_M,
    DEGENERATE_MAX_SPAN_S,
    DEGENERATE_MIN_POINTS,
    JUMP_MAX_SPEED_M_S,
    JUMP_THRESHOLD_M,
    PARTIAL_SPLIT_MIN_DISTANCE_M,
    PARTIAL_SPLIT_MIN_FRACTION,
    SPLIT_MAX_PACE_MIN,
    SPLIT_MIN_PACE_MIN,
    SYNTHESIS_MIN_DURATION_S,
)
from core.geo import segment_distances
from core.metadata import WorkoutMetadata
from core.track import Track, TreadmillSeries
from core.units import UnitPreference
from core.utils import pace_s_per_m_to_min_per_unit

logger = logging.getLogger("trackscope.splits")

# Tolerance sur le nombre d'unites entieres (5.0 mi -> 8046.7 m -> 5 unites).
_UNIT_EPSILON = 1e-9


@dataclass(frozen=True)
class Split:
    unit_index: int
    pace: float  # minutes par unite
    elapsed_seconds: float
    distance_m: float
    avg_heart_rate: float | None = None
    avg_cadence: float | None = None
    is_partial: bool = False
    is_estimated: bool = False


def has_degenerate_timestamps(
    span_s: float,
    point_count: int,
    *,
    max_span_s: float = DEGENERATE_MAX_SPAN_S,
    min_points: int = DEGENERATE_MIN_POINTS,
) -> bool:
    """Horodatages juges non significatifs : beaucoup de points sur quelques secondes."""
    return span_s < max_span_s and point_count > min_points


def jump_mask(
    seg_distance_m: np.ndarray,
    seg_dt_s: np.ndarray,
    *,
    jump_threshold_m: float = JUMP_THRESHOLD_M,
    jump_max_speed_m_s: float = JUMP_MAX_SPEED_M_S,
) -> np.ndarray:
    """Masque des segments consideres comme sauts GPS.

    Un segment plus long que jump_threshold_m est un saut si la vitesse implicite
    depasse jump_max_speed_m_s (ou si le temps ecoule est nul).
    """
    long_segment = seg_distance_m > jump_threshold_m
    implied_speed = np.full_like(seg_distance_m, np.inf, dtype=float)
    np.divide(seg_distance_m, seg_dt_s, out=implied_speed, where=seg_dt_s > 0)
    return long_segment & (implied_speed > jump_max_speed_m_s)


def _mean_or_none(values: list[float]) -> float | None:
    return float(np.mean(values)) if values else None


def _pace_min(elapsed_s: float, distance_m: float, unit_m: float) -> float:
    return pace_s_per_m_to_min_per_unit(elapsed_s / distance_m, unit_m)


def _in_band(pace: float, min_pace: float, max_pace: float) -> bool:
    return min_pace < pace < max_pace


def _close_split(
    unit_index: int,
    elapsed_s: float,
    distance_m: float,
    unit_m: float,
    heart_rates: list[float],
    cadences: list[float],
    *,
    min_pace: float,
    max_pace: float,
    is_partial: bool = False,
) -> Split | None:
    if distance_m <= 0 or elapsed_s <= 0:
        return None
    pace = _pace_min(elapsed_s, distance_m, unit_m)
    if not _in_band(pace, min_pace, max_pace):
        logger.info("split_discarded unit=%d pace=%.2f partial=%d", unit_index, pace, int(is_partial))
        return None
    return Split(
        unit_index=unit_index,
        pace=pace,
        elapsed_seconds=elapsed_s,
        distance_m=distance_m,
        avg_heart_rate=_mean_or_none(heart_rates),
        avg_cadence=_mean_or_none(cadences),
        is_partial=is_partial,
    )


def _splits_from_segments(
    seg_distance_m: np.ndarray,
    seg_dt_s: np.ndarray,
    credited: np.ndarray,
    heart_rates: Sequence[float | None],
    cadences: Sequence[float | None],
    unit_m: float,
    *,
    min_pace: float,
    max_pace: float,
) -> list[Split]:
    """Coeur du chemin horodate.

    La frontiere d'une unite tombe exactement sur le repere (1000 m, 1609.34 m...) :
    le segment qui franchit le repere est coupe et son temps reparti au prorata.
    Les capteurs sont rattaches au point d'arrivee du segment.
    """
    splits: list[Split] = []
    unit_index = 1
    split_distance = 0.0
    split_elapsed = 0.0
    split_hr: list[float] = []
    split_cad: list[float] = []

    for k in range(len(seg_distance_m)):
        if not credited[k]:
            continue
        seg_d = float(seg_distance_m[k])
        seg_t = float(seg_dt_s[k])
        hr = heart_rates[k]
        cad = cadences[k]
        if hr is not None and hr > 0:
            split_hr.append(float(hr))
        if cad is not None and cad > 0:
            split_cad.append(float(cad))

        while split_distance + seg_d >= unit_m:
            needed = unit_m - split_distance
            fraction = needed / seg_d if seg_d > 0 else 1.0
            split = _close_split(
                unit_index,
                split_elapsed + seg_t * fraction,
                unit_m,
                unit_m,
                split_hr,
                split_cad,
                min_pace=min_pace,
                max_pace=max_pace,
            )
            if split is not None:
                splits.append(split)
            seg_d -= needed
            seg_t *= 1.0 - fraction
            unit_index += 1
            split_distance = 0.0
            split_elapsed = 0.0
            split_hr = []
            split_cad = []

        split_distance += seg_d
        split_elapsed += seg_t

    if split_distance > unit_m * PARTIAL_SPLIT_MIN_FRACTION and split_distance >= PARTIAL_SPLIT_MIN_DISTANCE_M:
        split = _close_split(
            unit_index,
            split_elapsed,
            split_distance,
            unit_m,
            split_hr,
            split_cad,
            min_pace=min_pace,
            max_pace=max_pace,
            is_partial=True,
        )
        if split is not None:
            splits.append(split)
    return splits


def estimate_pace_s_per_m(metadata: WorkoutMetadata) -> float:
    """Allure estimee (s/m) depuis les metadonnees, sinon ~10 min/mile."""
    pace = metadata.average_pace_s_per_m()
    if pace is not None and pace > 0:
        logger.info("splits_estimated_pace source=metadata pace_s_per_m=%.4f", pace)
        return pace
    logger.info("splits_estimated_pace source=default pace_s_per_m=%.4f", DEFAULT_PACE_S_PER_M)
    return DEFAULT_PACE_S_PER_M


def _whole_units(total_m: float, unit_m: float) -> int:
    if total_m <= 0:
        return 0
    return int(math.floor(total_m / unit_m + _UNIT_EPSILON))


def _estimated_splits(metadata: WorkoutMetadata, fallback_distance_m: float, unit_m: float) -> list[Split]:
    pace_s_per_m = estimate_pace_s_per_m(metadata)
    reported = metadata.distance_m
    total_m = reported if reported is not None and reported > 0 else fallback_distance_m
    unit_pace = pace_s_per_m_to_min_per_unit(pace_s_per_m, unit_m)
    return [
        Split(
            unit_index=i,
            pace=unit_pace,
            elapsed_seconds=pace_s_per_m * unit_m,
            distance_m=unit_m,
            avg_heart_rate=metadata.avg_heart_rate,
            avg_cadence=metadata.avg_cadence,
            is_estimated=True,
        )
        for i in range(1, _whole_units(total_m, unit_m) + 1)
    ]


def synthesize_splits_from_metadata(
    metadata: WorkoutMetadata,
    unit_m: float,
    *,
    min_pace: float = SPLIT_MIN_PACE_MIN,
    max_pace: float = SPLIT_MAX_PACE_MIN,
) -> list[Split]:
    """Repli total : unites entieres de la distance rapportee, a l'allure moyenne rapportee."""
    distance_m = metadata.distance_m
    duration_s = metadata.duration_s
    if not distance_m or distance_m <= 0 or not duration_s or duration_s <= SYNTHESIS_MIN_DURATION_S:
        return []

    pace_s_per_m = metadata.average_pace_s_per_m() or duration_s / distance_m
    unit_pace = pace_s_per_m_to_min_per_unit(pace_s_per_m, unit_m)
    if not _in_band(unit_pace, min_pace, max_pace):
        logger.info("splits_synthesis_rejected pace=%.2f", unit_pace)
        return []

    units = _whole_units(distance_m, unit_m)
    logger.info("splits_synthesized count=%d pace=%.2f", units, unit_pace)
    return [
        Split(
            unit_index=i,
            pace=unit_pace,
            elapsed_seconds=pace_s_per_m * unit_m,
            distance_m=unit_m,
            avg_heart_rate=metadata.avg_heart_rate,
            avg_cadence=metadata.avg_cadence,
            is_estimated=True,
        )
        for i in range(1, units + 1)
    ]


def compute_splits(
    track: Track | None,
    units: UnitPreference,
    metadata: WorkoutMetadata | None = None,
    *,
    jump_threshold_m: float = JUMP_THRESHOLD_M,
    jump_max_speed_m_s: float = JUMP_MAX_SPEED_M_S,
    min_pace: float = SPLIT_MIN_PACE_MIN,
    max_pace: float = SPLIT_MAX_PACE_MIN,
) -> list[Split]:
    """Decoupe une trace (de preference non filtree) en splits par km / mile."""
    metadata = metadata or WorkoutMetadata()
    unit_m = units.unit_distance_m
    splits: list[Split] = []

    if track is not None and len(track) > 1:
        seg_distance = segment_distances(track.points)
        seg_dt = np.diff(track.elapsed_seconds())
        jumps = jump_mask(
            seg_distance,
            seg_dt,
            jump_threshold_m=jump_threshold_m,
            jump_max_speed_m_s=jump_max_speed_m_s,
        )
        # Un arret (distance nulle) credite son temps ; seuls les sauts sont ignores.
        credited = ~jumps
        if jumps.any():
            logger.info("splits_jump_excluded count=%d", int(jumps.sum()))

        if has_degenerate_timestamps(track.duration_s, len(track)):
            logger.warning(
                "splits_degenerate_timestamps span_s=%.3f points=%d", track.duration_s, len(track)
            )
            splits = _estimated_splits(metadata, float(seg_distance[credited].sum()), unit_m)
        else:
            splits = _splits_from_segments(
                seg_distance,
                seg_dt,
                credited,
                [p.heart_rate for p in track.points[1:]],
                [p.cadence for p in track.points[1:]],
                unit_m,
                min_pace=min_pace,
                max_pace=max_pace,
            )

    if not splits:
        splits = synthesize_splits_from_metadata(metadata, unit_m, min_pace=min_pace, max_pace=max_pace)
    return splits


def compute_treadmill_splits(
    series: TreadmillSeries | None,
    units: UnitPreference,
    metadata: WorkoutMetadata | None = None,
    *,
    min_pace: float = SPLIT_MIN_PACE_MIN,
    max_pace: float = SPLIT_MAX_PACE_MIN,
) -> list[Split]:
    """Splits d'une seance en salle depuis la distance cumulee du tapis."""
    metadata = metadata or WorkoutMetadata()
    unit_m = units.unit_distance_m
    splits: list[Split] = []

    if series is not None and len(series) > 1:
        samples = series.samples
        start = samples[0].timestamp
        elapsed = np.array([(s.timestamp - start).total_seconds() for s in samples], dtype=float)
        distances = np.array([s.distance_m for s in samples], dtype=float)
        seg_distance = np.diff(distances)
        seg_dt = np.diff(elapsed)
        # Un compteur qui recule (remise a zero) ne credite rien ; un tapis a l'arret credite son temps.
        credited = seg_distance >= 0

        if has_degenerate_timestamps(float(elapsed[-1]), len(samples)):
            splits = _estimated_splits(metadata, float(seg_distance[credited].sum()), unit_m)
        else:
            splits = _splits_from_segments(
                seg_distance,
                seg_dt,
                credited,
                [s.heart_rate for s in samples[1:]],
                [s.cadence for s in samples[1:]],
                unit_m,
                min_pace=min_pace,
                max_pace=max_pace,
            )

    if not splits:
        splits = synthesize_splits_from_metadata(metadata, unit_m, min_pace=min_pace, max_pace=max_pace)
    return splits


def total_credited_distance(
    track: Track,
    *,
    jump_threshold_m: float = JUMP_THRESHOLD_M,
    jump_max_speed_m_s: float = JUMP_MAX_SPEED_M_S,
) -> float:
    """Distance (m) de la trace hors sauts GPS."""
    if len(track) < 2:
        return 0.0
    seg_distance = segment_distances(track.points)
    seg_dt = np.diff(track.elapsed_seconds())
    jumps = jump_mask(seg_distance, seg_dt, jump_threshold_m=jump_threshold_m, jump_max_speed_m_s=jump_max_speed_m_s)
    return float(seg_distance[~jumps].sum())
