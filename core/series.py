"""Series capteurs indexees par distance cumulee (unites utilisateur)."""

from __future__ import annotations

import numpy as np
import pandas as pd

from core.constants import FEET_PER_METER
from core.geo import segment_distances
from core.track import Track
from core.units import UnitPreference


def _distance_index(track: Track, units: UnitPreference) -> pd.Index:
    cum = np.concatenate([[0.0], np.cumsum(segment_distances(track.points))])
    return pd.Index(cum / units.unit_distance_m, name=f"distance_{units.distance_label}")


def downsample_series(series: pd.Series, target_points: int | None) -> pd.Series:
    """Sous-echantillonnage uniforme par index ; conserve le dernier point."""
    if target_points is None or target_points <= 0 or len(series) <= target_points:
        return series
    positions = np.unique(np.linspace(0, len(series) - 1, int(target_points)).round().astype(int))
    return series.iloc[positions]


def elevation_series(
    track: Track | None,
    units: UnitPreference,
    *,
    target_points: int | None = None,
) -> pd.Series:
    """Altitude (m ou ft) en fonction de la distance."""
    if track is None:
        return pd.Series(dtype=float, name="elevation")
    values = np.array([p.altitude for p in track.points], dtype=float)
    if not units.metric:
        values = values * FEET_PER_METER
    series = pd.Series(values, index=_distance_index(track, units), name="elevation")
    return downsample_series(series, target_points)


def heart_rate_series(
    track: Track | None,
    units: UnitPreference,
    *,
    target_points: int | None = None,
) -> pd.Series:
    """Frequence cardiaque (bpm) en fonction de la distance ; points sans mesure retires."""
    if track is None:
        return pd.Series(dtype=float, name="heart_rate")
    values = np.array(
        [p.heart_rate if p.heart_rate is not None else np.nan for p in track.points],
        dtype=float,
    )
    series = pd.Series(values, index=_distance_index(track, units), name="heart_rate").dropna()
    return downsample_series(series, target_points)
