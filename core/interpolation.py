"""Position interpolee le long d'une trace pour le marqueur de replay.

La trace passee a PositionInterpolator doit etre la meme pour tous les affichages
bases sur la progression d'une session (voir services.analysis_service.AnalysisSession).
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np

from core.constants import REPLAY_DURATION_S
from core.geo import bearing
from core.track import Track, track_coordinates


class Position(NamedTuple):
    latitude: float
    longitude: float
    heading: float  # degres [0, 360)


class PositionInterpolator:
    """position_at(p) en O(1) : coordonnees et caps de segments precalcules."""

    def __init__(self, track: Track):
        self.track = track
        self._lats, self._lons = track_coordinates(track.points)
        points = track.points
        self._headings = np.array(
            [bearing(points[i], points[i + 1]) for i in range(len(points) - 1)],
            dtype=float,
        )

    def __len__(self) -> int:
        return len(self._lats)

    def position_at(self, progress: float) -> Position:
        n = len(self._lats)
        if n == 1:
            return Position(float(self._lats[0]), float(self._lons[0]), 0.0)

        p = float(progress)
        if not math.isfinite(p):
            p = 0.0
        p = min(1.0, max(0.0, p))

        index = p * (n - 1)
        lower = min(int(math.floor(index)), n - 2)
        fraction = index - lower
        lat = self._lats[lower] + (self._lats[lower + 1] - self._lats[lower]) * fraction
        lon = self._lons[lower] + (self._lons[lower + 1] - self._lons[lower]) * fraction
        return Position(float(lat), float(lon), float(self._headings[lower]))


def replay_progress(elapsed_s: float, duration_s: float = REPLAY_DURATION_S) -> float:
    """Progression en boucle dans [0, 1) pour un replay de duree duration_s."""
    if duration_s <= 0:
        return 0.0
    return (max(0.0, float(elapsed_s)) % duration_s) / duration_s
