"""Variantes de seance : exterieur (trace GPS) ou salle (tapis, sans position).

Les analyses sont dispatchees via le protocole TrackSource, pas par inspection de type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from core.metadata import WorkoutMetadata
from core.pace_curve import PacePoint, build_pace_curve, build_treadmill_pace_curve
from core.splits import Split, compute_splits, compute_treadmill_splits
from core.track import Track, TreadmillSeries
from core.units import UnitPreference


class TrackSource(Protocol):
    metadata: WorkoutMetadata

    def route_track(self) -> Track | None:
        ...

    def splits(self, units: UnitPreference, **thresholds: float) -> list[Split]:
        ...

    def pace_curve(self, units: UnitPreference, track: Track | None = None, **options: float) -> list[PacePoint]:
        ...


@dataclass(frozen=True)
class OutdoorWorkout:
    track: Track | None
    metadata: WorkoutMetadata = field(default_factory=WorkoutMetadata)
    kind: str = "run"  # run / walk / hike / bike

    def route_track(self) -> Track | None:
        return self.track

    def splits(self, units: UnitPreference, **thresholds: float) -> list[Split]:
        return compute_splits(self.track, units, self.metadata, **thresholds)

    def pace_curve(self, units: UnitPreference, track: Track | None = None, **options: float) -> list[PacePoint]:
        """Courbe d'allure ; track remplace la trace de la seance (ex. trace reduite)."""
        return build_pace_curve(track if track is not None else self.track, units, **options)


@dataclass(frozen=True)
class IndoorWorkout:
    treadmill: TreadmillSeries | None
    metadata: WorkoutMetadata = field(default_factory=WorkoutMetadata)
    kind: str = "indoor_run"

    def route_track(self) -> Track | None:
        return None

    def splits(self, units: UnitPreference, **thresholds: float) -> list[Split]:
        # Pas de geodesie ni de filtre de saut : la distance vient du tapis.
        thresholds.pop("jump_threshold_m", None)
        thresholds.pop("jump_max_speed_m_s", None)
        return compute_treadmill_splits(self.treadmill, units, self.metadata, **thresholds)

    def pace_curve(self, units: UnitPreference, track: Track | None = None, **options: float) -> list[PacePoint]:
        return build_treadmill_pace_curve(self.treadmill, units, **options)
