"""Modele de trace : TrackPoint, Track immuable et ingestion des echantillons bruts.

Les echantillons arrivent de la source d'enregistrement sous plusieurs formes
(dict "latitude/longitude", "lat/lng", "location" imbrique, "CLLocation").
Les points hors bornes sont exclus ici et ne descendent jamais dans les algorithmes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator, Mapping, Sequence

import numpy as np
import pandas as pd

from core.constants import LAT_RANGE, LON_RANGE
from core.contracts.track_df_contract import CANONICAL_COLUMNS, coerce_track_df
from core.geo import segment_distances
from core.transform_report import TransformReport

logger = logging.getLogger("trackscope.ingest")


@dataclass(frozen=True)
class TrackPoint:
    latitude: float
    longitude: float
    timestamp: datetime
    altitude: float = 0.0
    horizontal_accuracy: float = 0.0
    vertical_accuracy: float = 0.0
    course: float = 0.0
    speed: float = 0.0
    heart_rate: float | None = None
    cadence: float | None = None


@dataclass(frozen=True)
class Track:
    """Sequence ordonnee, non vide et immuable de TrackPoint (triee par horodatage)."""

    points: tuple[TrackPoint, ...]

    def __post_init__(self) -> None:
        points = tuple(self.points)
        if not points:
            raise ValueError("Une trace doit contenir au moins un point")
        # Tri stable : l'ordre d'arrivee est conserve a horodatage egal.
        object.__setattr__(self, "points", tuple(sorted(points, key=lambda p: p.timestamp)))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TrackPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> TrackPoint:
        return self.points[index]

    @property
    def first(self) -> TrackPoint:
        return self.points[0]

    @property
    def last(self) -> TrackPoint:
        return self.points[-1]

    @property
    def duration_s(self) -> float:
        return (self.last.timestamp - self.first.timestamp).total_seconds()

    def elapsed_seconds(self) -> np.ndarray:
        """Temps ecoule (s) depuis le premier point, pour chaque point."""
        start = self.first.timestamp
        return np.array([(p.timestamp - start).total_seconds() for p in self.points], dtype=float)

    def to_dataframe(self) -> pd.DataFrame:
        """Vue DataFrame canonique (voir core.contracts.track_df_contract)."""
        deltas = np.concatenate([[0.0], segment_distances(self.points)])
        elapsed = self.elapsed_seconds()
        delta_time = np.concatenate([[math.nan], np.diff(elapsed)])
        rows = {
            "lat": [p.latitude for p in self.points],
            "lon": [p.longitude for p in self.points],
            "elevation": [p.altitude for p in self.points],
            "time": pd.to_datetime([p.timestamp for p in self.points], utc=True),
            "distance_m": np.cumsum(deltas),
            "delta_distance_m": deltas,
            "elapsed_time_s": elapsed,
            "delta_time_s": delta_time,
            "speed_m_s": [p.speed for p in self.points],
            "course_deg": [p.course for p in self.points],
            "horizontal_accuracy_m": [p.horizontal_accuracy for p in self.points],
            "vertical_accuracy_m": [p.vertical_accuracy for p in self.points],
            "heart_rate": [p.heart_rate if p.heart_rate is not None else math.nan for p in self.points],
            "cadence": [p.cadence if p.cadence is not None else math.nan for p in self.points],
        }
        return pd.DataFrame(rows, columns=list(CANONICAL_COLUMNS))


@dataclass(frozen=True)
class TreadmillSample:
    """Echantillon d'un tapis de course : distance cumulee (m), sans position."""

    timestamp: datetime
    distance_m: float
    heart_rate: float | None = None
    cadence: float | None = None
    speed: float = 0.0


@dataclass(frozen=True)
class TreadmillSeries:
    samples: tuple[TreadmillSample, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", tuple(sorted(self.samples, key=lambda s: s.timestamp)))

    def __len__(self) -> int:
        return len(self.samples)


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def _as_timestamp(value: Any) -> datetime | None:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        if pd.isna(value):
            return None
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        ts = pd.to_datetime(value, errors="coerce", utc=True)
        return None if pd.isna(ts) else ts.to_pydatetime()
    seconds = _as_float(value)
    if seconds is None:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def _extract_coordinates(sample: Mapping[str, Any]) -> tuple[float | None, float | None]:
    candidates: list[Mapping[str, Any]] = [sample]
    location = sample.get("location")
    if isinstance(location, Mapping):
        candidates.append(location)
    cl_location = sample.get("CLLocation")
    if isinstance(cl_location, Mapping) and isinstance(cl_location.get("coordinate"), Mapping):
        candidates.append(cl_location["coordinate"])

    for source in candidates:
        lat = source.get("latitude", source.get("lat"))
        lon = source.get("longitude", source.get("lng", source.get("lon")))
        if lat is not None and lon is not None:
            return _as_float(lat), _as_float(lon)
    return None, None


def _is_valid_coordinate(lat: float | None, lon: float | None) -> bool:
    if lat is None or lon is None:
        return False
    return LAT_RANGE[0] <= lat <= LAT_RANGE[1] and LON_RANGE[0] <= lon <= LON_RANGE[1]


def _optional_sensor(sample: Mapping[str, Any], *keys: str) -> float | None:
    for key in keys:
        value = _as_float(sample.get(key))
        if value is not None and value > 0:
            return value
    return None


def sample_to_point(sample: Mapping[str, Any], *, default_timestamp: datetime) -> TrackPoint | None:
    """Convertit un echantillon brut en TrackPoint ; None si coordonnees invalides."""
    lat, lon = _extract_coordinates(sample)
    if not _is_valid_coordinate(lat, lon):
        return None
    timestamp = _as_timestamp(sample.get("timestamp", sample.get("time")))
    return TrackPoint(
        latitude=float(lat),
        longitude=float(lon),
        timestamp=timestamp if timestamp is not None else default_timestamp,
        altitude=_as_float(sample.get("altitude", sample.get("elevation"))) or 0.0,
        horizontal_accuracy=_as_float(sample.get("horizontalAccuracy", sample.get("horizontal_accuracy"))) or 0.0,
        vertical_accuracy=_as_float(sample.get("verticalAccuracy", sample.get("vertical_accuracy"))) or 0.0,
        course=_as_float(sample.get("course")) or 0.0,
        speed=_as_float(sample.get("speed")) or 0.0,
        heart_rate=_optional_sensor(sample, "heartRate", "heart_rate"),
        cadence=_optional_sensor(sample, "cadence"),
    )


def build_track(
    samples: Iterable[Mapping[str, Any]],
    *,
    report: TransformReport | None = None,
    default_timestamp: datetime | None = None,
) -> Track | None:
    """Construit une Track depuis des echantillons bruts.

    Les echantillons sans coordonnees valides sont exclus (compteur dans report).
    Les echantillons sans horodatage recoivent default_timestamp (par defaut : maintenant),
    ce qui rend la chronologie degeneree et active l'estimation par metadonnees.
    Retourne None si aucun point n'est exploitable.
    """
    fallback_ts = default_timestamp or datetime.now(timezone.utc)
    samples = list(samples)
    points = []
    for sample in samples:
        if not isinstance(sample, Mapping):
            continue
        point = sample_to_point(sample, default_timestamp=fallback_ts)
        if point is not None:
            points.append(point)

    excluded = len(samples) - len(points)
    if report is not None:
        report.add(
            "ingest",
            points_in=len(samples),
            points_out=len(points),
            reason="coordonnees absentes ou hors bornes",
        )
    if excluded:
        logger.info("ingest_excluded count=%d total=%d", excluded, len(samples))

    if not points:
        logger.warning("ingest_empty_track samples=%d", len(samples))
        return None
    return Track(tuple(points))


def build_treadmill_series(samples: Iterable[Mapping[str, Any]]) -> TreadmillSeries | None:
    """Serie tapis depuis des echantillons sans position (distance cumulee en metres).

    Les echantillons sans horodatage ou sans distance sont ignores ; None si rien ne reste.
    """
    out = []
    for sample in samples:
        if not isinstance(sample, Mapping):
            continue
        timestamp = _as_timestamp(sample.get("timestamp", sample.get("time")))
        distance_m = _as_float(sample.get("distance", sample.get("distance_m")))
        if timestamp is None or distance_m is None:
            continue
        out.append(
            TreadmillSample(
                timestamp=timestamp,
                distance_m=distance_m,
                heart_rate=_optional_sensor(sample, "heartRate", "heart_rate"),
                cadence=_optional_sensor(sample, "cadence"),
                speed=_as_float(sample.get("speed")) or 0.0,
            )
        )
    if not out:
        logger.warning("ingest_empty_treadmill")
        return None
    return TreadmillSeries(tuple(out))


def track_from_dataframe(df: pd.DataFrame, *, report: TransformReport | None = None) -> Track | None:
    """Inverse de Track.to_dataframe : reconstruit une trace depuis le DataFrame canonique."""
    if df is None or df.empty:
        return None
    working = coerce_track_df(df)
    samples = []
    for row in working.itertuples(index=False):
        samples.append(
            {
                "latitude": row.lat,
                "longitude": row.lon,
                "altitude": row.elevation,
                "timestamp": row.time,
                "speed": row.speed_m_s,
                "course": row.course_deg,
                "horizontalAccuracy": row.horizontal_accuracy_m,
                "verticalAccuracy": row.vertical_accuracy_m,
                "heartRate": row.heart_rate,
                "cadence": row.cadence,
            }
        )
    return build_track(samples, report=report)


def track_coordinates(points: Sequence[TrackPoint]) -> tuple[np.ndarray, np.ndarray]:
    """Tableaux (lat, lon) d'une sequence de points."""
    lats = np.fromiter((p.latitude for p in points), dtype=float, count=len(points))
    lons = np.fromiter((p.longitude for p in points), dtype=float, count=len(points))
    return lats, lons
