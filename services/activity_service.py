"""Chargement des seances (fichiers ou enregistrements bruts).

Frontiere avec les sources : les erreurs des parseurs deviennent ValueError
ici, le core ne les voit jamais.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import gpxpy
import gpxpy.gpx
from fitparse import FitParseError

from core import fit_loader, gpx_loader
from core.metadata import WorkoutMetadata
from core.track import build_track, build_treadmill_series
from core.transform_report import TransformReport
from core.workout import IndoorWorkout, OutdoorWorkout
from services.models import LoadedWorkout

logger = logging.getLogger("trackscope.loader")

INDOOR_KINDS = {"indoor_run", "treadmill"}


def load_workout_from_bytes(
    data: bytes,
    name: str,
    metadata: WorkoutMetadata | None = None,
    *,
    kind: str = "run",
) -> LoadedWorkout:
    metadata = metadata or WorkoutMetadata()
    report = TransformReport()
    extension = Path(name).suffix.lower()

    if extension == ".fit":
        try:
            fit = fit_loader.load_fit(io.BytesIO(data))
            samples = fit_loader.fit_to_samples(fit)
            indoor = bool(samples) and not fit_loader.has_positions(samples)
            if indoor:
                treadmill = fit_loader.fit_to_treadmill(fit)
            else:
                track = fit_loader.fit_to_track(fit, report=report)
        except FitParseError as exc:
            raise ValueError(f"Fichier FIT illisible: {name}") from exc
        if indoor:
            logger.info("load_indoor name=%s samples=%d", name, len(samples))
            return LoadedWorkout(
                name=name,
                workout=IndoorWorkout(treadmill=treadmill, metadata=metadata),
                report=report,
                track_count=0,
            )
        track_count = 1 if track is not None else 0
    else:
        try:
            gpx = gpx_loader.load_gpx(io.BytesIO(data))
        except gpxpy.gpx.GPXException as exc:
            raise ValueError(f"Fichier GPX illisible: {name}") from exc
        track = gpx_loader.gpx_to_track(gpx, report=report)
        track_count = len(gpx.tracks)

    logger.info("load_outdoor name=%s points=%d", name, len(track) if track is not None else 0)
    return LoadedWorkout(
        name=name,
        workout=OutdoorWorkout(track=track, metadata=metadata, kind=kind),
        report=report,
        track_count=int(track_count),
    )


def load_workout_from_samples(
    samples: Iterable[Mapping[str, Any]],
    metadata: WorkoutMetadata | None = None,
    *,
    kind: str = "run",
    name: str = "workout",
) -> LoadedWorkout:
    """Seance depuis des echantillons bruts tels que stockes par la source d'enregistrement."""
    metadata = metadata or WorkoutMetadata()
    report = TransformReport()
    samples = list(samples)

    if kind in INDOOR_KINDS:
        treadmill = build_treadmill_series(samples)
        return LoadedWorkout(
            name=name,
            workout=IndoorWorkout(treadmill=treadmill, metadata=metadata, kind=kind),
            report=report,
            track_count=0,
        )

    track = build_track(samples, report=report)
    return LoadedWorkout(
        name=name,
        workout=OutdoorWorkout(track=track, metadata=metadata, kind=kind),
        report=report,
        track_count=1 if track is not None else 0,
    )
