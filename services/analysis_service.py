"""Orchestration d'une analyse de seance.

Assemble les briques pures de core/ pour une seance (exterieur ou salle).
Ce module ne fait aucune I/O ; voir services.activity_service pour le chargement.
"""

from __future__ import annotations

import logging

import pandas as pd

from core.constants import REPLAY_DURATION_S
from core.interpolation import Position, PositionInterpolator, replay_progress
from core.region import compute_region
from core.route_analysis import analyze_route
from core.series import elevation_series, heart_rate_series
from core.track import Track
from core.track_filter import downsample_track
from core.transform_report import TransformReport
from core.units import UnitPreference
from core.workout import TrackSource
from services.models import AnalysisConfig, WorkoutAnalysis

logger = logging.getLogger("trackscope.analysis")


def filter_track(track: Track | None, config: AnalysisConfig, report: TransformReport | None = None) -> Track | None:
    if track is None:
        return None
    return downsample_track(
        track,
        min_points=config.downsample_min_points,
        target_points=config.target_points,
        min_distance_m=config.min_distance_m,
        max_speed_change_m_s=config.max_speed_change_m_s,
        max_course_change_deg=config.angle_threshold_deg,
        report=report,
    )


def analyze_workout(
    workout: TrackSource,
    units: UnitPreference,
    config: AnalysisConfig | None = None,
    *,
    report: TransformReport | None = None,
    series_points: int | None = None,
) -> WorkoutAnalysis:
    """Analyse complete d'une seance.

    Les splits et les series capteurs utilisent la trace brute (precision) ;
    cadrage et courbe d'allure utilisent la trace reduite.
    """
    config = config or AnalysisConfig()
    report = report if report is not None else TransformReport()

    raw = workout.route_track()
    filtered = filter_track(raw, config, report)

    splits = workout.splits(units, **config.split_thresholds())
    pace_curve = workout.pace_curve(units, track=filtered, **config.pace_curve_options())
    region = compute_region(filtered, padding=config.region_padding, min_span_deg=config.min_region_span_deg)

    if raw is None:
        elevation = pd.Series(dtype=float, name="elevation")
        heart_rate = pd.Series(dtype=float, name="heart_rate")
    else:
        elevation = elevation_series(raw, units, target_points=series_points)
        heart_rate = heart_rate_series(raw, units, target_points=series_points)

    logger.info(
        "analysis_done kind=%s points=%d filtered=%d splits=%d estimated=%d",
        getattr(workout, "kind", "unknown"),
        len(raw) if raw is not None else 0,
        len(filtered) if filtered is not None else 0,
        len(splits),
        int(any(s.is_estimated for s in splits)),
    )
    return WorkoutAnalysis(
        kind=getattr(workout, "kind", "unknown"),
        unit_label=units.distance_label,
        metadata=workout.metadata,
        raw_track=raw,
        filtered_track=filtered,
        splits=splits,
        pace_curve=pace_curve,
        region=region,
        route=analyze_route(raw, units),
        elevation=elevation,
        heart_rate=heart_rate,
        report=report,
    )


class AnalysisSession:
    """Une analyse + une seule trace de progression pour tous les affichages de replay."""

    def __init__(
        self,
        workout: TrackSource,
        units: UnitPreference,
        config: AnalysisConfig | None = None,
    ):
        self.config = config or AnalysisConfig()
        self.units = units
        self.result = analyze_workout(workout, units, self.config)
        if self.config.progress_track == "raw":
            self.progress_track = self.result.raw_track
        else:
            self.progress_track = self.result.filtered_track
        self._interpolator = PositionInterpolator(self.progress_track) if self.progress_track is not None else None

    @property
    def has_replay(self) -> bool:
        return self._interpolator is not None

    def position_at(self, progress: float) -> Position | None:
        if self._interpolator is None:
            return None
        return self._interpolator.position_at(progress)

    def replay_position(self, elapsed_s: float, duration_s: float = REPLAY_DURATION_S) -> Position | None:
        return self.position_at(replay_progress(elapsed_s, duration_s))
