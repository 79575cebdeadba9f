from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Literal, Mapping

import pandas as pd

from core.constants import (
    DOWNSAMPLE_MAX_COURSE_CHANGE_DEG,
    DOWNSAMPLE_MAX_SPEED_CHANGE_M_S,
    DOWNSAMPLE_MIN_DISTANCE_M,
    DOWNSAMPLE_MIN_POINTS,
    DOWNSAMPLE_TARGET_POINTS,
    JUMP_MAX_SPEED_M_S,
    JUMP_THRESHOLD_M,
    PACE_CURVE_MAX_PACE_MIN,
    PACE_CURVE_MIN_PACE_MIN,
    PACE_CURVE_TARGET_BINS,
    REGION_MIN_SPAN_DEG,
    REGION_PADDING,
    SPLIT_MAX_PACE_MIN,
    SPLIT_MIN_PACE_MIN,
)
from core.metadata import WorkoutMetadata
from core.pace_curve import PacePoint
from core.region import MapRegion
from core.route_analysis import RouteAnalysis
from core.splits import Split
from core.track import Track
from core.transform_report import TransformReport

logger = logging.getLogger("trackscope.config")

ENV_PREFIX = "TRACKSCOPE_"

ProgressTrackChoice = Literal["filtered", "raw"]


@dataclass(frozen=True)
class AnalysisConfig:
    """Seuils ajustables du moteur (valeurs par defaut : core.constants)."""

    downsample_min_points: int = DOWNSAMPLE_MIN_POINTS
    target_points: int = DOWNSAMPLE_TARGET_POINTS
    min_distance_m: float = DOWNSAMPLE_MIN_DISTANCE_M
    max_speed_change_m_s: float = DOWNSAMPLE_MAX_SPEED_CHANGE_M_S
    angle_threshold_deg: float = DOWNSAMPLE_MAX_COURSE_CHANGE_DEG
    jump_threshold_m: float = JUMP_THRESHOLD_M
    jump_max_speed_m_s: float = JUMP_MAX_SPEED_M_S
    split_min_pace: float = SPLIT_MIN_PACE_MIN
    split_max_pace: float = SPLIT_MAX_PACE_MIN
    pace_curve_bins: int = PACE_CURVE_TARGET_BINS
    pace_curve_min_pace: float = PACE_CURVE_MIN_PACE_MIN
    pace_curve_max_pace: float = PACE_CURVE_MAX_PACE_MIN
    region_padding: float = REGION_PADDING
    min_region_span_deg: float = REGION_MIN_SPAN_DEG
    progress_track: ProgressTrackChoice = "filtered"

    # Variable d'environnement -> champ.
    ENV_FIELDS = {
        "JUMP_THRESHOLD_M": "jump_threshold_m",
        "ANGLE_THRESHOLD_DEG": "angle_threshold_deg",
        "REGION_PADDING": "region_padding",
        "MIN_REGION_SPAN_DEG": "min_region_span_deg",
        "TARGET_POINTS": "target_points",
    }

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "AnalysisConfig":
        """Surcharge les valeurs par defaut depuis TRACKSCOPE_* (valeurs illisibles ignorees)."""
        env = os.environ if environ is None else environ
        types = {f.name: f.type for f in fields(cls)}
        values: dict[str, Any] = {}
        for suffix, name in cls.ENV_FIELDS.items():
            raw = env.get(ENV_PREFIX + suffix)
            if raw is None or not str(raw).strip():
                continue
            try:
                value = int(raw) if types[name] in (int, "int") else float(raw)
            except ValueError:
                logger.warning("config_env_ignored var=%s%s value=%r", ENV_PREFIX, suffix, raw)
                continue
            values[name] = value
        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        return replace(self, **overrides)

    def split_thresholds(self) -> dict[str, float]:
        return {
            "jump_threshold_m": self.jump_threshold_m,
            "jump_max_speed_m_s": self.jump_max_speed_m_s,
            "min_pace": self.split_min_pace,
            "max_pace": self.split_max_pace,
        }

    def pace_curve_options(self) -> dict[str, float]:
        return {
            "target_bins": self.pace_curve_bins,
            "min_pace": self.pace_curve_min_pace,
            "max_pace": self.pace_curve_max_pace,
        }


@dataclass(frozen=True)
class LoadedWorkout:
    name: str
    workout: Any  # OutdoorWorkout | IndoorWorkout
    report: TransformReport
    track_count: int


@dataclass(frozen=True)
class WorkoutAnalysis:
    """Resultat complet d'une analyse (recalcule integralement, jamais mis a jour)."""

    kind: str
    unit_label: str
    metadata: WorkoutMetadata
    raw_track: Track | None
    filtered_track: Track | None
    splits: list[Split]
    pace_curve: list[PacePoint]
    region: MapRegion | None
    route: RouteAnalysis | None
    elevation: pd.Series
    heart_rate: pd.Series
    report: TransformReport = field(default_factory=TransformReport)

    @property
    def is_estimated(self) -> bool:
        return any(s.is_estimated for s in self.splits)

    @property
    def has_route(self) -> bool:
        return self.raw_track is not None
