"""Reduction de trace (downsampling) en une passe gloutonne.

Conserve toujours le premier et le dernier point. Un point visite (pas de
len/target) est retenu si l'un des declencheurs se produit par rapport au
dernier point retenu :
- distance >= min_distance_m
- ecart de vitesse > max_speed_change ou ecart de cap > max_course_change
- angle : cap(prev -> courant) et cap(courant -> next) different de plus de max_course_change
"""

from __future__ import annotations

import logging

from core.constants import (
    DOWNSAMPLE_MAX_COURSE_CHANGE_DEG,
    DOWNSAMPLE_MAX_SPEED_CHANGE_M_S,
    DOWNSAMPLE_MIN_DISTANCE_M,
    DOWNSAMPLE_MIN_POINTS,
    DOWNSAMPLE_TARGET_POINTS,
)
from core.geo import bearing, distance
from core.track import Track, TrackPoint
from core.transform_report import TransformReport

logger = logging.getLogger("trackscope.filter")


def _should_retain(
    points: tuple[TrackPoint, ...],
    i: int,
    last_kept: TrackPoint,
    *,
    min_distance_m: float,
    max_speed_change_m_s: float,
    max_course_change_deg: float,
) -> bool:
    current = points[i]
    if distance(last_kept, current) >= min_distance_m:
        return True

    if abs(current.speed - last_kept.speed) > max_speed_change_m_s:
        return True
    if abs(current.course - last_kept.course) > max_course_change_deg:
        return True

    if 0 < i < len(points) - 1:
        incoming = bearing(points[i - 1], current)
        outgoing = bearing(current, points[i + 1])
        if abs(incoming - outgoing) > max_course_change_deg:
            return True
    return False


def downsample_track(
    track: Track,
    *,
    min_points: int = DOWNSAMPLE_MIN_POINTS,
    target_points: int = DOWNSAMPLE_TARGET_POINTS,
    min_distance_m: float = DOWNSAMPLE_MIN_DISTANCE_M,
    max_speed_change_m_s: float = DOWNSAMPLE_MAX_SPEED_CHANGE_M_S,
    max_course_change_deg: float = DOWNSAMPLE_MAX_COURSE_CHANGE_DEG,
    report: TransformReport | None = None,
) -> Track:
    """Retourne une trace reduite ; la trace d'entree si len(track) <= min_points."""
    points = track.points
    n = len(points)
    if n <= min_points:
        return track

    step = max(1, n // max(1, int(target_points)))
    kept: list[TrackPoint] = [points[0]]
    last_kept_index = 0

    for i in range(1, n - 1, step):
        if _should_retain(
            points,
            i,
            points[last_kept_index],
            min_distance_m=min_distance_m,
            max_speed_change_m_s=max_speed_change_m_s,
            max_course_change_deg=max_course_change_deg,
        ):
            kept.append(points[i])
            last_kept_index = i

    if last_kept_index != n - 1:
        kept.append(points[-1])

    if report is not None:
        report.add(
            "downsample",
            points_in=n,
            points_out=len(kept),
            reason="reduction gloutonne (distance / cinematique / angle)",
            details={"step": step},
        )
    logger.debug("downsample points_in=%d points_out=%d step=%d", n, len(kept), step)
    return Track(tuple(kept))
