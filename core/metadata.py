"""Metadonnees d'une seance et parsing des textes rapportes par la source.

Formats rencontres :
- distance : "5.8 mi", "8.4 km", "5.8" (nombre nu = miles)
- duree : "H:MM:SS" ou "MM:SS"
- allure : "8:30/mi", "5:15 /km", "8:30" ou "8.5" (nu = min/mile)

Un texte illisible est traite comme absent (None), jamais comme une erreur.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from core.constants import METERS_PER_KM, METERS_PER_MILE
from core.utils import mmss_to_seconds

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def _to_float(text: str) -> float | None:
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def parse_distance_text(raw: str | None) -> float | None:
    """Parse une distance rapportee ; retourne des metres."""
    if raw is None:
        return None
    text = str(raw).strip().lower()
    if not text:
        return None

    value = _to_float(text)
    if value is not None:
        return value * METERS_PER_MILE if value >= 0 else None

    match = _NUMBER_RE.search(text)
    if match is None:
        return None
    value = float(match.group(0))
    if "km" in text or "kilomet" in text:
        return value * METERS_PER_KM
    return value * METERS_PER_MILE


def parse_duration_text(raw: str | None) -> float | None:
    """Parse "H:MM:SS" ou "MM:SS" ; retourne des secondes."""
    if raw is None:
        return None
    parts = str(raw).strip().split(":")
    values = [_to_float(p.strip()) for p in parts]
    if any(v is None or v < 0 for v in values):
        return None
    if len(values) == 3:
        hours, minutes, seconds = values
        return hours * 3600 + minutes * 60 + seconds
    if len(values) == 2:
        minutes, seconds = values
        return minutes * 60 + seconds
    return None


def parse_pace_text(raw: str | None) -> float | None:
    """Parse une allure rapportee ; retourne des secondes par metre."""
    if raw is None:
        return None
    text = str(raw).strip().lower()
    if not text:
        return None

    unit_m = METERS_PER_KM if "/km" in text or "/kilomet" in text else METERS_PER_MILE
    body = text.split("/")[0].strip()

    minutes = _to_float(body)
    if minutes is not None:
        seconds = minutes * 60.0
    else:
        # "8:30 min" -> "8:30"
        body = body.split()[0] if body.split() else body
        try:
            seconds = float(mmss_to_seconds(body))
        except ValueError:
            return None

    if seconds <= 0:
        return None
    return seconds / unit_m


@dataclass(frozen=True)
class WorkoutMetadata:
    """Valeurs globales rapportees par la source (repli quand les echantillons manquent)."""

    reported_distance_text: str | None = None
    reported_duration_text: str | None = None
    reported_avg_pace_text: str | None = None
    avg_heart_rate: float | None = None
    avg_cadence: float | None = None
    max_heart_rate: float | None = None

    @property
    def distance_m(self) -> float | None:
        return parse_distance_text(self.reported_distance_text)

    @property
    def duration_s(self) -> float | None:
        return parse_duration_text(self.reported_duration_text)

    @property
    def avg_pace_s_per_m(self) -> float | None:
        return parse_pace_text(self.reported_avg_pace_text)

    def average_pace_s_per_m(self) -> float | None:
        """Allure moyenne : texte d'allure si lisible, sinon duree / distance."""
        pace = self.avg_pace_s_per_m
        if pace is not None:
            return pace
        distance = self.distance_m
        duration = self.duration_s
        if distance and duration and distance > 0 and duration > 0:
            return duration / distance
        return None
