"""Helpers de serialisation.

Convertit les resultats d'analyse (dataclasses, pandas, numpy) en structures
100% JSON-serialisables pour la couche de presentation.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

from core.formatting import format_distance, format_duration_clock, format_pace
from core.track import Track
from core.units import UnitPreference
from services.models import WorkoutAnalysis


def _is_nan(value: Any) -> bool:
    try:
        return bool(value != value)
    except (TypeError, ValueError):
        return False


def _dt_to_iso(value: Any) -> str | None:
    if value is None:
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, (pd.Timestamp, datetime)):
        if pd.isna(value):
            return None
        # Conserve l'info timezone si presente.
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return None


def series_to_points(series: pd.Series | None) -> list[dict[str, Any]]:
    """Serie indexee par distance -> [{"x": distance, "y": valeur}, ...]."""
    if series is None or series.empty:
        return []
    out: list[dict[str, Any]] = []
    for x, y in zip(series.index.to_list(), series.to_list()):
        if _is_nan(y):
            continue
        out.append({"x": to_jsonable(x), "y": to_jsonable(y)})
    return out


def track_to_coordinates(track: Track | None) -> list[list[float]]:
    """Polyligne [[lat, lon], ...] pour la carte."""
    if track is None:
        return []
    return [[p.latitude, p.longitude] for p in track.points]


def to_jsonable(obj: Any) -> Any:
    """Convertit obj en primitives JSON-serialisables.

    Retourne uniquement dict/list/str/int/float/bool/None.
    """

    if obj is None:
        return None

    # Valeurs speciales pandas
    if obj is pd.NaT:
        return None

    if isinstance(obj, (pd.Timestamp, datetime, date)):
        return _dt_to_iso(obj)

    # Scalaire numpy
    if isinstance(obj, np.generic):
        value = obj.item()
        return None if _is_nan(value) else value

    # Scalaires de base
    if isinstance(obj, (str, int, bool)):
        return obj
    if isinstance(obj, float):
        return None if _is_nan(obj) else obj

    # Conteneurs
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, np.ndarray):
        return [to_jsonable(v) for v in obj.tolist()]

    # pandas
    if isinstance(obj, pd.Series):
        return {
            "type": "series",
            "name": str(obj.name) if obj.name is not None else None,
            "points": series_to_points(obj),
        }

    if isinstance(obj, Track):
        return {"type": "Track", "coordinates": track_to_coordinates(obj)}

    # dataclasses
    if is_dataclass(obj):
        out: dict[str, Any] = {"type": obj.__class__.__name__}
        for f in fields(obj):
            out[f.name] = to_jsonable(getattr(obj, f.name))
        return out

    # Fallback
    return str(obj)


def analysis_to_payload(result: WorkoutAnalysis, units: UnitPreference) -> dict[str, Any]:
    """Payload pret a afficher : valeurs brutes + libelles formates."""
    splits = []
    for split in result.splits:
        splits.append(
            {
                "unit_index": split.unit_index,
                "pace": split.pace,
                "pace_label": format_pace(split.pace, units),
                "elapsed_seconds": split.elapsed_seconds,
                "time_label": format_duration_clock(split.elapsed_seconds),
                "distance_label": format_distance(split.distance_m, units),
                "avg_heart_rate": split.avg_heart_rate,
                "avg_cadence": split.avg_cadence,
                "is_partial": split.is_partial,
                "is_estimated": split.is_estimated,
            }
        )

    ingest = result.report.find("ingest")
    return to_jsonable(
        {
            "kind": result.kind,
            "unit": units.distance_label,
            "estimated": result.is_estimated,
            "route": track_to_coordinates(result.filtered_track),
            "region": result.region,
            "splits": splits,
            "pace_curve": [{"x": p.distance, "y": p.pace} for p in result.pace_curve],
            "elevation": series_to_points(result.elevation),
            "heart_rate": series_to_points(result.heart_rate),
            "highlights": result.route,
            "excluded_points": ingest.excluded if ingest is not None else 0,
        }
    )
