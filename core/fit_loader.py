from __future__ import annotations

from typing import IO, Any, Dict, List

from fitparse import FitFile

from core.track import Track, TreadmillSeries, build_track, build_treadmill_series
from core.transform_report import TransformReport


SEMICIRCLE_TO_DEG = 180.0 / (2**31)


def _semicircle_to_deg(value: float | int | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value) * SEMICIRCLE_TO_DEG
    except (TypeError, ValueError):
        return None


def _first_value(record: Any, *names: str) -> Any:
    for name in names:
        value = record.get_value(name)
        if value is not None:
            return value
    return None


def load_fit(file: IO[bytes]) -> FitFile:
    """Lit un fichier FIT (file-like) et retourne l'objet FitFile."""
    return FitFile(file)


def fit_to_samples(fitfile: FitFile) -> List[Dict[str, Any]]:
    """
    Messages "record" du FIT en echantillons bruts (format accepte par build_track).

    La distance cumulee de l'appareil est conservee sous "distance" (seances tapis).
    """
    samples: List[Dict[str, Any]] = []
    for record in fitfile.get_messages("record"):
        samples.append(
            {
                "latitude": _semicircle_to_deg(record.get_value("position_lat")),
                "longitude": _semicircle_to_deg(record.get_value("position_long")),
                "altitude": _first_value(record, "enhanced_altitude", "altitude"),
                "timestamp": record.get_value("timestamp"),
                "speed": _first_value(record, "enhanced_speed", "speed"),
                "heartRate": record.get_value("heart_rate"),
                "cadence": record.get_value("cadence"),
                "distance": record.get_value("distance"),
            }
        )
    return samples


def has_positions(samples: List[Dict[str, Any]]) -> bool:
    return any(s.get("latitude") is not None and s.get("longitude") is not None for s in samples)


def fit_to_track(fitfile: FitFile, *, report: TransformReport | None = None) -> Track | None:
    """Transforme un FIT en Track (None si aucun point positionne)."""
    return build_track(fit_to_samples(fitfile), report=report)


def fit_to_treadmill(fitfile: FitFile) -> TreadmillSeries | None:
    return build_treadmill_series(fit_to_samples(fitfile))
