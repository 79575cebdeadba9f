from __future__ import annotations

import math
from typing import IO, Any, Dict, List
from xml.etree import ElementTree as ET

import gpxpy

from core.geo import bearing
from core.track import Track, build_track
from core.transform_report import TransformReport

HR_TAGS = {"hr", "heart_rate", "heartrate"}
CAD_TAGS = {"cad", "cadence"}


def _decode_gpx_bytes(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        try:
            return content.decode("latin-1")
        except UnicodeDecodeError:
            return content.decode("utf-8", errors="replace")


def _local_tag(tag: str | None) -> str:
    if not tag:
        return ""
    return tag.split("}")[-1].lower()


def _extract_extension_value(extensions: list[ET.Element] | None, targets: set[str]) -> float | None:
    if not extensions:
        return None
    for ext in extensions:
        for elem in ext.iter():
            local = _local_tag(elem.tag)
            if local in targets:
                try:
                    return float(elem.text)
                except (TypeError, ValueError):
                    continue
    return None


def load_gpx(file: IO[bytes]) -> gpxpy.gpx.GPX:
    """
    Lit un fichier GPX (file-like binaire ou texte) et retourne l'objet GPX.
    """
    content = file.read()
    if isinstance(content, (bytes, bytearray)):
        text = _decode_gpx_bytes(bytes(content))
    else:
        text = str(content)
    return gpxpy.parse(text)


def gpx_to_samples(gpx: gpxpy.gpx.GPX) -> List[Dict[str, Any]]:
    """
    Aplatit les segments GPX en echantillons bruts (format accepte par build_track).

    Vitesse et cap absents du GPX 1.1 : derives du point precedent du meme segment.
    """
    samples: List[Dict[str, Any]] = []
    for track in gpx.tracks:
        for segment in track.segments:
            prev_point = None
            for point in segment.points:
                speed = getattr(point, "speed", None)
                if speed is None and prev_point is not None:
                    speed = point.speed_between(prev_point)
                course = getattr(point, "course", None)
                if course is None and prev_point is not None:
                    course = bearing(prev_point, point)

                samples.append(
                    {
                        "latitude": point.latitude,
                        "longitude": point.longitude,
                        "altitude": point.elevation,
                        "timestamp": point.time,
                        "horizontalAccuracy": point.horizontal_dilution,
                        "verticalAccuracy": point.vertical_dilution,
                        "speed": speed if speed is not None and math.isfinite(speed) else None,
                        "course": course,
                        "heartRate": _extract_extension_value(point.extensions, HR_TAGS),
                        "cadence": _extract_extension_value(point.extensions, CAD_TAGS),
                    }
                )
                prev_point = point
    return samples


def gpx_to_track(gpx: gpxpy.gpx.GPX, *, report: TransformReport | None = None) -> Track | None:
    """
    Transforme un GPX en Track (None si aucun point exploitable).
    """
    return build_track(gpx_to_samples(gpx), report=report)
