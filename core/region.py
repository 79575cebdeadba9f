"""Cadrage carte : centre + etendue encadrant toute la trace."""

from __future__ import annotations

import math
from dataclasses import dataclass

from core.constants import REGION_MIN_SPAN_DEG, REGION_PADDING
from core.geo import bounding_box
from core.track import Track

# Au-dela, cos(lat) tend vers 0 et la correction d'aspect explose.
_MAX_ASPECT_LAT_DEG = 85.0


@dataclass(frozen=True)
class MapRegion:
    center_lat: float
    center_lon: float
    lat_span: float
    lon_span: float

    @property
    def min_lat(self) -> float:
        return self.center_lat - self.lat_span / 2.0

    @property
    def max_lat(self) -> float:
        return self.center_lat + self.lat_span / 2.0

    @property
    def min_lon(self) -> float:
        return self.center_lon - self.lon_span / 2.0

    @property
    def max_lon(self) -> float:
        return self.center_lon + self.lon_span / 2.0


def compute_region(
    track: Track | None,
    *,
    padding: float = REGION_PADDING,
    min_span_deg: float = REGION_MIN_SPAN_DEG,
    aspect_ratio: float | None = None,
) -> MapRegion | None:
    """Cadre la trace.

    padding : fraction de l'etendue ajoutee de chaque cote (0.15 -> etendue x 1.3).
    aspect_ratio : largeur / hauteur de la vue ; si fourni, l'etendue est elargie
    (jamais reduite) pour que la trace tienne dans la vue a l'echelle locale.
    """
    if track is None:
        return None
    min_lat, max_lat, min_lon, max_lon = bounding_box(track.points)
    center_lat = (min_lat + max_lat) / 2.0
    center_lon = (min_lon + max_lon) / 2.0

    scale = 1.0 + 2.0 * max(0.0, padding)
    lat_span = max((max_lat - min_lat) * scale, min_span_deg)
    lon_span = max((max_lon - min_lon) * scale, min_span_deg)

    if aspect_ratio is not None and aspect_ratio > 0:
        cos_lat = math.cos(math.radians(min(abs(center_lat), _MAX_ASPECT_LAT_DEG)))
        # Etendues exprimees en "degres de latitude" pour comparer les deux axes.
        width = lon_span * cos_lat
        height = lat_span
        if width / height < aspect_ratio:
            lon_span = height * aspect_ratio / cos_lat
        else:
            lat_span = width / aspect_ratio

    return MapRegion(center_lat=center_lat, center_lon=center_lon, lat_span=lat_span, lon_span=lon_span)
