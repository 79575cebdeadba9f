"""Primitives geodesiques : distance, cap initial, boite englobante."""

from __future__ import annotations

import math
from typing import Protocol, Sequence

import numpy as np
from gpxpy import geo as gpx_geo


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


def distance(a: HasCoordinates, b: HasCoordinates) -> float:
    """Distance orthodromique (haversine) en metres."""
    return float(gpx_geo.haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude))


def bearing(origin: HasCoordinates, target: HasCoordinates) -> float:
    """Cap initial de origin vers target, en degres dans [0, 360)."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    d_lon = math.radians(target.longitude - origin.longitude)

    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    heading = math.degrees(math.atan2(y, x))
    if heading < 0:
        heading += 360.0
    # -1e-17 + 360 arrondit a 360.0 : on reste dans [0, 360).
    return heading % 360.0


def bounding_box(points: Sequence[HasCoordinates]) -> tuple[float, float, float, float]:
    """Retourne (min_lat, max_lat, min_lon, max_lon).

    Precondition : points non vide (ValueError sinon).
    """
    if len(points) == 0:
        raise ValueError("bounding_box requiert au moins un point")
    lats = np.fromiter((p.latitude for p in points), dtype=float, count=len(points))
    lons = np.fromiter((p.longitude for p in points), dtype=float, count=len(points))
    return float(lats.min()), float(lats.max()), float(lons.min()), float(lons.max())


def segment_distances(points: Sequence[HasCoordinates]) -> np.ndarray:
    """Distances (m) entre points consecutifs ; longueur len(points) - 1."""
    if len(points) < 2:
        return np.zeros(0, dtype=float)
    return np.array([distance(points[i - 1], points[i]) for i in range(1, len(points))], dtype=float)
