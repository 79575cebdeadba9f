"""Constantes partagees du moteur d'analyse de trace.

Ce module centralise les seuils et valeurs par defaut utilises dans core/ et services/.
Garder ce module sans dependances (hors stdlib).
"""

from __future__ import annotations


# Unites de distance (metres).
METERS_PER_KM: float = 1000.0
METERS_PER_MILE: float = 1609.34
FEET_PER_METER: float = 3.28084

# Bornes de validite des coordonnees (degres).
LAT_RANGE: tuple[float, float] = (-90.0, 90.0)
LON_RANGE: tuple[float, float] = (-180.0, 180.0)

# Reduction de trace (downsampling).
DOWNSAMPLE_MIN_POINTS: int = 50  # en dessous : trace renvoyee telle quelle
DOWNSAMPLE_TARGET_POINTS: int = 200
DOWNSAMPLE_MIN_DISTANCE_M: float = 10.0
DOWNSAMPLE_MAX_SPEED_CHANGE_M_S: float = 1.0
DOWNSAMPLE_MAX_COURSE_CHANGE_DEG: float = 20.0

# Splits.
JUMP_THRESHOLD_M: float = 100.0  # segment plus long = saut GPS potentiel
# Un segment long n'est un saut que si la vitesse implicite est irrealiste
# (~72 km/h, couvre le velo en descente).
JUMP_MAX_SPEED_M_S: float = 20.0
PARTIAL_SPLIT_MIN_FRACTION: float = 0.2
PARTIAL_SPLIT_MIN_DISTANCE_M: float = 100.0
SPLIT_MIN_PACE_MIN: float = 3.0
SPLIT_MAX_PACE_MIN: float = 30.0

# Detection d'horodatages degeneres (ecritures en rafale).
DEGENERATE_MAX_SPAN_S: float = 10.0
DEGENERATE_MIN_POINTS: int = 10

# Allure par defaut quand les metadonnees sont inexploitables (~10 min/mile).
DEFAULT_PACE_S_PER_M: float = 600.0 / METERS_PER_MILE

# Duree minimale (s) pour synthetiser des splits depuis les metadonnees.
SYNTHESIS_MIN_DURATION_S: float = 10.0

# Courbe d'allure.
PACE_CURVE_TARGET_BINS: int = 50
PACE_CURVE_MIN_CHUNK: int = 5
PACE_CURVE_MIN_POINTS: int = 5
PACE_CURVE_MIN_PACE_MIN: float = 3.0
PACE_CURVE_MAX_PACE_MIN: float = 20.0

# Cadrage carte.
REGION_PADDING: float = 0.15  # fraction de l'etendue ajoutee de chaque cote
REGION_PADDING_WIDE: float = 0.30
REGION_MIN_SPAN_DEG: float = 0.005

# Replay anime.
REPLAY_DURATION_S: float = 10.0
