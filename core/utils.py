import math
from typing import Union


def mmss_to_seconds(value: str) -> int:
    """
    Convertit une chaîne "M:SS" ou "MM:SS" en nombre de secondes.
    """
    if not isinstance(value, str):
        raise ValueError("La valeur doit être une chaîne.")

    text = value.strip()
    if ":" not in text:
        raise ValueError("Format attendu M:SS.")

    minutes_str, seconds_str = text.split(":", 1)
    minutes = int(minutes_str)
    seconds = int(seconds_str)
    if minutes < 0:
        raise ValueError("Minutes négatives interdites.")
    if seconds < 0 or seconds >= 60:
        raise ValueError("Secondes invalides dans l'allure.")
    return minutes * 60 + seconds


def seconds_to_mmss(seconds: Union[int, float]) -> str:
    """
    Convertit un nombre de secondes en format M:SS.
    """
    total_seconds = int(round(seconds))
    minutes = total_seconds // 60
    secs = total_seconds % 60
    return f"{minutes}:{secs:02d}"


def pace_s_per_m_to_min_per_unit(pace_s_per_m: float, unit_distance_m: float) -> float:
    """
    Convertit une allure en s/m vers des minutes par unite (km ou mile).
    """
    if pace_s_per_m <= 0 or not math.isfinite(pace_s_per_m):
        return math.nan
    return pace_s_per_m * unit_distance_m / 60.0
