"""Preference d'unites (metrique / imperial).

Valeur explicite passee aux frontieres (formatage, conversion d'allure) ;
les algorithmes de core/ travaillent en metres et secondes.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import METERS_PER_KM, METERS_PER_MILE


@dataclass(frozen=True)
class UnitPreference:
    metric: bool = True

    @classmethod
    def from_label(cls, label: str) -> "UnitPreference":
        text = (label or "").strip().lower()
        if text in {"imperial", "mi", "mile", "miles"}:
            return cls(metric=False)
        return cls(metric=True)

    @property
    def unit_distance_m(self) -> float:
        return METERS_PER_KM if self.metric else METERS_PER_MILE

    @property
    def distance_label(self) -> str:
        return "km" if self.metric else "mi"

    @property
    def pace_label(self) -> str:
        return "/km" if self.metric else "/mi"

    @property
    def elevation_label(self) -> str:
        return "m" if self.metric else "ft"

    def to_units(self, meters: float) -> float:
        """Convertit des metres dans l'unite de distance choisie."""
        return meters / self.unit_distance_m


METRIC = UnitPreference(metric=True)
IMPERIAL = UnitPreference(metric=False)
