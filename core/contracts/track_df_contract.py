"""Contrat DataFrame de trace canonique.

Vue "par point" d'une Track (voir core.track.Track.to_dataframe) et entree
acceptee par core.track.track_from_dataframe.
Objectifs :
- definir un schema stable + invariants
- valider les entrees aux frontieres service
- proposer des coercions "sans danger" (sans masquer les problemes de donnees)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from core.constants import LAT_RANGE, LON_RANGE


SCHEMA_VERSION = "v1"


# Schema stable (les colonnes doivent exister ; les capteurs optionnels peuvent etre NaN).
CANONICAL_COLUMNS: tuple[str, ...] = (
    "lat",
    "lon",
    "elevation",
    "time",
    "distance_m",
    "delta_distance_m",
    "elapsed_time_s",
    "delta_time_s",
    "speed_m_s",
    "course_deg",
    "horizontal_accuracy_m",
    "vertical_accuracy_m",
    "heart_rate",
    "cadence",
)


# Ensemble minimal pour reconstruire une trace.
REQUIRED_COLUMNS: tuple[str, ...] = ("lat", "lon", "time")


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class ValidationReport:
    ok: bool
    issues: list[ValidationIssue]

    def raise_for_issues(self) -> None:
        if self.ok:
            return
        lines = ["Echec de validation du contrat DataFrame de trace:"]
        for issue in self.issues:
            lines.append(f"- {issue.code}: {issue.message}")
        raise ValueError("\n".join(lines))


def coerce_track_df(df: pd.DataFrame) -> pd.DataFrame:
    """Coerce les colonnes vers les dtypes canoniques quand c'est sans risque.

    Ne tente PAS de corriger les problemes semantiques (ex: coordonnees hors bornes).
    """

    if not isinstance(df, pd.DataFrame):
        raise TypeError("df doit etre un pandas.DataFrame")

    out = df.copy()

    for col in CANONICAL_COLUMNS:
        if col not in out.columns:
            out[col] = np.nan

    out["time"] = pd.to_datetime(out["time"], errors="coerce", utc=True)

    for col in CANONICAL_COLUMNS:
        if col == "time":
            continue
        out[col] = pd.to_numeric(out[col], errors="coerce")

    return out


def validate_track_df(
    df: pd.DataFrame,
    *,
    require_columns: tuple[str, ...] = REQUIRED_COLUMNS,
    enforce_coordinate_ranges: bool = True,
    enforce_time_monotone: bool = True,
) -> ValidationReport:
    issues: list[ValidationIssue] = []

    if not isinstance(df, pd.DataFrame):
        return ValidationReport(
            ok=False,
            issues=[ValidationIssue(code="type", message="df doit etre un pandas.DataFrame")],
        )

    missing = [c for c in require_columns if c not in df.columns]
    if missing:
        issues.append(
            ValidationIssue(
                code="missing_columns",
                message=f"Colonnes requises manquantes: {', '.join(missing)}",
                details={"missing": missing},
            )
        )
        return ValidationReport(ok=False, issues=issues)

    if enforce_coordinate_ranges and {"lat", "lon"}.issubset(df.columns):
        lat = pd.to_numeric(df["lat"], errors="coerce").to_numpy(dtype=float)
        lon = pd.to_numeric(df["lon"], errors="coerce").to_numpy(dtype=float)
        bad = (
            ~np.isfinite(lat)
            | ~np.isfinite(lon)
            | (lat < LAT_RANGE[0])
            | (lat > LAT_RANGE[1])
            | (lon < LON_RANGE[0])
            | (lon > LON_RANGE[1])
        )
        if bad.any():
            issues.append(
                ValidationIssue(
                    code="coordinates_out_of_range",
                    message=f"{int(bad.sum())} point(s) avec coordonnees absentes ou hors bornes",
                    details={"count": int(bad.sum())},
                )
            )

    if enforce_time_monotone and "time" in df.columns:
        times = pd.to_datetime(df["time"], errors="coerce", utc=True).dropna()
        if len(times) >= 2 and not times.is_monotonic_increasing:
            issues.append(
                ValidationIssue(
                    code="time_non_monotone",
                    message="time doit etre non-decroissant (la trace sera triee a l'ingestion)",
                )
            )

    return ValidationReport(ok=(len(issues) == 0), issues=issues)


def assert_track_df_contract(df: pd.DataFrame, **kwargs: Any) -> None:
    """Valide et leve ValueError en cas d'echec."""

    validate_track_df(df, **kwargs).raise_for_issues()
