"""Journal des transformations appliquees a une trace (points entrants / sortants)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TransformStep:
    name: str
    points_in: int
    points_out: int
    reason: str
    details: dict[str, Any] | None = None

    @property
    def excluded(self) -> int:
        return max(0, self.points_in - self.points_out)


@dataclass
class TransformReport:
    steps: list[TransformStep] = field(default_factory=list)

    def add(
        self,
        name: str,
        *,
        points_in: int,
        points_out: int,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.steps.append(
            TransformStep(
                name=str(name),
                points_in=int(points_in),
                points_out=int(points_out),
                reason=str(reason),
                details=details,
            )
        )

    def total_excluded(self) -> int:
        return sum(step.excluded for step in self.steps)

    def find(self, name: str) -> TransformStep | None:
        for step in self.steps:
            if step.name == name:
                return step
        return None
