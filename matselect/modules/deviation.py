"""Per-property deviation of ranked materials from the requested targets.

Deviation is a percentage of the target, except when the target is ``0``:
then the plain difference is reported. The total absolute deviation gives a
second ordering of the shortlist, independent of the distance score, and
both orderings are kept available.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Sequence

from .catalog import RankedMaterial, RequirementSpec, ensure_requirements

VERY_CLOSE = "very_close"
CLOSE = "close"
SOMEWHAT_CLOSE = "somewhat_close"
FAR = "far"

# Upper bound of the relative difference for each band, tightest first.
CLOSENESS_BANDS: tuple[tuple[float, str], ...] = (
    (0.05, VERY_CLOSE),
    (0.15, CLOSE),
    (0.30, SOMEWHAT_CLOSE),
)


def deviation(value: float, target: float) -> float:
    """Signed deviation of ``value``: percent of ``target``, or absolute if it is 0."""

    if target != 0:
        return (value - target) / target * 100.0
    return value - target


def is_percentage(target: float) -> bool:
    return target != 0


@dataclass(frozen=True)
class DeviationRow:
    label: str
    rank: int
    distance_score: float
    deviations: Mapping[str, float]

    @property
    def total_absolute(self) -> float:
        return sum(abs(value) for value in self.deviations.values())

    def as_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "rank": self.rank,
            "distance_score": self.distance_score,
            "deviations": dict(self.deviations),
            "total_absolute_deviation": self.total_absolute,
        }


def deviations(
    ranked: Iterable[RankedMaterial],
    requirements: RequirementSpec | Mapping[str, Any],
) -> list[DeviationRow]:
    """Deviation of every ranked material, kept in distance-score order.

    Every requirement property is reported, including zero-weight ones.
    Missing record values count as ``0``.
    """

    targets = ensure_requirements(requirements)
    rows: list[DeviationRow] = []
    for material in ranked:
        values = {
            prop: deviation(material.numeric(prop, 0.0), targets.target(prop))
            for prop in targets
        }
        rows.append(
            DeviationRow(
                label=material.label,
                rank=material.rank,
                distance_score=material.distance_score,
                deviations=values,
            )
        )
    return rows


def order_by_total_deviation(rows: Sequence[DeviationRow]) -> list[DeviationRow]:
    """Rows sorted by total absolute deviation; ties keep their input order."""

    return sorted(rows, key=lambda row: row.total_absolute)


def closeness_band(value: float, target: float) -> str:
    """Classify ``value`` against ``target`` by relative difference.

    The bands are relative to ``target``, which is undefined for a zero
    target. In that case only an exact match is ``very_close``; every other
    value is ``far``, with no intermediate band.
    """

    if target == 0:
        return VERY_CLOSE if value == 0 else FAR
    relative = abs((value - target) / target)
    for limit, band in CLOSENESS_BANDS:
        if relative <= limit:
            return band
    return FAR


def closeness_table(
    ranked: Iterable[RankedMaterial],
    requirements: RequirementSpec | Mapping[str, Any],
    prop: str,
) -> list[tuple[str, float, str]]:
    """``(label, value, band)`` for one property across a ranking."""

    targets = ensure_requirements(requirements)
    target = targets.target(prop)
    table: list[tuple[str, float, str]] = []
    for material in ranked:
        value = material.numeric(prop, 0.0)
        table.append((material.label, value, closeness_band(value, target)))
    return table


__all__ = [
    "VERY_CLOSE",
    "CLOSE",
    "SOMEWHAT_CLOSE",
    "FAR",
    "CLOSENESS_BANDS",
    "deviation",
    "is_percentage",
    "DeviationRow",
    "deviations",
    "order_by_total_deviation",
    "closeness_band",
    "closeness_table",
]
