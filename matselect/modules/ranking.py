"""Similarity ranking of catalog materials against a requirements vector.

Each property is min/max normalized over the whole catalog, then a weighted
Euclidean distance between the normalized target and the normalized record
value is accumulated. Properties that are constant across the catalog are
skipped rather than contributing an arbitrary zero. Lower scores are better
and are only comparable within one call, since the normalization depends on
the catalog passed to that call.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Dict, Iterable, Mapping

from .catalog import (
    MaterialCatalog,
    MaterialRecord,
    RankedMaterial,
    RequirementSpec,
    ensure_catalog,
    ensure_requirements,
)
from .errors import InputPreconditionError
from .normalization import PropertyBounds, catalog_bounds, normalize
from .schema import PROPERTY_COLUMNS

LOGGER = logging.getLogger(__name__)

DEFAULT_TOP_K = 5


def score_material(
    record: MaterialRecord,
    requirements: RequirementSpec,
    bounds: Mapping[str, PropertyBounds],
) -> tuple[float, Dict[str, float]]:
    """Return ``(distance_score, contributions)`` for a single record.

    ``contributions`` holds the weighted squared term of every property that
    took part in the score; skipped (zero-range) properties are absent.
    Missing record values count as ``0`` before normalization.
    """

    contributions: Dict[str, float] = {}
    for prop in PROPERTY_COLUMNS:
        prop_bounds = bounds[prop]
        norm_target = normalize(requirements.target(prop), prop_bounds)
        if norm_target is None:
            continue
        norm_value = normalize(record.numeric(prop, 0.0), prop_bounds)
        contributions[prop] = requirements.weight(prop) * (norm_target - norm_value) ** 2

    total = sum(contributions.values())
    return math.sqrt(total), contributions


def _resolve_k(k: int | None, size: int) -> int:
    if k is None:
        return size
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InputPreconditionError(f"k must be an integer, got {k!r}")
    if k < 1:
        raise InputPreconditionError(f"k must be at least 1, got {k}")
    return min(int(k), size)


def rank(
    catalog: MaterialCatalog | Iterable[Mapping[str, Any]],
    requirements: RequirementSpec | Mapping[str, Any],
    k: int | None = DEFAULT_TOP_K,
) -> list[RankedMaterial]:
    """Rank ``catalog`` by distance to ``requirements`` and keep the best ``k``.

    Ties keep the catalog order. ``k=None`` returns every record; a ``k``
    larger than the catalog returns the whole catalog without padding. An
    empty catalog yields an empty list.
    """

    snapshot = ensure_catalog(catalog)
    targets = ensure_requirements(requirements)
    limit = _resolve_k(k, len(snapshot))
    if not len(snapshot):
        return []

    bounds = catalog_bounds(snapshot, PROPERTY_COLUMNS)
    skipped = [prop for prop, b in bounds.items() if b.is_degenerate]
    if skipped:
        LOGGER.debug("Skipping zero-range properties in distance: %s", ", ".join(skipped))

    scored = [
        (index, *score_material(record, targets, bounds))
        for index, record in enumerate(snapshot)
    ]
    # ``sorted`` is stable, so equal scores stay in catalog order.
    scored.sort(key=lambda item: item[1])

    ranked: list[RankedMaterial] = []
    for position, (index, score, contributions) in enumerate(scored[:limit], start=1):
        ranked.append(
            RankedMaterial(
                record=snapshot[index],
                distance_score=float(score),
                rank=position,
                contributions=contributions,
            )
        )
    return ranked


def recommended_labels(ranked: Iterable[RankedMaterial]) -> frozenset[str]:
    """Labels of a ranking, used to flag recommended points in projections."""

    return frozenset(material.label for material in ranked)


__all__ = [
    "DEFAULT_TOP_K",
    "score_material",
    "rank",
    "recommended_labels",
]
