"""Min/max and z-score normalization shared by the ranker, PCA and displays.

Two policies coexist for a property whose values are all equal:

* ranking mode (:func:`normalize`) reports ``None`` so the caller skips the
  term entirely;
* display mode (:func:`display_normalize`) maps every value to ``0.5``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence

import numpy as np

from .catalog import MaterialCatalog, MaterialRecord, RankedMaterial, RequirementSpec

LOGGER = logging.getLogger(__name__)

DISPLAY_MIDPOINT = 0.5
_FLAT_TOLERANCE = 1e-12


@dataclass(frozen=True)
class PropertyBounds:
    """Observed ``[minimum, maximum]`` of one property across a record set."""

    minimum: float
    maximum: float

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    @property
    def is_degenerate(self) -> bool:
        return self.span == 0


def _bounds_from_values(values: Iterable[float]) -> PropertyBounds:
    array = np.asarray(list(values), dtype=float)
    if array.size == 0:
        return PropertyBounds(0.0, 0.0)
    return PropertyBounds(float(array.min()), float(array.max()))


def property_bounds(catalog: MaterialCatalog, prop: str) -> PropertyBounds:
    """Return min/max of ``prop`` over ``catalog`` with missing values read as 0."""

    bounds = _bounds_from_values(catalog.column(prop, missing=0.0))
    if bounds.is_degenerate and len(catalog):
        LOGGER.debug("Property %s is constant (%s) across the catalog", prop, bounds.minimum)
    return bounds


def catalog_bounds(catalog: MaterialCatalog, properties: Sequence[str]) -> Dict[str, PropertyBounds]:
    return {prop: property_bounds(catalog, prop) for prop in properties}


def normalize(value: float, bounds: PropertyBounds) -> float | None:
    """Map ``value`` into ``bounds``; ``None`` when the property has no range."""

    if bounds.is_degenerate:
        return None
    return (float(value) - bounds.minimum) / bounds.span


def display_normalize(value: float, bounds: PropertyBounds) -> float:
    """Map ``value`` into ``bounds`` for charts, using the midpoint when flat."""

    scaled = normalize(value, bounds)
    return DISPLAY_MIDPOINT if scaled is None else scaled


def radar_bounds(
    materials: Sequence[RankedMaterial | MaterialRecord],
    requirements: RequirementSpec,
) -> Dict[str, PropertyBounds]:
    """Bounds over a ranked subset widened to include each target value.

    Radar-style comparisons normalize the shortlisted materials together with
    the requirement itself so the target never falls outside ``[0, 1]``.
    """

    result: Dict[str, PropertyBounds] = {}
    for prop in requirements:
        values = [material.numeric(prop, 0.0) for material in materials]
        values.append(requirements.target(prop))
        result[prop] = _bounds_from_values(values)
    return result


def radar_profile(
    materials: Sequence[RankedMaterial | MaterialRecord],
    requirements: RequirementSpec,
) -> Dict[str, Dict[str, float]]:
    """Display-normalized values keyed by label, plus a ``"requirements"`` row."""

    bounds = radar_bounds(materials, requirements)
    profile: Dict[str, Dict[str, float]] = {
        "requirements": {
            prop: display_normalize(requirements.target(prop), bounds[prop])
            for prop in requirements
        }
    }
    for material in materials:
        profile[material.label] = {
            prop: display_normalize(material.numeric(prop, 0.0), bounds[prop])
            for prop in requirements
        }
    return profile


def slider_bounds(catalog: MaterialCatalog, prop: str) -> PropertyBounds:
    """Input range offered for a target value, never collapsed to a point."""

    bounds = property_bounds(catalog, prop)
    if not bounds.is_degenerate:
        return bounds
    if bounds.minimum == 0:
        return PropertyBounds(0.0, 0.001)
    low, high = sorted((bounds.minimum * 0.99, bounds.maximum * 1.01))
    return PropertyBounds(low, high)


def standardize(matrix: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Z-score each column using the population standard deviation.

    Columns with zero deviation become constant ``0`` instead of dividing by
    zero. Returns ``(standardized, means, stds)``.
    """

    data = np.asarray(matrix, dtype=float)
    if data.ndim != 2:
        raise ValueError("standardize expects a two dimensional matrix")
    if data.shape[0] == 0:
        width = data.shape[1]
        return data.copy(), np.zeros(width), np.zeros(width)

    means = data.mean(axis=0)
    stds = data.std(axis=0)
    # Summation error can leave a tiny deviation on columns that are constant.
    flat = stds <= _FLAT_TOLERANCE * np.maximum(1.0, np.abs(means))
    if flat.any():
        LOGGER.debug("Standardizing %d zero-variance column(s) to 0", int(flat.sum()))
    safe_stds = np.where(flat, 1.0, stds)
    standardized = np.where(flat, 0.0, (data - means) / safe_stds)
    return standardized, means, np.where(flat, 0.0, stds)


__all__ = [
    "DISPLAY_MIDPOINT",
    "PropertyBounds",
    "property_bounds",
    "catalog_bounds",
    "normalize",
    "display_normalize",
    "radar_bounds",
    "radar_profile",
    "slider_bounds",
    "standardize",
]
