"""Two-component projection of the catalog via power iteration.

The catalog properties are z-score standardized, their covariance matrix is
formed and the two leading axes are approximated by power iteration with a
single deflation step. This is a best-effort embedding for visualization,
not an exact PCA: no re-orthogonalization is done beyond the deflation.

The starting vector of each power iteration is random. Pass ``rng`` (a seed
or a :class:`numpy.random.Generator`) for reproducible axes; the default
draws fresh entropy on every call so concurrent calls never share a
generator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Collection, Iterable, Mapping, Sequence

import numpy as np

from .catalog import MaterialCatalog, ensure_catalog, require_numeric_properties
from .errors import InputPreconditionError
from .normalization import standardize
from .schema import PROPERTY_COLUMNS

LOGGER = logging.getLogger(__name__)

POWER_ITERATIONS = 100

RandomSource = np.random.Generator | int | None


def _unit(vector: np.ndarray) -> np.ndarray | None:
    norm = float(np.linalg.norm(vector))
    if norm == 0 or not np.isfinite(norm):
        return None
    return vector / norm


def power_iteration(
    matrix: np.ndarray,
    iterations: int = POWER_ITERATIONS,
    rng: RandomSource = None,
) -> np.ndarray:
    """Approximate the dominant eigenvector of a square ``matrix``.

    The vector is seeded with uniform random components, then multiplied by
    ``matrix`` and renormalized ``iterations`` times. When a product collapses
    to zero (e.g. an all-zero matrix) the last unit vector is returned.
    """

    data = np.asarray(matrix, dtype=float)
    if data.ndim != 2 or data.shape[0] != data.shape[1]:
        raise ValueError("power_iteration expects a square matrix")
    if data.shape[0] == 0:
        raise ValueError("power_iteration expects a non-empty matrix")
    if iterations < 0:
        raise ValueError("iterations must be non-negative")

    generator = np.random.default_rng(rng)
    size = data.shape[0]
    vector = _unit(generator.random(size))
    while vector is None:
        vector = _unit(generator.random(size))

    for step in range(iterations):
        candidate = _unit(data @ vector)
        if candidate is None:
            LOGGER.debug("Power iteration collapsed after %d step(s); keeping last vector", step)
            break
        vector = candidate
    return vector


def covariance(standardized: np.ndarray) -> np.ndarray:
    """``Σ zi·zj / (N-1)`` over the rows of an already standardized matrix."""

    rows = standardized.shape[0]
    if rows < 2:
        raise InputPreconditionError(
            f"Covariance needs at least 2 records, got {rows}.",
            issues=[f"records: {rows}"],
        )
    return (standardized.T @ standardized) / (rows - 1)


@dataclass(frozen=True)
class PcaBasis:
    """Transient projection basis computed for one catalog snapshot."""

    properties: tuple[str, ...]
    means: np.ndarray
    stds: np.ndarray
    pc1: np.ndarray
    pc2: np.ndarray

    def standardize(self, values: Sequence[float]) -> np.ndarray:
        row = np.asarray(values, dtype=float)
        safe = np.where(self.stds == 0, 1.0, self.stds)
        return np.where(self.stds == 0, 0.0, (row - self.means) / safe)

    def project(self, values: Sequence[float]) -> tuple[float, float]:
        """Project one raw property vector (ordered like ``properties``)."""

        z = self.standardize(values)
        return float(z @ self.pc1), float(z @ self.pc2)


@dataclass(frozen=True)
class ProjectedPoint:
    x: float
    y: float
    label: str
    recommended: bool

    def as_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "label": self.label, "recommended": self.recommended}


def available_properties(
    catalog: MaterialCatalog, properties: Sequence[str] | None = None
) -> tuple[str, ...]:
    """Properties of ``properties`` (default: the six compared ones) present in ``catalog``."""

    wanted = PROPERTY_COLUMNS if properties is None else tuple(properties)
    return tuple(prop for prop in wanted if catalog.has_column(prop))


def _fit(
    catalog: MaterialCatalog,
    properties: Sequence[str] | None,
    rng: RandomSource,
) -> tuple[PcaBasis, np.ndarray]:
    if len(catalog) < 2:
        raise InputPreconditionError(
            f"PCA needs at least 2 catalog records, got {len(catalog)}.",
            issues=[f"records: {len(catalog)}"],
        )
    wanted = PROPERTY_COLUMNS if properties is None else tuple(properties)
    require_numeric_properties(catalog, wanted, purpose="PCA")
    props = available_properties(catalog, wanted)
    if not props:
        raise InputPreconditionError(
            "PCA needs at least one numeric property present in the catalog.",
            issues=list(wanted),
        )

    standardized, means, stds = standardize(catalog.matrix(props, missing=0.0))
    cov = covariance(standardized)

    generator = np.random.default_rng(rng)
    pc1 = power_iteration(cov, rng=generator)
    deflated = cov - np.outer(pc1, pc1)
    pc2 = power_iteration(deflated, rng=generator)

    basis = PcaBasis(properties=props, means=means, stds=stds, pc1=pc1, pc2=pc2)
    return basis, standardized


def fit_basis(
    catalog: MaterialCatalog | Iterable[Mapping[str, Any]],
    properties: Sequence[str] | None = None,
    rng: RandomSource = None,
) -> PcaBasis:
    """Compute the two projection axes for ``catalog``."""

    basis, _ = _fit(ensure_catalog(catalog), properties, rng)
    return basis


def pca_project(
    catalog: MaterialCatalog | Iterable[Mapping[str, Any]],
    recommended_labels: Collection[str] = (),
    rng: RandomSource = None,
    properties: Sequence[str] | None = None,
) -> list[ProjectedPoint]:
    """Project every record onto the two leading axes.

    A point is flagged ``recommended`` when its label is one of
    ``recommended_labels`` (typically the labels of the current ranking).
    """

    snapshot = ensure_catalog(catalog)
    basis, standardized = _fit(snapshot, properties, rng)
    flagged = set(recommended_labels)

    xs = standardized @ basis.pc1
    ys = standardized @ basis.pc2
    return [
        ProjectedPoint(
            x=float(x),
            y=float(y),
            label=record.label,
            recommended=record.label in flagged,
        )
        for record, x, y in zip(snapshot, xs, ys)
    ]


__all__ = [
    "POWER_ITERATIONS",
    "power_iteration",
    "covariance",
    "PcaBasis",
    "ProjectedPoint",
    "available_properties",
    "fit_basis",
    "pca_project",
]
