"""Pearson correlation matrix over catalog properties.

Only records where both properties are present contribute to a pair. Pairs
with fewer than :data:`MIN_CORRELATION_SAMPLES` observations, a constant
side, or a non-finite result are reported as ``0`` so downstream heatmaps
never see ``NaN``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from .catalog import MaterialCatalog, ensure_catalog, require_numeric_properties
from .schema import PROPERTY_COLUMNS

LOGGER = logging.getLogger(__name__)

MIN_CORRELATION_SAMPLES = 3


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson coefficient of paired samples, ``0`` for degenerate input."""

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if x.shape != y.shape:
        raise ValueError("pearson expects paired samples of equal length")
    if x.size < MIN_CORRELATION_SAMPLES:
        return 0.0

    dx = x - x.mean()
    dy = y - y.mean()
    sxx = float(np.dot(dx, dx))
    syy = float(np.dot(dy, dy))
    if sxx == 0 or syy == 0:
        return 0.0

    r = float(np.dot(dx, dy)) / math.sqrt(sxx * syy)
    if not math.isfinite(r):
        return 0.0
    return max(-1.0, min(1.0, r))


def correlation_matrix(
    catalog: MaterialCatalog | Iterable[Mapping[str, Any]],
    properties: Sequence[str] = PROPERTY_COLUMNS,
) -> list[list[float]]:
    """Square matrix of Pearson coefficients indexed by ``properties``.

    Every off-diagonal entry is computed independently; the diagonal is
    exactly ``1``.
    """

    snapshot = ensure_catalog(catalog)
    props = list(properties)
    require_numeric_properties(snapshot, props, purpose="Correlation")

    columns = {prop: snapshot.column(prop, missing=None) for prop in props}
    size = len(props)
    matrix = [[0.0] * size for _ in range(size)]
    for i, prop_x in enumerate(props):
        for j, prop_y in enumerate(props):
            if i == j:
                matrix[i][j] = 1.0
                continue
            x = columns[prop_x]
            y = columns[prop_y]
            paired = ~(np.isnan(x) | np.isnan(y))
            if paired.sum() < MIN_CORRELATION_SAMPLES:
                LOGGER.debug(
                    "Only %d paired samples for %s/%s; reporting 0",
                    int(paired.sum()),
                    prop_x,
                    prop_y,
                )
            matrix[i][j] = pearson(x[paired], y[paired])
    return matrix


def correlation_frame(
    catalog: MaterialCatalog | Iterable[Mapping[str, Any]],
    properties: Sequence[str] = PROPERTY_COLUMNS,
) -> pd.DataFrame:
    """:func:`correlation_matrix` as a DataFrame labelled on both axes."""

    props = list(properties)
    return pd.DataFrame(correlation_matrix(catalog, props), index=props, columns=props)


def strongest_pairs(frame: pd.DataFrame, limit: int = 5) -> list[tuple[str, str, float]]:
    """Upper-triangle pairs ordered by absolute coefficient, strongest first."""

    labels = list(frame.columns)
    pairs: list[tuple[str, str, float]] = []
    for i, left in enumerate(labels):
        for right in labels[i + 1 :]:
            pairs.append((left, right, float(frame.loc[left, right])))
    pairs.sort(key=lambda item: abs(item[2]), reverse=True)
    return pairs[:limit]


__all__ = [
    "MIN_CORRELATION_SAMPLES",
    "pearson",
    "correlation_matrix",
    "correlation_frame",
    "strongest_pairs",
]
