# matselect/modules/exporters.py
"""Serialize ranked recommendations for download."""

from __future__ import annotations

import io
import json
from typing import Any, Dict, Iterable, Sequence

import pandas as pd

from .catalog import RankedMaterial, RequirementSpec
from .deviation import deviations, order_by_total_deviation
from .schema import DISTANCE_COLUMN, LABEL_COLUMN, PROPERTY_COLUMNS

EXPORT_COLUMNS: tuple[str, ...] = (LABEL_COLUMN, *PROPERTY_COLUMNS, DISTANCE_COLUMN)


def ranked_to_frame(ranked: Iterable[RankedMaterial]) -> pd.DataFrame:
    """One row per ranked material with the export columns, in rank order."""

    rows = []
    for material in ranked:
        payload = material.as_dict()
        rows.append({column: payload.get(column) for column in EXPORT_COLUMNS})
    return pd.DataFrame(rows, columns=list(EXPORT_COLUMNS))


def ranked_to_csv(ranked: Iterable[RankedMaterial]) -> bytes:
    """CSV bytes with ``Material``, the six properties and ``Distance_Score``.

    Missing values are written as empty cells.
    """

    buf = io.StringIO()
    ranked_to_frame(ranked).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


def ranked_to_json(
    ranked: Sequence[RankedMaterial],
    requirements: RequirementSpec,
    *,
    extra: Dict[str, Any] | None = None,
) -> bytes:
    """JSON document with the requirements, the ranking and both orderings."""

    rows = deviations(ranked, requirements)
    payload: Dict[str, Any] = {
        "requirements": requirements.as_dict(),
        "ranking": [
            {
                "rank": material.rank,
                "label": material.label,
                "distance_score": material.distance_score,
                "properties": {prop: material.numeric(prop) for prop in PROPERTY_COLUMNS},
                "contributions": dict(material.contributions),
            }
            for material in ranked
        ],
        "deviations": [row.as_dict() for row in rows],
        "deviation_order": [row.label for row in order_by_total_deviation(rows)],
    }
    if extra:
        payload.update(extra)
    return json.dumps(payload, indent=2).encode("utf-8")


__all__ = [
    "EXPORT_COLUMNS",
    "ranked_to_frame",
    "ranked_to_csv",
    "ranked_to_json",
]
