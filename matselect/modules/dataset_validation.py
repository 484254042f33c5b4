"""Catalog validation helpers used by the CSV loader."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable

import pandas as pd
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import InvalidCatalogError
from .schema import CSV_NUMERIC_HEADERS, LABEL_COLUMN, REQUIRED_CSV_HEADERS

LOGGER = logging.getLogger(__name__)


class _CatalogRow(BaseModel):
    """Pydantic model enforcing the types of one raw catalog CSV row."""

    model_config = ConfigDict(extra="ignore")

    material: str
    Su: float | None = None
    Sy: float | None = None
    A5: float | None = None
    Bhn: float | None = None
    E: float | None = None
    G: float | None = None
    mu: float | None = None
    Ro: float | None = None
    pH: float | None = None
    HV: float | None = None

    @field_validator("material")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("material name must not be blank")
        return value

    @field_validator(*CSV_NUMERIC_HEADERS, mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, float) and math.isnan(value):
            return None
        return value

    @field_validator(*CSV_NUMERIC_HEADERS)
    @classmethod
    def _finite(cls, value: float | None) -> float | None:
        if value is not None and not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value


def _format_validation_errors(error: ValidationError) -> tuple[str, ...]:
    messages: list[str] = []
    for issue in error.errors():
        location = issue.get("loc", ("?",))
        column = location[0] if location else "?"
        if column == "material":
            column = LABEL_COLUMN
        msg = issue.get("msg", "invalid value")
        messages.append(f"{column}: {msg}")
    return tuple(messages)


def require_catalog_columns(
    columns: Iterable[str],
    *,
    dataset_label: str = "the materials catalog",
) -> None:
    missing = [column for column in REQUIRED_CSV_HEADERS if column not in set(columns)]
    if missing:
        joined = ", ".join(missing)
        raise InvalidCatalogError(
            f"Missing required columns in {dataset_label}: {joined}.",
            issues=missing,
        )


def validate_catalog_frame(
    frame: pd.DataFrame,
    *,
    dataset_label: str = "the materials catalog",
) -> pd.DataFrame:
    """Validate raw CSV rows with :mod:`pydantic` and drop the invalid ones.

    Missing required columns abort the load with :class:`InvalidCatalogError`.
    Rows with malformed numbers are skipped and logged, so one bad line does
    not hide the rest of the catalog.
    """

    require_catalog_columns(frame.columns, dataset_label=dataset_label)

    subset = frame.reindex(columns=[LABEL_COLUMN, *CSV_NUMERIC_HEADERS])
    subset = subset.astype(object).where(pd.notna(subset), None)
    subset = subset.rename(columns={LABEL_COLUMN: "material"})

    keep: list[bool] = []
    for position, record in enumerate(subset.to_dict(orient="records"), start=1):
        try:
            _CatalogRow.model_validate(record)
        except ValidationError as error:
            issues = "; ".join(_format_validation_errors(error))
            LOGGER.warning("Skipping row %d of %s: %s", position, dataset_label, issues)
            keep.append(False)
        else:
            keep.append(True)

    return frame.loc[keep].reset_index(drop=True)


__all__ = [
    "require_catalog_columns",
    "validate_catalog_frame",
]
