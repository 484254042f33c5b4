"""Load the materials CSV into an immutable :class:`MaterialCatalog`.

The CSV uses short property headers (``Su``, ``Sy``, ``E``, ``G``, ``mu``,
``Ro``) that are renamed to the canonical property names. A ``Material``
label is synthesized from the base material name and the heat treatment.
When the configured CSV is missing, a bundled sample of carbon steels is
used instead unless the caller disables the fallback.
"""

from __future__ import annotations

import io as _io
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import IO

import pandas as pd

from .catalog import MaterialCatalog, RequirementSpec
from .dataset_validation import validate_catalog_frame
from .errors import MissingDatasetError
from .paths import CATALOG_CSV
from .schema import CSV_HEADER_MAP, CSV_NUMERIC_HEADERS, HEAT_TREATMENT_COLUMN, LABEL_COLUMN

LOGGER = logging.getLogger(__name__)

FALLBACK_CSV = Path(__file__).resolve().parents[1] / "data" / "fallback_catalog.csv"

INSTALL_DATA_HINT = (
    "Place the catalog at data/Data.csv or point MATSELECT_CATALOG_CSV to it."
)


def format_missing_dataset_message(error: MissingDatasetError) -> str:
    return f"{error} {INSTALL_DATA_HINT}"


def _material_label(name: object, heat_treatment: object) -> str | None:
    base = "" if name is None else str(name).strip()
    if not base:
        return None
    treatment = "" if heat_treatment is None else str(heat_treatment).strip()
    return f"{base} {treatment}" if treatment else base


def prepare_catalog_frame(raw: pd.DataFrame, *, dataset_label: str = "the materials catalog") -> pd.DataFrame:
    """Turn raw CSV columns into the catalog layout used by the analytics.

    Numeric headers are coerced to floats (blank cells become missing), the
    six compared properties are renamed and ``Material`` becomes
    ``"<material> <heat treatment>"``. Other columns are kept as opaque
    strings, with blanks turned into missing values.
    """

    frame = validate_catalog_frame(raw, dataset_label=dataset_label).copy()

    for column in frame.columns:
        if column in CSV_NUMERIC_HEADERS:
            frame[column] = pd.to_numeric(frame[column], errors="coerce")
        else:
            stripped = frame[column].astype(object).where(pd.notna(frame[column]), None)
            frame[column] = stripped.map(
                lambda value: None if value is None or not str(value).strip() else str(value)
            )

    if HEAT_TREATMENT_COLUMN in frame.columns:
        treatments = frame[HEAT_TREATMENT_COLUMN]
    else:
        treatments = pd.Series([None] * len(frame), index=frame.index)
    frame[LABEL_COLUMN] = [
        _material_label(name, treatment)
        for name, treatment in zip(frame[LABEL_COLUMN], treatments)
    ]

    return frame.rename(columns=CSV_HEADER_MAP)


def read_catalog_csv(source: Path | str | IO[str]) -> pd.DataFrame:
    """Read ``source`` (a file path or an open text buffer) as untyped string columns."""

    return pd.read_csv(source, dtype=str, keep_default_na=False)


def catalog_from_csv_text(text: str) -> MaterialCatalog:
    frame = prepare_catalog_frame(read_catalog_csv(_io.StringIO(text.strip() + "\n")))
    return MaterialCatalog.from_frame(frame)


def _resolve_source(path: Path, allow_fallback: bool) -> tuple[Path, str]:
    if path.exists():
        return path, str(path)
    if not allow_fallback:
        raise MissingDatasetError(path)
    LOGGER.warning(
        "Could not load %s, using the bundled fallback catalog. %s",
        path,
        INSTALL_DATA_HINT,
    )
    return FALLBACK_CSV, "the fallback catalog"


@lru_cache(maxsize=4)
def _load_catalog_cached(path_str: str, allow_fallback: bool) -> MaterialCatalog:
    source, label = _resolve_source(Path(path_str), allow_fallback)
    try:
        raw = read_catalog_csv(source)
    except FileNotFoundError as exc:  # pragma: no cover - race with deletion
        raise MissingDatasetError(source) from exc
    frame = prepare_catalog_frame(raw, dataset_label=label)
    catalog = MaterialCatalog.from_frame(frame)
    LOGGER.info("Loaded %d materials from %s", len(catalog), source)
    return catalog


def load_catalog(path: Path | str | None = None, *, allow_fallback: bool = True) -> MaterialCatalog:
    """Return the catalog snapshot stored at ``path`` (default: configured CSV).

    The parsed snapshot is cached; it is immutable, so callers can share it.
    Use :func:`invalidate_catalog_cache` after the file changes.
    """

    target = Path(path) if path is not None else CATALOG_CSV
    return _load_catalog_cached(str(target), allow_fallback)


def invalidate_catalog_cache() -> None:
    _load_catalog_cached.cache_clear()


def load_requirements(value: str | Path | None) -> RequirementSpec:
    """Parse requirements from a JSON file path or an inline JSON object.

    Properties left out keep their default target and weight; ``None`` or an
    empty string yields the defaults.
    """

    if not value:
        return RequirementSpec.with_defaults()
    if isinstance(value, str) and value.lstrip().startswith("{"):
        text = value
    else:
        text = Path(value).read_text(encoding="utf-8")
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("Requirements must be a JSON object {property: {target, weight}}")
    return RequirementSpec.with_defaults(parsed)


__all__ = [
    "FALLBACK_CSV",
    "INSTALL_DATA_HINT",
    "format_missing_dataset_message",
    "prepare_catalog_frame",
    "read_catalog_csv",
    "catalog_from_csv_text",
    "load_catalog",
    "invalidate_catalog_cache",
    "load_requirements",
]
