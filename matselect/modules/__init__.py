# matselect/modules/__init__.py
"""
Light-weight exports for the analytics engine.

Notes:
- The catalog model and the ranker are imported eagerly; they are needed by
  every query.
- Correlation, PCA, deviation and export helpers are imported on first use.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

from .catalog import MaterialCatalog, MaterialRecord, RankedMaterial, RequirementSpec
from .errors import InputPreconditionError, InvalidCatalogError, MissingDatasetError
from .io import invalidate_catalog_cache, load_catalog
from .ranking import rank, recommended_labels

__all__ = [
    # Model
    "MaterialCatalog",
    "MaterialRecord",
    "RankedMaterial",
    "RequirementSpec",
    # Errors
    "InputPreconditionError",
    "InvalidCatalogError",
    "MissingDatasetError",
    # IO
    "load_catalog",
    "invalidate_catalog_cache",
    # Analytics
    "rank",
    "recommended_labels",
    "correlation_matrix",
    "correlation_frame",
    "pca_project",
    "fit_basis",
    "deviations",
    "order_by_total_deviation",
    # Export
    "ranked_to_csv",
    "ranked_to_json",
]


_LAZY_MODULES = {
    "correlation": {
        "correlation_matrix",
        "correlation_frame",
    },
    "pca": {
        "pca_project",
        "fit_basis",
    },
    "deviation": {
        "deviations",
        "order_by_total_deviation",
    },
    "exporters": {
        "ranked_to_csv",
        "ranked_to_json",
    },
}


def __getattr__(name: str) -> Any:
    for module_name, symbols in _LAZY_MODULES.items():
        if name in symbols:
            module = import_module(f".{module_name}", __name__)
            value = getattr(module, name)
            globals()[name] = value
            return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
