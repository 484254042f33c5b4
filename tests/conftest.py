"""Test configuration helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:  # pragma: no cover - fallback when the package is not installed
    sys.path.insert(0, str(PROJECT_ROOT))

from matselect.modules.catalog import MaterialCatalog, RequirementSpec
from matselect.modules.schema import (
    DENSITY,
    ELASTIC_MODULUS,
    POISSONS_RATIO,
    SHEAR_MODULUS,
    TENSILE_STRENGTH,
    YIELD_STRENGTH,
)


def make_record(label: str, su, sy, e, g, mu, ro, **extra):
    record = {
        "Material": label,
        TENSILE_STRENGTH: su,
        YIELD_STRENGTH: sy,
        ELASTIC_MODULUS: e,
        SHEAR_MODULUS: g,
        POISSONS_RATIO: mu,
        DENSITY: ro,
    }
    record.update(extra)
    return record


def make_requirements(su, sy, e, g, mu, ro, weight: float = 1.0) -> RequirementSpec:
    return RequirementSpec(
        {
            TENSILE_STRENGTH: (su, weight),
            YIELD_STRENGTH: (sy, weight),
            ELASTIC_MODULUS: (e, weight),
            SHEAR_MODULUS: (g, weight),
            POISSONS_RATIO: (mu, weight),
            DENSITY: (ro, weight),
        }
    )


@pytest.fixture
def pair_catalog() -> MaterialCatalog:
    """Two steels that differ on every property."""

    return MaterialCatalog(
        [
            make_record("Steel A as-rolled", 500, 300, 200000, 80000, 0.3, 7800, ID="A"),
            make_record("Steel B normalized", 550, 330, 205000, 81000, 0.29, 7850, ID="B"),
        ]
    )


@pytest.fixture
def mixed_catalog() -> MaterialCatalog:
    """Five materials with a constant Poisson's ratio and varied strengths."""

    return MaterialCatalog(
        [
            make_record("Steel 1015 annealed", 386, 284, 207000, 79000, 0.3, 7860),
            make_record("Steel 1020 normalized", 441, 346, 207000, 79000, 0.3, 7860),
            make_record("Aluminium 6061 T6", 310, 276, 69000, 26000, 0.3, 2700),
            make_record("Titanium Ti-6Al-4V annealed", 950, 880, 114000, 44000, 0.3, 4430),
            make_record("Steel 1050 as-rolled", 724, 414, 207000, 79000, 0.3, 7860),
        ]
    )


@pytest.fixture(autouse=True)
def _reset_catalog_cache():
    """Ensure the cached catalog snapshot does not leak across tests."""

    from matselect.modules.io import invalidate_catalog_cache

    invalidate_catalog_cache()
    try:
        yield
    finally:
        invalidate_catalog_cache()
