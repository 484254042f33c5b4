"""Shared schema constants for the materials catalog."""

from __future__ import annotations

TENSILE_STRENGTH = "Ultimate_Tensile_Strength_MPa"
YIELD_STRENGTH = "Yield_Strength_MPa"
ELASTIC_MODULUS = "Elastic_Modulus_MPa"
SHEAR_MODULUS = "Shear_Modulus_MPa"
POISSONS_RATIO = "Poissons_Ratio"
DENSITY = "Density_kg_per_m3"

PROPERTY_COLUMNS: tuple[str, ...] = (
    TENSILE_STRENGTH,
    YIELD_STRENGTH,
    ELASTIC_MODULUS,
    SHEAR_MODULUS,
    POISSONS_RATIO,
    DENSITY,
)
"""The six mechanical properties every analysis compares, in display order."""

LABEL_COLUMN = "Material"
IDENTIFIER_COLUMN = "ID"
HEAT_TREATMENT_COLUMN = "Heat treatment"
DISTANCE_COLUMN = "Distance_Score"

CSV_HEADER_MAP: dict[str, str] = {
    "Su": TENSILE_STRENGTH,
    "Sy": YIELD_STRENGTH,
    "E": ELASTIC_MODULUS,
    "G": SHEAR_MODULUS,
    "mu": POISSONS_RATIO,
    "Ro": DENSITY,
}
"""Short CSV headers mapped to the canonical property names."""

CSV_NUMERIC_HEADERS: tuple[str, ...] = (
    "Su",
    "Sy",
    "A5",
    "Bhn",
    "E",
    "G",
    "mu",
    "Ro",
    "pH",
    "HV",
)

REQUIRED_CSV_HEADERS: tuple[str, ...] = (LABEL_COLUMN, *CSV_HEADER_MAP)

NUMERIC_COLUMNS: tuple[str, ...] = tuple(
    CSV_HEADER_MAP.get(header, header) for header in CSV_NUMERIC_HEADERS
)
"""Every catalog column holding numbers once headers have been mapped."""

PROPERTY_DISPLAY_NAMES: dict[str, str] = {
    TENSILE_STRENGTH: "Ultimate Tensile Strength (MPa)",
    YIELD_STRENGTH: "Yield Strength (MPa)",
    ELASTIC_MODULUS: "Elastic Modulus (MPa)",
    SHEAR_MODULUS: "Shear Modulus (MPa)",
    POISSONS_RATIO: "Poisson's Ratio",
    DENSITY: "Density (kg/m³)",
}

DEFAULT_REQUIREMENTS: dict[str, tuple[float, float]] = {
    TENSILE_STRENGTH: (500.0, 0.5),
    YIELD_STRENGTH: (300.0, 0.5),
    ELASTIC_MODULUS: (200000.0, 0.5),
    SHEAR_MODULUS: (80000.0, 0.5),
    POISSONS_RATIO: (0.3, 0.5),
    DENSITY: (7800.0, 0.5),
}
"""Starting ``(target, weight)`` pairs offered before the user adjusts them."""


def display_name(prop: str) -> str:
    """Return the human readable label for ``prop`` (the name itself if unknown)."""

    return PROPERTY_DISPLAY_NAMES.get(prop, prop)


__all__ = [
    "TENSILE_STRENGTH",
    "YIELD_STRENGTH",
    "ELASTIC_MODULUS",
    "SHEAR_MODULUS",
    "POISSONS_RATIO",
    "DENSITY",
    "PROPERTY_COLUMNS",
    "LABEL_COLUMN",
    "IDENTIFIER_COLUMN",
    "HEAT_TREATMENT_COLUMN",
    "DISTANCE_COLUMN",
    "CSV_HEADER_MAP",
    "CSV_NUMERIC_HEADERS",
    "REQUIRED_CSV_HEADERS",
    "NUMERIC_COLUMNS",
    "PROPERTY_DISPLAY_NAMES",
    "DEFAULT_REQUIREMENTS",
    "display_name",
]
