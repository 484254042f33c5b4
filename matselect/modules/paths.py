"""Centralized filesystem locations for catalog data and exports."""

from __future__ import annotations

import os
from pathlib import Path


_ENV_DATA_ROOT = "MATSELECT_DATA_ROOT"
_ENV_CATALOG_CSV = "MATSELECT_CATALOG_CSV"

_REPO_ROOT = Path(__file__).resolve().parents[2]


def _normalise_path(value: str | Path) -> Path:
    """Return an absolute ``Path`` while being forgiving with inputs."""

    candidate = Path(value).expanduser()
    try:
        return candidate.resolve()
    except RuntimeError:
        # ``resolve`` can raise on recursive symlinks; fall back to ``absolute``.
        return candidate.absolute()


def _path_from_env(var_name: str, default: Path) -> Path:
    """Load ``var_name`` from the environment, normalising it when available."""

    raw_value = os.environ.get(var_name)
    if raw_value is None:
        return default

    stripped = raw_value.strip()
    if not stripped:
        return default

    return _normalise_path(stripped)


# Shared data locations -----------------------------------------------------

DATA_ROOT = _path_from_env(_ENV_DATA_ROOT, _normalise_path(_REPO_ROOT / "data"))
"""Directory containing the materials catalog and generated artifacts."""

CATALOG_CSV = _path_from_env(_ENV_CATALOG_CSV, DATA_ROOT / "Data.csv")
"""Materials CSV read by :func:`matselect.modules.io.load_catalog`."""

EXPORTS_DIR = DATA_ROOT / "exports"
"""Default destination for ranked result exports written by the scripts."""


__all__ = ["DATA_ROOT", "CATALOG_CSV", "EXPORTS_DIR"]
