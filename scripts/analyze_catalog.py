"""Print the property correlation matrix and a 2D projection of the catalog."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Sequence


def _ensure_project_root() -> Path:
    """Ensure the repository root is available on ``sys.path`` when run as a script."""

    module_path = Path(__file__).resolve()
    root = module_path.parents[1]
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)
    return root


_ensure_project_root()

import pandas as pd

from matselect.modules.correlation import correlation_frame, strongest_pairs
from matselect.modules.errors import InputPreconditionError, MissingDatasetError
from matselect.modules.io import format_missing_dataset_message, load_catalog, load_requirements
from matselect.modules.pca import pca_project
from matselect.modules.ranking import DEFAULT_TOP_K, rank, recommended_labels
from matselect.modules.schema import PROPERTY_COLUMNS, display_name


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Correlation and PCA overview of the materials catalog")
    parser.add_argument("--catalog", type=Path, help="Materials CSV (default: configured catalog)")
    parser.add_argument("--strict", action="store_true", help="Fail instead of using the fallback catalog")
    parser.add_argument("--requirements", help="JSON file or inline JSON used to flag recommendations")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP_K, help="Number of recommended materials to flag")
    parser.add_argument(
        "--properties",
        nargs="+",
        default=list(PROPERTY_COLUMNS),
        help="Properties included in the correlation matrix",
    )
    parser.add_argument("--seed", type=int, help="Seed for the power iteration (default: random)")
    parser.add_argument("--output", type=Path, help="Optional JSON file with matrix and projection")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        catalog = load_catalog(args.catalog, allow_fallback=not args.strict)
    except MissingDatasetError as error:
        print(format_missing_dataset_message(error), file=sys.stderr)
        return 2

    try:
        matrix = correlation_frame(catalog, args.properties)
        ranked = rank(catalog, load_requirements(args.requirements), args.top)
        points = pca_project(catalog, recommended_labels(ranked), rng=args.seed)
    except (InputPreconditionError, ValueError, OSError) as error:
        print(f"Invalid input: {error}", file=sys.stderr)
        return 2

    labelled = matrix.rename(index=display_name, columns=display_name)
    with pd.option_context("display.width", 200, "display.max_columns", None):
        print(labelled.round(3).to_string())

    print("\nStrongest correlations:")
    for left, right, value in strongest_pairs(matrix):
        print(f"  {display_name(left)} / {display_name(right)}: {value:+.3f}")

    print("\nProjection (* = recommended):")
    for point in points:
        marker = "*" if point.recommended else " "
        print(f" {marker} {point.x:+8.3f} {point.y:+8.3f}  {point.label}")

    if args.output:
        payload: Dict[str, Any] = {
            "properties": list(matrix.columns),
            "correlation": matrix.to_numpy().tolist(),
            "projection": [point.as_dict() for point in points],
            "seed": args.seed,
        }
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"\nSaved analysis to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
