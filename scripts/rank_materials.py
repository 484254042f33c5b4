"""Rank the materials catalog against a requirements vector."""

from __future__ import annotations

import argparse
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

from matselect.modules.catalog import RequirementSpec
from matselect.modules.deviation import deviations, is_percentage, order_by_total_deviation
from matselect.modules.errors import InputPreconditionError, MissingDatasetError
from matselect.modules.exporters import ranked_to_csv, ranked_to_json
from matselect.modules.io import format_missing_dataset_message, load_catalog, load_requirements
from matselect.modules.paths import EXPORTS_DIR
from matselect.modules.ranking import DEFAULT_TOP_K, rank
from matselect.modules.schema import PROPERTY_COLUMNS
from matselect.modules.utils import format_deviation, format_number

DEFAULT_OUTPUT_STEM = EXPORTS_DIR / "material_recommendations"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recommend materials closest to target properties")
    parser.add_argument("--catalog", type=Path, help="Materials CSV (default: configured catalog)")
    parser.add_argument("--strict", action="store_true", help="Fail instead of using the fallback catalog")
    parser.add_argument("--requirements", help="JSON file or inline JSON with targets and weights")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP_K, help="Number of materials to keep")
    parser.add_argument("--format", choices=("csv", "json"), default="csv", help="Export format")
    parser.add_argument("--output", type=Path, help="Export path (default: data/exports/...)")
    parser.add_argument("--summary", action="store_true", help="Print a summary table to stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _summary_lines(ranked, requirements: RequirementSpec) -> list[str]:
    rows = deviations(ranked, requirements)
    lines = []
    for material, row in zip(ranked, rows):
        parts = [f"#{material.rank:02d}", f"score={material.distance_score:.4f}", material.label]
        for prop in PROPERTY_COLUMNS:
            parts.append(
                f"{prop}={format_number(material.numeric(prop), precision=2)}"
                f" ({format_deviation(row.deviations[prop], percentage=is_percentage(requirements.target(prop)))})"
            )
        lines.append(" | ".join(parts))

    ordered = order_by_total_deviation(rows)
    lines.append("By total deviation: " + ", ".join(row.label for row in ordered))
    return lines


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
        requirements = load_requirements(args.requirements)
        ranked = rank(catalog, requirements, args.top)
    except (InputPreconditionError, ValueError, OSError) as error:
        print(f"Invalid input: {error}", file=sys.stderr)
        return 2

    output = args.output or DEFAULT_OUTPUT_STEM.with_suffix(f".{args.format}")
    if args.format == "csv":
        payload = ranked_to_csv(ranked)
    else:
        extra: Dict[str, Any] = {"catalog_size": len(catalog), "top_k": args.top}
        payload = ranked_to_json(ranked, requirements, extra=extra)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(payload)

    if args.summary:
        for line in _summary_lines(ranked, requirements):
            print(line)

    print(f"Saved {len(ranked)} recommendation(s) to {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
