"""Typed representation of the materials catalog and of user requirements.

Every analytics function receives an explicit :class:`MaterialCatalog`
snapshot. Records are read-only mappings so a computation can never mutate
the data another query is looking at.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import InputPreconditionError
from .schema import (
    DEFAULT_REQUIREMENTS,
    DISTANCE_COLUMN,
    IDENTIFIER_COLUMN,
    LABEL_COLUMN,
    NUMERIC_COLUMNS,
    PROPERTY_COLUMNS,
)
from .utils import safe_float


class MaterialRecord(Mapping[str, Any]):
    """Immutable mapping from column name to value for one catalog entry."""

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any] | None = None, /, **extra: Any) -> None:
        data: Dict[str, Any] = dict(fields or {})
        data.update(extra)
        self._fields = MappingProxyType(data)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"MaterialRecord({dict(self._fields)!r})"

    @property
    def label(self) -> str:
        """Synthetic ``Material`` label (base name plus heat treatment)."""

        value = self._fields.get(LABEL_COLUMN)
        return "" if value is None else str(value)

    @property
    def identifier(self) -> str | None:
        value = self._fields.get(IDENTIFIER_COLUMN)
        return None if value is None else str(value)

    def numeric(self, prop: str, default: float | None = None) -> float | None:
        """Return ``prop`` as a float, or ``default`` when missing or non-numeric."""

        return safe_float(self._fields.get(prop), default)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._fields)


def _coerce_record(item: MaterialRecord | Mapping[str, Any]) -> MaterialRecord:
    if isinstance(item, MaterialRecord):
        return item
    if isinstance(item, Mapping):
        return MaterialRecord(item)
    raise TypeError(f"Catalog entries must be mappings, got {type(item).__name__}")


class MaterialCatalog(Sequence[MaterialRecord]):
    """Ordered, immutable snapshot of material records.

    The catalog order is meaningful: ranking ties are resolved by it.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[MaterialRecord | Mapping[str, Any]] = ()) -> None:
        self._records: tuple[MaterialRecord, ...] = tuple(_coerce_record(r) for r in records)

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return MaterialCatalog(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MaterialRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"MaterialCatalog(<{len(self._records)} records>)"

    @property
    def records(self) -> tuple[MaterialRecord, ...]:
        return self._records

    def labels(self) -> list[str]:
        return [record.label for record in self._records]

    def has_column(self, prop: str) -> bool:
        """``True`` when at least one record carries ``prop``."""

        return any(prop in record for record in self._records)

    def column(self, prop: str, missing: float | None = 0.0) -> np.ndarray:
        """Return ``prop`` for every record as a float array.

        Missing or non-numeric values become ``missing``; pass ``None`` to get
        ``NaN`` markers instead.
        """

        fill = math.nan if missing is None else float(missing)
        return np.array(
            [record.numeric(prop, fill) for record in self._records],
            dtype=float,
        )

    def matrix(self, properties: Sequence[str], missing: float | None = 0.0) -> np.ndarray:
        """Return an ``N x P`` float matrix for ``properties``."""

        if not self._records or not properties:
            return np.zeros((len(self._records), len(properties)), dtype=float)
        return np.column_stack([self.column(prop, missing) for prop in properties])

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "MaterialCatalog":
        """Build a snapshot from a DataFrame, turning ``NaN`` cells into ``None``."""

        cleaned = frame.astype(object).where(pd.notna(frame), None)
        return cls(cleaned.to_dict(orient="records"))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([record.as_dict() for record in self._records])


class PropertyRequirement(BaseModel):
    """Target value and importance weight for one property."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    target: float
    weight: float = 0.5

    @field_validator("target")
    @classmethod
    def _finite_target(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("target must be a finite number")
        return value

    @field_validator("weight")
    @classmethod
    def _unit_weight(cls, value: float) -> float:
        if not math.isfinite(value) or value < 0.0 or value > 1.0:
            raise ValueError("weight must lie within [0, 1]")
        return value


def _parse_requirement(payload: Any) -> PropertyRequirement:
    if isinstance(payload, PropertyRequirement):
        return payload
    if isinstance(payload, Mapping):
        data = dict(payload)
        # Form payloads name the target ``value``.
        if "target" not in data and "value" in data:
            data["target"] = data.pop("value")
        return PropertyRequirement.model_validate(data)
    if isinstance(payload, Sequence) and not isinstance(payload, (str, bytes)):
        if len(payload) != 2:
            raise ValueError("expected a (target, weight) pair")
        target, weight = payload
        return PropertyRequirement(target=target, weight=weight)
    raise ValueError(f"unsupported requirement payload {payload!r}")


def _format_validation_errors(prop: str, error: ValidationError) -> list[str]:
    messages: list[str] = []
    for issue in error.errors():
        location = issue.get("loc", ())
        field_name = location[0] if location else "?"
        msg = issue.get("msg", "invalid value")
        messages.append(f"{prop}.{field_name}: {msg}")
    return messages


class RequirementSpec(Mapping[str, PropertyRequirement]):
    """Requirement for each of the six compared properties.

    All six properties must be present. A weight of ``0`` removes the
    property from the distance score while keeping it visible to the
    deviation analysis.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Any]) -> None:
        if not entries:
            raise InputPreconditionError(
                "Requirements are empty; provide a target and weight for every property.",
                issues=list(PROPERTY_COLUMNS),
            )

        unknown = sorted(set(entries).difference(PROPERTY_COLUMNS))
        missing = [prop for prop in PROPERTY_COLUMNS if prop not in entries]
        if unknown or missing:
            issues = [f"missing: {prop}" for prop in missing]
            issues.extend(f"unknown: {prop}" for prop in unknown)
            raise InputPreconditionError(
                "Requirements must cover exactly the six compared properties: "
                + "; ".join(issues),
                issues=issues,
            )

        parsed: Dict[str, PropertyRequirement] = {}
        issues: list[str] = []
        for prop in PROPERTY_COLUMNS:
            try:
                parsed[prop] = _parse_requirement(entries[prop])
            except ValidationError as error:
                issues.extend(_format_validation_errors(prop, error))
            except (TypeError, ValueError) as error:
                issues.append(f"{prop}: {error}")
        if issues:
            raise InputPreconditionError(
                "Requirements contain invalid values: " + "; ".join(issues),
                issues=issues,
            )

        self._entries = MappingProxyType(parsed)

    def __getitem__(self, prop: str) -> PropertyRequirement:
        return self._entries[prop]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{p}=({r.target}, {r.weight})" for p, r in self._entries.items())
        return f"RequirementSpec({pairs})"

    @classmethod
    def default(cls) -> "RequirementSpec":
        return cls(DEFAULT_REQUIREMENTS)

    @classmethod
    def with_defaults(cls, overrides: Mapping[str, Any] | None = None) -> "RequirementSpec":
        """Default requirements with ``overrides`` applied on top.

        An override may be a full ``{"target", "weight"}`` entry or a bare
        number, which replaces only the target.
        """

        entries: Dict[str, Any] = {
            prop: {"target": target, "weight": weight}
            for prop, (target, weight) in DEFAULT_REQUIREMENTS.items()
        }
        for prop, payload in (overrides or {}).items():
            if isinstance(payload, (int, float)) and not isinstance(payload, bool):
                base = entries.get(prop, {"weight": 0.5})
                entries[prop] = {"target": payload, "weight": base["weight"]}
            else:
                entries[prop] = payload
        return cls(entries)

    def target(self, prop: str) -> float:
        return self._entries[prop].target

    def weight(self, prop: str) -> float:
        return self._entries[prop].weight

    def targets(self) -> np.ndarray:
        return np.array([self._entries[p].target for p in PROPERTY_COLUMNS], dtype=float)

    def weights(self) -> np.ndarray:
        return np.array([self._entries[p].weight for p in PROPERTY_COLUMNS], dtype=float)

    def replace(self, prop: str, *, target: float | None = None, weight: float | None = None) -> "RequirementSpec":
        """Return a copy with ``prop`` updated; the original is left untouched."""

        current = self._entries[prop]
        entries: Dict[str, Any] = dict(self._entries)
        entries[prop] = {
            "target": current.target if target is None else target,
            "weight": current.weight if weight is None else weight,
        }
        return RequirementSpec(entries)

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {prop: req.model_dump() for prop, req in self._entries.items()}


@dataclass(frozen=True)
class RankedMaterial:
    """A catalog record paired with its distance score for one ranking call."""

    record: MaterialRecord = field(hash=False)
    distance_score: float
    rank: int
    contributions: Mapping[str, float] = field(default_factory=dict, hash=False)

    @property
    def label(self) -> str:
        return self.record.label

    def numeric(self, prop: str, default: float | None = None) -> float | None:
        return self.record.numeric(prop, default)

    def as_dict(self) -> Dict[str, Any]:
        payload = self.record.as_dict()
        payload[DISTANCE_COLUMN] = self.distance_score
        return payload


def ensure_catalog(catalog: MaterialCatalog | Iterable[Mapping[str, Any]]) -> MaterialCatalog:
    """Return ``catalog`` as a snapshot, wrapping plain record iterables."""

    if isinstance(catalog, MaterialCatalog):
        return catalog
    return MaterialCatalog(catalog)


def require_numeric_properties(
    catalog: MaterialCatalog,
    properties: Sequence[str],
    *,
    purpose: str = "Analysis",
) -> None:
    """Reject names outside the numeric catalog columns or holding non-numeric values."""

    issues: list[str] = []
    for prop in properties:
        if prop not in NUMERIC_COLUMNS:
            issues.append(f"{prop}: not a numeric catalog property")
            continue
        for record in catalog:
            value = record.get(prop)
            if value is not None and record.numeric(prop) is None:
                issues.append(f"{prop}: non-numeric value {value!r} for {record.label!r}")
                break
    if issues:
        raise InputPreconditionError(
            f"{purpose} requested on non-numeric properties: " + "; ".join(issues),
            issues=issues,
        )


def ensure_requirements(requirements: RequirementSpec | Mapping[str, Any]) -> RequirementSpec:
    if isinstance(requirements, RequirementSpec):
        return requirements
    if requirements is None:
        raise InputPreconditionError("Requirements are missing.")
    return RequirementSpec(requirements)


__all__ = [
    "MaterialRecord",
    "MaterialCatalog",
    "PropertyRequirement",
    "RequirementSpec",
    "RankedMaterial",
    "ensure_catalog",
    "ensure_requirements",
    "require_numeric_properties",
]
