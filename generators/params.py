"""
Parameter sanitizer — typed, bounded parameter models for every algorithm.

Algorithm parameters arrive as loosely-typed mappings proposed by a text
model, so nothing about them can be trusted: numbers show up as strings,
vectors have the wrong arity, enums are misspelled, values are NaN or
absurdly large. Each algorithm declares a frozen pydantic model whose fields
carry one of three bound markers:

    count: Annotated[int, Range(1, 50)] = 5
    center: Annotated[Point3, Vector(-20, 20)] = (0.0, 0.0, 0.0)
    marker: Annotated[str, Choice("cross", "circle", "square")] = "cross"

`Params.sanitize(raw)` coerces and clamps every field before pydantic sees
it, substituting the field default on any coercion failure. It never raises.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.fields import FieldInfo

Point3 = tuple[float, float, float]


@dataclass(frozen=True)
class Range:
    """Inclusive numeric bounds."""
    lo: float
    hi: float


@dataclass(frozen=True)
class Vector:
    """A 3D coordinate with every component in [lo, hi]."""
    lo: float
    hi: float


@dataclass(frozen=True)
class Choice:
    """A closed set of lowercase string options."""
    options: tuple[str, ...]

    def __init__(self, *options: str):
        object.__setattr__(self, "options", tuple(options))


# ── Coercion helpers ────────────────────────────────────────────────


def to_number(value: Any) -> Optional[float]:
    """Coerce to a finite float, or None if that isn't possible."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, numbers.Real):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return num if math.isfinite(num) else None


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def to_vector(value: Any, lo: float, hi: float) -> Optional[Point3]:
    """Coerce a 2- or 3-element sequence into a bounded 3D point."""
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        return None
    if len(value) not in (2, 3):
        return None
    comps = [to_number(v) for v in value]
    if any(c is None for c in comps):
        return None
    if len(comps) == 2:
        comps.append(0.0)
    return tuple(clamp(c, lo, hi) for c in comps)  # type: ignore[return-value]


def _bound_marker(info: FieldInfo) -> Any:
    for meta in info.metadata:
        if isinstance(meta, (Range, Vector, Choice)):
            return meta
    return None


def sanitize_value(value: Any, info: FieldInfo) -> Any:
    """Coerce and clamp one raw value according to its field declaration."""
    default = info.default
    marker = _bound_marker(info)

    if isinstance(marker, Range):
        num = to_number(value)
        if num is None:
            return default
        if info.annotation is int:
            return int(clamp(round(num), math.ceil(marker.lo), math.floor(marker.hi)))
        return clamp(num, marker.lo, marker.hi)

    if isinstance(marker, Vector):
        vec = to_vector(value, marker.lo, marker.hi)
        return default if vec is None else vec

    if isinstance(marker, Choice):
        if isinstance(value, str) and value.strip().lower() in marker.options:
            return value.strip().lower()
        return default

    return default


# ── Base model ──────────────────────────────────────────────────────


class GeneratorParams(BaseModel):
    """Base for every algorithm's parameter model.

    Carries the styling fields shared by all algorithms.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    opacity: Annotated[float, Range(0.05, 1.0)] = 0.7
    line_width: Annotated[float, Range(0.1, 5.0)] = 1.0

    @model_validator(mode="before")
    @classmethod
    def _coerce_and_clamp(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, Mapping):
            return {}
        clean: dict[str, Any] = {}
        for name, info in cls.model_fields.items():
            if name in data:
                clean[name] = sanitize_value(data[name], info)
        return clean

    @classmethod
    def sanitize(cls, raw: Any):
        """Build a bounded parameter set from an untrusted mapping. Never raises."""
        return cls.model_validate(raw if isinstance(raw, Mapping) else {})
