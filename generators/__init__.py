"""Procedural generators — untrusted params → sanitized params → polylines."""

from generators.geometry import Polyline, polyline, truncate, validate_polylines
from generators.params import GeneratorParams
from generators.registry import (
    REGISTRY,
    Algorithm,
    AlgorithmType,
    parse_algorithm_type,
    run_algorithm,
)
from generators.fallback import fallback_lines

__all__ = [
    "Polyline",
    "polyline",
    "truncate",
    "validate_polylines",
    "GeneratorParams",
    "REGISTRY",
    "Algorithm",
    "AlgorithmType",
    "parse_algorithm_type",
    "run_algorithm",
    "fallback_lines",
]
