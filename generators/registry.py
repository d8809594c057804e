"""
Algorithm registry — the explicit table of every procedural generator.

Each AlgorithmType maps to an Algorithm bundling its parameter model and
its generate function. Algorithm.run() is the fault boundary for a single
invocation: sanitize → generate → validate, with any internal exception
turned into an empty result.

=== HOW TO ADD AN ALGORITHM ===

1. Write a parameter model (subclass GeneratorParams) and a function
   `generate(params, rng) -> list[Polyline]` in one of the generator modules
2. Add a member to AlgorithmType
3. Add the pairing to REGISTRY
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import numpy as np

from generators import dynamics, organic, patterns, stochastic
from generators.geometry import Polyline, validate_polylines
from generators.params import GeneratorParams

log = logging.getLogger(__name__)


class AlgorithmType(str, Enum):
    """Every algorithm tag a scene may request."""

    GRID = "grid"
    CONCENTRIC_CIRCLES = "concentric_circles"
    RADIAL_LINES = "radial_lines"
    RANDOM_NETWORK = "random_network"
    SPIRAL = "spiral"
    LOGARITHMIC_SPIRAL = "logarithmic_spiral"
    HARMONIC_WAVE = "harmonic_wave"
    SCATTER = "scatter"
    VORONOI = "voronoi"
    TRIANGULATION = "triangulation"
    MESH_DEFORMATION = "mesh_deformation"
    PARTICLE_SYSTEM = "particle_system"
    ORBITAL_SYSTEM = "orbital_system"
    FLOW_FIELD = "flow_field"
    BRANCHING_TREE = "branching_tree"
    CELLULAR = "cellular"

    @classmethod
    def _missing_(cls, value: object) -> Optional[AlgorithmType]:
        # "Radial-Lines", " flow field ", "orbits" ...
        if not isinstance(value, str):
            return None
        key = re.sub(r"[\s\-]+", "_", value.strip().lower())
        key = _ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        return None


_ALIASES = {
    "circles": "concentric_circles",
    "concentric": "concentric_circles",
    "radial": "radial_lines",
    "network": "random_network",
    "graph": "random_network",
    "archimedean_spiral": "spiral",
    "log_spiral": "logarithmic_spiral",
    "wave": "harmonic_wave",
    "harmonics": "harmonic_wave",
    "scatter_plot": "scatter",
    "delaunay": "triangulation",
    "mesh": "mesh_deformation",
    "particles": "particle_system",
    "orbits": "orbital_system",
    "orbital": "orbital_system",
    "flow": "flow_field",
    "tree": "branching_tree",
    "cells": "cellular",
}


def parse_algorithm_type(tag: Any) -> Optional[AlgorithmType]:
    """Resolve a raw tag to an AlgorithmType, or None if it is unknown."""
    try:
        return AlgorithmType(tag)
    except (ValueError, TypeError):
        return None


@dataclass(frozen=True)
class Algorithm:
    """A registered generator: its parameter model plus its generate function."""
    type: AlgorithmType
    params_model: type[GeneratorParams]
    generate: Callable[[Any, np.random.Generator], list[Polyline]]

    def run(self, raw_params: Any, rng: np.random.Generator) -> tuple[Polyline, ...]:
        """Sanitize, generate and validate. Never raises."""
        try:
            params = self.params_model.sanitize(raw_params)
            return validate_polylines(self.generate(params, rng))
        except Exception:
            log.exception("Algorithm %r failed; it contributes no lines", self.type.value)
            return ()


REGISTRY: dict[AlgorithmType, Algorithm] = {
    AlgorithmType.GRID: Algorithm(
        AlgorithmType.GRID, patterns.GridParams, patterns.grid
    ),
    AlgorithmType.CONCENTRIC_CIRCLES: Algorithm(
        AlgorithmType.CONCENTRIC_CIRCLES,
        patterns.ConcentricCirclesParams,
        patterns.concentric_circles,
    ),
    AlgorithmType.RADIAL_LINES: Algorithm(
        AlgorithmType.RADIAL_LINES, patterns.RadialLinesParams, patterns.radial_lines
    ),
    AlgorithmType.RANDOM_NETWORK: Algorithm(
        AlgorithmType.RANDOM_NETWORK,
        stochastic.RandomNetworkParams,
        stochastic.random_network,
    ),
    AlgorithmType.SPIRAL: Algorithm(
        AlgorithmType.SPIRAL, patterns.SpiralParams, patterns.spiral
    ),
    AlgorithmType.LOGARITHMIC_SPIRAL: Algorithm(
        AlgorithmType.LOGARITHMIC_SPIRAL,
        patterns.LogSpiralParams,
        patterns.logarithmic_spiral,
    ),
    AlgorithmType.HARMONIC_WAVE: Algorithm(
        AlgorithmType.HARMONIC_WAVE, patterns.HarmonicWaveParams, patterns.harmonic_wave
    ),
    AlgorithmType.SCATTER: Algorithm(
        AlgorithmType.SCATTER, stochastic.ScatterParams, stochastic.scatter
    ),
    AlgorithmType.VORONOI: Algorithm(
        AlgorithmType.VORONOI, stochastic.VoronoiParams, stochastic.voronoi
    ),
    AlgorithmType.TRIANGULATION: Algorithm(
        AlgorithmType.TRIANGULATION,
        stochastic.TriangulationParams,
        stochastic.triangulation,
    ),
    AlgorithmType.MESH_DEFORMATION: Algorithm(
        AlgorithmType.MESH_DEFORMATION,
        dynamics.MeshDeformationParams,
        dynamics.mesh_deformation,
    ),
    AlgorithmType.PARTICLE_SYSTEM: Algorithm(
        AlgorithmType.PARTICLE_SYSTEM,
        dynamics.ParticleSystemParams,
        dynamics.particle_system,
    ),
    AlgorithmType.ORBITAL_SYSTEM: Algorithm(
        AlgorithmType.ORBITAL_SYSTEM,
        dynamics.OrbitalSystemParams,
        dynamics.orbital_system,
    ),
    AlgorithmType.FLOW_FIELD: Algorithm(
        AlgorithmType.FLOW_FIELD, dynamics.FlowFieldParams, dynamics.flow_field
    ),
    AlgorithmType.BRANCHING_TREE: Algorithm(
        AlgorithmType.BRANCHING_TREE,
        organic.BranchingTreeParams,
        organic.branching_tree,
    ),
    AlgorithmType.CELLULAR: Algorithm(
        AlgorithmType.CELLULAR, organic.CellularParams, organic.cellular
    ),
}


def run_algorithm(
    algorithm_type: AlgorithmType,
    raw_params: Any = None,
    rng: Optional[np.random.Generator] = None,
) -> tuple[Polyline, ...]:
    """Run one registered algorithm on untrusted params."""
    if rng is None:
        rng = np.random.default_rng()
    return REGISTRY[algorithm_type].run(raw_params, rng)
