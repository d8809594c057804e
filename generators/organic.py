"""
Organic generators — recursive branching and irregular cell clusters.
"""

from __future__ import annotations

import math
from typing import Annotated

import numpy as np

from generators.geometry import Polyline, polyline
from generators.params import GeneratorParams, Point3, Range, Vector

_MEMBRANE_STEP = 0.2


# ── Branching tree ──────────────────────────────────────────────────


class BranchingTreeParams(GeneratorParams):
    depth: Annotated[int, Range(1, 9)] = 6
    branch_angle: Annotated[float, Range(0.05, 1.5)] = 0.6
    length_ratio: Annotated[float, Range(0.3, 0.9)] = 0.7
    trunk_length: Annotated[float, Range(0.5, 10.0)] = 4.0
    z_rise: Annotated[float, Range(0.0, 1.0)] = 0.3
    base: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, -4.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.8


def branching_tree(params: BranchingTreeParams, rng: np.random.Generator) -> list[Polyline]:
    """Binary tree grown upward from `base`: 2^depth - 1 segments, depth first."""
    lines: list[Polyline] = []

    def grow(start: Point3, length: float, angle: float, remaining: int, rise: float) -> None:
        end = (
            start[0] + math.cos(angle) * length,
            start[1] + math.sin(angle) * length,
            start[2] + rise,
        )
        level = params.depth - remaining  # 0 at the trunk
        opacity = params.opacity * (1.0 - 0.5 * level / params.depth)
        width = params.line_width * (1.0 + 0.15 * remaining)
        lines.append(polyline([start, end], opacity, width))
        if remaining > 1:
            child = length * params.length_ratio
            grow(end, child, angle - params.branch_angle, remaining - 1, params.z_rise)
            grow(end, child, angle + params.branch_angle, remaining - 1, params.z_rise)

    grow(params.base, params.trunk_length, math.pi / 2, params.depth, 0.0)
    return lines


# ── Cellular ────────────────────────────────────────────────────────


class CellularParams(GeneratorParams):
    cells: Annotated[int, Range(1, 40)] = 15
    min_radius: Annotated[float, Range(0.1, 5.0)] = 0.5
    max_radius: Annotated[float, Range(0.1, 5.0)] = 2.0
    irregularity: Annotated[float, Range(0.0, 1.0)] = 0.3
    spread: Annotated[float, Range(1.0, 20.0)] = 5.0
    connect_distance: Annotated[float, Range(0.0, 20.0)] = 4.0
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.6


def cellular(params: CellularParams, rng: np.random.Generator) -> list[Polyline]:
    """Noisy closed membranes, then links between cells closer than connect_distance."""
    cx, cy, cz = params.center
    lo, hi = sorted((params.min_radius, params.max_radius))
    centers = rng.uniform(-params.spread, params.spread, size=(params.cells, 2))
    radii = rng.uniform(lo, hi, params.cells)
    n_points = int(2 * math.pi / _MEMBRANE_STEP) + 1

    lines = []
    for (x, y), radius in zip(centers, radii):
        noise = rng.uniform(-params.irregularity / 2, params.irregularity / 2, n_points)
        pts = [
            (
                cx + x + math.cos(k * _MEMBRANE_STEP) * max(0.05, radius + noise[k]),
                cy + y + math.sin(k * _MEMBRANE_STEP) * max(0.05, radius + noise[k]),
                cz,
            )
            for k in range(n_points)
        ]
        pts.append(pts[0])
        lines.append(polyline(pts, params.opacity, params.line_width))

    for i in range(params.cells):
        for j in range(i + 1, params.cells):
            if np.hypot(*(centers[i] - centers[j])) < params.connect_distance:
                lines.append(polyline(
                    [(cx + centers[i][0], cy + centers[i][1], cz),
                     (cx + centers[j][0], cy + centers[j][1], cz)],
                    params.opacity * 0.5,
                    params.line_width,
                ))
    return lines
