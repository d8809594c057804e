"""
Deterministic pattern generators — grids, circles, fans, spirals, waves.

Each generator is a pure function `(params, rng) -> list[Polyline]`.
Only the grid jitter and the radial length variation draw from `rng`.
"""

from __future__ import annotations

import math
from typing import Annotated, Callable

import numpy as np

from generators.geometry import Polyline, circle_segments, polyline, ring_points
from generators.params import GeneratorParams, Point3, Range, Vector

_MAX_GRID_STEPS = 201
_SPIRAL_ANGLE_STEP = 0.1
_MAX_SPIRAL_POINTS = 2000
_WAVE_X_MIN = -6.0
_WAVE_SAMPLES = 121  # x = -6.0 .. 6.0 in steps of 0.1


# ── Grid ────────────────────────────────────────────────────────────


class GridParams(GeneratorParams):
    size: Annotated[float, Range(1.0, 40.0)] = 10.0
    spacing: Annotated[float, Range(0.1, 10.0)] = 1.0
    z_layers: Annotated[int, Range(1, 5)] = 1
    layer_spacing: Annotated[float, Range(0.1, 10.0)] = 1.0
    noise: Annotated[float, Range(0.0, 1.0)] = 0.0
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.5


def grid(params: GridParams, rng: np.random.Generator) -> list[Polyline]:
    """Horizontal then vertical line families per depth layer.

    Lines are sampled at every grid intersection so that jitter bends them.
    """
    half = params.size / 2
    # Past the step cap the spacing widens so the lines still span the domain
    spacing = max(params.spacing, params.size / (_MAX_GRID_STEPS - 1))
    steps = min(int(math.floor(params.size / spacing + 1e-9)) + 1, _MAX_GRID_STEPS)
    coords = [-half + i * spacing for i in range(steps)]
    cx, cy, cz = params.center
    amount = params.noise * spacing / 2

    def jitter() -> float:
        return float(rng.uniform(-amount, amount)) if amount > 0 else 0.0

    lines: list[Polyline] = []
    for layer in range(params.z_layers):
        z = cz + (layer - (params.z_layers - 1) / 2) * params.layer_spacing
        opacity = params.opacity * (1.0 - 0.15 * layer)
        for y in coords:
            pts = [(cx + x + jitter(), cy + y + jitter(), z) for x in coords]
            lines.append(polyline(pts, opacity, params.line_width))
        for x in coords:
            pts = [(cx + x + jitter(), cy + y + jitter(), z) for y in coords]
            lines.append(polyline(pts, opacity, params.line_width))
    return lines


# ── Concentric circles ──────────────────────────────────────────────


class ConcentricCirclesParams(GeneratorParams):
    count: Annotated[int, Range(1, 50)] = 5
    min_radius: Annotated[float, Range(0.1, 20.0)] = 1.0
    max_radius: Annotated[float, Range(0.1, 30.0)] = 5.0
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.8


def concentric_circles(
    params: ConcentricCirclesParams, rng: np.random.Generator
) -> list[Polyline]:
    lo, hi = sorted((params.min_radius, params.max_radius))
    lines = []
    for i in range(params.count):
        radius = lo if params.count == 1 else lo + (hi - lo) * i / (params.count - 1)
        opacity = params.opacity * (1.0 - 0.5 * i / params.count)
        pts = ring_points(params.center, radius, circle_segments(radius))
        lines.append(polyline(pts, opacity, params.line_width))
    return lines


# ── Radial lines ────────────────────────────────────────────────────


class RadialLinesParams(GeneratorParams):
    count: Annotated[int, Range(1, 360)] = 12
    length: Annotated[float, Range(0.1, 30.0)] = 5.0
    variation: Annotated[float, Range(0.0, 1.0)] = 0.0
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.6


def radial_lines(params: RadialLinesParams, rng: np.random.Generator) -> list[Polyline]:
    """Spokes from the center, evenly spaced over a full turn starting at 0 rad."""
    cx, cy, cz = params.center
    lines = []
    for i in range(params.count):
        angle = 2 * math.pi * i / params.count
        length = params.length
        if params.variation > 0:
            length *= 1.0 + float(rng.uniform(-params.variation, params.variation))
        end = (cx + math.cos(angle) * length, cy + math.sin(angle) * length, cz)
        lines.append(polyline([(cx, cy, cz), end], params.opacity, params.line_width))
    return lines


# ── Spirals ─────────────────────────────────────────────────────────


class _SpiralShape(GeneratorParams):
    turns: Annotated[float, Range(0.5, 20.0)] = 5.0
    max_radius: Annotated[float, Range(0.5, 30.0)] = 10.0
    arms: Annotated[int, Range(1, 8)] = 1
    height: Annotated[float, Range(-10.0, 10.0)] = 0.0
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)


class SpiralParams(_SpiralShape):
    growth: Annotated[float, Range(0.01, 5.0)] = 0.3


class LogSpiralParams(_SpiralShape):
    a: Annotated[float, Range(0.01, 5.0)] = 0.1
    b: Annotated[float, Range(0.01, 1.0)] = 0.2
    turns: Annotated[float, Range(0.5, 20.0)] = 4.0


def _trace_spirals(
    params: _SpiralShape, radius_at: Callable[[float], float]
) -> list[Polyline]:
    """Sample every arm at a fixed angular step.

    An arm stops at the end of its turns, at max_radius, at a non-finite
    radius, or after _MAX_SPIRAL_POINTS samples, whichever comes first.
    """
    cx, cy, cz = params.center
    theta_max = params.turns * 2 * math.pi
    lines = []
    for arm in range(params.arms):
        offset = 2 * math.pi * arm / params.arms
        pts = []
        for i in range(_MAX_SPIRAL_POINTS):
            theta = i * _SPIRAL_ANGLE_STEP
            if theta > theta_max:
                break
            r = radius_at(theta)
            if not math.isfinite(r) or r > params.max_radius:
                break
            pts.append((
                cx + math.cos(theta + offset) * r,
                cy + math.sin(theta + offset) * r,
                cz + params.height * theta / theta_max,
            ))
        lines.append(polyline(pts, params.opacity, params.line_width))
    return lines


def spiral(params: SpiralParams, rng: np.random.Generator) -> list[Polyline]:
    """Archimedean spiral: r = growth * theta."""
    return _trace_spirals(params, lambda theta: params.growth * theta)


def logarithmic_spiral(params: LogSpiralParams, rng: np.random.Generator) -> list[Polyline]:
    """Logarithmic spiral: r = a * e^(b * theta)."""

    def radius_at(theta: float) -> float:
        try:
            return params.a * math.exp(params.b * theta)
        except OverflowError:
            return math.inf

    return _trace_spirals(params, radius_at)


# ── Harmonic wave ───────────────────────────────────────────────────


class HarmonicWaveParams(GeneratorParams):
    harmonics: Annotated[int, Range(1, 12)] = 5
    frequency: Annotated[float, Range(0.1, 10.0)] = 1.0
    amplitude: Annotated[float, Range(0.1, 10.0)] = 2.0
    phase: Annotated[float, Range(-2 * math.pi, 2 * math.pi)] = 0.0
    depth_spacing: Annotated[float, Range(0.0, 2.0)] = 0.2
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)


def harmonic_wave(params: HarmonicWaveParams, rng: np.random.Generator) -> list[Polyline]:
    """One polyline per harmonic k: (amplitude / k) * sin(frequency * k * x + phase)."""
    cx, cy, cz = params.center
    xs = [_WAVE_X_MIN + i * 0.1 for i in range(_WAVE_SAMPLES)]
    lines = []
    for k in range(1, params.harmonics + 1):
        amp = params.amplitude / k
        z = cz + (k - 1) * params.depth_spacing
        pts = [
            (cx + x, cy + amp * math.sin(params.frequency * k * x + params.phase), z)
            for x in xs
        ]
        opacity = params.opacity * (1.0 - 0.5 * (k - 1) / params.harmonics)
        lines.append(polyline(pts, opacity, params.line_width))
    return lines
