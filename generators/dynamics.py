"""
Simulation-style generators — deformed meshes, particles, orbits, flow fields.

Every integrator runs for a fixed, bounded number of steps; there is no
convergence loop anywhere in this module.
"""

from __future__ import annotations

import math
from typing import Annotated

import numpy as np

from generators.geometry import Polyline, cross_marker, polyline
from generators.params import GeneratorParams, Point3, Range, Vector

_GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))


# ── Mesh deformation ────────────────────────────────────────────────


class MeshDeformationParams(GeneratorParams):
    resolution: Annotated[int, Range(2, 60)] = 20
    size: Annotated[float, Range(1.0, 30.0)] = 10.0
    frequency: Annotated[float, Range(0.1, 10.0)] = 1.0
    strength: Annotated[float, Range(0.0, 5.0)] = 0.5
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.6


def mesh_deformation(
    params: MeshDeformationParams, rng: np.random.Generator
) -> list[Polyline]:
    """Warped wireframe: a control grid displaced by sinusoids of its own position."""
    half = params.size / 2
    f, s = params.frequency, params.strength
    coords = np.linspace(-half, half, params.resolution)
    gx, gy = np.meshgrid(coords, coords)
    warped = np.stack(
        [
            gx + 0.25 * s * np.sin(f * gy),
            gy + 0.25 * s * np.sin(f * gx),
            s * np.sin(f * gx) * np.cos(f * gy),
        ],
        axis=-1,
    ) + np.asarray(params.center)

    lines = [polyline(row, params.opacity, params.line_width) for row in warped]
    lines += [
        polyline(warped[:, j], params.opacity, params.line_width)
        for j in range(params.resolution)
    ]
    return lines


# ── Particle simulation ─────────────────────────────────────────────


class ParticleSystemParams(GeneratorParams):
    emitters: Annotated[int, Range(1, 10)] = 3
    particles: Annotated[int, Range(1, 100)] = 20
    steps: Annotated[int, Range(2, 200)] = 50
    dt: Annotated[float, Range(0.001, 0.5)] = 0.05
    speed: Annotated[float, Range(0.1, 20.0)] = 4.0
    gravity: Annotated[float, Range(0.0, 20.0)] = 3.0
    friction: Annotated[float, Range(0.0, 1.0)] = 0.1
    spread: Annotated[float, Range(0.0, 15.0)] = 4.0
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.5


def particle_system(
    params: ParticleSystemParams, rng: np.random.Generator
) -> list[Polyline]:
    """Explicit Euler trajectories, one polyline per particle.

    Emitters sit evenly on a ring of radius `spread`. Each particle leaves
    upward at a random heading; gravity pulls along -y and friction scales
    velocity by (1 - friction * dt) every step.
    """
    center = np.asarray(params.center)
    damping = max(0.0, 1.0 - params.friction * params.dt)
    n = params.particles
    lines = []
    for e in range(params.emitters):
        angle = 2 * math.pi * e / params.emitters
        origin = center + np.array([math.cos(angle), math.sin(angle), 0.0]) * params.spread

        heading = rng.uniform(0.0, 2 * math.pi, n)
        elevation = rng.uniform(0.3, 1.3, n)
        speed = params.speed * rng.uniform(0.5, 1.0, n)
        vel = np.column_stack([
            speed * np.cos(elevation) * np.cos(heading),
            speed * np.sin(elevation),
            speed * np.cos(elevation) * np.sin(heading),
        ])
        pos = np.tile(origin, (n, 1))

        trail = [pos]
        for _ in range(params.steps):
            pos = pos + vel * params.dt
            vel = vel.copy()
            vel[:, 1] -= params.gravity * params.dt
            vel *= damping
            trail.append(pos)
        paths = np.stack(trail, axis=1)  # (particles, steps + 1, 3)
        lines += [polyline(path, params.opacity, params.line_width) for path in paths]
    return lines


# ── Orbital system ──────────────────────────────────────────────────


class OrbitalSystemParams(GeneratorParams):
    bodies: Annotated[int, Range(1, 5)] = 1
    objects: Annotated[int, Range(1, 50)] = 8
    eccentricity: Annotated[float, Range(0.0, 0.9)] = 0.3
    steps: Annotated[int, Range(16, 360)] = 128
    base_radius: Annotated[float, Range(0.5, 10.0)] = 2.0
    orbit_spacing: Annotated[float, Range(0.1, 5.0)] = 0.8
    body_spacing: Annotated[float, Range(1.0, 20.0)] = 8.0
    marker_size: Annotated[float, Range(0.05, 2.0)] = 0.3
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.6


def orbital_system(params: OrbitalSystemParams, rng: np.random.Generator) -> list[Polyline]:
    """Conic orbits r = r0 (1 - e^2) / (1 + e cos theta) around central bodies.

    Objects are dealt round-robin to bodies; each further ring around a body
    widens r0 by `orbit_spacing`. Periapsis advances by the golden angle per
    object and each orbit gets a small fixed tilt out of the XY plane.
    """
    cx, cy, cz = params.center
    e = params.eccentricity
    bodies = [
        (cx + (b - (params.bodies - 1) / 2) * params.body_spacing, cy, cz)
        for b in range(params.bodies)
    ]

    lines: list[Polyline] = []
    for body in bodies:
        lines += cross_marker(body, params.marker_size, min(1.0, params.opacity + 0.2), params.line_width)

    for i in range(params.objects):
        bx, by, bz = bodies[i % params.bodies]
        r0 = params.base_radius + (i // params.bodies) * params.orbit_spacing
        omega = i * _GOLDEN_ANGLE
        tilt = 0.1 * ((i % 5) - 2)
        pts = []
        for s in range(params.steps + 1):
            theta = 2 * math.pi * s / params.steps
            r = r0 * (1 - e * e) / (1 + e * math.cos(theta))
            x = r * math.cos(theta + omega)
            y = r * math.sin(theta + omega)
            pts.append((bx + x, by + y * math.cos(tilt), bz + y * math.sin(tilt)))
        lines.append(polyline(pts, params.opacity, params.line_width, dashed=True))
    return lines


# ── Flow field ──────────────────────────────────────────────────────


class FlowFieldParams(GeneratorParams):
    particles: Annotated[int, Range(1, 300)] = 60
    steps: Annotated[int, Range(2, 300)] = 80
    step_size: Annotated[float, Range(0.01, 1.0)] = 0.1
    complexity: Annotated[float, Range(0.1, 5.0)] = 1.0
    size: Annotated[float, Range(1.0, 30.0)] = 10.0
    depth: Annotated[float, Range(0.0, 5.0)] = 0.0
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.5


def field_angle(x: np.ndarray, y: np.ndarray, complexity: float) -> np.ndarray:
    """Direction of the synthetic vector field at (x, y), in radians."""
    c = 0.3 * complexity
    return math.pi * (np.sin(c * x) + np.cos(c * y))


def _reflect(values: np.ndarray, bound: float) -> np.ndarray:
    values = np.where(values > bound, 2 * bound - values, values)
    values = np.where(values < -bound, -2 * bound - values, values)
    return np.clip(values, -bound, bound)


def flow_field(params: FlowFieldParams, rng: np.random.Generator) -> list[Polyline]:
    """Advect particles through the field, reflecting off the domain edges."""
    bound = params.size / 2
    n = params.particles
    xy = rng.uniform(-bound, bound, size=(n, 2))
    z = rng.uniform(-params.depth, params.depth, n)

    trail = [xy]
    for _ in range(params.steps):
        angle = field_angle(xy[:, 0], xy[:, 1], params.complexity)
        xy = xy + params.step_size * np.column_stack([np.cos(angle), np.sin(angle)])
        xy = _reflect(xy, bound)
        trail.append(xy)
    paths = np.stack(trail, axis=1)  # (particles, steps + 1, 2)

    cx, cy, cz = params.center
    lines = []
    for k in range(n):
        pts = [(cx + x, cy + y, cz + z[k]) for x, y in paths[k]]
        lines.append(polyline(pts, params.opacity, params.line_width, arrow=True))
    return lines
