"""
Stochastic generators — random graphs, point clouds and proximity partitions.

All randomness comes from the injected numpy Generator, so a seeded
generator reproduces a scene exactly. The Voronoi and triangulation
generators are approximations on purpose: a rasterized nearest-seed
boundary and a k-nearest-neighbour graph, not exact constructions.
"""

from __future__ import annotations

from typing import Annotated

import numpy as np

from generators.geometry import (
    Polyline,
    cross_marker,
    polyline,
    ring_points,
    square_points,
)
from generators.params import Choice, GeneratorParams, Point3, Range, Vector

_MAX_NETWORK_EDGES = 1500
_MAX_TRIANGULATION_EDGES = 1000
_NEAREST_NEIGHBORS = 3
_CIRCLE_MARKER_SEGMENTS = 8


def _uniform_box(
    rng: np.random.Generator, n: int, spread: float, depth: float, center: Point3
) -> np.ndarray:
    """n points uniform in [-spread, spread]^2 x [-depth, depth], offset by center."""
    half = np.array([spread, spread, depth])
    return rng.uniform(-half, half, size=(n, 3)) + np.asarray(center)


# ── Random network ──────────────────────────────────────────────────


class RandomNetworkParams(GeneratorParams):
    nodes: Annotated[int, Range(0, 200)] = 20
    connection_probability: Annotated[float, Range(0.0, 1.0)] = 0.15
    spread: Annotated[float, Range(0.5, 20.0)] = 6.0
    depth: Annotated[float, Range(0.0, 10.0)] = 1.0
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.5


def random_network(params: RandomNetworkParams, rng: np.random.Generator) -> list[Polyline]:
    """Erdős–Rényi graph: every unordered node pair is an edge with fixed probability."""
    n = params.nodes
    if n < 2:
        return []
    nodes = _uniform_box(rng, n, params.spread, params.depth, params.center)
    ii, jj = np.triu_indices(n, k=1)
    keep = rng.random(len(ii)) < params.connection_probability
    pairs = list(zip(ii[keep], jj[keep]))[:_MAX_NETWORK_EDGES]
    return [
        polyline([nodes[i], nodes[j]], params.opacity, params.line_width)
        for i, j in pairs
    ]


# ── Scatter ─────────────────────────────────────────────────────────


class ScatterParams(GeneratorParams):
    points: Annotated[int, Range(1, 500)] = 60
    distribution: Annotated[str, Choice("uniform", "exponential", "clustered")] = "uniform"
    marker: Annotated[str, Choice("cross", "circle", "square")] = "cross"
    marker_size: Annotated[float, Range(0.02, 1.0)] = 0.1
    spread: Annotated[float, Range(0.5, 20.0)] = 5.0
    depth: Annotated[float, Range(0.0, 10.0)] = 0.0
    clusters: Annotated[int, Range(1, 10)] = 3
    cluster_spread: Annotated[float, Range(0.1, 5.0)] = 0.8
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.6


def _scatter_positions(params: ScatterParams, rng: np.random.Generator) -> np.ndarray:
    n, s = params.points, params.spread
    if params.distribution == "exponential":
        # One-sided skew: dense near -spread, thinning out toward +spread
        x = -s + np.minimum(rng.exponential(0.35, n), 1.0) * 2 * s
        y = rng.uniform(-s, s, n)
    elif params.distribution == "clustered":
        centers = rng.uniform(-0.7 * s, 0.7 * s, size=(params.clusters, 2))
        owner = np.arange(n) % params.clusters
        xy = centers[owner] + rng.normal(0.0, params.cluster_spread, size=(n, 2))
        x, y = np.clip(xy, -s, s).T
    else:
        x = rng.uniform(-s, s, n)
        y = rng.uniform(-s, s, n)
    z = rng.uniform(-params.depth, params.depth, n)
    return np.column_stack([x, y, z]) + np.asarray(params.center)


def scatter(params: ScatterParams, rng: np.random.Generator) -> list[Polyline]:
    """Point cloud, each point drawn as a small marker.

    A cross costs two polylines per point; circle and square cost one.
    """
    size = params.marker_size
    lines: list[Polyline] = []
    for p in _scatter_positions(params, rng):
        if params.marker == "circle":
            lines.append(polyline(
                ring_points(p, size, _CIRCLE_MARKER_SEGMENTS), params.opacity, params.line_width
            ))
        elif params.marker == "square":
            lines.append(polyline(square_points(p, size), params.opacity, params.line_width))
        else:
            lines.extend(cross_marker(p, size, params.opacity, params.line_width))
    return lines


# ── Approximate Voronoi ─────────────────────────────────────────────


class VoronoiParams(GeneratorParams):
    sites: Annotated[int, Range(2, 40)] = 10
    spread: Annotated[float, Range(1.0, 20.0)] = 6.0
    resolution: Annotated[int, Range(10, 120)] = 60
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.6


def voronoi(params: VoronoiParams, rng: np.random.Generator) -> list[Polyline]:
    """Rasterized Voronoi boundaries.

    Samples a resolution x resolution grid, labels each sample with its
    nearest seed, and emits a short segment across every pair of adjacent
    samples whose labels differ.
    """
    s = params.spread
    cx, cy, cz = params.center
    seeds = rng.uniform(-s, s, size=(params.sites, 2))
    xs = np.linspace(-s, s, params.resolution)
    h = xs[1] - xs[0]
    gx, gy = np.meshgrid(xs, xs)  # gx[i, j] = xs[j], gy[i, j] = xs[i]
    dist = (gx[..., None] - seeds[:, 0]) ** 2 + (gy[..., None] - seeds[:, 1]) ** 2
    owner = dist.argmin(axis=2)

    segments: list[tuple[tuple[float, float], tuple[float, float]]] = []
    # Neighbours along x: boundary is a vertical segment between them
    for i, j in zip(*np.nonzero(owner[:, :-1] != owner[:, 1:])):
        x = xs[j] + h / 2
        segments.append(((x, xs[i] - h / 2), (x, xs[i] + h / 2)))
    # Neighbours along y: boundary is a horizontal segment
    for i, j in zip(*np.nonzero(owner[:-1, :] != owner[1:, :])):
        y = xs[i] + h / 2
        segments.append(((xs[j] - h / 2, y), (xs[j] + h / 2, y)))

    seen: set[tuple] = set()
    lines = []
    for a, b in segments:
        key = tuple(sorted((
            (round(float(a[0]), 6), round(float(a[1]), 6)),
            (round(float(b[0]), 6), round(float(b[1]), 6)),
        )))
        if key in seen:
            continue
        seen.add(key)
        lines.append(polyline(
            [(cx + a[0], cy + a[1], cz), (cx + b[0], cy + b[1], cz)],
            params.opacity,
            params.line_width,
        ))
    return lines


# ── Proximity triangulation ─────────────────────────────────────────


class TriangulationParams(GeneratorParams):
    points: Annotated[int, Range(0, 300)] = 40
    spread: Annotated[float, Range(0.5, 20.0)] = 6.0
    depth: Annotated[float, Range(0.0, 10.0)] = 0.5
    center: Annotated[Point3, Vector(-20.0, 20.0)] = (0.0, 0.0, 0.0)
    opacity: Annotated[float, Range(0.05, 1.0)] = 0.5


def triangulation(params: TriangulationParams, rng: np.random.Generator) -> list[Polyline]:
    """Connect each random point to its nearest neighbours (not Delaunay)."""
    n = params.points
    if n < 2:
        return []
    pts = _uniform_box(rng, n, params.spread, params.depth, params.center)
    dist = np.linalg.norm(pts[:, None, :] - pts[None, :, :], axis=2)
    np.fill_diagonal(dist, np.inf)
    k = min(_NEAREST_NEIGHBORS, n - 1)
    nearest = np.argsort(dist, axis=1)[:, :k]

    seen: set[tuple[int, int]] = set()
    lines = []
    for i in range(n):
        for j in nearest[i]:
            key = (min(i, int(j)), max(i, int(j)))
            if key in seen:
                continue
            seen.add(key)
            lines.append(polyline([pts[i], pts[j]], params.opacity, params.line_width))
            if len(lines) >= _MAX_TRIANGULATION_EDGES:
                return lines
    return lines
