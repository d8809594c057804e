"""
Fallback compositions — fixed, deterministic scenes that always succeed.

Used when a scene request carries no usable algorithm list, or when every
algorithm produced nothing. With no theme hint the default composition
(rings, spokes, point markers) is returned. A free-text hint such as the
user's prompt can select a themed preset by keyword instead.
"""

from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np

from generators.geometry import (
    Polyline,
    circle_segments,
    cross_marker,
    polyline,
    ring_points,
    square_points,
)
from generators.organic import BranchingTreeParams, CellularParams, branching_tree, cellular
from generators.stochastic import RandomNetworkParams, ScatterParams, random_network, scatter

ORIGIN = (0.0, 0.0, 0.0)
_PRESET_SEED = 7


def default_composition() -> list[Polyline]:
    """Five rings, twelve spokes and eight cross markers on the middle ring."""
    lines = []
    for i in range(5):
        radius = 1.0 + i
        lines.append(polyline(
            ring_points(ORIGIN, radius, circle_segments(radius)), 0.8 - i * 0.1, 1.5
        ))
    for i in range(12):
        angle = 2 * math.pi * i / 12
        lines.append(polyline(
            [ORIGIN, (math.cos(angle) * 5.0, math.sin(angle) * 5.0, 0.0)], 0.4, 1.0
        ))
    for i in range(8):
        angle = 2 * math.pi * i / 8 + math.pi / 8
        marker_at = (math.cos(angle) * 3.0, math.sin(angle) * 3.0, 0.0)
        lines += cross_marker(marker_at, 0.15, 0.9, 1.2)
    return lines


# ── Themed presets ──────────────────────────────────────────────────


def _circular() -> list[Polyline]:
    lines = []
    for i in range(12):
        radius = 0.5 * (i + 1)
        lines.append(polyline(
            ring_points(ORIGIN, radius, circle_segments(radius)), 0.8 - radius * 0.08, 1.5
        ))
    for i in range(24):
        angle = 2 * math.pi * i / 24
        lines.append(polyline([ORIGIN, (math.cos(angle) * 6, math.sin(angle) * 6, 0.0)], 0.4))
    return lines


def _squares() -> list[Polyline]:
    lines = [
        polyline(square_points(ORIGIN, 0.5 * (i + 1)), 0.8 - 0.04 * (i + 1), 1.5)
        for i in range(12)
    ]
    for size in (1.0, 3.0, 5.0):
        lines.append(polyline([(-size, -size, 0.0), (size, size, 0.0)], 0.3))
        lines.append(polyline([(-size, size, 0.0), (size, -size, 0.0)], 0.3))
    return lines


def _triangles() -> list[Polyline]:
    lines = []
    for i in range(7):
        size = 1.0 + 0.8 * i
        h = size * math.sqrt(3) / 2
        pts = [(0.0, h, 0.0), (-size, -h / 2, 0.0), (size, -h / 2, 0.0), (0.0, h, 0.0)]
        lines.append(polyline(pts, max(0.1, 0.8 - size * 0.1), 1.5))
    for i in range(3):
        angle = 2 * math.pi * i / 3 + math.pi / 2
        lines.append(polyline([ORIGIN, (math.cos(angle) * 5, math.sin(angle) * 5, 0.0)], 0.4))
    return lines


def _spiral() -> list[Polyline]:
    lines = []
    for arm in range(3):
        offset = arm * 2 * math.pi / 3
        pts = []
        for k in range(int(6 * math.pi / 0.1) + 1):
            t = k * 0.1
            radius = t * 0.3 + arm * 0.5
            pts.append((math.cos(t + offset) * radius, math.sin(t + offset) * radius, arm * 0.5))
        lines.append(polyline(pts, 0.7 - arm * 0.1, 1.5))
    return lines


def _tree() -> list[Polyline]:
    # Branching is deterministic; the generator never touches the rng
    return branching_tree(BranchingTreeParams(), np.random.default_rng(0))


def _flow() -> list[Polyline]:
    lines = []
    for stream in range(5):
        offset = (stream - 2) * 1.5
        pts = []
        for k in range(61):
            x = -6.0 + k * 0.2
            y = offset + math.sin(x * 0.5 + stream) * 2 + math.sin(x * 0.2) * 0.5
            pts.append((x, y, math.cos(x * 0.3 + stream) * 0.5))
        lines.append(polyline(pts, 0.7 - stream * 0.05, 1.5))
    return lines


def _floral() -> list[Polyline]:
    lines = []
    for petal in range(8):
        base = 2 * math.pi * petal / 8
        pts = []
        for k in range(21):
            t = k * 0.05
            angle = base + math.sin(t * math.pi) * 0.3
            radius = math.sin(t * math.pi) * 3
            pts.append((math.cos(angle) * radius, math.sin(angle) * radius, t * 0.5))
        lines.append(polyline(pts, 0.7, 1.3))
    lines.append(polyline(ring_points(ORIGIN, 0.5, 32), 0.9, 1.8))
    return lines


def _waves() -> list[Polyline]:
    lines = []
    for wave in range(5):
        frequency = (wave + 1) * 0.5
        amplitude = 2 - wave * 0.3
        pts = [
            (x, math.sin(x * frequency) * amplitude + wave * 1.5 - 3, wave * 0.2)
            for x in (-6.0 + k * 0.1 for k in range(121))
        ]
        lines.append(polyline(pts, 0.7 - wave * 0.05, 1.5))
    for k in range(9):
        beat = -6.0 + k * 1.5
        lines.append(polyline([(beat, -5.0, 0.0), (beat, 5.0, 0.0)], 0.3))
    return lines


def _cellular() -> list[Polyline]:
    return cellular(CellularParams(), np.random.default_rng(_PRESET_SEED))


def _circuit() -> list[Polyline]:
    rng = np.random.default_rng(_PRESET_SEED)
    xy = rng.uniform(-4.0, 4.0, size=(8, 2))
    sizes = rng.uniform((0.5, 0.3), (1.5, 0.8), size=(8, 2))
    lines = []
    for (x, y), (w, h) in zip(xy, sizes):
        body = [
            (x - w / 2, y - h / 2, 0.0),
            (x + w / 2, y - h / 2, 0.0),
            (x + w / 2, y + h / 2, 0.0),
            (x - w / 2, y + h / 2, 0.0),
            (x - w / 2, y - h / 2, 0.0),
        ]
        lines.append(polyline(body, 0.8, 1.5))
    # L-shaped traces between consecutive components
    for (x1, y1), (x2, y2) in zip(xy[:-1], xy[1:]):
        mid = x1 + (x2 - x1) * 0.7
        lines.append(polyline([(x1, y1, 0.0), (mid, y1, 0.0), (mid, y2, 0.0), (x2, y2, 0.0)], 0.6))
    return lines


def _network() -> list[Polyline]:
    params = RandomNetworkParams(nodes=12, connection_probability=0.4, spread=5.0, depth=1.0)
    return random_network(params, np.random.default_rng(_PRESET_SEED))


_SYSTEM_BOXES = [(-4, 2), (-1, 2), (2, 2), (4, 0), (2, -2), (-1, -2)]
_SYSTEM_LINKS = [(0, 1), (1, 2), (2, 3), (3, 4), (4, 5), (5, 1)]


def _system() -> list[Polyline]:
    lines = []
    for x, y in _SYSTEM_BOXES:
        box = [
            (x - 0.8, y - 0.5, 0.0),
            (x + 0.8, y - 0.5, 0.0),
            (x + 0.8, y + 0.5, 0.0),
            (x - 0.8, y + 0.5, 0.0),
            (x - 0.8, y - 0.5, 0.0),
        ]
        lines.append(polyline(box, 0.8, 1.5))
    for a, b in _SYSTEM_LINKS:
        (x1, y1), (x2, y2) = _SYSTEM_BOXES[a], _SYSTEM_BOXES[b]
        lines.append(polyline([(x1, y1, 0.0), (x2, y2, 0.0)], 0.6, 1.2))
    return lines


def _chart() -> list[Polyline]:
    lines = [
        polyline([(-5, -4, 0), (5, -4, 0)], 0.9, 1.8),
        polyline([(-5, -4, 0), (-5, 4, 0)], 0.9, 1.8),
    ]
    for i, value in enumerate([1.5, 3.2, 2.1, 4.0, 2.8, 3.5, 1.9, 3.8]):
        x = -4 + i * 1.2
        lines.append(polyline([(x, -4, 0), (x, -4 + value, 0)], 0.7, 2.0))
    for i in range(1, 5):
        lines.append(polyline([(-5, -4 + i, 0), (5, -4 + i, 0)], 0.3))
    return lines


def _scatter() -> list[Polyline]:
    params = ScatterParams(points=50, marker="square", spread=4.0)
    lines = scatter(params, np.random.default_rng(_PRESET_SEED))
    trend = [(x, x * 0.5 + math.sin(x) * 0.8, 0.0) for x in (-4.0 + k * 0.5 for k in range(17))]
    lines.append(polyline(trend, 0.8, 1.5))
    return lines


def _emotional() -> list[Polyline]:
    rng = np.random.default_rng(_PRESET_SEED)
    lines = []
    for expression in range(8):
        intensity = float(rng.random())
        jitter = rng.uniform(-0.5, 0.5, 21) * intensity * 6
        pts = [
            ((k * 0.05 - 0.5) * 8, jitter[k], math.sin(k * 0.05 * 2 * math.pi + expression) * 2)
            for k in range(21)
        ]
        lines.append(polyline(pts, 0.4 + intensity * 0.4, 0.8 + intensity * 1.2))
    return lines


def _movement() -> list[Polyline]:
    lines = []
    for trail in range(6):
        phase = trail * math.pi / 3
        pts = []
        for k in range(int(2 * math.pi / 0.1) + 1):
            t = k * 0.1
            radius = 2 + math.sin(t * 2 + phase) * 1.5
            pts.append((
                math.cos(t + phase) * radius,
                math.sin(t + phase) * radius,
                math.sin(t * 3 + phase) * 0.8,
            ))
        lines.append(polyline(pts, 0.6 - trail * 0.05, 1.5 - trail * 0.1))
    return lines


def _minimal() -> list[Polyline]:
    lines = []
    for i in range(-3, 4):
        lines.append(polyline([(i, -3, 0), (i, 3, 0)], 0.6))
        lines.append(polyline([(-3, i, 0), (3, i, 0)], 0.6))
    lines.append(polyline(square_points(ORIGIN, 2.0), 0.9, 2.0))
    return lines


# Checked in order; the first theme with a matching keyword wins
THEMES: list[tuple[str, tuple[str, ...], Callable[[], list[Polyline]]]] = [
    ("circular", ("circle", "sphere", "round"), _circular),
    ("squares", ("square", "rectangle", "box"), _squares),
    ("triangles", ("triangle", "pyramid"), _triangles),
    ("spiral", ("spiral", "helix"), _spiral),
    ("tree", ("tree", "branch", "root"), _tree),
    ("floral", ("flower", "plant", "leaf"), _floral),
    ("flow", ("water", "river", "flow"), _flow),
    ("cellular", ("cell", "organic", "growth"), _cellular),
    ("circuit", ("circuit", "electronic", "pcb"), _circuit),
    ("network", ("network", "connection", "graph"), _network),
    ("system", ("system", "process", "workflow"), _system),
    ("chart", ("data", "chart"), _chart),
    ("scatter", ("scatter", "plot", "statistical"), _scatter),
    ("waves", ("music", "sound", "rhythm", "wave"), _waves),
    ("emotional", ("emotion", "feeling", "mood"), _emotional),
    ("movement", ("movement", "dance", "dynamic"), _movement),
    ("minimal", ("grid", "minimal", "simple"), _minimal),
]


def match_theme(hint: Optional[str]) -> Optional[str]:
    """Name of the first theme whose keywords appear in `hint`."""
    if not isinstance(hint, str):
        return None
    text = hint.lower()
    for name, keywords, _ in THEMES:
        if any(word in text for word in keywords):
            return name
    return None


def fallback_lines(hint: Optional[str] = None) -> list[Polyline]:
    """The themed preset for `hint`, or the default composition."""
    theme = match_theme(hint)
    for name, _, build in THEMES:
        if name == theme:
            return build()
    return default_composition()
