"""
Polyline geometry — the single output primitive of every generator.

Coordinate convention:
    - Y-up, scene centred on the origin
    - Typical content fits in roughly ±10 units (default camera sits at z=12)

Validation and truncation are pure sequence transforms: they never mutate
a polyline or a list in place, they return new tuples.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from config import settings

Point = tuple[float, float, float]


@dataclass(frozen=True)
class Polyline:
    """An ordered list of 3D points rendered as one connected line.

    Attributes:
        points: At least two (x, y, z) points, all finite
        opacity: Alpha in [0, 1]
        line_width: Stroke width, always positive
        color: Hex color, fixed to settings.LINE_COLOR unless overridden
        dashed: Render as a dashed stroke
        arrow: Terminate the stroke with an arrow head
    """

    points: tuple[Point, ...]
    opacity: float = 0.7
    line_width: float = 1.0
    color: str = settings.LINE_COLOR
    dashed: bool = False
    arrow: bool = False

    def to_dict(self) -> dict:
        data = {
            "points": [list(p) for p in self.points],
            "color": self.color,
            "opacity": self.opacity,
            "lineWidth": self.line_width,
        }
        if self.dashed:
            data["dashed"] = True
        if self.arrow:
            data["arrow"] = True
        return data


def polyline(
    points: Iterable[Sequence[float]],
    opacity: float = 0.7,
    line_width: float = 1.0,
    dashed: bool = False,
    arrow: bool = False,
) -> Polyline:
    """Build a Polyline, normalising points to float triples and clamping style."""
    pts = tuple(
        (float(p[0]), float(p[1]), float(p[2]) if len(p) > 2 else 0.0)
        for p in points
    )
    return Polyline(
        points=pts,
        opacity=min(1.0, max(0.0, float(opacity))),
        line_width=max(0.1, float(line_width)),
        color=settings.LINE_COLOR,
        dashed=dashed,
        arrow=arrow,
    )


def is_valid(line: Polyline) -> bool:
    """True if the polyline has >= 2 points and every coordinate is finite."""
    if len(line.points) < 2:
        return False
    for point in line.points:
        if len(point) != 3:
            return False
        for c in point:
            if isinstance(c, bool) or not isinstance(c, (int, float)):
                return False
            if not math.isfinite(c):
                return False
    return True


def validate_polylines(lines: Iterable[Polyline]) -> tuple[Polyline, ...]:
    """Drop every malformed polyline, keeping the order of the rest."""
    return tuple(line for line in lines if isinstance(line, Polyline) and is_valid(line))


def truncate(lines: Sequence[Polyline], limit: int) -> tuple[Polyline, ...]:
    """First `limit` polylines, in generation order."""
    return tuple(lines[: max(0, limit)])


# ---------------------------------------------------------------------------
# Shape helpers shared by generators and the fallback compositions
# ---------------------------------------------------------------------------


def ring_points(
    center: Sequence[float], radius: float, segments: int
) -> list[Point]:
    """Closed regular polygon in the XY plane (first point repeated at the end)."""
    cx, cy, cz = center
    segments = max(3, segments)
    return [
        (
            cx + math.cos(2 * math.pi * i / segments) * radius,
            cy + math.sin(2 * math.pi * i / segments) * radius,
            cz,
        )
        for i in range(segments + 1)
    ]


def square_points(center: Sequence[float], half: float) -> list[Point]:
    """Closed axis-aligned square in the XY plane."""
    cx, cy, cz = center
    return [
        (cx - half, cy - half, cz),
        (cx + half, cy - half, cz),
        (cx + half, cy + half, cz),
        (cx - half, cy + half, cz),
        (cx - half, cy - half, cz),
    ]


def cross_marker(
    center: Sequence[float], size: float, opacity: float = 0.8, line_width: float = 1.0
) -> list[Polyline]:
    """Two short perpendicular strokes through `center`."""
    cx, cy, cz = center
    return [
        polyline([(cx - size, cy, cz), (cx + size, cy, cz)], opacity, line_width),
        polyline([(cx, cy - size, cz), (cx, cy + size, cz)], opacity, line_width),
    ]


def circle_segments(radius: float) -> int:
    """Segment count for a circle, growing with radius."""
    return min(256, max(16, int(radius * 8) + 16))
