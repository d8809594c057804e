"""
Scene data model — the request (SceneSpec) and the response (SceneOutput).

A SceneSpec is parsed from an untrusted payload proposed by a text model.
Parsing only rejects structural problems (not a mapping, no algorithm
list); everything below that level is sanitized later, per algorithm.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from config import settings
from generators.geometry import Point, Polyline


class SceneSpecError(ValueError):
    """The payload has no usable algorithm list."""


@dataclass(frozen=True)
class AlgorithmInvocation:
    """One requested algorithm: a raw type tag and its raw params."""
    type: Any
    params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def tag(self) -> str:
        return self.type if isinstance(self.type, str) else repr(self.type)


@dataclass(frozen=True)
class SceneSpec:
    """Declarative scene request."""
    algorithms: tuple[AlgorithmInvocation, ...]
    camera: Any = None
    title: Any = None
    description: Any = None
    dropped_entries: int = 0  # algorithm entries that were not mappings

    @classmethod
    def from_payload(cls, payload: Any) -> SceneSpec:
        """Parse a raw payload.

        Raises:
            SceneSpecError: payload is not a mapping, or `algorithms` is
                missing or not a list.
        """
        if not isinstance(payload, Mapping):
            raise SceneSpecError(
                f"Scene payload must be an object, got {type(payload).__name__}"
            )
        entries = payload.get("algorithms")
        if not isinstance(entries, (list, tuple)):
            raise SceneSpecError("Scene payload has no 'algorithms' list")

        invocations = []
        dropped = 0
        for entry in entries:
            if not isinstance(entry, Mapping):
                dropped += 1
                continue
            params = entry.get("params")
            invocations.append(AlgorithmInvocation(
                type=entry.get("type"),
                params=dict(params) if isinstance(params, Mapping) else {},
            ))

        return cls(
            algorithms=tuple(invocations),
            camera=payload.get("camera"),
            title=payload.get("title"),
            description=payload.get("description"),
            dropped_entries=dropped,
        )


# ── Camera ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Camera:
    position: Point
    look_at: Point

    def to_dict(self) -> dict[str, list[float]]:
        return {"position": list(self.position), "lookAt": list(self.look_at)}


def default_camera() -> Camera:
    return Camera(
        position=tuple(settings.DEFAULT_CAMERA_POSITION),
        look_at=tuple(settings.DEFAULT_CAMERA_LOOK_AT),
    )


def _bounded_vector(value: Any, limit: float) -> Optional[Point]:
    """A 3-element vector of finite numbers within ±limit, else None."""
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return None
    comps = []
    for c in value:
        if isinstance(c, bool) or not isinstance(c, numbers.Real):
            return None
        c = float(c)
        if not math.isfinite(c) or abs(c) > limit:
            return None
        comps.append(c)
    return tuple(comps)  # type: ignore[return-value]


def validate_camera(raw: Any) -> Camera:
    """Validated camera, or the default camera on any problem."""
    if not isinstance(raw, Mapping):
        return default_camera()
    position = _bounded_vector(raw.get("position"), settings.CAMERA_POSITION_LIMIT)
    look_at = _bounded_vector(
        raw.get("lookAt", raw.get("look_at")), settings.CAMERA_LOOK_AT_LIMIT
    )
    if position is None or look_at is None:
        return default_camera()
    return Camera(position=position, look_at=look_at)


def clean_text(value: Any, default: str, max_length: int) -> str:
    """Stripped, length-capped text, or `default` if there is none."""
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()[:max_length]


# ── Output ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SceneMetadata:
    algorithms_used: tuple[str, ...]
    total_lines: int
    warnings: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    timings_ms: tuple[tuple[str, float], ...] = ()
    truncated: bool = False
    fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "algorithms_used": list(self.algorithms_used),
            "total_lines": self.total_lines,
            "warnings": list(self.warnings),
            "skipped": list(self.skipped),
            "timings_ms": [
                {"type": name, "ms": round(ms, 3)} for name, ms in self.timings_ms
            ],
            "truncated": self.truncated,
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class SceneOutput:
    """Validated, budget-enforced scene ready for the rendering client."""
    title: str
    description: str
    lines: tuple[Polyline, ...]
    camera: Camera
    metadata: SceneMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "lines": [line.to_dict() for line in self.lines],
            "camera": self.camera.to_dict(),
            "metadata": self.metadata.to_dict(),
        }
