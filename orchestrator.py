"""
Orchestrator — turns a SceneSpec into a budget-enforced SceneOutput.

Workflow:
1. Parse the payload into a SceneSpec (structural errors → fallback scene)
2. Run each invocation in list order: registry lookup → sanitize →
   generate → validate, timed individually
3. Enforce the per-algorithm cap, then the global cap; once the global
   budget is spent every later invocation is skipped
4. Validate the camera and text, re-validate every line, and assemble
   the output (no usable lines → fallback scene)

Fairness is first-come-first-served: an earlier invocation is always fully
represented (up to its own cap) before a later one loses anything.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import numpy as np

from config import Settings, settings
from generators.fallback import fallback_lines
from generators.geometry import Polyline, truncate, validate_polylines
from generators.registry import REGISTRY, parse_algorithm_type
from scene import (
    AlgorithmInvocation,
    SceneMetadata,
    SceneOutput,
    SceneSpec,
    SceneSpecError,
    clean_text,
    default_camera,
    validate_camera,
)

log = logging.getLogger(__name__)

FALLBACK_TITLE = "Fallback Composition"
FALLBACK_DESCRIPTION = "Default composition shown when no algorithm produced usable geometry"


@dataclass(frozen=True)
class Budget:
    """Hard ceilings for one scene."""
    max_lines_per_algorithm: int
    max_total_lines: int
    max_algorithms: int
    slow_seconds: float = 1.0

    def __post_init__(self):
        # Same clamps as Settings._check_budgets; a scene always keeps one line
        total = max(1, self.max_total_lines)
        object.__setattr__(self, "max_total_lines", total)
        object.__setattr__(
            self, "max_lines_per_algorithm", max(1, min(self.max_lines_per_algorithm, total))
        )
        object.__setattr__(self, "max_algorithms", max(1, self.max_algorithms))

    @classmethod
    def from_settings(cls, s: Settings = settings) -> Budget:
        return cls(
            max_lines_per_algorithm=s.MAX_LINES_PER_ALGORITHM,
            max_total_lines=s.MAX_TOTAL_LINES,
            max_algorithms=s.MAX_ALGORITHMS,
            slow_seconds=s.SLOW_ALGORITHM_SECONDS,
        )


@dataclass
class BudgetState:
    """Mutable counters and buffers for a single orchestration call."""
    total_lines: int = 0
    current_lines: int = 0
    processed: int = 0
    lines: list[Polyline] = field(default_factory=list)
    algorithms_used: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    timings: list[tuple[str, float]] = field(default_factory=list)
    truncated: bool = False

    def warn(self, message: str) -> None:
        log.warning(message)
        self.warnings.append(message)


class SceneOrchestrator:
    """
    Drives algorithm invocations under a resource budget.

    Holds configuration only; every call to generate() builds its own
    counters and random generator, so one instance can serve any number of
    requests.
    """

    def __init__(
        self,
        budget: Optional[Budget] = None,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.budget = budget or Budget.from_settings()
        self.seed = seed
        self.clock = clock

    # ── Entry point ──────────────────────────────────────────────────

    def generate(self, payload: Any, theme: Optional[str] = None) -> SceneOutput:
        """
        Build a scene from an untrusted payload. Never raises.

        Args:
            payload: Raw scene request, shaped like
                {title?, description?, algorithms: [{type, params}], camera?}.
            theme: Optional free-text hint (e.g. the user's prompt) used to
                pick a themed fallback composition.
        """
        try:
            spec = SceneSpec.from_payload(payload)
        except SceneSpecError as exc:
            log.warning("Invalid scene spec (%s); using fallback composition", exc)
            return self._fallback([str(exc)], theme)

        try:
            return self._run(spec, theme)
        except Exception:
            log.exception("Scene orchestration failed; using fallback composition")
            return self._fallback(["Scene orchestration failed"], theme)

    # ── Main loop ────────────────────────────────────────────────────

    def _run(self, spec: SceneSpec, theme: Optional[str]) -> SceneOutput:
        rng = np.random.default_rng(self.seed)
        state = BudgetState()
        limit = self.budget.max_algorithms

        if spec.dropped_entries:
            state.warn(f"Dropped {spec.dropped_entries} malformed algorithm entries")

        over_limit = 0
        after_budget = 0
        for index, invocation in enumerate(spec.algorithms):
            if index >= limit:
                state.skipped.append(invocation.tag)
                over_limit += 1
            elif state.total_lines >= self.budget.max_total_lines:
                state.skipped.append(invocation.tag)
                after_budget += 1
            else:
                self._process(invocation, state, rng)

        if after_budget:
            state.warn(
                f"Global line budget of {self.budget.max_total_lines} reached; "
                f"skipped {after_budget} later invocation(s)"
            )
        if over_limit:
            state.warn(
                f"Algorithm limit of {limit} reached; skipped {over_limit} invocation(s)"
            )

        lines = validate_polylines(state.lines)
        if not lines:
            state.warn("No algorithm produced usable lines")
            return self._fallback(state.warnings, theme, state)

        log.info(
            "Generated %d lines from %d algorithm(s)",
            len(lines), len(state.algorithms_used),
        )
        return SceneOutput(
            title=clean_text(spec.title, settings.DEFAULT_TITLE, settings.MAX_TITLE_LENGTH),
            description=clean_text(
                spec.description, settings.DEFAULT_DESCRIPTION, settings.MAX_DESCRIPTION_LENGTH
            ),
            lines=lines,
            camera=validate_camera(spec.camera),
            metadata=SceneMetadata(
                algorithms_used=tuple(state.algorithms_used),
                total_lines=len(lines),
                warnings=tuple(state.warnings),
                skipped=tuple(state.skipped),
                timings_ms=tuple(state.timings),
                truncated=state.truncated,
            ),
        )

    def _process(
        self,
        invocation: AlgorithmInvocation,
        state: BudgetState,
        rng: np.random.Generator,
    ) -> None:
        """Run one invocation and accumulate its (capped) output."""
        state.processed += 1
        state.current_lines = 0
        algorithm_type = parse_algorithm_type(invocation.type)
        if algorithm_type is None:
            state.warn(f"Unknown algorithm type {invocation.tag!r} ignored")
            return
        name = algorithm_type.value

        start = self.clock()
        lines = REGISTRY[algorithm_type].run(invocation.params, rng)
        elapsed = self.clock() - start
        state.timings.append((name, elapsed * 1000.0))
        state.algorithms_used.append(name)
        if elapsed > self.budget.slow_seconds:
            state.warn(f"Algorithm {name!r} was slow: {elapsed:.2f}s")

        if not lines:
            state.warn(f"Algorithm {name!r} produced no lines")
            return

        per_algorithm = self.budget.max_lines_per_algorithm
        if len(lines) > per_algorithm:
            state.warn(
                f"Algorithm {name!r} produced {len(lines)} lines; "
                f"truncated to {per_algorithm}"
            )
            lines = truncate(lines, per_algorithm)
            state.truncated = True

        remaining = self.budget.max_total_lines - state.total_lines
        if len(lines) > remaining:
            state.warn(
                f"Global line budget exhausted by {name!r}; "
                f"kept {remaining} of {len(lines)} lines"
            )
            lines = truncate(lines, remaining)
            state.truncated = True

        state.lines.extend(lines)
        state.current_lines = len(lines)
        state.total_lines += len(lines)

    # ── Fallback ─────────────────────────────────────────────────────

    def _fallback(
        self,
        warnings: list[str],
        theme: Optional[str],
        state: Optional[BudgetState] = None,
    ) -> SceneOutput:
        """The fixed fallback scene, keeping whatever warnings led here."""
        lines = truncate(
            validate_polylines(fallback_lines(theme)), self.budget.max_total_lines
        )
        return SceneOutput(
            title=FALLBACK_TITLE,
            description=FALLBACK_DESCRIPTION,
            lines=lines,
            camera=default_camera(),
            metadata=SceneMetadata(
                algorithms_used=("fallback",),
                total_lines=len(lines),
                warnings=tuple(warnings),
                skipped=tuple(state.skipped) if state else (),
                timings_ms=tuple(state.timings) if state else (),
                fallback=True,
            ),
        )


def generate_scene(
    payload: Any,
    seed: Optional[int] = None,
    theme: Optional[str] = None,
    budget: Optional[Budget] = None,
) -> SceneOutput:
    """One-shot convenience wrapper around SceneOrchestrator.generate()."""
    return SceneOrchestrator(budget=budget, seed=seed).generate(payload, theme=theme)
