"""Tests for the individual procedural generators."""

import math

import numpy as np
import pytest

from generators.registry import REGISTRY, AlgorithmType, run_algorithm


def _run(algorithm_type, params, seed=0):
    return run_algorithm(algorithm_type, params, np.random.default_rng(seed))


def _garbage_inputs(algorithm_type):
    """Malformed and extreme parameter mappings for one algorithm."""
    fields = list(REGISTRY[algorithm_type].params_model.model_fields)
    return [
        None,
        {},
        "not a mapping",
        {name: None for name in fields},
        {name: "NaN" for name in fields},
        {name: float("inf") for name in fields},
        {name: 1e12 for name in fields},
        {name: -1e12 for name in fields},
        {name: [1, 2, 3, 4, 5] for name in fields},
        {name: {"nested": True} for name in fields},
    ]


class TestEveryAlgorithm:
    """Every registered generator returns well-formed lines for any input."""

    @pytest.fixture(params=list(AlgorithmType))
    def algorithm_type(self, request):
        return request.param

    def test_defaults_produce_lines(self, algorithm_type):
        lines = _run(algorithm_type, {})
        assert len(lines) >= 1

    def test_garbage_never_raises(self, algorithm_type):
        for raw in _garbage_inputs(algorithm_type):
            lines = _run(algorithm_type, raw)
            assert isinstance(lines, tuple)
            for line in lines:
                assert len(line.points) >= 2
                for point in line.points:
                    assert len(point) == 3
                    assert all(math.isfinite(c) for c in point)

    def test_style_within_bounds(self, algorithm_type):
        for line in _run(algorithm_type, {"opacity": 5, "line_width": 50}):
            assert 0.0 <= line.opacity <= 1.0
            assert line.line_width > 0

    def test_seeded_runs_are_reproducible(self, algorithm_type):
        a = _run(algorithm_type, {}, seed=123)
        b = _run(algorithm_type, {}, seed=123)
        assert a == b


class TestGrid:
    """grid"""

    def test_unit_grid_over_four(self):
        lines = _run(AlgorithmType.GRID, {"spacing": 1, "size": 4, "z_layers": 1, "noise": 0})
        assert len(lines) == 10
        horizontal, vertical = lines[:5], lines[5:]

        for line, y in zip(horizontal, range(-2, 3)):
            assert all(p[1] == y for p in line.points)
            assert [p[0] for p in line.points] == [-2, -1, 0, 1, 2]
        for line, x in zip(vertical, range(-2, 3)):
            assert all(p[0] == x for p in line.points)
            assert [p[1] for p in line.points] == [-2, -1, 0, 1, 2]

    def test_layers_multiply_lines(self):
        lines = _run(AlgorithmType.GRID, {"spacing": 1, "size": 4, "z_layers": 3})
        assert len(lines) == 30
        assert sorted({line.points[0][2] for line in lines}) == [-1.0, 0.0, 1.0]

    def test_step_cap_still_spans_domain(self):
        lines = _run(AlgorithmType.GRID, {"size": 40, "spacing": 0.1})
        assert len(lines) == 2 * 201
        xs = [p[0] for line in lines for p in line.points]
        ys = [p[1] for line in lines for p in line.points]
        assert min(xs) == pytest.approx(-20.0)
        assert max(xs) == pytest.approx(20.0)
        assert min(ys) == pytest.approx(-20.0)
        assert max(ys) == pytest.approx(20.0)

    def test_jitter_is_bounded(self):
        lines = _run(AlgorithmType.GRID, {"spacing": 1, "size": 4, "noise": 1})
        for line in lines:
            for x, y, _ in line.points:
                assert abs(x - round(x)) <= 0.5 + 1e-9
                assert abs(y - round(y)) <= 0.5 + 1e-9


class TestConcentricCircles:
    """concentric_circles"""

    def test_five_rings(self):
        lines = _run(
            AlgorithmType.CONCENTRIC_CIRCLES, {"count": 5, "min_radius": 1, "max_radius": 5}
        )
        assert len(lines) == 5
        for line, expected in zip(lines, [1, 2, 3, 4, 5]):
            first, last = line.points[0], line.points[-1]
            assert math.dist(first, last) < 1e-9
            for point in line.points:
                assert math.isclose(math.hypot(point[0], point[1]), expected, rel_tol=1e-9)

    def test_reversed_radii_are_swapped(self):
        lines = _run(
            AlgorithmType.CONCENTRIC_CIRCLES, {"count": 2, "min_radius": 4, "max_radius": 2}
        )
        radii = [math.hypot(*line.points[0][:2]) for line in lines]
        assert radii == pytest.approx([2.0, 4.0])

    def test_segments_grow_with_radius(self):
        small, large = _run(
            AlgorithmType.CONCENTRIC_CIRCLES, {"count": 2, "min_radius": 0.5, "max_radius": 10}
        )
        assert len(large.points) > len(small.points)


class TestRadialLines:
    """radial_lines"""

    def test_four_spokes(self):
        lines = _run(AlgorithmType.RADIAL_LINES, {"count": 4, "length": 2})
        assert len(lines) == 4
        expected_ends = [(2, 0), (0, 2), (-2, 0), (0, -2)]
        for line, (ex, ey) in zip(lines, expected_ends):
            start, end = line.points
            assert start == (0.0, 0.0, 0.0)
            assert end[0] == pytest.approx(ex, abs=1e-9)
            assert end[1] == pytest.approx(ey, abs=1e-9)
            assert math.dist(start, end) == pytest.approx(2.0)

    def test_variation_is_bounded(self):
        lines = _run(AlgorithmType.RADIAL_LINES, {"count": 50, "length": 4, "variation": 0.5})
        for line in lines:
            assert 2.0 - 1e-9 <= math.dist(*line.points) <= 6.0 + 1e-9


class TestRandomNetwork:
    """random_network"""

    def test_zero_nodes(self):
        assert _run(AlgorithmType.RANDOM_NETWORK, {"nodes": 0}) == ()

    def test_single_node(self):
        assert _run(AlgorithmType.RANDOM_NETWORK, {"nodes": 1}) == ()

    def test_full_connectivity(self):
        lines = _run(AlgorithmType.RANDOM_NETWORK, {"nodes": 6, "connection_probability": 1})
        assert len(lines) == 15

    def test_no_connectivity(self):
        lines = _run(AlgorithmType.RANDOM_NETWORK, {"nodes": 50, "connection_probability": 0})
        assert lines == ()

    def test_edge_cap(self):
        lines = _run(AlgorithmType.RANDOM_NETWORK, {"nodes": 200, "connection_probability": 1})
        assert len(lines) == 1500


class TestSpirals:
    """spiral and logarithmic_spiral"""

    def test_archimedean_respects_max_radius(self):
        lines = _run(AlgorithmType.SPIRAL, {"growth": 5, "max_radius": 3, "turns": 20})
        for line in lines:
            for x, y, _ in line.points:
                assert math.hypot(x, y) <= 3.0 + 1e-9

    def test_arms(self):
        assert len(_run(AlgorithmType.SPIRAL, {"arms": 4})) == 4

    def test_logarithmic_growth_is_bounded(self):
        lines = _run(
            AlgorithmType.LOGARITHMIC_SPIRAL,
            {"a": 5, "b": 1, "turns": 20, "max_radius": 30},
        )
        for line in lines:
            assert len(line.points) <= 2000
            for x, y, _ in line.points:
                assert math.hypot(x, y) <= 30.0 + 1e-9

    def test_logarithmic_radius(self):
        (line,) = _run(AlgorithmType.LOGARITHMIC_SPIRAL, {"a": 0.1, "b": 0.2, "turns": 1})
        for k, (x, y, _) in enumerate(line.points):
            assert math.hypot(x, y) == pytest.approx(0.1 * math.exp(0.2 * k * 0.1))


class TestHarmonicWave:
    """harmonic_wave"""

    def test_one_line_per_harmonic(self):
        lines = _run(AlgorithmType.HARMONIC_WAVE, {"harmonics": 3, "amplitude": 3})
        assert len(lines) == 3
        for k, line in enumerate(lines, start=1):
            assert len(line.points) == 121
            assert line.points[0][0] == pytest.approx(-6.0)
            assert line.points[-1][0] == pytest.approx(6.0)
            assert max(abs(p[1]) for p in line.points) <= 3.0 / k + 1e-9


class TestScatter:
    """scatter"""

    @pytest.mark.parametrize("marker,per_point", [("cross", 2), ("circle", 1), ("square", 1)])
    def test_marker_cost(self, marker, per_point):
        lines = _run(AlgorithmType.SCATTER, {"points": 10, "marker": marker})
        assert len(lines) == 10 * per_point

    @pytest.mark.parametrize("distribution", ["uniform", "exponential", "clustered"])
    def test_points_within_spread(self, distribution):
        lines = _run(
            AlgorithmType.SCATTER,
            {"points": 200, "distribution": distribution, "spread": 3, "marker_size": 0.1},
        )
        for line in lines:
            for x, y, _ in line.points:
                assert abs(x) <= 3.1 + 1e-9
                assert abs(y) <= 3.1 + 1e-9

    def test_exponential_is_skewed(self):
        lines = _run(
            AlgorithmType.SCATTER,
            {"points": 400, "distribution": "exponential", "marker": "square"},
        )
        centers_x = [line.points[0][0] + 0.1 for line in lines]
        assert np.mean(centers_x) < 0


class TestVoronoi:
    """voronoi"""

    def test_boundary_segments(self):
        lines = _run(AlgorithmType.VORONOI, {"sites": 6, "spread": 5, "resolution": 40})
        assert len(lines) > 0
        h = 10 / 39
        keys = set()
        for line in lines:
            assert len(line.points) == 2
            assert math.dist(*line.points) == pytest.approx(h)
            keys.add(frozenset(line.points))
        assert len(keys) == len(lines)


class TestTriangulation:
    """triangulation"""

    def test_too_few_points(self):
        assert _run(AlgorithmType.TRIANGULATION, {"points": 1}) == ()

    def test_two_points_one_edge(self):
        assert len(_run(AlgorithmType.TRIANGULATION, {"points": 2})) == 1

    def test_edges_unique_and_bounded(self):
        lines = _run(AlgorithmType.TRIANGULATION, {"points": 50})
        assert 50 // 2 <= len(lines) <= 150
        pairs = {frozenset(line.points) for line in lines}
        assert len(pairs) == len(lines)

    def test_edge_cap(self):
        assert len(_run(AlgorithmType.TRIANGULATION, {"points": 300})) <= 1000


class TestMeshDeformation:
    """mesh_deformation"""

    def test_rows_and_columns(self):
        lines = _run(AlgorithmType.MESH_DEFORMATION, {"resolution": 5})
        assert len(lines) == 10
        assert all(len(line.points) == 5 for line in lines)

    def test_zero_strength_is_flat_grid(self):
        lines = _run(AlgorithmType.MESH_DEFORMATION, {"resolution": 3, "size": 2, "strength": 0})
        assert lines[0].points == ((-1.0, -1.0, 0.0), (0.0, -1.0, 0.0), (1.0, -1.0, 0.0))

    def test_deterministic_without_seed(self):
        a = run_algorithm(AlgorithmType.MESH_DEFORMATION, {"strength": 2})
        b = run_algorithm(AlgorithmType.MESH_DEFORMATION, {"strength": 2})
        assert a == b


class TestParticleSystem:
    """particle_system"""

    def test_one_trajectory_per_particle(self):
        lines = _run(
            AlgorithmType.PARTICLE_SYSTEM, {"emitters": 2, "particles": 3, "steps": 10}
        )
        assert len(lines) == 6
        assert all(len(line.points) == 11 for line in lines)

    def test_gravity_pulls_down(self):
        lines = _run(
            AlgorithmType.PARTICLE_SYSTEM,
            {"emitters": 1, "particles": 5, "steps": 200, "dt": 0.1, "gravity": 20, "speed": 1},
        )
        for line in lines:
            assert line.points[-1][1] < line.points[0][1]


class TestOrbitalSystem:
    """orbital_system"""

    def test_markers_then_orbits(self):
        lines = _run(AlgorithmType.ORBITAL_SYSTEM, {"bodies": 2, "objects": 5, "steps": 32})
        assert len(lines) == 2 * 2 + 5
        orbits = lines[4:]
        assert all(line.dashed for line in orbits)
        assert all(len(line.points) == 33 for line in orbits)

    def test_circular_orbit_radius(self):
        lines = _run(
            AlgorithmType.ORBITAL_SYSTEM,
            {"bodies": 1, "objects": 1, "eccentricity": 0, "base_radius": 3},
        )
        orbit = lines[-1]
        for point in orbit.points:
            assert math.dist(point, (0, 0, 0)) == pytest.approx(3.0)

    def test_round_robin_rings(self):
        lines = _run(
            AlgorithmType.ORBITAL_SYSTEM,
            {"bodies": 2, "objects": 4, "eccentricity": 0, "base_radius": 1,
             "orbit_spacing": 1, "body_spacing": 10},
        )
        orbits = lines[4:]
        bodies = [(-5.0, 0.0, 0.0), (5.0, 0.0, 0.0), (-5.0, 0.0, 0.0), (5.0, 0.0, 0.0)]
        radii = [1.0, 1.0, 2.0, 2.0]
        for orbit, body, radius in zip(orbits, bodies, radii):
            assert math.dist(orbit.points[0], body) == pytest.approx(radius)


class TestFlowField:
    """flow_field"""

    def test_particles_stay_in_domain(self):
        lines = _run(
            AlgorithmType.FLOW_FIELD,
            {"particles": 40, "steps": 200, "step_size": 1, "size": 4},
        )
        assert len(lines) == 40
        for line in lines:
            assert line.arrow
            assert len(line.points) == 201
            for x, y, _ in line.points:
                assert abs(x) <= 2.0 + 1e-9
                assert abs(y) <= 2.0 + 1e-9


class TestOrganic:
    """branching_tree and cellular"""

    def test_tree_segment_count(self):
        assert len(_run(AlgorithmType.BRANCHING_TREE, {"depth": 4})) == 15

    def test_tree_starts_at_base(self):
        lines = _run(AlgorithmType.BRANCHING_TREE, {"depth": 1, "base": [1, 2, 0]})
        assert lines[0].points[0] == (1.0, 2.0, 0.0)

    def test_cells_without_connections(self):
        lines = _run(AlgorithmType.CELLULAR, {"cells": 3, "connect_distance": 0})
        assert len(lines) == 3
        for line in lines:
            assert line.points[0] == line.points[-1]
