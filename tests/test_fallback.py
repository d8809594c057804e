"""Tests for the fallback compositions."""

import math

import pytest

from generators.fallback import THEMES, default_composition, fallback_lines, match_theme
from generators.geometry import validate_polylines


class TestDefaultComposition:
    """The untuned fallback scene."""

    def test_contents(self):
        lines = default_composition()
        # 5 rings + 12 spokes + 8 markers of two strokes each
        assert len(lines) == 33
        assert validate_polylines(lines) == tuple(lines)

    def test_rings(self):
        rings = default_composition()[:5]
        for ring, radius in zip(rings, [1, 2, 3, 4, 5]):
            assert math.hypot(*ring.points[0][:2]) == pytest.approx(radius)
            assert math.dist(ring.points[0], ring.points[-1]) < 1e-9

    def test_deterministic(self):
        assert default_composition() == default_composition()

    def test_no_hint(self):
        assert fallback_lines() == default_composition()
        assert fallback_lines("something unrelated") == default_composition()


class TestThemes:
    """Keyword-selected presets."""

    @pytest.mark.parametrize("hint,theme", [
        ("Concentric circles of light", "circular"),
        ("a BOX inside a box", "squares"),
        ("pyramid", "triangles"),
        ("double helix", "spiral"),
        ("an old oak tree", "tree"),
        ("flower garden", "floral"),
        ("a river delta", "flow"),
        ("the rhythm of music", "waves"),
        ("simple", "minimal"),
    ])
    def test_match(self, hint, theme):
        assert match_theme(hint) == theme

    def test_no_match(self):
        assert match_theme("nebula") is None
        assert match_theme(None) is None
        assert match_theme(12) is None

    def test_first_theme_wins(self):
        assert match_theme("a round tree") == "circular"

    def test_every_preset_is_valid(self):
        for name, _, build in THEMES:
            lines = build()
            assert lines, name
            assert validate_polylines(lines) == tuple(lines), name

    def test_tree_preset(self):
        assert len(fallback_lines("tree")) == 2 ** 6 - 1


class TestExtendedThemes:
    """Presets built from registered generators or fixed layouts."""

    @pytest.mark.parametrize("hint,theme,expected", [
        ("living cell structures", "cellular", None),
        ("an electronic pcb", "circuit", 8 + 7),
        ("a social network", "network", None),
        ("a business process", "system", 6 + 6),
        ("sales chart", "chart", 2 + 8 + 4),
        ("statistical analysis", "scatter", 50 + 1),
        ("a melancholy mood", "emotional", 8),
        ("a dance", "movement", 6),
    ])
    def test_theme(self, hint, theme, expected):
        assert match_theme(hint) == theme
        lines = fallback_lines(hint)
        assert lines
        assert validate_polylines(lines) == tuple(lines)
        if expected is not None:
            assert len(lines) == expected

    def test_cellular_has_every_membrane(self):
        lines = fallback_lines("cell")
        membranes = [line for line in lines if line.points[0] == line.points[-1] and len(line.points) > 2]
        assert len(membranes) == 15

    def test_seeded_presets_are_deterministic(self):
        for hint in ("cell", "circuit", "network", "scatter", "emotion"):
            assert fallback_lines(hint) == fallback_lines(hint)

    def test_earlier_theme_wins(self):
        assert match_theme("a flowing river of cells") == "flow"
        assert match_theme("graph") == "network"
