"""Tests for the parameter sanitizer (coerce-and-clamp models)."""

import math

import pytest
from pydantic import ValidationError

from generators.patterns import ConcentricCirclesParams, GridParams, RadialLinesParams
from generators.stochastic import ScatterParams
from generators.params import to_number, to_vector


class TestNumericFields:
    """Range-bounded int and float fields."""

    def test_defaults_for_empty_mapping(self):
        params = GridParams.sanitize({})
        assert params.size == 10.0
        assert params.spacing == 1.0
        assert params.z_layers == 1

    def test_numeric_strings_are_coerced(self):
        params = GridParams.sanitize({"size": "4", "spacing": " 0.5 "})
        assert params.size == 4.0
        assert params.spacing == 0.5

    def test_values_clamped_to_bounds(self):
        params = GridParams.sanitize({"size": 1e9, "spacing": -3, "z_layers": 99})
        assert params.size == 40.0
        assert params.spacing == 0.1
        assert params.z_layers == 5

    def test_int_fields_round(self):
        params = ConcentricCirclesParams.sanitize({"count": 4.6})
        assert params.count == 5
        assert isinstance(params.count, int)

    def test_garbage_falls_back_to_default(self):
        params = GridParams.sanitize({
            "size": "huge",
            "spacing": None,
            "z_layers": [1, 2],
            "noise": True,
        })
        assert params.size == 10.0
        assert params.spacing == 1.0
        assert params.z_layers == 1
        assert params.noise == 0.0

    def test_non_finite_falls_back_to_default(self):
        params = RadialLinesParams.sanitize({"length": float("nan"), "count": float("inf")})
        assert params.length == 5.0
        assert params.count == 12

    def test_huge_int_does_not_overflow(self):
        params = RadialLinesParams.sanitize({"count": 10**400})
        assert params.count == 12

    def test_shared_style_fields(self):
        params = GridParams.sanitize({"opacity": 7, "line_width": 0})
        assert params.opacity == 1.0
        assert params.line_width == 0.1


class TestVectorFields:
    """Vector-bounded coordinate fields."""

    def test_three_vector_kept(self):
        params = GridParams.sanitize({"center": [1, 2, 3]})
        assert params.center == (1.0, 2.0, 3.0)

    def test_two_vector_padded(self):
        params = GridParams.sanitize({"center": [1, "2"]})
        assert params.center == (1.0, 2.0, 0.0)

    def test_wrong_arity_uses_default(self):
        assert GridParams.sanitize({"center": [1]}).center == (0.0, 0.0, 0.0)
        assert GridParams.sanitize({"center": [1, 2, 3, 4]}).center == (0.0, 0.0, 0.0)
        assert GridParams.sanitize({"center": "1,2,3"}).center == (0.0, 0.0, 0.0)

    def test_bad_component_uses_default(self):
        params = GridParams.sanitize({"center": [1, None, 3]})
        assert params.center == (0.0, 0.0, 0.0)

    def test_components_clamped(self):
        params = GridParams.sanitize({"center": [500, -500, 0]})
        assert params.center == (20.0, -20.0, 0.0)


class TestChoiceFields:
    """Enum-like string fields."""

    def test_known_option_normalised(self):
        params = ScatterParams.sanitize({"distribution": " Clustered ", "marker": "SQUARE"})
        assert params.distribution == "clustered"
        assert params.marker == "square"

    def test_unknown_option_uses_default(self):
        params = ScatterParams.sanitize({"distribution": "gaussian", "marker": 3})
        assert params.distribution == "uniform"
        assert params.marker == "cross"


class TestSanitizeNeverFails:
    """Whole-mapping garbage."""

    def test_non_mapping_input(self):
        for raw in (None, 42, "grid", [1, 2, 3], object()):
            params = GridParams.sanitize(raw)
            assert params == GridParams()

    def test_unknown_keys_ignored(self):
        params = GridParams.sanitize({"colour": "red", 7: "seven"})
        assert params == GridParams()

    def test_params_are_frozen(self):
        params = GridParams.sanitize({})
        with pytest.raises(ValidationError):
            params.size = 3.0


class TestCoercionHelpers:
    """to_number() and to_vector()."""

    def test_to_number(self):
        assert to_number(3) == 3.0
        assert to_number("2.5") == 2.5
        assert to_number(False) is None
        assert to_number("abc") is None
        assert to_number(float("-inf")) is None
        assert to_number({}) is None

    def test_to_vector(self):
        assert to_vector((1, 2), -5, 5) == (1.0, 2.0, 0.0)
        assert to_vector([9, 9, 9], -5, 5) == (5.0, 5.0, 5.0)
        assert to_vector([1, math.nan, 2], -5, 5) is None
        assert to_vector(None, -5, 5) is None
