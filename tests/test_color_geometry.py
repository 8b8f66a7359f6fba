"""Tests for color interpolation and arc/gradient/path geometry."""

import math

import pytest

from cardsynth.core.color import DEFAULT_COLOR, interpolate_hex_color, parse_hex_color
from cardsynth.core.geometry import (
    angle_to_linear_coords,
    arc_dash_offset,
    build_bars,
    build_line_path,
    build_metric_line_path,
    gradient_coords,
    normalize_gradient,
    pack_concentric_arcs,
)
from cardsynth.core.models import GradientType


class TestColor:
    def test_midpoint_rounds_half_up(self):
        assert interpolate_hex_color("#000000", "#ffffff", 0.5) == "#808080"

    def test_ratio_is_clamped(self):
        assert interpolate_hex_color("#000000", "#ffffff", 2) == "#ffffff"
        assert interpolate_hex_color("#000000", "#ffffff", -1) == "#000000"

    def test_malformed_uses_fallback(self):
        assert interpolate_hex_color("red", "#ffffff", 0.5) == DEFAULT_COLOR

    def test_parse_without_hash(self):
        assert parse_hex_color("4fa3ff") == (0x4F, 0xA3, 0xFF)
        assert parse_hex_color("#abc") is None


class TestArcs:
    def test_packs_from_outside_in(self):
        arcs = pack_concentric_arcs([12, 12], 200, gap=6, padding=8)
        assert [arc.radius for arc in arcs] == [86, 68]
        assert arcs[0].circumference == pytest.approx(2 * math.pi * 86)

    def test_drops_rings_that_do_not_fit(self):
        arcs = pack_concentric_arcs([40, 40, 40], 100, gap=6, padding=8)
        assert len(arcs) == 1
        assert arcs[0].radius == 22

    def test_dash_offset(self):
        assert arc_dash_offset(100, 25) == 75
        assert arc_dash_offset(100, 25, counter_clockwise=True) == -75
        assert arc_dash_offset(100, 150) == 0


class TestGradients:
    def test_needs_two_stops(self):
        assert normalize_gradient({"stops": [{"color": "#fff", "position": 0}]}) is None

    def test_stops_sorted_and_clamped(self):
        gradient = normalize_gradient(
            {
                "type": "radial",
                "stops": [
                    {"color": "#000", "position": 150},
                    {"color": "#fff", "position": "10"},
                    {"position": 50},
                ],
            }
        )
        assert gradient is not None
        assert gradient.type == GradientType.radial
        assert [(s.color, s.position) for s in gradient.stops] == [("#fff", 10), ("#000", 100)]

    def test_linear_coords_for_horizontal_angle(self):
        coords = angle_to_linear_coords(90)
        assert (coords.x1, coords.y1, coords.x2, coords.y2) == (0, 50, 100, 50)

    def test_linear_coords_zero_points_up(self):
        coords = angle_to_linear_coords(0)
        assert coords.y1 == pytest.approx(100)
        assert coords.y2 == pytest.approx(0)
        assert coords.x1 == pytest.approx(50)

    def test_radial_coords(self):
        gradient = normalize_gradient(
            {"type": "radial", "stops": [{"color": "#000"}, {"color": "#fff", "position": 100}]}
        )
        coords = gradient_coords(gradient)
        assert (coords.cx, coords.cy, coords.r) == (50, 50, 50)


class TestPaths:
    def test_empty(self):
        path = build_line_path([])
        assert path.line_path == ""
        assert path.area_path == ""

    def test_single_point_is_centered(self):
        path = build_line_path([5])
        assert path.line_path == "M 50.00 0.00"
        assert path.area_path == "M 50.00 0.00 L 100 100 L 0 100 Z"

    def test_two_points_fill_the_box(self):
        path = build_line_path([0, 10])
        assert path.line_path == "M 0.00 100.00 L 100.00 0.00"
        assert (path.min_x, path.max_x, path.min_y, path.max_y) == (0, 100, 0, 100)

    def test_flat_series_does_not_divide_by_zero(self):
        path = build_line_path([3, 3, 3])
        assert path.line_path == "M 0.00 0.00 L 50.00 0.00 L 100.00 0.00"

    def test_metric_line(self):
        assert build_metric_line_path([0, 10]) == "M 18 130 L 82 18"
        assert build_metric_line_path([4]) == ""
        assert build_metric_line_path([None, None]) == ""

    def test_bars(self):
        bars = build_bars([0, 10])
        assert bars[0].height == 1
        assert bars[1].height == 112
        assert bars[1].y == 18
        assert bars[1].x == 51
        assert build_bars([None]) == []
