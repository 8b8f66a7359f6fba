"""Tests for native graph normalization and synthetic data."""

from cardsynth.config import DEFAULT_PALETTE
from cardsynth.graph.models import AxisSide, ChartType, XAxisMode, YAxis
from cardsynth.graph.service import (
    PLACEHOLDER_ENTITY,
    build_graph_data,
    get_y_axis_domain,
    graph_point_count,
    normalize_graph_card,
    parse_axis_bound,
)


class TestNormalizeGraphCard:
    def test_defaults(self):
        config = normalize_graph_card({"type": "custom:native-graph-card"})
        assert config.chart_type == ChartType.line
        assert config.time_range_seconds == 86400
        assert config.refresh_interval_seconds == 30
        assert config.x_axis_mode == XAxisMode.time
        assert config.zoom_pan is True

    def test_placeholder_series_when_none_valid(self):
        config = normalize_graph_card({"series": []})
        assert len(config.series) == 1
        assert config.series[0].entity == PLACEHOLDER_ENTITY
        assert config.series[0].color == DEFAULT_PALETTE[0]

    def test_series_without_entity_dropped_with_warning(self):
        config = normalize_graph_card({"series": [{"label": "x"}, {"entity": "sensor.cpu_load"}]})
        assert [s.entity for s in config.series] == ["sensor.cpu_load"]
        assert config.warnings == ["Ignored series 1 without an entity."]

    def test_labels_and_palette(self):
        config = normalize_graph_card(
            {"series": [{"entity": "sensor.cpu_load"}, {"entity": "sensor.ram", "label": "RAM", "axis": "right"}]},
            palette=["#111111", "#222222"],
        )
        assert [s.label for s in config.series] == ["cpu load", "RAM"]
        assert [s.color for s in config.series] == ["#111111", "#222222"]
        assert config.series[1].axis == AxisSide.right

    def test_bad_chart_type_and_duration_warn(self):
        config = normalize_graph_card({"chart_type": "radar", "time_range": "soon"})
        assert config.chart_type == ChartType.line
        assert config.time_range_seconds == 86400
        assert len(config.warnings) == 2


class TestAxis:
    def test_parse_axis_bound(self):
        assert parse_axis_bound(None) == "auto"
        assert parse_axis_bound(" Auto ") == "auto"
        assert parse_axis_bound("12.5") == 12.5
        assert parse_axis_bound("low") == "auto"

    def test_domain(self):
        assert get_y_axis_domain(YAxis()) is None
        assert get_y_axis_domain(YAxis(min=0)) == (0, "auto")


class TestBuildGraphData:
    def test_point_count_bounds(self):
        assert graph_point_count(normalize_graph_card({})) == 180
        assert graph_point_count(normalize_graph_card({"time_range": "1h", "refresh_interval": "1m"})) == 60
        assert graph_point_count(normalize_graph_card({"time_range": "1h", "refresh_interval": "5m"})) == 24

    def test_points_end_at_now(self, now):
        config = normalize_graph_card({"time_range": "1h", "refresh_interval": "1m"})
        data = build_graph_data(config, now)
        assert data.points[-1].timestamp == now
        assert data.points[1].timestamp - data.points[0].timestamp == 60_000
        assert set(data.points[0].values) == {"series_0"}

    def test_deterministic(self, now):
        config = normalize_graph_card({"series": [{"entity": "sensor.a"}, {"entity": "sensor.b"}]})
        assert build_graph_data(config, now) == build_graph_data(config, now)

    def test_pie_slices_are_positive(self, now):
        config = normalize_graph_card({"chart_type": "pie", "series": [{"entity": "sensor.a"}, {"entity": "sensor.b"}]})
        data = build_graph_data(config, now)
        assert [s.name for s in data.pie] == ["a", "b"]
        assert all(s.value >= 0.01 for s in data.pie)
