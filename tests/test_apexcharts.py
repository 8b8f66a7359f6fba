"""Tests for ApexCharts passthrough normalization and preview series."""

from cardsynth.apexcharts.models import ApexChartType, ApexSeriesType, StrokeCurve
from cardsynth.apexcharts.service import (
    apex_point_count,
    build_deterministic_series_data,
    normalize_apexcharts_card,
    synthesize_apexcharts,
    to_apex_options,
)


def _card(**overrides):
    card = {"type": "custom:apexcharts-card", "series": [{"entity": "sensor.cpu_load"}]}
    card.update(overrides)
    return card


class TestNormalizeApexChartsCard:
    def test_defaults(self):
        config = normalize_apexcharts_card(_card())
        assert config.graph_span == "24h"
        assert config.graph_span_seconds == 86400
        assert config.update_interval_seconds == 30
        assert config.chart.type == ApexChartType.line
        assert config.chart.height == 280
        assert config.stroke.curve == StrokeCurve.smooth
        assert config.series[0].name == "cpu load"
        assert config.warnings == []

    def test_series_must_be_a_list(self):
        config = normalize_apexcharts_card(_card(series={"entity": "sensor.a"}))
        assert config.series == []
        assert config.warnings == ["Series must be an array for ApexCharts cards."]

    def test_absent_series_is_silent(self):
        config = normalize_apexcharts_card({"type": "custom:apexcharts-card"})
        assert config.series == []
        assert config.warnings == []

    def test_series_without_entity_dropped(self):
        config = normalize_apexcharts_card(_card(series=[{"name": "x"}, {"entity": "sensor.a", "type": "Column"}]))
        assert [s.entity for s in config.series] == ["sensor.a"]
        assert config.series[0].type == ApexSeriesType.column
        assert config.warnings == ["Ignored one series entry without a valid entity."]

    def test_unsupported_series_type_is_preserved(self):
        config = normalize_apexcharts_card(_card(series=[{"entity": "sensor.a", "type": "scatter", "color": "red"}]))
        series = config.series[0]
        assert series.type is None
        assert series.extra == {"color": "red", "type": "scatter"}
        assert len(config.warnings) == 1

    def test_chart_type_falls_back_to_first_series(self):
        config = normalize_apexcharts_card(_card(series=[{"entity": "sensor.a", "type": "area"}]))
        assert config.chart.type == ApexChartType.area

    def test_clamps_and_unknown_curve_warn(self):
        config = normalize_apexcharts_card(
            _card(apex_config={"chart": {"height": 2000}, "stroke": {"width": 40, "curve": "wavy"}})
        )
        assert config.chart.height == 720
        assert config.stroke.width == 12
        assert config.stroke.curve == StrokeCurve.smooth
        assert len(config.warnings) == 3

    def test_bad_duration_keeps_default_text(self):
        config = normalize_apexcharts_card(_card(graph_span="forever", update_interval="5m"))
        assert (config.graph_span, config.graph_span_seconds) == ("24h", 86400)
        assert (config.update_interval, config.update_interval_seconds) == ("5m", 300)
        assert len(config.warnings) == 1


class TestPassthrough:
    def test_unknown_keys_survive(self):
        config = normalize_apexcharts_card(
            _card(
                now={"show": True},
                header={"show": False, "title": "CPU"},
                apex_config={
                    "legend": {"show": False},
                    "chart": {"type": "bar", "toolbar": {"show": True}},
                    "stroke": {"dashArray": 4},
                },
            )
        )
        assert config.extra == {"now": {"show": True}}
        assert config.header.show is False
        assert config.header.extra == {"title": "CPU"}
        assert to_apex_options(config) == {
            "legend": {"show": False},
            "chart": {"toolbar": {"show": True}, "type": "bar", "height": 280},
            "stroke": {"dashArray": 4, "width": 2, "curve": "smooth"},
        }


class TestPreviewSeries:
    def test_point_count(self):
        assert apex_point_count(86400) == 96
        assert apex_point_count(3600) == 12
        assert apex_point_count(12 * 3600) == 48

    def test_random_walk(self, now):
        config = normalize_apexcharts_card(_card(graph_span="12h"))
        data = build_deterministic_series_data(config.series[0], config.graph_span_seconds, now)
        assert len(data) == 48
        assert data[-1].x == now
        assert [p.x for p in data] == sorted(p.x for p in data)
        assert all(p.y >= 0 for p in data)

    def test_deterministic(self, now):
        config = normalize_apexcharts_card(_card(series=[{"entity": "sensor.a"}, {"entity": "sensor.b"}]))
        first = synthesize_apexcharts(config, now)
        assert first == synthesize_apexcharts(config, now)
        assert first[0].data != first[1].data
