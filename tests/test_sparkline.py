"""Tests for sparkline normalization, history synthesis and downsampling."""

from cardsynth.core.models import SeriesPoint
from cardsynth.sparkline.models import RangePreset, SparklineStyle
from cardsynth.sparkline.service import (
    build_sparkline_dataset,
    downsample_sparkline_data,
    find_extrema_indices,
    normalize_sparkline_card,
    parse_range_preset_to_hours,
    resolve_range_preset,
)


def _points(values: list[float]) -> list[SeriesPoint]:
    return [SeriesPoint(timestamp=index * 1000, value=value) for index, value in enumerate(values)]


class TestRangePresets:
    def test_parse(self):
        assert parse_range_preset_to_hours("7d") == 168
        assert parse_range_preset_to_hours("1h") == 1
        assert parse_range_preset_to_hours("2d") is None
        assert parse_range_preset_to_hours(6) is None

    def test_resolve(self):
        assert resolve_range_preset(1) == RangePreset.one_hour
        assert resolve_range_preset(5) == RangePreset.six_hours
        assert resolve_range_preset(12) == RangePreset.one_day
        assert resolve_range_preset(48) == RangePreset.one_week


class TestNormalizeSparklineCard:
    def test_range_preset_wins_over_hours(self):
        config = normalize_sparkline_card({"entity": "sensor.cpu_load", "range": "7d", "hours_to_show": 3})
        assert config.hours_to_show == 168
        assert config.range_preset == RangePreset.one_week

    def test_hours_clamped_with_warning(self):
        config = normalize_sparkline_card({"hours_to_show": 500})
        assert config.hours_to_show == 168
        assert config.warnings == ["hours_to_show 500 is outside 1-168; clamped to 168."]

    def test_entity_from_entities_list(self):
        config = normalize_sparkline_card({"entities": [{"entity": "sensor.a"}, "sensor.b"]})
        assert config.entity == "sensor.a"
        config = normalize_sparkline_card({"entities": ["sensor.b"]})
        assert config.entity == "sensor.b"

    def test_show_flags(self):
        config = normalize_sparkline_card({"show": {"fill": True, "name": False, "extrema": True}})
        assert config.style == SparklineStyle.area
        assert config.show_name is False
        assert config.show_current is True
        assert config.show_min_max is True

    def test_compact_uses_configured_height(self):
        config = normalize_sparkline_card({"height": 40})
        assert config.compact is True
        assert config.height == 52
        assert normalize_sparkline_card({}).compact is False


class TestDownsample:
    def test_short_series_untouched(self):
        points = _points([1, 2, 3])
        assert downsample_sparkline_data(points, 5) == points

    def test_keeps_endpoints_and_extrema(self):
        values = [float(i % 7) for i in range(100)]
        values[37] = 100
        values[63] = -50
        points = _points(values)
        sampled = downsample_sparkline_data(points, 10)
        assert len(sampled) <= 10
        assert sampled[0] == points[0]
        assert sampled[-1] == points[-1]
        assert points[37] in sampled
        assert points[63] in sampled
        timestamps = [p.timestamp for p in sampled]
        assert timestamps == sorted(timestamps)

    def test_smallest_accepted_cap_holds(self):
        values = [float(i % 7) for i in range(100)]
        values[37] = 100
        values[63] = -50
        points = _points(values)
        sampled = downsample_sparkline_data(points, 4)
        assert sampled == [points[0], points[37], points[63], points[-1]]

    def test_caps_below_four_keep_endpoints(self):
        points = _points([5, 1, 9, 2, 7])
        assert downsample_sparkline_data(points, 3) == [points[0], points[-1]]

    def test_first_occurrence_extrema(self):
        assert find_extrema_indices(_points([3, 1, 5, 1, 5])) == (1, 2)


class TestBuildSparklineDataset:
    def test_last_point_is_the_reading(self, now):
        config = normalize_sparkline_card({"entity": "sensor.cpu_load"})
        dataset = build_sparkline_dataset(config, "42.5", now)
        assert len(dataset.points) == 24
        assert dataset.current == 42.5
        assert dataset.points[-1].timestamp == now
        assert dataset.min <= dataset.current <= dataset.max

    def test_downsampled_to_cap(self, now):
        config = normalize_sparkline_card({"entity": "sensor.cpu_load", "hours_to_show": 24, "points_per_hour": 10})
        dataset = build_sparkline_dataset(config, "42.5", now, max_points=48)
        assert len(dataset.points) <= 48
        assert dataset.points[dataset.current_index].value == 42.5
        assert dataset.path.line_path.startswith("M ")

    def test_missing_reading_does_not_pin(self, now):
        config = normalize_sparkline_card({"entity": "sensor.unavailable"})
        dataset = build_sparkline_dataset(config, "unavailable", now)
        assert len(dataset.points) == 24

    def test_deterministic(self, now):
        config = normalize_sparkline_card({"entity": "sensor.cpu_load"})
        assert build_sparkline_dataset(config, "42.5", now) == build_sparkline_dataset(config, "42.5", now)
