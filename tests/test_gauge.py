"""Tests for gauge normalization and reading resolution."""

from cardsynth.gauge.service import (
    normalize_gauge_card,
    normalize_gauge_segments,
    resolve_gauge_reading,
    synthesize_gauge,
)


def _card(**overrides):
    card = {"type": "custom:gauge-card-pro", "entity": "sensor.cpu_load", "min": 0, "max": 100}
    card.update(overrides)
    return card


class TestNormalizeGaugeCard:
    def test_degenerate_range_repaired_silently(self):
        config = normalize_gauge_card(_card(min=50, max=10))
        assert (config.min, config.max) == (50, 51)
        assert config.warnings == []

    def test_range_invariant_holds(self):
        for lo, hi in ((0, 0), (10, -10), ("5", "5"), (None, None)):
            config = normalize_gauge_card(_card(min=lo, max=hi))
            assert config.min < config.max

    def test_numeric_strings(self):
        config = normalize_gauge_card(_card(min="-20", max="40"))
        assert (config.min, config.max) == (-20, 40)

    def test_default_segments(self):
        config = normalize_gauge_card(_card())
        assert [s.from_ for s in config.segments] == [0, 50, 80]
        assert [s.label for s in config.segments] == ["Low", "Medium", "High"]
        assert config.warnings == []

    def test_unit_needle_header(self):
        config = normalize_gauge_card(
            _card(header="CPU", needle=True, value_texts={"primary_unit": "%"})
        )
        assert config.header == "CPU"
        assert config.needle is True
        assert config.unit == "%"
        assert config.value_precision == 1

    def test_non_boolean_needle_warns(self):
        config = normalize_gauge_card(_card(needle="yes"))
        assert config.needle is False
        assert len(config.warnings) == 1


class TestNormalizeGaugeSegments:
    def test_drops_segments_without_from(self):
        config = normalize_gauge_card(
            _card(segments=[{"from": 60, "color": "#f00"}, {"color": "#0f0"}, {"from": "10", "color": "#00f"}])
        )
        assert [s.from_ for s in config.segments] == [10, 60]
        assert any("without a numeric from" in w for w in config.warnings)

    def test_out_of_range_segments_clamped_with_warning(self):
        config = normalize_gauge_card(_card(segments=[{"from": -5, "color": "#f00"}, {"from": 150, "color": "#0f0"}]))
        assert [s.from_ for s in config.segments] == [0, 100]
        assert len(config.warnings) == 2

    def test_empty_list_gets_defaults(self):
        assert len(normalize_gauge_segments([], 0, 10)) == 3


class TestResolveGaugeReading:
    def test_reading_above_max_is_clamped(self):
        reading = resolve_gauge_reading(normalize_gauge_card(_card()), 170)
        assert reading.value == 100
        assert reading.percentage == 100
        assert reading.unavailable is False

    def test_unavailable_reading(self):
        reading = resolve_gauge_reading(normalize_gauge_card(_card(min=10)), "unavailable")
        assert reading.value == 10
        assert reading.percentage == 0
        assert reading.unavailable is True

    def test_active_segment_is_half_open(self):
        reading = resolve_gauge_reading(normalize_gauge_card(_card()), 50)
        assert [s.is_active for s in reading.segments] == [False, True, False]
        assert reading.active_color == "#ffd166"

    def test_last_segment_includes_max(self):
        reading = resolve_gauge_reading(normalize_gauge_card(_card()), 100)
        assert [s.is_active for s in reading.segments] == [False, False, True]

    def test_gradient_interpolates_first_to_last(self):
        reading = resolve_gauge_reading(normalize_gauge_card(_card(gradient=True)), 50)
        assert reading.active_color == "#b69d75"

    def test_synthesize_from_lookup(self, lookup):
        reading = synthesize_gauge(normalize_gauge_card(_card()), lookup)
        assert reading.value == 42.5
        assert reading.active_color == "#ff6b6b"

    def test_deterministic(self, lookup):
        config = normalize_gauge_card(_card())
        assert synthesize_gauge(config, lookup) == synthesize_gauge(config, lookup)


class TestHugeRanges:
    def test_range_repair_survives_float_absorption(self):
        config = normalize_gauge_card(_card(min="1e17", max=None))
        assert config.min == 1e17
        assert config.min < config.max

    def test_reading_on_huge_range(self):
        reading = resolve_gauge_reading(normalize_gauge_card(_card(min="1e17", max=None)), 5)
        assert reading.value == 1e17
        assert reading.percentage == 0
