"""Tests for card margin and padding resolution."""

import pytest

from cardsynth.spacing.models import SpacingMode, SpacingPreset, SpacingSide, SpacingSides
from cardsynth.spacing.resolver import (
    clamp_card_spacing,
    default_per_side_spacing,
    is_per_side_spacing,
    normalize_spacing_side,
    normalize_spacing_value,
    resolve_card_spacing_styles,
    resolve_spacing_preset,
    spacing_value_to_form_value,
    to_spacing_css_shorthand,
    update_spacing_side,
)


def _sides(spacing) -> tuple[int, int, int, int]:
    return (spacing.top, spacing.right, spacing.bottom, spacing.left)


class TestClamp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(7.5, 8), (-3, 0), (100, 64), ("12", 12), ("abc", 0), (None, 0)],
    )
    def test_clamp_card_spacing(self, value, expected):
        assert clamp_card_spacing(value) == expected


class TestNormalizeSpacingValue:
    def test_presets(self):
        assert _sides(normalize_spacing_value("relaxed")) == (16, 16, 16, 16)
        assert _sides(normalize_spacing_value("none")) == (0, 0, 0, 0)

    def test_numbers(self):
        spacing = normalize_spacing_value(12)
        assert _sides(spacing) == (12, 12, 12, 12)
        assert spacing.mode == SpacingMode.all
        assert _sides(normalize_spacing_value("70")) == (64, 64, 64, 64)

    def test_two_token_shorthand(self):
        spacing = normalize_spacing_value("8px 16px")
        assert _sides(spacing) == (8, 16, 8, 16)
        assert spacing.mode == SpacingMode.per_side

    def test_three_and_four_tokens(self):
        assert _sides(normalize_spacing_value("1 2 3")) == (1, 2, 3, 2)
        assert _sides(normalize_spacing_value("1px 2px 3px 4px")) == (1, 2, 3, 4)

    def test_uniform_shorthand_is_all_mode(self):
        assert normalize_spacing_value("4px 4px").mode == SpacingMode.all

    def test_mapping(self):
        spacing = normalize_spacing_value({"top": 4, "left": "100"})
        assert _sides(spacing) == (4, 0, 0, 64)
        assert spacing.mode == SpacingMode.per_side

    def test_garbage_uses_fallback(self):
        assert _sides(normalize_spacing_value("1 2 3 4 5", fallback=6)) == (6, 6, 6, 6)
        assert _sides(normalize_spacing_value(["8"])) == (0, 0, 0, 0)


class TestPresetsAndForms:
    def test_resolve_preset(self):
        assert resolve_spacing_preset("tight") == SpacingPreset.tight
        assert resolve_spacing_preset(24) == SpacingPreset.spacious
        assert resolve_spacing_preset(10) == SpacingPreset.custom
        assert resolve_spacing_preset("8px 16px") == SpacingPreset.custom

    def test_form_value(self):
        sides = SpacingSides(top=1, right=2, bottom=3, left=4)
        assert spacing_value_to_form_value(SpacingMode.all, sides) == 1
        assert spacing_value_to_form_value(SpacingMode.per_side, sides) == {"top": 1, "right": 2, "bottom": 3, "left": 4}

    def test_per_side_detection(self):
        assert is_per_side_spacing({"top": 1}) is True
        assert is_per_side_spacing("1px 2px") is True
        assert is_per_side_spacing(8) is False

    def test_update_side(self):
        assert update_spacing_side(8, SpacingSide.left, 20) == {"top": 8, "right": 8, "bottom": 8, "left": 20}
        assert update_spacing_side(8, "left", "junk")["left"] == 8
        assert update_spacing_side(8, "middle", 3)["top"] == 3

    def test_side_and_defaults(self):
        assert normalize_spacing_side("bottom") == SpacingSide.bottom
        assert normalize_spacing_side("middle") == SpacingSide.top
        assert _sides(default_per_side_spacing(5)) == (5, 5, 5, 5)


class TestCss:
    @pytest.mark.parametrize("value", [8, "normal", "8px 16px", {"top": 2}, None, "nonsense"])
    def test_shorthand_has_four_tokens(self, value):
        assert len(to_spacing_css_shorthand(value).split()) == 4

    def test_shorthand(self):
        assert to_spacing_css_shorthand("8px 16px") == "8px 16px 8px 16px"

    def test_card_styles(self):
        assert resolve_card_spacing_styles({"type": "entities"}) == {}
        assert resolve_card_spacing_styles({"card_margin": "tight", "card_padding": 12}) == {
            "box-sizing": "border-box",
            "margin": "4px 4px 4px 4px",
            "padding": "12px 12px 12px 12px",
        }
