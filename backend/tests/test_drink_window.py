"""
Tests for drink-window classification.
"""

import pytest

from cellar.models.enums import BadgeTone, DrinkState
from cellar.services.drink_window import (
    DrinkWindow,
    badge,
    clamp_year,
    classify,
    is_drink_now,
    is_inverted,
    preset_window,
    render_label,
)


class TestClassify:
    def test_no_window(self):
        assert classify(DrinkWindow(None, None), 2024) == DrinkState.NO_WINDOW

    @pytest.mark.parametrize("year,expected", [
        (2019, DrinkState.TOO_EARLY),
        (2020, DrinkState.READY_NOW),
        (2024, DrinkState.READY_NOW),
        (2025, DrinkState.READY_NOW),
        (2026, DrinkState.EXPIRED),
    ])
    def test_closed_window(self, year, expected):
        assert classify(DrinkWindow(2020, 2025), year) == expected

    def test_inverted_window_is_too_early(self):
        # Start is checked before end
        assert classify(DrinkWindow(2030, 2020), 2024) == DrinkState.TOO_EARLY

    def test_inverted_window_between_bounds_expired(self):
        assert classify(DrinkWindow(2022, 2020), 2024) == DrinkState.EXPIRED

    def test_open_ended_windows(self):
        assert classify(DrinkWindow(start=2020), 2050) == DrinkState.READY_NOW
        assert classify(DrinkWindow(start=2030), 2024) == DrinkState.TOO_EARLY
        assert classify(DrinkWindow(end=2030), 1990) == DrinkState.READY_NOW
        assert classify(DrinkWindow(end=2020), 2024) == DrinkState.EXPIRED


class TestRenderLabel:
    def test_no_window(self):
        assert render_label(DrinkWindow(), 2024) == "no drink window set"

    def test_too_early(self):
        assert render_label(DrinkWindow(2030, 2035), 2024) == "too early (from 2030)"

    def test_expired(self):
        assert render_label(DrinkWindow(2010, 2020), 2024) == "expired (to 2020)"

    def test_ready_now_both_bounds(self):
        assert render_label(DrinkWindow(2020, 2025), 2024) == "ready now (2020–2025)"

    def test_ready_now_single_bound(self):
        assert render_label(DrinkWindow(start=2020), 2024) == "ready now (from 2020)"
        assert render_label(DrinkWindow(end=2030), 2024) == "ready now (to 2030)"


class TestBadge:
    @pytest.mark.parametrize("window,label,tone", [
        (DrinkWindow(), "no window", BadgeTone.NEUTRAL),
        (DrinkWindow(2030, None), "too early", BadgeTone.WARN),
        (DrinkWindow(None, 2020), "expired", BadgeTone.BAD),
        (DrinkWindow(2020, 2030), "drink now", BadgeTone.GOOD),
    ])
    def test_badges(self, window, label, tone):
        result = badge(window, 2024)
        assert result.label == label
        assert result.tone == tone

    def test_drink_now_excludes_missing_window(self):
        assert is_drink_now(DrinkWindow(), 2024) is False
        assert is_drink_now(DrinkWindow(2020, 2030), 2024) is True


class TestClampYear:
    def test_in_range_unchanged(self):
        assert clamp_year(2019) == 2019

    def test_clamped_to_bounds(self):
        assert clamp_year(1800) == 1900
        assert clamp_year(2500) == 2100

    def test_unset_and_unparsable(self):
        assert clamp_year(None) is None
        assert clamp_year("") is None
        assert clamp_year("soon") is None
        assert clamp_year(True) is None

    def test_parses_strings(self):
        assert clamp_year(" 2021 ") == 2021
        assert clamp_year("1850") == 1900


class TestPresets:
    @pytest.mark.parametrize("preset,end", [("now+1", 2025), ("now+3", 2027), ("now+5", 2029)])
    def test_presets_open_window_this_year(self, preset, end):
        assert preset_window(preset, 2024) == DrinkWindow(2024, end)

    def test_clear(self):
        assert preset_window("clear", 2024) == DrinkWindow()

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            preset_window("now+10", 2024)


def test_is_inverted():
    assert is_inverted(DrinkWindow(2030, 2020)) is True
    assert is_inverted(DrinkWindow(2020, 2030)) is False
    assert is_inverted(DrinkWindow(2030, None)) is False
