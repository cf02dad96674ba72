"""Tests for ielts_writing.services.text_metrics – speed, accuracy, word and band helpers."""

from __future__ import annotations

import pytest

from ielts_writing.services.text_metrics import (
    calculate_accuracy,
    calculate_wpm,
    count_words,
    format_duration,
    round_band,
    word_count_status,
)


# ---------------------------------------------------------------------------
# calculate_wpm
# ---------------------------------------------------------------------------

class TestCalculateWpm:
    def test_no_start_time_is_zero(self):
        assert calculate_wpm(500, None, 1000.0) == 0

    def test_zero_elapsed_is_zero(self):
        assert calculate_wpm(50, 1000.0, 1000.0) == 0

    def test_negative_elapsed_is_zero(self):
        assert calculate_wpm(50, 1000.0, 990.0) == 0

    def test_one_minute(self):
        # 250 chars = 50 words in one minute
        assert calculate_wpm(250, 0.0, 60.0) == 50

    def test_half_minute(self):
        assert calculate_wpm(100, 10.0, 40.0) == 40

    def test_rounds_half_up(self):
        # 5 words in two minutes = 2.5 WPM
        assert calculate_wpm(25, 0.0, 120.0) == 3


# ---------------------------------------------------------------------------
# calculate_accuracy
# ---------------------------------------------------------------------------

class TestCalculateAccuracy:
    def test_nothing_typed_is_100(self):
        assert calculate_accuracy(0, 0) == 100

    def test_eight_of_ten(self):
        assert calculate_accuracy(8, 10) == 80

    def test_all_correct(self):
        assert calculate_accuracy(7, 7) == 100

    def test_rounds(self):
        assert calculate_accuracy(2, 3) == 67

    def test_rounds_half_up(self):
        assert calculate_accuracy(1, 8) == 13  # 12.5%


# ---------------------------------------------------------------------------
# count_words / format_duration
# ---------------------------------------------------------------------------

class TestCountWords:
    @pytest.mark.parametrize("text,expected", [
        ("", 0),
        ("   \n\t ", 0),
        ("one", 1),
        ("  two   words  ", 2),
        ("line one\nline two", 4),
    ])
    def test_counts(self, text, expected):
        assert count_words(text) == expected


class TestFormatDuration:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "0:00"),
        (5, "0:05"),
        (75, "1:15"),
        (1200, "20:00"),
        (2399, "39:59"),
    ])
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_negative_clamped(self):
        assert format_duration(-3) == "0:00"


# ---------------------------------------------------------------------------
# round_band
# ---------------------------------------------------------------------------

class TestRoundBand:
    @pytest.mark.parametrize("value,expected", [
        (7.0, 7.0),
        (6.125, 6.0),
        (6.25, 6.5),
        (6.375, 6.5),
        (6.75, 7.0),
        (8.9, 9.0),
        (0.0, 0.0),
    ])
    def test_nearest_half(self, value, expected):
        assert round_band(value) == expected


# ---------------------------------------------------------------------------
# word_count_status
# ---------------------------------------------------------------------------

class TestWordCountStatus:
    @pytest.mark.parametrize("count,expected", [
        (149, "below_minimum"),
        (150, "acceptable"),
        (160, "optimal"),
        (190, "optimal"),
        (200, "acceptable"),
        (221, "over_recommended"),
    ])
    def test_task1(self, count, expected):
        assert word_count_status(count, "Task 1") == expected

    @pytest.mark.parametrize("count,expected", [
        (249, "below_minimum"),
        (255, "acceptable"),
        (275, "optimal"),
        (321, "over_recommended"),
    ])
    def test_task2(self, count, expected):
        assert word_count_status(count, "Task 2") == expected
