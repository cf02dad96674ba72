"""
services/text_metrics.py

Typing speed, accuracy, word count and band arithmetic.
Pure Python functions, no UI code and no global state.
"""

import math
from typing import Optional

from config import (
    CHARS_PER_WORD, IDEAL_WORD_RANGE, MAX_RECOMMENDED_WORDS, MIN_WORDS,
)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_wpm(
    char_count: int,
    start_time: Optional[float],
    end_time: float,
) -> int:
    """
    Words per minute, using the 5-characters-per-word convention.

    Args:
        char_count: Number of characters typed.
        start_time: Unix timestamp of the first keystroke, or None.
        end_time:   Unix timestamp to measure up to.

    Returns:
        round((char_count / 5) / elapsed_minutes).
        0 when start_time is unset or no time has elapsed.
    """
    if start_time is None:
        return 0
    minutes = (end_time - start_time) / 60.0
    if minutes <= 0:
        return 0
    return _round_half_up((char_count / CHARS_PER_WORD) / minutes)


def calculate_accuracy(correct_count: int, total_typed: int) -> int:
    """
    Percentage of correct characters, rounded to an integer.
    100 when nothing has been typed yet.
    """
    if total_typed == 0:
        return 100
    return _round_half_up(correct_count / total_typed * 100)


def count_words(text: str) -> int:
    """Whitespace-separated word count. Empty or blank text counts 0."""
    return len(text.split())


def format_duration(seconds: int) -> str:
    """
    Seconds → "m:ss" (minutes unpadded, seconds zero-padded).

    >>> format_duration(75)
    '1:15'
    """
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def round_band(value: float) -> float:
    """Round to the nearest 0.5 band, halves rounding up (6.25 → 6.5, 6.75 → 7.0)."""
    return math.floor(value * 2 + 0.5) / 2


def word_count_status(word_count: int, task_type: str) -> str:
    """
    Classify an essay length against the task's targets.

    Returns:
        "below_minimum":    under 150 (Task 1) / 250 (Task 2)
        "optimal":          inside the ideal range (160~190 / 260~290)
        "over_recommended": above 220 / 320
        "acceptable":       anything else
    """
    minimum = MIN_WORDS[task_type]
    ideal_min, ideal_max = IDEAL_WORD_RANGE[task_type]

    if word_count < minimum:
        return "below_minimum"
    if ideal_min <= word_count <= ideal_max:
        return "optimal"
    if word_count > MAX_RECOMMENDED_WORDS[task_type]:
        return "over_recommended"
    return "acceptable"
