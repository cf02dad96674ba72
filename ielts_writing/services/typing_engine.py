"""
services/typing_engine.py

Copywork drill engine: compares keystrokes against a fixed reference text.

Rules:
  - input may be replaced wholesale (append, backspace, mid-text edits)
  - input longer than the reference, or any input after completion, is ignored
  - only the newly typed character is checked; a mismatch is recorded in the
    mistake ledger for good, even if it is corrected later
  - the drill finishes when input length reaches the reference length
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ielts_writing.models.session_state import TypingState
from ielts_writing.models.task_model import TrainingTask
from ielts_writing.services.text_metrics import calculate_accuracy, calculate_wpm

logger = logging.getLogger(__name__)


@dataclass
class TypingMetrics:
    wpm: int
    accuracy: int


@dataclass
class TypingResult:
    """Final report of a finished drill."""

    wpm: int
    accuracy: int
    time_ms: int


@dataclass
class CharacterState:
    char: str
    status: str  # pending | correct | corrected | incorrect


class TypingSession:
    """
    Tracks one typing drill.

    accuracy deliberately uses the historical mistake ledger:
    correct = typed - |error_indices|, so a mistake keeps costing
    accuracy after it has been fixed.
    """

    def __init__(self, task: TrainingTask, clock: Callable[[], float] = time.time) -> None:
        self._task = task
        self._reference = task.source_text
        self._clock = clock
        self._state = TypingState()
        self._result: Optional[TypingResult] = None

    @property
    def task(self) -> TrainingTask:
        return self._task

    @property
    def reference(self) -> str:
        return self._reference

    @property
    def state(self) -> TypingState:
        return self._state

    @property
    def is_finished(self) -> bool:
        return self._state.is_finished

    @property
    def result(self) -> Optional[TypingResult]:
        """Set once, when the drill finishes."""
        return self._result

    @property
    def progress(self) -> float:
        """Fraction of the reference typed so far (0.0 ~ 1.0)."""
        return len(self._state.input) / len(self._reference)

    def apply_input(self, new_text: str, cursor: Optional[int] = None) -> bool:
        """
        Replace the typed text with new_text.

        Args:
            new_text: Full proposed input.
            cursor:   Caret position after the edit. The character just before
                      it is the one that was typed. Defaults to the end of
                      new_text.

        Returns:
            False if the input was rejected (drill finished, or new_text longer
            than the reference). True otherwise.
        """
        state = self._state
        if state.is_finished or len(new_text) > len(self._reference):
            return False

        now = self._clock()
        if state.start_time is None and new_text:
            state.start_time = now

        if len(new_text) > len(state.input):
            typed_at = (len(new_text) if cursor is None else cursor) - 1
            if 0 <= typed_at < len(new_text) and new_text[typed_at] != self._reference[typed_at]:
                state.error_indices.add(typed_at)

        state.input = new_text

        if len(new_text) == len(self._reference):
            state.end_time = now
            self._finish()
        return True

    def reset(self) -> None:
        """Back to the untouched state. Safe to call repeatedly."""
        self._state = TypingState()
        self._result = None

    def live_metrics(self) -> TypingMetrics:
        """Current WPM and accuracy. No side effects."""
        state = self._state
        typed = len(state.input)
        end = state.end_time if state.end_time is not None else self._clock()
        return TypingMetrics(
            wpm=calculate_wpm(typed, state.start_time, end),
            accuracy=calculate_accuracy(typed - len(state.error_indices), typed),
        )

    def character_states(self) -> List[CharacterState]:
        """
        Display status of every reference character.

        correct:   typed right and never mistyped
        corrected: typed right now, but mistyped at some point
        incorrect: currently wrong
        pending:   not typed yet
        """
        typed = self._state.input
        mistakes = self._state.error_indices
        states: List[CharacterState] = []
        for index, char in enumerate(self._reference):
            if index >= len(typed):
                status = "pending"
            elif typed[index] != char:
                status = "incorrect"
            elif index in mistakes:
                status = "corrected"
            else:
                status = "correct"
            states.append(CharacterState(char=char, status=status))
        return states

    def review(self) -> List[Tuple[str, bool]]:
        """(char, was_mistake) for the whole reference. Empty until finished."""
        if not self.is_finished:
            return []
        mistakes = self._state.error_indices
        return [(char, index in mistakes) for index, char in enumerate(self._reference)]

    def _finish(self) -> None:
        state = self._state
        typed = len(state.input)
        self._result = TypingResult(
            wpm=calculate_wpm(typed, state.start_time, state.end_time),
            accuracy=calculate_accuracy(typed - len(state.error_indices), typed),
            time_ms=round((state.end_time - state.start_time) * 1000),
        )
        logger.info(
            f"Drill {self._task.id} finished: {self._result.wpm} WPM, "
            f"{self._result.accuracy}% accuracy, {len(state.error_indices)} mistakes"
        )
