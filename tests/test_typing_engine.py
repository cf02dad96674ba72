"""Tests for ielts_writing.services.typing_engine – copywork drill state machine."""

from __future__ import annotations

from ielts_writing.models.task_model import TrainingTask
from ielts_writing.services.typing_engine import TypingSession


def _type_sequence(session: TypingSession, text: str) -> None:
    """Type text one character at a time."""
    for i in range(1, len(text) + 1):
        session.apply_input(text[:i])


# ---------------------------------------------------------------------------
# initial state
# ---------------------------------------------------------------------------

class TestInitialState:
    def test_empty(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        assert s.state.input == ""
        assert s.state.error_indices == set()
        assert s.state.start_time is None
        assert s.state.end_time is None
        assert not s.is_finished
        assert s.result is None

    def test_live_metrics_before_typing(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        m = s.live_metrics()
        assert m.wpm == 0
        assert m.accuracy == 100

    def test_all_pending(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        assert {c.status for c in s.character_states()} == {"pending"}


# ---------------------------------------------------------------------------
# apply_input
# ---------------------------------------------------------------------------

class TestApplyInput:
    def test_first_keystroke_latches_start(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        assert s.apply_input("a")
        assert s.state.start_time == clock.now

    def test_start_time_not_moved_by_later_input(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("a")
        first = s.state.start_time
        clock.advance(5)
        s.apply_input("ab")
        assert s.state.start_time == first

    def test_empty_input_does_not_start(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("")
        assert s.state.start_time is None

    def test_too_long_rejected(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("ab")
        assert s.apply_input("abcdef") is False
        assert s.state.input == "ab"

    def test_mismatch_recorded(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("a")
        s.apply_input("aX")
        assert s.state.error_indices == {1}

    def test_correction_keeps_mistake(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("aX")
        s.apply_input("a")
        s.apply_input("ab")
        assert s.state.error_indices == {1}
        assert s.character_states()[1].status == "corrected"

    def test_backspace_not_checked(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("abc")
        s.apply_input("ab")
        assert s.state.error_indices == set()

    def test_cursor_selects_checked_position(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("ac")          # index 1 wrong
        s.apply_input("aXc", cursor=2)  # inserted at index 1, also wrong
        assert s.state.error_indices == {1}
        s.apply_input("aXcd", cursor=4)
        assert s.state.error_indices == {1}

    def test_only_new_character_is_checked(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        # pasted block: only the last character is compared
        s.apply_input("XXc")
        assert s.state.error_indices == set()

    def test_error_ledger_never_shrinks(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        sizes = []
        for text in ["x", "", "a", "ay", "a", "ab", "abz", "abc", "abcq"]:
            s.apply_input(text)
            sizes.append(len(s.state.error_indices))
        assert sizes == sorted(sizes)


# ---------------------------------------------------------------------------
# completion
# ---------------------------------------------------------------------------

class TestCompletion:
    def test_finishes_at_full_length(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("a")
        clock.advance(6)
        s.apply_input("abcde")
        assert s.is_finished
        assert s.state.end_time >= s.state.start_time

    def test_finishes_with_wrong_trailing_chars(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("abcdX")
        assert s.is_finished
        assert 4 in s.state.error_indices

    def test_input_after_finish_rejected(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        _type_sequence(s, "abcde")
        assert s.apply_input("abcd") is False
        assert s.state.input == "abcde"

    def test_result_set_once(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("a")
        clock.advance(3)
        s.apply_input("abcde")
        result = s.result
        s.apply_input("abcd")
        assert s.result is result

    def test_result_values(self, clock):
        task = TrainingTask(
            id="t", title="t", category="Full Essay", difficulty="Easy",
            source_text="x" * 50,
        )
        s = TypingSession(task, clock=clock)
        s.apply_input("x")
        clock.advance(60)
        s.apply_input("x" * 49 + "y")
        # 50 chars in 1 minute = 10 WPM; one mistake of 50 = 98%
        assert s.result.wpm == 10
        assert s.result.accuracy == 98
        assert s.result.time_ms == 60000

    def test_review_marks_mistakes(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("aX")
        s.apply_input("a")
        _type_sequence(s, "abcde")
        assert s.review() == [
            ("a", False), ("b", True), ("c", False), ("d", False), ("e", False),
        ]

    def test_review_empty_until_finished(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("ab")
        assert s.review() == []


# ---------------------------------------------------------------------------
# metrics
# ---------------------------------------------------------------------------

class TestLiveMetrics:
    def test_accuracy_uses_history(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("aX")
        s.apply_input("a")
        s.apply_input("ab")
        s.apply_input("abc")
        s.apply_input("abcd")
        # everything on screen is right, but one mistake was made: 3/4
        assert s.live_metrics().accuracy == 75

    def test_wpm_uses_clock(self, clock):
        task = TrainingTask(
            id="t", title="t", category="Full Essay", difficulty="Easy",
            source_text="y" * 100,
        )
        s = TypingSession(task, clock=clock)
        s.apply_input("y")
        clock.advance(30)
        s.apply_input("y" * 50)
        # 50 chars / 5 = 10 words in half a minute
        assert s.live_metrics().wpm == 20

    def test_metrics_are_pure(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("ab")
        before = s.state.model_copy(deep=True)
        s.live_metrics()
        assert s.state == before

    def test_progress(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("ab")
        assert s.progress == 0.4


# ---------------------------------------------------------------------------
# character states / reset
# ---------------------------------------------------------------------------

class TestCharacterStates:
    def test_statuses(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.apply_input("aX")
        s.apply_input("a")
        s.apply_input("ab")
        s.apply_input("abZ")
        statuses = [c.status for c in s.character_states()]
        assert statuses == ["correct", "corrected", "incorrect", "pending", "pending"]


class TestReset:
    def test_clears_everything(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        _type_sequence(s, "aXcde")
        s.reset()
        assert s.state.input == ""
        assert s.state.error_indices == set()
        assert s.state.start_time is None
        assert s.state.end_time is None
        assert s.result is None

    def test_idempotent(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        s.reset()
        s.reset()
        assert s.state.input == ""

    def test_can_type_again_after_reset(self, drill, clock):
        s = TypingSession(drill, clock=clock)
        _type_sequence(s, "abcde")
        s.reset()
        assert s.apply_input("a")
        assert not s.is_finished
