"""
services/exam_session.py

Timed essay simulator.

Stages:
  Selecting ──select_task──▶ Writing ──submit──▶ Submitting ──ok──▶ Result
      ▲                        │  ▲                  │                │
      └─────────back───────────┘  └──grader failure──┘                │
                                  ▲                                   │
                                  └────────────────back───────────────┘

- the countdown ticks once per second only while Writing; the interval is
  started on entering Writing and cancelled on leaving it
- the countdown stops at 0 but never forces a submission
- submit() issues exactly one grader call; a second submit while the first
  is pending is a no-op because the stage is no longer Writing
- essay content is never cleared by a failure
- after close(), a late grader result is discarded
"""

import asyncio
import logging
from typing import Callable, Optional

from config import LOW_TIME_WARNING_SECONDS
from ielts_writing.models.evaluation import Evaluation, GradeRequest
from ielts_writing.models.session_state import ExamSessionState, ExamStage
from ielts_writing.models.task_model import WritingTask
from ielts_writing.services.grader import evaluate_essay
from ielts_writing.services.scheduler import AsyncioScheduler, IntervalHandle, Scheduler
from ielts_writing.services.text_metrics import count_words, format_duration, word_count_status

logger = logging.getLogger(__name__)

GradeFn = Callable[[GradeRequest], Evaluation]

TICK_SECONDS = 1.0


class ExamSession:
    """
    One visitor's exam simulator.

    grade is called in a worker thread (asyncio.to_thread) so a slow grader
    does not block the event loop.
    """

    def __init__(
        self,
        grade: GradeFn = evaluate_essay,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._state = ExamSessionState()
        self._grade = grade
        self._scheduler = scheduler or AsyncioScheduler()
        self._ticker: Optional[IntervalHandle] = None
        self._generation = 0
        self._closed = False

    # ── read-only views ─────────────────────────────────────────────────────

    @property
    def state(self) -> ExamSessionState:
        return self._state

    @property
    def stage(self) -> ExamStage:
        return self._state.stage

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def word_count(self) -> int:
        return count_words(self._state.content)

    @property
    def word_count_status(self) -> Optional[str]:
        task = self._state.selected_task
        if task is None:
            return None
        return word_count_status(self.word_count, task.type)

    @property
    def is_low_time(self) -> bool:
        return self._state.stage == ExamStage.WRITING and self._state.seconds_remaining < LOW_TIME_WARNING_SECONDS

    @property
    def time_taken(self) -> Optional[str]:
        """Elapsed time as m:ss, frozen when the result arrived."""
        if self._state.elapsed_seconds is None:
            return None
        return format_duration(self._state.elapsed_seconds)

    # ── transitions ─────────────────────────────────────────────────────────

    def select_task(self, task: WritingTask) -> bool:
        """Selecting → Writing with a fresh essay and a full countdown."""
        if self._closed or self._state.stage != ExamStage.SELECTING:
            return False
        state = self._state
        state.selected_task = task
        state.content = ""
        state.last_error = ""
        state.evaluation = None
        state.elapsed_seconds = None
        state.seconds_remaining = task.time_allowance_seconds
        logger.info(f"Exam started: {task.id} ({task.type}, {task.time_allowance_seconds}s)")
        self._enter(ExamStage.WRITING)
        return True

    def update_content(self, content: str) -> bool:
        """Replace the essay text. Only accepted while Writing."""
        if self._state.stage != ExamStage.WRITING:
            return False
        self._state.content = content
        return True

    def tick(self) -> None:
        """One second of the countdown. Ignored outside Writing; floors at 0."""
        if self._state.stage != ExamStage.WRITING:
            return
        if self._state.seconds_remaining > 0:
            self._state.seconds_remaining -= 1

    async def submit(self) -> bool:
        """
        Send the essay to the grader.

        Returns:
            True if a grading request was made (whatever its outcome),
            False if the call was a no-op (wrong stage or blank essay).
        """
        state = self._state
        if self._closed or state.stage != ExamStage.WRITING or not state.content.strip():
            return False

        task = state.selected_task
        request = GradeRequest(
            prompt=task.prompt,
            task_type=task.type,
            data_outline=task.data_outline,
            essay=state.content,
        )
        state.last_error = ""
        self._enter(ExamStage.SUBMITTING)
        generation = self._generation

        try:
            evaluation = await asyncio.to_thread(self._grade, request)
        except Exception as e:
            if self._is_stale(generation):
                logger.info("Discarding grader failure for a closed exam session")
                return True
            logger.error(f"Grading failed for {task.id}: {type(e).__name__}: {e}")
            state.last_error = f"Error: {e}"
            self._enter(ExamStage.WRITING)
            return True

        if self._is_stale(generation):
            logger.info("Discarding evaluation for a closed exam session")
            return True

        state.evaluation = evaluation
        state.elapsed_seconds = task.time_allowance_seconds - state.seconds_remaining
        self._enter(ExamStage.RESULT)
        logger.info(f"Exam {task.id} graded: band {evaluation.overall_band} in {self.time_taken}")
        return True

    def back(self) -> bool:
        """
        Result → Writing (essay kept, evaluation cleared) or
        Writing → Selecting (task, essay and countdown cleared).
        """
        state = self._state
        if state.stage == ExamStage.RESULT:
            state.evaluation = None
            state.elapsed_seconds = None
            self._enter(ExamStage.WRITING)
            return True
        if state.stage == ExamStage.WRITING:
            state.selected_task = None
            state.content = ""
            state.seconds_remaining = 0
            state.last_error = ""
            self._generation += 1
            self._enter(ExamStage.SELECTING)
            return True
        return False

    def close(self) -> None:
        """Tear down: stop the countdown and ignore any grading still in flight."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._stop_ticker()

    # ── internals ───────────────────────────────────────────────────────────

    def _enter(self, stage: ExamStage) -> None:
        self._state.stage = stage
        if stage == ExamStage.WRITING:
            self._start_ticker()
        else:
            self._stop_ticker()

    def _start_ticker(self) -> None:
        self._stop_ticker()
        self._ticker = self._scheduler.call_every(TICK_SECONDS, self.tick)

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation
