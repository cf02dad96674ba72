"""
models/session_state.py

State models for the two practice modes and the visitor's display settings.
Pydantic BaseModel based, no UI code and no behaviour beyond validation.
Transitions live in services/typing_engine.py and services/exam_session.py.
"""

from enum import Enum
from typing import Literal, Optional, Set

from pydantic import BaseModel, Field

from ielts_writing.models.evaluation import Evaluation
from ielts_writing.models.task_model import WritingTask


class ExamStage(str, Enum):
    SELECTING = "selecting"
    WRITING = "writing"
    SUBMITTING = "submitting"
    RESULT = "result"


class TypingState(BaseModel):
    """
    Progress through one typing drill.

    Attributes:
        input:         Text typed so far. Never longer than the reference text.
        error_indices: Reference positions where a wrong character was ever
                       typed. Corrections do not remove an index.
        start_time:    Unix timestamp of the first keystroke, None until then.
        end_time:      Unix timestamp at which input reached full length.
                       Once set the drill is finished and input is frozen.
    """

    input: str = Field(
        default="",
        description="Text typed so far"
    )
    error_indices: Set[int] = Field(
        default_factory=set,
        description="Historical mistake ledger (reference positions)"
    )
    start_time: Optional[float] = Field(
        default=None,
        description="First keystroke time (Unix timestamp)"
    )
    end_time: Optional[float] = Field(
        default=None,
        description="Completion time (Unix timestamp)"
    )

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None


class ExamSessionState(BaseModel):
    """
    State of one simulated exam.

    Attributes:
        stage:             Selecting → Writing → Submitting → Result.
        selected_task:     Set on entering Writing, cleared on return to Selecting.
        content:           Essay text. Survives failed submissions.
        seconds_remaining: Countdown, decremented once per second while Writing, floor 0.
        evaluation:        Set on a successful submission only.
        last_error:        Message of the last failed submission, cleared on the next attempt.
        elapsed_seconds:   Time taken, frozen at the moment Result is entered.
    """

    stage: ExamStage = Field(
        default=ExamStage.SELECTING,
        description="Current stage"
    )
    selected_task: Optional[WritingTask] = Field(
        default=None,
        description="Task being written"
    )
    content: str = Field(
        default="",
        description="Essay text"
    )
    seconds_remaining: int = Field(
        default=0,
        ge=0,
        description="Seconds left on the countdown"
    )
    evaluation: Optional[Evaluation] = Field(
        default=None,
        description="Grader result"
    )
    last_error: str = Field(
        default="",
        description="Human-readable submission error"
    )
    elapsed_seconds: Optional[int] = Field(
        default=None,
        ge=0,
        description="Seconds used, captured on entering Result"
    )


class ThemeSettings(BaseModel):
    """Per-visitor display theme. Starts light; not persisted."""

    theme: Literal["light", "dark"] = "light"

    def toggled(self) -> "ThemeSettings":
        return ThemeSettings(theme="dark" if self.theme == "light" else "light")
