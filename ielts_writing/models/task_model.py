from typing import Literal, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from config import IDEAL_WORD_RANGE, MIN_WORDS, TASK_TIME_ALLOWANCE

TaskType = Literal["Task 1", "Task 2"]


class TrainingTask(BaseModel):
    """
    Typing drill model.
    source_text is the reference text the drill measures input against.
    """
    id: str = Field(
        ...,
        min_length=1,
        description="Drill identifier (e.g. t1)"
    )
    title: str = Field(
        ...,
        description="Short drill title"
    )
    category: Literal["Sentence Structure", "Paragraph Cohesion", "Full Essay"] = Field(
        ...,
        description="Drill focus area"
    )
    difficulty: Literal["Easy", "Medium", "Hard"] = Field(
        ...,
        description="Difficulty label"
    )
    source_text: str = Field(
        ...,
        min_length=1,
        description="Reference text, fixed for the duration of one drill"
    )


class WritingTask(BaseModel):
    """
    Timed exam prompt model (IELTS Writing Task 1 or Task 2).
    Time allowance and word-count targets derive from the task type.
    """
    id: str = Field(
        ...,
        min_length=1,
        description="Task identifier (e.g. w1)"
    )
    type: TaskType = Field(
        ...,
        description="Task kind"
    )
    category: str = Field(
        ...,
        description="Bar Chart, Map, Process, Opinion, Discussion, ..."
    )
    prompt: str = Field(
        ...,
        min_length=1,
        description="Exam question shown to the candidate"
    )
    image_url: Optional[str] = Field(
        None,
        description="Chart or diagram for Task 1 prompts"
    )
    data_outline: Optional[str] = Field(
        None,
        description="Ground-truth description of the chart data, passed to the grader (Task 1 only)"
    )
    model_answer: Optional[str] = Field(
        None,
        description="Band 9 reference answer"
    )

    @model_validator(mode='after')
    def validate_outline_task_kind(self) -> 'WritingTask':
        """Only Task 1 prompts describe data, so only they may carry an outline."""
        if self.data_outline and self.type != "Task 1":
            raise ValueError(f"data_outline is only valid for Task 1 prompts (got {self.type}).")
        return self

    @property
    def time_allowance_seconds(self) -> int:
        return TASK_TIME_ALLOWANCE[self.type]

    @property
    def min_words(self) -> int:
        return MIN_WORDS[self.type]

    @property
    def ideal_word_range(self) -> Tuple[int, int]:
        return IDEAL_WORD_RANGE[self.type]
