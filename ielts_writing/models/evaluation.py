"""
models/evaluation.py

Grader output models.
Wire format is camelCase JSON (aliases); Python attributes are snake_case.
Band scores are validated into 0.0 ~ 9.0 and snapped to 0.5 steps.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ielts_writing.models.task_model import TaskType
from ielts_writing.services.text_metrics import round_band


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CriteriaScores(_CamelModel):
    """
    The four IELTS marking criteria.
    Task 1 is marked on task_achievement, Task 2 on task_response;
    the grader fills whichever applies.
    """
    task_achievement: Optional[float] = Field(None, ge=0, le=9)
    task_response: Optional[float] = Field(None, ge=0, le=9)
    coherence: float = Field(..., ge=0, le=9)
    lexical: float = Field(..., ge=0, le=9)
    grammar: float = Field(..., ge=0, le=9)

    @field_validator('task_achievement', 'task_response', 'coherence', 'lexical', 'grammar')
    @classmethod
    def snap_to_half_band(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else round_band(v)

    @model_validator(mode='after')
    def validate_task_criterion(self) -> 'CriteriaScores':
        if self.task_achievement is None and self.task_response is None:
            raise ValueError("criteria needs taskAchievement (Task 1) or taskResponse (Task 2).")
        return self

    @property
    def task_score(self) -> float:
        """Task achievement or task response, whichever was marked."""
        if self.task_achievement is not None:
            return self.task_achievement
        return self.task_response

    def mean_band(self) -> float:
        scores = [self.task_score, self.coherence, self.lexical, self.grammar]
        return round_band(sum(scores) / len(scores))


class ExaminerFeedback(_CamelModel):
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)


class BandUpgradeSuggestion(_CamelModel):
    """Concrete steps to move from one band to the next."""
    current_band: float = Field(..., ge=0, le=9)
    target_band: float = Field(..., ge=0, le=9)
    suggestions: List[str] = Field(default_factory=list)


class ErrorPattern(_CamelModel):
    """A recurring mistake, with quotes from the essay."""
    type: Literal["grammar", "vocabulary", "coherence", "task"]
    description: str
    examples: List[str] = Field(default_factory=list)
    frequency: Literal["rare", "occasional", "frequent"]
    severity: Literal["minor", "moderate", "severe"]


class VocabSuggestion(_CamelModel):
    original: str
    alternatives: List[str] = Field(default_factory=list)
    context: str = ""
    reason: str = ""


class Evaluation(_CamelModel):
    """
    Complete scored feedback for one essay.

    overall_band: mean of the four criteria rounded to 0.5. Computed
                  locally when the grader leaves it out. May be capped
                  at 6.5 by the word-count penalty.
    word_count / task_type: echoed from the local request, never trusted
                  from the grader.
    band_upgrades / error_patterns / vocabulary_improvements: optional
                  enrichment, present only if the grader produced them.
    """
    criteria: CriteriaScores
    overall_band: Optional[float] = Field(None, ge=0, le=9)
    feedback: ExaminerFeedback = Field(default_factory=ExaminerFeedback)
    model_answer: str = ""
    word_count: int = Field(0, ge=0)
    task_type: Optional[TaskType] = None
    word_count_penalty: bool = False
    band_upgrades: Optional[List[BandUpgradeSuggestion]] = None
    error_patterns: Optional[List[ErrorPattern]] = None
    vocabulary_improvements: Optional[List[VocabSuggestion]] = None

    @field_validator('overall_band')
    @classmethod
    def snap_overall(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else round_band(v)

    @model_validator(mode='after')
    def fill_overall_band(self) -> 'Evaluation':
        if self.overall_band is None:
            self.overall_band = self.criteria.mean_band()
        return self

    def to_payload(self) -> dict:
        """camelCase JSON-ready dict, optional enrichment omitted when absent."""
        return self.model_dump(by_alias=True, exclude_none=True)


class GradeRequest(_CamelModel):
    """Grader request body: {prompt, taskType, dataOutline?, essay}."""
    prompt: str
    task_type: TaskType
    data_outline: Optional[str] = None
    essay: str
