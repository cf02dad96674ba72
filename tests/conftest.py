"""Shared fixtures: deterministic clock, manual scheduler, sample tasks and evaluations."""

from __future__ import annotations

from typing import Callable, List

import pytest

from ielts_writing.models.evaluation import CriteriaScores, Evaluation, ExaminerFeedback
from ielts_writing.models.task_model import TrainingTask, WritingTask


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeHandle:
    def __init__(self, scheduler: "FakeScheduler", callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records intervals; fire() runs every live callback once."""

    def __init__(self) -> None:
        self.handles: List[FakeHandle] = []

    def call_every(self, interval: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> List[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for handle in self.active:
                handle.callback()


def words(n: int) -> str:
    return " ".join(f"word{i}" for i in range(n))


def make_evaluation(band: float = 7.5, task_type: str = "Task 2") -> Evaluation:
    return Evaluation(
        criteria=CriteriaScores(task_response=band, coherence=band, lexical=band, grammar=band),
        overall_band=band,
        feedback=ExaminerFeedback(strengths=["Clear position"], improvements=[], tips=[]),
        model_answer="A model answer.",
        task_type=task_type,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture()
def drill() -> TrainingTask:
    return TrainingTask(
        id="tx",
        title="Short drill",
        category="Sentence Structure",
        difficulty="Easy",
        source_text="abcde",
    )


@pytest.fixture()
def task1() -> WritingTask:
    return WritingTask(
        id="wx1",
        type="Task 1",
        category="Bar Chart",
        prompt="The chart shows spending.",
        data_outline="Cars highest.",
    )


@pytest.fixture()
def task2() -> WritingTask:
    return WritingTask(
        id="wx2",
        type="Task 2",
        category="Opinion",
        prompt="Do you agree or disagree?",
    )
