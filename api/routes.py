"""
api/routes.py — FastAPI endpoints
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

import api.session as session
from ielts_writing.models.evaluation import GradeRequest
from ielts_writing.models.task_model import TrainingTask, WritingTask
from ielts_writing.services.exam_session import ExamSession, GradeFn
from ielts_writing.services.grader import GraderError, evaluate_essay
from ielts_writing.services.task_catalog import (
    TRAINING_TASKS, WRITING_TASKS, get_training_task, get_writing_task,
)
from ielts_writing.services.typing_engine import TypingSession

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class TaskIdBody(BaseModel):
    task_id: str

class TypingInputBody(BaseModel):
    text: str
    cursor: Optional[int] = None

class ContentBody(BaseModel):
    content: str


# ── Dependencies ─────────────────────────────────────────────────────────────

def current_session_id(request: Request) -> str:
    return request.state.session_id


def get_grader() -> GradeFn:
    """Grade function used by /api/evaluate and new exam sessions."""
    return evaluate_essay


# ── Helpers ──────────────────────────────────────────────────────────────────

def _training_task_to_dict(t: TrainingTask) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "category": t.category,
        "difficulty": t.difficulty,
        "source_text": t.source_text,
    }


def _writing_task_to_dict(t: WritingTask) -> dict:
    return {
        "id": t.id,
        "type": t.type,
        "category": t.category,
        "prompt": t.prompt,
        "image_url": t.image_url,
        "model_answer": t.model_answer,
        "time_allowance_seconds": t.time_allowance_seconds,
        "min_words": t.min_words,
        "ideal_word_range": list(t.ideal_word_range),
    }


def _typing_to_dict(ts: TypingSession) -> dict:
    metrics = ts.live_metrics()
    d = {
        "task_id": ts.task.id,
        "input": ts.state.input,
        "progress": ts.progress,
        "wpm": metrics.wpm,
        "accuracy": metrics.accuracy,
        "mistakes": len(ts.state.error_indices),
        "is_finished": ts.is_finished,
        "characters": [
            {"char": c.char, "status": c.status} for c in ts.character_states()
        ],
        "result": None,
        "review": [],
    }
    if ts.result is not None:
        d["result"] = {
            "wpm": ts.result.wpm,
            "accuracy": ts.result.accuracy,
            "time_ms": ts.result.time_ms,
        }
        d["review"] = [
            {"char": c, "was_mistake": was_mistake} for c, was_mistake in ts.review()
        ]
    return d


def _exam_to_dict(exam: ExamSession) -> dict:
    state = exam.state
    task = state.selected_task
    return {
        "stage": state.stage.value,
        "task": _writing_task_to_dict(task) if task else None,
        "content": state.content,
        "word_count": exam.word_count,
        "word_count_status": exam.word_count_status,
        "seconds_remaining": state.seconds_remaining,
        "is_low_time": exam.is_low_time,
        "last_error": state.last_error,
        "evaluation": state.evaluation.to_payload() if state.evaluation else None,
        "time_taken": exam.time_taken,
    }


def _require_typing(sid: str) -> TypingSession:
    ts: Optional[TypingSession] = session.get(sid, "typing_session")
    if ts is None:
        raise HTTPException(status_code=404, detail="No typing drill in progress.")
    return ts


def _exam_for(sid: str, grade: GradeFn) -> ExamSession:
    exam: Optional[ExamSession] = session.get(sid, "exam_session")
    if exam is None:
        exam = ExamSession(grade=grade)
        session.put(sid, "exam_session", exam)
    return exam


# ── Typing drills ────────────────────────────────────────────────────────────

@router.get("/api/training-tasks")
async def list_training_tasks():
    return [_training_task_to_dict(t) for t in TRAINING_TASKS]


@router.post("/api/training/start")
async def start_training(body: TaskIdBody, sid: str = Depends(current_session_id)):
    task = get_training_task(body.task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Training task not found.")
    ts = TypingSession(task)
    session.put(sid, "typing_session", ts)
    return _typing_to_dict(ts)


@router.post("/api/training/input")
async def training_input(body: TypingInputBody, sid: str = Depends(current_session_id)):
    ts = _require_typing(sid)
    accepted = ts.apply_input(body.text, body.cursor)
    d = _typing_to_dict(ts)
    d["accepted"] = accepted
    return d


@router.post("/api/training/reset")
async def training_reset(sid: str = Depends(current_session_id)):
    ts = _require_typing(sid)
    ts.reset()
    return _typing_to_dict(ts)


@router.get("/api/training/state")
async def training_state(sid: str = Depends(current_session_id)):
    return _typing_to_dict(_require_typing(sid))


# ── Exam simulator ───────────────────────────────────────────────────────────

@router.get("/api/writing-tasks")
async def list_writing_tasks():
    return [_writing_task_to_dict(t) for t in WRITING_TASKS]


@router.post("/api/exam/select")
async def exam_select(
    body: TaskIdBody,
    sid: str = Depends(current_session_id),
    grade: GradeFn = Depends(get_grader),
):
    task = get_writing_task(body.task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Writing task not found.")
    exam = _exam_for(sid, grade)
    if not exam.select_task(task):
        raise HTTPException(status_code=400, detail="A task is already in progress.")
    return _exam_to_dict(exam)


@router.put("/api/exam/content")
async def exam_content(
    body: ContentBody,
    sid: str = Depends(current_session_id),
    grade: GradeFn = Depends(get_grader),
):
    exam = _exam_for(sid, grade)
    accepted = exam.update_content(body.content)
    d = _exam_to_dict(exam)
    d["accepted"] = accepted
    return d


@router.post("/api/exam/submit")
async def exam_submit(
    sid: str = Depends(current_session_id),
    grade: GradeFn = Depends(get_grader),
):
    exam = _exam_for(sid, grade)
    submitted = await exam.submit()
    d = _exam_to_dict(exam)
    d["submitted"] = submitted
    return d


@router.post("/api/exam/back")
async def exam_back(
    sid: str = Depends(current_session_id),
    grade: GradeFn = Depends(get_grader),
):
    exam = _exam_for(sid, grade)
    exam.back()
    return _exam_to_dict(exam)


@router.get("/api/exam/state")
async def exam_state(
    sid: str = Depends(current_session_id),
    grade: GradeFn = Depends(get_grader),
):
    return _exam_to_dict(_exam_for(sid, grade))


# ── Grader ───────────────────────────────────────────────────────────────────

@router.post("/api/evaluate")
async def evaluate(body: GradeRequest, grade: GradeFn = Depends(get_grader)):
    try:
        evaluation = await asyncio.to_thread(grade, body)
    except GraderError as e:
        logger.error(f"Evaluation error: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})
    return evaluation.to_payload()


# ── Theme / session ──────────────────────────────────────────────────────────

@router.get("/api/theme")
async def get_theme(sid: str = Depends(current_session_id)):
    return {"theme": session.get(sid, "theme").theme}


@router.post("/api/theme/toggle")
async def toggle_theme(sid: str = Depends(current_session_id)):
    theme = session.get(sid, "theme").toggled()
    session.put(sid, "theme", theme)
    return {"theme": theme.theme}


@router.post("/api/reset")
async def reset_session(sid: str = Depends(current_session_id)):
    session.reset(sid)
    return {"ok": True}
