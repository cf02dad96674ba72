"""
api/session.py — per-visitor in-memory sessions (cookie based)

Each visitor gets a UUID session ID with its own typing drill, exam
simulator and theme. Sessions expire after SESSION_TTL seconds of
inactivity; an expired or reset session has its exam simulator closed so
no timer or late grader result touches it again.
"""

import asyncio
import threading
import time
import uuid
from typing import Any, Optional

from config import SESSION_TTL
from ielts_writing.models.session_state import ThemeSettings

_lock = threading.Lock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}

# Event loop that owns the exam simulators (their countdowns run on it)
_loop: Optional[asyncio.AbstractEventLoop] = None


def _new_state() -> dict[str, Any]:
    return {
        "theme": ThemeSettings(),
        "typing_session": None,
        "exam_session": None,
    }


def bind_loop(loop: asyncio.AbstractEventLoop) -> None:
    """Remember the serving loop so other threads can close sessions on it."""
    global _loop
    _loop = loop


def _running_on(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


def _dispose(state: dict[str, Any]) -> None:
    exam = state.get("exam_session")
    if exam is None:
        return
    loop = _loop
    if loop is not None and loop.is_running() and not _running_on(loop):
        # ExamSession is not thread-safe; close it where its timer lives
        loop.call_soon_threadsafe(exam.close)
    else:
        exam.close()


def create_session() -> str:
    """Create a session and return its ID."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> dict[str, Any] | None:
    """Session data for sid, or None if unknown or expired."""
    expired = None
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            expired = _sessions.pop(sid)
            del _timestamps[sid]
        else:
            _timestamps[sid] = time.time()  # refresh on access
            return _sessions[sid]
    _dispose(expired)
    return None


def get(sid: str, key: str, default=None):
    """Read a value from a session."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """Write a value into a session."""
    with _lock:
        if sid in _sessions:
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()


def reset(sid: str) -> None:
    """Start the session over. The theme is kept."""
    old = None
    with _lock:
        if sid in _sessions:
            old = _sessions[sid]
            _sessions[sid] = _new_state()
            _sessions[sid]["theme"] = old["theme"]
            _timestamps[sid] = time.time()
    if old is not None:
        _dispose(old)


def cleanup_expired() -> int:
    """Drop expired sessions. Returns how many were removed."""
    now = time.time()
    removed = []
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        for sid in expired:
            removed.append(_sessions.pop(sid))
            del _timestamps[sid]
    for state in removed:
        _dispose(state)
    return len(removed)
