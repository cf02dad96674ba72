"""Tests for api.session – TTL expiry, reset and disposal of exam simulators."""

from __future__ import annotations

import asyncio
import threading
from types import SimpleNamespace

import pytest

import api.session as session
from config import SESSION_TTL
from ielts_writing.services.exam_session import ExamSession


@pytest.fixture()
def fake_time(monkeypatch):
    now = {"t": 10_000.0}
    monkeypatch.setattr(session, "time", SimpleNamespace(time=lambda: now["t"]))
    return now


@pytest.fixture(autouse=True)
def unbound_loop(monkeypatch):
    monkeypatch.setattr(session, "_loop", None)


@pytest.fixture()
def serving_loop():
    """An event loop running in its own thread, bound as the serving loop."""
    loop = asyncio.new_event_loop()
    started = threading.Event()
    loop.call_soon(started.set)
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    assert started.wait(1)
    session.bind_loop(loop)
    yield loop, thread
    loop.call_soon_threadsafe(loop.stop)
    thread.join(1)
    loop.close()


class RecordingExam(ExamSession):
    def __init__(self, scheduler) -> None:
        super().__init__(grade=lambda request: None, scheduler=scheduler)
        self.closed_on = None
        self.closed_event = threading.Event()

    def close(self) -> None:
        self.closed_on = threading.current_thread()
        super().close()
        self.closed_event.set()


def _exam(scheduler) -> ExamSession:
    return ExamSession(grade=lambda request: None, scheduler=scheduler)


class TestSessionStore:
    def test_create_and_get(self):
        sid = session.create_session()
        data = session.get_session(sid)
        assert data["theme"].theme == "light"
        assert data["typing_session"] is None
        assert data["exam_session"] is None

    def test_unknown_session(self):
        assert session.get_session("missing") is None
        assert session.get("missing", "theme", "fallback") == "fallback"

    def test_put_and_get(self):
        sid = session.create_session()
        session.put(sid, "typing_session", "drill")
        assert session.get(sid, "typing_session") == "drill"

    def test_expired_session_disposed(self, fake_time, scheduler, task1):
        sid = session.create_session()
        exam = _exam(scheduler)
        exam.select_task(task1)
        session.put(sid, "exam_session", exam)

        fake_time["t"] += SESSION_TTL + 1
        assert session.get_session(sid) is None
        assert exam.is_closed
        assert scheduler.active == []

    def test_access_refreshes_ttl(self, fake_time):
        sid = session.create_session()
        fake_time["t"] += SESSION_TTL - 1
        assert session.get_session(sid) is not None
        fake_time["t"] += SESSION_TTL - 1
        assert session.get_session(sid) is not None

    def test_reset_keeps_theme(self, scheduler):
        sid = session.create_session()
        session.put(sid, "theme", session.get(sid, "theme").toggled())
        exam = _exam(scheduler)
        session.put(sid, "exam_session", exam)

        session.reset(sid)
        assert session.get(sid, "theme").theme == "dark"
        assert session.get(sid, "exam_session") is None
        assert exam.is_closed

    def test_cleanup_expired(self, fake_time, scheduler):
        old = session.create_session()
        exam = _exam(scheduler)
        session.put(old, "exam_session", exam)
        fake_time["t"] += SESSION_TTL + 1
        fresh = session.create_session()

        assert session.cleanup_expired() >= 1
        assert exam.is_closed
        assert session.get_session(old) is None
        assert session.get_session(fresh) is not None

    def test_sweeper_closes_exam_on_serving_loop(self, fake_time, scheduler, serving_loop):
        loop, loop_thread = serving_loop
        sid = session.create_session()
        exam = RecordingExam(scheduler)
        session.put(sid, "exam_session", exam)
        fake_time["t"] += SESSION_TTL + 1

        # called from this (non-loop) thread, like the janitor
        assert session.cleanup_expired() >= 1
        assert exam.closed_event.wait(1)
        assert exam.closed_on is loop_thread
        assert exam.is_closed

    def test_unbound_loop_closes_inline(self, fake_time, scheduler):
        sid = session.create_session()
        exam = RecordingExam(scheduler)
        session.put(sid, "exam_session", exam)
        fake_time["t"] += SESSION_TTL + 1

        session.cleanup_expired()
        assert exam.closed_on is threading.current_thread()
