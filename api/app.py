"""
api/app.py — FastAPI application factory

create_app() wires together:
  - the visitor session cookie (one typing drill, one exam simulator and
    one theme per visitor)
  - the JSON routes in api/routes.py
  - an optional static frontend under STATIC_DIR
  - a background janitor that closes expired sessions
"""

import asyncio
import logging
import os
import threading

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from config import API_KEY_ENV, CLEANUP_INTERVAL, SESSION_TTL, STATIC_DIR
from api.routes import router
import api.session as session

SESSION_COOKIE = "ielts_session"

logger = logging.getLogger(__name__)


def _attach_visitor(app: FastAPI) -> None:
    """Resolve (or issue) the visitor's session ID before every request."""

    @app.middleware("http")
    async def visitor_session(request: Request, call_next):
        session.bind_loop(asyncio.get_running_loop())
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()
            logger.info(f"New visitor session {sid[:8]}")

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=SESSION_TTL,
        )
        return response


def _serve_frontend(app: FastAPI) -> None:
    if os.path.isdir(STATIC_DIR):
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/")
    async def index():
        index_path = os.path.join(STATIC_DIR, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"error": "index.html not found"}


def _start_janitor(interval: float = CLEANUP_INTERVAL) -> threading.Event:
    """Close expired sessions every `interval` seconds until the returned event is set."""
    stop = threading.Event()

    def sweep():
        while not stop.wait(interval):
            removed = session.cleanup_expired()
            if removed:
                logger.info(f"Closed {removed} expired session(s)")

    threading.Thread(target=sweep, name="session-janitor", daemon=True).start()
    return stop


def create_app() -> FastAPI:
    app = FastAPI(title="IELTS Writing Practice", docs_url=None, redoc_url=None)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _attach_visitor(app)
    app.include_router(router)

    @app.get("/api/health")
    async def health():
        return {"ok": True, "grader_configured": bool(os.getenv(API_KEY_ENV))}

    _serve_frontend(app)

    # set() this to stop the sweeper
    app.state.janitor_stop = _start_janitor()

    return app
