"""
main.py — IELTS writing practice launcher

Serves the API with uvicorn on a local port and points a browser at it.

Environment:
  PORT          fixed port (default: any free port)
  OPEN_BROWSER  "0" to run headless
  GROQ_API_KEY  grader credential; without it only essays under
                20 words get a (fixed, zero-band) result
"""

import logging
import os
import shutil
import socket
import subprocess
import sys
import threading
import time
import webbrowser

_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import (
    API_KEY_ENV, BASE_DIR, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT,
    GRADER_BASE_URL, LOG_FILE, MODEL_NAME, OPEN_BROWSER,
)

logger = logging.getLogger(__name__)

# Chromium-family browsers that support a chrome-less --app window
_APP_MODE_BROWSERS = ("google-chrome", "chrome", "chromium", "chromium-browser", "msedge")


def configure_logging() -> None:
    fmt = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    try:
        handlers = [
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
            logging.StreamHandler(sys.stdout),
        ]
    except OSError:
        # read-only install directory: console only
        handlers = [logging.StreamHandler(sys.stdout)]
    logging.basicConfig(level=logging.INFO, format=fmt, handlers=handlers)


# ── Server ───────────────────────────────────────────────────────────────────

def _pick_port() -> int:
    if DEFAULT_PORT:
        return DEFAULT_PORT
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((DEFAULT_HOST, 0))
        return s.getsockname()[1]


def _wait_until_listening(port: int, timeout: float = DEFAULT_TIMEOUT) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False


def _serve(port: int) -> None:
    import uvicorn
    from api.app import create_app

    logger.info(f"Serving on http://{DEFAULT_HOST}:{port}")
    try:
        uvicorn.run(create_app(), host=DEFAULT_HOST, port=port, log_level="warning")
    except Exception:
        logger.exception("Server stopped with an error")


def _open_window(url: str) -> None:
    for name in _APP_MODE_BROWSERS:
        path = shutil.which(name)
        if path:
            logger.info(f"Opening {url} in {name}")
            subprocess.Popen([path, f"--app={url}", "--no-first-run", "--window-size=1280,800"])
            return
    webbrowser.open(url)


def _log_grader_setup() -> None:
    if os.getenv(API_KEY_ENV):
        logger.info(f"Grader: {MODEL_NAME} via {GRADER_BASE_URL}")
    else:
        logger.warning(f"{API_KEY_ENV} is not set; essays will not be graded until it is.")


# ── Entry point ──────────────────────────────────────────────────────────────

def main() -> int:
    configure_logging()
    os.chdir(BASE_DIR)
    _log_grader_setup()

    port = _pick_port()
    threading.Thread(target=_serve, args=(port,), name="uvicorn", daemon=True).start()

    if not _wait_until_listening(port):
        logger.error(f"Server did not come up on port {port} within {DEFAULT_TIMEOUT:.0f}s.")
        return 1

    url = f"http://{DEFAULT_HOST}:{port}"
    if OPEN_BROWSER:
        _open_window(url)
    else:
        logger.info(f"Ready at {url}")

    try:
        while True:
            time.sleep(10)
    except KeyboardInterrupt:
        logger.info("Stopped by user.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
