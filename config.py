import os

# Base directory
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Paths
STATIC_DIR = os.path.join(BASE_DIR, "static")
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

# Server
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "0"))     # 0 = pick a free port
DEFAULT_TIMEOUT = 15.0
OPEN_BROWSER = os.getenv("OPEN_BROWSER", "1") != "0"

# Grader (OpenAI-compatible chat completions endpoint)
API_KEY_ENV = "GROQ_API_KEY"
GRADER_BASE_URL = os.getenv("GRADER_BASE_URL", "https://api.groq.com/openai/v1")
MODEL_NAME = os.getenv("GRADER_MODEL", "llama-3.3-70b-versatile")
GRADER_TEMPERATURE = 0.4

# Exam rules, keyed by task type
TASK_TIME_ALLOWANCE = {"Task 1": 1200, "Task 2": 2400}
MIN_WORDS = {"Task 1": 150, "Task 2": 250}
IDEAL_WORD_RANGE = {"Task 1": (160, 190), "Task 2": (260, 290)}
MAX_RECOMMENDED_WORDS = {"Task 1": 220, "Task 2": 320}
PENALTY_BAND_CAP = 6.5
MIN_EVALUABLE_WORDS = 20        # below this the grader is never called
LOW_TIME_WARNING_SECONDS = 120

# Typing drills
CHARS_PER_WORD = 5

# Visitor sessions
SESSION_TTL = 3600       # 1 hour
CLEANUP_INTERVAL = 300   # 5 minutes
