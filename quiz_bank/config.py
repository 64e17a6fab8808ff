import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Directory holding the *Questions.json sets and the generated manifest
PUBLIC_DIR = os.getenv("PUBLIC_DIR", "public")

# Where the question-set server runs. Empty means read PUBLIC_DIR directly.
QUIZ_BASE_URL = os.getenv("QUIZ_BASE_URL", "") or None

# Optional remote paper tried before the local questions file
PAPER_URL = os.getenv("PAPER_URL", "") or None

LOCAL_QUESTIONS_FILE = "questions.json"
MANIFEST_FILENAME = "question-sets.json"
QUESTION_SETS_ENDPOINT = "/api/question-sets"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SERVER_HOST = os.getenv("SERVER_HOST", "127.0.0.1")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    if raw.isdigit() and int(raw) > 0:
        return int(raw)
    logger.warning("%s is not a positive number: %r, using %d", name, raw, default)
    return default


SERVER_PORT = _int_env("SERVER_PORT", 5000)
PAGE_SIZE = _int_env("PAGE_SIZE", 20)
FETCH_TIMEOUT = _int_env("FETCH_TIMEOUT", 30)
