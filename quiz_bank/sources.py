import json
import logging
from pathlib import Path
from typing import Any, List, Optional
from urllib.parse import unquote, urljoin

import httpx

from quiz_bank.config import (
    FETCH_TIMEOUT,
    LOCAL_QUESTIONS_FILE,
    MANIFEST_FILENAME,
    PUBLIC_DIR,
    QUESTION_SETS_ENDPOINT,
)
from quiz_bank.exceptions import LoadError
from quiz_bank.models import Question, QuestionSet
from quiz_bank.overrides import DEFAULT_OVERRIDES
from quiz_bank.parsing import normalize, renumber
from quiz_bank.question_sets import list_question_sets

logger = logging.getLogger(__name__)


def _is_absolute(url: str) -> bool:
    return url.startswith(("http://", "https://"))


class QuestionSource:
    """
    Fetches question JSON by url.

    Absolute http(s) urls are always fetched over HTTP. Relative urls such as
    "/BiologyQuestions.json" go to base_url when one is configured, otherwise
    they are read from public_dir on disk.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        public_dir=PUBLIC_DIR,
        client: Optional[httpx.Client] = None,
        paper_url: Optional[str] = None,
        overrides=DEFAULT_OVERRIDES,
        timeout: float = FETCH_TIMEOUT,
    ):
        self.base_url = base_url
        self.public_dir = Path(public_dir)
        self.paper_url = paper_url
        self.overrides = overrides
        self.timeout = timeout
        self._client = client

    # ---------- raw fetching ----------

    def _get(self, url: str) -> Any:
        try:
            if self._client is not None:
                response = self._client.get(url, timeout=self.timeout)
            else:
                with httpx.Client() as client:
                    response = client.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise LoadError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LoadError(url, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise LoadError(url, f"invalid JSON ({e})") from e

    def _read_local(self, url: str) -> Any:
        root = self.public_dir.resolve()
        path = (root / unquote(url.lstrip("/"))).resolve()
        if not path.is_relative_to(root):
            raise LoadError(url, "outside the question set directory")
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise LoadError(url, e.strerror or str(e)) from e
        except ValueError as e:
            raise LoadError(url, f"invalid JSON ({e})") from e

    def fetch_json(self, url: str) -> Any:
        if _is_absolute(url):
            return self._get(url)
        if url.startswith("//"):
            # urljoin would treat "//host/x" as another host
            raise LoadError(url, "not a question set path")
        if self.base_url:
            return self._get(urljoin(self.base_url, url))
        return self._read_local(url)

    # ---------- question loading ----------

    def load_single(self, url: str) -> List[Question]:
        """One explicitly requested set. Fetch failures propagate as LoadError."""
        data = self.fetch_json(url)
        questions = normalize(data, self.overrides)
        logger.info("Loaded %d questions from %s", len(questions), url)
        return questions

    def aggregate(self, sets: List[QuestionSet]) -> List[Question]:
        """
        All questions from every set, in manifest order, with ids renumbered
        1..N. A set that fails to load is logged and skipped.
        """
        pool: List[Question] = []
        for qs in sets:
            try:
                pool.extend(self.load_single(qs.url))
            except LoadError as e:
                logger.warning("Skipping question set %s: %s", qs.filename, e.reason)
        return renumber(pool)

    def list_sets(self) -> List[QuestionSet]:
        """
        Available question sets: the server endpoint first, then the static
        manifest. Without a base_url the public directory is scanned directly.
        """
        if not self.base_url:
            return list_question_sets(self.public_dir)

        for url in (QUESTION_SETS_ENDPOINT, "/" + MANIFEST_FILENAME):
            try:
                data = self.fetch_json(url)
            except LoadError as e:
                logger.info("Question set listing unavailable at %s: %s", url, e.reason)
                continue
            if isinstance(data, list) and data:
                return [_question_set(item) for item in data if isinstance(item, dict)]
        return []

    def load_default(self) -> List[Question]:
        """
        Question pool when no set is chosen: the remote paper, then the local
        questions file, then every listed set combined.
        """
        candidates = [self.paper_url] if self.paper_url else []
        candidates.append("/" + LOCAL_QUESTIONS_FILE)

        last_error: Optional[LoadError] = None
        for url in candidates:
            try:
                return self.load_single(url)
            except LoadError as e:
                logger.info("Default source %s unavailable: %s", url, e.reason)
                last_error = e

        sets = self.list_sets()
        if not sets:
            raise last_error
        return self.aggregate(sets)


def _question_set(item: dict) -> QuestionSet:
    filename = str(item.get("filename", ""))
    return QuestionSet(
        filename=filename,
        url=str(item.get("url") or "/" + filename),
        title=str(item.get("title") or filename),
    )


class LoadGuard:
    """
    Tracks which load is current so a late result can be ignored.

        token = guard.begin()
        questions = source.load_single(url)
        if guard.is_current(token):
            show(questions)
    """

    def __init__(self):
        self._generation = 0

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation
