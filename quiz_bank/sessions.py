import math
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Set, Tuple

from quiz_bank.config import PAGE_SIZE
from quiz_bank.grading import is_unset
from quiz_bank.models import AnswerValue, Question
from quiz_bank.regexes import SESSION_INDEX_RE


# -------------------------------------------------
# Pagination
# -------------------------------------------------
def total_sessions(count: int, page_size: int = PAGE_SIZE, single_source: bool = False) -> int:
    """Number of sessions for count questions; never less than 1."""
    if single_source:
        return 1
    return max(1, math.ceil(count / page_size))


def paginate(
    questions: List[Question],
    session_index: int,
    page_size: int = PAGE_SIZE,
    single_source: bool = False,
) -> List[Question]:
    """
    Questions for one sitting.

    A single explicitly chosen file is always one session covering the whole
    file. Otherwise session i is questions[i*page_size:(i+1)*page_size];
    an index past the end gives an empty session.
    """
    if single_source:
        return list(questions)

    start = max(0, session_index) * page_size
    return list(questions[start:start + page_size])


def parse_session_param(raw: Optional[str]) -> Tuple[int, Optional[str]]:
    """
    The ?session= value is either a session number or a question set filename.

    Returns (session_index, filename); filename is None for numeric values.
    """
    raw = (raw or "0").strip()
    if SESSION_INDEX_RE.match(raw):
        return int(raw), None
    return 0, raw


# -------------------------------------------------
# Per-session answer / reveal state
# -------------------------------------------------
@dataclass
class SessionState:
    """Answers and reveal flags for the session currently on screen."""

    key: Optional[Hashable] = None
    index: int = 0
    answers: Dict[int, AnswerValue] = field(default_factory=dict)
    revealed: Set[int] = field(default_factory=set)

    def reset(self):
        self.index = 0
        self.answers = {}
        self.revealed = set()

    def sync(self, key: Hashable) -> bool:
        """Start over when the question source or session index changes. Returns True on reset."""
        if key == self.key:
            return False
        self.key = key
        self.reset()
        return True

    def is_revealed(self, question_id: int) -> bool:
        return question_id in self.revealed

    def answer_for(self, question_id: int) -> AnswerValue:
        return self.answers.get(question_id)

    def answer(self, question_id: int, value: AnswerValue):
        # revealed questions are locked
        if self.is_revealed(question_id):
            return
        self.answers[question_id] = value

    def previous(self):
        self.index = max(0, self.index - 1)

    def next(self, session: List[Question]):
        """First press reveals the current question, the second moves on."""
        if not session:
            return
        current = session[self.index]
        if not self.is_revealed(current.id):
            self.revealed.add(current.id)
            return
        self.index = min(len(session) - 1, self.index + 1)

    def completed(self, session: List[Question]) -> int:
        return sum(1 for q in session if not is_unset(self.answers.get(q.id)))

    def progress(self, session: List[Question]) -> int:
        if not session:
            return 0
        return round(self.completed(session) / len(session) * 100)
