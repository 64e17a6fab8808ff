from dataclasses import dataclass, field
from typing import List, Optional, Union

QUESTION_TYPES = ("multiple", "boolean", "short")

AnswerValue = Optional[Union[int, bool, str]]


@dataclass
class Question:
    id: int
    type: str                 # "multiple" | "boolean" | "short"
    prompt: str
    options: List[str] = field(default_factory=list)
    correct_answer: Union[int, bool, str] = 0
    explanation: Optional[str] = None

    def to_dict(self) -> dict:
        """Wire format used by the question JSON files."""
        data = {
            "id": self.id,
            "type": self.type,
            "question": self.prompt,
            "correctAnswer": self.correct_answer,
        }
        if self.type == "multiple":
            data["options"] = list(self.options)
        if self.explanation:
            data["explanation"] = self.explanation
        return data


@dataclass(frozen=True)
class ResultDetail:
    id: int
    prompt: str
    type: str
    options: tuple
    correct_answer: Union[int, bool, str]
    user_answer: AnswerValue
    explanation: Optional[str]
    correct: bool

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.prompt,
            "type": self.type,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "userAnswer": self.user_answer,
            "explanation": self.explanation,
            "correct": self.correct,
        }


@dataclass(frozen=True)
class SessionResult:
    details: tuple
    score: int
    total: int
    session_index: int = 0
    total_sessions: int = 1

    @property
    def percent(self) -> int:
        if not self.total:
            return 0
        return round(self.score / self.total * 100)

    @property
    def has_next(self) -> bool:
        return self.session_index < self.total_sessions - 1

    def to_dict(self) -> dict:
        return {
            "details": [d.to_dict() for d in self.details],
            "score": self.score,
            "total": self.total,
            "sessionIndex": self.session_index,
            "totalSessions": self.total_sessions,
        }


@dataclass
class QuestionSet:
    filename: str
    url: str
    title: str
