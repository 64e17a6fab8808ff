from typing import Dict, List, Optional

from quiz_bank.models import AnswerValue, Question, ResultDetail, SessionResult


def _normalize_short(text) -> str:
    return str(text).strip().lower()


def is_unset(value: AnswerValue) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value is None


def is_correct(q: Question, answer: AnswerValue) -> bool:
    """
    Compare a candidate answer with the question's key.

    Choice and true/false questions need an exact match (an int index never
    equals a bool); short answers ignore case and surrounding whitespace.
    """
    if is_unset(answer):
        return False
    if q.type in ("multiple", "boolean"):
        return type(answer) is type(q.correct_answer) and answer == q.correct_answer
    if q.type == "short":
        return _normalize_short(answer) == _normalize_short(q.correct_answer)
    return False


def score(
    session: List[Question],
    answers: Dict[int, AnswerValue],
    session_index: int = 0,
    total_sessions: int = 1,
) -> SessionResult:
    details = []
    for q in session:
        user = answers.get(q.id)
        details.append(
            ResultDetail(
                id=q.id,
                prompt=q.prompt,
                type=q.type,
                options=tuple(q.options),
                correct_answer=q.correct_answer,
                user_answer=user,
                explanation=q.explanation,
                correct=is_correct(q, user),
            )
        )

    return SessionResult(
        details=tuple(details),
        score=sum(1 for d in details if d.correct),
        total=len(session),
        session_index=session_index,
        total_sessions=total_sessions,
    )


def format_answer(q_type: str, value: AnswerValue, options: Optional[List[str]] = None) -> str:
    """Display text for an answer on the results page."""
    if is_unset(value):
        return "—"
    if q_type == "multiple":
        if isinstance(value, int) and not isinstance(value, bool) and options and 0 <= value < len(options):
            return options[value]
        return str(value)
    if q_type == "boolean":
        return "True" if value else "False"
    return str(value)
