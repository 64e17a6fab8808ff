import json
import logging
from typing import Any, Iterable, List, Optional, Tuple

from quiz_bank.models import QUESTION_TYPES, Question
from quiz_bank.regexes import ANSWER_LETTER_RE, LETTERS, OPTION_LABEL_RE

logger = logging.getLogger(__name__)


# ---------- OPTION HELPERS ----------

def strip_label(option: Any) -> str:
    """Remove a leading "A:", "B)", "c." style label from an option."""
    text = str(option)
    m = OPTION_LABEL_RE.match(text)
    return m.group(1).strip() if m else text.strip()


def letter_to_index(letter: str) -> Optional[int]:
    m = ANSWER_LETTER_RE.match(letter)
    if not m:
        return None
    return LETTERS.index(m.group(1).upper())


def find_option_index(options: Iterable[str], label: str) -> int:
    """Index of the first option equal to label (trimmed, case-insensitive), or -1."""
    target = str(label).strip().lower()
    for i, opt in enumerate(options):
        if str(opt).strip().lower() == target:
            return i
    return -1


def _legacy_options(raw) -> Tuple[List[str], Optional[List[str]]]:
    """
    Options come either as a list of strings or as an object keyed by
    letters, e.g. {"A": "Paris", "C": "Lyon"}. Missing letters are skipped
    and the result follows letter order, not key order.

    Returns (options, letters); letters lists the keys actually present
    when the options were letter-keyed, else None.
    """
    if isinstance(raw, dict):
        options, letters = [], []
        for letter in LETTERS:
            value = raw.get(letter, raw.get(letter.lower()))
            if value is None:
                continue
            options.append(strip_label(value))
            letters.append(letter)
        return options, letters

    if isinstance(raw, (list, tuple)):
        return [strip_label(opt) for opt in raw], None

    return [], None


# ---------- ANSWER RESOLUTION ----------

def resolve_choice_answer(value: Any, options: List[str], prompt: str = "") -> int:
    """
    Turn an index, a letter, or the literal option text into an index.

    Unrecognized answers fall back to index 0 so older question files keep
    loading; a warning is logged so the bad record can be found.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)

    text = "" if value is None else str(value)

    idx = letter_to_index(text)
    if idx is not None:
        return idx

    idx = find_option_index(options, text)
    if idx >= 0:
        return idx

    logger.warning("Could not resolve answer %r for %r, defaulting to first option", value, prompt[:60])
    return 0


def _coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "t", "yes", "y", "1"}
    return bool(value)


def _resolve_answer(q_type: str, value: Any, options: List[str], prompt: str):
    if q_type == "multiple":
        return resolve_choice_answer(value, options, prompt)
    if q_type == "boolean":
        return _coerce_boolean(value)
    return "" if value is None else str(value)


# ---------- RECORD BUILDING ----------

def _pick(item: dict, *keys):
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None


def _record_id(item: dict, position: int) -> int:
    raw_id = item.get("id")
    if isinstance(raw_id, int) and not isinstance(raw_id, bool) and raw_id > 0:
        return raw_id
    return position + 1


def _from_legacy(item: Any, position: int) -> Optional[Question]:
    if not isinstance(item, dict):
        logger.warning("Skipping non-object question entry at position %d", position)
        return None

    prompt = str(_pick(item, "question", "prompt") or "").strip()
    q_type = str(item.get("type") or "multiple")
    options, letters = _legacy_options(_pick(item, "choices", "options"))
    answer = _pick(item, "correctAnswer", "answer")

    # with lettered options {"A": .., "C": ..} a "C" answer means the second option
    if letters and isinstance(answer, str) and answer.strip().upper() in letters:
        answer = letters.index(answer.strip().upper())

    return Question(
        id=_record_id(item, position),
        type=q_type,
        prompt=prompt,
        options=options if q_type == "multiple" else [],
        correct_answer=_resolve_answer(q_type, answer, options, prompt),
        explanation=item.get("explanation") or None,
    )


def _from_canonical(item: Any, position: int) -> Optional[Question]:
    if not isinstance(item, dict):
        logger.warning("Skipping non-object question entry at position %d", position)
        return None

    # untyped items mixed into a typed list are read like legacy items
    if item.get("type") is None:
        return _from_legacy(item, position)

    prompt = str(_pick(item, "question", "prompt") or "").strip()
    q_type = str(item.get("type"))
    options = [str(opt) for opt in (item.get("options") or [])]

    return Question(
        id=_record_id(item, position),
        type=q_type,
        prompt=prompt,
        options=options if q_type == "multiple" else [],
        correct_answer=_resolve_answer(q_type, item.get("correctAnswer"), options, prompt),
        explanation=item.get("explanation") or None,
    )


def _is_valid(q: Question) -> bool:
    if q.type not in QUESTION_TYPES:
        logger.warning("Dropping question %s with unknown type %r", q.id, q.type)
        return False
    if not q.prompt:
        logger.warning("Dropping question %s with empty prompt", q.id)
        return False
    if q.type == "multiple":
        if not q.options:
            logger.warning("Dropping multiple-choice question %s without options", q.id)
            return False
        if not 0 <= q.correct_answer < len(q.options):
            logger.warning(
                "Question %s answer index %s out of range (%d options), defaulting to 0",
                q.id, q.correct_answer, len(q.options),
            )
            q.correct_answer = 0
    if q.type == "short" and not str(q.correct_answer).strip():
        logger.warning("Dropping short-answer question %s without an answer", q.id)
        return False
    return True


def _looks_canonical(first: Any) -> bool:
    return (
        isinstance(first, dict)
        and _pick(first, "question", "prompt") is not None
        and first.get("type") is not None
    )


# ---------- NORMALIZE ----------

def normalize(raw: Any, overrides=()) -> List[Question]:
    """
    Convert any supported question JSON into canonical Question records.

    Accepted shapes, checked in order:
      - a list of already-shaped questions (first item has text + "type")
      - {"questions": [...]} wrapping legacy items
      - a list of legacy items ("choices"/"options" + "answer"/"correctAnswer")

    Anything else yields an empty list. overrides is a sequence of
    quiz_bank.overrides.Override applied after normalization.
    """
    if isinstance(raw, list) and raw and _looks_canonical(raw[0]):
        build = _from_canonical
        items = raw
    elif isinstance(raw, dict) and isinstance(raw.get("questions"), list):
        build = _from_legacy
        items = raw["questions"]
    elif isinstance(raw, list):
        build = _from_legacy
        items = raw
    else:
        logger.info("Unrecognized question data of type %s, no questions loaded", type(raw).__name__)
        return []

    questions: List[Question] = []
    for position, item in enumerate(items):
        q = build(item, position)
        if q is not None and _is_valid(q):
            questions.append(q)

    _dedupe_ids(questions)

    if overrides:
        questions = apply_overrides(questions, overrides)

    return questions


def apply_overrides(questions: List[Question], overrides) -> List[Question]:
    """Run each matching override on each question; first match wins."""
    result = []
    for q in questions:
        for override in overrides:
            if override.matches(q):
                q = override.apply(q)
                break
        result.append(q)
    return result


def _dedupe_ids(questions: List[Question]):
    """Give every repeated id the next unused one so answers never share a key."""
    taken = {q.id for q in questions}
    seen = set()
    next_id = max(taken, default=0) + 1
    for q in questions:
        if q.id in seen:
            logger.warning("Duplicate question id %s, reassigned to %s", q.id, next_id)
            q.id = next_id
            next_id += 1
        seen.add(q.id)


def renumber(questions: List[Question], start: int = 1) -> List[Question]:
    """Sequential ids across an aggregated pool so ids never collide."""
    for offset, q in enumerate(questions):
        q.id = start + offset
    return questions


# ---------- JSON FILES ----------

def save_questions_json(questions: List[Question], output_path: str):
    data = [q.to_dict() for q in questions]
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_questions_json(path: str, overrides=()) -> List[Question]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return normalize(data, overrides)
