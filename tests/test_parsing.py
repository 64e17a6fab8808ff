import json
import logging

from quiz_bank.grading import score
from quiz_bank.models import Question
from quiz_bank.overrides import FORMWORK_BEAM_BOTTOM
from quiz_bank.parsing import (
    find_option_index,
    letter_to_index,
    load_questions_json,
    normalize,
    renumber,
    resolve_choice_answer,
    save_questions_json,
    strip_label,
)
from quiz_bank.sessions import SessionState


def test_strip_label():
    assert strip_label("B) Paris") == "Paris"
    assert strip_label("A: Paris") == "Paris"
    assert strip_label("  d . Rome ") == "Rome"
    assert strip_label("Paris") == "Paris"
    assert strip_label(42) == "42"


def test_letter_to_index():
    assert letter_to_index("A") == 0
    assert letter_to_index("f") == 5
    assert letter_to_index("G") is None
    assert letter_to_index("Paris") is None


def test_find_option_index_is_trimmed_and_case_insensitive():
    assert find_option_index(["Paris", " 21 Days "], "21 days") == 1
    assert find_option_index(["Paris"], "Rome") == -1


def test_legacy_choices_with_letter_answer():
    questions = normalize([{"question": "Capital of France?", "choices": ["A: Paris", "B: Lyon"], "answer": "A"}])

    assert len(questions) == 1
    q = questions[0]
    assert q.id == 1
    assert q.type == "multiple"
    assert q.options == ["Paris", "Lyon"]
    assert q.correct_answer == 0
    assert q.explanation is None


def test_legacy_letter_keyed_options_keep_letter_order():
    raw = [{
        "question": "Pick one",
        "options": {"D": "Four", "A": "One", "B": "Two"},
        "correctAnswer": "D",
    }]
    q = normalize(raw)[0]

    assert q.options == ["One", "Two", "Four"]
    # "D" names the third option present, not the fourth letter
    assert q.correct_answer == 2


def test_legacy_answer_resolution_order():
    base = {"question": "Largest planet?", "choices": ["Mars", "Jupiter", "Venus"]}

    assert normalize([dict(base, correctAnswer=2, answer="A")])[0].correct_answer == 2
    assert normalize([dict(base, answer="b")])[0].correct_answer == 1
    assert normalize([dict(base, answer="  jupiter ")])[0].correct_answer == 1


def test_unresolvable_answer_defaults_to_first_option(caplog):
    with caplog.at_level(logging.WARNING):
        q = normalize([{"question": "Largest planet?", "choices": ["Mars", "Jupiter"], "answer": "Saturn"}])[0]

    assert q.correct_answer == 0
    assert "Could not resolve answer" in caplog.text


def test_resolve_choice_answer_numeric():
    assert resolve_choice_answer(1, ["a", "b"]) == 1
    assert resolve_choice_answer(1.0, ["a", "b"]) == 1


def test_legacy_ids_and_explanation():
    raw = [
        {"id": 7, "question": "Q7", "choices": ["x", "y"], "answer": "B", "explanation": "because"},
        {"question": "Q2", "choices": ["x", "y"], "answer": "A"},
    ]
    questions = normalize(raw)

    assert [q.id for q in questions] == [7, 2]
    assert questions[0].explanation == "because"


def test_legacy_boolean_and_short_types():
    raw = {"questions": [
        {"question": "Water is wet.", "type": "boolean", "answer": "True"},
        {"question": "Symbol for iron?", "type": "short", "answer": "Fe"},
    ]}
    questions = normalize(raw)

    assert questions[0].correct_answer is True
    assert questions[0].options == []
    assert questions[1].correct_answer == "Fe"


def test_canonical_passthrough():
    raw = [
        {"id": 1, "type": "multiple", "question": "2 + 2?", "options": ["3", "4"], "correctAnswer": 1},
        {"id": 2, "type": "boolean", "question": "1 > 2", "correctAnswer": False, "explanation": "It is not."},
        {"id": 3, "type": "short", "question": "Spell cat", "correctAnswer": "cat"},
    ]
    questions = normalize(raw)

    assert questions == [
        Question(id=1, type="multiple", prompt="2 + 2?", options=["3", "4"], correct_answer=1),
        Question(id=2, type="boolean", prompt="1 > 2", correct_answer=False, explanation="It is not."),
        Question(id=3, type="short", prompt="Spell cat", correct_answer="cat"),
    ]


def test_canonical_letter_answer_is_resolved():
    raw = [{"id": 1, "type": "multiple", "question": "2 + 2?", "options": ["3", "4"], "correctAnswer": "B"}]
    assert normalize(raw)[0].correct_answer == 1


def test_out_of_range_index_falls_back_to_zero(caplog):
    raw = [{"id": 1, "type": "multiple", "question": "2 + 2?", "options": ["3", "4"], "correctAnswer": 5}]
    with caplog.at_level(logging.WARNING):
        assert normalize(raw)[0].correct_answer == 0
    assert "out of range" in caplog.text


def test_invalid_records_are_dropped():
    raw = [
        {"id": 1, "type": "multiple", "question": "No options", "correctAnswer": 0},
        {"id": 2, "type": "essay", "question": "Unknown type", "correctAnswer": ""},
        {"id": 3, "type": "short", "question": "   ", "correctAnswer": "x"},
        {"id": 4, "type": "short", "question": "Kept", "correctAnswer": "x"},
        "not an object",
    ]
    assert [q.id for q in normalize(raw)] == [4]


def test_unrecognized_shapes_give_empty_list():
    assert normalize(None) == []
    assert normalize("questions") == []
    assert normalize(42) == []
    assert normalize({"items": []}) == []
    assert normalize([]) == []


def test_overrides_are_applied():
    raw = [{
        "question": "Shutters for the bottom support of a beam may be removed after",
        "choices": ["A: 7 days", "B: 14 days", "C: 21 days"],
        "answer": "A",
    }]
    assert normalize(raw)[0].correct_answer == 0
    assert normalize(raw, [FORMWORK_BEAM_BOTTOM])[0].correct_answer == 2


def test_renumber():
    questions = normalize([
        {"id": 5, "type": "short", "question": "a", "correctAnswer": "a"},
        {"id": 5, "type": "short", "question": "b", "correctAnswer": "b"},
    ])
    assert [q.id for q in renumber(questions)] == [1, 2]


def test_save_and_load_questions_json(tmp_path, mixed_questions):
    path = tmp_path / "SampleQuestions.json"
    save_questions_json(mixed_questions, str(path))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[0]["question"] == "Capital of France?"
    assert data[0]["correctAnswer"] == 0
    assert "options" not in data[1]

    assert load_questions_json(str(path)) == mixed_questions


def test_colliding_ids_get_next_unused_id(caplog):
    raw = [
        {"id": 2, "question": "First", "choices": ["x", "y"], "answer": "A"},
        {"question": "Second", "choices": ["x", "y"], "answer": "B"},
        {"id": 2, "question": "Third", "choices": ["x", "y"], "answer": "A"},
    ]
    with caplog.at_level(logging.WARNING):
        questions = normalize(raw)

    assert [q.id for q in questions] == [2, 3, 4]
    assert "Duplicate question id 2" in caplog.text


def test_colliding_ids_keep_answers_apart():
    questions = normalize([
        {"id": 2, "question": "First", "choices": ["x", "y"], "answer": "A"},
        {"question": "Second", "choices": ["x", "y"], "answer": "B"},
    ])
    state = SessionState()
    state.answer(questions[0].id, 0)

    result = score(questions, state.answers)

    assert [d.user_answer for d in result.details] == [0, None]
    assert result.score == 1


def test_untyped_item_after_canonical_item_is_kept():
    raw = [
        {"id": 1, "type": "short", "question": "a", "correctAnswer": "a"},
        {"question": "b", "choices": ["A: x", "B: y"], "answer": "B"},
    ]
    questions = normalize(raw)

    assert [q.prompt for q in questions] == ["a", "b"]
    assert questions[1].type == "multiple"
    assert questions[1].options == ["x", "y"]
    assert questions[1].correct_answer == 1


def test_short_answer_without_key_is_dropped():
    raw = [
        {"id": 1, "type": "short", "question": "No key"},
        {"id": 2, "type": "short", "question": "Blank key", "correctAnswer": "   "},
        {"id": 3, "type": "short", "question": "Kept", "correctAnswer": "x"},
    ]
    assert [q.id for q in normalize(raw)] == [3]
