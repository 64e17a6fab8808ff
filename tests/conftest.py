import json

import pytest

from quiz_bank.models import Question


@pytest.fixture
def mixed_questions():
    """One question of each type, ids 1-3."""
    return [
        Question(id=1, type="multiple", prompt="Capital of France?", options=["Paris", "Lyon", "Nice"], correct_answer=0),
        Question(id=2, type="boolean", prompt="The sky is green.", correct_answer=False),
        Question(id=3, type="short", prompt="Chemical symbol for gold?", correct_answer="Au", explanation="From Latin aurum."),
    ]


@pytest.fixture
def numbered_questions():
    def make(n):
        return [
            Question(id=i + 1, type="short", prompt=f"Question {i + 1}", correct_answer=str(i + 1))
            for i in range(n)
        ]
    return make


@pytest.fixture
def public_dir(tmp_path):
    """A public directory with two question sets and one unrelated file."""
    (tmp_path / "GeographyQuestions.json").write_text(
        json.dumps([{"question": "Capital of France?", "choices": ["A: Paris", "B: Lyon"], "answer": "A"}]),
        encoding="utf-8",
    )
    (tmp_path / "ScienceQuestions.json").write_text(
        json.dumps({"questions": [
            {"question": "Water boils at 100C at sea level.", "type": "boolean", "answer": "true"},
            {"question": "Symbol for iron?", "type": "short", "answer": "Fe"},
        ]}),
        encoding="utf-8",
    )
    (tmp_path / "notes.json").write_text("[]", encoding="utf-8")
    return tmp_path
