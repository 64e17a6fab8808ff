from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import quiz_bank.config as config

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


@pytest.fixture
def app(public_dir, monkeypatch):
    """The Streamlit app reading question sets straight from public_dir."""
    monkeypatch.setattr(config, "PUBLIC_DIR", str(public_dir))
    monkeypatch.setattr(config, "QUIZ_BASE_URL", None)
    monkeypatch.setattr(config, "PAPER_URL", None)
    return AppTest.from_file(APP_PATH, default_timeout=10)


def open_test(app, session):
    app.query_params["page"] = "test"
    app.query_params["session"] = session
    return app.run()


def test_single_file_is_one_session(app):
    # a chosen file always starts at session 0, whatever the index
    open_test(app, "ScienceQuestions.json")

    assert not app.exception
    assert app.caption[0].value == "QUESTION 1 OF 2"
    assert app.session_state["session_state"].key == ("ScienceQuestions.json", 0, 2)
    assert app.session_state["loaded"]["key"] == "ScienceQuestions.json"
    assert app.session_state["load_guard"].is_current(1)


def test_numeric_session_pages_default_pool(app, monkeypatch):
    monkeypatch.setattr(config, "PAGE_SIZE", 1)
    open_test(app, "2")

    assert not app.exception
    assert app.caption[0].value == "QUESTION 1 OF 1"
    assert app.session_state["session_state"].key == (None, 2, 3)


def test_show_answer_reveals_current_question(app):
    open_test(app, "GeographyQuestions.json")

    next(b for b in app.button if b.label == "Show Answer").click().run()

    assert not app.exception
    state = app.session_state["session_state"]
    assert state.is_revealed(1)
    assert any(b.label == "Next" for b in app.button)


def test_file_outside_public_dir_is_a_load_error(app):
    open_test(app, "../secret.json")

    assert not app.exception
    assert "outside the question set directory" in app.error[0].value


def test_missing_file_is_a_load_error(app):
    open_test(app, "MissingQuestions.json")

    assert "Failed to load" in app.error[0].value
