import logging
from urllib.parse import quote

import streamlit as st

from quiz_bank.config import LOG_LEVEL, PAGE_SIZE, PAPER_URL, PUBLIC_DIR, QUIZ_BASE_URL
from quiz_bank.exceptions import LoadError
from quiz_bank.grading import format_answer, is_correct, score
from quiz_bank.sessions import SessionState, paginate, parse_session_param, total_sessions
from quiz_bank.sources import LoadGuard, QuestionSource

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Configure page *before* other st.* calls
st.set_page_config(page_title="Online Test Platform", layout="centered")


def get_source() -> QuestionSource:
    return QuestionSource(base_url=QUIZ_BASE_URL, public_dir=PUBLIC_DIR, paper_url=PAPER_URL)


# -------------------------------------------------
# Navigation helpers (query string drives the page)
# -------------------------------------------------
def go(page: str, session: str | None = None):
    if page == "test":
        # a fresh visit to a test always starts with no answers
        st.session_state.pop("session_state", None)
    st.query_params.clear()
    st.query_params["page"] = page
    if session is not None:
        st.query_params["session"] = session
    st.rerun()


# -------------------------------------------------
# Question loading, kept per source until it changes
# -------------------------------------------------
def load_questions(filename: str | None):
    """
    Returns (questions, error). A chosen file that fails to load is an error;
    the default pool only errors when no source at all could be read.
    """
    source_key = filename or "__default__"
    cached = st.session_state.get("loaded")
    if cached and cached["key"] == source_key:
        return cached["questions"], cached["error"]

    guard: LoadGuard = st.session_state.setdefault("load_guard", LoadGuard())
    token = guard.begin()
    source = get_source()

    questions, error = None, None
    try:
        if filename:
            questions = source.load_single("/" + quote(filename, safe=""))
        else:
            questions = source.load_default()
    except LoadError as e:
        logger.error("Question load failed: %s", e)
        error = str(e)

    if guard.is_current(token):
        st.session_state["loaded"] = {"key": source_key, "questions": questions, "error": error}
    return questions, error


# -------------------------------------------------
# Pages
# -------------------------------------------------
def home_page():
    st.title("Online Test Platform")
    st.write(
        "Take a test featuring multiple choice, true/false, and short answer questions. "
        "Your progress is tracked as you go, and detailed results are shown at the end."
    )

    if st.button("Start Test", type="primary"):
        go("test", "0")

    st.markdown("### Question sets")
    sets = get_source().list_sets()
    if not sets:
        st.caption("No question sets found.")
    for qs in sets:
        if st.button(qs.title, key=f"set-{qs.filename}"):
            go("test", qs.filename)

    st.markdown("### How it works")
    st.markdown(
        "- One question displayed at a time with Next/Previous navigation.\n"
        "- A progress bar indicates how many questions you have answered.\n"
        "- Results page shows your score, correct answers, and explanations.\n"
        "- Restart the test anytime after submission."
    )


def render_question(q, state: SessionState, position: int, total: int):
    revealed = state.is_revealed(q.id)
    current = state.answer_for(q.id)

    st.caption(f"QUESTION {position + 1} OF {total}")
    st.subheader(q.prompt)

    widget_key = f"answer-{state.key}-{q.id}"
    if q.type == "multiple":
        choice = st.radio(
            "Choose one",
            options=list(range(len(q.options))),
            format_func=lambda i: q.options[i],
            index=current if isinstance(current, int) else None,
            key=widget_key,
            disabled=revealed,
            label_visibility="collapsed",
        )
        if choice is not None:
            state.answer(q.id, choice)

    elif q.type == "boolean":
        choice = st.radio(
            "True or false",
            options=[True, False],
            format_func=lambda v: "True" if v else "False",
            index=None if current is None else (0 if current else 1),
            key=widget_key,
            disabled=revealed,
            horizontal=True,
            label_visibility="collapsed",
        )
        if choice is not None:
            state.answer(q.id, choice)

    else:
        text = st.text_input(
            "Type your answer",
            value=current if isinstance(current, str) else "",
            key=widget_key,
            disabled=revealed,
        )
        state.answer(q.id, text)

    if revealed:
        answer = state.answer_for(q.id)
        if is_correct(q, answer):
            st.success("Correct")
        else:
            st.error(f"Incorrect. Correct answer: {format_answer(q.type, q.correct_answer, q.options)}")
        if q.explanation:
            st.info(q.explanation)


def test_page():
    session_index, filename = parse_session_param(st.query_params.get("session"))
    questions, error = load_questions(filename)

    if error:
        st.error(error)
        return
    if questions is None:
        st.write("Loading questions…")
        return

    single = filename is not None
    if single:
        session_index = 0
    n_sessions = total_sessions(len(questions), PAGE_SIZE, single_source=single)
    session = paginate(questions, session_index, PAGE_SIZE, single_source=single)

    state: SessionState = st.session_state.setdefault("session_state", SessionState())
    state.sync((filename, session_index, len(questions)))

    if not session:
        st.write("No questions available.")
        return

    total = len(session)
    q = session[state.index]

    render_question(q, state, state.index, total)

    completed = state.completed(session)
    st.progress(state.progress(session), text=f"{completed} / {total} answered")

    revealed = state.is_revealed(q.id)
    is_last = state.index == total - 1

    c1, c2, c3 = st.columns(3)
    with c1:
        if st.button("Previous", disabled=state.index == 0):
            state.previous()
            st.rerun()
    with c2:
        if st.button("Next" if revealed else "Show Answer", disabled=is_last and revealed):
            state.next(session)
            st.rerun()
    with c3:
        if st.button("Submit Test"):
            st.session_state["result"] = score(session, state.answers, session_index, n_sessions)
            st.session_state["result_source"] = filename
            go("results")


def results_page():
    result = st.session_state.get("result")
    if result is None:
        st.header("No results to show")
        st.write("Please take the test first.")
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Start Test"):
                go("test", "0")
        with c2:
            if st.button("Home"):
                go("home")
        return

    filename = st.session_state.get("result_source")

    st.title("Your Results")
    st.write(f"Score: {result.score} / {result.total} ({result.percent}%)")

    def session_param(index: int) -> str:
        return filename if filename else str(index)

    c1, c2 = st.columns(2)
    with c1:
        label = "Next Session" if result.has_next else "Restart Test"
        target = result.session_index + 1 if result.has_next else result.session_index
        if st.button(label, type="primary"):
            go("test", session_param(target))
    with c2:
        if result.has_next and st.button("Restart"):
            go("test", session_param(result.session_index))

    for d in result.details:
        with st.container(border=True):
            st.markdown(f"**{d.prompt}**  \n{'✅ Correct' if d.correct else '❌ Incorrect'}")
            if d.type != "short" and d.options:
                st.caption("Options: " + ", ".join(d.options))
            st.write(f"Correct answer: {format_answer(d.type, d.correct_answer, list(d.options))}")
            st.write(f"Your answer: {format_answer(d.type, d.user_answer, list(d.options))}")
            if d.explanation:
                st.write(f"Explanation: {d.explanation}")

    if st.button("Back to Home"):
        go("home")


# -------------------------------------------------
# STREAMLIT APPLICATION
# -------------------------------------------------
def main():
    page = st.query_params.get("page")
    if page is None and "session" in st.query_params:
        page = "test"

    if page == "test":
        test_page()
    elif page == "results":
        results_page()
    else:
        home_page()


if __name__ == "__main__":
    main()
