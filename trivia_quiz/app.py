from __future__ import annotations

import sys
import time
from pathlib import Path

APP_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = APP_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import streamlit as st

from trivia_quiz import config
from trivia_quiz.quiz import CelebrationTier, Phase, QuestionBank, QuizSession, TickScheduler
from trivia_quiz.quiz.utils import option_letter


st.set_page_config(
    page_title="Trivia Quiz",
    page_icon=":question:",
    layout="centered",
)

TIER_MESSAGES = {
    CelebrationTier.TOP: "Excellent!",
    CelebrationTier.MID: "Nice work, keep it up!",
    CelebrationTier.LOW: "Keep going, try again!",
}


def build_session() -> QuizSession:
    settings = config.get_settings()
    bank = QuestionBank.from_settings(settings)
    with st.spinner("Loading questions..."):
        bank.load_sync()
    return QuizSession(bank, scheduler=TickScheduler(), advance_delay=settings.advance_delay)


def get_session() -> QuizSession:
    if "session" not in st.session_state:
        st.session_state.session = build_session()
        st.session_state.celebrated = False
    return st.session_state.session


def reload_session() -> None:
    previous = st.session_state.pop("session", None)
    if previous is not None:
        previous.reset()
    get_session()


def render_sidebar(session: QuizSession) -> None:
    with st.sidebar:
        st.header("Question bank")
        st.caption(f"Source: `{session.bank.source}`")
        st.caption(f"Questions loaded: {len(session.bank)}")
        if st.button("Reload questions"):
            reload_session()
            st.rerun()

        with st.expander("Load log"):
            for line in session.bank.logs:
                st.caption(line)


def render_fault(session: QuizSession) -> None:
    fault = session.bank.fault
    st.error("The app hit an error. Check the console for details.")
    st.code(f"{fault.message}\n{fault.detail}")


def render_guidance(session: QuizSession) -> None:
    st.warning(f"No questions were loaded from {session.bank.source.name}. Please check:")
    st.markdown("\n".join(f"{idx}. {step}" for idx, step in enumerate(config.REMEDIATION_STEPS, 1)))
    st.code("\n".join(session.bank.logs) or "(no log entries)")


def render_start(session: QuizSession) -> None:
    st.write(f"{session.total} questions are ready. Press start when you are.")
    if st.button("Start quiz", type="primary", use_container_width=True):
        session.start()
        st.session_state.celebrated = False
        st.rerun()


def render_question(session: QuizSession) -> None:
    question = session.current_question
    st.caption(f"Question {session.current_index + 1} / {session.total}")
    st.markdown(f"### {question.text}")

    revealing = session.phase is Phase.REVEALING
    for idx, option in enumerate(question.options):
        label = f"{option_letter(idx)}. {option}"
        if revealing:
            if session.is_correct(idx):
                st.success(f"{label} · correct")
            elif session.selected_option == idx:
                st.error(f"{label} · wrong")
            else:
                st.button(label, key=f"option_{session.current_index}_{idx}", disabled=True, use_container_width=True)
            continue
        if st.button(label, key=f"option_{session.current_index}_{idx}", use_container_width=True):
            session.select_option(idx)
            st.rerun()

    st.progress(session.progress)

    if revealing:
        due = session.scheduler.next_due()
        if due is not None:
            time.sleep(max(0.0, due - time.monotonic()))
        session.scheduler.run_due()
        st.rerun()


def render_result(session: QuizSession) -> None:
    st.success(f"Score: {session.score} / {session.total} ({session.ratio * 100:.0f}%)")
    st.subheader(TIER_MESSAGES[session.tier])

    if not st.session_state.celebrated:
        if session.tier is CelebrationTier.TOP:
            st.balloons()
        elif session.tier is CelebrationTier.MID:
            st.snow()
        st.session_state.celebrated = True

    if st.button("Back to start", type="primary"):
        session.acknowledge_result()
        st.rerun()


def main() -> None:
    st.title("Fun Laws Trivia")
    session = get_session()
    render_sidebar(session)
    session.scheduler.run_due()

    if session.bank.fault is not None:
        render_fault(session)
        st.stop()

    if session.bank.is_empty:
        render_guidance(session)
        st.stop()

    if session.phase is Phase.START:
        render_start(session)
    elif session.phase is Phase.RESULT:
        render_result(session)
    else:
        render_question(session)


if __name__ == "__main__":
    main()
