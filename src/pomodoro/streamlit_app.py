"""Streamlit dashboard for the Pomodoro timer.

Runs the same interval stream as the command line timer. Values typed in the
sidebar take priority over the config file, which takes priority over the
built-in defaults; leave a field at 0 to fall through to the next layer.
"""
from __future__ import annotations

import time

import streamlit as st

from . import config, scheduler


def sidebar_config(
    duration_pomodoro: int,
    duration_short_break: int,
    duration_long_break: int,
    repetition: int,
) -> config.PartialConfig:
    """Turn sidebar inputs into a config layer, reading 0 as unset."""
    return config.PartialConfig(
        duration_pomodoro=duration_pomodoro or None,
        duration_short_break=duration_short_break or None,
        duration_long_break=duration_long_break or None,
        repetition=repetition or None,
    )


def interval_at(resolved: config.ResolvedConfig, position: int) -> scheduler.Interval:
    return scheduler.preview(resolved, position + 1)[position]


def _reset_session() -> None:
    st.session_state.position = 0
    st.session_state.completed = 0
    st.session_state.running = False
    st.session_state.stopped = False
    st.session_state.end_time = 0.0


def main() -> None:
    st.set_page_config(page_title="Pomodoro Dashboard", layout="centered")

    st.title("Pomodoro")

    with st.sidebar:
        task = st.text_input("Task")
        pomodoro = st.number_input("Pomodoro minutes", min_value=0, value=0)
        short_break = st.number_input("Short break minutes", min_value=0, value=0)
        long_break = st.number_input("Long break minutes", min_value=0, value=0)
        repetition = st.number_input("Pomodoros before a long break", min_value=0, value=0)
        fast = st.checkbox("Fast demo (1s per minute)", value=True)

    try:
        layers = sidebar_config(int(pomodoro), int(short_break), int(long_break), int(repetition))
        resolved = (layers | config.load() | config.defaults()).resolve()
    except config.ConfigError as error:
        st.error(f"Configuration error: {error}")
        return

    if task:
        st.markdown(f"On task **{task}**")

    st.subheader("One cycle")
    for item in scheduler.preview(resolved, 2 * resolved.repetition):
        st.write(f"- {item.name}: {item.minutes} min")

    st.write("---")

    if "position" not in st.session_state:
        _reset_session()

    if st.session_state.stopped:
        done = scheduler.format_pomodoro_count(st.session_state.completed)
        st.success(f"You've done {done}.")
        if st.button("New session"):
            _reset_session()
            st.rerun()
        return

    current = interval_at(resolved, st.session_state.position)
    total_seconds = current.minutes if fast else current.duration_seconds

    if not st.session_state.running:
        st.markdown(f"### {current.start_prompt}")
        yes, no = st.columns([1, 1])
        if yes.button("Yes"):
            st.session_state.running = True
            st.session_state.end_time = time.time() + total_seconds
            st.rerun()
        if no.button("No"):
            st.session_state.stopped = True
            st.rerun()
        return

    status = st.empty()
    prog = st.progress(0)
    remaining = int(st.session_state.end_time - time.time())
    if remaining <= 0:
        st.toast(f"{current.notification_title}. {current.notification_body}")
        st.session_state.completed += 1
        st.session_state.position += 1
        st.session_state.running = False
        time.sleep(0.8)
        st.rerun()
    else:
        mins, secs = divmod(remaining, 60)
        elapsed = total_seconds - remaining
        status.markdown(f"### ▶ {current.name}: {mins:02d}:{secs:02d}")
        prog.progress(min(100, elapsed * 100 // total_seconds))
        if st.button("Stop"):
            st.session_state.running = False
            st.session_state.stopped = True
            st.rerun()
        time.sleep(1)
        st.rerun()


if __name__ == "__main__":
    main()
