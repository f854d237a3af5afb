import logging

import streamlit as st

from noteflow_ui.data.repositories import save_preferences
from noteflow_ui.pomodoro import (
    ALARM_OPTIONS,
    BREAK_PRESETS,
    FOCUS_PRESETS,
    MAX_BREAK_MINUTES,
    MAX_FOCUS_MINUTES,
    InvalidDurationError,
    PomodoroTimer,
    alarm_wav_bytes,
)
from noteflow_ui.state import session_slices

logger = logging.getLogger(__name__)


def get_timer(ctx) -> PomodoroTimer:
    def _build():
        prefs = ctx.get("settings") or {}
        try:
            return PomodoroTimer(
                focus_minutes=prefs.get("focus_minutes", 25),
                break_minutes=prefs.get("break_minutes", 5),
                auto_start_breaks=bool(prefs.get("auto_start_breaks", True)),
                sound_enabled=bool(prefs.get("sound_enabled", True)),
                alarm=prefs.get("alarm", "chiptune"),
                alarm_volume=prefs.get("alarm_volume", 70),
            )
        except ValueError as exc:
            logger.warning("Ignoring stored timer preferences: %s", exc)
            return PomodoroTimer()

    return session_slices.setdefault("pomodoro", "timer", _build)


@st.fragment(run_every=1)
def render_timer_panel(ctx, compact=False):
    timer = get_timer(ctx)
    event = timer.tick()
    if event:
        st.toast(f"**{event.title}** {event.description}", icon="⏰")
        if event.play_alarm:
            st.audio(alarm_wav_bytes(timer.alarm, timer.alarm_volume), format="audio/wav", autoplay=True)

    label = "Focus" if timer.mode == "focus" else "Break"
    st.markdown(
        f"<div class='small-label'>{label} session</div><div class='timer-display'>{timer.formatted()}</div>",
        unsafe_allow_html=True,
    )
    st.progress(min(100, int(timer.progress())))

    cols = st.columns(4 if not compact else 2)
    if timer.running:
        if cols[0].button("Pause", key=f"pomodoro.pause.{compact}", use_container_width=True):
            timer.pause()
            st.rerun(scope="fragment")
    elif cols[0].button("Start", key=f"pomodoro.start.{compact}", type="primary", use_container_width=True):
        timer.start()
        st.rerun(scope="fragment")
    if cols[1].button("Reset", key=f"pomodoro.reset.{compact}", use_container_width=True):
        timer.reset()
        st.rerun(scope="fragment")
    if compact:
        return
    if cols[2].button("Focus", key="pomodoro.mode.focus", use_container_width=True, disabled=timer.mode == "focus"):
        timer.switch_mode("focus")
        st.rerun(scope="fragment")
    if cols[3].button("Break", key="pomodoro.mode.break", use_container_width=True, disabled=timer.mode == "break"):
        timer.switch_mode("break")
        st.rerun(scope="fragment")


def _apply_duration(setter, value):
    try:
        setter(value)
        return True
    except InvalidDurationError as exc:
        st.error(str(exc))
        return False


def render_duration_settings(timer):
    cols = st.columns(2)
    with cols[0]:
        st.markdown("<div class='small-label'>Focus length</div>", unsafe_allow_html=True)
        preset = st.segmented_control(
            "Focus presets",
            FOCUS_PRESETS,
            default=timer.focus_minutes if timer.focus_minutes in FOCUS_PRESETS else None,
            format_func=lambda value: f"{value}m",
            key="pomodoro.focus_preset",
            label_visibility="collapsed",
        )
        if preset and preset != timer.focus_minutes:
            _apply_duration(timer.set_focus_minutes, preset)
        custom = st.text_input(f"Custom focus (1-{MAX_FOCUS_MINUTES} min)", key="pomodoro.focus_custom")
        if st.button("Set focus", key="pomodoro.focus_custom_apply") and _apply_duration(timer.set_focus_minutes, custom):
            st.toast(f"Focus length set to {timer.focus_minutes} minutes.")
    with cols[1]:
        st.markdown("<div class='small-label'>Break length</div>", unsafe_allow_html=True)
        preset = st.segmented_control(
            "Break presets",
            BREAK_PRESETS,
            default=timer.break_minutes if timer.break_minutes in BREAK_PRESETS else None,
            format_func=lambda value: f"{value}m",
            key="pomodoro.break_preset",
            label_visibility="collapsed",
        )
        if preset and preset != timer.break_minutes:
            _apply_duration(timer.set_break_minutes, preset)
        custom = st.text_input(f"Custom break (1-{MAX_BREAK_MINUTES} min)", key="pomodoro.break_custom")
        if st.button("Set break", key="pomodoro.break_custom_apply") and _apply_duration(timer.set_break_minutes, custom):
            st.toast(f"Break length set to {timer.break_minutes} minutes.")


def render_sound_settings(timer):
    cols = st.columns(3)
    timer.auto_start_breaks = cols[0].toggle("Auto-start breaks", value=timer.auto_start_breaks, key="pomodoro.auto")
    timer.sound_enabled = cols[1].toggle("Sound", value=timer.sound_enabled, key="pomodoro.sound")
    alarms = list(ALARM_OPTIONS)
    timer.alarm = cols[2].selectbox(
        "Alarm",
        alarms,
        index=alarms.index(timer.alarm),
        format_func=lambda value: ALARM_OPTIONS[value],
        key="pomodoro.alarm",
    )
    timer.set_alarm_volume(
        st.slider("Alarm volume", 0, 100, value=timer.alarm_volume, key="pomodoro.volume", disabled=not timer.sound_enabled)
    )
    if st.button("Test alarm", key="pomodoro.test_alarm", disabled=not timer.sound_enabled):
        st.audio(alarm_wav_bytes(timer.alarm, timer.alarm_volume), format="audio/wav", autoplay=True)


def render_pomodoro_tab(ctx):
    st.markdown("<div class='section-title'>Pomodoro timer</div>", unsafe_allow_html=True)
    with st.container(border=True):
        render_timer_panel(ctx)

    timer = get_timer(ctx)
    with st.expander("Timer settings", expanded=False):
        render_duration_settings(timer)
        st.divider()
        render_sound_settings(timer)
        if st.button("Save preferences", key="pomodoro.save", type="primary"):
            if save_preferences(timer.preferences(), ctx["guest_file"], ctx.signed_in):
                st.success("Timer preferences saved.")
            else:
                st.warning("Could not save preferences. They will apply to this session only.")
