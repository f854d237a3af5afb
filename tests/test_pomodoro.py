import io
import wave

import pytest

from noteflow_ui.pomodoro import (
    InvalidDurationError,
    PomodoroTimer,
    alarm_wav_bytes,
    format_seconds,
    parse_duration,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def test_defaults(clock):
    timer = PomodoroTimer(clock=clock)
    assert timer.mode == "focus"
    assert timer.formatted() == "25:00"
    assert timer.progress() == 0
    assert not timer.running


def test_countdown_pause_and_resume(clock):
    timer = PomodoroTimer(clock=clock)
    timer.start()
    clock.advance(90)
    assert timer.formatted() == "23:30"
    timer.pause()
    clock.advance(600)
    assert timer.formatted() == "23:30"
    timer.start()
    clock.advance(30)
    assert timer.seconds_left() == 23 * 60
    assert timer.progress() == pytest.approx(8.0)


def test_focus_completion_auto_starts_break(clock):
    timer = PomodoroTimer(focus_minutes=1, break_minutes=3, clock=clock)
    timer.start()
    clock.advance(59)
    assert timer.tick() is None
    clock.advance(1)
    event = timer.tick()
    assert event.kind == "focus_complete"
    assert event.title == "Focus session complete!"
    assert event.play_alarm is True
    assert timer.mode == "break"
    assert timer.running
    clock.advance(60)
    assert timer.formatted() == "2:00"


def test_late_tick_starts_break_when_focus_ended(clock):
    timer = PomodoroTimer(focus_minutes=1, break_minutes=3, clock=clock)
    timer.start()
    clock.advance(30)
    timer.pause()
    timer.start()
    clock.advance(60)
    assert timer.tick().kind == "focus_complete"
    assert timer.seconds_left() == 150


def test_focus_completion_without_auto_start(clock):
    timer = PomodoroTimer(focus_minutes=1, auto_start_breaks=False, sound_enabled=False, clock=clock)
    timer.start()
    clock.advance(61)
    event = timer.tick()
    assert event.play_alarm is False
    assert timer.mode == "break"
    assert not timer.running
    assert timer.formatted() == "5:00"


def test_break_completion_returns_to_paused_focus(clock):
    timer = PomodoroTimer(focus_minutes=1, break_minutes=1, clock=clock)
    timer.switch_mode("break")
    timer.start()
    clock.advance(60)
    event = timer.tick()
    assert event.kind == "break_complete"
    assert event.title == "Break time's over!"
    assert timer.mode == "focus"
    assert not timer.is_active
    assert timer.formatted() == "1:00"


def test_changing_duration_only_resets_idle_current_mode(clock):
    timer = PomodoroTimer(clock=clock)
    timer.set_break_minutes(10)
    assert timer.formatted() == "25:00"
    timer.set_focus_minutes(45)
    assert timer.formatted() == "45:00"
    timer.start()
    clock.advance(60)
    timer.set_focus_minutes(15)
    assert timer.formatted() == "44:00"
    assert timer.focus_minutes == 15


def test_reset_restores_full_duration(clock):
    timer = PomodoroTimer(clock=clock)
    timer.start()
    clock.advance(100)
    timer.reset()
    assert timer.formatted() == "25:00"
    assert not timer.is_active


@pytest.mark.parametrize("value,maximum", [("0", 120), ("121", 120), ("61", 60), ("abc", 60), (None, 60)])
def test_parse_duration_rejects(value, maximum):
    with pytest.raises(InvalidDurationError):
        parse_duration(value, maximum)


def test_parse_duration_accepts_whitespace():
    assert parse_duration(" 45 ", 120) == 45


def test_invalid_constructor_values():
    with pytest.raises(InvalidDurationError):
        PomodoroTimer(break_minutes=61)
    with pytest.raises(ValueError):
        PomodoroTimer(alarm_volume=150)


def test_switch_mode_rejects_unknown():
    with pytest.raises(ValueError):
        PomodoroTimer().switch_mode("nap")


def test_format_seconds_rounds_up_partial_seconds():
    assert format_seconds(59.2) == "1:00"
    assert format_seconds(0) == "0:00"
    assert format_seconds(-3) == "0:00"


def test_preferences_round_trip_keys():
    prefs = PomodoroTimer(focus_minutes=30, alarm="retro", alarm_volume=40).preferences()
    assert prefs == {
        "focus_minutes": 30,
        "break_minutes": 5,
        "auto_start_breaks": True,
        "sound_enabled": True,
        "alarm": "retro",
        "alarm_volume": 40,
    }


@pytest.mark.parametrize("alarm", ["chiptune", "lofi", "retro"])
def test_alarm_wav_bytes(alarm):
    data = alarm_wav_bytes(alarm, volume=50, seconds=0.25)
    with wave.open(io.BytesIO(data)) as handle:
        assert handle.getnchannels() == 1
        assert handle.getsampwidth() == 2
        assert handle.getnframes() == int(handle.getframerate() * 0.25)
