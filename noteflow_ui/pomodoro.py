from __future__ import annotations

import io
import time
import wave
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

FOCUS_PRESETS = [15, 20, 25, 30, 45, 60]
BREAK_PRESETS = [3, 5, 10, 15]
MAX_FOCUS_MINUTES = 120
MAX_BREAK_MINUTES = 60

ALARM_OPTIONS = {
    "chiptune": "Chiptune Alarm",
    "lofi": "Lofi Alarm",
    "retro": "Retro Game Alarm",
}
DEFAULT_ALARM = "chiptune"
DEFAULT_ALARM_VOLUME = 70

ALARM_SAMPLE_RATE = 22050
ALARM_FREQUENCY = 800


class InvalidDurationError(ValueError):
    pass


@dataclass
class TimerEvent:
    kind: str
    title: str
    description: str
    play_alarm: bool


def parse_duration(value, maximum: int) -> int:
    try:
        minutes = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidDurationError(f"Please enter a number between 1 and {maximum} minutes.") from None
    if not 0 < minutes <= maximum:
        raise InvalidDurationError(f"Please enter a number between 1 and {maximum} minutes.")
    return minutes


def format_seconds(seconds: float) -> str:
    total = max(0, int(seconds + 0.999))
    return f"{total // 60}:{total % 60:02d}"


class PomodoroTimer:
    """Focus/break countdown driven by an injectable monotonic clock.

    Nothing runs in the background: the UI calls ``tick`` on every rerun and
    the remaining time is derived from the clock reading at the last resume.
    """

    def __init__(
        self,
        focus_minutes: int = 25,
        break_minutes: int = 5,
        auto_start_breaks: bool = True,
        sound_enabled: bool = True,
        alarm: str = DEFAULT_ALARM,
        alarm_volume: int = DEFAULT_ALARM_VOLUME,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.focus_minutes = parse_duration(focus_minutes, MAX_FOCUS_MINUTES)
        self.break_minutes = parse_duration(break_minutes, MAX_BREAK_MINUTES)
        self.auto_start_breaks = auto_start_breaks
        self.sound_enabled = sound_enabled
        self.alarm = alarm if alarm in ALARM_OPTIONS else DEFAULT_ALARM
        self.alarm_volume = DEFAULT_ALARM_VOLUME
        self.set_alarm_volume(alarm_volume)
        self.mode = "focus"
        self.is_active = False
        self.is_paused = True
        self._clock = clock
        self._remaining = float(self.focus_minutes * 60)
        self._resumed_at: Optional[float] = None

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now

    @property
    def running(self) -> bool:
        return self.is_active and not self.is_paused

    def duration_seconds(self, mode: Optional[str] = None) -> int:
        mode = mode or self.mode
        return (self.focus_minutes if mode == "focus" else self.break_minutes) * 60

    def seconds_left(self, now: Optional[float] = None) -> float:
        if not self.running or self._resumed_at is None:
            return self._remaining
        return max(0.0, self._remaining - (self._now(now) - self._resumed_at))

    def progress(self, now: Optional[float] = None) -> float:
        total = self.duration_seconds()
        return (total - self.seconds_left(now)) / total * 100

    def formatted(self, now: Optional[float] = None) -> str:
        return format_seconds(self.seconds_left(now))

    def start(self, now: Optional[float] = None) -> None:
        if self.running:
            return
        self.is_active = True
        self.is_paused = False
        self._resumed_at = self._now(now)

    def pause(self, now: Optional[float] = None) -> None:
        if not self.running:
            return
        self._remaining = self.seconds_left(now)
        self._resumed_at = None
        self.is_paused = True

    def reset(self) -> None:
        self.is_active = False
        self.is_paused = True
        self._resumed_at = None
        self._remaining = float(self.duration_seconds())

    def tick(self, now: Optional[float] = None) -> Optional[TimerEvent]:
        now = self._now(now)
        if not self.running or self.seconds_left(now) > 0:
            return None
        if self.mode == "focus":
            completed_at = self._resumed_at + self._remaining
            self.mode = "break"
            self.reset()
            if self.auto_start_breaks:
                self.start(completed_at)
            return TimerEvent(
                kind="focus_complete",
                title="Focus session complete!",
                description="Time for a well-deserved break.",
                play_alarm=self.sound_enabled,
            )
        self.mode = "focus"
        self.reset()
        return TimerEvent(
            kind="break_complete",
            title="Break time's over!",
            description="Ready to focus again?",
            play_alarm=self.sound_enabled,
        )

    def switch_mode(self, mode: str) -> None:
        if mode not in {"focus", "break"}:
            raise ValueError(f"Unknown timer mode: {mode}")
        self.mode = mode
        self.reset()

    def set_focus_minutes(self, value) -> None:
        self.focus_minutes = parse_duration(value, MAX_FOCUS_MINUTES)
        if self.mode == "focus" and not self.is_active:
            self._remaining = float(self.duration_seconds())

    def set_break_minutes(self, value) -> None:
        self.break_minutes = parse_duration(value, MAX_BREAK_MINUTES)
        if self.mode == "break" and not self.is_active:
            self._remaining = float(self.duration_seconds())

    def set_alarm_volume(self, value) -> None:
        volume = int(value)
        if not 0 <= volume <= 100:
            raise ValueError("Alarm volume must be between 0 and 100")
        self.alarm_volume = volume

    def preferences(self) -> dict:
        return {
            "focus_minutes": self.focus_minutes,
            "break_minutes": self.break_minutes,
            "auto_start_breaks": self.auto_start_breaks,
            "sound_enabled": self.sound_enabled,
            "alarm": self.alarm,
            "alarm_volume": self.alarm_volume,
        }


def _alarm_wave(alarm: str, seconds: float) -> np.ndarray:
    t = np.linspace(0, seconds, int(ALARM_SAMPLE_RATE * seconds), endpoint=False)
    if alarm == "chiptune":
        signal = np.sign(np.sin(2 * np.pi * ALARM_FREQUENCY * t)) * 0.5
    elif alarm == "retro":
        steps = np.array([1.0, 1.25, 1.5, 2.0])
        freq = ALARM_FREQUENCY * steps[(t * 8).astype(int) % len(steps)]
        signal = 2 / np.pi * np.arcsin(np.sin(2 * np.pi * freq * t))
    else:
        signal = np.sin(2 * np.pi * ALARM_FREQUENCY * t) * np.exp(-3 * t)
    return signal


def alarm_wav_bytes(alarm: str = DEFAULT_ALARM, volume: int = DEFAULT_ALARM_VOLUME, seconds: float = 1.0) -> bytes:
    """Render the alarm as 16-bit mono WAV bytes for ``st.audio``."""
    signal = _alarm_wave(alarm, seconds) * (max(0, min(volume, 100)) / 100)
    samples = (np.clip(signal, -1, 1) * 32767).astype("<i2")
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as handle:
        handle.setnchannels(1)
        handle.setsampwidth(2)
        handle.setframerate(ALARM_SAMPLE_RATE)
        handle.writeframes(samples.tobytes())
    return buffer.getvalue()
