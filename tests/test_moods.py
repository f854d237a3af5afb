import random

import pytest

from noteflow_api import moods


def test_six_moods_with_palettes():
    assert moods.MOOD_KEYS == ["motivated", "feelingLow", "energized", "lazy", "focused", "creative"]
    for data in moods.MOODS.values():
        assert data["animation"]["speed"] in moods.ANIMATION_SPEEDS
        assert set(data["palette"]) == {"primary", "secondary", "accent", "background"}


def test_get_mood_and_normalize():
    assert moods.get_mood("lazy")["label"] == "Lazy"
    with pytest.raises(moods.UnknownMoodError):
        moods.get_mood("grumpy")
    assert moods.normalize_mood("grumpy") == "motivated"
    assert moods.normalize_mood(None) == "motivated"


@pytest.mark.parametrize(
    "hour,greeting",
    [(4, "Good Night"), (5, "Good Morning"), (11, "Good Morning"), (12, "Good Afternoon"),
     (17, "Good Evening"), (21, "Good Night")],
)
def test_time_greeting(hour, greeting):
    assert moods.time_greeting(hour) == greeting


def test_compact_quote_is_short():
    rng = random.Random(0)
    for _ in range(20):
        assert len(moods.mood_quote("lazy", compact=True, rng=rng)) < moods.COMPACT_QUOTE_MAX_CHARS


def test_quote_comes_from_mood():
    assert moods.mood_quote("focused", rng=random.Random(1)) in moods.MOOD_QUOTES["focused"]


def test_music_category_for_mood():
    assert moods.music_category_for("focused") == "focus"
    assert moods.music_category_for("unknown") == "lofi"


def test_system_prompts_mention_mood():
    assert "Feeling Low - Take it easy today" in moods.assistant_system_prompt("feelingLow")
    assert '"Read chapter 3"' in moods.focus_system_prompt("focused", "Read chapter 3")
