import random
from types import SimpleNamespace

import pytest

from noteflow_ui import music


@pytest.mark.parametrize(
    "text",
    [
        "kJQP7kiw5Fk",
        "https://www.youtube.com/watch?v=kJQP7kiw5Fk&t=42",
        "https://youtu.be/kJQP7kiw5Fk",
        "https://www.youtube.com/embed/kJQP7kiw5Fk",
    ],
)
def test_extract_video_id(text):
    assert music.extract_video_id(text) == "kJQP7kiw5Fk"


def test_extract_video_id_rejects_other_text():
    assert music.extract_video_id("lofi beats") is None
    assert music.extract_video_id("https://youtu.be/short") is None
    assert music.extract_video_id(None) is None


def test_search_blank_query():
    assert music.search("   ") == music.SearchResult()


def test_search_direct_link_short_circuits():
    result = music.search("https://youtu.be/9bZkp7q19f0")
    assert result.video_id == "9bZkp7q19f0"
    assert result.videos == []


def test_search_category_name_returns_whole_category():
    result = music.search("Jazz")
    assert result.category == "jazz"
    assert result.videos == music.CATALOG["jazz"]


def test_search_channel_match():
    result = music.search("lofi girl")
    assert result.category is None
    assert {video["channel"] for video in result.videos} == {"Lofi Girl"}


def test_search_keyword_override_wins():
    assert music.search("korean ballads").category == "kpop"
    assert music.search("bruno mars").category == "uptown"
    assert music.search("indila derniere danse").category == "french"


def test_search_no_results_message():
    result = music.search("zzqqxx")
    assert result.videos == []
    assert result.message == music.NO_RESULTS_MESSAGE


def test_pick_for_mood_uses_mood_category():
    video = music.pick_for_mood("focused", random.Random(3))
    assert video in music.CATALOG["focus"]


def test_remember_search_newest_first_capped():
    recent = []
    for query in ["lofi", "jazz", "kpop", "rock", "edm", "pop"]:
        recent = music.remember_search(recent, query)
    assert recent == ["pop", "edm", "rock", "kpop", "jazz"]
    assert music.remember_search(recent, "kpop") == recent
    assert music.remember_search(recent, "  ") == recent


def test_toggle_liked():
    liked = music.toggle_liked([], "kJQP7kiw5Fk")
    assert liked == ["kJQP7kiw5Fk"]
    assert music.toggle_liked(liked, "kJQP7kiw5Fk") == []


def test_embed_url():
    assert music.embed_url("kJQP7kiw5Fk", autoplay=False) == (
        "https://www.youtube.com/embed/kJQP7kiw5Fk?autoplay=0&enablejsapi=1"
    )


def test_playlist_wraps_around():
    playlist = music.Playlist(["a", "b", "c"])
    assert playlist.step("previous") == 2
    assert playlist.step("next") == 0
    playlist.select(2)
    assert playlist.on_track_end() == 0


def test_playlist_repeat_and_shuffle():
    playlist = music.Playlist(["a", "b", "c"], rng=random.Random(7))
    playlist.repeat = True
    playlist.select(1)
    assert playlist.on_track_end() == 1
    playlist.repeat = False
    playlist.shuffle = True
    assert playlist.step("next") in {0, 1, 2}


def test_playlist_remove_keeps_current_track():
    playlist = music.Playlist(["a", "b", "c"])
    playlist.select(2)
    playlist.remove(0)
    assert playlist.current_track == "c"
    playlist.remove(1)
    assert playlist.current_track == "b"
    playlist.remove(0)
    assert playlist.current is None
    assert playlist.step() is None


def test_empty_playlist_add_selects_first():
    playlist = music.Playlist()
    assert playlist.current_track is None
    playlist.add("song")
    assert playlist.current_track == "song"


def test_removed_upload_is_not_added_back():
    consumed = set()
    song = SimpleNamespace(file_id="f1", name="song.mp3")
    other = SimpleNamespace(file_id="f2", name="other.mp3")
    playlist = music.Playlist()
    for upload in music.unseen_uploads([song], consumed):
        playlist.add({"name": upload.name})
    playlist.remove(0)

    fresh = music.unseen_uploads([song, other], consumed)
    assert [upload.name for upload in fresh] == ["other.mp3"]
    assert music.unseen_uploads(None, consumed) == []
