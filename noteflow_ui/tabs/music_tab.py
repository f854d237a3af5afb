import html
import random

import streamlit as st
import streamlit.components.v1 as components

from noteflow_api.moods import music_category_for
from noteflow_ui import music
from noteflow_ui.data.repositories import list_liked_videos, save_preferences, set_video_liked
from noteflow_ui.state import session_slices


def _liked_ids(ctx):
    if ctx.signed_in:
        return session_slices.setdefault("music", "liked", list_liked_videos)
    return list(ctx["guest_file"].get("liked_videos") or [])


def _toggle_like(ctx, video):
    liked = _liked_ids(ctx)
    updated = music.toggle_liked(liked, video["id"])
    if ctx.signed_in:
        set_video_liked(video, video["id"] in updated)
        session_slices.set_value("music", "liked", updated)
    else:
        ctx["guest_file"].set("liked_videos", updated)


def _play(video_id):
    session_slices.set_value("music", "now_playing", video_id)


def _recent_searches(ctx):
    return session_slices.setdefault(
        "music", "recent", lambda: list((ctx.get("settings") or {}).get("recent_searches") or [])
    )


def _run_search(ctx, query):
    result = music.search(query)
    session_slices.set_value("music", "result", result)
    if result.video_id:
        _play(result.video_id)
    recent = music.remember_search(_recent_searches(ctx), query)
    if recent != _recent_searches(ctx):
        session_slices.set_value("music", "recent", recent)
        save_preferences({"recent_searches": recent}, ctx["guest_file"], ctx.signed_in)


def render_player(ctx):
    video_id = session_slices.get_value("music", "now_playing")
    if not video_id:
        st.markdown(
            f"<div class='quote-card'>{html.escape(random.choice(music.MOTIVATIONAL_QUOTES))}</div>",
            unsafe_allow_html=True,
        )
        return
    components.iframe(music.embed_url(video_id), height=315)
    video = music.video_by_id(video_id) or {"id": video_id, "title": "YouTube video", "channel": ""}
    cols = st.columns([0.8, 0.2])
    cols[0].markdown(f"**{html.escape(video['title'])}**  \n{html.escape(video['channel'])}")
    liked = video_id in _liked_ids(ctx)
    if cols[1].button("♥ Liked" if liked else "♡ Like", key="music.like_current"):
        _toggle_like(ctx, video)
        st.rerun()


def render_video_list(ctx, videos, key_prefix):
    liked = _liked_ids(ctx)
    for video in videos:
        cols = st.columns([0.65, 0.2, 0.15])
        cols[0].markdown(f"**{html.escape(video['title'])}**  \n<span class='task-meta'>{html.escape(video['channel'])}</span>",
                         unsafe_allow_html=True)
        if cols[1].button("Play", key=f"{key_prefix}.play.{video['id']}"):
            _play(video["id"])
            st.rerun()
        if cols[2].button("♥" if video["id"] in liked else "♡", key=f"{key_prefix}.like.{video['id']}"):
            _toggle_like(ctx, video)
            st.rerun()


def render_search(ctx):
    with st.form("music.search_form"):
        query = st.text_input("Search music, artists or paste a YouTube link", key="music.query")
        submitted = st.form_submit_button("Search")
    if submitted:
        _run_search(ctx, query)

    recent = _recent_searches(ctx)
    if recent:
        st.markdown("<div class='small-label'>Recent searches</div>", unsafe_allow_html=True)
        cols = st.columns(len(recent))
        for idx, (col, item) in enumerate(zip(cols, recent)):
            if col.button(item, key=f"music.recent.{idx}"):
                _run_search(ctx, item)

    result = session_slices.get_value("music", "result")
    if not result:
        return
    if result.message:
        st.info(result.message)
    elif result.videos:
        if result.category:
            st.caption(f"Showing {result.category} picks")
        render_video_list(ctx, result.videos, "music.result")


def render_playlist():
    playlist = session_slices.setdefault("music", "playlist", music.Playlist)
    uploads = st.file_uploader(
        "Add audio files", type=["mp3", "wav", "ogg", "m4a"], accept_multiple_files=True, key="music.uploads"
    )
    consumed = session_slices.setdefault("music", "consumed_uploads", set)
    for upload in music.unseen_uploads(uploads, consumed):
        playlist.add({"name": upload.name, "data": upload.getvalue(), "mime": upload.type or "audio/mpeg"})

    track = playlist.current_track
    if not track:
        st.caption("Upload audio files to build a local playlist.")
        return
    st.markdown(f"**Now playing:** {html.escape(track['name'])}")
    st.audio(track["data"], format=track["mime"], autoplay=True, loop=playlist.repeat)
    cols = st.columns(4)
    if cols[0].button("⏮ Previous", key="music.prev"):
        playlist.step("previous")
        st.rerun()
    if cols[1].button("Next ⏭", key="music.next"):
        playlist.step("next")
        st.rerun()
    playlist.shuffle = cols[2].toggle("Shuffle", value=playlist.shuffle, key="music.shuffle")
    playlist.repeat = cols[3].toggle("Repeat", value=playlist.repeat, key="music.repeat")

    for idx, item in enumerate(playlist.tracks):
        row = st.columns([0.7, 0.15, 0.15])
        marker = "▶ " if idx == playlist.current else ""
        row[0].write(f"{marker}{item['name']}")
        if row[1].button("Play", key=f"music.track.play.{idx}"):
            playlist.select(idx)
            st.rerun()
        if row[2].button("Remove", key=f"music.track.remove.{idx}"):
            playlist.remove(idx)
            st.rerun()


def render_music_tab(ctx):
    mood = ctx.mood
    st.markdown("<div class='section-title'>Music</div>", unsafe_allow_html=True)
    render_player(ctx)
    if st.button(f"Play something {music_category_for(mood)} for my mood", key="music.for_mood"):
        _play(music.pick_for_mood(mood)["id"])
        st.rerun()

    youtube_tab, liked_tab, local_tab = st.tabs(["YouTube", "Liked", "My files"])
    with youtube_tab:
        render_search(ctx)
        with st.expander("Browse categories"):
            category = st.selectbox("Category", list(music.CATALOG), key="music.category")
            render_video_list(ctx, music.CATALOG[category], "music.browse")
    with liked_tab:
        liked = [music.video_by_id(video_id) or {"id": video_id, "title": video_id, "channel": "YouTube"}
                 for video_id in _liked_ids(ctx)]
        if liked:
            render_video_list(ctx, liked, "music.liked")
        else:
            st.caption("Videos you like will show up here.")
    with local_tab:
        render_playlist()
