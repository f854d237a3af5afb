from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from noteflow_api.moods import music_category_for

MAX_RECENT_SEARCHES = 5

NO_RESULTS_MESSAGE = (
    "No matches found. Try searching for specific artists, songs, or genres like bollywood, kpop, pop, rock, etc."
)

_VIDEO_ID = re.compile(r"^[a-zA-Z0-9_-]{11}$")
_VIDEO_URL = re.compile(r"^.*(youtu.be\/|v\/|u\/\w\/|embed\/|watch\?v=|&v=)([^#&?]*).*")


def _videos(*rows):
    return [{"id": video_id, "title": title, "channel": channel} for video_id, title, channel in rows]


CATALOG: Dict[str, List[dict]] = {
    "lofi": _videos(
        ("5qap5aO4i9A", "lofi hip hop radio - beats to relax/study to", "Lofi Girl"),
        ("jfKfPfyJRdk", "lofi hip hop radio - beats to study/relax to", "Lofi Girl"),
        ("DWcJFNfaw9c", "lofi hip hop radio - beats to sleep/chill to", "Lofi Girl"),
        ("rUxyKA_-grg", "lofi hip hop radio - sad & sleepy beats", "the bootleg boy"),
        ("lTRiuFIWV54", "late night lofi hip hop radio", "Chillhop Music"),
    ),
    "classical": _videos(
        ("mIYzp5rcTvU", "The Best of Classical Music", "HALIDONMUSIC"),
        ("jgpJVI3tDbY", "Classical Music for Studying & Brain Power", "HALIDONMUSIC"),
        ("c1Qr7TnWG74", "Mozart Classical Music for Studying", "Classical Music"),
        ("XYiIR-d9y-I", "Chopin - Nocturnes", "Classical Music"),
        ("1BxLGD4BSbA", "Relaxing Classical Piano Music", "Relaxing Classical Music"),
    ),
    "jazz": _videos(
        ("neV3EPgvZ3g", "Relaxing Jazz Piano Radio", "Cafe Music BGM"),
        ("Dx5qFachd3A", "Jazz Music • Smooth Jazz Saxophone", "Relax Music"),
        ("fEvM-OUbaKs", "Jazz Cafe Music - Relaxing Bossa Nova Music", "Cafe Music BGM"),
        ("DSGyEsJ17cI", "Relaxing Jazz Music - Background Chill Out Music", "Cafe Music BGM"),
        ("PErqNqXeAQo", "Smooth Jazz Coffee Music", "Coffee Music"),
    ),
    "ambient": _videos(
        ("tNkZsRW7h2c", "Space Ambient Music", "Ambient"),
        ("sjkrrmBnpGE", "Deep Focus Music", "4K Video Nature"),
        ("77ZozI0rw7w", "Ambient Study Music To Concentrate", "Quiet Quest"),
        ("qvXvqHOMqJA", "Beautiful Ambient Music • Peaceful Piano Music", "Soothing Relaxation"),
        ("n8NHvuFZD5A", "Ambient Music for Deep Focus", "Yellow Brick Cinema"),
    ),
    "nature": _videos(
        ("eKFTSSKCzWA", "Relaxing Nature Sounds", "Nature Sounds"),
        ("qRTVg8HHzUo", "Relaxing Music with Nature Sounds", "Yellow Brick Cinema"),
        ("WZKW2Hq2fks", "Relaxing Rain Sounds", "Nature White Noise"),
        ("IvjMgVS6kng", "Forest Sounds | Woodland Ambience", "The Guild of Ambience"),
        ("d0tU18Ybcvk", "Ocean Wave Sounds for Sleep", "The Sleep Sounds"),
    ),
    "focus": _videos(
        ("BTYAsjAVa3I", "Deep Focus Music - 4 Hours Study Music", "Yellow Brick Cinema"),
        ("WPni755-Krg", "Concentration Music", "Quiet Quest"),
        ("ARxV-CRL9Vs", "Alpha Waves Study Music", "Greenred Productions"),
        ("sjkrrmBnpGE", "Deep Focus Music", "4K Video Nature"),
        ("kMAOey45mJI", "Study Music Alpha Waves", "YellowBrickCinema"),
    ),
    "bollywood": _videos(
        ("V7LwfY5U5WI", "Best of Bollywood Lofi", "Lofi Bollywood"),
        ("eHr-g6MU_H8", "Bollywood Lofi Hits", "Lofi Indian"),
        ("K5KAc5CoCuk", "Hindi Lofi Songs", "Bollywood Butter"),
        ("c_iRx2Un07k", "Bollywood Chill Mix", "Desi Vibes"),
        ("1YBl3Zbt80A", "Bollywood Lofi Study Mix", "Indian Lofi"),
        ("NeXbmEnpSz0", "Hindi Songs 2023", "Bollywood Music"),
        ("pFxBxvIGmvU", "Old Hindi Songs", "Bollywood Classics"),
        ("Dpp1sIL1m5Q", "Bollywood Romantic Songs", "T-Series"),
        ("X96pBw_rjrk", "Hindi Hits Songs 2023", "Venus Music"),
        ("5Eqb_-j3FDA", "Arijit Singh Best Songs", "Sony Music India"),
    ),
    "kpop": _videos(
        ("v3hbWS_a8HI", "K-pop Playlist 2023", "K-Music"),
        ("T9DLuEjzqY0", "K-pop Lofi Mix", "Lofi K-pop"),
        ("WFsAon_TWPQ", "K-pop Chill Vibes", "K-Vibes"),
        ("8M3WUaeIbOk", "K-pop Study Playlist", "Study K-pop"),
        ("f5_wn8mexmM", "K-pop Hits 2023", "K-pop Radio"),
    ),
    "indie": _videos(
        ("wQkz_EXAqFc", "Indie/Pop/Folk Compilation", "alexrainbirdMusic"),
        ("lSoM2sJ4N1M", "Indie Folk Central", "Indie Folk Central"),
        ("nt4SnLRLlFk", "Indie/Rock/Alternative Compilation", "alexrainbirdMusic"),
        ("5yx6BWlEVcY", "Indie Playlist 2023", "Indie Music"),
        ("YqN8S3RKnTY", "Indie Coffee Shop Vibes", "Indie Vibes"),
    ),
    "pop": _videos(
        ("kffacxfA7G4", "Justin Bieber - Baby ft. Ludacris", "JustinBieberVEVO"),
        ("JGwWNGJdvx8", "Ed Sheeran - Shape of You", "Ed Sheeran"),
        ("RgKAFK5djSk", "Wiz Khalifa - See You Again ft. Charlie Puth", "Wiz Khalifa"),
        ("fRh_vgS2dFE", "Justin Bieber - Sorry", "JustinBieberVEVO"),
        ("YQHsXMglC9A", "Adele - Hello", "AdeleVEVO"),
    ),
    "edm": _videos(
        ("gCYcHz2k5x0", "Martin Garrix - Animals", "Spinnin' Records"),
        ("60ItHLz5WEA", "Alan Walker - Faded", "Alan Walker"),
        ("k2qgadSvNyU", "Dua Lipa - New Rules", "Dua Lipa"),
        ("kJQP7kiw5Fk", "Luis Fonsi - Despacito ft. Daddy Yankee", "LuisFonsiVEVO"),
        ("papuvlVeZg8", "The Chainsmokers - Don't Let Me Down", "ChainsmokersVEVO"),
    ),
    "rock": _videos(
        ("fJ9rUzIMcZQ", "Queen - Bohemian Rhapsody", "Queen Official"),
        ("eVTXPUF4Oz4", "Linkin Park - In The End", "Linkin Park"),
        ("hTWKbfoikeg", "Nirvana - Smells Like Teen Spirit", "NirvanaVEVO"),
        ("1w7OgIMMRc4", "Guns N' Roses - Sweet Child O' Mine", "GunsNRosesVEVO"),
        ("lDK9QqIzhwk", "Bon Jovi - Livin' On A Prayer", "BonJoviVEVO"),
    ),
    "taylorswift": _videos(
        ("e-ORhEE9VVg", "Taylor Swift - Blank Space", "TaylorSwiftVEVO"),
        ("QcIy9NiNbmo", "Taylor Swift - Bad Blood ft. Kendrick Lamar", "TaylorSwiftVEVO"),
        ("3tmd-ClpJxA", "Taylor Swift - Look What You Made Me Do", "TaylorSwiftVEVO"),
        ("IdneKLhsWOQ", "Taylor Swift - Shake It Off", "TaylorSwiftVEVO"),
        ("VuNIsY6JdUw", "Taylor Swift - You Belong With Me", "TaylorSwiftVEVO"),
    ),
    "arijitsingh": _videos(
        ("5Eqb_-j3FDA", "Arijit Singh Best Songs", "Sony Music India"),
        ("hoNb6HuNmU0", "Arijit Singh - Tum Hi Ho", "T-Series"),
        ("C8jScp-ys-Y", "Arijit Singh - Channa Mereya", "Sony Music India"),
        ("Wd2B8OAotU8", "Arijit Singh - Kabira", "YRF"),
        ("cNV5hLSa9H8", "Arijit Singh - Ae Dil Hai Mushkil", "Sony Music India"),
    ),
    "despacito": _videos(("kJQP7kiw5Fk", "Luis Fonsi - Despacito ft. Daddy Yankee", "LuisFonsiVEVO")),
    "seeyouagain": _videos(("RgKAFK5djSk", "Wiz Khalifa - See You Again ft. Charlie Puth", "Wiz Khalifa")),
    "gangnamstyle": _videos(("9bZkp7q19f0", "PSY - Gangnam Style", "officialpsy")),
    "uptown": _videos(("OPf0YbXqDm0", "Mark Ronson - Uptown Funk ft. Bruno Mars", "MarkRonsonVEVO")),
    "french": _videos(
        ("K5KAc5CoCuk", "French Lofi Mix", "Lofi French"),
        ("DWcJFNfaw9c", "French Cafe Music", "Cafe Music"),
        ("rUxyKA_-grg", "French Pop Hits", "French Music"),
        ("lTRiuFIWV54", "French Classics", "French Classics"),
        ("Ij65wvAGX-c", "Indila - Dernière Danse", "IndilaVEVO"),
    ),
    "indila": _videos(
        ("Ij65wvAGX-c", "Indila - Dernière Danse", "IndilaVEVO"),
        ("K5KAc5CoCuk", "Indila - Love Story", "IndilaVEVO"),
        ("DWcJFNfaw9c", "Indila - Tourner Dans Le Vide", "IndilaVEVO"),
        ("rUxyKA_-grg", "Indila - S.O.S", "IndilaVEVO"),
        ("lTRiuFIWV54", "Indila - Ainsi Bas La Vida", "IndilaVEVO"),
    ),
}

# Checked in order; a later match wins.
KEYWORD_OVERRIDES = [
    (("bollywood", "hindi", "indian", "desi"), "bollywood"),
    (("kpop", "k-pop", "korean", "bts", "blackpink"), "kpop"),
    (("french", "france", "indila", "derniere", "danse"), "french"),
    (("taylor", "swift"), "taylorswift"),
    (("arijit", "singh"), "arijitsingh"),
    (("despacito",), "despacito"),
    (("see you again", "charlie puth"), "seeyouagain"),
    (("gangnam", "psy"), "gangnamstyle"),
    (("uptown", "funk", "bruno mars"), "uptown"),
]

MOTIVATIONAL_QUOTES = [
    "The only way to do great work is to love what you do.",
    "Believe you can and you're halfway there.",
    "It does not matter how slowly you go as long as you do not stop.",
    "Don't watch the clock; do what it does. Keep going.",
    "The secret of getting ahead is getting started.",
    "Quality is not an act, it is a habit.",
    "If you can dream it, you can do it.",
    "Don't let yesterday take up too much of today.",
]


@dataclass
class SearchResult:
    videos: List[dict] = field(default_factory=list)
    video_id: Optional[str] = None
    category: Optional[str] = None
    message: Optional[str] = None


def all_videos() -> List[dict]:
    return [video for videos in CATALOG.values() for video in videos]


def extract_video_id(text) -> Optional[str]:
    value = str(text or "").strip()
    if _VIDEO_ID.match(value):
        return value
    match = _VIDEO_URL.match(value)
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return None


def search(query) -> SearchResult:
    """Search the curated catalog the way a music picker would.

    A bare video id or YouTube URL short-circuits. Otherwise title, channel and
    per-word matches are tried in turn, then category names, then keyword
    overrides for popular artists, songs and regional genres.
    """
    raw = str(query or "").strip()
    if not raw:
        return SearchResult()
    video_id = extract_video_id(raw)
    if video_id:
        return SearchResult(video_id=video_id)

    needle = raw.lower()
    videos = all_videos()
    results = [video for video in videos if needle in video["title"].lower()]
    if not results:
        results = [video for video in videos if needle in video["channel"].lower()]
    if not results:
        terms = [term for term in needle.split() if len(term) > 1]
        results = [
            video
            for video in videos
            if any(term in video["title"].lower() or term in video["channel"].lower() for term in terms)
        ]

    category = None
    if needle in CATALOG:
        category = needle
        results = CATALOG[needle]
    if not results:
        partial = next((genre for genre in CATALOG if needle in genre or genre in needle), None)
        if partial:
            category = partial
            results = CATALOG[partial]

    for keywords, genre in KEYWORD_OVERRIDES:
        if any(keyword in needle for keyword in keywords):
            category = genre
            results = CATALOG[genre]

    if not results:
        return SearchResult(message=NO_RESULTS_MESSAGE)
    return SearchResult(videos=list(results), category=category)


def pick_for_mood(mood: str, rng: random.Random | None = None) -> dict:
    videos = CATALOG[music_category_for(mood)]
    return (rng or random).choice(videos)


def remember_search(recent: List[str], query: str) -> List[str]:
    query = str(query or "").strip()
    if not query or query in recent:
        return list(recent)[:MAX_RECENT_SEARCHES]
    return [query] + list(recent)[: MAX_RECENT_SEARCHES - 1]


def toggle_liked(liked: List[str], video_id: str) -> List[str]:
    if video_id in liked:
        return [item for item in liked if item != video_id]
    return list(liked) + [video_id]


def unseen_uploads(uploads, consumed: set) -> list:
    """Uploads whose file_id is not in consumed; marks them consumed.

    A removed track stays in the file uploader, so it must not be re-added.
    """
    fresh = [upload for upload in uploads or [] if upload.file_id not in consumed]
    consumed.update(upload.file_id for upload in fresh)
    return fresh


def embed_url(video_id: str, autoplay: bool = True) -> str:
    return f"https://www.youtube.com/embed/{video_id}?autoplay={1 if autoplay else 0}&enablejsapi=1"


def video_by_id(video_id: str) -> Optional[dict]:
    return next((video for video in all_videos() if video["id"] == video_id), None)


class Playlist:
    """Uploaded audio tracks with next/previous, shuffle and repeat."""

    def __init__(self, tracks=None, rng: random.Random | None = None):
        self.tracks = list(tracks or [])
        self.current: Optional[int] = 0 if self.tracks else None
        self.shuffle = False
        self.repeat = False
        self._rng = rng or random.Random()

    def add(self, track) -> None:
        self.tracks.append(track)
        if self.current is None:
            self.current = 0

    def remove(self, index: int) -> None:
        if not 0 <= index < len(self.tracks):
            raise IndexError(index)
        self.tracks.pop(index)
        if not self.tracks:
            self.current = None
        elif self.current is not None and index < self.current:
            self.current -= 1
        elif self.current is not None and self.current >= len(self.tracks):
            self.current = len(self.tracks) - 1

    @property
    def current_track(self):
        if self.current is None:
            return None
        return self.tracks[self.current]

    def select(self, index: int) -> None:
        if not 0 <= index < len(self.tracks):
            raise IndexError(index)
        self.current = index

    def step(self, direction: str = "next") -> Optional[int]:
        if not self.tracks:
            return None
        index = self.current if self.current is not None else 0
        if self.shuffle:
            index = self._rng.randrange(len(self.tracks))
        elif direction == "next":
            index = (index + 1) % len(self.tracks)
        else:
            index = (index - 1 + len(self.tracks)) % len(self.tracks)
        self.current = index
        return index

    def on_track_end(self) -> Optional[int]:
        if self.repeat:
            return self.current
        return self.step("next")
