import streamlit as st

from noteflow_api.moods import MOODS, normalize_mood

THEME_PRESETS = {
    "dark": {
        "bg_main": "#0f1115",
        "bg_card": "#181b22",
        "bg_panel": "#20242d",
        "border": "#333947",
        "text_main": "#f3f4f6",
        "text_soft": "#9ca3af",
        "plot_grid": "#2a2f3a",
        "shadow": "rgba(0, 0, 0, 0.45)",
    },
    "light": {
        "bg_main": "#ffffff",
        "bg_card": "#ffffff",
        "bg_panel": "#f8fafc",
        "border": "#e5e7eb",
        "text_main": "#111827",
        "text_soft": "#6b7280",
        "plot_grid": "#eef0f3",
        "shadow": "rgba(17, 24, 39, 0.08)",
    },
}

ANIMATION_DURATIONS = {
    "very-slow": "1.6s",
    "slow": "1.1s",
    "medium": "0.7s",
    "fast": "0.45s",
    "very-fast": "0.3s",
}

TYPOGRAPHY_WEIGHTS = {
    "bold": 700,
    "gentle": 400,
    "dynamic": 600,
    "relaxed": 400,
    "clean": 500,
    "artistic": 600,
}


THEME_STATE_KEY = "noteflow.theme"


def get_active_theme():
    name = st.session_state.get(THEME_STATE_KEY)
    if name not in THEME_PRESETS:
        name = st.session_state[THEME_STATE_KEY] = "light"
    return name, THEME_PRESETS[name]


def set_theme(name):
    st.session_state[THEME_STATE_KEY] = name if name in THEME_PRESETS else "light"


def mood_palette(mood):
    mood_data = MOODS[normalize_mood(mood)]
    palette = dict(mood_data["palette"])
    palette["animation"] = ANIMATION_DURATIONS.get(mood_data["animation"]["speed"], "0.7s")
    palette["weight"] = TYPOGRAPHY_WEIGHTS.get(mood_data["typography"], 500)
    return palette


def inject_theme_css(mood) -> dict:
    active_name, active_theme = get_active_theme()
    palette = mood_palette(mood)
    background = palette["background"] if active_name == "light" else active_theme["bg_main"]

    root_vars = f"""
:root {{
    --bg-main: {background};
    --bg-card: {active_theme['bg_card']};
    --bg-panel: {active_theme['bg_panel']};
    --border: {active_theme['border']};
    --text-main: {active_theme['text_main']};
    --text-soft: {active_theme['text_soft']};
    --shadow: {active_theme['shadow']};
    --mood-primary: {palette['primary']};
    --mood-secondary: {palette['secondary']};
    --mood-accent: {palette['accent']};
    --mood-speed: {palette['animation']};
    --mood-weight: {palette['weight']};
}}
"""

    st.markdown(
        "<style>"
        + root_vars
        + """
.stApp {
    background: var(--bg-main);
    color: var(--text-main);
    transition: background var(--mood-speed) ease;
}

h1, h2, h3, .page-title {
    font-weight: var(--mood-weight);
}

.page-title {
    font-size: 30px;
    background: linear-gradient(90deg, var(--mood-primary), var(--mood-secondary));
    -webkit-background-clip: text;
    -webkit-text-fill-color: transparent;
}

.section-title {
    font-size: 15px;
    font-weight: 600;
    margin: 0 0 8px 0;
}

.small-label {
    color: var(--text-soft);
    font-size: 12px;
    letter-spacing: 0.2px;
}

.card {
    background: var(--bg-card);
    border: 1px solid var(--border);
    border-left: 4px solid var(--mood-primary);
    border-radius: 14px;
    padding: 14px 16px;
    margin-bottom: 12px;
    box-shadow: 0 8px 20px var(--shadow);
}

.quote-card {
    background: linear-gradient(135deg, var(--mood-primary), var(--mood-secondary));
    color: #ffffff;
    border-radius: 14px;
    padding: 12px 16px;
    font-style: italic;
}

.task-meta {
    color: var(--text-soft);
    font-size: 12px;
}

.pill {
    display: inline-block;
    border-radius: 999px;
    padding: 1px 8px;
    font-size: 11px;
    color: #ffffff;
    margin-right: 6px;
}

.timer-display {
    font-size: 64px;
    font-weight: 700;
    text-align: center;
    color: var(--mood-primary);
    font-variant-numeric: tabular-nums;
}

.stButton>button {
    border-radius: 10px;
    border: 1px solid var(--border);
    transition: transform var(--mood-speed) ease;
}

.stButton>button:hover {
    border-color: var(--mood-primary);
    color: var(--mood-primary);
}

.stProgress > div > div > div > div {
    background-color: var(--mood-primary);
}
</style>
""",
        unsafe_allow_html=True,
    )
    return {"name": active_name, "palette": palette, **active_theme}
