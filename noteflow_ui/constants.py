APP_TITLE = "NoteFlow"
APP_TAGLINE = "Your mood-adaptive workspace"

FEATURES = [
    (
        "🎭",
        "Mood-Based Experience",
        "The entire app adapts to your current mood, from colors to animations and music suggestions.",
    ),
    (
        "🎧",
        "Integrated Music Player",
        "Listen to mood-appropriate music directly in the app while you work on your tasks.",
    ),
    (
        "✅",
        "Advanced Task Management",
        "Create tasks with unlimited sub-tasks, track progress, and organize your work with a beautiful interface.",
    ),
    (
        "🎯",
        "Immersive Focus Mode",
        "Enter a distraction-free environment for deep work with built-in timer, notes, and AI assistance.",
    ),
    (
        "🤖",
        "AI-Powered Assistant",
        "Get help breaking down tasks, overcoming blocks, and staying motivated with context-aware AI.",
    ),
    (
        "📄",
        "PDF Document Viewer",
        "Read and study PDF documents without leaving the app, with music controls still accessible.",
    ),
]

CATEGORY_LABELS = {
    "personal": "Personal",
    "work": "Work",
    "study": "Study",
    "other": "Other",
}

SUBTASK_STATUS_LABELS = {
    "todo": "To do",
    "inProgress": "In progress",
    "done": "Done",
}

DUE_TONE_COLORS = {
    "overdue": "#EF4444",
    "today": "#F59E0B",
    "tomorrow": "#3B82F6",
    "later": "#6B7280",
}

FOCUS_PROMPT_BUTTONS = [
    ("stuck", "I'm stuck"),
    ("breakdown", "Break it down"),
    ("motivation", "Need motivation"),
    ("research", "Research mode"),
]
