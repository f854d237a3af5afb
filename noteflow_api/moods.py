from __future__ import annotations

import random

DEFAULT_MOOD = "motivated"

MOODS = {
    "motivated": {
        "label": "Motivated",
        "description": "Ready to conquer the day!",
        "colors": {
            "primary": "orange-500",
            "secondary": "red-500",
            "accent": "yellow-400",
            "background": "orange-50",
        },
        "palette": {"primary": "#F97316", "secondary": "#EF4444", "accent": "#FACC15", "background": "#FFF7ED"},
        "music_type": "Upbeat Lofi",
        "task_placeholder": "What do you want to accomplish today?",
        "empty_state_message": "Add your first task and start crushing goals!",
        "animation": {"speed": "fast", "style": "bounce"},
        "typography": "bold",
    },
    "feelingLow": {
        "label": "Feeling Low",
        "description": "Take it easy today",
        "colors": {
            "primary": "blue-400",
            "secondary": "purple-400",
            "accent": "indigo-300",
            "background": "blue-50",
        },
        "palette": {"primary": "#60A5FA", "secondary": "#C084FC", "accent": "#A5B4FC", "background": "#EFF6FF"},
        "music_type": "Calming Piano Lofi",
        "task_placeholder": "What small step can you take today?",
        "empty_state_message": "Start with something small. You've got this.",
        "animation": {"speed": "slow", "style": "fade"},
        "typography": "gentle",
    },
    "energized": {
        "label": "Energized",
        "description": "Full of energy and ready to go!",
        "colors": {
            "primary": "cyan-500",
            "secondary": "green-400",
            "accent": "blue-500",
            "background": "cyan-50",
        },
        "palette": {"primary": "#06B6D4", "secondary": "#4ADE80", "accent": "#3B82F6", "background": "#ECFEFF"},
        "music_type": "High-Tempo Beats",
        "task_placeholder": "Channel that energy! What's next?",
        "empty_state_message": "Add tasks and make the most of your energy!",
        "animation": {"speed": "very-fast", "style": "pulse"},
        "typography": "dynamic",
    },
    "lazy": {
        "label": "Lazy",
        "description": "Taking it slow today",
        "colors": {
            "primary": "amber-300",
            "secondary": "rose-300",
            "accent": "orange-200",
            "background": "amber-50",
        },
        "palette": {"primary": "#FCD34D", "secondary": "#FDA4AF", "accent": "#FED7AA", "background": "#FFFBEB"},
        "music_type": "Slow Chill Beats",
        "task_placeholder": "What's one easy thing you can do?",
        "empty_state_message": "No rush. Add tasks when you're ready.",
        "animation": {"speed": "very-slow", "style": "float"},
        "typography": "relaxed",
    },
    "focused": {
        "label": "Focused",
        "description": "In the zone, distraction-free",
        "colors": {
            "primary": "gray-700",
            "secondary": "gray-900",
            "accent": "gray-500",
            "background": "gray-50",
        },
        "palette": {"primary": "#374151", "secondary": "#111827", "accent": "#6B7280", "background": "#F9FAFB"},
        "music_type": "Deep Focus",
        "task_placeholder": "What requires your focus today?",
        "empty_state_message": "Clear mind, clear tasks. Add what needs focus.",
        "animation": {"speed": "medium", "style": "minimal"},
        "typography": "clean",
    },
    "creative": {
        "label": "Creative",
        "description": "Ideas flowing freely",
        "colors": {
            "primary": "pink-400",
            "secondary": "purple-500",
            "accent": "violet-400",
            "background": "pink-50",
        },
        "palette": {"primary": "#F472B6", "secondary": "#A855F7", "accent": "#A78BFA", "background": "#FDF2F8"},
        "music_type": "Creative Jazz Hop",
        "task_placeholder": "What creative ideas are you working on?",
        "empty_state_message": "A blank canvas awaits your creative tasks!",
        "animation": {"speed": "medium", "style": "playful"},
        "typography": "artistic",
    },
}

MOOD_KEYS = list(MOODS.keys())

ANIMATION_SPEEDS = ["very-slow", "slow", "medium", "fast", "very-fast"]

MOOD_QUOTES = {
    "motivated": [
        "The only way to do great work is to love what you do.",
        "Success is not final, failure is not fatal: It is the courage to continue that counts.",
        "Believe you can and you're halfway there.",
        "Your limitation, it's only your imagination.",
        "Push yourself, because no one else is going to do it for you.",
    ],
    "feelingLow": [
        "This too shall pass.",
        "You don't have to be positive all the time. It's perfectly okay to feel sad, angry, or frustrated.",
        "Even the darkest night will end and the sun will rise.",
        "Be gentle with yourself. You're doing the best you can.",
        "Sometimes the bravest thing you can do is rest.",
    ],
    "energized": [
        "Your energy introduces you before you even speak.",
        "Life is like riding a bicycle. To keep your balance, you must keep moving.",
        "The higher your energy level, the more efficient your body. The better you feel.",
        "Energy and persistence conquer all things.",
        "Positive energy knows no boundaries.",
    ],
    "lazy": [
        "Sometimes doing nothing is everything.",
        "Rest is not idleness, and to lie sometimes on the grass under trees on a summer's day is by no means a waste of time.",
        "The time you enjoy wasting is not wasted time.",
        "Take a break. You deserve it.",
        "Embrace the pace of your own journey.",
    ],
    "focused": [
        "Concentrate all your thoughts upon the work in hand.",
        "Where focus goes, energy flows.",
        "The successful warrior is the average person, with laser-like focus.",
        "It's not that I'm so smart, it's just that I stay with problems longer.",
        "Focus on the journey, not the destination.",
    ],
    "creative": [
        "Creativity is intelligence having fun.",
        "You can't use up creativity. The more you use, the more you have.",
        "Creativity involves breaking out of established patterns in order to look at things in a different way.",
        "Every child is an artist. The problem is how to remain an artist once we grow up.",
        "Creativity takes courage.",
    ],
}

COMPACT_QUOTE_MAX_CHARS = 60

AFFIRMATIONS = [
    "Great job! One step closer to your goals.",
    "You did it! Keep that momentum going.",
    "Progress, not perfection. Well done!",
    "Another one down. You're on a roll!",
    "Small wins add up. Be proud of this one.",
    "That's how it's done!",
    "Nice work. Take a breath and enjoy it.",
    "You showed up and followed through.",
]

MOOD_MUSIC_CATEGORY = {
    "motivated": "lofi",
    "feelingLow": "classical",
    "energized": "jazz",
    "lazy": "lofi",
    "focused": "focus",
    "creative": "classical",
}


class UnknownMoodError(ValueError):
    pass


def get_mood(key: str) -> dict:
    try:
        return MOODS[key]
    except KeyError:
        raise UnknownMoodError(f"Unknown mood: {key!r}") from None


def normalize_mood(key) -> str:
    if key in MOODS:
        return key
    return DEFAULT_MOOD


def mood_quote(mood: str, compact: bool = False, rng: random.Random | None = None) -> str:
    """Pick a quote for the mood; compact mode prefers quotes that fit a phone screen."""
    rng = rng or random
    quotes = MOOD_QUOTES[normalize_mood(mood)]
    candidates = quotes
    if compact:
        candidates = [quote for quote in quotes if len(quote) < COMPACT_QUOTE_MAX_CHARS] or quotes
    return rng.choice(candidates)


def time_greeting(hour: int) -> str:
    if 5 <= hour < 12:
        return "Good Morning"
    if 12 <= hour < 17:
        return "Good Afternoon"
    if 17 <= hour < 21:
        return "Good Evening"
    return "Good Night"


def random_affirmation(rng: random.Random | None = None) -> str:
    return (rng or random).choice(AFFIRMATIONS)


def music_category_for(mood: str) -> str:
    return MOOD_MUSIC_CATEGORY.get(mood, "lofi")


def assistant_system_prompt(mood: str) -> str:
    data = MOODS[normalize_mood(mood)]
    return (
        "You are a helpful AI assistant integrated into NoteFlow, a mood-based productivity app. "
        f"The user's current mood is: {data['label']} - {data['description']}. "
        "Adapt your tone and responses to match this mood. Keep your responses concise, helpful, and supportive. "
        "You can help with productivity tips, answer questions about study topics, or provide general assistance."
    )


def focus_system_prompt(mood: str, task_text: str) -> str:
    data = MOODS[normalize_mood(mood)]
    return (
        "You are a helpful AI assistant in a focus mode for a task management app. "
        f'The user is currently working on the task: "{task_text}". '
        f"Their current mood is: {data['label']} - {data['description']}. "
        "Provide concise, helpful responses that help them complete their task. "
        "If they ask for sub-tasks, provide 3-5 clear, actionable steps. "
        "Format your response using Markdown for better readability."
    )
