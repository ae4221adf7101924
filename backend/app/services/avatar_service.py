"""
Chartwise Backend — Avatar & Nickname Generators
==================================================

What:  Random avatar and nickname generation for new profiles.
How:   Draws from fixed tables with the `random` module. No database access;
       the uniqueness-retry loop for nicknames lives in ProfileService.

Avatar format:
    "<emoji>|<css gradient>"  e.g. "🚀|linear-gradient(135deg, #667eea 0%, #764ba2 100%)"
    40 emojis × 20 gradients = 800 possible avatars.

Nickname format:
    <Adjective><Noun><0-999>  e.g. "StellarNavigator42"
    24 adjectives × 24 nouns × 1000 numbers = 576,000 possible nicknames.
"""

import random
from typing import List, Tuple

AVATAR_SEPARATOR = "|"

EMOJIS: Tuple[str, ...] = (
    "💻", "⚡", "🚀", "📊", "📈", "📉", "🎯", "🔧", "⚙️", "🛠️",
    "🔬", "🧪", "📱", "💡", "🔍", "📋", "📌", "📎", "🔗", "💾",
    "💿", "📀", "🖥️", "⌨️", "🖱️", "📟", "☁️", "🌐", "🔐", "🔑",
    "🗝️", "🤖", "🧩", "🎮", "🕹️", "📡", "📻", "⏰", "⏱️", "🔌",
)

GRADIENTS: Tuple[str, ...] = (
    "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
    "linear-gradient(135deg, #f093fb 0%, #f5576c 100%)",
    "linear-gradient(135deg, #4facfe 0%, #00f2fe 100%)",
    "linear-gradient(135deg, #43e97b 0%, #38f9d7 100%)",
    "linear-gradient(135deg, #fa709a 0%, #fee140 100%)",
    "linear-gradient(135deg, #a8edea 0%, #fed6e3 100%)",
    "linear-gradient(135deg, #ff9a9e 0%, #fecfef 100%)",
    "linear-gradient(135deg, #ffecd2 0%, #fcb69f 100%)",
    "linear-gradient(135deg, #a18cd1 0%, #fbc2eb 100%)",
    "linear-gradient(135deg, #fad0c4 0%, #ffd1ff 100%)",
    "linear-gradient(135deg, #ffeef8 0%, #c7d2fe 100%)",
    "linear-gradient(135deg, #f6d365 0%, #fda085 100%)",
    "linear-gradient(135deg, #96fbc4 0%, #f9f586 100%)",
    "linear-gradient(135deg, #f4f4f4 0%, #e8e8e8 100%)",
    "linear-gradient(135deg, #ff6b6b 0%, #feca57 100%)",
    "linear-gradient(135deg, #48cae4 0%, #023e8a 100%)",
    "linear-gradient(135deg, #06ffa5 0%, #0080ff 100%)",
    "linear-gradient(135deg, #ff0084 0%, #33001b 100%)",
    "linear-gradient(135deg, #00c6ff 0%, #0072ff 100%)",
    "linear-gradient(135deg, #fdbb2d 0%, #22c1c3 100%)",
)

ADJECTIVES: Tuple[str, ...] = (
    "Awesome", "Creative", "Dynamic", "Energetic", "Fantastic", "Genuine",
    "Happy", "Innovative", "Joyful", "Keen", "Lively", "Motivated",
    "Noble", "Optimistic", "Passionate", "Quick", "Radiant", "Stellar",
    "Talented", "Unique", "Vibrant", "Wonderful", "Extraordinary", "Zealous",
)

NOUNS: Tuple[str, ...] = (
    "Analyst", "Builder", "Creator", "Developer", "Explorer", "Genius",
    "Hero", "Innovator", "Journeyer", "Knight", "Leader", "Master",
    "Navigator", "Oracle", "Pioneer", "Quester", "Researcher", "Strategist",
    "Thinker", "Visionary", "Warrior", "Expert", "Champion", "Wizard",
)

NICKNAME_NUMBER_LIMIT = 1000


def generate_random_avatar() -> str:
    """Pick one emoji and one gradient and join them as an avatar string."""
    return f"{random.choice(EMOJIS)}{AVATAR_SEPARATOR}{random.choice(GRADIENTS)}"


def all_avatars() -> List[str]:
    """Every emoji × gradient combination, emoji-major order."""
    return [
        f"{emoji}{AVATAR_SEPARATOR}{gradient}"
        for emoji in EMOJIS
        for gradient in GRADIENTS
    ]


def generate_random_nickname() -> str:
    """Adjective + noun + number, with no uniqueness guarantee."""
    adjective = random.choice(ADJECTIVES)
    noun = random.choice(NOUNS)
    number = random.randrange(NICKNAME_NUMBER_LIMIT)
    return f"{adjective}{noun}{number}"
