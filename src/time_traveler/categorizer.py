from __future__ import annotations

from typing import Dict, Tuple

from .models import Category

DEFAULT_CATEGORY = Category.EMPIRE

# Checked in insertion order; the first cluster with a hit wins, so a text
# mentioning both "empire" and "war" is an empire.
CATEGORY_KEYWORDS: Dict[Category, Tuple[str, ...]] = {
    Category.EMPIRE: ("empire", "kingdom", "dynasty", "civilization"),
    Category.EXPLORATION: ("exploration", "discovery", "voyage", "expedition"),
    Category.TECHNOLOGY: ("invention", "technology", "industrial", "revolution"),
    Category.CULTURAL: ("art", "culture", "renaissance", "literature", "philosophy"),
    Category.MILITARY: ("war", "battle", "military", "conquest", "invasion"),
}


def categorize(title: str, description: str = "") -> Category:
    lowercase = f"{title} {description}".lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lowercase for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
