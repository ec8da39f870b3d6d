from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .models import Category, Difficulty, TimelineEvent

SLUG_MAX_LENGTH = 50
MAX_KEY_FACTS = 5
SLUG_INVALID_PATTERN = re.compile(r"[^a-z0-9\s]")
WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class CategoryStyle:
    color: str
    image: str
    objective: str


CATEGORY_STYLES: Dict[Category, CategoryStyle] = {
    Category.EMPIRE: CategoryStyle(
        color="#DC143C",
        image="https://images.pexels.com/photos/2064827/pexels-photo-2064827.jpeg",
        objective="Explore the political and administrative systems that characterized {title}",
    ),
    Category.EXPLORATION: CategoryStyle(
        color="#4169E1",
        image="https://images.pexels.com/photos/1118873/pexels-photo-1118873.jpeg",
        objective="Investigate the geographical and cultural discoveries made during {title}",
    ),
    Category.TECHNOLOGY: CategoryStyle(
        color="#32CD32",
        image="https://images.pexels.com/photos/159711/books-bookstore-book-reading-159711.jpeg",
        objective="Assess the technological innovations and their societal impact during {title}",
    ),
    Category.CULTURAL: CategoryStyle(
        color="#9932CC",
        image="https://images.pexels.com/photos/1266808/pexels-photo-1266808.jpeg",
        objective="Analyze the artistic and intellectual achievements of {title}",
    ),
    Category.MILITARY: CategoryStyle(
        color="#FF8C00",
        image="https://images.pexels.com/photos/161936/castle-hohenzollern-baden-wuerttemberg-germany-161936.jpeg",
        objective="Examine the military strategies and their consequences during {title}",
    ),
}

BEGINNER_KEYWORDS: Tuple[str, ...] = ("ancient rome", "world war", "renaissance")
ADVANCED_KEYWORDS: Tuple[str, ...] = ("philosophy", "complex", "theory")

TAG_KEYWORDS: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("ancient", ("ancient",)),
    ("medieval", ("medieval",)),
    ("modern", ("modern",)),
    ("warfare", ("war", "battle")),
    ("culture", ("culture", "art")),
    ("religion", ("religion",)),
    ("economics", ("trade", "economic")),
    ("politics", ("politics", "government")),
)

KEY_FACT_KEYWORDS: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("empire", "kingdom"), "It involved the rise and development of significant political powers"),
    (("war", "battle"), "Military conflicts played a major role in shaping events"),
    (("culture", "art"), "Cultural and artistic achievements were particularly notable"),
)


def slugify(title: str) -> str:
    lowered = SLUG_INVALID_PATTERN.sub("", title.lower()).strip()
    return WHITESPACE_PATTERN.sub("-", lowered)[:SLUG_MAX_LENGTH]


def category_color(category: Category) -> str:
    return CATEGORY_STYLES[category].color


def default_image(category: Category) -> str:
    return CATEGORY_STYLES[category].image


def determine_difficulty(title: str, description: str) -> Difficulty:
    text = f"{title} {description}".lower()
    if any(keyword in text for keyword in BEGINNER_KEYWORDS):
        return "beginner"
    if any(keyword in text for keyword in ADVANCED_KEYWORDS):
        return "advanced"
    return "intermediate"


def generate_tags(title: str, description: str, category: Category) -> List[str]:
    text = f"{title} {description}".lower()
    tags = [category.value]
    for tag, keywords in TAG_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            tags.append(tag)
    return list(dict.fromkeys(tags))


def learning_objectives(title: str, category: Category) -> List[str]:
    return [
        f"Understand the historical context and significance of {title}",
        f"Analyze the key factors that led to the development of {title}",
        f"Evaluate the long-term impact and legacy of {title}",
        "Examine the major figures and their contributions during this period",
        CATEGORY_STYLES[category].objective.format(title=title),
    ]


def key_facts(description: str, timeline: Sequence[TimelineEvent]) -> List[str]:
    """Summarise the timeline in at most five short statements."""
    span = abs(timeline[-1].year - timeline[0].year) if len(timeline) > 1 else 100
    facts = [
        f"This period lasted approximately {span} years",
        f"It involved {len(timeline)} major historical events and developments",
    ]
    lowered = description.lower()
    for keywords, fact in KEY_FACT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            facts.append(fact)
    facts += [
        "The period saw significant changes in political, social, and cultural structures",
        "Key developments during this time influenced subsequent historical periods",
        "This era is considered crucial for understanding broader historical patterns",
    ]
    return facts[:MAX_KEY_FACTS]
