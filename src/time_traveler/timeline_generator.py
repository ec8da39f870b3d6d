from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .models import EventType, TimelineEvent

MIN_EVENTS = 3
MAX_EVENTS = 8
YEARS_PER_EVENT = 50
MAX_SIGNIFICANCE = 10

INTERIOR_TYPE_CYCLE: Sequence[EventType] = (
    EventType.MAJOR,
    EventType.BATTLE,
    EventType.TREATY,
    EventType.DISCOVERY,
)

BASE_SIGNIFICANCE: Dict[EventType, int] = {
    EventType.MILESTONE: 9,
    EventType.DISCOVERY: 8,
    EventType.MAJOR: 7,
    EventType.BATTLE: 6,
    EventType.TREATY: 6,
    EventType.MINOR: 4,
}

LEADER_TITLES: Sequence[str] = (
    "Emperor",
    "King",
    "Queen",
    "General",
    "Admiral",
    "Chancellor",
    "Pope",
    "Sultan",
)
LEADER_NAMES: Sequence[str] = (
    "Alexander",
    "Constantine",
    "Augustus",
    "Marcus",
    "Julius",
    "Helena",
    "Theodora",
    "Justinian",
)


@dataclass(frozen=True)
class EventTemplate:
    title: str
    description: str
    impact: str


# The first record opens the timeline and the last one closes it. Interior
# position i uses record 1 + i % 7, so the first interior event is "Major
# Expansion" and record 1 is never reached by an eight-event timeline.
EVENT_TEMPLATES: Sequence[EventTemplate] = (
    EventTemplate(
        title="Beginning of {topic}",
        description="The initial establishment and founding of {topic} marked a significant turning point in history.",
        impact="Established the foundation for future developments and set important precedents.",
    ),
    EventTemplate(
        title="Early Development",
        description="Early developments and organizational structures began to take shape during this period.",
        impact="Strengthened political and social structures that would endure for generations.",
    ),
    EventTemplate(
        title="Major Expansion",
        description="Major expansion and growth characterized this era, with significant territorial or cultural development.",
        impact="Expanded influence and created lasting cultural and economic connections.",
    ),
    EventTemplate(
        title="Peak Period",
        description="This period represented the height of power and influence, with major achievements and accomplishments.",
        impact="Achieved remarkable progress in arts, sciences, and governance.",
    ),
    EventTemplate(
        title="Significant Changes",
        description="Significant changes and adaptations occurred in response to internal and external pressures.",
        impact="Adapted to changing circumstances and implemented crucial reforms.",
    ),
    EventTemplate(
        title="Important Reforms",
        description="Important reforms and innovations were implemented to address emerging challenges.",
        impact="Introduced innovations that influenced subsequent historical developments.",
    ),
    EventTemplate(
        title="Cultural Flourishing",
        description="Cultural and intellectual achievements flourished during this remarkable period.",
        impact="Created a golden age of cultural and intellectual achievement.",
    ),
    EventTemplate(
        title="Decline and Transformation",
        description="Gradual decline and transformation began as new forces and challenges emerged.",
        impact="Faced challenges that led to significant transformations.",
    ),
    EventTemplate(
        title="End of {topic}",
        description="The conclusion of {topic} marked the end of an era and the beginning of new developments.",
        impact="Left a lasting legacy that influenced future civilizations and cultures.",
    ),
)


def event_count_for(duration: int) -> int:
    return min(MAX_EVENTS, max(MIN_EVENTS, duration // YEARS_PER_EVENT))


def event_type_for(index: int, total: int) -> EventType:
    if index == 0 or index == total - 1:
        return EventType.MILESTONE
    if index == total // 2:
        return EventType.MAJOR
    return INTERIOR_TYPE_CYCLE[index % len(INTERIOR_TYPE_CYCLE)]


def significance_for(event_type: EventType, index: int, total: int) -> int:
    significance = BASE_SIGNIFICANCE[event_type]
    if index == 0 or index == total - 1:
        significance = min(MAX_SIGNIFICANCE, significance + 1)
    return significance


def template_for(index: int, total: int) -> EventTemplate:
    if index == 0:
        return EVENT_TEMPLATES[0]
    if index == total - 1:
        return EVENT_TEMPLATES[-1]
    interior = len(EVENT_TEMPLATES) - 2
    return EVENT_TEMPLATES[1 + index % interior]


def ensure_sorted(events: Sequence[TimelineEvent]) -> None:
    if any(earlier.year > later.year for earlier, later in zip(events, events[1:])):
        raise ValueError("timeline must be sorted by year")


def sample_key_figures(rng: random.Random) -> List[str]:
    """Return 1 to 3 plausible "Title Name" figures.

    Output depends on ``rng``; pass a seeded ``random.Random`` for repeatable
    timelines.
    """
    count = rng.randint(1, 3)
    return [f"{rng.choice(LEADER_TITLES)} {rng.choice(LEADER_NAMES)}" for _ in range(count)]


def generate_timeline(
    topic: str,
    start_year: int,
    end_year: int,
    *,
    event_id: str,
    rng: Optional[random.Random] = None,
) -> List[TimelineEvent]:
    """Spread between 3 and 8 templated events evenly across the period."""
    if end_year < start_year:
        raise ValueError("end_year must not be before start_year")

    source = rng or random.Random()
    duration = end_year - start_year
    total = event_count_for(duration)

    events: List[TimelineEvent] = []
    for index in range(total):
        year = start_year + (duration * index) // (total - 1)
        event_type = event_type_for(index, total)
        template = template_for(index, total)
        events.append(
            TimelineEvent(
                id=f"{event_id}-{index}",
                year=year,
                title=template.title.format(topic=topic),
                description=template.description.format(topic=topic),
                type=event_type,
                significance=significance_for(event_type, index, total),
                key_figures=tuple(sample_key_figures(source)),
                impact=template.impact.format(topic=topic),
            )
        )

    events.sort(key=lambda event: event.year)
    ensure_sorted(events)
    return events
