from __future__ import annotations

import logging
import random
from typing import Optional, Protocol, Sequence

from .categorizer import categorize
from .era_dates import extract_year_range, format_period
from .models import (
    ArticleSummary,
    Category,
    EventType,
    HistoricalEvent,
    QuizQuestion,
    SearchHit,
    SynthesisResult,
    TimelineEvent,
)
from .presentation import (
    category_color,
    default_image,
    determine_difficulty,
    generate_tags,
    key_facts,
    learning_objectives,
    slugify,
)
from .quiz_generator import generate_quiz
from .synthesis_cache import SynthesisCache, normalise_query
from .temporal_estimator import estimate_end_year, estimate_start_year
from .timeline_generator import generate_timeline
from .wikipedia_importer import WikipediaLookupError

DEFAULT_DESCRIPTION = "Explore this fascinating period in history"
FALLBACK_START_YEAR = 1000
FALLBACK_END_YEAR = 1500

logger = logging.getLogger("time_traveler.synthesis")


class SummaryLookup(Protocol):
    def search(self, query: str, limit: int = 10) -> Sequence[SearchHit]:
        """Return the best matching articles for ``query``, best first."""

    def summarize(self, title: str) -> Optional[ArticleSummary]:
        """Return the summary of ``title`` or ``None`` when it has no content."""


class SynthesisError(Exception):
    """Base class for the reasons synthesis falls back to generic content."""


class LookupEmptyError(SynthesisError):
    def __init__(self, message: str = "No historical information found"):
        super().__init__(message)


class LookupFailedError(SynthesisError):
    def __init__(self, message: str = "Could not retrieve detailed information"):
        super().__init__(message)


class ContentSynthesizer:
    """Turn a free-text topic into a complete learning unit.

    Every call returns a usable ``HistoricalEvent``: when the lookup finds
    nothing or anything goes wrong, the generic fallback unit is returned
    with ``success=False`` and the error message. Successful units are
    cached by normalised query; fallbacks are not.
    """

    def __init__(
        self,
        lookup: SummaryLookup,
        cache: Optional[SynthesisCache] = None,
        *,
        rng: Optional[random.Random] = None,
        shuffle_quiz_options: bool = False,
        current_year: Optional[int] = None,
    ) -> None:
        self.lookup = lookup
        self.cache = cache if cache is not None else SynthesisCache()
        self.rng = rng or random.Random()
        self.shuffle_quiz_options = shuffle_quiz_options
        self.current_year = current_year

    def synthesize(self, query: str) -> SynthesisResult:
        cache_key = normalise_query(query)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for '%s'", cache_key)
            return SynthesisResult(event=cached, success=True, cached=True)

        try:
            hits = self.lookup.search(query, 1)
            if not hits:
                raise LookupEmptyError()

            summary = self.lookup.summarize(hits[0].title)
            if summary is None:
                raise LookupFailedError()

            event = self.build_event(summary)
        except (SynthesisError, WikipediaLookupError) as exc:
            logger.warning("Falling back for '%s': %s", query, exc)
            return SynthesisResult(event=build_fallback_event(query), success=False, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure while synthesising '%s'", query)
            message = str(exc) or exc.__class__.__name__
            return SynthesisResult(event=build_fallback_event(query), success=False, error=message)

        self.cache.set(cache_key, event)
        logger.info(
            "Synthesised '%s' (%s, %d timeline events)",
            event.title,
            event.period,
            len(event.timeline),
        )
        return SynthesisResult(event=event, success=True)

    def build_event(self, summary: ArticleSummary) -> HistoricalEvent:
        title = summary.title
        description = summary.extract or DEFAULT_DESCRIPTION
        event_id = slugify(title)

        years = extract_year_range(summary.extract)
        if years.is_empty:
            start_year = estimate_start_year(title)
            end_year = estimate_end_year(title, start_year, current_year=self.current_year)
        else:
            start_year, end_year = years.start, years.end

        category = categorize(title, description)
        timeline = generate_timeline(
            title,
            start_year,
            end_year,
            event_id=event_id,
            rng=self.rng,
        )
        # Significance options are chosen from the title alone.
        quiz = generate_quiz(
            title,
            categorize(title),
            timeline,
            event_id=event_id,
            correct_year=start_year,
            rng=self.rng,
            shuffle_options=self.shuffle_quiz_options,
        )

        return HistoricalEvent(
            id=event_id,
            title=title,
            description=description,
            period=format_period(start_year, end_year),
            start_year=start_year,
            end_year=end_year,
            category=category,
            image=summary.thumbnail or default_image(category),
            color=category_color(category),
            difficulty=determine_difficulty(title, description),
            tags=tuple(generate_tags(title, description, category)),
            learning_objectives=tuple(learning_objectives(title, category)),
            key_facts=tuple(key_facts(description, timeline)),
            timeline=tuple(timeline),
            quiz=tuple(quiz),
        )


def build_fallback_event(query: str) -> HistoricalEvent:
    """Generic learning unit used whenever real synthesis is not possible."""
    topic = query.strip() or query
    event_id = slugify(query)
    category = Category.EMPIRE

    timeline = (
        TimelineEvent(
            id=f"{event_id}-1",
            year=FALLBACK_START_YEAR,
            title=f"Beginning of {topic}",
            description=f"The initial development and establishment of {topic}.",
            type=EventType.MILESTONE,
            significance=8,
            key_figures=("Historical Leaders",),
            impact="Established important foundations for future development",
        ),
        TimelineEvent(
            id=f"{event_id}-2",
            year=1250,
            title="Major Development",
            description=f"Significant progress and expansion during the {topic} period.",
            type=EventType.MAJOR,
            significance=7,
            key_figures=("Key Figures",),
            impact="Led to important changes and developments",
        ),
        TimelineEvent(
            id=f"{event_id}-3",
            year=FALLBACK_END_YEAR,
            title=f"Conclusion of {topic}",
            description="The end of this historical period and transition to new developments.",
            type=EventType.MILESTONE,
            significance=8,
            key_figures=("Later Leaders",),
            impact="Set the stage for subsequent historical periods",
        ),
    )
    quiz = (
        QuizQuestion(
            id=f"{event_id}-q1",
            question=f"What time period is associated with {topic}?",
            options=("1000-1500 AD", "500-800 AD", "1600-1800 AD", "1900-2000 AD"),
            correct_answer=0,
            explanation=f"{topic} is associated with this historical period based on available historical evidence.",
            difficulty="easy",
        ),
    )

    return HistoricalEvent(
        id=event_id,
        title=topic,
        description=(
            f"Explore the fascinating history of {topic}. This topic represents an important "
            "aspect of human civilization and historical development."
        ),
        period=format_period(FALLBACK_START_YEAR, FALLBACK_END_YEAR),
        start_year=FALLBACK_START_YEAR,
        end_year=FALLBACK_END_YEAR,
        category=category,
        image=default_image(category),
        color=category_color(category),
        difficulty="intermediate",
        tags=("history", "civilization"),
        learning_objectives=(
            f"Learn about the historical significance of {topic}",
            "Understand the broader historical context",
            "Explore key developments and changes",
            "Analyze the lasting impact and legacy",
        ),
        key_facts=(
            f"{topic} represents an important historical topic",
            "This period saw significant developments",
            "Multiple factors contributed to its importance",
            "It had lasting effects on subsequent history",
            "Understanding this topic enhances historical knowledge",
        ),
        timeline=timeline,
        quiz=quiz,
    )
