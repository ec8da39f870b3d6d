from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .era_dates import format_year
from .models import Category, EventType, QuizQuestion, TimelineEvent

YEAR_DISTRACTOR_OFFSETS: Sequence[int] = (200, 500, 1000)

UNRELATED_EVENTS: Sequence[str] = (
    "The Great Fire of London",
    "The Boston Tea Party",
    "The Fall of the Berlin Wall",
)


@dataclass(frozen=True)
class SignificanceOptions:
    correct: str
    distractors: Tuple[str, str, str]

    @property
    def options(self) -> List[str]:
        return [self.correct, *self.distractors]


SIGNIFICANCE_OPTIONS: Dict[Category, SignificanceOptions] = {
    Category.EMPIRE: SignificanceOptions(
        correct="Established lasting political and administrative systems",
        distractors=(
            "Invented the printing press",
            "Discovered the Americas",
            "Built the first railways",
        ),
    ),
    Category.EXPLORATION: SignificanceOptions(
        correct="Opened new trade routes and expanded geographical knowledge",
        distractors=(
            "Established democratic governments",
            "Developed new artistic styles",
            "Created new religious movements",
        ),
    ),
    Category.TECHNOLOGY: SignificanceOptions(
        correct="Revolutionized production methods and daily life",
        distractors=(
            "Established new empires",
            "Discovered new continents",
            "Created new art forms",
        ),
    ),
    Category.CULTURAL: SignificanceOptions(
        correct="Transformed art, literature, and intellectual thought",
        distractors=(
            "Built new transportation systems",
            "Established new trade routes",
            "Developed new military tactics",
        ),
    ),
    Category.MILITARY: SignificanceOptions(
        correct="Changed the balance of power and territorial control",
        distractors=(
            "Invented new technologies",
            "Established new art movements",
            "Created new economic systems",
        ),
    ),
}


def year_options(correct_year: int, rng: random.Random) -> List[str]:
    options = [format_year(correct_year)]
    for offset in YEAR_DISTRACTOR_OFFSETS:
        signed = offset if rng.random() > 0.5 else -offset
        candidate = correct_year + signed
        if candidate == 0:
            # No year zero; flip to the other side of the correct year.
            candidate = correct_year - signed
        options.append(format_year(candidate))
    return options


def _headline_event(timeline: Sequence[TimelineEvent]) -> TimelineEvent:
    for event in timeline:
        if event.type == EventType.MILESTONE:
            return event
    return timeline[1]


def _build_question(
    *,
    question_id: str,
    question: str,
    options: List[str],
    explanation: str,
    difficulty: str,
    shuffle: bool,
    rng: random.Random,
) -> QuizQuestion:
    # The correct option is always generated first.
    correct_text = options[0]
    if shuffle:
        options = list(options)
        rng.shuffle(options)
    return QuizQuestion(
        id=question_id,
        question=question,
        options=tuple(options),
        correct_answer=options.index(correct_text),
        explanation=explanation,
        difficulty=difficulty,
    )


def generate_quiz(
    title: str,
    category: Category,
    timeline: Sequence[TimelineEvent],
    *,
    event_id: str,
    correct_year: Optional[int] = None,
    rng: Optional[random.Random] = None,
    shuffle_options: bool = False,
) -> List[QuizQuestion]:
    """Build two or three multiple-choice questions about a topic.

    The event question is only asked when the timeline has more than two
    entries. Without ``shuffle_options`` the correct answer is option 0.
    """
    source = rng or random.Random()
    if correct_year is None:
        correct_year = timeline[0].year if timeline else 1000

    when = format_year(correct_year)
    quiz = [
        _build_question(
            question_id=f"{event_id}-q1",
            question=f"When did {title} primarily take place?",
            options=year_options(correct_year, source),
            explanation=f"{title} began around {when}, as shown by the major events and developments of the time.",
            difficulty="easy",
            shuffle=shuffle_options,
            rng=source,
        )
    ]

    significance = SIGNIFICANCE_OPTIONS[category]
    quiz.append(
        _build_question(
            question_id=f"{event_id}-q2",
            question=f"What was the primary significance of {title}?",
            options=significance.options,
            explanation=f"{title} is remembered because it {significance.correct.lower()}.",
            difficulty="medium",
            shuffle=shuffle_options,
            rng=source,
        )
    )

    if len(timeline) > 2:
        headline = _headline_event(timeline)
        quiz.append(
            _build_question(
                question_id=f"{event_id}-q3",
                question=f"Which of the following was a major event during {title}?",
                options=[headline.title, *UNRELATED_EVENTS],
                explanation=f"{headline.title} was a significant event during this period and a crucial step in its story.",
                difficulty="medium",
                shuffle=shuffle_options,
                rng=source,
            )
        )

    return quiz
