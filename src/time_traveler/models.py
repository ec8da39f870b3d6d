from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

QUIZ_OPTION_COUNT = 4


class Category(str, Enum):
    EMPIRE = "empire"
    EXPLORATION = "exploration"
    TECHNOLOGY = "technology"
    CULTURAL = "cultural"
    MILITARY = "military"


class EventType(str, Enum):
    MILESTONE = "milestone"
    MAJOR = "major"
    BATTLE = "battle"
    TREATY = "treaty"
    DISCOVERY = "discovery"
    MINOR = "minor"


Difficulty = Literal["beginner", "intermediate", "advanced"]
QuizDifficulty = Literal["easy", "medium", "hard"]
HitType = Literal["event", "figure", "artifact", "location"]


class TimelineEvent(BaseModel):
    """A single synthesised entry on a topic's timeline."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Parent event id followed by the position suffix")
    year: int = Field(..., description="Signed year, negative for BC")
    title: str
    description: str
    type: EventType
    significance: int = Field(..., ge=1, le=10, description="Narrative importance from 1 to 10")
    key_figures: Tuple[str, ...] = Field(default=(), description="Display names such as 'King Marcus'")
    impact: Optional[str] = None


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    options: Tuple[str, ...] = Field(..., description="Exactly four answer options")
    correct_answer: int = Field(..., description="Index of the correct option")
    explanation: str
    difficulty: QuizDifficulty

    @field_validator("options")
    @classmethod
    def ensure_four_options(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(value) != QUIZ_OPTION_COUNT:
            raise ValueError(f"a quiz question needs exactly {QUIZ_OPTION_COUNT} options")
        return value

    @model_validator(mode="after")
    def ensure_answer_in_range(self) -> "QuizQuestion":
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError("correct_answer must index into options")
        return self


class HistoricalEvent(BaseModel):
    """The learning unit synthesised for one topic.

    Instances are frozen: once built they are shared between every caller
    asking for the same normalised query.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Slug derived from the title, not globally unique")
    title: str
    description: str
    period: str = Field(..., description="Readable period label, e.g. '753 BC - 476 AD'")
    start_year: int
    end_year: int
    category: Category
    image: str
    color: str
    difficulty: Difficulty = "intermediate"
    tags: Tuple[str, ...] = ()
    learning_objectives: Tuple[str, ...] = ()
    key_facts: Tuple[str, ...] = ()
    timeline: Tuple[TimelineEvent, ...]
    quiz: Tuple[QuizQuestion, ...] = ()

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @field_validator("quiz")
    @classmethod
    def limit_quiz(cls, value: Tuple[QuizQuestion, ...]) -> Tuple[QuizQuestion, ...]:
        if len(value) > 3:
            raise ValueError("a learning unit carries at most 3 quiz questions")
        return value

    @model_validator(mode="after")
    def ensure_temporal_consistency(self) -> "HistoricalEvent":
        if self.start_year > self.end_year:
            raise ValueError("start_year must not be after end_year")
        if not self.timeline:
            raise ValueError("timeline must contain at least one event")
        previous = None
        for entry in self.timeline:
            if not self.start_year <= entry.year <= self.end_year:
                raise ValueError(f"timeline year {entry.year} is outside the event period")
            if previous is not None and entry.year < previous:
                raise ValueError("timeline must be sorted by year")
            previous = entry.year
        return self


class ArticleSummary(BaseModel):
    """Summary of one encyclopedia article as returned by the lookup client."""

    title: str
    extract: str = ""
    thumbnail: Optional[str] = Field(default=None, description="Thumbnail image URL")
    page_url: Optional[str] = None


class SearchHit(BaseModel):
    page_id: str
    title: str
    description: str = ""
    type: HitType = "event"
    relevance: float = Field(default=0.0, ge=0.0, le=1.0)
    year: Optional[int] = Field(default=None, description="First year mentioned in the snippet")


class SynthesisResult(BaseModel):
    event: HistoricalEvent
    success: bool
    error: Optional[str] = None
    cached: bool = Field(default=False, description="Served from the synthesis cache")


class SynthesizeRequest(BaseModel):
    query: str = Field(..., max_length=300, description="Free-text historical topic")

    @field_validator("query")
    @classmethod
    def ensure_non_empty(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("query must not be empty")
        return cleaned


class SearchResponse(BaseModel):
    query: str
    total: int
    results: List[SearchHit]


class SuggestionResponse(BaseModel):
    query: str
    suggestions: List[str]


class TrendingResponse(BaseModel):
    topics: List[str]
