from __future__ import annotations

import logging
import random
import re
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

import requests
from cachetools import TTLCache

from .era_dates import first_year
from .models import ArticleSummary, HitType, SearchHit
from .text_cleaner import clean_snippet, normalise_extract

USER_AGENT = "TimeTraveler/0.1 (Educational Platform)"
REQUEST_TIMEOUT = 8.0
MAX_SUGGESTIONS = 8
RESPONSE_CACHE_TTL = 600.0
RESPONSE_CACHE_SIZE = 100
TRENDING_COUNT = 8
_LANGUAGE_PATTERN = re.compile(r"^[a-zA-Z\-]{2,12}$")

# Checked in order; a hit matching nothing is treated as an event.
HIT_TYPE_KEYWORDS: Sequence[Tuple[HitType, Tuple[str, ...]]] = (
    ("event", ("war", "battle", "revolution", "treaty", "empire", "dynasty")),
    ("figure", ("emperor", "king", "queen", "leader", "general", "philosopher")),
    ("artifact", ("artifact", "sculpture", "painting", "monument", "temple", "palace")),
    ("location", ("city", "country", "region", "continent", "civilization")),
)

TRENDING_TOPICS: Sequence[str] = (
    "Ancient Rome",
    "World War II",
    "Renaissance",
    "Ancient Egypt",
    "Medieval Europe",
    "Industrial Revolution",
    "American Civil War",
    "French Revolution",
    "Ancient Greece",
    "Cold War",
    "Viking Age",
    "Byzantine Empire",
    "Mongol Empire",
    "Crusades",
    "Age of Exploration",
)

RANDOM_ARTICLE_SEEDS: Sequence[str] = (
    "ancient history",
    "medieval history",
    "renaissance",
    "world war",
    "ancient civilization",
    "historical battle",
    "historical figure",
    "ancient empire",
    "historical event",
    "archaeological discovery",
)

logger = logging.getLogger("time_traveler.wikipedia")


class WikipediaLookupError(RuntimeError):
    """Raised when Wikipedia cannot be reached or answers with garbage."""


def classify_hit(title: str, snippet: str = "") -> HitType:
    text = f"{title} {snippet}".lower()
    for hit_type, keywords in HIT_TYPE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return hit_type
    return "event"


def score_relevance(hit: Dict[str, Any], query: str) -> float:
    query_lower = query.lower().strip()
    title_lower = str(hit.get("title", "")).lower()
    snippet_lower = str(hit.get("snippet", "")).lower()

    relevance = 0.0
    if title_lower == query_lower:
        relevance += 1.0
    elif query_lower in title_lower:
        relevance += 0.8
    elif title_lower and title_lower in query_lower:
        relevance += 0.6

    query_words = query_lower.split()
    title_words = title_lower.split()
    if query_words:
        title_matches = sum(
            1 for word in query_words if any(word in title_word for title_word in title_words)
        )
        relevance += (title_matches / len(query_words)) * 0.5

    if query_lower and query_lower in snippet_lower:
        relevance += 0.3
    if (hit.get("wordcount") or 0) > 1000:
        relevance += 0.1
    if (hit.get("size") or 0) > 5000:
        relevance += 0.1

    return round(min(1.0, relevance), 3)


class WikipediaClient:
    """Search and summary lookups against one Wikipedia language edition.

    Search, summary, suggestion and trending responses are kept in a small
    TTL cache (``cache_ttl`` seconds, ``0`` disables it). Missing summaries
    are not cached.
    """

    def __init__(
        self,
        language: str = "en",
        *,
        timeout: float = REQUEST_TIMEOUT,
        user_agent: str = USER_AGENT,
        session: Optional[requests.Session] = None,
        cache_ttl: float = RESPONSE_CACHE_TTL,
        cache_size: int = RESPONSE_CACHE_SIZE,
        rng: Optional[random.Random] = None,
    ) -> None:
        candidate = (language or "en").strip()
        if not _LANGUAGE_PATTERN.match(candidate):
            raise ValueError(f"invalid Wikipedia language code: {language!r}")
        self.language = candidate.lower()
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session
        self.rng = rng or random.Random()
        self._cache: Optional[TTLCache] = (
            TTLCache(maxsize=cache_size, ttl=cache_ttl) if cache_ttl > 0 else None
        )
        self._cache_lock = threading.Lock()

    @property
    def api_endpoint(self) -> str:
        return f"https://{self.language}.wikipedia.org/w/api.php"

    @property
    def rest_endpoint(self) -> str:
        return f"https://{self.language}.wikipedia.org/api/rest_v1"

    def page_url(self, title: str) -> str:
        return f"https://{self.language}.wikipedia.org/wiki/{quote(title.replace(' ', '_'))}"

    def search(self, query: str, limit: int = 10) -> List[SearchHit]:
        """Full-text search, best match first. Blank queries return nothing."""
        if not query or not query.strip():
            return []

        cache_key = f"search:{query.lower()}:{limit}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return list(cached)

        params = {
            "action": "query",
            "format": "json",
            "list": "search",
            "srsearch": query,
            "srlimit": limit,
            "srprop": "snippet|titlesnippet|size|wordcount|timestamp",
        }
        data = self._get_json(self.api_endpoint, params=params)
        raw_hits = (data.get("query") or {}).get("search") or []

        hits = []
        for item in raw_hits:
            if not item.get("title"):
                continue
            snippet = clean_snippet(item.get("snippet", ""))
            hits.append(
                SearchHit(
                    page_id=str(item.get("pageid", "")),
                    title=item["title"],
                    description=snippet,
                    type=classify_hit(item["title"], snippet),
                    relevance=score_relevance(item, query),
                    year=first_year(snippet),
                )
            )
        hits.sort(key=lambda hit: hit.relevance, reverse=True)
        logger.debug("Wikipedia search '%s' returned %d hits", query, len(hits))
        self._cache_set(cache_key, hits)
        return list(hits)

    def summarize(self, title: str) -> Optional[ArticleSummary]:
        """Fetch the REST summary of ``title``; ``None`` when there is no content."""
        cache_key = f"summary:{title.lower()}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return cached

        endpoint = f"{self.rest_endpoint}/page/summary/{quote(title.replace(' ', '_'), safe='')}"
        data = self._get_json(endpoint, missing_ok=True)
        if data is None:
            return None

        extract = normalise_extract(data.get("extract") or data.get("description") or "")
        if not extract:
            return None

        thumbnail = (data.get("thumbnail") or {}).get("source")
        page_url = (
            ((data.get("content_urls") or {}).get("desktop") or {}).get("page")
            or self.page_url(title)
        )
        summary = ArticleSummary(
            title=data.get("title") or title,
            extract=extract,
            thumbnail=thumbnail,
            page_url=page_url,
        )
        self._cache_set(cache_key, summary)
        return summary

    def suggest(self, query: str) -> List[str]:
        if not query or len(query.strip()) < 2:
            return []

        cache_key = f"suggest:{query.strip().lower()}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            return list(cached)

        params = {
            "action": "opensearch",
            "search": query.strip(),
            "limit": MAX_SUGGESTIONS,
            "namespace": 0,
            "format": "json",
        }
        data = self._get_json(self.api_endpoint, params=params)
        if not isinstance(data, list) or len(data) < 2:
            return []
        titles = [str(title) for title in data[1]][:MAX_SUGGESTIONS]
        self._cache_set(cache_key, titles)
        return list(titles)

    def trending_topics(self) -> List[str]:
        """A shuffled selection of popular history topics, stable for the cache TTL."""
        cached = self._cache_get("trending")
        if cached is not None:
            return list(cached)
        topics = self.rng.sample(list(TRENDING_TOPICS), TRENDING_COUNT)
        self._cache_set("trending", topics)
        return list(topics)

    def random_article(self) -> Optional[ArticleSummary]:
        """Summary of the best hit for a randomly chosen history theme."""
        theme = self.rng.choice(RANDOM_ARTICLE_SEEDS)
        hits = self.search(theme, 1)
        if not hits:
            logger.info("No article found for random theme '%s'", theme)
            return None
        return self.summarize(hits[0].title)

    def clear_cache(self) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache.clear()

    def _cache_get(self, key: str) -> Any:
        if self._cache is None:
            return None
        with self._cache_lock:
            return self._cache.get(key)

    def _cache_set(self, key: str, value: Any) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache[key] = value

    def _get_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        missing_ok: bool = False,
    ) -> Any:
        headers = {"User-Agent": self.user_agent}
        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(url, params=params, headers=headers, timeout=self.timeout)
            if missing_ok and response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as exc:
            raise WikipediaLookupError("Failed to reach the Wikipedia API") from exc
        except ValueError as exc:
            raise WikipediaLookupError("Could not parse the Wikipedia API response") from exc
