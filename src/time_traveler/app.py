from __future__ import annotations

import logging
import random
import time
from datetime import datetime
from typing import Any, Dict
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from . import __version__
from .content_generator import ContentSynthesizer
from .models import (
    ArticleSummary,
    SearchResponse,
    SuggestionResponse,
    SynthesisResult,
    SynthesizeRequest,
    TrendingResponse,
)
from .settings import settings
from .synthesis_cache import SynthesisCache
from .wikipedia_importer import WikipediaClient, WikipediaLookupError

LOG_LEVEL = getattr(logging, settings.log_level.upper(), logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("time_traveler.app")
logger.setLevel(LOG_LEVEL)

SYNTHESIS_SOURCE_HEADER = "X-Synthesis-Source"


app = FastAPI(
    title=settings.app_title,
    description=settings.app_description,
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _uptime_seconds() -> float:
    started_at = getattr(app.state, "started_at", None)
    if not started_at:
        return 0.0
    return max(0.0, (datetime.utcnow() - started_at).total_seconds())


def _random_source() -> random.Random:
    return random.Random(settings.random_seed) if settings.random_seed is not None else random.Random()


def build_synthesizer(client: WikipediaClient) -> ContentSynthesizer:
    return ContentSynthesizer(
        client,
        SynthesisCache(capacity=settings.cache_capacity),
        rng=_random_source(),
        shuffle_quiz_options=settings.shuffle_quiz_options,
    )


def synthesis_source(result: SynthesisResult) -> str:
    if result.cached:
        return "cache"
    return "lookup" if result.success else "fallback"


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    request.state.request_id = request_id
    start_time = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    if settings.enable_request_logging:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "synthesis_source": response.headers.get(SYNTHESIS_SOURCE_HEADER),
            },
        )

    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", str(uuid4()))
    logger.exception(
        "Unhandled server error",
        extra={"request_id": request_id, "path": request.url.path},
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected server error occurred.",
            "request_id": request_id,
        },
        headers={"X-Request-ID": request_id},
    )


@app.on_event("startup")
async def startup() -> None:
    app.state.started_at = datetime.utcnow()
    app.state.settings = settings
    client = WikipediaClient(
        settings.wikipedia_language,
        timeout=settings.wikipedia_timeout,
        user_agent=settings.wikipedia_user_agent,
        cache_ttl=settings.wikipedia_cache_ttl,
        cache_size=settings.wikipedia_cache_size,
        rng=_random_source(),
    )
    app.state.wikipedia = client
    app.state.synthesizer = build_synthesizer(client)


@app.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "uptime_seconds": round(_uptime_seconds(), 3),
        "version": app.version,
    }


@app.post("/api/synthesize", response_model=SynthesisResult)
async def synthesize(payload: SynthesizeRequest, response: Response) -> SynthesisResult:
    synthesizer: ContentSynthesizer = app.state.synthesizer
    result = await run_in_threadpool(synthesizer.synthesize, payload.query)
    response.headers[SYNTHESIS_SOURCE_HEADER] = synthesis_source(result)
    return result


@app.get("/api/search", response_model=SearchResponse)
async def search(
    q: str = Query(..., min_length=1, max_length=300),
    limit: int = Query(default=10, ge=1),
) -> SearchResponse:
    client: WikipediaClient = app.state.wikipedia
    capped = min(limit, settings.max_search_results)
    try:
        hits = await run_in_threadpool(client.search, q, capped)
    except WikipediaLookupError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return SearchResponse(query=q, total=len(hits), results=hits)


@app.get("/api/suggestions", response_model=SuggestionResponse)
async def suggestions(q: str = Query(..., max_length=300)) -> SuggestionResponse:
    client: WikipediaClient = app.state.wikipedia
    try:
        titles = await run_in_threadpool(client.suggest, q)
    except WikipediaLookupError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return SuggestionResponse(query=q, suggestions=titles)


@app.get("/api/trending", response_model=TrendingResponse)
async def trending() -> TrendingResponse:
    client: WikipediaClient = app.state.wikipedia
    return TrendingResponse(topics=client.trending_topics())


@app.get("/api/random", response_model=ArticleSummary)
async def random_article() -> ArticleSummary:
    client: WikipediaClient = app.state.wikipedia
    try:
        summary = await run_in_threadpool(client.random_article)
    except WikipediaLookupError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if summary is None:
        raise HTTPException(status_code=404, detail="No historical article found")
    return summary
