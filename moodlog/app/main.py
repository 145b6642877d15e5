from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from moodlog.db import create_engine, create_session_factory, init_db

from .ai import TextGenerationClient
from .api.v1.routes import router as v1_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .insights import MoodInsightsService
from .middleware import RequestLoggingMiddleware
from .quotes import QuoteService
from .services.storage import StorageService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure application services during startup and ensure graceful shutdown."""

    configure_logging()
    settings: Settings = get_settings()

    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    await init_db(engine, session_factory, settings.version, settings.database_url)
    storage_service = StorageService(session_factory)
    insights_service = MoodInsightsService(storage_service, tz=settings.tzinfo)
    text_client = TextGenerationClient(
        settings.openai_api_key,
        model=settings.quote_model,
        max_tokens=settings.quote_max_tokens,
        timeout=settings.request_timeout_seconds,
    )
    quote_service = QuoteService(
        text_client,
        failure_threshold=settings.quote_failure_threshold,
    )

    app.state.settings = settings
    app.state.db_engine = engine
    app.state.db_session_factory = session_factory
    app.state.storage_service = storage_service
    app.state.insights_service = insights_service
    app.state.quote_service = quote_service

    logger.info(
        "Starting Moodlog %s",
        settings.version,
        extra={
            "extra_fields": {
                "timezone": settings.timezone or "local",
                "text_service": "enabled" if text_client.available else "fallback only",
            }
        },
    )

    try:
        yield
    finally:
        await app.state.db_engine.dispose()


app = FastAPI(title="Moodlog", version=get_settings().version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(v1_router)


@app.get("/healthz")
async def healthz(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {
        "status": "ok",
        "version": settings.version,
    }


@app.get("/readyz")
async def readyz(request: Request) -> dict[str, Any]:
    storage: StorageService = request.app.state.storage_service

    db_ok = True
    db_detail = "ok"
    schema_version = None
    try:
        await storage.healthcheck()
        schema_version = await storage.get_setting("schema_version")
    except Exception as exc:
        logger.exception("Database readiness check failed")
        db_ok = False
        db_detail = str(exc)

    quote_service: QuoteService = request.app.state.quote_service
    return {
        "ready": db_ok,
        "db": {"ok": db_ok, "detail": db_detail, "schema_version": schema_version},
        "quotes": {"consecutive_failures": quote_service.failures},
    }


@app.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
