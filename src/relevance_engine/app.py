"""FastAPI application exposing one relevance endpoint per scoring strategy."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Tuple

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .engine import RelevanceEngine, ScoringStrategy
from .entities import extract_named_entities, extract_simple_entities
from .errors import InputError, RelevanceError
from .observability import MetricsRecorder

logger = logging.getLogger(__name__)


_LOGGING_CONFIGURED = False


def _ensure_logging(level_name: str | None = None) -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    package_logger = logging.getLogger("relevance_engine")
    uvicorn_logger = logging.getLogger("uvicorn.error")

    handlers = list(uvicorn_logger.handlers)
    if handlers:
        package_logger.handlers = []
        for handler in handlers:
            package_logger.addHandler(handler)
    else:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        package_logger.addHandler(handler)

    level_value = getattr(logging, level_name.upper(), None) if level_name else None
    if isinstance(level_value, int):
        package_logger.setLevel(level_value)
    elif package_logger.level == logging.NOTSET or package_logger.level > logging.INFO:
        package_logger.setLevel(logging.INFO)
    package_logger.propagate = False
    _LOGGING_CONFIGURED = True


class ApplicationState:
    """Container for runtime dependencies used by the FastAPI app."""

    def __init__(
        self,
        *,
        settings: Settings,
        engine: RelevanceEngine,
        metrics: MetricsRecorder | None,
    ) -> None:
        self.settings = settings
        self.engine = engine
        self.metrics = metrics


async def _read_texts(request: Request) -> Tuple[str, str]:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise InputError("Request body must be valid JSON") from exc
    if not isinstance(payload, dict):
        raise InputError("Request body must be a JSON object")
    primary = payload.get("primaryText")
    secondary = payload.get("secondaryText")
    if not isinstance(primary, str) or not isinstance(secondary, str) or not primary or not secondary:
        raise InputError("Both primaryText and secondaryText are required")
    return primary, secondary


def create_app(
    *,
    settings: Settings | None = None,
    engine: RelevanceEngine | None = None,
    metrics: MetricsRecorder | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or Settings.from_env()
    _ensure_logging(settings.log_level)
    metrics = metrics or settings.build_metrics_recorder()
    engine = engine or RelevanceEngine(settings, metrics=metrics)
    logger.info(
        "app.start embedding_model=%s default_strategy=%s",
        settings.embedding_model,
        settings.default_strategy,
    )

    app = FastAPI(title="Relevance Engine")
    app.state.services = ApplicationState(settings=settings, engine=engine, metrics=metrics)

    def get_state(request: Request) -> ApplicationState:
        return request.app.state.services

    def get_metrics(state: ApplicationState = Depends(get_state)) -> MetricsRecorder | None:
        return state.metrics

    @app.exception_handler(RelevanceError)
    async def _relevance_error_handler(_request: Request, exc: RelevanceError) -> JSONResponse:
        logger.warning("relevance.request_failed status=%s error=%s", exc.status_code, exc)
        return JSONResponse({"error": exc.error_label, "message": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == 405:
            return JSONResponse({"error": "Method not allowed"}, status_code=405)
        return await http_exception_handler(request, exc)

    async def _respond(request: Request, state: ApplicationState, strategy: ScoringStrategy) -> JSONResponse:
        primary, secondary = await _read_texts(request)
        api_key = state.settings.openai_api_key if strategy is ScoringStrategy.SEMANTIC else None
        try:
            result = await asyncio.to_thread(
                state.engine.calculate_relevance,
                primary,
                secondary,
                strategy=strategy,
                api_key=api_key,
            )
        except RelevanceError:
            raise
        except Exception as exc:
            logger.exception("relevance.endpoint.failed strategy=%s error=%s", strategy.value, exc)
            return JSONResponse(
                {"error": "Failed to calculate relevance", "message": str(exc)},
                status_code=500,
            )

        payload: Dict[str, Any] = {"result": result.to_dict()}
        if strategy is ScoringStrategy.ENTITY_TOPIC:
            payload["primaryEntities"] = extract_named_entities(primary).to_dict()
            payload["secondaryEntities"] = extract_named_entities(secondary).to_dict()
        else:
            payload["primaryEntities"] = extract_simple_entities(primary)
            payload["secondaryEntities"] = extract_simple_entities(secondary)
        return JSONResponse(payload)

    @app.post("/api/calculate-relevance-simple", response_class=JSONResponse)
    async def calculate_relevance_simple(
        request: Request, state: ApplicationState = Depends(get_state)
    ) -> JSONResponse:
        return await _respond(request, state, ScoringStrategy.LEXICAL)

    @app.post("/api/calculate-relevance-entities", response_class=JSONResponse)
    async def calculate_relevance_entities(
        request: Request, state: ApplicationState = Depends(get_state)
    ) -> JSONResponse:
        return await _respond(request, state, ScoringStrategy.ENTITY_TOPIC)

    @app.post("/api/calculate-relevance", response_class=JSONResponse)
    async def calculate_relevance(
        request: Request, state: ApplicationState = Depends(get_state)
    ) -> JSONResponse:
        return await _respond(request, state, ScoringStrategy.SEMANTIC)

    @app.get("/healthz", response_class=JSONResponse)
    async def healthz() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @app.get("/metrics")
    async def metrics_endpoint(metrics: MetricsRecorder | None = Depends(get_metrics)) -> Response:
        if metrics is None or not metrics.prometheus_enabled:
            raise HTTPException(status_code=404, detail="Metrics export disabled")
        return Response(content=metrics.render_prometheus(), media_type=metrics.prometheus_content_type)

    return app
