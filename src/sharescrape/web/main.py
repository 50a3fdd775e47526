"""
FastAPI application exposing the scrape endpoint.
"""

from __future__ import annotations

import json
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable, Dict, Optional
from uuid import uuid4

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from sharescrape import __version__
from sharescrape.config import Config, load_config
from sharescrape.exceptions import InvalidInputError, ScrapeError
from sharescrape.observability import export_prometheus
from sharescrape.orchestrator import ScrapeOrchestrator, build_orchestrator

logger = structlog.get_logger(__name__)


def create_app(orchestrator: Optional[ScrapeOrchestrator] = None, config: Optional[Config] = None) -> FastAPI:
    """
    Build the API.

    The orchestrator is created once in the lifespan from configuration
    unless one is injected.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if app.state.config is None:
            app.state.config = load_config()
        if app.state.orchestrator is None:
            app.state.orchestrator = build_orchestrator(app.state.config)
        logger.info(
            "sharescrape API starting",
            version=__version__,
            environment=app.state.config.browser.environment,
        )
        yield
        logger.info("sharescrape API stopped")

    app = FastAPI(title="sharescrape", version=__version__, lifespan=lifespan)
    app.state.orchestrator = orchestrator
    app.state.config = config

    @app.exception_handler(ScrapeError)
    async def scrape_error_handler(request: Request, exc: ScrapeError) -> JSONResponse:
        return JSONResponse({"error": exc.public_message}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", path=request.url.path, error_type=type(exc).__name__, exc_info=exc)
        return JSONResponse({"error": "Internal Server Error"}, status_code=500)

    @app.middleware("http")
    async def request_context(request: Request, call_next: Callable) -> Any:
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.time()
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = str(process_time)
            logger.info(
                "Request handled",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(process_time * 1000, 1),
            )
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

    @app.post("/scrape")
    async def scrape(request: Request, orchestrator: ScrapeOrchestrator = Depends(get_orchestrator)) -> Dict[str, Any]:
        """Scrape a share page and return the normalized transcript."""
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidInputError("Request body must be JSON.") from e
        url = body.get("url") if isinstance(body, dict) else None

        result = await orchestrator.scrape(url)
        return result.to_dict()

    @app.get("/health")
    async def health_check(request: Request) -> Dict[str, Any]:
        """Health check endpoint for container orchestration."""
        config = request.app.state.config
        return {
            "status": "healthy",
            "version": __version__,
            "environment": config.browser.environment if config is not None else None,
            "timestamp": time.time(),
        }

    @app.get("/metrics")
    async def metrics() -> Response:
        """Endpoint for Prometheus to scrape."""
        return Response(export_prometheus(), media_type=CONTENT_TYPE_LATEST)

    return app


def get_orchestrator(request: Request) -> ScrapeOrchestrator:
    orchestrator = request.app.state.orchestrator
    if orchestrator is None:
        # Only reachable when the app is served without running its lifespan.
        orchestrator = build_orchestrator(request.app.state.config or load_config())
        request.app.state.orchestrator = orchestrator
    return orchestrator


app = create_app()


def run_web_server(host: str = "127.0.0.1", port: int = 8000, config: Optional[Config] = None) -> None:
    """Run the API under uvicorn."""
    import uvicorn

    logger.info("Starting sharescrape API", host=host, port=port)
    uvicorn.run(create_app(config=config), host=host, port=port, log_config=None)
