"""
HTTP API Server for aggregated search.

Endpoints:
    GET  /api/search       Aggregated Google + Brave results (RRF-fused)
    POST /api/ai-result    Poll a background AI overview task
    GET  /api/suggest      Search-box completions
    GET  /api/proxy-image  Same-origin proxy for image thumbnails
    GET  /health           Provider / task / cache status

Search and suggest always answer 200 with a ``{success, ...}`` envelope;
only the image proxy and a missing ``taskId`` use HTTP error statuses.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from search_fusion import __version__
from search_fusion.config import DEFAULT_API_HOST, DEFAULT_API_PORT
from search_fusion.container import ApplicationContainer, create_container, shutdown_container
from search_fusion.core.exceptions import (
    InvalidParameterError,
    SearchFusionError,
    user_facing_message,
)

logger = logging.getLogger(__name__)

IMAGE_CACHE_CONTROL = "public, max-age=31536000, immutable"


# Pydantic models for API requests / responses
class AIResultRequest(BaseModel):
    """Body of an AI overview poll."""

    taskId: Optional[str] = None


class SuggestResponse(BaseModel):
    success: bool
    data: Optional[list[str]] = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = False
    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = __version__
    providers: dict[str, bool] = {}
    llm_configured: bool = False
    pending_tasks: int = 0
    cached_responses: int = 0
    cache_hit_rate: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    container: ApplicationContainer | None = getattr(app.state, "container", None)
    if container is None:
        container = create_container()
        app.state.container = container

    logger.info("HTTP API server initialized")

    yield

    logger.info("HTTP API server shutting down")
    await shutdown_container(container)


def create_app(container: ApplicationContainer | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        container: Pre-configured container (tests pass one with overrides).
            Built from the environment on startup when omitted.

    Returns:
        Configured FastAPI instance.
    """
    app = FastAPI(
        title="Search Fusion API",
        description="Aggregated web/image search with Reciprocal Rank Fusion and AI overviews.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_routes(app)
    return app


def _container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status_code=503, detail="Server not initialized")
    return container


def _register_routes(app: FastAPI) -> None:
    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint."""
        container = getattr(request.app.state, "container", None)
        if container is None:
            return HealthResponse(status="initializing")

        cache = container.response_cache()
        return HealthResponse(
            status="healthy",
            providers={p.name: p.is_configured() for p in container.search_providers()},
            llm_configured=container.summarizer().is_configured(),
            pending_tasks=container.task_registry().pending_count(),
            cached_responses=len(cache),
            cache_hit_rate=round(cache.stats.hit_rate, 3),
        )

    @app.get("/api/search")
    async def search(
        request: Request,
        q: Optional[str] = Query(default=None, description="Search keywords"),
        page: Optional[str] = Query(default=None, description="1-based page number"),
        start_index: Optional[str] = Query(default=None, alias="startIndex"),
        sort: Optional[str] = Query(default=None, description="'date' for newest first"),
        result_type: Optional[str] = Query(default=None, alias="type", description="'image' for image search"),
    ) -> dict[str, Any]:
        """
        Aggregated search.

        Returns ``{success, data, totalResponseTime, apiTimings}``; on failure
        ``data`` is replaced by ``error`` and ``apiTimings`` is null.
        """
        service = _container(request).search_service()
        return await service.search(q, page, start_index, sort, result_type)

    @app.post(
        "/api/ai-result",
        responses={400: {"model": ErrorResponse, "description": "taskId missing"}},
    )
    async def ai_result(request: Request, payload: Optional[AIResultRequest] = None):
        """
        Poll an AI overview task.

        A completed or failed task is returned once and then dropped.
        """
        task_id = payload.taskId if payload else None
        if not task_id or not task_id.strip():
            return JSONResponse(status_code=400, content={"success": False, "error": "taskId is required"})

        service = _container(request).search_service()
        try:
            return service.poll_overview(task_id)
        except InvalidParameterError as e:
            return JSONResponse(status_code=400, content={"success": False, "error": str(e)})

    @app.get("/api/suggest", response_model=SuggestResponse)
    async def suggest(request: Request, q: Optional[str] = Query(default=None)):
        """Search-box completions."""
        client = _container(request).suggestion_client()
        try:
            suggestions = await client.suggest(q or "")
        except SearchFusionError as e:
            logger.error(f"[Suggest] failed: {e}")
            return SuggestResponse(success=False, error=user_facing_message(e))
        return SuggestResponse(success=True, data=suggestions)

    @app.get(
        "/api/proxy-image",
        responses={
            400: {"description": "Image URL missing or invalid"},
            502: {"description": "Upstream image could not be fetched"},
        },
    )
    async def proxy_image(request: Request, url: Optional[str] = Query(default=None)):
        """Fetch an external image and serve it with long-lived cache headers."""
        if not url:
            raise HTTPException(status_code=400, detail="Image URL is required")

        proxy = _container(request).image_proxy()
        try:
            image = await proxy.fetch(url)
        except InvalidParameterError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except SearchFusionError as e:
            logger.error(f"[ImageProxy] {e}")
            raise HTTPException(status_code=502, detail="Failed to fetch image from external source") from e

        return StreamingResponse(
            image.iter_bytes(),
            media_type=image.content_type,
            headers={"Cache-Control": IMAGE_CACHE_CONTROL},
        )


# Create the app instance
app = create_app()


def run_api_server(host: str = DEFAULT_API_HOST, port: int = DEFAULT_API_PORT) -> None:
    """
    Run the HTTP API server.

    Args:
        host: Host to bind to (default: 127.0.0.1 for local only)
        port: Port to bind to (default: 8765)
    """
    import uvicorn

    logger.info(f"Starting HTTP API server on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")


def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Search Fusion HTTP API Server")
    parser.add_argument("--host", default=DEFAULT_API_HOST, help="Host to bind to")
    parser.add_argument("--port", type=int, default=DEFAULT_API_PORT, help="Port to bind to")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    run_api_server(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
