"""FastAPI application exposing repository visualization and summaries."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import RepoGraphConfig
from ..errors import RepoGraphError, UpstreamError
from ..graph import GraphAssembler
from ..llm.summarizer import Summarizer
from ..logging import get_logger

logger = get_logger("service")


class VisualizeRequest(BaseModel):
    repoUrl: str = ""


class SummarizeRequest(BaseModel):
    code: str = ""


class SummarizeResponse(BaseModel):
    summary: str


class HealthResponse(BaseModel):
    status: str


def create_app(
    config: RepoGraphConfig | None = None,
    *,
    assembler_factory: Callable[[RepoGraphConfig], GraphAssembler] = GraphAssembler,
    summarizer_factory: Callable[[RepoGraphConfig], Summarizer] | None = None,
) -> FastAPI:
    """Create the FastAPI application bound to ``config``."""

    settings = config or RepoGraphConfig()
    make_summarizer = summarizer_factory or (lambda cfg: Summarizer(cfg.summarizer))

    app = FastAPI(title="RepoGraph Service", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def get_assembler() -> GraphAssembler:
        # One assembler per request keeps every analysis independent.
        return assembler_factory(settings)

    async def get_summarizer() -> Summarizer:
        return make_summarizer(settings)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/api/visualize")
    async def visualize(
        payload: VisualizeRequest,
        assembler: GraphAssembler = Depends(get_assembler),
    ) -> Dict[str, Any]:
        result = await assembler.assemble(payload.repoUrl)
        return result.to_dict()

    @app.post("/api/summarize", response_model=SummarizeResponse)
    async def summarize(
        payload: SummarizeRequest,
        summarizer: Summarizer = Depends(get_summarizer),
    ) -> SummarizeResponse | JSONResponse:
        if not summarizer.configured:
            return _error_response(500, "AI API key is not configured on the server.")
        if not payload.code:
            return _error_response(400, "No code provided for summarization.")

        loop = asyncio.get_running_loop()
        summary = await loop.run_in_executor(None, summarizer.summarize, payload.code)
        return SummarizeResponse(summary=summary)

    @app.exception_handler(RepoGraphError)
    async def repograph_error_handler(_: Any, exc: RepoGraphError) -> JSONResponse:
        if isinstance(exc, UpstreamError):
            logger.error("Backend error for %s: %s", exc.url or "request", exc)
        else:
            logger.info("Request failed: %s (%s)", exc.message, exc)
        return _error_response(exc.status_code, exc.message)

    return app


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def run_service(
    config: RepoGraphConfig | None = None, host: str = "0.0.0.0", port: int = 3001
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config)
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
