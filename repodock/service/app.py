"""FastAPI application entrypoint for repodock service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import AnalysisError, ConfigError, ValidationError
from ..pipeline import Pipeline, PipelineResult


class AnalyzeRequest(BaseModel):
    path: str


class AnalyzeResponse(BaseModel):
    analysis: Dict[str, Any]
    generated: Dict[str, Optional[str]]
    issues: List[Dict[str, Any]]


class HealthResponse(BaseModel):
    status: str


def _default_pipeline() -> Pipeline:
    return Pipeline()


def create_app(
    pipeline_factory: Callable[[], Pipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing the analysis pipeline."""

    app = FastAPI(title="repodock", version="0.1.0")

    async def get_pipeline() -> Pipeline:
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze_repo(
        payload: AnalyzeRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> AnalyzeResponse:
        def _run() -> PipelineResult:
            return pipeline.run(payload.path)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return AnalyzeResponse(**result.to_dict())

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(_: Any, exc: AnalysisError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(_: Any, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)
