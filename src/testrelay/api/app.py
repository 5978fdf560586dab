# src/testrelay/api/app.py

"""Application factory for the testrelay HTTP API."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from testrelay.config import RelayConfig
from testrelay.engines.git import ProjectSync
from testrelay.exceptions import DirectoryNotFoundError, ProcessLaunchError
from testrelay.runtime import TestOrchestrator
from testrelay.telemetry import StructLogger

from .routes import router

log: StructLogger = structlog.get_logger("api.app")


def create_app(
    config: RelayConfig,
    orchestrator: TestOrchestrator | None = None,
    project_sync: ProjectSync | None = None,
) -> FastAPI:
    """Builds the API with one orchestrator shared by every request."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("API started", project_dir=str(config.project_dir))
        yield
        await app.state.orchestrator.shutdown()

    app = FastAPI(title="testrelay", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.orchestrator = orchestrator if orchestrator is not None else TestOrchestrator(config)
    app.state.project_sync = project_sync if project_sync is not None else ProjectSync(
        config.project.repo_url, config.project_dir, config.project.branch
    )

    @app.exception_handler(DirectoryNotFoundError)
    async def directory_not_found(request: Request, exc: DirectoryNotFoundError) -> JSONResponse:
        log.error("Request failed: project directory missing", path=request.url.path, project_dir=str(exc.path))
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(ProcessLaunchError)
    async def process_launch_failed(request: Request, exc: ProcessLaunchError) -> JSONResponse:
        log.error("Request failed: test runner did not start", path=request.url.path, cause=str(exc.cause))
        return JSONResponse(status_code=500, content={"error": str(exc)})

    app.include_router(router)
    return app

# 🔼⚙️
