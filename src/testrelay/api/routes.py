# src/testrelay/api/routes.py

"""API routes mapping HTTP requests onto orchestrator calls."""
from __future__ import annotations

import asyncio

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from testrelay.engines.git import GitSyncError, ProjectSync
from testrelay.exceptions import ConfigurationError
from testrelay.runtime import TestOrchestrator
from testrelay.telemetry import StructLogger
from testrelay.testing import TestFilters

from .models import ProjectUpdateResponse, RunAcceptedResponse, RunStatusResponse, TestFiltersRequest

log: StructLogger = structlog.get_logger("api.routes")

router = APIRouter()


def get_orchestrator(request: Request) -> TestOrchestrator:
    return request.app.state.orchestrator


def get_project_sync(request: Request) -> ProjectSync:
    return request.app.state.project_sync


@router.get("/health")
async def healthcheck(orchestrator: TestOrchestrator = Depends(get_orchestrator)) -> dict[str, object]:
    return {"status": "ok", "activeRuns": orchestrator.active_runs}


@router.post("/project/update", response_model=ProjectUpdateResponse)
async def update_project(project_sync: ProjectSync = Depends(get_project_sync)) -> object:
    try:
        result = await project_sync.sync_async()
    except (GitSyncError, ConfigurationError) as e:
        log.error("Git update failed", error=str(e))
        return JSONResponse(status_code=500, content={"error": "Git update failed"})
    return result.to_payload()


@router.post("/tests/run", status_code=status.HTTP_202_ACCEPTED, response_model=RunAcceptedResponse)
async def run_tests(
    payload: TestFiltersRequest | None = None,
    orchestrator: TestOrchestrator = Depends(get_orchestrator),
) -> RunAcceptedResponse:
    filters = payload.to_filters() if payload else TestFilters()
    run_id = orchestrator.run_tests(filters)
    return RunAcceptedResponse(run_id=run_id, status="queued")


@router.get("/tests/list")
async def list_tests(
    tag: list[str] = Query(default=[]),
    file: list[str] = Query(default=[]),
    name: str | None = Query(default=None),
    orchestrator: TestOrchestrator = Depends(get_orchestrator),
) -> list[str]:
    log.debug("Listing tests", tags=tag, files=file, name=name)
    filters = TestFilters(tags=tag or None, file_paths=file or None, test_name=name)
    return await asyncio.to_thread(orchestrator.list_tests, filters)


@router.post("/tests/list")
async def list_tests_with_body(
    payload: TestFiltersRequest | None = None,
    orchestrator: TestOrchestrator = Depends(get_orchestrator),
) -> list[str]:
    filters = payload.to_filters() if payload else TestFilters()
    return await asyncio.to_thread(orchestrator.list_tests, filters)


@router.get(
    "/tests/run/{run_id}/status",
    response_model=RunStatusResponse,
    responses={404: {"description": "Run not found"}},
)
async def get_run_status(run_id: str, orchestrator: TestOrchestrator = Depends(get_orchestrator)) -> object:
    payload = orchestrator.get_run_status(run_id)
    if "error" in payload:
        return JSONResponse(status_code=404, content=payload)
    return payload


@router.get("/tests/run/{run_id}/report", responses={404: {"description": "Report not found"}})
async def get_run_report(run_id: str, orchestrator: TestOrchestrator = Depends(get_orchestrator)) -> Response:
    report = orchestrator.get_run_report(run_id)
    if report is None:
        return PlainTextResponse("Report not found", status_code=404)
    return Response(content=report, media_type="application/json")

# 🔼⚙️
