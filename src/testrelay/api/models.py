# src/testrelay/api/models.py

"""Pydantic models shared across API routes."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from testrelay.testing import TestFilters


class TestFiltersRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tags: list[str] | None = Field(default=None, description="Tags to select, without the leading @")
    file_paths: list[str] | None = Field(default=None, alias="filePaths")
    test_name: str | None = Field(default=None, alias="testName", description="Test title filter")

    def to_filters(self) -> TestFilters:
        return TestFilters(tags=self.tags, file_paths=self.file_paths, test_name=self.test_name)


class RunAcceptedResponse(BaseModel):
    run_id: str = Field(serialization_alias="runId")
    status: str = "queued"


class RunStatusResponse(BaseModel):
    status: str
    timestamp: str


class ErrorResponse(BaseModel):
    error: str


class ProjectUpdateResponse(BaseModel):
    status: str
    message: str
    action: str | None = None
    branch: str | None = None
    commit: str | None = None

# 🔼⚙️
