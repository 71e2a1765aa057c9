"""Models for the platform's CRUD endpoints (projects, versions, prompts, logs, evaluations)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from latitude_sdk.models.base import WireModel


class Project(WireModel):
    id: int
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Version(WireModel):
    """A commit (draft or merged) of a project."""

    uuid: str
    id: int | None = None
    title: str | None = None
    description: str | None = None
    project_id: int | None = None
    status: str | None = None
    merged_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectWithVersion(WireModel):
    """Result of creating a project: the project plus its initial draft version."""

    project: Project
    version: Version


class Prompt(WireModel):
    """A prompt document stored in a project version."""

    path: str
    content: str = ""
    uuid: str | None = None
    version_uuid: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    parameters: dict[str, Any] = Field(default_factory=dict)
    provider: str | None = None


class DocumentLog(WireModel):
    id: int | None = None
    uuid: str
    document_uuid: str | None = None
    commit_id: int | None = None
    resolved_content: str | None = None
    content_hash: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    custom_identifier: str | None = None
    duration: float | None = None
    created_at: datetime | None = None


class EvaluationResult(WireModel):
    uuid: str
    score: float | None = None
    normalized_score: float | None = None
    has_passed: bool | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: dict[str, Any] | None = None
    created_at: datetime | None = None


class ToolResult(WireModel):
    """Outcome of a client-side tool handler, submitted back to the platform."""

    tool_call_id: str
    result: Any = None
    is_error: bool = False


class VersionChange(WireModel):
    """A single document change pushed to a draft version."""

    path: str
    content: str = ""
    status: Literal["added", "modified", "deleted", "unchanged"] = "modified"
    content_hash: str | None = None


class PushResult(WireModel):
    commit_uuid: str
    documents_processed: int = 0
