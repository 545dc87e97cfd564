"""Project endpoints of the remote API.

Implements the four collaborator operations the store and the reorder
coordinator depend on. Calls block; callers on the event loop offload them
with ``asyncio.to_thread``.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from portfolio_admin.schemas import Project, ProjectCreate
from portfolio_admin.services.client import ApiError, PortfolioApiClient, first_record

logger = logging.getLogger(__name__)


class ProjectRepository(Protocol):
    """What the store and coordinator need from a project backend."""

    def list_projects(self) -> list[Project]: ...

    def create_project(self, record: ProjectCreate) -> Project: ...

    def update_project(self, project_id: str, patch: dict[str, Any]) -> Project: ...

    def delete_project(self, project_id: str) -> None: ...


class ProjectsApi:
    """``/api/projects`` resource."""

    PATH = "/api/projects"

    def __init__(self, client: PortfolioApiClient):
        self.client = client

    def list_projects(self) -> list[Project]:
        payload = self.client.get(self.PATH)
        if not isinstance(payload, list):
            raise ApiError("Unexpected projects payload from server")
        return [Project.model_validate(item) for item in payload]

    def create_project(self, record: ProjectCreate) -> Project:
        body = record.model_dump(exclude_none=True)
        payload = first_record(self.client.post(self.PATH, json=body))
        if payload is None:
            raise ApiError("Server did not return the created project")
        return Project.model_validate(payload)

    def update_project(self, project_id: str, patch: dict[str, Any]) -> Project:
        logger.debug("Updating project %s with %s", project_id, sorted(patch))
        payload = first_record(self.client.put(f"{self.PATH}/{project_id}", json=patch))
        if payload is None:
            raise ApiError(f"Server did not return project {project_id}")
        return Project.model_validate(payload)

    def delete_project(self, project_id: str) -> None:
        self.client.delete(f"{self.PATH}/{project_id}")
