"""In-memory fakes shared by the test modules."""

from __future__ import annotations

import json
import threading
from typing import Any

import requests

from portfolio_admin.schemas import ProgressOut, Project, ProjectCreate
from portfolio_admin.services import ApiError


def make_project(project_id: str, order: int, **fields: Any) -> Project:
    return Project(id=project_id, title=fields.pop("title", project_id.upper()), order=order, **fields)


class FakeProjectRepository:
    """
    In-memory stand-in for ``ProjectsApi``.

    ``fail_updates_for`` makes order writes for those ids raise ``ApiError``;
    ``fail_list`` makes ``list_projects`` raise. Every call is recorded.
    """

    def __init__(self, projects: list[Project]):
        self.projects = {p.id: p for p in projects}
        self.fail_updates_for: set[str] = set()
        self.fail_list = False
        self.fail_create = False
        self.fail_delete = False
        self.calls: list[tuple] = []
        self._lock = threading.Lock()
        self._next_id = 100

    def _record(self, *call: Any) -> None:
        with self._lock:
            self.calls.append(call)

    def calls_named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    def list_projects(self) -> list[Project]:
        self._record("list")
        if self.fail_list:
            raise ApiError("Request failed (500): boom", status_code=500)
        return sorted(self.projects.values(), key=lambda p: p.order)

    def create_project(self, record: ProjectCreate) -> Project:
        self._record("create", record)
        if self.fail_create:
            raise ApiError("Request failed (500): boom", status_code=500)
        with self._lock:
            self._next_id += 1
            project = Project(id=f"p{self._next_id}", **record.model_dump(exclude_none=True))
            self.projects[project.id] = project
        return project

    def update_project(self, project_id: str, patch: dict[str, Any]) -> Project:
        self._record("update", project_id, dict(patch))
        if project_id in self.fail_updates_for:
            raise ApiError(f"Request failed (500): cannot update {project_id}", status_code=500)
        if project_id not in self.projects:
            raise ApiError("Request failed (404): Not found", status_code=404)
        with self._lock:
            updated = self.projects[project_id].model_copy(update=patch)
            self.projects[project_id] = updated
        return updated

    def delete_project(self, project_id: str) -> None:
        self._record("delete", project_id)
        if self.fail_delete:
            raise ApiError("Request failed (500): boom", status_code=500)
        self.projects.pop(project_id, None)


class RecordingListener:
    def __init__(self) -> None:
        self.states: list[ProgressOut] = []

    def __call__(self, state: ProgressOut) -> None:
        self.states.append(state)

    @property
    def starts(self) -> int:
        return sum(1 for s in self.states if s.running)

    @property
    def finishes(self) -> int:
        return sum(1 for s in self.states if not s.running)


def make_response(status: int, payload=None, reason: str = "OK", content: bytes | None = None) -> requests.Response:
    """A real ``requests.Response`` with a canned body."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    if content is not None:
        response._content = content
    else:
        response._content = json.dumps(payload).encode() if payload is not None else b""
    return response
