"""Pydantic schemas for portfolio projects and the admin service."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ProjectType = Literal["web", "mobile"]
ProjectCategory = Literal["frontend", "fullstack"]
ProjectStatus = Literal["completed", "in-progress", "featured"]

# ── Records ─────────────────────────────────────────────────────────────────


class ProjectCreate(BaseModel):
    """A project as submitted for insertion; the server assigns identity."""

    model_config = ConfigDict(extra="ignore")

    title: str
    description: str = ""
    image_url: str = ""
    live_url: str = ""
    github_url: str | None = None
    technologies: list[str] = Field(default_factory=list)
    order: int | None = None
    user_id: str | None = None
    type: ProjectType = "web"
    category: ProjectCategory = "frontend"
    status: ProjectStatus = "completed"
    year: int | None = None


class Project(ProjectCreate):
    """A stored project. ``order`` is the display position, ascending from 1."""

    id: str
    order: int = 0
    created_at: str | None = None
    updated_at: str | None = None

    def with_order(self, order: int) -> Project:
        return self.model_copy(update={"order": order})


class ProjectPatch(BaseModel):
    """Partial update; only explicitly set fields are sent to the server."""

    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    live_url: str | None = None
    github_url: str | None = None
    technologies: list[str] | None = None
    order: int | None = None
    type: ProjectType | None = None
    category: ProjectCategory | None = None
    status: ProjectStatus | None = None
    year: int | None = None
    updated_at: str | None = None

    def payload(self) -> dict:
        return self.model_dump(exclude_unset=True)


# ── Admin service request / response models ─────────────────────────────────


class ReorderIn(BaseModel):
    """A finished drag gesture. ``destination_index`` is None when dropped outside the list."""

    model_config = ConfigDict(populate_by_name=True)

    source_index: int = Field(alias="sourceIndex")
    destination_index: int | None = Field(default=None, alias="destinationIndex")


class ReorderOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["noop", "succeeded", "failed"]
    message: str = ""
    changed_ids: list[str] = Field(default_factory=list, serialization_alias="changedIds")
    items: list[Project] = Field(default_factory=list)


class StoreStateOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[Project] = Field(default_factory=list)
    is_loading: bool = Field(default=False, serialization_alias="isLoading")
    error: str | None = None


class ProgressOut(BaseModel):
    """The single in-progress indicator shown while a reorder batch runs."""

    stage: str = "idle"
    message: str = ""
    running: bool = False


class HealthOut(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
