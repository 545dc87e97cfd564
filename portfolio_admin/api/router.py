"""API route handlers.

Project routes operate on the dashboard's store so every client of this
service sees the same optimistic list. The other sections pass straight
through to the remote API.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import APIRouter, HTTPException, Request, Response, status

from portfolio_admin.core.dashboard import Dashboard
from portfolio_admin.core.reorder import ReorderOutcome
from portfolio_admin.schemas import (
    CvStatus,
    HealthOut,
    Message,
    ProgressOut,
    ProjectCreate,
    ProjectPatch,
    ReorderIn,
    ReorderOut,
    Skill,
    StoreStateOut,
    UserProfile,
)
from portfolio_admin.services import ApiError

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")


def _dashboard(request: Request) -> Dashboard:
    return request.app.state.dashboard


def _store_state(board: Dashboard) -> StoreStateOut:
    state = board.store.state
    return StoreStateOut(items=list(state.items), is_loading=state.is_loading, error=state.error)


def _reorder_out(board: Dashboard, outcome: ReorderOutcome) -> ReorderOut:
    return ReorderOut(
        status=outcome.status.value,
        message=outcome.message,
        changed_ids=outcome.changed_ids,
        items=list(board.store.items),
    )


def _store_failed(board: Dashboard) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=board.store.error)


async def _passthrough(call: Callable[..., T], *args: Any) -> T:
    """Run a blocking remote call off the event loop, mapping ApiError to HTTP."""
    try:
        return await asyncio.to_thread(call, *args)
    except ApiError as exc:
        code = exc.status_code if exc.is_auth_error else status.HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=code, detail=exc.message) from exc


# ── Service ────────────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthOut, include_in_schema=False)
async def health_check() -> HealthOut:
    """Liveness check (kept out of the access log)."""
    return HealthOut()


@router.get("/progress", response_model=ProgressOut)
async def get_progress(request: Request) -> ProgressOut:
    """Return the reorder batch indicator (poll while a batch runs)."""
    return _dashboard(request).coordinator.progress.state


# ── Projects ───────────────────────────────────────────────────────────────


@router.get("/projects", response_model=StoreStateOut)
async def list_projects(request: Request) -> StoreStateOut:
    """Return the locally displayed list without contacting the remote API."""
    return _store_state(_dashboard(request))


@router.post("/projects/refresh", response_model=StoreStateOut)
async def refresh_projects(request: Request) -> StoreStateOut:
    board = _dashboard(request)
    if not await board.store.fetch_all():
        raise _store_failed(board)
    return _store_state(board)


@router.post("/projects", response_model=StoreStateOut, status_code=status.HTTP_201_CREATED)
async def create_project(request: Request, project: ProjectCreate) -> StoreStateOut:
    board = _dashboard(request)
    if not await board.store.create(project):
        raise _store_failed(board)
    return _store_state(board)


@router.patch("/projects/{project_id}", response_model=StoreStateOut)
async def update_project(request: Request, project_id: str, patch: ProjectPatch) -> StoreStateOut:
    board = _dashboard(request)
    if not any(p.id == project_id for p in board.store.items):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    if not await board.store.update_one(project_id, patch):
        raise _store_failed(board)
    return _store_state(board)


@router.delete("/projects/{project_id}", response_model=StoreStateOut)
async def delete_project(request: Request, project_id: str) -> StoreStateOut:
    board = _dashboard(request)
    if not await board.store.delete_one(project_id):
        raise _store_failed(board)
    return _store_state(board)


@router.post("/projects/reorder", response_model=ReorderOut)
async def reorder_projects(request: Request, body: ReorderIn) -> ReorderOut:
    """Apply one drag gesture. A failed batch is reported in the body, not as an HTTP error."""
    board = _dashboard(request)
    outcome = await board.coordinator.reorder(body.source_index, body.destination_index)
    return _reorder_out(board, outcome)


@router.post("/projects/normalize", response_model=ReorderOut)
async def normalize_projects(request: Request) -> ReorderOut:
    board = _dashboard(request)
    outcome = await board.coordinator.normalize_orders()
    return _reorder_out(board, outcome)


# ── Other sections ─────────────────────────────────────────────────────────


@router.get("/skills", response_model=list[Skill])
async def list_skills(request: Request) -> list[Skill]:
    return await _passthrough(_dashboard(request).skills.list_skills)


@router.post("/skills", response_model=Skill, status_code=status.HTTP_201_CREATED)
async def create_skill(request: Request, skill: Skill) -> Skill:
    return await _passthrough(_dashboard(request).skills.create_skill, skill)


@router.put("/skills/{skill_id}", response_model=Skill)
async def update_skill(request: Request, skill_id: str, skill: Skill) -> Skill:
    return await _passthrough(_dashboard(request).skills.update_skill, skill_id, skill)


@router.delete("/skills/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_skill(request: Request, skill_id: str) -> Response:
    await _passthrough(_dashboard(request).skills.delete_skill, skill_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/messages", response_model=list[Message])
async def list_messages(request: Request) -> list[Message]:
    return await _passthrough(_dashboard(request).messages.list_messages)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(request: Request, message_id: str) -> Response:
    await _passthrough(_dashboard(request).messages.delete_message, message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/profile", response_model=UserProfile)
async def get_profile(request: Request) -> UserProfile:
    return await _passthrough(_dashboard(request).profile.get_profile)


@router.put("/profile", response_model=UserProfile)
async def update_profile(request: Request, profile: UserProfile) -> UserProfile:
    return await _passthrough(_dashboard(request).profile.update_profile, profile)


@router.get("/cv/status", response_model=CvStatus)
async def get_cv_status(request: Request) -> CvStatus:
    return await _passthrough(_dashboard(request).cv.status)


@router.delete("/cv", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cv(request: Request) -> Response:
    await _passthrough(_dashboard(request).cv.delete)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
