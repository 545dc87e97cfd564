#!/usr/bin/env python3
"""
Portfolio admin command line.

Manage the portfolio from a terminal against the same remote API the web
dashboard uses:

1. Log in and out as the owner
2. List, add, edit, remove and reorder projects
3. Manage skills, the owner profile, contact messages and the CV
4. Serve the admin HTTP API for the browser dashboard
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from portfolio_admin.core.dashboard import Dashboard, build_dashboard
from portfolio_admin.core.reorder import BatchProgress, ReorderOutcome, ReorderStatus
from portfolio_admin.core.utils.config import DEFAULT_CONFIG_PATH, load_config
from portfolio_admin.core.utils.logging_setup import setup_logging
from portfolio_admin.schemas import (
    ProgressOut,
    ProjectCreate,
    ProjectPatch,
    Skill,
    SkillIcon,
    icon_glyph,
)
from portfolio_admin.services import ApiError

console = Console()
logger = logging.getLogger(__name__)

T = TypeVar("T")


class SpinnerListener:
    """Show a rich spinner while a reorder batch is in flight."""

    def __init__(self, console: Console):
        self.console = console
        self._progress: Progress | None = None

    def __call__(self, state: ProgressOut) -> None:
        if state.running:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self.console,
                transient=True,
            )
            self._progress.start()
            self._progress.add_task(f"[cyan]{state.message}", total=None)
        elif self._progress is not None:
            self._progress.stop()
            self._progress = None


def _notify(message: str, ok: bool) -> None:
    style = "bold green" if ok else "bold red"
    console.print(f"[{style}]{message}[/{style}]")


class CommandFailed(Exception):
    """Raised inside a command's coroutine to abort with a message."""


def _fail(message: str) -> None:
    console.print(f"\n[bold red]Error:[/bold red] {message}")
    raise SystemExit(1)


def _run(ctx: click.Context, action: Callable[[Dashboard], Awaitable[T]]) -> T:
    """Open the dashboard, run ``action`` on a fresh event loop, then close it."""
    board = build_dashboard(
        ctx.obj["config"],
        progress=BatchProgress(SpinnerListener(console)),
        notify=_notify,
    )
    board.open()
    try:
        return asyncio.run(action(board))
    except ApiError as exc:
        logger.debug("API call failed", exc_info=True)
        _fail(exc.message)
    except CommandFailed as exc:
        _fail(str(exc))
    finally:
        board.close()


async def _load_projects(board: Dashboard) -> None:
    if not await board.store.fetch_all():
        raise CommandFailed(board.store.error or "Could not load projects")


def _print_projects(board: Dashboard) -> None:
    table = Table(title="Projects")
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Order", justify="right")
    table.add_column("Status")
    table.add_column("Year", justify="right")
    for position, project in enumerate(board.store.items, start=1):
        table.add_row(
            str(position),
            project.id,
            project.title,
            str(project.order),
            project.status,
            str(project.year or ""),
        )
    console.print(table)


def _print_outcome(outcome: ReorderOutcome) -> None:
    if outcome.status is ReorderStatus.NOOP:
        console.print("[yellow]Nothing to change.[/yellow]")
    elif not outcome.ok:
        raise SystemExit(1)


# ── Root ────────────────────────────────────────────────────────────────────


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help=f"Path to configuration file (e.g. {DEFAULT_CONFIG_PATH}).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output.")
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool, debug: bool) -> None:
    """Manage a personal portfolio: projects, skills, CV and messages."""
    log_level = logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)
    setup_logging(log_level, console=console)
    try:
        cfg = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"\n[bold red]Configuration error:[/bold red] {e}")
        raise SystemExit(1) from e
    ctx.obj = {"config": cfg}


@main.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.pass_context
def login(ctx: click.Context, email: str, password: str) -> None:
    """Log in as the portfolio owner and store the token."""

    async def action(board: Dashboard) -> None:
        session = await asyncio.to_thread(board.auth.login, email, password)
        console.print(f"[bold green]Welcome back, {session.user.name or email}![/bold green]")

    _run(ctx, action)


@main.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Forget the stored token."""

    async def action(board: Dashboard) -> None:
        await asyncio.to_thread(board.auth.logout)
        console.print("You have been logged out")

    _run(ctx, action)


# ── Projects ────────────────────────────────────────────────────────────────


@main.group()
def projects() -> None:
    """List, edit and reorder portfolio projects."""


@projects.command("list")
@click.pass_context
def list_projects(ctx: click.Context) -> None:
    """Show projects in display order."""

    async def action(board: Dashboard) -> None:
        await _load_projects(board)
        _print_projects(board)

    _run(ctx, action)


@projects.command("add")
@click.option("--title", required=True)
@click.option("--description", default="")
@click.option("--image-url", default="")
@click.option("--live-url", default="")
@click.option("--github-url", default=None)
@click.option("--tech", "technologies", multiple=True, help="Technology tag; repeatable.")
@click.option("--type", "type_", type=click.Choice(["web", "mobile"]), default="web")
@click.option("--category", type=click.Choice(["frontend", "fullstack"]), default="frontend")
@click.option(
    "--status", type=click.Choice(["completed", "in-progress", "featured"]), default="completed"
)
@click.option("--year", type=int, default=None)
@click.pass_context
def add_project(ctx: click.Context, technologies: tuple, type_: str, **fields: Any) -> None:
    """Add a project at the end of the list."""
    record = ProjectCreate(technologies=list(technologies), type=type_, **fields)

    async def action(board: Dashboard) -> None:
        await _load_projects(board)
        if not await board.store.create(record):
            raise CommandFailed(board.store.error or "Failed to add project")
        console.print("[bold green]Project added successfully[/bold green]")
        _print_projects(board)

    _run(ctx, action)


@projects.command("edit")
@click.argument("project_id")
@click.option("--title", default=None)
@click.option("--description", default=None)
@click.option("--image-url", default=None)
@click.option("--live-url", default=None)
@click.option("--github-url", default=None)
@click.option("--tech", "technologies", multiple=True, help="Replaces all technology tags; repeatable.")
@click.option("--type", "type_", type=click.Choice(["web", "mobile"]), default=None)
@click.option("--category", type=click.Choice(["frontend", "fullstack"]), default=None)
@click.option(
    "--status", type=click.Choice(["completed", "in-progress", "featured"]), default=None
)
@click.option("--year", type=int, default=None)
@click.pass_context
def edit_project(
    ctx: click.Context, project_id: str, technologies: tuple, type_: str | None, **fields: Any
) -> None:
    """Change fields of one project."""
    fields.update(technologies=list(technologies) or None, type=type_)
    patch = ProjectPatch(**{k: v for k, v in fields.items() if v is not None})
    if not patch.payload():
        _fail("Nothing to update; pass at least one field option.")

    async def action(board: Dashboard) -> None:
        if not await board.store.update_one(project_id, patch):
            raise CommandFailed(board.store.error or "Failed to update project")
        console.print("[bold green]Project updated successfully[/bold green]")

    _run(ctx, action)


@projects.command("remove")
@click.argument("project_id")
@click.confirmation_option(prompt="Delete this project?")
@click.pass_context
def remove_project(ctx: click.Context, project_id: str) -> None:
    """Delete a project."""

    async def action(board: Dashboard) -> None:
        if not await board.store.delete_one(project_id):
            raise CommandFailed(board.store.error or "Failed to delete project")
        console.print("[bold green]Project deleted successfully[/bold green]")

    _run(ctx, action)


@projects.command("move")
@click.argument("source", type=int)
@click.argument("destination", type=int)
@click.pass_context
def move_project(ctx: click.Context, source: int, destination: int) -> None:
    """Move the project at position SOURCE to position DESTINATION (1-based, as listed)."""

    async def action(board: Dashboard) -> ReorderOutcome:
        await _load_projects(board)
        outcome = await board.coordinator.reorder(source - 1, destination - 1)
        if outcome.ok:
            _print_projects(board)
        return outcome

    _print_outcome(_run(ctx, action))


@projects.command("normalize")
@click.pass_context
def normalize_projects(ctx: click.Context) -> None:
    """Renumber project orders 1..N following their current order."""

    async def action(board: Dashboard) -> ReorderOutcome:
        await _load_projects(board)
        return await board.coordinator.normalize_orders()

    _print_outcome(_run(ctx, action))


# ── Skills ──────────────────────────────────────────────────────────────────

ICON_CHOICES = [icon.value for icon in SkillIcon]


@main.group()
def skills() -> None:
    """List and manage skills."""


@skills.command("list")
@click.pass_context
def list_skills(ctx: click.Context) -> None:
    async def action(board: Dashboard) -> None:
        table = Table(title="Skills")
        for column in ("Icon", "ID", "Name", "Category", "Level"):
            table.add_column(column)
        for skill in await asyncio.to_thread(board.skills.list_skills):
            table.add_row(
                icon_glyph(skill.resolved_icon), skill.id or "", skill.name, skill.category, skill.level or ""
            )
        console.print(table)

    _run(ctx, action)


@skills.command("add")
@click.option("--name", required=True)
@click.option("--icon", type=click.Choice(ICON_CHOICES), default=SkillIcon.CODE.value)
@click.option("--category", default="general")
@click.option("--level", default=None)
@click.pass_context
def add_skill(ctx: click.Context, **fields: Any) -> None:
    skill = Skill(**fields)

    async def action(board: Dashboard) -> None:
        created = await asyncio.to_thread(board.skills.create_skill, skill)
        console.print(f"[bold green]Skill added successfully[/bold green] ({created.id or created.name})")

    _run(ctx, action)


@skills.command("edit")
@click.argument("skill_id")
@click.option("--name", default=None)
@click.option("--icon", type=click.Choice(ICON_CHOICES), default=None)
@click.option("--category", default=None)
@click.option("--level", default=None)
@click.pass_context
def edit_skill(ctx: click.Context, skill_id: str, **fields: Any) -> None:
    """Change fields of one skill; the rest are sent unchanged."""
    changes = {k: v for k, v in fields.items() if v is not None}
    if not changes:
        _fail("Nothing to update; pass at least one field option.")

    async def action(board: Dashboard) -> None:
        current = {s.id: s for s in await asyncio.to_thread(board.skills.list_skills)}
        if skill_id not in current:
            raise CommandFailed(f"Skill not found: {skill_id}")
        skill = current[skill_id].model_copy(update=changes)
        await asyncio.to_thread(board.skills.update_skill, skill_id, skill)
        console.print("[bold green]Skill updated successfully[/bold green]")

    _run(ctx, action)


@skills.command("remove")
@click.argument("skill_id")
@click.confirmation_option(prompt="Delete this skill?")
@click.pass_context
def remove_skill(ctx: click.Context, skill_id: str) -> None:
    async def action(board: Dashboard) -> None:
        await asyncio.to_thread(board.skills.delete_skill, skill_id)
        console.print("[bold green]Skill deleted successfully[/bold green]")

    _run(ctx, action)


# ── Messages ────────────────────────────────────────────────────────────────


@main.group()
def messages() -> None:
    """Read and delete contact-form messages."""


@messages.command("list")
@click.pass_context
def list_messages(ctx: click.Context) -> None:
    async def action(board: Dashboard) -> None:
        items = await asyncio.to_thread(board.messages.list_messages)
        if not items:
            console.print("No messages.")
            return
        for msg in items:
            subject = msg.subject or "(no subject)"
            console.print(f"[bold]{subject}[/bold] from {msg.name} <{msg.email}> [dim]{msg.id}[/dim]")
            console.print(f"  {msg.message}")

    _run(ctx, action)


@messages.command("delete")
@click.argument("message_id")
@click.confirmation_option(prompt="Delete this message?")
@click.pass_context
def delete_message(ctx: click.Context, message_id: str) -> None:
    async def action(board: Dashboard) -> None:
        await asyncio.to_thread(board.messages.delete_message, message_id)
        console.print("Message deleted")

    _run(ctx, action)


# ── Profile ─────────────────────────────────────────────────────────────────


@main.group()
def profile() -> None:
    """Show and edit the owner profile."""


@profile.command("show")
@click.pass_context
def show_profile(ctx: click.Context) -> None:
    async def action(board: Dashboard) -> None:
        user = await asyncio.to_thread(board.profile.get_profile)
        console.print(f"[bold]{user.name}[/bold] <{user.email}>")
        for paragraph in user.about:
            console.print(f"  {paragraph}")
        for label, value in (("GitHub", user.github), ("LinkedIn", user.linkedin), ("Photo", user.photo)):
            if value:
                console.print(f"{label}: {value}")

    _run(ctx, action)


@profile.command("edit")
@click.option("--name", default=None)
@click.option("--email", default=None)
@click.option("--about", multiple=True, help="Replaces the about text; one paragraph per option.")
@click.option("--photo", default=None)
@click.option("--github", default=None)
@click.option("--linkedin", default=None)
@click.pass_context
def edit_profile(ctx: click.Context, about: tuple, **fields: Any) -> None:
    changes = {k: v for k, v in fields.items() if v is not None}
    if about:
        changes["about"] = list(about)
    if not changes:
        _fail("Nothing to update; pass at least one field option.")

    async def action(board: Dashboard) -> None:
        current = await asyncio.to_thread(board.profile.get_profile)
        await asyncio.to_thread(board.profile.update_profile, current.model_copy(update=changes))
        console.print("[bold green]Profile updated successfully[/bold green]")

    _run(ctx, action)


# ── CV ──────────────────────────────────────────────────────────────────────


@main.group()
def cv() -> None:
    """Manage the CV PDF."""


@cv.command("status")
@click.pass_context
def cv_status(ctx: click.Context) -> None:
    async def action(board: Dashboard) -> None:
        status = await asyncio.to_thread(board.cv.status)
        if status.exists:
            console.print(f"CV uploaded: {status.filename or 'cv.pdf'} ({status.uploaded_at or 'unknown date'})")
        else:
            console.print("No CV uploaded.")

    _run(ctx, action)


@cv.command("upload")
@click.argument("pdf", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def cv_upload(ctx: click.Context, pdf: Path) -> None:
    async def action(board: Dashboard) -> None:
        await asyncio.to_thread(board.cv.upload, pdf)
        console.print("[bold green]CV uploaded successfully[/bold green]")

    _run(ctx, action)


@cv.command("download")
@click.argument("destination", type=click.Path(dir_okay=False, path_type=Path), default="cv.pdf")
@click.pass_context
def cv_download(ctx: click.Context, destination: Path) -> None:
    async def action(board: Dashboard) -> None:
        path = await asyncio.to_thread(board.cv.download, destination)
        console.print(f"Saved CV to {path}")

    _run(ctx, action)


@cv.command("delete")
@click.confirmation_option(prompt="Delete the uploaded CV?")
@click.pass_context
def cv_delete(ctx: click.Context) -> None:
    async def action(board: Dashboard) -> None:
        await asyncio.to_thread(board.cv.delete)
        console.print("CV deleted")

    _run(ctx, action)


@main.command()
@click.option("--host", default="127.0.0.1")
@click.option("--port", type=int, default=8000)
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Serve the admin HTTP API for the browser dashboard."""
    import uvicorn

    from portfolio_admin.api.app import create_app

    uvicorn.run(create_app(ctx.obj["config"]), host=host, port=port)


if __name__ == "__main__":
    main()
