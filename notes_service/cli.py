"""
Notes Service - Command Line
=============================

What:  `notes` command: run the API server, or act as a client against one.
How:   Typer commands; client commands drive NotesView / NotesClient and render
       with rich. API failures print the server's message and exit with 1.

Examples:
    notes serve --port 3001
    notes add -t "Work Meeting Notes" -c work -p high -d "Quarterly planning"
    notes list
    notes edit 3 --priority low
    notes delete 3
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from notes_service.client.api import NOTE_CATEGORIES, NOTE_PRIORITIES, NotesApiError, NotesClient
from notes_service.client.view import NotesView
from notes_service.config import settings
from notes_service.schemas.note import NoteResponse

app = typer.Typer(help="Notes microservice: API server and command-line client")
console = Console()

_PRIORITY_STYLE = {"high": "red", "medium": "yellow", "low": "green"}
_CATEGORY_HELP = "|".join(value for value, _ in NOTE_CATEGORIES)
_PRIORITY_HELP = "|".join(value for value, _ in NOTE_PRIORITIES)


@app.callback()
def _main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None, "--base-url", envvar="API_BASE_URL", help="Notes API root (client commands)"
    ),
):
    ctx.obj = {"base_url": base_url or settings.api_base_url}


def _run(ctx: typer.Context, action: Callable[[NotesView], Awaitable[Any]]) -> Any:
    """Run `action` against a fresh view; API failures become exit code 1."""

    async def runner():
        async with NotesClient(base_url=ctx.obj["base_url"]) as client:
            return await action(NotesView(client))

    try:
        return asyncio.run(runner())
    except NotesApiError as e:
        console.print(f"[red]Error ({e.status}):[/] {e.message}")
        for err in e.errors:
            console.print(f"  - {err}")
        raise typer.Exit(code=1)


def render_notes(notes) -> Table:
    table = Table(title=f"Notes ({len(notes)})")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Priority")
    table.add_column("Created")
    for n in notes:
        style = _PRIORITY_STYLE.get(n.priority, "")
        table.add_row(
            str(n.id),
            n.title,
            n.category,
            f"[{style}]{n.priority}[/]" if style else n.priority,
            n.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


def _print_note(note: NoteResponse) -> None:
    console.print(f"[cyan]#{note.id}[/] [bold]{note.title}[/] ({note.category}, {note.priority})")
    console.print(note.description)
    console.print(
        f"[dim]created {note.created_at.isoformat()}  updated {note.updated_at.isoformat()}[/]"
    )


def _report_form_errors(view: NotesView) -> None:
    console.print(f"[red]Not saved:[/] {view.error or 'Validation failed'}")
    for err in view.form_errors:
        console.print(f"  - {err}")
    raise typer.Exit(code=1)


# ── Server ────────────────────────────────────────────────────────────────

@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: HOST setting)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", min=1, max=65535, help="Port (default: PORT setting)"),
):
    """Run the API server with uvicorn."""
    import uvicorn

    from notes_service.main import create_app

    overrides = {k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    cfg = settings.model_copy(update=overrides)
    # log_config=None: setup_logging() in the app lifespan owns logging
    uvicorn.run(create_app(cfg), host=cfg.host, port=cfg.port, log_config=None)


# ── Client ────────────────────────────────────────────────────────────────

@app.command("list")
def list_cmd(ctx: typer.Context):
    """List all notes, newest first."""
    console.print(render_notes(_run(ctx, lambda view: view.client.list_notes())))


@app.command()
def show(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")):
    """Show one note."""
    _print_note(_run(ctx, lambda view: view.client.get_note(note_id)))


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", "-t"),
    category: str = typer.Option(..., "--category", "-c", help=_CATEGORY_HELP),
    priority: str = typer.Option(..., "--priority", "-p", help=_PRIORITY_HELP),
    description: str = typer.Option(..., "--description", "-d"),
):
    """Create a note."""
    fields = {"title": title, "category": category, "priority": priority, "description": description}

    async def action(view: NotesView):
        view.open_create()
        if not await view.submit(fields):
            return view
        return None

    failed = _run(ctx, action)
    if failed is not None:
        _report_form_errors(failed)
    console.print("[green]Created[/]")


@app.command()
def edit(
    ctx: typer.Context,
    note_id: int = typer.Argument(..., help="Note ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help=_CATEGORY_HELP),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help=_PRIORITY_HELP),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
):
    """Update a note; fields not given keep their current value."""
    changes = {
        k: v
        for k, v in {
            "title": title,
            "category": category,
            "priority": priority,
            "description": description,
        }.items()
        if v is not None
    }

    async def action(view: NotesView):
        if not await view.open_edit(note_id):
            raise view.failure
        fields = {**view.form_values(), **changes}
        if not await view.submit(fields):
            return view
        return None

    failed = _run(ctx, action)
    if failed is not None:
        _report_form_errors(failed)
    console.print(f"[green]Updated[/] #{note_id}")


@app.command()
def delete(ctx: typer.Context, note_id: int = typer.Argument(..., help="Note ID")):
    """Delete a note."""
    note = _run(ctx, lambda view: view.client.delete_note(note_id))
    console.print(f"[yellow]Deleted[/] #{note.id}: {note.title}")


@app.command()
def health(ctx: typer.Context):
    """Check that the service answers /health."""
    ok = _run(ctx, lambda view: view.client.check_health())
    if not ok:
        console.print(f"[red]Notes service at {ctx.obj['base_url']} is not available[/]")
        raise typer.Exit(code=1)
    console.print("[green]OK[/]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
