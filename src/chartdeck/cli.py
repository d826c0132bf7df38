"""Command line front end for the chart dashboard."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Awaitable, Callable, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from .api.client import ChartsClient
from .config import load_settings
from .dashboard.controller import DashboardController
from .models.chart import STATUS_CYCLE, CatalogPage
from .models.session import SessionToken
from .models.submission import ChartFile, EditTarget, PendingSubmission
from .session import StoredSession

app = typer.Typer(help="Manage your charts on the chart server.")
console = Console()

cli_options: dict = {}


def configure_logging(debug: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "WARNING", format="{time} {level} {message}")


@app.callback()
def main(
    api_url: Optional[str] = typer.Option(None, "--api-url", "-u", help="Chart server base URL"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    configure_logging(debug)
    cli_options["api_url"] = api_url


def run_with_controller(action: Callable[[DashboardController], Awaitable[None]]) -> DashboardController:
    """Build a controller from the stored session and settings, run *action*."""
    settings = load_settings()
    if cli_options.get("api_url"):
        settings = settings.model_copy(update={"api_url": cli_options["api_url"]})
    session = StoredSession().load()

    async def runner() -> DashboardController:
        controller = DashboardController(session, ChartsClient(settings, session))
        try:
            await action(controller)
        finally:
            await controller.aclose()
        return controller

    controller = asyncio.run(runner())
    report(controller)
    return controller


def report(controller: DashboardController) -> None:
    """Print the outcome of the last operation, exiting non-zero on failure.

    A mutation the server accepted is not a failure even when the refresh
    that follows it is; that only earns a warning.
    """
    state = controller.state
    if state.phase == "success":
        if state.error or not controller.session.is_valid():
            console.print(f"[yellow]Saved, but the chart list could not be refreshed.[/yellow] {state.error or ''}")
        return
    if state.phase == "session_invalid" or not controller.session.is_valid():
        console.print("[bold red]Session expired or missing.[/bold red] Run [cyan]chartdeck login[/cyan].")
        raise typer.Exit(code=1)
    if state.error:
        console.print(f"[bold red]Error:[/bold red] {state.error}")
        raise typer.Exit(code=1)


def render_page(page: CatalogPage) -> None:
    if page.is_empty:
        console.print("[bold red]No charts found.[/bold red]")
        return
    table = Table(title=f"My Charts (page {page.current_page + 1}/{max(page.page_count, 1)}, {page.total_count} total)")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Artists")
    table.add_column("Rating", justify="right")
    table.add_column("Tags")
    table.add_column("Likes", justify="right")
    table.add_column("Status", style="magenta")
    for chart in page.items:
        table.add_row(
            chart.id,
            chart.title,
            chart.artists,
            "" if chart.rating is None else str(chart.rating),
            ", ".join(chart.tags),
            str(chart.like_count),
            chart.status,
        )
    console.print(table)


def _file(path: Optional[Path]) -> ChartFile | None:
    return ChartFile.from_path(path) if path else None


@app.command()
def login(
    token: str = typer.Argument(..., help="Session token issued by the chart server"),
    username: Optional[str] = typer.Option(None, help="Account name, for display"),
):
    """Store a session token for later commands."""
    StoredSession().set_token(SessionToken(token=token, username=username))
    console.print("[bold green]Session token saved.[/bold green]")


@app.command()
def logout():
    """Forget the stored session token."""
    StoredSession().load().invalidate()
    console.print("Logged out.")


@app.command("list")
def list_charts(page: int = typer.Option(0, "--page", "-p", help="Page index (0-based)")):
    """List one page of your charts."""

    async def action(controller: DashboardController) -> None:
        await controller.fetch_page(page)

    controller = run_with_controller(action)
    render_page(controller.state.page)


@app.command()
def upload(
    title: str = typer.Option(..., help="Chart title"),
    artists: str = typer.Option(..., help="Artist credit"),
    author: str = typer.Option(..., help="Charter name"),
    rating: str = typer.Option(..., help="Difficulty rating"),
    chart: Path = typer.Option(..., exists=True, dir_okay=False, help="Chart data file"),
    bgm: Path = typer.Option(..., exists=True, dir_okay=False, help="Audio file"),
    jacket: Path = typer.Option(..., exists=True, dir_okay=False, help="Jacket image"),
    description: str = typer.Option("", help="Description"),
    tags: str = typer.Option("", help="Comma separated tags (max 3)"),
    preview: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Preview audio"),
    background: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Background image"),
):
    """Upload a new chart."""
    submission = PendingSubmission(
        mode="create",
        title=title,
        artists=artists,
        author=author,
        rating=rating,
        description=description,
        tags=tags,
        chart=_file(chart),
        bgm=_file(bgm),
        jacket=_file(jacket),
        preview=_file(preview),
        background=_file(background),
    )

    async def action(controller: DashboardController) -> None:
        controller.state.submission = submission
        await controller.submit()

    run_with_controller(action)
    console.print(f"[bold green]Uploaded[/bold green] {title}")


@app.command()
def edit(
    chart_id: str = typer.Argument(..., help="ID of the chart to edit"),
    title: str = typer.Option("", help="New title"),
    artists: str = typer.Option("", help="New artist credit"),
    author: str = typer.Option("", help="New charter name"),
    rating: str = typer.Option("", help="New rating"),
    description: str = typer.Option("", help="New description"),
    tags: str = typer.Option("", help="New comma separated tags"),
    chart: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Replacement chart data"),
    bgm: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Replacement audio"),
    jacket: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Replacement jacket"),
    preview: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Replacement preview"),
    background: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Replacement background"),
):
    """Edit a chart. Only the options given are sent."""
    submission = PendingSubmission(
        mode="update",
        title=title,
        artists=artists,
        author=author,
        rating=rating,
        description=description,
        tags=tags,
        chart=_file(chart),
        bgm=_file(bgm),
        jacket=_file(jacket),
        preview=_file(preview),
        background=_file(background),
        target=EditTarget(id=chart_id),
    )

    async def action(controller: DashboardController) -> None:
        controller.state.submission = submission
        await controller.submit()

    run_with_controller(action)
    console.print(f"[bold green]Updated[/bold green] chart {chart_id}")


@app.command()
def delete(
    chart_id: str = typer.Argument(..., help="ID of the chart to delete"),
    page: int = typer.Option(0, "--page", "-p", help="Page the chart is listed on"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a chart after confirmation."""
    outcome: dict = {}

    async def action(controller: DashboardController) -> None:
        await controller.fetch_page(page)
        chart = controller.state.page.find(chart_id)
        if chart is None:
            return
        controller.request_delete(chart)
        if yes or Confirm.ask(f'Are you sure you want to delete "{chart.title}"?', default=False):
            outcome["deleted"] = await controller.confirm_delete()
        else:
            controller.cancel_delete()
            outcome["cancelled"] = True
        outcome["found"] = True

    run_with_controller(action)
    if not outcome.get("found"):
        console.print(f"[bold red]No chart with ID '{chart_id}' on page {page}.[/bold red]")
        raise typer.Exit(code=1)
    if outcome.get("cancelled"):
        console.print("Deletion cancelled.")
    elif outcome.get("deleted"):
        console.print(f"[bold red]Deleted[/bold red] chart {chart_id}")


@app.command()
def visibility(
    chart_id: str = typer.Argument(..., help="ID of the chart"),
    status: str = typer.Argument(..., help=f"One of {', '.join(STATUS_CYCLE)}"),
):
    """Change who can see a chart."""
    status = status.upper()
    if status not in STATUS_CYCLE:
        console.print(f"[bold red]Unknown status '{status}'.[/bold red]")
        raise typer.Exit(code=2)

    async def action(controller: DashboardController) -> None:
        await controller.change_visibility(chart_id, status)

    run_with_controller(action)
    console.print(f"Chart {chart_id} is now [magenta]{status}[/magenta]")
