"""
Typer CLI for pocketlearn.

Commands:
    pocketlearn courses                     - List the course catalog
    pocketlearn courses --search forex      - Search title/description
    pocketlearn courses --language EN       - Only courses in one language
    pocketlearn course <id>                 - Show a course and its lessons
    pocketlearn course <id> --content       - ...including lesson bodies
    pocketlearn check                       - Authenticate and report the principal

Usage:
    pocketlearn --help
    pocketlearn courses -s forex -l ID
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable
from typing import Optional, TypeVar

import typer
from loguru import logger
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from config import Settings, get_settings
from pocketlearn.app import create_session, open_repository
from pocketlearn.catalog import CatalogView, Course, CourseDetail, Listing
from pocketlearn.core.errors import AuthError, ConfigError, FetchError

app = typer.Typer(
    name="pocketlearn",
    help="pocketlearn: browse courses and lessons from the record store",
    no_args_is_help=True,
)
console = Console()

T = TypeVar("T")


# =============================================================================
# Helpers
# =============================================================================


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=3)


def run(operation: Awaitable[T]) -> T:
    """Run a coroutine, turning typed errors into a message and an exit code."""
    try:
        return asyncio.run(operation)
    except ConfigError as exc:
        console.print(f"[red]✗[/red] Configuration error: {exc.message}")
        raise typer.Exit(code=2)
    except (AuthError, FetchError) as exc:
        console.print(f"[red]✗[/red] {exc.message}")
        raise typer.Exit(code=1)


def display_detail(detail: CourseDetail, show_content: bool) -> None:
    course = detail.course
    console.print(Panel(
        f"{course.description}\n\n[dim]Level: {course.level or '-'}  |  "
        f"Language: {course.language or '-'}[/dim]",
        title=f"[bold]{course.title}[/bold]",
        title_align="left",
        border_style="cyan",
        padding=(1, 2),
    ))

    if not detail.lessons:
        console.print("[yellow]No lessons yet.[/yellow]")
        return

    for lesson in detail.lessons:
        console.print(f"[bold cyan]Lesson {lesson.order}[/bold cyan]  {lesson.title}")
        if show_content:
            console.print(Markdown(lesson.content))
            console.print()
    if detail.lessons_truncated:
        console.print("[yellow]Lesson list truncated at the record cap.[/yellow]")


# =============================================================================
# Commands
# =============================================================================


@app.command()
def courses(
    search: str = typer.Option("", "--search", "-s", help="Text to find in title or description"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Language tag, e.g. EN or ID"),
) -> None:
    """List courses, optionally filtered by search text and language."""
    settings = get_settings()

    async def load() -> Listing[Course]:
        async with open_repository(settings) as repo:
            return await repo.list_courses()

    listing = run(load())
    view = CatalogView.of(listing).with_query(search).with_language(language)
    found = view.courses

    table = Table(title=f"Courses ({len(found)} of {len(view.base)})")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Level")
    table.add_column("Lang", justify="center")
    table.add_column("Description")
    for course in found:
        table.add_row(course.id, course.title, course.level, course.language, course.description)
    console.print(table)

    if view.languages:
        console.print(f"[dim]Languages: {', '.join(view.languages)}[/dim]")
    if listing.truncated:
        console.print("[yellow]Catalog truncated at the record cap; some courses are not shown.[/yellow]")


@app.command()
def course(
    course_id: str = typer.Argument(..., help="Course record id"),
    content: bool = typer.Option(False, "--content", "-c", help="Print lesson bodies"),
) -> None:
    """Show one course with its lessons in order."""
    settings = get_settings()

    async def load() -> CourseDetail:
        async with open_repository(settings) as repo:
            return await repo.get_course_detail(course_id)

    display_detail(run(load()), content)


@app.command()
def check() -> None:
    """Authenticate against the backend once and report who we are."""
    settings = get_settings()

    async def login() -> dict:
        async with create_session(settings) as session:
            await session.ensure_authenticated()
            principal = session.principal or {}
            session.logout()
            return principal

    principal = run(login())
    console.print(
        f"[green]✓[/green] Authenticated as {principal.get('email') or settings.db_user}"
    )


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    main()
