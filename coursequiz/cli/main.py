"""
coursequiz CLI

Usage:
    coursequiz login               # Log in to the course platform
    coursequiz courses             # List the available courses
    coursequiz course 3            # Show course 3 with its activities
    coursequiz take 42             # Take activity 42
    coursequiz progress            # Show your completed activities
    coursequiz whoami              # Show the logged in user
    coursequiz logout              # Forget the stored session
"""

from __future__ import annotations

import asyncio
import sys
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Prompt

from coursequiz.assessment.attempt import ActivityAttempt, AttemptState
from coursequiz.cli.views import (
    render_course_outline,
    render_courses,
    render_progress,
    render_question,
    render_results,
)
from coursequiz.config import CourseQuizConfig, get_settings
from coursequiz.core.errors import CourseQuizError, UnauthenticatedError
from coursequiz.core.models import Course, Module, ProgressEntry, ResumeIntent
from coursequiz.integrations.platform_client import PlatformClient
from coursequiz.integrations.session import PlatformIdentity, SessionStore

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="coursequiz",
    help="Take course platform activities from the terminal",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


class CliLoginRedirector:
    """Remembers where to resume and sends the user to ``coursequiz login``."""

    def __init__(self, store: SessionStore):
        self.store = store

    def redirect_to_login(self, intent: ResumeIntent) -> None:
        self.store.remember_resume(intent)
        console.print(
            "[yellow]You need to log in first.[/] Run [bold]coursequiz login[/] "
            f"and you will be taken back to activity {intent.activity_id}."
        )


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Course platform activities in the terminal."""
    configure_logging("DEBUG" if verbose else get_settings().log_level)


# =============================================================================
# Activity Commands
# =============================================================================


@app.command()
def take(
    activity_id: Annotated[int, typer.Argument(help="Activity to take")],
) -> None:
    """
    Take an activity.

    Answer every question, then submit to see your graded results.
    """
    code = asyncio.run(_run_take(get_settings(), activity_id))
    if code:
        raise typer.Exit(code)


async def _run_take(config: CourseQuizConfig, activity_id: int) -> int:
    store = SessionStore(config.session_file)
    session = store.load()

    async with PlatformClient(config.api, token=session.token) as client:
        identity = PlatformIdentity(store, client)
        attempt = ActivityAttempt(
            activities=client,
            submitter=client,
            identity=identity,
            redirector=CliLoginRedirector(store),
            config=config.attempt,
        )
        try:
            with console.status("Loading activity..."):
                await attempt.load(activity_id)

            if attempt.state is AttemptState.LOAD_ERROR:
                console.print(f"[red]{attempt.error_message}[/]")
                return 1
            if attempt.state is not AttemptState.READY:
                return 1

            await _quiz_loop(attempt)
            if attempt.read_only:
                render_results(console, attempt)
            return 0
        finally:
            attempt.dispose()


async def _quiz_loop(attempt: ActivityAttempt) -> None:
    """Read commands until the attempt is graded or the user quits."""
    while not attempt.read_only:
        console.print()
        render_question(console, attempt)
        choice = Prompt.ask("[bold]>[/]", console=console).strip().lower()

        if choice == "q":
            return
        if choice == "n":
            attempt.next()
        elif choice == "p":
            attempt.previous()
        elif choice == "s":
            with console.status("Submitting answers..."):
                await attempt.submit()
        elif choice.isdigit():
            _choose(attempt, int(choice))
        else:
            console.print("[yellow]Unknown command.[/]")


def _choose(attempt: ActivityAttempt, number: int) -> None:
    question = attempt.current()
    if question is None or not question.is_single_choice:
        return
    if not 1 <= number <= len(question.options):
        console.print(f"[yellow]Choose a number between 1 and {len(question.options)}.[/]")
        return
    attempt.select(question.id, question.options[number - 1].id)


# =============================================================================
# Catalog Commands
# =============================================================================


@app.command()
def courses() -> None:
    """List the available courses."""
    config = get_settings()
    render_courses(console, _or_exit(_run_courses(config)))


@app.command()
def course(
    course_id: Annotated[int, typer.Argument(help="Course to show")],
) -> None:
    """
    Show a course with its modules and activities.

    Pass an activity id from here to [bold]coursequiz take[/].
    """
    config = get_settings()
    with console.status("Loading course..."):
        info, modules = _or_exit(_run_course(config, course_id))
    render_course_outline(console, info, modules)


@app.command()
def progress() -> None:
    """Show the activities you have completed."""
    config = get_settings()
    render_progress(console, _or_exit(_run_progress(config)))


async def _run_courses(config: CourseQuizConfig) -> list[Course]:
    token = SessionStore(config.session_file).load().token
    async with PlatformClient(config.api, token=token) as client:
        return await client.list_courses()


async def _run_course(config: CourseQuizConfig, course_id: int) -> tuple[Course, list[Module]]:
    token = SessionStore(config.session_file).load().token
    async with PlatformClient(config.api, token=token) as client:
        return await client.get_course_outline(course_id)


async def _run_progress(config: CourseQuizConfig) -> list[ProgressEntry]:
    store = SessionStore(config.session_file)
    async with PlatformClient(config.api, token=store.load().token) as client:
        user = await PlatformIdentity(store, client).get_current_user()
        return await client.get_progress(user.id)


def _or_exit(coro):
    """Run a platform call, printing the error and exiting 1 on failure."""
    try:
        return asyncio.run(coro)
    except CourseQuizError as e:
        console.print(f"[red]{e.message}[/]")
        raise typer.Exit(1)


# =============================================================================
# Account Commands
# =============================================================================


@app.command()
def login(
    email: Annotated[str, typer.Option(prompt=True, help="Account email")],
    password: Annotated[
        str, typer.Option(prompt=True, hide_input=True, help="Account password")
    ],
) -> None:
    """Log in and resume a pending activity, if any."""
    config = get_settings()
    store = SessionStore(config.session_file)

    try:
        user = asyncio.run(_run_login(config, store, email, password))
    except CourseQuizError as e:
        console.print(f"[red]{e.message}[/]")
        raise typer.Exit(1)

    console.print(f"[green]Logged in as {user.name or user.email}[/]")

    intent = store.pop_resume()
    if intent is not None:
        console.print(f"[cyan]Resuming activity {intent.activity_id}...[/]")
        code = asyncio.run(_run_take(config, intent.activity_id))
        if code:
            raise typer.Exit(code)


async def _run_login(config: CourseQuizConfig, store: SessionStore, email: str, password: str):
    async with PlatformClient(config.api) as client:
        return await PlatformIdentity(store, client).login(email, password)


@app.command()
def register(
    name: Annotated[str, typer.Option(prompt=True, help="Your name")],
    email: Annotated[str, typer.Option(prompt=True, help="Account email")],
    password: Annotated[
        str,
        typer.Option(prompt=True, hide_input=True, confirmation_prompt=True, help="Password"),
    ],
) -> None:
    """Create an account."""
    config = get_settings()

    async def _register() -> str:
        async with PlatformClient(config.api) as client:
            return await client.register(name, email, password)

    try:
        message = asyncio.run(_register())
    except CourseQuizError as e:
        console.print(f"[red]{e.message}[/]")
        raise typer.Exit(1)
    console.print(f"[green]{message}[/] Now run [bold]coursequiz login[/].")


@app.command()
def whoami() -> None:
    """Show the logged in user."""
    config = get_settings()
    store = SessionStore(config.session_file)

    async def _whoami():
        async with PlatformClient(config.api, token=store.load().token) as client:
            return await PlatformIdentity(store, client).get_current_user()

    try:
        user = asyncio.run(_whoami())
    except UnauthenticatedError:
        console.print("[yellow]Not logged in.[/]")
        raise typer.Exit(1)
    console.print(f"{user.name or '-'} <{user.email or '-'}> (id {user.id})")


@app.command()
def logout() -> None:
    """Forget the stored session."""
    SessionStore(get_settings().session_file).clear()
    console.print("[green]Logged out.[/]")


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
