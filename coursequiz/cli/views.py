"""
Rich rendering for the activity screens.

Editable mode shows one question at a time; graded mode shows every
question with the markers computed by the review. The catalog and
progress screens are plain tables.
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from coursequiz.assessment.attempt import ActivityAttempt
from coursequiz.assessment.review import QuestionReview
from coursequiz.core.models import Course, Module, ProgressEntry

HELP_LINE = "[dim]number = choose  ·  n = next  ·  p = previous  ·  s = submit  ·  q = quit[/]"


def render_question(console: Console, attempt: ActivityAttempt) -> None:
    """Show the current question and its options."""
    question = attempt.current()
    if question is None or attempt.activity is None:
        return

    navigator = attempt.navigator
    chosen = attempt.answer_for(question.id)
    lines: list[Text | str] = [
        Text(f"Question {navigator.index + 1} of {navigator.count}", style="dim"),
        "",
        Text(question.prompt),
        "",
    ]

    if question.is_single_choice:
        for number, option in enumerate(question.options, start=1):
            if option.id == chosen:
                lines.append(Text(f" ● {number}. {option.text}", style="bold white on blue"))
            else:
                lines.append(Text(f" ○ {number}. {option.text}"))
    else:
        lines.append(Text("This question type cannot be answered here.", style="italic yellow"))

    answered = len(attempt.answers)
    total = len(attempt.activity.questions)
    console.print(
        Panel(
            Group(*lines),
            title=f"[bold cyan]{attempt.activity.name}[/]",
            subtitle=f"{answered}/{total} answered",
            border_style="cyan",
        )
    )
    if attempt.error_message:
        console.print(f"[red]{attempt.error_message}[/]")
    console.print(HELP_LINE)


def render_results(console: Console, attempt: ActivityAttempt) -> None:
    """Show score, errors and per-question feedback."""
    result = attempt.result
    if result is None or attempt.activity is None:
        return

    completed = result.completed_at.strftime("%Y-%m-%d %H:%M") if result.completed_at else "-"
    console.print(
        Panel(
            f"[bold]Score:[/] {result.score}\n"
            f"[bold]Errors:[/] {result.error_count}\n"
            f"[bold]Completed:[/] {completed}",
            title=f"[bold green]Results: {attempt.activity.name}[/]",
            border_style="green",
        )
    )
    for review in attempt.review():
        console.print(_review_panel(review))


def _review_panel(review: QuestionReview) -> Panel:
    lines: list[Text] = [Text(f"{review.number}. {review.question.prompt}"), Text("")]

    for option in review.options:
        line = Text(f"  {option.option.text}")
        if option.chosen:
            line.stylize("bold")
        if option.label:
            if not option.graded:
                style = "dim"
            elif option.correct or (option.chosen and option.verdict):
                style = "green"
            else:
                style = "red"
            line.append(f"  ({option.label})", style=style)
        lines.append(line)

    if review.explanation:
        lines.append(Text(""))
        lines.append(Text(f"Explanation: {review.explanation}", style="italic"))

    if review.correct is None:
        border = "white"
    else:
        border = "green" if review.correct else "red"
    return Panel(Group(*lines), border_style=border)


# =============================================================================
# Catalog & Progress
# =============================================================================


def render_courses(console: Console, courses: list[Course]) -> None:
    if not courses:
        console.print("[dim]No courses available at the moment.[/]")
        return

    table = Table(title="Courses")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Course", style="bold")
    table.add_column("Level")
    table.add_column("Description", style="dim")
    for course in courses:
        description = course.description
        if len(description) > 100:
            description = description[:100] + "..."
        table.add_row(str(course.id), course.name, course.difficulty or "-", description)
    console.print(table)
    console.print("[dim]Run [bold]coursequiz course ID[/] to see a course's activities.[/]")


def render_course_outline(console: Console, course: Course, modules: list[Module]) -> None:
    """Show a course with one table of activities per module."""
    header = f"[bold]Level:[/] {course.difficulty or 'Not specified'}\n[bold]Modules:[/] {len(modules)}"
    if course.description:
        header += f"\n\n{course.description}"
    console.print(Panel(header, title=f"[bold cyan]{course.name}[/]", border_style="cyan"))

    if not modules:
        console.print("[dim]This course has no content yet.[/]")
        return

    for module in modules:
        if not module.activities:
            console.print(f"[bold]{module.name}[/]: [dim]no activities yet.[/]")
            continue
        table = Table(title=module.name, title_justify="left")
        table.add_column("#", justify="right")
        table.add_column("Activity")
        table.add_column("ID", style="cyan", justify="right")
        for number, activity in enumerate(module.activities, start=1):
            table.add_row(str(number), activity.name, str(activity.id))
        console.print(table)
    console.print("[dim]Run [bold]coursequiz take ID[/] to start an activity.[/]")


def render_progress(console: Console, entries: list[ProgressEntry]) -> None:
    if not entries:
        console.print("[dim]No completed activities yet.[/]")
        return

    table = Table(title="Completed Activities")
    table.add_column("Activity", style="cyan", justify="right")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Completed")
    for entry in entries:
        completed = entry.completed_at.strftime("%Y-%m-%d %H:%M") if entry.completed_at else "-"
        table.add_row(str(entry.activity_id), str(entry.score), str(entry.error_count), completed)
    console.print(table)
