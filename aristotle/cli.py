"""
Aristotle CLI - terminal front-end for tutoring sessions.

Usage:
    aristotle presets                      # List built-in session presets
    aristotle practice -t functions        # Adaptive practice on one topic
    aristotle practice --minutes 15        # Timed practice
    aristotle exam unit-test               # Run an exam preset

During a session: type your answer, 'p' to pause, 'q' to end.
For multiple-choice items the option number is accepted as well.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from aristotle.adaptive.scoring import revision_suggestions
from aristotle.core.errors import ContentUnavailable, InvalidStateTransition
from aristotle.core.models import (
    DifficultyTier,
    Item,
    ItemType,
    ScoreSummary,
    SessionMode,
    SessionStatus,
    Verdict,
)
from aristotle.grading.pipeline import ValidationPipeline
from aristotle.integrations.content_provider import ItemBank
from aristotle.integrations.judgment_client import JudgmentClient
from aristotle.session.controller import SessionController, SubmitOutcome
from aristotle.session.presets import PRESETS, get_preset
from aristotle.session.state import EventKind, SessionEvent
from aristotle.session.timer import format_time
from config import get_settings

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="aristotle",
    help="Aristotle - adaptive practice and exam sessions in the terminal",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

DEFAULT_BANK = Path(__file__).resolve().parent / "data" / "sample_items.json"

PAUSE_INPUTS = {"p", "pause"}
QUIT_INPUTS = {"q", "quit", "end"}


def configure_logging() -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="5 MB", retention=3)


def build_controller(bank: Path) -> tuple[SessionController, JudgmentClient]:
    settings = get_settings()
    client = JudgmentClient.from_settings(settings)
    pipeline = ValidationPipeline(client if settings.has_judgment_configured() else None)
    controller = SessionController(ItemBank.from_file(bank), pipeline)
    controller.add_listener(_on_event)
    return controller, client


# =============================================================================
# Rendering
# =============================================================================


def _on_event(event: SessionEvent) -> None:
    if event.kind is EventKind.REMEDIATION:
        trigger = event.payload
        console.print(Panel(
            f"You've made repeated conceptual errors on [bold]{trigger.topic}[/].\n"
            "Let's review the concept before continuing.",
            title="[bold magenta]CONCEPT REVIEW[/]",
            border_style="magenta",
        ))
    elif event.kind is EventKind.TIER_CHANGED:
        change = event.payload
        console.print(f"[dim]Difficulty: {change.previous.value} -> {change.current.value}[/]")


def render_item(item: Item, number: int, remaining: float | None) -> None:
    body = item.prompt
    if item.options:
        body += "\n\n" + "\n".join(f"[cyan][{i + 1}][/] {opt}" for i, opt in enumerate(item.options))
    title = f"[bold cyan]Q{number} · {item.topic} · {item.tier.value} · {item.marks} mark(s)[/]"
    subtitle = f"time left {format_time(remaining)}" if remaining is not None else None
    console.print(Panel(body, title=title, subtitle=subtitle, border_style="cyan", box=box.HEAVY))


def render_verdict(verdict: Verdict) -> None:
    style = "green" if verdict.is_correct else "red"
    title = "Correct!" if verdict.is_correct else "Let's refine this"
    lines = [verdict.feedback]
    if not verdict.is_correct and verdict.error_kind.value not in ("none", "unknown"):
        lines.append(f"[dim]{verdict.error_kind.value.title()} error[/]")
    if verdict.encouragement:
        lines.append(f"[italic]{verdict.encouragement}[/]")
    if verdict.fallback_reason is not None:
        lines.append(f"[dim](checked offline: {verdict.fallback_reason.value})[/]")
    console.print(Panel("\n".join(lines), title=f"[bold {style}]{title}[/]", border_style=style))


def render_summary(summary: ScoreSummary) -> None:
    table = Table(title="Session Summary", box=box.SIMPLE_HEAVY)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Marks", f"{summary.marks_obtained}/{summary.marks_possible}")
    table.add_row("Accuracy", f"{summary.accuracy:.1%}")
    table.add_row("Answered", str(summary.items_answered))
    table.add_row("Average time", f"{summary.average_time_seconds:.1f}s")
    if summary.timed_items:
        table.add_row("On time", f"{summary.items_on_time}/{summary.timed_items}")
    table.add_row("Best streak", str(summary.best_streak))
    for topic, score in sorted(summary.topics.items()):
        table.add_row(f"  {topic}", f"{score.correct}/{score.total} ({score.accuracy:.0%})")
    console.print(table)
    for line in revision_suggestions(summary):
        console.print(f"• {line}")


def resolve_choice(item: Item, raw: str) -> str:
    """Map an option number to its text for multiple-choice items."""
    text = raw.strip()
    if item.item_type is ItemType.MULTIPLE_CHOICE and item.options and text.isdigit():
        index = int(text) - 1
        if 0 <= index < len(item.options):
            return item.options[index]
    return text


# =============================================================================
# Session loop
# =============================================================================


async def run_session(controller: SessionController) -> None:
    number = 1
    while controller.status is not SessionStatus.COMPLETED:
        snapshot = controller.snapshot()
        item = snapshot.current_item
        if item is None:
            console.print("[yellow]No item available right now.[/]")
            await controller.end()
            break

        render_item(item, number, snapshot.time_remaining)
        raw = await asyncio.to_thread(Prompt.ask, "[bold yellow]>[/]")
        command = raw.strip().lower()

        try:
            if command in QUIT_INPUTS:
                await controller.end()
                break
            if command in PAUSE_INPUTS:
                await controller.pause()
                await asyncio.to_thread(Prompt.ask, "[dim]Paused. Press Enter to resume[/]", default="")
                await controller.resume()
                continue

            attempt = controller.new_attempt(resolve_choice(item, raw))
            outcome: SubmitOutcome = await controller.submit(attempt)
        except InvalidStateTransition:
            if controller.status is SessionStatus.COMPLETED:
                console.print("[bold red]Time's up![/]")
                break
            raise

        if outcome.applied:
            render_verdict(outcome.verdict)
            number += 1
        if outcome.content_error is not None:
            console.print(f"[yellow]{outcome.content_error}[/]")

    final = controller.snapshot()
    reason = final.completion_reason.value if final.completion_reason else "ended"
    console.print(f"\n[bold]Session complete[/] [dim]({reason})[/]")
    render_summary(final.summary)


async def _start_and_run(
    bank: Path,
    mode: SessionMode,
    topics: tuple[str, ...],
    items: int | None,
    budget: float | None,
    tier: DifficultyTier,
    item_types: tuple[ItemType, ...],
) -> None:
    controller, client = build_controller(bank)
    try:
        await controller.start(mode, topics, items, budget, tier, item_types)
        await run_session(controller)
    except ContentUnavailable as e:
        console.print(f"[red]Could not start session: {e}[/]")
        raise typer.Exit(1)
    finally:
        await controller.close()
        await client.close()


# =============================================================================
# Commands
# =============================================================================


@app.command()
def practice(
    topic: Annotated[
        str, typer.Option("--topic", "-t", help="Topic to practice")
    ] = "quadratic-equations",
    items: Annotated[
        int | None, typer.Option("--items", "-n", help="Number of items (omit for default)")
    ] = None,
    tier: Annotated[
        DifficultyTier, typer.Option("--tier", help="Starting difficulty")
    ] = DifficultyTier.EASY,
    item_type: Annotated[
        ItemType, typer.Option("--type", help="Item type")
    ] = ItemType.MULTIPLE_CHOICE,
    minutes: Annotated[
        float | None, typer.Option("--minutes", "-m", help="Time budget in minutes")
    ] = None,
    bank: Annotated[
        Path, typer.Option("--bank", "-b", help="Item bank JSON file")
    ] = DEFAULT_BANK,
) -> None:
    """
    Start an adaptive practice session.

    Examples:
        aristotle practice                       # 10 easy MCQs, untimed
        aristotle practice -t functions -n 5     # 5 items on functions
        aristotle practice --type free_form -m 10
    """
    configure_logging()
    count = items if items is not None else get_settings().default_item_count
    budget = minutes * 60 if minutes else None
    asyncio.run(_start_and_run(
        bank, SessionMode.PRACTICE, (topic,), count, budget, tier, (item_type,)
    ))


@app.command()
def exam(
    preset: Annotated[str, typer.Argument(help="Preset key (see `aristotle presets`)")],
    bank: Annotated[
        Path, typer.Option("--bank", "-b", help="Item bank JSON file")
    ] = DEFAULT_BANK,
) -> None:
    """Run a timed exam from a preset."""
    configure_logging()
    try:
        chosen = get_preset(preset)
    except KeyError as e:
        console.print(f"[red]{e.args[0]}[/]")
        raise typer.Exit(1)

    console.print(f"[cyan]{chosen.name}[/] - {chosen.description}")
    asyncio.run(_start_and_run(
        bank,
        chosen.mode,
        chosen.topics,
        chosen.item_count,
        chosen.time_budget_seconds,
        chosen.initial_tier,
        chosen.item_types(),
    ))


@app.command()
def presets() -> None:
    """List built-in session presets."""
    table = Table(title="Session Presets", box=box.SIMPLE_HEAVY)
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Mode")
    table.add_column("Items", justify="right")
    table.add_column("Duration", justify="right")
    for preset in PRESETS.values():
        duration = f"{preset.duration_minutes} min" if preset.duration_minutes else "untimed"
        table.add_row(preset.key, preset.name, preset.mode.value, str(preset.item_count), duration)
    console.print(table)


def run() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    run()
