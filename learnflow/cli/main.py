"""
learnflow CLI - inspect scoring, scheduling and selection from the terminal.

Usage:
    learnflow score question.json '"Paris"'     # Score one submission
    learnflow audit questions.json              # Content integrity audit
    learnflow schedule --quality 4 -n 2         # One SM-2 step
    learnflow select pool.json --stats s.json   # Rank a question pool
    learnflow config                            # Show effective settings

Question, stats and attempt files are JSON exports from the platform
database (a list, or an object holding the list under a named key).
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress
from rich.table import Table

from learnflow.adaptive.selector import select_adaptive_batch
from learnflow.config import get_settings
from learnflow.exceptions import ContentIntegrityError
from learnflow.scheduling.sm2 import calculate_sm2
from learnflow.scoring import AuditReport, audit_question, score_question_answer
from learnflow.scoring.normalizer import parse_json_loose

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="learnflow",
    help="Answer scoring, spaced repetition and adaptive selection tools",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def _load_json(path: Path) -> Any:
    if not path.exists():
        console.print(f"[red]File not found: {path}[/]")
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON in {path}: {e}[/]")
        raise typer.Exit(1)


def _load_records(path: Path | None, key: str) -> list:
    """Load a list of records from a file holding a list or {key: [...]}."""
    if path is None:
        return []
    data = _load_json(path)
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        console.print(f"[red]{path} does not contain a list of {key}[/]")
        raise typer.Exit(1)
    return data


# =============================================================================
# Scoring Commands
# =============================================================================


@app.command()
def score(
    question_file: Annotated[
        Path, typer.Argument(help="JSON file with one stored question")
    ],
    answer: Annotated[
        str, typer.Argument(help="Submission (JSON value, or raw text)")
    ],
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the raw result")
    ] = False,
) -> None:
    """
    Score one submission against a stored question.

    Exit codes:
        0 - Scored (correct or incorrect)
        1 - Stored question data is unresolvable
    """
    question = _load_json(question_file)
    result = score_question_answer(
        question, parse_json_loose(answer), get_settings().scoring_config()
    )

    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
    else:
        table = Table(title="Score Result")
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("OK", "Yes" if result.ok else "No")
        table.add_row("Correct", "✓ Yes" if result.is_correct else "✗ No")
        table.add_row("Correct Answer", json.dumps(result.correct_answer, default=str))
        if result.details:
            table.add_row("Details", json.dumps(result.details, default=str))
        console.print(table)

    try:
        result.raise_for_integrity()
    except ContentIntegrityError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)


@app.command()
def audit(
    questions_file: Annotated[
        Path, typer.Argument(help="JSON file with a list of stored questions")
    ],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output report path")
    ] = None,
) -> None:
    """
    Check stored questions for unresolvable answer data.

    Exit codes:
        0 - All questions resolvable
        1 - Integrity issues found
    """
    questions = _load_records(questions_file, "questions")
    scoring_config = get_settings().scoring_config()
    console.print(f"[cyan]🔍 Auditing {len(questions)} questions from {questions_file}...[/]")

    report = AuditReport()
    with Progress(console=console) as progress:
        task = progress.add_task("Auditing...", total=len(questions))
        for question in questions:
            report.total += 1
            finding = audit_question(question, scoring_config)
            if finding is not None:
                report.findings.append(finding)
            progress.advance(task)

    _print_audit_report(report, output)

    if report.findings:
        raise typer.Exit(1)


def _print_audit_report(report: AuditReport, output: Path | None) -> None:
    """Print audit results."""
    if report.findings:
        table = Table(title="Integrity Issues")
        table.add_column("ID", style="cyan")
        table.add_column("Type")
        table.add_column("Reason", style="red")
        for finding in report.findings:
            table.add_row(str(finding.question_id), str(finding.question_type), finding.reason)
        console.print(table)
    else:
        console.print("\n[green]✓ All questions passed integrity checks![/]")

    console.print(
        f"\n[dim]Total: {report.total} | Valid: {report.valid} | "
        f"Invalid: {report.invalid} | Health: {report.health}%[/]"
    )

    if output:
        payload = {"timestamp": datetime.now().isoformat(), **report.to_dict()}
        output.write_text(json.dumps(payload, indent=2, default=str))
        console.print(f"[dim]Report written to {output}[/]")


# =============================================================================
# Scheduling Commands
# =============================================================================


@app.command()
def schedule(
    quality: Annotated[
        int, typer.Option("--quality", "-q", min=0, max=5, help="Recall quality 0-5")
    ],
    repetitions: Annotated[
        int, typer.Option("--repetitions", "-n", min=0, help="Consecutive correct recalls")
    ] = 0,
    ease: Annotated[
        float, typer.Option("--ease", "-e", help="Current ease factor")
    ] = 2.5,
    interval: Annotated[
        int, typer.Option("--interval", "-i", min=1, help="Current interval in days")
    ] = 1,
) -> None:
    """Compute the next SM-2 schedule state."""
    result = calculate_sm2(quality, repetitions, ease, interval, get_settings().sm2_config())
    due = datetime.now() + timedelta(days=result.interval)

    table = Table(title="Next Review")
    table.add_column("Field", style="cyan")
    table.add_column("Before", style="dim")
    table.add_column("After", style="green")
    table.add_row("Ease Factor", f"{ease:.2f}", f"{result.ease_factor:.2f}")
    table.add_row("Interval (days)", str(interval), str(result.interval))
    table.add_row("Repetitions", str(repetitions), str(result.repetitions))
    table.add_row("Due", "", due.strftime("%Y-%m-%d"))
    console.print(table)


# =============================================================================
# Selection Commands
# =============================================================================


@app.command()
def select(
    pool_file: Annotated[
        Path, typer.Argument(help="JSON file with the topic's question pool")
    ],
    stats_file: Annotated[
        Path | None, typer.Option("--stats", "-s", help="Per-question stats JSON")
    ] = None,
    attempts_file: Annotated[
        Path | None, typer.Option("--attempts", "-a", help="Recent attempts JSON")
    ] = None,
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", help="Number of questions to return")
    ] = None,
) -> None:
    """Rank a question pool for the next practice batch."""
    batch = select_adaptive_batch(
        _load_records(pool_file, "questions"),
        _load_records(stats_file, "stats"),
        _load_records(attempts_file, "attempts"),
        limit=limit,
        config=get_settings().selector_config(),
    )

    accuracy = "n/a" if batch.recent_accuracy is None else f"{batch.recent_accuracy:.0%}"
    console.print(Panel(
        f"Target difficulty: [bold]{batch.target_difficulty}[/] | "
        f"Recent accuracy: [bold]{accuracy}[/] | Samples: [bold]{batch.samples}[/]",
        title="[bold cyan]Adaptive Batch[/bold cyan]",
        border_style="cyan",
    ))

    table = Table()
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Diff", justify="right")
    table.add_column("Score", justify="right", style="green")
    for position, entry in enumerate(batch.ranked, 1):
        table.add_row(
            str(position),
            str(entry.question.id),
            str(entry.question.type),
            str(entry.question.difficulty),
            f"{entry.score.total:.0f}",
        )
    console.print(table)


# =============================================================================
# Status Commands
# =============================================================================


@app.command()
def config() -> None:
    """Show effective configuration."""
    console.print_json(json.dumps(get_settings().model_dump(), indent=2, default=str))


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
) -> None:
    """
    learnflow - answer scoring and adaptive learning tools

    \b
    Quick Start:
      learnflow audit questions.json    # Find broken answer data
      learnflow schedule -q 4 -n 2      # Next review interval
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else get_settings().log_level)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
