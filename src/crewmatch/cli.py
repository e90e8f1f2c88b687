"""Command-line interface for crewmatch."""

from pathlib import Path
from typing import List, Optional

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

from crewmatch.config import settings
from crewmatch.core.models import EvaluationRecord, PostingSnapshot, ProfileSnapshot
from crewmatch.evaluation.stats import EvaluationStatsEngine
from crewmatch.jobs.ranker import create_recommendation_ranker
from crewmatch.jobs.schedule import recommend_by_schedule
from crewmatch.utils.logging import configure_logging
from crewmatch.utils.timeutil import to_instant

app = typer.Typer(
    name="crewmatch",
    help="crewmatch - job posting recommendations and application lifecycle",
    add_completion=False,
)
console = Console()

_postings_adapter = TypeAdapter(List[PostingSnapshot])
_evaluations_adapter = TypeAdapter(List[EvaluationRecord])


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(code=1)


@app.callback()
def main_callback() -> None:
    configure_logging()


@app.command()
def rank(
    profile_file: Path = typer.Argument(..., help="JSON file with a candidate profile"),
    postings_file: Path = typer.Argument(..., help="JSON file with a list of postings"),
    applied: Optional[List[str]] = typer.Option(None, "--applied", help="Posting id already applied to"),
    now: Optional[str] = typer.Option(None, help="Reference time (ISO-8601), defaults to now"),
    show_all: bool = typer.Option(False, "--all", help="Show every ranked posting, not only the preview"),
) -> None:
    """Rank postings for a candidate profile."""
    try:
        profile = ProfileSnapshot.model_validate_json(_read(profile_file))
        postings = _postings_adapter.validate_json(_read(postings_file))
        reference_time = to_instant(now) if now else None
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid input: {e}[/red]")
        raise typer.Exit(code=1)

    ranker = create_recommendation_ranker()
    result = ranker.rank(profile, postings, frozenset(applied or ()), reference_time)

    table = Table(title="Recommended postings")
    table.add_column("#", justify="right")
    table.add_column("Posting", style="cyan")
    table.add_column("Title")
    table.add_column("Location")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Fit")

    rows = result.items if show_all else result.preview
    for position, item in enumerate(rows, start=1):
        table.add_row(
            str(position),
            item.posting.id,
            item.posting.title,
            item.posting.location,
            str(item.score),
            item.fit_level,
        )

    console.print(table)
    if result.has_more and not show_all:
        console.print(f"{len(result) - len(rows)} more postings (use --all)")


@app.command()
def stats(
    user_id: str = typer.Argument(..., help="User whose evaluations are aggregated"),
    evaluations_file: Path = typer.Argument(..., help="JSON file with a list of evaluations"),
) -> None:
    """Compute trust stats for a user."""
    try:
        evaluations = _evaluations_adapter.validate_json(_read(evaluations_file))
    except ValidationError as e:
        console.print(f"[red]Invalid input: {e}[/red]")
        raise typer.Exit(code=1)

    result = EvaluationStatsEngine().compute_stats(user_id, evaluations)

    table = Table(title=f"Trust stats for {user_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Evaluations", str(result.total_evaluations))
    table.add_row("Average rating", f"{result.average_rating:.2f}")
    table.add_row("Rehire rate", f"{result.rehire_rate:.0f}%")
    table.add_row("Last work date", result.last_work_date.isoformat() if result.last_work_date else "-")
    table.add_row("Trust level", result.trust_level.value)

    console.print(table)


@app.command()
def schedule(
    profile_file: Path = typer.Argument(..., help="JSON file with a candidate profile and availability"),
    postings_file: Path = typer.Argument(..., help="JSON file with a list of postings"),
    applied: Optional[List[str]] = typer.Option(None, "--applied", help="Posting id already applied to"),
    limit: int = typer.Option(10, min=0, help="Maximum number of postings to show"),
) -> None:
    """Recommend postings by shift coverage."""
    try:
        profile = ProfileSnapshot.model_validate_json(_read(profile_file))
        postings = _postings_adapter.validate_json(_read(postings_file))
    except ValidationError as e:
        console.print(f"[red]Invalid input: {e}[/red]")
        raise typer.Exit(code=1)

    results = recommend_by_schedule(profile, postings, frozenset(applied or ()), limit)
    if not results:
        console.print("No postings match the given availability")
        return

    table = Table(title="Schedule matches")
    table.add_column("#", justify="right")
    table.add_column("Posting", style="cyan")
    table.add_column("Title")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Coverage", justify="right")
    table.add_column("Quality")

    for position, item in enumerate(results, start=1):
        table.add_row(
            str(position),
            item.posting.id,
            item.posting.title,
            str(item.score),
            f"{item.percentage}%",
            item.quality,
        )

    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    table = Table(title="crewmatch Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Preview Size", str(settings.preview_size))
    table.add_row("Max Transition Retries", str(settings.max_transition_retries))
    table.add_row("Retry Backoff (s)", str(settings.retry_backoff_seconds))

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from crewmatch import __version__
    console.print(f"crewmatch v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
