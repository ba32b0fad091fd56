"""
Command-line interface for the Palimpseste bot.

Uses Typer to expose the scheduled run and a single-page diagnostic
command. Supports loading .env files for the publishing credentials.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from .config import load_config
from .core.types import SourceSite
from .output.publisher import PublishError
from .runner import ExhaustedError, inspect_page, run_pipeline

try:
    from dotenv import load_dotenv
except Exception:  # noqa: BLE001
    load_dotenv = None

EXIT_EXHAUSTED = 1
EXIT_PUBLISH_FAILED = 2

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    dry_run: bool = typer.Option(False, "--dry-run", help="Format the post without publishing."),
    max_attempts: int | None = typer.Option(
        None, "--max-attempts", min=1, help="Override the attempt budget."
    ),
    seed: int | None = typer.Option(None, "--seed", help="Seed the random generator."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log file format: jsonl or plain."
    ),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    log_dir: Path = typer.Option(Path("logs"), "--log-dir", help="Directory for the log file."),
):
    """Find one excerpt and publish it.

    Exits 0 on success, 1 when no excerpt was found within the attempt
    budget (or credentials are missing), 2 when publishing failed.
    """
    if load_dotenv is not None:
        load_dotenv()

    cfg = load_config(str(config) if config else None)

    if max_attempts is not None:
        cfg.selection.max_attempts = max_attempts
    if log_level:
        cfg.logging.level = log_level
    if log_format:
        cfg.logging.format = log_format
    if log_file is not None:
        cfg.logging.file = log_file

    try:
        result = run_pipeline(cfg, dry_run=dry_run, console=console, seed=seed, log_dir=log_dir)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=EXIT_EXHAUSTED)
    except ExhaustedError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=EXIT_EXHAUSTED)
    except PublishError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=EXIT_PUBLISH_FAILED)

    console.print(result.post.text, markup=False)
    if result.published is not None:
        console.print(f"Published: {result.published.url}")
    else:
        console.print(f"Dry run, not published ({len(result.post)} chars)")


@app.command()
def excerpt(
    title: str = typer.Option(..., "--title", "-t", help="Page title to inspect."),
    lang: str = typer.Option("fr", "--lang", "-l", help="Language of the source site."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    seed: int | None = typer.Option(None, "--seed", help="Seed the random generator."),
):
    """Run extraction, quality gate and excerpt selection on one page."""
    cfg = load_config(str(config) if config else None)
    source = next((s for s in cfg.sources if s.lang == lang), None)
    if source is None:
        source = SourceSite(lang=lang, base_url=f"https://{lang}.wikisource.org")

    report = inspect_page(cfg, source, title, seed=seed)
    if report is None:
        console.print(f"[red]Could not fetch {title!r} from {source.base_url}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]{report.title}[/bold] {report.source_url}")
    console.print(f"Author: {report.author or '-'}")
    console.print(f"Text: {len(report.text)} chars")
    console.print(f"Quality: {report.quality or 'ok'}")
    if report.excerpt:
        console.print(report.excerpt, markup=False)


if __name__ == "__main__":
    app()
