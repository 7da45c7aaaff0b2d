"""Profit job CLI commands."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from stockprofit.config import load_profit_config
from stockprofit.errors import StockProfitError
from stockprofit.handler import build_job
from stockprofit.models.config import Settings
from stockprofit.models.position import Batch
from stockprofit.notify.mail import ConsoleMailer
from stockprofit.reports.profit import build_report, render_report
from stockprofit.sources.positions import parse_position_list
from stockprofit.storage.objects import LocalObjectStore


app = typer.Typer(help="Stock profit/loss commands")
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Setup logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@app.command("run")
def run_job(
    source: Annotated[
        Optional[str],
        typer.Option("--source", "-s", help="Position source: static or storage")
    ] = None,
    store_dir: Annotated[
        Optional[Path],
        typer.Option("--store-dir", help="Use a local directory instead of S3")
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML config file")
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the report mail instead of sending it")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """Fetch quotes, write the snapshot and mail the report.

    Example:
        stock-profit portfolio run --source static --store-dir data --dry-run
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    settings = Settings()
    if source is not None:
        if source not in ("static", "storage"):
            console.print(f"[red]Error:[/red] Unknown source: {source}")
            console.print("Supported sources: static, storage")
            raise typer.Exit(1)
        settings.SYMBOL_SOURCE = source
    if config_file is not None:
        settings.CONFIG_FILE = str(config_file)

    try:
        job = build_job(
            settings,
            config=load_profit_config(settings.CONFIG_FILE),
            store=LocalObjectStore(store_dir) if store_dir else None,
            mailer=ConsoleMailer(console) if dry_run else None,
        )
        result = job.run()
    except StockProfitError as e:
        console.print(f"\n[red]Error:[/red] {e}")
        logger.debug("Job failed", exc_info=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)

    blanks = sum(1 for p in result.batch.body if p.is_blank)
    console.print()
    console.print("[bold green]✓ Run completed[/bold green]")
    console.print(f"  Positions: {len(result.batch.body)}")
    console.print(f"  Snapshot: {settings.BUCKET}/{result.snapshot_key}")
    if blanks:
        console.print(f"  [yellow]Failed quotes: {blanks}[/yellow]")
    if not result.mail_sent:
        console.print("  [yellow]Report mail was not sent[/yellow]")


@app.command("parse")
def parse_list(
    path: Annotated[Path, typer.Argument(help="Position list file (symbol,bid,value,hold)")],
) -> None:
    """Parse a position list file and show the positions."""
    if not path.is_file():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    positions = parse_position_list(path.read_bytes())

    table = Table(title=f"Positions ({path})")
    table.add_column("Symbol")
    table.add_column("Bid", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Hold", justify="right")
    for p in positions:
        table.add_row(p.symbol, f"{p.bid:.2f}", f"{p.value:.2f}", str(p.hold))

    console.print(table)
    console.print(f"{len(positions)} positions")


@app.command("report")
def show_report(
    path: Annotated[Path, typer.Argument(help="Snapshot JSON file")],
) -> None:
    """Render the profit/loss report of a saved snapshot."""
    if not path.is_file():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    try:
        batch = Batch.from_json(path.read_bytes())
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid snapshot: {e}")
        raise typer.Exit(1)

    console.print(f"[bold]Snapshot {batch.created_at}[/bold]")
    console.print(render_report(build_report(batch)), markup=False, highlight=False)


if __name__ == "__main__":
    app()
