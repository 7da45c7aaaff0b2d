"""CLI entry point for stock-profit."""

import typer

from .profit import app as portfolio_app

app = typer.Typer(
    name="stock-profit",
    help="Stock quote snapshot and profit/loss report tool.",
    no_args_is_help=True,
)

# Register subcommands
app.add_typer(portfolio_app, name="portfolio", help="Portfolio quotes and reports")


if __name__ == "__main__":
    app()
