"""Profit/loss aggregation and fixed-width text rendering."""

from pydantic import BaseModel, Field

from stockprofit.models.position import Batch, Position


SEPARATOR_WIDTH = 30
TOTAL_INDENT = 27


class ProfitLine(BaseModel):
    """Report line for one position."""

    position: Position
    earn: float


class ProfitReport(BaseModel):
    """Per-position and total profit/loss of a batch."""

    created_at: str
    lines: list[ProfitLine] = Field(default_factory=list)
    total: float = 0.0


def build_report(batch: Batch) -> ProfitReport:
    lines = []
    total = 0.0
    for position in batch.body:
        earn = position.earn
        lines.append(ProfitLine(position=position, earn=earn))
        total += earn
    return ProfitReport(created_at=batch.created_at, lines=lines, total=total)


def render_report(report: ProfitReport) -> str:
    """Render the report as the plain-text mail body.

    Example::

        AAPL     150.00     155.00     10      50.00
        ------------------------------
                                   Profit Loss:      50.00
    """
    out = []
    for line in report.lines:
        p = line.position
        out.append(f"{p.symbol} {p.bid:10.2f} {p.value:10.2f} {p.hold:6d} {line.earn:10.2f}\n")
    out.append("-" * SEPARATOR_WIDTH + "\n")
    out.append(f"{' ' * TOTAL_INDENT}Profit Loss: {report.total:10.2f}\n")
    return "".join(out)
