"""Profit/loss reporting."""

from .profit import ProfitLine, ProfitReport, build_report, render_report

__all__ = ["ProfitLine", "ProfitReport", "build_report", "render_report"]
