"""Stock profit/loss snapshot job."""

__version__ = "0.1.0"
