"""Data models for positions, batches and job configuration."""

from .position import Batch, Position
from .config import ProfitConfig, QuoteSourceConfig, RetryConfig, Settings

__all__ = [
    "Batch",
    "Position",
    "ProfitConfig",
    "QuoteSourceConfig",
    "RetryConfig",
    "Settings",
]
