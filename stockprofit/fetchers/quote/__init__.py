"""HTML quote page fetcher module."""

from .client import QuotePageClient
from .fetcher import QuoteFetcher

__all__ = ["QuotePageClient", "QuoteFetcher"]
