"""Concurrent quote fetching for a list of positions."""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field
from typing import Any

import httpx

from stockprofit.errors import QuoteFetchError
from stockprofit.models.config import QuoteSourceConfig
from stockprofit.models.position import Position

from .client import QuotePageClient


logger = logging.getLogger(__name__)


@dataclass
class FetchProgress:
    """Progress tracking for a fan-out run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    timed_out: int = 0
    failed_symbols: list[str] = field(default_factory=list)
    start_time: float = field(default_factory=time.time)

    @property
    def duration(self) -> float:
        return time.time() - self.start_time


class QuoteFetcher:
    """Fetches current prices for positions, one worker per position.

    A failed fetch never raises: it yields a blank ``Position`` so a run
    always returns one record per input position.
    """

    def __init__(
        self,
        config: QuoteSourceConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        self.config = config
        self.client = QuotePageClient(config, transport=transport)

    def close(self) -> None:
        """Close resources."""
        self.client.close()

    def __enter__(self) -> "QuoteFetcher":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def fetch_one(
        self,
        position: Position,
        cancelled: threading.Event | None = None,
    ) -> Position:
        """Fetch the current price for one position.

        Returns the position with ``value`` set, or a blank position on any
        failure or when ``cancelled`` is already set.
        """
        if cancelled is not None and cancelled.is_set():
            logger.debug(f"Skipping {position.symbol}: run cancelled")
            return Position.blank()

        try:
            price = self.client.get_price(position.symbol)
        except QuoteFetchError as e:
            logger.warning(f"Quote fetch failed for {position.symbol}: {e}")
            return Position.blank()
        except Exception as e:
            logger.exception(f"Unexpected error fetching {position.symbol}: {e}")
            return Position.blank()

        logger.debug(f"{position.symbol}: {price}")
        return position.with_value(price)

    def fetch_all(self, positions: list[Position]) -> list[Position]:
        """Fetch all positions concurrently.

        Results are returned in completion order. When ``deadline`` is
        configured and elapses, outstanding positions are cancelled and
        reported as blank records.
        """
        if not positions:
            return []

        progress = FetchProgress(total=len(positions))
        cancelled = threading.Event()
        max_workers = self.config.max_workers or len(positions)

        logger.info(
            f"Fetching {len(positions)} quotes with {max_workers} workers"
        )

        self.client.open()
        executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="quote")
        futures: dict[Future[Position], Position] = {
            executor.submit(self.fetch_one, position, cancelled): position
            for position in positions
        }
        collected: set[Future[Position]] = set()
        results: list[Position] = []

        try:
            try:
                for future in as_completed(futures, timeout=self.config.deadline):
                    collected.add(future)
                    results.append(self._record(future.result(), futures[future], progress))
            except FuturesTimeoutError:
                cancelled.set()
                logger.warning(
                    f"Deadline of {self.config.deadline}s reached with "
                    f"{len(futures) - len(collected)} quotes outstanding"
                )

            for future, position in futures.items():
                if future in collected:
                    continue
                future.cancel()
                if future.done() and not future.cancelled():
                    results.append(self._record(future.result(), position, progress))
                else:
                    progress.timed_out += 1
                    results.append(self._record(Position.blank(), position, progress))

        finally:
            executor.shutdown(wait=not cancelled.is_set(), cancel_futures=True)
            logger.info(
                f"Fetch completed: {progress.succeeded}/{progress.total} quotes, "
                f"{progress.failed} failed ({progress.timed_out} timed out), "
                f"{progress.duration:.1f}s"
            )
            if progress.failed_symbols:
                logger.warning(f"Failed quotes: {', '.join(progress.failed_symbols)}")

        return results

    def _record(
        self,
        result: Position,
        requested: Position,
        progress: FetchProgress,
    ) -> Position:
        if result.is_blank:
            progress.failed += 1
            progress.failed_symbols.append(requested.symbol)
        else:
            progress.succeeded += 1
        return result
