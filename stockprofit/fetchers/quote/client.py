"""Quote page HTTP client and price extraction."""

import math
import re
import threading
from typing import Any

import httpx
from bs4 import BeautifulSoup
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from stockprofit.errors import QuoteFetchError
from stockprofit.models.config import QuoteSourceConfig


def compile_price_pattern(config: QuoteSourceConfig) -> re.Pattern[str]:
    """Compile the price regex with the configured anchor substituted in."""
    pattern = config.price_pattern.replace("{anchor}", re.escape(config.anchor))
    return re.compile(pattern)


class QuotePageClient:
    """Client for HTML quote pages.

    Fetches one page per symbol and scrapes the price out of it. The
    underlying ``httpx.Client`` is shared and safe to use from worker threads.
    """

    def __init__(
        self,
        config: QuoteSourceConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        self.config = config
        self.price_pattern = compile_price_pattern(config)
        self._transport = transport
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client.

        Called from worker threads; only one client is ever created.
        """
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=self.config.timeout,
                    headers=dict(self.config.headers),
                    follow_redirects=True,
                    transport=self._transport,
                )
            return self._client

    def open(self) -> None:
        """Create the HTTP client ahead of a fan-out."""
        self._get_client()

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> "QuotePageClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _make_request(self, url: str) -> httpx.Response:
        """Make HTTP request with retry logic."""
        client = self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.config.retry.max_attempts),
            wait=wait_exponential(
                multiplier=self.config.retry.backoff_multiplier,
                min=self.config.retry.initial_delay,
            ),
            reraise=True,
        )
        def _do_request() -> httpx.Response:
            response = client.get(url)
            response.raise_for_status()
            return response

        return _do_request()

    def get_page(self, symbol: str) -> str:
        """Fetch the raw quote page for a symbol.

        Raises:
            QuoteFetchError: On transport errors or non-success status
        """
        url = self.config.build_url(symbol)
        try:
            response = self._make_request(url)
        except httpx.HTTPStatusError as e:
            raise QuoteFetchError(
                f"Quote page for {symbol} returned {e.response.status_code}",
                e.response.text[:500],
            ) from e
        except httpx.HTTPError as e:
            raise QuoteFetchError(f"Quote page for {symbol} failed: {e}") from e
        return response.text

    def extract_price(self, html: str) -> float:
        """Extract the price from quote page markup.

        The text of the configured element has its thousands separators
        removed before the price pattern is applied.

        Raises:
            QuoteFetchError: If the element, the match or the number is missing
        """
        soup = BeautifulSoup(html, "html.parser")
        element = soup.select_one(self.config.selector)
        if element is None:
            raise QuoteFetchError(
                f"Element '{self.config.selector}' not found", html[:500]
            )

        text = element.get_text().replace(",", "")
        match = self.price_pattern.search(text)
        if match is None:
            raise QuoteFetchError(
                f"Price pattern '{self.price_pattern.pattern}' not found", text[:500]
            )

        try:
            price = float(match.group(1))
        except (IndexError, ValueError) as e:
            raise QuoteFetchError(f"Invalid price capture: {e}", text[:500]) from e
        if not math.isfinite(price):
            raise QuoteFetchError(f"Invalid price capture: {price}", text[:500])
        return price

    def get_price(self, symbol: str) -> float:
        """Fetch and extract the current price for a symbol."""
        return self.extract_price(self.get_page(symbol))
