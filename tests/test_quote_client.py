import httpx
import pytest

from stockprofit.errors import QuoteFetchError
from stockprofit.fetchers.quote.client import QuotePageClient, compile_price_pattern
from stockprofit.models.config import QuoteSourceConfig

from tests.conftest import quote_page, quote_transport


def test_extract_price_strips_thousands_separators(quote_config):
    client = QuotePageClient(quote_config)
    assert client.extract_price(quote_page("1,234.56")) == 1234.56


def test_extract_price_with_custom_anchor():
    config = QuoteSourceConfig(anchor="watchlist")
    client = QuotePageClient(config)
    assert client.extract_price(quote_page("98.10", anchor="watchlist")) == 98.10


def test_anchor_is_matched_literally():
    pattern = compile_price_pattern(QuoteSourceConfig(anchor="a.b"))
    assert pattern.search("a.b12.5").group(1) == "12.5"
    assert pattern.search("axb12.5") is None


def test_extract_price_missing_element(quote_config):
    client = QuotePageClient(quote_config)
    with pytest.raises(QuoteFetchError, match="not found"):
        client.extract_price("<html><body><p>trend2W10W9M12.0</p></body></html>")


def test_extract_price_missing_anchor(quote_config):
    client = QuotePageClient(quote_config)
    with pytest.raises(QuoteFetchError, match="Price pattern"):
        client.extract_price(quote_page("12.00", anchor="somethingElse"))


def test_get_price(quote_config):
    transport = quote_transport({"AAPL": quote_page("155.50")})
    with QuotePageClient(quote_config, transport=transport) as client:
        assert client.get_price("AAPL") == 155.50


def test_get_page_non_success_status(quote_config):
    transport = quote_transport({"AAPL": 503})
    with QuotePageClient(quote_config, transport=transport) as client:
        with pytest.raises(QuoteFetchError, match="503"):
            client.get_page("AAPL")


def test_get_page_network_error(quote_config):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with QuotePageClient(quote_config, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(QuoteFetchError, match="failed"):
            client.get_page("AAPL")


def test_retries_transport_errors_when_configured():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectTimeout("slow", request=request)
        return httpx.Response(200, text=quote_page("10.00"))

    config = QuoteSourceConfig(
        url_template="https://quotes.test/quote/{symbol}",
        retry={"max_attempts": 2, "initial_delay": 0.1, "backoff_multiplier": 1.0},
    )
    with QuotePageClient(config, transport=httpx.MockTransport(handler)) as client:
        assert client.get_price("AAPL") == 10.0
    assert len(calls) == 2


def test_no_retry_by_default(quote_config):
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectTimeout("slow", request=request)

    with QuotePageClient(quote_config, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(QuoteFetchError):
            client.get_price("AAPL")
    assert len(calls) == 1


def test_extract_price_rejects_overflowing_capture(quote_config):
    client = QuotePageClient(quote_config)
    with pytest.raises(QuoteFetchError, match="Invalid price"):
        client.extract_price(quote_page("9" * 400 + ".0"))
