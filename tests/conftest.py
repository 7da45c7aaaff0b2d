import threading
from collections.abc import Callable

import httpx
import pytest

from stockprofit.errors import MailError
from stockprofit.models.config import QuoteSourceConfig
from stockprofit.storage.objects import ObjectNotFoundError, ObjectStoreError


def quote_page(price: str, anchor: str = "trend2W10W9M") -> str:
    return (
        "<html><body>"
        '<div id="quote-header-info">'
        "<h1>Example Inc.</h1>"
        f"<span>{anchor}</span><span>{price}</span>"
        "<span>+1.20 (+0.5%)</span>"
        "</div>"
        "</body></html>"
    )


def quote_transport(
    pages: dict[str, str | int],
    on_request: Callable[[httpx.Request], None] | None = None,
) -> httpx.MockTransport:
    """Serve quote pages keyed by symbol; int values are error statuses."""

    def handler(request: httpx.Request) -> httpx.Response:
        if on_request is not None:
            on_request(request)
        symbol = request.url.path.rsplit("/", 1)[-1]
        page = pages.get(symbol, 404)
        if isinstance(page, int):
            return httpx.Response(page, text="error")
        return httpx.Response(200, text=page)

    return httpx.MockTransport(handler)


class FakeStore:
    """In-memory object store."""

    def __init__(self, objects: dict[tuple[str, str], bytes] | None = None, fail_put: bool = False):
        self.objects = dict(objects or {})
        self.fail_put = fail_put
        self.puts: list[tuple[str, str, bytes]] = []
        self.lock = threading.Lock()

    def get(self, bucket: str, key: str) -> bytes:
        try:
            return self.objects[(bucket, key)]
        except KeyError:
            raise ObjectNotFoundError(bucket, key)

    def put(self, bucket: str, key: str, data: bytes) -> None:
        with self.lock:
            self.puts.append((bucket, key, data))
        if self.fail_put:
            raise ObjectStoreError("AccessDenied")
        self.objects[(bucket, key)] = data


class FakeMailer:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict[str, str]] = []

    def send(self, to: str, sender: str, subject: str, body: str) -> None:
        self.sent.append({"to": to, "sender": sender, "subject": subject, "body": body})
        if self.fail:
            raise MailError("Email address is not verified.", code="MessageRejected")


@pytest.fixture()
def quote_config() -> QuoteSourceConfig:
    return QuoteSourceConfig(url_template="https://quotes.test/quote/{symbol}", timeout=5.0)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "STOCK_API_KEY", "BUCKET", "S3_FILE_PATH", "S3_STOCK_DATA",
        "MAIL_TO_ADDRESS", "MAIL_SENDER_ADDRESS", "MAIL_SUBJECT",
        "AWS_REGION", "SYMBOL_SOURCE", "LOG_LEVEL", "CONFIG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
