"""Request entry point: credential gate and job orchestration.

Deployed as an AWS Lambda function behind an API Gateway proxy integration::

    handler: stockprofit.handler.lambda_handler
"""

import hmac
import logging
from collections.abc import Callable, Mapping
from datetime import date
from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, Field

from stockprofit.config import load_profit_config
from stockprofit.errors import AuthError, ConfigError, MailError, StockProfitError
from stockprofit.fetchers.quote import QuoteFetcher
from stockprofit.models.config import ProfitConfig, Settings
from stockprofit.models.position import Batch
from stockprofit.notify.mail import Mailer, SesMailer
from stockprofit.reports.profit import build_report, render_report
from stockprofit.sources.positions import StaticSymbolSource, StorageSymbolSource, SymbolSource
from stockprofit.storage.objects import ObjectStore, S3ObjectStore
from stockprofit.storage.snapshot import SnapshotStorage, serialize_batch


logger = logging.getLogger(__name__)

API_KEY_HEADER = "stock-api-key"
BAD_REQUEST_BODY = "status bad request."


class ApiResponse(BaseModel):
    """HTTP-style response returned to the caller."""

    status_code: int
    body: str
    content_type: str = Field(default="application/json")

    def to_proxy(self) -> dict[str, Any]:
        """Convert to an API Gateway proxy response."""
        return {
            "statusCode": self.status_code,
            "headers": {"Content-Type": self.content_type},
            "body": self.body,
        }


class RunResult(BaseModel):
    """Outcome of one successful job run."""

    batch: Batch
    payload: bytes
    snapshot_key: str
    report: str
    mail_sent: bool


def get_header(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def authorize(headers: Mapping[str, str] | None, secret: str) -> None:
    """Check the request credential against the configured secret.

    Raises:
        AuthError: If the secret is unset or the header is missing or wrong
    """
    supplied = get_header(headers, API_KEY_HEADER)
    if not secret:
        raise AuthError("API key is not configured")
    if supplied is None or not hmac.compare_digest(supplied.encode(), secret.encode()):
        raise AuthError(BAD_REQUEST_BODY)


class ProfitJob:
    """One run: positions -> quotes -> snapshot -> report mail."""

    def __init__(
        self,
        source: SymbolSource,
        fetcher: QuoteFetcher,
        snapshots: SnapshotStorage,
        mailer: Mailer,
        mail_to: str,
        mail_from: str,
        mail_subject: str,
        today: Callable[[], date] = date.today,
    ):
        self.source = source
        self.fetcher = fetcher
        self.snapshots = snapshots
        self.mailer = mailer
        self.mail_to = mail_to
        self.mail_from = mail_from
        self.mail_subject = mail_subject
        self.today = today

    def run(self) -> RunResult:
        """Run the job.

        Raises:
            SymbolSourceError: If the position list can't be loaded
            SerializationError: If the batch can't be serialized
            StorageWriteError: If the snapshot can't be written
        """
        positions = self.source.load()

        with self.fetcher:
            fetched = self.fetcher.fetch_all(positions)

        run_date = self.today()
        batch = Batch.create(fetched, run_date)
        payload = serialize_batch(batch)
        key = self.snapshots.write(payload, run_date)

        report = render_report(build_report(batch))
        mail_sent = True
        try:
            self.mailer.send(self.mail_to, self.mail_from, self.mail_subject, report)
        except MailError as e:
            mail_sent = False
            logger.error(f"Report mail failed: {e}")

        return RunResult(
            batch=batch,
            payload=payload,
            snapshot_key=key,
            report=report,
            mail_sent=mail_sent,
        )


def build_symbol_source(settings: Settings, config: ProfitConfig, store: ObjectStore) -> SymbolSource:
    if settings.SYMBOL_SOURCE == "static":
        return StaticSymbolSource(config.positions)
    return StorageSymbolSource(store, settings.BUCKET, settings.S3_STOCK_DATA)


def build_job(
    settings: Settings,
    config: ProfitConfig | None = None,
    store: ObjectStore | None = None,
    mailer: Mailer | None = None,
    fetcher: QuoteFetcher | None = None,
) -> ProfitJob:
    """Wire a job from settings, using AWS backends unless overridden."""
    config = config or load_profit_config(settings.CONFIG_FILE)
    store = store or S3ObjectStore(region=settings.AWS_REGION)

    return ProfitJob(
        source=build_symbol_source(settings, config, store),
        fetcher=fetcher or QuoteFetcher(config.quote),
        snapshots=SnapshotStorage(store, settings.BUCKET, settings.S3_FILE_PATH),
        mailer=mailer or SesMailer(region=settings.AWS_REGION),
        mail_to=settings.MAIL_TO_ADDRESS,
        mail_from=settings.MAIL_SENDER_ADDRESS,
        mail_subject=settings.MAIL_SUBJECT,
    )


def handle_request(
    headers: Mapping[str, str] | None,
    secret: str,
    job_factory: Callable[[], ProfitJob],
) -> ApiResponse:
    """Gate the request, run the job and map the outcome to a response.

    The job is only built after the credential check passes.
    """
    try:
        authorize(headers, secret)
    except AuthError as e:
        logger.warning(f"Rejected request: {e}")
        return ApiResponse(
            status_code=int(e.status_code),
            body=BAD_REQUEST_BODY,
            content_type="text/plain",
        )

    try:
        result = job_factory().run()
    except StockProfitError as e:
        logger.error(f"Job failed: {e}")
        return ApiResponse(status_code=int(e.status_code), body=e.message, content_type="text/plain")

    return ApiResponse(status_code=int(HTTPStatus.OK), body=result.payload.decode("utf-8"))


def _configure_logging(level: str) -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root.setLevel(level.upper())


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point for API Gateway proxy events."""
    try:
        settings = Settings()
        _configure_logging(settings.LOG_LEVEL)
    except ValueError as e:
        logger.error(f"Invalid settings: {e}")
        error = ConfigError("invalid configuration.")
        return ApiResponse(
            status_code=int(error.status_code),
            body=error.message,
            content_type="text/plain",
        ).to_proxy()
    logger.debug(f"Settings: {settings.get_safe_dict()}")

    response = handle_request(
        event.get("headers"),
        settings.STOCK_API_KEY,
        lambda: build_job(settings),
    )
    return response.to_proxy()
