"""Report mail delivery."""

import logging
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console

from stockprofit.errors import MailError


logger = logging.getLogger(__name__)

CHARSET = "UTF-8"


class Mailer(Protocol):
    def send(self, to: str, sender: str, subject: str, body: str) -> None:
        ...


class SesMailer:
    """Sends plain-text mail through Amazon SES."""

    def __init__(self, region: str = "ap-northeast-1", client: Any = None):
        self.region = region
        self._client = client

    def _get_client(self) -> Any:
        """Get or create the SES client."""
        if self._client is None:
            self._client = boto3.client("ses", region_name=self.region)
        return self._client

    def send(self, to: str, sender: str, subject: str, body: str) -> None:
        """Send one mail.

        Raises:
            MailError: With the SES error code (e.g. 'MessageRejected') when
                SES refuses the message
        """
        try:
            response = self._get_client().send_email(
                Destination={"ToAddresses": [to]},
                Message={
                    "Body": {"Text": {"Charset": CHARSET, "Data": body}},
                    "Subject": {"Charset": CHARSET, "Data": subject},
                },
                Source=sender,
            )
        except ClientError as e:
            error = e.response.get("Error", {})
            raise MailError(error.get("Message", str(e)), code=error.get("Code")) from e
        except BotoCoreError as e:
            raise MailError(str(e)) from e

        logger.info(f"Mail sent to {to}: {response.get('MessageId')}")


class ConsoleMailer:
    """Prints the mail instead of sending it."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def send(self, to: str, sender: str, subject: str, body: str) -> None:
        self.console.print(f"[bold]To:[/bold] {to}", highlight=False)
        self.console.print(f"[bold]From:[/bold] {sender}", highlight=False)
        self.console.print(f"[bold]Subject:[/bold] {subject}", highlight=False)
        self.console.print()
        self.console.print(body, markup=False, highlight=False)
