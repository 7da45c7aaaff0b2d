"""Exceptions raised by the stock profit job."""

from http import HTTPStatus


class StockProfitError(Exception):
    """Base error; ``status_code`` is the response status it maps to."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(StockProfitError):
    """Request credential missing or wrong."""

    status_code = HTTPStatus.BAD_REQUEST


class SymbolSourceError(StockProfitError):
    """Position list could not be loaded."""


class SerializationError(StockProfitError):
    """Batch could not be serialized to JSON."""


class StorageWriteError(StockProfitError):
    """Snapshot could not be written to object storage."""


class MailError(StockProfitError):
    """Report mail could not be sent. Never fails the request."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(f"{code}, {message}" if code else message)
        self.code = code


class QuoteFetchError(StockProfitError):
    """Quote page could not be fetched or parsed."""

    def __init__(self, message: str, response_text: str | None = None):
        super().__init__(message)
        self.response_text = response_text


class ConfigError(StockProfitError):
    """Configuration file or environment is invalid."""
