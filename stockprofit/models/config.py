"""Configuration models for the quote fetcher and the job runtime."""

from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


SymbolSourceName = Literal["static", "storage"]


class RetryConfig(BaseModel):
    """Retry configuration for quote page requests.

    One attempt means no retries.
    """

    max_attempts: int = Field(default=1, ge=1, le=10)
    backoff_multiplier: float = Field(default=2.0, ge=1.0)
    initial_delay: float = Field(default=1.0, ge=0.1)


class StaticPositionConfig(BaseModel):
    """One row of the static position table."""

    symbol: str
    bid: float = Field(ge=0.0)
    hold: int = Field(ge=0)


class QuoteSourceConfig(BaseModel):
    """Quote page scraping configuration."""

    url_template: str = Field(default="https://finance.yahoo.com/quote/{symbol}")
    selector: str = Field(default="div#quote-header-info")

    # The anchor is the text the page renders right before the price. It
    # changes whenever the page layout changes, so it lives in config.
    anchor: str = Field(default="trend2W10W9M")
    price_pattern: str = Field(default=r"{anchor}(\d+(?:\.\d+)?)")

    headers: dict[str, str] = Field(default_factory=lambda: {
        "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36",
        "Accept": "text/html,application/xhtml+xml",
    })
    timeout: float = Field(default=10.0, ge=0.1)
    max_workers: int | None = Field(default=None, ge=1)
    deadline: float | None = Field(default=None, gt=0.0)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    def build_url(self, symbol: str) -> str:
        return self.url_template.format(symbol=symbol)


class ProfitConfig(BaseModel):
    """File-based job configuration."""

    quote: QuoteSourceConfig = Field(default_factory=QuoteSourceConfig)
    positions: list[StaticPositionConfig] | None = Field(default=None)

    @classmethod
    def from_yaml(cls, data: dict[str, Any] | None) -> "ProfitConfig":
        """Create config from parsed YAML data."""
        data = data or {}
        config_data: dict[str, Any] = {}

        if data.get("quote"):
            quote = dict(data["quote"])
            if "retry" in quote:
                quote["retry"] = RetryConfig(**quote["retry"])
            config_data["quote"] = QuoteSourceConfig(**quote)
        if data.get("positions") is not None:
            config_data["positions"] = [
                StaticPositionConfig(**row) for row in data["positions"]
            ]

        return cls(**config_data)


class Settings(BaseSettings):
    """Runtime settings from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    STOCK_API_KEY: str = ""
    BUCKET: str = ""
    S3_FILE_PATH: str = "stock/{year}/{month:02d}.json"
    S3_STOCK_DATA: str = "stock/stock-data.csv"

    MAIL_TO_ADDRESS: str = ""
    MAIL_SENDER_ADDRESS: str = ""
    MAIL_SUBJECT: str = "Stock Profit Loss"

    AWS_REGION: str = "ap-northeast-1"
    SYMBOL_SOURCE: SymbolSourceName = "storage"
    LOG_LEVEL: str = "INFO"
    CONFIG_FILE: str | None = None

    def get_safe_dict(self) -> dict[str, Any]:
        """Settings safe for logging (no secrets)."""
        data = self.model_dump()
        data.pop("STOCK_API_KEY", None)
        return data
