"""Position and batch models."""

from datetime import date
from typing import Any

import orjson
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Position(BaseModel):
    """One tracked holding.

    The symbol is serialized as ``symble`` to stay compatible with snapshots
    already written by earlier versions of the job.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str = Field(
        default="",
        validation_alias=AliasChoices("symble", "symbol"),
        serialization_alias="symble",
        description="Ticker symbol (e.g., 'AAPL')",
    )
    bid: float = Field(default=0.0, allow_inf_nan=False, description="Purchase price per share")
    value: float = Field(default=0.0, allow_inf_nan=False, description="Latest fetched price per share")
    hold: int = Field(default=0, description="Number of shares held")

    @classmethod
    def blank(cls) -> "Position":
        """Zero-value record standing in for a failed fetch."""
        return cls()

    @property
    def is_blank(self) -> bool:
        return self == Position.blank()

    @property
    def earn(self) -> float:
        """Profit or loss of the whole holding at the current price."""
        return (self.value - self.bid) * self.hold

    def with_value(self, value: float) -> "Position":
        return self.model_copy(update={"value": value})


class Batch(BaseModel):
    """All positions fetched in one run.

    ``body`` is in completion order of the concurrent fetches, not input order.
    """

    created_at: str = Field(description="Run date (YYYY-MM-DD)")
    body: list[Position] = Field(default_factory=list)

    @classmethod
    def create(cls, positions: list[Position], created: date) -> "Batch":
        return cls(created_at=created.isoformat(), body=list(positions))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: bytes | str) -> "Batch":
        return cls.model_validate(orjson.loads(data))
