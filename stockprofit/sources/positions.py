"""Position list sources.

The list file holds one position per line::

    symbol,bid,value,hold
    AAPL,150.25,0,10
"""

import logging
import math
from typing import Protocol

from stockprofit.errors import SymbolSourceError
from stockprofit.models.config import StaticPositionConfig
from stockprofit.models.position import Position
from stockprofit.storage.objects import ObjectNotFoundError, ObjectStore, ObjectStoreError


logger = logging.getLogger(__name__)

FIELD_COUNT = 4

# Default table for SYMBOL_SOURCE=static when the config file has none.
DEFAULT_POSITIONS: tuple[tuple[str, float, int], ...] = (
    ("AAPL", 150.25, 10),
    ("MSFT", 280.00, 5),
    ("GOOG", 120.50, 8),
    ("AMZN", 130.00, 6),
)


def _parse_float(text: str, field_name: str, line_no: int) -> float:
    try:
        number = float(text)
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        logger.debug(f"Line {line_no}: invalid {field_name} {text!r}, using 0")
        return 0.0
    return number


def _parse_int(text: str, field_name: str, line_no: int) -> int:
    try:
        return int(text)
    except ValueError:
        logger.debug(f"Line {line_no}: invalid {field_name} {text!r}, using 0")
        return 0


def parse_position_list(data: bytes | str) -> list[Position]:
    """Parse a comma-separated position list.

    Lines without exactly four fields are skipped. Numeric fields that don't
    parse become 0.
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")

    positions: list[Position] = []
    for line_no, line in enumerate(data.splitlines(), start=1):
        if not line.strip():
            continue

        fields = [f.strip() for f in line.split(",")]
        if len(fields) != FIELD_COUNT:
            logger.debug(f"Line {line_no}: expected {FIELD_COUNT} fields, got {len(fields)}")
            continue

        symbol, bid, value, hold = fields
        positions.append(Position(
            symbol=symbol,
            bid=_parse_float(bid, "bid", line_no),
            value=_parse_float(value, "value", line_no),
            hold=_parse_int(hold, "hold", line_no),
        ))

    return positions


class SymbolSource(Protocol):
    def load(self) -> list[Position]:
        ...


class StaticSymbolSource:
    """Fixed position table."""

    def __init__(self, rows: list[StaticPositionConfig] | None = None):
        if rows is None:
            rows = [
                StaticPositionConfig(symbol=symbol, bid=bid, hold=hold)
                for symbol, bid, hold in DEFAULT_POSITIONS
            ]
        self.rows = rows

    def load(self) -> list[Position]:
        return [Position(symbol=r.symbol, bid=r.bid, value=0.0, hold=r.hold) for r in self.rows]


class StorageSymbolSource:
    """Position list file kept in object storage."""

    def __init__(self, store: ObjectStore, bucket: str, key: str):
        self.store = store
        self.bucket = bucket
        self.key = key

    def load(self) -> list[Position]:
        try:
            data = self.store.get(self.bucket, self.key)
        except (ObjectNotFoundError, ObjectStoreError) as e:
            raise SymbolSourceError(f"Failed to load position list: {e}") from e

        positions = parse_position_list(data)
        logger.info(f"Loaded {len(positions)} positions from {self.bucket}/{self.key}")
        return positions
