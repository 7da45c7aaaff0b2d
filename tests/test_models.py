from datetime import date

import orjson
import pytest
from pydantic import ValidationError

from stockprofit.models.config import ProfitConfig, QuoteSourceConfig
from stockprofit.models.position import Batch, Position


def test_position_serializes_symbol_as_symble():
    position = Position(symbol="AAPL", bid=150.25, value=155.5, hold=10)
    batch = Batch.create([position], date(2026, 10, 19))

    data = orjson.loads(batch.to_json())
    assert data == {
        "created_at": "2026-10-19",
        "body": [{"symble": "AAPL", "bid": 150.25, "value": 155.5, "hold": 10}],
    }


def test_batch_json_round_trip_keeps_values():
    batch = Batch(
        created_at="2026-10-19",
        body=[
            Position(symbol="AAPL", bid=150.123456789, value=155.987654321, hold=10),
            Position.blank(),
        ],
    )

    restored = Batch.from_json(batch.to_json())
    assert restored == batch
    assert b'"symble"' in batch.to_json()
    assert restored.body[0].value == 155.987654321


def test_position_accepts_both_symbol_keys():
    assert Position.model_validate({"symble": "A"}).symbol == "A"
    assert Position.model_validate({"symbol": "B"}).symbol == "B"


def test_blank_position_is_zero_valued():
    blank = Position.blank()
    assert (blank.symbol, blank.bid, blank.value, blank.hold) == ("", 0.0, 0.0, 0)
    assert blank.is_blank
    assert not Position(symbol="A").is_blank


def test_position_is_immutable():
    position = Position(symbol="A", bid=1.0, hold=1)
    with pytest.raises(ValidationError):
        position.value = 2.0


def test_earn():
    assert Position(symbol="A", bid=10, value=15, hold=5).earn == 25
    assert Position(symbol="A", bid=10, value=8, hold=5).earn == -10


def test_profit_config_from_yaml():
    config = ProfitConfig.from_yaml({
        "quote": {
            "anchor": "watchlist",
            "timeout": 3,
            "max_workers": 4,
            "retry": {"max_attempts": 2},
        },
        "positions": [{"symbol": "AAPL", "bid": 100, "hold": 2}],
    })

    assert config.quote.anchor == "watchlist"
    assert config.quote.max_workers == 4
    assert config.quote.retry.max_attempts == 2
    assert config.positions[0].symbol == "AAPL"


def test_profit_config_defaults():
    config = ProfitConfig.from_yaml(None)
    assert config.quote.anchor == "trend2W10W9M"
    assert config.quote.max_workers is None
    assert config.quote.retry.max_attempts == 1
    assert config.positions is None


def test_build_url():
    config = QuoteSourceConfig()
    assert config.build_url("AAPL") == "https://finance.yahoo.com/quote/AAPL"


@pytest.mark.parametrize("number", [float("nan"), float("inf"), float("-inf")])
def test_position_rejects_non_finite_prices(number):
    with pytest.raises(ValidationError):
        Position(symbol="A", bid=number, hold=1)
    with pytest.raises(ValidationError):
        Position(symbol="A", value=number, hold=1)
