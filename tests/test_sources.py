import pytest

from stockprofit.errors import SymbolSourceError
from stockprofit.models.config import StaticPositionConfig
from stockprofit.models.position import Batch, Position
from stockprofit.sources.positions import (
    StaticSymbolSource,
    StorageSymbolSource,
    parse_position_list,
)

from stockprofit.storage.snapshot import serialize_batch

from tests.conftest import FakeStore


def test_parse_position_list():
    data = b"AAPL,150.25,0,10\r\nMSFT,280,0,5\n\nGOOG,120.5,0,8\n"

    assert parse_position_list(data) == [
        Position(symbol="AAPL", bid=150.25, value=0.0, hold=10),
        Position(symbol="MSFT", bid=280.0, value=0.0, hold=5),
        Position(symbol="GOOG", bid=120.5, value=0.0, hold=8),
    ]


def test_parse_skips_lines_without_four_fields():
    data = "AAPL,150.25,10\nMSFT,280,0,5\nGOOG,1,2,3,4\n"

    positions = parse_position_list(data)
    assert [p.symbol for p in positions] == ["MSFT"]


def test_parse_invalid_numbers_default_to_zero():
    positions = parse_position_list("AAPL,abc,n/a,ten\n")

    assert positions == [Position(symbol="AAPL", bid=0.0, value=0.0, hold=0)]


def test_parse_keeps_source_order():
    data = "\n".join(f"S{i},1,0,1" for i in range(10))
    assert [p.symbol for p in parse_position_list(data)] == [f"S{i}" for i in range(10)]


def test_parse_empty():
    assert parse_position_list(b"") == []


def test_static_source_default_table():
    positions = StaticSymbolSource().load()
    assert positions
    assert all(p.value == 0.0 for p in positions)


def test_static_source_from_config():
    rows = [StaticPositionConfig(symbol="TSLA", bid=200.0, hold=3)]
    assert StaticSymbolSource(rows).load() == [Position(symbol="TSLA", bid=200.0, hold=3)]


def test_storage_source_reads_list_file():
    store = FakeStore({("bucket", "stock/stock-data.csv"): b"AAPL,150,0,10\n"})
    source = StorageSymbolSource(store, "bucket", "stock/stock-data.csv")

    assert source.load() == [Position(symbol="AAPL", bid=150.0, hold=10)]


def test_storage_source_missing_object():
    source = StorageSymbolSource(FakeStore(), "bucket", "missing.csv")
    with pytest.raises(SymbolSourceError, match="missing.csv"):
        source.load()


def test_parse_non_finite_numbers_default_to_zero():
    positions = parse_position_list(b"AAPL,nan,0,10\nMSFT,inf,-Infinity,5\n")

    assert positions == [
        Position(symbol="AAPL", bid=0.0, value=0.0, hold=10),
        Position(symbol="MSFT", bid=0.0, value=0.0, hold=5),
    ]
    batch = Batch(created_at="2026-10-19", body=positions)
    assert b"null" not in serialize_batch(batch)
    assert Batch.from_json(serialize_batch(batch)) == batch
