"""Sources of the tracked position list."""

from .positions import (
    StaticSymbolSource,
    StorageSymbolSource,
    SymbolSource,
    parse_position_list,
)

__all__ = [
    "StaticSymbolSource",
    "StorageSymbolSource",
    "SymbolSource",
    "parse_position_list",
]
