"""
Tradebook Core Config — Public API
=====================================
Admin-configurable tax rules and application settings access.
"""

from core.config.rules import (
    SUPPLY_INTER_STATE,
    SUPPLY_INTRA_STATE,
    ConfigStore,
    InMemoryConfigStore,
    TaxRule,
    split_tax,
)
from core.config.settings import TradebookSettings, get_tradebook_settings

__all__ = [
    "TaxRule",
    "ConfigStore",
    "InMemoryConfigStore",
    "SUPPLY_INTRA_STATE",
    "SUPPLY_INTER_STATE",
    "split_tax",
    "TradebookSettings",
    "get_tradebook_settings",
]
