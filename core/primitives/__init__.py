"""
Tradebook Core Primitives — Immutable Business Values
=======================================================

Primitives are the shared building blocks every engine consumes:

- Pure Python (no Django dependency)
- Immutable (frozen dataclasses)
- Deterministic (same input → same output)
- Validated at construction (invalid values never exist)

Primitives:
    money    — Decimal coercion and currency-precision helpers
    catalog  — Product master data
    trade    — Purchase / Sale stock events
    ledger   — Ledgers, entries, vouchers (double-entry)
    party    — Customer / supplier masters
"""

from core.primitives.catalog import Product
from core.primitives.ledger import (
    AccountNature,
    EntrySide,
    ImbalancedVoucherError,
    Ledger,
    LedgerEntry,
    LedgerGroup,
    UnknownLedgerError,
    Voucher,
    VoucherType,
)
from core.primitives.party import Party, PartyRole
from core.primitives.trade import Purchase, Sale

__all__ = [
    "Product",
    "Party",
    "PartyRole",
    "Purchase",
    "Sale",
    "AccountNature",
    "EntrySide",
    "ImbalancedVoucherError",
    "Ledger",
    "LedgerEntry",
    "LedgerGroup",
    "UnknownLedgerError",
    "Voucher",
    "VoucherType",
]
