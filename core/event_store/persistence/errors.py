"""
Tradebook Event Store — Write Rejections & Results
====================================================
Every write through the store returns an AppendResult. Business rule
failures come back as an explicit Rejection, never as an exception.
No silent failures. No exception swallowing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


# ══════════════════════════════════════════════════════════════
# REJECTION CODES
# ══════════════════════════════════════════════════════════════

class StoreRejectionCode:
    """
    All possible rejection codes for store writes.

    Only WRITE_CONFLICT is retryable: the same request may succeed
    once the competing transaction has committed.
    """

    # ── Catalog ───────────────────────────────────────────────
    UNKNOWN_PRODUCT = "UNKNOWN_PRODUCT"
    DUPLICATE_PRODUCT = "DUPLICATE_PRODUCT"
    INVALID_PRODUCT = "INVALID_PRODUCT"
    NEGATIVE_STOCK = "NEGATIVE_STOCK"

    # ── Parties ───────────────────────────────────────────────
    UNKNOWN_PARTY = "UNKNOWN_PARTY"
    DUPLICATE_PARTY = "DUPLICATE_PARTY"
    INVALID_PARTY = "INVALID_PARTY"

    # ── Trade ─────────────────────────────────────────────────
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # ── Accounts ──────────────────────────────────────────────
    UNKNOWN_LEDGER = "UNKNOWN_LEDGER"
    DUPLICATE_LEDGER = "DUPLICATE_LEDGER"
    IMBALANCED_VOUCHER = "IMBALANCED_VOUCHER"
    INVALID_VOUCHER = "INVALID_VOUCHER"

    # ── Persistence ───────────────────────────────────────────
    WRITE_CONFLICT = "WRITE_CONFLICT"
    TRANSACTION_ABORTED = "TRANSACTION_ABORTED"


RETRYABLE_CODES = frozenset({StoreRejectionCode.WRITE_CONFLICT})


# ══════════════════════════════════════════════════════════════
# REJECTION & RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Rejection:
    """
    One explicit reason a write was refused.
    Frozen — once created, it cannot be altered.
    """

    code: str
    message: str

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_CODES

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }


@dataclass(frozen=True)
class AppendResult:
    """
    Outcome of one store write.

    accepted=True carries the persisted value in `entity`;
    accepted=False carries the Rejection.
    """

    accepted: bool
    rejection: Optional[Rejection] = None
    entity: Any = None

    def __post_init__(self):
        if self.accepted and self.rejection is not None:
            raise ValueError("Accepted result cannot carry a rejection.")
        if not self.accepted and self.rejection is None:
            raise ValueError("Rejected result must carry a rejection.")

    @classmethod
    def ok(cls, entity: Any = None) -> AppendResult:
        return cls(accepted=True, entity=entity)

    @classmethod
    def rejected(cls, code: str, message: str) -> AppendResult:
        return cls(accepted=False, rejection=Rejection(code=code, message=message))
