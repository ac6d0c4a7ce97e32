"""
Tradebook Accounting Engine — Voucher Posting
===============================================
Engine: Accounting
Authority: Tradebook Doctrine — Double-Entry, All-or-Nothing

Applies a voucher's entries to ledger balances.

RULES (NON-NEGOTIABLE):
- A voucher whose debits and credits differ is never applied
  (ImbalancedVoucherError)
- Every entry must reference a known ledger (UnknownLedgerError)
- Either every entry is applied or none is: the input ledgers are
  never modified, callers receive a new tuple on success only
- Balances move on the ledger group's normal side
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.primitives.ledger import (
    Ledger,
    UnknownLedgerError,
    Voucher,
    check_balanced,
)

logger = logging.getLogger("tradebook.accounting")


def _index_ledgers(ledgers: Iterable[Ledger]) -> Dict[str, Ledger]:
    indexed: Dict[str, Ledger] = {}
    for ledger in ledgers:
        if ledger.ledger_id in indexed:
            raise ValueError(f"Duplicate ledger_id '{ledger.ledger_id}'.")
        indexed[ledger.ledger_id] = ledger
    return indexed


def post_voucher(ledgers: Sequence[Ledger], voucher: Voucher) -> Tuple[Ledger, ...]:
    """
    Return the ledgers as they stand after posting voucher.

    Ledger order is preserved. Raises before touching any balance if
    the voucher is unbalanced or references an unknown ledger.
    """
    check_balanced(voucher.entries)

    by_id = _index_ledgers(ledgers)
    for entry in voucher.entries:
        if entry.ledger_id not in by_id:
            raise UnknownLedgerError(entry.ledger_id)

    for entry in voucher.entries:
        by_id[entry.ledger_id] = by_id[entry.ledger_id].apply(entry.side, entry.amount)

    logger.debug(
        "Posted voucher %s (%s entries, %s)",
        voucher.voucher_number,
        len(voucher.entries),
        voucher.total_debit,
    )
    return tuple(by_id[ledger.ledger_id] for ledger in ledgers)


class LedgerBook:
    """
    In-memory book of ledgers and the vouchers posted to them.

    post() replaces the whole ledger set in one assignment, so a
    failed posting leaves the book exactly as it was.
    """

    def __init__(self, ledgers: Iterable[Ledger] = ()) -> None:
        self._ledgers: Tuple[Ledger, ...] = tuple(ledgers)
        _index_ledgers(self._ledgers)
        self._vouchers: List[Voucher] = []

    @property
    def ledgers(self) -> Tuple[Ledger, ...]:
        return self._ledgers

    @property
    def vouchers(self) -> Tuple[Voucher, ...]:
        return tuple(self._vouchers)

    def ledger(self, ledger_id: str) -> Optional[Ledger]:
        for ledger in self._ledgers:
            if ledger.ledger_id == ledger_id:
                return ledger
        return None

    def open_ledger(self, ledger: Ledger) -> None:
        if self.ledger(ledger.ledger_id) is not None:
            raise ValueError(f"Duplicate ledger_id '{ledger.ledger_id}'.")
        self._ledgers = self._ledgers + (ledger,)

    def post(self, voucher: Voucher) -> Tuple[Ledger, ...]:
        updated = post_voucher(self._ledgers, voucher)
        self._ledgers = updated
        self._vouchers.append(voucher)
        return updated
