"""
Tradebook Event Store — Capability Interfaces
===============================================
The store is handed explicitly to whatever needs it; there is no
ambient global. Readers take a snapshot, writers append and get an
AppendResult back.

issue_* writes take a build callable: the store picks the next
document number while holding its numbering lock and passes it in,
so two concurrent writers never receive the same number.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional, Protocol, Tuple

from core.event_store.persistence.errors import AppendResult
from core.primitives.catalog import Product
from core.primitives.ledger import Ledger, LedgerEntry, Voucher, VoucherType
from core.primitives.party import Party, PartyRole
from core.primitives.trade import Purchase, Sale


@dataclass(frozen=True)
class TradeSnapshot:
    """Every product, purchase and sale of one business at one moment."""
    products: Tuple[Product, ...]
    purchases: Tuple[Purchase, ...]
    sales: Tuple[Sale, ...]


@dataclass(frozen=True)
class AccountsSnapshot:
    ledgers: Tuple[Ledger, ...]
    vouchers: Tuple[Voucher, ...]


class TradeStoreProtocol(Protocol):

    def fetch_all(self) -> TradeSnapshot:
        ...  # pragma: no cover

    def fetch_accounts(self) -> AccountsSnapshot:
        ...  # pragma: no cover

    def add_product(self, product: Product) -> AppendResult:
        ...  # pragma: no cover

    def issue_product(self, *, id_prefix: str, build: Callable[[str], Product]) -> AppendResult:
        """Assign the next product id under the store lock, then add build(id)."""
        ...  # pragma: no cover

    def update_product(self, product_id: str, /, **changes: Any) -> AppendResult:
        ...  # pragma: no cover

    def fetch_parties(self) -> Tuple[Party, ...]:
        ...  # pragma: no cover

    def add_party(self, party: Party) -> AppendResult:
        ...  # pragma: no cover

    def issue_party(
        self, *, role: PartyRole, id_prefix: str, build: Callable[[str], Party],
    ) -> AppendResult:
        ...  # pragma: no cover

    def update_party(self, party_id: str, /, **changes: Any) -> AppendResult:
        ...  # pragma: no cover

    def append_purchase(self, purchase: Purchase) -> AppendResult:
        ...  # pragma: no cover

    def append_sale(self, sale: Sale) -> AppendResult:
        ...  # pragma: no cover

    def issue_purchase(
        self, *, invoice_prefix: str, issued_on: date, build: Callable[[str], Purchase],
    ) -> AppendResult:
        """Assign the next invoice number under the store lock, then append build(no)."""
        ...  # pragma: no cover

    def issue_sale(
        self, *, invoice_prefix: str, issued_on: date, build: Callable[[str], Sale],
    ) -> AppendResult:
        ...  # pragma: no cover

    def create_ledger(self, ledger: Ledger) -> AppendResult:
        ...  # pragma: no cover

    def open_default_ledgers(self, business_name: str) -> Tuple[Ledger, ...]:
        ...  # pragma: no cover

    def post_voucher(
        self,
        *,
        voucher_type: VoucherType,
        date: date,
        narration: str,
        entries: Tuple[LedgerEntry, ...],
        reference_number: Optional[str] = None,
        party_name: Optional[str] = None,
    ) -> AppendResult:
        ...  # pragma: no cover
