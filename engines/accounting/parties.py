"""
Tradebook Accounting Engine — Party Outstanding
=================================================
Engine: Accounting

Sundry debtors and creditors derived from trade history: what each
customer or supplier owes the business, or is owed by it.

RULES:
- A party's lines are matched by name (Sale.customer /
  Purchase.supplier == Party.name)
- outstanding = signed opening balance + Σ sales grand_total
  − Σ purchases grand_total
- A customer's opening balance counts as receivable (+), a
  supplier's as payable (−)
- outstanding > 0 → Debtor, < 0 → Creditor, == 0 → Settled
- One row per party, in input order
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from core.primitives.money import ZERO, sum_amounts
from core.primitives.party import Party, PartyRole
from core.primitives.trade import Purchase, Sale


class OutstandingStatus(Enum):
    DEBTOR = "Debtor"
    CREDITOR = "Creditor"
    SETTLED = "Settled"


@dataclass(frozen=True)
class PartyOutstanding:
    party_id: str
    name: str
    role: PartyRole
    opening_balance: Decimal
    total_sales: Decimal
    total_purchases: Decimal
    outstanding: Decimal
    status: OutstandingStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "party_id": self.party_id,
            "name": self.name,
            "role": self.role.value,
            "opening_balance": str(self.opening_balance),
            "total_sales": str(self.total_sales),
            "total_purchases": str(self.total_purchases),
            "outstanding": str(self.outstanding),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class OutstandingSummary:
    """creditor_total is a magnitude; net_position = debtors − creditors."""
    debtor_count: int
    debtor_total: Decimal
    creditor_count: int
    creditor_total: Decimal
    net_position: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "debtor_count": self.debtor_count,
            "debtor_total": str(self.debtor_total),
            "creditor_count": self.creditor_count,
            "creditor_total": str(self.creditor_total),
            "net_position": str(self.net_position),
        }


def classify_outstanding(outstanding: Decimal) -> OutstandingStatus:
    if outstanding > ZERO:
        return OutstandingStatus.DEBTOR
    if outstanding < ZERO:
        return OutstandingStatus.CREDITOR
    return OutstandingStatus.SETTLED


def _totals_by_name(lines: Iterable[Any], attr: str) -> Dict[str, List[Decimal]]:
    grouped: Dict[str, List[Decimal]] = defaultdict(list)
    for line in lines:
        grouped[getattr(line, attr)].append(line.grand_total)
    return grouped


def compute_party_outstanding(
    parties: Iterable[Party],
    sales: Iterable[Sale],
    purchases: Iterable[Purchase],
) -> Tuple[PartyOutstanding, ...]:
    sold_to = _totals_by_name(sales, "customer")
    bought_from = _totals_by_name(purchases, "supplier")

    rows = []
    for party in parties:
        total_sales = sum_amounts(sold_to.get(party.name, ()))
        total_purchases = sum_amounts(bought_from.get(party.name, ()))
        opening = party.opening_balance
        if party.role == PartyRole.SUPPLIER:
            opening = -opening
        outstanding = opening + total_sales - total_purchases
        rows.append(PartyOutstanding(
            party_id=party.party_id,
            name=party.name,
            role=party.role,
            opening_balance=party.opening_balance,
            total_sales=total_sales,
            total_purchases=total_purchases,
            outstanding=outstanding,
            status=classify_outstanding(outstanding),
        ))
    return tuple(rows)


def summarize_outstanding(rows: Iterable[PartyOutstanding]) -> OutstandingSummary:
    rows = tuple(rows)
    debtors = [r.outstanding for r in rows if r.status == OutstandingStatus.DEBTOR]
    creditors = [-r.outstanding for r in rows if r.status == OutstandingStatus.CREDITOR]
    debtor_total = sum_amounts(debtors)
    creditor_total = sum_amounts(creditors)
    return OutstandingSummary(
        debtor_count=len(debtors),
        debtor_total=debtor_total,
        creditor_count=len(creditors),
        creditor_total=creditor_total,
        net_position=debtor_total - creditor_total,
    )
