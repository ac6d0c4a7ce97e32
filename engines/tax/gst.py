"""
Tradebook Tax Engine — GST Report
===================================
Engine: Tax

Summarises outward (sales) and inward (purchases) supplies for a
return period, bucketed by effective GST rate.

RULES:
- Effective rate = gst_amount / total_value * 100, at 2 places
  (0 for a zero-value line)
- Intra-state supplies split tax equally into CGST and SGST;
  inter-state supplies carry it whole as IGST
- net_tax_liability = tax payable on outward - tax paid on inward
- Buckets keep the order in which rates first appear
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from core.config.rules import (
    SUPPLY_INTER_STATE,
    SUPPLY_INTRA_STATE,
    ConfigStore,
    split_tax,
)
from core.primitives.catalog import Product
from core.primitives.money import HUNDRED, ZERO, quantize_money, sum_amounts
from core.primitives.trade import Purchase, Sale

TradeLine = Union[Purchase, Sale]


@dataclass(frozen=True)
class GSTSummary:
    gst_rate: Decimal
    taxable_value: Decimal
    igst_amount: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    total_amount: Decimal

    @property
    def total_tax(self) -> Decimal:
        return self.igst_amount + self.cgst_amount + self.sgst_amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gst_rate": str(self.gst_rate),
            "taxable_value": str(self.taxable_value),
            "igst_amount": str(self.igst_amount),
            "cgst_amount": str(self.cgst_amount),
            "sgst_amount": str(self.sgst_amount),
            "total_amount": str(self.total_amount),
        }


@dataclass(frozen=True)
class SupplySummary:
    inter_state: Tuple[GSTSummary, ...]
    intra_state: Tuple[GSTSummary, ...]

    @property
    def total_tax(self) -> Decimal:
        return sum_amounts(s.total_tax for s in self.inter_state + self.intra_state)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inter_state": [s.to_dict() for s in self.inter_state],
            "intra_state": [s.to_dict() for s in self.intra_state],
        }


@dataclass(frozen=True)
class GSTReport:
    start: date
    end: date
    outward: SupplySummary
    inward: SupplySummary
    total_tax_payable: Decimal
    total_tax_paid: Decimal
    net_tax_liability: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "outward": self.outward.to_dict(),
            "inward": self.inward.to_dict(),
            "total_tax_payable": str(self.total_tax_payable),
            "total_tax_paid": str(self.total_tax_paid),
            "net_tax_liability": str(self.net_tax_liability),
        }


def effective_rate(line: TradeLine) -> Decimal:
    if line.total_value == ZERO:
        return ZERO
    return quantize_money(line.gst_amount / line.total_value * HUNDRED)


def effective_gst_percent(
    product: Product, config_store: Optional[ConfigStore] = None,
) -> Decimal:
    """
    GST rate to charge on a product.

    A configured GST rule covering the product's category takes
    precedence over the rate stored on the product.
    """
    if config_store is not None and product.category:
        rule = config_store.rule_for_category(product.category, "GST")
        if rule is not None:
            return rule.rate_percent
    return product.gst_percent


def _summarise(lines: Iterable[TradeLine]) -> SupplySummary:
    buckets: Dict[str, Dict[Decimal, List[Decimal]]] = {
        SUPPLY_INTER_STATE: {},
        SUPPLY_INTRA_STATE: {},
    }
    for line in lines:
        supply_type = SUPPLY_INTER_STATE if line.inter_state else SUPPLY_INTRA_STATE
        igst, cgst, sgst = split_tax(line.gst_amount, supply_type)
        # [taxable, igst, cgst, sgst, total]
        acc = buckets[supply_type].setdefault(effective_rate(line), [ZERO] * 5)
        acc[0] += line.total_value
        acc[1] += igst
        acc[2] += cgst
        acc[3] += sgst
        acc[4] += line.grand_total

    def rows(supply_type: str) -> Tuple[GSTSummary, ...]:
        return tuple(
            GSTSummary(
                gst_rate=rate,
                taxable_value=acc[0],
                igst_amount=acc[1],
                cgst_amount=acc[2],
                sgst_amount=acc[3],
                total_amount=acc[4],
            )
            for rate, acc in buckets[supply_type].items()
        )

    return SupplySummary(
        inter_state=rows(SUPPLY_INTER_STATE),
        intra_state=rows(SUPPLY_INTRA_STATE),
    )


def compute_gst_report(
    sales: Iterable[Sale],
    purchases: Iterable[Purchase],
    start: date,
    end: date,
) -> GSTReport:
    """GST summary for lines dated within [start, end]."""
    if end < start:
        raise ValueError("end must not be before start.")
    outward = _summarise(s for s in sales if start <= s.date <= end)
    inward = _summarise(p for p in purchases if start <= p.date <= end)
    payable = outward.total_tax
    paid = inward.total_tax
    return GSTReport(
        start=start,
        end=end,
        outward=outward,
        inward=inward,
        total_tax_payable=payable,
        total_tax_paid=paid,
        net_tax_liability=payable - paid,
    )
