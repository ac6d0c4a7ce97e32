"""
Tradebook Stock Engine — Derivation
=====================================
Engine: Stock
Authority: Tradebook Doctrine — Derived, Never Stored

Reconstructs current stock, valuation and profit/loss from the
append-only purchase and sale lists. Nothing here is cached: every
call recomputes from the snapshot it is given, so the figures can
never drift from the transactions behind them.

RULES:
- Pure functions: no I/O, no clock, no mutation of inputs
- Output order follows input product order
- Transactions are grouped by product_id once, before the
  per-product pass
- An unknown product is reported as absent (None), not as zero stock
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import (
    Any,
    Dict,
    Iterable,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
)

from core.primitives.catalog import Product
from core.primitives.money import HUNDRED, ZERO, sum_amounts
from core.primitives.trade import Purchase, Sale


class _ProductLine(Protocol):
    product_id: str


T = TypeVar("T", bound=_ProductLine)


# ══════════════════════════════════════════════════════════════
# DERIVED TYPES
# ══════════════════════════════════════════════════════════════

class StockStatus(Enum):
    IN_STOCK = "in-stock"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"


@dataclass(frozen=True)
class StockItem:
    """
    Per-product stock snapshot.

    current_stock = opening_stock + total_purchased - total_sold
    stock_value   = current_stock * purchase_rate (0 when nothing on hand)
    """
    product_id: str
    product_name: str
    brand: str
    opening_stock: int
    total_purchased: int
    total_sold: int
    current_stock: int
    reorder_level: int
    status: StockStatus
    stock_value: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "brand": self.brand,
            "opening_stock": self.opening_stock,
            "total_purchased": self.total_purchased,
            "total_sold": self.total_sold,
            "current_stock": self.current_stock,
            "reorder_level": self.reorder_level,
            "status": self.status.value,
            "stock_value": str(self.stock_value),
        }


@dataclass(frozen=True)
class ProfitLossItem:
    """Per-product profit/loss at recorded transaction rates."""
    product_id: str
    product_name: str
    total_purchase_value: Decimal
    total_sales_value: Decimal
    profit: Decimal
    profit_margin: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "total_purchase_value": str(self.total_purchase_value),
            "total_sales_value": str(self.total_sales_value),
            "profit": str(self.profit),
            "profit_margin": str(self.profit_margin),
        }


@dataclass(frozen=True)
class DashboardStats:
    total_products: int
    total_purchase_value: Decimal
    total_sales_value: Decimal
    total_profit: Decimal
    low_stock_count: int
    out_of_stock_count: int
    total_stock_value: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_products": self.total_products,
            "total_purchase_value": str(self.total_purchase_value),
            "total_sales_value": str(self.total_sales_value),
            "total_profit": str(self.total_profit),
            "low_stock_count": self.low_stock_count,
            "out_of_stock_count": self.out_of_stock_count,
            "total_stock_value": str(self.total_stock_value),
        }


@dataclass(frozen=True)
class SnapshotReport:
    stock_items: Tuple[StockItem, ...]
    profit_loss_items: Tuple[ProfitLossItem, ...]
    dashboard: DashboardStats


# ══════════════════════════════════════════════════════════════
# LOOKUPS
# ══════════════════════════════════════════════════════════════

def index_by_product(lines: Iterable[T]) -> Dict[str, Tuple[T, ...]]:
    """Group transaction lines by product_id, keeping input order."""
    grouped: Dict[str, list] = defaultdict(list)
    for line in lines:
        grouped[line.product_id].append(line)
    return {product_id: tuple(items) for product_id, items in grouped.items()}


def get_product_by_id(
    products: Iterable[Product], product_id: str,
) -> Optional[Product]:
    for product in products:
        if product.product_id == product_id:
            return product
    return None


def get_available_stock(
    products: Iterable[Product],
    purchases: Iterable[Purchase],
    sales: Iterable[Sale],
    product_id: str,
) -> Optional[int]:
    """
    Units currently on hand for one product.

    Returns None when product_id is not in products, so that callers
    can tell "unknown product" apart from "zero stock".
    """
    product = get_product_by_id(products, product_id)
    if product is None:
        return None
    purchased = sum(p.quantity for p in purchases if p.product_id == product_id)
    sold = sum(s.quantity for s in sales if s.product_id == product_id)
    return product.opening_stock + purchased - sold


def classify_stock(current_stock: int, reorder_level: int) -> StockStatus:
    if current_stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if current_stock <= reorder_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


# ══════════════════════════════════════════════════════════════
# PER-PRODUCT DERIVATIONS
# ══════════════════════════════════════════════════════════════

def compute_stock_items(
    products: Sequence[Product],
    purchases: Iterable[Purchase],
    sales: Iterable[Sale],
) -> Tuple[StockItem, ...]:
    purchases_by_product = index_by_product(purchases)
    sales_by_product = index_by_product(sales)

    items = []
    for product in products:
        total_purchased = sum(
            p.quantity for p in purchases_by_product.get(product.product_id, ())
        )
        total_sold = sum(
            s.quantity for s in sales_by_product.get(product.product_id, ())
        )
        current_stock = product.opening_stock + total_purchased - total_sold
        stock_value = (
            product.purchase_rate * current_stock if current_stock > 0 else ZERO
        )
        items.append(StockItem(
            product_id=product.product_id,
            product_name=product.name,
            brand=product.brand,
            opening_stock=product.opening_stock,
            total_purchased=total_purchased,
            total_sold=total_sold,
            current_stock=current_stock,
            reorder_level=product.reorder_level,
            status=classify_stock(current_stock, product.reorder_level),
            stock_value=stock_value,
        ))
    return tuple(items)


def profit_margin(profit: Decimal, total_sales_value: Decimal) -> Decimal:
    """profit / sales * 100; zero when nothing was sold."""
    if total_sales_value == ZERO:
        return ZERO
    return profit / total_sales_value * HUNDRED


def compute_profit_loss_items(
    products: Sequence[Product],
    purchases: Iterable[Purchase],
    sales: Iterable[Sale],
) -> Tuple[ProfitLossItem, ...]:
    purchases_by_product = index_by_product(purchases)
    sales_by_product = index_by_product(sales)

    items = []
    for product in products:
        total_purchase_value = sum_amounts(
            p.total_value for p in purchases_by_product.get(product.product_id, ())
        )
        # recorded selling_rate, not the product's current price
        total_sales_value = sum_amounts(
            s.sales_value for s in sales_by_product.get(product.product_id, ())
        )
        profit = total_sales_value - total_purchase_value
        items.append(ProfitLossItem(
            product_id=product.product_id,
            product_name=product.name,
            total_purchase_value=total_purchase_value,
            total_sales_value=total_sales_value,
            profit=profit,
            profit_margin=profit_margin(profit, total_sales_value),
        ))
    return tuple(items)


# ══════════════════════════════════════════════════════════════
# PORTFOLIO ROLLUP
# ══════════════════════════════════════════════════════════════

def compute_dashboard_stats(
    products: Sequence[Product],
    stock_items: Sequence[StockItem],
    profit_loss_items: Sequence[ProfitLossItem],
) -> DashboardStats:
    """
    Reduce derived items to portfolio totals.

    stock_items and profit_loss_items must come from the same
    products/purchases/sales snapshot; no cross-check is made here.
    """
    return DashboardStats(
        total_products=len(products),
        total_purchase_value=sum_amounts(
            i.total_purchase_value for i in profit_loss_items
        ),
        total_sales_value=sum_amounts(i.total_sales_value for i in profit_loss_items),
        total_profit=sum_amounts(i.profit for i in profit_loss_items),
        low_stock_count=sum(
            1 for i in stock_items if i.status == StockStatus.LOW_STOCK
        ),
        out_of_stock_count=sum(
            1 for i in stock_items if i.status == StockStatus.OUT_OF_STOCK
        ),
        total_stock_value=sum_amounts(i.stock_value for i in stock_items),
    )


def compute_snapshot_report(snapshot) -> SnapshotReport:
    """Derive every stock figure from one TradeSnapshot."""
    stock_items = compute_stock_items(
        snapshot.products, snapshot.purchases, snapshot.sales,
    )
    profit_loss_items = compute_profit_loss_items(
        snapshot.products, snapshot.purchases, snapshot.sales,
    )
    return SnapshotReport(
        stock_items=stock_items,
        profit_loss_items=profit_loss_items,
        dashboard=compute_dashboard_stats(
            snapshot.products, stock_items, profit_loss_items,
        ),
    )
