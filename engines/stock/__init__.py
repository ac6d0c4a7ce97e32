"""
Tradebook Stock Engine
========================
Pure derivations of stock level, valuation and profit/loss.
"""

from engines.stock.derivation import (
    DashboardStats,
    ProfitLossItem,
    SnapshotReport,
    StockItem,
    StockStatus,
    classify_stock,
    compute_dashboard_stats,
    compute_profit_loss_items,
    compute_snapshot_report,
    compute_stock_items,
    get_available_stock,
    get_product_by_id,
    index_by_product,
)

__all__ = [
    "DashboardStats",
    "ProfitLossItem",
    "SnapshotReport",
    "StockItem",
    "StockStatus",
    "classify_stock",
    "compute_dashboard_stats",
    "compute_profit_loss_items",
    "compute_snapshot_report",
    "compute_stock_items",
    "get_available_stock",
    "get_product_by_id",
    "index_by_product",
]
