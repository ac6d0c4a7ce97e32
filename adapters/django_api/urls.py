"""
Tradebook Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("stock", views.stock_view),
    path("profit-loss", views.profit_loss_view),
    path("dashboard", views.dashboard_view),
    path("trial-balance", views.trial_balance_view),
    path("day-book", views.day_book_view),
    path("gst-report", views.gst_report_view),
    path("account-statement", views.account_statement_view),
    path("profit-loss-statement", views.profit_loss_statement_view),
    path("balance-sheet", views.balance_sheet_view),
    path("products", views.products_view),
    path("parties", views.parties_view),
    path("party-outstanding", views.party_outstanding_view),
    path("purchases", views.purchases_view),
    path("sales", views.sales_view),
    path("ledgers", views.ledgers_view),
    path("vouchers", views.vouchers_view),
]
