"""
Tradebook Documents
===================
Document numbering for invoices, vouchers and products.
"""
