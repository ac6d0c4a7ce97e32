"""
Tradebook Django HTTP adapter.
Thin framework glue over the store and the derivation engines.
"""
