"""
Tradebook Event Store
=======================
Append-only persistence behind the store capability interfaces
(core.event_store.protocol). Two implementations:

    core.event_store.persistence.service.DjangoTradeStore
    core.event_store.memory.InMemoryTradeStore
"""
