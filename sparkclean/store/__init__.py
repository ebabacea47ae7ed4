from sparkclean.store.memory_store import InMemoryStore, StoreSnapshot

__all__ = ["InMemoryStore", "StoreSnapshot"]
