from .result_store import InMemoryResultStore, StoreClosedError

__all__ = ["InMemoryResultStore", "StoreClosedError"]
