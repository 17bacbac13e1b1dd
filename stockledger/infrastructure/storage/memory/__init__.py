"""In-memory storage implementations."""

from stockledger.infrastructure.storage.memory.inventory_store import InMemoryInventoryStore

__all__ = ["InMemoryInventoryStore"]
