from events.stores.interfaces import DocumentStore, EventStores
from events.stores.memory_store import InMemoryDocumentStore, build_memory_stores

__all__ = [
    "DocumentStore",
    "EventStores",
    "InMemoryDocumentStore",
    "build_memory_stores",
]
