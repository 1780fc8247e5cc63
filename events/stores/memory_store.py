"""In-process implementation of the DocumentStore.

Used by the test suite and by local runs with ``EVENTS_STORE_BACKEND=memory``.
A single lock per store makes every link mutation a conditional update.
"""

import threading
from collections.abc import Iterable
from dataclasses import replace

from events.domain import EntityId, EntityKind, LinkResult
from events.stores.interfaces import (
    BACK_REFERENCE_FIELDS,
    EVENT_LINK_FIELDS,
    DocumentStore,
    D,
    EventStores,
)


class InMemoryDocumentStore(DocumentStore[D]):
    """Dictionary-backed store holding immutable domain documents."""

    def __init__(self, kind: EntityKind, link_fields: frozenset[str]) -> None:
        self.kind = kind
        self.link_fields = link_fields
        self._docs: dict[EntityId, D] = {}
        self._lock = threading.Lock()

    def get(self, doc_id: EntityId) -> D | None:
        with self._lock:
            return self._docs.get(doc_id)

    def get_many(self, doc_ids: Iterable[EntityId]) -> list[D]:
        with self._lock:
            return [self._docs[doc_id] for doc_id in doc_ids if doc_id in self._docs]

    def list_all(self) -> list[D]:
        with self._lock:
            return list(self._docs.values())

    def save(self, doc: D) -> D:
        with self._lock:
            self._docs[doc.id] = doc
        return doc

    def delete(self, doc_id: EntityId) -> bool:
        with self._lock:
            return self._docs.pop(doc_id, None) is not None

    def add_link_if_absent(self, doc_id: EntityId, field: str, target_id: EntityId) -> LinkResult:
        self.check_link_field(field)
        with self._lock:
            doc = self._docs.get(doc_id)
            if doc is None:
                return LinkResult.NOT_FOUND
            current = getattr(doc, field)
            if target_id in current:
                return LinkResult.ALREADY_PRESENT
            self._docs[doc_id] = replace(doc, **{field: current | {target_id}})
            return LinkResult.ADDED

    def remove_link_if_present(self, doc_id: EntityId, field: str, target_id: EntityId) -> LinkResult:
        self.check_link_field(field)
        with self._lock:
            doc = self._docs.get(doc_id)
            if doc is None:
                return LinkResult.NOT_FOUND
            current = getattr(doc, field)
            if target_id not in current:
                return LinkResult.ABSENT
            self._docs[doc_id] = replace(doc, **{field: current - {target_id}})
            return LinkResult.REMOVED


def build_memory_stores() -> EventStores:
    """Return a fresh, empty set of in-memory stores."""
    return EventStores(
        events=InMemoryDocumentStore(EntityKind.EVENT, EVENT_LINK_FIELDS),
        event_types=InMemoryDocumentStore(EntityKind.EVENT_TYPE, BACK_REFERENCE_FIELDS),
        categories=InMemoryDocumentStore(EntityKind.EVENT_CATEGORY, BACK_REFERENCE_FIELDS),
        statuses=InMemoryDocumentStore(EntityKind.EVENT_STATUS, BACK_REFERENCE_FIELDS),
        venues=InMemoryDocumentStore(EntityKind.EVENT_VENUE, BACK_REFERENCE_FIELDS),
        speakers=InMemoryDocumentStore(EntityKind.EVENT_SPEAKER, BACK_REFERENCE_FIELDS),
    )
