"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. There is one store per
entity kind and no store promises atomicity across documents. Link mutations
are the exception to read-modify-write: each must be a single-document
conditional update so concurrent writers cannot lose each other's links.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from events.domain import EntityId, EntityKind, Event, EventLookup, EventSpeaker, LinkResult

D = TypeVar("D")


class DocumentStore(ABC, Generic[D]):
    """Interface for persistence of one kind of document."""

    kind: EntityKind
    link_fields: frozenset[str] = frozenset()

    @abstractmethod
    def get(self, doc_id: EntityId) -> D | None:
        """Return a document by ID, or None if not found."""
        ...

    @abstractmethod
    def get_many(self, doc_ids: Iterable[EntityId]) -> list[D]:
        """Return the documents that exist among ``doc_ids``."""
        ...

    @abstractmethod
    def list_all(self) -> list[D]:
        """Return every document of this kind."""
        ...

    @abstractmethod
    def save(self, doc: D) -> D:
        """Insert or overwrite a document.

        Raises:
            ConflictError: If the write collides with existing state.
            StorageError: If the backend fails.
        """
        ...

    @abstractmethod
    def delete(self, doc_id: EntityId) -> bool:
        """Delete a document. Returns False if it did not exist."""
        ...

    @abstractmethod
    def add_link_if_absent(self, doc_id: EntityId, field: str, target_id: EntityId) -> LinkResult:
        """Atomically add ``target_id`` to the ``field`` collection.

        Returns ADDED, ALREADY_PRESENT or NOT_FOUND.
        """
        ...

    @abstractmethod
    def remove_link_if_present(self, doc_id: EntityId, field: str, target_id: EntityId) -> LinkResult:
        """Atomically remove ``target_id`` from the ``field`` collection.

        Returns REMOVED, ABSENT or NOT_FOUND.
        """
        ...

    def check_link_field(self, field: str) -> None:
        if field not in self.link_fields:
            raise ValueError(f"{self.kind.value} has no link collection named {field!r}")


EVENT_LINK_FIELDS = frozenset({"speaker_ids", "feedback_ids", "rsvp_ids"})
BACK_REFERENCE_FIELDS = frozenset({"event_ids"})


@dataclass(frozen=True)
class EventStores:
    """The set of stores the relationship services operate on."""

    events: DocumentStore[Event]
    event_types: DocumentStore[EventLookup]
    categories: DocumentStore[EventLookup]
    statuses: DocumentStore[EventLookup]
    venues: DocumentStore[EventLookup]
    speakers: DocumentStore[EventSpeaker]

    def for_kind(self, kind: EntityKind) -> DocumentStore:
        return {
            EntityKind.EVENT: self.events,
            EntityKind.EVENT_TYPE: self.event_types,
            EntityKind.EVENT_CATEGORY: self.categories,
            EntityKind.EVENT_STATUS: self.statuses,
            EntityKind.EVENT_VENUE: self.venues,
            EntityKind.EVENT_SPEAKER: self.speakers,
        }[kind]
