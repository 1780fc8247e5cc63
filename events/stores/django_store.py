"""Django ORM implementation of the DocumentStore.

Link mutations lock the single row they touch (``select_for_update`` inside
``transaction.atomic``) and rewrite only that row's collection column, so
two writers on one document are serialized by the database.
"""

import logging
from collections.abc import Iterable
from typing import Any

from django.db import DatabaseError, IntegrityError, models, transaction
from django.utils import timezone

from events import models as orm
from events.domain import (
    EntityId,
    EntityKind,
    Event,
    EventCategoryId,
    EventId,
    EventLookup,
    EventSpeaker,
    EventStatusId,
    EventTypeId,
    EventVenueId,
    FeedbackId,
    LinkResult,
    RsvpId,
    SpeakerId,
)
from events.domain.errors import ConflictError, StorageError
from events.domain.value_objects import ID_TYPES
from events.stores.interfaces import BACK_REFERENCE_FIELDS, EVENT_LINK_FIELDS, D, DocumentStore, EventStores

logger = logging.getLogger(__name__)


def _ids(values: list[str], id_type: type[EntityId]) -> frozenset:
    return frozenset(id_type.from_string(value) for value in values)


def _strings(ids: Iterable[EntityId]) -> list[str]:
    return sorted(str(doc_id) for doc_id in ids)


class DjangoDocumentStore(DocumentStore[D]):
    """Base store mapping one ORM model to one domain document type."""

    model: type[models.Model]

    def to_domain(self, row: models.Model) -> D:
        raise NotImplementedError

    def to_fields(self, doc: D) -> dict[str, Any]:
        raise NotImplementedError

    def get(self, doc_id: EntityId) -> D | None:
        try:
            row = self.model.objects.filter(pk=doc_id.value).first()
        except DatabaseError as exc:
            raise self._storage_error("get", exc) from exc
        return None if row is None else self.to_domain(row)

    def get_many(self, doc_ids: Iterable[EntityId]) -> list[D]:
        keys = [doc_id.value for doc_id in doc_ids]
        try:
            rows = list(self.model.objects.filter(pk__in=keys))
        except DatabaseError as exc:
            raise self._storage_error("get_many", exc) from exc
        return [self.to_domain(row) for row in rows]

    def list_all(self) -> list[D]:
        try:
            rows = list(self.model.objects.all())
        except DatabaseError as exc:
            raise self._storage_error("list_all", exc) from exc
        return [self.to_domain(row) for row in rows]

    def save(self, doc: D) -> D:
        try:
            with transaction.atomic():
                row, _ = self.model.objects.update_or_create(pk=doc.id.value, defaults=self.to_fields(doc))
        except IntegrityError as exc:
            logger.warning("Conflict saving %s %s: %s", self.kind.value, doc.id, exc)
            raise ConflictError() from exc
        except DatabaseError as exc:
            raise self._storage_error("save", exc) from exc
        return self.to_domain(row)

    def delete(self, doc_id: EntityId) -> bool:
        try:
            deleted, _ = self.model.objects.filter(pk=doc_id.value).delete()
        except DatabaseError as exc:
            raise self._storage_error("delete", exc) from exc
        return deleted > 0

    def add_link_if_absent(self, doc_id: EntityId, field: str, target_id: EntityId) -> LinkResult:
        self.check_link_field(field)
        target = str(target_id)
        try:
            with transaction.atomic():
                current = self._locked_collection(doc_id, field)
                if current is None:
                    return LinkResult.NOT_FOUND
                if target in current:
                    return LinkResult.ALREADY_PRESENT
                self._write_collection(doc_id, field, [*current, target])
                return LinkResult.ADDED
        except DatabaseError as exc:
            raise self._storage_error("add_link_if_absent", exc) from exc

    def remove_link_if_present(self, doc_id: EntityId, field: str, target_id: EntityId) -> LinkResult:
        self.check_link_field(field)
        target = str(target_id)
        try:
            with transaction.atomic():
                current = self._locked_collection(doc_id, field)
                if current is None:
                    return LinkResult.NOT_FOUND
                if target not in current:
                    return LinkResult.ABSENT
                self._write_collection(doc_id, field, [value for value in current if value != target])
                return LinkResult.REMOVED
        except DatabaseError as exc:
            raise self._storage_error("remove_link_if_present", exc) from exc

    def _locked_collection(self, doc_id: EntityId, field: str) -> list[str] | None:
        rows = self.model.objects.select_for_update().filter(pk=doc_id.value).values_list(field, flat=True)
        for value in rows:
            return list(value or [])
        return None

    def _write_collection(self, doc_id: EntityId, field: str, values: list[str]) -> None:
        self.model.objects.filter(pk=doc_id.value).update(**{field: values, "updated_at": timezone.now()})

    def _storage_error(self, operation: str, exc: Exception) -> StorageError:
        logger.error("Storage failure in %s.%s", self.kind.value, operation, exc_info=exc)
        return StorageError()


class DjangoEventStore(DjangoDocumentStore[Event]):
    """Event documents."""

    model = orm.Event
    kind = EntityKind.EVENT
    link_fields = EVENT_LINK_FIELDS

    def to_domain(self, row: orm.Event) -> Event:
        return Event(
            id=EventId(value=row.id),
            name=row.name,
            description=row.description,
            starts_at=row.starts_at,
            ends_at=row.ends_at,
            start_time=row.start_time,
            end_time=row.end_time,
            is_all_day=row.is_all_day,
            event_type_id=EventTypeId(value=row.event_type_id),
            category_id=EventCategoryId(value=row.category_id),
            status_id=EventStatusId(value=row.status_id),
            venue_id=EventVenueId(value=row.venue_id),
            speaker_ids=_ids(row.speaker_ids, SpeakerId),
            feedback_ids=_ids(row.feedback_ids, FeedbackId),
            rsvp_ids=_ids(row.rsvp_ids, RsvpId),
        )

    def to_fields(self, doc: Event) -> dict[str, Any]:
        return {
            "name": doc.name,
            "description": doc.description,
            "starts_at": doc.starts_at,
            "ends_at": doc.ends_at,
            "start_time": doc.start_time,
            "end_time": doc.end_time,
            "is_all_day": doc.is_all_day,
            "event_type_id": doc.event_type_id.value,
            "category_id": doc.category_id.value,
            "status_id": doc.status_id.value,
            "venue_id": doc.venue_id.value,
            "speaker_ids": _strings(doc.speaker_ids),
            "feedback_ids": _strings(doc.feedback_ids),
            "rsvp_ids": _strings(doc.rsvp_ids),
        }


class DjangoLookupStore(DjangoDocumentStore[EventLookup]):
    """Type, category, status and venue documents."""

    link_fields = BACK_REFERENCE_FIELDS

    def __init__(self, kind: EntityKind, model: type[orm.EventLookup]) -> None:
        self.kind = kind
        self.model = model

    def to_domain(self, row: orm.EventLookup) -> EventLookup:
        return EventLookup(
            id=ID_TYPES[self.kind](value=row.id),
            kind=self.kind,
            name=row.name,
            address=getattr(row, "address", ""),
            event_ids=_ids(row.event_ids, EventId),
        )

    def to_fields(self, doc: EventLookup) -> dict[str, Any]:
        fields = {"name": doc.name, "event_ids": _strings(doc.event_ids)}
        if self.kind is EntityKind.EVENT_VENUE:
            fields["address"] = doc.address
        return fields


class DjangoSpeakerStore(DjangoDocumentStore[EventSpeaker]):
    """Speaker documents."""

    model = orm.EventSpeaker
    kind = EntityKind.EVENT_SPEAKER
    link_fields = BACK_REFERENCE_FIELDS

    def to_domain(self, row: orm.EventSpeaker) -> EventSpeaker:
        return EventSpeaker(
            id=SpeakerId(value=row.id),
            name=row.name,
            profile=row.profile,
            event_ids=_ids(row.event_ids, EventId),
        )

    def to_fields(self, doc: EventSpeaker) -> dict[str, Any]:
        return {"name": doc.name, "profile": doc.profile, "event_ids": _strings(doc.event_ids)}


def build_django_stores() -> EventStores:
    """Return stores backed by the configured Django database."""
    return EventStores(
        events=DjangoEventStore(),
        event_types=DjangoLookupStore(EntityKind.EVENT_TYPE, orm.EventType),
        categories=DjangoLookupStore(EntityKind.EVENT_CATEGORY, orm.EventCategory),
        statuses=DjangoLookupStore(EntityKind.EVENT_STATUS, orm.EventStatus),
        venues=DjangoLookupStore(EntityKind.EVENT_VENUE, orm.EventVenue),
        speakers=DjangoSpeakerStore(),
    )
