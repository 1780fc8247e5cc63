"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Creating an event and registering it with its parents are separate
consistency domains: creation succeeds once the event document is stored,
and the fan-out result travels alongside it.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from events.domain import (
    EntityKind,
    Event,
    EventCategoryId,
    EventCreation,
    EventDeletion,
    EventFilter,
    EventId,
    EventListing,
    EventLookup,
    EventSpeaker,
    EventStatusId,
    EventTypeId,
    EventVenueId,
    LegOutcome,
)
from events.domain.dates import MIDNIGHT_DISPLAY, normalize_date
from events.domain.errors import EventNotFoundError, InvalidInputError, OperationCancelledError
from events.domain.value_objects import PARENT_KINDS
from events.services.deadline import Deadline
from events.services.fan_out import FanOutWriter
from events.services.identifiers import parse_event_id, parse_reference
from events.services.link_coordinator import speakers_for
from events.stores.interfaces import EventStores

logger = logging.getLogger(__name__)


def _check_deadline(deadline: Deadline | None) -> None:
    if deadline is not None and deadline.expired():
        logger.warning("Deadline expired before the event document was written")
        raise OperationCancelledError(())


@dataclass(frozen=True)
class EventInput:
    """Raw values submitted by the staff UI for a new event."""

    name: str
    description: str
    start_date: str
    end_date: str
    event_type_id: str | UUID
    category_id: str | UUID
    status_id: str | UUID
    venue_id: str | UUID
    start_time: str | None = None
    end_time: str | None = None
    is_all_day: bool = False


class EventService:
    """Service for event lifecycle operations."""

    def __init__(self, stores: EventStores, fan_out: FanOutWriter | None = None) -> None:
        self._stores = stores
        self._store = stores.events
        self._fan_out = fan_out or FanOutWriter(stores)

    def create_event(self, data: EventInput, deadline: Deadline | None = None) -> EventCreation:
        """Store a new event, then register it with its four parents.

        Parent legs still pending when ``deadline`` expires are reported as
        cancelled; the stored event is kept and ``retry_fan_out`` finishes them.

        Raises:
            InvalidInputError: If a required field is missing or malformed.
            InvalidDateFormatError: If a date or time cannot be parsed.
            OperationCancelledError: If ``deadline`` expired before anything was stored.
            StorageError: If the event document could not be stored.
        """
        name = (data.name or "").strip()
        if not name:
            raise InvalidInputError("name is required", field="name")

        event_type_id = parse_reference(EventTypeId, data.event_type_id, "event_type")
        category_id = parse_reference(EventCategoryId, data.category_id, "event_category")
        status_id = parse_reference(EventStatusId, data.status_id, "event_status")
        venue_id = parse_reference(EventVenueId, data.venue_id, "event_venue")

        is_all_day = bool(data.is_all_day)
        if is_all_day:
            start_time = end_time = MIDNIGHT_DISPLAY
            starts_at = normalize_date(data.start_date)
            ends_at = normalize_date(data.end_date)
        else:
            if not data.start_time or not data.end_time:
                raise InvalidInputError("start_time and end_time are required unless the event is all day")
            start_time, end_time = data.start_time.strip(), data.end_time.strip()
            starts_at = normalize_date(data.start_date, start_time)
            ends_at = normalize_date(data.end_date, end_time)

        if ends_at < starts_at:
            raise InvalidInputError("end must not be before start", field="end_date")

        _check_deadline(deadline)

        event = self._store.save(
            Event(
                id=EventId.new(),
                name=name,
                description=data.description or "",
                starts_at=starts_at,
                ends_at=ends_at,
                start_time=start_time,
                end_time=end_time,
                is_all_day=is_all_day,
                event_type_id=event_type_id,
                category_id=category_id,
                status_id=status_id,
                venue_id=venue_id,
            )
        )
        logger.info("Created event %s (%s)", event.id, event.name)

        outcomes = self._fan_out.on_event_created(event, deadline)
        return EventCreation(event=event, fan_out=tuple(outcomes))

    def retry_fan_out(self, event_id: str | UUID, deadline: Deadline | None = None) -> list[LegOutcome]:
        """Re-register an existing event with its parents.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        return self._fan_out.on_event_created(self.get_event(event_id), deadline)

    def get_event(self, event_id: str | UUID) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def delete_event(self, event_id: str | UUID, deadline: Deadline | None = None) -> EventDeletion:
        """Delete an event and retract its id from every document referencing it.

        Retraction legs still pending when ``deadline`` expires are reported as
        cancelled.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            OperationCancelledError: If ``deadline`` expired before the event was deleted.
            StorageError: If the event document could not be deleted.
        """
        event = self.get_event(event_id)
        _check_deadline(deadline)
        if not self._store.delete(event.id):
            raise EventNotFoundError(str(event_id))
        logger.info("Deleted event %s", event.id)

        outcomes = self._fan_out.on_event_deleted(event, deadline)
        return EventDeletion(event_id=event.id, retractions=tuple(outcomes))

    def list_events(self, event_filter: EventFilter | None = None) -> list[EventListing]:
        """Return events ordered by start, with their parents resolved."""
        event_filter = event_filter or EventFilter()
        events = sorted(
            (event for event in self._store.list_all() if event_filter.matches(event)),
            key=lambda event: event.starts_at,
        )

        parents: dict[EntityKind, dict] = {}
        for kind in PARENT_KINDS:
            wanted = {event.parent_ids()[kind] for event in events}
            found: list[EventLookup] = self._stores.for_kind(kind).get_many(wanted)
            parents[kind] = {lookup.id: lookup for lookup in found}

        return [
            EventListing(
                event=event,
                event_type=parents[EntityKind.EVENT_TYPE].get(event.event_type_id),
                category=parents[EntityKind.EVENT_CATEGORY].get(event.category_id),
                status=parents[EntityKind.EVENT_STATUS].get(event.status_id),
                venue=parents[EntityKind.EVENT_VENUE].get(event.venue_id),
            )
            for event in events
        ]

    def list_event_speakers(self, event_id: str | UUID) -> list[EventSpeaker]:
        """Return the speakers linked to an event, ordered by name.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self.get_event(event_id)
        return speakers_for(event, self._stores.speakers.get_many(event.speaker_ids))
