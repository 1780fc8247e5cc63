"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).

Relationships are stored as raw identifiers on both sides, never as nested
objects. Collections are frozensets so an id can appear at most once.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from events.domain.value_objects import (
    EntityId,
    EntityKind,
    EventCategoryId,
    EventId,
    EventStatusId,
    EventTypeId,
    EventVenueId,
    FeedbackId,
    RsvpId,
    SpeakerId,
)


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    name: str
    description: str
    starts_at: datetime
    ends_at: datetime
    start_time: str
    end_time: str
    is_all_day: bool
    event_type_id: EventTypeId
    category_id: EventCategoryId
    status_id: EventStatusId
    venue_id: EventVenueId
    speaker_ids: frozenset[SpeakerId] = frozenset()
    feedback_ids: frozenset[FeedbackId] = frozenset()
    rsvp_ids: frozenset[RsvpId] = frozenset()

    def parent_ids(self) -> dict[EntityKind, EntityId]:
        """Return the singular parents this event must be registered with."""
        return {
            EntityKind.EVENT_TYPE: self.event_type_id,
            EntityKind.EVENT_CATEGORY: self.category_id,
            EntityKind.EVENT_STATUS: self.status_id,
            EntityKind.EVENT_VENUE: self.venue_id,
        }


@dataclass(frozen=True)
class EventLookup:
    """Domain representation of an EventType, EventCategory, EventStatus or EventVenue."""

    id: EntityId
    kind: EntityKind
    name: str
    address: str = ""
    event_ids: frozenset[EventId] = frozenset()


@dataclass(frozen=True)
class EventSpeaker:
    """Domain representation of an EventSpeaker."""

    id: SpeakerId
    name: str
    profile: str = ""
    event_ids: frozenset[EventId] = frozenset()


@dataclass(frozen=True)
class EventListing:
    """An Event with its singular parents resolved."""

    event: Event
    event_type: EventLookup | None
    category: EventLookup | None
    status: EventLookup | None
    venue: EventLookup | None


@dataclass(frozen=True)
class EventFilter:
    """Exact-match filter over an Event's parent references."""

    event_type_id: EventTypeId | None = None
    category_id: EventCategoryId | None = None
    status_id: EventStatusId | None = None
    venue_id: EventVenueId | None = None

    def matches(self, event: Event) -> bool:
        checks = (
            (self.event_type_id, event.event_type_id),
            (self.category_id, event.category_id),
            (self.status_id, event.status_id),
            (self.venue_id, event.venue_id),
        )
        return all(wanted is None or wanted == actual for wanted, actual in checks)


class LinkResult(Enum):
    """Result of a single-document conditional link mutation."""

    ADDED = "ADDED"
    ALREADY_PRESENT = "ALREADY_PRESENT"
    REMOVED = "REMOVED"
    ABSENT = "ABSENT"
    NOT_FOUND = "NOT_FOUND"


class LegStatus(Enum):
    """Outcome of one leg of a multi-document update."""

    ADDED = "ADDED"
    ALREADY_PRESENT = "ALREADY_PRESENT"
    REMOVED = "REMOVED"
    ABSENT = "ABSENT"
    NOT_FOUND = "NOT_FOUND"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def succeeded(self) -> bool:
        return self not in (LegStatus.NOT_FOUND, LegStatus.FAILED, LegStatus.CANCELLED)


@dataclass(frozen=True)
class LegOutcome:
    """Per-target result of a fan-out or retraction leg."""

    target_kind: EntityKind
    target_id: EntityId
    status: LegStatus
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status.succeeded


class LinkStep(Enum):
    """Sides of an Event/Speaker link, in the order they are written."""

    EVENT_SIDE = "EVENT_SIDE"
    SPEAKER_SIDE = "SPEAKER_SIDE"


@dataclass(frozen=True)
class SpeakerAssignment:
    """Snapshots of both sides after a link or unlink completed."""

    event: Event
    speaker: EventSpeaker
    event_side: LinkResult
    speaker_side: LinkResult


@dataclass(frozen=True)
class AsymmetricLink:
    """A link recorded on only one side of the Event/Speaker relationship."""

    event_id: EventId
    speaker_id: SpeakerId
    missing_side: LinkStep
    event_exists: bool = True
    speaker_exists: bool = True


@dataclass(frozen=True)
class EventCreation:
    """A created Event and the outcome of registering it with its parents."""

    event: Event
    fan_out: tuple[LegOutcome, ...] = field(default_factory=tuple)

    @property
    def is_consistent(self) -> bool:
        return all(outcome.succeeded for outcome in self.fan_out)


@dataclass(frozen=True)
class EventDeletion:
    """A deleted Event id and the outcome of retracting it everywhere."""

    event_id: EventId
    retractions: tuple[LegOutcome, ...] = field(default_factory=tuple)

    @property
    def is_consistent(self) -> bool:
        # A parent that no longer exists holds no link to retract.
        return all(outcome.succeeded or outcome.status is LegStatus.NOT_FOUND for outcome in self.retractions)
