"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EntityId:
    """Base identifier wrapping a UUID."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EventId(EntityId):
    """Unique identifier for an Event."""


@dataclass(frozen=True)
class SpeakerId(EntityId):
    """Unique identifier for an EventSpeaker."""


@dataclass(frozen=True)
class EventTypeId(EntityId):
    """Unique identifier for an EventType."""


@dataclass(frozen=True)
class EventCategoryId(EntityId):
    """Unique identifier for an EventCategory."""


@dataclass(frozen=True)
class EventStatusId(EntityId):
    """Unique identifier for an EventStatus."""


@dataclass(frozen=True)
class EventVenueId(EntityId):
    """Unique identifier for an EventVenue."""


@dataclass(frozen=True)
class FeedbackId(EntityId):
    """Unique identifier for a Feedback entry."""


@dataclass(frozen=True)
class RsvpId(EntityId):
    """Unique identifier for a UserEventRsvp."""


class EntityKind(Enum):
    """Kinds of independently stored documents."""

    EVENT = "event"
    EVENT_TYPE = "event_type"
    EVENT_CATEGORY = "event_category"
    EVENT_STATUS = "event_status"
    EVENT_VENUE = "event_venue"
    EVENT_SPEAKER = "event_speaker"


PARENT_KINDS = (
    EntityKind.EVENT_TYPE,
    EntityKind.EVENT_CATEGORY,
    EntityKind.EVENT_STATUS,
    EntityKind.EVENT_VENUE,
)

ID_TYPES: dict[EntityKind, type[EntityId]] = {
    EntityKind.EVENT: EventId,
    EntityKind.EVENT_TYPE: EventTypeId,
    EntityKind.EVENT_CATEGORY: EventCategoryId,
    EntityKind.EVENT_STATUS: EventStatusId,
    EntityKind.EVENT_VENUE: EventVenueId,
    EntityKind.EVENT_SPEAKER: SpeakerId,
}
