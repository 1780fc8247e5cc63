from events.domain.models import (
    AsymmetricLink,
    Event,
    EventCreation,
    EventDeletion,
    EventFilter,
    EventListing,
    EventLookup,
    EventSpeaker,
    LegOutcome,
    LegStatus,
    LinkResult,
    LinkStep,
    SpeakerAssignment,
)
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

__all__ = [
    "AsymmetricLink",
    "Event",
    "EventCreation",
    "EventDeletion",
    "EventFilter",
    "EventListing",
    "EventLookup",
    "EventSpeaker",
    "LegOutcome",
    "LegStatus",
    "LinkResult",
    "LinkStep",
    "SpeakerAssignment",
    "EntityId",
    "EntityKind",
    "EventId",
    "SpeakerId",
    "EventTypeId",
    "EventCategoryId",
    "EventStatusId",
    "EventVenueId",
    "FeedbackId",
    "RsvpId",
]
