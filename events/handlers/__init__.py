from events.handlers.views import (
    EventDetailView,
    EventFanOutView,
    EventListView,
    EventSpeakerDetailView,
    EventSpeakerListView,
)

__all__ = [
    "EventDetailView",
    "EventFanOutView",
    "EventListView",
    "EventSpeakerDetailView",
    "EventSpeakerListView",
]
