from django.urls import path

from events.handlers import (
    EventDetailView,
    EventFanOutView,
    EventListView,
    EventSpeakerDetailView,
    EventSpeakerListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/fan-out", EventFanOutView.as_view(), name="event-fan-out"),
    path(
        "events/<str:event_id>/speakers",
        EventSpeakerListView.as_view(),
        name="event-speaker-list",
    ),
    path(
        "events/<str:event_id>/speakers/<str:speaker_id>",
        EventSpeakerDetailView.as_view(),
        name="event-speaker-detail",
    ),
]
