"""Pytest configuration and shared fixtures."""

from dataclasses import dataclass

import pytest
from rest_framework.test import APIClient

from events.domain import (
    EntityKind,
    EventCategoryId,
    EventLookup,
    EventSpeaker,
    EventStatusId,
    EventTypeId,
    EventVenueId,
    SpeakerId,
)
from events.services import EventInput, EventService, SpeakerLinkCoordinator
from events.stores import EventStores, build_memory_stores


@dataclass(frozen=True)
class Parents:
    event_type: EventLookup
    category: EventLookup
    status: EventLookup
    venue: EventLookup

    def event_input(self, **overrides) -> EventInput:
        values = {
            "name": "Python Meetup",
            "description": "Monthly talks",
            "start_date": "07/09/2016",
            "end_date": "07/09/2016",
            "start_time": "06:00 PM",
            "end_time": "11:30 PM",
            "is_all_day": False,
            "event_type_id": str(self.event_type.id),
            "category_id": str(self.category.id),
            "status_id": str(self.status.id),
            "venue_id": str(self.venue.id),
        }
        values.update(overrides)
        return EventInput(**values)


def seed_parents(stores: EventStores) -> Parents:
    return Parents(
        event_type=stores.event_types.save(EventLookup(id=EventTypeId.new(), kind=EntityKind.EVENT_TYPE, name="Talk")),
        category=stores.categories.save(
            EventLookup(id=EventCategoryId.new(), kind=EntityKind.EVENT_CATEGORY, name="Technology")
        ),
        status=stores.statuses.save(EventLookup(id=EventStatusId.new(), kind=EntityKind.EVENT_STATUS, name="Open")),
        venue=stores.venues.save(
            EventLookup(id=EventVenueId.new(), kind=EntityKind.EVENT_VENUE, name="Hall A", address="1 Main St")
        ),
    )


def seed_speaker(stores: EventStores, name: str = "Ada Lovelace") -> EventSpeaker:
    return stores.speakers.save(EventSpeaker(id=SpeakerId.new(), name=name, profile="Speaker profile"))


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def stores() -> EventStores:
    return build_memory_stores()


@pytest.fixture
def parents(stores: EventStores) -> Parents:
    return seed_parents(stores)


@pytest.fixture
def service(stores: EventStores) -> EventService:
    return EventService(stores)


@pytest.fixture
def coordinator(stores: EventStores) -> SpeakerLinkCoordinator:
    return SpeakerLinkCoordinator(stores)


@pytest.fixture
def make_speaker(stores: EventStores):
    def _make(name: str = "Ada Lovelace") -> EventSpeaker:
        return seed_speaker(stores, name)

    return _make


@pytest.fixture
def django_stores(db) -> EventStores:
    from events.stores.django_store import build_django_stores

    return build_django_stores()


@pytest.fixture
def django_parents(django_stores: EventStores) -> Parents:
    return seed_parents(django_stores)


@pytest.fixture
def make_django_speaker(django_stores: EventStores):
    def _make(name: str = "Ada Lovelace") -> EventSpeaker:
        return seed_speaker(django_stores, name)

    return _make
