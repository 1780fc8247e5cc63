from functools import lru_cache

from django.conf import settings

from events.services.event_service import EventInput, EventService
from events.services.fan_out import FanOutWriter
from events.services.link_coordinator import SpeakerLinkCoordinator
from events.stores.interfaces import EventStores

__all__ = [
    "EventInput",
    "EventService",
    "FanOutWriter",
    "SpeakerLinkCoordinator",
    "get_stores",
    "get_event_service",
    "get_link_coordinator",
]


@lru_cache(maxsize=1)
def _memory_stores() -> EventStores:
    from events.stores.memory_store import build_memory_stores

    return build_memory_stores()


def get_stores() -> EventStores:
    """Return the stores for the configured ``EVENTS_STORE_BACKEND``."""
    backend = getattr(settings, "EVENTS_STORE_BACKEND", "django")
    if backend == "memory":
        return _memory_stores()
    if backend == "django":
        from events.stores.django_store import build_django_stores

        return build_django_stores()
    raise ValueError(f"Unknown EVENTS_STORE_BACKEND {backend!r}")


def get_event_service() -> EventService:
    return EventService(get_stores())


def get_link_coordinator() -> SpeakerLinkCoordinator:
    return SpeakerLinkCoordinator(get_stores())
