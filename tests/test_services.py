"""Unit tests for EventService.

These test orchestration, fan-out reporting and domain error mapping.
Run with: pytest tests/test_services.py -v
"""

from dataclasses import replace
from datetime import datetime, timezone
from itertools import count

import pytest

from events.domain import EntityKind, EventFilter, EventStatusId, EventVenueId, LegStatus, LinkResult
from events.domain.errors import (
    EventNotFoundError,
    InvalidDateFormatError,
    InvalidEventIdError,
    InvalidInputError,
    OperationCancelledError,
    StorageError,
)
from events.services import EventService, FanOutWriter
from events.services.deadline import Deadline
from events.stores.memory_store import InMemoryDocumentStore


class FlakyStore(InMemoryDocumentStore):
    """In-memory store whose link writes fail until ``healthy`` is set."""

    healthy = False

    def add_link_if_absent(self, doc_id, field, target_id):
        if not self.healthy:
            raise StorageError()
        return super().add_link_if_absent(doc_id, field, target_id)

    def remove_link_if_present(self, doc_id, field, target_id):
        if not self.healthy:
            raise StorageError()
        return super().remove_link_if_present(doc_id, field, target_id)


def make_flaky(store: InMemoryDocumentStore) -> FlakyStore:
    flaky = FlakyStore(store.kind, store.link_fields)
    for doc in store.list_all():
        flaky.save(doc)
    return flaky


class TestCreateEvent:
    """Tests for EventService.create_event."""

    def test_timed_event_uses_supplied_times(self, service, parents):
        """Start and end are normalized with their time of day."""
        event = service.create_event(parents.event_input()).event

        assert event.starts_at == datetime(2016, 9, 7, 18, 0, tzinfo=timezone.utc)
        assert event.ends_at == datetime(2016, 9, 7, 23, 30, tzinfo=timezone.utc)
        assert event.start_time == "06:00 PM"
        assert event.end_time == "11:30 PM"
        assert not event.is_all_day

    def test_all_day_event_is_fixed_to_midnight(self, service, parents):
        """All-day events ignore supplied times and display midnight."""
        creation = service.create_event(
            parents.event_input(is_all_day=True, end_date="08/09/2016", start_time="09:00 AM")
        )

        assert creation.event.starts_at == datetime(2016, 9, 7, tzinfo=timezone.utc)
        assert creation.event.ends_at == datetime(2016, 9, 8, tzinfo=timezone.utc)
        assert creation.event.start_time == "12:00 AM"
        assert creation.event.end_time == "12:00 AM"

    def test_event_is_persisted(self, service, stores, parents):
        event = service.create_event(parents.event_input()).event
        assert stores.events.get(event.id) == event

    def test_fan_out_registers_event_with_all_parents_once(self, service, stores, parents):
        """Each parent lists the new event id exactly once."""
        creation = service.create_event(parents.event_input())

        assert creation.is_consistent
        assert [outcome.status for outcome in creation.fan_out] == [LegStatus.ADDED] * 4
        for lookup in (parents.event_type, parents.category, parents.status, parents.venue):
            stored = stores.for_kind(lookup.kind).get(lookup.id)
            assert stored.event_ids == frozenset({creation.event.id})

    def test_missing_parent_is_reported_and_creation_still_succeeds(self, service, stores, parents):
        """A leg naming a missing venue is reported; the other legs land."""
        creation = service.create_event(parents.event_input(venue_id=str(EventVenueId.new())))

        assert stores.events.get(creation.event.id) is not None
        assert not creation.is_consistent
        by_kind = {outcome.target_kind: outcome for outcome in creation.fan_out}
        assert by_kind[EntityKind.EVENT_VENUE].status is LegStatus.NOT_FOUND
        assert by_kind[EntityKind.EVENT_TYPE].status is LegStatus.ADDED

    def test_failed_leg_is_reported_and_others_are_kept(self, stores, parents):
        """A storage failure on one parent does not roll back the other legs."""
        stores = replace(stores, statuses=make_flaky(stores.statuses))
        service = EventService(stores)

        creation = service.create_event(parents.event_input())

        by_kind = {outcome.target_kind: outcome for outcome in creation.fan_out}
        assert by_kind[EntityKind.EVENT_STATUS].status is LegStatus.FAILED
        assert by_kind[EntityKind.EVENT_STATUS].error
        assert stores.event_types.get(parents.event_type.id).event_ids == frozenset({creation.event.id})
        assert stores.events.get(creation.event.id) is not None

        stores.statuses.healthy = True
        retried = service.retry_fan_out(str(creation.event.id))
        statuses = {outcome.target_kind: outcome.status for outcome in retried}
        assert statuses[EntityKind.EVENT_STATUS] is LegStatus.ADDED
        assert statuses[EntityKind.EVENT_TYPE] is LegStatus.ALREADY_PRESENT
        assert stores.statuses.get(parents.status.id).event_ids == frozenset({creation.event.id})

    def test_deadline_cancels_remaining_legs(self, service, stores, parents):
        """Legs not started before the deadline are reported as cancelled and can be retried."""
        # Reads of the clock: 1 at construction, 2 before the save, 3 and 4 before
        # the first two legs. The third leg sees 5 and is past the deadline.
        deadline = Deadline.after(3.5, clock=count(1).__next__)

        creation = service.create_event(parents.event_input(), deadline=deadline)

        assert not creation.is_consistent
        assert [outcome.status for outcome in creation.fan_out] == [
            LegStatus.ADDED,
            LegStatus.ADDED,
            LegStatus.CANCELLED,
            LegStatus.CANCELLED,
        ]
        assert stores.events.get(creation.event.id) is not None
        assert stores.venues.get(parents.venue.id).event_ids == frozenset()

        retried = service.retry_fan_out(str(creation.event.id))
        assert all(outcome.succeeded for outcome in retried)
        assert stores.venues.get(parents.venue.id).event_ids == frozenset({creation.event.id})

    def test_expired_deadline_stores_nothing(self, service, stores, parents):
        deadline = Deadline.after(0, clock=count(1).__next__)

        with pytest.raises(OperationCancelledError) as excinfo:
            service.create_event(parents.event_input(), deadline=deadline)

        assert excinfo.value.completed_steps == ()
        assert stores.events.list_all() == []

    def test_blank_name_raises(self, service, parents):
        with pytest.raises(InvalidInputError) as excinfo:
            service.create_event(parents.event_input(name="  "))
        assert excinfo.value.field == "name"

    def test_invalid_parent_id_raises(self, service, parents):
        with pytest.raises(InvalidInputError) as excinfo:
            service.create_event(parents.event_input(status_id="bogus"))
        assert excinfo.value.field == "event_status"

    def test_missing_times_raise_for_timed_event(self, service, parents):
        with pytest.raises(InvalidInputError):
            service.create_event(parents.event_input(start_time=None))

    def test_malformed_date_raises(self, service, stores, parents):
        with pytest.raises(InvalidDateFormatError):
            service.create_event(parents.event_input(start_date="2016/09/07"))
        assert stores.events.list_all() == []

    def test_end_before_start_raises(self, service, parents):
        with pytest.raises(InvalidInputError):
            service.create_event(parents.event_input(start_time="11:00 PM", end_time="10:00 PM"))


class TestGetEvent:
    def test_get_event_invalid_id_raises_error(self, service):
        """get_event raises InvalidEventIdError for malformed UUID."""
        with pytest.raises(InvalidEventIdError):
            service.get_event("not-a-uuid")

    def test_get_event_not_found_raises_error(self, service):
        """get_event raises EventNotFoundError when store returns None."""
        with pytest.raises(EventNotFoundError):
            service.get_event("12345678-1234-5678-1234-567812345678")


class TestDeleteEvent:
    """Tests for EventService.delete_event."""

    def test_delete_retracts_every_link(self, service, coordinator, stores, parents, make_speaker):
        """No parent or speaker references the deleted event."""
        event = service.create_event(parents.event_input()).event
        first, second = make_speaker("Ada"), make_speaker("Grace")
        coordinator.assign_speaker(str(event.id), str(first.id))
        coordinator.assign_speaker(str(event.id), str(second.id))

        deletion = service.delete_event(str(event.id))

        assert deletion.is_consistent
        assert len(deletion.retractions) == 6
        assert {outcome.status for outcome in deletion.retractions} == {LegStatus.REMOVED}
        assert stores.events.get(event.id) is None
        for lookup in (parents.event_type, parents.category, parents.status, parents.venue):
            assert event.id not in stores.for_kind(lookup.kind).get(lookup.id).event_ids
        for speaker in (first, second):
            assert stores.speakers.get(speaker.id).event_ids == frozenset()

    def test_delete_missing_event_raises(self, service):
        with pytest.raises(EventNotFoundError):
            service.delete_event("12345678-1234-5678-1234-567812345678")

    def test_failed_retraction_is_reported(self, service, stores, parents):
        event = service.create_event(parents.event_input()).event
        flaky = replace(stores, venues=make_flaky(stores.venues))

        deletion = EventService(flaky, FanOutWriter(flaky)).delete_event(str(event.id))

        assert not deletion.is_consistent
        failed = [outcome for outcome in deletion.retractions if outcome.status is LegStatus.FAILED]
        assert [outcome.target_kind for outcome in failed] == [EntityKind.EVENT_VENUE]
        assert stores.events.get(event.id) is None

    def test_deadline_cancels_remaining_retractions(self, service, coordinator, stores, parents, make_speaker):
        event = service.create_event(parents.event_input()).event
        speaker = make_speaker()
        coordinator.assign_speaker(str(event.id), str(speaker.id))
        # Reads of the clock: 1 at construction, 2 before the delete, 3 before the
        # first leg. Every later leg is past the deadline.
        deadline = Deadline.after(2.5, clock=count(1).__next__)

        deletion = service.delete_event(str(event.id), deadline=deadline)

        assert not deletion.is_consistent
        statuses = [outcome.status for outcome in deletion.retractions]
        assert statuses == [LegStatus.REMOVED] + [LegStatus.CANCELLED] * 4
        assert stores.events.get(event.id) is None
        assert stores.event_types.get(parents.event_type.id).event_ids == frozenset()
        assert stores.speakers.get(speaker.id).event_ids == frozenset({event.id})

    def test_expired_deadline_keeps_the_event(self, service, stores, parents):
        event = service.create_event(parents.event_input()).event

        with pytest.raises(OperationCancelledError):
            service.delete_event(str(event.id), deadline=Deadline.after(0, clock=count(1).__next__))

        assert stores.events.get(event.id) == event


class TestListEvents:
    def test_listing_resolves_parents(self, service, parents):
        event = service.create_event(parents.event_input()).event

        [listing] = service.list_events()

        assert listing.event.id == event.id
        assert listing.event_type.name == "Talk"
        assert listing.category.name == "Technology"
        assert listing.status.name == "Open"
        assert listing.venue.address == "1 Main St"

    def test_listing_is_ordered_by_start(self, service, parents):
        later = service.create_event(parents.event_input(name="Later", start_date="09/09/2016", end_date="09/09/2016"))
        earlier = service.create_event(parents.event_input(name="Earlier"))

        assert [listing.event.id for listing in service.list_events()] == [earlier.event.id, later.event.id]

    def test_listing_filters_by_parent(self, service, parents):
        service.create_event(parents.event_input())

        assert len(service.list_events(EventFilter(status_id=parents.status.id))) == 1
        assert service.list_events(EventFilter(status_id=EventStatusId.new())) == []

    def test_missing_parent_resolves_to_none(self, service, parents):
        service.create_event(parents.event_input(venue_id=str(EventVenueId.new())))

        [listing] = service.list_events()

        assert listing.venue is None
        assert listing.event_type is not None


class TestListEventSpeakers:
    def test_lists_linked_speakers_by_name(self, service, coordinator, parents, make_speaker):
        event = service.create_event(parents.event_input()).event
        grace, ada = make_speaker("Grace"), make_speaker("Ada")
        make_speaker("Unlinked")
        coordinator.assign_speaker(str(event.id), str(grace.id))
        coordinator.assign_speaker(str(event.id), str(ada.id))

        speakers = service.list_event_speakers(str(event.id))

        assert [speaker.name for speaker in speakers] == ["Ada", "Grace"]

    def test_list_speakers_event_not_found_raises_error(self, service):
        """list_event_speakers raises EventNotFoundError when the event doesn't exist."""
        with pytest.raises(EventNotFoundError):
            service.list_event_speakers("12345678-1234-5678-1234-567812345678")

    def test_invalid_id_raises(self, service):
        with pytest.raises(InvalidEventIdError):
            service.list_event_speakers("nope")


class TestInMemoryStore:
    def test_unknown_link_field_is_rejected(self, stores, parents):
        with pytest.raises(ValueError):
            stores.venues.add_link_if_absent(parents.venue.id, "speaker_ids", parents.venue.id)

    def test_link_on_missing_document_is_not_found(self, stores, parents):
        assert stores.venues.add_link_if_absent(EventVenueId.new(), "event_ids", parents.venue.id) is LinkResult.NOT_FOUND
