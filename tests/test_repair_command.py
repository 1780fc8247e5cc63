"""Tests for the repair_links management command and admin registrations.

Run with: pytest tests/test_repair_command.py -v
"""

from io import StringIO

import pytest
from django.contrib import admin
from django.core.management import call_command

from events import models as orm
from events.domain import SpeakerId
from events.services import EventService


@pytest.mark.django_db
class TestRepairLinksCommand:
    def test_dry_run_reports_without_writing(self, django_stores, django_parents, make_django_speaker):
        event = EventService(django_stores).create_event(django_parents.event_input()).event
        speaker = make_django_speaker()
        django_stores.events.add_link_if_absent(event.id, "speaker_ids", speaker.id)
        out = StringIO()

        call_command("repair_links", "--dry-run", stdout=out)

        assert "missing=SPEAKER_SIDE" in out.getvalue()
        assert "1 asymmetric link(s) found" in out.getvalue()
        assert django_stores.speakers.get(speaker.id).event_ids == frozenset()

    def test_repair_completes_one_sided_links(self, django_stores, django_parents, make_django_speaker):
        event = EventService(django_stores).create_event(django_parents.event_input()).event
        speaker = make_django_speaker()
        ghost = SpeakerId.new()
        django_stores.events.add_link_if_absent(event.id, "speaker_ids", speaker.id)
        django_stores.events.add_link_if_absent(event.id, "speaker_ids", ghost)
        out = StringIO()

        call_command("repair_links", stdout=out)

        assert "Repaired 2 link(s)" in out.getvalue()
        assert django_stores.speakers.get(speaker.id).event_ids == frozenset({event.id})
        assert django_stores.events.get(event.id).speaker_ids == frozenset({speaker.id})


class TestAdminRegistrations:
    @pytest.mark.parametrize(
        "model",
        [orm.Event, orm.EventType, orm.EventCategory, orm.EventStatus, orm.EventVenue, orm.EventSpeaker],
    )
    def test_model_is_registered(self, model):
        assert admin.site.is_registered(model)

    def test_link_collections_are_read_only(self):
        assert "speaker_ids" in admin.site._registry[orm.Event].readonly_fields
