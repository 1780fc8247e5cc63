"""Serializers for request input and for rendering domain models to API responses."""

from rest_framework import serializers

from events.domain.dates import format_date


class IdentifierField(serializers.Field):
    """Renders a domain id as its UUID string."""

    def to_representation(self, value):
        return str(value)


class IdentifierSetField(serializers.Field):
    """Renders a collection of domain ids as a sorted list of UUID strings."""

    def to_representation(self, value):
        return sorted(str(item) for item in value)


class EventInputSerializer(serializers.Serializer):
    """Validates the shape of a create-event request. Dates are parsed by the service."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    start_date = serializers.CharField(max_length=10)
    end_date = serializers.CharField(max_length=10)
    start_time = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    end_time = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    is_all_day = serializers.BooleanField(required=False, default=False)
    event_type = serializers.UUIDField()
    event_category = serializers.UUIDField()
    event_status = serializers.UUIDField()
    event_venue = serializers.UUIDField()


class EventFilterSerializer(serializers.Serializer):
    type = serializers.UUIDField(required=False)
    category = serializers.UUIDField(required=False)
    status = serializers.UUIDField(required=False)
    venue = serializers.UUIDField(required=False)


class LookupSerializer(serializers.Serializer):
    """Serializer for EventType, EventCategory, EventStatus and EventVenue."""

    id = IdentifierField()
    name = serializers.CharField()
    event_ids = IdentifierSetField()


class SpeakerSerializer(serializers.Serializer):
    """Serializer for EventSpeaker domain model."""

    id = IdentifierField()
    name = serializers.CharField()
    profile = serializers.CharField()
    event_ids = IdentifierSetField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = IdentifierField()
    name = serializers.CharField()
    description = serializers.CharField()
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField()
    start_date = serializers.SerializerMethodField()
    end_date = serializers.SerializerMethodField()
    start_time = serializers.CharField()
    end_time = serializers.CharField()
    is_all_day = serializers.BooleanField()
    event_type_id = IdentifierField()
    category_id = IdentifierField()
    status_id = IdentifierField()
    venue_id = IdentifierField()
    speaker_ids = IdentifierSetField()
    feedback_ids = IdentifierSetField()
    rsvp_ids = IdentifierSetField()

    def get_start_date(self, event) -> str:
        return format_date(event.starts_at)

    def get_end_date(self, event) -> str:
        return format_date(event.ends_at)


class EventListingSerializer(serializers.Serializer):
    """Serializer for an Event with its parents resolved."""

    event = EventSerializer()
    event_type = LookupSerializer(allow_null=True)
    category = LookupSerializer(allow_null=True)
    status = LookupSerializer(allow_null=True)
    venue = LookupSerializer(allow_null=True)


class LegOutcomeSerializer(serializers.Serializer):
    """Serializer for one leg of a fan-out or retraction."""

    target_kind = serializers.CharField(source="target_kind.value")
    target_id = IdentifierField()
    status = serializers.CharField(source="status.value")
    error = serializers.CharField(allow_null=True)


class SpeakerAssignmentSerializer(serializers.Serializer):
    event = EventSerializer()
    speaker = SpeakerSerializer()
    event_side = serializers.CharField(source="event_side.value")
    speaker_side = serializers.CharField(source="speaker_side.value")
