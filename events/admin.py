from django.contrib import admin

from events.models import Event, EventCategory, EventSpeaker, EventStatus, EventType, EventVenue


class LookupAdmin(admin.ModelAdmin):
    list_display = ["name", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["event_ids"]


@admin.register(EventType)
class EventTypeAdmin(LookupAdmin):
    pass


@admin.register(EventCategory)
class EventCategoryAdmin(LookupAdmin):
    pass


@admin.register(EventStatus)
class EventStatusAdmin(LookupAdmin):
    pass


@admin.register(EventVenue)
class EventVenueAdmin(LookupAdmin):
    list_display = ["name", "address", "created_at"]


@admin.register(EventSpeaker)
class EventSpeakerAdmin(admin.ModelAdmin):
    list_display = ["name", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["event_ids"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "starts_at", "ends_at", "is_all_day"]
    list_filter = ["is_all_day"]
    search_fields = ["name"]
    # Links are maintained through the API so both sides stay in step.
    readonly_fields = ["speaker_ids", "feedback_ids", "rsvp_ids"]
