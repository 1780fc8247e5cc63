"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.domain import EventCategoryId, EventFilter, EventStatusId, EventTypeId, EventVenueId
from events.domain.errors import DomainError, ErrorCode
from events.handlers.serializers import (
    EventFilterSerializer,
    EventInputSerializer,
    EventListingSerializer,
    EventSerializer,
    LegOutcomeSerializer,
    SpeakerAssignmentSerializer,
    SpeakerSerializer,
)
from events.services import EventInput, get_event_service, get_link_coordinator
from events.services.deadline import Deadline

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SPEAKER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SPEAKER_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_DATE_FORMAT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.STORAGE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.PARTIAL_CONSISTENCY: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.OPERATION_CANCELLED: status.HTTP_504_GATEWAY_TIMEOUT,
}


def error_response(error: DomainError) -> Response:
    """Map a domain error to a response carrying only its code and safe message."""
    body = {"code": error.code.value, "message": error.message}
    completed = getattr(error, "completed_steps", None)
    if completed is not None:
        body["completed_steps"] = [step.value for step in completed]
    return Response(body, status=ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR))


def request_deadline() -> Deadline | None:
    """Deadline for the storage work of one request, from ``REQUEST_DEADLINE_SECONDS``."""
    seconds = getattr(settings, "REQUEST_DEADLINE_SECONDS", 0)
    return Deadline.after(seconds) if seconds > 0 else None


def validation_response(errors) -> Response:
    return Response(
        {"code": ErrorCode.INVALID_INPUT.value, "message": "Invalid request", "fields": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


class EventListView(APIView):
    """Handler for GET /api/events and POST /api/events"""

    def get(self, request: Request) -> Response:
        params = EventFilterSerializer(data=request.query_params)
        if not params.is_valid():
            return validation_response(params.errors)
        values = params.validated_data
        event_filter = EventFilter(
            event_type_id=EventTypeId(values["type"]) if "type" in values else None,
            category_id=EventCategoryId(values["category"]) if "category" in values else None,
            status_id=EventStatusId(values["status"]) if "status" in values else None,
            venue_id=EventVenueId(values["venue"]) if "venue" in values else None,
        )
        try:
            listings = get_event_service().list_events(event_filter)
        except DomainError as error:
            return error_response(error)
        return Response(EventListingSerializer(listings, many=True).data)

    def post(self, request: Request) -> Response:
        payload = EventInputSerializer(data=request.data)
        if not payload.is_valid():
            return validation_response(payload.errors)
        values = payload.validated_data
        data = EventInput(
            name=values["name"],
            description=values["description"],
            start_date=values["start_date"],
            end_date=values["end_date"],
            start_time=values["start_time"],
            end_time=values["end_time"],
            is_all_day=values["is_all_day"],
            event_type_id=values["event_type"],
            category_id=values["event_category"],
            status_id=values["event_status"],
            venue_id=values["event_venue"],
        )
        try:
            creation = get_event_service().create_event(data, deadline=request_deadline())
        except DomainError as error:
            return error_response(error)
        return Response(
            {
                "event": EventSerializer(creation.event).data,
                "fan_out": LegOutcomeSerializer(creation.fan_out, many=True).data,
                "consistent": creation.is_consistent,
            },
            status=status.HTTP_201_CREATED,
        )


class EventDetailView(APIView):
    """Handler for GET /api/events/{event_id} and DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            event = get_event_service().get_event(event_id)
        except DomainError as error:
            return error_response(error)
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        try:
            deletion = get_event_service().delete_event(event_id, deadline=request_deadline())
        except DomainError as error:
            return error_response(error)
        return Response(
            {
                "deleted": True,
                "event_id": str(deletion.event_id),
                "retractions": LegOutcomeSerializer(deletion.retractions, many=True).data,
                "consistent": deletion.is_consistent,
            }
        )


class EventFanOutView(APIView):
    """Handler for POST /api/events/{event_id}/fan-out"""

    def post(self, request: Request, event_id: str) -> Response:
        try:
            outcomes = get_event_service().retry_fan_out(event_id, deadline=request_deadline())
        except DomainError as error:
            return error_response(error)
        return Response(
            {
                "fan_out": LegOutcomeSerializer(outcomes, many=True).data,
                "consistent": all(outcome.succeeded for outcome in outcomes),
            }
        )


class EventSpeakerListView(APIView):
    """Handler for GET /api/events/{event_id}/speakers"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            speakers = get_event_service().list_event_speakers(event_id)
        except DomainError as error:
            return error_response(error)
        return Response(SpeakerSerializer(speakers, many=True).data)


class EventSpeakerDetailView(APIView):
    """Handler for PUT and DELETE /api/events/{event_id}/speakers/{speaker_id}"""

    def put(self, request: Request, event_id: str, speaker_id: str) -> Response:
        try:
            assignment = get_link_coordinator().assign_speaker(event_id, speaker_id, deadline=request_deadline())
        except DomainError as error:
            return error_response(error)
        return Response(SpeakerAssignmentSerializer(assignment).data)

    def delete(self, request: Request, event_id: str, speaker_id: str) -> Response:
        try:
            assignment = get_link_coordinator().unassign_speaker(event_id, speaker_id, deadline=request_deadline())
        except DomainError as error:
            return error_response(error)
        return Response(SpeakerAssignmentSerializer(assignment).data)
