"""Parsing of identifiers received from callers into domain ids."""

from typing import TypeVar
from uuid import UUID

from events.domain import EntityId, EventId, SpeakerId
from events.domain.errors import InvalidEventIdError, InvalidInputError, InvalidSpeakerIdError

I = TypeVar("I", bound=EntityId)


def parse_event_id(value: str | UUID) -> EventId:
    try:
        return EventId.from_string(value)
    except (TypeError, ValueError) as exc:
        raise InvalidEventIdError() from exc


def parse_speaker_id(value: str | UUID) -> SpeakerId:
    try:
        return SpeakerId.from_string(value)
    except (TypeError, ValueError) as exc:
        raise InvalidSpeakerIdError() from exc


def parse_reference(id_type: type[I], value: str | UUID | None, field: str) -> I:
    """Parse a required parent reference, naming the offending field on failure."""
    if value in (None, ""):
        raise InvalidInputError(f"{field} is required", field=field)
    try:
        return id_type.from_string(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{field} is not a valid identifier", field=field) from exc
