"""Symmetric Event/Speaker links.

Both sides of a link live in different documents and there is no
cross-document transaction. Each side is written with the store's idempotent
conditional update, the event side first. When an operation stops between
the two writes, the error carries the sides already committed so the caller
can retry the same call.
"""

import logging
from dataclasses import replace
from uuid import UUID

from events.domain import (
    AsymmetricLink,
    EntityKind,
    Event,
    EventSpeaker,
    LegOutcome,
    LegStatus,
    LinkResult,
    LinkStep,
    SpeakerAssignment,
)
from events.domain.errors import (
    EventNotFoundError,
    OperationCancelledError,
    PartialLinkError,
    SpeakerNotFoundError,
    StorageError,
)
from events.services.deadline import Deadline
from events.services.identifiers import parse_event_id, parse_speaker_id
from events.stores.interfaces import EventStores

logger = logging.getLogger(__name__)

EVENT_SPEAKERS_FIELD = "speaker_ids"
SPEAKER_EVENTS_FIELD = "event_ids"


def _checkpoint(deadline: Deadline | None, completed: list[LinkStep]) -> None:
    if deadline is not None and deadline.expired():
        logger.warning("Deadline expired after steps %s", [step.value for step in completed])
        raise OperationCancelledError(tuple(completed))


class SpeakerLinkCoordinator:
    """Maintains the many-to-many relationship between events and speakers."""

    def __init__(self, stores: EventStores) -> None:
        self._events = stores.events
        self._speakers = stores.speakers

    def assign_speaker(
        self, event_id: str | UUID, speaker_id: str | UUID, deadline: Deadline | None = None
    ) -> SpeakerAssignment:
        """Link a speaker to an event on both sides. Repeated calls are no-ops.

        Raises:
            InvalidEventIdError, InvalidSpeakerIdError: If an id is malformed.
            EventNotFoundError: If the event does not exist.
            SpeakerNotFoundError: If the speaker does not exist. The event side
                may already be linked; see ``completed_steps``.
            PartialLinkError: If storage failed after the event side was linked.
            OperationCancelledError: If ``deadline`` expired mid-operation.
            StorageError: If storage failed before anything was written.
        """
        event_key = parse_event_id(event_id)
        speaker_key = parse_speaker_id(speaker_id)
        completed: list[LinkStep] = []

        try:
            _checkpoint(deadline, completed)
            event = self._events.get(event_key)
            if event is None:
                raise EventNotFoundError(str(event_id))

            _checkpoint(deadline, completed)
            event_side = self._events.add_link_if_absent(event_key, EVENT_SPEAKERS_FIELD, speaker_key)
            if event_side is LinkResult.NOT_FOUND:
                raise EventNotFoundError(str(event_id))
            completed.append(LinkStep.EVENT_SIDE)

            _checkpoint(deadline, completed)
            speaker = self._speakers.get(speaker_key)
            if speaker is None:
                logger.warning(
                    "Speaker %s not found; event %s keeps a one-sided link", speaker_key, event_key
                )
                raise SpeakerNotFoundError(str(speaker_id), completed_steps=tuple(completed))

            _checkpoint(deadline, completed)
            speaker_side = self._speakers.add_link_if_absent(speaker_key, SPEAKER_EVENTS_FIELD, event_key)
            if speaker_side is LinkResult.NOT_FOUND:
                raise SpeakerNotFoundError(str(speaker_id), completed_steps=tuple(completed))
            completed.append(LinkStep.SPEAKER_SIDE)
        except StorageError as exc:
            if not completed:
                raise
            logger.warning("Link %s <-> %s stopped after %s", event_key, speaker_key, completed)
            raise PartialLinkError(tuple(completed)) from exc

        logger.info(
            "Assigned speaker %s to event %s (event side %s, speaker side %s)",
            speaker_key,
            event_key,
            event_side.value,
            speaker_side.value,
        )
        return SpeakerAssignment(
            event=replace(event, speaker_ids=event.speaker_ids | {speaker_key}),
            speaker=replace(speaker, event_ids=speaker.event_ids | {event_key}),
            event_side=event_side,
            speaker_side=speaker_side,
        )

    def unassign_speaker(
        self, event_id: str | UUID, speaker_id: str | UUID, deadline: Deadline | None = None
    ) -> SpeakerAssignment:
        """Remove a speaker from an event on both sides. Repeated calls are no-ops.

        Raises the same errors as ``assign_speaker``.
        """
        event_key = parse_event_id(event_id)
        speaker_key = parse_speaker_id(speaker_id)
        completed: list[LinkStep] = []

        try:
            _checkpoint(deadline, completed)
            event = self._events.get(event_key)
            if event is None:
                raise EventNotFoundError(str(event_id))

            _checkpoint(deadline, completed)
            event_side = self._events.remove_link_if_present(event_key, EVENT_SPEAKERS_FIELD, speaker_key)
            if event_side is LinkResult.NOT_FOUND:
                raise EventNotFoundError(str(event_id))
            completed.append(LinkStep.EVENT_SIDE)

            _checkpoint(deadline, completed)
            speaker = self._speakers.get(speaker_key)
            if speaker is None:
                raise SpeakerNotFoundError(str(speaker_id), completed_steps=tuple(completed))

            _checkpoint(deadline, completed)
            speaker_side = self._speakers.remove_link_if_present(speaker_key, SPEAKER_EVENTS_FIELD, event_key)
            if speaker_side is LinkResult.NOT_FOUND:
                raise SpeakerNotFoundError(str(speaker_id), completed_steps=tuple(completed))
            completed.append(LinkStep.SPEAKER_SIDE)
        except StorageError as exc:
            if not completed:
                raise
            logger.warning("Unlink %s <-> %s stopped after %s", event_key, speaker_key, completed)
            raise PartialLinkError(tuple(completed)) from exc

        logger.info("Unassigned speaker %s from event %s", speaker_key, event_key)
        return SpeakerAssignment(
            event=replace(event, speaker_ids=event.speaker_ids - {speaker_key}),
            speaker=replace(speaker, event_ids=speaker.event_ids - {event_key}),
            event_side=event_side,
            speaker_side=speaker_side,
        )

    def find_asymmetric_links(self) -> list[AsymmetricLink]:
        """Return every link recorded on only one side."""
        events = {event.id: event for event in self._events.list_all()}
        speakers = {speaker.id: speaker for speaker in self._speakers.list_all()}
        found: list[AsymmetricLink] = []

        for event in events.values():
            for speaker_key in event.speaker_ids:
                speaker = speakers.get(speaker_key)
                if speaker is None or event.id not in speaker.event_ids:
                    found.append(
                        AsymmetricLink(
                            event_id=event.id,
                            speaker_id=speaker_key,
                            missing_side=LinkStep.SPEAKER_SIDE,
                            speaker_exists=speaker is not None,
                        )
                    )

        for speaker in speakers.values():
            for event_key in speaker.event_ids:
                event = events.get(event_key)
                if event is None or speaker.id not in event.speaker_ids:
                    found.append(
                        AsymmetricLink(
                            event_id=event_key,
                            speaker_id=speaker.id,
                            missing_side=LinkStep.EVENT_SIDE,
                            event_exists=event is not None,
                        )
                    )
        return found

    def repair_links(self) -> list[LegOutcome]:
        """Bring every asymmetric link back in line with the event side.

        A link the event lists gets its speaker side added, unless the speaker
        is gone. A link only the speaker lists is removed from the speaker. The
        returned outcomes name the document each repair wrote to. Each repair is an independent idempotent write. Failures are reported
        in the returned outcomes and the pass continues.
        """
        outcomes: list[LegOutcome] = []
        for link in self.find_asymmetric_links():
            outcomes.append(self._repair(link))
        failed = [outcome for outcome in outcomes if not outcome.succeeded]
        if failed:
            logger.warning("Link repair left %d of %d links unrepaired", len(failed), len(outcomes))
        return outcomes

    def _repair(self, link: AsymmetricLink) -> LegOutcome:
        # The event side is written first by both assign and unassign, so it
        # holds the last requested state: a missing speaker side is completed,
        # a speaker-only link is finished off as an unassign.
        if link.missing_side is LinkStep.SPEAKER_SIDE and link.speaker_exists:
            kind, store, doc_id, field, other = (
                EntityKind.EVENT_SPEAKER, self._speakers, link.speaker_id, SPEAKER_EVENTS_FIELD, link.event_id
            )
            operation = store.add_link_if_absent
        elif link.missing_side is LinkStep.SPEAKER_SIDE:
            kind, store, doc_id, field, other = (
                EntityKind.EVENT, self._events, link.event_id, EVENT_SPEAKERS_FIELD, link.speaker_id
            )
            operation = store.remove_link_if_present
        else:
            kind, store, doc_id, field, other = (
                EntityKind.EVENT_SPEAKER, self._speakers, link.speaker_id, SPEAKER_EVENTS_FIELD, link.event_id
            )
            operation = store.remove_link_if_present

        try:
            result = operation(doc_id, field, other)
        except StorageError as exc:
            return LegOutcome(target_kind=kind, target_id=doc_id, status=LegStatus.FAILED, error=exc.message)
        return LegOutcome(target_kind=kind, target_id=doc_id, status=LegStatus[result.value])


def speakers_for(event: Event, speakers: list[EventSpeaker]) -> list[EventSpeaker]:
    """Order speakers by name, keeping only those the event links to."""
    return sorted((speaker for speaker in speakers if speaker.id in event.speaker_ids), key=lambda s: s.name)
