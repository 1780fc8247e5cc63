"""Propagation of an event's id into the documents that reference it.

Every leg is an independent idempotent write. A failed leg never undoes the
others; it is reported so that only the failed legs need retrying. Once the
caller's deadline expires, the legs not yet run are reported as cancelled.
"""

import logging
from collections.abc import Callable

from events.domain import EntityId, EntityKind, Event, LegOutcome, LegStatus, LinkResult
from events.domain.errors import StorageError
from events.services.deadline import Deadline
from events.stores.interfaces import EventStores

logger = logging.getLogger(__name__)

BACK_REFERENCE_FIELD = "event_ids"


class FanOutWriter:
    """Registers and retracts an event with its parents and speakers."""

    def __init__(self, stores: EventStores) -> None:
        self._stores = stores

    def on_event_created(self, event: Event, deadline: Deadline | None = None) -> list[LegOutcome]:
        """Add the event id to its type, category, status and venue."""
        outcomes = self._run(list(event.parent_ids().items()), event, "add_link_if_absent", deadline)
        self._log_summary("Fan-out", event, outcomes)
        return outcomes

    def on_event_deleted(self, event: Event, deadline: Deadline | None = None) -> list[LegOutcome]:
        """Remove the event id from its parents and every linked speaker."""
        targets: list[tuple[EntityKind, EntityId]] = list(event.parent_ids().items())
        targets.extend((EntityKind.EVENT_SPEAKER, speaker_id) for speaker_id in sorted(event.speaker_ids, key=str))
        outcomes = self._run(targets, event, "remove_link_if_present", deadline)
        self._log_summary("Retraction", event, outcomes)
        return outcomes

    def _run(
        self,
        targets: list[tuple[EntityKind, EntityId]],
        event: Event,
        operation: str,
        deadline: Deadline | None,
    ) -> list[LegOutcome]:
        outcomes: list[LegOutcome] = []
        for kind, target_id in targets:
            if deadline is not None and deadline.expired():
                outcomes.append(
                    LegOutcome(
                        target_kind=kind,
                        target_id=target_id,
                        status=LegStatus.CANCELLED,
                        error="deadline expired",
                    )
                )
                continue
            outcomes.append(self._leg(kind, target_id, event, operation))
        return outcomes

    def _leg(
        self,
        kind: EntityKind,
        target_id: EntityId,
        event: Event,
        operation: str,
    ) -> LegOutcome:
        store = self._stores.for_kind(kind)
        try:
            write: Callable[[EntityId, str, EntityId], LinkResult] = getattr(store, operation)
            result = write(target_id, BACK_REFERENCE_FIELD, event.id)
        except StorageError as exc:
            logger.warning("%s %s: leg for event %s failed: %s", kind.value, target_id, event.id, exc)
            return LegOutcome(target_kind=kind, target_id=target_id, status=LegStatus.FAILED, error=exc.message)

        if result is LinkResult.NOT_FOUND:
            logger.warning("%s %s referenced by event %s does not exist", kind.value, target_id, event.id)
            return LegOutcome(
                target_kind=kind,
                target_id=target_id,
                status=LegStatus.NOT_FOUND,
                error=f"{kind.value} not found",
            )
        return LegOutcome(target_kind=kind, target_id=target_id, status=LegStatus[result.value])

    def _log_summary(self, label: str, event: Event, outcomes: list[LegOutcome]) -> None:
        cancelled = sum(1 for outcome in outcomes if outcome.status is LegStatus.CANCELLED)
        failed = sum(1 for outcome in outcomes if not outcome.succeeded) - cancelled
        if cancelled:
            logger.warning(
                "%s for event %s cancelled by deadline: %d of %d legs not run", label, event.id, cancelled, len(outcomes)
            )
        if failed:
            logger.warning("%s for event %s incomplete: %d of %d legs failed", label, event.id, failed, len(outcomes))
        elif not cancelled:
            logger.info("%s for event %s complete (%d legs)", label, event.id, len(outcomes))
